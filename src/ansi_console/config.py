"""Session configuration with environment overrides."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional

from ansi_console.cli.core.palette import Palette
from ansi_console.errors import ConfigError

ENV_PREFIX = "ANSI_CONSOLE_"

# Fields that may be overridden from the environment, with their parsers
_ENV_FIELDS: dict[str, type] = {
    "min_height": int,
    "min_width": int,
    "max_lines": int,
    "frame_interval": float,
}


@dataclass(frozen=True)
class SessionConfig:
    """Constants governing layout, scrollback, and reserved commands."""
    min_height: int = 10
    min_width: int = 40
    input_height: int = 3
    max_lines: int = 1000
    frame_interval: float = 0.02  # Seconds between loop iterations

    exit_command: str = "exit"
    clear_command: str = "clear"
    help_command: str = "help"
    prompt_prefix: str = "> "

    palette: Palette = field(default_factory=Palette)

    def validate(self) -> SessionConfig:
        """Check invariants; returns self so calls can be chained."""
        for name in ("min_height", "min_width", "input_height", "max_lines"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if self.input_height < 3:
            # One interior row plus top and bottom border
            raise ConfigError(f"input_height must be at least 3, got {self.input_height}")
        if self.min_height <= self.input_height:
            raise ConfigError(
                f"min_height ({self.min_height}) must exceed input_height ({self.input_height})"
            )
        if not math.isfinite(self.frame_interval) or self.frame_interval < 0:
            raise ConfigError(
                f"frame_interval must be a finite, non-negative number, got {self.frame_interval}"
            )
        reserved = [self.exit_command, self.clear_command, self.help_command]
        if any(not token for token in reserved) or len(set(reserved)) != len(reserved):
            raise ConfigError(f"Reserved commands must be distinct and non-empty: {reserved}")
        return self

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> SessionConfig:
        """
        Build a config from ``ANSI_CONSOLE_*`` variables.

        Keyword overrides (e.g. from CLI options) win over the environment;
        ``None`` overrides are ignored so unset options fall through.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for name, parse in _ENV_FIELDS.items():
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is None or raw.strip() == "":
                continue
            try:
                values[name] = parse(raw)
            except ValueError as e:
                raise ConfigError(f"{ENV_PREFIX}{name.upper()}={raw!r} is not a valid {parse.__name__}") from e

        known = {f.name for f in fields(cls)}
        for name, value in overrides.items():
            if name not in known:
                raise ConfigError(f"Unknown configuration field: {name}")
            if value is not None:
                values[name] = value

        return replace(cls(), **values).validate()

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging."""
        return {
            "min_height": self.min_height,
            "min_width": self.min_width,
            "input_height": self.input_height,
            "max_lines": self.max_lines,
            "frame_interval": self.frame_interval,
            "exit_command": self.exit_command,
            "clear_command": self.clear_command,
            "help_command": self.help_command,
        }
