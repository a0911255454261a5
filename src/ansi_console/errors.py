"""Exception types raised by the console session."""

from __future__ import annotations


class ConsoleError(Exception):
    """Base class for all console errors."""


class ConfigError(ConsoleError):
    """Invalid session configuration."""


class InitError(ConsoleError):
    """
    Session startup failed.

    Raised once, from session construction, after any terminal mode changes
    made so far have been unwound. ``reason`` is a stable identifier callers
    can switch on without matching message text.
    """

    reason = "init_failed"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.reason.replace("_", " "))


class TerminalUnavailableError(InitError):
    """Standard streams are not attached to a usable terminal."""

    reason = "terminal_unavailable"


class ColorSupportMissingError(InitError):
    """The terminal does not report any colour support."""

    reason = "color_support_missing"


class ColorCustomizationError(InitError):
    """The configured palette cannot be expressed on this terminal."""

    reason = "color_customization_unsupported"


class RegionSetupError(InitError):
    """The initial screen regions could not be set up."""

    reason = "region_setup_failed"


__all__ = [
    "ConsoleError",
    "ConfigError",
    "InitError",
    "TerminalUnavailableError",
    "ColorSupportMissingError",
    "ColorCustomizationError",
    "RegionSetupError",
]
