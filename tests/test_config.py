"""Tests for configuration, command routing, logging and the CLI."""

import logging
import os

import pytest
from typer.testing import CliRunner

from ansi_console.cli.app import create_app
from ansi_console.commands import CommandRouter, ReservedCommand
from ansi_console.config import SessionConfig
from ansi_console.core.output_buffer import OutputBuffer
from ansi_console.errors import ConfigError
from ansi_console.log import cleanup_old_logs, setup_logging


class TestSessionConfig:
    def test_defaults(self) -> None:
        config = SessionConfig().validate()
        assert (config.min_height, config.min_width) == (10, 40)
        assert config.input_height == 3
        assert config.max_lines == 1000

    def test_from_env(self) -> None:
        config = SessionConfig.from_env({
            "ANSI_CONSOLE_MIN_HEIGHT": "12",
            "ANSI_CONSOLE_MAX_LINES": "50",
            "ANSI_CONSOLE_FRAME_INTERVAL": "0.5",
        })
        assert config.min_height == 12
        assert config.max_lines == 50
        assert config.frame_interval == 0.5
        assert config.min_width == 40

    def test_overrides_win_over_env(self) -> None:
        config = SessionConfig.from_env(
            {"ANSI_CONSOLE_MIN_WIDTH": "60"}, min_width=70, max_lines=None,
        )
        assert config.min_width == 70
        assert config.max_lines == 1000

    def test_blank_env_value_ignored(self) -> None:
        assert SessionConfig.from_env({"ANSI_CONSOLE_MIN_WIDTH": " "}).min_width == 40

    def test_bad_env_value(self) -> None:
        with pytest.raises(ConfigError, match="ANSI_CONSOLE_MIN_HEIGHT"):
            SessionConfig.from_env({"ANSI_CONSOLE_MIN_HEIGHT": "tall"})

    @pytest.mark.parametrize("raw", ["inf", "nan", "-inf"])
    def test_non_finite_frame_interval_from_env(self, raw: str) -> None:
        with pytest.raises(ConfigError, match="frame_interval"):
            SessionConfig.from_env({"ANSI_CONSOLE_FRAME_INTERVAL": raw})

    def test_unknown_override(self) -> None:
        with pytest.raises(ConfigError, match="colour"):
            SessionConfig.from_env({}, colour="red")

    @pytest.mark.parametrize("kwargs", [
        {"max_lines": 0},
        {"min_width": -1},
        {"input_height": 2},
        {"min_height": 3},
        {"frame_interval": -0.1},
        {"frame_interval": float("inf")},
        {"frame_interval": float("nan")},
        {"clear_command": "exit"},
        {"help_command": ""},
    ])
    def test_invalid(self, kwargs) -> None:
        with pytest.raises(ConfigError):
            SessionConfig(**kwargs).validate()

    def test_to_dict(self) -> None:
        assert SessionConfig().to_dict()["exit_command"] == "exit"


class TestCommandRouter:
    def _router(self, handler=None, config=None):
        buffer = OutputBuffer()
        stops = []
        router = CommandRouter(buffer, lambda: stops.append(True), handler, config)
        return router, buffer, stops

    def test_exit(self) -> None:
        router, buffer, stops = self._router()
        assert router.dispatch("exit") is ReservedCommand.EXIT
        assert stops == [True]
        assert len(buffer) == 0

    def test_clear(self) -> None:
        router, buffer, _ = self._router()
        buffer.append("old")
        buffer.scroll_up(1, 0)
        assert router.dispatch("clear") is ReservedCommand.CLEAR
        assert len(buffer) == 0
        assert buffer.scroll_offset == 0

    def test_unknown_without_handler(self) -> None:
        router, buffer, _ = self._router()
        assert router.dispatch("jump") is None
        assert buffer.lines() == ["Unknown: 'jump'"]

    def test_reserved_tokens_are_exact(self) -> None:
        router, buffer, stops = self._router()
        router.dispatch("EXIT")
        router.dispatch(" exit")
        assert stops == []
        assert len(buffer) == 2

    def test_custom_tokens(self) -> None:
        config = SessionConfig(exit_command="quit", clear_command="cls", help_command="?")
        router, buffer, stops = self._router(config=config)
        router.dispatch("?")
        assert buffer.lines() == ["Commands: quit, cls, ?. Scroll: PgUp/PgDn"]
        router.dispatch("exit")
        assert stops == []
        router.dispatch("quit")
        assert stops == [True]

    def test_handler_output_lines(self) -> None:
        def handler(command, output):
            output(f"you said {command}")
            output("done")

        router, buffer, _ = self._router(handler=handler)
        router.dispatch("hi")
        assert buffer.lines() == ["you said hi", "done"]

    def test_handler_exception(self, caplog) -> None:
        def handler(command, output):
            raise ValueError("bad input")

        router, buffer, _ = self._router(handler=handler)
        with caplog.at_level(logging.ERROR, logger="ansi_console.commands"):
            router.dispatch("x")
        assert buffer.lines() == ["Error: bad input"]
        assert "Command handler failed" in caplog.text


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestLogging:
    def test_setup_logging_writes_file(self, tmp_path, restore_root_logger) -> None:
        path = setup_logging(str(tmp_path), level="DEBUG")
        logging.getLogger("ansi_console.test").debug("hello log")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert os.path.dirname(path) == str(tmp_path)
        with open(path, encoding="utf-8") as f:
            content = f.read()
        assert "ansi_console.test - DEBUG - hello log" in content

    def test_cleanup_old_logs(self, tmp_path) -> None:
        for i in range(5):
            p = tmp_path / f"{i}.log"
            p.write_text("x")
            os.utime(p, (i, i))
        cleanup_old_logs(str(tmp_path), max_logs=2)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["3.log", "4.log"]


class TestCli:
    def test_check_reports_missing_terminal(self) -> None:
        result = CliRunner().invoke(create_app(), ["check"])
        assert result.exit_code == 1
        assert "80x24" in result.output
        assert "Layout fits" in result.output
        assert "terminal_unavailable" in result.output

    def test_run_rejects_bad_config(self) -> None:
        result = CliRunner().invoke(create_app(), ["run", "--min-height", "2"])
        assert result.exit_code == 2
        assert "Invalid configuration" in result.output

    def test_run_rejects_unknown_log_level(self) -> None:
        result = CliRunner().invoke(create_app(), ["run", "--log-level", "bogus"])
        assert result.exit_code == 2
        assert result.exception is None or isinstance(result.exception, SystemExit)
