"""Tests for shell configuration."""

import signal

import pytest

from py_sh.config import ShellConfig
from py_sh.shell import Shell


class TestShellConfig:
    """Verify defaults and validation."""

    def test_defaults(self) -> None:
        """Defaults match the classic small-shell limits."""
        config = ShellConfig()
        assert config.prompt == "> "
        assert config.interactive is True
        assert config.history_capacity == 100
        assert config.env_capacity == 100
        assert config.command_capacity == 50
        assert config.job_capacity == 100
        assert config.alias_capacity == 50
        assert config.completion_limit == 100
        assert config.blocked_signals == (signal.SIGINT, signal.SIGTERM)

    @pytest.mark.parametrize(
        "field", ["history_capacity", "env_capacity", "command_capacity", "job_capacity"]
    )
    def test_non_positive_capacity_rejected(self, field: str) -> None:
        """Capacities below 1 are a configuration error."""
        with pytest.raises(ValueError, match=field):
            ShellConfig(**{field: 0})

    def test_is_frozen(self) -> None:
        """Configuration cannot change after construction."""
        config = ShellConfig()
        with pytest.raises(AttributeError):
            config.prompt = "$ "  # type: ignore[misc]

    def test_shell_exposes_prompt_and_mode(self) -> None:
        """The shell reports the configured prompt and interactivity."""
        shell = Shell(ShellConfig(prompt="my_shell> ", interactive=False))
        assert shell.prompt == "my_shell> "
        assert shell.interactive is False
