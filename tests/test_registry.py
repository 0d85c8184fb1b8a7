"""Tests for the custom command registry.

Custom commands are named callbacks supplied by the embedding program.
The registry is bounded and refuses duplicate names.
"""

import pytest

from py_sh.registry import CommandRegistry, CustomCommand
from py_sh.shell import Shell
from py_sh.status import ShellError, ShellStatus


def _noop(_shell: Shell, _argv: list[str]) -> ShellStatus:
    """Do nothing, successfully."""
    return ShellStatus.OK


class TestCommandRegistry:
    """Verify registration and lookup."""

    def test_register_and_get(self) -> None:
        """A registered command can be looked up by name."""
        registry = CommandRegistry(capacity=4)
        command = registry.register("greet", _noop)
        assert command == CustomCommand(name="greet", callback=_noop)
        assert registry.get("greet") is command
        assert "greet" in registry

    def test_get_missing_returns_none(self) -> None:
        """Looking up an unknown name returns None."""
        registry = CommandRegistry(capacity=4)
        assert registry.get("missing") is None

    def test_names_in_registration_order(self) -> None:
        """names() reports commands in the order they were added."""
        registry = CommandRegistry(capacity=4)
        for name in ("b", "a", "c"):
            registry.register(name, _noop)
        assert registry.names() == ["b", "a", "c"]

    def test_capacity_exceeded(self) -> None:
        """Registering past capacity fails and keeps earlier entries."""
        registry = CommandRegistry(capacity=2)
        registry.register("one", _noop)
        registry.register("two", _noop)
        with pytest.raises(ShellError) as excinfo:
            registry.register("three", _noop)
        assert excinfo.value.status is ShellStatus.CUSTOM_COMMAND_FULL
        assert registry.names() == ["one", "two"]

    def test_duplicate_rejected(self) -> None:
        """A name can only be registered once."""
        registry = CommandRegistry(capacity=4)
        registry.register("greet", _noop)
        with pytest.raises(ShellError) as excinfo:
            registry.register("greet", _noop)
        assert excinfo.value.status is ShellStatus.INVALID_INPUT
        assert len(registry) == 1

    @pytest.mark.parametrize("name", ["", "two words", " lead", "tab\there", ">", "<", ">>"])
    def test_invalid_names(self, name: str) -> None:
        """Empty names, names with whitespace and operators are refused."""
        registry = CommandRegistry(capacity=4)
        with pytest.raises(ShellError) as excinfo:
            registry.register(name, _noop)
        assert excinfo.value.status is ShellStatus.INVALID_INPUT

    def test_non_callable_rejected(self) -> None:
        """The callback must be callable."""
        registry = CommandRegistry(capacity=4)
        with pytest.raises(ShellError) as excinfo:
            registry.register("greet", "not a function")  # type: ignore[arg-type]
        assert excinfo.value.status is ShellStatus.INVALID_INPUT
