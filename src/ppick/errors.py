"""Exceptions raised by ppick outside the interactive loop."""

from __future__ import annotations


class PickError(Exception):
    """Base class for fatal ppick errors reported to the user."""

    exit_code: int = 1


class TerminalUnavailableError(PickError):
    """The controlling terminal could not be opened or configured."""


class NoInputError(PickError):
    """There is nothing from which to pick."""


class CommandExecError(PickError):
    """The command that should receive the selection could not be executed."""

    def __init__(self, command: str) -> None:
        super().__init__(f"execvp failed: {command}")
        self.command = command
