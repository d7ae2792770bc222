"""What happens to a confirmed selection: print it or run a command with it."""

from __future__ import annotations

import logging
import os
from typing import Sequence

import click

from ppick.errors import CommandExecError

logger = logging.getLogger(__name__)


def apply_selection(selection: str, command: Sequence[str] | None = None) -> None:
    """Print *selection*, or exec *command* with it as the final argument.

    On success ``exec`` does not return.
    """
    if not command:
        click.echo(selection)
        return
    exec_with_selection(command, selection)


def exec_with_selection(command: Sequence[str], selection: str) -> None:
    argv = [*command, selection]
    logger.info("Executing %s", argv)
    try:
        os.execvp(argv[0], argv)
    except OSError as exc:
        raise CommandExecError(argv[0]) from exc
