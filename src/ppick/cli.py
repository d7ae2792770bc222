"""CLI entry point for ppick. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from ppick.action import apply_selection
from ppick.app import pick
from ppick.config import PickerConfig
from ppick.errors import NoInputError, PickError
from ppick.keybindings import PickerKeybindingsManager, parse_binding_overrides
from ppick.sources import from_args, read_lines, read_words, stdin_is_terminal
from ppick.terminal import ProcessTerminal

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    # Everything after the first argument belongs to the command.
    "allow_interspersed_args": False,
}


def _configure_logging(log_file: str | None, log_level: str) -> None:
    kwargs: dict[str, object] = {
        "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    }
    if log_file:
        kwargs["filename"] = log_file
        kwargs["level"] = getattr(logging, log_level.upper())
    else:
        # The tty belongs to the picker; only warnings reach stderr.
        kwargs["level"] = logging.WARNING
    logging.basicConfig(**kwargs)  # type: ignore[arg-type]


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("-l", "from_command_line", is_flag=True, help="Read things from the command line.")
@click.option("-w", "words", is_flag=True, help="Read things from standard input, whitespace separated.")
@click.option("-p", "prefix", default="*", show_default=True, help="Prepend TEXT to the match pattern.")
@click.option("-s", "suffix", default="*", show_default=True, help="Append TEXT to the match pattern.")
@click.option("-P", "no_prefix", is_flag=True, help='Equivalent to -p "".')
@click.option("-S", "no_suffix", is_flag=True, help='Equivalent to -s "".')
@click.option("-f", "favourite", default=None, help="Favourite text, added to the search when you type ';'.")
@click.option("-Q", "no_double_q", is_flag=True, help="Disable exit (and fail) on two consecutive q characters.")
@click.option(
    "--bind",
    "bindings",
    multiple=True,
    metavar="ACTION=KEYS",
    help="Rebind an action, e.g. --bind moveDown=ctrl+j,down.  Repeatable.",
)
@click.option("--log-file", default=None, type=click.Path(dir_okay=False), help="Write diagnostics to this file.")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Level for --log-file.",
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def main(
    from_command_line,
    words,
    prefix,
    suffix,
    no_prefix,
    no_suffix,
    favourite,
    no_double_q,
    bindings,
    log_file,
    log_level,
    args,
):
    """Pick one of THINGS interactively with a glob filter.

    By default things are read from standard input, one per line.  Any ARGS
    then form a command which is run with the picked thing appended as its
    last argument; without ARGS the picked thing is printed.
    """
    _configure_logging(log_file, log_level)

    if from_command_line and words:
        raise click.UsageError("-l and -w cannot be combined")

    config = PickerConfig(
        prefix="" if no_prefix else prefix,
        suffix="" if no_suffix else suffix,
        favourite=favourite,
        quit_on_double_q=not no_double_q,
    )

    try:
        keybindings = PickerKeybindingsManager(parse_binding_overrides(bindings))
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--bind") from exc

    try:
        items, command = _collect_items(from_command_line, words, args)
        logger.info("Picking from %d items", len(items))

        with ProcessTerminal() as terminal:
            outcome = pick(terminal, items, config, keybindings)

        if not outcome.confirmed:
            sys.exit(1)
        apply_selection(outcome.selection, command)
    except PickError as exc:
        click.echo(str(exc), err=True)
        sys.exit(exc.exit_code)


def _collect_items(from_command_line, words, args):
    """Return ``(items, command)``; *command* is ``None`` when printing."""
    if from_command_line:
        return from_args(args), None

    if stdin_is_terminal():
        click.echo(click.get_current_context().get_usage(), err=True)
        raise NoInputError("nothing from which to pick")

    stream = click.get_text_stream("stdin", errors="replace")
    items = read_words(stream) if words else read_lines(stream)
    return items, list(args) or None


if __name__ == "__main__":
    main()
