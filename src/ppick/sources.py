"""Item sources: command-line words, stdin lines or stdin words."""

from __future__ import annotations

import re
import sys
from typing import Iterable, TextIO

# Space, tab, backspace, vertical tab, CR and LF; form feed is not a separator.
_WORD_SEPARATORS_RE = re.compile(r"[ \t\b\v\r\n]+")


def read_lines(stream: TextIO) -> list[str]:
    """One item per line, with the trailing newline removed."""
    return [line[:-1] if line.endswith("\n") else line for line in stream]


def read_words(stream: TextIO) -> list[str]:
    """One item per whitespace-separated word, across all lines."""
    items: list[str] = []
    for line in stream:
        items.extend(word for word in _WORD_SEPARATORS_RE.split(line) if word)
    return items


def from_args(args: Iterable[str]) -> list[str]:
    return list(args)


def stdin_is_terminal() -> bool:
    """``True`` when nothing is piped in, i.e. stdin is the user's terminal."""
    return sys.stdin.isatty()
