"""Picker configuration."""

from __future__ import annotations

from dataclasses import dataclass, replace

DEFAULT_PROMPT = "filter: "
DEFAULT_PREFIX = "*"
DEFAULT_SUFFIX = "*"
FAVOURITE_KEY = ";"
QUIT_KEY = "q"


@dataclass(frozen=True)
class PickerConfig:
    """Settings fixed for the lifetime of one picker session.

    ``viewport_height`` is the number of rows available for matches, i.e.
    the terminal height minus the query line.  The CLI fills it in from the
    terminal; tests pass it directly.
    """

    prefix: str = DEFAULT_PREFIX
    suffix: str = DEFAULT_SUFFIX
    favourite: str | None = None
    quit_on_double_q: bool = True
    viewport_height: int = 23
    prompt: str = DEFAULT_PROMPT
    favourite_key: str = FAVOURITE_KEY
    quit_key: str = QUIT_KEY

    def with_viewport_height(self, height: int) -> PickerConfig:
        """Return a copy using *height* rows (at least one) for matches."""
        return replace(self, viewport_height=max(1, height))
