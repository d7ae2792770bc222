"""Interactive picker state and the key-event state machine.

A :class:`PickerSession` owns everything that changes while the picker runs:
the query, the cursor, the cached match flags and the current layout.  It
consumes one :class:`KeyEvent` at a time and either stays in the editing
state (``handle`` returns ``None``) or finishes with an :class:`Outcome`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Sequence

from ppick.config import PickerConfig
from ppick.match_cache import MatchResult, refresh, resolve_selection
from ppick.matcher import compile_pattern
from ppick.viewport import Layout, layout

logger = logging.getLogger(__name__)

KeyKind = Literal[
    "character",
    "erase",
    "up",
    "down",
    "pageUp",
    "pageDown",
    "first",
    "last",
    "confirm",
    "quit",
    "resize",
]


@dataclass(frozen=True)
class KeyEvent:
    """A logical key press; ``char`` is only set for ``"character"`` events."""

    kind: KeyKind
    char: str = ""

    @classmethod
    def character(cls, char: str) -> KeyEvent:
        return cls("character", char)

    @classmethod
    def from_char(cls, char: str) -> KeyEvent:
        """Map a literal character, as found in a favourite string, to an event."""
        if char in ("\r", "\n"):
            return cls("confirm")
        if char in ("\x7f", "\b"):
            return cls("erase")
        return cls.character(char)


@dataclass(frozen=True)
class Outcome:
    """How the session ended: ``"confirmed"`` with a selection, or ``"quit"``."""

    kind: Literal["confirmed", "quit"]
    selection: str | None = None

    @property
    def confirmed(self) -> bool:
        return self.kind == "confirmed"


QUIT = Outcome("quit")


def normalize_query_char(char: str) -> str | None:
    """Return the character to append to the query, or ``None`` to ignore it.

    Space stands for the ``*`` wildcard.  Control and other whitespace
    characters are never inserted.
    """
    if char == " ":
        return "*"
    if len(char) != 1 or not char.isprintable() or char.isspace():
        return None
    return char


class PickerSession:
    """Query, cursor and match state for one run of the picker."""

    def __init__(
        self,
        items: Sequence[str],
        config: PickerConfig | None = None,
        *,
        casefold: bool = True,
    ) -> None:
        self._items = tuple(items)
        self._config = config or PickerConfig()
        self._casefold = casefold
        self._viewport_height = max(1, self._config.viewport_height)
        self._query = ""
        self._cursor = 0
        self._quit_pending = False
        self._outcome: Outcome | None = None
        self._matches = self._refilter()
        self._layout = layout(self._matches.match_count, 0, self._viewport_height)

    # -- read-only state ----------------------------------------------------

    @property
    def items(self) -> tuple[str, ...]:
        return self._items

    @property
    def config(self) -> PickerConfig:
        return self._config

    @property
    def query(self) -> str:
        return self._query

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def top(self) -> int:
        return self._layout.top

    @property
    def layout(self) -> Layout:
        return self._layout

    @property
    def matches(self) -> MatchResult:
        return self._matches

    @property
    def match_count(self) -> int:
        return self._matches.match_count

    @property
    def viewport_height(self) -> int:
        return self._viewport_height

    @property
    def outcome(self) -> Outcome | None:
        return self._outcome

    @property
    def selection(self) -> str | None:
        """The highlighted item, or ``None`` when nothing matches."""
        return resolve_selection(self._items, self._matches.flags, self._cursor)

    # -- mutation -----------------------------------------------------------

    def set_viewport_height(self, height: int) -> None:
        self._viewport_height = max(1, height)
        self._relayout()

    def handle(self, event: KeyEvent) -> Outcome | None:
        """Apply *event*; return the outcome once the session has finished."""
        if self._outcome is not None:
            return self._outcome

        if self._config.quit_on_double_q:
            if event.kind == "character" and event.char == self._config.quit_key:
                if self._quit_pending:
                    logger.debug("Double %r typed, quitting", event.char)
                    return self._finish(QUIT)
                self._quit_pending = True
            else:
                self._quit_pending = False

        if (
            event.kind == "character"
            and event.char == self._config.favourite_key
        ):
            return self._replay_favourite()

        return self._apply(event)

    # -- private ------------------------------------------------------------

    def _replay_favourite(self) -> Outcome | None:
        favourite = self._config.favourite
        if not favourite:
            return None
        logger.debug("Replaying favourite %r", favourite)
        for char in favourite:
            outcome = self._apply(KeyEvent.from_char(char))
            if outcome is not None:
                return outcome
        return None

    def _apply(self, event: KeyEvent) -> Outcome | None:
        kind = event.kind
        half_page = self._viewport_height // 2

        if kind == "quit":
            return self._finish(QUIT)
        if kind == "confirm":
            selection = self.selection
            if selection is None:
                return self._finish(QUIT)
            return self._finish(Outcome("confirmed", selection))

        if kind == "character":
            char = normalize_query_char(event.char)
            if char is not None:
                self._set_query(self._query + char)
            return None
        if kind == "erase":
            if self._query:
                self._set_query(self._query[:-1])
            return None

        if kind == "down":
            self._cursor += 1
        elif kind == "up":
            self._cursor -= 1
        elif kind == "pageDown":
            self._cursor += half_page
        elif kind == "pageUp":
            self._cursor -= half_page
        elif kind == "first":
            self._cursor = 0
        elif kind == "last":
            # One past the end; the layout clamp lands on the last match.
            self._cursor = self._matches.match_count
        # "resize" lands here too: only the layout changes.
        self._relayout()
        return None

    def _set_query(self, query: str) -> None:
        self._query = query
        self._cursor = 0
        self._matches = self._refilter()
        self._relayout()

    def _refilter(self) -> MatchResult:
        predicate = compile_pattern(
            self._query,
            self._config.prefix,
            self._config.suffix,
            casefold=self._casefold,
        )
        result = refresh(self._items, predicate)
        logger.debug(
            "Pattern %r matched %d of %d items",
            predicate.pattern,
            result.match_count,
            len(self._items),
        )
        return result

    def _relayout(self) -> None:
        self._layout = layout(
            self._matches.match_count, self._cursor, self._viewport_height
        )
        self._cursor = self._layout.cursor

    def _finish(self, outcome: Outcome) -> Outcome:
        self._outcome = outcome
        return outcome
