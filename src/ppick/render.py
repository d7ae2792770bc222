"""Frame building and ANSI painting.

:func:`build_frame` turns the session state into plain render instructions
(one entry per viewport row plus the query line); :func:`paint` encodes a
frame as a single ANSI string so each frame reaches the terminal in one
write.
"""

from __future__ import annotations

from dataclasses import dataclass

from ppick.session import PickerSession
from ppick.utils import sanitize, truncate_to_width, visible_width

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_MOVE_FMT = "\x1b[{};{}H"
_CLEAR_TO_EOL = "\x1b[K"
_REVERSE = "\x1b[7m"
_RESET = "\x1b[0m"


@dataclass(frozen=True)
class Row:
    text: str
    highlighted: bool = False


@dataclass(frozen=True)
class Frame:
    """What to draw: the query line and ``rows`` (``None`` is a blank row)."""

    prompt: str
    query: str
    cursor_column: int
    rows: tuple[Row | None, ...]

    @property
    def highlighted(self) -> Row | None:
        for row in self.rows:
            if row is not None and row.highlighted:
                return row
        return None


def build_frame(session: PickerSession, width: int = 80) -> Frame:
    """Lay out the visible matches of *session* for a *width*-column screen."""
    layout = session.layout
    rows: list[Row | None] = [None] * layout.height

    indices = list(session.matches.indices())

    for position in layout.visible_positions(len(indices)):
        screen_row = layout.row_of(position)
        if screen_row is None:
            continue
        text = truncate_to_width(sanitize(session.items[indices[position]]), width)
        rows[screen_row] = Row(text, highlighted=position == layout.cursor)

    prompt = session.config.prompt
    query = session.query
    cursor_column = min(visible_width(prompt) + visible_width(query), max(width - 1, 0))
    return Frame(prompt=prompt, query=query, cursor_column=cursor_column, rows=tuple(rows))


def paint(frame: Frame, width: int = 80) -> str:
    """Encode *frame* as ANSI output for a *width*-column terminal."""
    out = [_HIDE_CURSOR, _MOVE_FMT.format(1, 1)]
    out.append(truncate_to_width(frame.prompt + sanitize(frame.query), width))
    out.append(_CLEAR_TO_EOL)

    for offset, row in enumerate(frame.rows):
        out.append(_MOVE_FMT.format(offset + 2, 1))
        if row is not None:
            if row.highlighted:
                out.append(_REVERSE + row.text + _RESET)
            else:
                out.append(row.text)
        out.append(_CLEAR_TO_EOL)

    out.append(_MOVE_FMT.format(1, frame.cursor_column + 1))
    out.append(_SHOW_CURSOR)
    return "".join(out)
