"""Cursor clamping and scroll placement for the match list.

The cursor is kept centred while there are enough matches above and below
it.  Scrolling stops once the last match is on screen (one row is left
blank below it) and never goes above the first match.  Jumps by page or
to either end therefore recentre rather than scroll minimally.
"""

from __future__ import annotations

from dataclasses import dataclass


def clamp(value: int, low: int, high: int) -> int:
    """Clamp *value* into ``[low, high]``; *low* wins if the range is empty."""
    return max(low, min(value, high))


@dataclass(frozen=True)
class Layout:
    cursor: int
    top: int
    height: int

    def row_of(self, position: int) -> int | None:
        """Screen row for the match at zero-based *position*, or ``None``."""
        if self.top <= position < self.top + self.height:
            return position - self.top
        return None

    def visible_positions(self, match_count: int) -> range:
        """Zero-based match positions drawn this frame."""
        return range(self.top, min(self.top + self.height, match_count))


def layout(match_count: int, cursor: int, viewport_height: int) -> Layout:
    """Clamp *cursor* and compute the scroll offset for *viewport_height* rows."""
    height = max(1, viewport_height)
    clamped = clamp(cursor, 0, max(match_count - 1, 0))
    top = clamp(clamped - height // 2, 0, max(match_count - height + 1, 0))
    return Layout(cursor=clamped, top=top, height=height)
