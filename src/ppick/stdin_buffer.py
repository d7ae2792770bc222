"""StdinBuffer splits raw terminal input into complete key sequences.

Terminal reads can return several key presses at once, or only part of an
escape sequence.  The buffer keeps an incomplete escape sequence until
more data arrives; the caller flushes it after a short idle delay so that
a lone Escape key is still delivered.
"""

from __future__ import annotations

import re

ESC = "\x1b"

# Complete sequences anchored at the start of the buffer.
_SEQUENCE_RE = re.compile(
    r"""
    \x1b\[ [\x30-\x3f]* [\x20-\x2f]* [\x40-\x7e]   # CSI: params, intermediates, final
  | \x1b\] .*? (?:\x07|\x1b\\)                     # OSC: terminated by BEL or ST
  | \x1bO .                                        # SS3: one final character
  | \x1b [^\[\]O]                                  # meta: ESC + one key
    """,
    re.VERBOSE | re.DOTALL,
)


def _sequence_length(buffer: str) -> int | None:
    """Length of the first sequence in *buffer*, ``None`` if it is still partial."""
    if not buffer.startswith(ESC):
        return 1
    m = _SEQUENCE_RE.match(buffer)
    return m.end() if m else None


def _extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences and an incomplete remainder."""
    sequences: list[str] = []
    while buffer:
        length = _sequence_length(buffer)
        if length is None:
            break
        sequences.append(buffer[:length])
        buffer = buffer[length:]
    return sequences, buffer


class StdinBuffer:
    """Buffers terminal input and returns complete sequences."""

    def __init__(self) -> None:
        self._buffer: str = ""

    @property
    def pending(self) -> bool:
        """``True`` while an incomplete escape sequence is buffered."""
        return bool(self._buffer)

    def process(self, data: str) -> list[str]:
        """Feed *data* and return every sequence that is now complete."""
        sequences, self._buffer = _extract_complete_sequences(self._buffer + data)
        return sequences

    def flush(self) -> list[str]:
        """Hand over a partial sequence as-is, e.g. a lone Escape."""
        pending, self._buffer = self._buffer, ""
        return [pending] if pending else []

    def clear(self) -> None:
        self._buffer = ""
