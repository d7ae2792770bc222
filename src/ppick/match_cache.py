"""Per-query match flags and selection lookup.

The cache keeps one boolean per item rather than a filtered copy of the
list.  Every query change rescans all items in order and replaces the
previous result; there is no incremental update.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Sequence


@dataclass(frozen=True)
class MatchResult:
    flags: tuple[bool, ...]
    match_count: int

    def indices(self) -> Iterator[int]:
        """Yield the item indices that match, in original order."""
        for index, flag in enumerate(self.flags):
            if flag:
                yield index


def refresh(items: Sequence[str], predicate: Callable[[str], bool]) -> MatchResult:
    """Test every item against *predicate* and count the matches."""
    flags = tuple(bool(predicate(item)) for item in items)
    return MatchResult(flags=flags, match_count=sum(flags))


def resolve_selection(
    items: Sequence[str], flags: Sequence[bool], cursor: int
) -> str | None:
    """Return the item whose match-rank is ``cursor + 1``, or ``None``."""
    rank = 0
    for item, flag in zip(items, flags):
        if not flag:
            continue
        if rank == cursor:
            return item
        rank += 1
    return None
