"""Glob matching with smartcase.

A query is wrapped as ``prefix + query + suffix`` and matched against whole
items with shell wildcard semantics: ``*`` matches any run of characters,
``?`` a single character and ``[...]`` a bracket class.  Matching is
case-insensitive unless the query itself contains an uppercase letter.

The dialect is that of POSIX ``fnmatch`` without flags: ``*`` and ``?``
also match ``/`` and a leading ``.``, a backslash quotes the next
character, ``[!...]`` and ``[^...]`` negate a class, and ``[:alpha:]``
style character classes are understood inside brackets.
"""

from __future__ import annotations

import logging
import re
import string
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_POSIX_CLASSES: dict[str, str] = {
    "alpha": "a-zA-Z",
    "digit": "0-9",
    "alnum": "a-zA-Z0-9",
    "upper": "A-Z",
    "lower": "a-z",
    "xdigit": "0-9A-Fa-f",
    "space": r" \t\n\r\f\v",
    "blank": r" \t",
    "punct": "".join(re.escape(ch) for ch in string.punctuation),
    "cntrl": r"\x00-\x1f\x7f",
    "print": r"\x20-\x7e",
    "graph": r"\x21-\x7e",
}


def is_smartcase_sensitive(query: str) -> bool:
    """Return ``True`` when *query* contains at least one uppercase letter."""
    return any(ch.isupper() for ch in query)


def _bracket_char(pattern: str, i: int) -> tuple[str, int]:
    if pattern[i] == "\\" and i + 1 < len(pattern):
        return pattern[i + 1], i + 2
    return pattern[i], i + 1


def _translate_bracket(pattern: str, start: int) -> tuple[str | None, int]:
    """Translate the bracket expression opened just before *start*.

    Returns ``(regex, end)``, or ``(None, start)`` when the bracket is never
    closed, in which case the ``[`` is an ordinary character.
    """
    i, n = start, len(pattern)
    negate = i < n and pattern[i] in "!^"
    if negate:
        i += 1

    members: list[str] = []
    first = True
    while True:
        if i >= n:
            return None, start
        if pattern[i] == "]" and not first:
            i += 1
            break
        first = False

        if pattern.startswith("[:", i):
            close = pattern.find(":]", i + 2)
            if close != -1:
                name = pattern[i + 2 : close]
                if name not in _POSIX_CLASSES:
                    raise ValueError(f"unknown character class {name!r}")
                members.append(_POSIX_CLASSES[name])
                i = close + 2
                continue

        low, i = _bracket_char(pattern, i)
        if i + 1 < n and pattern[i] == "-" and pattern[i + 1] != "]":
            high, i = _bracket_char(pattern, i + 1)
            # A reversed range matches nothing.
            if low <= high:
                members.append(f"{re.escape(low)}-{re.escape(high)}")
            continue
        members.append(re.escape(low))

    if not members:
        return ("." if negate else "(?!)"), i
    return f"[{'^' if negate else ''}{''.join(members)}]", i


def translate_glob(pattern: str) -> str:
    """Translate a glob *pattern* into a regular expression for ``re.match``.

    Raises :class:`ValueError` for a trailing backslash or an unknown
    character class name.
    """
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        i += 1
        if ch == "*":
            if not out or out[-1] != ".*":
                out.append(".*")
        elif ch == "?":
            out.append(".")
        elif ch == "\\":
            if i == n:
                raise ValueError("pattern ends with a backslash")
            out.append(re.escape(pattern[i]))
            i += 1
        elif ch == "[":
            bracket, end = _translate_bracket(pattern, i)
            if bracket is None:
                out.append(re.escape(ch))
            else:
                out.append(bracket)
                i = end
        else:
            out.append(re.escape(ch))
    return f"(?s:{''.join(out)})\\Z"


@dataclass(frozen=True)
class GlobPredicate:
    """A compiled glob pattern that can be called with an item."""

    pattern: str
    case_sensitive: bool
    _regex: re.Pattern[str] | None = field(default=None, repr=False, compare=False)

    def __call__(self, item: str) -> bool:
        if self._regex is None:
            return False
        return self._regex.match(item) is not None

    @property
    def malformed(self) -> bool:
        return self._regex is None


def compile_pattern(
    query: str,
    prefix: str = "*",
    suffix: str = "*",
    *,
    casefold: bool = True,
) -> GlobPredicate:
    """Compile *query* into a predicate.

    Smartcase is decided on the raw query, before *prefix* and *suffix* are
    added.  Pass ``casefold=False`` when case-insensitive matching is not
    wanted at all; every query is then matched case-sensitively.

    A pattern that cannot be compiled yields a predicate matching nothing.
    """
    pattern = f"{prefix}{query}{suffix}"
    case_sensitive = not casefold or is_smartcase_sensitive(query)
    flags = 0 if case_sensitive else re.IGNORECASE

    try:
        regex = re.compile(translate_glob(pattern), flags)
    except (ValueError, re.error) as exc:
        logger.debug("Malformed pattern %r: %s", pattern, exc)
        regex = None

    return GlobPredicate(pattern=pattern, case_sensitive=case_sensitive, _regex=regex)


def matches(predicate: GlobPredicate, item: str) -> bool:
    """Return whether *item* matches *predicate*."""
    return predicate(item)
