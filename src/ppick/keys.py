"""Keyboard input parsing for the picker.

Turns one complete chunk of raw terminal input (see
:mod:`ppick.stdin_buffer`) into a key identifier such as ``"a"``,
``"ctrl+c"``, ``"pageDown"`` or ``"alt+x"``.  Only legacy (VT100/xterm)
sequences are understood; the picker never enables extended keyboard
protocols.
"""

from __future__ import annotations

import re

KeyId = str

# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"


# ---------------------------------------------------------------------------
# Legacy escape sequences
# ---------------------------------------------------------------------------

# Final byte of ``ESC [ X``, ``ESC [ 1 ; m X`` and ``ESC O X``.
_CURSOR_FINALS: dict[str, str] = {
    "A": Key.up,
    "B": Key.down,
    "C": Key.right,
    "D": Key.left,
    "H": Key.home,
    "F": Key.end,
}

# Numeric parameter of ``ESC [ n ~`` (rxvt and vt220 editing keys).
_TILDE_CODES: dict[str, str] = {
    "1": Key.home,
    "2": Key.insert,
    "3": Key.delete,
    "4": Key.end,
    "5": Key.page_up,
    "6": Key.page_down,
    "7": Key.home,
    "8": Key.end,
}

# xterm modifier parameter: 1 + (shift=1 | alt=2 | ctrl=4).
_MODIFIER_BITS = ((4, "ctrl"), (1, "shift"), (2, "alt"))

_CSI_RE = re.compile(r"\x1b\[(?:(\d+)(?:;(\d+))?)?([A-Z~])\Z")
_SS3_RE = re.compile(r"\x1bO([A-Z])\Z")


def _with_modifiers(name: str, modifier: str | None) -> str:
    if not modifier or int(modifier) <= 1:
        return name
    bits = int(modifier) - 1
    prefix = "".join(f"{label}+" for bit, label in _MODIFIER_BITS if bits & bit)
    return prefix + name


def _parse_escape_sequence(data: str) -> KeyId | None:
    if data == "\x1b[Z":
        return "shift+tab"

    m = _SS3_RE.match(data)
    if m:
        return _CURSOR_FINALS.get(m.group(1))

    m = _CSI_RE.match(data)
    if not m:
        return None
    param, modifier, final = m.groups()
    if final == "~":
        name = _TILDE_CODES.get(param or "")
    elif param in (None, "1"):
        name = _CURSOR_FINALS.get(final)
    else:
        name = None
    return _with_modifiers(name, modifier) if name else None


def _ctrl_letter(ch: str) -> str | None:
    """``"c"`` for ``"\\x03"``; ``None`` outside 0x01 - 0x1a."""
    code = ord(ch)
    if 1 <= code <= 26:
        return chr(code + ord("a") - 1)
    return None


_SINGLE_BYTE_KEYS: dict[str, str] = {
    "\x1b": Key.escape,
    "\r": Key.enter,
    "\n": Key.enter,
    "\t": Key.tab,
    " ": Key.space,
    "\x7f": Key.backspace,
    "\x08": Key.backspace,
    "\x00": "ctrl+space",
    "\x1c": "ctrl+\\",
}


def parse_key(data: str) -> KeyId | None:
    """Parse raw terminal input and return the key identifier, or ``None``.

    Plain printable characters are returned unchanged (``"A"`` stays
    ``"A"``) so the caller can insert them verbatim.
    """
    if not data:
        return None

    if len(data) == 1:
        if data in _SINGLE_BYTE_KEYS:
            return _SINGLE_BYTE_KEYS[data]
        letter = _ctrl_letter(data)
        if letter:
            return Key.ctrl(letter)
        return data if data.isprintable() else None

    if len(data) == 2 and data[0] == "\x1b" and data[1] not in "[O":
        # ESC prefix: alt + key
        inner = parse_key(data[1])
        if inner is None:
            return None
        if inner.startswith("ctrl+") and inner != "ctrl+space":
            return "ctrl+" + Key.alt(inner[len("ctrl+"):])
        return Key.alt(inner.lower() if len(inner) == 1 else inner)

    return _parse_escape_sequence(data)
