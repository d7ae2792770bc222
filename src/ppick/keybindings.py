"""Picker keybindings: raw key sequences to logical key events."""

from __future__ import annotations

from typing import Iterable, Literal, get_args

from ppick.keys import KeyId, parse_key
from ppick.session import KeyEvent, KeyKind

PickerAction = Literal[
    "moveUp",
    "moveDown",
    "pageUp",
    "pageDown",
    "jumpFirst",
    "jumpLast",
    "eraseLast",
    "confirm",
    "quit",
]

PickerKeybindingsConfig = dict[PickerAction, KeyId | list[KeyId]]

DEFAULT_PICKER_KEYBINDINGS: dict[PickerAction, KeyId | list[KeyId]] = {
    "moveUp": ["up", "ctrl+p"],
    "moveDown": ["down", "ctrl+n"],
    "pageUp": "pageUp",
    "pageDown": "pageDown",
    "jumpFirst": "home",
    "jumpLast": "end",
    "eraseLast": "backspace",
    "confirm": "enter",
    "quit": ["escape", "alt+escape", "ctrl+c", "ctrl+\\"],
}

_ACTION_EVENTS: dict[PickerAction, KeyKind] = {
    "moveUp": "up",
    "moveDown": "down",
    "pageUp": "pageUp",
    "pageDown": "pageDown",
    "jumpFirst": "first",
    "jumpLast": "last",
    "eraseLast": "erase",
    "confirm": "confirm",
    "quit": "quit",
}


def parse_binding_overrides(specs: Iterable[str]) -> PickerKeybindingsConfig:
    """Parse ``ACTION=KEY[,KEY...]`` strings, e.g. ``moveDown=ctrl+j,down``.

    Raises :class:`ValueError` for a malformed entry or an unknown action.
    """
    config: PickerKeybindingsConfig = {}
    actions = get_args(PickerAction)
    for spec in specs:
        action, sep, keys = spec.partition("=")
        action = action.strip()
        key_list = [key.strip() for key in keys.split(",") if key.strip()]
        if not sep or not key_list:
            raise ValueError(f"expected ACTION=KEY, got {spec!r}")
        if action not in actions:
            raise ValueError(
                f"unknown action {action!r} (choose from {', '.join(actions)})"
            )
        config[action] = key_list  # type: ignore[index]
    return config


class PickerKeybindingsManager:
    """Manages keybindings for the picker."""

    def __init__(self, config: PickerKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[PickerAction, list[KeyId]] = {}
        self._key_to_action: dict[KeyId, PickerAction] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: PickerKeybindingsConfig) -> None:
        self._action_to_keys.clear()
        self._key_to_action.clear()

        # Start with defaults
        for action, keys in DEFAULT_PICKER_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        # Override with user config
        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, key_list in self._action_to_keys.items():
            for key in key_list:
                self._key_to_action[key] = action

    def decode(self, data: str) -> KeyEvent | None:
        """Turn one complete input sequence into a key event.

        Bound keys win over text; a space or printable character that is not
        bound becomes a ``character`` event.  Anything else is ignored.
        """
        key_id = parse_key(data)
        if key_id is None:
            return None

        action = self._key_to_action.get(key_id)
        if action is not None:
            return KeyEvent(_ACTION_EVENTS[action])

        if key_id == "space":
            return KeyEvent.character(" ")
        if len(key_id) == 1:
            return KeyEvent.character(key_id)
        return None
