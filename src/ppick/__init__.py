"""ppick: pick one item from a list with an incremental glob filter."""

from ppick.app import Picker, pick
from ppick.config import PickerConfig
from ppick.errors import (
    CommandExecError,
    NoInputError,
    PickError,
    TerminalUnavailableError,
)
from ppick.keybindings import (
    DEFAULT_PICKER_KEYBINDINGS,
    PickerAction,
    PickerKeybindingsManager,
    parse_binding_overrides,
)
from ppick.keys import Key, KeyId, parse_key
from ppick.match_cache import MatchResult, refresh, resolve_selection
from ppick.matcher import GlobPredicate, compile_pattern, matches
from ppick.render import Frame, Row, build_frame, paint
from ppick.session import KeyEvent, Outcome, PickerSession
from ppick.terminal import ProcessTerminal, SignalEvent, Terminal
from ppick.viewport import Layout, layout

__all__ = [
    # Loop
    "Picker",
    "pick",
    # Config
    "PickerConfig",
    # Errors
    "CommandExecError",
    "NoInputError",
    "PickError",
    "TerminalUnavailableError",
    # Keybindings
    "DEFAULT_PICKER_KEYBINDINGS",
    "PickerAction",
    "PickerKeybindingsManager",
    "parse_binding_overrides",
    # Keys
    "Key",
    "KeyId",
    "parse_key",
    # Matching
    "GlobPredicate",
    "MatchResult",
    "compile_pattern",
    "matches",
    "refresh",
    "resolve_selection",
    # Rendering
    "Frame",
    "Row",
    "build_frame",
    "paint",
    # Session
    "KeyEvent",
    "Outcome",
    "PickerSession",
    # Terminal
    "ProcessTerminal",
    "SignalEvent",
    "Terminal",
    # Viewport
    "Layout",
    "layout",
]
