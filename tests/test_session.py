"""Tests for ppick.session -- the key-event state machine."""

from __future__ import annotations

import pytest

from ppick.config import PickerConfig
from ppick.session import KeyEvent, Outcome, PickerSession, normalize_query_char

FRUIT = ["apple", "banana", "grape"]


def _session(
    items: list[str] | None = None, viewport_height: int = 10, **config: object
) -> PickerSession:
    cfg = PickerConfig(viewport_height=viewport_height, **config)  # type: ignore[arg-type]
    return PickerSession(FRUIT if items is None else items, cfg)


def _type(session: PickerSession, text: str) -> Outcome | None:
    outcome = None
    for char in text:
        outcome = session.handle(KeyEvent.character(char))
    return outcome


def _press(session: PickerSession, kind: str, times: int = 1) -> Outcome | None:
    outcome = None
    for _ in range(times):
        outcome = session.handle(KeyEvent(kind))  # type: ignore[arg-type]
    return outcome


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_empty_query_shows_everything(self) -> None:
        session = _session()
        assert session.query == ""
        assert session.match_count == 3
        assert session.selection == "apple"

    def test_glob_query_filters_case_insensitively(self) -> None:
        session = _session(["Apple", "banana", "grape"])
        _type(session, "a*e")
        assert session.match_count == 2
        assert list(session.matches.indices()) == [0, 2]
        assert session.selection == "Apple"

    def test_uppercase_query_matches_nothing_and_confirm_quits(self) -> None:
        session = _session()
        _type(session, "A*E")
        assert session.match_count == 0
        assert session.selection is None
        outcome = _press(session, "confirm")
        assert outcome == Outcome("quit")

    def test_favourite_is_replayed(self) -> None:
        session = _session(["foobar", "baz"], favourite="foo")
        assert _type(session, ";") is None
        assert session.query == "foo"
        assert session.match_count == 1
        assert session.selection == "foobar"

    def test_erase_on_empty_query_is_noop(self) -> None:
        session = _session()
        _press(session, "down")
        matches_before = session.matches
        _press(session, "erase")
        assert session.query == ""
        assert session.cursor == 1
        assert session.matches is matches_before


# ---------------------------------------------------------------------------
# Query editing
# ---------------------------------------------------------------------------


class TestQueryEditing:
    def test_space_becomes_wildcard(self) -> None:
        session = _session(["red apple", "green pear"])
        _type(session, "red a")
        assert session.query == "red*a"
        assert session.selection == "red apple"

    def test_erase_drops_last_character(self) -> None:
        session = _session()
        _type(session, "ban")
        _press(session, "erase")
        assert session.query == "ba"

    def test_query_change_resets_cursor_and_refreshes(self) -> None:
        session = _session()
        _press(session, "down", 2)
        assert session.cursor == 2
        matches_before = session.matches
        _type(session, "a")
        assert session.cursor == 0
        assert session.matches is not matches_before

    def test_erase_resets_cursor(self) -> None:
        session = _session()
        _type(session, "a")
        _press(session, "down")
        _press(session, "erase")
        assert session.cursor == 0
        assert session.match_count == 3

    @pytest.mark.parametrize("char", ["\t", "\x01", "\x7f", "", "ab"])
    def test_non_printable_input_is_ignored(self, char: str) -> None:
        session = _session()
        session.handle(KeyEvent.character(char))
        assert session.query == ""

    def test_punctuation_and_digits_are_appended(self) -> None:
        session = _session(["v1.2-rc"])
        _type(session, "1.2-")
        assert session.query == "1.2-"
        assert session.match_count == 1

    def test_non_ascii_is_appended(self) -> None:
        session = _session(["café", "cafe"])
        _type(session, "é")
        assert session.selection == "café"


class TestNormalizeQueryChar:
    def test_space(self) -> None:
        assert normalize_query_char(" ") == "*"

    def test_plain(self) -> None:
        assert normalize_query_char("x") == "x"

    def test_newline(self) -> None:
        assert normalize_query_char("\n") is None


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


class TestNavigation:
    def test_down_and_up(self) -> None:
        session = _session()
        _press(session, "down")
        assert session.selection == "banana"
        _press(session, "up")
        assert session.selection == "apple"

    def test_up_at_top_clamps(self) -> None:
        session = _session()
        _press(session, "up", 3)
        assert session.cursor == 0

    def test_down_at_bottom_clamps(self) -> None:
        session = _session()
        _press(session, "down", 10)
        assert session.cursor == 2
        _press(session, "up")
        assert session.selection == "banana"

    def test_page_moves_half_viewport(self) -> None:
        items = [f"item{i:03d}" for i in range(100)]
        session = _session(items, viewport_height=10)
        _press(session, "pageDown")
        assert session.cursor == 5
        _press(session, "pageDown")
        assert session.cursor == 10
        _press(session, "pageUp")
        assert session.cursor == 5

    def test_jump_last_and_first(self) -> None:
        items = [f"item{i:03d}" for i in range(100)]
        session = _session(items, viewport_height=10)
        _press(session, "last")
        assert session.cursor == 99
        assert session.selection == "item099"
        assert session.top == 91
        _press(session, "first")
        assert session.cursor == 0
        assert session.top == 0

    def test_navigation_does_not_refresh(self) -> None:
        session = _session()
        matches_before = session.matches
        for kind in ("down", "up", "pageDown", "pageUp", "first", "last"):
            _press(session, kind)
        assert session.matches is matches_before

    def test_navigation_with_no_matches(self) -> None:
        session = _session()
        _type(session, "zzz")
        _press(session, "down")
        _press(session, "last")
        assert session.cursor == 0
        assert session.selection is None

    def test_top_follows_cursor(self) -> None:
        items = [str(i) for i in range(100)]
        session = _session(items, viewport_height=10)
        _press(session, "down", 50)
        assert session.top == 45

    def test_viewport_height_change_relayouts(self) -> None:
        items = [str(i) for i in range(100)]
        session = _session(items, viewport_height=10)
        _press(session, "down", 50)
        session.set_viewport_height(20)
        assert session.viewport_height == 20
        assert session.top == 40
        assert session.cursor == 50


# ---------------------------------------------------------------------------
# Terminal transitions
# ---------------------------------------------------------------------------


class TestConfirmAndQuit:
    def test_confirm_returns_highlighted_item(self) -> None:
        session = _session()
        _press(session, "down")
        outcome = _press(session, "confirm")
        assert outcome == Outcome("confirmed", "banana")
        assert outcome.confirmed

    def test_quit_event(self) -> None:
        session = _session()
        outcome = _press(session, "quit")
        assert outcome == Outcome("quit")
        assert not outcome.confirmed

    def test_finished_session_ignores_further_events(self) -> None:
        session = _session()
        _press(session, "quit")
        outcome = _type(session, "a")
        assert outcome == Outcome("quit")
        assert session.query == ""


class TestDoubleQuit:
    def test_two_q_quit(self) -> None:
        session = _session(["quux"])
        assert _type(session, "q") is None
        assert session.query == "q"
        assert _type(session, "q") == Outcome("quit")

    def test_intervening_key_resets(self) -> None:
        session = _session(["quux"])
        assert _type(session, "quq") is None
        assert session.query == "quq"

    def test_intervening_navigation_resets(self) -> None:
        session = _session(["quux"])
        _type(session, "q")
        _press(session, "down")
        assert _type(session, "q") is None
        assert session.query == "qq"

    def test_intervening_resize_resets(self) -> None:
        session = _session(["quux"])
        _type(session, "q")
        session.set_viewport_height(3)
        _press(session, "resize")
        assert _type(session, "q") is None
        assert session.query == "qq"
        assert session.viewport_height == 3

    def test_disabled(self) -> None:
        session = _session(["aqqa"], quit_on_double_q=False)
        assert _type(session, "qq") is None
        assert session.query == "qq"
        assert session.selection == "aqqa"


class TestFavourite:
    def test_no_favourite_is_noop(self) -> None:
        session = _session()
        matches_before = session.matches
        assert _type(session, ";") is None
        assert session.query == ""
        assert session.matches is matches_before

    def test_appends_to_existing_query(self) -> None:
        session = _session(["foobar", "xfoo", "baz"], favourite="foo")
        _type(session, "x;")
        assert session.query == "xfoo"
        assert session.selection == "xfoo"

    def test_replay_resets_cursor(self) -> None:
        session = _session(["foobar", "foobaz"], favourite="ba")
        _press(session, "down")
        _type(session, ";")
        assert session.cursor == 0

    def test_trigger_inside_favourite_is_literal(self) -> None:
        session = _session(["a;b"], favourite="a;b")
        _type(session, ";")
        assert session.query == "a;b"
        assert session.selection == "a;b"

    def test_newline_in_favourite_confirms(self) -> None:
        session = _session(["foobar", "baz"], favourite="foo\n")
        assert _type(session, ";") == Outcome("confirmed", "foobar")

    def test_favourite_q_does_not_count_toward_double_quit(self) -> None:
        session = _session(["qq"], favourite="qq")
        assert _type(session, ";") is None
        assert session.query == "qq"
