"""Tests for ppick.render -- frames and ANSI painting."""

from __future__ import annotations

from ppick.config import PickerConfig
from ppick.render import Frame, Row, build_frame, paint
from ppick.session import KeyEvent, PickerSession


def _session(items: list[str], viewport_height: int = 4) -> PickerSession:
    return PickerSession(items, PickerConfig(viewport_height=viewport_height))


class TestBuildFrame:
    def test_rows_and_highlight(self) -> None:
        frame = build_frame(_session(["apple", "banana", "grape"]))
        assert frame.rows == (
            Row("apple", highlighted=True),
            Row("banana"),
            Row("grape"),
            None,
        )
        assert frame.highlighted == Row("apple", highlighted=True)

    def test_query_line(self) -> None:
        session = _session(["apple", "banana", "grape"])
        for char in "an":
            session.handle(KeyEvent.character(char))
        frame = build_frame(session)
        assert frame.prompt == "filter: "
        assert frame.query == "an"
        assert frame.cursor_column == len("filter: an")
        assert frame.rows[0] == Row("banana", highlighted=True)
        assert frame.rows[1:] == (None, None, None)

    def test_no_matches_draws_blank_rows(self) -> None:
        session = _session(["apple"])
        session.handle(KeyEvent.character("z"))
        frame = build_frame(session)
        assert frame.rows == (None, None, None, None)
        assert frame.highlighted is None

    def test_scrolled_window(self) -> None:
        items = [f"item{i}" for i in range(20)]
        session = _session(items, viewport_height=4)
        for _ in range(10):
            session.handle(KeyEvent("down"))
        frame = build_frame(session)
        # cursor 10, top 8: rows show items 8..11, cursor on row 2
        assert [row.text if row else None for row in frame.rows] == [
            "item8", "item9", "item10", "item11",
        ]
        assert frame.rows[2] == Row("item10", highlighted=True)

    def test_last_page_leaves_blank_row(self) -> None:
        items = [f"item{i}" for i in range(20)]
        session = _session(items, viewport_height=4)
        session.handle(KeyEvent("last"))
        frame = build_frame(session)
        assert [row.text if row else None for row in frame.rows] == [
            "item17", "item18", "item19", None,
        ]

    def test_scrolled_window_maps_ranks_to_items(self) -> None:
        items = [f"{'a' if i % 2 else 'b'}{i}" for i in range(20)]
        session = _session(items, viewport_height=4)
        session.handle(KeyEvent.character("a"))
        session.handle(KeyEvent("last"))
        frame = build_frame(session)
        # matches are a1, a3, ..., a19; cursor on the last one
        assert [row.text if row else None for row in frame.rows] == [
            "a15", "a17", "a19", None,
        ]
        assert frame.highlighted == Row("a19", highlighted=True)

    def test_long_items_are_truncated(self) -> None:
        frame = build_frame(_session(["x" * 100]), width=10)
        assert frame.rows[0] == Row("x" * 10, highlighted=True)

    def test_control_characters_are_replaced(self) -> None:
        frame = build_frame(_session(["a\tb\x1bc"]))
        assert frame.rows[0] == Row("a b?c", highlighted=True)

    def test_cursor_column_counts_wide_characters(self) -> None:
        session = _session(["日本"])
        session.handle(KeyEvent.character("日"))
        frame = build_frame(session)
        assert frame.cursor_column == len("filter: ") + 2


class TestPaint:
    def test_highlighted_row_is_reversed(self) -> None:
        frame = Frame(
            prompt="> ",
            query="ap",
            cursor_column=4,
            rows=(Row("apple", highlighted=True), Row("grape"), None),
        )
        out = paint(frame)
        assert "> ap" in out
        assert "\x1b[7mapple\x1b[0m" in out
        assert "grape" in out
        assert "\x1b[7mgrape" not in out

    def test_every_row_is_cleared(self) -> None:
        frame = Frame(prompt="> ", query="", cursor_column=2, rows=(None, None, None))
        out = paint(frame)
        # query line plus three rows
        assert out.count("\x1b[K") == 4
        assert "\x1b[4;1H" in out

    def test_cursor_ends_on_query_line(self) -> None:
        frame = Frame(prompt="> ", query="ab", cursor_column=4, rows=(None,))
        out = paint(frame)
        assert out.endswith("\x1b[1;5H\x1b[?25h")
