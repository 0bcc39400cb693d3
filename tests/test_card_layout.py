import pytest

from core import UnparseableTodoItem
from application.columns import build_columns
from infrastructure.todo_line_parser import parse_todo_line, parse_todo_text
from interface.card_layout import (
    BLANK_LINE_PLACEHOLDER,
    card_content_width,
    card_text_lines,
    compute_layout_metrics,
    get_card_height,
    get_visible_card_count,
    split_column_widths,
    table_visible_count,
    wrapped_row_count,
)


class TestCardHeight:
    def test_single_line_card(self):
        assert get_card_height(parse_todo_line("Task", 1), 20) == 3

    def test_tag_rows_add_height(self):
        item = parse_todo_line("(A) Task +p @c due:2024-01-01", 1)

        assert card_text_lines(item) == ["(A) Task", "projects: +p", "contexts: @c", "meta: due:2024-01-01"]
        assert get_card_height(item, 40) == 6

    def test_long_description_wraps(self):
        item = parse_todo_line("a" * 25, 1)

        assert get_card_height(item, 10) == 5

    def test_unparseable_card_has_bottom_margin(self):
        error = UnparseableTodoItem(line_number=3, raw="x broken", error="bad date")

        assert card_text_lines(error) == ["Unparseable line 3", "x broken", "bad date"]
        assert get_card_height(error, 80) == 6

    def test_empty_raw_uses_placeholder(self):
        error = UnparseableTodoItem(line_number=3, raw="", error="blank")

        assert card_text_lines(error)[1] == BLANK_LINE_PLACEHOLDER

    def test_stale_completion_date_adds_callout_row(self):
        item = parse_todo_line("reopened", 1)
        item.completion_date = "2024-01-02"

        assert card_text_lines(item) == ["reopened", "done: 2024-01-02"]


class TestWrappedRows:
    @pytest.mark.parametrize(
        "value,width,expected",
        [
            ("", 10, 1),
            ("abc", 0, 1),
            ("abcdefghij", 10, 1),
            ("abcdefghijk", 10, 2),
            ("日本語", 4, 2),
        ],
    )
    def test_wrapped_row_count(self, value, width, expected):
        assert wrapped_row_count(value, width) == expected


class TestVisibleCount:
    def _cards(self, count):
        return [parse_todo_line(f"Task {n}", n) for n in range(1, count + 1)]

    def test_empty_and_out_of_range(self):
        assert get_visible_card_count([], 0, 10, 20) == 0
        assert get_visible_card_count(self._cards(2), 2, 10, 20) == 0
        assert get_visible_card_count(self._cards(2), 0, 0, 20) == 1
        assert get_visible_card_count(self._cards(2), 0, -3, 20) == 1

    def test_counts_cards_that_fit(self):
        assert get_visible_card_count(self._cards(3), 0, 7, 20) == 2
        assert get_visible_card_count(self._cards(3), 0, 9, 20) == 3

    def test_respects_scroll_offset(self):
        assert get_visible_card_count(self._cards(5), 3, 100, 20) == 2

    def test_first_card_counts_even_when_too_tall(self):
        tall = parse_todo_line("(A) Task +p @c due:2024-01-01", 1)

        assert get_visible_card_count([tall], 0, 3, 40) == 1


class TestMetrics:
    def test_split_column_widths_gives_remainder_left(self):
        assert split_column_widths(80) == {"backlog": 27, "doing": 27, "done": 26}
        assert split_column_widths(81) == {"backlog": 27, "doing": 27, "done": 27}
        assert split_column_widths(82) == {"backlog": 28, "doing": 27, "done": 27}

    def test_card_content_width(self):
        assert card_content_width(27) == 21
        assert card_content_width(3) == 1

    def test_table_visible_count(self):
        assert table_visible_count(20) == 20
        assert table_visible_count(0) == 1

    def test_compute_layout_metrics(self):
        parsed = parse_todo_text("one\ntwo\nthree")
        columns = build_columns(parsed.items, parsed.errors)

        metrics = compute_layout_metrics(columns, "backlog", 0, terminal_height=24, terminal_width=80)

        assert metrics.viewport_rows == 20
        assert metrics.card_visible_rows == 19
        assert metrics.table_visible_count == 20
        assert metrics.card_content_width == 21
        assert metrics.card_visible_count == 3

    def test_empty_column_still_reports_one_visible_card(self):
        columns = build_columns([], [])

        metrics = compute_layout_metrics(columns, "done", 0, terminal_height=5, terminal_width=30)

        assert metrics.viewport_rows == 1
        assert metrics.card_visible_count == 1
