import pytest

from core import TodoItem
from application.columns import build_columns
from application.table_sort import (
    TableRow,
    TableSort,
    build_table_rows,
    describe_item,
    get_sort_value,
    next_sort,
    reverse_sort,
    row_line_numbers,
    sort_table_rows,
    table_rows_for,
)
from infrastructure.todo_line_parser import parse_todo_text


def _rows(text):
    parsed = parse_todo_text(text)
    return build_table_rows(build_columns(parsed.items, parsed.errors))


def test_rows_follow_column_order():
    rows = _rows("x 2024-01-01 done\nwork status:doing\nidea")

    assert [row.status for row in rows] == ["backlog", "doing", "done"]
    assert row_line_numbers(rows) == (3, 2, 1)


def test_no_sort_returns_the_same_list():
    rows = _rows("a\nb")

    assert sort_table_rows(rows, None) is rows


def test_priority_sort_uses_rendered_cells():
    rows = _rows("(B) bee\nno priority\n(A) ay\nx broken")

    ordered = sort_table_rows(rows, TableSort("priority", "asc"))

    assert [get_sort_value(row, "priority") for row in ordered] == ["!", "-", "A", "B"]


def test_ties_break_by_line_number_in_both_directions():
    rows = _rows("one\ntwo\nthree\nx 2024-01-01 four")

    ascending = sort_table_rows(rows, TableSort("status", "asc"))
    descending = sort_table_rows(rows, TableSort("status", "desc"))

    assert row_line_numbers(rows) == (1, 3, 2, 4)
    assert row_line_numbers(ascending) == (1, 2, 3, 4)
    assert row_line_numbers(descending) == (4, 1, 2, 3)


def test_sort_values_for_todo_rows():
    rows = _rows("(A) 2024-01-01 Task +p +q @c due:2024-02-01")
    row = rows[0]

    assert get_sort_value(row, "status") == "backlog"
    assert get_sort_value(row, "priority") == "A"
    assert get_sort_value(row, "created") == "2024-01-01"
    assert get_sort_value(row, "project") == "+p +q"
    assert get_sort_value(row, "context") == "@c"
    assert get_sort_value(row, "meta") == "due:2024-02-01"
    assert get_sort_value(row, "description") == "(A) 2024-01-01 Task"


def test_sort_values_for_unparseable_rows():
    row = _rows("x broken line")[0]

    assert get_sort_value(row, "priority") == "!"
    assert get_sort_value(row, "created") == "-"
    assert get_sort_value(row, "project") == "-"
    assert get_sort_value(row, "description") == "x broken line"


def test_unknown_sort_column_raises():
    row = _rows("task")[0]

    with pytest.raises(ValueError):
        get_sort_value(row, "size")


def test_describe_item_appends_stale_completion_date():
    item = TodoItem(line_number=1, raw="", description="reopened", completion_date="2024-01-02")

    assert describe_item(item) == "reopened done: 2024-01-02"


def test_describe_completed_item():
    item = TodoItem(
        line_number=1,
        raw="",
        description="shipped",
        completed=True,
        creation_date="2024-01-01",
        completion_date="2024-01-05",
    )

    assert describe_item(item) == "x 2024-01-05 2024-01-01 shipped"


def test_next_sort_cycles_columns_ascending():
    assert next_sort(None) == TableSort("status", "asc")
    assert next_sort(TableSort("status", "desc")) == TableSort("priority", "asc")
    assert next_sort(TableSort("description", "asc")) == TableSort("status", "asc")


def test_reverse_sort_flips_direction():
    assert reverse_sort(None) is None
    assert reverse_sort(TableSort("meta", "asc")) == TableSort("meta", "desc")
    assert reverse_sort(TableSort("meta", "desc")) == TableSort("meta", "asc")


def test_sort_label():
    assert TableSort("created", "desc").label() == "Sort: created (desc)"


def test_table_rows_for_combines_projection_and_sort():
    parsed = parse_todo_text("b\na")
    columns = build_columns(parsed.items, parsed.errors)

    rows = table_rows_for(columns, TableSort("description", "desc"))

    assert [row.task.description for row in rows] == ["b", "a"]
    assert isinstance(rows[0], TableRow)
