from application.columns import (
    build_columns,
    column_for,
    compare_todo_items,
    matches_filter,
    normalize_filter,
    priority_rank,
)
from infrastructure.todo_line_parser import parse_todo_line, parse_todo_text


def _columns_for(text, filter_text=None):
    parsed = parse_todo_text(text)
    return build_columns(parsed.items, parsed.errors, filter_text)


def test_backlog_is_ordered_by_priority_then_newest_then_description():
    columns = _columns_for(
        "\n".join(
            [
                "Zed task",
                "(B) 2024-01-01 beta",
                "(A) 2024-01-01 alpha",
                "(A) 2024-02-01 alpha newer",
                "(A) 2024-02-01 aardvark",
            ]
        )
    )

    assert [item.line_number for item in columns.backlog] == [5, 4, 3, 2, 1]


def test_ordering_is_deterministic_regardless_of_input_order():
    lines = ["(A) same", "(A) same", "(C) other", "plain"]
    forward = build_columns([parse_todo_line(raw, n) for n, raw in enumerate(lines, 1)], [])
    backward = build_columns(
        list(reversed([parse_todo_line(raw, n) for n, raw in enumerate(lines, 1)])), []
    )

    assert [item.description for item in forward.backlog] == [item.description for item in backward.backlog]


def test_description_comparison_is_ordinal():
    upper = parse_todo_line("Zebra", 1)
    lower = parse_todo_line("apple", 2)

    assert compare_todo_items(upper, lower) < 0


def test_missing_creation_date_sorts_after_dated_items():
    dated = parse_todo_line("(A) 2020-01-01 dated", 1)
    undated = parse_todo_line("(A) undated", 2)

    assert compare_todo_items(dated, undated) < 0


def test_priority_rank_puts_missing_priority_last():
    assert priority_rank(parse_todo_line("(A) a", 1)) == 0
    assert priority_rank(parse_todo_line("(Z) z", 1)) == 25
    assert priority_rank(parse_todo_line("none", 1)) == 26


def test_items_are_bucketed_by_status():
    columns = _columns_for("todo\nworking status:doing\nx 2024-01-01 finished\nx 2024-01-01 done too status:doing")

    assert [item.description for item in columns.backlog] == ["todo"]
    assert [item.description for item in columns.doing] == ["working"]
    assert [item.description for item in columns.done] == ["done too", "finished"]


def test_column_for_prefers_done_over_doing():
    item = parse_todo_line("x 2024-01-01 finished status:doing", 1)

    assert column_for(item) == "done"


def test_filter_is_case_insensitive_and_unparseable_lines_trail_backlog():
    columns = _columns_for(
        "\n".join(
            [
                "(a) broken +Home",
                "Clean garage +home",
                "(A) Pay bills +HOME",
                "Write report +work",
                "Fix sink +home status:doing",
            ]
        ),
        filter_text="  +home ",
    )

    assert [line.line_number for line in columns.backlog] == [3, 2, 1]
    assert [line.line_number for line in columns.doing] == [5]
    assert columns.done == []


def test_unparseable_lines_keep_file_order():
    columns = _columns_for("x bad one\n(Z) fine\nx bad two")

    assert [line.line_number for line in columns.backlog] == [2, 1, 3]


def test_normalize_and_match_filter():
    assert normalize_filter(None) == ""
    assert normalize_filter("  MiXed ") == "mixed"
    assert matches_filter("anything", "")
    assert matches_filter("Call Mom", "mom")
    assert not matches_filter("Call Dad", "mom")


def test_columns_accessors():
    columns = _columns_for("a\nb status:doing\nx 2024-01-01 c")

    assert columns.lengths() == [1, 1, 1]
    assert columns.line_numbers() == ((1,), (2,), (3,))
    assert [key for key, _ in columns.items()] == ["backlog", "doing", "done"]


def test_priority_and_newest_first_ordering_example():
    columns = _columns_for(
        "(B) 2026-01-01 zeta\n(A) 2026-01-03 beta\n(A) 2026-01-02 alpha\n2026-01-04 no-priority"
    )

    assert [item.description for item in columns.backlog] == ["beta", "alpha", "zeta", "no-priority"]


def test_filter_keeps_matching_unparseable_line_last():
    columns = _columns_for("Task one +home\nTask two +work\nx not-a-date +home", filter_text="+home")

    assert len(columns.backlog) == 2
    assert columns.backlog[0].description == "Task one"
    assert columns.backlog[1].raw == "x not-a-date +home"
