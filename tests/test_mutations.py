import pytest

from core import MetadataTag
from application import mutations
from infrastructure.todo_line_parser import parse_todo_line
from infrastructure.todo_serializer import serialize_todo_item

TODAY = "2024-03-01"


@pytest.fixture(autouse=True)
def fixed_today(monkeypatch):
    monkeypatch.setattr(mutations, "_today", lambda: TODAY)


def test_complete_moves_priority_into_tag_and_drops_doing():
    item = parse_todo_line("(B) 2024-01-01 Task status:doing", 1)

    done = mutations.toggle_completion(item)

    assert done.completed is True
    assert done.completion_date == TODAY
    assert done.priority == "B"
    assert done.dirty is True
    assert serialize_todo_item(done) == "x 2024-03-01 2024-01-01 Task pri:B"


def test_priority_survives_complete_and_reopen():
    item = parse_todo_line("(B) 2024-01-01 Task", 1)

    reopened = mutations.toggle_completion(mutations.toggle_completion(item))

    assert reopened.completed is False
    assert reopened.completion_date is None
    assert reopened.priority == "B"
    assert serialize_todo_item(reopened) == "(B) 2024-01-01 Task"


def test_mutations_do_not_touch_the_argument():
    item = parse_todo_line("(B) Task status:doing", 1)

    mutations.toggle_completion(item)
    mutations.toggle_doing(item)

    assert item.completed is False
    assert item.dirty is False
    assert item.metadata == [MetadataTag("status", "doing")]


def test_toggle_doing_adds_and_removes_status_tag():
    item = parse_todo_line("Write docs +proj", 1)

    doing = mutations.toggle_doing(item)
    assert doing.is_doing
    assert serialize_todo_item(doing) == "Write docs +proj status:doing"

    back = mutations.toggle_doing(doing)
    assert not back.is_doing
    assert serialize_todo_item(back) == "Write docs +proj"


def test_change_priority_on_active_item():
    item = parse_todo_line("(A) Task", 1)

    assert serialize_todo_item(mutations.change_priority(item, "C")) == "(C) Task"
    assert serialize_todo_item(mutations.change_priority(item, None)) == "Task"


def test_change_priority_on_completed_item_rewrites_tag():
    item = parse_todo_line("x 2024-02-02 Task pri:A", 1)

    changed = mutations.change_priority(item, "C")
    cleared = mutations.change_priority(item, None)

    assert serialize_todo_item(changed) == "x 2024-02-02 Task pri:C"
    assert serialize_todo_item(cleared) == "x 2024-02-02 Task"
    assert cleared.priority is None


def test_change_description_trims_whitespace():
    item = parse_todo_line("Old text @home", 1)

    changed = mutations.change_description(item, "  New text  ")

    assert changed.description == "New text"
    assert serialize_todo_item(changed) == "New text @home"


def test_change_dates_ignores_completion_for_active_items():
    item = parse_todo_line("Task", 1)

    changed = mutations.change_dates(item, "2024-01-05", "2024-02-01")

    assert changed.creation_date == "2024-01-05"
    assert changed.completion_date is None


def test_change_dates_on_completed_item():
    item = parse_todo_line("x 2024-02-02 2024-01-01 Task", 1)

    changed = mutations.change_dates(item, None, "2024-02-10")

    assert serialize_todo_item(changed) == "x 2024-02-10 Task"


def test_add_task_uses_today_as_creation_date():
    created = mutations.add_task(7, "  New task  ", "A")

    assert created.line_number == 7
    assert created.dirty is True
    assert serialize_todo_item(created) == "(A) 2024-03-01 New task"


def test_partition_completed_preserves_order():
    items = [
        parse_todo_line("one", 1),
        parse_todo_line("x 2024-01-01 two", 2),
        parse_todo_line("three", 3),
    ]

    active, completed = mutations.partition_completed(items)

    assert [item.line_number for item in active] == [1, 3]
    assert [item.line_number for item in completed] == [2]


def test_done_task_round_trip_swaps_priority_encoding():
    item = parse_todo_line("(B) 2026-02-01 Done task", 1)

    completed = serialize_todo_item(mutations.toggle_completion(item))
    reopened = serialize_todo_item(mutations.toggle_completion(mutations.toggle_completion(item)))

    assert "pri:B" in completed and "(B)" not in completed
    assert "(B)" in reopened and "pri:B" not in reopened
