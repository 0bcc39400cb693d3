from core import MetadataTag, TodoItem, UnparseableTodoItem
from infrastructure.todo_line_parser import parse_todo_line
from infrastructure.todo_serializer import serialize_all, serialize_line, serialize_todo_item


def test_clean_item_is_emitted_verbatim():
    raw = "(A)   odd   spacing  +p   @c"
    item = parse_todo_line(raw, 1)

    assert serialize_todo_item(item) == raw


def test_dirty_active_item_is_rendered_in_canonical_order():
    item = TodoItem(
        line_number=1,
        raw="",
        description="Call mom",
        priority="A",
        creation_date="2024-01-01",
        projects=["family"],
        contexts=["phone"],
        metadata=[MetadataTag("due", "2024-02-01")],
        dirty=True,
    )

    assert serialize_todo_item(item) == "(A) 2024-01-01 Call mom +family @phone due:2024-02-01"


def test_dirty_completed_item_puts_priority_tag_last_once():
    item = TodoItem(
        line_number=1,
        raw="",
        description="Ship",
        completed=True,
        priority="B",
        creation_date="2024-01-01",
        completion_date="2024-02-02",
        projects=["work"],
        metadata=[MetadataTag("pri", "B"), MetadataTag("due", "2024-03-01")],
        dirty=True,
    )

    assert serialize_todo_item(item) == "x 2024-02-02 2024-01-01 Ship +work due:2024-03-01 pri:B"


def test_dirty_active_item_drops_stored_pri_tag():
    item = parse_todo_line("(A) Task pri:B", 1)
    item.dirty = True

    assert serialize_todo_item(item) == "(A) Task"


def test_unparseable_line_serializes_raw():
    error = UnparseableTodoItem(line_number=2, raw="x broken", error="bad")

    assert serialize_line(error) == "x broken"


def test_serialize_all_joins_without_trailing_newline():
    lines = [
        parse_todo_line("first", 1),
        UnparseableTodoItem(line_number=2, raw="x broken", error="bad"),
        parse_todo_line("third", 3),
    ]

    assert serialize_all(lines) == "first\nx broken\nthird"
    assert serialize_all([]) == ""
