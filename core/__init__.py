from .todo_item import (
    DATE_PATTERN,
    PRIORITY_PATTERN,
    PRIORITY_TAG_KEY,
    STATUS_TAG_KEY,
    STATUS_DOING_VALUE,
    MetadataTag,
    TodoItem,
    UnparseableTodoItem,
    ParsedTodoLine,
    ParsedTodoFile,
    is_date,
    is_priority,
)

__all__ = [
    "DATE_PATTERN",
    "PRIORITY_PATTERN",
    "PRIORITY_TAG_KEY",
    "STATUS_TAG_KEY",
    "STATUS_DOING_VALUE",
    # Model
    "MetadataTag",
    "TodoItem",
    "UnparseableTodoItem",
    "ParsedTodoLine",
    "ParsedTodoFile",
    # Grammar checks
    "is_date",
    "is_priority",
]
