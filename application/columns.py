"""Kanban bucket derivation: backlog / doing / done."""

from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Dict, Iterator, List, Literal, Optional, Sequence, Tuple

from core import ParsedTodoLine, TodoItem, UnparseableTodoItem

ColumnKey = Literal["backlog", "doing", "done"]
COLUMN_KEYS: Tuple[ColumnKey, ...] = ("backlog", "doing", "done")
COLUMN_TITLES: Dict[str, str] = {"backlog": "Backlog", "doing": "Doing", "done": "Done"}

NO_PRIORITY_RANK = 26
MISSING_DATE = "0000-00-00"


@dataclass
class Columns:
    backlog: List[ParsedTodoLine] = field(default_factory=list)
    doing: List[ParsedTodoLine] = field(default_factory=list)
    done: List[ParsedTodoLine] = field(default_factory=list)

    def __getitem__(self, key: str) -> List[ParsedTodoLine]:
        if key not in COLUMN_KEYS:
            raise KeyError(key)
        return getattr(self, key)

    def items(self) -> Iterator[Tuple[ColumnKey, List[ParsedTodoLine]]]:
        for key in COLUMN_KEYS:
            yield key, self[key]

    def lengths(self) -> List[int]:
        return [len(self[key]) for key in COLUMN_KEYS]

    def line_numbers(self) -> Tuple[Tuple[int, ...], ...]:
        return tuple(tuple(entry.line_number for entry in self[key]) for key in COLUMN_KEYS)


def priority_rank(item: TodoItem) -> int:
    if not item.priority:
        return NO_PRIORITY_RANK
    return ord(item.priority) - ord("A")


def compare_todo_items(left: TodoItem, right: TodoItem) -> int:
    """Priority A..Z then none; newer creation date first; description A..Z."""
    left_rank, right_rank = priority_rank(left), priority_rank(right)
    if left_rank != right_rank:
        return left_rank - right_rank
    left_created = left.creation_date or MISSING_DATE
    right_created = right.creation_date or MISSING_DATE
    if left_created != right_created:
        return -1 if left_created > right_created else 1
    if left.description != right.description:
        return -1 if left.description < right.description else 1
    return 0


def normalize_filter(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def matches_filter(raw: str, normalized_filter: str) -> bool:
    if not normalized_filter:
        return True
    return normalized_filter in raw.lower()


def column_for(item: TodoItem) -> ColumnKey:
    if item.completed:
        return "done"
    if item.is_doing:
        return "doing"
    return "backlog"


def build_columns(
    items: Sequence[TodoItem],
    errors: Sequence[UnparseableTodoItem],
    filter_text: Optional[str] = None,
) -> Columns:
    """Bucket and order the task set; unparseable lines trail the backlog in file order."""
    needle = normalize_filter(filter_text)
    columns = Columns()
    for item in sorted(items, key=cmp_to_key(compare_todo_items)):
        if matches_filter(item.raw, needle):
            columns[column_for(item)].append(item)
    for error in sorted(errors, key=lambda entry: entry.line_number):
        if matches_filter(error.raw, needle):
            columns.backlog.append(error)
    return columns


__all__ = [
    "ColumnKey",
    "COLUMN_KEYS",
    "COLUMN_TITLES",
    "Columns",
    "priority_rank",
    "compare_todo_items",
    "normalize_filter",
    "matches_filter",
    "column_for",
    "build_columns",
]
