"""Table projection of the kanban columns and its optional total order."""

from dataclasses import dataclass
from functools import cmp_to_key
from typing import List, Literal, Optional, Sequence, Tuple

from core import ParsedTodoLine, TodoItem
from application.columns import COLUMN_KEYS, ColumnKey, Columns
from application.task_formatting import (
    format_contexts,
    format_done_callout,
    format_meta,
    format_primary_line,
    format_projects,
)

TableSortColumn = Literal["status", "priority", "created", "project", "context", "meta", "description"]
TableSortDirection = Literal["asc", "desc"]

TABLE_SORT_COLUMNS: Tuple[TableSortColumn, ...] = (
    "status",
    "priority",
    "created",
    "project",
    "context",
    "meta",
    "description",
)
FIRST_SORT_COLUMN: TableSortColumn = "status"
EMPTY_CELL = "-"
UNPARSEABLE_PRIORITY = "!"


@dataclass(frozen=True)
class TableRow:
    status: ColumnKey
    task: ParsedTodoLine

    @property
    def line_number(self) -> int:
        return self.task.line_number


@dataclass(frozen=True)
class TableSort:
    column: TableSortColumn
    direction: TableSortDirection = "asc"

    def label(self) -> str:
        return f"Sort: {self.column} ({self.direction})"


def build_table_rows(columns: Columns) -> List[TableRow]:
    return [TableRow(status=key, task=task) for key in COLUMN_KEYS for task in columns[key]]


def describe_item(item: TodoItem) -> str:
    callout = format_done_callout(item)
    primary = format_primary_line(item)
    return f"{primary} {callout}" if callout else primary


def get_sort_value(row: TableRow, column: TableSortColumn) -> str:
    """Rendered cell text used both for display and for ordering."""
    if column == "status":
        return row.status
    task = row.task
    if not isinstance(task, TodoItem):
        if column == "priority":
            return UNPARSEABLE_PRIORITY
        if column == "description":
            return task.raw
        return EMPTY_CELL
    if column == "priority":
        return task.priority or EMPTY_CELL
    if column == "created":
        return task.creation_date or EMPTY_CELL
    if column == "project":
        return format_projects(task.projects) or EMPTY_CELL
    if column == "context":
        return format_contexts(task.contexts) or EMPTY_CELL
    if column == "meta":
        return format_meta(task.metadata) or EMPTY_CELL
    if column == "description":
        return describe_item(task)
    raise ValueError(f"Unknown table sort column: {column!r}")


def sort_table_rows(rows: List[TableRow], sort: Optional[TableSort]) -> List[TableRow]:
    """Without a sort the very same list object comes back."""
    if sort is None:
        return rows
    sign = 1 if sort.direction == "asc" else -1

    def compare(left: TableRow, right: TableRow) -> int:
        left_value = get_sort_value(left, sort.column)
        right_value = get_sort_value(right, sort.column)
        if left_value != right_value:
            return sign * (-1 if left_value < right_value else 1)
        return left.line_number - right.line_number

    return sorted(rows, key=cmp_to_key(compare))


def next_sort(current: Optional[TableSort]) -> TableSort:
    """Cycle to the next column, always ascending; no sort starts at `status`."""
    if current is None:
        return TableSort(FIRST_SORT_COLUMN, "asc")
    index = TABLE_SORT_COLUMNS.index(current.column)
    return TableSort(TABLE_SORT_COLUMNS[(index + 1) % len(TABLE_SORT_COLUMNS)], "asc")


def reverse_sort(current: Optional[TableSort]) -> Optional[TableSort]:
    if current is None:
        return None
    return TableSort(current.column, "desc" if current.direction == "asc" else "asc")


def table_rows_for(columns: Columns, sort: Optional[TableSort]) -> List[TableRow]:
    return sort_table_rows(build_table_rows(columns), sort)


def row_line_numbers(rows: Sequence[TableRow]) -> Tuple[int, ...]:
    return tuple(row.line_number for row in rows)


__all__ = [
    "TableSortColumn",
    "TableSortDirection",
    "TABLE_SORT_COLUMNS",
    "FIRST_SORT_COLUMN",
    "TableRow",
    "TableSort",
    "build_table_rows",
    "describe_item",
    "get_sort_value",
    "sort_table_rows",
    "next_sort",
    "reverse_sort",
    "table_rows_for",
    "row_line_numbers",
]
