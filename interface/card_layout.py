"""Card heights, viewport pagination and terminal layout metrics."""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from core import ParsedTodoLine, TodoItem
from application.columns import ColumnKey, Columns
from application.task_formatting import (
    format_contexts,
    format_done_callout,
    format_meta,
    format_primary_line,
    format_projects,
    unparseable_header,
)
from interface.tui_display import display_width

TASK_CARD_BORDER_ROWS = 2
UNPARSEABLE_CARD_MARGIN_BOTTOM_ROWS = 1
BLANK_LINE_PLACEHOLDER = "(blank line)"

RESERVED_BOTTOM_ROWS = 4
DEFAULT_TERMINAL_HEIGHT = 24
DEFAULT_TERMINAL_WIDTH = 80
TABLE_ROW_HEIGHT = 1
COLUMN_HEADER_ROWS = 1
COLUMN_COUNT = 3
COLUMN_HORIZONTAL_PADDING = 1
CARD_BORDER_COLUMNS = 2
CARD_HORIZONTAL_PADDING = 1


def wrapped_row_count(value: str, content_width: int) -> int:
    if content_width <= 0 or not value:
        return 1
    width = display_width(value)
    return max(1, -(-width // content_width))


def card_text_lines(task: ParsedTodoLine) -> List[str]:
    """Logical (unwrapped) content lines of a card, top to bottom."""
    if not isinstance(task, TodoItem):
        return [unparseable_header(task.line_number), task.raw or BLANK_LINE_PLACEHOLDER, task.error]
    lines = [format_primary_line(task)]
    callout = format_done_callout(task)
    if callout:
        lines.append(callout)
    if task.projects:
        lines.append(f"projects: {format_projects(task.projects)}")
    if task.contexts:
        lines.append(f"contexts: {format_contexts(task.contexts)}")
    if task.metadata:
        lines.append(f"meta: {format_meta(task.metadata)}")
    return lines


def get_card_height(task: ParsedTodoLine, content_width: int) -> int:
    content_rows = sum(wrapped_row_count(line, content_width) for line in card_text_lines(task))
    if isinstance(task, TodoItem):
        return content_rows + TASK_CARD_BORDER_ROWS
    return content_rows + TASK_CARD_BORDER_ROWS + UNPARSEABLE_CARD_MARGIN_BOTTOM_ROWS


def get_visible_card_count(
    tasks: Sequence[ParsedTodoLine],
    scroll_offset: int,
    available_rows: int,
    content_width: int,
) -> int:
    """How many cards starting at `scroll_offset` fit in `available_rows`.

    The first card always counts, even when it alone overflows the budget.
    """
    if not tasks or scroll_offset >= len(tasks):
        return 0
    rows_used = 0
    count = 0
    for task in tasks[scroll_offset:]:
        height = get_card_height(task, content_width)
        if count > 0 and rows_used + height > available_rows:
            break
        rows_used += height
        count += 1
        if rows_used >= available_rows:
            break
    return count


def table_visible_count(available_rows: int) -> int:
    return max(1, available_rows // TABLE_ROW_HEIGHT)


def split_column_widths(terminal_width: int) -> Dict[str, int]:
    """Three equal columns; leftover cells go to backlog, then doing."""
    base = terminal_width // COLUMN_COUNT
    remainder = terminal_width - base * COLUMN_COUNT
    return {
        "backlog": base + (1 if remainder >= 1 else 0),
        "doing": base + (1 if remainder >= 2 else 0),
        "done": base,
    }


def card_content_width(column_width: int) -> int:
    return max(
        1,
        column_width - COLUMN_HORIZONTAL_PADDING * 2 - CARD_BORDER_COLUMNS - CARD_HORIZONTAL_PADDING * 2,
    )


@dataclass(frozen=True)
class LayoutMetrics:
    terminal_height: int
    terminal_width: int
    viewport_rows: int
    table_visible_count: int
    card_visible_rows: int
    card_content_width: int
    card_visible_count: int
    column_widths: Dict[str, int]


def compute_layout_metrics(
    columns: Columns,
    selected_column: ColumnKey,
    scroll_offset: int,
    terminal_height: int = DEFAULT_TERMINAL_HEIGHT,
    terminal_width: int = DEFAULT_TERMINAL_WIDTH,
) -> LayoutMetrics:
    viewport_rows = max(1, terminal_height - RESERVED_BOTTOM_ROWS)
    card_visible_rows = max(1, viewport_rows - COLUMN_HEADER_ROWS)
    widths = split_column_widths(terminal_width)
    content_width = card_content_width(widths[selected_column])
    selected_tasks = columns[selected_column]
    visible = get_visible_card_count(selected_tasks, scroll_offset, card_visible_rows, content_width)
    return LayoutMetrics(
        terminal_height=terminal_height,
        terminal_width=terminal_width,
        viewport_rows=viewport_rows,
        table_visible_count=table_visible_count(viewport_rows),
        card_visible_rows=card_visible_rows,
        card_content_width=content_width,
        card_visible_count=max(1, visible),
        column_widths=widths,
    )


__all__ = [
    "TASK_CARD_BORDER_ROWS",
    "UNPARSEABLE_CARD_MARGIN_BOTTOM_ROWS",
    "RESERVED_BOTTOM_ROWS",
    "wrapped_row_count",
    "card_text_lines",
    "get_card_height",
    "get_visible_card_count",
    "table_visible_count",
    "split_column_widths",
    "card_content_width",
    "LayoutMetrics",
    "compute_layout_metrics",
]
