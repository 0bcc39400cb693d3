"""Cursor state for the card and table views, addressed by task identity.

Indices shift whenever the filter, the sort or the line set changes, so a
cursor that must survive such a change is remembered by `line_number` and
relocated once the new view has been computed.
"""

from dataclasses import dataclass, field
from typing import List, Literal, NamedTuple, Optional, Sequence, Union

from core import ParsedTodoLine
from application.columns import COLUMN_KEYS, ColumnKey, Columns
from application.table_sort import TableRow

ViewMode = Literal["cards", "table"]
DEFAULT_COLUMN_KEY: ColumnKey = "backlog"


class CardPosition(NamedTuple):
    column: ColumnKey
    index: int


def find_card_selection_by_line_number(columns: Columns, line_number: int) -> Optional[CardPosition]:
    """First match searching backlog, then doing, then done."""
    for key in COLUMN_KEYS:
        for index, task in enumerate(columns[key]):
            if task.line_number == line_number:
                return CardPosition(key, index)
    return None


def find_table_selection_index_by_line_number(rows: Sequence[TableRow], line_number: int) -> Optional[int]:
    for index, row in enumerate(rows):
        if row.line_number == line_number:
            return index
    return None


def selection_signature(mode: ViewMode, columns: Columns, rows: Sequence[TableRow]) -> str:
    """Identity of what is on screen: the ordered line numbers of the active view."""
    if mode == "table":
        return "table:" + ",".join(str(row.line_number) for row in rows)
    return "cards:" + "|".join(
        ",".join(str(task.line_number) for task in columns[key]) for key in COLUMN_KEYS
    )


def get_wrapped_vertical_index(current_index: int, count: int, direction: int) -> int:
    if count <= 0:
        return current_index
    if direction < 0:
        return count - 1 if current_index == 0 else current_index - 1
    return (current_index + 1) % count


def get_wrapped_horizontal_column_index(
    current_column_index: int, direction: int, column_lengths: Sequence[int]
) -> Optional[int]:
    """Next non-empty column in `direction`, wrapping around; None when all are empty."""
    column_count = len(column_lengths)
    if column_count == 0:
        return None
    target = current_column_index
    for _ in range(column_count):
        target = (target + direction + column_count) % column_count
        if column_lengths[target] > 0:
            return target
    return None


def sync_scroll_offset(selected_index: int, scroll_offset: int, visible_count: int) -> int:
    """Scroll just enough to keep the selected index inside the viewport."""
    if selected_index < scroll_offset:
        return selected_index
    if selected_index >= scroll_offset + visible_count:
        return max(selected_index - visible_count + 1, 0)
    return scroll_offset


def _first_non_empty_column(columns: Columns) -> int:
    for position, key in enumerate(COLUMN_KEYS):
        if columns[key]:
            return position
    return 0


@dataclass
class CardSelection:
    column: int = 0
    index: int = 0

    @property
    def column_key(self) -> ColumnKey:
        if 0 <= self.column < len(COLUMN_KEYS):
            return COLUMN_KEYS[self.column]
        return DEFAULT_COLUMN_KEY

    def selected_item(self, columns: Columns) -> Optional[ParsedTodoLine]:
        tasks = columns[self.column_key]
        return tasks[self.index] if 0 <= self.index < len(tasks) else None

    def clamp(self, columns: Columns) -> None:
        """Keep the cursor inside its column, or jump to the first non-empty one."""
        tasks = columns[self.column_key]
        if tasks:
            self.index = min(self.index, len(tasks) - 1)
            return
        self.column = _first_non_empty_column(columns)
        self.index = 0

    def move_vertical(self, columns: Columns, direction: int) -> None:
        self.index = get_wrapped_vertical_index(self.index, len(columns[self.column_key]), direction)

    def move_horizontal(self, columns: Columns, direction: int) -> None:
        """Step to the next non-empty column, wrapping; stays put when none has tasks."""
        target = get_wrapped_horizontal_column_index(self.column, direction, columns.lengths())
        if target is None:
            return
        target_length = len(columns[COLUMN_KEYS[target]])
        self.column = target
        self.index = min(self.index, max(target_length - 1, 0))

    def set_column_index(self, column: ColumnKey, index: int) -> None:
        if column not in COLUMN_KEYS:
            return
        self.column = COLUMN_KEYS.index(column)
        self.index = index


@dataclass
class TableSelection:
    index: int = 0

    def selected_item(self, rows: Sequence[TableRow]) -> Optional[ParsedTodoLine]:
        return rows[self.index].task if 0 <= self.index < len(rows) else None

    def clamp(self, row_count: int) -> None:
        self.index = 0 if row_count == 0 else min(self.index, row_count - 1)

    def move(self, row_count: int, direction: int) -> None:
        self.index = 0 if row_count == 0 else get_wrapped_vertical_index(self.index, row_count, direction)

    def select_line_number(self, rows: Sequence[TableRow], line_number: int) -> bool:
        index = find_table_selection_index_by_line_number(rows, line_number)
        if index is None:
            return False
        self.index = index
        return True


@dataclass
class ViewSnapshot:
    """One computed view: the active mode, its columns and its table rows."""

    mode: ViewMode
    columns: Columns
    rows: List[TableRow] = field(default_factory=list)

    @property
    def signature(self) -> str:
        return selection_signature(self.mode, self.columns, self.rows)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class PendingRelocate:
    line_number: int
    signature: str


ContinuityState = Union[Idle, PendingRelocate]


class SelectionContinuity:
    """Two-state machine relocating the cursor after a view-changing command.

    `preserve()` is called before the change with the current signature; each
    `on_view_recomputed()` event either leaves a pending relocation alone (view
    unchanged) or resolves it against the new view and returns to Idle.
    """

    def __init__(self) -> None:
        self.state: ContinuityState = Idle()

    @property
    def pending_line_number(self) -> Optional[int]:
        if isinstance(self.state, PendingRelocate):
            return self.state.line_number
        return None

    def preserve(self, line_number: int, signature: str) -> None:
        self.state = PendingRelocate(line_number, signature)

    def cancel(self) -> None:
        self.state = Idle()

    def on_view_recomputed(self, view: ViewSnapshot, cards: CardSelection, table: TableSelection) -> bool:
        """Returns True when the pending task was found and the cursor moved to it."""
        state = self.state
        if not isinstance(state, PendingRelocate):
            return False
        if view.signature == state.signature:
            return False
        self.state = Idle()
        if view.mode == "table":
            return table.select_line_number(view.rows, state.line_number)
        position = find_card_selection_by_line_number(view.columns, state.line_number)
        if position is None:
            return False
        cards.set_column_index(position.column, position.index)
        return True


def reconcile_view_switch(view: ViewSnapshot, cards: CardSelection, table: TableSelection) -> ViewMode:
    """Flip between cards and table, carrying the selected task across once."""
    if view.mode == "cards":
        selected = cards.selected_item(view.columns)
        if selected is not None:
            table.select_line_number(view.rows, selected.line_number)
        return "table"
    selected = table.selected_item(view.rows)
    if selected is not None:
        position = find_card_selection_by_line_number(view.columns, selected.line_number)
        if position is not None:
            cards.set_column_index(position.column, position.index)
    return "cards"


__all__ = [
    "ViewMode",
    "CardPosition",
    "find_card_selection_by_line_number",
    "find_table_selection_index_by_line_number",
    "selection_signature",
    "get_wrapped_vertical_index",
    "get_wrapped_horizontal_column_index",
    "sync_scroll_offset",
    "CardSelection",
    "TableSelection",
    "ViewSnapshot",
    "Idle",
    "PendingRelocate",
    "SelectionContinuity",
    "reconcile_view_switch",
]
