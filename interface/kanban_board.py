"""Screen-independent board state: derived views, cursors and user commands.

The prompt_toolkit host only routes keys here and renders `view`; everything
that decides what is selected or persisted lives in this class.
"""

from typing import Optional

from core import ParsedTodoLine, TodoItem
from application.columns import Columns, build_columns
from application.table_sort import (
    TableSort,
    build_table_rows,
    next_sort,
    reverse_sort,
    sort_table_rows,
)
from application.task_actions import TaskActions
from application.todo_session import TodoSession
from interface.card_layout import (
    DEFAULT_TERMINAL_HEIGHT,
    DEFAULT_TERMINAL_WIDTH,
    LayoutMetrics,
    compute_layout_metrics,
)
from interface.command_bar import CommandBar, ConfirmMode, SubmitAction, should_clear_filter_on_cancel
from interface.selection import (
    CardSelection,
    SelectionContinuity,
    TableSelection,
    ViewMode,
    ViewSnapshot,
    reconcile_view_switch,
    sync_scroll_offset,
)

TABLE_SORT_CLEARED_STATUS = "Table sort cleared"


class KanbanBoard:
    def __init__(self, session: TodoSession, command_bar: Optional[CommandBar] = None):
        self.session = session
        self.actions = TaskActions(session)
        self.command_bar = command_bar or CommandBar()
        self.view_mode: ViewMode = "cards"
        self.table_sort: Optional[TableSort] = None
        self.cards = CardSelection()
        self.table = TableSelection()
        self.continuity = SelectionContinuity()
        self.scroll_offset = 0
        self.terminal_height = DEFAULT_TERMINAL_HEIGHT
        self.terminal_width = DEFAULT_TERMINAL_WIDTH
        self.should_exit = False
        self.view = self._compute_view(self.view_mode)
        self.metrics = self._compute_metrics()

    # View derivation

    def _build_columns(self, filter_text: Optional[str]) -> Columns:
        return build_columns(self.session.items, self.session.errors, filter_text)

    def _compute_view(self, mode: ViewMode) -> ViewSnapshot:
        columns = self._build_columns(self.command_bar.filter)
        return ViewSnapshot(mode=mode, columns=columns, rows=sort_table_rows(build_table_rows(columns), self.table_sort))

    def _compute_metrics(self) -> LayoutMetrics:
        return compute_layout_metrics(
            self.view.columns,
            self.cards.column_key,
            self.scroll_offset,
            terminal_height=self.terminal_height,
            terminal_width=self.terminal_width,
        )

    def refresh(self) -> None:
        """Recompute the view, resolve a pending relocation, clamp and scroll."""
        self.view = self._compute_view(self.view_mode)
        self.continuity.on_view_recomputed(self.view, self.cards, self.table)
        self.cards.clamp(self.view.columns)
        self.table.clamp(len(self.view.rows))
        self.metrics = self._compute_metrics()
        if self.view_mode == "table":
            selected, visible = self.table.index, self.metrics.table_visible_count
        else:
            selected, visible = self.cards.index, self.metrics.card_visible_count
        self.scroll_offset = sync_scroll_offset(selected, self.scroll_offset, visible)
        self.metrics = self._compute_metrics()

    def resize(self, height: int, width: int) -> None:
        if (height, width) != (self.terminal_height, self.terminal_width):
            self.terminal_height, self.terminal_width = height, width
            self.refresh()

    @property
    def columns(self) -> Columns:
        return self.view.columns

    @property
    def rows(self):
        return self.view.rows

    def selected_item(self) -> Optional[ParsedTodoLine]:
        if self.view_mode == "table":
            return self.table.selected_item(self.view.rows)
        return self.cards.selected_item(self.view.columns)

    def status_line(self) -> str:
        if self.session.error:
            return f"{self.session.status}: {self.session.error}"
        return self.command_bar.status_text

    def _preserve_selected(self) -> None:
        selected = self.selected_item()
        if selected is not None:
            self.continuity.preserve(selected.line_number, self.view.signature)

    def _report(self, message: str) -> None:
        self.command_bar.set_status_text(message)
        self.refresh()

    # Navigation

    def move_vertical(self, direction: int) -> None:
        self.continuity.cancel()
        if self.view_mode == "table":
            self.table.move(len(self.view.rows), direction)
        else:
            self.cards.move_vertical(self.view.columns, direction)
        self.refresh()

    def move_horizontal(self, direction: int) -> None:
        if self.view_mode == "table":
            return
        self.continuity.cancel()
        self.cards.move_horizontal(self.view.columns, direction)
        self.scroll_offset = 0
        self.refresh()

    def toggle_view(self) -> None:
        self.continuity.cancel()
        self.view_mode = reconcile_view_switch(self.view, self.cards, self.table)
        self.scroll_offset = 0
        self.refresh()

    # Task edits

    def toggle_done(self) -> None:
        self._preserve_selected()
        self._report(self.actions.toggle_completion(self.selected_item()))

    def toggle_doing(self) -> None:
        self._preserve_selected()
        self._report(self.actions.toggle_doing(self.selected_item()))

    def clean_completed(self) -> None:
        self._report(self.actions.clean_completed())

    def open_add(self) -> None:
        self.command_bar.open_add()

    def open_priority(self) -> None:
        self.command_bar.open_change_priority()

    def open_edit_description(self) -> None:
        selected = self.selected_item()
        if not isinstance(selected, TodoItem):
            self.command_bar.set_status_text(TaskActions.NO_SELECTION)
            return
        self.command_bar.open_edit_description(selected.description)

    def open_edit_dates(self) -> None:
        selected = self.selected_item()
        if not isinstance(selected, TodoItem):
            self.command_bar.set_status_text(TaskActions.NO_SELECTION)
            return
        self.command_bar.open_edit_dates(selected.completed, selected.creation_date, selected.completion_date)

    def open_delete_confirm(self) -> None:
        selected = self.selected_item()
        if selected is None:
            self.command_bar.set_status_text(TaskActions.NO_SELECTION)
            return
        description = selected.description if isinstance(selected, TodoItem) else selected.raw
        self.command_bar.open_delete_confirm(description)

    def confirm_delete(self) -> None:
        self.command_bar.cancel()
        self._report(self.actions.delete(self.selected_item()))

    def confirm(self) -> None:
        state = self.command_bar.state
        if isinstance(state, ConfirmMode) and state.kind == "delete":
            self.confirm_delete()
        elif isinstance(state, ConfirmMode) and state.kind == "quit":
            self.should_exit = True

    def submit(self) -> None:
        self.apply_submit(self.command_bar.submit())

    def apply_submit(self, action: SubmitAction) -> None:
        if action.type == "quit":
            self.should_exit = True
            return
        if action.type == "set-filter":
            self._preserve_selected()
            self.scroll_offset = 0
            self.refresh()
            return
        selected = self.selected_item()
        if action.type == "add":
            self._report(self.actions.add(action.description or "", action.priority))
        elif action.type == "change-priority":
            self._preserve_selected()
            self._report(self.actions.change_priority(selected, action.priority))
        elif action.type == "change-description":
            self._preserve_selected()
            self._report(self.actions.change_description(selected, action.description or ""))
        elif action.type == "change-dates":
            self._preserve_selected()
            self._report(self.actions.change_dates(selected, action.creation_date, action.completion_date))

    # Filter and table sort

    def clear_filter(self) -> None:
        self._preserve_selected()
        self.command_bar.clear_filter()
        self.refresh()

    def toggle_filter(self) -> None:
        if self.command_bar.filter:
            self.clear_filter()
            return
        self.command_bar.open_filter()

    def _apply_sort(self, sort: Optional[TableSort], status: str) -> None:
        self._preserve_selected()
        self.table_sort = sort
        self.command_bar.set_status_text(status)
        self.refresh()

    def cycle_sort(self) -> None:
        if self.view_mode != "table":
            return
        sort = next_sort(self.table_sort)
        self._apply_sort(sort, sort.label())

    def reverse_sort(self) -> None:
        if self.view_mode != "table" or self.table_sort is None:
            return
        sort = reverse_sort(self.table_sort)
        self._apply_sort(sort, sort.label())

    def cancel(self) -> None:
        """Esc: clear the filter, then the table sort, otherwise close the prompt."""
        if should_clear_filter_on_cancel(bool(self.command_bar.filter), self.command_bar.state):
            self.clear_filter()
            return
        if self.view_mode == "table" and self.command_bar.is_idle and self.table_sort is not None:
            self._apply_sort(None, TABLE_SORT_CLEARED_STATUS)
            return
        self.command_bar.cancel()

    # File

    def load(self) -> None:
        self.session.load()
        self.command_bar.set_status_text(self.session.status)
        self.refresh()

    def poll_external_change(self) -> bool:
        previous = self.continuity.state
        self._preserve_selected()
        if not self.session.check_external_change():
            self.continuity.state = previous
            return False
        self.command_bar.set_status_text(self.session.status)
        self.refresh()
        return True


__all__ = ["KanbanBoard", "TABLE_SORT_CLEARED_STATUS"]
