"""Full-screen prompt_toolkit host for the kanban board."""

import logging
from pathlib import Path
from typing import Optional

from prompt_toolkit.application import Application
from prompt_toolkit.cursor_shapes import CursorShape, SimpleCursorShapeConfig
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.containers import DynamicContainer
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension

from core import ParsedTodoLine, TodoItem
from application.columns import COLUMN_KEYS, COLUMN_TITLES
from application.table_sort import get_sort_value
from application.todo_session import TodoSession
from infrastructure.file_repository import FileTodoRepository
from interface.card_layout import (
    card_content_width,
    card_text_lines,
    get_visible_card_count,
)
from interface.command_bar import ConfirmMode, HelpMode, InputMode
from interface.kanban_board import KanbanBoard
from interface.tui_display import ellipsize, pad_display, wrap_display
from interface.tui_themes import DEFAULT_THEME, build_style
from util.responsive import ResponsiveLayoutManager

logger = logging.getLogger("ttkb.app")

REFRESH_INTERVAL_SECONDS = 1.0
HINTS = "←→↑↓ move  x done  d doing  a add  e edit  ; dates  p priority  f filter  v view  s/. sort  c clean  ? help  Q quit"
HELP_LINES = [
    "Arrows / hjkl   move selection",
    "x               toggle done",
    "d               toggle doing",
    "a               add task",
    "e               edit description",
    ";               edit dates",
    "p               set priority",
    "f               filter (Esc clears)",
    "v               switch cards / table",
    "s / .           cycle sort column / reverse (table)",
    "c               move done tasks to done.txt",
    "Del / Ctrl-D    delete task",
    "Q               quit",
    "",
    "Press any key to close",
]
TABLE_HEADERS = {
    "status": "Status",
    "priority": "P",
    "created": "Created",
    "project": "Project",
    "context": "Context",
    "meta": "Meta",
    "description": "Description",
}


def cursor_shape_config(style: str, blink: bool) -> Optional[SimpleCursorShapeConfig]:
    """None for an unknown or "native" style leaves the terminal cursor alone."""
    shapes = {
        "block": (CursorShape.BLOCK, CursorShape.BLINKING_BLOCK),
        "bar": (CursorShape.BEAM, CursorShape.BLINKING_BEAM),
        "underline": (CursorShape.UNDERLINE, CursorShape.BLINKING_UNDERLINE),
    }
    if style not in shapes:
        return None
    steady, blinking = shapes[style]
    return SimpleCursorShapeConfig(blinking if blink else steady)


TAG_LINE_STYLES = (
    ("projects: ", "class:tag.project"),
    ("contexts: ", "class:tag.context"),
    ("meta: ", "class:tag.meta"),
)


def _line_style(task: ParsedTodoLine, index: int, line: str) -> str:
    if not isinstance(task, TodoItem):
        return "class:error" if index == 0 else "class:error.text"
    if index == 0:
        return "class:done" if task.completed else "class:text"
    for prefix, style in TAG_LINE_STYLES:
        if line.startswith(prefix):
            return style
    return "class:text.dim"


def render_card(task: ParsedTodoLine, width: int, selected: bool, indent: str = " ") -> StyleAndTextTuples:
    """Bordered card `width` cells wide (content width = width - 4)."""
    inner = max(1, width - 4)
    border = "class:border.selected" if selected else "class:border"
    fragments: StyleAndTextTuples = [(border, indent + "╭" + "─" * (width - 2) + "╮\n")]
    for index, line in enumerate(card_text_lines(task)):
        for chunk in wrap_display(line, inner):
            fragments.append((border, indent + "│ "))
            fragments.append((_line_style(task, index, line), pad_display(chunk, inner)))
            fragments.append((border, " │\n"))
    fragments.append((border, indent + "╰" + "─" * (width - 2) + "╯\n"))
    if not isinstance(task, TodoItem):
        fragments.append(("", "\n"))
    return fragments


class KanbanApp:
    def __init__(
        self,
        todo_path: Path,
        theme: str = DEFAULT_THEME,
        cursor_style: str = "native",
        cursor_blink: bool = False,
    ):
        self.repository = FileTodoRepository(todo_path)
        self.board = KanbanBoard(TodoSession(self.repository))
        self.style = build_style(theme)
        self.board.load()

        board = self.board
        kb = KeyBindings()
        help_active = Condition(lambda: isinstance(board.command_bar.state, HelpMode))
        confirm_active = Condition(lambda: isinstance(board.command_bar.state, ConfirmMode))
        input_active = Condition(lambda: isinstance(board.command_bar.state, InputMode))
        idle = Condition(lambda: board.command_bar.is_idle)

        def confirm_kind() -> Optional[str]:
            state = board.command_bar.state
            return state.kind if isinstance(state, ConfirmMode) else None

        @kb.add(Keys.Any, filter=help_active)
        def _(event):
            board.command_bar.dismiss_help()

        @kb.add(Keys.Any, filter=confirm_active)
        def _(event):
            key = event.data
            kind = confirm_kind()
            if kind == "quit" and key in ("y", "q", "Q"):
                board.confirm()
            elif kind == "delete" and key in ("y", "Y"):
                board.confirm()
            elif key == "n":
                board.cancel()
            self._exit_if_requested(event)

        @kb.add("escape", filter=confirm_active | input_active | idle)
        def _(event):
            board.cancel()

        @kb.add("enter", filter=input_active)
        def _(event):
            board.submit()
            self._exit_if_requested(event)

        @kb.add("tab", filter=input_active)
        def _(event):
            board.command_bar.tab()

        @kb.add("backspace", filter=input_active)
        @kb.add("c-h", filter=input_active)
        def _(event):
            board.command_bar.backspace()

        @kb.add(Keys.Any, filter=input_active)
        def _(event):
            if event.data.isprintable():
                board.command_bar.append_input(event.data)

        @kb.add("up", filter=idle)
        @kb.add("k", filter=idle)
        def _(event):
            board.move_vertical(-1)

        @kb.add("down", filter=idle)
        @kb.add("j", filter=idle)
        def _(event):
            board.move_vertical(1)

        @kb.add("left", filter=idle)
        @kb.add("h", filter=idle)
        def _(event):
            board.move_horizontal(-1)

        @kb.add("right", filter=idle)
        @kb.add("l", filter=idle)
        def _(event):
            board.move_horizontal(1)

        @kb.add("delete", filter=idle)
        @kb.add("c-d", filter=idle)
        def _(event):
            board.open_delete_confirm()

        bindings = {
            "x": board.toggle_done,
            "d": board.toggle_doing,
            "a": board.open_add,
            "e": board.open_edit_description,
            ";": board.open_edit_dates,
            "p": board.open_priority,
            "s": board.cycle_sort,
            ".": board.reverse_sort,
            "f": board.toggle_filter,
            "v": board.toggle_view,
            "c": board.clean_completed,
            "?": board.command_bar.open_help,
            "Q": board.command_bar.open_quit_confirm,
        }
        for key, handler in bindings.items():
            kb.add(key, filter=idle)(lambda event, handler=handler: handler())

        self.title_bar = Window(content=FormattedTextControl(self.get_title_text), height=1, always_hide_cursor=True)
        self.sub_header = Window(content=FormattedTextControl(self.get_sub_header_text), height=1, always_hide_cursor=True)
        self.columns_body = VSplit(
            [
                Window(
                    content=FormattedTextControl(lambda key=key: self.get_column_text(key)),
                    always_hide_cursor=True,
                    wrap_lines=False,
                    width=lambda key=key: Dimension.exact(self.board.metrics.column_widths[key]),
                )
                for key in COLUMN_KEYS
            ]
        )
        self.table_body = Window(content=FormattedTextControl(self.get_table_text), always_hide_cursor=True, wrap_lines=False)
        self.help_body = Window(content=FormattedTextControl(self.get_help_text), always_hide_cursor=True)
        self.body_container = DynamicContainer(self._resolve_body_container)
        self.command_line = Window(
            content=FormattedTextControl(self.get_command_text, focusable=True, show_cursor=True),
            height=1,
            always_hide_cursor=~input_active,
        )
        self.hints = Window(content=FormattedTextControl(self.get_hints_text), height=1, always_hide_cursor=True)
        root = HSplit([self.title_bar, self.sub_header, self.body_container, self.command_line, self.hints])

        self.app = Application(
            layout=Layout(root, focused_element=self.command_line),
            key_bindings=kb,
            style=self.style,
            full_screen=True,
            refresh_interval=REFRESH_INTERVAL_SECONDS,
            cursor=cursor_shape_config(cursor_style, cursor_blink),
        )
        self.app.ttimeoutlen = 0.05
        self.app.before_render += self._before_render

    def _exit_if_requested(self, event) -> None:
        if self.board.should_exit:
            event.app.exit()

    def _before_render(self, app) -> None:
        size = app.output.get_size()
        self.board.resize(size.rows, size.columns)
        self.board.poll_external_change()

    def _resolve_body_container(self):
        if isinstance(self.board.command_bar.state, HelpMode):
            return self.help_body
        if self.board.view_mode == "table":
            return self.table_body
        return self.columns_body

    # Text producers

    def get_title_text(self) -> StyleAndTextTuples:
        board = self.board
        parts = [("class:header", " ttkb "), ("class:text.dim", f" {self.repository.todo_path}  [{board.view_mode}]")]
        if board.command_bar.filter:
            parts.append(("class:prompt", f"  filter: {board.command_bar.filter}"))
        if board.table_sort is not None and board.view_mode == "table":
            parts.append(("class:text.dim", f"  {board.table_sort.label()}"))
        return parts

    def get_sub_header_text(self) -> StyleAndTextTuples:
        if self.board.view_mode != "table":
            return [("", "")]
        layout = ResponsiveLayoutManager.select_layout(self.board.terminal_width)
        widths = layout.calculate_widths(self.board.terminal_width)
        cells = [pad_display(TABLE_HEADERS[col], widths[col]) for col in layout.columns]
        return [("class:table.header", " " + " ".join(cells))]

    def get_column_text(self, key: str) -> StyleAndTextTuples:
        board = self.board
        metrics = board.metrics
        tasks = board.columns[key]
        is_selected_column = board.cards.column_key == key
        column_width = metrics.column_widths[key]
        header_style = "class:header.active" if is_selected_column else "class:header"
        fragments: StyleAndTextTuples = [
            (header_style, pad_display(f" {COLUMN_TITLES[key]} ({len(tasks)})", column_width) + "\n")
        ]
        offset = board.scroll_offset if is_selected_column else 0
        content_width = card_content_width(column_width)
        count = get_visible_card_count(tasks, offset, metrics.card_visible_rows, content_width)
        card_width = max(5, column_width - 2)
        for index in range(offset, offset + count):
            selected = is_selected_column and index == board.cards.index and board.view_mode == "cards"
            fragments.extend(render_card(tasks[index], card_width, selected))
        return fragments

    def get_table_text(self) -> StyleAndTextTuples:
        board = self.board
        rows = board.rows
        if not rows:
            return [("class:text.dim", " No tasks")]
        layout = ResponsiveLayoutManager.select_layout(board.terminal_width)
        widths = layout.calculate_widths(board.terminal_width)
        visible = board.metrics.table_visible_count
        fragments: StyleAndTextTuples = []
        for index in range(board.scroll_offset, min(len(rows), board.scroll_offset + visible)):
            row = rows[index]
            cells = [ellipsize(get_sort_value(row, col), widths[col]) for col in layout.columns]
            line = " " + " ".join(pad_display(cell, widths[col]) for cell, col in zip(cells, layout.columns))
            if index == board.table.index:
                style = "class:selected"
            elif not isinstance(row.task, TodoItem):
                style = "class:error.text"
            elif row.status == "done":
                style = "class:done"
            else:
                style = "class:text"
            fragments.append((style, line + "\n"))
        return fragments

    def get_help_text(self) -> StyleAndTextTuples:
        return [("class:header", " Keys\n")] + [("class:text", f"  {line}\n") for line in HELP_LINES]

    def get_command_text(self) -> StyleAndTextTuples:
        state = self.board.command_bar.state
        if isinstance(state, InputMode):
            return [("class:prompt", state.prompt), ("class:text", state.value), ("[SetCursorPosition]", ""), ("", " ")]
        if isinstance(state, ConfirmMode):
            return [("class:prompt", state.prompt)]
        style = "class:error" if self.board.session.error else "class:status"
        return [(style, self.board.status_line())]

    def get_hints_text(self) -> StyleAndTextTuples:
        return [("class:text.dim", ellipsize(HINTS, max(1, self.board.terminal_width)))]

    def run(self) -> None:
        logger.debug("starting board for %s", self.repository.todo_path)
        self.app.run()


__all__ = ["KanbanApp", "cursor_shape_config", "render_card"]
