"""Bottom command bar: prompts, confirmations, the active filter and status text."""

from dataclasses import dataclass, replace
from typing import Literal, Optional, Union

from core import is_date, is_priority

InputKind = Literal["add-priority", "add-description", "priority", "filter", "edit-description", "edit-date"]
ConfirmKind = Literal["quit", "delete"]
DateField = Literal["creation", "completion"]

READY_STATUS = "Ready"
FILTER_CLEARED_STATUS = "Filter cleared"
DESCRIPTION_REQUIRED_STATUS = "Description is required"

ADD_PRIORITY_PROMPT = "Add task priority (A-Z, Enter to skip): "
ADD_DESCRIPTION_PROMPT = "Task description: "
PRIORITY_PROMPT = "Set priority (A-Z, Enter to clear): "
FILTER_PROMPT = "Filter tasks (Enter to apply, Esc to clear): "
EDIT_DESCRIPTION_PROMPT = "Edit task description: "
QUIT_PROMPT = "Quit? (y/q/Q to quit, n/Esc to cancel)"


@dataclass(frozen=True)
class IdleMode:
    mode: Literal["idle"] = "idle"


@dataclass(frozen=True)
class HelpMode:
    mode: Literal["help"] = "help"


@dataclass(frozen=True)
class ConfirmMode:
    kind: ConfirmKind
    prompt: str
    mode: Literal["confirm"] = "confirm"


@dataclass(frozen=True)
class InputMode:
    kind: InputKind
    prompt: str
    value: str = ""
    add_priority: Optional[str] = None
    # edit-date only
    completed: bool = False
    active_date_field: DateField = "creation"
    creation_date: Optional[str] = None
    completion_date: Optional[str] = None
    mode: Literal["input"] = "input"


CommandBarState = Union[IdleMode, HelpMode, ConfirmMode, InputMode]


@dataclass(frozen=True)
class SubmitAction:
    """Result of Enter: `type` is one of none, add, change-priority,
    change-description, change-dates, set-filter, quit."""

    type: str = "none"
    priority: Optional[str] = None
    description: Optional[str] = None
    creation_date: Optional[str] = None
    completion_date: Optional[str] = None
    value: Optional[str] = None


NO_ACTION = SubmitAction()


def date_prompt(active_date_field: DateField, completed: bool) -> str:
    if not completed:
        return "Edit created date (YYYY-MM-DD, Enter to clear): "
    if active_date_field == "completion":
        return "Edit completed date (YYYY-MM-DD, Tab to switch to created): "
    return "Edit created date (YYYY-MM-DD, Tab to switch to completed): "


def _parse_priority_input(value: str) -> Optional[str]:
    letter = value.strip().upper()
    return letter if is_priority(letter) else None


def should_clear_filter_on_cancel(has_filter: bool, state: CommandBarState) -> bool:
    if not has_filter:
        return False
    return isinstance(state, IdleMode) or (isinstance(state, InputMode) and state.kind == "filter")


class CommandBar:
    def __init__(self) -> None:
        self.state: CommandBarState = IdleMode()
        self.status_text: str = READY_STATUS
        self.filter: Optional[str] = None

    @property
    def mode(self) -> str:
        return self.state.mode

    @property
    def is_idle(self) -> bool:
        return isinstance(self.state, IdleMode)

    def set_status_text(self, value: str) -> None:
        self.status_text = value

    def _idle(self) -> None:
        self.state = IdleMode()

    # Openers

    def open_add(self) -> None:
        self.state = InputMode(kind="add-priority", prompt=ADD_PRIORITY_PROMPT)

    def open_change_priority(self) -> None:
        self.state = InputMode(kind="priority", prompt=PRIORITY_PROMPT)

    def open_filter(self) -> None:
        self.state = InputMode(kind="filter", prompt=FILTER_PROMPT, value=self.filter or "")

    def open_edit_description(self, description: str) -> None:
        self.state = InputMode(kind="edit-description", prompt=EDIT_DESCRIPTION_PROMPT, value=description)

    def open_edit_dates(
        self,
        completed: bool,
        creation_date: Optional[str] = None,
        completion_date: Optional[str] = None,
    ) -> None:
        """Completed tasks start on the completion field, active ones on creation."""
        field: DateField = "completion" if completed else "creation"
        value = (completion_date if field == "completion" else creation_date) or ""
        self.state = InputMode(
            kind="edit-date",
            prompt=date_prompt(field, completed),
            value=value,
            completed=completed,
            active_date_field=field,
            creation_date=creation_date or None,
            completion_date=completion_date or None,
        )

    def open_help(self) -> None:
        self.state = HelpMode()

    def dismiss_help(self) -> None:
        self._idle()

    def open_quit_confirm(self) -> None:
        self.state = ConfirmMode(kind="quit", prompt=QUIT_PROMPT)

    def open_delete_confirm(self, description: str) -> None:
        self.state = ConfirmMode(
            kind="delete",
            prompt=f'Are you sure you want to delete task "{description}"? (y/Y to delete, Esc to cancel)',
        )

    # Filter

    def clear_filter(self) -> None:
        self.filter = None
        self._idle()
        self.status_text = FILTER_CLEARED_STATUS

    def toggle_filter(self) -> None:
        if self.filter:
            self.clear_filter()
            return
        self.open_filter()

    def cancel(self) -> None:
        if should_clear_filter_on_cancel(bool(self.filter), self.state):
            self.clear_filter()
            return
        self._idle()

    # Text editing

    def _set_value(self, value: str) -> None:
        state = self.state
        if not isinstance(state, InputMode):
            return
        if state.kind != "edit-date":
            self.state = replace(state, value=value)
        elif state.active_date_field == "completion":
            self.state = replace(state, value=value, completion_date=value or None)
        else:
            self.state = replace(state, value=value, creation_date=value or None)

    def append_input(self, text: str) -> None:
        if isinstance(self.state, InputMode):
            self._set_value(self.state.value + text)

    def backspace(self) -> None:
        if isinstance(self.state, InputMode):
            self._set_value(self.state.value[:-1])

    def tab(self) -> None:
        """Switch between created/completed fields (completed tasks only)."""
        state = self.state
        if not isinstance(state, InputMode) or state.kind != "edit-date" or not state.completed:
            return
        field: DateField = "creation" if state.active_date_field == "completion" else "completion"
        value = (state.completion_date if field == "completion" else state.creation_date) or ""
        self.state = replace(state, active_date_field=field, prompt=date_prompt(field, state.completed), value=value)

    # Submit

    def _reject_date(self, state: InputMode, prompt_error: str, status: str) -> SubmitAction:
        self.state = replace(state, prompt=f"{prompt_error} {date_prompt(state.active_date_field, state.completed)}")
        self.status_text = status
        return NO_ACTION

    def _submit_dates(self, state: InputMode) -> SubmitAction:
        value = state.value.strip()
        creation = (value or None) if state.active_date_field == "creation" else state.creation_date
        completion = (value or None) if state.active_date_field == "completion" else state.completion_date
        if creation and not is_date(creation):
            return self._reject_date(state, "Invalid created date.", "Created date must be YYYY-MM-DD")
        if not state.completed:
            self._idle()
            return SubmitAction(type="change-dates", creation_date=creation)
        if not completion:
            return self._reject_date(
                state, "Completed date is required.", "Completed date is required for done tasks"
            )
        if not is_date(completion):
            return self._reject_date(state, "Invalid completed date.", "Completed date must be YYYY-MM-DD")
        self._idle()
        return SubmitAction(type="change-dates", creation_date=creation, completion_date=completion)

    def submit(self) -> SubmitAction:
        state = self.state
        if isinstance(state, ConfirmMode):
            return SubmitAction(type="quit") if state.kind == "quit" else NO_ACTION
        if not isinstance(state, InputMode):
            return NO_ACTION

        if state.kind == "filter":
            next_filter = state.value.strip() or None
            self.filter = next_filter
            self.status_text = f"Filter: {next_filter}" if next_filter else FILTER_CLEARED_STATUS
            self._idle()
            return SubmitAction(type="set-filter", value=next_filter)

        if state.kind == "priority":
            self._idle()
            return SubmitAction(type="change-priority", priority=_parse_priority_input(state.value))

        if state.kind == "add-priority":
            self.state = InputMode(
                kind="add-description",
                prompt=ADD_DESCRIPTION_PROMPT,
                add_priority=_parse_priority_input(state.value),
            )
            return NO_ACTION

        if state.kind in ("add-description", "edit-description"):
            description = state.value.strip()
            if not description:
                self.status_text = DESCRIPTION_REQUIRED_STATUS
                return NO_ACTION
            self._idle()
            if state.kind == "add-description":
                return SubmitAction(type="add", priority=state.add_priority, description=description)
            return SubmitAction(type="change-description", description=description)

        if state.kind == "edit-date":
            return self._submit_dates(state)

        return NO_ACTION


__all__ = [
    "CommandBar",
    "CommandBarState",
    "IdleMode",
    "HelpMode",
    "ConfirmMode",
    "InputMode",
    "SubmitAction",
    "date_prompt",
    "should_clear_filter_on_cancel",
]
