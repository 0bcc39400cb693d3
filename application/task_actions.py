"""Line-list mutators handed to TodoSession.mutate.

Each builder returns `mutator(items, errors) -> lines` with the result ordered
by line number; the session renumbers and persists it.
"""

from typing import Callable, List, Optional, Sequence

from core import ParsedTodoLine, TodoItem, UnparseableTodoItem
from application import mutations

Mutator = Callable[[List[TodoItem], List[UnparseableTodoItem]], List[ParsedTodoLine]]
ItemTransform = Callable[[TodoItem], TodoItem]


def by_line_number(lines: Sequence[ParsedTodoLine]) -> List[ParsedTodoLine]:
    return sorted(lines, key=lambda line: line.line_number)


def apply_to_line(line_number: int, transform: ItemTransform) -> Mutator:
    def mutator(items: List[TodoItem], errors: List[UnparseableTodoItem]) -> List[ParsedTodoLine]:
        updated = [transform(item) if item.line_number == line_number else item for item in items]
        return by_line_number([*updated, *errors])

    return mutator


def toggle_completion_at(line_number: int) -> Mutator:
    return apply_to_line(line_number, mutations.toggle_completion)


def toggle_doing_at(line_number: int) -> Mutator:
    return apply_to_line(line_number, mutations.toggle_doing)


def change_priority_at(line_number: int, priority: Optional[str]) -> Mutator:
    return apply_to_line(line_number, lambda item: mutations.change_priority(item, priority))


def change_description_at(line_number: int, description: str) -> Mutator:
    return apply_to_line(line_number, lambda item: mutations.change_description(item, description))


def change_dates_at(line_number: int, creation_date: Optional[str], completion_date: Optional[str] = None) -> Mutator:
    return apply_to_line(line_number, lambda item: mutations.change_dates(item, creation_date, completion_date))


def next_line_number(lines: Sequence[ParsedTodoLine]) -> int:
    return max((line.line_number for line in lines), default=0) + 1


def add_line(description: str, priority: Optional[str] = None) -> Mutator:
    def mutator(items: List[TodoItem], errors: List[UnparseableTodoItem]) -> List[ParsedTodoLine]:
        existing: List[ParsedTodoLine] = [*items, *errors]
        created = mutations.add_task(next_line_number(existing), description, priority)
        return by_line_number([*existing, created])

    return mutator


def delete_line(line_number: int) -> Mutator:
    def mutator(items: List[TodoItem], errors: List[UnparseableTodoItem]) -> List[ParsedTodoLine]:
        kept: List[ParsedTodoLine] = [line for line in [*items, *errors] if line.line_number != line_number]
        return by_line_number(kept)

    return mutator


def remove_completed(items: List[TodoItem], errors: List[UnparseableTodoItem]) -> List[ParsedTodoLine]:
    active, _ = mutations.partition_completed(items)
    return by_line_number([*active, *errors])


class TaskActions:
    """User-level edits on the selected line; every method returns a status message."""

    NO_SELECTION = "No selectable task"

    def __init__(self, session):
        self.session = session

    @staticmethod
    def _todo(selected: Optional[ParsedTodoLine]) -> Optional[TodoItem]:
        return selected if isinstance(selected, TodoItem) else None

    def _apply(self, selected: Optional[ParsedTodoLine], build: Callable[[int], Mutator], message: str) -> str:
        item = self._todo(selected)
        if item is None:
            return self.NO_SELECTION
        self.session.mutate(build(item.line_number))
        return message

    def toggle_completion(self, selected: Optional[ParsedTodoLine]) -> str:
        return self._apply(selected, toggle_completion_at, "Toggled completion")

    def toggle_doing(self, selected: Optional[ParsedTodoLine]) -> str:
        item = self._todo(selected)
        if item is not None and item.completed:
            return "Only backlog/doing tasks can be toggled"
        return self._apply(selected, toggle_doing_at, "Toggled doing status")

    def change_priority(self, selected: Optional[ParsedTodoLine], priority: Optional[str]) -> str:
        return self._apply(selected, lambda number: change_priority_at(number, priority), "Priority updated")

    def change_description(self, selected: Optional[ParsedTodoLine], description: str) -> str:
        return self._apply(
            selected, lambda number: change_description_at(number, description), "Description updated"
        )

    def change_dates(
        self,
        selected: Optional[ParsedTodoLine],
        creation_date: Optional[str],
        completion_date: Optional[str] = None,
    ) -> str:
        return self._apply(
            selected,
            lambda number: change_dates_at(number, creation_date, completion_date),
            "Date updated",
        )

    def add(self, description: str, priority: Optional[str] = None) -> str:
        self.session.mutate(add_line(description, priority))
        return "Task added"

    def delete(self, selected: Optional[ParsedTodoLine]) -> str:
        if selected is None:
            return self.NO_SELECTION
        existed = self.session.find(selected.line_number) is not None
        self.session.mutate(delete_line(selected.line_number))
        return "Task deleted" if existed else "Task no longer exists"

    def clean_completed(self) -> str:
        """Append completed tasks to the done file, then drop them from the todo file."""
        completed = mutations.partition_completed(self.session.items).completed
        if not completed:
            return "No completed tasks to clean"
        if not self.session.append_to_done(completed):
            return self.session.status
        if not self.session.mutate(remove_completed):
            return f"{self.session.status}: {len(completed)} task(s) already in done file, remove them before retrying"
        return f"Moved {len(completed)} completed task(s)"


__all__ = [
    "Mutator",
    "by_line_number",
    "apply_to_line",
    "toggle_completion_at",
    "toggle_doing_at",
    "change_priority_at",
    "change_description_at",
    "change_dates_at",
    "next_line_number",
    "add_line",
    "delete_line",
    "remove_completed",
    "TaskActions",
]
