"""In-memory todo session: the line set, its persistence, and status strings."""

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

from core import ParsedTodoLine, TodoItem, UnparseableTodoItem
from application.ports import TodoRepository
from infrastructure.todo_serializer import serialize_line

logger = logging.getLogger("ttkb.session")

Mutator = Callable[[List[TodoItem], List[UnparseableTodoItem]], Sequence[ParsedTodoLine]]

LOADING_STATUS = "Loading..."
SAVED_STATUS = "Saved"
SAVE_FAILED_STATUS = "Save failed"
LOAD_FAILED_STATUS = "Load failed"


def split_lines(lines: Sequence[ParsedTodoLine]) -> Tuple[List[TodoItem], List[UnparseableTodoItem]]:
    items: List[TodoItem] = []
    errors: List[UnparseableTodoItem] = []
    for line in lines:
        if isinstance(line, TodoItem):
            items.append(line)
        else:
            errors.append(line)
    return items, errors


def renumber(lines: Sequence[ParsedTodoLine]) -> List[ParsedTodoLine]:
    """Assign contiguous 1..N line numbers in the given order."""
    return [replace(line, line_number=index) for index, line in enumerate(lines, start=1)]


def rebase(line: ParsedTodoLine) -> ParsedTodoLine:
    """Snapshot of a line as it now sits on disk."""
    if isinstance(line, TodoItem):
        return replace(line, raw=serialize_line(line), dirty=False)
    return line


class TodoSession:
    """Owns the current line set and routes every change through the repository.

    Persistence errors never escape: they become `status` / `error` strings and
    the in-memory lines stay as they were.
    """

    def __init__(self, repository: TodoRepository):
        self.repository = repository
        self.lines: List[ParsedTodoLine] = []
        self.status: str = LOADING_STATUS
        self.error: Optional[str] = None
        self._signature: Optional[Tuple[int, int]] = None

    @property
    def items(self) -> List[TodoItem]:
        return [line for line in self.lines if isinstance(line, TodoItem)]

    @property
    def errors(self) -> List[UnparseableTodoItem]:
        return [line for line in self.lines if isinstance(line, UnparseableTodoItem)]

    def find(self, line_number: int) -> Optional[ParsedTodoLine]:
        for line in self.lines:
            if line.line_number == line_number:
                return line
        return None

    def load(self) -> bool:
        try:
            parsed = self.repository.load()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("load failed: %s", exc)
            self.error = str(exc) or "Failed to load todo file"
            self.status = LOAD_FAILED_STATUS
            return False
        self.lines = parsed.lines()
        self.status = f"Loaded {len(parsed.items)} tasks"
        self.error = None
        self._signature = self.repository.compute_signature()
        return True

    def mutate(self, mutator: Mutator) -> bool:
        """Apply `mutator(items, errors)`, renumber the result and persist it."""
        items, errors = split_lines(self.lines)
        next_lines = renumber(mutator(items, errors))
        return self.persist(next_lines)

    def persist(self, next_lines: Sequence[ParsedTodoLine]) -> bool:
        try:
            self.repository.save(next_lines)
        except OSError as exc:
            logger.warning("save failed: %s", exc)
            self.error = str(exc) or "Failed to write todo file"
            self.status = SAVE_FAILED_STATUS
            return False
        self.lines = [rebase(line) for line in next_lines]
        self.status = SAVED_STATUS
        self.error = None
        return True

    def append_to_done(self, lines: Sequence[ParsedTodoLine]) -> bool:
        try:
            self.repository.append_lines(lines)
        except OSError as exc:
            logger.warning("append to done file failed: %s", exc)
            self.error = str(exc) or "Failed to write done file"
            self.status = SAVE_FAILED_STATUS
            return False
        return True

    def check_external_change(self) -> bool:
        """Poll the file signature; reload on a change we did not cause.

        Returns True when the lines were reloaded.
        """
        signature = self.repository.compute_signature()
        if signature == self._signature:
            return False
        self._signature = signature
        if self.repository.consume_self_write():
            return False
        return self.load()


__all__ = [
    "Mutator",
    "TodoSession",
    "split_lines",
    "renumber",
    "rebase",
    "LOADING_STATUS",
    "SAVED_STATUS",
    "SAVE_FAILED_STATUS",
    "LOAD_FAILED_STATUS",
]
