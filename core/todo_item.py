import re
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Union

DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
PRIORITY_PATTERN = re.compile(r"^[A-Z]$")

PRIORITY_TAG_KEY = "pri"
STATUS_TAG_KEY = "status"
STATUS_DOING_VALUE = "doing"


def is_date(value: Optional[str]) -> bool:
    return bool(value) and DATE_PATTERN.match(value) is not None


def is_priority(value: Optional[str]) -> bool:
    return bool(value) and PRIORITY_PATTERN.match(value) is not None


@dataclass(frozen=True)
class MetadataTag:
    key: str
    value: str

    def to_token(self) -> str:
        return f"{self.key}:{self.value}"


@dataclass
class TodoItem:
    """A structured todo.txt line.

    `raw` is the exact source text. While `dirty` is False the serializer emits
    `raw` verbatim; once any mutation touches the item it is re-rendered from
    the structured fields instead.

    `priority` holds the letter regardless of how it was encoded on disk:
    `(X)` prefix for active lines, `pri:X` tag for completed ones.
    """

    line_number: int
    raw: str
    description: str
    completed: bool = False
    priority: Optional[str] = None
    creation_date: Optional[str] = None
    completion_date: Optional[str] = None
    projects: List[str] = field(default_factory=list)
    contexts: List[str] = field(default_factory=list)
    metadata: List[MetadataTag] = field(default_factory=list)
    dirty: bool = False

    kind: Literal["todo"] = field(default="todo", init=False, repr=False)

    def validate(self) -> None:
        """Raise ValueError when the item breaks a structural invariant."""
        if self.priority is not None and not is_priority(self.priority):
            raise ValueError(f"priority must be a single letter A-Z, got {self.priority!r}")
        if self.creation_date is not None and not is_date(self.creation_date):
            raise ValueError(f"creation date must be YYYY-MM-DD, got {self.creation_date!r}")
        if self.completion_date is not None and not is_date(self.completion_date):
            raise ValueError(f"completion date must be YYYY-MM-DD, got {self.completion_date!r}")
        if self.completed and not self.completion_date:
            raise ValueError("completed task must carry a completion date")
        if not self.description.strip():
            raise ValueError("Task description is missing")
        for tag in self.metadata:
            if not tag.key or not tag.value:
                raise ValueError(f"metadata tag must have key and value, got {tag!r}")

    def metadata_value(self, key: str) -> Optional[str]:
        for tag in self.metadata:
            if tag.key == key:
                return tag.value
        return None

    def has_tag(self, key: str, value: str) -> bool:
        return any(tag.key == key and tag.value == value for tag in self.metadata)

    @property
    def is_doing(self) -> bool:
        return self.metadata_value(STATUS_TAG_KEY) == STATUS_DOING_VALUE


@dataclass
class UnparseableTodoItem:
    """A line that failed the grammar or schema check; kept verbatim."""

    line_number: int
    raw: str
    error: str

    kind: Literal["unparseable"] = field(default="unparseable", init=False, repr=False)


ParsedTodoLine = Union[TodoItem, UnparseableTodoItem]


@dataclass
class ParsedTodoFile:
    items: List[TodoItem] = field(default_factory=list)
    errors: List[UnparseableTodoItem] = field(default_factory=list)

    def lines(self) -> List[ParsedTodoLine]:
        """All entries merged back into file order."""
        merged: List[ParsedTodoLine] = [*self.items, *self.errors]
        merged.sort(key=lambda line: line.line_number)
        return merged


__all__ = [
    "DATE_PATTERN",
    "PRIORITY_PATTERN",
    "PRIORITY_TAG_KEY",
    "STATUS_TAG_KEY",
    "STATUS_DOING_VALUE",
    "MetadataTag",
    "TodoItem",
    "UnparseableTodoItem",
    "ParsedTodoLine",
    "ParsedTodoFile",
    "is_date",
    "is_priority",
]
