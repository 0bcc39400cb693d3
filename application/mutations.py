"""Pure edit operations on TodoItem snapshots.

Every operation returns a new item with `dirty=True`; the argument is never
modified, including its lists.
"""

import re
from dataclasses import replace
from datetime import date
from typing import List, NamedTuple, Optional, Sequence

from core import (
    PRIORITY_TAG_KEY,
    STATUS_DOING_VALUE,
    STATUS_TAG_KEY,
    MetadataTag,
    TodoItem,
)

STATUS_DOING_TOKEN = f"{STATUS_TAG_KEY}:{STATUS_DOING_VALUE}"
PRIORITY_TAG_TOKEN_PATTERN = re.compile(r"^pri:[A-Z]$")


def _today() -> str:
    return date.today().isoformat()


def _updated(item: TodoItem, **changes) -> TodoItem:
    changes.setdefault("projects", list(item.projects))
    changes.setdefault("contexts", list(item.contexts))
    changes.setdefault("metadata", list(item.metadata))
    changes["dirty"] = True
    return replace(item, **changes)


def _without_status_doing(metadata: Sequence[MetadataTag]) -> List[MetadataTag]:
    return [tag for tag in metadata if not (tag.key == STATUS_TAG_KEY and tag.value == STATUS_DOING_VALUE)]


def _without_priority_tag(metadata: Sequence[MetadataTag]) -> List[MetadataTag]:
    return [tag for tag in metadata if tag.key != PRIORITY_TAG_KEY]


def _with_priority_tag(metadata: Sequence[MetadataTag], priority: Optional[str]) -> List[MetadataTag]:
    cleaned = _without_priority_tag(metadata)
    if priority:
        cleaned.append(MetadataTag(PRIORITY_TAG_KEY, priority))
    return cleaned


def _drop_description_tokens(description: str, predicate) -> str:
    return " ".join(token for token in description.split() if not predicate(token))


def toggle_completion(item: TodoItem) -> TodoItem:
    """Flip done state, moving the priority between `(X)` and `pri:X` encodings."""
    if item.completed:
        return _updated(
            item,
            completed=False,
            completion_date=None,
            description=_drop_description_tokens(item.description, PRIORITY_TAG_TOKEN_PATTERN.match),
            metadata=_without_priority_tag(item.metadata),
        )
    return _updated(
        item,
        completed=True,
        completion_date=_today(),
        metadata=_with_priority_tag(_without_status_doing(item.metadata), item.priority),
    )


def toggle_doing(item: TodoItem) -> TodoItem:
    """Add or remove the `status:doing` tag. Callers only use this on active items."""
    if item.has_tag(STATUS_TAG_KEY, STATUS_DOING_VALUE):
        return _updated(
            item,
            description=_drop_description_tokens(item.description, lambda token: token == STATUS_DOING_TOKEN),
            metadata=_without_status_doing(item.metadata),
        )
    metadata = _without_status_doing(item.metadata)
    metadata.append(MetadataTag(STATUS_TAG_KEY, STATUS_DOING_VALUE))
    return _updated(item, metadata=metadata)


def change_priority(item: TodoItem, priority: Optional[str]) -> TodoItem:
    priority = priority or None
    if item.completed:
        metadata = _with_priority_tag(item.metadata, priority)
    else:
        metadata = _without_priority_tag(item.metadata)
    return _updated(item, priority=priority, metadata=metadata)


def change_description(item: TodoItem, description: str) -> TodoItem:
    return _updated(item, description=description.strip())


def change_dates(
    item: TodoItem,
    creation_date: Optional[str],
    completion_date: Optional[str] = None,
) -> TodoItem:
    """Set or clear the creation date; completion date only sticks on done items."""
    changes = {"creation_date": creation_date or None}
    if item.completed and completion_date:
        changes["completion_date"] = completion_date
    return _updated(item, **changes)


def add_task(line_number: int, description: str, priority: Optional[str] = None) -> TodoItem:
    return TodoItem(
        line_number=line_number,
        raw="",
        description=description.strip(),
        completed=False,
        priority=priority or None,
        creation_date=_today(),
        dirty=True,
    )


class Partition(NamedTuple):
    active: List[TodoItem]
    completed: List[TodoItem]


def partition_completed(items: Sequence[TodoItem]) -> Partition:
    active: List[TodoItem] = []
    completed: List[TodoItem] = []
    for item in items:
        (completed if item.completed else active).append(item)
    return Partition(active=active, completed=completed)


__all__ = [
    "toggle_completion",
    "toggle_doing",
    "change_priority",
    "change_description",
    "change_dates",
    "add_task",
    "Partition",
    "partition_completed",
]
