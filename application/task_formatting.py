"""Display strings shared by cards, table cells and height estimation."""

from typing import Optional, Sequence

from core import MetadataTag, TodoItem


def format_done_line(item: TodoItem) -> str:
    return " ".join(segment for segment in ("x", item.completion_date, item.creation_date, item.description) if segment)


def format_active_line(item: TodoItem) -> str:
    prefix = f"({item.priority}) " if item.priority else ""
    created = f"{item.creation_date} " if item.creation_date else ""
    return f"{prefix}{created}{item.description}"


def format_primary_line(item: TodoItem) -> str:
    return format_done_line(item) if item.completed else format_active_line(item)


def format_done_callout(item: TodoItem) -> Optional[str]:
    # Only an active item can still hold a stale completion date.
    if not item.completed and item.completion_date:
        return f"done: {item.completion_date}"
    return None


def format_projects(projects: Sequence[str]) -> str:
    return " ".join(f"+{value}" for value in projects)


def format_contexts(contexts: Sequence[str]) -> str:
    return " ".join(f"@{value}" for value in contexts)


def format_meta(metadata: Sequence[MetadataTag]) -> str:
    return " ".join(tag.to_token() for tag in metadata)


def unparseable_header(line_number: int) -> str:
    return f"Unparseable line {line_number}"


__all__ = [
    "format_done_line",
    "format_active_line",
    "format_primary_line",
    "format_done_callout",
    "format_projects",
    "format_contexts",
    "format_meta",
    "unparseable_header",
]
