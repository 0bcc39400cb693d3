"""Render parsed todo lines back to todo.txt text."""

from typing import Iterable, List

from core import PRIORITY_TAG_KEY, ParsedTodoLine, TodoItem


def serialize_todo_item(item: TodoItem) -> str:
    """Clean items keep their source text; dirty items are re-rendered.

    Render order: x, (P) for active items, completion date, creation date,
    description, +projects, @contexts, key:value tags, then pri:P last for
    completed items. Stored `pri` tags are never emitted directly so the
    priority is encoded exactly once.
    """
    if not item.dirty:
        return item.raw

    segments: List[str] = []
    if item.completed:
        segments.append("x")
    if item.priority and not item.completed:
        segments.append(f"({item.priority})")
    if item.completed and item.completion_date:
        segments.append(item.completion_date)
    if item.creation_date:
        segments.append(item.creation_date)
    if item.description:
        segments.append(item.description)
    segments.extend(f"+{project}" for project in item.projects)
    segments.extend(f"@{context}" for context in item.contexts)
    segments.extend(tag.to_token() for tag in item.metadata if tag.key != PRIORITY_TAG_KEY)
    if item.completed and item.priority:
        segments.append(f"{PRIORITY_TAG_KEY}:{item.priority}")
    return " ".join(segments)


def serialize_line(line: ParsedTodoLine) -> str:
    if isinstance(line, TodoItem):
        return serialize_todo_item(line)
    return line.raw


def serialize_all(lines: Iterable[ParsedTodoLine]) -> str:
    """Join serialized lines with LF; no trailing newline is added here."""
    return "\n".join(serialize_line(line) for line in lines)


__all__ = ["serialize_todo_item", "serialize_line", "serialize_all"]
