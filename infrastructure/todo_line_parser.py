import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from core import (
    PRIORITY_TAG_KEY,
    MetadataTag,
    ParsedTodoFile,
    ParsedTodoLine,
    TodoItem,
    UnparseableTodoItem,
    is_date,
    is_priority,
)

LINE_SPLIT_PATTERN = re.compile(r"\r?\n")

ERROR_BLANK_LINE = "Line is blank or whitespace-only"
ERROR_MALFORMED_PRIORITY = "Malformed priority token"
ERROR_MISSING_COMPLETION_DATE = "Completed task is missing a valid completion date"
ERROR_MISSING_DESCRIPTION = "Task description is missing"


class TodoLineParser:
    PRIORITY_TOKEN_PATTERN = re.compile(r"^\(([A-Z])\)$")
    PROJECT_TAG_PATTERN = re.compile(r"^\+([^\s+]+)$")
    CONTEXT_TAG_PATTERN = re.compile(r"^@([^\s@]+)$")
    METADATA_TAG_PATTERN = re.compile(r"^([A-Za-z][\w-]*):(\S+)$", re.ASCII)

    @staticmethod
    def _error(raw: str, line_number: int, message: str) -> UnparseableTodoItem:
        return UnparseableTodoItem(line_number=line_number, raw=raw, error=message)

    @classmethod
    def parse_line(cls, raw: str, line_number: int) -> ParsedTodoLine:
        """Parse one line into a TodoItem or an UnparseableTodoItem.

        Never raises: grammar and schema failures both come back as
        UnparseableTodoItem with a readable `error`. Blank input is reported
        as unparseable here; whole-file loading drops blank lines before
        they reach this method.
        """
        trimmed = raw.strip()
        if not trimmed:
            return cls._error(raw, line_number, ERROR_BLANK_LINE)

        tokens = trimmed.split()
        index = 0
        completed = False
        parenthesized_priority: Optional[str] = None
        completion_date: Optional[str] = None
        creation_date: Optional[str] = None

        if tokens[index] == "x":
            completed = True
            index += 1

        token = tokens[index] if index < len(tokens) else None
        if token is not None:
            match = cls.PRIORITY_TOKEN_PATTERN.match(token)
            if match:
                parenthesized_priority = match.group(1)
                index += 1
            elif token.startswith("("):
                return cls._error(raw, line_number, ERROR_MALFORMED_PRIORITY)

        if completed:
            token = tokens[index] if index < len(tokens) else None
            if not is_date(token):
                return cls._error(raw, line_number, ERROR_MISSING_COMPLETION_DATE)
            completion_date = token
            index += 1

        token = tokens[index] if index < len(tokens) else None
        if is_date(token):
            creation_date = token
            index += 1

        description_tokens = tokens[index:]
        if not description_tokens:
            return cls._error(raw, line_number, ERROR_MISSING_DESCRIPTION)

        words, projects, contexts, metadata = cls._classify_tokens(description_tokens)
        if not words:
            return cls._error(raw, line_number, ERROR_MISSING_DESCRIPTION)

        if completed:
            priority = next(
                (tag.value for tag in metadata if tag.key == PRIORITY_TAG_KEY and is_priority(tag.value)),
                None,
            )
        else:
            priority = parenthesized_priority

        item = TodoItem(
            line_number=line_number,
            raw=raw,
            description=" ".join(words),
            completed=completed,
            priority=priority,
            creation_date=creation_date,
            completion_date=completion_date,
            projects=projects,
            contexts=contexts,
            metadata=metadata,
            dirty=False,
        )
        try:
            item.validate()
        except ValueError as exc:
            return cls._error(raw, line_number, str(exc) or "Invalid todo item")
        return item

    @classmethod
    def _classify_tokens(
        cls, tokens: Iterable[str]
    ) -> Tuple[List[str], List[str], List[str], List[MetadataTag]]:
        words: List[str] = []
        projects: List[str] = []
        contexts: List[str] = []
        metadata: List[MetadataTag] = []
        for token in tokens:
            match = cls.PROJECT_TAG_PATTERN.match(token)
            if match:
                projects.append(match.group(1))
                continue
            match = cls.CONTEXT_TAG_PATTERN.match(token)
            if match:
                contexts.append(match.group(1))
                continue
            match = cls.METADATA_TAG_PATTERN.match(token)
            if match:
                metadata.append(MetadataTag(key=match.group(1), value=match.group(2)))
                continue
            words.append(token)
        return words, projects, contexts, metadata

    @classmethod
    def parse_lines(cls, lines: Iterable[Tuple[int, str]]) -> ParsedTodoFile:
        """Parse numbered raw lines, skipping blank ones entirely."""
        parsed = ParsedTodoFile()
        for line_number, raw in lines:
            if not raw.strip():
                continue
            result = cls.parse_line(raw, line_number)
            if isinstance(result, TodoItem):
                parsed.items.append(result)
            else:
                parsed.errors.append(result)
        return parsed

    @classmethod
    def parse_text(cls, content: str) -> ParsedTodoFile:
        return cls.parse_lines(split_numbered_lines(content))

    @classmethod
    def parse(cls, filepath: Path) -> ParsedTodoFile:
        if not filepath.exists():
            return ParsedTodoFile()
        return cls.parse_text(filepath.read_text(encoding="utf-8"))


def split_numbered_lines(content: str) -> List[Tuple[int, str]]:
    """Split on LF or CRLF and number lines from 1, blank lines included."""
    return [(index + 1, line) for index, line in enumerate(LINE_SPLIT_PATTERN.split(content))]


def parse_todo_line(raw: str, line_number: int) -> ParsedTodoLine:
    return TodoLineParser.parse_line(raw, line_number)


def parse_all(lines: Iterable[Tuple[int, str]]) -> ParsedTodoFile:
    return TodoLineParser.parse_lines(lines)


def parse_todo_text(content: str) -> ParsedTodoFile:
    return TodoLineParser.parse_text(content)


__all__ = [
    "TodoLineParser",
    "ERROR_BLANK_LINE",
    "ERROR_MALFORMED_PRIORITY",
    "ERROR_MISSING_COMPLETION_DATE",
    "ERROR_MISSING_DESCRIPTION",
    "split_numbered_lines",
    "parse_todo_line",
    "parse_all",
    "parse_todo_text",
]
