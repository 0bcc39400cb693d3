import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from core import ParsedTodoFile, ParsedTodoLine
from application.ports import TodoRepository
from infrastructure.todo_line_parser import TodoLineParser, split_numbered_lines
from infrastructure.todo_serializer import serialize_all

logger = logging.getLogger("ttkb.persistence")

NEWLINE = "\n"
DONE_FILE_NAME = "done.txt"


def ensure_trailing_newline(content: str) -> str:
    if not content or content.endswith(NEWLINE):
        return content
    return content + NEWLINE


def write_text_atomic(target: Path, content: str) -> None:
    """Write content so concurrent readers see either the old or the new file.

    Content goes to a temporary sibling first and is renamed over the target.
    When the rename fails (e.g. across devices) the temp file is copied into
    place instead. The temp file is removed on every exit path.
    """
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="",
            delete=False,
            dir=str(target.parent),
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
            tmp_path = Path(tmp.name)
        try:
            os.replace(str(tmp_path), str(target))
            logger.debug("wrote %s (%d bytes)", target, len(content))
        except OSError as exc:
            logger.warning("rename into %s failed (%s); copying temp file instead", target, exc)
            target.write_text(tmp_path.read_text(encoding="utf-8"), encoding="utf-8", newline="")
    finally:
        if tmp_path is not None and tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError as exc:
                logger.warning("could not remove temp file %s: %s", tmp_path, exc)


class SelfWriteGuard:
    """Single-shot suppression of the change notification caused by our own save.

    `arm()` right before writing; the next `consume()` returns True (suppress)
    and disarms. Two external edits racing our write can defeat it; that is
    accepted for a single-user local file.
    """

    def __init__(self) -> None:
        self._armed = False

    @property
    def armed(self) -> bool:
        return self._armed

    def arm(self) -> None:
        self._armed = True

    def consume(self) -> bool:
        if self._armed:
            self._armed = False
            return True
        return False


class FileTodoRepository(TodoRepository):
    def __init__(self, todo_path: Path, done_path: Optional[Path] = None):
        self.todo_path = Path(todo_path).expanduser()
        self.done_path = Path(done_path).expanduser() if done_path else self.todo_path.with_name(DONE_FILE_NAME)
        self.guard = SelfWriteGuard()

    def read_lines(self) -> List[Tuple[int, str]]:
        """Raw lines with 1-based numbers; a missing file reads as no lines."""
        if not self.todo_path.exists():
            return []
        return split_numbered_lines(self.todo_path.read_text(encoding="utf-8"))

    def load(self) -> ParsedTodoFile:
        return TodoLineParser.parse_lines(self.read_lines())

    def save(self, lines: Sequence[ParsedTodoLine]) -> None:
        self.guard.arm()
        write_text_atomic(self.todo_path, ensure_trailing_newline(serialize_all(lines)))

    def append_lines(self, lines: Sequence[ParsedTodoLine], path: Optional[Path] = None) -> None:
        """Append serialized lines to `path` (the done file by default)."""
        target = Path(path) if path else self.done_path
        content = serialize_all(lines)
        if not content:
            return
        existing = target.read_text(encoding="utf-8") if target.exists() else ""
        separator = NEWLINE if existing and not existing.endswith(NEWLINE) else ""
        write_text_atomic(target, ensure_trailing_newline(f"{existing}{separator}{content}"))

    def compute_signature(self) -> Optional[Tuple[int, int]]:
        try:
            stat = self.todo_path.stat()
        except OSError:
            return None
        return stat.st_mtime_ns, stat.st_size

    def consume_self_write(self) -> bool:
        return self.guard.consume()


__all__ = [
    "DONE_FILE_NAME",
    "ensure_trailing_newline",
    "write_text_atomic",
    "SelfWriteGuard",
    "FileTodoRepository",
]
