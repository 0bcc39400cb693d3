import os
from pathlib import Path

from core import UnparseableTodoItem
from infrastructure.file_repository import (
    FileTodoRepository,
    SelfWriteGuard,
    ensure_trailing_newline,
    write_text_atomic,
)
from infrastructure.todo_line_parser import parse_todo_line


def test_load_missing_file_is_empty(tmp_path: Path):
    repo = FileTodoRepository(tmp_path / "todo.txt")

    parsed = repo.load()

    assert parsed.items == []
    assert parsed.errors == []
    assert repo.read_lines() == []
    assert repo.compute_signature() is None


def test_done_file_sits_next_to_todo_file(tmp_path: Path):
    repo = FileTodoRepository(tmp_path / "lists" / "todo.txt")

    assert repo.done_path == tmp_path / "lists" / "done.txt"


def test_load_save_roundtrip_keeps_clean_lines_verbatim(tmp_path: Path):
    path = tmp_path / "todo.txt"
    content = "(A)  spaced   task +p\nx broken\nx 2024-01-02 done pri:C\n"
    path.write_text(content, encoding="utf-8")
    repo = FileTodoRepository(path)

    repo.save(repo.load().lines())

    assert path.read_text(encoding="utf-8") == content


def test_save_drops_blank_lines(tmp_path: Path):
    path = tmp_path / "todo.txt"
    path.write_text("first\n\n\nsecond", encoding="utf-8")
    repo = FileTodoRepository(path)

    parsed = repo.load()
    repo.save(parsed.lines())

    assert [item.line_number for item in parsed.items] == [1, 4]
    assert path.read_text(encoding="utf-8") == "first\nsecond\n"


def test_save_empty_line_set_writes_empty_file(tmp_path: Path):
    path = tmp_path / "todo.txt"
    path.write_text("old\n", encoding="utf-8")

    FileTodoRepository(path).save([])

    assert path.read_text(encoding="utf-8") == ""


def test_save_creates_parent_directory(tmp_path: Path):
    path = tmp_path / "nested" / "dir" / "todo.txt"

    FileTodoRepository(path).save([parse_todo_line("task", 1)])

    assert path.read_text(encoding="utf-8") == "task\n"


def test_write_falls_back_to_copy_when_rename_fails(tmp_path: Path, monkeypatch):
    target = tmp_path / "todo.txt"
    target.write_text("old\n", encoding="utf-8")

    def failing_replace(src, dst):
        raise OSError("cross-device link")

    monkeypatch.setattr(os, "replace", failing_replace)
    write_text_atomic(target, "new content\n")

    assert target.read_text(encoding="utf-8") == "new content\n"
    assert list(tmp_path.glob(".todo.txt.*.tmp")) == []


def test_atomic_write_leaves_no_temp_files(tmp_path: Path):
    target = tmp_path / "todo.txt"

    write_text_atomic(target, "a\r\nb\n")

    assert target.read_bytes() == b"a\r\nb\n"
    assert [p.name for p in tmp_path.iterdir()] == ["todo.txt"]


def test_append_lines_adds_separator_when_needed(tmp_path: Path):
    repo = FileTodoRepository(tmp_path / "todo.txt")
    repo.done_path.write_text("x 2024-01-01 old", encoding="utf-8")

    repo.append_lines([parse_todo_line("x 2024-02-01 new", 4)])

    assert repo.done_path.read_text(encoding="utf-8") == "x 2024-01-01 old\nx 2024-02-01 new\n"


def test_append_lines_creates_done_file(tmp_path: Path):
    repo = FileTodoRepository(tmp_path / "todo.txt")

    repo.append_lines(
        [
            parse_todo_line("x 2024-02-01 one", 1),
            UnparseableTodoItem(line_number=2, raw="x odd", error="bad"),
        ]
    )

    assert repo.done_path.read_text(encoding="utf-8") == "x 2024-02-01 one\nx odd\n"


def test_append_nothing_leaves_file_untouched(tmp_path: Path):
    repo = FileTodoRepository(tmp_path / "todo.txt")

    repo.append_lines([])

    assert not repo.done_path.exists()


def test_append_to_explicit_path(tmp_path: Path):
    repo = FileTodoRepository(tmp_path / "todo.txt")
    archive = tmp_path / "archive.txt"

    repo.append_lines([parse_todo_line("x 2024-02-01 one", 1)], path=archive)

    assert archive.read_text(encoding="utf-8") == "x 2024-02-01 one\n"
    assert not repo.done_path.exists()


def test_compute_signature_changes_on_write(tmp_path: Path):
    path = tmp_path / "todo.txt"
    repo = FileTodoRepository(path)

    repo.save([parse_todo_line("short", 1)])
    first = repo.compute_signature()
    repo.save([parse_todo_line("a much longer line of text", 1)])
    second = repo.compute_signature()

    assert first is not None
    assert second is not None
    assert first != second


def test_save_arms_self_write_guard_once(tmp_path: Path):
    repo = FileTodoRepository(tmp_path / "todo.txt")

    assert repo.consume_self_write() is False
    repo.save([parse_todo_line("task", 1)])

    assert repo.consume_self_write() is True
    assert repo.consume_self_write() is False


def test_self_write_guard():
    guard = SelfWriteGuard()
    assert not guard.armed

    guard.arm()
    guard.arm()

    assert guard.armed
    assert guard.consume() is True
    assert guard.consume() is False


def test_ensure_trailing_newline():
    assert ensure_trailing_newline("") == ""
    assert ensure_trailing_newline("a") == "a\n"
    assert ensure_trailing_newline("a\n") == "a\n"
