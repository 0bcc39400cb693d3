from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple

from core import ParsedTodoFile, ParsedTodoLine


class TodoRepository(Protocol):
    def read_lines(self) -> List[Tuple[int, str]]:
        ...

    def load(self) -> ParsedTodoFile:
        ...

    def save(self, lines: Sequence[ParsedTodoLine]) -> None:
        ...

    def append_lines(self, lines: Sequence[ParsedTodoLine], path: Optional[Path] = None) -> None:
        ...

    def compute_signature(self) -> Optional[Tuple[int, int]]:
        ...

    def consume_self_write(self) -> bool:
        ...
