"""Editor surface consumed by the inline completion pipeline.

Positions are zero-based ``(line, column)`` pairs where ``column`` counts
characters within the line. Anything implementing :class:`EditorAdapter` can
host inline suggestions; :class:`ghostwriter.editor.code_editor.CodeEditor`
is the Qt implementation.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, NamedTuple, Protocol, Sequence


class Position(NamedTuple):
    line: int
    column: int


class EditorMode(str, Enum):
    INSERT = "insert"
    NORMAL = "normal"
    READ_ONLY = "read_only"


KeyHandler = Callable[[], bool]


class EditorAdapter(Protocol):
    def get_cursor(self) -> Position: ...

    def get_lines(self, start: int, end: int) -> Sequence[str]:
        """Return lines ``start`` up to (not including) ``end``."""
        ...

    def line_count(self) -> int: ...

    def set_text(
        self, start_line: int, start_column: int, end_line: int, end_column: int, lines: Sequence[str]
    ) -> None:
        """Replace the given range with ``lines`` joined by newlines."""
        ...

    def set_cursor(self, line: int, column: int) -> None: ...

    def create_overlay(self, line: int, column: int, text: str, extra_lines: Sequence[str]) -> Any: ...

    def remove_overlay(self, handle: Any) -> None: ...

    def current_mode(self) -> EditorMode: ...

    def filetype_label(self) -> str: ...
