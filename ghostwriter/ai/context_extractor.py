"""Context assembly for inline completion prompts."""
from __future__ import annotations

from dataclasses import dataclass

from ghostwriter.editor.document import EditorAdapter, Position

DEFAULT_WINDOW_LINES = 100


@dataclass(frozen=True)
class CompletionContext:
    """Code around the cursor that is sent to the model."""

    preceding: str
    following: str
    anchor: Position


def extract_context(editor: EditorAdapter, window_lines: int = DEFAULT_WINDOW_LINES) -> CompletionContext:
    """Read up to ``window_lines`` lines on either side of the cursor.

    The preceding text ends exactly at the cursor and the following text starts
    there, so the model is asked to fill the gap between them. The cursor
    column is clamped to the current line length.
    """

    line, column = editor.get_cursor()
    window_lines = max(0, window_lines)
    current = (editor.get_lines(line, line + 1) or [""])[0]
    column = max(0, min(column, len(current)))

    start = max(0, line - window_lines)
    preceding = "\n".join(editor.get_lines(start, line))
    if preceding:
        preceding += "\n"
    preceding += current[:column]

    end = min(line + 1 + window_lines, editor.line_count())
    following_lines = list(editor.get_lines(line + 1, end))
    following = "\n".join([current[column:], *following_lines])

    return CompletionContext(preceding=preceding, following=following, anchor=Position(line, column))
