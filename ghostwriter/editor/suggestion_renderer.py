"""Ghost text projection of the current suggestion onto the editor."""
from __future__ import annotations

from ghostwriter.ai.session import SessionState
from ghostwriter.core.logging import get_logger
from ghostwriter.editor.document import EditorAdapter, Position


def _display_lines(text: str) -> list[str]:
    lines = text.split("\n")
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return lines


class SuggestionRenderer:
    """Draws and removes the overlay for the session's suggestion."""

    def __init__(self, editor: EditorAdapter, state: SessionState) -> None:
        self.editor = editor
        self.state = state
        self.logger = get_logger(__name__)

    def render(self, text: str, line: int, column: int) -> bool:
        """Show ``text`` at ``(line, column)``; returns ``True`` if drawn.

        Nothing is drawn when the cursor has left ``line`` in the meantime or
        when the suggestion has no visible content.
        """

        self.clear()
        if not text:
            return False
        if self.editor.get_cursor().line != line:
            self.logger.debug("Cursor left line %d before rendering; dropping suggestion", line)
            return False

        current = (self.editor.get_lines(line, line + 1) or [""])[0]
        column = max(0, min(column, len(current)))
        lines = _display_lines(text)
        if not lines:
            return False

        self.state.suggestion_text = text
        self.state.suggestion_anchor = Position(line, column)
        self.state.decoration_handle = self.editor.create_overlay(line, column, lines[0], lines[1:])
        return True

    def clear(self) -> None:
        handle = self.state.decoration_handle
        if handle is not None:
            try:
                self.editor.remove_overlay(handle)
            except (KeyError, RuntimeError):
                self.logger.debug("Overlay %r already gone", handle)
            self.state.decoration_handle = None
        self.state.suggestion_text = None
        self.state.suggestion_anchor = None
