"""Splice an accepted suggestion into the document."""
from __future__ import annotations

from ghostwriter.ai.session import SessionState
from ghostwriter.core.logging import get_logger
from ghostwriter.editor.document import EditorAdapter, Position
from ghostwriter.editor.suggestion_renderer import SuggestionRenderer


def cursor_after_insert(anchor: Position, lines: list[str]) -> Position:
    """Cursor position right after inserting ``lines`` at ``anchor``."""

    if len(lines) == 1:
        return Position(anchor.line, anchor.column + len(lines[0]))
    return Position(anchor.line + len(lines) - 1, len(lines[-1]))


class AcceptHandler:
    """Handles the accept key while a suggestion may be on screen."""

    def __init__(self, editor: EditorAdapter, state: SessionState, renderer: SuggestionRenderer) -> None:
        self.editor = editor
        self.state = state
        self.renderer = renderer
        self.logger = get_logger(__name__)

    def accept(self) -> bool:
        """Insert the suggestion; ``False`` lets the key fall through."""

        text = self.state.suggestion_text
        anchor = self.state.suggestion_anchor
        if text is None or anchor is None:
            return False

        lines = text.split("\n")
        # The insert emits edit events that clear the suggestion, so the
        # overlay goes first while the state is still ours.
        self.renderer.clear()
        self.editor.set_text(anchor.line, anchor.column, anchor.line, anchor.column, lines)
        target = cursor_after_insert(anchor, lines)
        self.editor.set_cursor(target.line, target.column)
        self.renderer.clear()
        self.logger.debug("Accepted %d line suggestion at %s", len(lines), tuple(anchor))
        return True
