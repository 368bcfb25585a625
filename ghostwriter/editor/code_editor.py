"""Plain text code editor that can display inline ghost text suggestions."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QColor, QFont, QKeyEvent, QKeySequence, QPainter, QTextCursor
from PySide6.QtWidgets import QPlainTextEdit

from ghostwriter.core.config import ConfigManager
from ghostwriter.editor.document import EditorMode, KeyHandler, Position

FILETYPES = {
    ".py": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".jsx": "javascriptreact",
    ".ts": "typescript",
    ".tsx": "typescriptreact",
    ".rs": "rust",
    ".go": "go",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".hpp": "cpp",
    ".cs": "cs",
    ".rb": "ruby",
    ".lua": "lua",
    ".sh": "sh",
    ".html": "html",
    ".css": "css",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".md": "markdown",
    ".sql": "sql",
}


@dataclass
class GhostOverlay:
    line: int
    column: int
    text: str
    extra_lines: list[str] = field(default_factory=list)


def normalize_key(key: str) -> str:
    """Canonical text form of a key sequence (``"tab"`` -> ``"Tab"``)."""

    return QKeySequence(key).toString()


# Qt positions count UTF-16 code units; the editor surface counts code points.
def code_point_column(text: str, units: int) -> int:
    encoded = text.encode("utf-16-le")[: max(0, units) * 2]
    return len(encoded.decode("utf-16-le", errors="ignore"))


def utf16_column(text: str, column: int) -> int:
    column = max(0, min(column, len(text)))
    return len(text[:column].encode("utf-16-le")) // 2


class CodeEditor(QPlainTextEdit):
    textEdited = Signal()
    cursorMoved = Signal()
    modeLeft = Signal()
    documentReplaced = Signal()

    GHOST_COLOR = QColor(150, 150, 150, 200)

    def __init__(self, path: Path | None = None, parent=None, *, config: ConfigManager | None = None) -> None:
        super().__init__(parent)
        self.path = path
        self.config = config
        self._mode = EditorMode.INSERT
        self._loading_document = False
        self._filetype_override: str | None = None
        self._overlays: dict[int, GhostOverlay] = {}
        self._next_overlay_id = 1
        self._key_bindings: dict[str, KeyHandler] = {}

        editor_config = self.config.get("editor", {}) if self.config else {}
        self.setLineWrapMode(QPlainTextEdit.NoWrap)
        self.setFont(QFont(editor_config.get("font_family", "JetBrains Mono"), editor_config.get("font_size", 11)))
        tab_size = editor_config.get("tab_size", 4)
        self.setTabStopDistance(self.fontMetrics().horizontalAdvance(" " * tab_size))

        self.textChanged.connect(self._on_text_changed)
        self.cursorPositionChanged.connect(self.cursorMoved.emit)

        if path and path.exists():
            self.load_file(path)

    # File operations --------------------------------------------------
    def load_file(self, path: Path) -> None:
        self.path = path
        self._loading_document = True
        try:
            with path.open("r", encoding="utf-8") as handle:
                self.setPlainText(handle.read())
        finally:
            self._loading_document = False
        self.document().setModified(False)
        self.documentReplaced.emit()

    def save(self, path: Path | None = None) -> None:
        target = path or self.path
        if not target:
            return
        with target.open("w", encoding="utf-8") as handle:
            handle.write(self.toPlainText())
        self.path = target
        self.document().setModified(False)

    def is_dirty(self) -> bool:
        return bool(self.document().isModified())

    # Document surface -------------------------------------------------
    def get_cursor(self) -> Position:
        cursor = self.textCursor()
        text = cursor.block().text()
        return Position(cursor.blockNumber(), code_point_column(text, cursor.positionInBlock()))

    def get_lines(self, start: int, end: int) -> list[str]:
        document = self.document()
        start = max(0, start)
        end = min(end, document.blockCount())
        return [document.findBlockByNumber(number).text() for number in range(start, end)]

    def line_count(self) -> int:
        return self.document().blockCount()

    def set_text(
        self, start_line: int, start_column: int, end_line: int, end_column: int, lines: Sequence[str]
    ) -> None:
        cursor = QTextCursor(self.document())
        cursor.setPosition(self._offset(start_line, start_column))
        cursor.setPosition(self._offset(end_line, end_column), QTextCursor.KeepAnchor)
        cursor.beginEditBlock()
        cursor.insertText("\n".join(lines))
        cursor.endEditBlock()

    def set_cursor(self, line: int, column: int) -> None:
        cursor = self.textCursor()
        cursor.setPosition(self._offset(line, column))
        self.setTextCursor(cursor)

    def current_mode(self) -> EditorMode:
        if self.isReadOnly():
            return EditorMode.READ_ONLY
        return self._mode

    def set_filetype(self, label: str | None) -> None:
        self._filetype_override = label

    def filetype_label(self) -> str:
        if self._filetype_override:
            return self._filetype_override
        if self.path:
            return FILETYPES.get(self.path.suffix.lower(), self.path.suffix.lstrip(".").lower() or "text")
        return "text"

    def _offset(self, line: int, column: int) -> int:
        document = self.document()
        line = max(0, min(line, document.blockCount() - 1))
        block = document.findBlockByNumber(line)
        return block.position() + utf16_column(block.text(), column)

    # Overlays ---------------------------------------------------------
    def create_overlay(self, line: int, column: int, text: str, extra_lines: Sequence[str]) -> int:
        handle = self._next_overlay_id
        self._next_overlay_id += 1
        self._overlays[handle] = GhostOverlay(line, column, text, list(extra_lines))
        self.viewport().update()
        return handle

    def remove_overlay(self, handle: int) -> None:
        del self._overlays[handle]
        self.viewport().update()

    def overlays(self) -> list[GhostOverlay]:
        return list(self._overlays.values())

    def paintEvent(self, event) -> None:  # type: ignore[override]
        super().paintEvent(event)
        if self._overlays:
            self._paint_overlays()

    def _paint_overlays(self) -> None:
        painter = QPainter(self.viewport())
        metrics = self.fontMetrics()
        background = self.palette().base().color()
        painter.setFont(self.font())
        for overlay in self._overlays.values():
            block = self.document().findBlockByNumber(overlay.line)
            if not block.isValid() or not block.isVisible():
                continue
            cursor = QTextCursor(block)
            cursor.setPosition(block.position() + utf16_column(block.text(), overlay.column))
            rect = self.cursorRect(cursor)
            line_height = metrics.height()

            width = metrics.horizontalAdvance(overlay.text)
            painter.fillRect(rect.left(), rect.top(), width, line_height, background)
            painter.setPen(self.GHOST_COLOR)
            painter.drawText(rect.left(), rect.top() + metrics.ascent(), overlay.text)

            left = int(self.blockBoundingGeometry(block).translated(self.contentOffset()).left())
            top = rect.top() + line_height
            for index, extra in enumerate(overlay.extra_lines):
                y = top + index * line_height
                painter.fillRect(left, y, self.viewport().width() - left, line_height, background)
                painter.drawText(left + int(self.document().documentMargin()), y + metrics.ascent(), extra)
        painter.end()

    # Input ------------------------------------------------------------
    def register_key_binding(self, key: str, handler: KeyHandler) -> None:
        """Run ``handler`` for ``key``; the key is consumed when it returns True."""

        self._key_bindings[normalize_key(key)] = handler

    def keyPressEvent(self, event: QKeyEvent) -> None:  # type: ignore[override]
        if event.key() == Qt.Key_Escape and self._mode is EditorMode.INSERT:
            self._leave_insert_mode()
            return
        if event.text() and self._mode is EditorMode.NORMAL:
            self._mode = EditorMode.INSERT

        handler = self._key_bindings.get(QKeySequence(event.keyCombination()).toString())
        if handler and handler():
            event.accept()
            return
        super().keyPressEvent(event)

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        self._mode = EditorMode.INSERT
        super().mousePressEvent(event)

    def focusOutEvent(self, event) -> None:  # type: ignore[override]
        super().focusOutEvent(event)
        if self._mode is EditorMode.INSERT:
            self._leave_insert_mode()

    def _leave_insert_mode(self) -> None:
        self._mode = EditorMode.NORMAL
        self.modeLeft.emit()

    def _on_text_changed(self) -> None:
        if self._loading_document:
            return
        self.textEdited.emit()
