"""Main window hosting a single editor with inline AI suggestions."""
from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtGui import QKeySequence
from PySide6.QtWidgets import QFileDialog, QLabel, QMainWindow, QStatusBar

from ghostwriter.ai.ai_inline import COMPLETE_COMMAND, TOGGLE_COMMAND, InlineCompletionController
from ghostwriter.core.config import CompletionSettings, ConfigManager
from ghostwriter.core.events import CommandRegistry
from ghostwriter.editor.code_editor import CodeEditor
from ghostwriter.ui.commands.registry import CommandActionDefinition, CommandActionRegistry

AI_ACTIONS = [
    CommandActionDefinition(COMPLETE_COMMAND, "Request Completion", "Ctrl+Space"),
    CommandActionDefinition(TOGGLE_COMMAND, "Toggle Suggestions", "Ctrl+Alt+G"),
]


class StudioStatusBar(QStatusBar):
    def __init__(self) -> None:
        super().__init__()
        self.ai_label = QLabel("AI: idle")
        self.addPermanentWidget(self.ai_label)

    def show_message(self, message: str, level: int = logging.INFO) -> None:
        timeout = 8000 if level >= logging.WARNING else 3000
        super().showMessage(message, timeout)

    def show_phase(self, phase: str) -> None:
        self.ai_label.setText(f"AI: {phase}")


class MainWindow(QMainWindow):
    def __init__(self, config: ConfigManager, path: Path | None = None) -> None:
        super().__init__()
        self.config = config
        self.commands = CommandRegistry()
        self.editor = CodeEditor(path, self, config=config)
        self.setCentralWidget(self.editor)

        self.status = StudioStatusBar()
        self.setStatusBar(self.status)

        self.completion = InlineCompletionController(
            self.editor, CompletionSettings.from_config(config), parent=self
        )
        self.completion.notification.connect(self.status.show_message)
        self.completion.phaseChanged.connect(self.status.show_phase)
        self.completion.register_commands(self.commands)
        self.completion.attach()

        self.action_registry = CommandActionRegistry(self, self.commands)
        self.action_registry.bulk_register(AI_ACTIONS)
        self._build_menus()
        self._update_title()
        self.editor.document().modificationChanged.connect(lambda _modified: self._update_title())
        self.resize(1000, 720)

    def _build_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        open_action = file_menu.addAction("Open...")
        open_action.setShortcut(QKeySequence.Open)
        open_action.triggered.connect(self._open_file)
        save_action = file_menu.addAction("Save")
        save_action.setShortcut(QKeySequence.Save)
        save_action.triggered.connect(self._save_file)

        ai_menu = self.menuBar().addMenu("&AI")
        for action in self.action_registry.build().values():
            ai_menu.addAction(action)

    def _open_file(self) -> None:
        filename, _ = QFileDialog.getOpenFileName(self, "Open File")
        if filename:
            self.editor.load_file(Path(filename))
            self._update_title()

    def _save_file(self) -> None:
        if not self.editor.path:
            filename, _ = QFileDialog.getSaveFileName(self, "Save File")
            if not filename:
                return
            self.editor.save(Path(filename))
        else:
            self.editor.save()
        self.status.show_message(f"Saved {self.editor.path}")
        self._update_title()

    def _update_title(self) -> None:
        name = self.editor.path.name if self.editor.path else "untitled"
        dirty = "*" if self.editor.is_dirty() else ""
        self.setWindowTitle(f"{name}{dirty} - Ghostwriter")

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.completion.shutdown()
        super().closeEvent(event)
