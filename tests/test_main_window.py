from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("PySide6.QtWidgets")

from ghostwriter.ai.ai_inline import COMPLETE_COMMAND, TOGGLE_COMMAND
from ghostwriter.core.config import ConfigManager
from ghostwriter.ui.main_window import MainWindow


@pytest.fixture
def window(qt_app, tmp_path: Path):
    source = tmp_path / "script.py"
    source.write_text("import os\n", encoding="utf-8")
    main_window = MainWindow(ConfigManager(), source)
    yield main_window
    main_window.completion.shutdown()
    main_window.deleteLater()


def test_ai_actions_are_built_with_shortcuts(window) -> None:
    complete = window.action_registry.action(COMPLETE_COMMAND)
    toggle = window.action_registry.action(TOGGLE_COMMAND)

    assert complete is not None and toggle is not None
    assert complete.shortcut().toString() == "Ctrl+Space"
    assert toggle.shortcut().toString() == "Ctrl+Alt+G"
    assert window.windowTitle() == "script.py - Ghostwriter"


def test_toggle_action_reports_on_status_bar(window) -> None:
    window.action_registry.trigger(TOGGLE_COMMAND)

    assert window.completion.settings.show_suggestions is False
    assert window.status.currentMessage() == "Suggestions disabled"


def test_title_marks_unsaved_changes(window) -> None:
    window.editor.insertPlainText("x")

    assert window.windowTitle() == "script.py* - Ghostwriter"
