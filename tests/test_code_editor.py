"""Widget tests for the Qt editor and its wiring to the controller."""
from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("PySide6.QtWidgets")

from PySide6.QtCore import Qt
from PySide6.QtGui import QTextCursor
from PySide6.QtTest import QTest

from ghostwriter.ai.ai_inline import InlineCompletionController
from ghostwriter.core.config import CompletionSettings
from ghostwriter.editor.code_editor import CodeEditor, code_point_column, utf16_column
from ghostwriter.editor.document import EditorMode, Position


@pytest.fixture
def editor(qt_app):
    widget = CodeEditor()
    widget.setPlainText("first line\nsecond line\nthird")
    yield widget
    widget.deleteLater()


def test_document_surface(editor) -> None:
    editor.set_cursor(1, 6)

    assert editor.get_cursor() == Position(1, 6)
    assert editor.line_count() == 3
    assert editor.get_lines(0, 2) == ["first line", "second line"]
    assert editor.get_lines(2, 10) == ["third"]


def test_set_text_inserts_multiple_lines(editor) -> None:
    editor.set_text(0, 5, 0, 5, [" new", "inserted"])

    assert editor.toPlainText() == "first new\ninserted line\nsecond line\nthird"


def test_set_cursor_clamps_to_line(editor) -> None:
    editor.set_cursor(2, 99)

    assert editor.get_cursor() == Position(2, 5)


def test_overlays_are_tracked_by_handle(editor) -> None:
    handle = editor.create_overlay(0, 10, "ghost", ["more"])

    assert editor.overlays()[0].text == "ghost"
    editor.remove_overlay(handle)
    assert editor.overlays() == []
    with pytest.raises(KeyError):
        editor.remove_overlay(handle)


def test_key_binding_consumes_or_falls_through(editor) -> None:
    consume = {"value": True}
    calls: list[int] = []

    def handler() -> bool:
        calls.append(1)
        return consume["value"]

    editor.register_key_binding("tab", handler)
    editor.set_cursor(2, 5)
    QTest.keyClick(editor, Qt.Key_Tab)
    assert editor.get_lines(2, 3) == ["third"]

    consume["value"] = False
    QTest.keyClick(editor, Qt.Key_Tab)
    assert editor.get_lines(2, 3) == ["third\t"]
    assert len(calls) == 2


def test_escape_leaves_insert_mode(editor) -> None:
    left: list[bool] = []
    editor.modeLeft.connect(lambda: left.append(True))

    QTest.keyClick(editor, Qt.Key_Escape)
    assert editor.current_mode() is EditorMode.NORMAL
    assert left == [True]

    QTest.keyClicks(editor, "x")
    assert editor.current_mode() is EditorMode.INSERT

    editor.setReadOnly(True)
    assert editor.current_mode() is EditorMode.READ_ONLY


def test_filetype_label_from_path(qt_app, tmp_path: Path) -> None:
    source = tmp_path / "module.py"
    source.write_text("print('hi')\n", encoding="utf-8")

    widget = CodeEditor(source)

    assert widget.filetype_label() == "python"
    assert widget.toPlainText() == "print('hi')\n"
    assert not widget.is_dirty()
    widget.set_filetype("cython")
    assert widget.filetype_label() == "cython"
    assert CodeEditor().filetype_label() == "text"


def test_save_writes_document(qt_app, tmp_path: Path) -> None:
    target = tmp_path / "out.lua"
    widget = CodeEditor()
    widget.setPlainText("local x = 1")

    widget.save(target)

    assert target.read_text(encoding="utf-8") == "local x = 1"
    assert widget.filetype_label() == "lua"


def test_suggestion_round_trip_through_widget(editor, workers, fake_client) -> None:
    settings = CompletionSettings(api_key="k", debounce_ms=60_000)
    controller = InlineCompletionController(editor, settings, client=fake_client, workers=workers)
    controller.attach()

    editor.setPlainText("")
    QTest.keyClicks(editor, "def total(items):")
    QTest.keyClick(editor, Qt.Key_Return)
    assert controller.request_completion()
    workers.resolve(0, text="return sum(items)")

    assert [overlay.text for overlay in editor.overlays()] == ["return sum(items)"]

    QTest.keyClick(editor, Qt.Key_Tab)

    assert editor.toPlainText() == "def total(items):\nreturn sum(items)"
    assert editor.get_cursor() == Position(1, 17)
    assert editor.overlays() == []
    assert controller.state.suggestion_text is None
    controller.shutdown()


def test_cursor_movement_in_widget_clears_suggestion(editor, workers, fake_client) -> None:
    settings = CompletionSettings(api_key="k", debounce_ms=60_000)
    controller = InlineCompletionController(editor, settings, client=fake_client, workers=workers)
    controller.attach()
    editor.set_cursor(2, 5)

    controller.request_completion()
    workers.resolve(0, text="ly")
    assert editor.overlays()

    editor.set_cursor(0, 0)

    assert editor.overlays() == []
    assert controller.state.decoration_handle is None
    controller.shutdown()


@pytest.mark.parametrize(
    "text,column,units",
    [("plain", 3, 3), ('s = "😀" + ', 10, 11), ("😀😀", 1, 2), ("ab", 9, 2)],
)
def test_column_conversion(text: str, column: int, units: int) -> None:
    assert utf16_column(text, column) == units
    assert code_point_column(text, units) == min(column, len(text))


def test_columns_count_code_points_after_astral_characters(editor) -> None:
    editor.setPlainText('s = "😀" + ')
    editor.moveCursor(QTextCursor.End)

    assert editor.get_cursor() == Position(0, 10)

    editor.set_cursor(0, 6)
    assert editor.textCursor().positionInBlock() == 7
    editor.set_text(0, 6, 0, 6, ["!"])
    assert editor.toPlainText() == 's = "😀!" + '


def test_accept_after_emoji_lands_at_cursor(editor, workers, fake_client) -> None:
    settings = CompletionSettings(api_key="k", debounce_ms=60_000)
    controller = InlineCompletionController(editor, settings, client=fake_client, workers=workers)
    controller.attach()
    editor.setPlainText('s = "😀" + ')
    editor.moveCursor(QTextCursor.End)

    assert controller.request_completion()
    workers.resolve(0, text="x")
    QTest.keyClick(editor, Qt.Key_Tab)

    assert editor.toPlainText() == 's = "😀" + x'
    assert editor.get_cursor() == Position(0, 11)
    controller.shutdown()


def test_loading_a_file_discards_in_flight_response(editor, workers, fake_client, tmp_path: Path) -> None:
    settings = CompletionSettings(api_key="k", debounce_ms=60_000)
    controller = InlineCompletionController(editor, settings, client=fake_client, workers=workers)
    controller.attach()
    editor.setPlainText("def total(items):")
    editor.moveCursor(QTextCursor.End)
    other = tmp_path / "b.py"
    other.write_text("import os\n", encoding="utf-8")

    assert controller.request_completion()
    editor.load_file(other)
    workers.resolve(0, text=" return sum(items)")

    assert editor.overlays() == []
    assert controller.state.suggestion_text is None
    assert controller.state.request_in_flight is False
    assert controller.on_accept_key() is False
    assert editor.toPlainText() == "import os\n"
    controller.shutdown()
