"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import concurrent.futures
from pathlib import Path
from typing import Any, Callable, Sequence

import pytest

import ghostwriter.core.config as config_mod
from ghostwriter.editor.document import EditorMode, Position


class FakeEditor:
    """In-memory editor implementing the document surface used by the pipeline."""

    def __init__(self, text: str = "", cursor: tuple[int, int] = (0, 0), filetype: str = "python") -> None:
        self.lines = text.split("\n")
        self.cursor = Position(*cursor)
        self.mode = EditorMode.INSERT
        self.filetype = filetype
        self.overlays: dict[int, tuple[int, int, str, list[str]]] = {}
        self._next_handle = 1

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def get_cursor(self) -> Position:
        return self.cursor

    def get_lines(self, start: int, end: int) -> list[str]:
        return self.lines[max(0, start):max(0, end)]

    def line_count(self) -> int:
        return len(self.lines)

    def set_text(self, start_line: int, start_column: int, end_line: int, end_column: int, lines: Sequence[str]) -> None:
        prefix = self.lines[start_line][:start_column]
        suffix = self.lines[end_line][end_column:]
        replacement = list(lines) or [""]
        replacement[0] = prefix + replacement[0]
        replacement[-1] = replacement[-1] + suffix
        self.lines[start_line:end_line + 1] = replacement

    def set_cursor(self, line: int, column: int) -> None:
        self.cursor = Position(line, column)

    def create_overlay(self, line: int, column: int, text: str, extra_lines: Sequence[str]) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self.overlays[handle] = (line, column, text, list(extra_lines))
        return handle

    def remove_overlay(self, handle: int) -> None:
        del self.overlays[handle]

    def current_mode(self) -> EditorMode:
        return self.mode

    def filetype_label(self) -> str:
        return self.filetype


class DeferredWorkers:
    """Stands in for BackgroundWorkers; futures resolve only when a test says so."""

    def __init__(self) -> None:
        self.calls: list[tuple[Callable, tuple, concurrent.futures.Future]] = []
        self.closed = False

    def submit(self, key: str, func: Callable, *args: Any, **kwargs: Any) -> concurrent.futures.Future | None:
        if self.closed:
            return None
        future: concurrent.futures.Future = concurrent.futures.Future()
        self.calls.append((func, args, future))
        return future

    def resolve(self, index: int, text: str | None = None, error: BaseException | None = None) -> None:
        func, args, future = self.calls[index]
        if error is not None:
            future.set_exception(error)
        elif text is not None:
            future.set_result(text)
        else:
            try:
                future.set_result(func(*args))
            except Exception as exc:  # noqa: BLE001
                future.set_exception(exc)

    def shutdown(self, wait: bool = False) -> None:  # noqa: ARG002
        self.closed = True


class FakeClient:
    def __init__(self, text: str = "") -> None:
        self.text = text
        self.prompts: list[Any] = []

    def complete(self, prompt: Any) -> str:
        self.prompts.append(prompt)
        return self.text


@pytest.fixture
def fake_editor() -> Callable[..., FakeEditor]:
    return FakeEditor


@pytest.fixture
def workers() -> DeferredWorkers:
    return DeferredWorkers()


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path: Path) -> Path:
    """Keep ConfigManager away from the real user configuration."""

    config_root = tmp_path / "config"
    monkeypatch.setattr(config_mod, "CONFIG_DIR", config_root)
    monkeypatch.setattr(config_mod, "USER_SETTINGS_PATH", config_root / "settings.yaml")
    monkeypatch.delenv(config_mod.API_KEY_ENV, raising=False)
    return config_root


@pytest.fixture(scope="session")
def qt_app():
    """Provide a shared QApplication instance for widget tests."""

    widgets = pytest.importorskip("PySide6.QtWidgets")
    return widgets.QApplication.instance() or widgets.QApplication([])
