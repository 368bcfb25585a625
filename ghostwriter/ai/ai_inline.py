"""Inline completion controller for the editor.

The controller owns the suggestion lifecycle: it debounces edits, asks the
backend for a continuation, drops answers that a newer edit has made stale and
hands fresh ones to the renderer. All state changes happen on the Qt thread;
backend calls run on :class:`BackgroundWorkers` and report back through a
signal, which Qt queues onto the thread the controller lives in.
"""
from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass
from functools import partial

from PySide6.QtCore import QObject, QTimer, Signal

from ghostwriter.ai.ai_client import CompletionClient, CompletionError
from ghostwriter.ai.context_extractor import extract_context
from ghostwriter.ai.prompt_builder import PromptBuilder
from ghostwriter.ai.session import SessionState, SuggestionPhase
from ghostwriter.core.config import CompletionSettings
from ghostwriter.core.events import CommandDescriptor, CommandRegistry
from ghostwriter.core.logging import get_logger
from ghostwriter.core.threads import BackgroundWorkers
from ghostwriter.editor.accept_handler import AcceptHandler
from ghostwriter.editor.document import EditorAdapter, EditorMode, Position
from ghostwriter.editor.suggestion_renderer import SuggestionRenderer

TOGGLE_COMMAND = "ghostwriter.toggleSuggestions"
COMPLETE_COMMAND = "ghostwriter.complete"
_TASK_KEY = "inline-completion"


@dataclass(frozen=True)
class PendingRequest:
    request_id: int
    anchor: Position
    future: concurrent.futures.Future


@dataclass(frozen=True)
class CompletionOutcome:
    """Result of one backend call, delivered back on the UI thread."""

    request_id: int
    anchor: Position
    text: str = ""
    error: str | None = None


class InlineCompletionController(QObject):
    phaseChanged = Signal(str)
    notification = Signal(str, int)
    _completionReady = Signal(object)

    def __init__(
        self,
        editor: EditorAdapter,
        settings: CompletionSettings,
        client: CompletionClient | None = None,
        workers: BackgroundWorkers | None = None,
        state: SessionState | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.editor = editor
        self.settings = settings
        self.client = client or CompletionClient(settings)
        self.workers = workers or BackgroundWorkers(max_workers=1)
        self.state = state or SessionState()
        self.prompt_builder = PromptBuilder()
        self.renderer = SuggestionRenderer(editor, self.state)
        self.accept_handler = AcceptHandler(editor, self.state, self.renderer)
        self.pending: PendingRequest | None = None
        self.logger = get_logger(__name__)
        self._last_phase = self.state.phase
        self._completionReady.connect(self._apply_outcome)

    # Wiring -----------------------------------------------------------
    def attach(self) -> None:
        """Subscribe to editor events and report configuration problems."""

        editor = self.editor
        editor.textEdited.connect(self.on_text_changed)  # type: ignore[attr-defined]
        editor.cursorMoved.connect(self.on_cursor_moved)  # type: ignore[attr-defined]
        editor.modeLeft.connect(self.on_mode_left)  # type: ignore[attr-defined]
        editor.documentReplaced.connect(self.on_document_replaced)  # type: ignore[attr-defined]
        editor.register_key_binding(self.settings.accept_key, self.on_accept_key)  # type: ignore[attr-defined]
        for warning in self.settings.validate():
            self.logger.warning(warning)
            self.notification.emit(warning, logging.WARNING)

    def register_commands(self, registry: CommandRegistry) -> None:
        registry.register_command(
            CommandDescriptor(TOGGLE_COMMAND, "Toggle AI Suggestions", "AI", self.toggle_suggestions)
        )
        registry.register_command(
            CommandDescriptor(COMPLETE_COMMAND, "Request AI Completion", "AI", self.request_completion)
        )

    def shutdown(self) -> None:
        self._cancel_debounce()
        self.renderer.clear()
        self.workers.shutdown(wait=False)

    @property
    def phase(self) -> SuggestionPhase:
        return self.state.phase

    # Editor events ----------------------------------------------------
    def on_text_changed(self) -> None:
        # Anything still in flight was computed for the old text.
        self.state.next_request_id()
        self.renderer.clear()
        if self.settings.auto_trigger:
            self._restart_debounce()
        self._publish_phase()

    def on_cursor_moved(self) -> None:
        if self.state.has_suggestion:
            self.renderer.clear()
            self._publish_phase()

    def on_mode_left(self) -> None:
        self.on_cursor_moved()

    def on_document_replaced(self) -> None:
        # A new file was loaded; nothing computed for the old one applies.
        self.state.next_request_id()
        self._cancel_debounce()
        self.renderer.clear()
        self._publish_phase()

    def on_accept_key(self) -> bool:
        accepted = self.accept_handler.accept()
        if accepted:
            self._publish_phase()
        return accepted

    # Commands ---------------------------------------------------------
    def toggle_suggestions(self) -> bool:
        self.settings.show_suggestions = not self.settings.show_suggestions
        if not self.settings.show_suggestions:
            self.renderer.clear()
            self._publish_phase()
        state = "enabled" if self.settings.show_suggestions else "disabled"
        self.logger.info("Suggestions %s", state)
        self.notification.emit(f"Suggestions {state}", logging.INFO)
        return self.settings.show_suggestions

    def request_completion(self) -> bool:
        """Ask the backend for a suggestion at the cursor right now.

        Returns ``True`` when a request was dispatched. A call while another
        request is outstanding is ignored rather than queued.
        """

        if not self.settings.show_suggestions:
            self.logger.debug("Suggestions disabled; not requesting")
            return False
        if self.state.request_in_flight:
            self.logger.debug("Request %d still in flight; ignoring trigger", self.state.latest_request_id)
            return False

        request_id = self.state.next_request_id()
        context = extract_context(self.editor, self.settings.context_window_lines)
        if len(context.preceding) < self.settings.trigger_threshold:
            self.logger.debug(
                "Context too short (%d < %d); skipping request %d",
                len(context.preceding),
                self.settings.trigger_threshold,
                request_id,
            )
            self._publish_phase()
            return False

        prompt = self.prompt_builder.build(context, self.editor.filetype_label())
        self.state.request_in_flight = True
        future = self.workers.submit(_TASK_KEY, self.client.complete, prompt)
        if future is None:
            self.state.request_in_flight = False
            self._publish_phase()
            return False

        self.pending = PendingRequest(request_id, context.anchor, future)
        self.logger.debug("Dispatched request %d at %s", request_id, tuple(context.anchor))
        self._publish_phase()
        future.add_done_callback(partial(self._on_future_done, request_id, context.anchor))
        return True

    # Debounce ---------------------------------------------------------
    def _restart_debounce(self) -> None:
        self._cancel_debounce()
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(self.settings.debounce_ms)
        timer.timeout.connect(self._on_debounce_timeout)
        self.state.pending_timer = timer
        timer.start()

    def _cancel_debounce(self) -> None:
        timer = self.state.pending_timer
        if timer is None:
            return
        self.state.pending_timer = None
        timer.stop()
        timer.deleteLater()

    def _on_debounce_timeout(self) -> None:
        self._cancel_debounce()
        if self.editor.current_mode() is not EditorMode.INSERT:
            self._publish_phase()
            return
        self.request_completion()

    # Completion -------------------------------------------------------
    def _on_future_done(self, request_id: int, anchor: Position, future: concurrent.futures.Future) -> None:
        """Runs on the worker thread; only packages the result."""

        if future.cancelled():
            outcome = CompletionOutcome(request_id, anchor)
        else:
            exc = future.exception()
            if exc is None:
                outcome = CompletionOutcome(request_id, anchor, text=future.result() or "")
            elif isinstance(exc, CompletionError):
                outcome = CompletionOutcome(request_id, anchor, error=str(exc))
            else:
                self.logger.error("Unexpected completion failure", exc_info=exc)
                outcome = CompletionOutcome(request_id, anchor, error=f"Completion failed: {exc}")
        try:
            self._completionReady.emit(outcome)
        except RuntimeError:
            self.logger.debug("Controller gone before request %d finished", request_id)

    def _apply_outcome(self, outcome: CompletionOutcome) -> None:
        self.state.request_in_flight = False
        if self.pending and self.pending.request_id == outcome.request_id:
            self.pending = None

        if outcome.error:
            self.logger.error("Request %d failed: %s", outcome.request_id, outcome.error)
            self.notification.emit(outcome.error, logging.ERROR)
        elif not self.state.is_current(outcome.request_id):
            self.logger.debug(
                "Discarding stale request %d (latest is %d)", outcome.request_id, self.state.latest_request_id
            )
        elif not outcome.text:
            self.logger.debug("Request %d returned no suggestion", outcome.request_id)
        else:
            self.renderer.render(outcome.text, outcome.anchor.line, outcome.anchor.column)
        self._publish_phase()

    def _publish_phase(self) -> None:
        phase = self.state.phase
        if phase is not self._last_phase:
            self._last_phase = phase
            self.phaseChanged.emit(phase.value)
