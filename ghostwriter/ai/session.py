"""Mutable state shared by the inline completion components."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ghostwriter.editor.document import Position


class SuggestionPhase(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    REQUESTING = "requesting"
    DISPLAYING = "displaying"


@dataclass
class SessionState:
    """Everything the controller knows about the current suggestion.

    One instance lives for the whole editor session. Only the controller
    mutates it, plus the renderer for the suggestion and overlay fields.
    """

    suggestion_text: str | None = None
    suggestion_anchor: Position | None = None
    decoration_handle: Any | None = None
    request_in_flight: bool = False
    latest_request_id: int = 0
    pending_timer: Any | None = None

    @property
    def has_suggestion(self) -> bool:
        return self.suggestion_text is not None

    def next_request_id(self) -> int:
        self.latest_request_id += 1
        return self.latest_request_id

    def is_current(self, request_id: int) -> bool:
        return request_id == self.latest_request_id

    @property
    def phase(self) -> SuggestionPhase:
        if self.suggestion_text is not None:
            return SuggestionPhase.DISPLAYING
        if self.request_in_flight:
            return SuggestionPhase.REQUESTING
        if self.pending_timer is not None:
            return SuggestionPhase.DEBOUNCING
        return SuggestionPhase.IDLE
