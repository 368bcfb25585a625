"""HTTP client for the inline completion backends."""
from __future__ import annotations

import json
import re
from typing import Any
from urllib import request
from urllib.error import HTTPError, URLError

from ghostwriter.ai.prompt_builder import CompletionPrompt
from ghostwriter.core.config import BackendKind, CompletionSettings
from ghostwriter.core.logging import get_logger

_LEADING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\n")
_TRAILING_FENCE = re.compile(r"\n```[ \t]*\n?$")


class CompletionError(Exception):
    """Base class for failures of a single completion request."""


class TransportError(CompletionError):
    """The backend answered with a non-200 status or could not be reached."""

    def __init__(self, status: int, endpoint: str, reason: str = "") -> None:
        self.status = status
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.status == 0:
            return f"Completion backend unreachable at {self.endpoint}: {self.reason}"
        if self.status == 401:
            return f"Completion backend at {self.endpoint} returned 401 (unauthorized). Check the API key."
        if self.status == 404:
            return f"Completion backend at {self.endpoint} returned 404 (not found). Check the URL and model name."
        return f"Completion backend at {self.endpoint} returned HTTP {self.status}."


class ResponseParseError(CompletionError):
    """The backend body was not JSON or did not have the expected shape."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Could not parse completion response: {detail}")


def strip_code_fence(text: str) -> str:
    """Remove one surrounding markdown code fence, if the model added one."""

    text = _LEADING_FENCE.sub("", text, count=1)
    return _TRAILING_FENCE.sub("", text, count=1)


class HTTPBackend:
    """Shared request plumbing; subclasses define the wire dialect."""

    kind: BackendKind

    def __init__(self, settings: CompletionSettings) -> None:
        self.settings = settings
        self.endpoint = settings.endpoint_url
        self.model = settings.model
        self.timeout = settings.timeout_seconds

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def build_body(self, prompt: CompletionPrompt) -> dict[str, Any]:
        raise NotImplementedError

    def extract_text(self, payload: Any) -> str | None:
        raise NotImplementedError

    def post(self, body: dict[str, Any]) -> Any:
        data = json.dumps(body).encode("utf-8")
        req = request.Request(self.endpoint, data=data, headers=self._headers(), method="POST")
        try:
            with request.urlopen(req, timeout=self.timeout) as resp:  # type: ignore[arg-type]
                status = getattr(resp, "status", 200)
                raw = resp.read()
        except HTTPError as exc:
            raise TransportError(exc.code, self.endpoint, str(exc.reason)) from exc
        except URLError as exc:
            raise TransportError(0, self.endpoint, str(exc.reason)) from exc
        except TimeoutError as exc:
            raise TransportError(0, self.endpoint, "timed out") from exc

        if status != 200:
            raise TransportError(status, self.endpoint)
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ResponseParseError(str(exc)) from exc


class GenerateBackend(HTTPBackend):
    """Single prompt dialect (``/api/generate`` style, no authentication)."""

    kind = BackendKind.GENERATE

    def build_body(self, prompt: CompletionPrompt) -> dict[str, Any]:
        return {
            "model": self.model,
            "prompt": prompt.as_prompt(),
            "temperature": self.settings.temperature,
            "num_predict": self.settings.max_tokens,
            "stream": False,
        }

    def extract_text(self, payload: Any) -> str | None:
        if not isinstance(payload, dict):
            raise ResponseParseError(f"expected a JSON object, got {type(payload).__name__}")
        text = payload.get("response")
        return text if isinstance(text, str) else None


class ChatBackend(HTTPBackend):
    """Chat completions dialect with bearer authentication."""

    kind = BackendKind.CHAT

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        headers["Authorization"] = f"Bearer {self.settings.api_key}"
        return headers

    def build_body(self, prompt: CompletionPrompt) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": prompt.as_messages(),
            "temperature": self.settings.temperature,
            "max_tokens": self.settings.max_tokens,
            "stream": False,
        }

    def extract_text(self, payload: Any) -> str | None:
        if not isinstance(payload, dict):
            raise ResponseParseError(f"expected a JSON object, got {type(payload).__name__}")
        choices = payload.get("choices")
        if not choices:
            return None
        try:
            text = choices[0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ResponseParseError(f"missing choices[0].message.content ({exc!r})") from exc
        return text if isinstance(text, str) else None


_BACKENDS: dict[BackendKind, type[HTTPBackend]] = {
    BackendKind.GENERATE: GenerateBackend,
    BackendKind.CHAT: ChatBackend,
}


def create_backend(settings: CompletionSettings) -> HTTPBackend:
    return _BACKENDS[settings.backend_kind](settings)


class CompletionClient:
    """Sends one completion request and returns the cleaned suggestion.

    :meth:`complete` blocks on network I/O and must be run off the UI thread.
    It raises :class:`CompletionError` subclasses and never retries.
    """

    def __init__(self, settings: CompletionSettings, backend: HTTPBackend | None = None) -> None:
        self.settings = settings
        self.backend = backend or create_backend(settings)
        self.logger = get_logger(__name__)

    def complete(self, prompt: CompletionPrompt) -> str:
        body = self.backend.build_body(prompt)
        self.logger.debug(
            "POST %s (dialect=%s, model=%s, prompt_chars=%d)",
            self.backend.endpoint,
            self.backend.kind.value,
            self.backend.model,
            len(prompt.user),
        )
        payload = self.backend.post(body)
        text = self.backend.extract_text(payload)
        if not text:
            return ""
        return strip_code_fence(text)
