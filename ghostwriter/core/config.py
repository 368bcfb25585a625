"""Configuration management for Ghostwriter."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "ghostwriter"
DEFAULTS_PATH = Path(__file__).resolve().parent.parent / "settings" / "defaults.yaml"
USER_SETTINGS_PATH = CONFIG_DIR / "settings.yaml"
API_KEY_ENV = "GHOSTWRITER_API_KEY"


class ConfigManager:
    """Loads default and user configuration and provides helpers to query values."""

    def __init__(self) -> None:
        self.defaults = self._load_yaml(DEFAULTS_PATH)
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        if USER_SETTINGS_PATH.exists():
            self.user_settings = self._load_yaml(USER_SETTINGS_PATH)
        else:
            self.user_settings = {}
        self.settings = self._deep_merge(self.defaults, self.user_settings)

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    def get(self, key: str, default: Any | None = None) -> Any:
        return self.settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.settings[key] = value

    def save(self) -> None:
        USER_SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
        with USER_SETTINGS_PATH.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(self.settings, handle)

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        merged: dict[str, Any] = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged


class BackendKind(str, Enum):
    """Wire dialect spoken by the completion backend."""

    GENERATE = "generate"
    CHAT = "chat"


@dataclass
class CompletionSettings:
    """Typed view of the ``completion`` section of the configuration."""

    use_chat_backend: bool = True
    generate_url: str = "http://localhost:11434/api/generate"
    chat_url: str = "https://api.x.ai/v1/chat/completions"
    api_key: str = ""
    model: str = "grok-2-latest"
    show_suggestions: bool = True
    auto_trigger: bool = True
    trigger_threshold: int = 3
    temperature: float = 0.7
    max_tokens: int = 1000
    accept_key: str = "Tab"
    debounce_ms: int = 2000
    context_window_lines: int = 100
    timeout_seconds: float | None = None

    @classmethod
    def from_config(cls, config: ConfigManager | dict[str, Any] | None) -> "CompletionSettings":
        if isinstance(config, ConfigManager):
            section = config.get("completion", {})
        else:
            section = (config or {}).get("completion", {})
        if not isinstance(section, dict):
            section = {}

        defaults = cls()
        values: dict[str, Any] = {}
        for field_info in fields(cls):
            default = getattr(defaults, field_info.name)
            values[field_info.name] = _coerce(section.get(field_info.name, default), default)

        settings = cls(**values)
        if not settings.api_key:
            settings.api_key = os.environ.get(API_KEY_ENV, "")
        return settings

    @property
    def backend_kind(self) -> BackendKind:
        return BackendKind.CHAT if self.use_chat_backend else BackendKind.GENERATE

    @property
    def endpoint_url(self) -> str:
        return self.chat_url if self.backend_kind is BackendKind.CHAT else self.generate_url

    def validate(self) -> list[str]:
        """Return human readable configuration warnings."""

        warnings: list[str] = []
        if self.backend_kind is BackendKind.CHAT and not self.api_key:
            warnings.append(
                "API key is required for the chat backend; set completion.api_key "
                f"or {API_KEY_ENV}. Requests will fail until it is configured."
            )
        return warnings


def _coerce(value: Any, default: Any) -> Any:
    """Return ``value`` if it matches the type of ``default``, else ``default``."""

    if default is None:
        return value if value is None or isinstance(value, (int, float)) else None
    if isinstance(default, bool):
        return value if isinstance(value, bool) else default
    if isinstance(default, float):
        return float(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else default
    if isinstance(default, int):
        return value if isinstance(value, int) and not isinstance(value, bool) else default
    if isinstance(default, str):
        return value if isinstance(value, str) else default
    return value
