"""Lightweight command registry shared by menus and the editor."""
from __future__ import annotations

from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Any, Callable, List


@dataclass
class CommandDescriptor:
    """Metadata for a named, user-invokable command."""

    id: str
    description: str
    category: str
    callback: Callable[..., Any]


class CommandRegistry:
    def __init__(self) -> None:
        self._commands: dict[str, CommandDescriptor] = {}

    def register_command(self, command: CommandDescriptor) -> None:
        self._commands[command.id] = command

    def get(self, command_id: str) -> CommandDescriptor | None:
        return self._commands.get(command_id)

    def list_commands(self, filter_text: str | None = None) -> List[CommandDescriptor]:
        if not filter_text:
            return list(self._commands.values())

        def _score(command: CommandDescriptor) -> float:
            haystack = f"{command.id} {command.description}"
            return SequenceMatcher(None, filter_text.lower(), haystack.lower()).ratio()

        scored = [cmd for cmd in self._commands.values() if _score(cmd) > 0.1]
        scored.sort(key=_score, reverse=True)
        return scored

    def execute(self, command_id: str) -> Any:
        descriptor = self._commands.get(command_id)
        if descriptor is None:
            raise KeyError(f"Unknown command: {command_id}")
        return descriptor.callback()
