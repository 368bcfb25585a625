"""QAction bindings for registered commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from PySide6.QtGui import QAction

from ghostwriter.core.events import CommandRegistry


@dataclass
class CommandActionDefinition:
    """Describe a QAction that runs a registered command.

    The definition only carries presentation details (label, shortcut); the
    behaviour lives in the :class:`CommandRegistry` entry with the same id.
    """

    id: str
    text: str
    shortcut: str | None = None


class CommandActionRegistry:
    """Build QActions from definitions and route them to the command registry."""

    def __init__(self, parent, command_registry: CommandRegistry) -> None:
        self.parent = parent
        self.command_registry = command_registry
        self._definitions: dict[str, CommandActionDefinition] = {}
        self._actions: dict[str, QAction] = {}

    def register(self, definition: CommandActionDefinition) -> None:
        self._definitions[definition.id] = definition

    def bulk_register(self, definitions: Iterable[CommandActionDefinition]) -> None:
        for definition in definitions:
            self.register(definition)

    def build(self) -> dict[str, QAction]:
        for definition in self._definitions.values():
            if self.command_registry.get(definition.id) is None:
                continue
            action = QAction(definition.text, self.parent)
            if definition.shortcut:
                action.setShortcut(definition.shortcut)
            action.triggered.connect(lambda _checked=False, cmd=definition.id: self.command_registry.execute(cmd))
            self._actions[definition.id] = action
        return self._actions

    def trigger(self, command_id: str) -> None:
        action = self._actions.get(command_id)
        if action:
            action.trigger()

    def action(self, command_id: str) -> QAction | None:
        return self._actions.get(command_id)
