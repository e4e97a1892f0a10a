from __future__ import annotations

import importlib
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

from ..domain import Card, Event, Task


class CollaboratorsNotConfiguredError(RuntimeError):
    """Raised when no collaborator factory is configured or it cannot be resolved."""


@dataclass(frozen=True, slots=True)
class MessageOptions:
    parse_mode: Optional[str] = "Markdown"
    disable_preview: bool = False
    buttons: Tuple[Tuple[str, str], ...] = ()


@runtime_checkable
class CalendarReader(Protocol):
    async def list_events(self, start: datetime, end: datetime) -> Sequence[Union[Event, Dict[str, Any]]]:
        """Events intersecting ``[start, end)``, ascending by start."""


@runtime_checkable
class TaskReader(Protocol):
    async def list_tasks(self) -> Sequence[Union[Task, Dict[str, Any]]]:
        """Pending tasks only."""


@runtime_checkable
class BoardReader(Protocol):
    async def list_all_cards(self) -> Sequence[Union[Card, Dict[str, Any]]]:
        """Every card on the board, annotated with its ``listName``."""


@runtime_checkable
class MessageSender(Protocol):
    async def send_message(self, recipient_id: str, text: str, options: MessageOptions) -> None:
        """Best-effort delivery; callers catch failures."""


@dataclass(slots=True)
class Collaborators:
    """External read/send endpoints the core depends on."""

    calendar: CalendarReader
    tasks: TaskReader
    board: BoardReader
    messenger: MessageSender


def load_collaborators(target: Optional[str]) -> Collaborators:
    """Resolve ``package.module:factory`` and call the factory."""

    if not target:
        raise CollaboratorsNotConfiguredError(
            "No collaborators configured. Set DAYBOOK_COLLABORATORS to 'package.module:factory'."
        )
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise CollaboratorsNotConfiguredError(f"Invalid collaborator path {target!r}; expected 'module:factory'.")
    try:
        module = importlib.import_module(module_name)
        factory: Callable[[], Collaborators] = getattr(module, attribute)
    except (ImportError, AttributeError) as exc:
        raise CollaboratorsNotConfiguredError(f"Cannot resolve collaborator factory {target!r}") from exc

    collaborators = factory()
    if not isinstance(collaborators, Collaborators):
        raise CollaboratorsNotConfiguredError(
            f"Collaborator factory {target!r} returned {type(collaborators).__name__}, expected Collaborators"
        )
    return collaborators


__all__ = [
    "BoardReader",
    "CalendarReader",
    "Collaborators",
    "CollaboratorsNotConfiguredError",
    "MessageOptions",
    "MessageSender",
    "TaskReader",
    "load_collaborators",
]
