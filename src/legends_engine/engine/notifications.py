"""Typed change notifications.

The engine publishes an ``EngineEvent`` after each mutation a
presentation layer may want to react to. Handlers are isolated from one
another: a failing handler is logged and the remaining handlers still
run.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from legends_engine.core.logging import get_logger


logger = get_logger(__name__)


class EngineEventKind(StrEnum):
    """Kinds of change notification."""

    PLAYER_UPDATED = "player_updated"
    GAME_STATE_UPDATED = "game_state_updated"
    SCENE_CHANGED = "scene_changed"
    CHOICE_MADE = "choice_made"
    COMBAT_UPDATED = "combat_updated"


@dataclass(frozen=True)
class EngineEvent:
    """A change notification.

    Attributes:
        kind: What changed.
        payload: The changed object (player, game state, scene, choice or
            combat state).
        data: Extra context.
    """

    kind: EngineEventKind
    payload: Any = None
    data: dict[str, Any] = field(default_factory=dict)


EventHandler = Callable[[EngineEvent], None]


class EventBus:
    """Synchronous publish/subscribe channel for engine events."""

    def __init__(self) -> None:
        self._handlers: dict[EngineEventKind, list[EventHandler]] = {}
        self._last_errors: list[Exception] = []

    def subscribe(self, kind: EngineEventKind, handler: EventHandler) -> None:
        """Register a handler for one kind of event.

        Args:
            kind: Event kind to listen for.
            handler: Called with each published event of that kind.
        """
        self._handlers.setdefault(kind, []).append(handler)

    def unsubscribe(self, kind: EngineEventKind, handler: EventHandler) -> bool:
        """Remove a handler.

        Returns:
            True if the handler was registered.
        """
        handlers = self._handlers.get(kind, [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def publish(self, event: EngineEvent) -> None:
        """Deliver an event to every handler registered for its kind.

        Args:
            event: The event to deliver.
        """
        self._last_errors = []
        for handler in list(self._handlers.get(event.kind, [])):
            try:
                handler(event)
            except Exception as exc:
                self._last_errors.append(exc)
                logger.exception(
                    "Event handler error",
                    event_kind=event.kind.value,
                    handler=getattr(handler, "__qualname__", repr(handler)),
                )

    def emit(self, kind: EngineEventKind, payload: Any = None, **data: Any) -> None:
        """Build and publish an event."""
        self.publish(EngineEvent(kind=kind, payload=payload, data=data))

    @property
    def last_errors(self) -> list[Exception]:
        """Handler failures from the most recent publish."""
        return list(self._last_errors)


__all__ = [
    "EngineEventKind",
    "EngineEvent",
    "EventHandler",
    "EventBus",
]
