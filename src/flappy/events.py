# src/flappy/events.py
"""
Tiny synchronous event bus used by the simulation to publish score and
session changes. UI and persistence layers subscribe; the core never
touches them directly.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class EventType(Enum):
    SESSION_STARTED = auto()
    JUMPED = auto()
    SCORE_CHANGED = auto()
    SESSION_ENDED = auto()


@dataclass
class Event:
    type: EventType
    data: Dict[str, Any] = field(default_factory=dict)


Handler = Callable[[Event], None]


class EventBus:
    def __init__(self, history_limit: int = 100):
        self._handlers: Dict[EventType, List[Handler]] = defaultdict(list)
        self._global_handlers: List[Handler] = []
        self._history: List[Event] = []
        self._history_limit = history_limit

    def subscribe(self, event_type: EventType, handler: Handler) -> Callable[[], None]:
        """Register `handler` for one event type. Returns an unsubscribe function."""
        self._handlers[event_type].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        self._global_handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._global_handlers:
                self._global_handlers.remove(handler)

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Deliver `event` to every handler; a failing handler does not stop the others."""
        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history.pop(0)

        for handler in self._handlers.get(event.type, []) + self._global_handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Error in %s handler", event.type.name)

    def history(self, event_type: Optional[EventType] = None, limit: int = 10) -> List[Event]:
        events = self._history
        if event_type is not None:
            events = [e for e in events if e.type == event_type]
        return events[-limit:]

    def clear_history(self) -> None:
        self._history.clear()
