"""Game events for the event system."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of game events."""

    # Game flow events
    GAME_STARTED = auto()
    GAME_WON = auto()

    # Stock events
    CARDS_DRAWN = auto()
    STOCK_RECYCLED = auto()

    # Card movement events
    CARDS_MOVED = auto()
    CARD_REVEALED = auto()

    # Selection events
    CARD_SELECTED = auto()
    SELECTION_CLEARED = auto()

    # Rejected requests (state is left unchanged)
    MOVE_REJECTED = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable game event.

    Events tell observers what a transition did; they never feed back into
    the game state.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Event emitter for game events.

    Handlers subscribe to one event type, or to every event with None.
    """

    def __init__(self, history_limit: int | None = 500) -> None:
        """
        Initialize the event emitter.

        Args:
            history_limit: Most recent events to keep, or None to keep all
        """
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: list[GameEvent] = []
        self._history_limit = history_limit

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(
            "Subscribed %s to %s",
            getattr(handler, "__name__", repr(handler)),
            event_type.name if event_type else "all events",
        )

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: GameEvent) -> None:
        """
        Emit an event to all subscribers.

        Type-specific handlers run before catch-all handlers.
        """
        self._event_history.append(event)
        if self._history_limit is not None and len(self._event_history) > self._history_limit:
            del self._event_history[: -self._history_limit]

        handlers = self._handlers.get(event.event_type, []) + self._handlers.get(None, [])
        logger.debug("Emitting %s to %d handler(s)", event, len(handlers))
        for handler in handlers:
            handler(event)

    def emit_new(
        self,
        event_type: EventType,
        **data: Any,
    ) -> GameEvent:
        """
        Create and emit a new event.

        Args:
            event_type: Type of event
            **data: Event data

        Returns:
            The created event
        """
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Return the event history."""
        return self._event_history.copy()

    def clear_history(self) -> None:
        """Clear the event history."""
        self._event_history.clear()
