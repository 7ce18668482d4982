"""Table events for the presentation layer."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Types of table events."""

    # Round flow events
    ROUND_STARTED = auto()
    ROUND_ENDED = auto()
    SEAT_ELIMINATED = auto()

    # Betting events
    BET_PLACED = auto()
    PAYOUT = auto()
    PUSH_TO_HOUSE = auto()

    # Card events
    CARD_DEALT = auto()
    SHOE_REBUILT = auto()

    # Turn events
    TURN_STARTED = auto()
    PLAYER_HIT = auto()
    PLAYER_STAND = auto()
    PLAYER_DISCARD = auto()
    PLAYER_BUSTS = auto()
    NATURAL_BLACKJACK = auto()

    # Ledger events
    ACHIEVEMENT_UNLOCKED = auto()
    PROFILE_RESET = auto()
    PERSISTENCE_FAILED = auto()

    # Error events
    INVALID_INPUT = auto()
    INVALID_ACTION = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable table event.

    Events are the only channel from the engine and ledger to the
    presentation layer.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]

# Events kept for inspection; older ones are dropped
HISTORY_LIMIT = 500


class EventEmitter:
    """
    Simple event emitter.

    Allows subscribing to specific event types or all events. Only the
    most recent ``history_limit`` events are remembered.
    """

    def __init__(self, history_limit: int = HISTORY_LIMIT) -> None:
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: deque[GameEvent] = deque(maxlen=history_limit)

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

    def emit(self, event: GameEvent) -> None:
        """Record an event and hand it to every matching subscriber."""
        self._event_history.append(event)

        for handler in self._handlers.get(event.event_type, []):
            handler(event)

        # Catch-all handlers
        for handler in self._handlers.get(None, []):
            handler(event)

    def emit_new(
        self,
        event_type: EventType,
        **data: Any,
    ) -> GameEvent:
        """Create and emit a new event."""
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Return the event history."""
        return list(self._event_history)

    def of_type(self, event_type: EventType) -> list[GameEvent]:
        """Return recorded events of one type."""
        return [e for e in self._event_history if e.event_type == event_type]
