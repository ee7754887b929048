"""
Event system for the Concentration engine.

Engines publish round events on an `EventEmitter`, and presentation layers
subscribe to the events they draw or wait for. Every round event is stamped
with the round it belongs to, so a subscriber shared by several engines (or
outliving a round) can tell whose event it is looking at.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Union
import logging
import threading
import time
from enum import Enum

from concentration.memory.state import GameState

logger = logging.getLogger("concentration.events")

# Predicate deciding whether a subscriber sees an event, signature: fn(event_data)
EventCondition = Callable[[Dict[str, Any]], bool]


class EventPriority(Enum):
    """Priority levels for event handlers."""

    LOW = 0
    NORMAL = 1
    HIGH = 2
    CRITICAL = 3


class _Subscription:
    __slots__ = ("callback", "priority", "condition")

    def __init__(self, callback: Callable, priority: int, condition: Optional[EventCondition]):
        self.callback = callback
        self.priority = priority
        self.condition = condition

    def wants(self, data: Dict[str, Any]) -> bool:
        return self.condition is None or self.condition(data)


class EventEmitter:
    """
    Publishes round events to subscribers.

    Handlers run synchronously on the emitting thread, highest priority
    first and in subscription order within a priority. A handler that raises
    is logged and skipped; it never reaches the engine that emitted.

    Example:
        ```python
        bus = EventEmitter()
        bus.on(
            EngineEventType.PAIR_MATCHED,
            lambda data: print(data["symbol_id"]),
            condition=lambda data: data["game_id"] == round_id,
        )
        ```
    """

    def __init__(self):
        self._subscriptions: Dict[str, List[_Subscription]] = defaultdict(list)
        self._lock = threading.RLock()

    @staticmethod
    def _key(event_type: Union[str, Enum]) -> str:
        return event_type.name if isinstance(event_type, Enum) else event_type

    def on(
        self,
        event_type: Union[str, Enum],
        callback: Callable,
        priority: EventPriority = EventPriority.NORMAL,
        condition: Optional[EventCondition] = None,
    ) -> Callable:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to subscribe to (string or enum)
            callback: Function to call with the event data
            priority: Priority level for this handler
            condition: Optional filter; the handler only sees events it accepts

        Returns:
            Function removing exactly this subscription
        """
        key = self._key(event_type)
        subscription = _Subscription(callback, priority.value, condition)

        with self._lock:
            subscriptions = self._subscriptions[key]
            index = len(subscriptions)
            while index and subscriptions[index - 1].priority < subscription.priority:
                index -= 1
            subscriptions.insert(index, subscription)

        def unsubscribe():
            with self._lock:
                subscriptions = self._subscriptions.get(key, [])
                for i, existing in enumerate(subscriptions):
                    if existing is subscription:
                        del subscriptions[i]
                        break

        return unsubscribe

    def listener_count(self, event_type: Union[str, Enum]) -> int:
        """Number of handlers subscribed to an event type."""
        with self._lock:
            return len(self._subscriptions.get(self._key(event_type), []))

    def emit(
        self,
        event_type: Union[str, Enum],
        data: Dict[str, Any],
        state: Optional[GameState] = None,
    ) -> Dict[str, Any]:
        """
        Publish an event.

        Args:
            event_type: The type of event to emit
            data: Event-specific data
            state: Round the event belongs to. Its id and generation are
                   added to the payload as ``game_id`` and ``generation``,
                   together with a ``timestamp``.

        Returns:
            The payload handed to subscribers
        """
        key = self._key(event_type)

        if state is not None:
            payload = {
                "game_id": state.id,
                "generation": state.generation,
                "timestamp": time.time(),
            }
            payload.update(data)
        else:
            payload = data

        with self._lock:
            subscriptions = list(self._subscriptions.get(key, []))

        # Handlers run outside the lock so they may subscribe or unsubscribe
        for subscription in subscriptions:
            try:
                if subscription.wants(payload):
                    subscription.callback(payload)
            except Exception as e:
                logger.error(f"Error in event handler for {key}: {e}", exc_info=True)

        return payload


class EventBus:
    """
    Process-wide default emitter.

    Engines and games created without an explicit emitter share this one.
    """

    _instance = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> EventEmitter:
        """
        Get the shared emitter, creating it on first use.

        Returns:
            EventEmitter instance
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = EventEmitter()
        return cls._instance


class EngineEventType(Enum):
    """
    Events published by the memory game.

    Round events carry ``game_id``, ``generation`` and ``timestamp``.
    """

    # Game lifecycle, published by MemoryGame
    ENGINE_INIT = "engine_init"
    ENGINE_SHUTDOWN = "engine_shutdown"

    # Round lifecycle
    ROUND_DEALT = "round_dealt"
    ROUND_STARTED = "round_started"
    ROUND_WON = "round_won"

    # Cards
    CARD_REVEALED = "card_revealed"
    CARD_HIDDEN = "card_hidden"
    SELECTION_IGNORED = "selection_ignored"

    # Pairs
    MOVE_COMPLETED = "move_completed"
    PAIR_MATCHED = "pair_matched"
    PAIR_MISMATCHED = "pair_mismatched"

    TIMER_TICK = "timer_tick"

    # Carries the full GameState for renderers
    STATE_CHANGED = "state_changed"
