"""
Event-driven flow control for the Concentration API.

This module provides tools for awaiting events published by the engine.
"""

import asyncio
import uuid
from typing import Dict, Any, Optional, Union, Tuple, Callable

from concentration.events import EventBus, EventEmitter, EngineEventType

# Type for event data
EventData = Dict[str, Any]
# Type for event predicate functions
EventPredicate = Callable[[str, EventData], bool]


class EventWaiter:
    """
    Utility for waiting for specific events or conditions.

    Example:
        ```python
        waiter = EventWaiter()
        event, data = await waiter.wait_for(
            EngineEventType.ROUND_WON,
            lambda evt, data: data.get("game_id") == round_id,
            timeout=5.0
        )
        ```
    """

    def __init__(self, event_bus: Optional[EventEmitter] = None):
        """
        Initialize a new event waiter.

        Args:
            event_bus: Event bus to use. If None, the global instance will be used.
        """
        self.event_bus = event_bus or EventBus.get_instance()
        self._waiters = {}

    @property
    def pending(self) -> int:
        return len(self._waiters)

    async def wait_for(
        self,
        event_type: Union[str, EngineEventType],
        condition: Optional[EventPredicate] = None,
        timeout: Optional[float] = None,
    ) -> Tuple[Union[str, EngineEventType], EventData]:
        """
        Wait for a specific event with an optional condition.

        Args:
            event_type: The event type to wait for
            condition: Optional predicate function to check event data
            timeout: Optional timeout in seconds

        Returns:
            Tuple of (event_type, event_data)

        Raises:
            asyncio.TimeoutError: If the timeout is reached
        """
        future = asyncio.get_running_loop().create_future()
        waiter_id = str(uuid.uuid4())
        self._waiters[waiter_id] = future

        def accepts(data):
            return condition is None or condition(event_type, data)

        def event_handler(data):
            if self._waiters.pop(waiter_id, None) is not None and not future.done():
                future.set_result((event_type, data))

        unsubscribe = self.event_bus.on(event_type, event_handler, condition=accepts)

        try:
            if timeout is not None:
                return await asyncio.wait_for(future, timeout)
            return await future
        finally:
            # Always clean up, whether resolved, timed out or cancelled
            self._waiters.pop(waiter_id, None)
            unsubscribe()
