"""
Memory game API module for Concentration.

This module provides a high-level, platform-agnostic API that runs a
MemoryEngine on an asyncio event loop and keeps a platform adapter in sync
with it.
"""

import asyncio
import logging
import time
from typing import Dict, Any, Optional, Union, Callable

from concentration.adapters import PlatformAdapter, CLIAdapter
from concentration.api.flow import EventWaiter
from concentration.engine import MemoryEngine, AsyncioScheduler
from concentration.events import (
    EventBus,
    EventCondition,
    EventEmitter,
    EngineEventType,
    EventPriority,
)
from concentration.memory.state import GameState, GameStatus

logger = logging.getLogger("concentration.api")


class MemoryGame:
    """
    High-level, platform-agnostic API for the memory game.

    The game owns an engine whose pacing delays and clock run on the current
    event loop. Every state change is forwarded to the adapter's
    ``render_game_state`` and a won round to ``notify_game_event``.

    Example:
        ```python
        game = MemoryGame(adapter=DummyAdapter())
        await game.initialize()
        await game.select_card(0)
        await game.select_card(5)
        state = await game.get_state()
        await game.shutdown()
        ```
    """

    def __init__(
        self,
        adapter: Optional[PlatformAdapter] = None,
        config: Optional[Dict[str, Any]] = None,
        event_bus: Optional[EventEmitter] = None,
    ):
        """
        Initialize a new memory game.

        Args:
            adapter: Platform adapter to use for rendering.
                    If None, a CLI adapter will be used.
            config: Configuration options for the engine
            event_bus: Event bus to use. If None, the global instance will be used.
        """
        self.adapter = adapter or CLIAdapter()
        self.config = config or {}
        self.event_bus = event_bus or EventBus.get_instance()
        self.event_handlers = {}
        self.event_waiter = EventWaiter(self.event_bus)

        # Engine will be initialized in initialize()
        self.engine: Optional[MemoryEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._tasks = set()

    async def initialize(self) -> None:
        """
        Initialize the adapter and the engine, and render the first round.

        Must be awaited on the event loop that will run the game.
        """
        await self.adapter.initialize()
        self._loop = asyncio.get_running_loop()

        self.on(
            EngineEventType.STATE_CHANGED, self._on_state_changed, condition=self._owns
        )
        for event_type in (
            EngineEventType.ROUND_DEALT,
            EngineEventType.PAIR_MATCHED,
            EngineEventType.ROUND_WON,
        ):
            self.on(event_type, self._forwarder(event_type), condition=self._owns)

        self.engine = MemoryEngine(
            self.config, scheduler=AsyncioScheduler(self._loop), event_bus=self.event_bus
        )
        self.event_bus.emit(
            EngineEventType.ENGINE_INIT,
            {
                "engine_type": "memory",
                "config": dict(self.engine.config),
                "timestamp": time.time(),
            },
        )
        await self.render_state()

    async def shutdown(self) -> None:
        """
        Shut down the game and clean up resources.
        """
        for handlers in self.event_handlers.values():
            for unsubscribe in handlers:
                unsubscribe()
        self.event_handlers.clear()

        if self.engine is not None:
            self.engine.close()

        await self.flush()
        self.event_bus.emit(EngineEventType.ENGINE_SHUTDOWN, {"timestamp": time.time()})
        await self.adapter.shutdown()

    async def start_game(self) -> GameState:
        """
        Deal a new round, abandoning the current one.

        Returns:
            The new game state
        """
        state = self._require_engine().start_new_round()
        await self.flush()
        return state

    async def select_card(self, position: int) -> bool:
        """
        Select the card at a board position.

        Args:
            position: Board position of the card

        Returns:
            True if the selection was accepted

        Raises:
            InvalidPosition: If the position is not on the board
        """
        accepted = self._require_engine().select_card(position)
        await self.flush()
        return accepted

    async def get_state(self) -> GameState:
        """
        Get the current game state.

        Returns:
            Current GameState object
        """
        return self._require_engine().snapshot()

    async def render_state(self) -> None:
        """
        Render the current game state through the adapter.
        """
        state = self._require_engine().snapshot()
        await self.adapter.render_game_state(state.to_adapter_format())

    async def wait_for_win(self, timeout: Optional[float] = None) -> GameState:
        """
        Wait until the current round is won.

        Args:
            timeout: Optional timeout in seconds

        Returns:
            The winning game state

        Raises:
            asyncio.TimeoutError: If the timeout is reached
        """
        engine = self._require_engine()
        if engine.snapshot().status is GameStatus.WON:
            return engine.snapshot()

        round_id = engine.snapshot().id
        await self.event_waiter.wait_for(
            EngineEventType.ROUND_WON,
            lambda evt, data: data.get("game_id") == round_id,
            timeout,
        )
        await self.flush()
        return engine.snapshot()

    async def flush(self) -> None:
        """
        Wait for every adapter call queued so far to finish.
        """
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def on(
        self,
        event_type: Union[str, EngineEventType],
        handler: Callable,
        priority: EventPriority = EventPriority.NORMAL,
        condition: Optional[EventCondition] = None,
    ) -> Callable:
        """
        Register an event handler.

        Args:
            event_type: Type of event to listen for
            handler: Event handler function
            priority: Priority level for the handler
            condition: Optional filter on the event data

        Returns:
            Function to call to unsubscribe the handler
        """
        if isinstance(event_type, str):
            try:
                event_type = getattr(EngineEventType, event_type.upper())
            except AttributeError:
                # Keep as string if not a known enum value
                pass

        unsubscribe_func = self.event_bus.on(event_type, handler, priority, condition)
        self.event_handlers.setdefault(event_type, []).append(unsubscribe_func)
        return unsubscribe_func

    # Event forwarding

    def _owns(self, data: Dict[str, Any]) -> bool:
        return self.engine is not None and data.get("game_id") == self.engine.state.id

    def _on_state_changed(self, data: Dict[str, Any]) -> None:
        self._submit(self.adapter.render_game_state(data["state"].to_adapter_format()))

    def _forwarder(self, event_type: EngineEventType) -> Callable:
        def forward(data: Dict[str, Any]) -> None:
            self._submit(self.adapter.notify_game_event(event_type, data))

        return forward

    def _submit(self, coro) -> None:
        task = self._loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                f"Adapter call failed: {task.exception()}", exc_info=task.exception()
            )

    def _require_engine(self) -> MemoryEngine:
        if self.engine is None:
            raise RuntimeError("Game is not initialized; await initialize() first")
        return self.engine
