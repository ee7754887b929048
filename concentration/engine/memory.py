"""
Memory game engine implementation.

This module provides the MemoryEngine class, which owns the current round of
a pairs-matching memory game: the shuffled deck, the selection buffer, the
move counter and the round clock.

All mutations are synchronous and serialized through a per-engine lock. The
only deferred work is the pacing delay before a completed pair resolves and
the periodic clock tick, both armed through a `Scheduler`. Each deferred
callback carries the generation of the round it was scheduled for and does
nothing if a newer round has been dealt in the meantime.
"""

from typing import Dict, Any, Optional
import asyncio
import logging
import random
import threading

from concentration.engine.scheduler import AsyncioScheduler, Scheduler
from concentration.events import EventBus, EventEmitter, EngineEventType
from concentration.common.deck import validate_symbols
from concentration.memory.constants import DEFAULT_CONFIG
from concentration.memory.state import GameState, GameStatus, ResolutionResult
from concentration.memory.transitions import StateTransitionEngine

logger = logging.getLogger("concentration.engine")


class MemoryEngine:
    """
    Engine for the pairs-matching memory game.

    Configuration keys (all optional):
        symbols: Distinct symbols to pair up (at least two)
        layout: Explicit board order used instead of shuffling
        match_delay: Seconds before a matched pair settles
        mismatch_delay: Seconds before a missed pair flips back
        tick_interval: Seconds between clock ticks
        auto_tick: Whether the engine arms its own clock through the scheduler
        seed: Seed for the shuffle

    Example:
        ```python
        scheduler = ManualScheduler()
        engine = MemoryEngine({"layout": "XYXY"}, scheduler=scheduler)
        engine.select_card(0)
        engine.select_card(2)
        scheduler.advance(0.5)
        assert engine.snapshot().move_count == 1
        ```
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        scheduler: Optional[Scheduler] = None,
        event_bus: Optional[EventEmitter] = None,
    ):
        """
        Initialize the memory engine and deal the first round.

        Args:
            config: Configuration options for the game
            scheduler: Scheduler for pacing delays and the clock.
                       Defaults to the running asyncio loop, so an engine
                       built outside a loop must be given one.
            event_bus: Event emitter to publish to. Defaults to the global bus.

        Raises:
            ValueError: If the configuration is invalid
            RuntimeError: If no scheduler is given and no event loop is running
        """
        self.config = {**DEFAULT_CONFIG, **(config or {})}
        self._validate_config()

        if scheduler is None:
            scheduler = self._default_scheduler()
        self.scheduler = scheduler
        self.event_bus = event_bus or EventBus.get_instance()
        self.rng = random.Random(self.config["seed"])

        self._lock = threading.RLock()
        self._generation = 0
        self._pending_resolution = None
        self._clock_handle = None

        self.state: GameState = GameState()
        self.start_new_round()

    def _validate_config(self) -> None:
        config = self.config
        if config["layout"] is None:
            config["symbols"] = tuple(validate_symbols(config["symbols"]))

        for key in ("match_delay", "mismatch_delay"):
            if config[key] < 0:
                raise ValueError(f"{key} must not be negative, got {config[key]}")

        if config["tick_interval"] <= 0:
            raise ValueError(
                f"tick_interval must be positive, got {config['tick_interval']}"
            )

    @staticmethod
    def _default_scheduler() -> Scheduler:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise RuntimeError(
                "MemoryEngine needs an explicit scheduler when no asyncio event "
                "loop is running (use ThreadScheduler or ManualScheduler)"
            ) from None
        return AsyncioScheduler(loop)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_resolving(self) -> bool:
        """True while a completed pair waits for its pacing delay."""
        return self.state.is_resolving

    def snapshot(self) -> GameState:
        """
        Get the current round as an immutable view.

        Returns:
            The current GameState
        """
        return self.state

    def start_new_round(self) -> GameState:
        """
        Discard the current round and deal a fresh one.

        Pending pacing callbacks and the clock are cancelled first.

        Returns:
            The new game state
        """
        with self._lock:
            self._cancel_pending_resolution()
            self._stop_clock()

            self._generation += 1
            self.state = StateTransitionEngine.new_round(
                self.config["symbols"],
                generation=self._generation,
                rng=self.rng,
                layout=self.config["layout"],
            )

            logger.info(
                f"Dealt round {self.state.id} (generation {self._generation}) "
                f"with {self.state.pair_count} pairs"
            )
            self._emit(
                EngineEventType.ROUND_DEALT,
                {"deck_size": self.state.deck_size, "pairs": self.state.pair_count},
            )
            self._emit_state_changed()
            return self.state

    def select_card(self, position: int) -> bool:
        """
        Reveal the card at a position.

        Selecting a face-up card, or any card while a pair is awaiting
        resolution, is ignored.

        Args:
            position: Board position of the card

        Returns:
            True if the selection was accepted, False if it was ignored

        Raises:
            InvalidPosition: If the position is not on the board
        """
        with self._lock:
            previous = self.state
            new_state = StateTransitionEngine.reveal_card(previous, position)

            if new_state is previous:
                logger.debug(
                    f"Ignored selection of position {position} in round {previous.id}"
                )
                self._emit(
                    EngineEventType.SELECTION_IGNORED,
                    {
                        "position": position,
                        "card_state": previous.cards[position].state.value,
                        "selection": list(previous.selection),
                    },
                )
                return False

            starting = previous.status is GameStatus.NOT_STARTED
            delay = self._resolution_delay(new_state)

            # Deferred work is armed before the new state is committed. A first
            # selection never completes a pair, so at most one call is armed.
            if starting:
                self._clock_handle = self._arm_clock()
            elif delay:
                self._pending_resolution = self.scheduler.call_later(
                    delay, self._resolve, self._generation
                )

            self.state = new_state
            self._emit(
                EngineEventType.CARD_REVEALED,
                {
                    "position": position,
                    "symbol_id": new_state.cards[position].symbol_id,
                    "selection": list(new_state.selection),
                },
            )
            if starting:
                self._emit(EngineEventType.ROUND_STARTED, {"position": position})

            if new_state.is_resolving:
                self._emit(
                    EngineEventType.MOVE_COMPLETED,
                    {
                        "move_count": new_state.move_count,
                        "positions": list(new_state.selection),
                    },
                )
            self._emit_state_changed()

            if delay == 0:
                self._resolve(self._generation)

            return True

    def tick(self) -> bool:
        """
        Advance the round clock by one second.

        Returns:
            True if the clock advanced, False if the round is not in progress
        """
        with self._lock:
            new_state = StateTransitionEngine.tick(self.state)
            if new_state is self.state:
                return False

            self.state = new_state
            self._emit(
                EngineEventType.TIMER_TICK,
                {"elapsed_seconds": new_state.elapsed_seconds},
            )
            self._emit_state_changed()
            return True

    def close(self) -> None:
        """
        Cancel the pending resolution and stop the clock.

        The current state is kept as it is.
        """
        with self._lock:
            self._cancel_pending_resolution()
            self._stop_clock()

    # Resolution

    def _resolution_delay(self, state: GameState) -> Optional[float]:
        """Pacing delay for the selected pair, or None if no pair is complete."""
        result = StateTransitionEngine.evaluate_selection(state)
        if result is None:
            return None
        if result is ResolutionResult.MATCH:
            return self.config["match_delay"]
        return self.config["mismatch_delay"]

    def _resolve(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug(
                    f"Dropped resolution for stale generation {generation} "
                    f"(current {self._generation})"
                )
                return

            self._pending_resolution = None
            positions = list(self.state.selection)
            self.state, result = StateTransitionEngine.resolve_selection(self.state)
            if result is None:
                return

            if result is ResolutionResult.MATCH:
                self._emit(
                    EngineEventType.PAIR_MATCHED,
                    {
                        "positions": positions,
                        "symbol_id": self.state.cards[positions[0]].symbol_id,
                        "matched_pairs": self.state.matched_pairs,
                    },
                )
            else:
                self._emit(EngineEventType.PAIR_MISMATCHED, {"positions": positions})
                for position in positions:
                    self._emit(EngineEventType.CARD_HIDDEN, {"position": position})

            if self.state.status is GameStatus.WON:
                self._stop_clock()
                logger.info(
                    f"Round {self.state.id} won in {self.state.move_count} moves "
                    f"and {self.state.elapsed_seconds} seconds"
                )
                self._emit(
                    EngineEventType.ROUND_WON,
                    {
                        "move_count": self.state.move_count,
                        "elapsed_seconds": self.state.elapsed_seconds,
                    },
                )

            self._emit_state_changed()

    def _cancel_pending_resolution(self) -> None:
        if self._pending_resolution is not None:
            self._pending_resolution.cancel()
            self._pending_resolution = None

    # Clock

    def _arm_clock(self):
        if not self.config["auto_tick"]:
            return None
        return self.scheduler.call_later(
            self.config["tick_interval"], self._on_clock, self._generation
        )

    def _stop_clock(self) -> None:
        if self._clock_handle is not None:
            self._clock_handle.cancel()
            self._clock_handle = None

    def _on_clock(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._clock_handle = None
            if self.state.status is not GameStatus.IN_PROGRESS:
                return

            self.tick()
            self._clock_handle = self.scheduler.call_later(
                self.config["tick_interval"], self._on_clock, generation
            )

    # Events

    def _emit(self, event_type: EngineEventType, data: Dict[str, Any]) -> None:
        if self.event_bus.listener_count(event_type):
            self.event_bus.emit(event_type, data, state=self.state)

    def _emit_state_changed(self) -> None:
        self._emit(
            EngineEventType.STATE_CHANGED,
            {"state": self.state, "status": self.state.status.name},
        )
