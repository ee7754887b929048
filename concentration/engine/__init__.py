"""
Core engine for the Concentration memory game.

This package provides the game engine and the schedulers that drive its
deferred callbacks, implementing the game logic in a platform-agnostic way.
"""

from concentration.engine.memory import MemoryEngine
from concentration.engine.scheduler import (
    Scheduler,
    AsyncioScheduler,
    ThreadScheduler,
    ManualScheduler,
)

__all__ = [
    "MemoryEngine",
    "Scheduler",
    "AsyncioScheduler",
    "ThreadScheduler",
    "ManualScheduler",
]
