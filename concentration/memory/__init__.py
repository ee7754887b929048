"""
Memory game rules for the Concentration engine.

This package holds the immutable round model and the pure transitions that
drive it.
"""

from concentration.memory.state import (
    GameState,
    GameStatus,
    InvalidPosition,
    ResolutionResult,
)
from concentration.memory.transitions import StateTransitionEngine

__all__ = [
    "GameState",
    "GameStatus",
    "InvalidPosition",
    "ResolutionResult",
    "StateTransitionEngine",
]
