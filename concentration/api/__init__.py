"""
API module for Concentration.

This module provides a high-level, platform-agnostic API for running the
memory game on an asyncio event loop.
"""

from concentration.api.memory import MemoryGame
from concentration.api.flow import EventWaiter

__all__ = ["MemoryGame", "EventWaiter"]
