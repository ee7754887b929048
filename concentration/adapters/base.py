"""
Presentation boundary of the memory game.

The engine never draws anything. Whatever shows the board (a terminal, a web
page, a test recorder) implements `PlatformAdapter` and is handed the board
view of every state change plus the round milestones worth announcing.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Union
from enum import Enum


class PlatformAdapter(ABC):
    """
    Draws the board and announces round milestones.

    Card selections travel the other way: the host reads a position from its
    own input and passes it to `MemoryGame.select_card`.
    """

    @abstractmethod
    async def render_game_state(self, state: Dict[str, Any]) -> None:
        """
        Draw the board.

        Args:
            state: Board view from `GameState.to_adapter_format`. Face-down
                   cards carry no symbol, so an adapter cannot leak them.
        """

    @abstractmethod
    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Announce a round milestone (a new deal, a found pair, a win).

        Args:
            event_type: The milestone, usually an `EngineEventType`
            data: Event payload, including ``game_id`` and ``generation``
        """

    async def initialize(self) -> None:
        """Prepare the display before the first board is drawn."""

    async def shutdown(self) -> None:
        """Release the display once the game is over."""
