"""
Command-line interface adapter for the Concentration engine.

This module provides an adapter that draws the memory board as text and
reads card selections from the console.
"""

import asyncio
import logging
from typing import Callable, Dict, Any, Optional, Union
from enum import Enum

from concentration.adapters.base import PlatformAdapter
from concentration.memory.constants import format_elapsed, get_symbol_glyph

logger = logging.getLogger("concentration.adapters.cli")

HIDDEN_FACE = "??"


class CLIAdapter(PlatformAdapter):
    """
    Command-line interface adapter for the Concentration engine.

    This adapter uses the standard console for input/output, providing a
    simple text-based board.
    """

    def __init__(
        self,
        columns: int = 4,
        output: Optional[Callable[[str], None]] = None,
        input_func: Optional[Callable[[str], str]] = None,
    ):
        """
        Initialize the CLI adapter.

        Args:
            columns: Number of cards per board row
            output: Function used to write a line. Defaults to print.
            input_func: Function used to read a line. Defaults to input.
        """
        if columns < 1:
            raise ValueError(f"columns must be positive, got {columns}")
        self.columns = columns
        self.output = output or print
        self.input_func = input_func or input
        self._last_board = None

    async def render_game_state(self, state: Dict[str, Any]) -> None:
        """
        Render the current game state to the console.

        Args:
            state: The current game state
        """
        # Clock-only updates are not redrawn
        board = (state.get("round_id"), state.get("cards"))
        if board == self._last_board:
            return
        self._last_board = board

        for line in self.format_board(state):
            self.output(line)

    def format_board(self, state: Dict[str, Any]):
        """
        Format the board and the status line.

        Args:
            state: The current game state

        Returns:
            List of lines to print
        """
        lines = [
            f"Moves: {state.get('moves', 0)}   "
            f"Time: {format_elapsed(state.get('elapsed_seconds', 0))}   "
            f"Pairs: {state.get('matched_pairs', 0)}/{state.get('total_pairs', 0)}"
        ]

        cells = []
        for card in state.get("cards", []):
            if card["face_up"]:
                face = get_symbol_glyph(card["symbol"])
                if card["matched"]:
                    face = f"[{face}]"
            else:
                face = HIDDEN_FACE
            cells.append(f"{card['position']:>2}:{face:<4}")

        for start in range(0, len(cells), self.columns):
            lines.append(" ".join(cells[start : start + self.columns]).rstrip())

        return lines

    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Notify the user of a game event via the console.

        Args:
            event_type: The type of event that occurred
            data: Data associated with the event
        """
        if isinstance(event_type, Enum):
            event_type = event_type.name

        message = self._format_event_message(event_type, data)
        if message:
            self.output(message)

    def _format_event_message(
        self, event_type: str, data: Dict[str, Any]
    ) -> Optional[str]:
        """
        Format an event message based on the event type.

        Returns:
            Formatted message string or None if no message needed
        """
        if event_type == "ROUND_WON":
            moves = data.get("move_count", 0)
            elapsed = format_elapsed(data.get("elapsed_seconds", 0))
            return f"Congratulations! You won in {moves} moves and {elapsed}!"

        elif event_type == "PAIR_MATCHED":
            return f"Match: {get_symbol_glyph(data.get('symbol_id'))}"

        elif event_type == "ROUND_DEALT":
            return f"New game: find all {data.get('pairs', 0)} pairs!"

        return None

    async def prompt_selection(self, prompt: str = "Pick a card: ") -> Optional[int]:
        """
        Read a board position from the console.

        Args:
            prompt: Prompt to show

        Returns:
            The position entered, or None if the input was not a number
        """
        raw = await asyncio.to_thread(self.input_func, prompt)
        try:
            return int(raw.strip())
        except ValueError:
            logger.debug(f"Ignoring non-numeric selection {raw!r}")
            self.output("Please enter a card number.")
            return None
