"""
Immutable state models for the memory game.

This module provides dataclasses for representing a round of the memory game
in an immutable manner. These classes are designed to be used with pure
transition functions that create new state instances rather than modifying
existing ones.
"""

from dataclasses import dataclass, field
from typing import Tuple, Dict, Any
from enum import Enum, auto
import uuid
import time

from concentration.common.card import Card, CardState
from concentration.memory.constants import format_elapsed


class GameStatus(Enum):
    """Possible statuses of a round."""

    NOT_STARTED = auto()
    IN_PROGRESS = auto()
    WON = auto()


class ResolutionResult(Enum):
    """Possible outcomes of resolving a completed pair of selections."""

    MATCH = auto()
    MISMATCH = auto()


class InvalidPosition(IndexError):
    """Raised when a selection refers to a position outside the deck."""

    def __init__(self, position: Any, deck_size: int):
        self.position = position
        self.deck_size = deck_size
        super().__init__(
            f"Position {position!r} is outside the deck [0, {deck_size})"
        )


@dataclass(frozen=True)
class GameState:
    """
    Immutable representation of one round of the memory game.

    Attributes:
        id: Unique identifier for this round
        generation: Sequence number of the round within its engine
        cards: Cards in display order; a card's position is its index
        selection: Positions revealed and awaiting resolution, in selection order
        move_count: Number of completed pairs of selections
        elapsed_seconds: Whole seconds counted since the first selection
        status: Current status of the round
        timestamp: Time when this state was created
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    generation: int = 0
    cards: Tuple[Card, ...] = ()
    selection: Tuple[int, ...] = ()
    move_count: int = 0
    elapsed_seconds: int = 0
    status: GameStatus = GameStatus.NOT_STARTED
    timestamp: float = field(default_factory=lambda: time.time())

    @property
    def deck_size(self) -> int:
        return len(self.cards)

    @property
    def pair_count(self) -> int:
        return len(self.cards) // 2

    @property
    def matched_pairs(self) -> int:
        return sum(1 for card in self.cards if card.is_matched) // 2

    @property
    def all_matched(self) -> bool:
        return bool(self.cards) and all(card.is_matched for card in self.cards)

    @property
    def is_resolving(self) -> bool:
        """True while a completed pair is waiting for its pacing delay."""
        return len(self.selection) == 2

    def card_at(self, position: int) -> Card:
        """
        Get the card at a board position.

        Args:
            position: 0-based board position

        Returns:
            The card at that position

        Raises:
            InvalidPosition: If the position is not an index of the deck
        """
        if (
            isinstance(position, bool)
            or not isinstance(position, int)
            or not 0 <= position < len(self.cards)
        ):
            raise InvalidPosition(position, len(self.cards))
        return self.cards[position]

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the game state to a dictionary suitable for serialization.

        Returns:
            Dictionary representation of the game state
        """
        return {
            "id": self.id,
            "generation": self.generation,
            "cards": [card.to_dict() for card in self.cards],
            "selection": list(self.selection),
            "move_count": self.move_count,
            "elapsed_seconds": self.elapsed_seconds,
            "status": self.status.name,
            "timestamp": self.timestamp,
        }

    def to_adapter_format(self) -> Dict[str, Any]:
        """
        Convert the game state to a format suitable for platform adapters.

        Hidden cards do not expose their symbol.

        Returns:
            Dictionary in adapter-friendly format
        """
        return {
            "round_id": self.id,
            "cards": [
                {
                    "position": card.position,
                    "symbol": card.symbol_id if card.is_face_up else None,
                    "face_up": card.is_face_up,
                    "matched": card.state is CardState.MATCHED,
                }
                for card in self.cards
            ],
            "moves": self.move_count,
            "elapsed_seconds": self.elapsed_seconds,
            "time": format_elapsed(self.elapsed_seconds),
            "matched_pairs": self.matched_pairs,
            "total_pairs": self.pair_count,
            "status": self.status.name,
            "won": self.status is GameStatus.WON,
        }
