"""
This module defines the `CardState` enum and the `Card` class, which are used to
represent the face-down tokens of a memory board.

- `CardState`: An enum representing the three faces a card can show during a
round: hidden, revealed (selected and awaiting resolution) and matched.

- `Card`: An immutable placed instance of a symbol. A card knows its position
on the board, the symbol it carries and its current state.

This module is part of the `concentration` package, a pairs-matching memory game engine.
"""

from dataclasses import dataclass, replace
from enum import Enum, unique
from typing import Hashable


SymbolId = Hashable


@unique
class CardState(Enum):
    """
    Enum for the visible state of a card on the board.
    """

    HIDDEN = "hidden"
    REVEALED = "revealed"
    MATCHED = "matched"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Card:
    """
    Class representing one placed token. Two cards in a deck share each symbol.

    >>> card = Card(0, "rocket")
    >>> print(card)
    #0 rocket (hidden)
    >>> card.is_hidden
    True
    """

    position: int
    symbol_id: SymbolId
    state: CardState = CardState.HIDDEN

    @property
    def is_hidden(self) -> bool:
        return self.state is CardState.HIDDEN

    @property
    def is_matched(self) -> bool:
        return self.state is CardState.MATCHED

    @property
    def is_face_up(self) -> bool:
        """Revealed and matched cards both show their symbol."""
        return self.state is not CardState.HIDDEN

    def matches(self, other: "Card") -> bool:
        """
        Checks if this card carries the same symbol as another card.

        :param other: The other card to compare to.
        :return: True if both cards carry the same symbol and sit at different positions.
        """
        return self.position != other.position and self.symbol_id == other.symbol_id

    def with_state(self, state: CardState) -> "Card":
        return replace(self, state=state)

    def to_dict(self):
        return {
            "position": self.position,
            "symbol_id": self.symbol_id,
            "state": self.state.value,
        }

    def __str__(self) -> str:
        return f"#{self.position} {self.symbol_id} ({self.state})"
