"""
State transition functions for the memory game.

This module provides pure functions for transitioning between game states,
without modifying the original state objects. A transition that a rule
rejects returns the very same state object it was given, so callers can
detect a no-op with an identity check.
"""

import random
from typing import Iterable, Optional, Tuple
from dataclasses import replace

from concentration.common.card import CardState, SymbolId
from concentration.common.deck import build_deck, deck_from_layout
from concentration.memory.constants import MAX_SELECTION
from concentration.memory.state import GameState, GameStatus, ResolutionResult


class StateTransitionEngine:
    """
    Pure functions for state transitions in the memory game.

    This class contains static methods that implement game state transitions.
    Each method takes a state and returns a new state, without modifying the
    original.
    """

    @staticmethod
    def new_round(
        symbols: Iterable[SymbolId],
        generation: int = 0,
        rng: Optional[random.Random] = None,
        layout: Optional[Iterable[SymbolId]] = None,
    ) -> GameState:
        """
        Deal a fresh round.

        Args:
            symbols: Distinct symbols to pair up
            generation: Sequence number of the round within its engine
            rng: Random source for the shuffle
            layout: Explicit board order; skips the shuffle when given

        Returns:
            New game state with every card hidden
        """
        if layout is not None:
            cards = deck_from_layout(layout)
        else:
            cards = build_deck(symbols, rng)

        return GameState(generation=generation, cards=cards)

    @staticmethod
    def reveal_card(state: GameState, position: int) -> GameState:
        """
        Reveal the card at a position as the next selection.

        The first accepted selection starts the round. The selection that
        completes a pair counts as a move straight away.

        Args:
            state: Current game state
            position: Board position of the card

        Returns:
            New game state, or the given state when the selection is not allowed

        Raises:
            InvalidPosition: If the position is not on the board
        """
        card = state.card_at(position)

        if not card.is_hidden or position in state.selection:
            return state

        if len(state.selection) >= MAX_SELECTION:
            return state

        new_cards = list(state.cards)
        new_cards[position] = card.with_state(CardState.REVEALED)
        new_selection = state.selection + (position,)

        status = state.status
        if status is GameStatus.NOT_STARTED:
            status = GameStatus.IN_PROGRESS

        move_count = state.move_count
        if len(new_selection) == MAX_SELECTION:
            move_count += 1

        return replace(
            state,
            cards=tuple(new_cards),
            selection=new_selection,
            move_count=move_count,
            status=status,
        )

    @staticmethod
    def evaluate_selection(state: GameState) -> Optional[ResolutionResult]:
        """
        Compare the two selected cards.

        Args:
            state: Current game state

        Returns:
            The outcome, or None if no complete pair is selected
        """
        if len(state.selection) != MAX_SELECTION:
            return None

        first, second = (state.cards[position] for position in state.selection)
        if first.matches(second):
            return ResolutionResult.MATCH
        return ResolutionResult.MISMATCH

    @staticmethod
    def resolve_selection(
        state: GameState,
    ) -> Tuple[GameState, Optional[ResolutionResult]]:
        """
        Apply the outcome of a completed pair.

        A match settles both cards and then checks for a win against the
        updated cards. A mismatch turns both cards face down again. Either way
        the selection is cleared.

        Args:
            state: Current game state

        Returns:
            Tuple of (new game state, resolution result)
        """
        result = StateTransitionEngine.evaluate_selection(state)
        if result is None:
            return state, None

        new_state_for_card = (
            CardState.MATCHED if result is ResolutionResult.MATCH else CardState.HIDDEN
        )
        new_cards = list(state.cards)
        for position in state.selection:
            new_cards[position] = new_cards[position].with_state(new_state_for_card)

        new_state = replace(state, cards=tuple(new_cards), selection=())

        if result is ResolutionResult.MATCH and new_state.all_matched:
            new_state = replace(new_state, status=GameStatus.WON)

        return new_state, result

    @staticmethod
    def tick(state: GameState, seconds: int = 1) -> GameState:
        """
        Advance the round clock.

        Args:
            state: Current game state
            seconds: Whole seconds to add

        Returns:
            New game state, or the given state when the round is not in progress
        """
        if state.status is not GameStatus.IN_PROGRESS:
            return state

        return replace(state, elapsed_seconds=state.elapsed_seconds + seconds)
