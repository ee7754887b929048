"""
Tests for the pure memory-game state transitions.
"""

import random

import pytest

from concentration.common.card import CardState
from concentration.memory.state import (
    GameStatus,
    InvalidPosition,
    ResolutionResult,
)
from concentration.memory.transitions import StateTransitionEngine


@pytest.fixture
def state():
    return StateTransitionEngine.new_round([], layout="XYXY")


def test_new_round_from_symbols():
    state = StateTransitionEngine.new_round(["a", "b", "c"], generation=3, rng=random.Random(1))

    assert state.generation == 3
    assert state.deck_size == 6
    assert state.status is GameStatus.NOT_STARTED


def test_new_round_from_layout(state):
    assert [card.symbol_id for card in state.cards] == ["X", "Y", "X", "Y"]


def test_reveal_first_card_starts_round(state):
    new_state = StateTransitionEngine.reveal_card(state, 0)

    assert new_state.cards[0].state is CardState.REVEALED
    assert new_state.selection == (0,)
    assert new_state.status is GameStatus.IN_PROGRESS
    assert new_state.move_count == 0
    # The original is untouched
    assert state.cards[0].state is CardState.HIDDEN
    assert state.status is GameStatus.NOT_STARTED


def test_second_reveal_counts_a_move(state):
    state = StateTransitionEngine.reveal_card(state, 0)
    state = StateTransitionEngine.reveal_card(state, 1)

    assert state.selection == (0, 1)
    assert state.move_count == 1
    assert state.is_resolving


def test_reveal_same_card_twice_is_a_noop(state):
    state = StateTransitionEngine.reveal_card(state, 0)
    assert StateTransitionEngine.reveal_card(state, 0) is state


def test_third_reveal_is_a_noop(state):
    state = StateTransitionEngine.reveal_card(state, 0)
    state = StateTransitionEngine.reveal_card(state, 1)
    assert StateTransitionEngine.reveal_card(state, 2) is state


def test_reveal_out_of_range_raises(state):
    with pytest.raises(InvalidPosition):
        StateTransitionEngine.reveal_card(state, 4)


def test_evaluate_selection(state):
    assert StateTransitionEngine.evaluate_selection(state) is None

    match = StateTransitionEngine.reveal_card(
        StateTransitionEngine.reveal_card(state, 0), 2
    )
    assert StateTransitionEngine.evaluate_selection(match) is ResolutionResult.MATCH

    miss = StateTransitionEngine.reveal_card(
        StateTransitionEngine.reveal_card(state, 0), 1
    )
    assert StateTransitionEngine.evaluate_selection(miss) is ResolutionResult.MISMATCH


def test_resolve_match(state):
    state = StateTransitionEngine.reveal_card(state, 0)
    state = StateTransitionEngine.reveal_card(state, 2)
    state, result = StateTransitionEngine.resolve_selection(state)

    assert result is ResolutionResult.MATCH
    assert state.cards[0].state is CardState.MATCHED
    assert state.cards[2].state is CardState.MATCHED
    assert state.selection == ()
    assert state.status is GameStatus.IN_PROGRESS
    assert state.move_count == 1


def test_resolve_mismatch(state):
    state = StateTransitionEngine.reveal_card(state, 0)
    state = StateTransitionEngine.reveal_card(state, 1)
    state, result = StateTransitionEngine.resolve_selection(state)

    assert result is ResolutionResult.MISMATCH
    assert all(card.state is CardState.HIDDEN for card in state.cards)
    assert state.selection == ()
    assert state.move_count == 1


def test_resolve_without_pair_is_a_noop(state):
    state = StateTransitionEngine.reveal_card(state, 0)
    new_state, result = StateTransitionEngine.resolve_selection(state)

    assert result is None
    assert new_state is state


def test_last_match_wins_in_the_same_update(state):
    for first, second in ((0, 2), (1, 3)):
        state = StateTransitionEngine.reveal_card(state, first)
        state = StateTransitionEngine.reveal_card(state, second)
        state, _ = StateTransitionEngine.resolve_selection(state)

    assert state.all_matched
    assert state.status is GameStatus.WON
    assert state.move_count == 2


def test_matched_card_cannot_be_revealed(state):
    state = StateTransitionEngine.reveal_card(state, 0)
    state = StateTransitionEngine.reveal_card(state, 2)
    state, _ = StateTransitionEngine.resolve_selection(state)

    assert StateTransitionEngine.reveal_card(state, 0) is state


def test_tick_only_counts_in_progress(state):
    assert StateTransitionEngine.tick(state) is state

    started = StateTransitionEngine.reveal_card(state, 0)
    ticked = StateTransitionEngine.tick(started)
    assert ticked.elapsed_seconds == 1
    assert StateTransitionEngine.tick(ticked, 5).elapsed_seconds == 6


def test_tick_stops_after_win(state):
    for first, second in ((0, 2), (1, 3)):
        state = StateTransitionEngine.reveal_card(state, first)
        state = StateTransitionEngine.reveal_card(state, second)
        state, _ = StateTransitionEngine.resolve_selection(state)

    assert StateTransitionEngine.tick(state) is state
