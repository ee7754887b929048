import random
from collections import Counter

import pytest

from concentration.common.card import CardState
from concentration.common.deck import build_deck, deck_from_layout, shuffle
from concentration.memory.constants import DEFAULT_SYMBOLS


@pytest.mark.parametrize("pairs", range(2, len(DEFAULT_SYMBOLS) + 1))
def test_deck_holds_every_symbol_twice(pairs):
    symbols = DEFAULT_SYMBOLS[:pairs]
    deck = build_deck(symbols, random.Random(pairs))

    assert len(deck) == 2 * pairs
    counts = Counter(card.symbol_id for card in deck)
    assert set(counts) == set(symbols)
    assert all(count == 2 for count in counts.values())


def test_deck_positions_are_contiguous_indices():
    deck = build_deck(DEFAULT_SYMBOLS, random.Random(1))
    assert [card.position for card in deck] == list(range(len(deck)))


def test_deck_cards_start_hidden():
    deck = build_deck(DEFAULT_SYMBOLS, random.Random(1))
    assert all(card.state is CardState.HIDDEN for card in deck)


def test_deck_is_reproducible_with_seed():
    first = build_deck(DEFAULT_SYMBOLS, random.Random(42))
    second = build_deck(DEFAULT_SYMBOLS, random.Random(42))
    assert first == second


def test_deck_order_varies_between_rounds():
    rng = random.Random(7)
    layouts = {
        tuple(card.symbol_id for card in build_deck(DEFAULT_SYMBOLS, rng))
        for _ in range(20)
    }
    assert len(layouts) > 1


def test_deck_requires_two_symbols():
    with pytest.raises(ValueError):
        build_deck(["only"])

    with pytest.raises(ValueError):
        build_deck([])


def test_deck_rejects_duplicate_symbols():
    with pytest.raises(ValueError):
        build_deck(["a", "b", "a"])


def test_shuffle_keeps_elements():
    items = list(range(10))
    shuffled = shuffle(list(items), random.Random(3))
    assert sorted(shuffled) == items


def test_shuffle_is_in_place():
    items = list(range(10))
    result = shuffle(items, random.Random(3))
    assert result is items


def test_shuffle_short_sequences():
    assert shuffle([], random.Random(0)) == []
    assert shuffle(["a"], random.Random(0)) == ["a"]


def test_deck_from_layout_keeps_order():
    deck = deck_from_layout(["X", "Y", "X", "Y"])
    assert [card.symbol_id for card in deck] == ["X", "Y", "X", "Y"]
    assert [card.position for card in deck] == [0, 1, 2, 3]


@pytest.mark.parametrize("layout", [["X", "X"], ["X", "Y", "X"], ["X", "X", "X", "Y", "Y", "Y"]])
def test_deck_from_layout_rejects_unpaired_layouts(layout):
    with pytest.raises(ValueError):
        deck_from_layout(layout)
