"""
This module builds the shuffled deck for a round of the memory game.

>>> import random
>>> deck = build_deck(["x", "y"], random.Random(7))
>>> len(deck)
4
>>> sorted(card.position for card in deck)
[0, 1, 2, 3]
"""

import random
from collections import Counter
from typing import Iterable, List, MutableSequence, Optional, Tuple, TypeVar

from concentration.common.card import Card, SymbolId

T = TypeVar("T")

MIN_SYMBOLS = 2


def shuffle(items: MutableSequence[T], rng: Optional[random.Random] = None):
    """
    Shuffle a sequence in place with the Fisher-Yates algorithm.

    Walks from the last index down to 1, swapping each element with one picked
    uniformly from the not-yet-fixed prefix, so every permutation is equally
    likely given a uniform source.

    :param items: The mutable sequence to shuffle.
    :param rng: A `random.Random` instance (optional). The module RNG is used otherwise.
    :return: The same sequence, shuffled.
    >>> shuffle([1], random.Random(0))
    [1]
    """
    randint = (rng or random).randint
    for i in range(len(items) - 1, 0, -1):
        j = randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def validate_symbols(symbols: Iterable[SymbolId]) -> List[SymbolId]:
    """
    Check that a symbol set can produce a deck.

    :raises ValueError: If fewer than two symbols are given or a symbol repeats.
    """
    symbols = list(symbols)
    if len(symbols) < MIN_SYMBOLS:
        raise ValueError(
            f"At least {MIN_SYMBOLS} distinct symbols are required, got {len(symbols)}"
        )

    duplicates = [symbol for symbol, count in Counter(symbols).items() if count > 1]
    if duplicates:
        raise ValueError(f"Symbols must be distinct, duplicated: {duplicates}")

    return symbols


def build_deck(
    symbols: Iterable[SymbolId], rng: Optional[random.Random] = None
) -> Tuple[Card, ...]:
    """
    Produce a shuffled deck holding every symbol exactly twice.

    :param symbols: N distinct symbol identifiers (N >= 2).
    :param rng: A `random.Random` instance (optional), useful for seeded rounds.
    :return: A tuple of 2N hidden cards whose positions are their indices.
    """
    symbols = validate_symbols(symbols)

    pairs = [symbol for symbol in symbols for _ in range(2)]
    shuffle(pairs, rng)

    return tuple(Card(position, symbol) for position, symbol in enumerate(pairs))


def deck_from_layout(layout: Iterable[SymbolId]) -> Tuple[Card, ...]:
    """
    Build an unshuffled deck from an explicit layout.

    Used to replay a known board. Each symbol must appear exactly twice.

    >>> [card.symbol_id for card in deck_from_layout("XYXY")]
    ['X', 'Y', 'X', 'Y']
    """
    layout = list(layout)
    counts = Counter(layout)
    if len(counts) < MIN_SYMBOLS or any(count != 2 for count in counts.values()):
        raise ValueError(
            f"A layout must hold at least {MIN_SYMBOLS} symbols, each exactly twice"
        )

    return tuple(Card(position, symbol) for position, symbol in enumerate(layout))
