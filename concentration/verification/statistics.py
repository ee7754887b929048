"""
Statistical validation of the deck shuffle.

This module deals many decks and checks that symbols land on board positions
without bias: every card of a symbol should be equally likely to sit at any
position, and the first card of a symbol should sit, on average, where a
uniformly random pair of positions puts it.
"""

import random
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence

import numpy as np
import scipy.stats as stats

from concentration.common.card import SymbolId
from concentration.common.deck import build_deck, validate_symbols
from concentration.memory.constants import DEFAULT_SYMBOLS


@dataclass
class ConfidenceInterval:
    """
    Represents a confidence interval with lower and upper bounds.

    Attributes:
        lower: The lower bound of the confidence interval
        upper: The upper bound of the confidence interval
        confidence: The confidence level (e.g., 0.95 for 95% confidence)
    """

    lower: float
    upper: float
    confidence: float

    def contains(self, value: float) -> bool:
        """Check if the interval contains a value."""
        return self.lower <= value <= self.upper

    def to_dict(self) -> Dict[str, float]:
        """Convert to a dictionary."""
        return {"lower": self.lower, "upper": self.upper, "confidence": self.confidence}


@dataclass
class ShuffleReport:
    """
    Outcome of a shuffle validation run.

    Attributes:
        rounds: Number of decks dealt
        deck_size: Cards per deck
        symbol: Symbol whose positions were tested
        position_counts: How often the symbol occupied each position
        chi_square: Chi-square statistic against a uniform spread
        p_value: p-value of the chi-square test
        mean_first_position: Average position of the symbol's first card
        expected_first_position: Theoretical average of that position
        first_position_interval: Confidence interval of the observed average
    """

    rounds: int
    deck_size: int
    symbol: SymbolId
    position_counts: np.ndarray
    chi_square: float
    p_value: float
    mean_first_position: float
    expected_first_position: float
    first_position_interval: ConfidenceInterval

    def is_uniform(self, alpha: float = 0.01) -> bool:
        """
        Check whether the shuffle looks unbiased at a significance level.

        Both the chi-square test must pass and the expected first position
        must fall inside the confidence interval.
        """
        return self.p_value >= alpha and self.first_position_interval.contains(
            self.expected_first_position
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rounds": self.rounds,
            "deck_size": self.deck_size,
            "symbol": self.symbol,
            "position_counts": self.position_counts.tolist(),
            "chi_square": self.chi_square,
            "p_value": self.p_value,
            "mean_first_position": self.mean_first_position,
            "expected_first_position": self.expected_first_position,
            "first_position_interval": self.first_position_interval.to_dict(),
        }


class ShuffleValidator:
    """
    Validates the statistical properties of dealt decks.
    """

    def __init__(
        self,
        symbols: Iterable[SymbolId] = DEFAULT_SYMBOLS,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the validator.

        Args:
            symbols: Symbols to build decks from
            rng: Random source for the shuffle
        """
        self.symbols = validate_symbols(symbols)
        self.rng = rng or random.Random()

    @property
    def deck_size(self) -> int:
        return 2 * len(self.symbols)

    def occupancy(self, rounds: int) -> np.ndarray:
        """
        Deal decks and count where each symbol lands.

        Args:
            rounds: Number of decks to deal

        Returns:
            Matrix of shape (symbols, positions) with occupancy counts
        """
        index = {symbol: i for i, symbol in enumerate(self.symbols)}
        counts = np.zeros((len(self.symbols), self.deck_size), dtype=np.int64)

        for _ in range(rounds):
            for card in build_deck(self.symbols, self.rng):
                counts[index[card.symbol_id], card.position] += 1

        return counts

    def first_positions(self, rounds: int, symbol: SymbolId) -> np.ndarray:
        """
        Deal decks and record the position of a symbol's first card.

        Args:
            rounds: Number of decks to deal
            symbol: Symbol to follow

        Returns:
            Array of first positions, one per deck
        """
        positions = np.empty(rounds, dtype=np.int64)
        for i in range(rounds):
            deck = build_deck(self.symbols, self.rng)
            positions[i] = next(card.position for card in deck if card.symbol_id == symbol)
        return positions

    def expected_first_position(self) -> float:
        """
        Average 0-based position of the lower of two uniformly random positions.

        For M positions the lower one averages (M + 1) / 3 in 1-based terms.
        """
        return (self.deck_size + 1) / 3 - 1

    def validate(
        self,
        rounds: int = 2000,
        symbol: Optional[SymbolId] = None,
        confidence: float = 0.99,
    ) -> ShuffleReport:
        """
        Run the shuffle checks.

        Args:
            rounds: Number of decks to deal for each check
            symbol: Symbol to follow (defaults to the first symbol)
            confidence: Confidence level for the first-position interval

        Returns:
            A ShuffleReport
        """
        if rounds < 2:
            raise ValueError("At least 2 rounds are required for validation")

        symbol = self.symbols[0] if symbol is None else symbol
        if symbol not in self.symbols:
            raise ValueError(f"Unknown symbol: {symbol!r}")

        counts = self.occupancy(rounds)[self.symbols.index(symbol)]
        expected = np.full(self.deck_size, counts.sum() / self.deck_size)
        chi_square, p_value = stats.chisquare(counts, expected)

        firsts = self.first_positions(rounds, symbol)
        interval = self._calculate_confidence_interval(firsts, confidence)

        return ShuffleReport(
            rounds=rounds,
            deck_size=self.deck_size,
            symbol=symbol,
            position_counts=counts,
            chi_square=float(chi_square),
            p_value=float(p_value),
            mean_first_position=float(np.mean(firsts)),
            expected_first_position=self.expected_first_position(),
            first_position_interval=interval,
        )

    def _calculate_confidence_interval(
        self, values: Sequence[float], confidence: float = 0.95
    ) -> ConfidenceInterval:
        """
        Calculate a confidence interval for a set of values.

        Args:
            values: The values to calculate the confidence interval for
            confidence: The confidence level (e.g., 0.95 for 95% confidence)

        Returns:
            A ConfidenceInterval object
        """
        mean = np.mean(values)
        std_err = stats.sem(values)

        margin = std_err * stats.t.ppf((1 + confidence) / 2, len(values) - 1)
        return ConfidenceInterval(float(mean - margin), float(mean + margin), confidence)
