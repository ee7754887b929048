"""
Verification package for the Concentration memory game.

This package provides tools for checking the statistical properties of
dealt decks.
"""

from concentration.verification.statistics import (
    ConfidenceInterval,
    ShuffleReport,
    ShuffleValidator,
)

__all__ = ["ConfidenceInterval", "ShuffleReport", "ShuffleValidator"]
