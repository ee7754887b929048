"""
Platform adapters for the Concentration engine.

This package provides adapters that translate between the core game engine
and various platforms (CLI, tests, etc.).
"""

from concentration.adapters.base import PlatformAdapter
from concentration.adapters.cli import CLIAdapter
from concentration.adapters.dummy import DummyAdapter

__all__ = ["PlatformAdapter", "CLIAdapter", "DummyAdapter"]
