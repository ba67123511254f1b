"""Persistent stores used across generation runs."""

from .unit_cache import CachedOutcome, UnitCache

__all__ = ["CachedOutcome", "UnitCache"]
