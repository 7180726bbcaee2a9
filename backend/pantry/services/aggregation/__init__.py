"""Grocery aggregation: strict keyed and unit-aware merge strategies."""

from pantry.services.aggregation.aggregator import Aggregator
from pantry.services.aggregation.strategies import (
    KeyedMergeStrategy,
    PreparedEntry,
    UnitAwareMergeStrategy,
    merge_key,
)

__all__ = ["Aggregator", "KeyedMergeStrategy", "PreparedEntry", "UnitAwareMergeStrategy", "merge_key"]
