"""Grocery list entry point: validates request parameters, then aggregates."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from pantry.config import settings
from pantry.errors import InvalidScaleFactorError
from pantry.logging import get_logger
from pantry.services.aggregation import Aggregator

logger = get_logger(__name__)


def validate_scale_factor(value: Any, maximum: Optional[float] = None) -> float:
    maximum = settings.max_scale_factor if maximum is None else maximum
    try:
        scale = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidScaleFactorError(value, maximum) from e
    if not 0 < scale <= maximum:
        raise InvalidScaleFactorError(value, maximum)
    return scale


def _recipe_ids(values: Iterable[Any]) -> list[int]:
    ids: list[int] = []
    for value in values:
        # bool is an int subclass; floats must be whole numbers.
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            logger.warning("grocery.invalid_recipe_id value=%r", value)
            continue
        try:
            ids.append(int(value))
        except (TypeError, ValueError):
            logger.warning("grocery.invalid_recipe_id value=%r", value)
    return ids


def build_grocery_list(
    aggregator: Aggregator,
    recipe_ids: Iterable[Any],
    scale_factor: Any = 1,
    profile_id: Optional[int] = None,
    grouped: bool = False,
):
    """
    Aggregate the selected recipes with the strict keyed strategy.
    Returns a list of GroceryItem, or (category, items) pairs when grouped=True.
    """
    if isinstance(recipe_ids, (str, bytes)):
        raise TypeError("recipe_ids must be a list")
    scale = validate_scale_factor(scale_factor)
    ids = _recipe_ids(recipe_ids)
    logger.info("grocery.request recipes=%s scale=%s profile_id=%s", ids, scale, profile_id)
    items = aggregator.aggregate(ids, scale, profile_id=profile_id)
    if grouped:
        return aggregator.group(items)
    return items
