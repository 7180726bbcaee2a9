from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Optional, Sequence

from pantry.config import settings
from pantry.logging import get_logger
from pantry.schemas.standardization import GroceryItem, StandardizedIngredient
from pantry.services.aggregation.strategies import (
    KeyedMergeStrategy,
    PreparedEntry,
    UnitAwareMergeStrategy,
)
from pantry.services.categories.resolver import CategoryResolver, group_by_category
from pantry.services.ingredients.catalog import IngredientCatalog
from pantry.services.standardization.standardizer import EntryLike, Standardizer
from pantry.services.units.catalog import UnitCatalog
from pantry.storage.models import FALLBACK_CATEGORY
from pantry.storage.repository import CatalogRepository
from pantry.utils.timing import time_span

logger = get_logger(__name__)


class Aggregator:
    """
    Build grocery lists from stored recipes.

    Recipes are prepared (fetched, scaled, categorized) concurrently; the merge runs
    in the calling thread in recipe order, so output order is first-seen key order.
    """

    def __init__(
        self,
        repository: CatalogRepository,
        ingredient_catalog: IngredientCatalog,
        category_resolver: CategoryResolver,
        standardizer: Optional[Standardizer] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.repository = repository
        self.ingredient_catalog = ingredient_catalog
        self.category_resolver = category_resolver
        self.standardizer = standardizer or Standardizer(UnitCatalog(repository), ingredient_catalog)
        self.max_workers = max_workers or settings.aggregate_max_workers
        self.keyed = KeyedMergeStrategy()
        self.unit_aware = UnitAwareMergeStrategy()

    def aggregate(
        self,
        recipe_ids: Sequence[int],
        scale_factor: float,
        profile_id: Optional[int] = None,
    ) -> list[GroceryItem]:
        """Strict keyed aggregation. scale_factor is validated by the caller."""
        recipe_ids = list(recipe_ids)
        if not recipe_ids:
            return []
        workers = min(self.max_workers, len(recipe_ids))
        with time_span("grocery.aggregate", recipes=len(recipe_ids), workers=workers, scale=scale_factor):
            if workers <= 1:
                prepared = [self._prepare_recipe(rid, scale_factor, profile_id) for rid in recipe_ids]
            else:
                with ThreadPoolExecutor(max_workers=workers) as ex:
                    prepared = list(
                        ex.map(lambda rid: self._prepare_recipe(rid, scale_factor, profile_id), recipe_ids)
                    )
            items = self.keyed.merge(entry for entries in prepared for entry in entries)
        logger.info("grocery.aggregate.end recipes=%s items=%s", len(recipe_ids), len(items))
        return items

    def aggregate_ingredients_for_grocery(self, entries: Iterable[EntryLike]) -> list[StandardizedIngredient]:
        """Unit-aware aggregation of raw entries; sorted by category, then name."""
        standardized = [self.standardizer.standardize(entry) for entry in entries]
        return self.unit_aware.merge(standardized)

    def group(self, items: Iterable[Any]) -> list[tuple[str, list[Any]]]:
        return group_by_category(items)

    def _prepare_recipe(
        self, recipe_id: int, scale_factor: float, profile_id: Optional[int]
    ) -> list[PreparedEntry]:
        recipe = self.repository.get_recipe(recipe_id)
        if recipe is None:
            logger.warning("grocery.recipe_not_found id=%s", recipe_id)
            return []
        entries = []
        for item in recipe.ingredients or []:
            name = item.get("name") or ""
            category, found = self._categorize(item, profile_id)
            entries.append(
                PreparedEntry(
                    name=name,
                    unit=item.get("unit") or "",
                    quantity=self._quantity(item, recipe_id) * scale_factor,
                    category=category,
                    recipe_title=recipe.title,
                    modifier=item.get("modifier") or None,
                    needs_review=not found,
                )
            )
        logger.info("grocery.recipe_prepared id=%s title=%s entries=%s", recipe_id, recipe.title, len(entries))
        return entries

    @staticmethod
    def _quantity(item: dict, recipe_id: int) -> float:
        """Stored quantity as a float; missing, unparseable or negative values count as 0."""
        value = item.get("quantity")
        if value is None or value == "":
            return 0.0
        try:
            quantity = float(value)
        except (TypeError, ValueError):
            quantity = math.nan
        if not math.isfinite(quantity) or quantity < 0:
            logger.warning(
                "grocery.invalid_quantity recipe_id=%s name=%s value=%r", recipe_id, item.get("name"), value
            )
            return 0.0
        return quantity

    def _categorize(self, item: dict, profile_id: Optional[int]) -> tuple[str, bool]:
        """Return (category, ingredient known to the catalog)."""
        ingredient_id = item.get("ingredient_id")
        if ingredient_id is None and item.get("name"):
            found = self.ingredient_catalog.find(item["name"])
            ingredient_id = found.id if found else None
        if ingredient_id is None:
            return item.get("category") or FALLBACK_CATEGORY, False
        return self.category_resolver.resolve_category(ingredient_id, profile_id), True
