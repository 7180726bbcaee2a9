from typing import Any, Iterable, Mapping, Optional, Union

from pantry.logging import get_logger
from pantry.schemas.standardization import (
    RawIngredientEntry,
    ScaledRecipe,
    StandardizationBatch,
    StandardizedIngredient,
)
from pantry.services.ingredients.catalog import IngredientCatalog
from pantry.services.recipes import DEFAULT_SERVINGS
from pantry.services.units.catalog import UnitCatalog, convert, snapshot
from pantry.utils.timing import time_span

logger = get_logger(__name__)

EntryLike = Union[RawIngredientEntry, Mapping[str, Any]]


def _as_entry(entry: EntryLike) -> RawIngredientEntry:
    if isinstance(entry, RawIngredientEntry):
        return entry
    return RawIngredientEntry.model_validate(dict(entry))


class Standardizer:
    """Resolve raw ingredient lines against the unit and ingredient catalogs."""

    def __init__(self, unit_catalog: UnitCatalog, ingredient_catalog: IngredientCatalog) -> None:
        self.unit_catalog = unit_catalog
        self.ingredient_catalog = ingredient_catalog

    def standardize(self, entry: EntryLike) -> StandardizedIngredient:
        """
        Annotate one raw entry. Unknown units or names set needs_review; they never
        raise. Malformed entries raise pydantic.ValidationError.
        """
        raw = _as_entry(entry)
        unit = None
        is_new_unit = False
        if raw.unit.strip():
            unit = self.unit_catalog.resolve(raw.unit)
            is_new_unit = unit is None

        suggestion = self.ingredient_catalog.resolve(raw.name)
        is_new_ingredient = suggestion.confidence == "low"

        return StandardizedIngredient(
            quantity=raw.quantity,
            unit=unit.name if unit else raw.unit,
            unit_data=snapshot(unit) if unit else None,
            name=suggestion.name,
            original_name=raw.name,
            original_unit=raw.unit,
            category=suggestion.category,
            modifier=raw.modifier,
            needs_review=is_new_ingredient or is_new_unit,
            confidence=suggestion.confidence,
            is_new_ingredient=is_new_ingredient,
            is_new_unit=is_new_unit,
        )

    def standardize_many(self, entries: Iterable[EntryLike]) -> StandardizationBatch:
        entries = list(entries)
        with time_span("standardize.batch", count=len(entries)):
            standardized = [self.standardize(entry) for entry in entries]
        review = [s for s in standardized if s.needs_review]
        if review:
            logger.info("standardize.review_needed count=%s total=%s", len(review), len(standardized))
        return StandardizationBatch(
            standardized=standardized,
            needs_review=review,
            review_count=len(review),
        )

    def convert_ingredient(
        self, ingredient: StandardizedIngredient, target_unit: str
    ) -> Optional[StandardizedIngredient]:
        """Express a standardized entry in another unit of the same category."""
        if ingredient.unit_data is None:
            return None
        target = self.unit_catalog.resolve(target_unit)
        if target is None:
            return None
        quantity = convert(ingredient.quantity or 0, ingredient.unit_data, target)
        if quantity is None:
            return None
        return ingredient.model_copy(
            update={
                "quantity": quantity,
                "unit": target.name,
                "unit_data": snapshot(target),
                "converted": True,
                "original_quantity": ingredient.quantity,
                "original_unit": ingredient.unit,
            }
        )


def scale_recipe(recipe: Any, scale_factor: float) -> ScaledRecipe:
    """Multiply every given quantity by scale_factor; missing or zero quantities stay as-is."""
    data = recipe.model_dump() if hasattr(recipe, "model_dump") else dict(recipe)
    ingredients = []
    for item in data.get("ingredients") or []:
        item = dict(item)
        if item.get("quantity"):
            item["quantity"] = item["quantity"] * scale_factor
        ingredients.append(item)
    servings = data.get("servings") or DEFAULT_SERVINGS
    return ScaledRecipe(
        id=data.get("id"),
        title=data.get("title") or "",
        ingredients=ingredients,
        scale_factor=scale_factor,
        original_servings=servings,
        scaled_servings=servings * scale_factor,
    )
