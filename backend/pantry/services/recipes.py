"""Recipe book: stores reviewed recipes for grocery aggregation."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from pantry.errors import UnreviewedIngredientsError
from pantry.logging import get_logger
from pantry.schemas.standardization import RawIngredientEntry
from pantry.storage.models import FALLBACK_CATEGORY, Recipe
from pantry.storage.repository import CatalogRepository

logger = get_logger(__name__)

DEFAULT_SERVINGS = 4


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


class RecipeBook:
    def __init__(self, repository: CatalogRepository) -> None:
        self.repository = repository

    def confirm(
        self,
        title: str,
        ingredients: Sequence[Any],
        instructions: Sequence[str],
        tags: Optional[Sequence[str]] = None,
        servings: Optional[int] = None,
        force: bool = False,
    ) -> Recipe:
        """
        Save a recipe whose ingredients went through review.
        Entries still flagged needs_review block the save unless force=True.
        """
        if not title or not ingredients or not instructions:
            raise ValueError("title, ingredients and instructions are required")
        unreviewed = [i for i in ingredients if _field(i, "needs_review", False)]
        if unreviewed and not force:
            raise UnreviewedIngredientsError(unreviewed)
        if unreviewed:
            logger.warning("recipe.confirm_forced title=%s unreviewed=%s", title, len(unreviewed))
        stored = []
        for item in ingredients:
            # Raises pydantic.ValidationError for missing names or bad quantities.
            raw = RawIngredientEntry.model_validate(
                {
                    "name": _field(item, "name"),
                    "quantity": _field(item, "quantity"),
                    "unit": _field(item, "unit"),
                    "modifier": _field(item, "modifier"),
                }
            )
            entry = {
                "name": raw.name,
                "quantity": raw.quantity,
                "unit": raw.unit,
                "category": _field(item, "category") or FALLBACK_CATEGORY,
                "modifier": raw.modifier,
            }
            ingredient_id = _field(item, "ingredient_id")
            if ingredient_id is not None:
                entry["ingredient_id"] = ingredient_id
            stored.append(entry)
        return self.repository.add_recipe(
            Recipe(
                title=title,
                ingredients=stored,
                instructions=[instructions] if isinstance(instructions, str) else list(instructions),
                tags=list(tags or []),
                servings=servings or DEFAULT_SERVINGS,
            )
        )

    def get(self, recipe_id: int) -> Optional[Recipe]:
        return self.repository.get_recipe(recipe_id)

    def list(self) -> list[Recipe]:
        return self.repository.list_recipes()
