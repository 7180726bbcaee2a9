from typing import Optional

from pantry.errors import CatalogValidationError
from pantry.logging import get_logger
from pantry.schemas.standardization import IngredientSuggestion
from pantry.services.ingredients.matching import MatchStrategy, SubstringMatchStrategy
from pantry.storage.models import INGREDIENT_CATEGORIES, UNKNOWN_CATEGORY, Ingredient
from pantry.storage.repository import CatalogRepository

logger = get_logger(__name__)


class IngredientCatalog:
    def __init__(
        self, repository: CatalogRepository, strategy: Optional[MatchStrategy] = None
    ) -> None:
        self.repository = repository
        self.strategy = strategy or SubstringMatchStrategy()

    def find(self, name: str) -> Optional[Ingredient]:
        if not name:
            return None
        return self.strategy.match(name, self.repository)

    def resolve(self, name: str) -> IngredientSuggestion:
        """
        Suggest the canonical ingredient for a raw name.
        Unmatched names come back verbatim with category "unknown" and low confidence;
        they are never added to the catalog.
        """
        found = self.find(name)
        if found:
            return IngredientSuggestion(
                name=found.name,
                category=found.category,
                confidence="high",
                original=name,
                ingredient_id=found.id,
            )
        logger.info("ingredient.unresolved name=%s", name)
        return IngredientSuggestion(
            name=name,
            category=UNKNOWN_CATEGORY,
            confidence="low",
            original=name,
        )

    def list_ingredients(self) -> list[Ingredient]:
        return sorted(self.repository.list_ingredients(), key=lambda i: (i.category, i.name))

    def ingredients_by_category(self, category: str) -> list[Ingredient]:
        return sorted(
            (i for i in self.repository.list_ingredients() if i.category == category),
            key=lambda i: i.name,
        )

    def ingredient_categories(self) -> list[str]:
        return sorted({i.category for i in self.repository.list_ingredients()})

    def create_ingredient(
        self,
        name: str,
        category: str,
        aliases: Optional[list[str]] = None,
        nutritional_info: Optional[dict] = None,
        storage_tips: Optional[str] = None,
    ) -> Ingredient:
        name = (name or "").strip()
        if not name:
            raise CatalogValidationError("ingredient name is required")
        self._validate_category(category)
        return self.repository.add_ingredient(
            Ingredient(
                name=name,
                category=category,
                aliases=[a.strip() for a in aliases or [] if a.strip()],
                nutritional_info=nutritional_info,
                storage_tips=storage_tips,
            )
        )

    def update_ingredient(self, ingredient_id: int, **changes) -> Ingredient:
        if "category" in changes:
            self._validate_category(changes["category"])
        if "aliases" in changes:
            changes["aliases"] = [a.strip() for a in changes["aliases"] or [] if a.strip()]
        return self.repository.update_ingredient(ingredient_id, changes)

    def delete_ingredient(self, ingredient_id: int) -> None:
        self.repository.delete_ingredient(ingredient_id)

    @staticmethod
    def _validate_category(category: str) -> None:
        if category not in INGREDIENT_CATEGORIES:
            raise CatalogValidationError(f"unknown ingredient category: {category!r}")
