"""Catalog repository interface consumed by the catalog services and the aggregator.

Services depend on this protocol only; concrete stores are injected.
"""

from __future__ import annotations

from typing import Optional, Protocol

from pantry.storage.models import (
    Category,
    CategoryAssignment,
    CategoryProfile,
    Ingredient,
    MeasurementUnit,
    Recipe,
)


class CatalogRepository(Protocol):
    # Measurement units
    def list_units(self) -> list[MeasurementUnit]: ...

    def get_unit(self, unit_id: int) -> Optional[MeasurementUnit]: ...

    def find_unit(self, search_name: str) -> Optional[MeasurementUnit]:
        """Exact lowercase match on name, then on display_name."""
        ...

    def add_unit(self, unit: MeasurementUnit) -> MeasurementUnit: ...

    def update_unit(self, unit_id: int, changes: dict) -> MeasurementUnit: ...

    def delete_unit(self, unit_id: int) -> None: ...

    # Ingredients, listed in storage (id) order
    def list_ingredients(self) -> list[Ingredient]: ...

    def get_ingredient(self, ingredient_id: int) -> Optional[Ingredient]: ...

    def get_ingredient_by_name(self, name: str) -> Optional[Ingredient]: ...

    def add_ingredient(self, ingredient: Ingredient) -> Ingredient: ...

    def update_ingredient(self, ingredient_id: int, changes: dict) -> Ingredient: ...

    def delete_ingredient(self, ingredient_id: int) -> None: ...

    # Categories, profiles and assignments
    def list_categories(self) -> list[Category]: ...

    def get_category(self, category_id: int) -> Optional[Category]: ...

    def get_category_by_name(self, name: str) -> Optional[Category]: ...

    def add_category(self, category: Category) -> Category: ...

    def list_profiles(self) -> list[CategoryProfile]: ...

    def get_profile_by_name(self, name: str) -> Optional[CategoryProfile]: ...

    def add_profile(self, profile: CategoryProfile) -> CategoryProfile: ...

    def get_assignment(
        self, ingredient_id: int, profile_id: Optional[int]
    ) -> Optional[CategoryAssignment]: ...

    def list_assignments(self) -> list[CategoryAssignment]: ...

    def upsert_assignment(
        self,
        ingredient_id: int,
        category_id: int,
        profile_id: Optional[int] = None,
        sort_hint: Optional[int] = None,
    ) -> CategoryAssignment: ...

    # Recipes
    def get_recipe(self, recipe_id: int) -> Optional[Recipe]: ...

    def list_recipes(self) -> list[Recipe]: ...

    def add_recipe(self, recipe: Recipe) -> Recipe: ...
