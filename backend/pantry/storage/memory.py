"""In-memory catalog repository. Writes are serialized by one lock; reads take snapshots."""

from __future__ import annotations

import itertools
import threading
from typing import Optional

from pantry.errors import CatalogEntryNotFoundError, DuplicateCatalogEntryError
from pantry.logging import get_logger
from pantry.storage.models import (
    Category,
    CategoryAssignment,
    CategoryProfile,
    Ingredient,
    MeasurementUnit,
    Recipe,
)

logger = get_logger(__name__)


class _Table:
    def __init__(self) -> None:
        self.rows: dict[int, object] = {}
        self._ids = itertools.count(1)

    def insert(self, row) -> None:
        row.id = next(self._ids)
        self.rows[row.id] = row

    def values(self) -> list:
        return list(self.rows.values())


class InMemoryCatalogRepository:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._units = _Table()
        self._ingredients = _Table()
        self._categories = _Table()
        self._profiles = _Table()
        self._assignments = _Table()
        self._recipes = _Table()

    # Measurement units

    def list_units(self) -> list[MeasurementUnit]:
        with self._lock:
            units = self._units.values()
        return sorted(units, key=lambda u: (u.category, u.name))

    def get_unit(self, unit_id: int) -> Optional[MeasurementUnit]:
        with self._lock:
            return self._units.rows.get(unit_id)

    def find_unit(self, search_name: str) -> Optional[MeasurementUnit]:
        search = search_name.lower()
        with self._lock:
            units = self._units.values()
        for unit in units:
            if unit.name.lower() == search:
                return unit
        for unit in units:
            if (unit.display_name or "").lower() == search:
                return unit
        return None

    def add_unit(self, unit: MeasurementUnit) -> MeasurementUnit:
        with self._lock:
            if any(u.name.lower() == unit.name.lower() for u in self._units.values()):
                raise DuplicateCatalogEntryError("measurement", unit.name)
            self._units.insert(unit)
        logger.info("measurement.created id=%s name=%s category=%s", unit.id, unit.name, unit.category)
        return unit

    def update_unit(self, unit_id: int, changes: dict) -> MeasurementUnit:
        with self._lock:
            unit = self._units.rows.get(unit_id)
            if unit is None:
                raise CatalogEntryNotFoundError("measurement", unit_id)
            new_name = changes.get("name")
            if new_name and any(
                u.id != unit_id and u.name.lower() == new_name.lower() for u in self._units.values()
            ):
                raise DuplicateCatalogEntryError("measurement", new_name)
            for key, value in changes.items():
                setattr(unit, key, value)
        logger.info("measurement.updated id=%s fields=%s", unit_id, ",".join(sorted(changes)))
        return unit

    def delete_unit(self, unit_id: int) -> None:
        with self._lock:
            if self._units.rows.pop(unit_id, None) is None:
                raise CatalogEntryNotFoundError("measurement", unit_id)
        logger.info("measurement.deleted id=%s", unit_id)

    # Ingredients

    def list_ingredients(self) -> list[Ingredient]:
        with self._lock:
            return self._ingredients.values()

    def get_ingredient(self, ingredient_id: int) -> Optional[Ingredient]:
        with self._lock:
            return self._ingredients.rows.get(ingredient_id)

    def get_ingredient_by_name(self, name: str) -> Optional[Ingredient]:
        search = name.strip().lower()
        with self._lock:
            for ingredient in self._ingredients.values():
                if ingredient.name.lower() == search:
                    return ingredient
        return None

    def add_ingredient(self, ingredient: Ingredient) -> Ingredient:
        with self._lock:
            if self.get_ingredient_by_name(ingredient.name) is not None:
                raise DuplicateCatalogEntryError("ingredient", ingredient.name)
            self._ingredients.insert(ingredient)
        logger.info(
            "ingredient.created id=%s name=%s category=%s",
            ingredient.id,
            ingredient.name,
            ingredient.category,
        )
        return ingredient

    def update_ingredient(self, ingredient_id: int, changes: dict) -> Ingredient:
        with self._lock:
            ingredient = self._ingredients.rows.get(ingredient_id)
            if ingredient is None:
                raise CatalogEntryNotFoundError("ingredient", ingredient_id)
            new_name = changes.get("name")
            if new_name:
                existing = self.get_ingredient_by_name(new_name)
                if existing is not None and existing.id != ingredient_id:
                    raise DuplicateCatalogEntryError("ingredient", new_name)
            for key, value in changes.items():
                setattr(ingredient, key, value)
        logger.info("ingredient.updated id=%s fields=%s", ingredient_id, ",".join(sorted(changes)))
        return ingredient

    def delete_ingredient(self, ingredient_id: int) -> None:
        with self._lock:
            if self._ingredients.rows.pop(ingredient_id, None) is None:
                raise CatalogEntryNotFoundError("ingredient", ingredient_id)
            for assignment in self._assignments.values():
                if assignment.ingredient_id == ingredient_id:
                    del self._assignments.rows[assignment.id]
        logger.info("ingredient.deleted id=%s", ingredient_id)

    # Categories, profiles and assignments

    def list_categories(self) -> list[Category]:
        with self._lock:
            categories = self._categories.values()
        return sorted(categories, key=lambda c: (c.sort_order, c.name))

    def get_category(self, category_id: int) -> Optional[Category]:
        with self._lock:
            return self._categories.rows.get(category_id)

    def get_category_by_name(self, name: str) -> Optional[Category]:
        search = name.strip().lower()
        with self._lock:
            for category in self._categories.values():
                if category.name.lower() == search:
                    return category
        return None

    def add_category(self, category: Category) -> Category:
        with self._lock:
            if self.get_category_by_name(category.name) is not None:
                raise DuplicateCatalogEntryError("category", category.name)
            self._categories.insert(category)
        logger.info("category.created id=%s name=%s sort_order=%s", category.id, category.name, category.sort_order)
        return category

    def list_profiles(self) -> list[CategoryProfile]:
        with self._lock:
            profiles = self._profiles.values()
        return sorted(profiles, key=lambda p: p.name)

    def get_profile_by_name(self, name: str) -> Optional[CategoryProfile]:
        search = name.strip().lower()
        with self._lock:
            for profile in self._profiles.values():
                if profile.name.lower() == search:
                    return profile
        return None

    def add_profile(self, profile: CategoryProfile) -> CategoryProfile:
        with self._lock:
            if self.get_profile_by_name(profile.name) is not None:
                raise DuplicateCatalogEntryError("profile", profile.name)
            self._profiles.insert(profile)
        logger.info("profile.created id=%s name=%s", profile.id, profile.name)
        return profile

    def get_assignment(
        self, ingredient_id: int, profile_id: Optional[int]
    ) -> Optional[CategoryAssignment]:
        with self._lock:
            for assignment in self._assignments.values():
                if assignment.ingredient_id == ingredient_id and assignment.profile_id == profile_id:
                    return assignment
        return None

    def list_assignments(self) -> list[CategoryAssignment]:
        with self._lock:
            return self._assignments.values()

    def upsert_assignment(
        self,
        ingredient_id: int,
        category_id: int,
        profile_id: Optional[int] = None,
        sort_hint: Optional[int] = None,
    ) -> CategoryAssignment:
        with self._lock:
            assignment = self.get_assignment(ingredient_id, profile_id)
            if assignment is not None:
                assignment.category_id = category_id
                assignment.sort_hint = sort_hint
            else:
                assignment = CategoryAssignment(
                    ingredient_id=ingredient_id,
                    profile_id=profile_id,
                    category_id=category_id,
                    sort_hint=sort_hint,
                )
                self._assignments.insert(assignment)
        logger.info(
            "assignment.upserted id=%s ingredient_id=%s profile_id=%s category_id=%s",
            assignment.id,
            ingredient_id,
            profile_id,
            category_id,
        )
        return assignment

    # Recipes

    def get_recipe(self, recipe_id: int) -> Optional[Recipe]:
        with self._lock:
            return self._recipes.rows.get(recipe_id)

    def list_recipes(self) -> list[Recipe]:
        with self._lock:
            return self._recipes.values()

    def add_recipe(self, recipe: Recipe) -> Recipe:
        with self._lock:
            self._recipes.insert(recipe)
        logger.info("recipe.created id=%s title=%s servings=%s", recipe.id, recipe.title, recipe.servings)
        return recipe
