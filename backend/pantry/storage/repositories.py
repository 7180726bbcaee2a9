"""SQLModel-backed catalog repository.

Each call opens its own session from the injected factory. Writes from one
repository are serialized by a lock; unique indexes (including the partial index
on global assignments) keep writers in other repositories or processes from
adding a second row for the same key.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from pantry.errors import CatalogEntryNotFoundError, DuplicateCatalogEntryError
from pantry.logging import get_logger
from pantry.storage.db import get_session
from pantry.storage.models import (
    Category,
    CategoryAssignment,
    CategoryProfile,
    Ingredient,
    MeasurementUnit,
    Recipe,
)

logger = get_logger(__name__)


class SqlCatalogRepository:
    def __init__(self, session_factory: Callable[[], Session] = get_session) -> None:
        self._session_factory = session_factory
        self._write_lock = threading.Lock()

    def _insert(self, row, kind: str):
        with self._session_factory() as session:
            session.add(row)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateCatalogEntryError(kind, getattr(row, "name", "")) from e
            session.refresh(row)
            return row

    def _update(self, model, kind: str, row_id: int, changes: dict):
        with self._session_factory() as session:
            row = session.get(model, row_id)
            if row is None:
                raise CatalogEntryNotFoundError(kind, row_id)
            for key, value in changes.items():
                setattr(row, key, value)
            session.add(row)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateCatalogEntryError(kind, changes.get("name", "")) from e
            session.refresh(row)
        logger.info("%s.updated id=%s fields=%s", kind, row_id, ",".join(sorted(changes)))
        return row

    # Measurement units

    def list_units(self) -> list[MeasurementUnit]:
        with self._session_factory() as session:
            return list(
                session.exec(select(MeasurementUnit).order_by(MeasurementUnit.category, MeasurementUnit.name))
            )

    def get_unit(self, unit_id: int) -> Optional[MeasurementUnit]:
        with self._session_factory() as session:
            return session.get(MeasurementUnit, unit_id)

    def find_unit(self, search_name: str) -> Optional[MeasurementUnit]:
        search = search_name.lower()
        with self._session_factory() as session:
            unit = session.exec(
                select(MeasurementUnit)
                .where(func.lower(MeasurementUnit.name) == search)
                .order_by(MeasurementUnit.id)
            ).first()
            if unit:
                return unit
            return session.exec(
                select(MeasurementUnit)
                .where(func.lower(MeasurementUnit.display_name) == search)
                .order_by(MeasurementUnit.id)
            ).first()

    def add_unit(self, unit: MeasurementUnit) -> MeasurementUnit:
        with self._write_lock:
            if self._unit_name_taken(unit.name):
                raise DuplicateCatalogEntryError("measurement", unit.name)
            created = self._insert(unit, "measurement")
        logger.info("measurement.created id=%s name=%s category=%s", created.id, created.name, created.category)
        return created

    def _unit_name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        with self._session_factory() as session:
            query = select(MeasurementUnit).where(func.lower(MeasurementUnit.name) == name.lower())
            if exclude_id is not None:
                query = query.where(MeasurementUnit.id != exclude_id)
            return session.exec(query).first() is not None

    def update_unit(self, unit_id: int, changes: dict) -> MeasurementUnit:
        with self._write_lock:
            if changes.get("name") and self._unit_name_taken(changes["name"], exclude_id=unit_id):
                raise DuplicateCatalogEntryError("measurement", changes["name"])
            return self._update(MeasurementUnit, "measurement", unit_id, changes)

    def delete_unit(self, unit_id: int) -> None:
        with self._write_lock, self._session_factory() as session:
            unit = session.get(MeasurementUnit, unit_id)
            if unit is None:
                raise CatalogEntryNotFoundError("measurement", unit_id)
            session.delete(unit)
            session.commit()
        logger.info("measurement.deleted id=%s", unit_id)

    # Ingredients

    def list_ingredients(self) -> list[Ingredient]:
        with self._session_factory() as session:
            return list(session.exec(select(Ingredient).order_by(Ingredient.id)))

    def get_ingredient(self, ingredient_id: int) -> Optional[Ingredient]:
        with self._session_factory() as session:
            return session.get(Ingredient, ingredient_id)

    def get_ingredient_by_name(self, name: str) -> Optional[Ingredient]:
        with self._session_factory() as session:
            return session.exec(
                select(Ingredient).where(func.lower(Ingredient.name) == name.strip().lower())
            ).first()

    def add_ingredient(self, ingredient: Ingredient) -> Ingredient:
        with self._write_lock:
            if self.get_ingredient_by_name(ingredient.name) is not None:
                raise DuplicateCatalogEntryError("ingredient", ingredient.name)
            created = self._insert(ingredient, "ingredient")
        logger.info(
            "ingredient.created id=%s name=%s category=%s",
            created.id,
            created.name,
            created.category,
        )
        return created

    def update_ingredient(self, ingredient_id: int, changes: dict) -> Ingredient:
        with self._write_lock:
            new_name = changes.get("name")
            if new_name:
                existing = self.get_ingredient_by_name(new_name)
                if existing is not None and existing.id != ingredient_id:
                    raise DuplicateCatalogEntryError("ingredient", new_name)
            return self._update(Ingredient, "ingredient", ingredient_id, changes)

    def delete_ingredient(self, ingredient_id: int) -> None:
        with self._write_lock, self._session_factory() as session:
            ingredient = session.get(Ingredient, ingredient_id)
            if ingredient is None:
                raise CatalogEntryNotFoundError("ingredient", ingredient_id)
            for assignment in session.exec(
                select(CategoryAssignment).where(CategoryAssignment.ingredient_id == ingredient_id)
            ):
                session.delete(assignment)
            session.delete(ingredient)
            session.commit()
        logger.info("ingredient.deleted id=%s", ingredient_id)

    # Categories, profiles and assignments

    def list_categories(self) -> list[Category]:
        with self._session_factory() as session:
            return list(session.exec(select(Category).order_by(Category.sort_order, Category.name)))

    def get_category(self, category_id: int) -> Optional[Category]:
        with self._session_factory() as session:
            return session.get(Category, category_id)

    def get_category_by_name(self, name: str) -> Optional[Category]:
        with self._session_factory() as session:
            return session.exec(
                select(Category).where(func.lower(Category.name) == name.strip().lower())
            ).first()

    def add_category(self, category: Category) -> Category:
        with self._write_lock:
            if self.get_category_by_name(category.name) is not None:
                raise DuplicateCatalogEntryError("category", category.name)
            created = self._insert(category, "category")
        logger.info("category.created id=%s name=%s sort_order=%s", created.id, created.name, created.sort_order)
        return created

    def list_profiles(self) -> list[CategoryProfile]:
        with self._session_factory() as session:
            return list(session.exec(select(CategoryProfile).order_by(CategoryProfile.name)))

    def get_profile_by_name(self, name: str) -> Optional[CategoryProfile]:
        with self._session_factory() as session:
            return session.exec(
                select(CategoryProfile).where(func.lower(CategoryProfile.name) == name.strip().lower())
            ).first()

    def add_profile(self, profile: CategoryProfile) -> CategoryProfile:
        with self._write_lock:
            if self.get_profile_by_name(profile.name) is not None:
                raise DuplicateCatalogEntryError("profile", profile.name)
            created = self._insert(profile, "profile")
        logger.info("profile.created id=%s name=%s", created.id, created.name)
        return created

    @staticmethod
    def _assignment_query(ingredient_id: int, profile_id: Optional[int]):
        query = select(CategoryAssignment).where(CategoryAssignment.ingredient_id == ingredient_id)
        if profile_id is None:
            return query.where(CategoryAssignment.profile_id.is_(None))
        return query.where(CategoryAssignment.profile_id == profile_id)

    def get_assignment(
        self, ingredient_id: int, profile_id: Optional[int]
    ) -> Optional[CategoryAssignment]:
        with self._session_factory() as session:
            return session.exec(self._assignment_query(ingredient_id, profile_id)).first()

    def list_assignments(self) -> list[CategoryAssignment]:
        with self._session_factory() as session:
            return list(session.exec(select(CategoryAssignment).order_by(CategoryAssignment.id)))

    def upsert_assignment(
        self,
        ingredient_id: int,
        category_id: int,
        profile_id: Optional[int] = None,
        sort_hint: Optional[int] = None,
    ) -> CategoryAssignment:
        with self._write_lock:
            try:
                assignment = self._write_assignment(ingredient_id, category_id, profile_id, sort_hint)
            except IntegrityError:
                # Another writer inserted the row for this key first; update that row.
                logger.info(
                    "assignment.upsert_retry ingredient_id=%s profile_id=%s", ingredient_id, profile_id
                )
                try:
                    assignment = self._write_assignment(ingredient_id, category_id, profile_id, sort_hint)
                except IntegrityError as e:
                    raise DuplicateCatalogEntryError(
                        "assignment", f"ingredient_id={ingredient_id} profile_id={profile_id}"
                    ) from e
        logger.info(
            "assignment.upserted id=%s ingredient_id=%s profile_id=%s category_id=%s",
            assignment.id,
            ingredient_id,
            profile_id,
            category_id,
        )
        return assignment

    def _write_assignment(
        self,
        ingredient_id: int,
        category_id: int,
        profile_id: Optional[int],
        sort_hint: Optional[int],
    ) -> CategoryAssignment:
        with self._session_factory() as session:
            assignment = session.exec(self._assignment_query(ingredient_id, profile_id)).first()
            if assignment is None:
                assignment = CategoryAssignment(
                    ingredient_id=ingredient_id,
                    profile_id=profile_id,
                    category_id=category_id,
                    sort_hint=sort_hint,
                )
            else:
                assignment.category_id = category_id
                assignment.sort_hint = sort_hint
            session.add(assignment)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                raise
            session.refresh(assignment)
            return assignment

    # Recipes

    def get_recipe(self, recipe_id: int) -> Optional[Recipe]:
        with self._session_factory() as session:
            return session.get(Recipe, recipe_id)

    def list_recipes(self) -> list[Recipe]:
        with self._session_factory() as session:
            return list(session.exec(select(Recipe).order_by(Recipe.id)))

    def add_recipe(self, recipe: Recipe) -> Recipe:
        with self._session_factory() as session:
            session.add(recipe)
            session.commit()
            session.refresh(recipe)
        logger.info("recipe.created id=%s title=%s servings=%s", recipe.id, recipe.title, recipe.servings)
        return recipe
