"""
Grocery category resolution with per-profile overrides.
Order: profile assignment -> global (no profile) assignment -> ingredient's own
category -> "other".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal, Optional, Sequence

from pantry.errors import CatalogValidationError, DuplicateCatalogEntryError
from pantry.logging import get_logger
from pantry.storage.models import (
    FALLBACK_CATEGORY,
    INGREDIENT_CATEGORIES,
    Category,
    CategoryAssignment,
    CategoryProfile,
)
from pantry.storage.repository import CatalogRepository

logger = get_logger(__name__)

# Aisle order for grouped grocery views; unrecognized categories follow in first-seen order.
CATEGORY_ORDER = INGREDIENT_CATEGORIES


@dataclass(frozen=True)
class ResolvedCategory:
    name: str
    sort_hint: Optional[int]
    source: Literal["profile", "global", "ingredient", "fallback"]


def _category_of(item: Any) -> str:
    if isinstance(item, dict):
        return item.get("category") or FALLBACK_CATEGORY
    return getattr(item, "category", None) or FALLBACK_CATEGORY


def group_by_category(items: Iterable[Any]) -> list[tuple[str, list[Any]]]:
    """Group items by category in CATEGORY_ORDER; empty groups are dropped."""
    groups: dict[str, list[Any]] = {}
    for item in items:
        groups.setdefault(_category_of(item), []).append(item)
    ordered = [c for c in CATEGORY_ORDER if c in groups]
    ordered += [c for c in groups if c not in CATEGORY_ORDER]
    return [(c, groups[c]) for c in ordered]


class CategoryResolver:
    def __init__(self, repository: CatalogRepository) -> None:
        self.repository = repository

    def resolve(self, ingredient_id: Optional[int], profile_id: Optional[int] = None) -> ResolvedCategory:
        if ingredient_id is None:
            return ResolvedCategory(FALLBACK_CATEGORY, None, "fallback")
        lookups: Sequence[tuple[Optional[int], str]] = (
            [(profile_id, "profile"), (None, "global")] if profile_id is not None else [(None, "global")]
        )
        for lookup_profile, source in lookups:
            assignment = self.repository.get_assignment(ingredient_id, lookup_profile)
            if assignment is None:
                continue
            category = self.repository.get_category(assignment.category_id)
            if category is not None:
                return ResolvedCategory(category.name, assignment.sort_hint, source)
            logger.warning(
                "category.dangling_assignment id=%s category_id=%s",
                assignment.id,
                assignment.category_id,
            )
        ingredient = self.repository.get_ingredient(ingredient_id)
        if ingredient is not None and ingredient.category:
            return ResolvedCategory(ingredient.category, None, "ingredient")
        return ResolvedCategory(FALLBACK_CATEGORY, None, "fallback")

    def resolve_category(self, ingredient_id: Optional[int], profile_id: Optional[int] = None) -> str:
        return self.resolve(ingredient_id, profile_id).name

    def upsert_assignment(
        self,
        ingredient_id: int,
        category_id: int,
        profile_id: Optional[int] = None,
        sort_hint: Optional[int] = None,
    ) -> CategoryAssignment:
        """Create or update the single assignment for (ingredient, profile)."""
        if self.repository.get_category(category_id) is None:
            raise CatalogValidationError(f"unknown category id: {category_id}")
        return self.repository.upsert_assignment(
            ingredient_id=ingredient_id,
            category_id=category_id,
            profile_id=profile_id,
            sort_hint=sort_hint,
        )

    def list_categories(self) -> list[Category]:
        return self.repository.list_categories()

    def get_or_create_category(self, name: str, sort_order: int = 0) -> Category:
        existing = self.repository.get_category_by_name(name)
        if existing:
            return existing
        try:
            return self.repository.add_category(Category(name=name.strip(), sort_order=sort_order))
        except DuplicateCatalogEntryError:
            # Lost a race with a concurrent writer.
            return self.repository.get_category_by_name(name)

    def create_profile(self, name: str) -> CategoryProfile:
        name = (name or "").strip()
        if not name:
            raise CatalogValidationError("profile name is required")
        return self.repository.add_profile(CategoryProfile(name=name))

    def list_profiles(self) -> list[CategoryProfile]:
        return self.repository.list_profiles()

    def get_profile_by_name(self, name: str) -> Optional[CategoryProfile]:
        return self.repository.get_profile_by_name(name)
