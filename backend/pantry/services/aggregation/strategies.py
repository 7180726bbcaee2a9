"""
Grocery merge strategies.

KeyedMergeStrategy: sum only entries with the same lowercase name and the same
unit string. Convertible units (tsp vs tbsp) stay as separate items.

UnitAwareMergeStrategy: sum entries with the same canonical name whose units share
a category, converting into the first-seen unit. Incompatible entries are kept
under a suffixed key.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Iterable, Optional

from pantry.schemas.standardization import GroceryItem, SourceDetail, StandardizedIngredient
from pantry.services.units.catalog import convert


@dataclass
class PreparedEntry:
    """One recipe ingredient, scaled and categorized, ready to merge."""

    name: str
    unit: str
    quantity: float
    category: str
    recipe_title: str
    modifier: Optional[str]
    needs_review: bool = False


def merge_key(name: str, unit: Optional[str]) -> str:
    return f"{(name or '').lower()}|{unit or ''}"


class KeyedMergeStrategy:
    name = "keyed"

    def merge(self, entries: Iterable[PreparedEntry]) -> list[GroceryItem]:
        items: dict[str, GroceryItem] = {}
        for entry in entries:
            key = merge_key(entry.name, entry.unit)
            detail = SourceDetail(recipe_title=entry.recipe_title, modifier=entry.modifier or None)
            item = items.get(key)
            if item is None:
                items[key] = GroceryItem(
                    name=entry.name,
                    unit=entry.unit,
                    quantity=entry.quantity,
                    category=entry.category,
                    sources=[entry.recipe_title],
                    details_by_source=[detail],
                    needs_review=entry.needs_review,
                )
                continue
            item.quantity += entry.quantity
            if entry.recipe_title not in item.sources:
                item.sources.append(entry.recipe_title)
            item.details_by_source.append(detail)
            item.needs_review = item.needs_review or entry.needs_review
        return list(items.values())


class UnitAwareMergeStrategy:
    name = "unit_aware"

    def merge(self, entries: Iterable[StandardizedIngredient]) -> list[StandardizedIngredient]:
        aggregated: dict[str, StandardizedIngredient] = {}
        keys_by_name: dict[str, list[str]] = {}
        counter = itertools.count(1)
        for entry in entries:
            base_key = entry.name.lower()
            target_key = self._compatible_key(entry, aggregated, keys_by_name.get(base_key, []))
            if target_key is not None:
                existing = aggregated[target_key]
                converted = convert(entry.quantity or 0, entry.unit_data, existing.unit_data)
                aggregated[target_key] = existing.model_copy(
                    update={"quantity": (existing.quantity or 0) + converted}
                )
                continue
            if base_key not in aggregated:
                key = base_key
            else:
                key = f"{base_key}_{entry.unit}" if entry.unit else f"{base_key}_{next(counter)}"
                while key in aggregated:
                    key = f"{key}_{next(counter)}"
            aggregated[key] = entry
            keys_by_name.setdefault(base_key, []).append(key)
        return sorted(aggregated.values(), key=lambda s: (s.category, s.name))

    @staticmethod
    def _compatible_key(
        entry: StandardizedIngredient,
        aggregated: dict[str, StandardizedIngredient],
        keys: list[str],
    ) -> Optional[str]:
        if entry.unit_data is None:
            return None
        for key in keys:
            existing = aggregated[key]
            if existing.unit_data is not None and existing.unit_data.category == entry.unit_data.category:
                return key
        return None
