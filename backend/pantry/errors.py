"""Exceptions raised by the catalog services and the grocery caller layer.

Unresolved units or ingredients are not errors; they surface as needs_review
on the standardized entry.
"""

from __future__ import annotations

from typing import Any, Sequence


class PantryError(Exception):
    """Base class for pantry errors."""


class CatalogError(PantryError):
    """Raised when a catalog write cannot be applied."""


class DuplicateCatalogEntryError(CatalogError):
    """Raised when a unit, ingredient, category or profile name already exists."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{kind} already exists: {name!r}")
        self.kind = kind
        self.name = name


class CatalogValidationError(CatalogError, ValueError):
    """Raised when a catalog write carries an invalid category or factor."""


class CatalogEntryNotFoundError(CatalogError, LookupError):
    """Raised when an update or delete targets a missing row."""

    def __init__(self, kind: str, entry_id: int) -> None:
        super().__init__(f"{kind} not found: id={entry_id}")
        self.kind = kind
        self.entry_id = entry_id


class InvalidScaleFactorError(PantryError, ValueError):
    """Raised by the caller layer for scale factors outside (0, max]."""

    def __init__(self, value: Any, maximum: float) -> None:
        super().__init__(f"scale factor must be in (0, {maximum:g}], got {value!r}")
        self.value = value
        self.maximum = maximum


class UnreviewedIngredientsError(PantryError):
    """Raised when confirming a recipe that still has entries flagged for review."""

    def __init__(self, entries: Sequence[Any]) -> None:
        super().__init__(f"Cannot save recipe with {len(entries)} unreviewed ingredients")
        self.entries = list(entries)
