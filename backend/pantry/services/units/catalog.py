"""Measurement unit catalog: alias resolution, same-category conversion, display suggestions."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pantry.errors import CatalogValidationError
from pantry.logging import get_logger
from pantry.schemas.standardization import UnitSnapshot, UnitSuggestion
from pantry.storage.models import PSEUDO_UNIT_CATEGORIES, UNIT_CATEGORIES, MeasurementUnit
from pantry.storage.repository import CatalogRepository

logger = get_logger(__name__)

# Checked before lowercasing: "T" is a tablespoon, "t" a teaspoon.
CASE_SENSITIVE_ALIASES = {"T": "tbsp", "t": "tsp"}

# Plural and long forms -> canonical short names. Exact match only.
UNIT_ALIASES = {
    "teaspoon": "tsp", "teaspoons": "tsp",
    "tablespoon": "tbsp", "tablespoons": "tbsp", "tb": "tbsp",
    "cups": "cup", "c": "cup",
    "ounce": "oz", "ounces": "oz",
    "pound": "lb", "pounds": "lb", "lbs": "lb",
    "gram": "g", "grams": "g",
    "kilogram": "kg", "kilograms": "kg", "kgs": "kg",
    "liter": "l", "liters": "l", "litre": "l", "litres": "l",
    "milliliter": "ml", "milliliters": "ml", "millilitre": "ml", "millilitres": "ml",
    "fluid ounce": "fl oz", "fluid ounces": "fl oz", "floz": "fl oz",
    "pints": "pint", "pt": "pint",
    "quarts": "quart", "qt": "quart",
    "gallons": "gallon", "gal": "gallon",
    "pieces": "piece", "pcs": "piece", "pc": "piece", "ct": "piece", "count": "piece",
    "dozens": "dozen", "dz": "dozen",
    "cloves": "clove",
    "slices": "slice",
    "cans": "can",
    "jars": "jar",
    "packages": "package", "pkg": "package", "pkgs": "package",
    "ea": "each",
}

_THOUSANDTH = Decimal("0.001")

# (category, from unit, threshold, to unit, divisor)
_DISPLAY_UPGRADES = (
    ("volume", "ml", 1000, "l", 1000),
    ("volume", "tsp", 3, "tbsp", 3),
    ("volume", "tbsp", 16, "cup", 16),
    ("weight", "g", 1000, "kg", 1000),
    ("weight", "oz", 16, "lb", 16),
)


def round_quantity(value: float) -> float:
    """Round to 3 decimal places, halves away from zero."""
    return float(Decimal(str(value)).quantize(_THOUSANDTH, rounding=ROUND_HALF_UP))


def snapshot(unit: MeasurementUnit) -> UnitSnapshot:
    return UnitSnapshot(
        name=unit.name,
        category=unit.category,
        base_conversion=unit.base_conversion,
        display_name=unit.display_name,
    )


def convert(amount: float, from_unit, to_unit) -> Optional[float]:
    """
    Convert amount between units of the same category through the base unit.
    Returns None when either unit is missing or the categories differ.
    Accepts MeasurementUnit rows or UnitSnapshot values.
    """
    if from_unit is None or to_unit is None or from_unit.category != to_unit.category:
        return None
    if amount < 0:
        raise ValueError(f"cannot convert negative quantity {amount}")
    base_amount = amount * from_unit.base_conversion
    return round_quantity(base_amount / to_unit.base_conversion)


def suggest_better_unit(quantity: Optional[float], unit: str, unit_data) -> UnitSuggestion:
    """Cosmetic upward conversion for display (1000 ml -> 1 l, 16 tbsp -> 1 cup)."""
    if unit_data is None or not quantity:
        return UnitSuggestion(quantity=quantity, unit=unit)
    for category, from_name, threshold, to_name, divisor in _DISPLAY_UPGRADES:
        if unit_data.category == category and unit == from_name and quantity >= threshold:
            return UnitSuggestion(quantity=quantity / divisor, unit=to_name)
    return UnitSuggestion(quantity=quantity, unit=unit)


class UnitCatalog:
    def __init__(self, repository: CatalogRepository) -> None:
        self.repository = repository

    def resolve(self, raw_unit: Optional[str]) -> Optional[MeasurementUnit]:
        if not raw_unit or not raw_unit.strip():
            return None
        trimmed = raw_unit.strip()
        if trimmed in CASE_SENSITIVE_ALIASES:
            search = CASE_SENSITIVE_ALIASES[trimmed]
        else:
            normalized = trimmed.lower()
            search = UNIT_ALIASES.get(normalized, normalized)
        unit = self.repository.find_unit(search)
        if unit is None:
            unit = self._match_stored_alias(search)
        if unit is None:
            logger.warning("unit.unknown raw=%s", raw_unit)
        return unit

    def _match_stored_alias(self, search: str) -> Optional[MeasurementUnit]:
        for unit in self.repository.list_units():
            if any(alias.strip().lower() == search for alias in unit.aliases or []):
                return unit
        return None

    def convert(self, amount: float, from_unit, to_unit) -> Optional[float]:
        return convert(amount, from_unit, to_unit)

    def convert_by_name(self, amount: float, from_name: str, to_name: str) -> Optional[float]:
        return convert(amount, self.resolve(from_name), self.resolve(to_name))

    def suggest_better_unit(self, quantity: Optional[float], unit: str, unit_data) -> UnitSuggestion:
        return suggest_better_unit(quantity, unit, unit_data)

    def list_units(self) -> list[MeasurementUnit]:
        return self.repository.list_units()

    def create_unit(
        self,
        name: str,
        category: str,
        display_name: Optional[str] = None,
        base_conversion: Optional[float] = None,
        aliases: Optional[list[str]] = None,
    ) -> MeasurementUnit:
        name = (name or "").strip()
        if not name:
            raise CatalogValidationError("measurement name is required")
        if base_conversion is None:
            if category not in PSEUDO_UNIT_CATEGORIES:
                raise CatalogValidationError(f"base_conversion is required for {category} units")
            base_conversion = 1.0
        self._validate(category, base_conversion)
        return self.repository.add_unit(
            MeasurementUnit(
                name=name,
                category=category,
                base_conversion=float(base_conversion),
                display_name=display_name or name,
                aliases=list(aliases or []),
            )
        )

    def update_unit(self, unit_id: int, **changes) -> MeasurementUnit:
        current = self.repository.get_unit(unit_id)
        category = changes.get("category", current.category if current else None)
        factor = changes.get("base_conversion", current.base_conversion if current else 1.0)
        if current is not None:
            self._validate(category, factor)
        if "aliases" in changes:
            changes["aliases"] = list(changes["aliases"] or [])
        return self.repository.update_unit(unit_id, changes)

    def delete_unit(self, unit_id: int) -> None:
        self.repository.delete_unit(unit_id)

    @staticmethod
    def _validate(category: str, base_conversion: float) -> None:
        if category not in UNIT_CATEGORIES:
            raise CatalogValidationError(f"unknown unit category: {category!r}")
        if base_conversion is None or base_conversion <= 0:
            raise CatalogValidationError("base_conversion must be positive")
