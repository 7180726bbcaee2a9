"""Ingredient standardization and grocery aggregation engine."""

from pantry.bootstrap import Pantry, build_services, startup
from pantry.errors import (
    CatalogEntryNotFoundError,
    CatalogError,
    CatalogValidationError,
    DuplicateCatalogEntryError,
    InvalidScaleFactorError,
    PantryError,
    UnreviewedIngredientsError,
)
from pantry.schemas.standardization import (
    GroceryItem,
    IngredientSuggestion,
    RawIngredientEntry,
    ScaledRecipe,
    SourceDetail,
    StandardizationBatch,
    StandardizedIngredient,
    UnitSnapshot,
    UnitSuggestion,
)
from pantry.services.aggregation import Aggregator, KeyedMergeStrategy, UnitAwareMergeStrategy
from pantry.services.categories.resolver import CATEGORY_ORDER, CategoryResolver, ResolvedCategory
from pantry.services.grocery import build_grocery_list, validate_scale_factor
from pantry.services.ingredients.catalog import IngredientCatalog
from pantry.services.ingredients.matching import RankedMatchStrategy, SubstringMatchStrategy
from pantry.services.recipes import RecipeBook
from pantry.services.standardization.standardizer import Standardizer, scale_recipe
from pantry.services.units.catalog import UnitCatalog
from pantry.storage.memory import InMemoryCatalogRepository
from pantry.storage.repositories import SqlCatalogRepository
from pantry.storage.seed import seed_catalog

__version__ = "0.1.0"

__all__ = [
    "Aggregator",
    "CATEGORY_ORDER",
    "CatalogEntryNotFoundError",
    "CatalogError",
    "CatalogValidationError",
    "CategoryResolver",
    "DuplicateCatalogEntryError",
    "GroceryItem",
    "InMemoryCatalogRepository",
    "IngredientCatalog",
    "IngredientSuggestion",
    "InvalidScaleFactorError",
    "KeyedMergeStrategy",
    "Pantry",
    "PantryError",
    "RankedMatchStrategy",
    "RawIngredientEntry",
    "RecipeBook",
    "ResolvedCategory",
    "ScaledRecipe",
    "SourceDetail",
    "SqlCatalogRepository",
    "StandardizationBatch",
    "StandardizedIngredient",
    "Standardizer",
    "SubstringMatchStrategy",
    "UnitAwareMergeStrategy",
    "UnitCatalog",
    "UnitSnapshot",
    "UnitSuggestion",
    "UnreviewedIngredientsError",
    "build_grocery_list",
    "build_services",
    "scale_recipe",
    "seed_catalog",
    "startup",
    "validate_scale_factor",
]
