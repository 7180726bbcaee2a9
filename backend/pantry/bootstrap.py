"""Startup wiring for embedding the engine: logging, tables, seed data, services."""

from dataclasses import dataclass
from typing import Optional

from pantry.config import settings
from pantry.logging import configure_logging, get_logger
from pantry.services.aggregation import Aggregator
from pantry.services.categories.resolver import CategoryResolver
from pantry.services.ingredients.catalog import IngredientCatalog
from pantry.services.recipes import RecipeBook
from pantry.services.standardization.standardizer import Standardizer
from pantry.services.units.catalog import UnitCatalog
from pantry.storage.db import build_engine, create_db_and_tables, get_session
from pantry.storage.repositories import SqlCatalogRepository
from pantry.storage.repository import CatalogRepository
from pantry.storage.seed import seed_catalog

logger = get_logger(__name__)


@dataclass
class Pantry:
    repository: CatalogRepository
    units: UnitCatalog
    ingredients: IngredientCatalog
    categories: CategoryResolver
    standardizer: Standardizer
    aggregator: Aggregator
    recipes: RecipeBook


def build_services(repository: CatalogRepository, max_workers: Optional[int] = None) -> Pantry:
    units = UnitCatalog(repository)
    ingredients = IngredientCatalog(repository)
    categories = CategoryResolver(repository)
    standardizer = Standardizer(units, ingredients)
    return Pantry(
        repository=repository,
        units=units,
        ingredients=ingredients,
        categories=categories,
        standardizer=standardizer,
        aggregator=Aggregator(repository, ingredients, categories, standardizer, max_workers=max_workers),
        recipes=RecipeBook(repository),
    )


def startup(dsn: Optional[str] = None, seed: Optional[bool] = None) -> Pantry:
    """Configure logging, create tables on the configured database and seed empty tables."""
    configure_logging()
    logger.info("startup: configuring services env=%s", settings.env)
    bind = build_engine(dsn) if dsn else None
    create_db_and_tables(bind)
    repository = SqlCatalogRepository(lambda: get_session(bind))
    if settings.seed_on_startup if seed is None else seed:
        seed_catalog(repository)
    return build_services(repository)
