"""Tests for ingredient matching and the ingredient catalog."""

import pytest

from pantry.errors import CatalogValidationError, DuplicateCatalogEntryError
from pantry.services.ingredients.catalog import IngredientCatalog
from pantry.services.ingredients.matching import (
    RankedMatchStrategy,
    SubstringMatchStrategy,
    normalize_name,
)


@pytest.fixture(name="catalog")
def catalog_fixture(memory_repo):
    return IngredientCatalog(memory_repo)


def test_normalize_name():
    assert normalize_name("  All-Purpose   Flour ") == "all-purpose flour"
    assert normalize_name("") == ""


def test_exact_name_match(catalog):
    assert catalog.find("flour").name == "flour"
    assert catalog.find("Olive Oil").name == "olive oil"


def test_alias_match(catalog):
    assert catalog.find("all-purpose flour").name == "flour"
    assert catalog.find("extra-virgin olive oil").name == "olive oil"
    assert catalog.find("egg").name == "eggs"


def test_alias_match_is_first_hit_in_storage_order(memory_repo):
    # "pepper" is an alias of black pepper, which is stored before bell pepper.
    assert SubstringMatchStrategy().match("pepper", memory_repo).name == "black pepper"


def test_alias_substring_match(catalog):
    assert catalog.find("salted").name == "butter"


def test_partial_name_prefers_shortest(catalog):
    catalog.create_ingredient("star anise", "spice")
    catalog.create_ingredient("anise", "spice")
    assert catalog.find("anis").name == "anise"


def test_find_unknown(catalog):
    assert catalog.find("dragon fruit") is None
    assert catalog.find("") is None


def test_resolve_known(catalog):
    suggestion = catalog.resolve("jasmine rice")
    assert suggestion.name == "rice"
    assert suggestion.category == "grain"
    assert suggestion.confidence == "high"
    assert suggestion.original == "jasmine rice"
    assert suggestion.ingredient_id is not None
    assert suggestion.needs_review is False


def test_resolve_unknown_returns_original(catalog, memory_repo):
    before = len(memory_repo.list_ingredients())
    suggestion = catalog.resolve("dragon fruit")
    assert suggestion.model_dump() == {
        "name": "dragon fruit",
        "category": "unknown",
        "confidence": "low",
        "original": "dragon fruit",
        "ingredient_id": None,
    }
    assert suggestion.needs_review is True
    assert len(memory_repo.list_ingredients()) == before


def test_ranked_strategy(memory_repo):
    catalog = IngredientCatalog(memory_repo, strategy=RankedMatchStrategy(threshold=0.5))
    assert catalog.find("flour").name == "flour"
    assert catalog.find("chicken breasts").name == "chicken breast"
    assert catalog.find("salmon fillets").name == "salmon"
    assert catalog.find("qqqq") is None


def test_ranked_strategy_uses_settings_threshold():
    from pantry.config import settings

    assert RankedMatchStrategy().threshold == settings.ranked_match_threshold


def test_seeded_ingredients(catalog):
    ingredients = catalog.list_ingredients()
    assert len(ingredients) == 53
    assert [i.name for i in catalog.ingredients_by_category("oil")] == ["olive oil", "vegetable oil"]
    assert "protein" in catalog.ingredient_categories()


def test_create_and_match_new_ingredient(catalog):
    created = catalog.create_ingredient("dragon fruit", "fruit", aliases=["pitaya", " "])
    assert created.aliases == ["pitaya"]
    assert catalog.resolve("pitaya").name == "dragon fruit"
    assert catalog.resolve("dragon fruit").category == "fruit"


def test_create_ingredient_validation(catalog):
    with pytest.raises(CatalogValidationError):
        catalog.create_ingredient("dragon fruit", "exotic")
    with pytest.raises(CatalogValidationError):
        catalog.create_ingredient("  ", "fruit")
    with pytest.raises(DuplicateCatalogEntryError):
        catalog.create_ingredient("Flour", "grain")


def test_update_and_delete_ingredient(catalog):
    salsa = catalog.find("salsa")
    updated = catalog.update_ingredient(salsa.id, category="vegetable", aliases=["pico de gallo"])
    assert updated.category == "vegetable"
    assert catalog.find("pico de gallo").id == salsa.id
    with pytest.raises(CatalogValidationError):
        catalog.update_ingredient(salsa.id, category="snacks")
    catalog.delete_ingredient(salsa.id)
    assert catalog.find("salsa") is None
