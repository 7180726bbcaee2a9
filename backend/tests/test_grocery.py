"""Tests for the grocery caller layer: scale factor and recipe id validation."""

import pytest

from pantry.errors import InvalidScaleFactorError
from pantry.services.grocery import build_grocery_list, validate_scale_factor


@pytest.fixture(name="recipe_ids")
def recipe_ids_fixture(pantry):
    tacos = pantry.recipes.confirm(
        "Tacos",
        [
            {"name": "ground beef", "quantity": 1, "unit": "lb"},
            {"name": "tortillas", "quantity": 8, "unit": "piece"},
            {"name": "salsa", "quantity": 0.5, "unit": "cup", "modifier": "verde"},
        ],
        ["Brown the beef.", "Fill the tortillas."],
    )
    chili = pantry.recipes.confirm(
        "Chili",
        [
            {"name": "ground beef", "quantity": 1, "unit": "lb"},
            {"name": "onion", "quantity": 1, "unit": ""},
        ],
        ["Simmer."],
    )
    return [tacos.id, chili.id]


@pytest.mark.parametrize("value,expected", [(1, 1.0), ("2", 2.0), (0.5, 0.5), (10, 10.0)])
def test_validate_scale_factor(value, expected):
    assert validate_scale_factor(value) == expected


@pytest.mark.parametrize("value", [0, -1, 10.5, "abc", None])
def test_validate_scale_factor_rejects(value):
    with pytest.raises(InvalidScaleFactorError):
        validate_scale_factor(value)


def test_validate_scale_factor_custom_maximum():
    assert validate_scale_factor(20, maximum=50) == 20.0
    with pytest.raises(ValueError):
        validate_scale_factor(3, maximum=2)


def test_build_grocery_list(pantry, recipe_ids):
    items = build_grocery_list(pantry.aggregator, recipe_ids, scale_factor="1.5")
    by_name = {i.name: i for i in items}
    assert by_name["ground beef"].quantity == 3
    assert by_name["ground beef"].sources == ["Tacos", "Chili"]
    assert by_name["ground beef"].category == "protein"
    assert by_name["tortillas"].quantity == 12
    assert by_name["salsa"].details_by_source[0].modifier == "verde"


def test_build_grocery_list_grouped(pantry, recipe_ids):
    grouped = build_grocery_list(pantry.aggregator, recipe_ids, grouped=True)
    assert [category for category, _ in grouped] == ["protein", "vegetable", "grain", "condiment"]


def test_build_grocery_list_skips_invalid_ids(pantry, recipe_ids, caplog):
    items = build_grocery_list(pantry.aggregator, [str(recipe_ids[0]), "abc", None])
    assert {i.name for i in items} == {"ground beef", "tortillas", "salsa"}
    assert "grocery.invalid_recipe_id" in caplog.text


def test_build_grocery_list_rejects_bad_input(pantry, recipe_ids):
    with pytest.raises(InvalidScaleFactorError):
        build_grocery_list(pantry.aggregator, recipe_ids, scale_factor=0)
    with pytest.raises(TypeError):
        build_grocery_list(pantry.aggregator, "1,2")


def test_build_grocery_list_with_profile(pantry, memory_repo, recipe_ids):
    profile = pantry.categories.create_profile("Corner Shop")
    beef = memory_repo.get_ingredient_by_name("ground beef")
    frozen = pantry.categories.get_or_create_category("frozen", sort_order=15)
    pantry.categories.upsert_assignment(beef.id, frozen.id, profile_id=profile.id)

    items = build_grocery_list(pantry.aggregator, recipe_ids, profile_id=profile.id)
    assert {i.name: i.category for i in items}["ground beef"] == "frozen"


def test_build_grocery_list_rejects_bool_and_fractional_ids(pantry, recipe_ids, caplog):
    tacos, chili = recipe_ids
    items = build_grocery_list(pantry.aggregator, [True, tacos + 0.7, float(chili)])
    assert {i.name for i in items} == {"ground beef", "onion"}
    assert "grocery.invalid_recipe_id value=True" in caplog.text
    assert f"grocery.invalid_recipe_id value={tacos + 0.7!r}" in caplog.text
