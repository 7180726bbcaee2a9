"""Tests for confirming reviewed recipes into the recipe book."""

import pytest
from pydantic import ValidationError

from pantry.errors import UnreviewedIngredientsError


def _standardized(pantry, *entries):
    return pantry.standardizer.standardize_many(entries).standardized


def test_confirm_reviewed_recipe(pantry):
    ingredients = _standardized(
        pantry,
        {"quantity": 2, "unit": "cups", "name": "flour"},
        {"quantity": 1, "unit": "tsp", "name": "salt", "modifier": "kosher"},
    )
    recipe = pantry.recipes.confirm("Bread", ingredients, "Mix and bake.", tags=["baking"])
    assert recipe.id is not None
    assert recipe.instructions == ["Mix and bake."]
    assert recipe.servings == 4
    assert recipe.ingredients[1] == {
        "name": "salt",
        "quantity": 1.0,
        "unit": "tsp",
        "category": "seasoning",
        "modifier": "kosher",
    }
    assert pantry.recipes.get(recipe.id).title == "Bread"
    assert [r.title for r in pantry.recipes.list()] == ["Bread"]


def test_confirm_blocks_unreviewed(pantry):
    ingredients = _standardized(
        pantry,
        {"quantity": 2, "unit": "", "name": "dragon fruit"},
        {"quantity": 1, "unit": "cup", "name": "milk"},
    )
    with pytest.raises(UnreviewedIngredientsError) as exc:
        pantry.recipes.confirm("Smoothie", ingredients, ["Blend."])
    assert len(exc.value.entries) == 1
    assert "1 unreviewed" in str(exc.value)
    assert pantry.recipes.list() == []


def test_confirm_forced(pantry):
    ingredients = _standardized(pantry, {"quantity": 2, "unit": "", "name": "dragon fruit"})
    recipe = pantry.recipes.confirm("Smoothie", ingredients, ["Blend."], servings=2, force=True)
    assert recipe.servings == 2
    assert recipe.ingredients[0]["category"] == "unknown"


def test_confirm_accepts_plain_dicts(pantry):
    recipe = pantry.recipes.confirm(
        "Rice",
        [{"name": "rice", "quantity": 1, "unit": "cup", "ingredient_id": 33}],
        ["Boil."],
    )
    assert recipe.ingredients[0]["category"] == "other"
    assert recipe.ingredients[0]["ingredient_id"] == 33


@pytest.mark.parametrize(
    "title,ingredients,instructions",
    [("", [{"name": "rice"}], ["Boil."]), ("Rice", [], ["Boil."]), ("Rice", [{"name": "rice"}], [])],
)
def test_confirm_requires_fields(pantry, title, ingredients, instructions):
    with pytest.raises(ValueError):
        pantry.recipes.confirm(title, ingredients, instructions)


@pytest.mark.parametrize(
    "entry",
    [
        {"name": "flour", "quantity": "1/2", "unit": "cup"},
        {"name": "flour", "quantity": -3, "unit": "cup"},
        {"name": "flour", "quantity": "nan", "unit": "cup"},
        {"name": " ", "quantity": 1, "unit": "cup"},
    ],
)
def test_confirm_rejects_malformed_entries(pantry, entry):
    with pytest.raises(ValidationError):
        pantry.recipes.confirm("Bread", [entry], ["Bake."], force=True)
    assert pantry.recipes.list() == []


def test_confirm_normalizes_entries(pantry):
    recipe = pantry.recipes.confirm("Bread", [{"name": "flour", "quantity": "2", "unit": None}], ["Bake."])
    assert recipe.ingredients[0]["quantity"] == 2.0
    assert recipe.ingredients[0]["unit"] == ""
