"""Tests for the SQLModel-backed repository and the services running on it."""

import pytest
from sqlmodel import select

from pantry.errors import CatalogEntryNotFoundError, DuplicateCatalogEntryError
from pantry.services.grocery import build_grocery_list
from pantry.storage.models import Category, CategoryAssignment, CategoryProfile, Ingredient, MeasurementUnit
from pantry.storage.seed import seed_catalog


def test_seed_counts(sql_repo, session):
    assert len(session.exec(select(MeasurementUnit)).all()) == 32
    assert len(session.exec(select(Ingredient)).all()) == 53
    assert len(sql_repo.list_categories()) == 12
    assert [p.name for p in sql_repo.list_profiles()] == ["My Store"]


def test_seed_only_fills_empty_tables(sql_repo):
    assert seed_catalog(sql_repo) == {"measurements": 0, "ingredients": 0, "categories": 0, "profiles": 0}
    assert len(sql_repo.list_units()) == 32


def test_find_unit(sql_repo):
    assert sql_repo.find_unit("TSP").name == "tsp"
    assert sql_repo.find_unit("teaspoon").name == "tsp"
    assert sql_repo.find_unit("to taste").name == "to taste"
    assert sql_repo.find_unit("bushel") is None


def test_duplicate_names_rejected(sql_repo):
    with pytest.raises(DuplicateCatalogEntryError):
        sql_repo.add_unit(MeasurementUnit(name="Cup", category="volume", base_conversion=240, display_name="cup"))
    with pytest.raises(DuplicateCatalogEntryError):
        sql_repo.add_ingredient(Ingredient(name="Salt", category="seasoning"))


def test_json_columns_round_trip(sql_repo):
    created = sql_repo.add_ingredient(
        Ingredient(name="miso", category="condiment", aliases=["white miso"], nutritional_info={"sodium": "high"})
    )
    loaded = sql_repo.get_ingredient(created.id)
    assert loaded.aliases == ["white miso"]
    assert loaded.nutritional_info == {"sodium": "high"}


def test_update_and_delete(sql_repo):
    salt = sql_repo.get_ingredient_by_name("salt")
    updated = sql_repo.update_ingredient(salt.id, {"aliases": ["flaky salt"]})
    assert sql_repo.get_ingredient(salt.id).aliases == ["flaky salt"]
    assert updated.name == "salt"
    with pytest.raises(DuplicateCatalogEntryError):
        sql_repo.update_ingredient(salt.id, {"name": "sugar"})
    with pytest.raises(CatalogEntryNotFoundError):
        sql_repo.update_unit(9999, {"display_name": "nothing"})
    with pytest.raises(CatalogEntryNotFoundError):
        sql_repo.delete_ingredient(9999)


def test_upsert_assignment_single_row(sql_repo, session):
    flour = sql_repo.get_ingredient_by_name("flour")
    other = sql_repo.get_category_by_name("other")
    grain = sql_repo.get_category_by_name("grain")

    first = sql_repo.upsert_assignment(flour.id, other.id)
    second = sql_repo.upsert_assignment(flour.id, grain.id)

    rows = session.exec(select(CategoryAssignment).where(CategoryAssignment.ingredient_id == flour.id)).all()
    assert len(rows) == 1
    assert first.id == second.id
    assert rows[0].category_id == grain.id
    assert rows[0].profile_id is None


def test_profile_and_global_assignments_coexist(sql_pantry, sql_repo):
    flour = sql_repo.get_ingredient_by_name("flour")
    profile = sql_repo.get_profile_by_name("My Store")
    other = sql_repo.get_category_by_name("other")
    dairy = sql_repo.get_category_by_name("dairy")
    sql_pantry.categories.upsert_assignment(flour.id, other.id, profile_id=profile.id)
    sql_pantry.categories.upsert_assignment(flour.id, dairy.id)

    assert len(sql_repo.list_assignments()) == 2
    assert sql_pantry.categories.resolve_category(flour.id, profile.id) == "other"
    assert sql_pantry.categories.resolve_category(flour.id) == "dairy"


def test_delete_ingredient_removes_assignments(sql_repo):
    flour = sql_repo.get_ingredient_by_name("flour")
    sql_repo.upsert_assignment(flour.id, sql_repo.get_category_by_name("other").id)
    sql_repo.delete_ingredient(flour.id)
    assert sql_repo.list_assignments() == []
    assert sql_repo.get_ingredient_by_name("flour") is None


def test_end_to_end_on_sql(sql_pantry):
    entries = sql_pantry.standardizer.standardize_many(
        [
            {"quantity": 1, "unit": "cups", "name": "all-purpose flour"},
            {"quantity": 2, "unit": "T", "name": "unsalted butter"},
        ]
    )
    assert entries.review_count == 0
    first = sql_pantry.recipes.confirm("Biscuits", entries.standardized, ["Bake."])
    second = sql_pantry.recipes.confirm(
        "Roux", [{"name": "flour", "quantity": 1, "unit": "cup"}], ["Whisk."]
    )

    items = build_grocery_list(sql_pantry.aggregator, [first.id, second.id], scale_factor=2)
    assert [(i.name, i.unit, i.quantity) for i in items] == [("flour", "cup", 4), ("butter", "tbsp", 4)]
    assert items[0].sources == ["Biscuits", "Roux"]
    assert sql_pantry.recipes.get(first.id).ingredients[0]["name"] == "flour"


@pytest.mark.parametrize("repo_name", ["memory_repo", "sql_repo"])
def test_write_events_logged(request, caplog, repo_name):
    repo = request.getfixturevalue(repo_name)
    caplog.set_level("INFO")

    category = repo.add_category(Category(name="snacks", sort_order=99))
    profile = repo.add_profile(CategoryProfile(name="Night Market"))
    unit = repo.add_unit(MeasurementUnit(name="sachet", display_name="sachet", category="special"))
    ingredient = repo.add_ingredient(Ingredient(name="dragon fruit", category="fruit"))
    assignment = repo.upsert_assignment(ingredient.id, category.id, profile_id=profile.id)
    repo.update_unit(unit.id, {"display_name": "sachets"})
    repo.update_ingredient(ingredient.id, {"category": "produce"})
    repo.delete_unit(unit.id)
    repo.delete_ingredient(ingredient.id)

    for event in [
        f"category.created id={category.id} name=snacks sort_order=99",
        f"profile.created id={profile.id} name=Night Market",
        f"measurement.created id={unit.id} name=sachet",
        f"ingredient.created id={ingredient.id} name=dragon fruit",
        f"assignment.upserted id={assignment.id} ingredient_id={ingredient.id} profile_id={profile.id}",
        f"measurement.updated id={unit.id} fields=display_name",
        f"ingredient.updated id={ingredient.id} fields=category",
        f"measurement.deleted id={unit.id}",
        f"ingredient.deleted id={ingredient.id}",
    ]:
        assert event in caplog.text
