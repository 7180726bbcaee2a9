from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Index, JSON, UniqueConstraint, text
from sqlmodel import Field, SQLModel


UNIT_CATEGORIES = ("volume", "weight", "count", "special", "container")
PSEUDO_UNIT_CATEGORIES = ("special", "container")

INGREDIENT_CATEGORIES = (
    "protein",
    "vegetable",
    "fruit",
    "dairy",
    "grain",
    "herb",
    "spice",
    "seasoning",
    "oil",
    "condiment",
    "sweetener",
    "other",
)
UNKNOWN_CATEGORY = "unknown"
FALLBACK_CATEGORY = "other"

CONFIDENCE_LEVELS = ("high", "low")


class MeasurementUnit(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    category: str  # volume | weight | count | special | container
    base_conversion: float = 1.0  # factor to the category's base unit (ml, g, piece)
    display_name: str
    aliases: list = Field(default_factory=list, sa_column=Column(JSON, default=list))
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Ingredient(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    category: str
    aliases: list = Field(default_factory=list, sa_column=Column(JSON, default=list))
    nutritional_info: Optional[dict] = Field(default=None, sa_column=Column(JSON, default=None))
    storage_tips: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Category(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    sort_order: int = 0


class CategoryProfile(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)


class CategoryAssignment(SQLModel, table=True):
    # NULL profile_id is the global default. Unique constraints treat NULLs as
    # distinct, so global rows get their own partial unique index.
    __table_args__ = (
        UniqueConstraint("ingredient_id", "profile_id", name="uq_assignment"),
        Index(
            "uq_assignment_global",
            "ingredient_id",
            unique=True,
            sqlite_where=text("profile_id IS NULL"),
            postgresql_where=text("profile_id IS NULL"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    ingredient_id: int = Field(foreign_key="ingredient.id", index=True)
    profile_id: Optional[int] = Field(default=None, foreign_key="categoryprofile.id", index=True)
    category_id: int = Field(foreign_key="category.id", index=True)
    sort_hint: Optional[int] = None


class Recipe(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    # [{"name", "quantity", "unit", "category", "modifier", "ingredient_id"?}]
    ingredients: list = Field(default_factory=list, sa_column=Column(JSON, default=list))
    instructions: list = Field(default_factory=list, sa_column=Column(JSON, default=list))
    tags: list = Field(default_factory=list, sa_column=Column(JSON, default=list))
    servings: int = 4
    created_at: datetime = Field(default_factory=datetime.utcnow)
