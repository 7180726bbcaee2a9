from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RawIngredientEntry(BaseModel):
    """One ingredient line as produced by upstream text or page parsing."""

    quantity: Optional[float] = Field(default=None, allow_inf_nan=False)
    unit: str = ""
    name: str
    modifier: str = ""

    @field_validator("quantity")
    @classmethod
    def _non_negative(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value < 0:
            raise ValueError("quantity must not be negative")
        return value

    @field_validator("unit", "modifier", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be empty")
        return value


class UnitSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    category: str
    base_conversion: float
    display_name: str


class StandardizedIngredient(BaseModel):
    quantity: Optional[float]
    unit: str
    unit_data: Optional[UnitSnapshot] = None
    name: str
    original_name: str
    original_unit: str
    category: str
    modifier: str = ""
    needs_review: bool
    confidence: Literal["high", "low"]
    is_new_ingredient: bool
    is_new_unit: bool
    # Set by convert_ingredient
    converted: bool = False
    original_quantity: Optional[float] = None

    @property
    def ingredient_exists(self) -> bool:
        return not self.is_new_ingredient

    @property
    def unit_exists(self) -> bool:
        return not self.is_new_unit


class StandardizationBatch(BaseModel):
    standardized: list[StandardizedIngredient]
    needs_review: list[StandardizedIngredient]
    review_count: int


class UnitSuggestion(BaseModel):
    quantity: Optional[float]
    unit: str


class IngredientSuggestion(BaseModel):
    name: str
    category: str
    confidence: Literal["high", "low"]
    original: str
    ingredient_id: Optional[int] = None

    @property
    def needs_review(self) -> bool:
        return self.confidence == "low"


class SourceDetail(BaseModel):
    recipe_title: str
    modifier: Optional[str] = None


class GroceryItem(BaseModel):
    name: str
    unit: str
    quantity: float
    category: str
    sources: list[str] = Field(default_factory=list)
    details_by_source: list[SourceDetail] = Field(default_factory=list)
    needs_review: bool = False


class ScaledRecipe(BaseModel):
    id: Optional[int] = None
    title: str
    ingredients: list[dict[str, Any]]
    scale_factor: float
    original_servings: int
    scaled_servings: float
