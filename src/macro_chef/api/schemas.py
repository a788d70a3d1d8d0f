"""Pydantic models for API request payloads."""

from uuid import UUID

from pydantic import BaseModel

from macro_chef.domain.meals import EntryKind


class IngredientCreate(BaseModel):
    """Ingredient form payload."""

    name: str
    portion: float = 100
    unit: str = "g"
    protein: float = 0
    carbs: float = 0
    fats: float = 0
    calories: float | None = None


class RecipeLinePayload(BaseModel):
    """Ingredient line of a recipe or customization."""

    ingredient_id: UUID
    quantity: float


class RecipeCreate(BaseModel):
    """Recipe form payload."""

    name: str
    yield_volume: float = 1
    yield_unit: str = "portion"
    lines: list[RecipeLinePayload]


class MealEntryCreate(BaseModel):
    """Payload for adding a recipe or ingredient to a meal."""

    kind: EntryKind
    source_id: UUID
    quantity: float = 1


class QuantityUpdate(BaseModel):
    """Payload for changing an entry's quantity."""

    quantity: float


class CustomizationPayload(BaseModel):
    """Custom ingredient lines for a recipe entry."""

    lines: list[RecipeLinePayload]
