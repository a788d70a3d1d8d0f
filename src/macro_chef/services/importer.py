"""Bulk ingredient import and export format."""

import json
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from macro_chef.domain.catalog import Ingredient
from macro_chef.domain.errors import IngredientImportError
from macro_chef.services.codec import dump_ingredient
from macro_chef.services.macros import derive_calories

NOT_AN_ARRAY_MESSAGE = "Invalid JSON format. Please provide an array of ingredients."
PARSE_ERROR_MESSAGE = "Error parsing JSON file. Please check the file format."


class ImportedIngredient(BaseModel):
    """One ingredient object of a bulk import file."""

    model_config = ConfigDict(allow_inf_nan=False, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    portion: float = Field(gt=0)
    unit: str = "g"
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fats: float = Field(default=0.0, ge=0)
    calories: float | None = Field(default=None, ge=0)


_IMPORT_ADAPTER = TypeAdapter(list[ImportedIngredient])


def parse_ingredient_import(raw: str | bytes) -> list[Ingredient]:
    """Parse a JSON array of ingredients, assigning fresh ids.

    Missing or zero calories are derived from the macros.
    """
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise IngredientImportError(PARSE_ERROR_MESSAGE) from exc
    if not isinstance(payload, list):
        raise IngredientImportError(NOT_AN_ARRAY_MESSAGE)
    try:
        items = _IMPORT_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise IngredientImportError(PARSE_ERROR_MESSAGE) from exc
    return [_to_ingredient(item) for item in items]


def export_ingredients_json(ingredients: list[Ingredient]) -> str:
    """Serialize ingredients in the import format, ids included."""
    return json.dumps([dump_ingredient(item) for item in ingredients], indent=2)


def _to_ingredient(item: ImportedIngredient) -> Ingredient:
    calories = item.calories or derive_calories(item.protein, item.carbs, item.fats)
    return Ingredient(
        id=uuid4(),
        name=item.name,
        portion=item.portion,
        unit=item.unit,
        protein_g=item.protein,
        carbs_g=item.carbs,
        fat_g=item.fats,
        calories=calories,
    )
