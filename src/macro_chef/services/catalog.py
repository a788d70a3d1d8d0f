"""Services for editing the ingredient and recipe catalog."""

import logging
import math
from dataclasses import dataclass
from uuid import UUID, uuid4

from macro_chef.domain.catalog import Catalog, Ingredient, Recipe, RecipeLine
from macro_chef.domain.errors import (
    CatalogValidationError,
    IngredientNotFoundError,
    RecipeNotFoundError,
)
from macro_chef.services.importer import (
    export_ingredients_json,
    parse_ingredient_import,
)
from macro_chef.services.macros import aggregate_lines, derive_calories, per_unit_yield
from macro_chef.services.state import StateService

DEFAULT_PORTION = 100.0
DEFAULT_UNIT = "g"
DEFAULT_YIELD_UNIT = "portion"

_logger = logging.getLogger(__name__)


@dataclass
class CatalogService:
    """Application service for ingredient and recipe edits."""

    state: StateService

    def get_catalog(self) -> Catalog:
        return self.state.load_catalog()

    def list_ingredients(self) -> list[Ingredient]:
        return list(self.state.load_catalog().ingredients.values())

    def list_recipes(self) -> list[Recipe]:
        return list(self.state.load_catalog().recipes.values())

    def create_ingredient(self, payload: dict[str, object]) -> Ingredient:
        """Validate and store a new ingredient, deriving calories if absent."""
        ingredient = build_ingredient(payload)
        catalog = self.state.load_catalog().with_ingredients(ingredient)
        self.state.save_ingredients(catalog)
        _logger.info("Created ingredient %s (%s)", ingredient.name, ingredient.id)
        return ingredient

    def delete_ingredient(self, ingredient_id: UUID) -> None:
        """Remove an ingredient. Recipes and meal entries keep their references."""
        catalog = self.state.load_catalog()
        if catalog.get_ingredient(ingredient_id) is None:
            raise IngredientNotFoundError(ingredient_id)
        self.state.save_ingredients(catalog.without_ingredient(ingredient_id))
        _logger.info("Deleted ingredient %s", ingredient_id)

    def import_ingredients(self, raw: str | bytes) -> list[Ingredient]:
        """Append ingredients from a bulk JSON import."""
        imported = parse_ingredient_import(raw)
        catalog = self.state.load_catalog().with_ingredients(*imported)
        self.state.save_ingredients(catalog)
        _logger.info("Imported %s ingredients", len(imported))
        return imported

    def export_ingredients(self) -> str:
        return export_ingredients_json(self.list_ingredients())

    def create_recipe(self, payload: dict[str, object]) -> Recipe:
        """Validate and store a recipe with its totals cached."""
        catalog = self.state.load_catalog()
        recipe = build_recipe(payload, catalog)
        self.state.save_recipes(catalog.with_recipe(recipe))
        _logger.info(
            "Created recipe %s (%s) with %s lines",
            recipe.name,
            recipe.id,
            len(recipe.lines),
        )
        return recipe

    def delete_recipe(self, recipe_id: UUID) -> None:
        """Remove a recipe. Meal entries keep their own snapshot."""
        catalog = self.state.load_catalog()
        if catalog.get_recipe(recipe_id) is None:
            raise RecipeNotFoundError(recipe_id)
        self.state.save_recipes(catalog.without_recipe(recipe_id))
        _logger.info("Deleted recipe %s", recipe_id)


def build_ingredient(payload: dict[str, object]) -> Ingredient:
    """Create an ingredient value from an edit payload."""
    name = str(payload.get("name") or "").strip()
    if not name:
        raise CatalogValidationError("Ingredient name is required")
    portion = _number(payload, "portion", DEFAULT_PORTION)
    if portion <= 0:
        raise CatalogValidationError("Portion must be greater than zero")
    protein = _non_negative(payload, "protein")
    carbs = _non_negative(payload, "carbs")
    fats = _non_negative(payload, "fats")
    if payload.get("calories") is None:
        calories = derive_calories(protein, carbs, fats)
    else:
        calories = _non_negative(payload, "calories")
    return Ingredient(
        id=uuid4(),
        name=name,
        portion=portion,
        unit=str(payload.get("unit") or DEFAULT_UNIT),
        protein_g=protein,
        carbs_g=carbs,
        fat_g=fats,
        calories=calories,
    )


def build_recipe(payload: dict[str, object], catalog: Catalog) -> Recipe:
    """Create a recipe value, caching totals against the given catalog."""
    name = str(payload.get("name") or "").strip()
    if not name:
        raise CatalogValidationError("Recipe name is required")
    yield_volume = _number(payload, "yield_volume", 1.0)
    if yield_volume <= 0:
        raise CatalogValidationError("Yield volume must be greater than zero")
    lines = build_lines(payload.get("lines"), catalog)
    if not lines:
        raise CatalogValidationError("A recipe needs at least one ingredient")
    totals = aggregate_lines(lines, catalog)
    return Recipe(
        id=uuid4(),
        name=name,
        yield_volume=yield_volume,
        yield_unit=str(payload.get("yield_unit") or DEFAULT_YIELD_UNIT),
        lines=lines,
        total_macros=totals,
        macros_per_unit=per_unit_yield(totals, yield_volume),
    )


def build_lines(
    raw: object, catalog: Catalog, *, require_known: bool = True
) -> tuple[RecipeLine, ...]:
    """Validate ingredient lines, optionally requiring known ingredients."""
    if raw is None:
        return ()
    if not isinstance(raw, list | tuple):
        raise CatalogValidationError("Ingredient lines must be a list")
    lines: list[RecipeLine] = []
    for item in raw:
        if isinstance(item, RecipeLine):
            line = item
        elif isinstance(item, dict):
            line = RecipeLine(
                ingredient_id=_parse_uuid(item.get("ingredient_id")),
                quantity=_number(item, "quantity", 0.0),
            )
        else:
            raise CatalogValidationError("Invalid ingredient line")
        if line.quantity < 0:
            raise CatalogValidationError("Quantity cannot be negative")
        if require_known and catalog.get_ingredient(line.ingredient_id) is None:
            raise CatalogValidationError(
                f"Unknown ingredient: {line.ingredient_id}"
            )
        lines.append(line)
    return tuple(lines)


def _number(payload: dict[str, object], key: str, default: float) -> float:
    value = payload.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise CatalogValidationError(f"{key} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise CatalogValidationError(f"{key} must be a number") from exc
    if not math.isfinite(number):
        raise CatalogValidationError(f"{key} must be finite")
    return number


def _non_negative(payload: dict[str, object], key: str) -> float:
    value = _number(payload, key, 0.0)
    if value < 0:
        raise CatalogValidationError(f"{key} cannot be negative")
    return value


def _parse_uuid(value: object) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise CatalogValidationError(f"Invalid ingredient id: {value}") from exc
