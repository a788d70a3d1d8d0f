"""JSON-compatible encoding of catalog and meal-plan values."""

from uuid import UUID

from macro_chef.domain.catalog import Ingredient, Recipe, RecipeLine
from macro_chef.domain.meals import EntryKind, MealEntry, MealPlan, MealType
from macro_chef.domain.nutrition import MacroTotals


def dump_ingredient(ingredient: Ingredient) -> dict[str, object]:
    return {
        "id": str(ingredient.id),
        "name": ingredient.name,
        "portion": ingredient.portion,
        "unit": ingredient.unit,
        "protein": ingredient.protein_g,
        "carbs": ingredient.carbs_g,
        "fats": ingredient.fat_g,
        "calories": ingredient.calories,
    }


def parse_ingredient(row: dict[str, object]) -> Ingredient:
    """Parse a stored ingredient row into a domain model."""
    return Ingredient(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        portion=float(row.get("portion", 0.0)),
        unit=str(row.get("unit", "g")),
        protein_g=float(row.get("protein", 0.0)),
        carbs_g=float(row.get("carbs", 0.0)),
        fat_g=float(row.get("fats", 0.0)),
        calories=float(row.get("calories", 0.0)),
    )


def dump_line(line: RecipeLine) -> dict[str, object]:
    return {"ingredient_id": str(line.ingredient_id), "quantity": line.quantity}


def parse_line(row: dict[str, object]) -> RecipeLine:
    return RecipeLine(
        ingredient_id=UUID(str(row["ingredient_id"])),
        quantity=float(row.get("quantity", 0.0)),
    )


def dump_totals(totals: MacroTotals) -> dict[str, object]:
    return {
        "protein": totals.protein_g,
        "carbs": totals.carbs_g,
        "fats": totals.fat_g,
        "calories": totals.calories,
    }


def parse_totals(row: object) -> MacroTotals:
    data = row if isinstance(row, dict) else {}
    return MacroTotals(
        protein_g=float(data.get("protein", 0.0)),
        carbs_g=float(data.get("carbs", 0.0)),
        fat_g=float(data.get("fats", 0.0)),
        calories=data.get("calories", 0),
    )


def dump_recipe(recipe: Recipe) -> dict[str, object]:
    return {
        "id": str(recipe.id),
        "name": recipe.name,
        "yield_volume": recipe.yield_volume,
        "yield_unit": recipe.yield_unit,
        "lines": [dump_line(line) for line in recipe.lines],
        "total_macros": dump_totals(recipe.total_macros),
        "macros_per_unit": dump_totals(recipe.macros_per_unit),
    }


def parse_recipe(row: dict[str, object]) -> Recipe:
    """Parse a stored recipe row, keeping its cached totals as stored."""
    lines = row.get("lines") or []
    return Recipe(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        yield_volume=float(row.get("yield_volume", 1.0)),
        yield_unit=str(row.get("yield_unit", "portion")),
        lines=tuple(parse_line(line) for line in lines),
        total_macros=parse_totals(row.get("total_macros")),
        macros_per_unit=parse_totals(row.get("macros_per_unit")),
    )


def dump_entry(entry: MealEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "kind": entry.kind.value,
        "source_id": str(entry.source_id),
        "name": entry.name,
        "unit": entry.unit,
        "quantity": entry.quantity,
        "recipe_snapshot": (
            dump_recipe(entry.recipe_snapshot) if entry.recipe_snapshot else None
        ),
        "ingredient_snapshot": (
            dump_ingredient(entry.ingredient_snapshot)
            if entry.ingredient_snapshot
            else None
        ),
        "custom_lines": (
            [dump_line(line) for line in entry.custom_lines]
            if entry.custom_lines is not None
            else None
        ),
    }


def parse_entry(row: dict[str, object]) -> MealEntry:
    """Parse a stored meal entry row."""
    recipe_raw = row.get("recipe_snapshot")
    ingredient_raw = row.get("ingredient_snapshot")
    custom_raw = row.get("custom_lines")
    return MealEntry(
        id=UUID(str(row["id"])),
        kind=EntryKind(str(row.get("kind", EntryKind.RECIPE.value))),
        source_id=UUID(str(row["source_id"])),
        name=str(row.get("name", "")),
        unit=str(row.get("unit", "")),
        quantity=float(row.get("quantity", 0.0)),
        recipe_snapshot=(
            parse_recipe(recipe_raw) if isinstance(recipe_raw, dict) else None
        ),
        ingredient_snapshot=(
            parse_ingredient(ingredient_raw)
            if isinstance(ingredient_raw, dict)
            else None
        ),
        custom_lines=(
            tuple(parse_line(line) for line in custom_raw)
            if isinstance(custom_raw, list)
            else None
        ),
    )


def dump_plan(plan: MealPlan) -> dict[str, object]:
    return {
        meal.value: [dump_entry(entry) for entry in plan.entries(meal)]
        for meal in MealType
    }


def parse_plan(blob: object) -> MealPlan:
    """Parse a stored meal plan. Unknown meal names are ignored."""
    data = blob if isinstance(blob, dict) else {}
    meals: dict[MealType, tuple[MealEntry, ...]] = {}
    for meal in MealType:
        rows = data.get(meal.value) or []
        meals[meal] = tuple(parse_entry(row) for row in rows)
    return MealPlan(meals=meals)
