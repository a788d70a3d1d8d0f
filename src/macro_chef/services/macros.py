"""Macro computation and scaling engine.

Every function here is pure: it reads a catalog snapshot and returns new
values. Numbers are not validated; a zero portion or yield propagates
``inf``/``nan`` instead of raising. Validation happens where catalog and
meal-plan values are edited.
"""

import logging
import math
from collections.abc import Iterable

from macro_chef.domain.catalog import Catalog, Ingredient, RecipeLine
from macro_chef.domain.meals import EntryKind, MealEntry, MealPlan, MealType
from macro_chef.domain.nutrition import (
    ZERO_AMOUNTS,
    ZERO_TOTALS,
    MacroAmounts,
    MacroTotals,
)

CALORIES_PER_GRAM = {
    "protein": 4,
    "carbs": 4,
    "fat": 9,
}

_logger = logging.getLogger(__name__)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties going toward positive infinity.

    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    if digits == 0:
        return math.floor(value + 0.5)
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def derive_calories(protein_g: float, carbs_g: float, fat_g: float) -> float:
    """Return whole calories for the given macro grams."""
    return round_half_up(
        protein_g * CALORIES_PER_GRAM["protein"]
        + carbs_g * CALORIES_PER_GRAM["carbs"]
        + fat_g * CALORIES_PER_GRAM["fat"]
    )


def resolve_contribution(
    ingredient: Ingredient | None, quantity: float
) -> MacroAmounts:
    """Scale an ingredient's macros linearly to a quantity of its unit."""
    if ingredient is None:
        return ZERO_AMOUNTS
    ratio = _divide(quantity, ingredient.portion)
    return MacroAmounts(
        protein_g=ingredient.protein_g * ratio,
        carbs_g=ingredient.carbs_g * ratio,
        fat_g=ingredient.fat_g * ratio,
    )


def sum_contributions(
    lines: Iterable[RecipeLine], catalog: Catalog
) -> MacroAmounts:
    """Sum raw macro contributions of lines. Missing ingredients add nothing."""
    protein = carbs = fat = 0.0
    for line in lines:
        ingredient = catalog.get_ingredient(line.ingredient_id)
        if ingredient is None:
            _logger.debug(
                "Ingredient %s missing from catalog, contributes nothing",
                line.ingredient_id,
            )
        contribution = resolve_contribution(ingredient, line.quantity)
        protein += contribution.protein_g
        carbs += contribution.carbs_g
        fat += contribution.fat_g
    return MacroAmounts(protein_g=protein, carbs_g=carbs, fat_g=fat)


def aggregate_lines(lines: Iterable[RecipeLine], catalog: Catalog) -> MacroTotals:
    """Return total macros of the lines, deriving calories from the sums."""
    amounts = sum_contributions(lines, catalog)
    return MacroTotals(
        protein_g=amounts.protein_g,
        carbs_g=amounts.carbs_g,
        fat_g=amounts.fat_g,
        calories=derive_calories(amounts.protein_g, amounts.carbs_g, amounts.fat_g),
    )


def per_unit_yield(totals: MacroTotals, yield_volume: float) -> MacroTotals:
    """Divide recipe totals by the yield volume, without rounding."""
    return MacroTotals(
        protein_g=_divide(totals.protein_g, yield_volume),
        carbs_g=_divide(totals.carbs_g, yield_volume),
        fat_g=_divide(totals.fat_g, yield_volume),
        calories=_divide(totals.calories, yield_volume),
    )


def scale_recipe_serving(
    lines: Iterable[RecipeLine],
    catalog: Catalog,
    total_yield_volume: float,
    consumed_quantity: float,
) -> MacroTotals:
    """Return macros for a consumed amount of a recipe yield.

    Calories come from the scaled macros before they are rounded.
    """
    scale = _divide(consumed_quantity, total_yield_volume)
    amounts = sum_contributions(lines, catalog)
    protein = amounts.protein_g * scale
    carbs = amounts.carbs_g * scale
    fat = amounts.fat_g * scale
    return MacroTotals(
        protein_g=round_half_up(protein, 1),
        carbs_g=round_half_up(carbs, 1),
        fat_g=round_half_up(fat, 1),
        calories=derive_calories(protein, carbs, fat),
    )


def scale_ingredient_serving(
    ingredient: Ingredient | None, consumed_quantity: float
) -> MacroTotals:
    """Return macros for a consumed amount of a single ingredient.

    Calories scale the ingredient's stored value rather than being derived.
    """
    if ingredient is None:
        return ZERO_TOTALS
    ratio = _divide(consumed_quantity, ingredient.portion)
    return MacroTotals(
        protein_g=round_half_up(ingredient.protein_g * ratio, 1),
        carbs_g=round_half_up(ingredient.carbs_g * ratio, 1),
        fat_g=round_half_up(ingredient.fat_g * ratio, 1),
        calories=round_half_up(ingredient.calories * ratio),
    )


def select_ingredient_lines(entry: MealEntry) -> tuple[RecipeLine, ...]:
    """Return the entry's custom lines, or its recipe's own lines."""
    if entry.custom_lines:
        return entry.custom_lines
    if entry.recipe_snapshot is None:
        return ()
    return entry.recipe_snapshot.lines


def entry_totals(entry: MealEntry, catalog: Catalog) -> MacroTotals:
    """Return the rounded macros a meal entry contributes."""
    if entry.kind is EntryKind.INGREDIENT:
        ingredient = catalog.get_ingredient(entry.source_id)
        if ingredient is None:
            _logger.debug(
                "Meal entry %s points at missing ingredient %s",
                entry.id,
                entry.source_id,
            )
        return scale_ingredient_serving(ingredient, entry.quantity)
    if entry.recipe_snapshot is None:
        return ZERO_TOTALS
    return scale_recipe_serving(
        select_ingredient_lines(entry),
        catalog,
        entry.recipe_snapshot.yield_volume,
        entry.quantity,
    )


def sum_totals(items: Iterable[MacroTotals]) -> MacroTotals:
    """Add already rounded totals, keeping macros at one decimal."""
    protein = carbs = fat = 0.0
    calories = 0
    for item in items:
        protein += item.protein_g
        carbs += item.carbs_g
        fat += item.fat_g
        calories += item.calories
    return MacroTotals(
        protein_g=round_half_up(protein, 1),
        carbs_g=round_half_up(carbs, 1),
        fat_g=round_half_up(fat, 1),
        calories=calories,
    )


def meal_totals(entries: Iterable[MealEntry], catalog: Catalog) -> MacroTotals:
    """Return totals of a meal as the sum of its entries' rounded totals."""
    return sum_totals(entry_totals(entry, catalog) for entry in entries)


def day_totals(plan: MealPlan, catalog: Catalog) -> MacroTotals:
    """Return totals of the day as the sum of every meal's totals."""
    return sum_totals(
        meal_totals(plan.entries(meal), catalog) for meal in MealType
    )


def _divide(numerator: float, denominator: float) -> float:
    """Divide like IEEE floats do, yielding inf or nan on a zero denominator."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator
