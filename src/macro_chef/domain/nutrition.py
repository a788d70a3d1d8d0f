"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MacroAmounts:
    """Macronutrient grams contributed by a quantity of food."""

    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class MacroTotals:
    """Macronutrient grams with their calorie count."""

    protein_g: float
    carbs_g: float
    fat_g: float
    calories: float


ZERO_AMOUNTS = MacroAmounts(0.0, 0.0, 0.0)
ZERO_TOTALS = MacroTotals(0.0, 0.0, 0.0, 0)
