"""Meal plan service."""

import logging
import math
from dataclasses import dataclass, replace
from uuid import UUID, uuid4

from macro_chef.domain.catalog import Catalog, RecipeLine
from macro_chef.domain.errors import (
    CustomizationError,
    MealEntryNotFoundError,
    MealEntryValidationError,
    SourceNotFoundError,
)
from macro_chef.domain.meals import (
    DaySummary,
    EntryKind,
    EntrySummary,
    MealEntry,
    MealPlan,
    MealSummary,
    MealType,
)
from macro_chef.domain.nutrition import MacroTotals
from macro_chef.services.catalog import build_lines
from macro_chef.services.macros import (
    entry_totals,
    meal_totals,
    scale_recipe_serving,
    sum_totals,
)
from macro_chef.services.state import StateService

_logger = logging.getLogger(__name__)


@dataclass
class MealPlanService:
    """Service that edits the meal plan and computes its totals."""

    state: StateService

    def get_plan(self) -> MealPlan:
        return self.state.load_meal_plan()

    def add_entry(
        self,
        meal: MealType,
        kind: EntryKind,
        source_id: UUID,
        quantity: float,
    ) -> MealEntry:
        """Snapshot a recipe or ingredient and append it to a meal."""
        _check_quantity(quantity)
        catalog = self.state.load_catalog()
        entry = _build_entry(catalog, kind, source_id, quantity)
        plan = self.state.load_meal_plan()
        self.state.save_meal_plan(
            plan.with_entries(meal, (*plan.entries(meal), entry))
        )
        _logger.info("Added %s %s to %s", kind.value, entry.name, meal.value)
        return entry

    def remove_entry(self, meal: MealType, entry_id: UUID) -> None:
        plan = self.state.load_meal_plan()
        _require_entry(plan, meal, entry_id)
        remaining = tuple(entry for entry in plan.entries(meal) if entry.id != entry_id)
        self.state.save_meal_plan(plan.with_entries(meal, remaining))
        _logger.info("Removed entry %s from %s", entry_id, meal.value)

    def update_quantity(
        self, meal: MealType, entry_id: UUID, quantity: float
    ) -> MealEntry:
        """Change the consumed quantity of an entry."""
        _check_quantity(quantity)
        plan = self.state.load_meal_plan()
        entry = _require_entry(plan, meal, entry_id)
        updated = replace(entry, quantity=float(quantity))
        self.state.save_meal_plan(_replace_entry(plan, meal, updated))
        return updated

    def customize_entry(
        self, meal: MealType, entry_id: UUID, lines: object
    ) -> MealEntry:
        """Store custom ingredient lines on a recipe entry.

        The catalog recipe is left untouched.
        """
        plan = self.state.load_meal_plan()
        entry = _require_entry(plan, meal, entry_id)
        custom_lines = _custom_lines(entry, lines, self.state.load_catalog())
        updated = replace(entry, custom_lines=custom_lines)
        self.state.save_meal_plan(_replace_entry(plan, meal, updated))
        _logger.info("Customized entry %s in %s", entry_id, meal.value)
        return updated

    def preview_customization(
        self, meal: MealType, entry_id: UUID, lines: object
    ) -> MacroTotals:
        """Return the totals a customization would give, without saving it."""
        plan = self.state.load_meal_plan()
        entry = _require_entry(plan, meal, entry_id)
        catalog = self.state.load_catalog()
        custom_lines = _custom_lines(entry, lines, catalog)
        return scale_recipe_serving(
            custom_lines or entry.recipe_snapshot.lines,
            catalog,
            entry.recipe_snapshot.yield_volume,
            entry.quantity,
        )

    def summarize_day(self) -> DaySummary:
        """Return entry, meal and day totals for the current plan."""
        plan = self.state.load_meal_plan()
        catalog = self.state.load_catalog()
        return summarize(plan, catalog)


def summarize(plan: MealPlan, catalog: Catalog) -> DaySummary:
    meals: list[MealSummary] = []
    for meal in MealType:
        entries = [
            EntrySummary(entry=entry, totals=entry_totals(entry, catalog))
            for entry in plan.entries(meal)
        ]
        meals.append(
            MealSummary(
                meal=meal,
                entries=entries,
                totals=meal_totals(plan.entries(meal), catalog),
            )
        )
    return DaySummary(meals=meals, totals=sum_totals(item.totals for item in meals))


def _build_entry(
    catalog: Catalog, kind: EntryKind, source_id: UUID, quantity: float
) -> MealEntry:
    if kind is EntryKind.RECIPE:
        recipe = catalog.get_recipe(source_id)
        if recipe is None:
            raise SourceNotFoundError(f"Recipe not found: {source_id}")
        return MealEntry(
            id=uuid4(),
            kind=kind,
            source_id=recipe.id,
            name=recipe.name,
            unit=recipe.yield_unit,
            quantity=float(quantity),
            recipe_snapshot=recipe,
        )
    ingredient = catalog.get_ingredient(source_id)
    if ingredient is None:
        raise SourceNotFoundError(f"Ingredient not found: {source_id}")
    return MealEntry(
        id=uuid4(),
        kind=kind,
        source_id=ingredient.id,
        name=ingredient.name,
        unit=ingredient.unit,
        quantity=float(quantity),
        ingredient_snapshot=ingredient,
    )


def _custom_lines(
    entry: MealEntry, lines: object, catalog: Catalog
) -> tuple[RecipeLine, ...]:
    if entry.kind is not EntryKind.RECIPE or entry.recipe_snapshot is None:
        raise CustomizationError("Only recipe entries can be customized")
    return build_lines(lines, catalog, require_known=False)


def _require_entry(plan: MealPlan, meal: MealType, entry_id: UUID) -> MealEntry:
    entry = plan.find_entry(meal, entry_id)
    if entry is None:
        raise MealEntryNotFoundError(meal.value, entry_id)
    return entry


def _replace_entry(plan: MealPlan, meal: MealType, updated: MealEntry) -> MealPlan:
    entries = tuple(
        updated if entry.id == updated.id else entry for entry in plan.entries(meal)
    )
    return plan.with_entries(meal, entries)


def _check_quantity(quantity: float) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int | float):
        raise MealEntryValidationError("Quantity must be a number")
    if not math.isfinite(quantity) or quantity <= 0:
        raise MealEntryValidationError("Quantity must be greater than zero")
