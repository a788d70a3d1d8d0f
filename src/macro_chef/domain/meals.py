"""Domain models for the daily meal plan."""

from dataclasses import dataclass, field, replace
from enum import Enum
from uuid import UUID

from macro_chef.domain.catalog import Ingredient, Recipe, RecipeLine
from macro_chef.domain.nutrition import MacroTotals


class MealType(str, Enum):
    """Fixed set of meals in a day, in display order."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"


class EntryKind(str, Enum):
    """What a meal entry points at."""

    RECIPE = "recipe"
    INGREDIENT = "ingredient"


@dataclass(frozen=True)
class MealEntry:
    """A serving of a recipe or ingredient assigned to a meal.

    The source object is snapshotted when the entry is added. For recipe
    entries ``custom_lines`` is either ``None`` (use the recipe's own lines)
    or a replacement line list that only applies to this entry.
    """

    id: UUID
    kind: EntryKind
    source_id: UUID
    name: str
    unit: str
    quantity: float
    recipe_snapshot: Recipe | None = None
    ingredient_snapshot: Ingredient | None = None
    custom_lines: tuple[RecipeLine, ...] | None = None

    @property
    def is_customized(self) -> bool:
        return bool(self.custom_lines)


@dataclass(frozen=True)
class MealPlan:
    """Entries for every meal of the day."""

    meals: dict[MealType, tuple[MealEntry, ...]] = field(
        default_factory=lambda: {meal: () for meal in MealType}
    )

    def entries(self, meal: MealType) -> tuple[MealEntry, ...]:
        """Return the entries of a meal in insertion order."""
        return self.meals.get(meal, ())

    def find_entry(self, meal: MealType, entry_id: UUID) -> MealEntry | None:
        """Return an entry of a meal by id, if present."""
        for entry in self.entries(meal):
            if entry.id == entry_id:
                return entry
        return None

    def with_entries(
        self, meal: MealType, entries: tuple[MealEntry, ...]
    ) -> "MealPlan":
        """Return a copy with a meal's entries replaced."""
        return replace(self, meals={**self.meals, meal: entries})


@dataclass(frozen=True)
class EntrySummary:
    """Meal entry with its computed macros."""

    entry: MealEntry
    totals: MacroTotals


@dataclass(frozen=True)
class MealSummary:
    """Entries of one meal and their totals."""

    meal: MealType
    entries: list[EntrySummary]
    totals: MacroTotals


@dataclass(frozen=True)
class DaySummary:
    """All meals of the day with day totals."""

    meals: list[MealSummary]
    totals: MacroTotals
