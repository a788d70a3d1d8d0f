"""Loading and saving catalog and meal-plan snapshots."""

from dataclasses import dataclass
from typing import Protocol

from macro_chef.domain.catalog import Catalog
from macro_chef.domain.meals import MealPlan
from macro_chef.services.codec import (
    dump_ingredient,
    dump_plan,
    dump_recipe,
    parse_ingredient,
    parse_plan,
    parse_recipe,
)

INGREDIENTS_KEY = "ingredients"
RECIPES_KEY = "recipes"
MEALS_KEY = "meals"


class StateRepository(Protocol):
    """Persistence interface for JSON blobs stored under a key."""

    def load(self, key: str) -> object | None:
        """Return the blob stored under a key, if present."""

    def save(self, key: str, value: object) -> None:
        """Replace the blob stored under a key."""


@dataclass
class StateService:
    """Reads and replaces whole catalog and meal-plan values."""

    repository: StateRepository

    def load_catalog(self) -> Catalog:
        ingredients = self.repository.load(INGREDIENTS_KEY) or []
        recipes = self.repository.load(RECIPES_KEY) or []
        return Catalog.of(
            ingredients=[parse_ingredient(row) for row in ingredients],
            recipes=[parse_recipe(row) for row in recipes],
        )

    def save_ingredients(self, catalog: Catalog) -> None:
        self.repository.save(
            INGREDIENTS_KEY,
            [dump_ingredient(item) for item in catalog.ingredients.values()],
        )

    def save_recipes(self, catalog: Catalog) -> None:
        self.repository.save(
            RECIPES_KEY, [dump_recipe(item) for item in catalog.recipes.values()]
        )

    def load_meal_plan(self) -> MealPlan:
        """Return the stored plan, or an empty one for every meal."""
        return parse_plan(self.repository.load(MEALS_KEY))

    def save_meal_plan(self, plan: MealPlan) -> None:
        self.repository.save(MEALS_KEY, dump_plan(plan))
