"""Domain models for the ingredient and recipe catalog."""

from dataclasses import dataclass, field, replace
from uuid import UUID

from macro_chef.domain.nutrition import MacroTotals


@dataclass(frozen=True)
class Ingredient:
    """Macro profile of an ingredient for one reference portion."""

    id: UUID
    name: str
    portion: float
    unit: str
    protein_g: float
    carbs_g: float
    fat_g: float
    calories: float


@dataclass(frozen=True)
class RecipeLine:
    """Quantity of an ingredient, in the ingredient's own unit."""

    ingredient_id: UUID
    quantity: float


@dataclass(frozen=True)
class Recipe:
    """A named set of ingredient lines producing a yield.

    ``total_macros`` and ``macros_per_unit`` are cached when the recipe is
    created and are not refreshed when ingredients change later.
    """

    id: UUID
    name: str
    yield_volume: float
    yield_unit: str
    lines: tuple[RecipeLine, ...]
    total_macros: MacroTotals
    macros_per_unit: MacroTotals


@dataclass(frozen=True)
class Catalog:
    """Immutable snapshot of ingredients and recipes keyed by id."""

    ingredients: dict[UUID, Ingredient] = field(default_factory=dict)
    recipes: dict[UUID, Recipe] = field(default_factory=dict)

    @classmethod
    def of(
        cls,
        ingredients: list[Ingredient] | tuple[Ingredient, ...] = (),
        recipes: list[Recipe] | tuple[Recipe, ...] = (),
    ) -> "Catalog":
        """Build a catalog from ordered sequences."""
        return cls(
            ingredients={item.id: item for item in ingredients},
            recipes={item.id: item for item in recipes},
        )

    def get_ingredient(self, ingredient_id: UUID) -> Ingredient | None:
        """Return an ingredient by id, if present."""
        return self.ingredients.get(ingredient_id)

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id, if present."""
        return self.recipes.get(recipe_id)

    def with_ingredients(self, *ingredients: Ingredient) -> "Catalog":
        """Return a copy with the ingredients added or replaced."""
        updated = dict(self.ingredients)
        for ingredient in ingredients:
            updated[ingredient.id] = ingredient
        return replace(self, ingredients=updated)

    def without_ingredient(self, ingredient_id: UUID) -> "Catalog":
        """Return a copy without the ingredient. Recipes keep their lines."""
        updated = {
            key: value
            for key, value in self.ingredients.items()
            if key != ingredient_id
        }
        return replace(self, ingredients=updated)

    def with_recipe(self, recipe: Recipe) -> "Catalog":
        """Return a copy with the recipe added or replaced."""
        return replace(self, recipes={**self.recipes, recipe.id: recipe})

    def without_recipe(self, recipe_id: UUID) -> "Catalog":
        """Return a copy without the recipe."""
        updated = {
            key: value for key, value in self.recipes.items() if key != recipe_id
        }
        return replace(self, recipes=updated)
