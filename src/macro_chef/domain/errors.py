"""Errors raised at the catalog and meal-plan edit boundaries."""

from uuid import UUID


class CatalogValidationError(ValueError):
    """Raised when an ingredient or recipe payload is invalid."""


class IngredientImportError(ValueError):
    """Raised when a bulk ingredient import cannot be parsed."""


class IngredientNotFoundError(LookupError):
    """Raised when an ingredient id is not in the catalog."""

    def __init__(self, ingredient_id: UUID) -> None:
        super().__init__(f"Ingredient not found: {ingredient_id}")
        self.ingredient_id = ingredient_id


class RecipeNotFoundError(LookupError):
    """Raised when a recipe id is not in the catalog."""

    def __init__(self, recipe_id: UUID) -> None:
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id


class SourceNotFoundError(LookupError):
    """Raised when a meal entry is added for a missing recipe or ingredient."""


class MealEntryNotFoundError(LookupError):
    """Raised when a meal entry id is not in the given meal."""

    def __init__(self, meal: str, entry_id: UUID) -> None:
        super().__init__(f"Meal entry not found in {meal}: {entry_id}")
        self.meal = meal
        self.entry_id = entry_id


class MealEntryValidationError(ValueError):
    """Raised when a meal entry edit carries an invalid quantity."""


class CustomizationError(ValueError):
    """Raised when a customization targets an entry that cannot carry one."""
