"""Pydantic models defining shared data contracts."""

from larder.models.catalog import (
    Ingredient,
    IngredientCatalog,
    Quantity,
    Recipe,
    RecipeRequirement,
)
from larder.models.coverage import CoverageResult, MissingIngredient
from larder.models.pantry import PantryItem, PantrySnapshot
from larder.models.plan import (
    AggregateBucket,
    AggregatedRequirement,
    MealPlanAssignment,
    MealType,
)
from larder.models.shopping import GroceryList, GroceryListItem, ItemOrigin
from larder.models.snapshot import KitchenSnapshot

__all__ = [
    "Ingredient",
    "IngredientCatalog",
    "Quantity",
    "Recipe",
    "RecipeRequirement",
    "CoverageResult",
    "MissingIngredient",
    "PantryItem",
    "PantrySnapshot",
    "AggregateBucket",
    "AggregatedRequirement",
    "MealPlanAssignment",
    "MealType",
    "GroceryList",
    "GroceryListItem",
    "ItemOrigin",
    "KitchenSnapshot",
]
