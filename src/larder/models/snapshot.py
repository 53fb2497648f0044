"""Bundle of engine inputs loaded by the command line."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from larder.models.catalog import Ingredient, IngredientCatalog, Recipe
from larder.models.pantry import PantryItem, PantrySnapshot
from larder.models.plan import MealPlanAssignment
from larder.models.shopping import GroceryList, GroceryListItem


class KitchenSnapshot(BaseModel):
    """Everything one user's engine run needs, read in a single batch."""

    ingredients: list[Ingredient] = Field(default_factory=list)
    recipes: list[Recipe] = Field(default_factory=list)
    pantry: list[PantryItem] = Field(default_factory=list)
    assignments: list[MealPlanAssignment] = Field(default_factory=list)
    grocery_list: list[GroceryListItem] = Field(default_factory=list)
    grocery_list_version: int = Field(default=0, ge=0)

    model_config = ConfigDict(populate_by_name=True)

    def catalog(self) -> IngredientCatalog:
        return IngredientCatalog.from_ingredients(self.ingredients)

    def pantry_snapshot(self) -> PantrySnapshot:
        return PantrySnapshot(items=tuple(self.pantry))

    def previous_list(self) -> GroceryList:
        return GroceryList(items=tuple(self.grocery_list), version=self.grocery_list_version)
