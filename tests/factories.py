"""Builders for engine input models used across tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from larder.models import (
    GroceryListItem,
    MealPlanAssignment,
    PantryItem,
    RecipeRequirement,
)

TODAY = date(2026, 10, 19)


def requirement(ingredient_id: str, qty, unit: str, optional: bool = False) -> RecipeRequirement:
    return RecipeRequirement(
        ingredient_id=ingredient_id, qty=Decimal(str(qty)), unit=unit, optional=optional
    )


def pantry_item(ingredient_id: str, qty, unit: str, expires_on: Optional[date] = None) -> PantryItem:
    return PantryItem(
        ingredient_id=ingredient_id, qty=Decimal(str(qty)), unit=unit, expires_on=expires_on
    )


def assignment(recipe_id: str, servings, meal_type: str = "dinner") -> MealPlanAssignment:
    return MealPlanAssignment(
        recipe_id=recipe_id, servings=Decimal(str(servings)), date=TODAY, meal_type=meal_type
    )


def manual_item(label: str, **kwargs) -> GroceryListItem:
    defaults = {"label": label, "origin": "manual", "category": "Household"}
    defaults.update(kwargs)
    return GroceryListItem.model_validate(defaults)
