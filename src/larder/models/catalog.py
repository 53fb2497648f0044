"""Ingredient and recipe reference data models."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field


class Quantity(BaseModel):
    """Non-negative amount expressed in a single unit."""

    value: Decimal = Field(ge=0)
    unit: str

    model_config = ConfigDict(frozen=True)


class Ingredient(BaseModel):
    """Catalog entry referenced by recipes and pantry items."""

    id: str
    name: str
    category: Optional[str] = Field(default=None)
    common_units: tuple[str, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)


class IngredientCatalog(BaseModel):
    """Read-only set of known ingredients."""

    ingredients: tuple[Ingredient, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_ingredients(cls, ingredients: Iterable[Ingredient]) -> "IngredientCatalog":
        return cls(ingredients=tuple(ingredients))


class RecipeRequirement(BaseModel):
    """Ingredient quantity needed by a recipe at its base servings."""

    ingredient_id: str
    quantity: Decimal = Field(alias="qty", ge=0)
    unit: str
    optional: bool = Field(default=False)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def as_quantity(self) -> Quantity:
        return Quantity(value=self.quantity, unit=self.unit)


class Recipe(BaseModel):
    """Recipe with an ordered list of requirements.

    ``base_servings`` is validated by the engine rather than here so that a
    non-positive value surfaces as a ``DataIntegrityError`` carrying the recipe id.
    """

    id: str
    title: str
    base_servings: Decimal = Field(default=Decimal(4))
    requirements: tuple[RecipeRequirement, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)


__all__ = ["Quantity", "Ingredient", "IngredientCatalog", "RecipeRequirement", "Recipe"]
