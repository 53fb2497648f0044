"""Shared helpers for engine modules."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Union

from larder.models.catalog import Ingredient, IngredientCatalog, Recipe
from larder.models.pantry import PantryItem, PantrySnapshot

from .errors import DataIntegrityError


def normalize_name(value: str) -> str:
    """Normalize free-text names for comparison."""
    return " ".join(value.lower().split())


def build_catalog_index(catalog: IngredientCatalog) -> Dict[str, Ingredient]:
    """Create a lookup table of ingredients by id."""
    return {ingredient.id: ingredient for ingredient in catalog.ingredients}


def build_recipe_index(recipes: Union[Mapping[str, Recipe], Iterable[Recipe]]) -> Dict[str, Recipe]:
    """Create a lookup table of recipes by id."""
    if isinstance(recipes, Mapping):
        return dict(recipes)
    return {recipe.id: recipe for recipe in recipes}


def build_pantry_index(pantry: PantrySnapshot) -> Dict[str, PantryItem]:
    """Create a lookup table of pantry items by ingredient id.

    Raises ``DataIntegrityError`` when an ingredient appears twice.
    """
    index: Dict[str, PantryItem] = {}
    for item in pantry.items:
        if item.ingredient_id in index:
            raise DataIntegrityError(
                "Pantry snapshot holds more than one row for an ingredient",
                ingredient_id=item.ingredient_id,
            )
        index[item.ingredient_id] = item
    return index
