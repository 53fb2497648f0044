"""Shared pytest fixtures for the Larder test suite."""

from __future__ import annotations

import os
from decimal import Decimal
from typing import Dict

import pytest

from larder.config import get_settings
from larder.engine import ReconciliationEngine
from larder.models import (
    Ingredient,
    IngredientCatalog,
    PantrySnapshot,
    Recipe,
)
from tests.factories import requirement


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Ensure each test starts from default settings."""

    for key in list(os.environ):
        if key.startswith("LARDER_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def catalog() -> IngredientCatalog:
    return IngredientCatalog.from_ingredients(
        [
            Ingredient(id="flour", name="all-purpose flour", category="Pantry", common_units=("cup", "g")),
            Ingredient(id="rice", name="jasmine rice", category="Pantry", common_units=("cup",)),
            Ingredient(id="chicken", name="chicken thigh", category="Meat & Seafood", common_units=("lb",)),
            Ingredient(id="lime", name="lime", category="Produce", common_units=("item",)),
            Ingredient(id="milk", name="whole milk", category="Dairy & Eggs", common_units=("cup", "gallon")),
            Ingredient(id="onion", name="yellow onion", common_units=("item", "g")),
            Ingredient(id="garlic", name="garlic", common_units=("clove",)),
            Ingredient(id="butter", name="unsalted butter", category="Dairy & Eggs", common_units=("tbsp", "g")),
        ]
    )


@pytest.fixture()
def recipes() -> Dict[str, Recipe]:
    entries = [
        Recipe(
            id="pancakes",
            title="Pancakes",
            base_servings=Decimal(4),
            requirements=(
                requirement("flour", 2, "cup"),
                requirement("milk", "1.5", "cup"),
                requirement("butter", 2, "tbsp"),
            ),
        ),
        Recipe(
            id="lime-chicken",
            title="Lime Chicken",
            base_servings=Decimal(4),
            requirements=(
                requirement("chicken", 3, "lb"),
                requirement("lime", 1, "item", optional=True),
            ),
        ),
        Recipe(
            id="rice-bowl",
            title="Rice Bowl",
            base_servings=Decimal(4),
            requirements=(
                requirement("rice", 2, "cup"),
                requirement("onion", 1, "item"),
                requirement("garlic", 3, "clove"),
            ),
        ),
        Recipe(
            id="onion-soup",
            title="Onion Soup",
            base_servings=Decimal(2),
            requirements=(
                requirement("onion", 400, "g"),
                requirement("butter", 30, "g"),
                requirement("milk", 1, "cup"),
            ),
        ),
    ]
    return {recipe.id: recipe for recipe in entries}


@pytest.fixture()
def empty_pantry() -> PantrySnapshot:
    return PantrySnapshot()


@pytest.fixture()
def engine(catalog) -> ReconciliationEngine:
    return ReconciliationEngine(catalog)
