"""Ingredient categorisation tests."""

from __future__ import annotations

import json

from larder.engine import Categorizer, load_categorizer
from larder.models import GroceryListItem, Ingredient


def _ingredient(name, category=None, ingredient_id=None):
    return Ingredient(id=ingredient_id or name.replace(" ", "-"), name=name, category=category)


def test_lookup_order():
    categorizer = Categorizer(
        overrides={"tofu": "Refrigerated"},
        keywords={"Pepper": "Produce", "cheese": "Dairy & Eggs"},
    )

    assert categorizer.categorize(_ingredient("tofu", category="Pantry")) == "Refrigerated"
    assert categorizer.categorize(_ingredient("rice", category=" Pantry ")) == "Pantry"
    assert categorizer.categorize(_ingredient("Red  Bell pepper")) == "Produce"
    assert categorizer.categorize(_ingredient("cheddar cheese")) == "Dairy & Eggs"
    assert categorizer.categorize(_ingredient("star anise")) == "Other"
    assert categorizer.categorize(None) == "Other"


def test_custom_fallback():
    categorizer = Categorizer(fallback="Misc")

    assert categorizer.categorize(_ingredient("mystery", category="  ")) == "Misc"
    assert categorizer.fallback == "Misc"


def test_group_orders_known_categories_first_and_fallback_last():
    categorizer = Categorizer()
    items = [
        GroceryListItem(label="rag", category="Other"),
        GroceryListItem(label="spice", category="Spices"),
        GroceryListItem(label="flour", category="Pantry"),
        GroceryListItem(label="lime", category="Produce"),
        GroceryListItem(label="bread", category="Baked goods"),
        GroceryListItem(label="rice", category="Pantry"),
    ]

    grouped = categorizer.group(items)

    assert list(grouped) == ["Produce", "Pantry", "Baked goods", "Spices", "Other"]
    assert [item.label for item in grouped["Pantry"]] == ["flour", "rice"]


def test_load_categorizer_from_json(tmp_path):
    path = tmp_path / "categories.json"
    path.write_text(
        json.dumps(
            {
                "overrides": {"garlic": "Produce"},
                "keywords": {"onion": "Produce"},
                "order": ["Produce", "Pantry"],
            }
        ),
        encoding="utf-8",
    )

    categorizer = load_categorizer(path, fallback="Uncategorised")

    assert categorizer.categorize(_ingredient("garlic")) == "Produce"
    assert categorizer.categorize(_ingredient("yellow onion")) == "Produce"
    assert categorizer.categorize(_ingredient("salt")) == "Uncategorised"
    assert list(categorizer.group([GroceryListItem(label="a", category="Frozen")])) == ["Frozen"]
