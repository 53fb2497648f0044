"""Unit conversion table tests."""

from __future__ import annotations

import json
from decimal import Decimal

import pytest

from larder.engine.units import DEFAULT_UNIT_TABLE, UnitTable, load_unit_table


def test_same_family_conversion_reports_factor():
    conversion = DEFAULT_UNIT_TABLE.conversion("cup", "tbsp")

    assert conversion.ok
    assert conversion.family == "volume"
    assert conversion.apply(Decimal(1)) == Decimal(16)


def test_weight_family_uses_exact_definitions():
    conversion = DEFAULT_UNIT_TABLE.conversion("lb", "oz")

    assert conversion.apply(Decimal(1)) == Decimal(16)
    assert DEFAULT_UNIT_TABLE.conversion("kg", "g").apply(Decimal("1.5")) == Decimal(1500)


def test_cross_family_conversion_is_refused():
    conversion = DEFAULT_UNIT_TABLE.conversion("cup", "g")

    assert conversion.status == "different_family"
    assert conversion.factor is None
    with pytest.raises(ValueError):
        conversion.apply(Decimal(1))


def test_unknown_unit_is_reported_not_raised():
    conversion = DEFAULT_UNIT_TABLE.conversion("pinch", "tsp")

    assert conversion.status == "unrecognized"
    assert not DEFAULT_UNIT_TABLE.is_recognized("pinch")
    assert DEFAULT_UNIT_TABLE.family_key("Pinch") == "unit:pinch"


def test_count_family_only_converts_to_itself():
    assert DEFAULT_UNIT_TABLE.conversion("each", "item").ok
    assert DEFAULT_UNIT_TABLE.conversion("item", "g").status == "different_family"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Cups", "cup"),
        ("tablespoons", "tbsp"),
        ("l", "L"),
        ("  fl   oz ", "fl oz"),
        ("tsp.", "tsp"),
        ("lbs", "lb"),
        ("pcs", "item"),
    ],
)
def test_aliases_resolve_to_symbols(raw, expected):
    assert DEFAULT_UNIT_TABLE.canonical_symbol(raw) == expected


def test_canonical_unit_is_smallest_member():
    assert DEFAULT_UNIT_TABLE.canonical_unit("cup") == "ml"
    assert DEFAULT_UNIT_TABLE.canonical_unit("kg") == "g"
    assert DEFAULT_UNIT_TABLE.canonical_unit("each") == "item"


def test_table_rejects_unit_in_two_families():
    with pytest.raises(ValueError):
        UnitTable.from_mapping({"a": ("x", {"x": 1}), "b": ("y", {"y": 1, "x": 2})})


def test_load_unit_table_from_json(tmp_path):
    path = tmp_path / "units.json"
    path.write_text(
        json.dumps(
            {
                "families": {
                    "volume": {"canonical": "ml", "factors": {"ml": 1, "cup": 250}},
                },
                "aliases": {"metric cup": "cup"},
            }
        ),
        encoding="utf-8",
    )

    table = load_unit_table(path)

    assert table.conversion("metric cup", "ml").apply(Decimal(2)) == Decimal(500)
    assert table.conversion("cup", "g").status == "unrecognized"
