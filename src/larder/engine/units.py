"""Static unit conversion table."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Literal, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

ConversionStatus = Literal["ok", "different_family", "unrecognized"]

UNRECOGNIZED_FAMILY_PREFIX = "unit:"

# Factors to the family's canonical unit, using the exact US customary definitions.
_DEFAULT_FAMILIES: Dict[str, Tuple[str, Dict[str, str]]] = {
    "volume": (
        "ml",
        {
            "ml": "1",
            "tsp": "4.92892159375",
            "tbsp": "14.78676478125",
            "fl oz": "29.5735295625",
            "cup": "236.5882365",
            "pint": "473.176473",
            "quart": "946.352946",
            "gallon": "3785.411784",
            "L": "1000",
        },
    ),
    "weight": (
        "g",
        {
            "g": "1",
            "oz": "28.349523125",
            "lb": "453.59237",
            "kg": "1000",
        },
    ),
    "count": ("item", {"item": "1"}),
}

_DEFAULT_ALIASES: Dict[str, str] = {
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tsps": "tsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbsps": "tbsp",
    "tbs": "tbsp",
    "floz": "fl oz",
    "fl. oz": "fl oz",
    "fluid ounce": "fl oz",
    "fluid ounces": "fl oz",
    "cups": "cup",
    "c": "cup",
    "pints": "pint",
    "pt": "pint",
    "quarts": "quart",
    "qt": "quart",
    "gallons": "gallon",
    "gal": "gallon",
    "l": "L",
    "liter": "L",
    "liters": "L",
    "litre": "L",
    "litres": "L",
    "gram": "g",
    "grams": "g",
    "gr": "g",
    "ounce": "oz",
    "ounces": "oz",
    "pound": "lb",
    "pounds": "lb",
    "lbs": "lb",
    "kilogram": "kg",
    "kilograms": "kg",
    "kgs": "kg",
    "items": "item",
    "each": "item",
    "ea": "item",
    "count": "item",
    "piece": "item",
    "pieces": "item",
    "pc": "item",
    "pcs": "item",
    "whole": "item",
}


@dataclass(frozen=True)
class UnitFamily:
    """Units that convert into each other by a constant factor."""

    name: str
    canonical: str
    factors: Mapping[str, Decimal]


@dataclass(frozen=True)
class Conversion:
    """Outcome of looking up a conversion between two unit symbols."""

    source: str
    target: str
    status: ConversionStatus
    source_factor: Optional[Decimal] = None
    target_factor: Optional[Decimal] = None
    family: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def factor(self) -> Optional[Decimal]:
        if not self.ok:
            return None
        return self.source_factor / self.target_factor

    def apply(self, value: Decimal) -> Decimal:
        """Convert an amount, multiplying before dividing to stay exact where possible."""

        if not self.ok:
            raise ValueError(f"Cannot convert {self.source} to {self.target}: {self.status}")
        return value * self.source_factor / self.target_factor


@dataclass(frozen=True)
class UnitTable:
    """Read-only registry of unit families, factors and aliases."""

    families: Tuple[UnitFamily, ...]
    aliases: Mapping[str, str] = field(default_factory=dict)
    _lookup: Mapping[str, str] = field(init=False, repr=False, compare=False)
    _family_index: Mapping[str, UnitFamily] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lookup: Dict[str, str] = {}
        family_index: Dict[str, UnitFamily] = {}
        for family in self.families:
            if family.canonical not in family.factors:
                raise ValueError(
                    f"Canonical unit '{family.canonical}' missing from family '{family.name}'"
                )
            for symbol in family.factors:
                if symbol in family_index:
                    raise ValueError(f"Unit '{symbol}' declared in more than one family")
                family_index[symbol] = family
                lookup[symbol.lower()] = symbol
        for alias, symbol in self.aliases.items():
            if symbol not in family_index:
                raise ValueError(f"Alias '{alias}' points at unknown unit '{symbol}'")
            lookup.setdefault(_clean(alias).lower(), symbol)
        object.__setattr__(self, "aliases", MappingProxyType(dict(self.aliases)))
        object.__setattr__(self, "_lookup", MappingProxyType(lookup))
        object.__setattr__(self, "_family_index", MappingProxyType(family_index))

    @classmethod
    def from_mapping(
        cls,
        families: Mapping[str, Tuple[str, Mapping[str, object]]],
        aliases: Optional[Mapping[str, str]] = None,
    ) -> "UnitTable":
        """Build a table from ``{family: (canonical, {symbol: factor})}``."""

        built = tuple(
            UnitFamily(
                name=name,
                canonical=canonical,
                factors=MappingProxyType(
                    {symbol: Decimal(str(factor)) for symbol, factor in factors.items()}
                ),
            )
            for name, (canonical, factors) in families.items()
        )
        return cls(families=built, aliases=dict(aliases or {}))

    def canonical_symbol(self, unit: str) -> str:
        """Resolve aliases and casing; unknown symbols come back cleaned and lower-cased."""

        cleaned = _clean(unit)
        if cleaned in self._family_index:
            return cleaned
        lowered = cleaned.lower()
        return self._lookup.get(lowered, lowered)

    def family_of(self, unit: str) -> Optional[UnitFamily]:
        return self._family_index.get(self.canonical_symbol(unit))

    def is_recognized(self, unit: str) -> bool:
        return self.family_of(unit) is not None

    def family_key(self, unit: str) -> str:
        """Grouping key for a unit; unrecognised symbols form their own group."""

        family = self.family_of(unit)
        if family is not None:
            return family.name
        return f"{UNRECOGNIZED_FAMILY_PREFIX}{self.canonical_symbol(unit)}"

    def canonical_unit(self, unit: str) -> str:
        family = self.family_of(unit)
        if family is None:
            return self.canonical_symbol(unit)
        return family.canonical

    def conversion(self, source: str, target: str) -> Conversion:
        """Return the factor converting ``source`` amounts into ``target`` amounts."""

        source_symbol = self.canonical_symbol(source)
        target_symbol = self.canonical_symbol(target)
        source_family = self._family_index.get(source_symbol)
        target_family = self._family_index.get(target_symbol)

        if source_family is None or target_family is None:
            return Conversion(source_symbol, target_symbol, "unrecognized")
        if source_family is not target_family:
            return Conversion(source_symbol, target_symbol, "different_family")

        return Conversion(
            source_symbol,
            target_symbol,
            "ok",
            source_factor=source_family.factors[source_symbol],
            target_factor=source_family.factors[target_symbol],
            family=source_family.name,
        )


def _clean(unit: str) -> str:
    return " ".join((unit or "").strip().rstrip(".").split())


def load_unit_table(path: Path) -> UnitTable:
    """Load a table from JSON shaped like ``{"families": {...}, "aliases": {...}}``.

    Each family entry is ``{"canonical": "ml", "factors": {"ml": 1, ...}}``.
    """

    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    families = {
        name: (entry["canonical"], entry["factors"])
        for name, entry in (payload.get("families") or {}).items()
    }
    if not families:
        raise ValueError(f"Unit table at {path} declares no families")
    table = UnitTable.from_mapping(families, payload.get("aliases") or {})
    logger.info("Loaded unit table from %s with %d families", path, len(table.families))
    return table


DEFAULT_UNIT_TABLE = UnitTable.from_mapping(_DEFAULT_FAMILIES, _DEFAULT_ALIASES)

__all__ = [
    "Conversion",
    "ConversionStatus",
    "DEFAULT_UNIT_TABLE",
    "UNRECOGNIZED_FAMILY_PREFIX",
    "UnitFamily",
    "UnitTable",
    "load_unit_table",
]
