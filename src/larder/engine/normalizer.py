"""Quantity normalisation within unit families."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple, Union

from larder.models.catalog import Quantity

from .units import DEFAULT_UNIT_TABLE, UnitTable

IncompatibleReason = Literal["different_family", "unrecognized"]


@dataclass(frozen=True)
class Incompatible:
    """A quantity that cannot be expressed in the requested unit."""

    quantity: Quantity
    target_unit: str
    reason: IncompatibleReason


def normalize(
    quantity: Quantity,
    target_unit: str,
    table: UnitTable = DEFAULT_UNIT_TABLE,
) -> Union[Quantity, Incompatible]:
    """Convert ``quantity`` into ``target_unit`` or report why it cannot be.

    Identical symbols (after alias resolution) always convert to themselves,
    so unrecognised units behave like counts of themselves. Nothing is ever
    converted across families.
    """

    source_symbol = table.canonical_symbol(quantity.unit)
    target_symbol = table.canonical_symbol(target_unit)
    if source_symbol == target_symbol:
        return Quantity(value=quantity.value, unit=target_symbol)

    conversion = table.conversion(source_symbol, target_symbol)
    if not conversion.ok:
        return Incompatible(quantity=quantity, target_unit=target_symbol, reason=conversion.status)
    return Quantity(value=conversion.apply(quantity.value), unit=target_symbol)


def to_canonical(quantity: Quantity, table: UnitTable = DEFAULT_UNIT_TABLE) -> Tuple[str, Quantity]:
    """Return ``(family_key, quantity)`` with the amount in the family's canonical unit."""

    family_key = table.family_key(quantity.unit)
    normalized = normalize(quantity, table.canonical_unit(quantity.unit), table)
    if isinstance(normalized, Incompatible):
        raise ValueError(f"Unit table cannot express '{quantity.unit}' in its own family")
    return family_key, normalized


__all__ = ["Incompatible", "IncompatibleReason", "normalize", "to_canonical"]
