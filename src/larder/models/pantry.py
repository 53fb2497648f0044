"""Pantry snapshot models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from larder.models.catalog import Quantity


class PantryItem(BaseModel):
    """Amount of one ingredient currently held by the household."""

    ingredient_id: str
    quantity: Decimal = Field(alias="qty", ge=0)
    unit: str
    expires_on: Optional[date] = Field(default=None, alias="best_before")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def as_quantity(self) -> Quantity:
        return Quantity(value=self.quantity, unit=self.unit)


class PantrySnapshot(BaseModel):
    """Consistent view of a pantry for the duration of one computation.

    Callers merge multiple rows for the same ingredient before building a
    snapshot; the engine rejects duplicates.
    """

    items: tuple[PantryItem, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)


__all__ = ["PantryItem", "PantrySnapshot"]
