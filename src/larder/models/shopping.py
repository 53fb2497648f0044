"""Grocery list models."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ItemOrigin = Literal["generated", "manual"]


class GroceryListItem(BaseModel):
    """Single entry on the grocery list.

    Generated items are owned by regeneration; manual items belong to the user
    and are never changed by it. ``checked`` is user state on both.
    """

    id: Optional[str] = Field(default=None)
    ingredient_id: Optional[str] = Field(default=None)
    label: str
    quantity: Optional[Decimal] = Field(default=None, ge=0)
    unit: Optional[str] = Field(default=None)
    category: str = Field(default="Other")
    checked: bool = Field(default=False)
    origin: ItemOrigin = Field(default="generated")
    in_plan: bool = Field(default=True)
    needs_manual_reconciliation: bool = Field(default=False)
    notes: Optional[str] = Field(default=None, max_length=1000)

    model_config = ConfigDict(frozen=True)


class GroceryList(BaseModel):
    """Grocery list for one meal plan.

    ``version`` only moves when regeneration changes the items, so callers can
    use it for compare-and-swap when storing the result.
    """

    items: tuple[GroceryListItem, ...] = Field(default_factory=tuple)
    version: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


__all__ = ["ItemOrigin", "GroceryListItem", "GroceryList"]
