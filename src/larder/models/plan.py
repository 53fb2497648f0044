"""Meal plan inputs and aggregation outputs."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from fractions import Fraction
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from larder.models.catalog import Quantity

MealType = Literal["breakfast", "lunch", "dinner", "snack"]


class MealPlanAssignment(BaseModel):
    """Recipe scheduled in the meal plan at a target number of servings."""

    recipe_id: str
    servings: Decimal = Field(gt=0)
    planned_on: Optional[date] = Field(default=None, alias="date")
    meal_type: MealType = Field(default="dinner")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AggregateBucket(BaseModel):
    """Summed quantity for one ingredient within a single unit family.

    ``exact_total`` keeps the canonical amount as a fraction so merging
    aggregates never accumulates decimal rounding. It is not serialised.
    """

    family: str
    total: Quantity
    display: Quantity
    recipe_ids: tuple[str, ...] = Field(default_factory=tuple)
    exact_total: Optional[Fraction] = Field(default=None, exclude=True, repr=False)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def exact(self) -> Fraction:
        if self.exact_total is not None:
            return self.exact_total
        return Fraction(self.total.value)


class AggregatedRequirement(BaseModel):
    """Total requirement for one ingredient across a set of recipes.

    Required and optional amounts are kept apart. Each side holds one bucket
    per unit family. When the two sides together span more than one family
    the amounts could not be combined and need a human decision.
    """

    ingredient_id: str
    name: str
    required: tuple[AggregateBucket, ...] = Field(default_factory=tuple)
    optional: tuple[AggregateBucket, ...] = Field(default_factory=tuple)
    recipe_ids: tuple[str, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @property
    def families(self) -> tuple[str, ...]:
        """Distinct unit families across required and optional buckets, in order."""

        seen: list[str] = []
        for bucket in self.required + self.optional:
            if bucket.family not in seen:
                seen.append(bucket.family)
        return tuple(seen)

    @property
    def needs_manual_reconciliation(self) -> bool:
        return len(self.families) > 1

    @property
    def is_required(self) -> bool:
        return bool(self.required)


__all__ = ["MealType", "MealPlanAssignment", "AggregateBucket", "AggregatedRequirement"]
