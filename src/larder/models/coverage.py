"""Recipe coverage result models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from larder.models.catalog import Quantity


class MissingIngredient(BaseModel):
    """Ingredient the pantry cannot fully supply, in the recipe's unit."""

    ingredient_id: str
    name: str
    required: Quantity
    available: Quantity
    shortfall: Quantity
    unit_mismatch: bool = Field(default=False)

    model_config = ConfigDict(frozen=True)


class CoverageResult(BaseModel):
    """How well a pantry covers one recipe.

    ``coverage`` is the figure shown to users. ``ranking_score`` starts from the
    same value and carries expiry boosts and missing-ingredient penalties.
    """

    recipe_id: str
    title: Optional[str] = Field(default=None)
    coverage: int = Field(ge=0, le=100)
    missing_required: tuple[MissingIngredient, ...] = Field(default_factory=tuple)
    missing_optional: tuple[MissingIngredient, ...] = Field(default_factory=tuple)
    expiration_boosted: bool = Field(default=False)
    ranking_score: float
    diagnostics: tuple[str, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)


__all__ = ["MissingIngredient", "CoverageResult"]
