"""Meal plan ingredient aggregation."""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from larder.metrics import AGGREGATED_INGREDIENTS, MANUAL_RECONCILIATION_CASES
from larder.models.catalog import Ingredient, IngredientCatalog, Quantity, Recipe
from larder.models.plan import AggregateBucket, AggregatedRequirement, MealPlanAssignment

from .errors import DataIntegrityError, EmptyInputWarning
from .units import DEFAULT_UNIT_TABLE, UnitTable
from .utils import build_catalog_index, build_recipe_index

logger = logging.getLogger(__name__)


@dataclass
class _BucketTally:
    canonical_unit: str
    display_unit: str
    total: Fraction = Fraction(0)
    recipe_ids: List[str] = field(default_factory=list)

    def add(self, amount: Fraction, recipe_ids: Iterable[str]) -> None:
        self.total += amount
        for recipe_id in recipe_ids:
            if recipe_id not in self.recipe_ids:
                self.recipe_ids.append(recipe_id)


@dataclass
class _IngredientTally:
    name: str
    required: Dict[str, _BucketTally] = field(default_factory=dict)
    optional: Dict[str, _BucketTally] = field(default_factory=dict)
    recipe_ids: List[str] = field(default_factory=list)

    def note_recipes(self, recipe_ids: Iterable[str]) -> None:
        for recipe_id in recipe_ids:
            if recipe_id not in self.recipe_ids:
                self.recipe_ids.append(recipe_id)


class RequirementAggregator:
    """Sum recipe requirements per ingredient, scaled to planned servings.

    Amounts are kept in each family's canonical unit as exact fractions and
    only rounded to decimals when a bucket is built, so merging partial
    aggregates gives the same result as aggregating everything at once.
    Incompatible units for the same ingredient stay in separate buckets.
    """

    def __init__(
        self,
        catalog: IngredientCatalog,
        table: UnitTable = DEFAULT_UNIT_TABLE,
    ) -> None:
        self._ingredients = build_catalog_index(catalog)
        self._table = table

    def aggregate(
        self,
        assignments: Sequence[MealPlanAssignment],
        recipes: Union[Mapping[str, Recipe], Iterable[Recipe]],
    ) -> List[AggregatedRequirement]:
        """Aggregate every assignment in the meal plan."""

        if not assignments:
            warnings.warn("Meal plan has no assignments; aggregate is empty", EmptyInputWarning)
            return []

        recipe_index = build_recipe_index(recipes)
        tallies: Dict[str, _IngredientTally] = {}
        for assignment in assignments:
            recipe = recipe_index.get(assignment.recipe_id)
            if recipe is None:
                raise DataIntegrityError(
                    "Meal plan references an unknown recipe",
                    recipe_id=assignment.recipe_id,
                )
            self._accumulate(tallies, recipe, assignment.servings)

        result = self._build(tallies)
        self._record(result)
        return result

    def aggregate_recipe(
        self,
        recipe: Recipe,
        servings: Optional[Decimal] = None,
    ) -> List[AggregatedRequirement]:
        """Aggregate one recipe, at its base servings unless told otherwise."""

        tallies: Dict[str, _IngredientTally] = {}
        target = recipe.base_servings if servings is None else Decimal(servings)
        self._accumulate(tallies, recipe, target)
        return self._build(tallies)

    def merge(
        self,
        first: Sequence[AggregatedRequirement],
        second: Sequence[AggregatedRequirement],
    ) -> List[AggregatedRequirement]:
        """Combine two aggregates as if their assignments had been aggregated together."""

        tallies: Dict[str, _IngredientTally] = {}
        for requirement in (*first, *second):
            tally = tallies.setdefault(
                requirement.ingredient_id, _IngredientTally(name=requirement.name)
            )
            tally.note_recipes(requirement.recipe_ids)
            for bucket in requirement.required:
                self._merge_bucket(tally.required, bucket)
            for bucket in requirement.optional:
                self._merge_bucket(tally.optional, bucket)
        return self._build(tallies)

    def _accumulate(
        self,
        tallies: Dict[str, _IngredientTally],
        recipe: Recipe,
        servings: Decimal,
    ) -> None:
        if recipe.base_servings <= 0:
            raise DataIntegrityError(
                f"Recipe base servings must be positive, got {recipe.base_servings}",
                recipe_id=recipe.id,
            )
        if not recipe.requirements:
            warnings.warn(f"Recipe {recipe.id} has no requirements", EmptyInputWarning)

        scale = Fraction(Decimal(servings)) / Fraction(recipe.base_servings)
        seen: set[str] = set()
        for requirement in recipe.requirements:
            ingredient = self._resolve(requirement.ingredient_id, recipe.id)
            if requirement.ingredient_id in seen:
                raise DataIntegrityError(
                    "Recipe lists the same ingredient more than once",
                    recipe_id=recipe.id,
                    ingredient_id=requirement.ingredient_id,
                )
            seen.add(requirement.ingredient_id)

            family_key = self._table.family_key(requirement.unit)
            canonical_unit = self._table.canonical_unit(requirement.unit)
            amount = (
                Fraction(requirement.quantity) * scale * self._factor(requirement.unit, canonical_unit)
            )
            tally = tallies.setdefault(ingredient.id, _IngredientTally(name=ingredient.name))
            tally.note_recipes([recipe.id])
            buckets = tally.optional if requirement.optional else tally.required
            bucket = buckets.get(family_key)
            if bucket is None:
                bucket = _BucketTally(
                    canonical_unit=canonical_unit,
                    display_unit=self._table.canonical_symbol(requirement.unit),
                )
                buckets[family_key] = bucket
            bucket.add(amount, [recipe.id])

    def _merge_bucket(self, buckets: Dict[str, _BucketTally], bucket: AggregateBucket) -> None:
        tally = buckets.get(bucket.family)
        if tally is None:
            tally = _BucketTally(canonical_unit=bucket.total.unit, display_unit=bucket.display.unit)
            buckets[bucket.family] = tally
        tally.add(bucket.exact(), bucket.recipe_ids)

    def _resolve(self, ingredient_id: str, recipe_id: str) -> Ingredient:
        ingredient = self._ingredients.get(ingredient_id)
        if ingredient is None:
            raise DataIntegrityError(
                "Requirement references an unknown ingredient",
                recipe_id=recipe_id,
                ingredient_id=ingredient_id,
            )
        return ingredient

    def _build(self, tallies: Dict[str, _IngredientTally]) -> List[AggregatedRequirement]:
        return [
            AggregatedRequirement(
                ingredient_id=ingredient_id,
                name=tally.name,
                required=self._freeze_buckets(tally.required),
                optional=self._freeze_buckets(tally.optional),
                recipe_ids=tuple(tally.recipe_ids),
            )
            for ingredient_id, tally in tallies.items()
        ]

    def _freeze_buckets(self, buckets: Dict[str, _BucketTally]) -> tuple[AggregateBucket, ...]:
        frozen = []
        for family_key, tally in buckets.items():
            display_amount = tally.total * self._factor(tally.canonical_unit, tally.display_unit)
            frozen.append(
                AggregateBucket(
                    family=family_key,
                    total=Quantity(value=_to_decimal(tally.total), unit=tally.canonical_unit),
                    display=Quantity(value=_to_decimal(display_amount), unit=tally.display_unit),
                    recipe_ids=tuple(tally.recipe_ids),
                    exact_total=tally.total,
                )
            )
        return tuple(frozen)

    def _factor(self, source: str, target: str) -> Fraction:
        """Exact multiplier from ``source`` to ``target`` amounts; 1 for identical symbols."""

        if self._table.canonical_symbol(source) == self._table.canonical_symbol(target):
            return Fraction(1)
        conversion = self._table.conversion(source, target)
        if not conversion.ok:
            raise ValueError(f"Unit table cannot convert '{source}' to '{target}'")
        return Fraction(conversion.source_factor) / Fraction(conversion.target_factor)

    def _record(self, result: Sequence[AggregatedRequirement]) -> None:
        AGGREGATED_INGREDIENTS.inc(len(result))
        for requirement in result:
            if not requirement.needs_manual_reconciliation:
                continue
            MANUAL_RECONCILIATION_CASES.inc()
            logger.info(
                "Ingredient %s spans incompatible units %s; needs manual reconciliation",
                requirement.name,
                ", ".join(bucket.display.unit for bucket in requirement.required + requirement.optional),
                extra={"ingredient_id": requirement.ingredient_id, "operation": "aggregate"},
            )


def _to_decimal(value: Fraction) -> Decimal:
    return Decimal(value.numerator) / Decimal(value.denominator)


__all__ = ["RequirementAggregator"]
