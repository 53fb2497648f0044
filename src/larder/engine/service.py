"""Engine entry points consumed by the application layer."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from larder.config import Settings, get_settings
from larder.models.catalog import IngredientCatalog, Recipe
from larder.models.coverage import CoverageResult
from larder.models.pantry import PantrySnapshot
from larder.models.plan import AggregatedRequirement, MealPlanAssignment
from larder.models.shopping import GroceryList

from .aggregator import RequirementAggregator
from .categorizer import Categorizer, load_categorizer
from .coverage import CoverageScorer, RankingRule, ScoringPolicy
from .reconciler import GroceryListReconciler
from .units import DEFAULT_UNIT_TABLE, UnitTable, load_unit_table

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    """Pure operations over recipes, a pantry snapshot and meal plan assignments.

    All reference data is injected at construction and never mutated, so one
    instance can serve concurrent requests for different users.
    """

    def __init__(
        self,
        catalog: IngredientCatalog,
        *,
        table: UnitTable = DEFAULT_UNIT_TABLE,
        categorizer: Optional[Categorizer] = None,
        policy: Optional[ScoringPolicy] = None,
        rules: Optional[Sequence[RankingRule]] = None,
    ) -> None:
        self.catalog = catalog
        self.table = table
        self.categorizer = categorizer or Categorizer()
        self._aggregator = RequirementAggregator(catalog, table)
        self._scorer = CoverageScorer(table, policy=policy, rules=rules)
        self._reconciler = GroceryListReconciler(catalog, table, self.categorizer)

    def compute_coverage(
        self,
        recipe: Recipe,
        pantry: PantrySnapshot,
        now: Union[date, datetime],
    ) -> CoverageResult:
        """Score one recipe against the pantry at its base servings."""

        aggregate = self._aggregator.aggregate_recipe(recipe)
        return self._scorer.score(
            aggregate,
            pantry,
            now,
            recipe_id=recipe.id,
            title=recipe.title,
        )

    def rank_recipes(
        self,
        recipes: Iterable[Recipe],
        pantry: PantrySnapshot,
        now: Union[date, datetime],
    ) -> List[CoverageResult]:
        """Score every recipe and return them best first."""

        return self._scorer.rank(
            self.compute_coverage(recipe, pantry, now) for recipe in recipes
        )

    def aggregate_meal_plan(
        self,
        assignments: Sequence[MealPlanAssignment],
        recipes: Union[Mapping[str, Recipe], Iterable[Recipe]],
    ) -> List[AggregatedRequirement]:
        return self._aggregator.aggregate(assignments, recipes)

    def merge_aggregates(
        self,
        first: Sequence[AggregatedRequirement],
        second: Sequence[AggregatedRequirement],
    ) -> List[AggregatedRequirement]:
        return self._aggregator.merge(first, second)

    def reconcile_grocery_list(
        self,
        previous: GroceryList,
        aggregate: Sequence[AggregatedRequirement],
        pantry: PantrySnapshot,
        *,
        reset: bool = False,
        include_optional: bool = False,
    ) -> GroceryList:
        return self._reconciler.reconcile(
            previous,
            aggregate,
            pantry,
            reset=reset,
            include_optional=include_optional,
        )


def build_engine(
    catalog: IngredientCatalog,
    settings: Optional[Settings] = None,
) -> ReconciliationEngine:
    """Create an engine wired from application settings."""

    settings = settings or get_settings()
    table = DEFAULT_UNIT_TABLE
    if settings.unit_table_path is not None:
        table = load_unit_table(settings.unit_table_path)
    if settings.category_map_path is not None:
        categorizer = load_categorizer(settings.category_map_path, settings.fallback_category)
    else:
        categorizer = Categorizer(fallback=settings.fallback_category)
    return ReconciliationEngine(
        catalog,
        table=table,
        categorizer=categorizer,
        policy=ScoringPolicy.from_settings(settings),
    )


__all__ = ["ReconciliationEngine", "build_engine"]
