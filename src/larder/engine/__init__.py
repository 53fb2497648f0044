"""Ingredient reconciliation engine: coverage scoring, aggregation and list regeneration."""

from larder.engine.aggregator import RequirementAggregator
from larder.engine.categorizer import Categorizer, load_categorizer
from larder.engine.coverage import (
    CoverageScorer,
    ExpiryBoostRule,
    MissingRequiredPenaltyRule,
    RankingRule,
    ScoringPolicy,
)
from larder.engine.errors import DataIntegrityError, EmptyInputWarning
from larder.engine.normalizer import Incompatible, normalize, to_canonical
from larder.engine.reconciler import GroceryListReconciler
from larder.engine.service import ReconciliationEngine, build_engine
from larder.engine.units import DEFAULT_UNIT_TABLE, Conversion, UnitTable, load_unit_table

__all__ = [
    "RequirementAggregator",
    "Categorizer",
    "load_categorizer",
    "CoverageScorer",
    "ExpiryBoostRule",
    "MissingRequiredPenaltyRule",
    "RankingRule",
    "ScoringPolicy",
    "DataIntegrityError",
    "EmptyInputWarning",
    "Incompatible",
    "normalize",
    "to_canonical",
    "GroceryListReconciler",
    "ReconciliationEngine",
    "build_engine",
    "DEFAULT_UNIT_TABLE",
    "Conversion",
    "UnitTable",
    "load_unit_table",
]
