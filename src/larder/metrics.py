"""Prometheus metrics definitions for Larder."""

from __future__ import annotations

from prometheus_client import Counter

COVERAGE_COMPUTATIONS = Counter(
    "larder_coverage_computations_total",
    "Number of recipe coverage computations by outcome",
    ["outcome"],
)

AGGREGATED_INGREDIENTS = Counter(
    "larder_aggregated_ingredients_total",
    "Number of ingredient rows produced by meal plan aggregation",
)

MANUAL_RECONCILIATION_CASES = Counter(
    "larder_manual_reconciliation_total",
    "Number of ingredients whose quantities span incompatible unit families",
)

GROCERY_RECONCILE_ITEMS = Counter(
    "larder_grocery_reconcile_items_total",
    "Grocery list items emitted by regeneration, by action",
    ["action"],
)

__all__ = [
    "COVERAGE_COMPUTATIONS",
    "AGGREGATED_INGREDIENTS",
    "MANUAL_RECONCILIATION_CASES",
    "GROCERY_RECONCILE_ITEMS",
]
