"""Display formatting and export of engine results."""

from __future__ import annotations

import csv
import io
import json
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from larder.models.coverage import CoverageResult
from larder.models.plan import AggregatedRequirement
from larder.models.shopping import GroceryListItem

GROCERY_CSV_FIELDS = (
    "category",
    "label",
    "quantity",
    "unit",
    "checked",
    "origin",
    "in_plan",
    "needs_manual_reconciliation",
    "notes",
)


def format_quantity(value: Optional[Decimal], precision: int = 2) -> str:
    """Round for display only and drop trailing zeros."""

    if value is None:
        return ""
    exponent = Decimal(1).scaleb(-precision)
    rounded = Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)
    text = f"{rounded:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def grocery_rows(items: Iterable[GroceryListItem], precision: int = 2) -> List[Dict[str, str]]:
    rows = []
    for item in items:
        rows.append(
            {
                "category": item.category,
                "label": item.label,
                "quantity": format_quantity(item.quantity, precision),
                "unit": item.unit or "",
                "checked": "yes" if item.checked else "no",
                "origin": item.origin,
                "in_plan": "yes" if item.in_plan else "no",
                "needs_manual_reconciliation": "yes" if item.needs_manual_reconciliation else "no",
                "notes": item.notes or "",
            }
        )
    return rows


def render_grocery_csv(items: Sequence[GroceryListItem], precision: int = 2) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=GROCERY_CSV_FIELDS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(grocery_rows(items, precision))
    return buffer.getvalue()


def aggregate_rows(
    aggregate: Iterable[AggregatedRequirement], precision: int = 2
) -> List[Dict[str, object]]:
    rows: List[Dict[str, object]] = []
    for requirement in aggregate:
        rows.append(
            {
                "ingredient_id": requirement.ingredient_id,
                "name": requirement.name,
                "required": [
                    f"{format_quantity(bucket.display.value, precision)} {bucket.display.unit}"
                    for bucket in requirement.required
                ],
                "optional": [
                    f"{format_quantity(bucket.display.value, precision)} {bucket.display.unit}"
                    for bucket in requirement.optional
                ],
                "recipes": list(requirement.recipe_ids),
                "needs_manual_reconciliation": requirement.needs_manual_reconciliation,
            }
        )
    return rows


def coverage_rows(results: Iterable[CoverageResult], precision: int = 2) -> List[Dict[str, object]]:
    rows: List[Dict[str, object]] = []
    for result in results:
        rows.append(
            {
                "recipe_id": result.recipe_id,
                "title": result.title,
                "coverage": result.coverage,
                "ranking_score": round(result.ranking_score, precision),
                "expiration_boosted": result.expiration_boosted,
                "missing_required": [
                    f"{missing.name}: {format_quantity(missing.shortfall.value, precision)} "
                    f"{missing.shortfall.unit} short"
                    for missing in result.missing_required
                ],
                "missing_optional": [missing.name for missing in result.missing_optional],
                "diagnostics": list(result.diagnostics),
            }
        )
    return rows


def render_json(rows: object, pretty: bool = False) -> str:
    if pretty:
        return json.dumps(rows, indent=2, sort_keys=True)
    return json.dumps(rows)


__all__ = [
    "GROCERY_CSV_FIELDS",
    "aggregate_rows",
    "coverage_rows",
    "format_quantity",
    "grocery_rows",
    "render_grocery_csv",
    "render_json",
]
