"""Grocery list regeneration that preserves user edits."""

from __future__ import annotations

import logging
from collections import Counter as TallyCounter
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from larder.metrics import GROCERY_RECONCILE_ITEMS
from larder.models.catalog import IngredientCatalog, Quantity
from larder.models.pantry import PantryItem, PantrySnapshot
from larder.models.plan import AggregatedRequirement
from larder.models.shopping import GroceryList, GroceryListItem

from .categorizer import Categorizer
from .normalizer import normalize
from .units import DEFAULT_UNIT_TABLE, UnitTable
from .utils import build_catalog_index, build_pantry_index

logger = logging.getLogger(__name__)

ItemKey = Tuple[Optional[str], str]


@dataclass(frozen=True)
class _Need:
    key: ItemKey
    ingredient_id: str
    label: str
    quantity: Decimal
    unit: str
    category: str
    needs_manual_reconciliation: bool
    notes: Optional[str] = None


class GroceryListReconciler:
    """Merge a fresh aggregate into the previous grocery list.

    Contract:

    * manual items are carried forward untouched, in their previous order;
    * a pantry item held in a different unit family is not subtracted; the
      list item is flagged for manual reconciliation with a note saying so;
    * a generated item still needed keeps its ``checked`` flag while its
      quantity, unit and category follow the new aggregate;
    * a generated item no longer needed is dropped unless checked, in which
      case it stays as an already-bought entry with ``in_plan=False``;
    * ``reset=True`` clears checked flags on generated items and drops
      stale ones. Manual items are still left alone.

    Running it again with the same inputs returns an identical list.
    """

    def __init__(
        self,
        catalog: IngredientCatalog,
        table: UnitTable = DEFAULT_UNIT_TABLE,
        categorizer: Optional[Categorizer] = None,
    ) -> None:
        self._ingredients = build_catalog_index(catalog)
        self._table = table
        self._categorizer = categorizer or Categorizer()

    def reconcile(
        self,
        previous: GroceryList,
        aggregate: Sequence[AggregatedRequirement],
        pantry: PantrySnapshot,
        *,
        reset: bool = False,
        include_optional: bool = False,
    ) -> GroceryList:
        needs = self._pantry_adjusted_needs(aggregate, pantry, include_optional)

        manual = [item for item in previous.items if item.origin == "manual"]
        previous_generated = [item for item in previous.items if item.origin == "generated"]
        first_by_key: Dict[ItemKey, int] = {}
        for position, item in enumerate(previous_generated):
            first_by_key.setdefault(self._item_key(item), position)

        actions: TallyCounter[str] = TallyCounter()
        matched: set[int] = set()
        generated: List[GroceryListItem] = []
        for need in needs:
            position = first_by_key.get(need.key)
            if position is None:
                generated.append(
                    GroceryListItem(
                        ingredient_id=need.ingredient_id,
                        label=need.label,
                        quantity=need.quantity,
                        unit=need.unit,
                        category=need.category,
                        checked=False,
                        origin="generated",
                        needs_manual_reconciliation=need.needs_manual_reconciliation,
                        notes=need.notes,
                    )
                )
                actions["created"] += 1
                continue
            matched.add(position)
            existing = previous_generated[position]
            generated.append(
                existing.model_copy(
                    update={
                        "label": need.label,
                        "quantity": need.quantity,
                        "unit": need.unit,
                        "category": need.category,
                        "checked": False if reset else existing.checked,
                        "in_plan": True,
                        "needs_manual_reconciliation": need.needs_manual_reconciliation,
                        "notes": need.notes,
                    }
                )
            )
            actions["updated"] += 1

        retained: List[GroceryListItem] = []
        for position, item in enumerate(previous_generated):
            if position in matched:
                continue
            if item.checked and not reset:
                retained.append(item.model_copy(update={"in_plan": False}))
                actions["retained"] += 1
            else:
                actions["removed"] += 1
        actions["manual"] += len(manual)

        items = tuple(generated + retained + manual)
        version = previous.version if items == previous.items else previous.version + 1

        for action, count in actions.items():
            if count:
                GROCERY_RECONCILE_ITEMS.labels(action=action).inc(count)
        logger.info(
            "Reconciled grocery list: %s",
            ", ".join(f"{action}={count}" for action, count in sorted(actions.items())),
            extra={"operation": "reconcile"},
        )
        return GroceryList(items=items, version=version)

    def _pantry_adjusted_needs(
        self,
        aggregate: Sequence[AggregatedRequirement],
        pantry: PantrySnapshot,
        include_optional: bool,
    ) -> List[_Need]:
        pantry_index = build_pantry_index(pantry)
        needs: List[_Need] = []
        for requirement in aggregate:
            buckets = requirement.required + (requirement.optional if include_optional else ())
            totals: Dict[str, Tuple[Decimal, str, str]] = {}
            for bucket in buckets:
                if bucket.family in totals:
                    amount, canonical_unit, display_unit = totals[bucket.family]
                    totals[bucket.family] = (
                        amount + bucket.total.value,
                        canonical_unit,
                        display_unit,
                    )
                else:
                    totals[bucket.family] = (bucket.total.value, bucket.total.unit, bucket.display.unit)

            manual_case = requirement.needs_manual_reconciliation
            item = pantry_index.get(requirement.ingredient_id)
            ingredient = self._ingredients.get(requirement.ingredient_id)
            category = self._categorizer.categorize(ingredient)
            for family, (total, canonical_unit, display_unit) in totals.items():
                available, mismatch = self._available(item, canonical_unit)
                needed = total - available
                if needed <= 0:
                    logger.debug(
                        "Pantry covers %s (%s); dropping from list",
                        requirement.name,
                        family,
                        extra={"ingredient_id": requirement.ingredient_id},
                    )
                    continue
                needs.append(
                    _Need(
                        key=(requirement.ingredient_id, family),
                        ingredient_id=requirement.ingredient_id,
                        label=requirement.name,
                        quantity=self._to_display(needed, canonical_unit, display_unit),
                        unit=display_unit,
                        category=category,
                        needs_manual_reconciliation=manual_case or mismatch,
                        notes=_mismatch_note(item) if mismatch else None,
                    )
                )
        return needs

    def _available(
        self, item: Optional[PantryItem], canonical_unit: str
    ) -> Tuple[Decimal, bool]:
        """Pantry amount in ``canonical_unit`` and whether the pantry unit clashed."""

        if item is None:
            return Decimal(0), False
        normalized = normalize(item.as_quantity(), canonical_unit, self._table)
        if not isinstance(normalized, Quantity):
            return Decimal(0), True
        return normalized.value, False

    def _to_display(self, amount: Decimal, canonical_unit: str, display_unit: str) -> Decimal:
        converted = normalize(Quantity(value=amount, unit=canonical_unit), display_unit, self._table)
        if isinstance(converted, Quantity):
            return converted.value
        return amount

    def _item_key(self, item: GroceryListItem) -> ItemKey:
        return (item.ingredient_id, self._table.family_key(item.unit or ""))


def _mismatch_note(item: PantryItem) -> str:
    return f"Pantry has {item.quantity.normalize():f} {item.unit}; not subtracted, check manually"


__all__ = ["GroceryListReconciler"]
