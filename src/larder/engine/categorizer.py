"""Ingredient to store-section categorisation."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from larder.models.catalog import Ingredient
from larder.models.shopping import GroceryListItem

from .utils import normalize_name

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_CATEGORY = "Other"

DEFAULT_CATEGORY_ORDER: Tuple[str, ...] = (
    "Produce",
    "Meat & Seafood",
    "Dairy & Eggs",
    "Bakery",
    "Pantry",
    "Frozen",
    "Household",
)


class Categorizer:
    """Map ingredients to display categories from injected reference data.

    Lookup order: explicit override by ingredient id, the ingredient's own
    category, the first keyword contained in its name, then the fallback.
    """

    def __init__(
        self,
        overrides: Optional[Mapping[str, str]] = None,
        keywords: Optional[Mapping[str, str]] = None,
        fallback: str = DEFAULT_FALLBACK_CATEGORY,
        order: Sequence[str] = DEFAULT_CATEGORY_ORDER,
    ) -> None:
        self._overrides = MappingProxyType(dict(overrides or {}))
        self._keywords = MappingProxyType(
            {normalize_name(keyword): category for keyword, category in (keywords or {}).items()}
        )
        self._fallback = fallback
        self._order = tuple(order)

    @property
    def fallback(self) -> str:
        return self._fallback

    def categorize(self, ingredient: Optional[Ingredient]) -> str:
        if ingredient is None:
            return self._fallback
        if (override := self._overrides.get(ingredient.id)):
            return override
        if ingredient.category and ingredient.category.strip():
            return ingredient.category.strip()
        name = normalize_name(ingredient.name)
        for keyword, category in self._keywords.items():
            if keyword and keyword in name:
                return category
        return self._fallback

    def group(self, items: Iterable[GroceryListItem]) -> Dict[str, List[GroceryListItem]]:
        """Group items by category: configured order first, the rest alphabetically, fallback last."""

        grouped: Dict[str, List[GroceryListItem]] = {}
        for item in items:
            grouped.setdefault(item.category, []).append(item)
        return {category: grouped[category] for category in sorted(grouped, key=self._sort_key)}

    def _sort_key(self, category: str) -> Tuple[int, int, str]:
        if category == self._fallback:
            return (2, 0, category)
        if category in self._order:
            return (0, self._order.index(category), category)
        return (1, 0, category.lower())


def load_categorizer(path: Path, fallback: str = DEFAULT_FALLBACK_CATEGORY) -> Categorizer:
    """Build a categorizer from JSON with optional ``overrides``, ``keywords`` and ``order`` keys."""

    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    categorizer = Categorizer(
        overrides=payload.get("overrides") or {},
        keywords=payload.get("keywords") or {},
        fallback=payload.get("fallback") or fallback,
        order=payload.get("order") or DEFAULT_CATEGORY_ORDER,
    )
    logger.info("Loaded category map from %s", path)
    return categorizer


__all__ = [
    "Categorizer",
    "DEFAULT_CATEGORY_ORDER",
    "DEFAULT_FALLBACK_CATEGORY",
    "load_categorizer",
]
