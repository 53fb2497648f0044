"""Pantry coverage scoring and recipe ranking."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from larder.config import Settings
from larder.metrics import COVERAGE_COMPUTATIONS
from larder.models.catalog import Quantity
from larder.models.coverage import CoverageResult, MissingIngredient
from larder.models.pantry import PantryItem, PantrySnapshot
from larder.models.plan import AggregateBucket, AggregatedRequirement

from .normalizer import normalize
from .units import DEFAULT_UNIT_TABLE, UnitTable
from .utils import build_pantry_index

logger = logging.getLogger(__name__)

_HUNDRED = Decimal(100)


@dataclass(frozen=True)
class ScoringPolicy:
    """Tunable knobs for the ranking score."""

    expiry_window_days: int = 3
    expiry_boost: float = 10.0
    missing_penalty_threshold: int = 3
    missing_penalty: float = 15.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScoringPolicy":
        return cls(
            expiry_window_days=settings.expiry_window_days,
            expiry_boost=settings.expiry_boost,
            missing_penalty_threshold=settings.missing_penalty_threshold,
            missing_penalty=settings.missing_penalty,
        )


@dataclass(frozen=True)
class RuleResult:
    """Outcome of applying an individual ranking rule to a recipe."""

    name: str
    applied: bool
    score_adjustment: float = 0.0
    details: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RankingSnapshot:
    """Scored facts about one recipe shared across rule evaluations."""

    recipe_id: str
    coverage: int
    missing_required: Tuple[MissingIngredient, ...]
    consumed: Tuple[PantryItem, ...]
    current_date: date
    policy: ScoringPolicy


class RankingRule:
    """Base class contract for ranking score adjustments."""

    name: str

    def evaluate(self, snapshot: RankingSnapshot) -> RuleResult:
        raise NotImplementedError


class ExpiryBoostRule(RankingRule):
    name = "expiry_boost"

    def evaluate(self, snapshot: RankingSnapshot) -> RuleResult:
        window = snapshot.policy.expiry_window_days
        expiring: List[str] = []
        for item in snapshot.consumed:
            if item.expires_on is None:
                continue
            days_remaining = (item.expires_on - snapshot.current_date).days
            if 0 <= days_remaining <= window:
                expiring.append(f"{item.ingredient_id} expiring in {days_remaining}d")

        if not expiring:
            return RuleResult(self.name, False)
        return RuleResult(
            self.name,
            True,
            score_adjustment=snapshot.policy.expiry_boost,
            details=tuple(expiring),
        )


class MissingRequiredPenaltyRule(RankingRule):
    name = "missing_required_penalty"

    def evaluate(self, snapshot: RankingSnapshot) -> RuleResult:
        missing = len(snapshot.missing_required)
        threshold = snapshot.policy.missing_penalty_threshold
        if missing <= threshold:
            return RuleResult(self.name, False)
        return RuleResult(
            self.name,
            True,
            score_adjustment=-snapshot.policy.missing_penalty,
            details=(f"missing {missing} required ingredients (limit {threshold})",),
        )


def default_rules() -> Tuple[RankingRule, ...]:
    return (ExpiryBoostRule(), MissingRequiredPenaltyRule())


class CoverageScorer:
    """Score how much of a recipe's requirement the pantry can supply."""

    def __init__(
        self,
        table: UnitTable = DEFAULT_UNIT_TABLE,
        policy: Optional[ScoringPolicy] = None,
        rules: Optional[Sequence[RankingRule]] = None,
    ) -> None:
        self._table = table
        self._policy = policy or ScoringPolicy()
        self._rules = tuple(rules) if rules is not None else default_rules()

    def score(
        self,
        aggregate: Sequence[AggregatedRequirement],
        pantry: PantrySnapshot,
        now: Union[date, datetime],
        *,
        recipe_id: str,
        title: Optional[str] = None,
    ) -> CoverageResult:
        """Return coverage, shortfalls and ranking score for one recipe's aggregate.

        Inputs must already be identity-resolved; the aggregator raises for
        unknown ingredients before a score is ever computed.
        """

        pantry_index = build_pantry_index(pantry)
        total_required = Decimal(0)
        total_have = Decimal(0)
        missing_required: List[MissingIngredient] = []
        missing_optional: List[MissingIngredient] = []
        consumed: Dict[str, PantryItem] = {}

        for requirement in aggregate:
            item = pantry_index.get(requirement.ingredient_id)
            for bucket in requirement.required:
                available, mismatch = self._available(item, bucket)
                needed = bucket.total.value
                total_required += needed
                total_have += min(available, needed)
                if available < needed:
                    missing_required.append(
                        self._missing(requirement, bucket, available, mismatch)
                    )
                if item is not None and available > 0 and needed > 0:
                    consumed.setdefault(item.ingredient_id, item)

            for bucket in requirement.optional:
                available, mismatch = self._available(item, bucket)
                if available < bucket.total.value:
                    missing_optional.append(
                        self._missing(requirement, bucket, available, mismatch)
                    )
                if item is not None and available > 0 and bucket.total.value > 0:
                    consumed.setdefault(item.ingredient_id, item)

        coverage = _coverage_percent(total_have, total_required)
        snapshot = RankingSnapshot(
            recipe_id=recipe_id,
            coverage=coverage,
            missing_required=tuple(missing_required),
            consumed=tuple(consumed.values()),
            current_date=_as_date(now),
            policy=self._policy,
        )
        rule_results = [rule.evaluate(snapshot) for rule in self._rules]
        ranking_score = float(coverage) + sum(result.score_adjustment for result in rule_results)
        diagnostics = tuple(
            detail for result in rule_results if result.applied for detail in result.details
        )
        expiration_boosted = any(
            result.applied for result in rule_results if result.name == ExpiryBoostRule.name
        )

        COVERAGE_COMPUTATIONS.labels(outcome=_outcome(coverage)).inc()
        logger.debug(
            "Coverage recipe=%s coverage=%d ranking=%.2f missing_required=%d",
            recipe_id,
            coverage,
            ranking_score,
            len(missing_required),
            extra={"recipe_id": recipe_id, "operation": "coverage"},
        )

        return CoverageResult(
            recipe_id=recipe_id,
            title=title,
            coverage=coverage,
            missing_required=tuple(missing_required),
            missing_optional=tuple(missing_optional),
            expiration_boosted=expiration_boosted,
            ranking_score=ranking_score,
            diagnostics=diagnostics,
        )

    @staticmethod
    def rank(results: Iterable[CoverageResult]) -> List[CoverageResult]:
        """Order by ranking score, then raw coverage, then fewer gaps, then recipe id."""

        return sorted(
            results,
            key=lambda result: (
                -result.ranking_score,
                -result.coverage,
                len(result.missing_required),
                result.recipe_id,
            ),
        )

    def _available(
        self, item: Optional[PantryItem], bucket: AggregateBucket
    ) -> Tuple[Decimal, bool]:
        """Pantry amount in the bucket's canonical unit and whether units clashed."""

        if item is None:
            return Decimal(0), False
        normalized = normalize(item.as_quantity(), bucket.total.unit, self._table)
        if not isinstance(normalized, Quantity):
            return Decimal(0), True
        return normalized.value, False

    def _missing(
        self,
        requirement: AggregatedRequirement,
        bucket: AggregateBucket,
        available: Decimal,
        mismatch: bool,
    ) -> MissingIngredient:
        display_unit = bucket.display.unit
        available_display = self._to_display(available, bucket)
        shortfall = max(bucket.display.value - available_display, Decimal(0))
        return MissingIngredient(
            ingredient_id=requirement.ingredient_id,
            name=requirement.name,
            required=bucket.display,
            available=Quantity(value=available_display, unit=display_unit),
            shortfall=Quantity(value=shortfall, unit=display_unit),
            unit_mismatch=mismatch,
        )

    def _to_display(self, amount: Decimal, bucket: AggregateBucket) -> Decimal:
        converted = normalize(
            Quantity(value=amount, unit=bucket.total.unit), bucket.display.unit, self._table
        )
        if isinstance(converted, Quantity):
            return converted.value
        return amount


def _coverage_percent(have: Decimal, required: Decimal) -> int:
    if required <= 0:
        return 100
    ratio = (have * _HUNDRED / required).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return max(0, min(100, int(ratio)))


def _outcome(coverage: int) -> str:
    if coverage >= 100:
        return "full"
    if coverage <= 0:
        return "none"
    return "partial"


def _as_date(now: Union[date, datetime]) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


__all__ = [
    "CoverageScorer",
    "ExpiryBoostRule",
    "MissingRequiredPenaltyRule",
    "RankingRule",
    "RankingSnapshot",
    "RuleResult",
    "ScoringPolicy",
    "default_rules",
]
