"""Risk calculator: 10 weighted factors -> 0-100 risk score and level.

Factors are derived from the request wizard with fixed bucket ladders
(users, cost, hours, systems, dependencies); factors that cannot be read
from the wizard start at a moderate default and may be overridden after
CAB review. Testing coverage and rollback capability are protective, so
they are inverted (``6 - value``) before weighting.

Deterministic -- no I/O.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from src.scoring.coerce import count_items, parse_currency
from src.scoring.config import RiskWeights
from src.scoring.models import (
    FactorContribution,
    RawRequestAttributes,
    RiskFactors,
    RiskLevel,
    RiskScoreResult,
)
from src.scoring.normalizer import LadderStep, ThresholdLadder, round_half_up

logger = logging.getLogger(__name__)

# Factors where a higher raw value means a safer change.
INVERSE_FACTORS: frozenset[str] = frozenset({"testing_coverage", "rollback_capability"})

# Scale factor from the 1-5 factor domain to 0-100.
_SCALE = 20

_IMPACTED_USERS = ThresholdLadder.zero_then_below([10, 50, 200])
_ESTIMATED_COST = ThresholdLadder.zero_then_below([1000, 5000, 20000])
_EFFORT_HOURS = ThresholdLadder.zero_then_below([8, 40, 160])
_ITEM_COUNT = ThresholdLadder(
    steps=(
        LadderStep(limit=0, level=1, inclusive=True),
        LadderStep(limit=1, level=2, inclusive=True),
        LadderStep(limit=2, level=3, inclusive=True),
        LadderStep(limit=5, level=4),
    ),
    top=5,
)


def classify_risk(score: float) -> RiskLevel:
    """<25 Low, <50 Medium, <75 High, otherwise Critical."""
    if score < 25:
        return RiskLevel.LOW
    if score < 50:
        return RiskLevel.MEDIUM
    if score < 75:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


class RiskCalculator:
    """Derives risk factors from wizard data and scores them."""

    def __init__(self, weights: RiskWeights | None = None) -> None:
        self._weights = weights or RiskWeights()

    def derive_factors(
        self,
        raw: RawRequestAttributes | Mapping[str, Any] | None,
        overrides: Mapping[str, int] | None = None,
    ) -> RiskFactors:
        """Extract the 10 risk factors from *raw*.

        *overrides* replaces individual factors (by name or camelCase alias)
        after derivation, e.g. a CAB-assessed testing coverage.
        """
        attrs = RawRequestAttributes.from_payload(raw)
        reasons = attrs.change_reasons

        business_critical = 3
        if reasons.revenue_improvement or reasons.customer_impact:
            business_critical = 4

        factors = RiskFactors(
            impact_scope=_IMPACTED_USERS.level_for(attrs.impacted_users or 0),
            financial_impact=_ESTIMATED_COST.level_for(
                parse_currency(attrs.estimated_cost)
            ),
            complexity=_EFFORT_HOURS.level_for(attrs.estimated_effort_hours or 0),
            change_size=_ITEM_COUNT.level_for(count_items(attrs.systems_affected)),
            dependency_count=_ITEM_COUNT.level_for(count_items(attrs.dependencies)),
            business_critical=business_critical,
            testing_coverage=3,
            rollback_capability=3,
            time_window=3,
            historical_failures=1,
        )
        if overrides:
            merged = factors.model_dump()
            merged.update(RiskFactors.canonical_keys(overrides))
            factors = RiskFactors.model_validate(merged)
        return factors

    def score(
        self, factors: RiskFactors, weights: RiskWeights | None = None
    ) -> RiskScoreResult:
        weights = weights or self._weights

        total_score = 0.0
        total_weight = weights.total()
        breakdown: dict[str, FactorContribution] = {}
        for name, raw_value in factors.model_dump().items():
            value = 6 - raw_value if name in INVERSE_FACTORS else raw_value
            weight = weights.weight_for(name)
            weighted = value * weight
            breakdown[name] = FactorContribution(
                raw_value=raw_value,
                score=value,
                weight=weight,
                weighted_score=weighted,
            )
            total_score += weighted

        score = int(round_half_up(total_score / total_weight * _SCALE))
        level = classify_risk(score)
        logger.debug("Risk score %d (%s)", score, level)
        return RiskScoreResult(
            score=score, level=level, factors=factors, breakdown=breakdown
        )

    def auto_calculate(
        self, raw: RawRequestAttributes | Mapping[str, Any] | None
    ) -> RiskScoreResult:
        return self.score(self.derive_factors(raw))
