"""Benefit calculator: applicable benefit categories -> 0-100 benefit score.

Each selected category produces a 0-10 component score (revenue and cost
savings add a 0-10 time component on top of the value component). The
final score is the weighted average over the categories that apply,
scaled by 10. Categories that were never selected are left out of both
numerator and denominator; they are not counted as zero.

Strategic alignment is always present, so the denominator is never empty.

When an admin ``BenefitScoringConfig`` exists for a category its 0-100
value/time formula replaces the built-in divisors, rescaled to 0-10.

Deterministic -- no I/O.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from src.scoring.coerce import clamp
from src.scoring.config import BenefitScoringConfig, BenefitWeights
from src.scoring.models import (
    BenefitCategory,
    BenefitCategoryDetail,
    BenefitFactors,
    BenefitInput,
    BenefitScoreResult,
    RawRequestAttributes,
)
from src.scoring.normalizer import round_half_up

logger = logging.getLogger(__name__)

# Built-in divisors: raw amount worth one point on the 0-10 scale.
REVENUE_PER_POINT = 10000.0
SAVINGS_PER_POINT = 8000.0
EFFICIENCY_PERCENT_PER_POINT = 10.0
USERS_PER_POINT = 10.0

# Time component for cost savings when no config drives it.
COST_SAVINGS_TIME_SCORE = 5.0

STRATEGIC_SCORE = 8.0
STANDARD_SCORE = 5.0
DEFAULT_SATISFACTION_RATING = 5.0

_MAX_COMPONENT = 10.0
_MAX_SCORE = 100.0


class BenefitCalculator:
    """Extracts applicable benefit categories and scores them."""

    def __init__(
        self,
        weights: BenefitWeights | None = None,
        configs: Mapping[str, BenefitScoringConfig] | None = None,
        default_timeline_months: float = 12.0,
    ) -> None:
        self._weights = weights or BenefitWeights()
        self._configs = dict(configs or {})
        self._default_timeline = default_timeline_months

    # -- Extraction ----------------------------------------------------------

    def derive_factors(
        self, raw: RawRequestAttributes | Mapping[str, Any] | None
    ) -> BenefitFactors:
        """Pick the categories whose flag is set and whose details are present."""
        attrs = RawRequestAttributes.from_payload(raw)
        reasons = attrs.change_reasons
        factors: dict[str, Any] = {}

        revenue = attrs.revenue_details
        if reasons.revenue_improvement and revenue is not None:
            factors["revenue_improvement"] = BenefitInput(
                raw_value=revenue.expected_revenue or 0.0,
                raw_timeline=(
                    revenue.revenue_timeline
                    if revenue.revenue_timeline is not None
                    else self._default_timeline
                ),
                explanation=revenue.revenue_description or "",
            )

        savings = attrs.cost_reduction_details
        if reasons.cost_reduction and savings is not None:
            factors["cost_savings"] = BenefitInput(
                raw_value=savings.expected_savings or 0.0,
                raw_timeline=savings.savings_timeline,
                explanation=savings.savings_description or "",
            )

        customer = attrs.customer_impact_details
        if reasons.customer_impact and customer is not None:
            rating = customer.satisfaction_rating
            factors["customer_impact"] = BenefitInput(
                raw_value=DEFAULT_SATISFACTION_RATING if rating is None else rating,
                explanation=customer.impact_description or "",
            )

        process = attrs.process_improvement_details
        if reasons.process_improvement and process is not None:
            factors["process_improvement"] = BenefitInput(
                raw_value=process.expected_efficiency or 0.0,
                raw_timeline=process.improvement_timeline,
                explanation=process.process_description or "",
            )

        qol = attrs.internal_qol_details
        if reasons.internal_qol and qol is not None:
            factors["internal_qol"] = BenefitInput(
                raw_value=qol.users_affected or 0.0,
                raw_timeline=qol.qol_timeline,
                explanation=qol.expected_improvements or "",
            )

        strategic = reasons.revenue_improvement or reasons.cost_reduction
        factors["strategic_alignment"] = STRATEGIC_SCORE if strategic else STANDARD_SCORE
        return BenefitFactors(**factors)

    # -- Scoring -------------------------------------------------------------

    def _config_for(
        self,
        category: BenefitCategory,
        configs: Mapping[str, BenefitScoringConfig],
    ) -> BenefitScoringConfig | None:
        config = configs.get(category.value)
        if config is None or not config.is_active:
            return None
        return config

    def _value_and_time(
        self,
        category: BenefitCategory,
        item: BenefitInput,
        configs: Mapping[str, BenefitScoringConfig],
    ) -> tuple[float, float | None]:
        """Return the 0-10 value component and optional 0-10 time component."""
        config = self._config_for(category, configs)

        if category == BenefitCategory.REVENUE_IMPROVEMENT:
            timeline = (
                item.raw_timeline
                if item.raw_timeline is not None
                else self._default_timeline
            )
            if config is not None:
                scored = config.calculate_score(item.raw_value, timeline)
                return scored.value_score / 10, scored.time_score / 10
            value = clamp(item.raw_value / REVENUE_PER_POINT, 0.0, _MAX_COMPONENT)
            return value, clamp(_MAX_COMPONENT - timeline / 6, 1.0, _MAX_COMPONENT)

        if category == BenefitCategory.COST_SAVINGS:
            if config is not None:
                timeline = (
                    item.raw_timeline
                    if item.raw_timeline is not None
                    else self._default_timeline
                )
                scored = config.calculate_score(item.raw_value, timeline)
                return scored.value_score / 10, scored.time_score / 10
            value = clamp(item.raw_value / SAVINGS_PER_POINT, 0.0, _MAX_COMPONENT)
            return value, COST_SAVINGS_TIME_SCORE

        if category == BenefitCategory.CUSTOMER_IMPACT:
            return clamp(item.raw_value, 1.0, _MAX_COMPONENT), None

        if config is not None:
            return config.value_score(item.raw_value) / 10, None

        per_point = (
            EFFICIENCY_PERCENT_PER_POINT
            if category == BenefitCategory.PROCESS_IMPROVEMENT
            else USERS_PER_POINT
        )
        return clamp(item.raw_value / per_point, 0.0, _MAX_COMPONENT), None

    def score(
        self,
        factors: BenefitFactors,
        weights: BenefitWeights | None = None,
        configs: Mapping[str, BenefitScoringConfig] | None = None,
    ) -> BenefitScoreResult:
        weights = weights or self._weights
        configs = self._configs if configs is None else configs

        details: dict[BenefitCategory, BenefitCategoryDetail] = {}
        for category in BenefitCategory:
            if category == BenefitCategory.STRATEGIC_ALIGNMENT:
                continue
            item: BenefitInput | None = getattr(factors, _field_name(category))
            if item is None:
                continue
            value_score, time_score = self._value_and_time(category, item, configs)
            combined = value_score + (time_score or 0.0)
            weight = weights.weight_for(_field_name(category))
            details[category] = BenefitCategoryDetail(
                category=category,
                raw_value=item.raw_value,
                raw_timeline=item.raw_timeline,
                value_score=value_score,
                time_score=time_score,
                combined_score=combined,
                weight=weight,
                weighted_score=combined * weight,
                explanation=item.explanation,
            )

        strategic_weight = weights.strategic_alignment
        details[BenefitCategory.STRATEGIC_ALIGNMENT] = BenefitCategoryDetail(
            category=BenefitCategory.STRATEGIC_ALIGNMENT,
            raw_value=factors.strategic_alignment,
            value_score=factors.strategic_alignment,
            combined_score=factors.strategic_alignment,
            weight=strategic_weight,
            weighted_score=factors.strategic_alignment * strategic_weight,
            explanation=(
                "Aligns with revenue/cost objectives"
                if factors.strategic_alignment >= STRATEGIC_SCORE
                else "Standard alignment"
            ),
        )

        total_score = sum(d.weighted_score for d in details.values())
        total_weight = sum(d.weight for d in details.values())
        normalized = clamp(total_score / total_weight * 10, 0.0, _MAX_SCORE)
        score = round_half_up(normalized, 1)

        logger.debug(
            "Benefit score %.1f over %d categories", score, len(details)
        )
        return BenefitScoreResult(
            score=score,
            total_weight=total_weight,
            factors=factors,
            details=details,
        )

    def auto_calculate(
        self, raw: RawRequestAttributes | Mapping[str, Any] | None
    ) -> BenefitScoreResult:
        return self.score(self.derive_factors(raw))


_FIELD_NAMES: dict[BenefitCategory, str] = {
    BenefitCategory.REVENUE_IMPROVEMENT: "revenue_improvement",
    BenefitCategory.COST_SAVINGS: "cost_savings",
    BenefitCategory.CUSTOMER_IMPACT: "customer_impact",
    BenefitCategory.PROCESS_IMPROVEMENT: "process_improvement",
    BenefitCategory.INTERNAL_QOL: "internal_qol",
    BenefitCategory.STRATEGIC_ALIGNMENT: "strategic_alignment",
}


def _field_name(category: BenefitCategory) -> str:
    return _FIELD_NAMES[category]
