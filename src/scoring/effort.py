"""Effort calculator: 7 weighted factors -> 0-100 effort score and level.

Hours, cost, team size and systems count are bucketed with the stepped
normalizer; complexity, testing and documentation are 1-5 ordinals mapped
linearly onto 0-100. The weighted average is already on the 0-100 scale.

Deterministic -- no I/O.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from src.scoring.coerce import clamp, count_items, parse_currency, to_int
from src.scoring.config import EffortThresholds, EffortWeights
from src.scoring.models import (
    EffortFactors,
    EffortLevel,
    EffortScoreResult,
    FactorContribution,
    RawRequestAttributes,
)
from src.scoring.normalizer import ThresholdLadder, normalize, round_half_up

logger = logging.getLogger(__name__)

# Complexity inferred from hours when not given explicitly.
_COMPLEXITY_FROM_HOURS = ThresholdLadder.below([8, 40, 160, 400])

_ORDINAL_FACTORS: frozenset[str] = frozenset(
    {"complexity", "testing_required", "documentation_required"}
)


def classify_effort(score: float) -> EffortLevel:
    """<25 Low, <50 Medium, <75 High, otherwise Very High."""
    if score < 25:
        return EffortLevel.LOW
    if score < 50:
        return EffortLevel.MEDIUM
    if score < 75:
        return EffortLevel.HIGH
    return EffortLevel.VERY_HIGH


def ordinal_to_percent(value: int) -> float:
    """Map a 1-5 ordinal onto 0-100 (1 -> 0, 5 -> 100)."""
    return (value - 1) * 25.0


def _ordinal(value: float | None, default: int) -> int:
    if value is None or value <= 0:
        return default
    return int(round_half_up(clamp(value, 1, 5)))


class EffortCalculator:
    """Derives effort factors from wizard/CAB data and scores them."""

    def __init__(
        self,
        weights: EffortWeights | None = None,
        thresholds: EffortThresholds | None = None,
    ) -> None:
        self._weights = weights or EffortWeights()
        self._thresholds = thresholds or EffortThresholds()

    def derive_factors(
        self, raw: RawRequestAttributes | Mapping[str, Any] | None
    ) -> EffortFactors:
        attrs = RawRequestAttributes.from_payload(raw)

        hours = attrs.estimated_effort_hours or 0.0
        cost = parse_currency(attrs.estimated_cost)

        team_size = attrs.team_size or attrs.resource_requirement
        if team_size is None or team_size <= 0:
            team_size = 1.0

        if attrs.complexity is not None and attrs.complexity > 0:
            complexity = _ordinal(attrs.complexity, 1)
        else:
            complexity = _COMPLEXITY_FROM_HOURS.level_for(hours)

        if attrs.systems_affected is not None:
            systems = count_items(attrs.systems_affected)
        elif attrs.systems_affected_count is not None:
            systems = max(0, to_int(attrs.systems_affected_count) or 0)
        else:
            systems = 0

        return EffortFactors(
            hours_estimated=hours,
            cost_estimated=cost,
            team_size=team_size,
            complexity=complexity,
            systems_affected=systems,
            testing_required=_ordinal(attrs.testing_required, 3),
            documentation_required=_ordinal(attrs.documentation_required, 3),
        )

    def score(
        self,
        factors: EffortFactors,
        weights: EffortWeights | None = None,
        thresholds: EffortThresholds | None = None,
    ) -> EffortScoreResult:
        weights = weights or self._weights
        thresholds = thresholds or self._thresholds

        total_score = 0.0
        total_weight = weights.total()
        breakdown: dict[str, FactorContribution] = {}
        for name, raw_value in factors.model_dump().items():
            if name in _ORDINAL_FACTORS:
                factor_score = ordinal_to_percent(raw_value)
            else:
                factor_score = float(normalize(raw_value, getattr(thresholds, name)))
            weight = weights.weight_for(name)
            weighted = factor_score * weight
            breakdown[name] = FactorContribution(
                raw_value=raw_value,
                score=factor_score,
                weight=weight,
                weighted_score=weighted,
            )
            total_score += weighted

        score = int(round_half_up(total_score / total_weight))
        level = classify_effort(score)
        logger.debug("Effort score %d (%s)", score, level)
        return EffortScoreResult(
            score=score, level=level, factors=factors, breakdown=breakdown
        )

    def auto_calculate(
        self, raw: RawRequestAttributes | Mapping[str, Any] | None
    ) -> EffortScoreResult:
        return self.score(self.derive_factors(raw))
