"""Prioritization calculator: 8 weighted 1-10 factors -> priority score and rank.

Resource requirement is inverted (``11 - value``) so that cheaper changes
rank higher. Ranking is a stable sort by descending score: requests with
equal scores keep their input order.

Deterministic -- no I/O.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from src.scoring.coerce import clamp, to_float
from src.scoring.config import PriorityWeights
from src.scoring.models import (
    FactorContribution,
    PriorityCandidate,
    PriorityFactors,
    PriorityLevel,
    PriorityScoreResult,
    RankedRequest,
    RawRequestAttributes,
)
from src.scoring.normalizer import round_half_up

logger = logging.getLogger(__name__)

INVERSE_FACTORS: frozenset[str] = frozenset({"resource_requirement"})

# Midpoint of the 1-10 scale, used for factors nobody has assessed yet.
DEFAULT_FACTOR_VALUE = 5

_SCALE = 10


def classify_priority(score: float) -> PriorityLevel:
    """<40 Low, <60 Medium, <80 High, otherwise Critical."""
    if score < 40:
        return PriorityLevel.LOW
    if score < 60:
        return PriorityLevel.MEDIUM
    if score < 80:
        return PriorityLevel.HIGH
    return PriorityLevel.CRITICAL


class PrioritizationCalculator:
    """Scores and ranks change requests by weighted priority factors."""

    def __init__(self, weights: PriorityWeights | None = None) -> None:
        self._weights = weights or PriorityWeights()

    def derive_factors(
        self, raw: RawRequestAttributes | Mapping[str, Any] | None
    ) -> PriorityFactors:
        """Read the ``priorityFactors`` block, defaulting and clamping to 1-10."""
        attrs = RawRequestAttributes.from_payload(raw)
        supplied = PriorityFactors.canonical_keys(attrs.priority_factors or {})

        values: dict[str, int] = {}
        for name in PriorityFactors.model_fields:
            number = to_float(supplied.get(name))
            if number is None:
                values[name] = DEFAULT_FACTOR_VALUE
            else:
                values[name] = int(round_half_up(clamp(number, 1, 10)))
        return PriorityFactors(**values)

    def score(
        self, factors: PriorityFactors, weights: PriorityWeights | None = None
    ) -> PriorityScoreResult:
        weights = weights or self._weights

        total_score = 0.0
        total_weight = weights.total()
        breakdown: dict[str, FactorContribution] = {}
        for name, raw_value in factors.model_dump().items():
            value = 11 - raw_value if name in INVERSE_FACTORS else raw_value
            weight = weights.weight_for(name)
            weighted = value * weight
            breakdown[name] = FactorContribution(
                raw_value=raw_value,
                score=value,
                weight=weight,
                weighted_score=weighted,
            )
            total_score += weighted

        score = round_half_up(total_score / total_weight * _SCALE, 1)
        return PriorityScoreResult(
            score=score,
            level=classify_priority(score),
            factors=factors,
            breakdown=breakdown,
        )

    def auto_calculate(
        self, raw: RawRequestAttributes | Mapping[str, Any] | None
    ) -> PriorityScoreResult:
        return self.score(self.derive_factors(raw))

    def rank(
        self,
        candidates: Iterable[PriorityCandidate],
        weights: PriorityWeights | None = None,
    ) -> list[RankedRequest]:
        """Score every candidate, then rank by descending score (1-based)."""
        scored = [
            (candidate, self.score(candidate.factors, weights))
            for candidate in candidates
        ]
        # sorted() is stable: equal scores keep their input order.
        ordered = sorted(scored, key=lambda pair: -pair[1].score)

        ranked = [
            RankedRequest(
                request_id=candidate.request_id,
                rank=position,
                score=result.score,
                level=result.level,
                factors=candidate.factors,
            )
            for position, (candidate, result) in enumerate(ordered, start=1)
        ]
        logger.debug("Ranked %d requests", len(ranked))
        return ranked
