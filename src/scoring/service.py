"""Change scoring orchestrator.

Runs the independent calculators over one request's raw wizard data and
returns a single timestamped ``ChangeAssessment`` for the caller to
persist. Calculators do not share state; the service only wires the
configured weight tables, thresholds and admin config rows into them.

Deterministic apart from the assessment id and timestamp.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from src.scoring.benefit import BenefitCalculator
from src.scoring.config import ScoringEngineConfig
from src.scoring.effort import EffortCalculator
from src.scoring.models import (
    ChangeAssessment,
    PriorityCandidate,
    RankedRequest,
    RawRequestAttributes,
)
from src.scoring.priority import PrioritizationCalculator
from src.scoring.registry import ScoringConfigRegistry
from src.scoring.risk import RiskCalculator

logger = logging.getLogger(__name__)


class ChangeScoringService:
    """Scores change requests with risk, effort, benefit and priority.

    Benefit configs and effort thresholds come from the ``registry`` when
    one is given; otherwise the built-in formulas and thresholds apply.
    """

    def __init__(
        self,
        config: ScoringEngineConfig | None = None,
        registry: ScoringConfigRegistry | None = None,
    ) -> None:
        self._config = config or ScoringEngineConfig()
        self._registry = registry or ScoringConfigRegistry()

        self._risk = RiskCalculator(weights=self._config.risk_weights)
        self._effort = EffortCalculator(
            weights=self._config.effort_weights,
            thresholds=self._registry.effort_thresholds(self._config.effort_thresholds),
        )
        self._benefit = BenefitCalculator(
            weights=self._config.benefit_weights,
            configs=self._registry.active_benefit_configs(),
            default_timeline_months=self._config.default_timeline_months,
        )
        self._priority = PrioritizationCalculator(weights=self._config.priority_weights)

    def assess(
        self,
        raw: RawRequestAttributes | Mapping[str, Any] | None,
        *,
        request_id: str | None = None,
        risk_overrides: Mapping[str, int] | None = None,
    ) -> ChangeAssessment:
        """Score one request.

        Priority is only scored when the request carries a
        ``priorityFactors`` block.
        """
        attrs = RawRequestAttributes.from_payload(raw)

        risk = self._risk.score(self._risk.derive_factors(attrs, risk_overrides))
        effort = self._effort.auto_calculate(attrs)
        benefit = self._benefit.auto_calculate(attrs)
        priority = (
            self._priority.auto_calculate(attrs)
            if attrs.priority_factors is not None
            else None
        )

        assessment = ChangeAssessment(
            request_id=request_id,
            risk=risk,
            effort=effort,
            benefit=benefit,
            priority=priority,
        )
        logger.info(
            "Assessed request %s: risk=%d (%s) effort=%d (%s) benefit=%.1f",
            request_id or "<unsaved>",
            risk.score,
            risk.level,
            effort.score,
            effort.level,
            benefit.score,
        )
        return assessment

    def rank_requests(
        self,
        requests: Iterable[tuple[str, RawRequestAttributes | Mapping[str, Any] | None]],
    ) -> list[RankedRequest]:
        """Rank ``(request_id, raw)`` pairs by priority, input order breaking ties."""
        candidates = [
            PriorityCandidate(
                request_id=request_id,
                factors=self._priority.derive_factors(raw),
            )
            for request_id, raw in requests
        ]
        return self._priority.rank(candidates)
