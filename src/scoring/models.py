"""Scoring engine enums, input records, factor sets and result models.

``RawRequestAttributes`` is the typed view of the request wizard's JSON
blob: every field is optional and malformed values are coerced to ``None``
on the way in, so building one from any stored payload never fails. The
factor sets are the fixed per-calculator inputs to scoring; the result
models are what callers persist and display.

Deterministic -- no I/O.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Mapping

from pydantic import Field, field_validator

from src.models.common import (
    ScoringBase,
    UTCTimestamp,
    UUIDv7,
    new_uuid7,
    utc_now,
)
from src.scoring.coerce import to_bool, to_float


# ---------------------------------------------------------------------------
# Enums (all StrEnum)
# ---------------------------------------------------------------------------


class RiskLevel(StrEnum):
    """Risk classification bands."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class EffortLevel(StrEnum):
    """Effort classification bands."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"


class PriorityLevel(StrEnum):
    """Priority bands used by the prioritization dashboard."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class BenefitCategory(StrEnum):
    """Benefit categories; values match the stored ``benefit_type`` keys."""

    REVENUE_IMPROVEMENT = "revenueImprovement"
    COST_SAVINGS = "costSavings"
    CUSTOMER_IMPACT = "customerImpact"
    PROCESS_IMPROVEMENT = "processImprovement"
    INTERNAL_QOL = "internalQoL"
    STRATEGIC_ALIGNMENT = "strategicAlignment"


# ---------------------------------------------------------------------------
# Raw request attributes (wizard payload)
# ---------------------------------------------------------------------------


def _lenient_text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _lenient_block(value: Any) -> Any:
    # Nested detail blocks must be mappings; anything else means "absent".
    if value is None or isinstance(value, (dict, ScoringBase)):
        return value
    return None


class ChangeReasons(ScoringBase):
    """Checkbox flags from the "why this change" wizard step."""

    revenue_improvement: bool = Field(default=False, alias="revenueImprovement")
    cost_reduction: bool = Field(default=False, alias="costReduction")
    customer_impact: bool = Field(default=False, alias="customerImpact")
    process_improvement: bool = Field(default=False, alias="processImprovement")
    internal_qol: bool = Field(default=False, alias="internalQoL")

    @field_validator("*", mode="before")
    @classmethod
    def _lenient_flag(cls, v: Any) -> bool:
        return to_bool(v)


class RevenueDetails(ScoringBase):
    expected_revenue: float | None = Field(default=None, alias="expectedRevenue")
    revenue_timeline: float | None = Field(default=None, alias="revenueTimeline")
    revenue_description: str | None = Field(default=None, alias="revenueDescription")

    @field_validator("expected_revenue", "revenue_timeline", mode="before")
    @classmethod
    def _lenient_number(cls, v: Any) -> float | None:
        return to_float(v)

    @field_validator("revenue_description", mode="before")
    @classmethod
    def _lenient_description(cls, v: Any) -> str | None:
        return _lenient_text(v)


class CostReductionDetails(ScoringBase):
    expected_savings: float | None = Field(default=None, alias="expectedSavings")
    savings_timeline: float | None = Field(default=None, alias="savingsTimeline")
    savings_description: str | None = Field(default=None, alias="savingsDescription")

    @field_validator("expected_savings", "savings_timeline", mode="before")
    @classmethod
    def _lenient_number(cls, v: Any) -> float | None:
        return to_float(v)

    @field_validator("savings_description", mode="before")
    @classmethod
    def _lenient_description(cls, v: Any) -> str | None:
        return _lenient_text(v)


class CustomerImpactDetails(ScoringBase):
    satisfaction_rating: float | None = Field(default=None, alias="satisfactionRating")
    customers_affected: float | None = Field(default=None, alias="customersAffected")
    impact_timeline: float | None = Field(default=None, alias="impactTimeline")
    impact_description: str | None = Field(default=None, alias="impactDescription")

    @field_validator(
        "satisfaction_rating", "customers_affected", "impact_timeline", mode="before"
    )
    @classmethod
    def _lenient_number(cls, v: Any) -> float | None:
        return to_float(v)

    @field_validator("impact_description", mode="before")
    @classmethod
    def _lenient_description(cls, v: Any) -> str | None:
        return _lenient_text(v)


class ProcessImprovementDetails(ScoringBase):
    expected_efficiency: float | None = Field(default=None, alias="expectedEfficiency")
    improvement_timeline: float | None = Field(default=None, alias="improvementTimeline")
    process_description: str | None = Field(default=None, alias="processDescription")

    @field_validator("expected_efficiency", "improvement_timeline", mode="before")
    @classmethod
    def _lenient_number(cls, v: Any) -> float | None:
        return to_float(v)

    @field_validator("process_description", mode="before")
    @classmethod
    def _lenient_description(cls, v: Any) -> str | None:
        return _lenient_text(v)


class InternalQoLDetails(ScoringBase):
    users_affected: float | None = Field(default=None, alias="usersAffected")
    qol_timeline: float | None = Field(default=None, alias="qolTimeline")
    expected_improvements: str | None = Field(default=None, alias="expectedImprovements")

    @field_validator("users_affected", "qol_timeline", mode="before")
    @classmethod
    def _lenient_number(cls, v: Any) -> float | None:
        return to_float(v)

    @field_validator("expected_improvements", mode="before")
    @classmethod
    def _lenient_description(cls, v: Any) -> str | None:
        return _lenient_text(v)


class RawRequestAttributes(ScoringBase):
    """Typed, fully optional view over a change request's wizard data.

    Numeric fields accept numbers or numeric strings (currency symbols and
    thousands separators are stripped); anything unparseable becomes
    ``None``. List fields accept only lists. Unknown keys are ignored.
    """

    impacted_users: float | None = Field(default=None, alias="impactedUsers")
    estimated_cost: float | None = Field(default=None, alias="estimatedCost")
    estimated_effort_hours: float | None = Field(
        default=None, alias="estimatedEffortHours"
    )
    team_size: float | None = Field(default=None, alias="teamSize")
    resource_requirement: float | None = Field(
        default=None, alias="resourceRequirement"
    )
    complexity: float | None = None
    testing_required: float | None = Field(default=None, alias="testingRequired")
    documentation_required: float | None = Field(
        default=None, alias="documentationRequired"
    )
    systems_affected: list[Any] | None = Field(default=None, alias="systemsAffected")
    systems_affected_count: float | None = Field(
        default=None, alias="systemsAffectedCount"
    )
    dependencies: list[Any] | None = None

    change_reasons: ChangeReasons = Field(
        default_factory=ChangeReasons, alias="changeReasons"
    )
    revenue_details: RevenueDetails | None = Field(default=None, alias="revenueDetails")
    cost_reduction_details: CostReductionDetails | None = Field(
        default=None, alias="costReductionDetails"
    )
    customer_impact_details: CustomerImpactDetails | None = Field(
        default=None, alias="customerImpactDetails"
    )
    process_improvement_details: ProcessImprovementDetails | None = Field(
        default=None, alias="processImprovementDetails"
    )
    internal_qol_details: InternalQoLDetails | None = Field(
        default=None, alias="internalQoLDetails"
    )
    priority_factors: dict[str, Any] | None = Field(
        default=None, alias="priorityFactors"
    )

    @field_validator(
        "impacted_users",
        "estimated_cost",
        "estimated_effort_hours",
        "team_size",
        "resource_requirement",
        "complexity",
        "testing_required",
        "documentation_required",
        "systems_affected_count",
        mode="before",
    )
    @classmethod
    def _lenient_number(cls, v: Any) -> float | None:
        return to_float(v)

    @field_validator("systems_affected", "dependencies", mode="before")
    @classmethod
    def _lenient_list(cls, v: Any) -> list[Any] | None:
        if isinstance(v, (list, tuple)):
            return list(v)
        return None

    @field_validator("change_reasons", mode="before")
    @classmethod
    def _lenient_reasons(cls, v: Any) -> Any:
        block = _lenient_block(v)
        return {} if block is None else block

    @field_validator(
        "revenue_details",
        "cost_reduction_details",
        "customer_impact_details",
        "process_improvement_details",
        "internal_qol_details",
        mode="before",
    )
    @classmethod
    def _lenient_details(cls, v: Any) -> Any:
        return _lenient_block(v)

    @field_validator("priority_factors", mode="before")
    @classmethod
    def _lenient_mapping(cls, v: Any) -> dict[str, Any] | None:
        return v if isinstance(v, dict) else None

    @classmethod
    def from_payload(cls, payload: Any) -> RawRequestAttributes:
        """Build from a stored JSON object, an existing instance, or ``None``."""
        if isinstance(payload, cls):
            return payload
        if not isinstance(payload, Mapping):
            return cls()
        return cls.model_validate(dict(payload))


# ---------------------------------------------------------------------------
# Factor sets
# ---------------------------------------------------------------------------


class RiskFactors(ScoringBase, frozen=True):
    """The 10 risk factors, each on a 1-5 ordinal scale."""

    impact_scope: int = Field(default=3, ge=1, le=5, alias="impactScope")
    business_critical: int = Field(default=3, ge=1, le=5, alias="businessCritical")
    complexity: int = Field(default=3, ge=1, le=5)
    testing_coverage: int = Field(default=3, ge=1, le=5, alias="testingCoverage")
    rollback_capability: int = Field(
        default=3, ge=1, le=5, alias="rollbackCapability"
    )
    change_size: int = Field(default=3, ge=1, le=5, alias="changeSize")
    time_window: int = Field(default=3, ge=1, le=5, alias="timeWindow")
    dependency_count: int = Field(default=3, ge=1, le=5, alias="dependencyCount")
    historical_failures: int = Field(
        default=1, ge=1, le=5, alias="historicalFailures"
    )
    financial_impact: int = Field(default=3, ge=1, le=5, alias="financialImpact")


class EffortFactors(ScoringBase, frozen=True):
    """The 7 effort factors.

    Hours, cost, team size and systems count are raw magnitudes; the other
    three are 1-5 ordinals.
    """

    hours_estimated: float = Field(default=0.0, alias="hoursEstimated")
    cost_estimated: float = Field(default=0.0, alias="costEstimated")
    team_size: float = Field(default=1.0, alias="teamSize")
    complexity: int = Field(default=1, ge=1, le=5)
    systems_affected: int = Field(default=0, ge=0, alias="systemsAffected")
    testing_required: int = Field(default=3, ge=1, le=5, alias="testingRequired")
    documentation_required: int = Field(
        default=3, ge=1, le=5, alias="documentationRequired"
    )


class BenefitInput(ScoringBase, frozen=True):
    """Raw value (and optional realization timeline) for one benefit category."""

    raw_value: float
    raw_timeline: float | None = None
    explanation: str = ""


class BenefitFactors(ScoringBase, frozen=True):
    """Applicable benefit categories for one request.

    A category is ``None`` when its flag is unset or its detail block is
    missing; strategic alignment is always present.
    """

    revenue_improvement: BenefitInput | None = Field(
        default=None, alias="revenueImprovement"
    )
    cost_savings: BenefitInput | None = Field(default=None, alias="costSavings")
    customer_impact: BenefitInput | None = Field(default=None, alias="customerImpact")
    process_improvement: BenefitInput | None = Field(
        default=None, alias="processImprovement"
    )
    internal_qol: BenefitInput | None = Field(default=None, alias="internalQoL")
    strategic_alignment: float = Field(default=5.0, ge=0, le=10, alias="strategicAlignment")


class PriorityFactors(ScoringBase, frozen=True):
    """The 8 prioritization factors, each on a 1-10 ordinal scale."""

    business_value: int = Field(default=5, ge=1, le=10, alias="businessValue")
    urgency: int = Field(default=5, ge=1, le=10)
    impact_scope: int = Field(default=5, ge=1, le=10, alias="impactScope")
    risk_level: int = Field(default=5, ge=1, le=10, alias="riskLevel")
    resource_requirement: int = Field(
        default=5, ge=1, le=10, alias="resourceRequirement"
    )
    dependency: int = Field(default=5, ge=1, le=10)
    strategic_alignment: int = Field(
        default=5, ge=1, le=10, alias="strategicAlignment"
    )
    customer_impact: int = Field(default=5, ge=1, le=10, alias="customerImpact")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class FactorContribution(ScoringBase, frozen=True):
    """How one factor fed the weighted average.

    ``score`` is the value actually averaged (after inversion or
    normalization); ``weighted_score`` is ``score * weight``.
    """

    raw_value: float
    score: float
    weight: float
    weighted_score: float


class RiskScoreResult(ScoringBase, frozen=True):
    score: int = Field(ge=0, le=100)
    level: RiskLevel
    factors: RiskFactors
    breakdown: dict[str, FactorContribution] = Field(default_factory=dict)


class EffortScoreResult(ScoringBase, frozen=True):
    score: int = Field(ge=0, le=100)
    level: EffortLevel
    factors: EffortFactors
    breakdown: dict[str, FactorContribution] = Field(default_factory=dict)


class PriorityScoreResult(ScoringBase, frozen=True):
    score: float
    level: PriorityLevel
    factors: PriorityFactors
    breakdown: dict[str, FactorContribution] = Field(default_factory=dict)


class BenefitCategoryDetail(ScoringBase, frozen=True):
    """Per-category benefit scoring detail (0-10 component scale)."""

    category: BenefitCategory
    raw_value: float
    raw_timeline: float | None = None
    value_score: float
    time_score: float | None = None
    combined_score: float
    weight: float
    weighted_score: float
    explanation: str = ""


class BenefitScoreResult(ScoringBase, frozen=True):
    """Benefit score over the applicable categories only."""

    score: float = Field(ge=0.0, le=100.0)
    total_weight: float
    factors: BenefitFactors
    details: dict[BenefitCategory, BenefitCategoryDetail] = Field(default_factory=dict)


class PriorityCandidate(ScoringBase, frozen=True):
    """One request entering batch prioritization."""

    request_id: str
    factors: PriorityFactors


class RankedRequest(ScoringBase, frozen=True):
    request_id: str
    rank: int = Field(ge=1)
    score: float
    level: PriorityLevel
    factors: PriorityFactors


class ChangeAssessment(ScoringBase, frozen=True):
    """All scores for one change request, stamped for persistence."""

    assessment_id: UUIDv7 = Field(default_factory=new_uuid7)
    request_id: str | None = None
    risk: RiskScoreResult
    effort: EffortScoreResult
    benefit: BenefitScoreResult
    priority: PriorityScoreResult | None = None
    calculated_at: UTCTimestamp = Field(default_factory=utc_now)
