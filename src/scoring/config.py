"""Scoring configuration: weight tables, thresholds and admin config rows.

Weight tables are frozen: every factor has a weight and every weight is
strictly positive, so the weighted-average denominator can never be zero.
Per-deployment overrides go through ``with_overrides``, which returns a
fresh validated table and leaves the defaults untouched.

``BenefitScoringConfig`` and ``EffortScoringConfig`` mirror the rows of the
admin-editable ``benefit_scoring_config`` / ``effort_scoring_config``
tables.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from pydantic import Field, field_validator, model_validator

from src.models.common import ScoringBase
from src.scoring.normalizer import normalization_ladder, round_half_up


# ---------------------------------------------------------------------------
# Weight tables
# ---------------------------------------------------------------------------


class WeightTable(ScoringBase):
    """Base for per-calculator weight tables (factor name -> weight > 0)."""

    model_config = {"extra": "forbid", "frozen": True}

    def with_overrides(self, overrides: Mapping[str, float]) -> WeightTable:
        """Return a new table with *overrides* applied.

        Keys may be field names or their camelCase aliases.

        Raises:
            pydantic.ValidationError: on unknown factors or non-positive weights.
        """
        merged: dict[str, Any] = self.model_dump()
        merged.update(self.canonical_keys(overrides))
        return type(self).model_validate(merged)

    def weight_for(self, factor: str) -> float:
        return getattr(self, factor)

    def total(self) -> float:
        return sum(self.model_dump().values())


class RiskWeights(WeightTable):
    impact_scope: float = Field(default=1.5, gt=0, alias="impactScope")
    business_critical: float = Field(default=1.8, gt=0, alias="businessCritical")
    complexity: float = Field(default=1.3, gt=0)
    testing_coverage: float = Field(default=1.2, gt=0, alias="testingCoverage")
    rollback_capability: float = Field(default=1.4, gt=0, alias="rollbackCapability")
    change_size: float = Field(default=1.1, gt=0, alias="changeSize")
    time_window: float = Field(default=1.0, gt=0, alias="timeWindow")
    dependency_count: float = Field(default=1.2, gt=0, alias="dependencyCount")
    historical_failures: float = Field(default=1.6, gt=0, alias="historicalFailures")
    financial_impact: float = Field(default=1.7, gt=0, alias="financialImpact")


class EffortWeights(WeightTable):
    hours_estimated: float = Field(default=2.0, gt=0, alias="hoursEstimated")
    cost_estimated: float = Field(default=1.8, gt=0, alias="costEstimated")
    team_size: float = Field(default=1.5, gt=0, alias="teamSize")
    complexity: float = Field(default=1.6, gt=0)
    systems_affected: float = Field(default=1.3, gt=0, alias="systemsAffected")
    testing_required: float = Field(default=1.2, gt=0, alias="testingRequired")
    documentation_required: float = Field(
        default=1.0, gt=0, alias="documentationRequired"
    )


class BenefitWeights(WeightTable):
    revenue_improvement: float = Field(default=2.5, gt=0, alias="revenueImprovement")
    cost_savings: float = Field(default=2.3, gt=0, alias="costSavings")
    customer_impact: float = Field(default=2.2, gt=0, alias="customerImpact")
    process_improvement: float = Field(default=1.9, gt=0, alias="processImprovement")
    internal_qol: float = Field(default=1.6, gt=0, alias="internalQoL")
    strategic_alignment: float = Field(default=2.0, gt=0, alias="strategicAlignment")


class PriorityWeights(WeightTable):
    business_value: float = Field(default=2.0, gt=0, alias="businessValue")
    urgency: float = Field(default=1.8, gt=0)
    impact_scope: float = Field(default=1.5, gt=0, alias="impactScope")
    risk_level: float = Field(default=1.3, gt=0, alias="riskLevel")
    resource_requirement: float = Field(default=1.0, gt=0, alias="resourceRequirement")
    dependency: float = Field(default=1.2, gt=0)
    strategic_alignment: float = Field(default=1.7, gt=0, alias="strategicAlignment")
    customer_impact: float = Field(default=1.6, gt=0, alias="customerImpact")


# ---------------------------------------------------------------------------
# Admin-editable config rows
# ---------------------------------------------------------------------------


def parse_thresholds(raw: str | None) -> list[float]:
    """Parse a comma-separated thresholds string ("0, 40, 160") into floats.

    Raises:
        ValueError: if any entry is not a number.
    """
    if raw is None or not raw.strip():
        return []
    values: list[float] = []
    for piece in raw.split(","):
        try:
            values.append(float(piece.strip()))
        except ValueError:
            msg = f"thresholds must be comma-separated numbers, got {raw!r}"
            raise ValueError(msg) from None
    return values


class ScoringConfigRow(ScoringBase):
    """Fields shared by the benefit and effort scoring config rows."""

    id: int | None = None
    display_name: str = Field(default="", alias="displayName")
    value_for_100_points: float = Field(default=100.0, ge=0, alias="valueFor100Points")
    value_unit: str = Field(default="", alias="valueUnit")
    time_decay_per_month: float = Field(default=0.0, ge=0, alias="timeDecayPerMonth")
    thresholds: str | None = None
    is_active: bool = Field(default=True, alias="isActive")
    description: str | None = None

    @field_validator("thresholds")
    @classmethod
    def _numeric_thresholds(cls, v: str | None) -> str | None:
        parse_thresholds(v)
        return v

    @property
    def threshold_values(self) -> list[float]:
        return parse_thresholds(self.thresholds)

    def value_score(self, raw_value: float) -> float:
        """Raw value as points out of 100 (``value_for_100_points`` -> 100)."""
        if self.value_for_100_points == 0:
            return 0.0
        points = raw_value / self.value_for_100_points * 100
        return min(100.0, max(0.0, points))

    def time_score(self, timeline_months: float) -> float:
        """100 points for immediate realization, minus the monthly decay."""
        points = 100.0 - timeline_months * self.time_decay_per_month
        return min(100.0, max(0.0, points))


class BenefitConfigScore(ScoringBase, frozen=True):
    value_score: float
    time_score: float
    combined_score: float


class BenefitScoringConfig(ScoringConfigRow):
    """Per-benefit-type scoring configuration (0-100 value and time scores)."""

    benefit_type: str = Field(alias="benefitType")

    def calculate_score(
        self, raw_value: float, raw_timeline: float
    ) -> BenefitConfigScore:
        """Score a raw value and timeline; each component rounded to 1 decimal."""
        value_score = self.value_score(raw_value)
        time_score = self.time_score(raw_timeline)
        return BenefitConfigScore(
            value_score=round_half_up(value_score, 1),
            time_score=round_half_up(time_score, 1),
            combined_score=round_half_up(value_score + time_score, 1),
        )


class EffortScoringConfig(ScoringConfigRow):
    """Per-effort-factor configuration; ``thresholds`` feeds the normalizer."""

    effort_type: str = Field(alias="effortType")

    @model_validator(mode="after")
    def _valid_ladder(self) -> EffortScoringConfig:
        if self.thresholds is not None and self.threshold_values:
            normalization_ladder(self.threshold_values)
        return self


# Seed rows matching the stock configuration store contents.
DEFAULT_BENEFIT_CONFIGS: tuple[BenefitScoringConfig, ...] = (
    BenefitScoringConfig(
        benefit_type="revenueImprovement",
        display_name="Revenue Improvement",
        value_for_100_points=100000,
        value_unit="GBP",
        time_decay_per_month=5,
    ),
    BenefitScoringConfig(
        benefit_type="costSavings",
        display_name="Cost Savings",
        value_for_100_points=50000,
        value_unit="GBP",
        time_decay_per_month=4,
    ),
    BenefitScoringConfig(
        benefit_type="customerImpact",
        display_name="Customer Impact",
        value_for_100_points=100,
        value_unit="customers",
        time_decay_per_month=3,
    ),
    BenefitScoringConfig(
        benefit_type="processImprovement",
        display_name="Process Improvement",
        value_for_100_points=100,
        value_unit="percentage",
        time_decay_per_month=2,
    ),
    BenefitScoringConfig(
        benefit_type="internalQoL",
        display_name="Internal Quality of Life",
        value_for_100_points=100,
        value_unit="employees",
        time_decay_per_month=2,
    ),
)


# ---------------------------------------------------------------------------
# Effort normalizer thresholds
# ---------------------------------------------------------------------------

Thresholds = tuple[float, float, float, float, float]


class EffortThresholds(ScoringBase):
    """Normalizer thresholds for the magnitude-based effort factors."""

    model_config = {"extra": "forbid", "frozen": True}

    hours_estimated: Thresholds = Field(
        default=(0, 40, 160, 400, 1000), alias="hoursEstimated"
    )
    cost_estimated: Thresholds = Field(
        default=(0, 1000, 5000, 20000, 50000), alias="costEstimated"
    )
    team_size: Thresholds = Field(default=(1, 2, 4, 6, 9), alias="teamSize")
    systems_affected: Thresholds = Field(
        default=(0, 1, 2, 4, 5), alias="systemsAffected"
    )

    @field_validator("*")
    @classmethod
    def _non_decreasing(cls, v: Thresholds) -> Thresholds:
        normalization_ladder(v)
        return v

    def with_configs(self, configs: Iterable[EffortScoringConfig]) -> EffortThresholds:
        """Apply thresholds from active effort config rows keyed by factor name.

        Rows for unknown factors, inactive rows and rows without thresholds
        are skipped.
        """
        names = {}
        for name, field in type(self).model_fields.items():
            names[name] = name
            if field.alias:
                names[field.alias] = name
        merged: dict[str, Any] = self.model_dump()
        for row in configs:
            name = names.get(row.effort_type)
            if name is None or not row.is_active or not row.threshold_values:
                continue
            merged[name] = tuple(row.threshold_values)
        return type(self).model_validate(merged)


# ---------------------------------------------------------------------------
# Engine-wide bundle
# ---------------------------------------------------------------------------


class ScoringEngineConfig(ScoringBase):
    """Everything the calculators need, passed in explicitly.

    Defaults reproduce the stock weight tables; a deployment overrides them
    by constructing its own instance.
    """

    risk_weights: RiskWeights = Field(default_factory=RiskWeights)
    effort_weights: EffortWeights = Field(default_factory=EffortWeights)
    benefit_weights: BenefitWeights = Field(default_factory=BenefitWeights)
    priority_weights: PriorityWeights = Field(default_factory=PriorityWeights)
    effort_thresholds: EffortThresholds = Field(default_factory=EffortThresholds)
    default_timeline_months: float = Field(default=12.0, ge=0)
