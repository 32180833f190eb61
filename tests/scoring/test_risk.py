"""Tests for RiskCalculator -- factor derivation, weighting, classification.

Covers: bucket boundaries per derived factor, business criticality flags,
inverse weighting of protective factors, classification cut-offs,
post-hoc overrides, custom weights and malformed input handling.
"""

import pytest
from pydantic import ValidationError

from src.scoring.config import RiskWeights
from src.scoring.models import RiskFactors, RiskLevel
from src.scoring.risk import RiskCalculator, classify_risk


@pytest.fixture
def calc() -> RiskCalculator:
    return RiskCalculator()


# ===================================================================
# Factor derivation
# ===================================================================


class TestDeriveFactors:
    """derive_factors: fixed heuristic ladders, independent per factor."""

    def test_empty_payload_defaults(self, calc: RiskCalculator, empty_payload: dict) -> None:
        factors = calc.derive_factors(empty_payload)
        assert factors == RiskFactors(
            impact_scope=1,
            business_critical=3,
            complexity=1,
            testing_coverage=3,
            rollback_capability=3,
            change_size=1,
            time_window=3,
            dependency_count=1,
            historical_failures=1,
            financial_impact=1,
        )

    @pytest.mark.parametrize(
        ("users", "expected"),
        [(0, 1), (1, 2), (9, 2), (10, 3), (49, 3), (50, 4), (199, 4), (200, 5)],
    )
    def test_impact_scope(self, calc: RiskCalculator, users: int, expected: int) -> None:
        assert calc.derive_factors({"impactedUsers": users}).impact_scope == expected

    @pytest.mark.parametrize(
        ("cost", "expected"),
        [(0, 1), (999, 2), ("£1,000", 3), (4999, 3), (5000, 4), (19999, 4), (20000, 5)],
    )
    def test_financial_impact(self, calc: RiskCalculator, cost: object, expected: int) -> None:
        assert calc.derive_factors({"estimatedCost": cost}).financial_impact == expected

    @pytest.mark.parametrize(
        ("hours", "expected"),
        [(0, 1), (7.5, 2), (8, 3), (39, 3), (40, 4), (159, 4), (160, 5)],
    )
    def test_complexity(self, calc: RiskCalculator, hours: float, expected: int) -> None:
        assert calc.derive_factors({"estimatedEffortHours": hours}).complexity == expected

    @pytest.mark.parametrize(("count", "expected"), [(0, 1), (1, 2), (2, 3), (3, 4), (4, 4), (5, 5), (9, 5)])
    def test_change_size_and_dependencies(
        self, calc: RiskCalculator, count: int, expected: int
    ) -> None:
        items = [f"item-{i}" for i in range(count)]
        factors = calc.derive_factors({"systemsAffected": items, "dependencies": items})
        assert factors.change_size == expected
        assert factors.dependency_count == expected

    @pytest.mark.parametrize(
        ("reasons", "expected"),
        [
            ({"revenueImprovement": True}, 4),
            ({"customerImpact": True}, 4),
            ({"costReduction": True}, 3),
            ({}, 3),
        ],
    )
    def test_business_critical(
        self, calc: RiskCalculator, reasons: dict, expected: int
    ) -> None:
        assert calc.derive_factors({"changeReasons": reasons}).business_critical == expected

    def test_malformed_inputs_use_defaults(self, calc: RiskCalculator) -> None:
        factors = calc.derive_factors(
            {
                "impactedUsers": "lots",
                "estimatedCost": "TBC",
                "systemsAffected": "CRM",
                "dependencies": {"a": 1},
                "changeReasons": "revenue",
            }
        )
        assert factors == calc.derive_factors({})

    def test_negative_counts_bucket_as_zero(self, calc: RiskCalculator) -> None:
        assert calc.derive_factors({"impactedUsers": -4}).impact_scope == 1

    def test_integer_too_large_for_float_is_ignored(self, calc: RiskCalculator) -> None:
        result = calc.auto_calculate({"impactedUsers": 10**400, "estimatedCost": 10**400})
        assert result.factors.impact_scope == 1
        assert result.factors.financial_impact == 1

    def test_overrides(self, calc: RiskCalculator) -> None:
        factors = calc.derive_factors(
            {}, overrides={"testingCoverage": 5, "historical_failures": 4}
        )
        assert factors.testing_coverage == 5
        assert factors.historical_failures == 4

    def test_out_of_range_override_rejected(self, calc: RiskCalculator) -> None:
        with pytest.raises(ValidationError):
            calc.derive_factors({}, overrides={"timeWindow": 6})


# ===================================================================
# Scoring
# ===================================================================


class TestScore:
    """score: weighted average scaled x20, inverse protective factors."""

    def test_empty_payload(self, calc: RiskCalculator, empty_payload: dict) -> None:
        # (24.6 / 13.8) * 20 = 35.65
        result = calc.auto_calculate(empty_payload)
        assert result.score == 36
        assert result.level == RiskLevel.MEDIUM

    def test_minor_change(self, calc: RiskCalculator, minor_payload: dict) -> None:
        # (30.2 / 13.8) * 20 = 43.77
        result = calc.auto_calculate(minor_payload)
        assert result.score == 44
        assert result.level == RiskLevel.MEDIUM

    def test_major_change(self, calc: RiskCalculator, major_payload: dict) -> None:
        # (52.4 / 13.8) * 20 = 75.94
        result = calc.auto_calculate(major_payload)
        assert result.score == 76
        assert result.level == RiskLevel.CRITICAL

    def test_worst_case_is_100(self, calc: RiskCalculator) -> None:
        factors = RiskFactors(
            **{name: 5 for name in RiskFactors.model_fields},
        ).model_copy(update={"testing_coverage": 1, "rollback_capability": 1})
        assert calc.score(factors).score == 100

    def test_best_case_is_20(self, calc: RiskCalculator) -> None:
        factors = RiskFactors(
            **{name: 1 for name in RiskFactors.model_fields},
        ).model_copy(update={"testing_coverage": 5, "rollback_capability": 5})
        result = calc.score(factors)
        assert result.score == 20
        assert result.level == RiskLevel.LOW

    def test_level_follows_rounded_score(self, calc: RiskCalculator) -> None:
        factors = RiskFactors(
            **{name: 1 for name in RiskFactors.model_fields},
        ).model_copy(
            update={
                "testing_coverage": 5,
                "rollback_capability": 5,
                "financial_impact": 2,
                "historical_failures": 2,
            }
        )
        # (17.1 / 13.8) * 20 = 24.78 rounds to 25
        result = calc.score(factors)
        assert result.score == 25
        assert result.level == RiskLevel.MEDIUM

    def test_protective_factors_reduce_risk(self, calc: RiskCalculator) -> None:
        weak = calc.score(calc.derive_factors({}, overrides={"testingCoverage": 1}))
        strong = calc.score(calc.derive_factors({}, overrides={"testingCoverage": 5}))
        assert strong.score < weak.score

    def test_breakdown_records_inversion(self, calc: RiskCalculator) -> None:
        factors = calc.derive_factors({}, overrides={"rollbackCapability": 4})
        contribution = calc.score(factors).breakdown["rollback_capability"]
        assert contribution.raw_value == 4
        assert contribution.score == 2
        assert contribution.weight == 1.4
        assert contribution.weighted_score == pytest.approx(2.8)

    def test_breakdown_has_every_factor(self, calc: RiskCalculator) -> None:
        result = calc.auto_calculate({})
        assert set(result.breakdown) == set(RiskFactors.model_fields)

    def test_score_is_integer_in_range(
        self, calc: RiskCalculator, minor_payload: dict, major_payload: dict
    ) -> None:
        for payload in ({}, minor_payload, major_payload):
            score = calc.auto_calculate(payload).score
            assert isinstance(score, int)
            assert 0 <= score <= 100

    def test_custom_weights_per_call(self, calc: RiskCalculator, major_payload: dict) -> None:
        factors = calc.derive_factors(major_payload)
        heavy_history = RiskWeights().with_overrides({"historicalFailures": 20.0})
        # historical failures stays at 1, so weighting it heavily lowers the score
        assert calc.score(factors, heavy_history).score < calc.score(factors).score
        assert RiskWeights().historical_failures == 1.6

    def test_constructor_weights(self, major_payload: dict) -> None:
        weights = RiskWeights().with_overrides({"historicalFailures": 20.0})
        assert (
            RiskCalculator(weights).auto_calculate(major_payload).score
            < RiskCalculator().auto_calculate(major_payload).score
        )

    def test_round_trip(self, calc: RiskCalculator, major_payload: dict) -> None:
        assert calc.score(calc.derive_factors(major_payload)) == calc.auto_calculate(
            major_payload
        )


# ===================================================================
# Classification
# ===================================================================


class TestClassifyRisk:
    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (0, RiskLevel.LOW),
            (24, RiskLevel.LOW),
            (25, RiskLevel.MEDIUM),
            (49, RiskLevel.MEDIUM),
            (50, RiskLevel.HIGH),
            (74, RiskLevel.HIGH),
            (75, RiskLevel.CRITICAL),
            (100, RiskLevel.CRITICAL),
        ],
    )
    def test_cut_offs(self, score: int, expected: RiskLevel) -> None:
        assert classify_risk(score) == expected
