"""Tests for ScoringConfigRegistry."""

import pytest
from pydantic import ValidationError

from src.scoring.config import (
    DEFAULT_BENEFIT_CONFIGS,
    BenefitScoringConfig,
    EffortScoringConfig,
    EffortThresholds,
)
from src.scoring.registry import ScoringConfigRegistry


@pytest.fixture
def registry() -> ScoringConfigRegistry:
    return ScoringConfigRegistry.from_rows(
        benefit_rows=[
            {
                "benefitType": "revenueImprovement",
                "displayName": "Revenue",
                "valueFor100Points": 200000,
                "timeDecayPerMonth": 2,
            },
            {"benefitType": "costSavings", "isActive": False},
        ],
        effort_rows=[
            {"effortType": "hoursEstimated", "thresholds": "0, 10, 20, 30, 40"},
            {"effortType": "teamSize", "thresholds": "1,3,5,7,9", "isActive": False},
        ],
    )


class TestLoading:
    def test_from_rows(self, registry: ScoringConfigRegistry) -> None:
        revenue = registry.get_benefit("revenueImprovement")
        assert revenue is not None
        assert revenue.value_for_100_points == 200000
        assert revenue.display_name == "Revenue"

    def test_inactive_rows_hidden(self, registry: ScoringConfigRegistry) -> None:
        assert registry.get_benefit("costSavings") is None
        assert registry.get_effort("teamSize") is None
        assert list(registry.active_benefit_configs()) == ["revenueImprovement"]
        assert [c.effort_type for c in registry.active_effort_configs()] == [
            "hoursEstimated"
        ]

    def test_unknown_type(self, registry: ScoringConfigRegistry) -> None:
        assert registry.get_benefit("nope") is None

    def test_malformed_thresholds_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScoringConfigRegistry.from_rows(
                effort_rows=[{"effortType": "hoursEstimated", "thresholds": "0,ten"}]
            )

    def test_decreasing_thresholds_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScoringConfigRegistry.from_rows(
                effort_rows=[{"effortType": "hoursEstimated", "thresholds": "40,30,20,10,0"}]
            )

    def test_with_defaults(self) -> None:
        registry = ScoringConfigRegistry.with_defaults()
        assert len(registry.active_benefit_configs()) == len(DEFAULT_BENEFIT_CONFIGS)
        assert registry.get_benefit("costSavings").value_for_100_points == 50000


class TestMutation:
    def test_register_replaces(self, registry: ScoringConfigRegistry) -> None:
        registry.register_benefit(
            BenefitScoringConfig(benefit_type="revenueImprovement", value_for_100_points=1)
        )
        assert registry.get_benefit("revenueImprovement").value_for_100_points == 1

    def test_deactivate_benefit(self, registry: ScoringConfigRegistry) -> None:
        registry.deactivate_benefit("revenueImprovement")
        assert registry.get_benefit("revenueImprovement") is None
        assert registry.active_benefit_configs() == {}

    def test_deactivate_effort(self, registry: ScoringConfigRegistry) -> None:
        registry.deactivate_effort("hoursEstimated")
        assert registry.active_effort_configs() == []

    def test_deactivate_missing_raises(self, registry: ScoringConfigRegistry) -> None:
        with pytest.raises(KeyError):
            registry.deactivate_benefit("internalQoL")
        with pytest.raises(KeyError):
            registry.deactivate_effort("complexity")

    def test_reactivate_by_registering(self, registry: ScoringConfigRegistry) -> None:
        registry.register_benefit(
            BenefitScoringConfig(benefit_type="costSavings", is_active=True)
        )
        assert registry.get_benefit("costSavings") is not None


class TestEffortThresholds:
    def test_active_rows_applied(self, registry: ScoringConfigRegistry) -> None:
        thresholds = registry.effort_thresholds()
        assert thresholds.hours_estimated == (0, 10, 20, 30, 40)
        assert thresholds.team_size == EffortThresholds().team_size

    def test_base_preserved_for_other_factors(self, registry: ScoringConfigRegistry) -> None:
        base = EffortThresholds(cost_estimated=(0, 1, 2, 3, 4))
        thresholds = registry.effort_thresholds(base)
        assert thresholds.cost_estimated == (0, 1, 2, 3, 4)
        assert thresholds.hours_estimated == (0, 10, 20, 30, 40)

    def test_unknown_effort_type_ignored(self) -> None:
        registry = ScoringConfigRegistry()
        registry.register_effort(
            EffortScoringConfig(effort_type="coffeeBreaks", thresholds="0,1,2,3,4")
        )
        assert registry.effort_thresholds() == EffortThresholds()
