"""In-memory registry of admin scoring configuration rows.

Holds ``BenefitScoringConfig`` rows keyed by ``benefit_type`` and
``EffortScoringConfig`` rows keyed by ``effort_type``, as loaded from the
configuration store. Inactive rows stay registered (so they can be
re-activated) but are invisible to the lookups the calculators use.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from src.scoring.config import (
    DEFAULT_BENEFIT_CONFIGS,
    BenefitScoringConfig,
    EffortScoringConfig,
    EffortThresholds,
)


class ScoringConfigRegistry:
    """Benefit and effort scoring configuration, keyed by type name."""

    def __init__(self) -> None:
        self._benefit: dict[str, BenefitScoringConfig] = {}
        self._effort: dict[str, EffortScoringConfig] = {}

    @classmethod
    def from_rows(
        cls,
        benefit_rows: Iterable[Mapping[str, Any]] = (),
        effort_rows: Iterable[Mapping[str, Any]] = (),
    ) -> ScoringConfigRegistry:
        """Build a registry from raw store rows.

        Raises:
            pydantic.ValidationError: if a row is malformed (e.g. a
                non-numeric ``thresholds`` string).
        """
        registry = cls()
        for row in benefit_rows:
            registry.register_benefit(BenefitScoringConfig.model_validate(row))
        for row in effort_rows:
            registry.register_effort(EffortScoringConfig.model_validate(row))
        return registry

    @classmethod
    def with_defaults(cls) -> ScoringConfigRegistry:
        """Registry seeded with the stock benefit configuration."""
        registry = cls()
        for config in DEFAULT_BENEFIT_CONFIGS:
            registry.register_benefit(config)
        return registry

    # -- Registration --------------------------------------------------------

    def register_benefit(self, config: BenefitScoringConfig) -> None:
        self._benefit[config.benefit_type] = config

    def register_effort(self, config: EffortScoringConfig) -> None:
        self._effort[config.effort_type] = config

    def deactivate_benefit(self, benefit_type: str) -> None:
        """Soft-delete a benefit config.

        Raises:
            KeyError: if *benefit_type* is not registered.
        """
        if benefit_type not in self._benefit:
            raise KeyError(benefit_type)
        old = self._benefit[benefit_type]
        self._benefit[benefit_type] = old.model_copy(update={"is_active": False})

    def deactivate_effort(self, effort_type: str) -> None:
        """Soft-delete an effort config.

        Raises:
            KeyError: if *effort_type* is not registered.
        """
        if effort_type not in self._effort:
            raise KeyError(effort_type)
        old = self._effort[effort_type]
        self._effort[effort_type] = old.model_copy(update={"is_active": False})

    # -- Lookup --------------------------------------------------------------

    def get_benefit(self, benefit_type: str) -> BenefitScoringConfig | None:
        """Active config for *benefit_type*, or ``None``."""
        config = self._benefit.get(benefit_type)
        if config is None or not config.is_active:
            return None
        return config

    def get_effort(self, effort_type: str) -> EffortScoringConfig | None:
        """Active config for *effort_type*, or ``None``."""
        config = self._effort.get(effort_type)
        if config is None or not config.is_active:
            return None
        return config

    def active_benefit_configs(self) -> dict[str, BenefitScoringConfig]:
        return {
            key: config
            for key, config in sorted(self._benefit.items())
            if config.is_active
        }

    def active_effort_configs(self) -> list[EffortScoringConfig]:
        return [
            config
            for _, config in sorted(self._effort.items())
            if config.is_active
        ]

    def effort_thresholds(
        self, base: EffortThresholds | None = None
    ) -> EffortThresholds:
        """Normalizer thresholds with active effort config rows applied."""
        return (base or EffortThresholds()).with_configs(self.active_effort_configs())
