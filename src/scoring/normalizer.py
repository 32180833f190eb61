"""Threshold ladders and the stepped 0-100 normalizer.

Every calculator reduces raw magnitudes (hours, cost, head counts, list
lengths) to coarse buckets. ``ThresholdLadder`` is the single primitive
behind all of them: an ordered list of steps, the first step whose limit
admits the value decides the level, and values beyond the last step get
the ``top`` level.

Deterministic -- no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

# Scores returned by ``normalize`` for buckets t0..t4 and the overflow bucket.
NORMALIZED_LEVELS: tuple[int, ...] = (0, 25, 50, 75, 90)
NORMALIZED_TOP = 100

# Floats at or above 2**52 have no fractional part left to round.
_INTEGRAL_FLOAT = 2.0**52


@dataclass(frozen=True)
class LadderStep:
    """One rung of a threshold ladder.

    ``inclusive`` selects ``value <= limit``; otherwise ``value < limit``.
    """

    limit: float
    level: int
    inclusive: bool = False

    def admits(self, value: float) -> bool:
        if self.inclusive:
            return value <= self.limit
        return value < self.limit


@dataclass(frozen=True)
class ThresholdLadder:
    """Ordered bucket lookup from a raw magnitude to an ordinal level."""

    steps: tuple[LadderStep, ...]
    top: int

    def __post_init__(self) -> None:
        limits = [step.limit for step in self.steps]
        for lower, upper in zip(limits, limits[1:]):
            if upper < lower:
                msg = f"Ladder limits must be non-decreasing, got {limits}"
                raise ValueError(msg)

    @classmethod
    def below(cls, limits: Sequence[float], *, start: int = 1) -> ThresholdLadder:
        """Strict ``value < limit`` ladder with consecutive levels from *start*."""
        steps = tuple(
            LadderStep(limit=float(limit), level=start + i)
            for i, limit in enumerate(limits)
        )
        return cls(steps=steps, top=start + len(steps))

    @classmethod
    def zero_then_below(
        cls, limits: Sequence[float], *, start: int = 1
    ) -> ThresholdLadder:
        """Ladder whose first rung is ``value <= 0`` followed by ``value < limit`` rungs."""
        steps = (LadderStep(limit=0.0, level=start, inclusive=True),) + tuple(
            LadderStep(limit=float(limit), level=start + 1 + i)
            for i, limit in enumerate(limits)
        )
        return cls(steps=steps, top=start + len(steps))

    def level_for(self, value: float) -> int:
        for step in self.steps:
            if step.admits(value):
                return step.level
        return self.top


def normalization_ladder(thresholds: Sequence[float]) -> ThresholdLadder:
    """Build the inclusive 0/25/50/75/90/100 ladder for five thresholds.

    Raises:
        ValueError: if there are not exactly five thresholds or they decrease.
    """
    if len(thresholds) != len(NORMALIZED_LEVELS):
        msg = (
            f"Expected {len(NORMALIZED_LEVELS)} thresholds, "
            f"got {len(thresholds)}: {list(thresholds)}"
        )
        raise ValueError(msg)
    steps = tuple(
        LadderStep(limit=float(limit), level=level, inclusive=True)
        for limit, level in zip(thresholds, NORMALIZED_LEVELS)
    )
    return ThresholdLadder(steps=steps, top=NORMALIZED_TOP)


def normalize(value: float, thresholds: Sequence[float]) -> int:
    """Map *value* to a stepped score in {0, 25, 50, 75, 90, 100}.

    ``value <= t0`` -> 0, ``<= t1`` -> 25, ``<= t2`` -> 50, ``<= t3`` -> 75,
    ``<= t4`` -> 90, otherwise 100. Buckets are coarse on purpose; this is
    not an interpolation.
    """
    return normalization_ladder(thresholds).level_for(value)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round half away from zero (``round()`` would round half to even)."""
    if not abs(value) < _INTEGRAL_FLOAT:
        return float(value)
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
