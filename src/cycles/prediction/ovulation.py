"""Ovulation day estimation by luteal-phase back-calculation.

The luteal phase (ovulation → next period) is close to constant for an
individual, so the ovulation day is projected backwards from the predicted
next period start.  When the history contains logged period end dates the
luteal length is estimated per cycle:

    luteal = cycle_length − period_length − 14

Only estimates inside a physiologically plausible range are kept.  Without
usable estimates a default is chosen by regularity class.

Confidence is tiered by how much evidence backs the estimate, with a small
boost when the cycle-length trend is flat.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Sequence

from src.cycles.base import CycleRecord, CycleRegularity
from src.cycles.config_loader import ConfidenceConfig, LutealPhaseConfig
from src.cycles.prediction.statistics import round_half_up

logger = logging.getLogger("cyclecast.cycles.prediction.ovulation")


@dataclass(frozen=True)
class OvulationEstimate:
    """Estimated ovulation day.

    Attributes:
        day:              Estimated ovulation date.
        confidence:       0.0–max confidence in ``day``.
        luteal_phase:     Luteal length (days) used for the back-calculation.
        luteal_estimates: Per-cycle luteal estimates that passed the range check.
    """

    day: date
    confidence: float
    luteal_phase: int
    luteal_estimates: tuple[int, ...] = ()


def estimate_luteal_phases(
    cycles: Sequence[CycleRecord],
    config: LutealPhaseConfig | None = None,
) -> list[int]:
    """Back-calculate luteal lengths from consecutive cycle pairs.

    Only pairs whose earlier cycle has a logged end date contribute.

    Args:
        cycles: Cycle records sorted by start date, oldest first.
        config: Luteal-phase settings.  Uses built-in defaults if None.

    Returns:
        Luteal estimates (days) that fall inside the valid range.
    """
    cfg = config or LutealPhaseConfig()
    estimates: list[int] = []
    for current, following in zip(cycles, cycles[1:]):
        if current.end_date is None:
            continue
        cycle_length = (following.start_date - current.start_date).days
        follicular = (current.end_date - current.start_date).days
        estimated = cycle_length - follicular - cfg.follicular_offset_days
        if cfg.valid_min_days <= estimated <= cfg.valid_max_days:
            estimates.append(estimated)
    return estimates


def luteal_phase_length(
    estimates: Sequence[int],
    regularity: CycleRegularity,
    config: LutealPhaseConfig | None = None,
) -> int:
    """Luteal length from the estimates, or the regularity default if there are none."""
    cfg = config or LutealPhaseConfig()
    if not estimates:
        return cfg.default_for(regularity)
    average = sum(estimates) / len(estimates)
    return min(max(round_half_up(average), cfg.clamp_min_days), cfg.clamp_max_days)


def ovulation_confidence(
    estimate_count: int,
    cycle_count: int,
    regularity: CycleRegularity,
    slope: float,
    config: ConfidenceConfig | None = None,
) -> float:
    """Tiered confidence score for an ovulation estimate.

    Args:
        estimate_count: Number of valid luteal estimates.
        cycle_count:    Number of cycle records the estimate was built from.
        regularity:     Regularity class of the recent cycles.
        slope:          Cycle-length trend slope (days per cycle).
        config:         Confidence tiers.  Uses built-in defaults if None.
    """
    cfg = config or ConfidenceConfig()

    if (
        estimate_count >= cfg.very_regular_min_estimates
        and regularity is CycleRegularity.very_regular
    ):
        confidence = cfg.very_regular
    elif estimate_count >= cfg.regular_min_estimates and regularity is CycleRegularity.regular:
        confidence = cfg.regular
    elif cycle_count >= cfg.established_min_cycles and regularity is not CycleRegularity.irregular:
        confidence = cfg.established
    elif cycle_count >= cfg.moderate_min_cycles:
        confidence = cfg.moderate
    else:
        confidence = cfg.baseline

    if abs(slope) < cfg.stable_trend_max_slope:
        confidence += cfg.stable_trend_boost

    # Rounded so tier sums such as 0.55 + 0.05 compare equal to 0.6
    return round(min(max(confidence, 0.0), cfg.max), 2)


def predict_ovulation(
    cycles: Sequence[CycleRecord],
    next_period_start: date,
    regularity: CycleRegularity,
    slope: float = 0.0,
    luteal_config: LutealPhaseConfig | None = None,
    confidence_config: ConfidenceConfig | None = None,
) -> OvulationEstimate:
    """Estimate the ovulation day preceding ``next_period_start``.

    Args:
        cycles:            Recent cycle records, oldest first.
        next_period_start: Projected start of the next period.
        regularity:        Regularity class of the recent cycles.
        slope:             Cycle-length trend slope.
        luteal_config:     Luteal-phase settings.
        confidence_config: Confidence tiers.

    Returns:
        OvulationEstimate with day, confidence and the luteal length used.
    """
    estimates = estimate_luteal_phases(cycles, luteal_config)
    luteal = luteal_phase_length(estimates, regularity, luteal_config)
    confidence = ovulation_confidence(
        len(estimates), len(cycles), regularity, slope, confidence_config
    )
    logger.debug(
        "Ovulation: %d luteal estimate(s) %s → luteal=%d, confidence=%.2f",
        len(estimates),
        estimates,
        luteal,
        confidence,
    )
    return OvulationEstimate(
        day=next_period_start - timedelta(days=luteal),
        confidence=confidence,
        luteal_phase=luteal,
        luteal_estimates=tuple(estimates),
    )
