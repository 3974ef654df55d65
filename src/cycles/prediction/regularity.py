"""Cycle regularity classification and the matching prediction spread."""

from __future__ import annotations

from src.cycles.base import CycleRegularity
from src.cycles.config_loader import RegularityConfig
from src.cycles.prediction.statistics import round_half_up


def classify_regularity(
    standard_deviation: float,
    config: RegularityConfig | None = None,
) -> CycleRegularity:
    """Map the std dev of recent cycle lengths to a regularity class.

    Each band includes its upper bound: exactly 2.0 is very regular, exactly
    4.0 is regular, exactly 6.0 is somewhat irregular.
    """
    cfg = config or RegularityConfig()
    if standard_deviation <= cfg.very_regular_max:
        return CycleRegularity.very_regular
    if standard_deviation <= cfg.regular_max:
        return CycleRegularity.regular
    if standard_deviation <= cfg.somewhat_irregular_max:
        return CycleRegularity.somewhat_irregular
    return CycleRegularity.irregular


def spread_days(
    regularity: CycleRegularity,
    standard_deviation: float,
    config: RegularityConfig | None = None,
) -> int:
    """Half-width, in days, of the predicted period-start window."""
    cfg = config or RegularityConfig()
    if regularity is CycleRegularity.very_regular:
        return cfg.very_regular_spread_days
    if regularity is CycleRegularity.regular:
        return max(cfg.regular_min_spread_days, round_half_up(standard_deviation))
    base = max(cfg.irregular_min_spread_days, round_half_up(standard_deviation))
    # Ties round up: 7 x 1.5 gives 11, not 10.
    return round_half_up(base * cfg.irregular_spread_multiplier)
