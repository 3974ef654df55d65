"""Fertile window around the estimated ovulation day.

The window narrows when the ovulation estimate is confident and the cycles
are regular, and widens by a day on either side otherwise.
"""

from __future__ import annotations

from datetime import date, timedelta

from src.cycles.base import CycleRegularity, DateRange
from src.cycles.config_loader import FertileWindowConfig


def calculate_fertile_window(
    ovulation_day: date,
    confidence: float,
    regularity: CycleRegularity,
    config: FertileWindowConfig | None = None,
) -> DateRange:
    """Return the inclusive fertile window for an ovulation estimate.

    Args:
        ovulation_day: Estimated ovulation date.
        confidence:    Confidence in ``ovulation_day``.
        regularity:    Regularity class of recent cycles.
        config:        Window settings.  Uses built-in defaults if None.
    """
    cfg = config or FertileWindowConfig()

    if (confidence > cfg.high_confidence and regularity is CycleRegularity.very_regular) or (
        confidence > cfg.good_confidence and regularity is not CycleRegularity.irregular
    ):
        before = cfg.days_before
    else:
        before = cfg.days_before_uncertain

    if confidence > cfg.post_ovulation_confidence:
        after = cfg.days_after_confident
    else:
        after = cfg.days_after_uncertain

    return DateRange(
        start=ovulation_day - timedelta(days=before),
        end=ovulation_day + timedelta(days=after),
    )
