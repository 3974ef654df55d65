"""Cycle prediction engine.

Turns a history of recorded periods into a forecast of the next period
start window, ovulation day, fertile window and regularity class.

Three paths, chosen by history size:

- **Empty**: no cycles → no prediction (``None``).  Callers render this as
  "not enough data", not as an error.
- **Cold start**: one cycle → population averages (28 ± 4 days).
- **Advanced**: two or more cycles → the most recent cycles (6 by default)
  feed the trend projection, regularity classifier and luteal-phase
  back-calculation.

The engine is a pure function of its input: it sorts a copy of the records
by start date, never mutates them, and keeps no state between calls.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, Sequence

from src.cycles.base import CycleRecord, CycleRegularity, DateRange, Prediction
from src.cycles.config_loader import PredictionConfig, get_prediction_config
from src.cycles.prediction.fertile_window import calculate_fertile_window
from src.cycles.prediction.ovulation import predict_ovulation
from src.cycles.prediction.regularity import classify_regularity, spread_days
from src.cycles.prediction.statistics import (
    calculate_cycle_statistics,
    integer_median,
    round_half_up,
)
from src.cycles.prediction.trend import predict_with_trend

logger = logging.getLogger("cyclecast.cycles.prediction.engine")


def cycle_lengths(cycles: Sequence[CycleRecord]) -> list[int]:
    """Days between consecutive start dates of cycles sorted oldest first."""
    return [
        (following.start_date - current.start_date).days
        for current, following in zip(cycles, cycles[1:])
    ]


class PredictionEngine:
    """Predict the next cycle from a history of recorded periods.

    Usage::

        engine = PredictionEngine()
        prediction = engine.predict(records)
        if prediction is None:
            ...  # not enough data yet
        else:
            print(prediction.most_likely_period_start)
    """

    def __init__(self, config: PredictionConfig | None = None) -> None:
        self._config = config or get_prediction_config()

    @property
    def config(self) -> PredictionConfig:
        return self._config

    def predict(self, cycles: Iterable[CycleRecord]) -> Prediction | None:
        """Generate a prediction from recorded cycles in any order.

        Args:
            cycles: Recorded periods.  Sorted by start date internally.

        Returns:
            Prediction, or None for an empty history.
        """
        ordered = sorted(cycles, key=lambda c: c.start_date)
        if not ordered:
            logger.debug("Empty cycle history; no prediction")
            return None

        last_start = ordered[-1].start_date
        period_length = self.period_length(ordered)

        if len(ordered) == 1:
            logger.debug("Single recorded cycle; using cold-start averages")
            return self._cold_start(last_start, period_length)
        return self._advanced(ordered, last_start, period_length)

    def period_length(self, cycles: Sequence[CycleRecord]) -> int:
        """Median logged period length, clamped; default when none are logged.

        Records without an end date are skipped.
        """
        pl = self._config.period_length
        lengths = [
            min(max(c.period_days, pl.record_min_days), pl.record_max_days)
            for c in cycles
            if c.period_days is not None
        ]
        if not lengths:
            return pl.default_days
        return min(max(integer_median(lengths), pl.min_days), pl.max_days)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def _cold_start(self, last_start: date, period_length: int) -> Prediction:
        cs = self._config.cold_start
        most_likely = last_start + timedelta(days=cs.avg_cycle_length)
        ovulation_day = most_likely - timedelta(days=cs.luteal_phase_days)

        return Prediction(
            min_period_start=most_likely - timedelta(days=cs.spread_days),
            max_period_start=most_likely + timedelta(days=cs.spread_days),
            most_likely_period_start=most_likely,
            period_length=period_length,
            ovulation_day=ovulation_day,
            ovulation_confidence=min(cs.ovulation_confidence, self._config.confidence.max),
            fertile_window=DateRange(
                start=ovulation_day - timedelta(days=cs.fertile_days_before),
                end=ovulation_day + timedelta(days=cs.fertile_days_after),
            ),
            cycle_length=cs.avg_cycle_length,
            cycle_regularity=CycleRegularity.irregular,
        )

    def _advanced(
        self,
        cycles: Sequence[CycleRecord],
        last_start: date,
        period_length: int,
    ) -> Prediction:
        cfg = self._config
        recent = list(cycles[-cfg.window.recent_cycles:])
        lengths = cycle_lengths(recent)
        if not lengths:
            logger.warning(
                "No cycle lengths derivable from %d cycles; using cold start", len(recent)
            )
            return self._cold_start(last_start, period_length)

        blended, slope = predict_with_trend(lengths, cfg.trend)
        stats = calculate_cycle_statistics(lengths)
        regularity = classify_regularity(stats.standard_deviation, cfg.regularity)

        cycle_length = max(round_half_up(blended), cfg.trend.min_cycle_days)
        most_likely = last_start + timedelta(days=cycle_length)
        spread = spread_days(regularity, stats.standard_deviation, cfg.regularity)

        ovulation = predict_ovulation(
            recent,
            most_likely,
            regularity,
            slope,
            luteal_config=cfg.luteal_phase,
            confidence_config=cfg.confidence,
        )
        fertile = calculate_fertile_window(
            ovulation.day, ovulation.confidence, regularity, cfg.fertile_window
        )

        logger.debug(
            "Advanced prediction from %d cycles: lengths=%s sd=%.2f regularity=%s "
            "cycle_length=%d spread=±%d",
            len(recent),
            lengths,
            stats.standard_deviation,
            regularity.value,
            cycle_length,
            spread,
        )

        return Prediction(
            min_period_start=most_likely - timedelta(days=spread),
            max_period_start=most_likely + timedelta(days=spread),
            most_likely_period_start=most_likely,
            period_length=period_length,
            ovulation_day=ovulation.day,
            ovulation_confidence=ovulation.confidence,
            fertile_window=fertile,
            cycle_length=cycle_length,
            cycle_regularity=regularity,
        )


def predict_cycle(
    cycles: Iterable[CycleRecord],
    config: PredictionConfig | None = None,
) -> Prediction | None:
    """Convenience wrapper: ``PredictionEngine(config).predict(cycles)``."""
    return PredictionEngine(config).predict(cycles)
