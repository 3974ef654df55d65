"""Linear-trend projection of the next cycle length.

Fits an ordinary least-squares line through the recent cycle lengths
(x = 1..N) and projects it one step ahead.  The regression estimate is then
blended with the recency-weighted average so a single outlier cannot swing
the forecast on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NamedTuple, Sequence

from src.cycles.config_loader import TrendConfig
from src.cycles.prediction.statistics import weighted_average

logger = logging.getLogger("cyclecast.cycles.prediction.trend")


@dataclass(frozen=True)
class LinearRegressionResult:
    slope: float
    intercept: float

    def predict(self, x: float) -> float:
        return self.intercept + self.slope * x


class TrendProjection(NamedTuple):
    """Projected next cycle length and the slope it was derived from.

    Attributes:
        blended_length: Regression estimate blended with the weighted average,
                        or the weighted average alone for short histories.
        slope:          Days of change per cycle (0.0 when no trend was fit).
    """

    blended_length: float
    slope: float


def simple_linear_regression(x: Sequence[float], y: Sequence[float]) -> LinearRegressionResult:
    """Ordinary least squares for a single predictor.

    A zero denominator (every x identical) yields slope 0 and an intercept
    equal to the mean of y.
    """
    n = len(x)
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(xi * yi for xi, yi in zip(x, y))
    sum_x2 = sum(xi * xi for xi in x)

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return LinearRegressionResult(slope=0.0, intercept=sum_y / n)

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return LinearRegressionResult(slope=slope, intercept=intercept)


def predict_with_trend(
    lengths: Sequence[int],
    config: TrendConfig | None = None,
) -> TrendProjection:
    """Project the next cycle length from recent cycle lengths.

    Args:
        lengths: Recent cycle lengths in days, oldest first.  Must not be empty.
        config:  Trend settings.  Uses built-in defaults if None.

    Returns:
        TrendProjection of (blended_length, slope).
    """
    cfg = config or TrendConfig()
    average = weighted_average(lengths)

    if len(lengths) < cfg.min_samples:
        # Too few points for a meaningful slope
        return TrendProjection(blended_length=average, slope=0.0)

    x = [float(i) for i in range(1, len(lengths) + 1)]
    y = [float(length) for length in lengths]
    regression = simple_linear_regression(x, y)
    projected = regression.predict(len(lengths) + 1)

    blended = cfg.regression_weight * projected + cfg.average_weight * average
    logger.debug(
        "Trend over %d cycles: slope=%.3f projected=%.2f weighted=%.2f blended=%.2f",
        len(lengths),
        regression.slope,
        projected,
        average,
        blended,
    )
    return TrendProjection(blended_length=blended, slope=regression.slope)
