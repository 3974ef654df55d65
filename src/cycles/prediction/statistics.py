"""Descriptive statistics over a sequence of cycle lengths.

Cycle lengths are whole days between consecutive period start dates, in
chronological order (oldest first).
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class CycleStatistics:
    """Summary of a cycle-length sequence.

    Attributes:
        mean:               Arithmetic mean.
        median:             Middle value; mean of the two central values
                            (truncated) for an even count.
        standard_deviation: Population standard deviation (divides by N).
        weighted_average:   Recency-weighted mean, weight i+1 for the i-th
                            cycle so later cycles count more.
    """

    mean: float
    median: int
    standard_deviation: float
    weighted_average: float


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up.

    ``round()`` uses banker's rounding, which would turn 28.5 into 28.
    """
    return math.floor(value + 0.5)


def integer_median(values: Sequence[int]) -> int:
    """Median of whole-day values, truncating the average of the central pair."""
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) // 2
    return ordered[mid]


def weighted_average(lengths: Sequence[int]) -> float:
    """Recency-weighted average: sum(length[i] * (i+1)) / sum(i+1)."""
    weights = range(1, len(lengths) + 1)
    weighted_sum = sum(length * w for length, w in zip(lengths, weights))
    return weighted_sum / sum(weights)


def calculate_cycle_statistics(lengths: Sequence[int]) -> CycleStatistics:
    """Compute mean, median, population std dev and weighted average.

    Args:
        lengths: Cycle lengths in days, oldest first.  Must not be empty.

    Returns:
        CycleStatistics for the sequence.

    Raises:
        ValueError: If ``lengths`` is empty.
    """
    if not lengths:
        raise ValueError("calculate_cycle_statistics requires at least one cycle length")

    return CycleStatistics(
        mean=float(statistics.mean(lengths)),
        median=integer_median(lengths),
        standard_deviation=float(statistics.pstdev(lengths)),
        weighted_average=weighted_average(lengths),
    )
