"""Canonical data models for the Cyclecast prediction engine.

``CycleRecord`` is the input type supplied by the caller (storage layer, API
layer, tests).  ``Prediction`` is the output value produced by the engine.
Both are frozen: the engine never mutates the records it is given, and two
predictions built from the same history compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class BleedingIntensity(str, Enum):
    heavy = "Heavy"
    medium = "Medium"
    light = "Light"
    spotting = "Spotting"


class BloodColor(str, Enum):
    bright_red = "Bright Red"
    dark_red = "Dark Red"
    brown = "Brown"


class CycleRegularity(str, Enum):
    """Coarse classification of cycle-length variability."""

    very_regular = "VERY_REGULAR"
    regular = "REGULAR"
    somewhat_irregular = "SOMEWHAT_IRREGULAR"
    irregular = "IRREGULAR"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CycleRecord:
    """A single recorded period.

    Attributes:
        id:                 Caller-owned identifier.
        start_date:         First day of bleeding.
        end_date:           Last day of bleeding.  None while the period is
                            ongoing or was never logged.
        bleeding_intensity: Heavy / Medium / Light / Spotting.
        blood_color:        Bright Red / Dark Red / Brown.
        pain_level:         Self-reported pain, 0–10.
    """

    id: int | str | None
    start_date: date
    end_date: date | None = None
    bleeding_intensity: BleedingIntensity = BleedingIntensity.medium
    blood_color: BloodColor = BloodColor.bright_red
    pain_level: int = 0

    @property
    def period_days(self) -> int | None:
        """Days between start and end, or None if the end is unknown."""
        if self.end_date is None:
            return None
        return (self.end_date - self.start_date).days


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar dates."""

    start: date
    end: date

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, date):
            return False
        return self.start <= item <= self.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class Prediction:
    """Forecast of the next cycle.

    Attributes:
        min_period_start:        Earliest plausible next period start.
        max_period_start:        Latest plausible next period start.
        most_likely_period_start: Best estimate for the next period start.
        period_length:           Expected bleeding length in days (3–8).
        ovulation_day:           Estimated ovulation date.
        ovulation_confidence:    0.0–0.95 confidence in ``ovulation_day``.
        fertile_window:          Inclusive fertile date range.
        cycle_length:            Projected cycle length in days.
        cycle_regularity:        Regularity class of recent cycles.
    """

    min_period_start: date
    max_period_start: date
    most_likely_period_start: date
    period_length: int
    ovulation_day: date
    ovulation_confidence: float
    fertile_window: DateRange
    cycle_length: int
    cycle_regularity: CycleRegularity
