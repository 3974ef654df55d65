"""Human-readable labels for prediction values.

Used by the API layer so that clients show consistent wording.
"""

from __future__ import annotations

from datetime import date

from src.cycles.base import CycleRegularity

_REGULARITY_NAMES: dict[CycleRegularity, str] = {
    CycleRegularity.very_regular: "Very regular",
    CycleRegularity.regular: "Regular",
    CycleRegularity.somewhat_irregular: "Somewhat irregular",
    CycleRegularity.irregular: "Irregular",
}

# Confidence in the period-start forecast implied by the regularity class
_REGULARITY_CONFIDENCE: dict[CycleRegularity, float] = {
    CycleRegularity.very_regular: 0.9,
    CycleRegularity.regular: 0.75,
    CycleRegularity.somewhat_irregular: 0.6,
    CycleRegularity.irregular: 0.4,
}


def regularity_display_name(regularity: CycleRegularity) -> str:
    return _REGULARITY_NAMES[regularity]


def regularity_confidence(regularity: CycleRegularity) -> float:
    return _REGULARITY_CONFIDENCE[regularity]


def confidence_label(confidence: float) -> str:
    """Bucket a 0.0–1.0 confidence into High / Good / Fair / Low."""
    if confidence >= 0.8:
        return "High"
    if confidence >= 0.6:
        return "Good"
    if confidence >= 0.4:
        return "Fair"
    return "Low"


def days_left_label(target: date, today: date) -> str:
    """Countdown label for a target date, e.g. ``"3d left"`` or ``"Overdue by 2d"``."""
    diff = (target - today).days
    if diff < 0:
        return f"Overdue by {-diff}d"
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Tomorrow"
    return f"{diff}d left"
