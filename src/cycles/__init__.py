"""Cyclecast menstrual cycle prediction.

This package turns a history of recorded periods into a forecast of the next
period, ovulation day and fertile window.  Cycle data is sensitive health
data: the engine performs no I/O and keeps nothing between calls.

Subpackages:
    prediction/ — Statistics, trend, regularity, ovulation, fertile window, engine

Core modules:
    base          — CycleRecord / Prediction value types and enums
    config_loader — Load/validate/hot-reload prediction_config.yaml
    reminders     — Reminder triggers and delivery dedup
    labels        — Display labels for regularity and confidence
"""

from src.cycles.base import (
    BleedingIntensity,
    BloodColor,
    CycleRecord,
    CycleRegularity,
    DateRange,
    Prediction,
)
from src.cycles.config_loader import PredictionConfig, get_prediction_config
from src.cycles.prediction import PredictionEngine, predict_cycle

__all__ = [
    "BleedingIntensity",
    "BloodColor",
    "CycleRecord",
    "CycleRegularity",
    "DateRange",
    "Prediction",
    "PredictionConfig",
    "get_prediction_config",
    "PredictionEngine",
    "predict_cycle",
]
