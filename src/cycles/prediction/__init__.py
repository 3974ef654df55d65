"""Cycle prediction pipeline.

Modules:
    statistics     — Mean, median, population std dev, recency-weighted average
    trend          — Least-squares trend projection blended with the weighted average
    regularity     — Std dev → regularity class, and the start-window spread
    ovulation      — Luteal-phase back-calculation and ovulation confidence
    fertile_window — Fertile date range around the ovulation day
    engine         — Orchestrator (empty / cold start / advanced)
"""

from src.cycles.prediction.engine import PredictionEngine, predict_cycle
from src.cycles.prediction.fertile_window import calculate_fertile_window
from src.cycles.prediction.ovulation import OvulationEstimate, predict_ovulation
from src.cycles.prediction.regularity import classify_regularity
from src.cycles.prediction.statistics import CycleStatistics, calculate_cycle_statistics
from src.cycles.prediction.trend import TrendProjection, predict_with_trend

__all__ = [
    "PredictionEngine",
    "predict_cycle",
    "CycleStatistics",
    "calculate_cycle_statistics",
    "TrendProjection",
    "predict_with_trend",
    "classify_regularity",
    "OvulationEstimate",
    "predict_ovulation",
    "calculate_fertile_window",
]
