"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from src.config import Settings, get_settings
from src.cycles.config_loader import PredictionConfig, get_prediction_config
from src.cycles.prediction.engine import PredictionEngine


def get_prediction_engine(
    config: Annotated[PredictionConfig, Depends(get_prediction_config)],
) -> PredictionEngine:
    """Engine bound to the current policy (picks up hot reloads)."""
    return PredictionEngine(config)


# Annotated shortcuts for route signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
CurrentPredictionConfig = Annotated[PredictionConfig, Depends(get_prediction_config)]
Engine = Annotated[PredictionEngine, Depends(get_prediction_engine)]
