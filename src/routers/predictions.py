"""Cycle prediction endpoint.

Stateless: the caller posts its cycle history and receives the forecast.
An empty history is a normal response (``status="insufficient_data"``),
not an error.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter

from src.cycles.reminders import reminder_triggers
from src.dependencies import CurrentPredictionConfig, Engine
from src.models.cycles import PredictionRequest, PredictionResponse

router = APIRouter(prefix="/predictions", tags=["predictions"])
logger = logging.getLogger("cyclecast.api.predictions")


@router.post("", response_model=PredictionResponse)
async def create_prediction(
    body: PredictionRequest,
    engine: Engine,
    config: CurrentPredictionConfig,
) -> Any:
    records = [c.to_record() for c in body.cycles]
    prediction = engine.predict(records)
    logger.info(
        "Prediction for %d cycle(s): %s",
        len(records),
        prediction.cycle_regularity.value if prediction else "insufficient data",
    )
    triggers = reminder_triggers(prediction, config.reminders.days_before)
    return PredictionResponse.build(prediction, triggers, as_of=body.as_of or date.today())
