"""Pydantic models for cycle records and cycle predictions."""

from __future__ import annotations

from datetime import date

from pydantic import Field, model_validator

from src.cycles.base import (
    BleedingIntensity,
    BloodColor,
    CycleRecord,
    CycleRegularity,
    Prediction,
)
from src.cycles.labels import (
    confidence_label,
    days_left_label,
    regularity_display_name,
)
from src.cycles.reminders import ReminderTrigger
from src.models.base import CyclecastBase


# ---------- Input ----------

class CycleRecordIn(CyclecastBase):
    id: int | str | None = None
    start_date: date
    end_date: date | None = None
    bleeding_intensity: BleedingIntensity = BleedingIntensity.medium
    blood_color: BloodColor = BloodColor.bright_red
    pain_level: int = Field(default=0, ge=0, le=10)

    @model_validator(mode="after")
    def _end_not_before_start(self) -> CycleRecordIn:
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def to_record(self) -> CycleRecord:
        return CycleRecord(
            id=self.id,
            start_date=self.start_date,
            end_date=self.end_date,
            bleeding_intensity=self.bleeding_intensity,
            blood_color=self.blood_color,
            pain_level=self.pain_level,
        )


class PredictionRequest(CyclecastBase):
    cycles: list[CycleRecordIn] = Field(default_factory=list)
    as_of: date | None = None  # reference date for countdown labels; defaults to today


# ---------- Output ----------

class DateRangeRead(CyclecastBase):
    start: date
    end: date


class PredictionRead(CyclecastBase):
    min_period_start: date
    max_period_start: date
    most_likely_period_start: date
    period_length: int
    ovulation_day: date
    ovulation_confidence: float
    fertile_window: DateRangeRead
    cycle_length: int
    cycle_regularity: CycleRegularity


class PredictionLabels(CyclecastBase):
    regularity: str
    confidence: str
    days_left: str


class ReminderRead(CyclecastBase):
    days_before: int
    target_date: date
    fire_on: date


class PredictionResponse(CyclecastBase):
    status: str  # "ok" | "insufficient_data"
    prediction: PredictionRead | None = None
    labels: PredictionLabels | None = None
    reminders: list[ReminderRead] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        prediction: Prediction | None,
        reminders: list[ReminderTrigger],
        as_of: date,
    ) -> PredictionResponse:
        if prediction is None:
            return cls(status="insufficient_data")
        return cls(
            status="ok",
            prediction=PredictionRead.model_validate(prediction),
            labels=PredictionLabels(
                regularity=regularity_display_name(prediction.cycle_regularity),
                confidence=confidence_label(prediction.ovulation_confidence),
                days_left=days_left_label(prediction.most_likely_period_start, as_of),
            ),
            reminders=[ReminderRead.model_validate(r) for r in reminders],
        )
