"""Tests for reminder triggers and display labels."""

from __future__ import annotations

import threading
from datetime import date, timedelta

import pytest

from src.cycles.base import CycleRecord, CycleRegularity, Prediction
from src.cycles.config_loader import PredictionConfig
from src.cycles.labels import (
    confidence_label,
    days_left_label,
    regularity_confidence,
    regularity_display_name,
)
from src.cycles.prediction.engine import PredictionEngine
from src.cycles.reminders import (
    ReminderLedger,
    ReminderTrigger,
    due_reminders,
    reminder_key,
    reminder_triggers,
)


@pytest.fixture
def prediction(engine: PredictionEngine) -> Prediction:
    """Cold-start prediction with most likely start 2024-01-29."""
    result = engine.predict([CycleRecord(id=1, start_date=date(2024, 1, 1))])
    assert result is not None
    return result


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------


class TestReminderTriggers:
    def test_default_triggers(self, prediction: Prediction) -> None:
        triggers = reminder_triggers(prediction)
        assert triggers == [
            ReminderTrigger(days_before=5, target_date=date(2024, 1, 29), fire_on=date(2024, 1, 24)),
            ReminderTrigger(days_before=2, target_date=date(2024, 1, 29), fire_on=date(2024, 1, 27)),
        ]

    def test_default_days_follow_policy(
        self, prediction: Prediction, prediction_config: PredictionConfig
    ) -> None:
        configured = reminder_triggers(prediction, prediction_config.reminders.days_before)
        assert reminder_triggers(prediction) == configured
        assert [t.days_before for t in configured] == PredictionConfig.default().reminders.days_before

    def test_sorted_by_fire_date(self, prediction: Prediction) -> None:
        triggers = reminder_triggers(prediction, days_before=(1, 7, 3))
        assert [t.days_before for t in triggers] == [7, 3, 1]

    def test_no_prediction_no_triggers(self) -> None:
        assert reminder_triggers(None) == []

    def test_key_format(self) -> None:
        assert reminder_key(date(2024, 1, 29), 5) == "reminder_5d_for_20240129"


class TestDueReminders:
    def test_fires_once_per_target(self, prediction: Prediction) -> None:
        ledger = ReminderLedger()
        due = due_reminders(prediction, today=date(2024, 1, 24), ledger=ledger)
        assert [t.days_before for t in due] == [5]
        # Same day again — already delivered
        assert due_reminders(prediction, today=date(2024, 1, 24), ledger=ledger) == []

    def test_two_day_reminder(self, prediction: Prediction) -> None:
        ledger = ReminderLedger()
        due = due_reminders(prediction, today=date(2024, 1, 27), ledger=ledger)
        assert [t.days_before for t in due] == [2]

    def test_nothing_due_on_other_days(self, prediction: Prediction) -> None:
        ledger = ReminderLedger()
        assert due_reminders(prediction, today=date(2024, 1, 25), ledger=ledger) == []
        assert len(ledger) == 0

    def test_moved_target_rearms_reminders(
        self, engine: PredictionEngine, prediction: Prediction
    ) -> None:
        ledger = ReminderLedger()
        due_reminders(prediction, today=date(2024, 1, 24), ledger=ledger)

        # A second logged period moves the target date
        moved = engine.predict(
            [
                CycleRecord(id=1, start_date=date(2024, 1, 1)),
                CycleRecord(id=2, start_date=date(2024, 1, 30)),
            ]
        )
        assert moved is not None
        assert moved.most_likely_period_start != prediction.most_likely_period_start
        fire_on = moved.most_likely_period_start - timedelta(days=5)
        due = due_reminders(moved, today=fire_on, ledger=ledger)
        assert [t.target_date for t in due] == [moved.most_likely_period_start]

    def test_ledger_restores_delivered_keys(self, prediction: Prediction) -> None:
        ledger = ReminderLedger(delivered=[reminder_key(date(2024, 1, 29), 5)])
        assert not ledger.should_notify(date(2024, 1, 29), 5)
        assert ledger.should_notify(date(2024, 1, 29), 2)
        assert due_reminders(prediction, today=date(2024, 1, 24), ledger=ledger) == []

    def test_mark_and_clear(self) -> None:
        ledger = ReminderLedger()
        ledger.mark_notified(date(2024, 1, 29), 2)
        assert ledger.keys() == frozenset({"reminder_2d_for_20240129"})
        ledger.clear()
        assert ledger.should_notify(date(2024, 1, 29), 2)

    def test_concurrent_claims_deliver_once(self, prediction: Prediction) -> None:
        ledger = ReminderLedger()
        delivered: list[ReminderTrigger] = []
        lock = threading.Lock()

        def worker() -> None:
            due = due_reminders(prediction, today=date(2024, 1, 24), ledger=ledger)
            with lock:
                delivered.extend(due)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(delivered) == 1


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


class TestLabels:
    @pytest.mark.parametrize(
        "regularity, name, confidence",
        [
            (CycleRegularity.very_regular, "Very regular", 0.9),
            (CycleRegularity.regular, "Regular", 0.75),
            (CycleRegularity.somewhat_irregular, "Somewhat irregular", 0.6),
            (CycleRegularity.irregular, "Irregular", 0.4),
        ],
    )
    def test_regularity(self, regularity: CycleRegularity, name: str, confidence: float) -> None:
        assert regularity_display_name(regularity) == name
        assert regularity_confidence(regularity) == confidence

    @pytest.mark.parametrize(
        "confidence, label",
        [(0.95, "High"), (0.8, "High"), (0.7, "Good"), (0.6, "Good"), (0.45, "Fair"), (0.3, "Low")],
    )
    def test_confidence_label(self, confidence: float, label: str) -> None:
        assert confidence_label(confidence) == label

    @pytest.mark.parametrize(
        "today, label",
        [
            (date(2024, 1, 31), "Overdue by 2d"),
            (date(2024, 1, 29), "Today"),
            (date(2024, 1, 28), "Tomorrow"),
            (date(2024, 1, 20), "9d left"),
        ],
    )
    def test_days_left(self, today: date, label: str) -> None:
        assert days_left_label(date(2024, 1, 29), today) == label
