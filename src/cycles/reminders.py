"""Period reminder triggers derived from a prediction.

Reminders fire a fixed number of days before the most likely period start
(5 and 2 by default).  Delivery (push, e-mail, alarm) is the caller's job;
this module only decides *which* reminders are due and remembers which ones
were already sent, so a reminder is never repeated for the same target date.

A changed ``most_likely_period_start`` produces new dedup keys, so reminders
are re-derived automatically whenever the prediction moves.

Usage::

    ledger = ReminderLedger()
    for trigger in due_reminders(prediction, today=date.today(), ledger=ledger):
        notifier.send(trigger)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from src.cycles.base import Prediction
from src.cycles.config_loader import RemindersConfig

logger = logging.getLogger("cyclecast.cycles.reminders")


@dataclass(frozen=True)
class ReminderTrigger:
    """A reminder scheduled ahead of a predicted period.

    Attributes:
        days_before: Days between ``fire_on`` and ``target_date``.
        target_date: Most likely period start the reminder refers to.
        fire_on:     Calendar date on which the reminder is due.
    """

    days_before: int
    target_date: date
    fire_on: date

    @property
    def key(self) -> str:
        return reminder_key(self.target_date, self.days_before)


def reminder_key(target_date: date, days_before: int) -> str:
    """Dedup key for a reminder, e.g. ``reminder_5d_for_20240129``."""
    return f"reminder_{days_before}d_for_{target_date:%Y%m%d}"


def reminder_triggers(
    prediction: Prediction | None,
    days_before: Iterable[int] | None = None,
) -> list[ReminderTrigger]:
    """All reminder triggers for a prediction, earliest first.

    Only ``most_likely_period_start`` is consulted.  Returns ``[]`` when there
    is no prediction.  ``days_before`` defaults to the policy's
    ``reminders.days_before``.
    """
    if prediction is None:
        return []
    if days_before is None:
        days_before = RemindersConfig().days_before
    target = prediction.most_likely_period_start
    triggers = [
        ReminderTrigger(days_before=d, target_date=target, fire_on=target - timedelta(days=d))
        for d in days_before
    ]
    return sorted(triggers, key=lambda t: t.fire_on)


class ReminderLedger:
    """Thread-safe in-memory record of reminders already delivered.

    Not a replacement for durable storage: callers that must survive a
    restart should persist ``keys()`` and pass them back in.
    """

    def __init__(self, delivered: Iterable[str] = ()) -> None:
        self._delivered: set[str] = set(delivered)
        self._lock = threading.Lock()

    def should_notify(self, target_date: date, days_before: int) -> bool:
        with self._lock:
            return reminder_key(target_date, days_before) not in self._delivered

    def mark_notified(self, target_date: date, days_before: int) -> None:
        with self._lock:
            self._delivered.add(reminder_key(target_date, days_before))

    def claim(self, trigger: ReminderTrigger) -> bool:
        """Atomically mark ``trigger`` delivered; False if it already was."""
        with self._lock:
            if trigger.key in self._delivered:
                return False
            self._delivered.add(trigger.key)
            return True

    def keys(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._delivered)

    def clear(self) -> None:
        with self._lock:
            self._delivered.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._delivered)


def due_reminders(
    prediction: Prediction | None,
    today: date,
    ledger: ReminderLedger,
    days_before: Iterable[int] | None = None,
) -> list[ReminderTrigger]:
    """Reminders due on ``today`` that have not been delivered yet.

    Returned triggers are marked as delivered in ``ledger``.
    """
    due: list[ReminderTrigger] = []
    for trigger in reminder_triggers(prediction, days_before):
        if trigger.fire_on != today:
            continue
        if ledger.claim(trigger):
            due.append(trigger)
        else:
            logger.debug("Reminder %s already delivered; skipping", trigger.key)
    return due
