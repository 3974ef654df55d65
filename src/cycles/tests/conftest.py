"""Shared fixtures for cycle prediction tests."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.cycles.base import CycleRecord
from src.cycles.config_loader import (
    PredictionConfig,
    load_prediction_config,
    reload_prediction_config,
)
from src.cycles.prediction.engine import PredictionEngine

# Anchor date used across tests (2024 is a leap year — exercises Feb 29)
TEST_START = date(2024, 1, 1)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def prediction_config() -> PredictionConfig:
    """Load the bundled prediction_config.yaml."""
    return load_prediction_config()


@pytest.fixture
def default_config() -> PredictionConfig:
    """Built-in policy, no disk access."""
    return PredictionConfig.default()


@pytest.fixture
def engine(default_config: PredictionConfig) -> PredictionEngine:
    return PredictionEngine(default_config)


@pytest.fixture
def restore_global_config():
    """Put the bundled config back into the global singleton after the test."""
    yield
    reload_prediction_config()


# ---------------------------------------------------------------------------
# History builders
# ---------------------------------------------------------------------------


def build_history(
    lengths: list[int],
    period_days: int | None = None,
    start: date = TEST_START,
) -> list[CycleRecord]:
    """Build len(lengths) + 1 cycles whose start dates are ``lengths`` apart.

    If ``period_days`` is given every cycle gets an end date that many days
    after its start; otherwise end dates are left unknown.
    """
    records = []
    current = start
    for i in range(len(lengths) + 1):
        end = current + timedelta(days=period_days) if period_days is not None else None
        records.append(CycleRecord(id=i + 1, start_date=current, end_date=end))
        if i < len(lengths):
            current += timedelta(days=lengths[i])
    return records


@pytest.fixture
def regular_history() -> list[CycleRecord]:
    """Six cycles exactly 28 days apart, each with a 5-day period."""
    return build_history([28] * 5, period_days=5)
