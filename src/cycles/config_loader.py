"""Load, validate, and hot-reload the Cyclecast prediction policy.

The policy lives in ``prediction_config.yaml`` alongside this module.  At
startup it is loaded once and cached.  Call ``reload_prediction_config()`` to
re-read from disk after an operator edit — no restart required.

Usage::

    from src.cycles.config_loader import get_prediction_config

    config = get_prediction_config()
    config.window.recent_cycles              # 6
    config.regularity.very_regular_max       # 2.0
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from src.cycles.base import CycleRegularity

logger = logging.getLogger("cyclecast.cycles.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "prediction_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class WindowConfig:
    """How much history feeds the trend and ovulation estimators."""

    recent_cycles: int = 6


@dataclass
class ColdStartConfig:
    """Population averages used when a single cycle has been recorded."""

    avg_cycle_length: int = 28
    std_deviation: int = 4
    spread_std_multiplier: int = 2
    luteal_phase_days: int = 14
    fertile_days_before: int = 6
    fertile_days_after: int = 1
    ovulation_confidence: float = 0.3

    @property
    def spread_days(self) -> int:
        return self.std_deviation * self.spread_std_multiplier


@dataclass
class PeriodLengthConfig:
    """Bounds for the expected bleeding length."""

    default_days: int = 5
    min_days: int = 3
    max_days: int = 8
    record_min_days: int = 1
    record_max_days: int = 10


def _default_luteal_days() -> dict[CycleRegularity, int]:
    return {
        CycleRegularity.very_regular: 14,
        CycleRegularity.regular: 14,
        CycleRegularity.somewhat_irregular: 13,
        CycleRegularity.irregular: 12,
    }


@dataclass
class LutealPhaseConfig:
    """Luteal-phase back-calculation settings."""

    follicular_offset_days: int = 14
    valid_min_days: int = 10
    valid_max_days: int = 18
    clamp_min_days: int = 10
    clamp_max_days: int = 16
    defaults: dict[CycleRegularity, int] = field(default_factory=_default_luteal_days)

    def default_for(self, regularity: CycleRegularity) -> int:
        return self.defaults[regularity]


@dataclass
class TrendConfig:
    """Regression / weighted-average blending."""

    min_samples: int = 3
    regression_weight: float = 0.7
    min_cycle_days: int = 1

    @property
    def average_weight(self) -> float:
        return 1.0 - self.regression_weight


@dataclass
class RegularityConfig:
    """Standard-deviation thresholds and the prediction spread per class."""

    very_regular_max: float = 2.0
    regular_max: float = 4.0
    somewhat_irregular_max: float = 6.0
    very_regular_spread_days: int = 1
    regular_min_spread_days: int = 2
    irregular_min_spread_days: int = 3
    irregular_spread_multiplier: float = 1.5


@dataclass
class ConfidenceConfig:
    """Ovulation confidence tiers (highest matching tier wins)."""

    very_regular: float = 0.85
    very_regular_min_estimates: int = 3
    regular: float = 0.75
    regular_min_estimates: int = 2
    established: float = 0.65
    established_min_cycles: int = 4
    moderate: float = 0.55
    moderate_min_cycles: int = 3
    baseline: float = 0.40
    stable_trend_max_slope: float = 1.0
    stable_trend_boost: float = 0.05
    max: float = 0.95


@dataclass
class FertileWindowConfig:
    """Fertile window width around the ovulation day."""

    days_before: int = 5
    days_before_uncertain: int = 6
    days_after_confident: int = 1
    days_after_uncertain: int = 2
    high_confidence: float = 0.8
    good_confidence: float = 0.6
    post_ovulation_confidence: float = 0.7


@dataclass
class RemindersConfig:
    """Days before the most likely period start on which to remind."""

    days_before: list[int] = field(default_factory=lambda: [5, 2])


@dataclass
class PredictionConfig:
    """Complete, validated prediction policy.

    This is the single in-memory representation of prediction_config.yaml.
    The engine and every estimator read from this object.
    """

    version: str = "1.0"
    window: WindowConfig = field(default_factory=WindowConfig)
    cold_start: ColdStartConfig = field(default_factory=ColdStartConfig)
    period_length: PeriodLengthConfig = field(default_factory=PeriodLengthConfig)
    luteal_phase: LutealPhaseConfig = field(default_factory=LutealPhaseConfig)
    trend: TrendConfig = field(default_factory=TrendConfig)
    regularity: RegularityConfig = field(default_factory=RegularityConfig)
    confidence: ConfidenceConfig = field(default_factory=ConfidenceConfig)
    fertile_window: FertileWindowConfig = field(default_factory=FertileWindowConfig)
    reminders: RemindersConfig = field(default_factory=RemindersConfig)
    _raw: dict = field(default_factory=dict, repr=False)

    @classmethod
    def default(cls) -> PredictionConfig:
        """Built-in policy, without touching disk."""
        return cls()


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when prediction_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Prediction config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigValidationError(f"{path} must contain a mapping at the top level")
    return raw


def _validate_and_build(raw: dict) -> PredictionConfig:
    """Validate the raw YAML dict and construct a PredictionConfig.

    Missing sections and keys fall back to the built-in defaults.  All
    problems are collected and reported together.

    Raises:
        ConfigValidationError: If any value is of the wrong type or out of range.
    """
    errors: list[str] = []

    def _section(name: str) -> dict:
        value = raw.get(name) or {}
        if not isinstance(value, dict):
            errors.append(f"'{name}' must be a mapping")
            return {}
        return value

    def _subsection(parent: dict, name: str, path: str) -> dict:
        value = parent.get(name) or {}
        if not isinstance(value, dict):
            errors.append(f"{path}.{name} must be a mapping")
            return {}
        return value

    def _int(d: dict, key: str, section: str, default: int, minimum: int = 0) -> int:
        value = d.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"{section}.{key} must be an integer, got {value!r}")
            return default
        if value < minimum:
            errors.append(f"{section}.{key} = {value} must be >= {minimum}")
        return value

    def _float(
        d: dict,
        key: str,
        section: str,
        default: float,
        low: float = 0.0,
        high: float | None = None,
    ) -> float:
        value = d.get(key, default)
        if isinstance(value, bool):
            errors.append(f"{section}.{key} must be a number, got {value!r}")
            return default
        try:
            f = float(value)
        except (TypeError, ValueError):
            errors.append(f"{section}.{key} must be a number, got {value!r}")
            return default
        if f < low or (high is not None and f > high):
            bound = f"[{low}, {high}]" if high is not None else f">= {low}"
            errors.append(f"{section}.{key} = {f} is out of range {bound}")
        return f

    version = str(raw.get("version", "1.0"))

    # ── Window ──
    w_raw = _section("window")
    window = WindowConfig(
        recent_cycles=_int(w_raw, "recent_cycles", "window", 6, minimum=2),
    )

    # ── Cold start ──
    cs_raw = _section("cold_start")
    cold_start = ColdStartConfig(
        avg_cycle_length=_int(cs_raw, "avg_cycle_length", "cold_start", 28, minimum=1),
        std_deviation=_int(cs_raw, "std_deviation", "cold_start", 4),
        spread_std_multiplier=_int(cs_raw, "spread_std_multiplier", "cold_start", 2),
        luteal_phase_days=_int(cs_raw, "luteal_phase_days", "cold_start", 14),
        fertile_days_before=_int(cs_raw, "fertile_days_before", "cold_start", 6),
        fertile_days_after=_int(cs_raw, "fertile_days_after", "cold_start", 1),
        ovulation_confidence=_float(
            cs_raw, "ovulation_confidence", "cold_start", 0.3, high=1.0
        ),
    )

    # ── Period length ──
    pl_raw = _section("period_length")
    period_length = PeriodLengthConfig(
        default_days=_int(pl_raw, "default_days", "period_length", 5, minimum=1),
        min_days=_int(pl_raw, "min_days", "period_length", 3, minimum=1),
        max_days=_int(pl_raw, "max_days", "period_length", 8, minimum=1),
        record_min_days=_int(pl_raw, "record_min_days", "period_length", 1),
        record_max_days=_int(pl_raw, "record_max_days", "period_length", 10),
    )
    if period_length.min_days > period_length.max_days:
        errors.append("period_length.min_days must not exceed period_length.max_days")
    if period_length.record_min_days > period_length.record_max_days:
        errors.append(
            "period_length.record_min_days must not exceed period_length.record_max_days"
        )

    # ── Luteal phase ──
    lp_raw = _section("luteal_phase")
    defaults_raw = _subsection(lp_raw, "defaults", "luteal_phase")
    luteal_defaults = _default_luteal_days()
    for key, value in defaults_raw.items():
        try:
            regularity = CycleRegularity[key]
        except KeyError:
            errors.append(f"luteal_phase.defaults.{key} is not a known regularity class")
            continue
        luteal_defaults[regularity] = _int(
            defaults_raw, key, "luteal_phase.defaults", luteal_defaults[regularity], minimum=1
        )
    luteal_phase = LutealPhaseConfig(
        follicular_offset_days=_int(lp_raw, "follicular_offset_days", "luteal_phase", 14),
        valid_min_days=_int(lp_raw, "valid_min_days", "luteal_phase", 10),
        valid_max_days=_int(lp_raw, "valid_max_days", "luteal_phase", 18),
        clamp_min_days=_int(lp_raw, "clamp_min_days", "luteal_phase", 10),
        clamp_max_days=_int(lp_raw, "clamp_max_days", "luteal_phase", 16),
        defaults=luteal_defaults,
    )
    if luteal_phase.valid_min_days > luteal_phase.valid_max_days:
        errors.append("luteal_phase.valid_min_days must not exceed valid_max_days")
    if luteal_phase.clamp_min_days > luteal_phase.clamp_max_days:
        errors.append("luteal_phase.clamp_min_days must not exceed clamp_max_days")

    # ── Trend ──
    tr_raw = _section("trend")
    trend = TrendConfig(
        min_samples=_int(tr_raw, "min_samples", "trend", 3, minimum=2),
        regression_weight=_float(tr_raw, "regression_weight", "trend", 0.7, high=1.0),
        min_cycle_days=_int(tr_raw, "min_cycle_days", "trend", 1, minimum=1),
    )

    # ── Regularity ──
    rg_raw = _section("regularity")
    th_raw = _subsection(rg_raw, "thresholds", "regularity")
    sp_raw = _subsection(rg_raw, "spread", "regularity")
    regularity = RegularityConfig(
        very_regular_max=_float(th_raw, "very_regular", "regularity.thresholds", 2.0),
        regular_max=_float(th_raw, "regular", "regularity.thresholds", 4.0),
        somewhat_irregular_max=_float(
            th_raw, "somewhat_irregular", "regularity.thresholds", 6.0
        ),
        very_regular_spread_days=_int(sp_raw, "very_regular_days", "regularity.spread", 1),
        regular_min_spread_days=_int(sp_raw, "regular_min_days", "regularity.spread", 2),
        irregular_min_spread_days=_int(sp_raw, "irregular_min_days", "regularity.spread", 3),
        irregular_spread_multiplier=_float(
            sp_raw, "irregular_multiplier", "regularity.spread", 1.5
        ),
    )
    if not (
        regularity.very_regular_max
        <= regularity.regular_max
        <= regularity.somewhat_irregular_max
    ):
        errors.append("regularity.thresholds must be in ascending order")

    # ── Confidence ──
    cf_raw = _section("confidence")
    confidence = ConfidenceConfig(
        very_regular=_float(cf_raw, "very_regular", "confidence", 0.85, high=1.0),
        very_regular_min_estimates=_int(cf_raw, "very_regular_min_estimates", "confidence", 3),
        regular=_float(cf_raw, "regular", "confidence", 0.75, high=1.0),
        regular_min_estimates=_int(cf_raw, "regular_min_estimates", "confidence", 2),
        established=_float(cf_raw, "established", "confidence", 0.65, high=1.0),
        established_min_cycles=_int(cf_raw, "established_min_cycles", "confidence", 4),
        moderate=_float(cf_raw, "moderate", "confidence", 0.55, high=1.0),
        moderate_min_cycles=_int(cf_raw, "moderate_min_cycles", "confidence", 3),
        baseline=_float(cf_raw, "baseline", "confidence", 0.40, high=1.0),
        stable_trend_max_slope=_float(cf_raw, "stable_trend_max_slope", "confidence", 1.0),
        stable_trend_boost=_float(cf_raw, "stable_trend_boost", "confidence", 0.05, high=1.0),
        max=_float(cf_raw, "max", "confidence", 0.95, high=1.0),
    )

    # ── Fertile window ──
    fw_raw = _section("fertile_window")
    fertile_window = FertileWindowConfig(
        days_before=_int(fw_raw, "days_before", "fertile_window", 5),
        days_before_uncertain=_int(fw_raw, "days_before_uncertain", "fertile_window", 6),
        days_after_confident=_int(fw_raw, "days_after_confident", "fertile_window", 1),
        days_after_uncertain=_int(fw_raw, "days_after_uncertain", "fertile_window", 2),
        high_confidence=_float(fw_raw, "high_confidence", "fertile_window", 0.8, high=1.0),
        good_confidence=_float(fw_raw, "good_confidence", "fertile_window", 0.6, high=1.0),
        post_ovulation_confidence=_float(
            fw_raw, "post_ovulation_confidence", "fertile_window", 0.7, high=1.0
        ),
    )

    # ── Reminders ──
    rm_raw = _section("reminders")
    days_before_raw = rm_raw.get("days_before", [5, 2])
    reminder_days: list[int] = []
    if not isinstance(days_before_raw, list):
        errors.append("reminders.days_before must be a list of integers")
    else:
        for value in days_before_raw:
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                errors.append(f"reminders.days_before entries must be integers >= 0, got {value!r}")
                continue
            reminder_days.append(value)
    if len(set(reminder_days)) != len(reminder_days):
        logger.warning("reminders.days_before contains duplicates: %s", reminder_days)
        reminder_days = list(dict.fromkeys(reminder_days))
    reminders = RemindersConfig(days_before=reminder_days)

    if errors:
        raise ConfigValidationError(
            f"prediction_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return PredictionConfig(
        version=version,
        window=window,
        cold_start=cold_start,
        period_length=period_length,
        luteal_phase=luteal_phase,
        trend=trend,
        regularity=regularity,
        confidence=confidence,
        fertile_window=fertile_window,
        reminders=reminders,
        _raw=raw,
    )


def load_prediction_config(path: Path | None = None) -> PredictionConfig:
    """Load and validate the prediction policy from disk.

    Args:
        path: Override path to YAML. Uses the bundled prediction_config.yaml by default.

    Returns:
        Validated PredictionConfig instance.
    """
    target = path or _CONFIG_PATH
    raw: dict[str, Any] = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded prediction config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: PredictionConfig | None = None
_config_lock = threading.Lock()


def get_prediction_config() -> PredictionConfig:
    """Return the global PredictionConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_prediction_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_prediction_config()
    return _config


def reload_prediction_config(path: Path | None = None) -> PredictionConfig:
    """Reload the policy from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_prediction_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info(
        "Reloaded prediction config: %s → %s",
        old_version,
        new_config.version,
    )
    return new_config
