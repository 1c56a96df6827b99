"""Body-fat percentage estimation.

Two independent families of estimators are provided:

Anthropometric (tape measure + scale weight), first applicable rule wins:
    1. navy  - U.S. Navy circumference formula (waist/neck, + hip for women)
    2. ymca  - YMCA waist/weight regression
    3. bmi   - BMI-based regression (height + weight only)

Scale-assisted (bioimpedance outputs):
    1. lbm   - lean body mass reported directly
    2. tbw   - total body water % divided by an assumed FFM hydration

Both families add the user's calibration offset and clamp the result to the
plausible 3-60% band. "No estimate" is returned as ``None``, never 0.

Each chain is an ordered tuple of ``BodyFatRule`` objects so every rule can be
tested on its own and new rules slot in without touching the others.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from liftlog.tracking.models import (
    DEFAULT_HYDRATION_PCT,
    BodyFatSource,
    MetricsEntry,
    Sex,
    UserSettings,
)
from liftlog.units import clamp, clamp_body_fat, parse_num, positive

logger = logging.getLogger(__name__)

# Muscle tissue holds more water than the FFM average; nudge the assumed
# hydration by this much per muscle-% point away from the reference.
MUSCLE_REFERENCE_PCT = 40.0
MUSCLE_HYDRATION_SLOPE = 0.0015
ADJUSTED_HYDRATION_BOUNDS = (0.68, 0.78)
HYDRATION_PCT_BOUNDS = (65.0, 80.0)


@dataclass(frozen=True)
class BodyMeasurements:
    """Inputs to the estimators, already merged with Settings defaults."""

    sex: Sex
    age: float
    height_in: Optional[float] = None
    weight_lbs: Optional[float] = None
    waist_in: Optional[float] = None
    hip_in: Optional[float] = None
    neck_in: Optional[float] = None
    lbm_lbs: Optional[float] = None
    water_pct: Optional[float] = None
    muscle_pct: Optional[float] = None


@dataclass(frozen=True)
class BodyFatEstimate:
    """A calibrated, clamped body-fat estimate and the rule that produced it."""

    percent: float
    method: str   # 'navy', 'ymca', 'bmi', 'lbm', 'tbw' or 'manual'
    family: str   # 'anthropometric', 'scale' or 'manual'


@dataclass(frozen=True)
class BodyFatRule:
    """One step of a fallback chain: an applicability check and a formula."""

    name: str
    applies: Callable[[BodyMeasurements], bool]
    compute: Callable[[BodyMeasurements], float]


# ---------------------------------------------------------------------------
# Anthropometric rules
# ---------------------------------------------------------------------------


def _circumference_difference(m: BodyMeasurements) -> Optional[float]:
    """The log term of the Navy formula, or None if inputs are missing."""
    waist, neck = positive(m.waist_in), positive(m.neck_in)
    if waist is None or neck is None:
        return None
    if m.sex == Sex.MALE:
        return waist - neck
    hip = positive(m.hip_in)
    if hip is None:
        return None
    return waist + hip - neck


def _navy_applies(m: BodyMeasurements) -> bool:
    diff = _circumference_difference(m)
    return diff is not None and diff > 0 and positive(m.height_in) is not None


def _navy_compute(m: BodyMeasurements) -> float:
    diff = _circumference_difference(m)
    if m.sex == Sex.MALE:
        return 86.010 * math.log10(diff) - 70.041 * math.log10(m.height_in) + 36.76
    return 163.205 * math.log10(diff) - 97.684 * math.log10(m.height_in) - 78.387


def _ymca_applies(m: BodyMeasurements) -> bool:
    return positive(m.waist_in) is not None and positive(m.weight_lbs) is not None


def _ymca_compute(m: BodyMeasurements) -> float:
    constant = 98.42 if m.sex == Sex.MALE else 76.76
    return ((m.waist_in * 4.15) - (m.weight_lbs * 0.082) - constant) / m.weight_lbs * 100


def _bmi_applies(m: BodyMeasurements) -> bool:
    return positive(m.height_in) is not None and positive(m.weight_lbs) is not None


def _bmi_compute(m: BodyMeasurements) -> float:
    bmi = 703 * m.weight_lbs / (m.height_in * m.height_in)
    male = 1 if m.sex == Sex.MALE else 0
    return 1.2 * bmi + 0.23 * (m.age or 0) - 10.8 * male - 5.4


ANTHROPOMETRIC_RULES: tuple[BodyFatRule, ...] = (
    BodyFatRule("navy", _navy_applies, _navy_compute),
    BodyFatRule("ymca", _ymca_applies, _ymca_compute),
    BodyFatRule("bmi", _bmi_applies, _bmi_compute),
)


# ---------------------------------------------------------------------------
# Scale-assisted rules
# ---------------------------------------------------------------------------


def assumed_hydration(
    hydration_pct: float = DEFAULT_HYDRATION_PCT,
    muscle_pct: Optional[float] = None,
) -> float:
    """Fraction of fat-free mass assumed to be water.

    The base assumption is clamped to 65-80%. When the scale reports muscle %,
    it is nudged by ~0.15 points per muscle-% point around 40% and the result
    saturates at 68-78%.

    Example:
        >>> assumed_hydration(73)
        0.73
        >>> round(assumed_hydration(73, muscle_pct=50), 4)
        0.745
    """
    hydration = clamp(parse_num(hydration_pct) or DEFAULT_HYDRATION_PCT, *HYDRATION_PCT_BOUNDS) / 100
    muscle = parse_num(muscle_pct)
    if muscle is not None:
        adjustment = (muscle - MUSCLE_REFERENCE_PCT) * MUSCLE_HYDRATION_SLOPE
        hydration = clamp(hydration + adjustment, *ADJUSTED_HYDRATION_BOUNDS)
    return hydration


def _lbm_applies(m: BodyMeasurements) -> bool:
    return positive(m.lbm_lbs) is not None and positive(m.weight_lbs) is not None


def _lbm_compute(m: BodyMeasurements) -> float:
    return 100 * (1 - m.lbm_lbs / m.weight_lbs)


def _tbw_rule(hydration_pct: float) -> BodyFatRule:
    def applies(m: BodyMeasurements) -> bool:
        return positive(m.water_pct) is not None and positive(m.weight_lbs) is not None

    def compute(m: BodyMeasurements) -> float:
        hydration = assumed_hydration(hydration_pct, m.muscle_pct)
        total_body_water = (m.water_pct / 100) * m.weight_lbs
        fat_free_mass = total_body_water / hydration
        return 100 * (1 - fat_free_mass / m.weight_lbs)

    return BodyFatRule("tbw", applies, compute)


def scale_rules(hydration_pct: float = DEFAULT_HYDRATION_PCT) -> tuple[BodyFatRule, ...]:
    """The scale-assisted chain for a given hydration assumption."""
    return (
        BodyFatRule("lbm", _lbm_applies, _lbm_compute),
        _tbw_rule(hydration_pct),
    )


# ---------------------------------------------------------------------------
# Chain evaluation
# ---------------------------------------------------------------------------


def run_chain(
    rules: Sequence[BodyFatRule],
    m: BodyMeasurements,
) -> Optional[tuple[str, float]]:
    """Evaluate rules in order and return (rule name, raw percent) of the first hit.

    A rule whose formula yields a non-finite number is treated as not applicable.
    """
    for rule in rules:
        if not rule.applies(m):
            continue
        raw = rule.compute(m)
        if math.isfinite(raw):
            logger.debug("Body-fat rule %s applied: %.2f%%", rule.name, raw)
            return rule.name, raw
        logger.debug("Body-fat rule %s produced a non-finite value", rule.name)
    return None


def _finish(
    hit: Optional[tuple[str, float]],
    family: str,
    calibration_offset: float,
) -> Optional[BodyFatEstimate]:
    if hit is None:
        return None
    method, raw = hit
    percent = clamp_body_fat(raw + (parse_num(calibration_offset) or 0.0))
    return BodyFatEstimate(percent=percent, method=method, family=family)


def estimate_anthropometric(
    m: BodyMeasurements,
    calibration_offset: float = 0.0,
) -> Optional[BodyFatEstimate]:
    """Navy -> YMCA -> BMI fallback chain, calibrated and clamped."""
    return _finish(run_chain(ANTHROPOMETRIC_RULES, m), "anthropometric", calibration_offset)


def estimate_scale_assisted(
    m: BodyMeasurements,
    hydration_pct: float = DEFAULT_HYDRATION_PCT,
    calibration_offset: float = 0.0,
) -> Optional[BodyFatEstimate]:
    """LBM -> TBW chain, calibrated and clamped."""
    return _finish(run_chain(scale_rules(hydration_pct), m), "scale", calibration_offset)


def measurements_for(
    entry: Optional[MetricsEntry],
    settings: UserSettings,
) -> BodyMeasurements:
    """Build estimator inputs from an entry, filling gaps from settings.

    Sex and age always come from settings. Height and weight come from the
    entry when it has them, otherwise from settings.
    """
    if entry is None:
        entry = MetricsEntry(date="")
    height = entry.height_inches or settings.height_inches or None
    weight = entry.weight_lbs if entry.weight_lbs is not None else settings.weight_lbs
    return BodyMeasurements(
        sex=settings.sex,
        age=settings.age,
        height_in=height,
        weight_lbs=weight,
        waist_in=entry.waist_in,
        hip_in=entry.hip_in,
        neck_in=entry.neck_in,
        lbm_lbs=entry.lbm_lbs,
        water_pct=entry.water_pct,
        muscle_pct=entry.muscle_pct,
    )


def resolve_body_fat(
    entry: Optional[MetricsEntry],
    settings: UserSettings,
    source: Optional[BodyFatSource] = None,
) -> Optional[BodyFatEstimate]:
    """Body-fat % for an entry according to the preferred source.

    - manual: the entry's stored value (clamped), or None
    - estimated: anthropometric chain only
    - hybrid: scale-assisted chain, falling back to the anthropometric chain

    Args:
        entry: Metrics entry (None means "settings only")
        settings: User settings supplying defaults, offset and hydration
        source: Override for ``settings.bf_source``

    Returns:
        BodyFatEstimate, or None when no rule could produce a value
    """
    source = BodyFatSource.parse(source) if source is not None else settings.bf_source

    if source == BodyFatSource.MANUAL:
        if entry is None or entry.body_fat_pct is None:
            return None
        return BodyFatEstimate(
            percent=clamp_body_fat(entry.body_fat_pct), method="manual", family="manual"
        )

    m = measurements_for(entry, settings)
    offset = settings.bf_calibration_offset

    if source == BodyFatSource.HYBRID:
        scale = estimate_scale_assisted(m, settings.hydration_pct, offset)
        if scale is not None:
            return scale

    return estimate_anthropometric(m, offset)
