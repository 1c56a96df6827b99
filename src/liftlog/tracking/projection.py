"""Weight and body-fat trajectory projection.

Given a starting weight, a starting body-fat percentage and a constant daily
mass-change rate, weight moves linearly:

    W_i = W_0 + rate × i

A fixed fraction of every pound gained or lost is fat mass and the rest is
lean mass, so body-fat percentage at each step is

    BF_i = 100 × (F_0 + fat_fraction × (W_i - W_0)) / W_i

clamped to the plausible 3-60% band.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional

import numpy as np

from liftlog.profiles.body_calc import EnergyReport, energy_report
from liftlog.profiles.body_fat import resolve_body_fat
from liftlog.tracking.history import current_weight, latest_entry
from liftlog.tracking.models import ActivityLevel, MetricsEntry, UserSettings
from liftlog.units import clamp_body_fat, parse_num, positive

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_DAYS = 70
DEFAULT_FAT_FRACTION = 0.75
DEFAULT_BODY_FAT_PCT = 25.0


@dataclass
class ProjectionPoint:
    """Projected state on one day."""

    day: int
    date: str
    weight_lbs: float
    body_fat_pct: float


@dataclass
class Projection:
    """A day-indexed trajectory plus its summary statistics."""

    points: list[ProjectionPoint]
    start_weight: float
    start_body_fat_pct: float
    daily_rate: float  # lbs/day, + gain / - loss
    energy: Optional[EnergyReport] = None

    @property
    def end_weight(self) -> float:
        return self.points[-1].weight_lbs

    @property
    def net_change(self) -> float:
        return self.end_weight - self.start_weight

    @property
    def weekly_rate(self) -> float:
        return self.daily_rate * 7

    @property
    def days(self) -> int:
        return len(self.points)

    def weekly(self) -> list[ProjectionPoint]:
        """Every seventh point (day 0, 7, 14, ...), for week-level charts."""
        return self.points[::7]


def project_trajectory(
    start_weight: Any,
    start_body_fat_pct: Any,
    daily_rate: float,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    start_date: Optional[date] = None,
    fat_fraction: float = DEFAULT_FAT_FRACTION,
    default_body_fat_pct: float = DEFAULT_BODY_FAT_PCT,
) -> Optional[Projection]:
    """Project weight and body-fat % over a horizon at a constant daily rate.

    Args:
        start_weight: Starting weight (lbs). Zero or unknown -> no projection.
        start_body_fat_pct: Starting BF%, or None to assume the default
        daily_rate: Weight change in lbs/day
        horizon_days: Number of points in the series (day 0 .. horizon-1)
        start_date: Date of day 0 (default: today)
        fat_fraction: Share of each pound of change that is fat mass
        default_body_fat_pct: BF% assumed when the start value is unknown

    Returns:
        Projection, or None for insufficient data
    """
    weight0 = positive(start_weight)
    if weight0 is None:
        logger.debug("No projection: starting weight %r is unusable", start_weight)
        return None
    if horizon_days is None or horizon_days <= 0:
        logger.debug("No projection: horizon %r", horizon_days)
        return None
    rate = parse_num(daily_rate) or 0.0
    body_fat0 = parse_num(start_body_fat_pct)
    if body_fat0 is None:
        body_fat0 = default_body_fat_pct
    if start_date is None:
        start_date = date.today()

    fat_mass0 = weight0 * body_fat0 / 100
    offsets = np.arange(int(horizon_days))
    deltas = rate * offsets
    weights = weight0 + deltas
    fat_masses = fat_mass0 + fat_fraction * deltas

    points = []
    for i, weight, fat_mass in zip(offsets, weights, fat_masses):
        weight = float(weight)
        body_fat = clamp_body_fat(100 * float(fat_mass) / max(weight, 1.0))
        points.append(
            ProjectionPoint(
                day=int(i),
                date=(start_date + timedelta(days=int(i))).isoformat(),
                weight_lbs=weight,
                body_fat_pct=body_fat,
            )
        )

    return Projection(
        points=points,
        start_weight=weight0,
        start_body_fat_pct=body_fat0,
        daily_rate=rate,
    )


def project_from_records(
    settings: UserSettings,
    metrics: list[MetricsEntry],
    intake: Optional[float] = None,
    activity_level: Any = ActivityLevel.MODERATE,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    today: Optional[date] = None,
    fat_fraction: float = DEFAULT_FAT_FRACTION,
    default_body_fat_pct: float = DEFAULT_BODY_FAT_PCT,
) -> Optional[Projection]:
    """Projection for a user from their stored records.

    Starting weight is the latest logged weight (else the settings weight);
    starting BF% comes from the preferred estimator; the daily rate is the
    energy balance at ``intake`` (default: TDEE, i.e. maintenance).
    """
    weight0 = current_weight(metrics, settings)
    if positive(weight0) is None:
        logger.debug("No projection: no known starting weight")
        return None

    estimate = resolve_body_fat(latest_entry(metrics), settings)
    body_fat0 = estimate.percent if estimate is not None else None

    energy = energy_report(settings, weight0, activity_level, intake)
    projection = project_trajectory(
        weight0,
        body_fat0,
        energy.lbs_per_day,
        horizon_days=horizon_days,
        start_date=today,
        fat_fraction=fat_fraction,
        default_body_fat_pct=default_body_fat_pct,
    )
    if projection is not None:
        projection.energy = energy
    return projection


def days_to_target(
    start_weight: float,
    target_weight: float,
    daily_rate: float,
) -> Optional[int]:
    """Days needed to reach a target weight at a constant rate.

    Returns 0 if already there, None if the rate is zero or points away
    from the target.
    """
    start, target, rate = parse_num(start_weight), parse_num(target_weight), parse_num(daily_rate)
    if start is None or target is None or rate is None:
        return None
    remaining = target - start
    if remaining == 0:
        return 0
    if rate == 0 or (remaining > 0) != (rate > 0):
        return None
    return math.ceil(remaining / rate)
