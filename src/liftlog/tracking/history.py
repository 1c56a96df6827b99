"""Queries over the metrics history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from liftlog.profiles.body_fat import resolve_body_fat
from liftlog.tracking.models import MetricsEntry, UserSettings


@dataclass
class BodyPoint:
    """One point of the weight / body-fat chart."""

    date: str
    weight_lbs: Optional[float]
    body_fat_pct: Optional[float]
    estimated: bool = False  # body_fat_pct filled in by the estimator


def latest_entry(metrics: list[MetricsEntry]) -> Optional[MetricsEntry]:
    """Entry with the greatest date string; ties go to the earliest in the list."""
    latest: Optional[MetricsEntry] = None
    for entry in metrics:
        if latest is None or entry.date > latest.date:
            latest = entry
    return latest


def first_logged_weight(metrics: list[MetricsEntry]) -> Optional[float]:
    """Weight of the first entry ever logged (list order), if it has one."""
    if not metrics:
        return None
    return metrics[0].weight_lbs


def current_weight(
    metrics: list[MetricsEntry],
    settings: UserSettings,
) -> Optional[float]:
    """Latest logged weight, falling back to the settings weight."""
    latest = latest_entry(metrics)
    if latest is not None and latest.weight_lbs is not None:
        return latest.weight_lbs
    return settings.weight_lbs


def body_series(
    metrics: list[MetricsEntry],
    settings: Optional[UserSettings] = None,
    fill_estimates: bool = False,
) -> list[BodyPoint]:
    """Date-ascending weight and body-fat series.

    With ``fill_estimates`` (and settings given) entries that have no stored
    body-fat value get one from the preferred estimator.
    """
    points = []
    # sorted() is stable, so same-date entries keep list order
    for entry in sorted(metrics, key=lambda e: e.date):
        body_fat = entry.body_fat_pct
        estimated = False
        if body_fat is None and fill_estimates and settings is not None:
            estimate = resolve_body_fat(entry, settings)
            if estimate is not None and estimate.family != "manual":
                body_fat = estimate.percent
                estimated = True
        points.append(
            BodyPoint(
                date=entry.date,
                weight_lbs=entry.weight_lbs,
                body_fat_pct=body_fat,
                estimated=estimated,
            )
        )
    return points
