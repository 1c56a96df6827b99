"""Per-muscle-group readiness from recent training.

Each set is attributed to muscle groups by keyword (case-insensitive
substring, a name may hit several groups). Every session inside the recovery
window contributes a freshness value that falls linearly with its age:

    freshness = max(0, 1 - decay_rate_per_day × age_days)

A group's score is the minimum contribution over the sessions that worked it;
untouched groups, and groups whose sessions have all aged out of the window
(1 / decay_rate_per_day days), stay at 1.0. Scores are always in [0, 1].
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from liftlog.tracking.models import WorkoutSession

logger = logging.getLogger(__name__)

GROUPS = ("Chest", "Back", "Legs", "Arms", "Core")

DEFAULT_DECAY_RATE = 0.30       # ~3.3 days to full recovery
FRESH_THRESHOLD = 0.8
MODERATE_THRESHOLD = 0.5


@dataclass(frozen=True)
class MuscleRule:
    """Exercise-name keywords that stress a muscle group."""

    group: str
    keywords: tuple[str, ...]


MUSCLE_RULES: tuple[MuscleRule, ...] = (
    MuscleRule("Chest", ("bench", "press", "push")),
    MuscleRule("Back", ("row", "pull")),
    MuscleRule("Legs", ("squat", "deadlift", "lunge")),
    MuscleRule("Arms", ("curl", "tricep", "arm")),
    MuscleRule("Core", ("plank", "crunch", "core", "ab")),
)


def muscle_groups_for(
    exercise: str,
    rules: tuple[MuscleRule, ...] = MUSCLE_RULES,
) -> list[str]:
    """Groups stressed by an exercise, in table order.

    Example:
        >>> muscle_groups_for("Barbell Row")
        ['Back']
        >>> muscle_groups_for("Push Press")
        ['Chest']
    """
    name = (exercise or "").lower()
    return [r.group for r in rules if any(k in name for k in r.keywords)]


def _as_date(value: Union[date, datetime, None]) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


def readiness_scores(
    workouts: list[WorkoutSession],
    now: Union[date, datetime, None] = None,
    decay_rate_per_day: float = DEFAULT_DECAY_RATE,
    rules: tuple[MuscleRule, ...] = MUSCLE_RULES,
) -> dict[str, float]:
    """Freshness score per muscle group as of ``now``.

    Session age is counted in whole calendar days, so a session dated today
    has age 0. Sessions dated in the future or with unparseable dates are
    ignored.
    """
    today = _as_date(now)
    window = 1 / decay_rate_per_day if decay_rate_per_day > 0 else float("inf")
    groups = list(dict.fromkeys(r.group for r in rules))
    scores = {g: 1.0 for g in groups}

    for session in workouts:
        try:
            session_day = date.fromisoformat(session.date)
        except (TypeError, ValueError):
            logger.debug("Skipping session with bad date %r", session.date)
            continue
        age = (today - session_day).days
        if age < 0 or age >= window:
            continue
        freshness = max(0.0, 1 - decay_rate_per_day * age)
        for s in session.valid_sets():
            for group in muscle_groups_for(s.name, rules):
                scores[group] = min(scores[group], freshness)

    return scores


def readiness_bucket(
    score: float,
    fresh_threshold: float = FRESH_THRESHOLD,
    moderate_threshold: float = MODERATE_THRESHOLD,
) -> str:
    """'fresh' (> 0.8), 'moderate' (0.5-0.8) or 'fatigued' (< 0.5)."""
    if score > fresh_threshold:
        return "fresh"
    if score >= moderate_threshold:
        return "moderate"
    return "fatigued"


def readiness_report(
    workouts: list[WorkoutSession],
    now: Union[date, datetime, None] = None,
    decay_rate_per_day: float = DEFAULT_DECAY_RATE,
    fresh_threshold: float = FRESH_THRESHOLD,
    moderate_threshold: float = MODERATE_THRESHOLD,
) -> dict[str, tuple[float, str]]:
    """Scores with their display bucket, keyed by group."""
    scores = readiness_scores(workouts, now, decay_rate_per_day)
    return {
        group: (score, readiness_bucket(score, fresh_threshold, moderate_threshold))
        for group, score in scores.items()
    }


def most_fatigued(scores: dict[str, float]) -> Optional[str]:
    """Group with the lowest score, or None if every group is fully fresh."""
    group = min(scores, key=lambda g: scores[g], default=None)
    if group is None or scores[group] >= 1.0:
        return None
    return group
