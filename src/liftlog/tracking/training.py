"""Training load analysis: 1RM estimates, personal records and volume.

All functions take the full workout list and skip anything unusable: sets
without an exercise name, and sets whose weight or reps are missing or not
positive (those contribute 0 volume and never count towards 1RM or PRs).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional

from liftlog.tracking.models import SetRecord, WorkoutSession
from liftlog.units import positive

logger = logging.getLogger(__name__)

STREAK_BADGE_DAYS = 5

BADGE_LABELS = {
    "first": "First Workout Logged",
    "streak5": "5-Day Streak",
    "pr": "New PR",
}


@dataclass
class PersonalRecord:
    """Heaviest weight ever logged for an exercise and when."""

    exercise: str
    weight_lbs: float
    date: str


@dataclass
class OneRepMaxPoint:
    """Best estimated 1RM for a lift on one day."""

    date: str
    estimated_1rm: float


def estimated_1rm(weight: Any, reps: Any) -> float:
    """Epley one-rep max: weight × (1 + reps / 30).

    Returns 0 when weight or reps is zero, negative or absent.

    Example:
        >>> estimated_1rm(200, 5)
        233.33333333333334
        >>> estimated_1rm(200, 0)
        0.0
    """
    w, r = positive(weight), positive(reps)
    if w is None or r is None:
        return 0.0
    return w * (1 + r / 30)


def set_volume(s: SetRecord) -> float:
    """weight × reps, or 0 if either is missing."""
    w, r = positive(s.weight_lbs), positive(s.reps)
    if w is None or r is None:
        return 0.0
    return w * r


def session_volume(session: WorkoutSession) -> float:
    return sum(set_volume(s) for s in session.valid_sets())


def _scored_sets(workouts: list[WorkoutSession]):
    """Yield (session, set) for sets with a name and positive weight and reps."""
    for session in workouts:
        for s in session.valid_sets():
            if positive(s.weight_lbs) is None or positive(s.reps) is None:
                continue
            yield session, s


def best_1rm(workouts: list[WorkoutSession], lift: str) -> float:
    """Current best estimated 1RM for a lift (exact, case-sensitive name match)."""
    return max(
        (estimated_1rm(s.weight_lbs, s.reps) for _, s in _scored_sets(workouts) if s.name == lift),
        default=0.0,
    )


def best_1rms(workouts: list[WorkoutSession]) -> dict[str, float]:
    """Best estimated 1RM for every exercise."""
    best: dict[str, float] = {}
    for _, s in _scored_sets(workouts):
        best[s.name] = max(best.get(s.name, 0.0), estimated_1rm(s.weight_lbs, s.reps))
    return best


def personal_records(workouts: list[WorkoutSession]) -> dict[str, PersonalRecord]:
    """Heaviest logged weight per exercise (not 1RM-adjusted).

    Ties keep the first date seen in list order.
    """
    records: dict[str, PersonalRecord] = {}
    for session, s in _scored_sets(workouts):
        current = records.get(s.name)
        if current is None or s.weight_lbs > current.weight_lbs:
            records[s.name] = PersonalRecord(
                exercise=s.name, weight_lbs=s.weight_lbs, date=session.date
            )
    return records


def one_rm_series(workouts: list[WorkoutSession]) -> dict[str, list[OneRepMaxPoint]]:
    """Per lift, the day's best estimated 1RM, sorted by date."""
    by_day: dict[str, dict[str, float]] = {}
    for session, s in _scored_sets(workouts):
        days = by_day.setdefault(s.name, {})
        est = estimated_1rm(s.weight_lbs, s.reps)
        days[session.date] = max(days.get(session.date, 0.0), est)
    return {
        lift: [OneRepMaxPoint(date=d, estimated_1rm=v) for d, v in sorted(days.items())]
        for lift, days in by_day.items()
    }


def iso_week_key(iso_date: str) -> Optional[str]:
    """ISO calendar week key 'YYYY-WW' for a date string, or None if unparseable.

    Weeks start on Monday and week 1 contains the year's first Thursday, so
    early-January dates can belong to the previous ISO year.

    Example:
        >>> iso_week_key("2021-01-01")
        '2020-53'
    """
    try:
        year, week, _ = date.fromisoformat(iso_date).isocalendar()
    except (TypeError, ValueError):
        return None
    return f"{year}-{week:02d}"


def weekly_volume(workouts: list[WorkoutSession]) -> dict[str, float]:
    """Total volume per ISO week, keys in chronological order."""
    weeks: dict[str, float] = {}
    for session in workouts:
        key = iso_week_key(session.date)
        if key is None:
            logger.debug("Skipping session with bad date %r", session.date)
            continue
        weeks[key] = weeks.get(key, 0.0) + session_volume(session)
    return dict(sorted(weeks.items()))


def daily_volume(workouts: list[WorkoutSession], day: str) -> float:
    """Total volume of all sessions logged on a date."""
    return sum(session_volume(w) for w in workouts if w.date == day)


def training_streak(workouts: list[WorkoutSession], today: Optional[date] = None) -> int:
    """Consecutive days with a logged session, counting back from today."""
    if today is None:
        today = date.today()
    days = {w.date for w in workouts}
    streak = 0
    day = today
    while day.isoformat() in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def award_badges(
    workouts: list[WorkoutSession],
    badges: Optional[dict[str, str]] = None,
    today: Optional[date] = None,
) -> dict[str, str]:
    """Return the badge map after a save. Earned badges are never taken away."""
    awarded = dict(badges or {})
    if workouts and "first" not in awarded:
        awarded["first"] = BADGE_LABELS["first"]
    if training_streak(workouts, today) >= STREAK_BADGE_DAYS:
        awarded["streak5"] = BADGE_LABELS["streak5"]
    if personal_records(workouts) and "pr" not in awarded:
        awarded["pr"] = BADGE_LABELS["pr"]
    return awarded
