"""Workout and body metrics tracking.

Records are plain dataclasses; the analytics live in sibling modules:
- training: 1RM, personal records, volume, streaks
- readiness: per-muscle-group recovery scores
- projection: weight and body-fat trajectories
- goals: weight and lift goal progress
"""

from __future__ import annotations

from liftlog.tracking.models import (
    ActivityLevel,
    BodyFatSource,
    Goal,
    LiftGoal,
    MetricsEntry,
    SetRecord,
    Sex,
    UserSettings,
    WorkoutSession,
)

__all__ = [
    "ActivityLevel",
    "BodyFatSource",
    "Goal",
    "LiftGoal",
    "MetricsEntry",
    "SetRecord",
    "Sex",
    "UserSettings",
    "WorkoutSession",
]
