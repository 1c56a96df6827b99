"""Deterministic weekly training plans."""

from __future__ import annotations

from liftlog.planning.weekly import (
    WORKOUT_TEMPLATES,
    PlanDay,
    PlannedSet,
    WeeklyPlan,
    generate_weekly_plan,
    plan_day_for,
    workout_template,
)

__all__ = [
    "PlanDay",
    "PlannedSet",
    "WeeklyPlan",
    "generate_weekly_plan",
    "plan_day_for",
    "WORKOUT_TEMPLATES",
    "workout_template",
]
