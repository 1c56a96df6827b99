"""Seeded weekly training plan generator.

A plan is drawn from a fixed exercise pool per (equipment, goal). The random
generator is seeded with (goal, equipment, ISO year, ISO week) so a user sees
the same plan all week and a fresh one the next.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

EXERCISES_PER_DAY = 4
MAX_DAYS = 7


@dataclass(frozen=True)
class PlannedSet:
    name: str
    reps: int
    rpe: Optional[int] = None

    def describe(self) -> str:
        text = f"{self.name} {self.reps} reps"
        return f"{text} @RPE {self.rpe}" if self.rpe is not None else text


@dataclass
class PlanDay:
    title: str
    sets: list[PlannedSet] = field(default_factory=list)


@dataclass
class WeeklyPlan:
    goal: str
    equipment: str
    year: int
    week: int
    days: list[PlanDay] = field(default_factory=list)


EXERCISE_POOL: dict[str, dict[str, list[PlannedSet]]] = {
    "barbell": {
        "strength": [
            PlannedSet("Back Squat", 5, 8),
            PlannedSet("Bench Press", 5, 8),
            PlannedSet("Deadlift", 5, 8),
            PlannedSet("Overhead Press", 5, 8),
            PlannedSet("Barbell Row", 8, 7),
        ],
        "loss": [
            PlannedSet("Circuit (Row + KB + Pushups)", 12, 7),
            PlannedSet("EMOM: Squat + OHP (light)", 10, 7),
            PlannedSet("Barbell Complex (light)", 8, 7),
        ],
        "general": [
            PlannedSet("Bench Press", 8, 7),
            PlannedSet("Back Squat", 8, 7),
            PlannedSet("Barbell Row", 10, 7),
            PlannedSet("RDL", 10, 7),
            PlannedSet("OHP", 8, 7),
        ],
    },
    "dumbbells": {
        "strength": [
            PlannedSet("DB Bench", 6, 8),
            PlannedSet("Goblet Squat", 8, 8),
            PlannedSet("DB Row", 10, 8),
            PlannedSet("DB RDL", 8, 8),
            PlannedSet("DB Shoulder Press", 8, 8),
        ],
        "loss": [
            PlannedSet("DB Circuit (Thruster/Row/Pushup)", 12, 7),
            PlannedSet("HIIT DB + Jump Rope", 30, 7),
            PlannedSet("Core + DB Carries", 40, 7),
        ],
        "general": [
            PlannedSet("DB Bench", 10, 7),
            PlannedSet("Split Squat", 10, 7),
            PlannedSet("DB Row", 12, 7),
            PlannedSet("DB RDL", 12, 7),
            PlannedSet("DB Press", 10, 7),
        ],
    },
    "minimal": {
        "strength": [
            PlannedSet("Pistol Progressions", 6, 8),
            PlannedSet("Push-up Weighted", 8, 8),
            PlannedSet("Chin-up Weighted", 6, 8),
            PlannedSet("Pike Press", 8, 8),
        ],
        "loss": [
            PlannedSet("Bodyweight Circuit", 15, 7),
            PlannedSet("HIIT (BW + Sprints)", 30, 7),
            PlannedSet("Core Circuit", 40, 7),
        ],
        "general": [
            PlannedSet("Push-ups", 12, 7),
            PlannedSet("Split Squat (BW/DB)", 12, 7),
            PlannedSet("Pull-ups/Rows", 8, 7),
            PlannedSet("Hip Hinge (Good morning/band)", 15, 7),
            PlannedSet("Core Plank", 60, 6),
        ],
    },
}


def plan_seed(goal: str, equipment: str, year: int, week: int) -> str:
    return f"{goal}:{equipment}:{year}:{week}"


def generate_weekly_plan(
    goal: str = "general",
    equipment: str = "barbell",
    days: int = 4,
    year: Optional[int] = None,
    week: Optional[int] = None,
) -> WeeklyPlan:
    """Build a week of training days.

    Unknown equipment falls back to barbell and unknown goals to general.
    ``days`` is clamped to 1-7. Year and week default to the current ISO week.

    Args:
        goal: 'strength', 'loss' or 'general'
        equipment: 'barbell', 'dumbbells' or 'minimal'
        days: Training days per week
        year: ISO year of the plan
        week: ISO week number of the plan

    Returns:
        WeeklyPlan, identical for identical inputs
    """
    equipment = equipment if equipment in EXERCISE_POOL else "barbell"
    goal = goal if goal in EXERCISE_POOL[equipment] else "general"
    if year is None or week is None:
        iso_year, iso_week, _ = date.today().isocalendar()
        year = iso_year if year is None else year
        week = iso_week if week is None else week
    days = max(1, min(MAX_DAYS, int(days)))

    pool = list(EXERCISE_POOL[equipment][goal])
    rng = random.Random(plan_seed(goal, equipment, year, week))
    rng.shuffle(pool)

    plan = WeeklyPlan(goal=goal, equipment=equipment, year=year, week=week)
    per_day = min(EXERCISES_PER_DAY, len(pool))
    for i in range(days):
        sets = [pool[(i + j) % len(pool)] for j in range(per_day)]
        plan.days.append(PlanDay(title=f"{goal.upper()} - Day {i + 1}", sets=sets))
    return plan


def plan_day_for(plan: WeeklyPlan, day: Optional[date] = None) -> PlanDay:
    """Plan day to train on a date: weekday index (Monday = 0) wrapped to plan length."""
    if day is None:
        day = date.today()
    return plan.days[day.weekday() % len(plan.days)]


# Fixed session presets a user can load into an empty workout
WORKOUT_TEMPLATES: dict[str, list[PlannedSet]] = {
    "fullbody": [
        PlannedSet("Squat", 5, 7),
        PlannedSet("Bench Press", 5, 7),
        PlannedSet("Bent Row", 8, 7),
        PlannedSet("Plank (sec)", 60),
    ],
    "ppl": [
        PlannedSet("Bench Press", 5, 8),
        PlannedSet("Incline DB Press", 10, 8),
        PlannedSet("Lat Pulldown", 10, 8),
        PlannedSet("Seated Row", 10, 8),
        PlannedSet("Back Squat", 5, 8),
        PlannedSet("Leg Press", 12, 8),
    ],
    "fives": [
        PlannedSet("Back Squat", 5, 8),
        PlannedSet("Bench Press", 5, 8),
        PlannedSet("Deadlift", 5, 8),
    ],
    "phul": [
        PlannedSet("Deadlift", 5, 8),
        PlannedSet("OHP", 5, 8),
        PlannedSet("Pull-up", 8, 8),
        PlannedSet("Lunge", 10, 8),
    ],
}


def workout_template(name: str) -> Optional[list[PlannedSet]]:
    """Sets of a preset workout (case-insensitive), or None if unknown."""
    sets = WORKOUT_TEMPLATES.get((name or "").strip().lower())
    return list(sets) if sets is not None else None
