"""Goal progress evaluation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union

from liftlog.tracking.history import current_weight, first_logged_weight
from liftlog.tracking.models import Goal, LiftGoal, MetricsEntry, UserSettings, WorkoutSession
from liftlog.tracking.training import best_1rm
from liftlog.units import clamp, parse_num, positive

DUE_SOON_DAYS = 3
NEARLY_ACHIEVED_PCT = 95.0


@dataclass
class WeightGoalProgress:
    """Progress from the first logged weight towards a target weight."""

    start_weight: float
    current_weight: float
    target_weight: float
    percent_complete: float            # clamped to [0, 100]
    remaining_lbs: float               # signed: + still to gain, - still to lose
    target_date: Optional[str] = None
    days_remaining: Optional[int] = None  # negative once the date has passed

    @property
    def past_due(self) -> bool:
        return self.days_remaining is not None and self.days_remaining < 0

    @property
    def due_soon(self) -> bool:
        return self.days_remaining is not None and 0 <= self.days_remaining <= DUE_SOON_DAYS


@dataclass
class LiftGoalProgress:
    """Current best estimated 1RM against a target 1RM."""

    lift: str
    current_1rm: float
    target_1rm: float
    percent_complete: float  # not capped at 100; never negative

    @property
    def achieved(self) -> bool:
        return self.percent_complete >= 100

    @property
    def nearly_achieved(self) -> bool:
        return self.percent_complete >= NEARLY_ACHIEVED_PCT


@dataclass
class GoalSummary:
    weight: Optional[WeightGoalProgress] = None
    lifts: list[LiftGoalProgress] = field(default_factory=list)

    @property
    def alerts(self) -> list[str]:
        """Short messages a host may surface as notifications."""
        messages = []
        if self.weight is not None and self.weight.due_soon:
            messages.append("Body weight goal almost due!")
        for lift in self.lifts:
            if lift.nearly_achieved:
                messages.append(f"{lift.lift} goal nearly achieved!")
        return messages


def days_until(target_date: str, now: Union[date, datetime, None] = None) -> Optional[int]:
    """Ceiling of the days from now until the target date's midnight.

    Returns None when the date cannot be parsed.
    """
    try:
        target = datetime.combine(date.fromisoformat(target_date), datetime.min.time())
    except (TypeError, ValueError):
        return None
    if now is None:
        now = datetime.now()
    elif not isinstance(now, datetime):
        now = datetime.combine(now, datetime.min.time())
    elif now.tzinfo is not None:
        # Target dates are local calendar days
        now = now.astimezone().replace(tzinfo=None)
    return math.ceil((target - now).total_seconds() / 86400)


def weight_goal_progress(
    target_weight: float,
    start_weight: float,
    current: float,
    target_date: Optional[str] = None,
    now: Union[date, datetime, None] = None,
) -> WeightGoalProgress:
    """Percent of the way from start to target weight, clamped to [0, 100].

    A zero denominator (target equals start) counts as 100% complete.
    """
    total = target_weight - start_weight
    if total == 0:
        pct = 100.0
    else:
        pct = clamp((current - start_weight) / total * 100, 0.0, 100.0)
    return WeightGoalProgress(
        start_weight=start_weight,
        current_weight=current,
        target_weight=target_weight,
        percent_complete=pct,
        remaining_lbs=target_weight - current,
        target_date=target_date,
        days_remaining=days_until(target_date, now) if target_date else None,
    )


def lift_goal_progress(
    workouts: list[WorkoutSession],
    goal: LiftGoal,
) -> Optional[LiftGoalProgress]:
    """Best estimated 1RM for the goal's lift as a percentage of the target.

    Returns None when the goal has no usable target.
    """
    target = positive(goal.target_1rm)
    if target is None:
        return None
    best = best_1rm(workouts, goal.name)
    return LiftGoalProgress(
        lift=goal.name,
        current_1rm=best,
        target_1rm=target,
        percent_complete=max(0.0, best / target * 100),
    )


def evaluate_goals(
    goal: Goal,
    settings: UserSettings,
    metrics: list[MetricsEntry],
    workouts: list[WorkoutSession],
    now: Union[date, datetime, None] = None,
) -> GoalSummary:
    """Progress for every goal that is set and has enough data."""
    summary = GoalSummary()

    target_weight = parse_num(goal.target_weight_lbs)
    weight_now = current_weight(metrics, settings)
    if target_weight is not None and weight_now is not None:
        start = first_logged_weight(metrics)
        if start is None:
            start = weight_now
        summary.weight = weight_goal_progress(
            target_weight, start, weight_now, goal.target_date, now
        )

    for lift in goal.lifts:
        progress = lift_goal_progress(workouts, lift)
        if progress is not None:
            summary.lifts.append(progress)

    return summary
