"""Tests for goal progress."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from liftlog.tracking.goals import (
    days_until,
    evaluate_goals,
    lift_goal_progress,
    weight_goal_progress,
)
from liftlog.tracking.models import Goal, LiftGoal, SetRecord, WorkoutSession


class TestWeightGoal:
    """Tests for start -> target weight progress."""

    def test_partial_progress(self) -> None:
        """Progress is the share of the start-to-target distance covered."""
        progress = weight_goal_progress(175, 190, 183)
        assert progress.percent_complete == pytest.approx(7 / 15 * 100)
        assert progress.remaining_lbs == -8

    def test_clamped_to_0_100(self) -> None:
        """Overshooting or moving away stays within 0-100."""
        assert weight_goal_progress(175, 190, 195).percent_complete == 0
        assert weight_goal_progress(175, 190, 170).percent_complete == 100

    def test_gaining_goal(self) -> None:
        """Goals above the start weight count upward."""
        assert weight_goal_progress(160, 150, 155).percent_complete == pytest.approx(50)

    def test_zero_denominator_is_complete(self) -> None:
        """Target equal to start counts as complete."""
        assert weight_goal_progress(180, 180, 185).percent_complete == 100

    def test_days_remaining(self) -> None:
        """Days remaining and the due-soon flag."""
        progress = weight_goal_progress(175, 190, 183, "2024-03-18", date(2024, 3, 15))
        assert progress.days_remaining == 3
        assert progress.due_soon
        assert not progress.past_due


class TestDaysUntil:
    def test_ceiling(self) -> None:
        """Partial days round up."""
        assert days_until("2024-03-18", datetime(2024, 3, 15, 12, 0)) == 3
        assert days_until("2024-03-15", datetime(2024, 3, 15, 0, 0)) == 0

    def test_past(self) -> None:
        """Past dates give negative days."""
        assert days_until("2024-03-10", date(2024, 3, 15)) == -5

    def test_timezone_aware_now(self) -> None:
        """An aware datetime is compared in local time instead of raising."""
        aware = datetime(2024, 3, 15, 12, 0, tzinfo=timezone(timedelta(hours=-5)))
        local = aware.astimezone().replace(tzinfo=None)
        assert days_until("2024-03-18", aware) == days_until("2024-03-18", local)

    def test_unparseable(self) -> None:
        """Unparseable dates give None."""
        assert days_until("soon", date(2024, 3, 15)) is None


class TestLiftGoal:
    def test_percent_can_exceed_100(self) -> None:
        """Lift progress is not capped at 100."""
        workouts = [
            WorkoutSession(date="2024-01-01", sets=[SetRecord(name="Bench", reps=5, weight_lbs=300)])
        ]
        progress = lift_goal_progress(workouts, LiftGoal(name="Bench", target_1rm=225))
        assert progress.percent_complete > 100
        assert progress.achieved

    def test_no_lifts_is_zero(self) -> None:
        """No logged sets means 0% progress."""
        progress = lift_goal_progress([], LiftGoal(name="Bench", target_1rm=225))
        assert progress.current_1rm == 0
        assert progress.percent_complete == 0

    def test_no_target(self) -> None:
        """A missing or zero target yields no progress."""
        assert lift_goal_progress([], LiftGoal(name="Bench", target_1rm=None)) is None
        assert lift_goal_progress([], LiftGoal(name="Bench", target_1rm=0)) is None


class TestEvaluateGoals:
    """Tests for the combined goal summary."""

    def test_summary(self, goal, settings, metrics, workouts) -> None:
        """Test combined weight and lift progress."""
        summary = evaluate_goals(goal, settings, metrics, workouts, date(2024, 3, 15))
        assert summary.weight.start_weight == 190
        assert summary.weight.current_weight == 183
        assert summary.weight.days_remaining == 78
        (squat,) = summary.lifts
        assert squat.percent_complete == pytest.approx(235 * (1 + 5 / 30) / 315 * 100)
        assert summary.alerts == []

    def test_alerts(self, settings, metrics, workouts) -> None:
        """Due-soon and nearly-achieved goals raise alerts."""
        goal = Goal(
            target_weight_lbs=175,
            target_date="2024-03-17",
            lifts=[LiftGoal(name="Bench Press", target_1rm=220)],
        )
        summary = evaluate_goals(goal, settings, metrics, workouts, date(2024, 3, 15))
        assert summary.alerts == [
            "Body weight goal almost due!",
            "Bench Press goal nearly achieved!",
        ]

    def test_no_metrics_uses_settings_weight(self, settings) -> None:
        """Without metrics the settings weight is start and current."""
        summary = evaluate_goals(Goal(target_weight_lbs=170), settings, [], [])
        assert summary.weight.start_weight == 180
        assert summary.weight.current_weight == 180

    def test_empty_goal(self, settings, metrics, workouts) -> None:
        """An empty goal evaluates to nothing."""
        goal = Goal()
        assert goal.is_empty
        summary = evaluate_goals(goal, settings, metrics, workouts)
        assert summary.weight is None
        assert summary.lifts == []
