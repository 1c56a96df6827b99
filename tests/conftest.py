"""Pytest fixtures for liftlog tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from liftlog.data.serialization import Dataset, dataset_to_dict
from liftlog.tracking.models import (
    Goal,
    LiftGoal,
    MetricsEntry,
    SetRecord,
    Sex,
    UserSettings,
    WorkoutSession,
)



@pytest.fixture
def settings():
    """Male, 30 years old, 5'10", 180 lb."""
    return UserSettings(sex=Sex.MALE, age=30, height_ft=5, height_in=10, weight_lbs=180)


@pytest.fixture
def metrics():
    """Three weigh-ins, the last one with tape measurements."""
    return [
        MetricsEntry(date="2024-03-01", weight_lbs=190),
        MetricsEntry(date="2024-03-08", weight_lbs=186),
        MetricsEntry(date="2024-03-15", weight_lbs=183, waist_in=34, neck_in=16),
    ]


@pytest.fixture
def workouts():
    """A squat session, a bench session and a row session in March 2024."""
    return [
        WorkoutSession(
            date="2024-03-11",
            title="Lower",
            sets=[
                SetRecord(name="Squat", reps=5, weight_lbs=225),
                SetRecord(name="Squat", reps=5, weight_lbs=235),
            ],
        ),
        WorkoutSession(
            date="2024-03-13",
            title="Upper",
            sets=[
                SetRecord(name="Bench Press", reps=5, weight_lbs=185),
                SetRecord(name="Bench Press", reps=3, weight_lbs=195),
            ],
        ),
        WorkoutSession(
            date="2024-03-14",
            title="Pull",
            sets=[SetRecord(name="Barbell Row", reps=8, weight_lbs=135)],
        ),
    ]


@pytest.fixture
def goal():
    return Goal(
        target_weight_lbs=175,
        target_date="2024-06-01",
        lifts=[LiftGoal(name="Squat", target_1rm=315)],
    )


@pytest.fixture
def dataset(settings, metrics, workouts, goal):
    return Dataset(settings=settings, metrics=metrics, workouts=workouts, goal=goal)


@pytest.fixture
def data_file(tmp_path: Path, dataset) -> Path:
    """Dataset written as JSON to a temporary file."""
    path = tmp_path / "data.json"
    path.write_text(json.dumps(dataset_to_dict(dataset)))
    return path
