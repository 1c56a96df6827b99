"""Serialization of tracked records for import/export.

A dataset is a single mapping with four keys: ``settings``, ``metrics``,
``workouts`` and ``goal``. ``dataset_to_dict`` and ``dataset_from_dict``
round-trip every field of every record, so an export followed by an import
reproduces the same records. Files are JSON or YAML depending on suffix.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from liftlog.tracking.models import Goal, MetricsEntry, UserSettings, WorkoutSession

YAML_SUFFIXES = (".yaml", ".yml")
SUPPORTED_SUFFIXES = (".json",) + YAML_SUFFIXES


@dataclass
class Dataset:
    """All records for one user."""

    settings: UserSettings = field(default_factory=UserSettings)
    metrics: list[MetricsEntry] = field(default_factory=list)
    workouts: list[WorkoutSession] = field(default_factory=list)
    goal: Goal = field(default_factory=Goal)


def dataset_to_dict(dataset: Dataset) -> dict[str, Any]:
    """Convert a Dataset to a JSON-serializable dict."""
    return {
        "settings": dataset.settings.to_dict(),
        "metrics": [m.to_dict() for m in dataset.metrics],
        "workouts": [w.to_dict() for w in dataset.workouts],
        "goal": dataset.goal.to_dict(),
    }


def dataset_from_dict(data: dict[str, Any]) -> Dataset:
    """Build a Dataset from a dict; missing sections get defaults.

    Raises:
        ValueError: if ``data`` or one of its sections has the wrong shape
    """
    if not isinstance(data, dict):
        raise ValueError(f"Dataset must be a mapping, got {type(data).__name__}")

    settings = data.get("settings") or {}
    metrics = data.get("metrics") or []
    workouts = data.get("workouts") or []
    goal = data.get("goal") or {}

    if not isinstance(settings, dict) or not isinstance(goal, dict):
        raise ValueError("'settings' and 'goal' must be mappings")
    if not isinstance(metrics, list) or not isinstance(workouts, list):
        raise ValueError("'metrics' and 'workouts' must be lists")

    return Dataset(
        settings=UserSettings.from_dict(settings),
        metrics=[MetricsEntry.from_dict(m) for m in metrics if isinstance(m, dict)],
        workouts=[WorkoutSession.from_dict(w) for w in workouts if isinstance(w, dict)],
        goal=Goal.from_dict(goal),
    )


def load_dataset(path: Path) -> Dataset:
    """Read a dataset from a JSON or YAML file.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the suffix is unsupported or the file cannot be parsed
    """
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported records file type: {path.suffix or path.name}")
    text = path.read_text()
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
    else:
        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    return dataset_from_dict(data)


def save_dataset(dataset: Dataset, path: Path) -> None:
    """Write a dataset as JSON or YAML depending on the file suffix."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = dataset_to_dict(dataset)
    with open(path, "w") as f:
        if path.suffix.lower() in YAML_SUFFIXES:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)
