"""Data models for workouts, body metrics, settings and goals.

These are read-only inputs to the analytics functions. They are built by the
host (usually via ``from_dict`` on deserialized records) and never mutated by
the engine. Dates are ISO ``YYYY-MM-DD`` strings so that lexicographic order
equals chronological order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from liftlog.units import clamp, feet_inches_to_inches, parse_num

logger = logging.getLogger(__name__)


class Sex(Enum):
    """Biological sex for BMR and body-fat formulas."""
    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, value: Any) -> "Sex":
        """Parse leniently; anything unrecognized is treated as male."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.debug("Unknown sex %r, defaulting to male", value)
            return cls.MALE


class ActivityLevel(Enum):
    """Activity level for the TDEE multiplier table."""
    SEDENTARY = "sedentary"          # Little or no exercise
    LIGHT = "light"                  # Light exercise 1-3 days/week
    MODERATE = "moderate"            # Moderate exercise 3-5 days/week
    VERY_ACTIVE = "very_active"      # Hard exercise 6-7 days/week
    ATHLETE = "athlete"              # Twice-daily training, physical job


class BodyFatSource(Enum):
    """Which body-fat family is authoritative for an entry."""
    MANUAL = "manual"          # Stored value only
    ESTIMATED = "estimated"    # Anthropometric chain only
    HYBRID = "hybrid"          # Scale-assisted first, anthropometric second

    @classmethod
    def parse(cls, value: Any) -> "BodyFatSource":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.debug("Unknown body-fat source %r, defaulting to hybrid", value)
            return cls.HYBRID


DEFAULT_HYDRATION_PCT = 73.0


@dataclass
class UserSettings:
    """Per-user settings; the default source for anything an entry lacks."""

    sex: Sex = Sex.MALE
    age: int = 25
    height_ft: float = 5.0
    height_in: float = 10.0
    weight_lbs: Optional[float] = 175.0
    hydration_pct: float = DEFAULT_HYDRATION_PCT  # Assumed FFM hydration, 65-80
    bf_calibration_offset: float = 0.0            # Signed percentage points
    bf_source: BodyFatSource = BodyFatSource.HYBRID

    def __post_init__(self) -> None:
        self.sex = Sex.parse(self.sex)
        self.bf_source = BodyFatSource.parse(self.bf_source)
        self.age = max(0, int(parse_num(self.age) or 0))
        self.height_ft = parse_num(self.height_ft) or 0.0
        self.height_in = parse_num(self.height_in) or 0.0
        self.weight_lbs = parse_num(self.weight_lbs)
        self.hydration_pct = clamp(
            parse_num(self.hydration_pct) or DEFAULT_HYDRATION_PCT, 65.0, 80.0
        )
        self.bf_calibration_offset = parse_num(self.bf_calibration_offset) or 0.0

    @property
    def height_inches(self) -> float:
        return feet_inches_to_inches(self.height_ft, self.height_in)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserSettings":
        """Build settings from a dict; height is feet + inches or ``height_inches``."""
        defaults = cls()
        height_ft = data.get("height_ft", defaults.height_ft)
        height_in = data.get("height_in", defaults.height_in)
        total = parse_num(data.get("height_inches"))
        if total is not None and "height_ft" not in data and "height_in" not in data:
            height_ft, height_in = divmod(total, 12)
        return cls(
            sex=data.get("sex", defaults.sex),
            age=data.get("age", defaults.age),
            height_ft=height_ft,
            height_in=height_in,
            weight_lbs=data.get("weight_lbs", defaults.weight_lbs),
            hydration_pct=data.get("hydration_pct", defaults.hydration_pct),
            bf_calibration_offset=data.get(
                "bf_calibration_offset", defaults.bf_calibration_offset
            ),
            bf_source=data.get("bf_source", defaults.bf_source),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sex": self.sex.value,
            "age": self.age,
            "height_ft": self.height_ft,
            "height_in": self.height_in,
            "weight_lbs": self.weight_lbs,
            "hydration_pct": self.hydration_pct,
            "bf_calibration_offset": self.bf_calibration_offset,
            "bf_source": self.bf_source.value,
        }


# Optional numeric fields of a metrics entry, in display order
METRIC_FIELDS = (
    "weight_lbs",
    "body_fat_pct",
    "height_ft",
    "height_in",
    "waist_in",
    "hip_in",
    "chest_in",
    "neck_in",
    "lbm_lbs",
    "water_pct",
    "muscle_pct",
    "bone_lbs",
    "protein_pct",
    "visceral_fat",
    "resting_hr",
)


@dataclass
class MetricsEntry:
    """A date-stamped body metrics snapshot. Every measurement is optional."""

    date: str
    weight_lbs: Optional[float] = None
    body_fat_pct: Optional[float] = None  # Manual or estimator-assigned
    height_ft: Optional[float] = None
    height_in: Optional[float] = None
    waist_in: Optional[float] = None
    hip_in: Optional[float] = None
    chest_in: Optional[float] = None
    neck_in: Optional[float] = None
    # Scale-derived fields
    lbm_lbs: Optional[float] = None
    water_pct: Optional[float] = None
    muscle_pct: Optional[float] = None
    bone_lbs: Optional[float] = None
    protein_pct: Optional[float] = None
    visceral_fat: Optional[float] = None
    resting_hr: Optional[float] = None

    def __post_init__(self) -> None:
        for name in METRIC_FIELDS:
            setattr(self, name, parse_num(getattr(self, name)))

    @property
    def height_inches(self) -> Optional[float]:
        """Entry-specific height, or None if the entry did not record one."""
        if self.height_ft is None and self.height_in is None:
            return None
        return feet_inches_to_inches(self.height_ft, self.height_in)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MetricsEntry":
        return cls(
            date=str(data.get("date") or ""),
            **{name: data.get(name) for name in METRIC_FIELDS},
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"date": self.date}
        out.update({name: getattr(self, name) for name in METRIC_FIELDS})
        return out


@dataclass
class SetRecord:
    """One logged set. Missing or invalid reps/weight are stored as None."""

    name: str
    reps: Optional[float] = None
    weight_lbs: Optional[float] = None
    rpe: Optional[float] = None

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        self.reps = _non_negative(self.reps)
        self.weight_lbs = _non_negative(self.weight_lbs)
        self.rpe = parse_num(self.rpe)

    @property
    def is_valid(self) -> bool:
        return bool(self.name)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SetRecord":
        return cls(
            name=str(data.get("name") or ""),
            reps=data.get("reps"),
            weight_lbs=data.get("weight_lbs"),
            rpe=data.get("rpe"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "reps": self.reps,
            "weight_lbs": self.weight_lbs,
            "rpe": self.rpe,
        }


@dataclass
class WorkoutSession:
    """A logged training session."""

    date: str
    title: str = ""
    notes: str = ""
    sets: list[SetRecord] = field(default_factory=list)

    def valid_sets(self) -> list[SetRecord]:
        """Sets that may take part in aggregation (non-empty exercise name)."""
        return [s for s in self.sets if s.is_valid]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkoutSession":
        sets = [SetRecord.from_dict(s) for s in _mappings(data.get("sets"))]
        dropped = [s for s in sets if not s.is_valid]
        if dropped:
            logger.debug(
                "Dropping %d set(s) without exercise name on %s",
                len(dropped),
                data.get("date"),
            )
        return cls(
            date=str(data.get("date") or ""),
            title=str(data.get("title") or ""),
            notes=str(data.get("notes") or ""),
            sets=[s for s in sets if s.is_valid],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "title": self.title,
            "notes": self.notes,
            "sets": [s.to_dict() for s in self.sets],
        }


@dataclass
class LiftGoal:
    """Target estimated one-rep max for a named lift."""

    name: str
    target_1rm: Optional[float] = None

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        self.target_1rm = parse_num(self.target_1rm)


@dataclass
class Goal:
    """Singleton goal record: optional weight target and any number of lift targets."""

    target_weight_lbs: Optional[float] = None
    target_date: Optional[str] = None
    lifts: list[LiftGoal] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.target_weight_lbs = parse_num(self.target_weight_lbs)
        self.target_date = self.target_date or None
        self.lifts = [lift for lift in self.lifts if lift.name]

    @property
    def is_empty(self) -> bool:
        return self.target_weight_lbs is None and not any(
            lift.target_1rm for lift in self.lifts
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Goal":
        lifts = [
            LiftGoal(name=str(item.get("name") or ""), target_1rm=item.get("target_1rm"))
            for item in _mappings(data.get("lifts"))
        ]
        # Single-lift shape: {"lift_name": ..., "lift_1rm": ...}
        if data.get("lift_name"):
            lifts.insert(
                0, LiftGoal(name=str(data["lift_name"]), target_1rm=data.get("lift_1rm"))
            )
        target_date = data.get("target_date")
        return cls(
            target_weight_lbs=data.get("target_weight_lbs"),
            target_date=str(target_date) if target_date else None,
            lifts=lifts,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_weight_lbs": self.target_weight_lbs,
            "target_date": self.target_date,
            "lifts": [
                {"name": lift.name, "target_1rm": lift.target_1rm} for lift in self.lifts
            ],
        }


def _mappings(items: Any) -> list[dict[str, Any]]:
    """The dict items of a nested record list; anything else is skipped."""
    if not isinstance(items, list):
        return []
    kept = [item for item in items if isinstance(item, dict)]
    if len(kept) != len(items):
        logger.debug("Skipping %d malformed nested record(s)", len(items) - len(kept))
    return kept


def _non_negative(value: Any) -> Optional[float]:
    number = parse_num(value)
    if number is None or number < 0:
        return None
    return number
