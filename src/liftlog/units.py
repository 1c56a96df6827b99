"""Unit conversion and null-safe numeric helpers.

All user-entered values pass through ``parse_num`` before reaching a formula,
so the estimators only ever see finite floats or ``None``.
"""

from __future__ import annotations

import math
from typing import Any, Optional

LB_TO_KG = 0.453592
IN_TO_CM = 2.54

# Physiologically plausible body-fat band (percent)
BODY_FAT_MIN = 3.0
BODY_FAT_MAX = 60.0


def parse_num(value: Any) -> Optional[float]:
    """Parse a user-entered value into a finite float.

    Empty strings, ``None``, booleans, non-numeric text, NaN and infinities
    all come back as ``None``.

    Example:
        >>> parse_num("12.5")
        12.5
        >>> parse_num("") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def positive(value: Any) -> Optional[float]:
    """Return the value as a float if it is finite and > 0, else ``None``."""
    number = parse_num(value)
    if number is None or number <= 0:
        return None
    return number


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def clamp_body_fat(pct: float) -> float:
    """Clamp a body-fat percentage into the plausible [3, 60] band."""
    return clamp(pct, BODY_FAT_MIN, BODY_FAT_MAX)


def lbs_to_kg(weight_lbs: float) -> float:
    return weight_lbs * LB_TO_KG


def inches_to_cm(height_inches: float) -> float:
    return height_inches * IN_TO_CM


def feet_inches_to_inches(feet: Optional[float], inches: Optional[float]) -> float:
    """Combine a feet + inches height into total inches (absent parts count as 0)."""
    return (parse_num(feet) or 0.0) * 12 + (parse_num(inches) or 0.0)
