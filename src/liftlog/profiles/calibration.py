"""Calibration of the anthropometric estimate against a trusted reading.

A user with a reference measurement (DEXA, calipers, a clinic scale) can store
the difference between it and our tape-measure estimate as a signed offset.
The estimators then add that offset to every result.
"""

from __future__ import annotations

from typing import Optional

from liftlog.profiles.body_fat import ANTHROPOMETRIC_RULES, BodyMeasurements, run_chain
from liftlog.units import parse_num


def derive_calibration_offset(
    reference_pct: float,
    measurements: BodyMeasurements,
) -> Optional[float]:
    """Offset that makes the anthropometric estimate match a reference value.

    Uses the raw (uncalibrated, unclamped) anthropometric estimate so that
    applying the offset reproduces the reference exactly, before clamping.

    Args:
        reference_pct: Trusted body-fat percentage for the same day
        measurements: Measurements taken that day

    Returns:
        Signed offset in percentage points, or None if either side is missing
    """
    reference = parse_num(reference_pct)
    if reference is None:
        return None
    hit = run_chain(ANTHROPOMETRIC_RULES, measurements)
    if hit is None:
        return None
    _, raw = hit
    return reference - raw
