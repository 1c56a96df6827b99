"""Tests for body-fat estimation chains."""

from __future__ import annotations

import math

import pytest

from liftlog.profiles.body_fat import (
    BodyMeasurements,
    assumed_hydration,
    estimate_anthropometric,
    estimate_scale_assisted,
    measurements_for,
    resolve_body_fat,
)
from liftlog.profiles.calibration import derive_calibration_offset
from liftlog.tracking.models import BodyFatSource, MetricsEntry, Sex, UserSettings


def navy_male(waist: float, neck: float, height: float) -> float:
    return 86.010 * math.log10(waist - neck) - 70.041 * math.log10(height) + 36.76


def bmi_estimate(weight: float, height: float, age: float, male: bool) -> float:
    bmi = 703 * weight / (height * height)
    return 1.2 * bmi + 0.23 * age - 10.8 * (1 if male else 0) - 5.4


class TestAnthropometric:
    """Tests for the Navy -> YMCA -> BMI chain."""

    def test_navy_male(self) -> None:
        """Waist and neck with height use the Navy formula."""
        m = BodyMeasurements(
            sex=Sex.MALE, age=30, height_in=70, weight_lbs=180, waist_in=34, neck_in=16
        )
        est = estimate_anthropometric(m)
        assert est.method == "navy"
        assert est.family == "anthropometric"
        assert est.percent == pytest.approx(navy_male(34, 16, 70))
        assert 3 <= est.percent <= 60

    def test_navy_always_within_band(self) -> None:
        """Navy estimates stay within 3-60% across body sizes."""
        for sex in (Sex.MALE, Sex.FEMALE):
            for waist in (20, 30, 45, 70):
                for height in (48, 66, 84):
                    m = BodyMeasurements(
                        sex=sex, age=40, height_in=height, waist_in=waist, hip_in=40, neck_in=14
                    )
                    est = estimate_anthropometric(m)
                    assert est.method == "navy"
                    assert 3 <= est.percent <= 60

    def test_navy_female_needs_hip(self) -> None:
        """Without a hip measurement a woman's estimate falls to YMCA."""
        m = BodyMeasurements(
            sex=Sex.FEMALE, age=30, height_in=65, weight_lbs=140, waist_in=30, neck_in=13
        )
        assert estimate_anthropometric(m).method == "ymca"

        with_hip = BodyMeasurements(
            sex=Sex.FEMALE, age=30, height_in=65, weight_lbs=140,
            waist_in=30, hip_in=38, neck_in=13,
        )
        est = estimate_anthropometric(with_hip)
        expected = 163.205 * math.log10(30 + 38 - 13) - 97.684 * math.log10(65) - 78.387
        assert est.method == "navy"
        assert est.percent == pytest.approx(expected)

    def test_waist_not_above_neck_skips_navy(self) -> None:
        """A non-positive circumference difference falls through to YMCA."""
        m = BodyMeasurements(
            sex=Sex.MALE, age=30, height_in=70, weight_lbs=180, waist_in=16, neck_in=16
        )
        assert estimate_anthropometric(m).method == "ymca"

    def test_ymca_without_height(self) -> None:
        """Waist and weight without height use YMCA."""
        m = BodyMeasurements(sex=Sex.MALE, age=30, weight_lbs=200, waist_in=38)
        est = estimate_anthropometric(m)
        expected = ((38 * 4.15) - (200 * 0.082) - 98.42) / 200 * 100
        assert est.method == "ymca"
        assert est.percent == pytest.approx(expected)

    def test_weight_and_height_only_uses_bmi(self) -> None:
        """Height and weight alone fall through to the BMI rule."""
        m = BodyMeasurements(sex=Sex.MALE, age=30, height_in=70, weight_lbs=180)
        est = estimate_anthropometric(m)
        assert est.method == "bmi"
        assert est.percent == pytest.approx(bmi_estimate(180, 70, 30, True))

    def test_no_weight_no_estimate(self) -> None:
        """Missing inputs give None rather than a number."""
        m = BodyMeasurements(sex=Sex.MALE, age=30, height_in=70, waist_in=34, neck_in=16)
        # Navy needs no weight
        assert estimate_anthropometric(m).method == "navy"
        assert estimate_anthropometric(BodyMeasurements(sex=Sex.MALE, age=30)) is None

    def test_calibration_offset_added(self) -> None:
        """The calibration offset is added to the raw estimate."""
        m = BodyMeasurements(sex=Sex.MALE, age=30, height_in=70, weight_lbs=180)
        base = estimate_anthropometric(m).percent
        assert estimate_anthropometric(m, calibration_offset=2.5).percent == pytest.approx(
            base + 2.5
        )

    def test_result_is_clamped(self) -> None:
        """Calibrated results are clamped to 3-60%."""
        m = BodyMeasurements(sex=Sex.MALE, age=30, height_in=70, weight_lbs=180)
        assert estimate_anthropometric(m, calibration_offset=-100).percent == 3.0
        assert estimate_anthropometric(m, calibration_offset=100).percent == 60.0


class TestScaleAssisted:
    """Tests for the LBM -> TBW chain."""

    def test_lbm_first(self) -> None:
        """A reported lean mass wins over body water."""
        m = BodyMeasurements(
            sex=Sex.MALE, age=30, weight_lbs=200, lbm_lbs=160, water_pct=55
        )
        est = estimate_scale_assisted(m)
        assert est.method == "lbm"
        assert est.percent == pytest.approx(20.0)

    def test_tbw_with_default_hydration(self) -> None:
        """Body water is divided by 73% hydration by default."""
        m = BodyMeasurements(sex=Sex.MALE, age=30, weight_lbs=200, water_pct=58.4)
        est = estimate_scale_assisted(m)
        assert est.method == "tbw"
        assert est.percent == pytest.approx(100 * (1 - 0.584 / 0.73))

    def test_hydration_adjusted_by_muscle(self) -> None:
        """Muscle % shifts the hydration assumption within 68-78%."""
        assert assumed_hydration(73) == pytest.approx(0.73)
        assert assumed_hydration(73, muscle_pct=50) == pytest.approx(0.745)
        assert assumed_hydration(73, muscle_pct=100) == pytest.approx(0.78)
        assert assumed_hydration(73, muscle_pct=0) == pytest.approx(0.68)
        assert assumed_hydration(95) == pytest.approx(0.80)

    def test_nothing_from_scale(self) -> None:
        """Weight alone gives no scale-assisted estimate."""
        m = BodyMeasurements(sex=Sex.MALE, age=30, weight_lbs=200)
        assert estimate_scale_assisted(m) is None


class TestResolveBodyFat:
    """Tests for source selection and settings fallback."""

    def test_entry_with_only_weight_uses_bmi_from_settings_height(self, settings) -> None:
        """An entry with only weight borrows height from settings."""
        entry = MetricsEntry(date="2024-01-01", weight_lbs=180)
        est = resolve_body_fat(entry, settings)
        assert est.method == "bmi"
        assert est.percent == pytest.approx(bmi_estimate(180, 70, 30, True))

    def test_entry_height_overrides_settings(self, settings) -> None:
        """Per-entry height replaces the settings height."""
        entry = MetricsEntry(date="2024-01-01", weight_lbs=180, height_ft=6, height_in=0)
        m = measurements_for(entry, settings)
        assert m.height_in == 72
        assert m.sex == Sex.MALE and m.age == 30

    def test_settings_only(self, settings) -> None:
        """No entry at all still estimates from settings."""
        est = resolve_body_fat(None, settings)
        assert est.method == "bmi"

    def test_hybrid_prefers_scale(self, settings) -> None:
        """Hybrid uses scale data first; estimated ignores it."""
        entry = MetricsEntry(
            date="2024-01-01", weight_lbs=200, lbm_lbs=160, waist_in=34, neck_in=16
        )
        assert resolve_body_fat(entry, settings).method == "lbm"
        assert resolve_body_fat(entry, settings, BodyFatSource.ESTIMATED).method == "navy"

    def test_hybrid_falls_back_to_anthropometric(self, settings) -> None:
        """Hybrid without scale data uses the tape-measure chain."""
        entry = MetricsEntry(date="2024-01-01", weight_lbs=180, waist_in=34, neck_in=16)
        assert resolve_body_fat(entry, settings, "hybrid").method == "navy"

    def test_manual(self, settings) -> None:
        """Manual source returns the stored value, clamped."""
        entry = MetricsEntry(date="2024-01-01", weight_lbs=180, body_fat_pct=72)
        est = resolve_body_fat(entry, settings, "manual")
        assert est.method == "manual"
        assert est.percent == 60.0
        assert resolve_body_fat(MetricsEntry(date="2024-01-01"), settings, "manual") is None

    def test_insufficient_data(self) -> None:
        """No height and no weight means no estimate."""
        settings = UserSettings(height_ft=0, height_in=0, weight_lbs=None)
        assert resolve_body_fat(MetricsEntry(date="2024-01-01"), settings) is None


class TestCalibration:
    def test_offset_reproduces_reference(self) -> None:
        """Applying the derived offset reproduces the reference."""
        m = BodyMeasurements(
            sex=Sex.MALE, age=30, height_in=70, weight_lbs=180, waist_in=34, neck_in=16
        )
        offset = derive_calibration_offset(18.0, m)
        assert offset == pytest.approx(18.0 - navy_male(34, 16, 70))
        assert estimate_anthropometric(m, offset).percent == pytest.approx(18.0)

    def test_missing_inputs(self) -> None:
        """No reference or no estimate gives no offset."""
        assert derive_calibration_offset(None, BodyMeasurements(sex=Sex.MALE, age=30)) is None
        assert derive_calibration_offset(18.0, BodyMeasurements(sex=Sex.MALE, age=30)) is None
