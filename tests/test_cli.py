"""Tests for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from liftlog.cli import app
from liftlog.config import reload_settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def default_settings(tmp_path: Path):
    """Use built-in defaults instead of ~/.liftlog/config.yaml."""
    reload_settings(tmp_path / "no-config.yaml")


def invoke_json(*args: str) -> dict:
    result = runner.invoke(app, [*args, "--json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestMainCommands:
    """Tests for top-level behaviour."""

    def test_help(self) -> None:
        """Test that --help lists the commands."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "readiness" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing records file exits with an error."""
        result = runner.invoke(app, ["lifts", "--data", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_file_json_error(self, tmp_path: Path) -> None:
        """A malformed file yields a JSON error envelope."""
        path = tmp_path / "bad.json"
        path.write_text("[1, 2]")
        result = runner.invoke(app, ["lifts", "--data", str(path), "--json"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["success"] is False


    def test_malformed_sets_still_load(self, tmp_path: Path) -> None:
        """Non-mapping sets are skipped and the command still succeeds."""
        path = tmp_path / "data.json"
        path.write_text(json.dumps({
            "workouts": [
                {"date": "2024-03-11", "sets": [5, {"name": "Squat", "reps": 5, "weight_lbs": 225}]}
            ]
        }))
        lifts = invoke_json("lifts", "--data", str(path))["data"]["lifts"]
        assert [item["exercise"] for item in lifts] == ["Squat"]


class TestBodyCommands:
    def test_bodyfat(self, data_file: Path) -> None:
        """Test body-fat estimate for the latest entry."""
        response = invoke_json("bodyfat", "--data", str(data_file))
        assert response["success"] is True
        assert response["data"]["method"] == "navy"
        assert response["data"]["date"] == "2024-03-15"

    def test_bodyfat_manual_without_value(self, data_file: Path) -> None:
        """Manual source with no stored value reports insufficient data."""
        result = runner.invoke(app, ["bodyfat", "--data", str(data_file), "--source", "manual"])
        assert result.exit_code == 1
        assert "Not enough data" in result.output

    def test_bodyfat_reference_offset(self, data_file: Path) -> None:
        """A reference reading suggests a calibration offset."""
        data = invoke_json("bodyfat", "--data", str(data_file), "--reference", "18")["data"]
        assert data["suggested_offset"] == pytest.approx(18 - data["body_fat_pct"], abs=0.1)

    def test_history(self, data_file: Path) -> None:
        """Test body history with and without estimates."""
        points = invoke_json("history", "--data", str(data_file), "--estimate")["data"]["points"]
        assert [p["date"] for p in points] == ["2024-03-01", "2024-03-08", "2024-03-15"]
        assert all(p["estimated"] for p in points)

        plain = invoke_json("history", "--data", str(data_file))["data"]["points"]
        assert all(p["body_fat_pct"] is None for p in plain)

    def test_energy(self, data_file: Path) -> None:
        """Test energy report at a given intake."""
        response = invoke_json("energy", "--data", str(data_file), "--intake", "2000")
        data = response["data"]
        assert data["weight_lbs"] == 183
        assert data["activity_level"] == "moderate"
        assert data["lbs_per_week"] < 0

    def test_project(self, data_file: Path) -> None:
        """Test projection series as JSON."""
        response = invoke_json(
            "project", "--data", str(data_file), "--days", "14", "--today", "2024-03-15"
        )
        points = response["data"]["points"]
        assert len(points) == 14
        assert points[0]["date"] == "2024-03-15"
        assert response["data"]["net_change_lbs"] == 0

    def test_project_target(self, data_file: Path) -> None:
        """Days to target are reported only when reachable."""
        data = invoke_json(
            "project", "--data", str(data_file), "--intake", "1500", "--target", "175"
        )["data"]
        assert data["days_to_target"] > 0

        maintenance = invoke_json("project", "--data", str(data_file), "--target", "175")
        assert maintenance["data"]["days_to_target"] is None

    def test_project_table(self, data_file: Path) -> None:
        """Test projection table output."""
        result = runner.invoke(app, ["project", "--data", str(data_file), "--intake", "2200"])
        assert result.exit_code == 0
        assert "TDEE" in result.output


class TestTrainingCommands:
    def test_lifts(self, data_file: Path) -> None:
        """Test personal records listing."""
        lifts = invoke_json("lifts", "--data", str(data_file))["data"]["lifts"]
        squat = next(item for item in lifts if item["exercise"] == "Squat")
        assert squat["pr_weight_lbs"] == 235
        assert squat["pr_date"] == "2024-03-11"

    def test_lift_history(self, data_file: Path) -> None:
        """Test one lift's 1RM history."""
        data = invoke_json("lifts", "--data", str(data_file), "--lift", "Bench Press")["data"]
        assert [p["date"] for p in data["history"]] == ["2024-03-13"]

        result = runner.invoke(app, ["lifts", "--data", str(data_file), "--lift", "Curl"])
        assert result.exit_code == 1

    def test_volume(self, data_file: Path) -> None:
        """Test weekly volume totals."""
        weeks = invoke_json("volume", "--data", str(data_file))["data"]["weeks"]
        assert weeks == {"2024-11": 225 * 5 + 235 * 5 + 185 * 5 + 195 * 3 + 135 * 8}

    def test_readiness(self, data_file: Path) -> None:
        """Test readiness scores and buckets."""
        data = invoke_json("readiness", "--data", str(data_file), "--today", "2024-03-15")["data"]
        assert data["Back"] == {"score": 0.7, "status": "moderate"}
        assert data["Chest"]["status"] == "fatigued"
        assert data["Core"] == {"score": 1.0, "status": "fresh"}

    def test_readiness_bad_date(self, data_file: Path) -> None:
        """An invalid --today value is rejected."""
        result = runner.invoke(app, ["readiness", "--data", str(data_file), "--today", "soon"])
        assert result.exit_code != 0

    def test_streak(self, data_file: Path) -> None:
        """Test streak, today's volume and badges."""
        data = invoke_json("streak", "--data", str(data_file), "--today", "2024-03-14")["data"]
        assert data["streak_days"] == 2
        assert data["today_volume"] == 1080
        assert "first" in data["badges"]

    def test_goals(self, data_file: Path) -> None:
        """Test goal progress output."""
        data = invoke_json("goals", "--data", str(data_file), "--today", "2024-03-15")["data"]
        assert data["weight"]["days_remaining"] == 78
        assert data["lifts"][0]["lift"] == "Squat"


class TestPlanAndConfig:
    def test_plan_is_stable_within_week(self) -> None:
        """The plan is the same on every day of an ISO week."""
        monday = invoke_json("plan", "--goal", "strength", "--today", "2024-03-11")["data"]
        friday = invoke_json("plan", "--goal", "strength", "--today", "2024-03-15")["data"]
        assert monday["days"] == friday["days"]
        assert monday["week"] == "2024-11"

    def test_template(self) -> None:
        """Preset workouts are listed by name."""
        data = invoke_json("template", "fives")["data"]
        assert [s["name"] for s in data["sets"]] == ["Back Squat", "Bench Press", "Deadlift"]

    def test_unknown_template(self) -> None:
        """An unknown preset exits with an error."""
        result = runner.invoke(app, ["template", "bro-split"])
        assert result.exit_code == 1
        assert "Unknown template" in result.output

    def test_config_init_and_show(self, tmp_path: Path) -> None:
        """Test writing and showing the configuration."""
        path = tmp_path / "config.yaml"
        result = runner.invoke(app, ["config", "init", "--path", str(path)])
        assert result.exit_code == 0
        assert path.exists()

        data = invoke_json("config", "show")["data"]
        assert data["readiness"]["decay_rate_per_day"] == 0.3
