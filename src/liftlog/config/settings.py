"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".liftlog"


def _default_data_path() -> Path:
    """Return the default records file path."""
    return _default_config_dir() / "data.json"


@dataclass
class DataConfig:
    """Where the CLI looks for exported records."""

    path: Path = field(default_factory=_default_data_path)


@dataclass
class ReadinessConfig:
    """Muscle readiness model constants."""

    decay_rate_per_day: float = 0.30
    fresh_threshold: float = 0.8
    moderate_threshold: float = 0.5


@dataclass
class ProjectionConfig:
    """Weight/body-fat projection constants."""

    horizon_days: int = 70
    fat_fraction: float = 0.75
    default_body_fat_pct: float = 25.0


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    activity_level: str = "moderate"
    output_format: str = "table"  # "table", "json"
    plan_goal: str = "general"  # "strength", "loss", "general"
    plan_equipment: str = "barbell"  # "barbell", "dumbbells", "minimal"
    plan_days: int = 4


@dataclass
class Settings:
    """Main application settings."""

    data: DataConfig = field(default_factory=DataConfig)
    readiness: ReadinessConfig = field(default_factory=ReadinessConfig)
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.liftlog/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse data config
        if "data" in data:
            data_cfg = data["data"] or {}
            if "path" in data_cfg:
                settings.data.path = Path(data_cfg["path"]).expanduser()

        # Parse readiness config
        if "readiness" in data:
            rd_data = data["readiness"] or {}
            if "decay_rate_per_day" in rd_data:
                settings.readiness.decay_rate_per_day = float(rd_data["decay_rate_per_day"])
            if "fresh_threshold" in rd_data:
                settings.readiness.fresh_threshold = float(rd_data["fresh_threshold"])
            if "moderate_threshold" in rd_data:
                settings.readiness.moderate_threshold = float(rd_data["moderate_threshold"])

        # Parse projection config
        if "projection" in data:
            proj_data = data["projection"] or {}
            if "horizon_days" in proj_data:
                settings.projection.horizon_days = int(proj_data["horizon_days"])
            if "fat_fraction" in proj_data:
                settings.projection.fat_fraction = float(proj_data["fat_fraction"])
            if "default_body_fat_pct" in proj_data:
                settings.projection.default_body_fat_pct = float(
                    proj_data["default_body_fat_pct"]
                )

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "activity_level" in def_data:
                settings.defaults.activity_level = str(def_data["activity_level"])
            if "output_format" in def_data:
                settings.defaults.output_format = str(def_data["output_format"])
            if "plan_goal" in def_data:
                settings.defaults.plan_goal = str(def_data["plan_goal"])
            if "plan_equipment" in def_data:
                settings.defaults.plan_equipment = str(def_data["plan_equipment"])
            if "plan_days" in def_data:
                settings.defaults.plan_days = int(def_data["plan_days"])

        return settings

    def to_dict(self) -> dict:
        """Plain-dict form, as written to config.yaml."""
        return {
            "data": {
                "path": str(self.data.path),
            },
            "readiness": {
                "decay_rate_per_day": self.readiness.decay_rate_per_day,
                "fresh_threshold": self.readiness.fresh_threshold,
                "moderate_threshold": self.readiness.moderate_threshold,
            },
            "projection": {
                "horizon_days": self.projection.horizon_days,
                "fat_fraction": self.projection.fat_fraction,
                "default_body_fat_pct": self.projection.default_body_fat_pct,
            },
            "defaults": {
                "activity_level": self.defaults.activity_level,
                "output_format": self.defaults.output_format,
                "plan_goal": self.defaults.plan_goal,
                "plan_equipment": self.defaults.plan_equipment,
                "plan_days": self.defaults.plan_days,
            },
        }

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.liftlog/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
