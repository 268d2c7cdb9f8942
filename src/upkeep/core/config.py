"""Configuration and path management for upkeep."""

from pathlib import Path
from dataclasses import dataclass, field
import os

import yaml

from upkeep.core.errors import ConfigError


DEFAULT_REFRESH_INTERVAL_DAYS = 7
DEFAULT_SCHEDULE_TIME = "03:00"


@dataclass
class UpkeepConfig:
    """Configuration for upkeep."""

    base_dir: Path
    cache_dir: Path
    packages_dir: Path
    manifest_path: Path
    settings_path: Path
    refresh_interval_days: int = DEFAULT_REFRESH_INTERVAL_DAYS
    schedule_time: str = DEFAULT_SCHEDULE_TIME
    sources: list[str] = field(default_factory=list)
    version_control: bool = True
    unattended: bool = False

    @classmethod
    def default(cls) -> "UpkeepConfig":
        """Create config with default paths and settings from ``config.yaml``."""
        base = Path(os.environ.get("UPKEEP_HOME", Path.home() / ".upkeep"))
        return cls.for_base_dir(base)

    @classmethod
    def for_base_dir(cls, base: Path) -> "UpkeepConfig":
        """Create config rooted at ``base``, loading settings if present."""
        config = cls(
            base_dir=base,
            cache_dir=base / "cache",
            packages_dir=base / "packages",
            manifest_path=base / "manifest.yaml",
            settings_path=base / "config.yaml",
        )
        config.load_settings()
        return config

    def load_settings(self) -> None:
        """Apply settings from the YAML settings file, if it exists."""
        if not self.settings_path.exists():
            return

        try:
            with open(self.settings_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {self.settings_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"{self.settings_path} must contain a mapping")

        interval = data.get("refresh_interval_days", self.refresh_interval_days)
        if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
            raise ConfigError("refresh_interval_days must be a positive integer")

        sources = data.get("sources", self.sources) or []
        if not isinstance(sources, list) or not all(isinstance(s, str) for s in sources):
            raise ConfigError("sources must be a list of URLs")

        self.refresh_interval_days = interval
        self.schedule_time = str(data.get("schedule_time", self.schedule_time))
        self.sources = sources
        self.version_control = bool(data.get("version_control", self.version_control))
        self.unattended = bool(data.get("unattended", self.unattended))

    def ensure_dirs(self) -> None:
        """Ensure all required directories exist."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.packages_dir.mkdir(parents=True, exist_ok=True)


# Global config instance
_config: UpkeepConfig | None = None


def get_config() -> UpkeepConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = UpkeepConfig.default()
    return _config


def set_config(config: UpkeepConfig | None) -> None:
    """Set a custom configuration (useful for testing)."""
    global _config
    _config = config
