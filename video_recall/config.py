"""
Configuration loader for Video Recall.

Loads settings from a YAML config file with sensible defaults.
"""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

logger = logging.getLogger(__name__)

APP_DIR = Path.home() / ".video_recall"
DEFAULT_CONFIG_PATH = APP_DIR / "config.yaml"
DEFAULT_STORE_PATH = APP_DIR / "recent_videos.json"


@dataclass
class RecentConfig:
    """Configuration for the recent videos list."""
    max_entries: int = 10
    store_key: str = "recentVideos"
    remint_stale: bool = True  # Refresh references of moved files on load


@dataclass
class StoreConfig:
    """Configuration for the persisted key-value store."""
    backend: str = "json"  # "json" or "memory"
    path: str = ""  # Empty means ~/.video_recall/recent_videos.json

    def resolved_path(self) -> Path:
        return Path(self.path).expanduser() if self.path else DEFAULT_STORE_PATH


@dataclass
class PlayerConfig:
    """Configuration for the playback shell."""
    seek_step_seconds: float = 10.0
    default_rate: float = 1.0
    rates: List[float] = field(default_factory=lambda: [0.5, 1.0, 1.25, 1.5, 2.0])
    autoplay: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    log_file: str = ""
    console: bool = True


@dataclass
class Config:
    """Main configuration container."""
    recent: RecentConfig = field(default_factory=RecentConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    SECTIONS = ("recent", "store", "player", "logging")

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """
        Load configuration from YAML file.

        If no path is provided, uses default values.
        Missing keys in the config file will use defaults.
        """
        config = cls()

        if config_path and config_path.exists():
            logger.info(f"Loading configuration from {config_path}")
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}

            if not isinstance(data, dict):
                logger.warning(f"Ignoring {config_path}: expected a mapping, got {type(data).__name__}")
                data = {}

            for section_name in cls.SECTIONS:
                section_data = data.get(section_name)
                if not isinstance(section_data, dict):
                    continue
                section = getattr(config, section_name)
                for key, value in section_data.items():
                    if hasattr(section, key):
                        setattr(section, key, value)
                    else:
                        logger.debug(f"Ignoring unknown config key {section_name}.{key}")

        if config.recent.max_entries < 1:
            logger.warning(f"recent.max_entries must be positive, got {config.recent.max_entries}")
            config.recent.max_entries = RecentConfig.max_entries

        return config

    def save(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        data = asdict(self)
        logger.info(f"Saving configuration to {config_path}")

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(data, f, default_flow_style=False)
