"""Configuration loader for StreamCheck"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional
import os


class Config:
    """Configuration manager for StreamCheck

    Values are read from a YAML file and looked up with dot notation
    (e.g. ``network.bitrate_critical``). When no explicit path is given and no
    config file is present, the configuration starts empty and every caller
    falls back to its built-in default.
    """

    def __init__(self, config_path: Optional[str] = None, data: Optional[Dict[str, Any]] = None):
        self._required = config_path is not None
        if data is not None:
            self.config_path = None
            self._config = data
            return

        if config_path is None:
            env = os.getenv('STREAMCHECK_ENV', 'development')
            # Try environment-specific config first, fall back to default
            env_config = Path(f"config/config.{env}.yaml")
            if env_config.exists():
                config_path = str(env_config)
            else:
                config_path = "config/config.yaml"

        self.config_path = Path(config_path)
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        if not self.config_path.exists():
            if self._required:
                raise FileNotFoundError(f"Config file not found: {self.config_path}")
            return {}

        with open(self.config_path, 'r') as f:
            return yaml.safe_load(f) or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation

        Args:
            key: Configuration key in dot notation (e.g., 'audio.rms_low')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default

    def __getitem__(self, key: str) -> Any:
        """Allow dictionary-style access"""
        return self.get(key)

    def validate(self) -> None:
        """Validate configuration values"""
        # Scoring weights must be fractions
        weights = self.get('scoring.weights', {})
        for name, weight in weights.items():
            if not 0 <= weight <= 1:
                raise ValueError(f"Invalid scoring weight for {name}: {weight}, must be in [0, 1]")

        # Network tiers must be ordered critical < poor < moderate
        critical = self.get('network.bitrate_critical', 250)
        poor = self.get('network.bitrate_poor', 500)
        moderate = self.get('network.bitrate_moderate', 1000)
        if not critical < poor < moderate:
            raise ValueError(
                f"Bitrate tiers out of order: critical={critical}, poor={poor}, moderate={moderate}"
            )

        low = self.get('video.brightness_low', 30)
        high = self.get('video.brightness_high', 180)
        if not 0 <= low < high <= 255:
            raise ValueError(f"Invalid brightness bounds: low={low}, high={high}")

        latency_window = self.get('network.latency_window', 10)
        if not 2 <= latency_window <= 20:
            raise ValueError(f"Invalid latency_window: {latency_window}, must be in [2, 20]")


# Global config instance
config = Config()
