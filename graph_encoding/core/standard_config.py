"""
Standard Configuration Utility

Single source of truth for visual encoding defaults. Modules read sizes,
colors, palettes and canvas settings through this instead of hardcoding them.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from graph_encoding.core.logging_config import get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = "GRAPH_ENCODING_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "default.yaml"

_FALLBACK_CONFIG: Dict[str, Any] = {
    "node": {"default_size": 10.0, "default_color": "#1f77b4", "size_range": [5.0, 30.0]},
    "edge": {"default_width": 1.0, "default_color": "#888888", "width_range": [0.5, 5.0]},
    "colors": {"neutral": "#cccccc", "qualitative_palette": "Set1", "sequential_palette": "Viridis"},
    "interaction": {"highlight": "hover", "zoom": True, "pan": True},
    "canvas": {"width": 1200, "height": 800, "background": "#ffffff"},
    "assembler": {"default_placement": "circle", "viewport_padding": 0.05},
    "layout": {"seed": 42, "iterations": 50},
}


class StandardConfig:
    """
    Singleton configuration loader that provides standardized access
    to configuration values across all modules.
    """

    _instance = None
    _config_data = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._config_data is None:
            self._load_config()

    def _load_config(self, config_path: Optional[Path] = None):
        """Load configuration from the env override or the packaged default"""
        if config_path is None:
            config_path = Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))

        try:
            with open(config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from {config_path}")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load configuration from {config_path}: {e}")
            loaded = {}

        # Sections missing from the file keep their built-in values
        merged = copy.deepcopy(_FALLBACK_CONFIG)
        for section, values in loaded.items():
            if isinstance(values, dict) and isinstance(merged.get(section), dict):
                merged[section].update(values)
            else:
                merged[section] = values
        type(self)._config_data = merged

    def reload(self, config_path: Optional[str] = None):
        """Reload configuration, optionally from an explicit file"""
        self._load_config(Path(config_path) if config_path else None)

    def get_config_section(self, section: str) -> Dict[str, Any]:
        """Get a copy of an entire configuration section"""
        return copy.deepcopy(self._config_data.get(section, {}))

    def get_config_value(self, path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            path: Configuration path like "node.size_range"
            default: Default value if not found

        Returns:
            Configuration value
        """
        keys = path.split('.')
        value = self._config_data

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value


# Global instance
_config = StandardConfig()


def get_config() -> StandardConfig:
    """Get the shared configuration instance"""
    return _config


def get_config_section(section: str) -> Dict[str, Any]:
    """Get entire configuration section"""
    return _config.get_config_section(section)


def get_config_value(path: str, default: Any = None) -> Any:
    """Get configuration value using dot notation like 'node.default_size'"""
    return _config.get_config_value(path, default)


def reload_config(config_path: Optional[str] = None):
    """Reload the shared configuration"""
    _config.reload(config_path)
