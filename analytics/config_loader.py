"""
Configuration Loader for Analytics Service

This module loads configuration from JSON file and provides fallback defaults.
"""

import copy
import json
import os
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Default configuration (used as fallback)
DEFAULT_CONFIG = {
    "burnout": {
        "min_interactions": 7,
        "insight_min_risk_score": 40,
        "recipient_fetch_limit": 50
    },
    "prediction": {
        "min_interactions": 10,
        "recipient_fetch_limit": 500
    },
    "local_timezone": "UTC"
}

# Cache for loaded config
_config_cache: Optional[Dict[str, Any]] = None


def _default_config_path() -> str:
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), "config.json")


def _merge_with_defaults(overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay file values on DEFAULT_CONFIG, section by section."""
    merged = copy.deepcopy(DEFAULT_CONFIG)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the analytics thresholds and timezone.

    Values in config.json override DEFAULT_CONFIG key by key, so a file may set
    only the thresholds it cares about. A missing or unreadable file leaves the
    defaults in place. The result is cached for the life of the process.

    Args:
        config_path: Path to config file. If None, uses config.json next to this module.
    """
    global _config_cache

    if _config_cache is not None:
        return _config_cache

    config_path = config_path or _default_config_path()
    overrides: Dict[str, Any] = {}

    if not os.path.exists(config_path):
        logger.info(f"No analytics config at {config_path}, using default thresholds")
    else:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                overrides = json.load(f)
            if not isinstance(overrides, dict):
                raise ValueError("top-level value must be an object")
            logger.info(f"Loaded analytics config from {config_path}")
        except (OSError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            logger.error(f"Ignoring analytics config {config_path}: {e}")
            overrides = {}

    _config_cache = _merge_with_defaults(overrides)
    return _config_cache


def clear_config_cache() -> None:
    """Forget the cached config so the next load_config() reads the file again."""
    global _config_cache
    _config_cache = None


def get_section(name: str) -> Dict[str, Any]:
    """Return one top-level section of the config, falling back to the default section."""
    section = load_config().get(name)
    if not isinstance(section, dict):
        return DEFAULT_CONFIG.get(name, {})
    return section


def get_local_timezone_name() -> str:
    """Timezone used to interpret naive timestamps and derive time of day."""
    return load_config().get("local_timezone", DEFAULT_CONFIG["local_timezone"])
