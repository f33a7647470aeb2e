"""Configuration file handling for OptionView.

Settings live in ~/.config/optionview/config.toml. Every key is optional;
anything missing falls back to DEFAULT_CONFIG.
"""

import copy
import logging
from pathlib import Path
from typing import Optional

import toml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "optionview"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = {
    "payoff": {
        "steps": 100,
        "table_rows": 21,
    },
    "display": {
        "currency": "$",
    },
    "logging": {
        "level": "WARNING",
    },
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict):
            if not isinstance(value, dict):
                logger.warning("Ignoring config key '%s': expected a table, got %r", key, value)
                continue
            merged[key] = _merge(merged[key], value)
        elif key in merged and type(value) is not type(merged[key]):
            logger.warning(
                "Ignoring config key '%s': expected %s, got %r",
                key, type(merged[key]).__name__, value,
            )
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration merged over the defaults.

    Args:
        config_path: File to read. Defaults to CONFIG_PATH.

    Returns:
        Config dict. A missing or unreadable file yields the defaults, and
        keys whose value has the wrong type keep their default.
    """
    config_path = config_path or CONFIG_PATH

    if not config_path.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        user_config = toml.load(config_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return copy.deepcopy(DEFAULT_CONFIG)

    return _merge(DEFAULT_CONFIG, user_config)


def create_template_config(config_path: Optional[Path] = None) -> Path:
    """Write the default configuration to disk.

    Returns:
        Path of the written file.
    """
    config_path = config_path or CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        toml.dump(DEFAULT_CONFIG, f)

    return config_path
