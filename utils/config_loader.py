"""Configuration management utilities."""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    'rename_map': {},
    'export': {
        'split_messages': False,
    },
    'output': {
        'delimiter': ',',
        'missing_value': 'NaN',
        'extension': '.csv',
    },
}


def load_config(config_path=None) -> Dict[str, Any]:
    """
    Load configuration from YAML file, merged over DEFAULT_CONFIG.

    Args:
        config_path: Path to YAML configuration file (str or Path).
            If None, the defaults are returned.

    Returns:
        Dictionary containing configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the document is not a mapping
        yaml.YAMLError: If config file is malformed
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is None:
        return config

    user_config = _read_yaml(config_path)
    if user_config is None:
        return config
    if not isinstance(user_config, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    config = _deep_merge(config, user_config)
    logger.debug(f"Loaded config keys: {list(user_config.keys())}")

    return config


def load_rename_map(rename_map_path) -> Any:
    """
    Load a standalone rename map (default column name -> export name).

    The raw YAML document is returned unvalidated; RenameMap.from_raw
    decides whether it is usable.
    """
    raw = _read_yaml(rename_map_path)
    return {} if raw is None else raw


def get_nested_config(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get nested configuration value using dot notation.

    Example:
        get_nested_config(config, 'output.delimiter', default=',')

    Args:
        config: Configuration dictionary
        key_path: Dot-separated path to value
        default: Default value if path not found

    Returns:
        Configuration value or default
    """
    keys = key_path.split('.')
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def _read_yaml(path) -> Optional[Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info(f"Loading configuration from {path}")

    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    # rename_map is replaced wholesale, not merged key by key
    merged = dict(base)
    for key, value in override.items():
        if key != 'rename_map' and isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
