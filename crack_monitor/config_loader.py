"""
config_loader.py - Configuration Management

Centralized configuration loading from config.yaml file.
Provides default values and validation for all dashboard parameters.

Usage:
    from crack_monitor.config_loader import load_config, get_config

    config = load_config()
    base_url = config['api']['base_url']
"""

import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

# Global config cache
_config_cache: Optional[Dict[str, Any]] = None


def load_config(config_path: str = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file with defaults.

    Sections missing from the file are filled in from get_default_config(),
    so callers can always index the documented keys.

    Args:
        config_path: Path to config.yaml (default: PROJECT_ROOT/config.yaml)

    Returns:
        Dictionary containing all configuration parameters
    """
    global _config_cache

    if _config_cache is not None:
        return _config_cache

    if config_path is None:
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}. Using defaults.")
        _config_cache = get_default_config()
        return _config_cache

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse config file: {e}")
        logger.warning("Using default configuration")
        _config_cache = get_default_config()
        return _config_cache

    if not isinstance(loaded, dict):
        logger.warning(f"Config file {config_path} is not a mapping. Using defaults.")
        _config_cache = get_default_config()
        return _config_cache

    config = merge_with_defaults(loaded)
    logger.info(f"Configuration loaded from: {config_path}")
    if not validate_config(config):
        logger.warning("Configuration has invalid values; check the warnings above")
    _config_cache = config
    return config


def get_config() -> Dict[str, Any]:
    """
    Get current configuration (loads if not already loaded).

    Returns:
        Dictionary containing all configuration parameters
    """
    if _config_cache is None:
        return load_config()
    return _config_cache


def reload_config(config_path: str = None) -> Dict[str, Any]:
    """
    Force reload configuration from file.

    Args:
        config_path: Path to config.yaml

    Returns:
        Dictionary containing all configuration parameters
    """
    global _config_cache
    _config_cache = None
    return load_config(config_path)


def merge_with_defaults(overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay one level of user sections on top of the defaults."""
    config = get_default_config()
    for section, values in overrides.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration values.
    Used as fallback if config.yaml is missing.

    Returns:
        Dictionary with default configuration
    """
    return copy.deepcopy({
        'api': {
            'base_url': 'http://localhost:8080',
            'buildings_path': '/buildings',
            'timeout_seconds': 10.0
        },
        'elevation': {
            'upstream_url': 'https://maps.googleapis.com/maps/api/elevation/json',
            'api_key_env': 'GOOGLE_ELEVATION_KEY',
            'timeout_seconds': 10.0,
            'host': '0.0.0.0',
            'port': 8888
        },
        'severity': {
            'severe_threshold_mm': 0.3,
            'caution_threshold_mm': 0.2
        },
        'ranking': {
            'top_n': 3
        },
        'paths': {
            'logs_dir': 'logs'
        },
        'logging': {
            'level': 'INFO',
            'max_file_size_mb': 10,
            'backup_count': 5,
            'console_logging': True,
            'file_logging': True
        },
        'ui': {
            'page_title': '건물 균열 모니터링',
            'columns': 3
        }
    })


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration values.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if valid, False otherwise

    Logs warnings for invalid values.
    """
    valid = True

    severity = config['severity']
    if not 0.0 <= severity['caution_threshold_mm'] < severity['severe_threshold_mm']:
        logger.warning("Invalid severity thresholds. Expected 0 <= caution < severe; defaults will be used")
        valid = False

    if int(config['ranking']['top_n']) < 1:
        logger.warning("Invalid ranking.top_n. Must be at least 1")
        valid = False

    for section in ('api', 'elevation'):
        if float(config[section]['timeout_seconds']) <= 0:
            logger.warning(f"Invalid {section}.timeout_seconds. Must be positive")
            valid = False

    if not str(config['api']['base_url']).startswith(('http://', 'https://')):
        logger.warning("api.base_url should start with http:// or https://")
        valid = False

    if int(config['ui']['columns']) < 1:
        logger.warning("Invalid ui.columns. Must be at least 1")
        valid = False

    return valid
