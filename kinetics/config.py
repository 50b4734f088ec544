"""
config.py
Engine settings: hardcoded defaults with optional YAML overrides.
"""

import os
from pathlib import Path

import yaml


DEFAULT_CONFIG = {
    # Normalized seek points (fractions of total duration)
    'sample_offsets': [0.25, 0.5, 0.75],
    # Raster the frame is scaled into before scanning (width, height)
    'raster_size': [300, 150],
    # Scan every Nth pixel
    'pixel_stride': 4,
    'frame_timeout_seconds': 15.0,
    'max_upload_bytes': 5 * 1024 ** 3,
    # Used when the clip duration cannot be probed
    'fallback_seek_duration': 10.0,
    'fallback_series_duration': 5.0,
    'storage_dir': 'outputs',
    # Raw video above this size is not embedded in the stored record
    'media_budget_bytes': 50 * 1024 ** 2,
}

CONFIG_ENV_VAR = "KINETICS_CONFIG"


def load_config(config_path: str = None) -> dict:
    """
    Load engine configuration, layering a YAML file over the defaults.

    If no path is given, the KINETICS_CONFIG environment variable is
    consulted. Missing or malformed files fall back to the defaults.

    Args:
        config_path: Path to YAML config file (optional)

    Returns:
        Configuration dictionary (always complete)
    """
    config = dict(DEFAULT_CONFIG)

    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)

    if not config_path:
        return config

    config_file = Path(config_path)
    if not config_file.exists():
        print(f"[WARNING] Config file not found: {config_path}")
        print("[INFO] Using default engine settings")
        return config

    try:
        with open(config_file, 'r') as f:
            overrides = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        print(f"[WARNING] Failed to load config: {e}")
        print("[INFO] Using default engine settings")
        return config

    if not isinstance(overrides, dict):
        print(f"[WARNING] Config file is not a mapping: {config_path}")
        return config

    for key, value in overrides.items():
        if key in DEFAULT_CONFIG:
            config[key] = value

    print(f"[CONFIG] Loaded configuration from: {config_path}")
    return config


def get_sample_offsets(config: dict = None) -> list:
    """Seek offsets as fractions of the clip duration."""
    if config and 'sample_offsets' in config:
        return [float(o) for o in config['sample_offsets']]
    return list(DEFAULT_CONFIG['sample_offsets'])


def get_raster_size(config: dict = None) -> tuple:
    """Return (width, height) of the sampling raster."""
    if config and 'raster_size' in config:
        width, height = config['raster_size']
        return int(width), int(height)
    width, height = DEFAULT_CONFIG['raster_size']
    return width, height


def get_storage_dir(config: dict = None) -> Path:
    if config and config.get('storage_dir'):
        return Path(config['storage_dir'])
    return Path(DEFAULT_CONFIG['storage_dir'])


def resolve_config(config: dict = None) -> dict:
    """Complete a partial config dict with defaults (loads YAML/env if None)."""
    if config is None:
        return load_config()
    return {**DEFAULT_CONFIG, **config}
