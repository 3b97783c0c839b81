"""
Configuration for gamelib.

Config files are JSON, TOML or YAML. Defaults are merged with the file,
then GAMELIB_SECTION_KEY environment variables override single keys.
"""

import os
import json
import sys
import tomllib
from pathlib import Path

import logging

import toml
import yaml

logger = logging.getLogger("gamelib")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def setup_logging(config=None):
    """Configure the gamelib logger once, writing to stderr."""
    log_config = (config or {}).get("logging", {})
    logging.basicConfig(
        level=getattr(logging, str(log_config.get("level", "WARNING")).upper(), logging.WARNING),
        format=log_config.get("format", "%(levelname)s: %(message)s"),
        handlers=[
            logging.StreamHandler(sys.stderr)  # Keep stdout for JSONL
        ]
    )


def get_config_dir():
    return Path.home() / '.gamelib'


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. GAMELIB_CONFIG environment variable
    2. ~/.gamelib/config.{json,toml,yaml,yml}
    3. ~/.gamelib/config.json as the default location for saving
    """
    # Check for environment variable override
    if 'GAMELIB_CONFIG' in os.environ:
        return Path(os.environ['GAMELIB_CONFIG'])

    config_dir = get_config_dir()
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def _read_config_file(config_path):
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ('.yaml', '.yml'):
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    # Default to JSON format
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config(config_path=None):
    """Load configuration from file.

    Args:
        config_path: Explicit config file (default: get_config_path())

    Returns:
        dict: Defaults merged with the file and environment overrides
    """
    config_path = Path(config_path) if config_path else get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
            if isinstance(file_config, dict):
                config = merge_configs(config, file_config)
            else:
                logger.error(f"Ignoring config {config_path}: top level is not a mapping")
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def save_config(config, config_path=None):
    """Save configuration to file, in the format its suffix names."""
    config_path = Path(config_path) if config_path else get_config_path()

    # Create directory if it doesn't exist
    config_path.parent.mkdir(parents=True, exist_ok=True)

    suffix = config_path.suffix.lower()
    with open(config_path, 'w') as f:
        if suffix == '.toml':
            # tomllib is read-only
            toml.dump(config, f)
        elif suffix in ('.yaml', '.yml'):
            yaml.safe_dump(config, f, default_flow_style=False)
        else:
            json.dump(config, f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def get_default_config():
    """Get default configuration."""
    return {
        "database": {
            "path": str(get_config_dir() / 'library.db'),
            "busy_timeout": 5.0,
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        },
        "releases": {
            "include_prerelease": False,
        },
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def _typed(value):
    if value.lower() in ('true', 'yes', 'on'):
        return True
    if value.lower() in ('false', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.

    Environment variables follow the pattern: GAMELIB_SECTION_KEY
    For example: GAMELIB_RELEASES_INCLUDE_PRERELEASE=true
    Variables that name no existing key (GAMELIB_DB, GAMELIB_CONFIG) are ignored.
    """
    env_prefix = "GAMELIB_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')
        typed_value = _typed(value)

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            # End of the variable name: this is the key to set
            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if not isinstance(current_level[matched_key], dict):
                # Variable is longer than the config path
                break
            current_level = current_level[matched_key]
            i += best_match_len

    return config
