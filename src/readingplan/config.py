"""
Configuration management for readingplan.

This module handles loading settings from config.yaml with sensible defaults.
The config file is optional - everything works with defaults for quick setup.

Configuration hierarchy:
1. config/config.yaml (if exists)
2. Built-in defaults (if config missing or key not specified)
"""

from pathlib import Path
from typing import Any

import yaml  # PyYAML


# ---------------------------------------------------------------------------
# Config File Paths
# ---------------------------------------------------------------------------

def get_project_root() -> Path:
    """
    Get the project root directory.

    This file is at: src/readingplan/config.py
    Project root is: ../../ from here

    Returns:
        Path to the project root directory
    """
    # Parent 1: src/readingplan/
    # Parent 2: src/
    # Parent 3: project root
    return Path(__file__).resolve().parent.parent.parent


def get_config_path() -> Path:
    """
    Get the path to the config file.

    Returns:
        Path to config/config.yaml
    """
    return get_project_root() / "config" / "config.yaml"


# ---------------------------------------------------------------------------
# Default Configuration
# ---------------------------------------------------------------------------

# Used when config.yaml is missing or a key isn't set.
# Structure mirrors the YAML file for easy mental mapping.

DEFAULT_CONFIG = {
    "plan": {
        "default": "horner",
        # How many days `schedule` projects when --days isn't given
        "days_to_generate": 30,
    },
    "storage": {
        "state_path": "~/.readingplan/state.json",
    },
    "calendar": {
        # Relative paths are resolved against the project root
        # None means the table shipped inside the package
        "mcheyne_path": None,
    },
    "export": {
        "directory": "~/Documents/reading-plans",
        "title": "Bible Reading Plan",
    },
}


# ---------------------------------------------------------------------------
# Config Loading
# ---------------------------------------------------------------------------

def load_config() -> dict:
    """
    Load configuration from file, falling back to defaults.

    Merge strategy:
    - Start with DEFAULT_CONFIG
    - If config.yaml exists, overlay its values
    - Missing keys in YAML use defaults
    - Extra keys in YAML are preserved

    Returns:
        Configuration dictionary with all settings
    """
    config = _deep_copy(DEFAULT_CONFIG)

    config_path = get_config_path()
    if config_path.exists():
        try:
            # yaml.safe_load() parses YAML to Python objects
            # "safe" means it won't execute arbitrary Python (security)
            with open(config_path) as f:
                user_config = yaml.safe_load(f)

            if user_config:
                config = _deep_merge(config, user_config)

        except yaml.YAMLError as e:
            print(f"Warning: Error parsing config.yaml: {e}")
            print("Using default configuration.")

    return config


def _deep_copy(d: dict) -> dict:
    """
    Create a deep copy of a nested dictionary.

    d.copy() is shallow - nested dicts would still reference the originals.
    """
    result = {}
    for key, value in d.items():
        if isinstance(value, dict):
            result[key] = _deep_copy(value)
        else:
            result[key] = value
    return result


def _deep_merge(base: dict, overlay: dict) -> dict:
    """
    Deep merge overlay into base, returning a new dict.

    - Keys in overlay overwrite keys in base
    - Nested dicts are merged recursively
    - Lists and other values are replaced entirely
    """
    result = _deep_copy(base)

    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


# ---------------------------------------------------------------------------
# Config Access Helpers
# ---------------------------------------------------------------------------

# Global config cache - loaded once, reused
_config_cache: dict | None = None


def get_config() -> dict:
    """
    Get the configuration, loading it if necessary.

    Uses a module-level cache so we only parse YAML once.
    """
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache


def clear_cache() -> None:
    """Forget the loaded config so the next get() re-reads the file."""
    global _config_cache
    _config_cache = None


def get(key_path: str, default: Any = None) -> Any:
    """
    Get a config value using dot-notation path.

    Examples:
        get("plan.default")             # Returns "horner"
        get("storage.state_path")       # Returns "~/.readingplan/state.json"
        get("nonexistent.key", "x")     # Returns "x"

    Args:
        key_path: Dot-separated path like "plan.default"
        default: Value to return if path not found

    Returns:
        The config value, or default if not found
    """
    config = get_config()
    keys = key_path.split(".")

    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


# ---------------------------------------------------------------------------
# Path Expansion
# ---------------------------------------------------------------------------

def expand_path(path_str: str) -> Path:
    """
    Expand a path string to a full Path object.

    Handles ~ expansion (home directory) and converts to an absolute path.
    """
    return Path(path_str).expanduser().resolve()


def get_state_path() -> Path:
    """Get the progress state file (~/.readingplan/state.json)."""
    return expand_path(get("storage.state_path"))


def get_export_dir() -> Path:
    """Get the directory schedules are exported to by default."""
    return expand_path(get("export.directory"))


# ---------------------------------------------------------------------------
# Testing
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    # Quick check: print current configuration
    print("Current configuration:")
    print("-" * 40)

    import json
    print(json.dumps(get_config(), indent=2))

    print("-" * 40)
    print(f"State path: {get_state_path()}")
    print(f"Default plan: {get('plan.default')}")
    print(f"Export dir: {get_export_dir()}")
