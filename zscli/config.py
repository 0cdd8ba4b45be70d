"""Configuration management for zscli.

Settings are stored as JSON in ``~/.config/zscli/config.json``:
{
  "output": "yaml",
  "table-style": "github"
}

Environment variables take precedence over the file:
    ZSCLI_CONFIG       -> alternate config file path
    ZSCLI_OUTPUT       -> default output format
    ZSCLI_TABLE_STYLE  -> tabulate table format used by table output
"""

import json
import os
from pathlib import Path
from typing import Any, Dict

OUTPUT_KEY = "output"
TABLE_STYLE_KEY = "table-style"
CONFIG_KEYS = (OUTPUT_KEY, TABLE_STYLE_KEY)

DEFAULT_OUTPUT = "table"
DEFAULT_TABLE_STYLE = "simple_outline"


def get_config_file_path() -> Path:
    """Get the path to the zscli configuration file."""
    if "ZSCLI_CONFIG" in os.environ:
        return Path(os.environ["ZSCLI_CONFIG"])

    # Use XDG_CONFIG_HOME if set, otherwise use ~/.config
    if "XDG_CONFIG_HOME" in os.environ:
        config_dir = Path(os.environ["XDG_CONFIG_HOME"]) / "zscli"
    else:
        config_dir = Path.home() / ".config" / "zscli"

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir / "config.json"


def load_config() -> Dict[str, Any]:
    """Load configuration from the config file.

    Returns:
        Dictionary containing configuration values
    """
    config_file = get_config_file_path()

    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        # If config file is corrupted or unreadable, return empty config
        return {}

    return data if isinstance(data, dict) else {}


def save_config(config: Dict[str, Any]) -> None:
    """Save configuration to the config file.

    Args:
        config: Dictionary containing configuration values to save
    """
    config_file = get_config_file_path()
    config_file.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
    except OSError as e:
        raise RuntimeError(f"Failed to save configuration: {e}")


def set_config_value(key: str, value: str) -> None:
    """Persist a single configuration value."""
    if key not in CONFIG_KEYS:
        raise ValueError(f"Unknown configuration key '{key}'. Valid keys: {', '.join(CONFIG_KEYS)}")
    config = load_config()
    config[key] = value
    save_config(config)


def remove_config_value(key: str) -> bool:
    """Remove a configuration value. Returns True if it was set."""
    config = load_config()
    if key not in config:
        return False
    del config[key]
    save_config(config)
    return True


def get_default_output() -> str:
    """Return the default output format name."""
    env = os.environ.get("ZSCLI_OUTPUT")
    if env:
        return env
    return str(load_config().get(OUTPUT_KEY) or DEFAULT_OUTPUT)


def get_table_style() -> str:
    """Return the tabulate format used for table output."""
    env = os.environ.get("ZSCLI_TABLE_STYLE")
    if env:
        return env
    return str(load_config().get(TABLE_STYLE_KEY) or DEFAULT_TABLE_STYLE)
