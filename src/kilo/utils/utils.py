# kilo/utils/utils.py
"""
kilo.utils.utils.py
===================

Core utility functions for the kilo editor.

Key functionalities include:
- Automatic User Configuration: creates `~/.config/kilo` and a `.env` template
  on first run.
- Robust Configuration Loading: the built-in default configuration is recursively
  merged with user settings from `~/.config/kilo/config.toml`.
- Setting Validation: integer editor settings fall back to their defaults when
  the user supplies a bad value.
- Color Resolution: maps ANSI color names from the config to SGR codes.

The editor is always runnable, even if user configuration files are missing or
corrupted, by falling back to the embedded defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import toml

logger = logging.getLogger("kilo")

ENV_TEMPLATE = """# Environment for the kilo editor.
# Set to 1 to trace every decoded key event into keytrace.log.
KILO_KEYTRACE=
"""

# Eight base ANSI foreground colors (SGR 30-37).
ANSI_COLORS: Dict[str, int] = {
    "black": 30, "red": 31, "green": 32, "yellow": 33,
    "blue": 34, "magenta": 35, "cyan": 36, "white": 37,
}

# Embedded defaults; the ultimate fallback so the editor can ALWAYS start.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "tab_stop": 8,
        "quit_times": 3,
        "message_timeout": 5,
    },
    "colors": {
        "comment": "cyan", "mlcomment": "cyan",
        "keyword1": "yellow", "keyword2": "green",
        "string": "magenta", "number": "red",
        "match": "blue",
    },
    "logging": {
        "log_file": "~/.config/kilo/editor.log",
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
    },
}

# Lower bounds for integer settings under [editor].
_EDITOR_MINIMUMS: Dict[str, int] = {"tab_stop": 1, "quit_times": 1, "message_timeout": 0}


# --- Helper Functions ---

def get_config_dir() -> Path:
    """Directory holding the user's `config.toml` and `.env`."""
    return Path.home() / ".config" / "kilo"


def ensure_user_config_exists() -> None:
    """Creates `~/.config/kilo` and a `.env` template if they are missing."""
    try:
        config_dir = get_config_dir()
        config_dir.mkdir(parents=True, exist_ok=True)

        user_env_path = config_dir / ".env"
        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user .env template at: {user_env_path}")
    except OSError as e:
        logger.warning(f"Could not create user configuration directory: {e}")


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(value, dict):
            current = result.get(key)
            # nested tables are copied, never shared with either input
            result[key] = deep_merge(current if isinstance(current, dict) else {}, value)
        else:
            result[key] = value
    return result


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads the embedded defaults and merges the user's `config.toml` over them.

    Args:
        path: Config file to read; defaults to `~/.config/kilo/config.toml`.

    Returns:
        The merged configuration. Parse errors are logged and the defaults used.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    if path is None:
        ensure_user_config_exists()
        path = get_config_dir() / "config.toml"

    if path.is_file():
        try:
            user_config = toml.load(path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {path}")
        except (toml.TomlDecodeError, OSError) as e:
            logger.error(f"Could not parse user config '{path}': {e}. Using defaults.")

    return final_config


def get_editor_setting(config: Dict[str, Any], key: str) -> int:
    """
    Returns the integer setting `editor.<key>`, validated against its lower bound.

    Values that are missing, not integers, or below the minimum fall back to
    the built-in default.
    """
    default = DEFAULT_CONFIG["editor"][key]
    value = config.get("editor", {}).get(key, default)
    minimum = _EDITOR_MINIMUMS.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        logger.warning(f"Invalid value {value!r} for editor.{key}; using {default}")
        return default
    return value


def ansi_color_code(name: Any, default: int = 37) -> int:
    """
    Converts an ANSI color name (e.g. "cyan") or an SGR code (30-37) to the code.
    """
    if isinstance(name, int) and not isinstance(name, bool) and 30 <= name <= 37:
        return name
    if isinstance(name, str):
        code = ANSI_COLORS.get(name.strip().lower())
        if code is not None:
            return code
    logger.warning(f"Unknown color {name!r}; using {default}")
    return default
