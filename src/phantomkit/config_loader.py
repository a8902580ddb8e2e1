# src/phantomkit/config_loader.py

from __future__ import annotations

import sys
from pathlib import Path
import tomllib
from importlib.resources import files as pkg_files
from typing import Dict, Any, Tuple
from functools import lru_cache

from loguru import logger

CONFIG_FILENAME = "config.toml"


# ======================================================================
# Helpers
# ======================================================================

def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries, with `override` taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


# ======================================================================
# Built-in config loader
# ======================================================================

def get_builtin_config_path() -> Path:
    """
    Return the path to the built-in config.toml.
    FATAL if missing (OK to print here since nothing can resolve without it).
    """
    cfg_path = Path(str(pkg_files("phantomkit") / "config" / CONFIG_FILENAME))
    if cfg_path.is_file():
        return cfg_path

    print(
        f"\nFATAL ERROR: Missing built-in configuration file "
        f"`phantomkit/config/{CONFIG_FILENAME}`.\n",
        file=sys.stderr,
    )
    sys.exit(1)


def load_builtin_config() -> dict:
    """Load the built-in TOML config shipped inside the package."""
    path = get_builtin_config_path()
    with path.open("rb") as f:
        return tomllib.load(f)


def get_user_config_path(builtin_cfg: dict | None = None) -> Path | None:
    """Location of the user override file, or None when no folder is configured."""
    if builtin_cfg is None:
        builtin_cfg = load_builtin_config()

    folder = builtin_cfg.get("application", {}).get("config_folder")
    if not folder:
        return None

    return Path(folder).expanduser().resolve() / CONFIG_FILENAME


# ======================================================================
# User override config loader (silent)
# ======================================================================

def _load_user_override_folder(builtin_cfg: dict) -> Tuple[dict, str | None]:
    """
    Attempt to load user config.toml from application.config_folder.
    Returns:
        (user_cfg: dict, source_path: str|None)
    Never prints/logs — pure silent operation.
    """
    cfg_path = get_user_config_path(builtin_cfg)

    if cfg_path is None or not cfg_path.exists():
        return {}, None

    try:
        with cfg_path.open("rb") as f:
            return tomllib.load(f), str(cfg_path)
    except (OSError, tomllib.TOMLDecodeError):
        # Broken user config falls back to built-ins (CLI `config` reports the source)
        return {}, None


# ======================================================================
# Public API
# ======================================================================

@lru_cache(maxsize=None)
def load_config(config_file_override: str | None = None) -> dict:
    """
    Load and merge:
        1. Built-in config (required)
        2. User override folder (optional)
        3. --config-file override (highest precedence)

    Results are cached per override path (None being the default layout),
    so edits on disk are only seen after load_config.cache_clear().
    Callers must not mutate the returned dict.

    No prints/logging — caller logs events after Loguru initialization.
    """

    builtin = load_builtin_config()

    # --- Case 1: explicit CLI override file ---
    if config_file_override:
        override_path = Path(config_file_override)
        with override_path.open("rb") as f:
            override_cfg = tomllib.load(f)

        merged = _deep_merge(builtin, override_cfg)
        merged["_loaded_from"] = str(override_path)
        return merged

    # --- Case 2: built-in + user config folder (normal flow) ---
    user_cfg, user_path = _load_user_override_folder(builtin)
    merged = _deep_merge(builtin, user_cfg)
    merged["_loaded_from"] = user_path or "<built-in defaults>"

    return merged


def get_config(config_file_override: str | None = None) -> dict:
    """
    Merged configuration for library code and CLI commands.

    Without an argument this is the default layout (built-in + user folder).
    An explicit override path is loaded once and cached alongside it.
    """
    return load_config(config_file_override or None)


# ======================================================================
# Logging
# ======================================================================

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

LOG_FORMAT = "<level>{level:7}</level> | <level>{message}</level>"


def resolve_log_level(level: str | None, cfg: dict | None = None) -> str:
    """CLI level if given, else [application] log_level; unknown names become INFO."""
    if not level:
        if cfg is None:
            cfg = get_config()
        level = cfg.get("application", {}).get("log_level", "INFO")

    candidate = str(level).upper().strip()
    return candidate if candidate in LOG_LEVELS else "INFO"


def init_logging(level: str | None = None, cfg: dict | None = None) -> str:
    """
    Point loguru at a single stderr sink and return the level in effect.

    Library modules log through `from loguru import logger` and never
    configure handlers themselves; only the CLI entry point calls this.
    """
    effective = resolve_log_level(level, cfg)

    logger.remove()
    logger.add(
        sys.stderr,
        level=effective,
        format=LOG_FORMAT,
        backtrace=False,
        diagnose=False,
    )

    logger.debug(f"Logging to stderr at level: {effective}")
    return effective
