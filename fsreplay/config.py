# python
"""
fsreplay/config.py
Default settings and FSREPLAY_* environment overrides.
"""
import copy
import logging
import os
from typing import Any, Dict, Mapping, Optional

from .dir_table import CONFLICT_POLICIES
from .env import load_env
from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "limits": {
        "max_size": 100_000,
        "filesystem_size": 70_000_000,
        "required_free": 30_000_000,
    },
    "parser": {"on_conflict": "error"},
    "paths": {"events_file": None},
    "log_level": "WARNING",
    "version": "0.1",
}

ENV_LIMITS = {
    "FSREPLAY_MAX_SIZE": "max_size",
    "FSREPLAY_FILESYSTEM_SIZE": "filesystem_size",
    "FSREPLAY_REQUIRED_FREE": "required_free",
}


def parse_size(name: str, raw: Any) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {value}")
    return value


def parse_log_level(raw: str) -> str:
    level = raw.strip().upper()
    # getLevelName maps registered names to ints and anything else to "Level ..."
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"FSREPLAY_LOG_LEVEL must be a logging level name, got {raw!r}")
    return level


def load_config(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Return a fresh copy of DEFAULT_CONFIG with environment overrides applied.
    The nearest .env from the working directory is loaded first when reading from os.environ.
    """
    if environ is None:
        load_env()
        environ = os.environ
    config = copy.deepcopy(DEFAULT_CONFIG)

    for var, key in ENV_LIMITS.items():
        raw = environ.get(var)
        if raw:
            config["limits"][key] = parse_size(var, raw)

    policy = environ.get("FSREPLAY_ON_CONFLICT")
    if policy:
        policy = policy.strip().lower()
        if policy not in CONFLICT_POLICIES:
            raise ConfigError(
                f"FSREPLAY_ON_CONFLICT must be one of {', '.join(CONFLICT_POLICIES)}, got {policy!r}"
            )
        config["parser"]["on_conflict"] = policy

    events_file = environ.get("FSREPLAY_EVENTS_FILE")
    if events_file:
        config["paths"]["events_file"] = events_file

    level = environ.get("FSREPLAY_LOG_LEVEL")
    if level:
        config["log_level"] = parse_log_level(level)

    logger.debug("Loaded config limits=%s parser=%s", config["limits"], config["parser"])
    return config
