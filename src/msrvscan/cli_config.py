"""Optional YAML configuration file and its merge with CLI arguments.

Precedence is: CLI flags, then the configuration file, then defaults.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from msrvscan.constants import Constants

logger = logging.getLogger(__name__)

# Configuration key -> argparse dest
CONFIG_KEYS = {
    "release_source": "RELEASE_SOURCE",
    "search_method": "SEARCH_METHOD",
    "target": "TARGET",
    "components": "COMPONENTS",
    "include_all_patch_releases": "INCLUDE_ALL_PATCH_RELEASES",
    "ignore_lockfile": "IGNORE_LOCKFILE",
    "no_check_feedback": "NO_CHECK_FEEDBACK",
    "skip_unavailable_toolchains": "SKIP_UNAVAILABLE_TOOLCHAINS",
    "min": "MIN",
    "max": "MAX",
    "check_command": "CHECK_COMMAND",
    "request_timeout": "REQUEST_TIMEOUT",
}

_CHOICES = {
    "release_source": Constants.SUPPORTED_RELEASE_SOURCES,
    "search_method": Constants.SEARCH_METHODS,
}


def config_path_for(args) -> Optional[str]:
    """Return the configuration file to load, if any.

    An explicit ``--config`` always wins; otherwise ``msrvscan.yml`` in the
    crate root is used when present.
    """
    explicit = getattr(args, "CONFIG", None)
    if explicit:
        return explicit
    candidate = Path(getattr(args, "PATH", None) or os.getcwd()) / Constants.CONFIG_FILE
    if candidate.is_file():
        return str(candidate)
    return None


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML configuration file.

    A missing file, or a file without a top level mapping, yields an empty
    configuration and a warning. Unknown keys are logged and dropped.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    import yaml

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error("Failed to parse config %s: %s", config_path, e)
            return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a mapping at the top level", config_path)
        return {}

    config = {}
    for key, value in data.items():
        if key not in CONFIG_KEYS:
            logger.warning("Ignoring unknown config key '%s' in %s", key, config_path)
            continue
        config[key] = value
    logger.debug("Loaded config keys from %s: %s", config_path, sorted(config))
    return config


def apply_config(args, config: Dict[str, Any]) -> None:
    """Fill in arguments the user did not give on the command line from ``config``.

    Arguments count as given when they are not None and not False. Values of
    the wrong type are logged and ignored.
    """
    for key, dest in CONFIG_KEYS.items():
        if key not in config:
            continue
        current = getattr(args, dest, None)
        if current is not None and current is not False and current != []:
            continue
        value = config[key]
        allowed = _CHOICES.get(key)
        if allowed is not None and value not in allowed:
            logger.warning("Ignoring config %s=%r: expected one of %s", key, value, ", ".join(allowed))
            continue
        try:
            setattr(args, dest, _coerce(key, value))
        except ValueError as exc:
            logger.warning("Ignoring config %s=%r: %s", key, value, exc)


def _coerce(key: str, value: Any) -> Any:
    """Convert a YAML value to what argparse would have stored for ``key``.

    Raises:
        ValueError: If the value has the wrong type for the key.
    """
    if key in ("components", "check_command"):
        return _as_list(value)
    if key in ("min", "max"):
        # YAML reads an unquoted 1.60 as the float 1.6
        if isinstance(value, float):
            raise ValueError(f'quote the version so it is read as text, e.g. {key}: "{value}"')
        # Integers are edition years, e.g. 2021
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise ValueError("expected a version or an edition")
        return str(value)
    if key in ("target", "release_source", "search_method"):
        if not isinstance(value, str):
            raise ValueError("expected a string")
        return value
    if key == "request_timeout":
        if isinstance(value, bool):
            raise ValueError("expected a number of seconds")
        try:
            timeout = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("expected a number of seconds") from exc
        if timeout <= 0:
            raise ValueError("expected a positive number of seconds")
        return timeout
    if not isinstance(value, bool):
        raise ValueError("expected true or false")
    return value


def _as_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return value.split()
    if isinstance(value, list):
        return [str(v) for v in value]
    raise ValueError("expected a string or a list")
