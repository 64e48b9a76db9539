"""Persistent settings for the Yahtzee command line.

Stores preferences in ~/.yahtzee_settings.json: which computer strategies sit
at the table, their names, an optional random seed and the log level.
Command-line flags override whatever is stored here.
"""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULTS = {
    "players": ["greedy", "random"],
    "names": [],
    "seed": None,
    "log_level": "WARNING",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _default_path():
    return Path.home() / ".yahtzee_settings.json"


def _is_str_list(value):
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _valid(key, value):
    """Whether ``value`` has the right shape for setting ``key``."""
    if key in ("players", "names"):
        return _is_str_list(value)
    if key == "seed":
        # bool is an int subclass; a seed of true is a typo, not a seed
        return value is None or (isinstance(value, int) and not isinstance(value, bool))
    if key == "log_level":
        return value in LOG_LEVELS
    return False


def load_settings(path=None):
    """Load settings from a JSON file.

    Returns a fresh copy of DEFAULTS when the file is missing, unreadable or
    not a JSON object. Otherwise known keys are taken from the file, missing
    keys come from DEFAULTS, and unknown keys are dropped. A known key whose
    value has the wrong type (``"seed": "abc"``) falls back to its default.
    """
    path = Path(path) if path is not None else _default_path()
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return dict(DEFAULTS)
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a JSON object", path)
        return dict(DEFAULTS)

    result = dict(DEFAULTS)
    for key in DEFAULTS:
        if key not in data:
            continue
        if _valid(key, data[key]):
            result[key] = data[key]
        else:
            logger.warning("Ignoring setting %s=%r in %s", key, data[key], path)
    return result


def save_settings(settings, path=None):
    """Write settings to JSON via a temp file so a crash never leaves half a file.

    Write errors are logged at debug level and otherwise ignored.
    """
    path = Path(path) if path is not None else _default_path()
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(json.dumps(settings, indent=2))
        os.replace(tmp, path)
    except OSError:
        logger.debug("Could not save settings to %s", path)
