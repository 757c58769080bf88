"""Persistent defaults for the command line front end.

Settings are stored as JSON in ``~/.config/sigcalc/settings.json`` and
layered over DEFAULT_SETTINGS. Known keys are coerced to their expected
type both when read and when set, so a hand-edited file cannot feed a bad
value into the argument parser.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Callable, Dict

from ..logging import DEFAULT_LOG_FILE, get_logger, level_name

logger = get_logger(__name__)

SETTINGS_DIR = Path.home() / ".config" / "sigcalc"
SETTINGS_PATH = SETTINGS_DIR / "settings.json"

DEFAULT_SETTINGS = {
    "x_axis_factor": 1.0,
    "print_precision": 15,
    "log_level": "WARNING",
    "log_file": DEFAULT_LOG_FILE,
}


def _finite_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("expected a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError("expected a finite number")
    return number


def _precision(value: Any) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError("expected a whole number of digits")
    digits = int(value)
    if digits < 1:
        raise ValueError("expected at least one digit")
    return digits


def _path(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError("expected a path string")
    return value


_COERCERS: Dict[str, Callable[[Any], Any]] = {
    "x_axis_factor": _finite_float,
    "print_precision": _precision,
    "log_level": level_name,
    "log_file": _path,
}


def coerce_setting(key: str, value: Any) -> Any:
    """Convert a value for a known key; unknown keys pass through unchanged.

    Raises:
        ValueError: the value is unusable for that key
    """
    coerce = _COERCERS.get(key)
    if coerce is None:
        return value
    try:
        return coerce(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid value {value!r} for setting '{key}': {e}") from None


def load_settings() -> dict:
    """Load settings from disk, layered over DEFAULT_SETTINGS.

    An unreadable file or a non-object payload yields the defaults; a bad
    value for a known key keeps that key's default.
    """
    settings = dict(DEFAULT_SETTINGS)
    if not SETTINGS_PATH.exists():
        return settings

    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable settings file {SETTINGS_PATH}: {e}")
        return settings

    if not isinstance(data, dict):
        logger.warning(f"Ignoring settings file {SETTINGS_PATH}: expected a JSON object")
        return settings

    for key, value in data.items():
        try:
            settings[key] = coerce_setting(key, value)
        except ValueError as e:
            logger.warning(f"{e}; using {settings[key]!r}")
    return settings


def save_settings(data: dict) -> None:
    """Persist settings to disk atomically."""
    SETTINGS_DIR.mkdir(parents=True, exist_ok=True)
    tmp_path = SETTINGS_PATH.with_suffix(".tmp")
    tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
    tmp_path.replace(SETTINGS_PATH)


def get_setting(key: str, default: Any = None) -> Any:
    """Read a setting value with a fallback default."""
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> None:
    """Validate, set and persist a single setting key.

    Raises:
        ValueError: the value is unusable for a known key
    """
    settings = load_settings()
    settings[key] = coerce_setting(key, value)
    save_settings(settings)
