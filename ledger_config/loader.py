"""
Configuration Loader (``ledger_config.loader``).

Loads a YAML settings file into a plain dict of known keys.  Only
``ledger_config.get_active_config()`` calls this.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys or wrongly typed values  -> ``ValueError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

KNOWN_KEYS = frozenset({"horizon_months", "database_url", "log_level"})
LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def load_settings_file(path: Path) -> dict[str, Any]:
    """Parse ``path`` and return the ``ledger`` section."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"{path}: top level must be a mapping")

    section = raw.get("ledger", {}) or {}
    if not isinstance(section, dict):
        raise ValueError(f"{path}: 'ledger' must be a mapping")

    unknown = set(section) - KNOWN_KEYS
    if unknown:
        raise ValueError(f"{path}: unknown ledger settings {sorted(unknown)}")

    horizon = section.get("horizon_months")
    if horizon is not None and (
        isinstance(horizon, bool) or not isinstance(horizon, int) or horizon < 0
    ):
        raise ValueError(f"{path}: horizon_months must be a non-negative integer")

    log_level = section.get("log_level")
    if log_level is not None and (
        not isinstance(log_level, str) or log_level.upper() not in LOG_LEVELS
    ):
        raise ValueError(f"{path}: log_level must be one of {sorted(LOG_LEVELS)}")

    database_url = section.get("database_url")
    if database_url is not None and not isinstance(database_url, str):
        raise ValueError(f"{path}: database_url must be a string")

    return dict(section)
