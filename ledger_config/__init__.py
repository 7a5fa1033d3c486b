"""
ledger_config -- single public entrypoint for ledger configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No kernel component reads configuration files
    or environment variables; values are resolved here once and injected
    (see ``ledger_config.bridges``).

Resolution order (highest wins):
    1. Environment: RECURRING_GENERATION_MONTHS_AHEAD, LEDGER_DATABASE_URL,
       LEDGER_LOG_LEVEL.
    2. YAML settings file (``config_path`` or ``sets/default.yaml``).
    3. ``LedgerSettings`` defaults.

Failure modes:
    - ``FileNotFoundError`` -- an explicit ``config_path`` does not exist.
    - ``ValueError`` -- unknown keys or invalid values in the YAML file.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``LEDGER_CONFIG_TRACE`` log entry with the resolved horizon and the
    settings source.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from ledger_config.loader import load_settings_file
from ledger_config.settings import LedgerSettings
from ledger_config.window import HORIZON_ENV_VAR, resolve_horizon_months

_logger = logging.getLogger("ledger_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

DATABASE_URL_ENV_VAR = "LEDGER_DATABASE_URL"
LOG_LEVEL_ENV_VAR = "LEDGER_LOG_LEVEL"


def get_active_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> LedgerSettings:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: YAML settings file; defaults to the bundled
            ``sets/default.yaml``.
        environ: Environment mapping; defaults to ``os.environ``.  Tests
            pass a plain dict.
    """
    env = os.environ if environ is None else environ
    path = config_path or _DEFAULT_CONFIG_PATH

    file_values = load_settings_file(path) if path.exists() or config_path else {}
    base = LedgerSettings(**file_values, source=str(path))

    settings = LedgerSettings(
        horizon_months=resolve_horizon_months(
            env.get(HORIZON_ENV_VAR), default=base.horizon_months
        ),
        database_url=env.get(DATABASE_URL_ENV_VAR) or base.database_url,
        log_level=(env.get(LOG_LEVEL_ENV_VAR) or base.log_level).upper(),
        source=base.source,
    )

    _logger.info(
        "LEDGER_CONFIG_TRACE",
        extra={
            "config_source": settings.source,
            "horizon_months": settings.horizon_months,
            "horizon_overridden": HORIZON_ENV_VAR in env,
            "log_level": settings.log_level,
        },
    )
    return settings


__all__ = [
    "DATABASE_URL_ENV_VAR",
    "HORIZON_ENV_VAR",
    "LOG_LEVEL_ENV_VAR",
    "LedgerSettings",
    "get_active_config",
    "resolve_horizon_months",
]
