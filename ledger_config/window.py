"""
Window policy -- how many months ahead open-ended templates are materialized.

Pure: no environment access here.  ``get_active_config()`` reads the
environment once and passes the raw string in.
"""

from ledger_kernel.services.synchronizer import DEFAULT_HORIZON_MONTHS

HORIZON_ENV_VAR = "RECURRING_GENERATION_MONTHS_AHEAD"


def resolve_horizon_months(
    env_override: str | int | None = None,
    default: int = DEFAULT_HORIZON_MONTHS,
) -> int:
    """
    The rolling horizon in months.

    Returns ``env_override`` when it parses as a non-negative integer
    (surrounding whitespace allowed), otherwise ``default``.
    """
    if env_override is None or isinstance(env_override, bool):
        return default
    if isinstance(env_override, int):
        return env_override if env_override >= 0 else default

    text = str(env_override).strip()
    if not text:
        return default
    try:
        months = int(text)
    except ValueError:
        return default
    return months if months >= 0 else default
