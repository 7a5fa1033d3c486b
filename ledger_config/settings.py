"""LedgerSettings -- the compiled runtime configuration."""

from __future__ import annotations

from dataclasses import dataclass

from ledger_kernel.services.synchronizer import DEFAULT_HORIZON_MONTHS


@dataclass(frozen=True)
class LedgerSettings:
    """Runtime settings after YAML + environment resolution."""

    horizon_months: int = DEFAULT_HORIZON_MONTHS
    database_url: str = "sqlite:///household_ledger.db"
    log_level: str = "INFO"
    source: str = "<defaults>"

    def __post_init__(self) -> None:
        if self.horizon_months < 0:
            raise ValueError(f"horizon_months must be non-negative, got {self.horizon_months}")
        if not self.database_url:
            raise ValueError("database_url is required")
