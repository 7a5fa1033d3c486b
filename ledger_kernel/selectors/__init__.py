"""Selectors for the ledger kernel (read side)."""

from ledger_kernel.selectors.recurring_selector import LedgerRecordInfo, RecurringSelector

__all__ = [
    "LedgerRecordInfo",
    "RecurringSelector",
]
