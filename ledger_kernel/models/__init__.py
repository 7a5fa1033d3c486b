"""Domain models for the ledger kernel."""

from ledger_kernel.models.account import Account, Category
from ledger_kernel.models.ledger import Expense, Income
from ledger_kernel.models.recurring import (
    RecurringEntryOccurrence,
    RecurringEntryTemplate,
)

__all__ = [
    "Account",
    "Category",
    "Income",
    "Expense",
    "RecurringEntryTemplate",
    "RecurringEntryOccurrence",
]
