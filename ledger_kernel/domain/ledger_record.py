"""
LedgerRecordSpec -- the tagged variant an occurrence turns into when applied.

Responsibility:
    Describes the income or expense record that ``apply`` must create, as a
    single value object tagged by ``EntryKind``.  The persistence side picks
    the concrete table from the tag exactly once (see
    ``ledger_kernel.services.ledger_record_service``); nothing downstream
    inspects record types at runtime.

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Failure modes:
    - ``problems()`` lists every reason the record would be rejected by the
      ledger (non-positive amount, blank title, missing references).
"""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from ledger_kernel.domain.values import EntryKind


@dataclass(frozen=True)
class LedgerRecordSpec:
    """Everything the ledger needs to book one income or expense."""

    kind: EntryKind
    account_id: UUID
    category_id: UUID
    user_id: UUID
    title: str
    amount: int
    memo: str | None
    transacted_on: date

    def problems(self) -> list[str]:
        """Reasons this record cannot be booked. Empty when valid."""
        found: list[str] = []
        if self.amount is None or self.amount <= 0:
            found.append(f"amount must be greater than 0 (got {self.amount})")
        if not self.title or not self.title.strip():
            found.append("title is required")
        if self.account_id is None:
            found.append("account is required")
        if self.category_id is None:
            found.append("category is required")
        if self.user_id is None:
            found.append("user is required")
        if self.transacted_on is None:
            found.append("date is required")
        return found
