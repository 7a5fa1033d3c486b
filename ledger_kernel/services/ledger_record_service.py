"""
LedgerRecordService -- create and destroy income/expense records.

Responsibility:
    The kernel's side of the ledger collaborator.  Turns a
    ``LedgerRecordSpec`` into an ``Income`` or ``Expense`` row and deletes
    such rows again on request.

Architecture position:
    Kernel > Services -- imperative shell.  Called by OccurrenceApplier.

Invariants enforced:
    - The concrete table is chosen once, from ``spec.kind``, through
      ``build_ledger_record``.  Callers never branch on record types.
    - Flush-only: never commits or rolls back the session.

Failure modes:
    - LedgerRecordError: the spec is invalid (non-positive amount, blank
      title, ...) or the database rejected the row (FK/CHECK violation).
"""

from uuid import UUID

from sqlalchemy.exc import IntegrityError

from ledger_kernel.domain.ledger_record import LedgerRecordSpec
from ledger_kernel.domain.values import EntryKind
from ledger_kernel.exceptions import LedgerRecordError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.ledger import Expense, Income
from ledger_kernel.models.recurring import RecurringEntryOccurrence
from ledger_kernel.services.base import BaseService

logger = get_logger("services.ledger_record")

LedgerRecord = Income | Expense

# kind -> (table, name of its date column)
_RECORD_TABLES: dict[EntryKind, tuple[type[Income] | type[Expense], str]] = {
    EntryKind.INCOME: (Income, "received_on"),
    EntryKind.EXPENSE: (Expense, "spent_on"),
}


def record_model_for(kind: EntryKind) -> type[Income] | type[Expense]:
    """ORM class that stores records of ``kind``."""
    return _RECORD_TABLES[EntryKind(kind)][0]


def build_ledger_record(spec: LedgerRecordSpec) -> LedgerRecord:
    """Single factory for ledger records, parameterized by the spec's kind."""
    model, date_field = _RECORD_TABLES[EntryKind(spec.kind)]
    return model(
        account_id=spec.account_id,
        user_id=spec.user_id,
        category_id=spec.category_id,
        title=spec.title,
        amount=spec.amount,
        memo=spec.memo,
        **{date_field: spec.transacted_on},
    )


def spec_for_occurrence(occurrence: RecurringEntryOccurrence, user_id: UUID) -> LedgerRecordSpec:
    """Record an occurrence books when applied: template fields, dated occurs_on."""
    template = occurrence.template
    return LedgerRecordSpec(
        kind=EntryKind(template.kind),
        account_id=template.account_id,
        category_id=template.category_id,
        user_id=user_id,
        title=template.title,
        amount=template.amount,
        memo=template.memo,
        transacted_on=occurrence.occurs_on,
    )


class LedgerRecordService(BaseService[Income]):
    """Persists and removes ledger records within the caller's transaction."""

    def create(self, spec: LedgerRecordSpec) -> LedgerRecord:
        """
        Build and flush the record described by ``spec``.

        Returns:
            The flushed Income or Expense; its ``id`` is the back-reference
            stored on the occurrence.

        Raises:
            LedgerRecordError: spec invalid or rejected by the database.
        """
        problems = spec.problems()
        if problems:
            raise LedgerRecordError(spec.kind.value, "; ".join(problems))

        record = build_ledger_record(spec)
        self.session.add(record)
        try:
            self.session.flush()
        except IntegrityError as exc:
            raise LedgerRecordError(spec.kind.value, str(exc.orig)) from exc

        logger.info(
            "ledger_record_created",
            extra={
                "record_kind": spec.kind.value,
                "record_id": str(record.id),
                "amount": spec.amount,
                "transacted_on": spec.transacted_on,
            },
        )
        return record

    def get(self, kind: EntryKind, record_id: UUID) -> LedgerRecord | None:
        return self.session.get(record_model_for(kind), record_id)

    def destroy(self, kind: EntryKind, record_id: UUID) -> bool:
        """Delete one record. Returns False when it no longer exists."""
        record = self.get(kind, record_id)
        if record is None:
            logger.warning(
                "ledger_record_missing",
                extra={"record_kind": EntryKind(kind).value, "record_id": str(record_id)},
            )
            return False

        self.session.delete(record)
        self.session.flush()
        logger.info(
            "ledger_record_destroyed",
            extra={"record_kind": EntryKind(kind).value, "record_id": str(record_id)},
        )
        return True
