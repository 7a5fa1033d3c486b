"""
OccurrenceApplier -- book an occurrence into the ledger, or take it back out.

Responsibility:
    ``apply`` turns a scheduled (or previously canceled) occurrence into a
    real income/expense record and links it.  ``cancel`` unlinks and
    destroys that record and marks the occurrence canceled.  Together they
    let a user toggle a recurring bill between "counted" and "not counted"
    without touching the ledger by hand.

Architecture position:
    Kernel > Services -- imperative shell.

Invariants enforced:
    - apply is idempotent: an APPLIED occurrence is returned untouched, so
      repeated calls never create a second record.
    - income_id / expense_id are set iff status is APPLIED, and the linked
      record's kind matches the template's kind.
    - Each call runs in one SAVEPOINT and takes a row lock on the occurrence
      (SELECT ... FOR UPDATE) before its read-then-write, so concurrent
      apply/cancel on the same occurrence serialize.
    - Only cancel destroys ledger records.

Failure modes:
    - OccurrenceRequiredError / ActorRequiredError (ApplierError): missing
      arguments; nothing written.
    - LedgerRecordError: the ledger rejected the record; the occurrence is
      unchanged.
    - OccurrenceNotFoundError: the occurrence row disappeared (e.g. pruned
      by a concurrent synchronize).
    - InvalidOccurrenceTransitionError: status change outside
      VALID_TRANSITIONS.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.values import EntryKind, OccurrenceStatus, can_transition
from ledger_kernel.exceptions import (
    ActorRequiredError,
    InvalidOccurrenceTransitionError,
    OccurrenceNotFoundError,
    OccurrenceRequiredError,
)
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.recurring import RecurringEntryOccurrence
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.ledger_record_service import (
    LedgerRecordService,
    spec_for_occurrence,
)

logger = get_logger("services.applier")


class OccurrenceApplier(BaseService[RecurringEntryOccurrence]):
    """
    Applies and cancels occurrences.

    Contract:
        Both operations return the same occurrence object they were given,
        refreshed from the locked row and updated in place.

    Non-goals:
        - Does NOT decide which occurrences should exist (OccurrenceSynchronizer).
        - Does NOT check that the user may act on the account; authorization
          happens before the applier is called.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        ledger_records: LedgerRecordService | None = None,
    ):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._records = ledger_records or LedgerRecordService(session)

    def apply(
        self,
        occurrence: RecurringEntryOccurrence | None,
        user_id: UUID | None,
    ) -> RecurringEntryOccurrence:
        """
        Create the ledger record for ``occurrence`` and mark it applied.

        Postconditions:
            - status is APPLIED, applied_at is the clock's now, and exactly
              one of income_id / expense_id points at the new record.
            - Already-applied occurrences are returned unchanged.

        Raises:
            OccurrenceRequiredError, ActorRequiredError, LedgerRecordError,
            OccurrenceNotFoundError, InvalidOccurrenceTransitionError.
        """
        if occurrence is None:
            raise OccurrenceRequiredError()
        if user_id is None:
            raise ActorRequiredError(str(occurrence.id))

        with LogContext.bind(occurrence_id=occurrence.id, actor_id=user_id):
            if occurrence.is_applied:
                logger.info("occurrence_already_applied")
                return occurrence

            with self.session.begin_nested():
                self._lock(occurrence)
                # Another transaction may have applied it while we waited.
                if occurrence.is_applied:
                    logger.info("occurrence_already_applied")
                    return occurrence

                self._check_transition(occurrence, OccurrenceStatus.APPLIED)
                spec = spec_for_occurrence(occurrence, user_id)
                record = self._records.create(spec)
                occurrence.mark_applied(spec.kind, record.id, self._clock.now())
                self.session.flush()

            logger.info(
                "occurrence_applied",
                extra={
                    "period_month": occurrence.period_month,
                    "occurs_on": occurrence.occurs_on,
                    "record_kind": spec.kind.value,
                    "record_id": str(record.id),
                    "amount": spec.amount,
                },
            )
        return occurrence

    def cancel(self, occurrence: RecurringEntryOccurrence | None) -> RecurringEntryOccurrence:
        """
        Mark ``occurrence`` canceled and destroy its linked ledger record.

        Postconditions:
            - status is CANCELED, applied_at is None, both links cleared.
            - The previously linked income/expense (if any) no longer exists.
            - Canceling a scheduled or already-canceled occurrence only
              sets the status.

        Raises:
            OccurrenceRequiredError, OccurrenceNotFoundError.
        """
        if occurrence is None:
            raise OccurrenceRequiredError()

        with LogContext.bind(occurrence_id=occurrence.id):
            with self.session.begin_nested():
                self._lock(occurrence)
                linked: list[tuple[EntryKind, UUID]] = []
                if occurrence.income_id is not None:
                    linked.append((EntryKind.INCOME, occurrence.income_id))
                if occurrence.expense_id is not None:
                    linked.append((EntryKind.EXPENSE, occurrence.expense_id))
                previous_status = OccurrenceStatus(occurrence.status)

                self._check_transition(occurrence, OccurrenceStatus.CANCELED)
                occurrence.mark_canceled()
                # Links must be gone before the referenced rows are deleted.
                self.session.flush()

                for kind, record_id in linked:
                    self._records.destroy(kind, record_id)

            logger.info(
                "occurrence_canceled",
                extra={
                    "period_month": occurrence.period_month,
                    "previous_status": previous_status.value,
                    "destroyed_records": [str(record_id) for _, record_id in linked],
                },
            )
        return occurrence

    def _lock(self, occurrence: RecurringEntryOccurrence) -> None:
        """Re-read the occurrence row under FOR UPDATE, refreshing it in place."""
        locked = self.session.execute(
            select(RecurringEntryOccurrence)
            .where(RecurringEntryOccurrence.id == occurrence.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if locked is None:
            raise OccurrenceNotFoundError(str(occurrence.id))

    def _check_transition(
        self,
        occurrence: RecurringEntryOccurrence,
        target: OccurrenceStatus,
    ) -> None:
        if not can_transition(occurrence.status, target):
            raise InvalidOccurrenceTransitionError(
                occurrence_id=str(occurrence.id),
                from_status=OccurrenceStatus(occurrence.status).value,
                to_status=target.value,
            )
