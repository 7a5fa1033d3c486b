"""
OccurrenceSynchronizer -- keep a template's occurrences in step with its window.

Responsibility:
    Reconciles the stored occurrences of one recurring template against
    the months it should cover: prunes rows that fell out of range and
    find-or-creates one row per target month with a freshly computed
    ``occurs_on``.

Architecture position:
    Kernel > Services -- imperative shell.
    Called by RecurringTemplateService after every template create/update,
    and by any batch caller that wants to roll open-ended windows forward.

Invariants enforced:
    - One occurrence per (template, period_month); a duplicate insert from a
      concurrent writer surfaces as OccurrenceConflictError.
    - Prune never destroys a ledger record: an APPLIED occurrence that falls
      out of range is moved to CANCELED with its links and applied_at
      cleared, and the income/expense it created stays in the ledger.
    - SCHEDULED occurrences out of range are deleted; CANCELED ones are left
      alone.
    - Re-running with unchanged inputs writes nothing.
    - All-or-nothing: the whole prune+upsert runs in one SAVEPOINT.

Failure modes:
    - MissingEffectiveFromError: template has no effective_from.
    - OccurrenceConflictError: UNIQUE(template_id, period_month) violated by
      a concurrent writer; safe to retry.
    - ValueError: negative horizon at construction.
"""

from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.dtos import SyncResult
from ledger_kernel.domain.months import occurs_on
from ledger_kernel.domain.values import OccurrenceStatus
from ledger_kernel.domain.window import TargetWindow, compute_target_window
from ledger_kernel.exceptions import MissingEffectiveFromError, OccurrenceConflictError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.recurring import RecurringEntryOccurrence, RecurringEntryTemplate
from ledger_kernel.services.base import BaseService

logger = get_logger("services.synchronizer")

DEFAULT_HORIZON_MONTHS = 24


class OccurrenceSynchronizer(BaseService[RecurringEntryOccurrence]):
    """
    Reconciles occurrences for one template at a time.

    Contract:
        ``horizon_months`` and ``clock`` are injected; nothing is read from
        the process environment here.  See ``ledger_config.bridges`` for the
        configured construction.

    Non-goals:
        - Does NOT destroy ledger records (only OccurrenceApplier.cancel does).
        - Does NOT regenerate applied occurrences; it only refreshes their
          ``occurs_on``.
    """

    def __init__(
        self,
        session: Session,
        horizon_months: int = DEFAULT_HORIZON_MONTHS,
        clock: Clock | None = None,
    ):
        super().__init__(session)
        if horizon_months < 0:
            raise ValueError(f"horizon_months must be non-negative, got {horizon_months}")
        self.horizon_months = horizon_months
        self._clock = clock or SystemClock()

    def synchronize(
        self,
        template: RecurringEntryTemplate,
        today: date | None = None,
    ) -> SyncResult:
        """
        Prune and upsert the template's occurrences.

        Args:
            template: Persistent (or pending) template in this session.
            today: Overrides the clock's date for this run.

        Returns:
            SyncResult with per-action counts.

        Raises:
            MissingEffectiveFromError: template.effective_from is None.
            OccurrenceConflictError: concurrent duplicate insert.
        """
        if template is None or template.effective_from is None:
            raise MissingEffectiveFromError(
                str(template.id) if template is not None and template.id else None
            )

        today = today or self._clock.today()
        window = compute_target_window(
            effective_from=template.effective_from,
            effective_to=template.effective_to,
            today=today,
            horizon_months=self.horizon_months,
        )

        # Make sure the template row (and its id) exists before querying.
        self.session.flush()

        with LogContext.bind(template_id=template.id):
            try:
                with self.session.begin_nested():
                    counts = self._reconcile(template, window)
                    result = SyncResult(
                        template_id=template.id,
                        start_month=window.start_month,
                        end_month=window.end_month,
                        **counts,
                    )
                    # Logged before RELEASE so a failure here still rolls back.
                    logger.info(
                        "occurrences_synchronized",
                        extra={
                            "start_month": result.start_month,
                            "end_month": result.end_month,
                            "horizon_months": self.horizon_months,
                            "created_count": result.created,
                            "updated_count": result.updated,
                            "deleted_count": result.deleted,
                            "canceled_count": result.canceled,
                            "unchanged_count": result.unchanged,
                        },
                    )
            except IntegrityError as exc:
                logger.warning(
                    "occurrence_sync_conflict",
                    extra={
                        "start_month": window.start_month,
                        "end_month": window.end_month,
                    },
                )
                raise OccurrenceConflictError(str(template.id)) from exc

        # The relationship collection may be stale after direct row writes.
        self.session.expire(template, ["occurrences"])
        return result

    def call(self, template: RecurringEntryTemplate) -> SyncResult:
        """Synchronize relative to the injected clock's date."""
        return self.synchronize(template)

    def _reconcile(
        self,
        template: RecurringEntryTemplate,
        window: TargetWindow,
    ) -> dict[str, int]:
        counts = {"created": 0, "updated": 0, "deleted": 0, "canceled": 0, "unchanged": 0}
        existing = self._load_existing(template)

        # Prune
        kept: dict[date, RecurringEntryOccurrence] = {}
        for occurrence in existing:
            if occurrence.period_month in window:
                kept[occurrence.period_month] = occurrence
                continue

            if occurrence.status == OccurrenceStatus.APPLIED:
                # Realized history: unlink but leave the ledger record alone.
                logger.info(
                    "occurrence_pruned_applied",
                    extra={
                        "occurrence_id": str(occurrence.id),
                        "period_month": occurrence.period_month,
                        "orphaned_record_id": str(occurrence.ledger_record_id),
                    },
                )
                occurrence.mark_canceled()
                counts["canceled"] += 1
            elif occurrence.status == OccurrenceStatus.SCHEDULED:
                self.session.delete(occurrence)
                counts["deleted"] += 1

        # Upsert
        for month in window.months:
            target_day = occurs_on(month, template.day_of_month, template.use_end_of_month)
            occurrence = kept.get(month)
            if occurrence is None:
                self.session.add(
                    RecurringEntryOccurrence(
                        template_id=template.id,
                        period_month=month,
                        occurs_on=target_day,
                        status=OccurrenceStatus.SCHEDULED,
                    )
                )
                counts["created"] += 1
            elif occurrence.occurs_on != target_day:
                occurrence.occurs_on = target_day
                counts["updated"] += 1
            else:
                counts["unchanged"] += 1

        self.session.flush()
        return counts

    def _load_existing(self, template: RecurringEntryTemplate) -> list[RecurringEntryOccurrence]:
        # Locked and refreshed so prune sees a status committed by a racing apply.
        return list(
            self.session.execute(
                select(RecurringEntryOccurrence)
                .where(RecurringEntryOccurrence.template_id == template.id)
                .order_by(RecurringEntryOccurrence.period_month)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalars()
        )
