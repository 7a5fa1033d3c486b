"""
RecurringSelector -- read side of the recurring engine.

Provides the monthly occurrence board (every occurrence of an account for
one month, in date order), per-template occurrence listings, the account's
template list, and the ledger records booked in a month.
"""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ledger_kernel.domain.dtos import OccurrenceInfo, TemplateInfo
from ledger_kernel.domain.months import add_months, month_start
from ledger_kernel.domain.values import EntryKind
from ledger_kernel.models.ledger import Expense, Income
from ledger_kernel.models.recurring import RecurringEntryOccurrence, RecurringEntryTemplate
from ledger_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class LedgerRecordInfo:
    id: UUID
    kind: EntryKind
    title: str
    amount: int
    transacted_on: date
    category_id: UUID
    user_id: UUID


class RecurringSelector(BaseSelector[RecurringEntryOccurrence]):
    """Read-only queries over templates, occurrences and ledger records."""

    def templates_for_account(self, account_id: UUID) -> list[TemplateInfo]:
        """Newest first."""
        rows = self.session.execute(
            select(RecurringEntryTemplate)
            .where(RecurringEntryTemplate.account_id == account_id)
            .order_by(RecurringEntryTemplate.created_at.desc(), RecurringEntryTemplate.id)
        ).scalars()
        return [TemplateInfo.from_model(t) for t in rows]

    def occurrences_for_month(self, account_id: UUID, month: date) -> list[OccurrenceInfo]:
        """The account's occurrences whose period_month is ``month``, by date then id."""
        rows = self.session.execute(
            select(RecurringEntryOccurrence)
            .join(RecurringEntryOccurrence.template)
            .where(
                RecurringEntryTemplate.account_id == account_id,
                RecurringEntryOccurrence.period_month == month_start(month),
            )
            .options(selectinload(RecurringEntryOccurrence.template))
            .order_by(RecurringEntryOccurrence.occurs_on, RecurringEntryOccurrence.id)
        ).scalars()
        return [OccurrenceInfo.from_model(o) for o in rows]

    def occurrences_for_template(self, template_id: UUID) -> list[OccurrenceInfo]:
        rows = self.session.execute(
            select(RecurringEntryOccurrence)
            .where(RecurringEntryOccurrence.template_id == template_id)
            .options(selectinload(RecurringEntryOccurrence.template))
            .order_by(RecurringEntryOccurrence.period_month)
        ).scalars()
        return [OccurrenceInfo.from_model(o) for o in rows]

    def ledger_records_for_month(
        self,
        account_id: UUID,
        month: date,
        kind: EntryKind,
    ) -> list[LedgerRecordInfo]:
        """Incomes or expenses of the account dated inside ``month``."""
        model, date_column = (
            (Income, Income.received_on)
            if EntryKind(kind) == EntryKind.INCOME
            else (Expense, Expense.spent_on)
        )
        first = month_start(month)
        rows = self.session.execute(
            select(model)
            .where(
                model.account_id == account_id,
                date_column >= first,
                date_column < add_months(first, 1),
            )
            .order_by(date_column, model.id)
        ).scalars()
        return [
            LedgerRecordInfo(
                id=r.id,
                kind=EntryKind(kind),
                title=r.title,
                amount=r.amount,
                transacted_on=r.transacted_on,
                category_id=r.category_id,
                user_id=r.user_id,
            )
            for r in rows
        ]
