"""
DTOs -- immutable data flowing in and out of the recurring engine.

Responsibility:
    ``TemplateDraft`` is the input for template create/update.
    ``SyncResult`` reports what one synchronize run did.
    ``TemplateInfo`` / ``OccurrenceInfo`` are the read-side shapes returned
    by selectors, converted from ORM rows at the boundary.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  ``from_model`` converters are only
    called from services/selectors.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from ledger_kernel.domain.values import EntryKind, OccurrenceStatus

if TYPE_CHECKING:
    from ledger_kernel.models.recurring import (
        RecurringEntryOccurrence as OccurrenceModel,
    )
    from ledger_kernel.models.recurring import (
        RecurringEntryTemplate as TemplateModel,
    )


@dataclass(frozen=True)
class TemplateDraft:
    """User-submitted recurring template fields."""

    account_id: UUID
    category_id: UUID
    kind: EntryKind
    title: str
    amount: int
    day_of_month: int
    effective_from: date | None
    effective_to: date | None = None
    use_end_of_month: bool = False
    memo: str | None = None


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one synchronize run for one template."""

    template_id: UUID
    start_month: date
    end_month: date
    created: int = 0
    updated: int = 0
    deleted: int = 0
    canceled: int = 0
    unchanged: int = 0

    @property
    def wrote_anything(self) -> bool:
        return bool(self.created or self.updated or self.deleted or self.canceled)


@dataclass(frozen=True)
class TemplateInfo:
    id: UUID
    account_id: UUID
    category_id: UUID
    kind: EntryKind
    title: str
    amount: int
    memo: str | None
    day_of_month: int
    use_end_of_month: bool
    effective_from: date
    effective_to: date | None
    created_at: datetime | None

    @classmethod
    def from_model(cls, template: TemplateModel) -> TemplateInfo:
        return cls(
            id=template.id,
            account_id=template.account_id,
            category_id=template.category_id,
            kind=EntryKind(template.kind),
            title=template.title,
            amount=template.amount,
            memo=template.memo,
            day_of_month=template.day_of_month,
            use_end_of_month=template.use_end_of_month,
            effective_from=template.effective_from,
            effective_to=template.effective_to,
            created_at=template.created_at,
        )


@dataclass(frozen=True)
class OccurrenceInfo:
    id: UUID
    template_id: UUID
    period_month: date
    occurs_on: date
    status: OccurrenceStatus
    applied_at: datetime | None
    income_id: UUID | None
    expense_id: UUID | None
    template: TemplateInfo

    @property
    def ledger_record_id(self) -> UUID | None:
        return self.income_id or self.expense_id

    @classmethod
    def from_model(cls, occurrence: OccurrenceModel) -> OccurrenceInfo:
        return cls(
            id=occurrence.id,
            template_id=occurrence.template_id,
            period_month=occurrence.period_month,
            occurs_on=occurrence.occurs_on,
            status=OccurrenceStatus(occurrence.status),
            applied_at=occurrence.applied_at,
            income_id=occurrence.income_id,
            expense_id=occurrence.expense_id,
            template=TemplateInfo.from_model(occurrence.template),
        )
