"""
RecurringTemplateService -- create, edit and delete recurring templates.

Responsibility:
    The write path for templates.  Validates user input, persists the
    template, and runs the synchronizer in the same transaction so the
    occurrence window always matches what was saved.

Architecture position:
    Kernel > Services -- imperative shell.  Uses OccurrenceSynchronizer.

Invariants enforced:
    - Every create/update is followed by a synchronize of that template.
    - Deleting a template deletes its occurrences; ledger records they
      created stay in the general ledger.
    - kind is fixed while any occurrence is applied, so every linked
      record matches the template's kind.
    - Flush-only: never commits or rolls back the outer session.

Failure modes:
    - TemplateValidationError: field rules broken (see domain.template_rules).
    - TemplateNotFoundError: unknown template id on update/delete.
    - OccurrenceConflictError: propagated from the synchronizer.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func, select

from ledger_kernel.domain.dtos import SyncResult, TemplateDraft
from ledger_kernel.domain.template_rules import normalize_draft, template_problems
from ledger_kernel.domain.values import EntryKind, OccurrenceStatus
from ledger_kernel.exceptions import TemplateNotFoundError, TemplateValidationError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.account import Category
from ledger_kernel.models.recurring import RecurringEntryOccurrence, RecurringEntryTemplate
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.synchronizer import OccurrenceSynchronizer

logger = get_logger("services.template")


@dataclass(frozen=True)
class TemplateChange:
    """A saved template together with the synchronize run it triggered."""

    template: RecurringEntryTemplate
    sync: SyncResult


class RecurringTemplateService(BaseService[RecurringEntryTemplate]):
    """Template lifecycle."""

    def __init__(self, session, synchronizer: OccurrenceSynchronizer):
        super().__init__(session)
        self._synchronizer = synchronizer

    def create_template(self, draft: TemplateDraft, actor_id: UUID) -> TemplateChange:
        draft = self._validated(draft)
        template = RecurringEntryTemplate(created_by_id=actor_id)
        self._assign(template, draft)
        self.session.add(template)
        self.session.flush()

        with LogContext.bind(template_id=template.id, actor_id=actor_id):
            logger.info(
                "template_created",
                extra={
                    "kind": template.kind.value,
                    "amount": template.amount,
                    "effective_from": template.effective_from,
                    "effective_to": template.effective_to,
                },
            )
            sync = self._synchronizer.synchronize(template)
        return TemplateChange(template=template, sync=sync)

    def update_template(
        self,
        template_id: UUID,
        draft: TemplateDraft,
        actor_id: UUID,
    ) -> TemplateChange:
        template = self._get_for_update(template_id)
        draft = self._validated(draft)
        if draft.kind != EntryKind(template.kind) and self._has_applied(template):
            errors = [{"field": "kind", "message": "cannot change while occurrences are applied"}]
            logger.warning(
                "template_rejected_validation",
                extra={"error_count": 1, "fields": ["kind"], "template_id": str(template.id)},
            )
            raise TemplateValidationError(errors)
        self._assign(template, draft)
        template.updated_by_id = actor_id
        self.session.flush()

        with LogContext.bind(template_id=template.id, actor_id=actor_id):
            logger.info(
                "template_updated",
                extra={
                    "effective_from": template.effective_from,
                    "effective_to": template.effective_to,
                },
            )
            sync = self._synchronizer.synchronize(template)
        return TemplateChange(template=template, sync=sync)

    def delete_template(self, template_id: UUID, actor_id: UUID) -> int:
        """Delete the template and its occurrences. Returns occurrences removed."""
        template = self._get_for_update(template_id)
        occurrence_count = self.session.execute(
            select(func.count())
            .select_from(RecurringEntryOccurrence)
            .where(RecurringEntryOccurrence.template_id == template.id)
        ).scalar_one()

        self.session.delete(template)
        self.session.flush()

        logger.info(
            "template_deleted",
            extra={
                "template_id": str(template_id),
                "actor_id": str(actor_id),
                "occurrences_removed": occurrence_count,
            },
        )
        return occurrence_count

    def _validated(self, draft: TemplateDraft) -> TemplateDraft:
        draft = normalize_draft(draft)
        category = (
            self.session.get(Category, draft.category_id)
            if draft.category_id is not None
            else None
        )
        errors = template_problems(
            draft,
            category_account_id=category.account_id if category else None,
            category_kind=category.kind if category else None,
        )
        if errors:
            logger.warning(
                "template_rejected_validation",
                extra={"error_count": len(errors), "fields": [e["field"] for e in errors]},
            )
            raise TemplateValidationError(errors)
        return draft

    @staticmethod
    def _assign(template: RecurringEntryTemplate, draft: TemplateDraft) -> None:
        template.account_id = draft.account_id
        template.category_id = draft.category_id
        template.kind = draft.kind
        template.title = draft.title
        template.amount = draft.amount
        template.memo = draft.memo
        template.day_of_month = draft.day_of_month
        template.use_end_of_month = draft.use_end_of_month
        template.effective_from = draft.effective_from
        template.effective_to = draft.effective_to

    def _has_applied(self, template: RecurringEntryTemplate) -> bool:
        return self.session.execute(
            select(RecurringEntryOccurrence.id)
            .where(
                RecurringEntryOccurrence.template_id == template.id,
                RecurringEntryOccurrence.status == OccurrenceStatus.APPLIED,
            )
            .limit(1)
        ).first() is not None

    def _get_for_update(self, template_id: UUID) -> RecurringEntryTemplate:
        template = self.session.execute(
            select(RecurringEntryTemplate)
            .where(RecurringEntryTemplate.id == template_id)
            .with_for_update()
        ).scalar_one_or_none()
        if template is None:
            raise TemplateNotFoundError(str(template_id))
        return template
