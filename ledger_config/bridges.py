"""
Bridges -- hand resolved configuration to kernel services.

The kernel never imports ``ledger_config``; callers that want configured
services build them here.
"""

from sqlalchemy.orm import Session

from ledger_config.settings import LedgerSettings
from ledger_kernel.domain.clock import Clock
from ledger_kernel.services.applier import OccurrenceApplier
from ledger_kernel.services.synchronizer import OccurrenceSynchronizer
from ledger_kernel.services.template_service import RecurringTemplateService


def build_synchronizer(
    session: Session,
    settings: LedgerSettings,
    clock: Clock | None = None,
) -> OccurrenceSynchronizer:
    return OccurrenceSynchronizer(session, horizon_months=settings.horizon_months, clock=clock)


def build_template_service(
    session: Session,
    settings: LedgerSettings,
    clock: Clock | None = None,
) -> RecurringTemplateService:
    return RecurringTemplateService(session, build_synchronizer(session, settings, clock))


def build_applier(session: Session, clock: Clock | None = None) -> OccurrenceApplier:
    return OccurrenceApplier(session, clock=clock)
