"""Services for the ledger kernel (write side)."""

from ledger_kernel.services.applier import OccurrenceApplier
from ledger_kernel.services.ledger_record_service import (
    LedgerRecordService,
    build_ledger_record,
)
from ledger_kernel.services.synchronizer import DEFAULT_HORIZON_MONTHS, OccurrenceSynchronizer
from ledger_kernel.services.template_service import RecurringTemplateService, TemplateChange

__all__ = [
    "DEFAULT_HORIZON_MONTHS",
    "LedgerRecordService",
    "OccurrenceApplier",
    "OccurrenceSynchronizer",
    "RecurringTemplateService",
    "TemplateChange",
    "build_ledger_record",
]
