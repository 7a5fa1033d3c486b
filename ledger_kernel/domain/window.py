"""
Window -- the set of months a recurring template should have occurrences for.

Responsibility:
    Computes the target month range used by the synchronizer: from the
    template's ``effective_from`` through either its ``effective_to`` or,
    for open-ended templates, ``horizon_months`` past the current month.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
"""

from dataclasses import dataclass
from datetime import date

from ledger_kernel.domain.months import add_months, iter_months, month_start


@dataclass(frozen=True)
class TargetWindow:
    """Inclusive range of months that should carry occurrences."""

    start_month: date
    end_month: date

    @property
    def months(self) -> tuple[date, ...]:
        return tuple(iter_months(self.start_month, self.end_month))

    def __contains__(self, month: object) -> bool:
        return isinstance(month, date) and self.start_month <= month <= self.end_month


def compute_target_window(
    effective_from: date,
    effective_to: date | None,
    today: date,
    horizon_months: int,
) -> TargetWindow:
    """
    Build the target window for one template.

    ``end_month`` is ``effective_to`` when set; otherwise the later of
    ``month_start(today) + horizon_months`` and ``effective_from``, so an
    open-ended template that starts in the far future still gets its first
    month.  An explicit ``effective_to`` before ``effective_from`` yields an
    empty window.
    """
    if horizon_months < 0:
        raise ValueError(f"horizon_months must be non-negative, got {horizon_months}")

    start_month = month_start(effective_from)
    if effective_to is not None:
        end_month = month_start(effective_to)
    else:
        end_month = max(add_months(month_start(today), horizon_months), start_month)
    return TargetWindow(start_month=start_month, end_month=end_month)
