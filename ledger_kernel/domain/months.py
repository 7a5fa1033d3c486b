"""
Months -- month stepping and end-of-month clamping.

Responsibility:
    Pure date arithmetic for monthly recurrence.  A "month" is always
    represented as the ``date`` of its first day.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - ``occurs_on()`` always returns a valid date inside the given month,
      whatever ``day_of_month`` is (1-31), with or without end-of-month mode.
"""

import calendar
from datetime import date
from typing import Iterator


def month_start(day: date) -> date:
    """First day of the month containing ``day``."""
    return day.replace(day=1)


def last_day_of_month(month: date) -> int:
    """Number of the last calendar day of ``month`` (28-31)."""
    return calendar.monthrange(month.year, month.month)[1]


def add_months(month: date, count: int) -> date:
    """Step a month (normalized to day 1) forward or back by ``count`` months."""
    index = month.year * 12 + (month.month - 1) + count
    return date(index // 12, index % 12 + 1, 1)


def iter_months(start: date, end: date) -> Iterator[date]:
    """Yield every month from ``start`` through ``end`` inclusive.

    Yields nothing when ``end`` is before ``start``.
    """
    current = month_start(start)
    last = month_start(end)
    while current <= last:
        yield current
        current = add_months(current, 1)


def occurs_on(month: date, day_of_month: int, use_end_of_month: bool) -> date:
    """
    Concrete date of an occurrence in ``month``.

    With ``use_end_of_month`` a day past the month's end lands on the last
    day.  Without it the day is still capped at the last day, so the 31st
    written against February gives the 28th/29th rather than an invalid date.
    """
    last_day = last_day_of_month(month)
    target_day = day_of_month
    if use_end_of_month and target_day > last_day:
        target_day = last_day
    return date(month.year, month.month, min(target_day, last_day))
