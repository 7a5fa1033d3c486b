"""
Values -- enumerations shared by the domain, models and services.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Models import these so that the
    persisted strings and the in-memory tags are one and the same.
"""

from enum import Enum


class EntryKind(str, Enum):
    """Which side of the ledger a template (and the record it creates) lands on."""

    INCOME = "income"
    EXPENSE = "expense"


class OccurrenceStatus(str, Enum):
    """Lifecycle status of one monthly occurrence.

    Contract: see VALID_TRANSITIONS.  ``applied -> applied`` is not a
    transition; apply on an applied occurrence is a no-op handled by the
    applier before the state machine is consulted.
    """

    SCHEDULED = "scheduled"
    APPLIED = "applied"
    CANCELED = "canceled"


# Allowed state transitions (from -> set of valid targets)
VALID_TRANSITIONS: dict[OccurrenceStatus, frozenset[OccurrenceStatus]] = {
    OccurrenceStatus.SCHEDULED: frozenset({
        OccurrenceStatus.APPLIED, OccurrenceStatus.CANCELED,
    }),
    OccurrenceStatus.APPLIED: frozenset({
        OccurrenceStatus.CANCELED,
    }),
    # A canceled bill can be counted again, and canceling twice is harmless.
    OccurrenceStatus.CANCELED: frozenset({
        OccurrenceStatus.APPLIED, OccurrenceStatus.CANCELED,
    }),
}


def can_transition(current: OccurrenceStatus, target: OccurrenceStatus) -> bool:
    """Check a status change against VALID_TRANSITIONS."""
    return target in VALID_TRANSITIONS[OccurrenceStatus(current)]
