"""Occurrence status state machine."""

import pytest

from ledger_kernel.domain.values import VALID_TRANSITIONS, OccurrenceStatus, can_transition

S = OccurrenceStatus


class TestOccurrenceTransitions:
    def test_every_status_has_an_entry(self):
        assert set(VALID_TRANSITIONS) == set(OccurrenceStatus)

    @pytest.mark.parametrize(
        "current,target",
        [
            (S.SCHEDULED, S.APPLIED),
            (S.SCHEDULED, S.CANCELED),
            (S.APPLIED, S.CANCELED),
            (S.CANCELED, S.APPLIED),
            (S.CANCELED, S.CANCELED),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (S.APPLIED, S.APPLIED),
            (S.APPLIED, S.SCHEDULED),
            (S.CANCELED, S.SCHEDULED),
            (S.SCHEDULED, S.SCHEDULED),
        ],
    )
    def test_rejected(self, current, target):
        assert not can_transition(current, target)

    def test_accepts_stored_strings(self):
        assert can_transition("scheduled", S.APPLIED)
