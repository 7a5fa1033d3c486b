"""Target window computation for bounded and open-ended templates."""

from datetime import date

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ledger_kernel.domain.months import add_months, month_start
from ledger_kernel.domain.window import TargetWindow, compute_target_window

TODAY = date(2025, 6, 15)


class TestComputeTargetWindow:
    def test_bounded_template_uses_effective_to(self):
        window = compute_target_window(
            effective_from=date(2025, 1, 1),
            effective_to=date(2025, 6, 1),
            today=TODAY,
            horizon_months=24,
        )
        assert window == TargetWindow(date(2025, 1, 1), date(2025, 6, 1))
        assert len(window.months) == 6

    def test_bounded_template_ignores_horizon(self):
        window = compute_target_window(
            effective_from=date(2020, 1, 1),
            effective_to=date(2040, 1, 1),
            today=TODAY,
            horizon_months=2,
        )
        assert window.end_month == date(2040, 1, 1)

    def test_open_ended_runs_to_horizon(self):
        window = compute_target_window(
            effective_from=date(2025, 1, 1),
            effective_to=None,
            today=TODAY,
            horizon_months=24,
        )
        assert window.start_month == date(2025, 1, 1)
        assert window.end_month == date(2027, 6, 1)
        assert len(window.months) == 30

    def test_open_ended_small_horizon(self):
        window = compute_target_window(
            effective_from=date(2024, 12, 1),
            effective_to=None,
            today=date(2025, 1, 15),
            horizon_months=2,
        )
        assert window.months == (
            date(2024, 12, 1),
            date(2025, 1, 1),
            date(2025, 2, 1),
            date(2025, 3, 1),
        )

    def test_zero_horizon_stops_at_current_month(self):
        window = compute_target_window(
            effective_from=date(2025, 1, 1),
            effective_to=None,
            today=TODAY,
            horizon_months=0,
        )
        assert window.end_month == date(2025, 6, 1)

    def test_future_start_beyond_horizon_gets_first_month(self):
        window = compute_target_window(
            effective_from=date(2030, 1, 1),
            effective_to=None,
            today=TODAY,
            horizon_months=24,
        )
        assert window.months == (date(2030, 1, 1),)

    def test_effective_to_before_from_is_empty(self):
        window = compute_target_window(
            effective_from=date(2025, 6, 1),
            effective_to=date(2025, 3, 1),
            today=TODAY,
            horizon_months=24,
        )
        assert window.months == ()

    def test_mid_month_dates_are_normalized(self):
        window = compute_target_window(
            effective_from=date(2025, 1, 20),
            effective_to=date(2025, 3, 9),
            today=TODAY,
            horizon_months=24,
        )
        assert window == TargetWindow(date(2025, 1, 1), date(2025, 3, 1))

    def test_negative_horizon_rejected(self):
        with pytest.raises(ValueError):
            compute_target_window(
                effective_from=date(2025, 1, 1),
                effective_to=None,
                today=TODAY,
                horizon_months=-1,
            )

    @given(
        start_offset=st.integers(min_value=-120, max_value=120),
        horizon=st.integers(min_value=0, max_value=60),
    )
    def test_open_ended_window_is_contiguous_and_covers_horizon(self, start_offset, horizon):
        start = add_months(month_start(TODAY), start_offset)
        window = compute_target_window(start, None, TODAY, horizon)

        months = window.months
        assert months[0] == start
        assert all(add_months(a, 1) == b for a, b in zip(months, months[1:]))
        assert months[-1] == max(add_months(month_start(TODAY), horizon), start)


class TestTargetWindowContains:
    def test_membership(self):
        window = TargetWindow(date(2025, 1, 1), date(2025, 3, 1))
        assert date(2025, 1, 1) in window
        assert date(2025, 3, 1) in window
        assert date(2025, 4, 1) not in window
        assert date(2024, 12, 1) not in window

    def test_non_dates_are_not_members(self):
        window = TargetWindow(date(2025, 1, 1), date(2025, 3, 1))
        assert "2025-01-01" not in window
