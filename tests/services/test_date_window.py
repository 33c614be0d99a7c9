from datetime import date, datetime

import pytest

from picksync.services.date_window import (
    SyncWindow,
    clamp_to_horizon,
    compute_window,
    cycle_year,
    estimated_boundaries,
    max_horizon,
)


class TestCycleYear:
    @pytest.mark.parametrize(
        "now, expected",
        [
            (date(2025, 1, 15), 2024),
            (date(2025, 2, 28), 2024),
            (date(2025, 3, 1), 2025),
            (date(2025, 12, 31), 2025),
        ],
    )
    def test_rolls_over_in_march(self, now, expected):
        assert cycle_year(now) == expected


class TestMaxHorizon:
    def test_absolute_cap_wins_early_in_cycle(self):
        # Provider limit would be 2026-03-01; six months out is earlier
        assert max_horizon(date(2025, 7, 1), 6) == date(2026, 1, 1)

    def test_provider_limit_wins_late_in_cycle(self):
        assert max_horizon(date(2025, 11, 20), 6) == date(2026, 3, 1)

    def test_january_uses_previous_cycle(self):
        assert max_horizon(date(2026, 1, 10), 6) == date(2026, 3, 1)

    def test_month_end_is_clamped(self):
        assert max_horizon(date(2025, 8, 31), 6) == date(2026, 2, 28)


class TestComputeWindow:
    def test_days_forward_beyond_horizon_is_clamped(self):
        window = compute_window(datetime(2025, 7, 1, 9, 30), 30, 365, horizon_months=6)

        assert window.start == date(2025, 6, 1)
        assert window.end == date(2026, 1, 1)
        assert window.end <= max_horizon(date(2025, 7, 1), 6)

    def test_short_window_is_not_touched(self):
        window = compute_window(date(2025, 10, 1), 3, 7)

        assert window == SyncWindow(start=date(2025, 9, 28), end=date(2025, 10, 8))
        assert window.last_day == date(2025, 10, 7)
        assert window.days == 10

    def test_zero_days(self):
        window = compute_window(date(2025, 10, 1), 0, 0)

        assert window.is_empty
        assert window.days == 0

    def test_end_never_precedes_start(self):
        window = compute_window(date(2025, 2, 27), 0, 365, horizon_months=1)

        assert window.start == date(2025, 2, 27)
        assert window.end == date(2025, 3, 1)
        assert window.start <= window.end

    def test_negative_days_rejected(self):
        with pytest.raises(ValueError):
            compute_window(date(2025, 10, 1), -1, 7)


class TestClampToHorizon:
    def test_season_range_is_clamped(self):
        window = clamp_to_horizon(date(2025, 7, 31), date(2026, 2, 13), date(2025, 7, 1))

        assert window == SyncWindow(start=date(2025, 7, 31), end=date(2026, 1, 1))

    def test_range_fully_beyond_horizon(self):
        assert clamp_to_horizon(date(2026, 8, 1), date(2027, 2, 28), date(2025, 10, 1)) is None

    def test_range_inside_horizon_is_unchanged(self):
        window = clamp_to_horizon(date(2025, 9, 1), date(2025, 9, 8), date(2025, 10, 1))

        assert window == SyncWindow(start=date(2025, 9, 1), end=date(2025, 9, 8))


def test_estimated_boundaries():
    assert estimated_boundaries(2025) == (date(2025, 8, 1), date(2026, 2, 28))
