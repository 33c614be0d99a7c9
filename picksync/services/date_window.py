"""
Fetch window policy for scoreboard syncs.

ESPN only publishes the schedule of the current competitive cycle and answers
400 for date ranges beyond it, so a wall-clock "N days forward" window is
clamped to a provider horizon before it is sent upstream.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from picksync.utils.dates import add_months

DEFAULT_HORIZON_MONTHS = 6

# Month in which a new cycle's schedule becomes the one ESPN serves
CYCLE_ROLLOVER_MONTH = 3


@dataclass(frozen=True)
class SyncWindow:
    """Half-open date range [start, end)."""

    start: date
    end: date

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    @property
    def last_day(self) -> date:
        """Inclusive end, as ESPN's `dates=START-END` parameter expects."""
        return self.end - timedelta(days=1)

    @property
    def days(self) -> int:
        return max((self.end - self.start).days, 0)


def _as_date(now: datetime | date) -> date:
    return now.date() if isinstance(now, datetime) else now


def cycle_year(now: datetime | date) -> int:
    """Season year whose schedule ESPN serves at `now` (current or upcoming)."""
    today = _as_date(now)
    return today.year if today.month >= CYCLE_ROLLOVER_MONTH else today.year - 1


def max_horizon(now: datetime | date, horizon_months: int = DEFAULT_HORIZON_MONTHS) -> date:
    """
    Exclusive upper bound for any fetch window requested at `now`.

    The earlier of the end of the served cycle (its postseason finishes in
    February of the following year) and an absolute cap of `horizon_months`.
    """
    today = _as_date(now)
    provider_limit = date(cycle_year(today) + 1, CYCLE_ROLLOVER_MONTH, 1)
    absolute_cap = add_months(today, horizon_months)
    return min(provider_limit, absolute_cap)


def compute_window(
    now: datetime | date,
    days_back: int,
    days_forward: int,
    *,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> SyncWindow:
    """Build the [now - days_back, min(now + days_forward, horizon)) window."""
    if days_back < 0 or days_forward < 0:
        raise ValueError("days_back and days_forward must be non-negative")

    today = _as_date(now)
    start = today - timedelta(days=days_back)
    end = min(today + timedelta(days=days_forward), max_horizon(today, horizon_months))
    if end < start:
        end = start
    return SyncWindow(start=start, end=end)


def clamp_to_horizon(
    start: date,
    end: date,
    now: datetime | date,
    *,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> SyncWindow | None:
    """
    Clamp an explicit [start, end) range to the provider horizon.

    Returns None when the whole range lies beyond the horizon.
    """
    horizon = max_horizon(now, horizon_months)
    if start >= horizon:
        return None
    return SyncWindow(start=start, end=min(end, horizon))


def estimated_boundaries(year: int) -> tuple[date, date]:
    """Typical NFL season span: preseason in August through the Super Bowl in February."""
    return date(year, 8, 1), date(year + 1, 2, 28)
