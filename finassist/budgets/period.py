"""Period Calculator - calendar-anchored accounting windows.

Budgets recur monthly, quarterly, half-yearly or yearly and are always measured
against the calendar period that contains "now", never against the date the
budget was created. Windows are half-open: ``[start, end)``.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Union

from dateutil.relativedelta import relativedelta

from finassist.data.schemas import BudgetPeriod, TrendUnit


MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

DateLike = Union[date, datetime]


@dataclass(frozen=True)
class PeriodWindow:
    """Half-open date interval ``[start, end)``."""
    start: date
    end: date
    label: str = ""

    @property
    def last_day(self) -> date:
        """Inclusive end of the window."""
        return self.end - timedelta(days=1)

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end

    def days_remaining(self, today: date) -> int:
        return max(0, (self.end - today).days)


def _as_date(now: DateLike) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def current_period(period: Union[BudgetPeriod, str], now: DateLike) -> PeriodWindow:
    """
    Return the calendar window of the given recurrence that contains ``now``.

    Quarters align to Jan/Apr/Jul/Oct, halves to Jan/Jul.

    Args:
        period: monthly, quarterly, half-yearly or yearly
        now: Reference date (a datetime is truncated to its date)

    Returns:
        PeriodWindow for the current period
    """
    today = _as_date(now)
    period = BudgetPeriod(period)

    if period == BudgetPeriod.MONTHLY:
        start = today.replace(day=1)
        return PeriodWindow(start, start + relativedelta(months=1))

    if period == BudgetPeriod.QUARTERLY:
        start_month = today.month - (today.month - 1) % 3
        start = date(today.year, start_month, 1)
        return PeriodWindow(start, start + relativedelta(months=3))

    if period == BudgetPeriod.HALF_YEARLY:
        start = date(today.year, 1 if today.month <= 6 else 7, 1)
        return PeriodWindow(start, start + relativedelta(months=6))

    start = date(today.year, 1, 1)
    return PeriodWindow(start, start + relativedelta(years=1))


def trailing_windows(
    unit: Union[TrendUnit, str], now: DateLike, limit: int = 6
) -> List[PeriodWindow]:
    """
    Build ``limit`` consecutive windows ending with the one containing ``now``.

    Weeks start on Sunday. Results are ordered newest first and carry a
    display label ("Week 4/8", "Aug 2024", "Q3 2024", "2024").
    """
    today = _as_date(now)
    unit = TrendUnit(unit)
    windows: List[PeriodWindow] = []

    for i in range(limit):
        if unit == TrendUnit.WEEK:
            days_since_sunday = (today.weekday() + 1) % 7
            start = today - timedelta(days=days_since_sunday + 7 * i)
            end = start + timedelta(days=7)
            label = f"Week {start.day}/{start.month}"
        elif unit == TrendUnit.MONTH:
            start = today.replace(day=1) - relativedelta(months=i)
            end = start + relativedelta(months=1)
            label = f"{MONTH_NAMES[start.month - 1][:3]} {start.year}"
        elif unit == TrendUnit.QUARTER:
            start = current_period(BudgetPeriod.QUARTERLY, today).start - relativedelta(months=3 * i)
            end = start + relativedelta(months=3)
            label = f"Q{(start.month - 1) // 3 + 1} {start.year}"
        else:
            start = date(today.year - i, 1, 1)
            end = date(today.year - i + 1, 1, 1)
            label = str(start.year)

        windows.append(PeriodWindow(start, end, label))

    return windows
