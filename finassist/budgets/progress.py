"""Budget progress against the current period window."""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from finassist.budgets.period import PeriodWindow, current_period
from finassist.data.schemas import Budget, Entry, same_category


@dataclass(frozen=True)
class BudgetProgress:
    """How far a budget has been consumed in its current window.

    ``progress`` is clamped to 100 for display; ``usage`` is the raw
    percentage and is what over-budget checks look at.
    """
    window: PeriodWindow
    current_spending: float
    progress: int
    usage: float
    remaining: float


def calculate_progress(
    budget: Budget,
    entries: Iterable[Entry],
    today: Optional[date] = None,
    window: Optional[PeriodWindow] = None,
) -> BudgetProgress:
    """
    Sum matching entries inside the budget's current window.

    An entry matches when its type and category (case-insensitive) equal the
    budget's. A zero-amount budget reports 0% rather than dividing by zero.

    Args:
        budget: Budget to measure
        entries: All entries; non-matching ones are ignored
        today: Reference date, defaults to date.today()
        window: Explicit window, overrides the one derived from ``today``
    """
    if window is None:
        window = current_period(budget.period, today or date.today())

    spent = sum(
        e.amount
        for e in entries
        if e.type.value == budget.type.value
        and same_category(e.category, budget.category)
        and window.contains(e.date)
    )

    if budget.amount > 0:
        usage = spent / budget.amount * 100
        progress = min(int(usage + 0.5), 100)
    else:
        usage = 0.0
        progress = 0

    return BudgetProgress(
        window=window,
        current_spending=spent,
        progress=progress,
        usage=usage,
        remaining=max(budget.amount - spent, 0),
    )


def compliance_status(
    usage: float, on_track: str = "on track", critical_at: Optional[float] = 80
) -> str:
    """
    Label a usage percentage.

    Over 100 is always "over budget". With ``critical_at`` set, usage at or
    above it is "critical"; everything else gets ``on_track``.
    """
    if usage > 100:
        return "over budget"
    if critical_at is not None and usage >= critical_at:
        return "critical"
    return on_track


def progress_label(budget_type: str, usage: float) -> str:
    """UI progress label shown next to budget bars in the tracker."""
    if budget_type == "expense":
        if usage > 100:
            return "over budget"
        if usage >= 70:
            return "warning"
        return "safe"
    if usage < 30:
        return "behind target"
    if usage < 70:
        return "progressing"
    return "on track"
