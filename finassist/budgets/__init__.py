"""Budget period windows and progress calculation."""
from finassist.budgets.period import PeriodWindow, current_period, trailing_windows
from finassist.budgets.progress import BudgetProgress, calculate_progress

__all__ = [
    "PeriodWindow",
    "current_period",
    "trailing_windows",
    "BudgetProgress",
    "calculate_progress",
]
