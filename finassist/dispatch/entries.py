"""Entry aggregates: totals, extremes, comparisons, trends and rankings."""
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from finassist.budgets.period import MONTH_NAMES, trailing_windows
from finassist.data.schemas import Entry
from finassist.dispatch.params import (
    ComparePeriodsParams,
    DateRangeParams,
    TopCategoriesParams,
    TrendParams,
    TypedDateRangeParams,
    YearParams,
)
from finassist.dispatch.registry import register


# ============================================================================
# HELPERS
# ============================================================================

def in_range(entries: Iterable[Entry], start: Optional[date], end: Optional[date]) -> List[Entry]:
    """Entries dated within ``[start, end]``; either bound may be open."""
    return [
        e for e in entries
        if (start is None or e.date >= start) and (end is None or e.date <= end)
    ]


def total(entries: Iterable[Entry]) -> float:
    return sum(e.amount for e in entries)


def category_totals(entries: Iterable[Entry]) -> Dict[str, float]:
    """Sum per category, merging case variants under the first spelling seen."""
    totals: Dict[str, float] = {}
    display: Dict[str, str] = {}
    for entry in entries:
        key = entry.category.strip().lower()
        name = display.setdefault(key, entry.category)
        totals[name] = totals.get(name, 0) + entry.amount
    return totals


def _expenses(ctx, params: DateRangeParams) -> List[Entry]:
    return in_range(ctx.store.get_entries_by_type("expense"), params.start_date, params.end_date)


def _transaction(entry: Entry) -> Dict[str, Any]:
    return {"amount": entry.amount, "category": entry.category, "date": entry.date.isoformat()}


# ============================================================================
# TOTALS & SUMMARIES
# ============================================================================

def _register_total(name: str, entry_type: str) -> None:
    @register(name, DateRangeParams)
    def handler(ctx, params: DateRangeParams) -> float:
        return total(in_range(ctx.store.get_entries_by_type(entry_type), params.start_date, params.end_date))


_register_total("getTotalSpending", "expense")
_register_total("getTotalIncome", "income")
_register_total("getTotalSavings", "savings")
_register_total("getTotalInvestments", "investment")


@register("getNetBalance", DateRangeParams)
def net_balance(ctx, params: DateRangeParams) -> float:
    entries = in_range(ctx.store.get_entries(), params.start_date, params.end_date)
    by_type = {t: total(e for e in entries if e.type.value == t) for t in ("income", "expense", "savings", "investment")}
    return by_type["income"] - by_type["expense"] - by_type["savings"] - by_type["investment"]


@register("getAverageSpending", DateRangeParams)
def average_spending(ctx, params: DateRangeParams) -> float:
    entries = _expenses(ctx, params)
    if not entries:
        return 0
    return total(entries) / len(entries)


@register("getMaxSpending", DateRangeParams)
def max_spending(ctx, params: DateRangeParams) -> Dict[str, Any]:
    entries = _expenses(ctx, params)
    if not entries:
        return {"message": "No spending transactions found"}
    return _transaction(max(entries, key=lambda e: e.amount))


@register("getMinSpending", DateRangeParams)
def min_spending(ctx, params: DateRangeParams) -> Dict[str, Any]:
    entries = _expenses(ctx, params)
    if not entries:
        return {"message": "No spending transactions found"}
    return _transaction(min(entries, key=lambda e: e.amount))


# ============================================================================
# COMPARISONS & TRENDS
# ============================================================================

@register("comparePeriods", ComparePeriodsParams)
def compare_periods(ctx, params: ComparePeriodsParams) -> Dict[str, Any]:
    entries = ctx.store.get_entries_by_type(params.type.value)
    first = in_range(entries, params.period1_start, params.period1_end)
    second = in_range(entries, params.period2_start, params.period2_end)

    first_total = total(first)
    second_total = total(second)
    difference = second_total - first_total
    change = 0 if first_total == 0 else difference / first_total * 100

    if difference > 0:
        trend = "increase"
    elif difference < 0:
        trend = "decrease"
    else:
        trend = "unchanged"

    return {
        "period1": {
            "startDate": params.period1_start.isoformat(),
            "endDate": params.period1_end.isoformat(),
            "total": first_total,
            "count": len(first),
        },
        "period2": {
            "startDate": params.period2_start.isoformat(),
            "endDate": params.period2_end.isoformat(),
            "total": second_total,
            "count": len(second),
        },
        "difference": difference,
        "percentageChange": change,
        "trend": trend,
    }


def _monthly_totals(ctx, year: Optional[int]) -> Dict[Tuple[int, int], float]:
    totals: Dict[Tuple[int, int], float] = {}
    for entry in ctx.store.get_entries_by_type("expense"):
        if year is not None and entry.date.year != year:
            continue
        key = (entry.date.year, entry.date.month)
        totals[key] = totals.get(key, 0) + entry.amount
    return totals


def _month_result(key: Tuple[int, int], amount: float) -> Dict[str, Any]:
    year, month = key
    return {"month": MONTH_NAMES[month - 1], "year": year, "total": amount}


@register("getHighestSpendingMonth", YearParams)
def highest_spending_month(ctx, params: YearParams) -> Dict[str, Any]:
    totals = _monthly_totals(ctx, params.year)
    if not totals:
        return {"message": "No spending data found"}
    key = max(totals, key=totals.get)
    return _month_result(key, totals[key])


@register("getLowestSpendingMonth", YearParams)
def lowest_spending_month(ctx, params: YearParams) -> Dict[str, Any]:
    totals = _monthly_totals(ctx, params.year)
    if not totals:
        return {"message": "No spending data found"}
    key = min(totals, key=totals.get)
    return _month_result(key, totals[key])


@register("getSpendingTrends", TrendParams)
def spending_trends(ctx, params: TrendParams) -> List[Dict[str, Any]]:
    """One bucket per window, newest first."""
    entries = ctx.store.get_entries_by_type(params.type.value)
    trends = []
    for window in trailing_windows(params.period, ctx.today, params.limit):
        bucket = [e for e in entries if window.contains(e.date)]
        trends.append({
            "period": window.label,
            "amount": total(bucket),
            "entryCount": len(bucket),
            "startDate": window.start.isoformat(),
            "endDate": window.last_day.isoformat(),
        })
    return trends


# ============================================================================
# TOP CATEGORIES & RANKINGS
# ============================================================================

@register("getTopCategories", TopCategoriesParams)
def top_categories(ctx, params: TopCategoriesParams) -> List[Dict[str, Any]]:
    entries = in_range(ctx.store.get_entries_by_type(params.type.value), params.start_date, params.end_date)
    ranked = sorted(category_totals(entries).items(), key=lambda item: item[1], reverse=True)
    return [{"category": name, "amount": amount} for name, amount in ranked[:params.top_n]]


@register("getCategoryWithMaxSpending", DateRangeParams)
def category_with_max_spending(ctx, params: DateRangeParams) -> Dict[str, Any]:
    totals = category_totals(_expenses(ctx, params))
    if not totals:
        return {"message": "No expense data found"}
    name = max(totals, key=totals.get)
    return {"category": name, "amount": totals[name]}


@register("getCategoryWithMinSpending", DateRangeParams)
def category_with_min_spending(ctx, params: DateRangeParams) -> Dict[str, Any]:
    totals = category_totals(_expenses(ctx, params))
    if not totals:
        return {"message": "No expense data found"}
    name = min(totals, key=totals.get)
    return {"category": name, "amount": totals[name]}


@register("getCategoryPercentageDistribution", TypedDateRangeParams)
def category_percentage_distribution(ctx, params: TypedDateRangeParams) -> List[Dict[str, Any]]:
    entries = in_range(ctx.store.get_entries_by_type(params.type.value), params.start_date, params.end_date)
    totals = category_totals(entries)
    grand_total = sum(totals.values())
    rows = [
        {
            "category": name,
            "amount": amount,
            "percentage": 0 if grand_total == 0 else amount / grand_total * 100,
        }
        for name, amount in totals.items()
    ]
    return sorted(rows, key=lambda row: row["amount"], reverse=True)
