"""Budget reads: progress against the current period window.

Every row carries two labels. ``status`` is the function-specific compliance
wording the assistant answers with; ``progressLabel`` is the tracker's own
progress-bar convention (safe / warning / over budget for expenses, behind
target / progressing / on track for savings and investments).
"""
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from finassist.budgets.period import current_period
from finassist.budgets.progress import (
    BudgetProgress,
    calculate_progress,
    compliance_status,
    progress_label,
)
from finassist.data.schemas import Budget, same_category
from finassist.dispatch.params import (
    AlignmentParams,
    BudgetFilterParams,
    CompareActualVsBudgetParams,
    TopBudgetParams,
    TypedBudgetFilterParams,
)
from finassist.dispatch.registry import register


# ============================================================================
# HELPERS
# ============================================================================

def _filter(budgets: List[Budget], category: Optional[str]) -> List[Budget]:
    if not category:
        return budgets
    return [b for b in budgets if same_category(b.category, category)]


def _by_type(ctx, budget_type: str, category: Optional[str] = None) -> List[Budget]:
    return _filter(ctx.store.get_budgets_by_type(budget_type), category)


def _progress(ctx, budget: Budget, anchor: Optional[date] = None) -> BudgetProgress:
    window = current_period(budget.period, anchor) if anchor else None
    return calculate_progress(budget, ctx.store.get_entries(), today=ctx.today, window=window)


def _row(budget: Budget, progress: BudgetProgress, **extra: Any) -> Dict[str, Any]:
    row = {
        "category": budget.category,
        "period": budget.period.value,
        "budgetAmount": budget.amount,
        "spent": progress.current_spending,
        "remaining": progress.remaining,
        "progressPercentage": progress.progress,
    }
    row.update(extra)
    row["progressLabel"] = progress_label(budget.type.value, progress.usage)
    return row


# ============================================================================
# TOTALS & COMPARISONS
# ============================================================================

@register("getTotalBudget", BudgetFilterParams)
def total_budget(ctx, params: BudgetFilterParams) -> float:
    budgets = ctx.store.get_budgets()
    if params.type is not None:
        budgets = [b for b in budgets if b.type.value == params.type.value]
    return sum(b.amount for b in _filter(budgets, params.category))


@register("compareActualVsBudget", CompareActualVsBudgetParams)
def compare_actual_vs_budget(ctx, params: CompareActualVsBudgetParams) -> Dict[str, Any]:
    """
    Budgeted vs actual for the budget's period window.

    ``month``/``year`` pick the anchor date (the first of that month, with
    the missing part taken from today); the window is still the budget's own
    period around that anchor, so a quarterly budget asked about "May"
    reports April-June.
    """
    budgets = _by_type(ctx, params.type.value, params.category)
    if not budgets:
        target = f'category "{params.category}"' if params.category else params.type.value
        return {"message": f"No budgets found for {target}", "budgets": []}

    anchor = None
    if params.month is not None or params.year is not None:
        anchor = date(params.year or ctx.today.year, params.month or ctx.today.month, 1)

    rows = []
    for budget in budgets:
        progress = _progress(ctx, budget, anchor)
        rows.append({
            "category": budget.category,
            "period": budget.period.value,
            "periodStart": progress.window.start.isoformat(),
            "periodEnd": progress.window.last_day.isoformat(),
            "budgeted": budget.amount,
            "actual": progress.current_spending,
            "remaining": progress.remaining,
            "difference": progress.current_spending - budget.amount,
            "complianceStatus": compliance_status(progress.usage, on_track="within budget"),
            "percentage": progress.progress,
            "progressLabel": progress_label(budget.type.value, progress.usage),
        })

    if len(rows) == 1:
        return rows[0]

    if params.category:
        message = f'Multiple budgets found for "{params.category}" with different periods. Showing all:'
    else:
        message = f"Multiple {params.type.value} budgets found. Showing all:"
    return {"message": message, "budgets": rows}


@register("getBudgetCompliance", TypedBudgetFilterParams)
def budget_compliance(ctx, params: TypedBudgetFilterParams) -> List[Dict[str, Any]]:
    rows = []
    for budget in _by_type(ctx, params.type.value, params.category):
        progress = _progress(ctx, budget)
        rows.append({
            "category": budget.category,
            "budgetAmount": budget.amount,
            "spent": progress.current_spending,
            "status": "over budget" if progress.usage > 100 else "under budget",
            "percentage": progress.progress,
            "progressLabel": progress_label(budget.type.value, progress.usage),
        })
    return rows


@register("getBudgetUsagePercentage", TypedBudgetFilterParams)
def budget_usage_percentage(ctx, params: TypedBudgetFilterParams) -> float:
    budgets = _by_type(ctx, params.type.value, params.category)
    if not budgets:
        return 0
    budgeted = sum(b.amount for b in budgets)
    spent = sum(_progress(ctx, b).current_spending for b in budgets)
    return 0 if budgeted == 0 else spent / budgeted * 100


# ============================================================================
# RANKINGS
# ============================================================================

@register("getTopOverBudgetCategories", TopBudgetParams)
def top_over_budget_categories(ctx, params: TopBudgetParams) -> List[Dict[str, Any]]:
    rows = []
    for budget in _by_type(ctx, params.type.value):
        progress = _progress(ctx, budget)
        over = progress.current_spending - budget.amount
        if over > 0:
            rows.append({
                "category": budget.category,
                "budgetAmount": budget.amount,
                "spent": progress.current_spending,
                "overAmount": over,
                "percentage": progress.progress,
            })
    rows.sort(key=lambda row: row["overAmount"], reverse=True)
    return rows[:params.top_n]


@register("getTopUnderBudgetCategories", TopBudgetParams)
def top_under_budget_categories(ctx, params: TopBudgetParams) -> List[Dict[str, Any]]:
    rows = []
    for budget in _by_type(ctx, params.type.value):
        progress = _progress(ctx, budget)
        left = budget.amount - progress.current_spending
        if left > 0:
            rows.append({
                "category": budget.category,
                "budgetAmount": budget.amount,
                "spent": progress.current_spending,
                "remaining": left,
                "percentage": progress.progress,
            })
    rows.sort(key=lambda row: row["remaining"], reverse=True)
    return rows[:params.top_n]


# ============================================================================
# LISTINGS & STATUS
# ============================================================================

@register("getAllBudgets", BudgetFilterParams)
def all_budgets(ctx, params: BudgetFilterParams) -> List[Dict[str, Any]]:
    budgets = ctx.store.get_budgets()
    if params.type is not None:
        budgets = [b for b in budgets if b.type.value == params.type.value]

    rows = []
    for budget in _filter(budgets, params.category):
        progress = _progress(ctx, budget)
        rows.append({
            "id": budget.id,
            "type": budget.type.value,
            "category": budget.category,
            "amount": budget.amount,
            "period": budget.period.value,
            "spent": progress.current_spending,
            "remaining": progress.remaining,
            "progressPercentage": progress.progress,
            "status": compliance_status(progress.usage),
            "progressLabel": progress_label(budget.type.value, progress.usage),
        })
    return rows


@register("getBudgetRemaining", TypedBudgetFilterParams)
def budget_remaining(ctx, params: TypedBudgetFilterParams) -> Any:
    budgets = _by_type(ctx, params.type.value, params.category)
    if not budgets:
        target = f'category "{params.category}"' if params.category else "this type"
        return {"message": f"No budgets found for {target}"}

    rows = []
    for budget in budgets:
        progress = _progress(ctx, budget)
        status = "over budget" if progress.usage > 100 else "within budget"
        rows.append(_row(budget, progress, status=status))
    return rows


@register("getBudgetStatus", TypedBudgetFilterParams)
def budget_status(ctx, params: TypedBudgetFilterParams) -> List[Dict[str, Any]]:
    rows = []
    for budget in _by_type(ctx, params.type.value, params.category):
        progress = _progress(ctx, budget)
        rows.append(_row(
            budget,
            progress,
            status=compliance_status(progress.usage),
            daysRemaining=progress.window.days_remaining(ctx.today),
        ))
    return rows


@register("getBudgetAlignmentSummary", AlignmentParams)
def budget_alignment_summary(ctx, params: AlignmentParams) -> Dict[str, Any]:
    """Overall compliance plus every budget at or above 80% usage."""
    budgets = ctx.store.get_budgets()
    if params.type is not None:
        budgets = [b for b in budgets if b.type.value == params.type.value]

    if not budgets:
        return {"totalBudgets": 0, "message": "No budgets found"}

    total_budgeted = 0.0
    total_spent = 0.0
    critical: List[Tuple[float, Dict[str, Any]]] = []
    breakdown: Dict[str, List[Dict[str, Any]]] = {}

    for budget in budgets:
        progress = _progress(ctx, budget)
        total_budgeted += budget.amount
        total_spent += progress.current_spending

        info = _row(budget, progress, status=compliance_status(progress.usage))
        if progress.usage >= 80:
            critical.append((progress.usage, info))
        breakdown.setdefault(budget.category, []).append(info)

    overall = 0 if total_budgeted == 0 else total_spent / total_budgeted * 100
    critical.sort(key=lambda pair: pair[0], reverse=True)

    return {
        "totalBudgets": len(budgets),
        "totalBudgeted": total_budgeted,
        "totalSpent": total_spent,
        "totalRemaining": total_budgeted - total_spent,
        "overallProgressPercentage": overall,
        "overallCompliance": compliance_status(overall, on_track="within budget"),
        "criticalBudgetsCount": len(critical),
        "criticalBudgets": [info for _, info in critical],
        "budgetBreakdown": breakdown,
    }
