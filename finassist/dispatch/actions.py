"""Mutating actions: addEntry, setBudget, addCategory.

Entries and budgets may only reference categories that already exist for
their type; an unknown category is refused before the store is touched.
Store failures surface as StoreError after the store has rolled back.
"""
from typing import Any, Dict

from finassist.data.schemas import Budget, Entry, same_category
from finassist.dispatch.params import AddCategoryParams, AddEntryParams, SetBudgetParams
from finassist.dispatch.registry import register
from finassist.errors import ActionRejectedError


def format_amount(amount: float) -> str:
    """500.0 -> '500', 12.5 -> '12.5'."""
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


def require_category(ctx, entry_type: str, category: str) -> None:
    """Raise ActionRejectedError unless ``category`` exists for ``entry_type``."""
    existing = ctx.store.get_categories().get(entry_type, [])
    if any(same_category(name, category) for name in existing):
        return
    raise ActionRejectedError(
        f'The category "{category}" does not exist for {entry_type}. '
        f"Please add the category first using the addCategory function, "
        f"or choose from existing categories: {', '.join(existing)}."
    )


@register("addEntry", AddEntryParams)
async def add_entry(ctx, params: AddEntryParams) -> Dict[str, Any]:
    entry_type = params.type.value
    require_category(ctx, entry_type, params.category)

    saved = await ctx.store.add_entry(Entry(
        type=params.type,
        category=params.category,
        amount=params.amount,
        date=params.date,
        note=params.note or "",
    ))

    return {
        "message": (
            f"Successfully added {entry_type} entry of {format_amount(saved.amount)} "
            f"for {saved.category} on {saved.date.isoformat()}"
        ),
        "entry": saved.model_dump(mode="json"),
    }


@register("setBudget", SetBudgetParams)
async def set_budget(ctx, params: SetBudgetParams) -> Dict[str, Any]:
    budget_type = params.type.value
    require_category(ctx, budget_type, params.category)

    saved = await ctx.store.add_budget(Budget(
        type=params.type,
        category=params.category,
        amount=params.amount,
        period=params.period,
    ))

    return {
        "message": (
            f"Successfully set {saved.period.value} budget of {format_amount(saved.amount)} "
            f"for {saved.category} ({budget_type})"
        ),
        "budget": saved.model_dump(mode="json"),
    }


@register("addCategory", AddCategoryParams)
async def add_category(ctx, params: AddCategoryParams) -> Dict[str, Any]:
    entry_type = params.type.value
    name = params.category_name.strip()
    if not name:
        raise ActionRejectedError("Category name cannot be empty")

    category = {"type": entry_type, "name": name}
    existing = ctx.store.get_categories().get(entry_type, [])
    if any(same_category(current, name) for current in existing):
        return {
            "message": f'Category "{name}" already exists for {entry_type}',
            "category": category,
        }

    await ctx.store.add_category(entry_type, name)
    return {
        "message": f'Successfully added category "{name}" to {entry_type}',
        "category": category,
    }
