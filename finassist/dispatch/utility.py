"""User and category lookups."""
from typing import Any, Dict, List, Optional

from finassist.dispatch.params import CategoryTypeParams, NoParams
from finassist.dispatch.registry import register


@register("getUserInfo", NoParams)
def user_info(ctx, params: NoParams) -> Optional[Dict[str, Any]]:
    user = ctx.store.current_user()
    return user.model_dump() if user else None


@register("getAllCategories", NoParams)
def all_categories(ctx, params: NoParams) -> Dict[str, List[str]]:
    return ctx.store.get_categories()


@register("getCategoriesByType", CategoryTypeParams)
def categories_by_type(ctx, params: CategoryTypeParams) -> List[str]:
    return ctx.store.get_categories().get(params.type.value, [])
