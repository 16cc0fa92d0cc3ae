"""Typed parameter models, one per catalog function shape.

The generic validator has already checked shape against the catalog; these
models turn the loose argument dict into concrete fields (dates parsed,
enums resolved, defaults applied) before a handler sees it.
"""
from datetime import date as date_type
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from finassist.data.schemas import BudgetPeriod, BudgetType, EntryType, TrendUnit


class FunctionParams(BaseModel):
    """Base: camelCase wire names, unknown keys rejected."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class NoParams(FunctionParams):
    pass


class DateRangeParams(FunctionParams):
    start_date: Optional[date_type] = Field(None, alias="startDate")
    end_date: Optional[date_type] = Field(None, alias="endDate")


class TypedDateRangeParams(DateRangeParams):
    type: EntryType


class TopCategoriesParams(TypedDateRangeParams):
    top_n: int = Field(3, alias="topN", ge=1)


class ComparePeriodsParams(FunctionParams):
    type: EntryType
    period1_start: date_type = Field(..., alias="period1Start")
    period1_end: date_type = Field(..., alias="period1End")
    period2_start: date_type = Field(..., alias="period2Start")
    period2_end: date_type = Field(..., alias="period2End")


class YearParams(FunctionParams):
    year: Optional[int] = None


class TrendParams(FunctionParams):
    type: EntryType
    period: TrendUnit
    limit: int = Field(6, ge=1)


class BudgetFilterParams(FunctionParams):
    type: Optional[EntryType] = None
    category: Optional[str] = None


class TypedBudgetFilterParams(FunctionParams):
    type: EntryType
    category: Optional[str] = None


class CompareActualVsBudgetParams(TypedBudgetFilterParams):
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = None


class TopBudgetParams(FunctionParams):
    type: EntryType
    top_n: int = Field(3, alias="topN", ge=1)


class AlignmentParams(FunctionParams):
    type: Optional[EntryType] = None


class AddEntryParams(FunctionParams):
    type: EntryType
    category: str
    amount: float = Field(..., gt=0)
    date: date_type
    note: Optional[str] = None


class SetBudgetParams(FunctionParams):
    type: BudgetType
    category: str
    amount: float = Field(..., gt=0)
    period: BudgetPeriod


class AddCategoryParams(FunctionParams):
    type: EntryType
    category_name: str = Field(..., alias="categoryName")


class CategoryTypeParams(FunctionParams):
    type: EntryType
