"""Function Catalog - the closed set of functions the model may call.

Each descriptor is both the text the model sees (name, description, JSON
schema of parameters) and the schema the validator checks proposed calls
against. The catalog is built once at import and never mutated.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from finassist.data.schemas import BUDGET_PERIODS, BUDGET_TYPES, ENTRY_TYPES, TREND_UNITS


Domain = Literal["entries", "budget", "categories", "actions", "utility"]

DOMAINS: List[str] = ["entries", "budget", "categories", "actions", "utility"]


class FunctionDescriptor(BaseModel):
    """Immutable catalog entry."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    domain: Domain
    parameters: Dict[str, Any]
    returns: str = ""

    @property
    def properties(self) -> Dict[str, Dict[str, Any]]:
        return self.parameters.get("properties", {})

    @property
    def required(self) -> List[str]:
        return self.parameters.get("required", [])

    def public(self) -> Dict[str, Any]:
        """The fields sent upstream; domain and returns stay internal."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


# ============================================================================
# SCHEMA FRAGMENTS
# ============================================================================

def _schema(properties: Optional[Dict[str, Any]] = None, required: Optional[List[str]] = None) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties or {},
        "required": required or [],
    }


def _date(description: str) -> Dict[str, Any]:
    return {"type": "string", "format": "date", "description": description}


DATE_RANGE = {
    "startDate": _date("Start date (YYYY-MM-DD)"),
    "endDate": _date("End date (YYYY-MM-DD)"),
}

ENTRY_TYPE = {"type": "string", "enum": ENTRY_TYPES}
CATEGORY = {"type": "string"}
TOP_N = {
    "type": "number",
    "minimum": 1,
    "maximum": 50,
    "description": "Number of categories to return (default: 3)",
}
YEAR = {"type": "number", "minimum": 1900, "maximum": 2100}
MONTH = {"type": "number", "minimum": 1, "maximum": 12}
AMOUNT = {"type": "number", "minimum": 0.01}


def _entries(name: str, description: str, returns: str, properties=None, required=None) -> FunctionDescriptor:
    return FunctionDescriptor(
        name=name,
        description=description,
        domain="entries",
        parameters=_schema(properties if properties is not None else DATE_RANGE, required),
        returns=returns,
    )


def _budget(name: str, description: str, returns: str, properties, required=None) -> FunctionDescriptor:
    return FunctionDescriptor(
        name=name,
        description=description,
        domain="budget",
        parameters=_schema(properties, required),
        returns=returns,
    )


# ============================================================================
# CATALOG
# ============================================================================

FUNCTION_CATALOG: List[FunctionDescriptor] = [
    # Totals & summaries
    _entries(
        "getTotalSpending",
        "Get total expenses. Optional date range.",
        "Total spending amount (number)",
    ),
    _entries(
        "getTotalIncome",
        "Get total income. Optional date range.",
        "Total income amount (number)",
    ),
    _entries(
        "getTotalSavings",
        "Get total savings. Optional date range.",
        "Total savings amount (number)",
    ),
    _entries(
        "getTotalInvestments",
        "Get total investments. Optional date range.",
        "Total investment amount (number)",
    ),
    _entries(
        "getNetBalance",
        "Get net balance (income - expenses - savings - investments). Optional date range.",
        "Net balance (number)",
    ),
    _entries(
        "getAverageSpending",
        "Get average spending per transaction. Optional date range.",
        "Average spending amount (number)",
    ),
    _entries(
        "getMaxSpending",
        "Find highest spending transaction. Returns amount, category, date. Optional date range.",
        "Maximum spending transaction details (amount, category, date)",
    ),
    _entries(
        "getMinSpending",
        "Find lowest spending transaction. Returns amount, category, date. Optional date range.",
        "Minimum spending transaction details (amount, category, date)",
    ),

    # Comparisons & trends
    _entries(
        "comparePeriods",
        "Compare totals between two time periods. Requires type, period1Start, period1End, period2Start, period2End.",
        "Comparison results with totals for both periods, difference, and percentage change",
        properties={
            "type": ENTRY_TYPE,
            "period1Start": _date("First period start (YYYY-MM-DD)"),
            "period1End": _date("First period end (YYYY-MM-DD)"),
            "period2Start": _date("Second period start (YYYY-MM-DD)"),
            "period2End": _date("Second period end (YYYY-MM-DD)"),
        },
        required=["type", "period1Start", "period1End", "period2Start", "period2End"],
    ),
    _entries(
        "getHighestSpendingMonth",
        "Find month with highest spending. Optional year.",
        "Month with highest spending (month name, year, and total amount)",
        properties={"year": YEAR},
    ),
    _entries(
        "getLowestSpendingMonth",
        "Find month with lowest spending. Optional year.",
        "Month with lowest spending (month name, year, and total amount)",
        properties={"year": YEAR},
    ),
    _entries(
        "getSpendingTrends",
        "Get trends over time. Requires type and period (week/month/quarter/year). Optional limit (default: 6).",
        "Array of trend data with amounts and dates for each period",
        properties={
            "type": ENTRY_TYPE,
            "period": {"type": "string", "enum": TREND_UNITS},
            "limit": {"type": "number", "minimum": 1, "maximum": 24},
        },
        required=["type", "period"],
    ),

    # Top categories & rankings
    _entries(
        "getTopCategories",
        "Get top N categories by amount. Requires type. Optional topN (default: 3), date range.",
        "Array of top categories with names and total amounts",
        properties={"type": ENTRY_TYPE, "topN": TOP_N, **DATE_RANGE},
        required=["type"],
    ),
    _entries(
        "getCategoryWithMaxSpending",
        "Find expense category with highest total. Returns category name and amount. Optional date range.",
        "Category name and total amount",
    ),
    _entries(
        "getCategoryWithMinSpending",
        "Find expense category with lowest total. Returns category name and amount. Optional date range.",
        "Category name and total amount",
    ),
    _entries(
        "getCategoryPercentageDistribution",
        "Get percentage distribution across categories. Requires type. Optional date range.",
        "Array of categories with amounts and percentage of total",
        properties={"type": ENTRY_TYPE, **DATE_RANGE},
        required=["type"],
    ),

    # Budgets
    _budget(
        "getTotalBudget",
        "Get total budget amount. Optional type and/or category.",
        "Total budget amount (number)",
        {"type": ENTRY_TYPE, "category": CATEGORY},
    ),
    _budget(
        "compareActualVsBudget",
        "Compare actual vs budget. Requires type. Optional category, month, year.",
        "Comparison with budgeted amount, actual amount, difference, and compliance status",
        {"type": ENTRY_TYPE, "category": CATEGORY, "month": MONTH, "year": YEAR},
        ["type"],
    ),
    _budget(
        "getBudgetCompliance",
        "Check over/under budget status. Requires type. Optional category.",
        "Compliance status (over/under budget) with details",
        {"type": ENTRY_TYPE, "category": CATEGORY},
        ["type"],
    ),
    _budget(
        "getBudgetUsagePercentage",
        "Get percentage of budget used. Requires type. Optional category.",
        "Percentage of budget used (number)",
        {"type": ENTRY_TYPE, "category": CATEGORY},
        ["type"],
    ),
    _budget(
        "getTopOverBudgetCategories",
        "Get top N over-budget categories. Requires type. Optional topN (default: 3).",
        "Array of over-budget categories with amounts and percentages",
        {"type": {**ENTRY_TYPE, "description": "The type to check"}, "topN": TOP_N},
        ["type"],
    ),
    _budget(
        "getTopUnderBudgetCategories",
        "Get top N under-budget categories. Requires type. Optional topN (default: 3).",
        "Array of under-budget categories with amounts and percentages",
        {"type": {**ENTRY_TYPE, "description": "The type to check"}, "topN": TOP_N},
        ["type"],
    ),
    _budget(
        "getAllBudgets",
        'Get all budgets with period, amount, spent, remaining. Use for "list budgets" or when multiple budgets exist. Optional type, category.',
        "Array of all budgets with id, type, category, amount, period, spent, remaining, and progress percentage",
        {"type": ENTRY_TYPE, "category": CATEGORY},
    ),
    _budget(
        "getBudgetRemaining",
        'Get remaining budget (spent, remaining, details). Use for "budget left" questions. Requires type. Optional category. Returns all periods if multiple exist.',
        "Array of budget objects with category, period, budgetAmount, spent, remaining, progress percentage, and status",
        {"type": ENTRY_TYPE, "category": CATEGORY},
        ["type"],
    ),
    _budget(
        "getBudgetStatus",
        "Get detailed budget status (spent, remaining, compliance, days remaining). Requires type. Optional category.",
        "Array of budget status objects with category, period, budgetAmount, spent, remaining, progress percentage, status, and days remaining",
        {"type": ENTRY_TYPE, "category": CATEGORY},
        ["type"],
    ),
    _budget(
        "getBudgetAlignmentSummary",
        'Get overall budget alignment summary. Identifies critical budgets (>80% used or over). Use for "aligning with budgets" questions. Optional type.',
        "Summary object with totalBudgets, totalSpent, totalBudgeted, overallCompliance, criticalBudgets, and budgetBreakdown by category",
        {"type": ENTRY_TYPE},
    ),

    # Actions
    FunctionDescriptor(
        name="addEntry",
        description=(
            "Add financial transaction. Requires type, category (must exist), amount, "
            "date (YYYY-MM-DD). Optional note. DO NOT ask for start/end dates - only a "
            "single date is needed."
        ),
        domain="actions",
        parameters=_schema(
            {
                "type": ENTRY_TYPE,
                "category": CATEGORY,
                "amount": AMOUNT,
                "date": _date("Transaction date in YYYY-MM-DD format (single date, not a range)"),
                "note": {"type": "string"},
            },
            ["type", "category", "amount", "date"],
        ),
        returns="Success confirmation with entry details",
    ),
    FunctionDescriptor(
        name="setBudget",
        description=(
            "Add or update budget. Requires type, category (must exist), amount, period "
            "(monthly/quarterly/half-yearly/yearly). IMPORTANT: Budgets do NOT use "
            "start/end dates - only period is needed. DO NOT ask for dates."
        ),
        domain="actions",
        parameters=_schema(
            {
                "type": {"type": "string", "enum": BUDGET_TYPES},
                "category": CATEGORY,
                "amount": AMOUNT,
                "period": {
                    "type": "string",
                    "enum": BUDGET_PERIODS,
                    "description": "Budget period - monthly, quarterly, half-yearly, or yearly. NO dates needed.",
                },
            },
            ["type", "category", "amount", "period"],
        ),
        returns="Success confirmation with budget details",
    ),
    FunctionDescriptor(
        name="addCategory",
        description="Add new category. Requires type, categoryName.",
        domain="actions",
        parameters=_schema(
            {"type": ENTRY_TYPE, "categoryName": {"type": "string"}},
            ["type", "categoryName"],
        ),
        returns="Success confirmation with new category name",
    ),

    # Utility
    FunctionDescriptor(
        name="getUserInfo",
        description="Get current user info",
        domain="utility",
        parameters=_schema(),
        returns="Current user information",
    ),
    FunctionDescriptor(
        name="getAllCategories",
        description="Get all categories organized by type",
        domain="categories",
        parameters=_schema(),
        returns="Object containing all categories organized by type",
    ),
    FunctionDescriptor(
        name="getCategoriesByType",
        description="Get categories for specific type. Requires type.",
        domain="categories",
        parameters=_schema({"type": ENTRY_TYPE}, ["type"]),
        returns="Array of categories for the specified type",
    ),
]

_BY_NAME: Dict[str, FunctionDescriptor] = {f.name: f for f in FUNCTION_CATALOG}


# ============================================================================
# LOOKUP
# ============================================================================

def all_functions() -> List[FunctionDescriptor]:
    """Every descriptor, in catalog order."""
    return list(FUNCTION_CATALOG)


def by_domain(domain: str) -> List[FunctionDescriptor]:
    return [f for f in FUNCTION_CATALOG if f.domain == domain]


def find(name: str) -> Optional[FunctionDescriptor]:
    return _BY_NAME.get(name)


def function_names() -> List[str]:
    return [f.name for f in FUNCTION_CATALOG]


def as_tool(function: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap a ``public()`` function dict for the OpenAI tools API."""
    return {"type": "function", "function": function}
