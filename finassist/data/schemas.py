"""Pydantic models for the tracker's financial records."""
from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
from datetime import date as date_type
from enum import Enum
import uuid


class EntryType(str, Enum):
    """Kind of money movement an entry records."""
    INCOME = "income"
    EXPENSE = "expense"
    INVESTMENT = "investment"
    SAVINGS = "savings"


class BudgetType(str, Enum):
    """Entry types a budget can track."""
    EXPENSE = "expense"
    INVESTMENT = "investment"
    SAVINGS = "savings"


class BudgetPeriod(str, Enum):
    """Calendar-anchored recurrence of a budget."""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    HALF_YEARLY = "half-yearly"
    YEARLY = "yearly"


class TrendUnit(str, Enum):
    """Bucket size for rolling trend windows."""
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


ENTRY_TYPES: List[str] = [t.value for t in EntryType]
BUDGET_TYPES: List[str] = [t.value for t in BudgetType]
BUDGET_PERIODS: List[str] = [p.value for p in BudgetPeriod]
TREND_UNITS: List[str] = [u.value for u in TrendUnit]


# Stock categories a new user starts with
DEFAULT_CATEGORIES: Dict[str, List[str]] = {
    "income": [
        "salary", "freelance", "business revenue", "interest earned",
        "dividends", "other", "bonus", "commission",
    ],
    "expense": [
        "rent", "groceries", "dining out", "transportation", "entertainment",
        "healthcare", "utilities", "subscriptions", "miscellaneous",
        "insurance", "travel",
    ],
    "investment": [
        "stocks", "mutual funds", "real estate", "cryptocurrency", "gold",
        "commodities", "other investments", "bonds", "ETFs",
    ],
    "savings": [
        "emergency fund", "retirement fund", "fixed deposits",
        "high-interest savings", "travel savings", "college fund",
        "vacation fund",
    ],
}


def generate_id(prefix: str) -> str:
    """Generate a short prefixed identifier."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def same_category(a: str, b: str) -> bool:
    """Category names compare case-insensitively."""
    return a.strip().lower() == b.strip().lower()


class Entry(BaseModel):
    """A single recorded transaction."""
    id: str = Field(default_factory=lambda: generate_id("ent"))
    type: EntryType
    category: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    date: date_type
    note: str = ""


class Budget(BaseModel):
    """A spending or saving target for one category over a recurring period."""
    id: str = Field(default_factory=lambda: generate_id("bud"))
    type: BudgetType
    category: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    period: BudgetPeriod


class UserInfo(BaseModel):
    """The signed-in user, as far as the assistant needs to know."""
    id: str
    name: str
    email: str


class Snapshot(BaseModel):
    """Serializable dump of one user's local financial state."""
    user: Optional[UserInfo] = None
    entries: List[Entry] = Field(default_factory=list)
    budgets: List[Budget] = Field(default_factory=list)
    categories: Dict[str, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_CATEGORIES.items()}
    )

    @field_validator("categories")
    @classmethod
    def fill_missing_types(cls, value: Dict[str, List[str]]) -> Dict[str, List[str]]:
        for entry_type in ENTRY_TYPES:
            value.setdefault(entry_type, [])
        return value
