"""Shared test fixtures and configuration for finassist tests."""
import pytest
from datetime import date
from typing import Any, Dict, List, Optional

from finassist.assistant.llm import ModelReply, ProposedCall
from finassist.data.schemas import Budget, Entry, UserInfo
from finassist.data.store import LocalStore
from finassist.dispatch import DispatchEngine
from finassist.middleware import limiter

# Configure pytest-asyncio
pytest_plugins = ('pytest_asyncio',)


# All date-dependent expectations are computed against this day (a Thursday)
TODAY = date(2024, 8, 15)


@pytest.fixture(autouse=True)
def disable_rate_limiting():
    """Keep the per-IP HTTP limiter out of unrelated tests."""
    previous = limiter.enabled
    limiter.enabled = False
    yield
    limiter.enabled = previous


# ============================================================================
# STORE FIXTURES
# ============================================================================

def make_entries() -> List[Entry]:
    return [
        Entry(id="e1", type="expense", category="groceries", amount=200, date=date(2024, 8, 2)),
        Entry(id="e2", type="expense", category="groceries", amount=150, date=date(2024, 8, 10)),
        Entry(id="e3", type="expense", category="rent", amount=1000, date=date(2024, 8, 1)),
        Entry(id="e4", type="expense", category="dining out", amount=80, date=date(2024, 7, 20)),
        Entry(id="e5", type="expense", category="Groceries", amount=50, date=date(2024, 7, 5)),
        Entry(id="e6", type="income", category="salary", amount=5000, date=date(2024, 8, 1)),
        Entry(id="e7", type="income", category="salary", amount=5000, date=date(2024, 7, 1)),
        Entry(id="e8", type="savings", category="emergency fund", amount=300, date=date(2024, 8, 5)),
        Entry(id="e9", type="investment", category="stocks", amount=400, date=date(2024, 6, 15)),
    ]


def make_budgets() -> List[Budget]:
    return [
        Budget(id="b1", type="expense", category="groceries", amount=300, period="monthly"),
        Budget(id="b2", type="expense", category="rent", amount=1200, period="monthly"),
        Budget(id="b3", type="expense", category="dining out", amount=500, period="quarterly"),
        Budget(id="b4", type="savings", category="emergency fund", amount=1000, period="yearly"),
    ]


@pytest.fixture
def user():
    return UserInfo(id="user_test123", name="Test User", email="test@example.com")


@pytest.fixture
def store(user):
    """Store with a realistic July/August 2024 history and default categories."""
    return LocalStore(entries=make_entries(), budgets=make_budgets(), user=user)


@pytest.fixture
def engine(store):
    return DispatchEngine(store, clock=lambda: TODAY)


# ============================================================================
# MODEL FAKES
# ============================================================================

class FakeChatModel:
    """ChatModel stand-in that replays scripted replies or errors."""

    def __init__(self, *replies: Any):
        self.replies = list(replies)
        self.calls: List[Dict[str, Any]] = []

    async def complete(self, messages, functions=None) -> ModelReply:
        self.calls.append({"messages": messages, "functions": functions})
        if not self.replies:
            raise AssertionError("FakeChatModel ran out of scripted replies")
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, BaseException):
            raise reply
        return reply


def text_reply(content: Optional[str]) -> ModelReply:
    return ModelReply(content=content)


def call_reply(name: str, **arguments: Any) -> ModelReply:
    return ModelReply(function_call=ProposedCall(name=name, arguments=arguments))


async def no_sleep(_seconds: float) -> None:
    return None
