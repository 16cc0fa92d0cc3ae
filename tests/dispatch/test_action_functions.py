"""Tests for the mutating actions and utility lookups."""
from datetime import date

import pytest

from finassist.data.store import LocalStore
from finassist.dispatch import DispatchEngine

TODAY = date(2024, 8, 15)


class FailingBackend:
    """Backend that refuses every write."""

    async def create_entry(self, entry):
        raise ConnectionError("tracker API unavailable")

    async def create_budget(self, budget):
        raise ConnectionError("tracker API unavailable")

    async def create_category(self, entry_type, name):
        raise ConnectionError("")


class TestAddEntry:
    """addEntry."""

    @pytest.mark.asyncio
    async def test_adds_entry(self, engine, store):
        result = await engine.execute("addEntry", {
            "type": "expense",
            "category": "groceries",
            "amount": 42.5,
            "date": "2024-08-14",
            "note": "farmers market",
        })

        assert result.success
        assert result.data["message"] == "Successfully added expense entry of 42.5 for groceries on 2024-08-14"
        assert result.data["entry"]["note"] == "farmers market"
        assert result.data["entry"]["id"].startswith("ent_")
        assert store.get_entries()[-1].amount == 42.5

        total = await engine.execute("getTotalSpending", {"startDate": "2024-08-14"})
        assert total.data == 42.5

    @pytest.mark.asyncio
    async def test_unknown_category_rejected(self, engine, store):
        before = store.get_entries()

        result = await engine.execute("addEntry", {
            "type": "income", "category": "lottery", "amount": 100, "date": "2024-08-14",
        })

        assert not result.success
        assert result.error.startswith('The category "lottery" does not exist for income.')
        assert "salary, freelance" in result.error
        assert store.get_entries() == before

    @pytest.mark.asyncio
    async def test_amount_must_be_positive(self, engine):
        result = await engine.execute("addEntry", {
            "type": "expense", "category": "rent", "amount": 0, "date": "2024-08-14",
        })

        assert not result.success
        assert result.error == "Parameter 'amount' must be at least 0.01"

    @pytest.mark.asyncio
    async def test_impossible_date(self, engine):
        result = await engine.execute("addEntry", {
            "type": "expense", "category": "rent", "amount": 10, "date": "2024-13-40",
        })

        assert not result.success
        assert result.error.startswith("Invalid parameters: date:")

    @pytest.mark.asyncio
    async def test_backend_failure_rolls_back(self):
        store = LocalStore(backend=FailingBackend())
        engine = DispatchEngine(store, clock=lambda: TODAY)

        result = await engine.execute("addEntry", {
            "type": "expense", "category": "rent", "amount": 10, "date": "2024-08-14",
        })

        assert not result.success
        assert result.error == "tracker API unavailable"
        assert store.get_entries() == []


class TestSetBudget:
    """setBudget."""

    @pytest.mark.asyncio
    async def test_sets_budget(self, engine, store):
        result = await engine.execute("setBudget", {
            "type": "expense", "category": "travel", "amount": 150, "period": "half-yearly",
        })

        assert result.success
        assert result.data["message"] == "Successfully set half-yearly budget of 150 for travel (expense)"
        assert result.data["budget"]["period"] == "half-yearly"
        assert len(store.get_budgets()) == 5

    @pytest.mark.asyncio
    async def test_duplicate_budgets_allowed(self, engine, store):
        result = await engine.execute("setBudget", {
            "type": "expense", "category": "groceries", "amount": 900, "period": "quarterly",
        })

        assert result.success
        assert len([b for b in store.get_budgets() if b.category == "groceries"]) == 2

    @pytest.mark.asyncio
    async def test_income_budget_rejected(self, engine):
        result = await engine.execute("setBudget", {
            "type": "income", "category": "salary", "amount": 100, "period": "monthly",
        })

        assert not result.success
        assert "must be one of: expense, investment, savings" in result.error

    @pytest.mark.asyncio
    async def test_unknown_category_rejected(self, engine, store):
        result = await engine.execute("setBudget", {
            "type": "savings", "category": "boat", "amount": 100, "period": "yearly",
        })

        assert not result.success
        assert "addCategory" in result.error
        assert len(store.get_budgets()) == 4


class TestAddCategory:
    """addCategory."""

    @pytest.mark.asyncio
    async def test_adds_category_then_entry(self, engine, store):
        result = await engine.execute("addCategory", {"type": "expense", "categoryName": "  pets "})

        assert result.success
        assert result.data == {
            "message": 'Successfully added category "pets" to expense',
            "category": {"type": "expense", "name": "pets"},
        }
        assert "pets" in store.get_categories()["expense"]

        entry = await engine.execute("addEntry", {
            "type": "expense", "category": "Pets", "amount": 30, "date": "2024-08-15",
        })
        assert entry.success

    @pytest.mark.asyncio
    async def test_existing_category_is_not_duplicated(self, engine, store):
        result = await engine.execute("addCategory", {"type": "expense", "categoryName": "Groceries"})

        assert result.success
        assert result.data["message"] == 'Category "Groceries" already exists for expense'
        assert store.get_categories()["expense"].count("groceries") == 1

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, engine):
        result = await engine.execute("addCategory", {"type": "expense", "categoryName": "   "})

        assert not result.success
        assert result.error == "Category name cannot be empty"

    @pytest.mark.asyncio
    async def test_backend_failure_uses_default_message(self):
        store = LocalStore(backend=FailingBackend())
        engine = DispatchEngine(store, clock=lambda: TODAY)

        result = await engine.execute("addCategory", {"type": "savings", "categoryName": "boat"})

        assert not result.success
        assert result.error == "Failed to create category"
        assert "boat" not in store.get_categories()["savings"]


class TestUtility:
    """User and category lookups."""

    @pytest.mark.asyncio
    async def test_user_info(self, engine):
        result = await engine.execute("getUserInfo", {})
        assert result.data == {"id": "user_test123", "name": "Test User", "email": "test@example.com"}

    @pytest.mark.asyncio
    async def test_user_info_without_user(self):
        result = await DispatchEngine(LocalStore(), clock=lambda: TODAY).execute("getUserInfo")
        assert result.success
        assert result.data is None

    @pytest.mark.asyncio
    async def test_all_categories(self, engine):
        result = await engine.execute("getAllCategories", {})
        assert set(result.data) == {"income", "expense", "investment", "savings"}
        assert "emergency fund" in result.data["savings"]

    @pytest.mark.asyncio
    async def test_categories_by_type(self, engine):
        result = await engine.execute("getCategoriesByType", {"type": "investment"})
        assert "stocks" in result.data
        assert "rent" not in result.data
