"""Tests for the dispatch engine itself."""
import pytest

from finassist.assistant import catalog
from finassist.dispatch.registry import REGISTRY, register
from finassist.dispatch.params import NoParams
from finassist.errors import UnknownFunctionError


class TestRegistry:
    """Registry and catalog stay in lockstep."""

    def test_every_catalog_function_has_a_handler(self):
        assert set(REGISTRY) == set(catalog.function_names())

    def test_duplicate_registration_rejected(self):
        with pytest.raises(RuntimeError, match="registered twice"):
            register("getTotalSpending", NoParams)(lambda ctx, params: 0)


class TestExecute:
    """Result envelope and failure handling."""

    @pytest.mark.asyncio
    async def test_success_envelope(self, engine):
        result = await engine.execute("getTotalIncome", {})

        wire = result.to_wire()
        assert wire["success"] is True
        assert wire["data"] == 10000
        assert wire["error"] is None
        assert wire["functionName"] == "getTotalIncome"
        assert wire["executionTimeMs"] >= 0

    @pytest.mark.asyncio
    async def test_missing_arguments_default_to_empty(self, engine):
        result = await engine.execute("getTotalSpending")
        assert result.data == 1480

    @pytest.mark.asyncio
    async def test_unknown_function_raises(self, engine):
        with pytest.raises(UnknownFunctionError) as exc_info:
            await engine.execute("transferFunds", {})

        assert exc_info.value.function_name == "transferFunds"

    @pytest.mark.asyncio
    async def test_validation_failures_are_joined(self, engine):
        result = await engine.execute("comparePeriods", {"type": "expense", "period1Start": "2024/07/01"})

        assert not result.success
        assert result.data is None
        assert "Parameter 'period1Start' must be in YYYY-MM-DD format" in result.error
        assert "Required parameter 'period2End' is missing" in result.error
        assert result.error.count("; ") == 3

    @pytest.mark.asyncio
    async def test_unknown_parameter(self, engine):
        result = await engine.execute("getNetBalance", {"account": "checking"})

        assert not result.success
        assert result.error == "Unknown parameter 'account' for function 'getNetBalance'"

    @pytest.mark.asyncio
    async def test_float_counts_accepted(self, engine):
        result = await engine.execute("getTopCategories", {"type": "expense", "topN": 2.0})

        assert result.success
        assert len(result.data) == 2
