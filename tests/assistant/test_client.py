"""Tests for the conversation client that dispatches functions locally."""
import json
from datetime import datetime

import httpx
import pytest
import pytest_asyncio

from conftest import FakeChatModel, call_reply, text_reply
from finassist.assistant.client import AssistantClient, with_date_context
from finassist.assistant.routes import get_chat_model
from finassist.errors import RateLimitError, UpstreamError, ValidationError
from finassist.main import app

NOW = datetime(2024, 8, 15, 9, 30)


@pytest.fixture
def use_model():
    def install(*replies):
        model = FakeChatModel(*replies)
        app.dependency_overrides[get_chat_model] = lambda: model
        return model

    yield install
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def http():
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def assistant(http, engine):
    return AssistantClient(http, engine, clock=lambda: NOW)


def mock_http(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")


def test_date_context_prefix():
    assert with_date_context("hi", NOW) == (
        "Current date and time: Thursday, August 15, 2024 09:30\n\nUser query: hi"
    )


class TestAsk:
    """Full turns against the in-process API."""

    @pytest.mark.asyncio
    async def test_text_turn_updates_history(self, assistant, use_model):
        model = use_model(text_reply("Hello!"))

        answer = await assistant.ask("hi")

        assert answer == "Hello!"
        assert assistant.history == [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "Hello!"},
        ]
        assert model.calls[0]["messages"][-1]["content"] == with_date_context("hi", NOW)

    @pytest.mark.asyncio
    async def test_function_turn_dispatches_locally(self, assistant, use_model):
        model = use_model(
            call_reply("getTotalSpending", startDate="2024-08-01", endDate="2024-08-10"),
            text_reply("You spent 1,350.00."),
        )

        answer = await assistant.ask("How much did I spend in early August?")

        assert answer == "You spent 1,350.00."
        assert len(model.calls) == 2

        second = model.calls[1]
        assert second["functions"] is None
        tool_output = json.loads(second["messages"][-1]["content"])
        assert tool_output["success"] is True
        assert tool_output["data"] == 1350
        assert tool_output["functionName"] == "getTotalSpending"

    @pytest.mark.asyncio
    async def test_history_is_sent_on_next_turn(self, assistant, use_model):
        model = use_model(text_reply("First."))
        await assistant.ask("one")
        model.replies = [text_reply("Second.")]

        await assistant.ask("two")

        roles = [m["role"] for m in model.calls[1]["messages"]]
        assert roles == ["system", "user", "assistant", "user"]
        assert model.calls[1]["messages"][1]["content"] == "one"

    @pytest.mark.asyncio
    async def test_add_entry_turn_mutates_store(self, assistant, use_model, store):
        model = use_model(
            call_reply("addEntry", type="expense", category="Groceries", amount=25, date="2024-08-14"),
            text_reply("Added."),
        )
        before = len(store.get_entries())

        await assistant.ask("add a 25 grocery expense yesterday")

        assert len(store.get_entries()) == before + 1
        tool_output = json.loads(model.calls[1]["messages"][-1]["content"])
        assert tool_output["data"]["message"] == (
            "Successfully added expense entry of 25 for Groceries on 2024-08-14"
        )

    @pytest.mark.asyncio
    async def test_failed_dispatch_is_still_reported(self, assistant, use_model, store):
        model = use_model(
            call_reply("addEntry", type="expense", category="pets", amount=25, date="2024-08-14"),
            text_reply("That category does not exist."),
        )
        before = len(store.get_entries())

        answer = await assistant.ask("add 25 for pets")

        assert answer == "That category does not exist."
        assert len(store.get_entries()) == before
        tool_output = json.loads(model.calls[1]["messages"][-1]["content"])
        assert tool_output["success"] is False
        assert tool_output["error"].startswith('The category "pets" does not exist for expense.')

    @pytest.mark.asyncio
    async def test_rejected_call_leaves_history_untouched(self, assistant, use_model):
        use_model(call_reply("getTopCategories", topN=2))

        with pytest.raises(ValidationError) as exc_info:
            await assistant.ask("top categories")

        assert exc_info.value.errors == ["Required parameter 'type' is missing"]
        assert assistant.history == []


class TestSubmitErrors:
    """HTTP failures map onto the error taxonomy."""

    @pytest.mark.asyncio
    async def test_rate_limited(self, engine):
        def handler(request):
            return httpx.Response(429, json={"error": "Rate limit exceeded. Please wait a moment and try again.", "retryAfter": 12})

        async with mock_http(handler) as http:
            with pytest.raises(RateLimitError) as exc_info:
                await AssistantClient(http, engine, clock=lambda: NOW).ask("hi")

        assert exc_info.value.retry_after == 12.0

    @pytest.mark.asyncio
    async def test_server_error(self, engine):
        def handler(request):
            return httpx.Response(500, json={"error": "Failed to fetch assistant response"})

        async with mock_http(handler) as http:
            with pytest.raises(UpstreamError, match="Failed to fetch assistant response"):
                await AssistantClient(http, engine, clock=lambda: NOW).ask("hi")

    @pytest.mark.asyncio
    async def test_connection_error(self, engine):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with mock_http(handler) as http:
            with pytest.raises(UpstreamError):
                await AssistantClient(http, engine, clock=lambda: NOW).ask("hi")

    @pytest.mark.asyncio
    async def test_non_json_error_body(self, engine):
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        async with mock_http(handler) as http:
            with pytest.raises(UpstreamError, match="status 502"):
                await AssistantClient(http, engine, clock=lambda: NOW).ask("hi")
