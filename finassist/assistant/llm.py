"""Model provider adapter - OpenAI chat completions with tool calling.

The orchestrator depends on the ``ChatModel`` protocol only, so tests and
other providers can stand in for OpenAI.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

import openai
from openai import AsyncOpenAI

from finassist.assistant import catalog
from finassist.config import settings
from finassist.errors import RateLimitError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class ProposedCall:
    """A function call the model asked for."""
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ModelReply:
    """Either assistant text or a proposed function call."""
    content: Optional[str] = None
    function_call: Optional[ProposedCall] = None


class ChatModel(Protocol):
    async def complete(
        self,
        messages: List[Dict[str, Any]],
        functions: Optional[List[Dict[str, Any]]] = None,
    ) -> ModelReply: ...


def get_openai_client() -> AsyncOpenAI:
    """Get the OpenAI client."""
    return AsyncOpenAI(
        api_key=settings.OPENAI_API_KEY,
        timeout=settings.OPENAI_TIMEOUT_SECONDS,
    )


def _retry_after(response: Any) -> Optional[float]:
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    value = headers.get("retry-after")
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class OpenAIChatModel:
    """ChatModel backed by the OpenAI chat completions API."""

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: Optional[str] = None):
        self._client = client
        self.model = model or settings.OPENAI_MODEL

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not settings.OPENAI_API_KEY:
                raise UpstreamError("OpenAI API key is not configured")
            self._client = get_openai_client()
        return self._client

    async def complete(
        self,
        messages: List[Dict[str, Any]],
        functions: Optional[List[Dict[str, Any]]] = None,
    ) -> ModelReply:
        """
        Call OpenAI once.

        Functions are offered as tools with ``tool_choice="auto"`` only when
        given; otherwise the model can only answer in text.

        Raises:
            RateLimitError: Provider returned 429
            UpstreamError: Any other provider failure
            ValidationError: Tool call arguments were not valid JSON
        """
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": settings.OPENAI_MAX_TOKENS,
        }

        if functions:
            kwargs["tools"] = [catalog.as_tool(f) for f in functions]
            kwargs["tool_choice"] = "auto"

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except openai.RateLimitError as e:
            raise RateLimitError(retry_after=_retry_after(e.response)) from e
        except openai.APIStatusError as e:
            if e.status_code == 429:
                raise RateLimitError(retry_after=_retry_after(e.response)) from e
            raise UpstreamError(f"OpenAI request failed with status {e.status_code}") from e
        except openai.APIError as e:
            raise UpstreamError(f"OpenAI request failed: {e}") from e

        if not response or not response.choices:
            raise UpstreamError("Invalid response from OpenAI")

        message = response.choices[0].message

        if message.tool_calls:
            tool_call = message.tool_calls[0]
            name = tool_call.function.name
            try:
                arguments = json.loads(tool_call.function.arguments or "{}")
            except json.JSONDecodeError as e:
                raise ValidationError(
                    [f"Arguments for '{name}' are not valid JSON"], function_name=name
                ) from e
            return ModelReply(function_call=ProposedCall(name=name, arguments=arguments))

        return ModelReply(content=message.content)
