"""Assistant Client - drives a conversation from the tracker's side.

Submits prompts to the assistant endpoint, runs any requested function
locally through the DispatchEngine, resubmits the result and returns the
final answer. Conversation history lives here, not on the server.
"""
import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import httpx

from finassist.config import settings
from finassist.dispatch import DispatchEngine
from finassist.errors import RateLimitError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)


def with_date_context(prompt: str, now: datetime) -> str:
    """Prefix a prompt with the local date so relative dates resolve."""
    stamp = now.strftime("%A, %B %d, %Y %H:%M")
    return f"Current date and time: {stamp}\n\nUser query: {prompt}"


class AssistantClient:
    """One conversation against the assistant API."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        engine: DispatchEngine,
        path: Optional[str] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.http = http
        self.engine = engine
        self.path = path or f"{settings.API_V1_PREFIX}/assistant"
        self._clock = clock
        self._history: List[Dict[str, str]] = []
        self._lock = asyncio.Lock()

    @property
    def history(self) -> List[Dict[str, str]]:
        return list(self._history)

    async def ask(self, prompt: str) -> str:
        """
        Run one full turn and return the assistant's answer.

        Turns are serialized per client. History is only updated once the
        turn completes, so a cancelled or failed turn leaves it untouched.

        Raises:
            ValidationError: The server rejected the model's function call
            RateLimitError: The server stayed rate limited
            UpstreamError: Any other server failure
        """
        async with self._lock:
            history = list(self._history)
            contextual_prompt = with_date_context(prompt, self._clock())

            reply = await self._submit({
                "prompt": contextual_prompt,
                "conversationHistory": history,
            })

            if reply.get("type") == "function_call":
                name = reply["functionName"]
                parameters = reply.get("parameters") or {}
                logger.info(f"Dispatching {name} locally")
                result = await self.engine.execute(name, parameters)

                reply = await self._submit({
                    "prompt": contextual_prompt,
                    "conversationHistory": history,
                    "functionResults": [{
                        "functionName": name,
                        "parameters": parameters,
                        "result": result.to_wire(),
                    }],
                })

            answer = reply.get("response") or ""
            self._history.extend([
                {"role": "user", "content": prompt},
                {"role": "assistant", "content": answer},
            ])
            return answer

    async def _submit(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self.http.post(self.path, json=payload)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Assistant request failed: {e}") from e

        if response.status_code == 200:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {}
        error = body.get("error") or f"Assistant request failed with status {response.status_code}"

        if response.status_code == 429:
            retry_after = body.get("retryAfter")
            raise RateLimitError(error, retry_after=float(retry_after) if retry_after is not None else None)
        if response.status_code == 400:
            raise ValidationError(body.get("details") or [error])
        raise UpstreamError(error)
