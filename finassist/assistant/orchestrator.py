"""Turn Orchestrator - one user prompt, at most two model round-trips.

The orchestrator:
1. Builds the message sequence (system policy, history, prompt)
2. Without function results: offers the relevant catalog subset and returns
   either the model's text or a validated function call for the client to run
3. With function results: replays them and asks for a final text answer with
   no functions offered
4. Wraps every model call in rate-limit backoff

Functions are never executed here; dispatch happens on the client against
its local store.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Union

from finassist.assistant.llm import ChatModel
from finassist.assistant.prompts import (
    EMPTY_RESPONSE_FALLBACK,
    build_messages,
    function_call_message,
    sanitize_output,
)
from finassist.assistant.relevance import relevant_functions
from finassist.assistant.retry import with_rate_limit_retries
from finassist.assistant.schemas import AssistantRequest, FunctionCallResponse, TextResponse
from finassist.assistant.validator import validate
from finassist.errors import ValidationError

logger = logging.getLogger(__name__)

AssistantReply = Union[TextResponse, FunctionCallResponse]


async def respond(
    request: AssistantRequest,
    model: ChatModel,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AssistantReply:
    """
    Run one turn for ``request``.

    Raises:
        ValueError: Blank prompt
        ValidationError: The model proposed a call that fails validation
        RateLimitError: Still throttled after every retry
        UpstreamError: Any other provider failure
    """
    prompt = (request.prompt or "").strip()
    if not prompt:
        raise ValueError("Prompt is required")

    messages = build_messages(
        prompt,
        conversation_history=request.conversation_history,
        function_results=request.function_results,
    )

    if request.function_results:
        # Second round: answer from the results, no further calls allowed
        reply = await with_rate_limit_retries(
            lambda: model.complete(messages, functions=None), sleep=sleep
        )
        return _text_response(reply.content)

    functions = relevant_functions(prompt)
    reply = await with_rate_limit_retries(
        lambda: model.complete(messages, functions=functions), sleep=sleep
    )

    if reply.function_call is None:
        return _text_response(reply.content)

    call = reply.function_call
    result = validate(call.name, call.arguments)
    if not result.ok:
        logger.warning(f"Function validation failed for {call.name}: {result.errors}")
        raise ValidationError(result.errors, function_name=call.name)

    logger.info(f"Function call requested: {call.name}")
    return FunctionCallResponse(
        function_name=call.name,
        parameters=call.arguments,
        message=function_call_message(call.name),
    )


def _text_response(content) -> TextResponse:
    text = sanitize_output(content)
    if not text:
        logger.warning("Model returned empty content")
        text = EMPTY_RESPONSE_FALLBACK
    return TextResponse(response=text)
