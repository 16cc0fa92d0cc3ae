"""Assistant API Routes.

Endpoints:
- POST /assistant - One conversation turn (text answer or function call)
- GET /assistant/functions - Full, unfiltered function catalog
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from finassist.assistant import catalog, orchestrator, schemas
from finassist.assistant.llm import ChatModel, OpenAIChatModel
from finassist.errors import RateLimitError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_RETRY_AFTER_SECONDS = 60


def get_chat_model() -> ChatModel:
    """Model provider dependency; overridden in tests."""
    return OpenAIChatModel()


def _error(status_code: int, payload: schemas.ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=payload.model_dump(by_alias=True, exclude_none=True),
    )


# ============================================================================
# CHAT ENDPOINT
# ============================================================================

@router.post("/assistant")
async def get_assistant_response(
    request: schemas.AssistantRequest,
    model: ChatModel = Depends(get_chat_model),
):
    """
    Run one assistant turn.

    Without ``functionResults`` the model may ask for a catalog function; the
    response is then ``{type: "function_call", functionName, parameters,
    message}`` and the client is expected to run it and resubmit the same
    prompt with the result. With ``functionResults`` the response is always
    ``{type: "text", response}``.
    """
    if not (request.prompt or "").strip():
        return _error(400, schemas.ErrorResponse(error="Prompt is required"))

    try:
        reply = await orchestrator.respond(request, model)
    except ValidationError as e:
        return _error(
            e.http_status,
            schemas.ErrorResponse(error="Invalid function parameters", details=e.errors),
        )
    except RateLimitError as e:
        logger.error(f"Assistant rate limited after {e.attempts} attempts")
        retry_after = e.retry_after if e.retry_after is not None else DEFAULT_RETRY_AFTER_SECONDS
        return _error(
            e.http_status,
            schemas.ErrorResponse(
                error="Rate limit exceeded. Please wait a moment and try again.",
                retry_after=retry_after,
            ),
        )
    except UpstreamError as e:
        logger.error(f"Assistant upstream failure: {e.message}")
        return _error(500, schemas.ErrorResponse(error="Failed to fetch assistant response"))
    except Exception as e:
        logger.exception(f"Assistant error: {e}")
        return _error(500, schemas.ErrorResponse(error="Failed to fetch assistant response"))

    return JSONResponse(content=reply.model_dump(by_alias=True))


# ============================================================================
# CATALOG INTROSPECTION
# ============================================================================

@router.get("/assistant/functions", response_model=schemas.FunctionCatalogResponse)
async def get_function_catalog():
    """Every catalog function, including its domain and result description."""
    functions = [f.model_dump() for f in catalog.all_functions()]
    return schemas.FunctionCatalogResponse(functions=functions, count=len(functions))
