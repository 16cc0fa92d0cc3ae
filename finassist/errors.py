"""Error taxonomy shared by the orchestrator, dispatch engine and store.

Every error carries a machine-readable ``code`` and the HTTP status the API
maps it to, so routes never have to guess.
"""
from typing import Any, Dict, List, Optional


class AssistantError(RuntimeError):
    """Base class for every failure the assistant core raises on purpose."""

    code = "ASSISTANT_ERROR"
    http_status = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(AssistantError):
    """A proposed function call does not match its catalog schema."""

    code = "INVALID_FUNCTION_PARAMETERS"
    http_status = 400

    def __init__(self, errors: List[str], function_name: Optional[str] = None):
        super().__init__("Invalid function parameters", {"errors": list(errors)})
        self.errors = list(errors)
        self.function_name = function_name


class UnknownFunctionError(AssistantError):
    """Dispatch was asked for a name outside the registry."""

    code = "UNKNOWN_FUNCTION"
    http_status = 500

    def __init__(self, function_name: str):
        super().__init__(f"Unknown function: {function_name}")
        self.function_name = function_name


class RateLimitError(AssistantError):
    """The upstream model throttled us.

    Raised by provider adapters for a single throttled call and again by the
    retry wrapper once every attempt has been used.
    """

    code = "RATE_LIMITED"
    http_status = 429

    def __init__(
        self,
        message: str = "Rate limit exceeded. Please try again later.",
        retry_after: Optional[float] = None,
        attempts: int = 1,
    ):
        super().__init__(message, {"retry_after": retry_after, "attempts": attempts})
        self.retry_after = retry_after
        self.attempts = attempts


class UpstreamError(AssistantError):
    """Any non rate-limit failure talking to the model provider."""

    code = "UPSTREAM_FAILURE"
    http_status = 500


class StoreError(AssistantError):
    """The store collaborator failed to read or persist data."""

    code = "STORE_FAILURE"
    http_status = 500


class ActionRejectedError(AssistantError):
    """A mutation was refused before anything was written."""

    code = "ACTION_REJECTED"
    http_status = 422
