"""Assistant Pydantic schemas for request/response validation.

Wire names are camelCase to match the tracker's web client; Python code uses
the snake_case field names.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional


class WireModel(BaseModel):
    """Base for models exchanged with the web client."""
    model_config = ConfigDict(populate_by_name=True)


# ============================================================================
# CHAT REQUEST
# ============================================================================

class ChatMessage(WireModel):
    """A single turn of prior conversation."""
    role: str = Field(..., description="Message role (only user/assistant are forwarded)")
    content: Optional[str] = Field("", description="Message text")


class FunctionResultPayload(WireModel):
    """A dispatched call and what it returned, sent back for the final answer."""
    function_name: str = Field(..., alias="functionName")
    parameters: Dict[str, Any] = Field(default_factory=dict)
    result: Any = None


class AssistantRequest(WireModel):
    """Inbound request to the assistant endpoint."""
    prompt: Optional[str] = Field(None, description="The user's question or command")
    function_results: List[FunctionResultPayload] = Field(
        default_factory=list,
        alias="functionResults",
        description="Results of functions dispatched for this prompt",
    )
    conversation_history: List[ChatMessage] = Field(
        default_factory=list,
        alias="conversationHistory",
        description="Previous messages in this conversation",
    )


# ============================================================================
# CHAT RESPONSES
# ============================================================================

class TextResponse(WireModel):
    """Terminal answer."""
    type: Literal["text"] = "text"
    response: str


class FunctionCallResponse(WireModel):
    """The model wants a catalog function run on the client."""
    type: Literal["function_call"] = "function_call"
    function_name: str = Field(..., alias="functionName")
    parameters: Dict[str, Any] = Field(default_factory=dict)
    message: str = ""


class ErrorResponse(WireModel):
    """Error payload for any non-2xx response."""
    error: str
    details: Optional[List[str]] = None
    retry_after: Optional[float] = Field(None, alias="retryAfter")


class FunctionCatalogResponse(BaseModel):
    """Full, unfiltered catalog for diagnostics."""
    functions: List[Dict[str, Any]]
    count: int


# ============================================================================
# DISPATCH RESULT
# ============================================================================

class FunctionResult(WireModel):
    """Outcome of running one catalog function against the local store."""
    success: bool
    data: Any = None
    error: Optional[str] = None
    function_name: str = Field(..., alias="functionName")
    execution_time_ms: float = Field(0.0, alias="executionTimeMs")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
