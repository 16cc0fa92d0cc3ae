"""Prompt Builder - system policy and message assembly for the model.

Builds the message list for both rounds of a turn: the first round offers
the filtered catalog, the second replays dispatched results so the model
answers from them.
"""
import json
import re
from typing import Any, Dict, List, Sequence

from finassist.assistant.schemas import ChatMessage, FunctionResultPayload


SYSTEM_POLICY = """Finance tracker assistant. Use functions for queries.

RULES:
- NO currency symbols (use numbers only)
- Format: commas for thousands, 2 decimals
- Be concise and friendly

CRITICAL: BUDGET CREATION
- Budgets use PERIOD (monthly/quarterly/half-yearly/yearly), NOT start/end dates
- When creating budgets, ONLY ask for: type, category, amount, period
- DO NOT ask for start date, end date, or date range for budgets
- Budgets automatically calculate based on the current period
- Multiple budgets with same category/period are ALLOWED - each will be created separately

FUNCTION GUIDELINES:
1. Sequential rankings: Use getTopCategories with topN (e.g., topN=3 for "most expensive" + follow-ups)
2. Budget left: Use getBudgetRemaining (returns spent, remaining, details) - NOT getTotalBudget
3. Multiple budgets: List all periods, ask which one
4. List budgets: Use getAllBudgets
5. Budget alignment: Use getBudgetAlignmentSummary (shows critical budgets >80% or over)
6. Budget answers: Always include budget amount, spent, remaining, percentage used

ERROR HANDLING:
- When function results show success: false, inform the user about the error clearly
- DO NOT claim success if the function failed (check result.success field)
- If budget/entry creation fails, explain the error and suggest fixes

DATA FORMATTING:
- Numbers: 1,234.56 (no $, etc.)
- Budgets: Always show spent + remaining + percentage"""

EMPTY_RESPONSE_FALLBACK = "I processed your request successfully."

_TRAILING_UNDEFINED = re.compile(r"\s*undefined\s*$", re.IGNORECASE)
_CAMEL_BOUNDARY = re.compile(r"([A-Z])")


def build_messages(
    prompt: str,
    conversation_history: Sequence[ChatMessage] = (),
    function_results: Sequence[FunctionResultPayload] = (),
) -> List[Dict[str, Any]]:
    """
    Assemble the message sequence for one model call.

    Order: system policy, prior user/assistant turns, the prompt, then for
    each dispatched result an assistant tool call followed by the tool's
    JSON output.

    Returns:
        List of OpenAI chat messages
    """
    messages: List[Dict[str, Any]] = [{"role": "system", "content": SYSTEM_POLICY}]

    for msg in conversation_history:
        if msg.role in ("user", "assistant"):
            messages.append({"role": msg.role, "content": msg.content or ""})

    messages.append({"role": "user", "content": prompt})

    for index, item in enumerate(function_results):
        call_id = f"call_{index}"
        messages.append({
            "role": "assistant",
            "content": None,
            "tool_calls": [{
                "id": call_id,
                "type": "function",
                "function": {
                    "name": item.function_name,
                    "arguments": json.dumps(item.parameters or {}),
                },
            }],
        })
        messages.append({
            "role": "tool",
            "tool_call_id": call_id,
            "content": json.dumps(item.result, default=str),
        })

    return messages


def function_call_message(function_name: str) -> str:
    """User-facing note shown while a function runs, e.g. 'total spending'."""
    words = _CAMEL_BOUNDARY.sub(r" \1", function_name).lower()
    return f"I need to check your {words} data to answer your question."


def sanitize_output(content: Any) -> str:
    """Strip whitespace and trailing 'undefined' artifacts. May return ''."""
    text = str(content).strip() if content else ""
    return _TRAILING_UNDEFINED.sub("", text).strip()
