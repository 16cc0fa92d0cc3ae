"""Dispatch Engine - runs validated catalog calls against the local store.

Every call produces a FunctionResult with its wall-clock execution time.
Parameter problems, store failures and refused mutations become
``success=False`` results so the model can explain them; a name outside the
registry is an integration bug and raises UnknownFunctionError instead.
"""
import inspect
import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, Optional

import pydantic

from finassist.assistant import catalog
from finassist.assistant.schemas import FunctionResult
from finassist.assistant.validator import validate
from finassist.data.store import FinanceStore
from finassist.dispatch import actions, budgets, entries, utility  # noqa: F401  (registers handlers)
from finassist.dispatch.registry import REGISTRY
from finassist.errors import AssistantError, UnknownFunctionError

logger = logging.getLogger(__name__)


@dataclass
class DispatchContext:
    """What a handler gets besides its parameters."""
    store: FinanceStore
    today: date


def _check_registry_matches_catalog() -> None:
    names = set(catalog.function_names())
    missing = names - set(REGISTRY)
    extra = set(REGISTRY) - names
    if missing or extra:
        raise RuntimeError(
            f"Dispatch registry out of sync with catalog (missing={sorted(missing)}, extra={sorted(extra)})"
        )


_check_registry_matches_catalog()


def _format_pydantic_errors(error: pydantic.ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "arguments"
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)


class DispatchEngine:
    """Executes catalog functions for one user's store."""

    def __init__(self, store: FinanceStore, clock: Callable[[], date] = date.today):
        self.store = store
        self._clock = clock

    async def execute(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> FunctionResult:
        """
        Run ``name`` with ``arguments``.

        Args:
            name: Catalog function name
            arguments: Raw arguments as proposed by the model

        Returns:
            FunctionResult; success=False carries the error message

        Raises:
            UnknownFunctionError: ``name`` is not registered
        """
        started = time.perf_counter()
        arguments = arguments or {}

        registration = REGISTRY.get(name)
        if registration is None:
            raise UnknownFunctionError(name)

        check = validate(name, arguments)
        if not check.ok:
            return self._finish(name, started, error="; ".join(check.errors))

        try:
            params = registration.params.model_validate(arguments)
        except pydantic.ValidationError as e:
            return self._finish(name, started, error=f"Invalid parameters: {_format_pydantic_errors(e)}")

        context = DispatchContext(store=self.store, today=self._clock())
        try:
            data = registration.handler(context, params)
            if inspect.isawaitable(data):
                data = await data
        except AssistantError as e:
            return self._finish(name, started, error=e.message)

        return self._finish(name, started, data=data)

    def _finish(
        self,
        name: str,
        started: float,
        data: Any = None,
        error: Optional[str] = None,
    ) -> FunctionResult:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"Dispatched {name}: success={error is None} in {elapsed_ms:.2f}ms")
        return FunctionResult(
            success=error is None,
            data=data,
            error=error,
            function_name=name,
            execution_time_ms=elapsed_ms,
        )
