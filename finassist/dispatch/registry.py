"""Name -> typed handler registry for the dispatch engine."""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Type

from finassist.dispatch.params import FunctionParams

Handler = Callable[..., Any]


@dataclass(frozen=True)
class Registration:
    name: str
    params: Type[FunctionParams]
    handler: Handler


REGISTRY: Dict[str, Registration] = {}


def register(name: str, params: Type[FunctionParams]) -> Callable[[Handler], Handler]:
    """Decorator binding a catalog function name to its handler."""

    def decorator(handler: Handler) -> Handler:
        if name in REGISTRY:
            raise RuntimeError(f"Function '{name}' registered twice")
        REGISTRY[name] = Registration(name=name, params=params, handler=handler)
        return handler

    return decorator
