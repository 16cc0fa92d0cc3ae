"""Client-side dispatch of catalog functions against the local store."""
from finassist.dispatch.engine import DispatchContext, DispatchEngine

__all__ = ["DispatchContext", "DispatchEngine"]
