"""Financial data models and the store collaborator."""
from finassist.data import schemas, store

__all__ = ["schemas", "store"]
