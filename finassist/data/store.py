"""Store collaborator contract and the in-memory implementation.

The dispatch engine only ever talks to a ``FinanceStore``. ``LocalStore`` keeps
one user's entries, budgets and categories in memory and, when given a
``StoreBackend``, persists mutations through it optimistically: the change is
visible locally at once and removed again if the backend refuses it.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

from finassist.data.schemas import (
    Budget,
    DEFAULT_CATEGORIES,
    Entry,
    ENTRY_TYPES,
    Snapshot,
    UserInfo,
    same_category,
)
from finassist.errors import StoreError

logger = logging.getLogger(__name__)


class FinanceStore(Protocol):
    """What the dispatch engine needs from whoever holds the user's data."""

    def get_entries(self) -> List[Entry]: ...

    def get_entries_by_type(self, entry_type: str) -> List[Entry]: ...

    async def add_entry(self, entry: Entry) -> Entry: ...

    def get_budgets(self) -> List[Budget]: ...

    def get_budgets_by_type(self, budget_type: str) -> List[Budget]: ...

    async def add_budget(self, budget: Budget) -> Budget: ...

    def get_categories(self) -> Dict[str, List[str]]: ...

    async def add_category(self, entry_type: str, name: str) -> None: ...

    def current_user(self) -> Optional[UserInfo]: ...


class StoreBackend(Protocol):
    """Remote persistence behind a LocalStore (the tracker's CRUD API)."""

    async def create_entry(self, entry: Entry) -> Entry: ...

    async def create_budget(self, budget: Budget) -> Budget: ...

    async def create_category(self, entry_type: str, name: str) -> None: ...


class LocalStore:
    """In-memory FinanceStore with optimistic writes and rollback."""

    def __init__(
        self,
        entries: Optional[List[Entry]] = None,
        budgets: Optional[List[Budget]] = None,
        categories: Optional[Dict[str, List[str]]] = None,
        user: Optional[UserInfo] = None,
        backend: Optional[StoreBackend] = None,
    ):
        self._entries: List[Entry] = list(entries or [])
        self._budgets: List[Budget] = list(budgets or [])
        source = categories if categories is not None else DEFAULT_CATEGORIES
        self._categories: Dict[str, List[str]] = {
            entry_type: list(source.get(entry_type, [])) for entry_type in ENTRY_TYPES
        }
        self._user = user
        self._backend = backend

        # One lock per collection so a slow entry write never blocks budgets
        self._entries_lock = asyncio.Lock()
        self._budgets_lock = asyncio.Lock()
        self._categories_lock = asyncio.Lock()

    # =========================================================================
    # Snapshots
    # =========================================================================

    @classmethod
    def from_snapshot(
        cls, data: Dict[str, Any], backend: Optional[StoreBackend] = None
    ) -> "LocalStore":
        """Build a store from a JSON-like dict {user, entries, budgets, categories}."""
        snapshot = Snapshot.model_validate(data)
        return cls(
            entries=snapshot.entries,
            budgets=snapshot.budgets,
            categories=snapshot.categories,
            user=snapshot.user,
            backend=backend,
        )

    def snapshot(self) -> Dict[str, Any]:
        return Snapshot(
            user=self._user,
            entries=self._entries,
            budgets=self._budgets,
            categories=self._categories,
        ).model_dump(mode="json")

    # =========================================================================
    # Reads
    # =========================================================================

    def get_entries(self) -> List[Entry]:
        return list(self._entries)

    def get_entries_by_type(self, entry_type: str) -> List[Entry]:
        return [e for e in self._entries if e.type.value == entry_type]

    def get_budgets(self) -> List[Budget]:
        return list(self._budgets)

    def get_budgets_by_type(self, budget_type: str) -> List[Budget]:
        return [b for b in self._budgets if b.type.value == budget_type]

    def get_categories(self) -> Dict[str, List[str]]:
        return {k: list(v) for k, v in self._categories.items()}

    def current_user(self) -> Optional[UserInfo]:
        return self._user

    # =========================================================================
    # Mutations
    # =========================================================================

    async def add_entry(self, entry: Entry) -> Entry:
        async with self._entries_lock:
            self._entries.append(entry)
            if self._backend is None:
                return entry
            try:
                saved = await self._backend.create_entry(entry)
            except asyncio.CancelledError:
                self._entries.remove(entry)
                raise
            except Exception as e:
                self._entries.remove(entry)
                logger.warning(f"Rolled back entry {entry.id}: {e}")
                raise StoreError(str(e) or "Failed to create entry") from e
            # Backend may assign its own id
            index = self._entries.index(entry)
            self._entries[index] = saved
            return saved

    async def add_budget(self, budget: Budget) -> Budget:
        async with self._budgets_lock:
            self._budgets.append(budget)
            if self._backend is None:
                return budget
            try:
                saved = await self._backend.create_budget(budget)
            except asyncio.CancelledError:
                self._budgets.remove(budget)
                raise
            except Exception as e:
                self._budgets.remove(budget)
                logger.warning(f"Rolled back budget {budget.id}: {e}")
                raise StoreError(str(e) or "Failed to create budget") from e
            index = self._budgets.index(budget)
            self._budgets[index] = saved
            return saved

    async def add_category(self, entry_type: str, name: str) -> None:
        if entry_type not in self._categories:
            raise StoreError(f"Unknown category type: {entry_type}")

        async with self._categories_lock:
            names = self._categories[entry_type]
            if any(same_category(existing, name) for existing in names):
                return
            names.append(name)
            if self._backend is None:
                return
            try:
                await self._backend.create_category(entry_type, name)
            except asyncio.CancelledError:
                names.remove(name)
                raise
            except Exception as e:
                names.remove(name)
                logger.warning(f"Rolled back category '{name}' ({entry_type}): {e}")
                raise StoreError(str(e) or "Failed to create category") from e

