from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

from stockflow.domain.reconciliation import InventoryState
from stockflow.repositories.entity_store import EntityStore


class UnitOfWork(Protocol):
    state: InventoryState

    def __enter__(self) -> "UnitOfWork": ...
    def __exit__(self, exc_type, exc, tb) -> None: ...


@dataclass
class StoreUnitOfWork:
    """Unit of Work over an :class:`EntityStore`.

    Services read and replace ``state`` inside the ``with`` block. A clean
    exit publishes the new state and flushes it to the key-value store; an
    exception leaves the store exactly as it was on entry.
    """

    store: EntityStore
    state: InventoryState = field(init=False)
    _snapshot: Optional[InventoryState] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.state = self.store.state

    def __enter__(self) -> "StoreUnitOfWork":
        self._snapshot = self.store.state
        self.state = self.store.state
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.store.state = self._snapshot
            return None
        self.store.state = self.state
        try:
            self.store.commit()
        except Exception:
            self.store.state = self._snapshot
            raise
        return None
