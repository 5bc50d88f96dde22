from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from stockflow.domain.models import Category, Product, Purchase, Sale, User
from stockflow.domain.reconciliation import InventoryState
from stockflow.repositories.contracts import KeyValueStore

log = logging.getLogger(__name__)

USER_KEY = "stockflow-user"
CATEGORIES_KEY = "stockflow-categories"
PRODUCTS_KEY = "stockflow-products"
PURCHASES_KEY = "stockflow-purchases"
SALES_KEY = "stockflow-sales"

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="1", name="Electronics", color="#3B82F6"),
    Category(id="2", name="Clothing", color="#8B5CF6"),
    Category(id="3", name="Home & Garden", color="#10B981"),
    Category(id="4", name="Sports", color="#F59E0B"),
    Category(id="5", name="Books", color="#EF4444"),
)


class EntityStore:
    """Owns the inventory collections and the current user.

    ``state`` is an immutable :class:`InventoryState`; writers replace it
    and call :meth:`commit`, which writes each collection back under its
    own key. Nothing is validated on load beyond decoding each record.
    """

    def __init__(self, kv: KeyValueStore, *, seed_categories: bool = True):
        self.kv = kv
        self.state = InventoryState()
        self.user: Optional[User] = None
        self.load()
        if seed_categories and not self.state.categories:
            self.state = replace(self.state, categories=DEFAULT_CATEGORIES)
            self.kv.set(CATEGORIES_KEY, [c.to_dict() for c in DEFAULT_CATEGORIES])
            log.info("default_categories_seeded count=%s", len(DEFAULT_CATEGORIES))

    def load(self) -> None:
        self.state = InventoryState(
            categories=tuple(Category.from_dict(r) for r in self.kv.get(CATEGORIES_KEY, []) or []),
            products=tuple(Product.from_dict(r) for r in self.kv.get(PRODUCTS_KEY, []) or []),
            purchases=tuple(Purchase.from_dict(r) for r in self.kv.get(PURCHASES_KEY, []) or []),
            sales=tuple(Sale.from_dict(r) for r in self.kv.get(SALES_KEY, []) or []),
        )
        raw_user = self.kv.get(USER_KEY)
        self.user = User.from_dict(raw_user) if raw_user else None

    def commit(self) -> None:
        """Write every collection, history first and product stock last.

        If a write fails, the keys already written get their previous
        values back before the error propagates.
        """
        rows = [
            (PURCHASES_KEY, [p.to_dict() for p in self.state.purchases]),
            (SALES_KEY, [s.to_dict() for s in self.state.sales]),
            (CATEGORIES_KEY, [c.to_dict() for c in self.state.categories]),
            (PRODUCTS_KEY, [p.to_dict() for p in self.state.products]),
        ]
        previous = {key: self.kv.get(key) for key, _ in rows}
        written: list[str] = []
        try:
            for key, value in rows:
                self.kv.set(key, value)
                written.append(key)
        except Exception:
            log.error("commit_failed written=%s", ",".join(written) or "-")
            for key in reversed(written):
                if previous[key] is None:
                    self.kv.delete(key)
                else:
                    self.kv.set(key, previous[key])
            raise

    def set_user(self, user: Optional[User]) -> None:
        self.user = user
        self.kv.set(USER_KEY, user.to_dict() if user else None)

    @property
    def categories(self) -> list[Category]:
        return list(self.state.categories)

    @property
    def products(self) -> list[Product]:
        return list(self.state.products)

    @property
    def purchases(self) -> list[Purchase]:
        return list(self.state.purchases)

    @property
    def sales(self) -> list[Sale]:
        return list(self.state.sales)
