from __future__ import annotations

import logging
from typing import Callable, Optional

from stockflow.domain import reconciliation
from stockflow.domain.errors import NotFoundError, ProductNotFoundError, ValidationError
from stockflow.domain.models import Category, Product
from stockflow.ids import IdFactory, uuid_ids
from stockflow.repositories.entity_store import EntityStore
from stockflow.repositories.unit_of_work import StoreUnitOfWork, UnitOfWork
from stockflow.services.inputs import parse_int

log = logging.getLogger(__name__)

DEFAULT_CATEGORY_COLOR = "#8B5CF6"


class InventoryService:
    """Catalog maintenance: categories and products."""

    def __init__(
        self,
        store: EntityStore,
        id_factory: IdFactory = uuid_ids,
        uow_factory: Callable[[], UnitOfWork] | None = None,
    ):
        self.store = store
        self.new_id = id_factory
        self.uow_factory = uow_factory or (lambda: StoreUnitOfWork(store))

    def list_products(self, search: str = "", category_id: Optional[str] = None) -> list[Product]:
        term = (search or "").strip().lower()
        out = []
        for p in self.store.products:
            if term and term not in p.name.lower() and term not in p.description.lower():
                continue
            if category_id and p.category_id != category_id:
                continue
            out.append(p)
        return out

    def get_product(self, product_id: str) -> Product:
        p = self.store.state.product(product_id)
        if not p:
            raise ProductNotFoundError(product_id)
        return p

    def add_product(self, name: str, description: str, category_id: str, stock: int = 0) -> Product:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required.")
        stock = parse_int(stock, "Stock", min_value=0)
        product = Product(
            id=self.new_id(),
            name=name,
            description=(description or "").strip(),
            category_id=category_id,
            stock=stock,
        )
        with self.uow_factory() as uow:
            uow.state = reconciliation.add_product(uow.state, product)
        log.info("product_created product_id=%s name=%s stock=%s", product.id, product.name, product.stock)
        return product

    def update_product(self, product_id: str, name: str, description: str, category_id: str) -> Product:
        """Edit catalog fields. Stock is left alone, and so are the name snapshots on past purchases and sales."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required.")
        with self.uow_factory() as uow:
            uow.state = reconciliation.edit_product(uow.state, product_id, name, (description or "").strip(), category_id)
        log.info("product_updated product_id=%s", product_id)
        return self.get_product(product_id)

    def delete_product(self, product_id: str) -> None:
        product = self.get_product(product_id)
        before = self.store.state
        with self.uow_factory() as uow:
            uow.state = reconciliation.delete_product(uow.state, product_id)
        log.info(
            "product_deleted product_id=%s name=%s purchases_removed=%s sales_removed=%s",
            product.id,
            product.name,
            len(before.purchases) - len(self.store.state.purchases),
            len(before.sales) - len(self.store.state.sales),
        )

    def list_categories(self) -> list[Category]:
        return self.store.categories

    def get_category(self, category_id: str) -> Category:
        c = self.store.state.category(category_id)
        if not c:
            raise NotFoundError("Category not found.")
        return c

    def products_in_category(self, category_id: str) -> list[Product]:
        return [p for p in self.store.products if p.category_id == category_id]

    def add_category(self, name: str, color: str = DEFAULT_CATEGORY_COLOR) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required.")
        category = Category(id=self.new_id(), name=name, color=(color or DEFAULT_CATEGORY_COLOR).strip())
        with self.uow_factory() as uow:
            uow.state = reconciliation.add_category(uow.state, category)
        log.info("category_created category_id=%s name=%s", category.id, category.name)
        return category

    def delete_category(self, category_id: str) -> None:
        with self.uow_factory() as uow:
            uow.state = reconciliation.delete_category(uow.state, category_id)
        log.info("category_deleted category_id=%s", category_id)
