from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from stockflow.domain import reconciliation
from stockflow.domain.errors import NotFoundError, ProductNotFoundError
from stockflow.domain.models import Product, Sale
from stockflow.domain.reports import matches_listing
from stockflow.ids import IdFactory, uuid_ids
from stockflow.repositories.entity_store import EntityStore
from stockflow.repositories.unit_of_work import StoreUnitOfWork, UnitOfWork
from stockflow.services.inputs import now, parse_int, parse_price

log = logging.getLogger("stockflow.sales")


class SalesService:
    def __init__(
        self,
        store: EntityStore,
        id_factory: IdFactory = uuid_ids,
        clock: Callable[[], datetime] = now,
        uow_factory: Callable[[], UnitOfWork] | None = None,
    ):
        self.store = store
        self.new_id = id_factory
        self.clock = clock
        self.uow_factory = uow_factory or (lambda: StoreUnitOfWork(store))

    def create_sale(self, product_id: str, quantity: int, unit_price: float, date: Optional[datetime] = None) -> Sale:
        qty = parse_int(quantity, "Qty")
        price = parse_price(unit_price)

        product = self.store.state.product(product_id)
        if not product:
            raise ProductNotFoundError(product_id)

        sale = Sale(
            id=self.new_id(),
            product_id=product.id,
            product_name=product.name,
            quantity=qty,
            unit_price=price,
            total_price=qty * price,
            date=date or self.clock(),
        )

        # stock check happens inside the reconciliation step
        with self.uow_factory() as uow:
            uow.state = reconciliation.add_sale(uow.state, sale)

        log.info("sale_created sale_id=%s product_id=%s qty=%s total=%.2f", sale.id, sale.product_id, qty, sale.total_price)
        return sale

    def delete_sale(self, sale_id: str) -> None:
        sale = self.get_sale(sale_id)
        if self.store.state.product(sale.product_id) is None:
            log.warning("sale_dangling_product sale_id=%s product_id=%s", sale.id, sale.product_id)

        with self.uow_factory() as uow:
            uow.state = reconciliation.delete_sale(uow.state, sale_id)

        log.info("sale_deleted sale_id=%s product_id=%s qty=%s", sale.id, sale.product_id, sale.quantity)

    def get_sale(self, sale_id: str) -> Sale:
        s = self.store.state.sale(sale_id)
        if not s:
            raise NotFoundError("Sale not found.")
        return s

    def available_products(self) -> list[Product]:
        return [p for p in self.store.products if p.stock > 0]

    def list_sales(self, search: str = "", month: Optional[int] = None) -> list[Sale]:
        return [s for s in self.store.sales if matches_listing(s.product_name, search, s.date, month)]

    def sales_total(self, search: str = "", month: Optional[int] = None) -> float:
        return sum(s.total_price for s in self.list_sales(search, month))
