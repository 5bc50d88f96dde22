from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from stockflow.domain import reconciliation
from stockflow.domain.errors import NotFoundError, ValidationError
from stockflow.domain.models import NewProductData, Purchase, PurchaseType
from stockflow.domain.reports import matches_listing
from stockflow.ids import IdFactory, uuid_ids
from stockflow.repositories.entity_store import EntityStore
from stockflow.repositories.unit_of_work import StoreUnitOfWork, UnitOfWork
from stockflow.services.inputs import now, parse_int, parse_price

log = logging.getLogger("stockflow.purchases")


class PurchaseService:
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

    def create_purchase(
        self,
        quantity: int,
        unit_price: float,
        product_id: Optional[str] = None,
        new_product: Optional[NewProductData] = None,
        date: Optional[datetime] = None,
    ) -> Purchase:
        """
        Exactly one of product_id (restock an existing product) or
        new_product (create the product from this purchase) must be given.
        """
        qty = parse_int(quantity, "Qty")
        price = parse_price(unit_price)
        if (product_id is None) == (new_product is None):
            raise ValidationError("Give either an existing product or new product data.")

        if new_product is not None:
            name = (new_product.name or "").strip()
            if not name:
                raise ValidationError("Product name is required.")
            new_product = NewProductData(
                name=name,
                description=(new_product.description or "").strip(),
                category_id=new_product.category_id,
            )
            purchase = Purchase(
                id=self.new_id(),
                product_id="",
                product_name=name,
                quantity=qty,
                unit_price=price,
                total_price=qty * price,
                date=date or self.clock(),
                type=PurchaseType.NEW,
                new_product_data=new_product,
            )
            new_product_id = self.new_id()
        else:
            product = self.store.state.product(product_id)
            purchase = Purchase(
                id=self.new_id(),
                product_id=product_id,
                product_name=product.name if product else "",
                quantity=qty,
                unit_price=price,
                total_price=qty * price,
                date=date or self.clock(),
                type=PurchaseType.EXISTING,
            )
            new_product_id = None

        with self.uow_factory() as uow:
            uow.state, stored = reconciliation.add_purchase(uow.state, purchase, new_product_id)

        log.info(
            "purchase_created purchase_id=%s type=%s product_id=%s qty=%s total=%.2f",
            stored.id, stored.type.value, stored.product_id, stored.quantity, stored.total_price,
        )
        return stored

    def delete_purchase(self, purchase_id: str) -> None:
        purchase = self.get_purchase(purchase_id)
        if purchase.type is PurchaseType.EXISTING and self.store.state.product(purchase.product_id) is None:
            log.warning("purchase_dangling_product purchase_id=%s product_id=%s", purchase.id, purchase.product_id)

        with self.uow_factory() as uow:
            uow.state = reconciliation.delete_purchase(uow.state, purchase_id)

        log.info(
            "purchase_deleted purchase_id=%s type=%s product_id=%s qty=%s",
            purchase.id, purchase.type.value, purchase.product_id, purchase.quantity,
        )

    def get_purchase(self, purchase_id: str) -> Purchase:
        p = self.store.state.purchase(purchase_id)
        if not p:
            raise NotFoundError("Purchase not found.")
        return p

    def list_purchases(self, search: str = "", month: Optional[int] = None) -> list[Purchase]:
        return [p for p in self.store.purchases if matches_listing(p.product_name, search, p.date, month)]

    def purchases_total(self, search: str = "", month: Optional[int] = None) -> float:
        return sum(p.total_price for p in self.list_purchases(search, month))
