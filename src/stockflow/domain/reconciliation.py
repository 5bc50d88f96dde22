"""Stock reconciliation rules.

Every function takes an :class:`InventoryState` and returns a new one; the
input is never mutated. Callers own id generation, validation of user input
and persistence. What lives here is only the bookkeeping that keeps
``Product.stock`` consistent with purchases and sales, and the cascades
triggered by deletes.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from stockflow.domain.errors import (
    CategoryInUseError,
    InsufficientStockError,
    NotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from stockflow.domain.models import Category, Product, Purchase, PurchaseType, Sale


@dataclass(frozen=True)
class InventoryState:
    categories: tuple[Category, ...] = ()
    products: tuple[Product, ...] = ()
    purchases: tuple[Purchase, ...] = ()
    sales: tuple[Sale, ...] = ()

    def product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def category(self, category_id: str) -> Optional[Category]:
        return next((c for c in self.categories if c.id == category_id), None)

    def purchase(self, purchase_id: str) -> Optional[Purchase]:
        return next((p for p in self.purchases if p.id == purchase_id), None)

    def sale(self, sale_id: str) -> Optional[Sale]:
        return next((s for s in self.sales if s.id == sale_id), None)


def _adjust_stock(products: tuple[Product, ...], product_id: str, delta: int, *, floor: Optional[int] = None) -> tuple[Product, ...]:
    out = []
    for p in products:
        if p.id == product_id:
            new_stock = p.stock + delta
            if floor is not None:
                new_stock = max(floor, new_stock)
            p = replace(p, stock=new_stock)
        out.append(p)
    return tuple(out)


def add_product(state: InventoryState, product: Product) -> InventoryState:
    return replace(state, products=state.products + (product,))


def edit_product(state: InventoryState, product_id: str, name: str, description: str, category_id: str) -> InventoryState:
    if state.product(product_id) is None:
        raise ProductNotFoundError(product_id)
    products = tuple(
        replace(p, name=name, description=description, category_id=category_id) if p.id == product_id else p
        for p in state.products
    )
    return replace(state, products=products)


def delete_product(state: InventoryState, product_id: str) -> InventoryState:
    """Remove a product together with every purchase and sale referencing it.

    This is a direct cascade: no per-record stock reversal runs, so no other
    product's stock can change.
    """
    if state.product(product_id) is None:
        raise ProductNotFoundError(product_id)
    return replace(
        state,
        products=tuple(p for p in state.products if p.id != product_id),
        purchases=tuple(p for p in state.purchases if p.product_id != product_id),
        sales=tuple(s for s in state.sales if s.product_id != product_id),
    )


def add_category(state: InventoryState, category: Category) -> InventoryState:
    return replace(state, categories=state.categories + (category,))


def delete_category(state: InventoryState, category_id: str) -> InventoryState:
    category = state.category(category_id)
    if category is None:
        raise NotFoundError(f"Category not found: {category_id}")
    in_use = sum(1 for p in state.products if p.category_id == category_id)
    if in_use:
        raise CategoryInUseError(category.name, in_use)
    return replace(state, categories=tuple(c for c in state.categories if c.id != category_id))


def add_purchase(state: InventoryState, purchase: Purchase, new_product_id: Optional[str] = None) -> tuple[InventoryState, Purchase]:
    """Record a purchase and apply its stock effect.

    A ``new`` purchase creates its product with ``stock = quantity`` under
    ``new_product_id`` and is stored pointing at it. An ``existing`` purchase
    increments the referenced product's stock.

    Returns the new state and the purchase as stored.
    """
    if purchase.type is PurchaseType.NEW:
        data = purchase.new_product_data
        if data is None:
            raise ValidationError("New-product purchase requires product data.")
        if not new_product_id:
            raise ValidationError("New-product purchase requires an id for the created product.")
        product = Product(
            id=new_product_id,
            name=data.name,
            description=data.description,
            category_id=data.category_id,
            stock=purchase.quantity,
        )
        stored = replace(purchase, product_id=product.id, product_name=product.name)
        return (
            replace(state, products=state.products + (product,), purchases=state.purchases + (stored,)),
            stored,
        )

    if state.product(purchase.product_id) is None:
        raise ProductNotFoundError(purchase.product_id)
    products = _adjust_stock(state.products, purchase.product_id, purchase.quantity)
    return replace(state, products=products, purchases=state.purchases + (purchase,)), purchase


def delete_purchase(state: InventoryState, purchase_id: str) -> InventoryState:
    """Remove a purchase and reverse its stock effect.

    Existing-product purchases give their quantity back, floored at zero.
    New-product purchases take their product down with them, cascading to
    every purchase and sale of that product.
    """
    purchase = state.purchase(purchase_id)
    if purchase is None:
        raise NotFoundError(f"Purchase not found: {purchase_id}")

    if purchase.type is PurchaseType.EXISTING:
        state = replace(state, products=_adjust_stock(state.products, purchase.product_id, -purchase.quantity, floor=0))
    elif state.product(purchase.product_id) is not None:
        state = delete_product(state, purchase.product_id)

    return replace(state, purchases=tuple(p for p in state.purchases if p.id != purchase_id))


def add_sale(state: InventoryState, sale: Sale) -> InventoryState:
    product = state.product(sale.product_id)
    if product is None:
        raise ProductNotFoundError(sale.product_id)
    if sale.quantity > product.stock:
        raise InsufficientStockError(product.name, sale.quantity, product.stock)
    products = _adjust_stock(state.products, sale.product_id, -sale.quantity)
    return replace(state, products=products, sales=state.sales + (sale,))


def delete_sale(state: InventoryState, sale_id: str) -> InventoryState:
    sale = state.sale(sale_id)
    if sale is None:
        raise NotFoundError(f"Sale not found: {sale_id}")
    products = _adjust_stock(state.products, sale.product_id, sale.quantity)
    return replace(state, products=products, sales=tuple(s for s in state.sales if s.id != sale_id))
