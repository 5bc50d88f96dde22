from datetime import datetime

import pytest

from stockflow.domain import reconciliation
from stockflow.domain.errors import (
    CategoryInUseError,
    InsufficientStockError,
    NotFoundError,
    ProductNotFoundError,
)
from stockflow.domain.models import Category, NewProductData, Product, Purchase, PurchaseType, Sale
from stockflow.domain.reconciliation import InventoryState

WHEN = datetime(2024, 5, 2, 9, 30)


def _state(stock: int = 5) -> InventoryState:
    return InventoryState(
        categories=(Category(id="c1", name="Tools", color="#111111"),),
        products=(
            Product(id="a", name="Hammer", description="", category_id="c1", stock=stock),
            Product(id="b", name="Saw", description="", category_id="c1", stock=1),
        ),
    )


def _purchase(pid: str, product_id: str, qty: int, kind: PurchaseType = PurchaseType.EXISTING, data=None) -> Purchase:
    return Purchase(
        id=pid,
        product_id=product_id,
        product_name="",
        quantity=qty,
        unit_price=2.0,
        total_price=qty * 2.0,
        date=WHEN,
        type=kind,
        new_product_data=data,
    )


def _sale(sid: str, product_id: str, qty: int, price: float = 10.0) -> Sale:
    return Sale(id=sid, product_id=product_id, product_name="Hammer", quantity=qty, unit_price=price, total_price=qty * price, date=WHEN)


def test_existing_purchase_adds_quantity_and_leaves_input_untouched():
    state = _state(5)
    new_state, stored = reconciliation.add_purchase(state, _purchase("p1", "a", 7))

    assert new_state.product("a").stock == 12
    assert new_state.product("b").stock == 1
    assert stored in new_state.purchases
    assert state.product("a").stock == 5
    assert state.purchases == ()


def test_new_purchase_creates_product_and_points_at_it():
    data = NewProductData(name="Widget", description="Blue", category_id="c1")
    state, stored = reconciliation.add_purchase(_state(), _purchase("p1", "", 20, PurchaseType.NEW, data), "w1")

    widget = state.product("w1")
    assert widget == Product(id="w1", name="Widget", description="Blue", category_id="c1", stock=20)
    assert stored.product_id == "w1"
    assert stored.product_name == "Widget"


def test_existing_purchase_for_unknown_product_fails():
    with pytest.raises(ProductNotFoundError):
        reconciliation.add_purchase(_state(), _purchase("p1", "ghost", 3))


def test_delete_existing_purchase_reverses_stock():
    state, _ = reconciliation.add_purchase(_state(5), _purchase("p1", "a", 7))
    state = reconciliation.delete_purchase(state, "p1")

    assert state.product("a").stock == 5
    assert state.purchases == ()


def test_delete_existing_purchase_clamps_at_zero():
    state, _ = reconciliation.add_purchase(_state(0), _purchase("p1", "a", 10))
    state = reconciliation.add_sale(state, _sale("s1", "a", 6))
    assert state.product("a").stock == 4

    state = reconciliation.delete_purchase(state, "p1")
    assert state.product("a").stock == 0


def test_delete_new_purchase_cascades_to_product_history():
    data = NewProductData(name="Widget", description="", category_id="c1")
    before = _state()
    state, _ = reconciliation.add_purchase(before, _purchase("p1", "", 20, PurchaseType.NEW, data), "w1")
    state, _ = reconciliation.add_purchase(state, _purchase("p2", "w1", 5))
    state = reconciliation.add_sale(state, _sale("s1", "w1", 3))

    state = reconciliation.delete_purchase(state, "p1")

    assert state.products == before.products
    assert state.purchases == ()
    assert state.sales == ()


def test_records_pointing_at_a_missing_product_are_still_removed():
    data = NewProductData(name="Widget", description="", category_id="c1")
    before = _state(5)
    state = InventoryState(
        categories=before.categories,
        products=before.products,
        purchases=(
            _purchase("p1", "ghost", 4),
            _purchase("p2", "gone", 3, PurchaseType.NEW, data),
        ),
        sales=(_sale("s1", "ghost", 2),),
    )

    state = reconciliation.delete_sale(state, "s1")
    state = reconciliation.delete_purchase(state, "p1")
    state = reconciliation.delete_purchase(state, "p2")

    assert state.sales == ()
    assert state.purchases == ()
    assert state.products == before.products


def test_delete_unknown_purchase_fails():
    with pytest.raises(NotFoundError):
        reconciliation.delete_purchase(_state(), "missing")


def test_sale_decrements_and_delete_restores():
    state = reconciliation.add_sale(_state(5), _sale("s1", "a", 3))
    assert state.product("a").stock == 2
    assert state.sale("s1").total_price == 30.0

    state = reconciliation.delete_sale(state, "s1")
    assert state.product("a").stock == 5
    assert state.sales == ()


def test_sale_may_take_entire_stock():
    state = reconciliation.add_sale(_state(5), _sale("s1", "a", 5))
    assert state.product("a").stock == 0


def test_sale_beyond_stock_fails():
    with pytest.raises(InsufficientStockError) as excinfo:
        reconciliation.add_sale(_state(5), _sale("s1", "a", 6))
    assert excinfo.value.available == 5
    assert excinfo.value.requested == 6


def test_sale_for_unknown_product_fails():
    with pytest.raises(ProductNotFoundError):
        reconciliation.add_sale(_state(), _sale("s1", "ghost", 1))


def test_delete_product_cascades_without_touching_other_products():
    state, _ = reconciliation.add_purchase(_state(5), _purchase("p1", "a", 2))
    state, _ = reconciliation.add_purchase(state, _purchase("p2", "b", 4))
    state = reconciliation.add_sale(state, _sale("s1", "a", 1))

    state = reconciliation.delete_product(state, "a")

    assert state.product("a") is None
    assert all(p.product_id != "a" for p in state.purchases)
    assert all(s.product_id != "a" for s in state.sales)
    assert state.product("b").stock == 5
    assert [p.id for p in state.purchases] == ["p2"]


def test_delete_category_in_use_fails_with_count():
    with pytest.raises(CategoryInUseError) as excinfo:
        reconciliation.delete_category(_state(), "c1")
    assert excinfo.value.product_count == 2


def test_delete_free_category():
    state = reconciliation.add_category(_state(), Category(id="c2", name="Garden", color="#222222"))
    state = reconciliation.delete_category(state, "c2")
    assert [c.id for c in state.categories] == ["c1"]
