from datetime import datetime
from pathlib import Path

import pytest
from conftest import build_services

from stockflow.domain.errors import CategoryInUseError, NotFoundError, ProductNotFoundError, ValidationError


def test_add_product_defaults_to_zero_stock(tmp_path: Path):
    s = build_services(tmp_path)

    product = s["inventory"].add_product("  Lamp ", " Desk lamp ", "1")

    assert product.name == "Lamp"
    assert product.description == "Desk lamp"
    assert product.stock == 0


def test_add_product_rejects_blank_name_and_negative_stock(tmp_path: Path):
    s = build_services(tmp_path)

    with pytest.raises(ValidationError):
        s["inventory"].add_product("", "", "1")
    with pytest.raises(ValidationError):
        s["inventory"].add_product("Lamp", "", "1", stock=-1)


def test_edit_keeps_stock_and_history_snapshots(tmp_path: Path):
    s = build_services(tmp_path)
    pid = s["inventory"].add_product("Lamp", "", "1").id
    s["purchases"].create_purchase(4, 2.0, product_id=pid)
    s["sales"].create_sale(pid, 1, 5.0)

    edited = s["inventory"].update_product(pid, "Desk Lamp", "LED", "3")

    assert edited.stock == 3
    assert edited.category_id == "3"
    assert s["purchases"].list_purchases()[0].product_name == "Lamp"
    assert s["sales"].list_sales()[0].product_name == "Lamp"


def test_edit_unknown_product_fails(tmp_path: Path):
    s = build_services(tmp_path)

    with pytest.raises(ProductNotFoundError):
        s["inventory"].update_product("ghost", "X", "", "1")


def test_delete_product_removes_its_purchases_and_sales(tmp_path: Path):
    s = build_services(tmp_path)
    lamp = s["inventory"].add_product("Lamp", "", "1").id
    chair = s["inventory"].add_product("Chair", "", "3").id
    s["purchases"].create_purchase(5, 2.0, product_id=lamp)
    s["purchases"].create_purchase(5, 9.0, product_id=chair)
    s["sales"].create_sale(lamp, 2, 4.0, date=datetime(2024, 6, 2))
    s["sales"].create_sale(chair, 1, 20.0)

    s["inventory"].delete_product(lamp)

    assert [p.id for p in s["inventory"].list_products()] == [chair]
    assert all(p.product_id != lamp for p in s["purchases"].list_purchases())
    assert all(x.product_id != lamp for x in s["sales"].list_sales())
    assert s["inventory"].get_product(chair).stock == 4


def test_delete_unknown_product_fails(tmp_path: Path):
    s = build_services(tmp_path)

    with pytest.raises(ProductNotFoundError):
        s["inventory"].delete_product("ghost")


def test_product_search_and_category_filter(tmp_path: Path):
    s = build_services(tmp_path)
    s["inventory"].add_product("Lamp", "warm light", "1")
    s["inventory"].add_product("Chair", "oak", "3")
    s["inventory"].add_product("Table", "oak top", "3")

    assert [p.name for p in s["inventory"].list_products(search="OAK")] == ["Chair", "Table"]
    assert [p.name for p in s["inventory"].list_products(search="light")] == ["Lamp"]
    assert [p.name for p in s["inventory"].list_products(category_id="3", search="top")] == ["Table"]


def test_category_delete_is_blocked_while_products_reference_it(tmp_path: Path):
    s = build_services(tmp_path)
    category = s["inventory"].add_category("Garden", "#10B981")
    pid = s["inventory"].add_product("Rake", "", category.id).id

    with pytest.raises(CategoryInUseError, match="1 product"):
        s["inventory"].delete_category(category.id)
    assert len(s["inventory"].products_in_category(category.id)) == 1

    s["inventory"].delete_product(pid)
    s["inventory"].delete_category(category.id)

    with pytest.raises(NotFoundError):
        s["inventory"].get_category(category.id)


def test_delete_unknown_category_fails(tmp_path: Path):
    s = build_services(tmp_path)

    with pytest.raises(NotFoundError):
        s["inventory"].delete_category("ghost")


def test_add_category_requires_name(tmp_path: Path):
    s = build_services(tmp_path)

    with pytest.raises(ValidationError):
        s["inventory"].add_category("  ")
    assert s["inventory"].add_category("Toys", "").color == "#8B5CF6"
