from pathlib import Path

import pytest

from stockflow import main as cli
from stockflow.application.container import build_container
from stockflow.config import AppPaths
from stockflow.domain.errors import AuthorizationError
from stockflow.domain.models import NewProductData
from stockflow.ids import SequentialIds


def test_login_derives_name_from_email_and_persists(tmp_path: Path):
    db = tmp_path / "auth.db"
    container = build_container(db, id_factory=SequentialIds("u"))

    user = container.auth.login("maria@example.com", "secret")

    assert user.name == "maria"
    assert build_container(db).auth.current_user() == user


def test_register_requires_name(tmp_path: Path):
    container = build_container(tmp_path / "auth.db")

    with pytest.raises(AuthorizationError):
        container.auth.register("", "a@b.c", "pw")
    assert container.auth.register("Ana", "a@b.c", "pw").name == "Ana"


def test_login_requires_email_and_password(tmp_path: Path):
    container = build_container(tmp_path / "auth.db")

    with pytest.raises(AuthorizationError):
        container.auth.login("a@b.c", "")
    with pytest.raises(AuthorizationError):
        container.auth.login(" ", "pw")


def test_logout_clears_stored_user(tmp_path: Path):
    db = tmp_path / "auth.db"
    container = build_container(db)
    container.auth.login("a@b.c", "pw")

    container.auth.logout()

    assert container.auth.current_user() is None
    assert build_container(db).auth.current_user() is None


def test_container_services_share_one_store(tmp_path: Path):
    container = build_container(tmp_path / "shared.db")

    purchase = container.purchases.create_purchase(12, 1.5, new_product=NewProductData("Bolt", "M6", "1"))
    container.sales.create_sale(purchase.product_id, 2, 3.0)

    assert container.inventory.get_product(purchase.product_id).stock == 10
    assert container.reporting.dashboard().total_products == 1


def test_main_prints_snapshot_and_exports(tmp_path: Path, monkeypatch, capsys):
    logs = tmp_path / "logs"
    monkeypatch.setattr(cli, "get_app_paths", lambda: AppPaths(base_dir=tmp_path, db_path=tmp_path / "app.db", logs_dir=logs))
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)

    seeded = build_container(tmp_path / "app.db")
    p = seeded.purchases.create_purchase(5, 2.0, new_product=NewProductData("Cable", "", "1"))
    seeded.sales.create_sale(p.product_id, 1, 4.0)

    export = tmp_path / "out.xlsx"
    assert cli.main(["--months", "2", "--export", str(export)]) == 0

    out = capsys.readouterr().out
    assert "Products: 1" in out
    assert "Cable" in out
    assert export.exists()


def test_main_reports_bad_arguments_without_traceback(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.setattr(cli, "get_app_paths", lambda: AppPaths(base_dir=tmp_path, db_path=tmp_path / "app.db", logs_dir=tmp_path / "logs"))
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)

    assert cli.main(["--months", "0"]) == 2

    err = capsys.readouterr().err
    assert "Months must be >= 1." in err
    assert "Traceback" not in err
