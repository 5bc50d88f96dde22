from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from stockflow.ids import IdFactory, uuid_ids
from stockflow.repositories.entity_store import EntityStore
from stockflow.repositories.kv_store import SqliteKeyValueStore
from stockflow.services.auth_service import AuthService
from stockflow.services.inventory_service import InventoryService
from stockflow.services.purchase_service import PurchaseService
from stockflow.services.reporting_service import ReportingService, ReportPolicy
from stockflow.services.sales_service import SalesService


@dataclass(frozen=True)
class AppContainer:
    kv: SqliteKeyValueStore
    store: EntityStore
    inventory: InventoryService
    purchases: PurchaseService
    sales: SalesService
    reporting: ReportingService
    auth: AuthService


def build_container(db_path: Path | str, *, id_factory: IdFactory = uuid_ids, policy: ReportPolicy | None = None) -> AppContainer:
    kv = SqliteKeyValueStore(db_path)
    kv.init_db()
    store = EntityStore(kv)

    return AppContainer(
        kv=kv,
        store=store,
        inventory=InventoryService(store, id_factory=id_factory),
        purchases=PurchaseService(store, id_factory=id_factory),
        sales=SalesService(store, id_factory=id_factory),
        reporting=ReportingService(store, policy=policy),
        auth=AuthService(store, id_factory=id_factory),
    )
