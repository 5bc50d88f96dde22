import sys
from datetime import date, datetime
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def build_services(tmp_path: Path, name: str = "stockflow.db", today: date = date(2024, 6, 15)):
    from stockflow.ids import SequentialIds
    from stockflow.repositories.entity_store import EntityStore
    from stockflow.repositories.kv_store import SqliteKeyValueStore
    from stockflow.services.inventory_service import InventoryService
    from stockflow.services.purchase_service import PurchaseService
    from stockflow.services.reporting_service import ReportingService
    from stockflow.services.sales_service import SalesService

    kv = SqliteKeyValueStore(tmp_path / name)
    kv.init_db()
    store = EntityStore(kv)
    ids = SequentialIds("id-")
    clock = lambda: datetime(today.year, today.month, today.day, 12, 0, 0)  # noqa: E731

    return {
        "kv": kv,
        "store": store,
        "inventory": InventoryService(store, id_factory=ids),
        "purchases": PurchaseService(store, id_factory=ids, clock=clock),
        "sales": SalesService(store, id_factory=ids, clock=clock),
        "reporting": ReportingService(store, today=lambda: today),
    }
