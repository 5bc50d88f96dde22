from .inventory_service import InventoryService
from .sales_service import SalesService
from .purchase_service import PurchaseService
from .reporting_service import ReportingService, ReportPolicy
from .auth_service import AuthService

__all__ = [
    "InventoryService",
    "SalesService",
    "PurchaseService",
    "ReportingService",
    "ReportPolicy",
    "AuthService",
]
