from .models import Category, Product, Purchase, PurchaseType, NewProductData, Sale, User
from .errors import (
    AppError,
    ValidationError,
    NotFoundError,
    ProductNotFoundError,
    InsufficientStockError,
    CategoryInUseError,
    AuthorizationError,
)

__all__ = [
    "Category",
    "Product",
    "Purchase",
    "PurchaseType",
    "NewProductData",
    "Sale",
    "User",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "ProductNotFoundError",
    "InsufficientStockError",
    "CategoryInUseError",
    "AuthorizationError",
]
