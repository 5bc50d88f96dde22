class AppError(Exception):
    """Base app error."""


class ValidationError(AppError):
    pass


class NotFoundError(AppError):
    pass


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: str):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class InsufficientStockError(AppError):
    def __init__(self, product_name: str, requested: int, available: int):
        super().__init__(f"Not enough stock for {product_name}. Available: {available}, requested: {requested}")
        self.requested = requested
        self.available = available


class CategoryInUseError(AppError):
    def __init__(self, category_name: str, product_count: int):
        super().__init__(
            f"Category '{category_name}' cannot be deleted: {product_count} product(s) still reference it."
        )
        self.product_count = product_count


class AuthorizationError(AppError):
    pass
