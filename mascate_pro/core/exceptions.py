"""
Domain errors raised by the services and translated to HTTP responses in main.py
"""


class MascateError(Exception):
    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(MascateError):
    status_code = 400
    default_detail = "Invalid request"


class InvalidQuantityError(ValidationError):
    default_detail = "Quantity must be a positive integer"


class InsufficientStockError(MascateError):
    status_code = 400
    default_detail = "Insufficient stock"

    def __init__(self, product_name: str, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product {product_name}: "
            f"{available} available, {requested} requested"
        )


class AuthenticationError(MascateError):
    status_code = 401
    default_detail = "Invalid email or password"


class ForbiddenError(MascateError):
    status_code = 403
    default_detail = "Permission denied"


class NotFoundError(MascateError):
    status_code = 404
    default_detail = "Resource not found"


class DuplicateNameError(MascateError):
    status_code = 409
    default_detail = "Name already in use"


class CategoryInUseError(MascateError):
    status_code = 409
    default_detail = "Category is used by active products"


class StaleStockError(MascateError):
    status_code = 409

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Stock changed since it was read: expected {expected}, current {actual}"
        )
