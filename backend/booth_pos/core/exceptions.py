"""
Error taxonomy for the sales core

ValidationError subclasses are user-fixable and are always raised before
anything is written. StorageFailure means the database could not complete
a read or an atomic write; nothing partial is ever left visible.
"""


class PosError(Exception):
    """Base class for every error raised by the sales core"""

    code = "pos_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class ValidationError(PosError):
    """Rejected input; the cart and the store are unchanged"""

    code = "validation_error"


class EmptyOrder(ValidationError):
    code = "empty_order"


class InsufficientCash(ValidationError):
    code = "insufficient_cash"

    def __init__(self, total: int, cash_received=None):
        self.total = total
        self.cash_received = cash_received
        if cash_received is None:
            message = f"Cash payment requires cash_received (total {total})"
        else:
            message = f"Cash received {cash_received} is less than total {total}"
        super().__init__(message)


class InvalidPaymentMethod(ValidationError):
    code = "invalid_payment_method"

    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown payment method: {value!r}")


class UnavailableProduct(ValidationError):
    code = "unavailable_product"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} is not available for sale")


class UnknownProduct(ValidationError):
    code = "unknown_product"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} is not in the cart or catalog")


class InvalidLine(ValidationError):
    code = "invalid_line"


class LineTotalExceeded(ValidationError):
    code = "line_total_exceeded"

    def __init__(self, product_id: str, line_total: int, ceiling: int):
        self.product_id = product_id
        self.line_total = line_total
        self.ceiling = ceiling
        super().__init__(
            f"Line total {line_total} for product {product_id} exceeds ceiling {ceiling}"
        )


class MoneyOverflow(ValidationError):
    code = "money_overflow"


class StorageFailure(PosError):
    """I/O or atomic-write failure in the persistence layer"""

    code = "storage_failure"


class NotFound(PosError):
    code = "not_found"
