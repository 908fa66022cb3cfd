# storefront/domain/errors.py
from uuid import UUID


class NotFound(LookupError):
    pass


class PersistenceError(RuntimeError):
    """Backend read/write failed, the operation was not applied."""


class DuplicateEntry(Exception):
    """Unique (owner, product_id) constraint hit on insert."""

    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} already stored")
        self.product_id = product_id


class InvalidTransition(ValueError):
    pass


class PaymentDeclined(Exception):
    def __init__(self, order_id: UUID, reason: str):
        super().__init__(reason)
        self.order_id = order_id
        self.reason = reason


class PaymentGatewayError(RuntimeError):
    pass
