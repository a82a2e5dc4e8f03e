# -*- coding: utf-8 -*-
"""
Exception types raised by the store application.

Every failure that the interactive menu can recover from derives from
`StoreAppError`, so the menu catches that one base class, prints the message
and returns to the prompt. The attributes on each subclass carry the values
that caused the failure.
"""


class StoreAppError(Exception):
    """Base class for all recoverable application errors."""


class DataAccessError(StoreAppError):
    """A query or update could not be executed against the database."""


class ValidationError(StoreAppError):
    """Caller supplied malformed or out-of-range input."""

    def __init__(self, field, value, reason):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} '{value}': {reason}")


class PermissionDenied(StoreAppError):
    """The logged in user may not perform the requested operation."""


class NotFoundError(StoreAppError):
    """A lookup by identifier returned no rows."""

    def __init__(self, entity, identifier, message=None):
        self.entity = entity
        self.identifier = identifier
        super().__init__(message or f"{entity} {identifier} not found.")


class StoreNotFound(NotFoundError):
    def __init__(self, store_id):
        self.store_id = store_id
        super().__init__("Store", store_id)


class ProductNotFound(NotFoundError):
    def __init__(self, store_id, product_name):
        self.store_id = store_id
        self.product_name = product_name
        super().__init__(
            "Product", product_name,
            message=f"Product {product_name} not found at Store {store_id}."
        )


class StoreTooFar(StoreAppError):
    def __init__(self, store_id, distance, limit):
        self.store_id = store_id
        self.distance = distance
        self.limit = limit
        super().__init__(
            f"Store {store_id} too far from current location "
            f"({distance:.2f} miles, limit {limit} miles)."
        )


class OutOfStock(StoreAppError):
    def __init__(self, store_id, product_name):
        self.store_id = store_id
        self.product_name = product_name
        super().__init__(f"Product {product_name} out of stock at Store {store_id}.")


class InsufficientStock(StoreAppError):
    def __init__(self, store_id, product_name, requested, available):
        self.store_id = store_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough units available: requested {requested}, "
            f"only {available} of {product_name} at Store {store_id}."
        )
