import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation

from common.errors import ValidationError, PermissionDenied, ProductNotFound, NotFoundError
from users.accounts import require_manager
from order_management.workflow import parse_positive_int

logger = logging.getLogger(__name__)

# Product.pricePerUnit is DECIMAL(6,2).
MAX_PRICE_PER_UNIT = Decimal('9999.99')

# =====================================================================================
# --- Inventory Database Functions ---
# =====================================================================================


@dataclass(frozen=True)
class ProductListing:
    product_name: str
    number_of_units: int
    price_per_unit: Decimal


def parse_non_negative_int(field, value):
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(field, value, "must be a whole number")
    if number < 0:
        raise ValidationError(field, value, "must not be negative")
    return number


def parse_price(field, value):
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, TypeError):
        raise ValidationError(field, value, "must be a number")
    if not price.is_finite() or price < 0:
        raise ValidationError(field, value, "must not be negative")
    if price > MAX_PRICE_PER_UNIT:
        raise ValidationError(field, value, f"must not exceed {MAX_PRICE_PER_UNIT}")
    return price.quantize(Decimal('0.01'))


def list_products(gateway, store_id):
    """
    Retrieves every product a store carries.

    Args:
        gateway: An active DataGateway.
        store_id (int): The store to list.

    Returns:
        list[ProductListing]: Possibly empty.
    """
    rows = gateway.execute_query_and_return_result(
        "SELECT productName, numberOfUnits, pricePerUnit FROM Product WHERE storeID = %s;",
        (store_id,)
    )
    return [
        ProductListing(name.strip(), int(units), Decimal(price))
        for name, units, price in rows
    ]


def get_managed_store_ids(gateway, manager_id):
    """Returns the ids of the stores a manager runs."""
    rows = gateway.execute_query_and_return_result(
        "SELECT storeID FROM Store WHERE managerID = %s ORDER BY storeID;",
        (manager_id,)
    )
    return [int(row[0]) for row in rows]


def require_store_manager(gateway, session, store_id):
    """
    Raises PermissionDenied unless the session belongs to the manager of
    `store_id`.
    """
    require_manager(session)
    if store_id not in get_managed_store_ids(gateway, session.user_id):
        raise PermissionDenied(f"You do not manage Store {store_id}.")


def update_product(gateway, session, store_id, product_name, number_of_units, price_per_unit):
    """
    Changes a product's stock and price and records the change in
    ProductUpdates. Both statements are committed together.

    Raises:
        PermissionDenied: If the user does not manage the store.
        ValidationError: If units or price are malformed or negative.
        ProductNotFound: If the store does not carry the product.
    """
    number_of_units = parse_non_negative_int("number of units", number_of_units)
    price_per_unit = parse_price("price per unit", price_per_unit)
    require_store_manager(gateway, session, store_id)

    with gateway.transaction():
        updated = gateway.execute_update(
            "UPDATE Product SET numberOfUnits = %s, pricePerUnit = %s WHERE storeID = %s AND productName = %s;",
            (number_of_units, price_per_unit, store_id, product_name)
        )
        if updated == 0:
            raise ProductNotFound(store_id, product_name)
        gateway.execute_update(
            "INSERT INTO ProductUpdates (managerID, storeID, productName, updatedOn) VALUES (%s, %s, %s, %s);",
            (session.user_id, store_id, product_name, datetime.now())
        )
    logger.info(
        "Manager %s updated %s at store %s: %s units at %s.",
        session.user_id, product_name, store_id, number_of_units, price_per_unit
    )


def warehouse_exists(gateway, warehouse_id):
    return gateway.fetch_one(
        "SELECT warehouseID FROM Warehouse WHERE warehouseID = %s;",
        (warehouse_id,)
    ) is not None


def place_supply_request(gateway, session, store_id, warehouse_id, product_name, units_requested):
    """
    Requests more units of a product from a warehouse and adds them to the
    store's stock.

    Returns:
        int: The new request number.
    """
    units_requested = parse_positive_int("units requested", units_requested)
    require_store_manager(gateway, session, store_id)
    if not warehouse_exists(gateway, warehouse_id):
        raise NotFoundError("Warehouse", warehouse_id)

    with gateway.transaction():
        updated = gateway.execute_update(
            "UPDATE Product SET numberOfUnits = numberOfUnits + %s WHERE storeID = %s AND productName = %s;",
            (units_requested, store_id, product_name)
        )
        if updated == 0:
            raise ProductNotFound(store_id, product_name)
        row = gateway.fetch_one(
            """
            INSERT INTO ProductSupplyRequests (managerID, warehouseID, storeID, productName, unitsRequested)
            VALUES (%s, %s, %s, %s, %s) RETURNING requestNumber;
            """,
            (session.user_id, warehouse_id, store_id, product_name, units_requested)
        )
    request_number = int(row[0])
    logger.info(
        "Supply request %s: %s x %s from warehouse %s to store %s.",
        request_number, units_requested, product_name, warehouse_id, store_id
    )
    return request_number
