# -*- coding: utf-8 -*-
"""
================================================================================
Order Placement Workflow
================================================================================
Purpose:
----------------
This module places a customer's order for a product at a nearby store, and
lists a customer's most recent orders.

An order goes through a fixed series of checks. The first one that fails
raises its own exception type and nothing is written to the database.

Key Steps:
1.  **Quantity**: the requested amount must be a positive whole number.
2.  **Customer**: the customer's coordinates are looked up by id.
3.  **Store**: the store's coordinates are looked up by id.
4.  **Distance**: the store may be at most 30 miles away. A store exactly 30
    miles away is accepted here, although the store listing (which uses a
    strict "closer than" test) does not show it.
5.  **Product**: the product must be stocked by that store.
6.  **Stock**: the store must have units left, and at least as many as
    requested.
7.  **Order Number**: the next number is taken from the allocator.
8.  **Persist**: a row is inserted into `Orders` with the current time.

Placing an order does not change `Product.numberOfUnits`.
----------------
"""

# =====================================================================================
# --- Imports ---
# =====================================================================================
import logging
from dataclasses import dataclass
from datetime import datetime

from common.errors import (
    ValidationError,
    ProductNotFound,
    StoreTooFar,
    OutOfStock,
    InsufficientStock,
)
from stores.geo import calculate_distance, DEFAULT_RADIUS_MILES
from stores.locator import get_user_location, get_store_location

logger = logging.getLogger(__name__)

RECENT_ORDERS_LIMIT = 5


@dataclass(frozen=True)
class OrderReceipt:
    order_number: int
    customer_id: int
    store_id: int
    product_name: str
    units_ordered: int
    order_time: datetime


@dataclass(frozen=True)
class RecentOrder:
    store_id: int
    product_name: str
    units_ordered: int
    order_time: str


# =====================================================================================
# --- Validation Helpers ---
# =====================================================================================

def parse_positive_int(field, value):
    """
    Converts user input to an int greater than zero.

    Raises:
        ValidationError: If the value is not a whole number or is not positive.
    """
    if isinstance(value, bool):
        raise ValidationError(field, value, "must be a whole number")
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(field, value, "must be a whole number")
    if number <= 0:
        raise ValidationError(field, value, "must be greater than zero")
    return number


def get_available_units(gateway, store_id, product_name):
    """
    Returns the number of units a store has of a product.

    Raises:
        ProductNotFound: If the store does not stock the product.
    """
    row = gateway.fetch_one(
        "SELECT numberOfUnits FROM Product WHERE storeID = %s AND productName = %s;",
        (store_id, product_name)
    )
    if row is None:
        raise ProductNotFound(store_id, product_name)
    return int(row[0])


# =====================================================================================
# --- Core Workflow ---
# =====================================================================================

def check_store_distance(gateway, user_id, store_id, max_distance=DEFAULT_RADIUS_MILES):
    """
    Verifies the customer and store exist and that the store is close enough.

    Returns:
        float: The distance between the customer and the store.
    """
    user = get_user_location(gateway, user_id)
    store = get_store_location(gateway, store_id)
    distance = calculate_distance(store.latitude, store.longitude, user.latitude, user.longitude)
    if distance > max_distance:
        raise StoreTooFar(store_id, distance, max_distance)
    return distance


def check_stock(gateway, store_id, product_name, quantity):
    """
    Verifies the store stocks the product and has enough units.

    Returns:
        int: The number of units available.
    """
    available = get_available_units(gateway, store_id, product_name)
    if available == 0:
        raise OutOfStock(store_id, product_name)
    if quantity > available:
        raise InsufficientStock(store_id, product_name, quantity, available)
    return available


def place_order(gateway, allocator, user_id, store_id, product_name, quantity,
                order_time=None, max_distance=DEFAULT_RADIUS_MILES):
    """
    Runs every order check and records the order.

    Args:
        gateway: The session's DataGateway.
        allocator: Object with a `next_order_number()` method.
        user_id (int): The customer placing the order.
        store_id (int): The store to buy from.
        product_name (str): The product to buy.
        quantity (int): The number of units to buy.
        order_time (datetime, optional): Defaults to now.
        max_distance (float, optional): Farthest allowed store distance.

    Returns:
        OrderReceipt: The number and contents of the new order.
    """
    quantity = parse_positive_int("quantity", quantity)

    distance = check_store_distance(gateway, user_id, store_id, max_distance)
    check_stock(gateway, store_id, product_name, quantity)

    order_number = allocator.next_order_number()
    order_time = order_time or datetime.now()

    gateway.execute_update(
        """
        INSERT INTO Orders (orderNumber, customerID, storeID, productName, unitsOrdered, orderTime)
        VALUES (%s, %s, %s, %s, %s, %s);
        """,
        (order_number, user_id, store_id, product_name, quantity, order_time)
    )
    logger.info(
        "Order %s placed: user %s, store %s (%.2f miles), %s x %s.",
        order_number, user_id, store_id, distance, quantity, product_name
    )
    return OrderReceipt(order_number, user_id, store_id, product_name, quantity, order_time)


def get_recent_orders(gateway, user_id, limit=RECENT_ORDERS_LIMIT):
    """Returns a customer's latest orders, newest first."""
    rows = gateway.execute_query_and_return_result(
        """
        SELECT storeID, productName, unitsOrdered, orderTime
        FROM Orders
        WHERE customerID = %s
        ORDER BY orderTime DESC
        LIMIT %s;
        """,
        (user_id, limit)
    )
    return [
        RecentOrder(int(store_id), product_name.strip(), int(units), order_time)
        for store_id, product_name, units, order_time in rows
    ]
