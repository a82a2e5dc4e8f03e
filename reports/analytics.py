# -*- coding: utf-8 -*-
"""
================================================================================
Manager Reports
================================================================================
Purpose:
----------------
Sales and inventory reports for store managers. Each report only covers the
stores the logged in manager runs; customers are refused with
`PermissionDenied`.

Reports:
- `get_recent_product_updates`: the latest changes to product stock/price.
- `get_popular_products`: the products ordered most often.
- `get_popular_customers`: the customers who ordered most often at one store.
----------------
"""

import logging
from dataclasses import dataclass

from users.accounts import require_manager
from inventory.db_utils import get_managed_store_ids, require_store_manager

logger = logging.getLogger(__name__)

REPORT_LIMIT = 5


@dataclass(frozen=True)
class ProductUpdate:
    update_number: int
    manager_id: int
    store_id: int
    product_name: str
    updated_on: str


@dataclass(frozen=True)
class PopularProduct:
    product_name: str
    order_count: int


@dataclass(frozen=True)
class PopularCustomer:
    customer_id: int
    name: str
    order_count: int


def get_recent_product_updates(gateway, session, limit=REPORT_LIMIT):
    """Returns the latest product updates at the manager's stores, newest first."""
    require_manager(session)
    store_ids = get_managed_store_ids(gateway, session.user_id)
    if not store_ids:
        return []
    # psycopg2 adapts a Python list to an ARRAY literal.
    rows = gateway.execute_query_and_return_result(
        """
        SELECT updateNumber, managerID, storeID, productName, updatedOn
        FROM ProductUpdates
        WHERE storeID = ANY(%s)
        ORDER BY updatedOn DESC, updateNumber DESC
        LIMIT %s;
        """,
        (store_ids, limit)
    )
    return [
        ProductUpdate(int(number), int(manager_id), int(store_id), product_name.strip(), updated_on)
        for number, manager_id, store_id, product_name, updated_on in rows
    ]


def get_popular_products(gateway, session, limit=REPORT_LIMIT):
    """Returns the products with the most orders across the manager's stores."""
    require_manager(session)
    store_ids = get_managed_store_ids(gateway, session.user_id)
    if not store_ids:
        return []
    rows = gateway.execute_query_and_return_result(
        """
        SELECT productName, COUNT(orderNumber) AS orderCount
        FROM Orders
        WHERE storeID = ANY(%s)
        GROUP BY productName
        ORDER BY orderCount DESC, productName
        LIMIT %s;
        """,
        (store_ids, limit)
    )
    return [PopularProduct(name.strip(), int(count)) for name, count in rows]


def get_popular_customers(gateway, session, store_id, limit=REPORT_LIMIT):
    """Returns the customers with the most orders at one of the manager's stores."""
    require_store_manager(gateway, session, store_id)
    rows = gateway.execute_query_and_return_result(
        """
        SELECT u.userID, u.name, COUNT(o.orderNumber) AS orderCount
        FROM Users u
        JOIN Orders o ON u.userID = o.customerID
        WHERE o.storeID = %s
        GROUP BY u.userID, u.name
        ORDER BY orderCount DESC, u.userID
        LIMIT %s;
        """,
        (store_id, limit)
    )
    logger.info("Manager %s viewed popular customers of store %s.", session.user_id, store_id)
    return [PopularCustomer(int(user_id), name.strip(), int(count)) for user_id, name, count in rows]
