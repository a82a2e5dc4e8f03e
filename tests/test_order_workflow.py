import os
import sys
import unittest
from datetime import datetime
from unittest.mock import MagicMock

# Add project root to Python path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from common.errors import (
    NotFoundError,
    StoreNotFound,
    StoreTooFar,
    ProductNotFound,
    OutOfStock,
    InsufficientStock,
    ValidationError,
)
from order_management.order_numbers import (
    OrderNumberAllocator,
    SequenceOrderNumberAllocator,
    build_allocator,
)
from order_management import workflow

ORDER_TIME = datetime(2024, 5, 1, 12, 30, 0)


class FakeStoreData:
    """
    Answers the pipeline's lookups from in-memory tables, routed on the table
    named in each query.
    """

    def __init__(self, users=None, stores=None, products=None):
        self.users = users or {}
        self.stores = stores or {}
        self.products = products or {}

    def fetch_one(self, query, params):
        if "FROM Users" in query:
            location = self.users.get(params[0])
        elif "FROM Store" in query:
            location = self.stores.get(params[0])
        elif "FROM Product" in query:
            units = self.products.get(params)
            return None if units is None else [str(units)]
        else:
            raise AssertionError(f"unexpected query: {query}")
        return None if location is None else [str(location[0]), str(location[1])]


def make_gateway(**tables):
    gateway = MagicMock()
    gateway.fetch_one.side_effect = FakeStoreData(**tables).fetch_one
    gateway.execute_update.return_value = 1
    return gateway


def inserted_order(gateway):
    """Returns the params of the single INSERT INTO Orders call."""
    gateway.execute_update.assert_called_once()
    query, params = gateway.execute_update.call_args[0]
    assert "INSERT INTO Orders" in query
    return params


class TestOrderNumberAllocator(unittest.TestCase):

    def test_starts_at_base_and_increments_by_one(self):
        allocator = OrderNumberAllocator(501)
        self.assertEqual([allocator.next_order_number() for _ in range(3)], [501, 502, 503])

    def test_default_base(self):
        self.assertEqual(OrderNumberAllocator().next_order_number(), 501)

    def test_sequence_allocator_uses_nextval(self):
        gateway = MagicMock()
        gateway.get_next_seq_val.return_value = 900

        allocator = SequenceOrderNumberAllocator(gateway, 'orders_ordernumber_seq')

        self.assertEqual(allocator.next_order_number(), 900)
        gateway.get_next_seq_val.assert_called_once_with('orders_ordernumber_seq')

    def test_build_allocator_from_settings(self):
        gateway = MagicMock()
        settings = {'ORDER_NUMBER_SOURCE': 'memory', 'ORDER_NUMBER_BASE': '1000',
                    'ORDER_NUMBER_SEQUENCE': 'seq'}
        self.assertEqual(build_allocator(gateway, settings).next_order_number(), 1000)

        settings['ORDER_NUMBER_SOURCE'] = 'Sequence'
        self.assertIsInstance(build_allocator(gateway, settings), SequenceOrderNumberAllocator)


class TestPlaceOrder(unittest.TestCase):

    def setUp(self):
        self.allocator = OrderNumberAllocator(501)

    def test_happy_path_and_repeat_order(self):
        """Ordering does not reduce stock, so the same order can be placed twice."""
        gateway = make_gateway(
            users={1: (10.0, 10.0)},
            stores={11: (10.0, 10.02)},
            products={(11, 'Widget'): 5},
        )

        receipt = workflow.place_order(gateway, self.allocator, 1, 11, 'Widget', 3, order_time=ORDER_TIME)

        self.assertEqual(receipt, workflow.OrderReceipt(501, 1, 11, 'Widget', 3, ORDER_TIME))
        self.assertEqual(inserted_order(gateway), (501, 1, 11, 'Widget', 3, ORDER_TIME))

        gateway.execute_update.reset_mock()
        second = workflow.place_order(gateway, self.allocator, 1, 11, 'Widget', '3', order_time=ORDER_TIME)

        self.assertEqual(second.order_number, 502)
        self.assertEqual(second.units_ordered, 3)

    def test_store_exactly_at_limit_is_allowed(self):
        gateway = make_gateway(
            users={1: (10.0, 10.0)},
            stores={11: (10.0, 40.0)},
            products={(11, 'Widget'): 5},
        )

        receipt = workflow.place_order(gateway, self.allocator, 1, 11, 'Widget', 1)

        self.assertEqual(receipt.order_number, 501)

    def test_store_just_past_limit_is_too_far(self):
        gateway = make_gateway(
            users={1: (0.0, 0.0)},
            stores={11: (30.0001, 0.0)},
            products={(11, 'Widget'): 5},
        )

        with self.assertRaises(StoreTooFar) as ctx:
            workflow.place_order(gateway, self.allocator, 1, 11, 'Widget', 1)

        self.assertEqual(ctx.exception.store_id, 11)
        self.assertGreater(ctx.exception.distance, 30)
        gateway.execute_update.assert_not_called()
        # A failed order does not use up an order number.
        self.assertEqual(self.allocator.next_order_number(), 501)

    def test_quantity_equal_to_stock_succeeds(self):
        gateway = make_gateway(
            users={1: (1.0, 1.0)}, stores={2: (1.0, 1.0)}, products={(2, 'Lamp'): 4},
        )

        receipt = workflow.place_order(gateway, self.allocator, 1, 2, 'Lamp', 4)

        self.assertEqual(receipt.units_ordered, 4)

    def test_quantity_above_stock_is_insufficient(self):
        gateway = make_gateway(
            users={1: (1.0, 1.0)}, stores={2: (1.0, 1.0)}, products={(2, 'Lamp'): 4},
        )

        with self.assertRaises(InsufficientStock) as ctx:
            workflow.place_order(gateway, self.allocator, 1, 2, 'Lamp', 5)

        self.assertEqual((ctx.exception.requested, ctx.exception.available), (5, 4))
        gateway.execute_update.assert_not_called()

    def test_zero_stock_is_out_of_stock(self):
        gateway = make_gateway(
            users={1: (1.0, 1.0)}, stores={2: (1.0, 1.0)}, products={(2, 'Lamp'): 0},
        )

        with self.assertRaises(OutOfStock):
            workflow.place_order(gateway, self.allocator, 1, 2, 'Lamp', 1)

    def test_unknown_store(self):
        gateway = make_gateway(users={1: (1.0, 1.0)})

        with self.assertRaises(StoreNotFound) as ctx:
            workflow.place_order(gateway, self.allocator, 1, 99, 'Lamp', 1)

        self.assertEqual(ctx.exception.store_id, 99)

    def test_unknown_product(self):
        gateway = make_gateway(users={1: (1.0, 1.0)}, stores={2: (1.0, 1.0)})

        with self.assertRaises(ProductNotFound) as ctx:
            workflow.place_order(gateway, self.allocator, 1, 2, 'Unicorn', 1)

        self.assertEqual(ctx.exception.product_name, 'Unicorn')

    def test_unknown_user(self):
        gateway = make_gateway(stores={2: (1.0, 1.0)})

        with self.assertRaises(NotFoundError) as ctx:
            workflow.place_order(gateway, self.allocator, 77, 2, 'Lamp', 1)

        self.assertEqual(ctx.exception.entity, 'User')

    def test_invalid_quantities_are_rejected_before_any_lookup(self):
        gateway = make_gateway()
        for quantity in (0, -2, 'three', '', None, True):
            with self.assertRaises(ValidationError):
                workflow.place_order(gateway, self.allocator, 1, 2, 'Lamp', quantity)
        gateway.fetch_one.assert_not_called()


class TestRecentOrders(unittest.TestCase):

    def test_recent_orders_are_parsed(self):
        gateway = MagicMock()
        gateway.execute_query_and_return_result.return_value = [
            ['11', 'Widget                        ', '3', '2024-05-01 12:30:00'],
        ]

        orders = workflow.get_recent_orders(gateway, 1)

        self.assertEqual(orders, [workflow.RecentOrder(11, 'Widget', 3, '2024-05-01 12:30:00')])
        self.assertEqual(gateway.execute_query_and_return_result.call_args[0][1], (1, 5))


if __name__ == '__main__':
    unittest.main()
