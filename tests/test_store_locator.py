import os
import sys
import unittest
from unittest.mock import MagicMock

# Add project root to Python path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from common.errors import NotFoundError, DataAccessError
from stores.geo import calculate_distance
from stores.locator import nearby_stores, get_user_location, NearbyStore, Location


def make_gateway(user_row, store_rows):
    gateway = MagicMock()
    gateway.fetch_one.return_value = user_row
    gateway.execute_query_and_return_result.return_value = store_rows
    return gateway


class TestCalculateDistance(unittest.TestCase):

    def test_distance_is_symmetric(self):
        points = [(0.0, 0.0), (10.0, 10.02), (55.5, 3.25), (99.9, 100.0)]
        for a in points:
            for b in points:
                self.assertEqual(calculate_distance(*a, *b), calculate_distance(*b, *a))

    def test_distance_to_self_is_zero(self):
        for p in [(0.0, 0.0), (10.0, 10.02), (73.1, 42.7)]:
            self.assertEqual(calculate_distance(*p, *p), 0.0)

    def test_planar_distance(self):
        self.assertEqual(calculate_distance(0.0, 0.0, 3.0, 4.0), 5.0)


class TestNearbyStores(unittest.TestCase):

    def test_filters_by_radius_in_fetch_order(self):
        gateway = make_gateway(
            ['10.000000', '10.000000'],
            [
                ['7', '10.000000', '35.000000'],   # 25 miles
                ['3', '90.000000', '90.000000'],   # far away
                ['5', '10.000000', '10.020000'],   # next door
            ]
        )

        stores = nearby_stores(gateway, 1)

        self.assertEqual([s.store_id for s in stores], [7, 5])
        self.assertAlmostEqual(stores[0].distance, 25.0)
        self.assertAlmostEqual(stores[1].distance, 0.02)

    def test_store_exactly_on_radius_is_excluded(self):
        gateway = make_gateway(
            ['10.0', '10.0'],
            [['1', '10.0', '40.0'], ['2', '10.0', '39.999']]
        )

        stores = nearby_stores(gateway, 1)

        self.assertEqual([s.store_id for s in stores], [2])

    def test_custom_radius(self):
        gateway = make_gateway(['0', '0'], [['1', '3', '4']])

        self.assertEqual(nearby_stores(gateway, 1, radius=5), [])
        self.assertEqual(nearby_stores(gateway, 1, radius=6), [NearbyStore(1, 5.0)])

    def test_missing_user_raises_not_found(self):
        gateway = make_gateway(None, [])

        with self.assertRaises(NotFoundError) as ctx:
            nearby_stores(gateway, 404)

        self.assertEqual(ctx.exception.identifier, 404)
        gateway.execute_query_and_return_result.assert_not_called()

    def test_read_failure_propagates(self):
        gateway = make_gateway(['0', '0'], [])
        gateway.execute_query_and_return_result.side_effect = DataAccessError("connection lost")

        with self.assertRaises(DataAccessError):
            nearby_stores(gateway, 1)

    def test_user_location_query_is_parameterized(self):
        gateway = make_gateway(['12.5', '40.25'], [])

        location = get_user_location(gateway, "1' OR '1'='1")

        self.assertEqual(location, Location(12.5, 40.25))
        args = gateway.fetch_one.call_args[0]
        self.assertNotIn("OR", args[0])
        self.assertEqual(args[1], ("1' OR '1'='1",))


if __name__ == '__main__':
    unittest.main()
