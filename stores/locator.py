# -*- coding: utf-8 -*-
"""
Store lookups by location.

`nearby_stores` lists the stores a customer can see from the "View Stores
within 30 miles" menu entry. A store exactly on the radius is not listed.
"""

import logging
from dataclasses import dataclass

from common.errors import NotFoundError, StoreNotFound
from stores.geo import calculate_distance, DEFAULT_RADIUS_MILES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class NearbyStore:
    store_id: int
    distance: float


def get_user_location(gateway, user_id):
    """
    Fetches a user's coordinates.

    Raises:
        NotFoundError: If no user has this id.
    """
    row = gateway.fetch_one(
        "SELECT latitude, longitude FROM Users WHERE userID = %s;",
        (user_id,)
    )
    if row is None:
        raise NotFoundError("User", user_id)
    return Location(float(row[0]), float(row[1]))


def get_store_location(gateway, store_id):
    """
    Fetches a store's coordinates.

    Raises:
        StoreNotFound: If no store has this id.
    """
    row = gateway.fetch_one(
        "SELECT latitude, longitude FROM Store WHERE storeID = %s;",
        (store_id,)
    )
    if row is None:
        raise StoreNotFound(store_id)
    return Location(float(row[0]), float(row[1]))


def nearby_stores(gateway, user_id, radius=DEFAULT_RADIUS_MILES):
    """
    Lists the stores strictly closer than `radius` to the user.

    Stores are returned in the order the database produced them, each with
    its computed distance.
    """
    user = get_user_location(gateway, user_id)
    rows = gateway.execute_query_and_return_result(
        "SELECT storeID, latitude, longitude FROM Store;"
    )

    stores = []
    for store_id, latitude, longitude in rows:
        distance = calculate_distance(float(latitude), float(longitude), user.latitude, user.longitude)
        if distance < radius:
            stores.append(NearbyStore(int(store_id), distance))

    logger.info("User %s: %d of %d stores within %s miles.", user_id, len(stores), len(rows), radius)
    return stores
