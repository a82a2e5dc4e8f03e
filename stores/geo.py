import math

# Stores farther than this from a customer are not shown or ordered from.
DEFAULT_RADIUS_MILES = 30


def calculate_distance(lat1, long1, lat2, long2):
    """
    Euclidean distance between two (latitude, longitude) pairs.

    Coordinates are treated as points on a plane, not on a sphere; the data
    set stores them as values in [0, 100].
    """
    return math.sqrt((lat1 - lat2) ** 2 + (long1 - long2) ** 2)
