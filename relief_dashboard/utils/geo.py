from typing import Tuple
from math import cos, radians, sin, sqrt, atan2

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


def distance_km(point_a: Tuple[float, float], point_b: Tuple[float, float]) -> float:
    """
    Calculate distance between two (lat, lon) points in kilometers using Haversine formula
    """
    lat1, lon1 = radians(point_a[0]), radians(point_a[1])
    lat2, lon2 = radians(point_b[0]), radians(point_b[1])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = sin(dlat/2)**2 + cos(lat1) * cos(lat2) * sin(dlon/2)**2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_m(point_a: Tuple[float, float], point_b: Tuple[float, float]) -> float:
    return distance_km(point_a, point_b) * 1000.0

