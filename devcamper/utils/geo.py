import math

# Radius of Earth: 3,963 mi / 6,378 km
EARTH_RADIUS_MILES = 3963


def distance_to_radians(distance: float) -> float:
    """Convert a linear distance in miles to an angular radius."""
    return distance / EARTH_RADIUS_MILES


def angular_distance(lng1: float, lat1: float, lng2: float, lat2: float) -> float:
    """Great-circle distance between two points, in radians (haversine)."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * math.asin(min(1.0, math.sqrt(a)))


def bounding_box(lng: float, lat: float, radius: float):
    """
    Degree bounds enclosing the spherical cap of ``radius`` radians.

    Returns (min_lat, max_lat, min_lng, max_lng); longitude bounds are None
    when the cap reaches a pole or wraps the antimeridian.
    """
    d_lat = math.degrees(radius)
    min_lat, max_lat = lat - d_lat, lat + d_lat
    if min_lat <= -90 or max_lat >= 90:
        return max(min_lat, -90.0), min(max_lat, 90.0), None, None

    d_lng = math.degrees(math.asin(min(1.0, math.sin(radius) / math.cos(math.radians(lat)))))
    min_lng, max_lng = lng - d_lng, lng + d_lng
    if min_lng < -180 or max_lng > 180:
        return min_lat, max_lat, None, None
    return min_lat, max_lat, min_lng, max_lng
