"""
Spherical geodesy for field boundaries.

Distances use the haversine formula and areas use the signed sum of
polar-triangle areas over the polygon's edges, both on a sphere with the
WGS84 equatorial radius. Adequate for parcels up to a few hundred acres.
"""
import math
from typing import Sequence

from app.domain.models import GeoPoint


EARTH_RADIUS_M = 6378137.0
SQUARE_METERS_PER_ACRE = 4046.86
FEET_PER_METER = 3.28084


def _polar_triangle_area(tan1: float, lng1: float, tan2: float, lng2: float) -> float:
    """Signed area (unit sphere) of the triangle formed by an edge and the pole."""
    delta_lng = lng1 - lng2
    t = tan1 * tan2
    return 2 * math.atan2(t * math.sin(delta_lng), 1 + t * math.cos(delta_lng))


def compute_signed_area_square_meters(polygon: Sequence[GeoPoint]) -> float:
    """
    Calculate the signed spherical area of a polygon.

    Counter-clockwise and clockwise traversals give opposite signs.

    Args:
        polygon: Boundary vertices, implicitly closed

    Returns:
        Signed area in square meters (0 for fewer than 3 points)
    """
    if len(polygon) < 3:
        return 0.0

    total = 0.0
    prev = polygon[-1]
    prev_tan = math.tan((math.pi / 2 - math.radians(prev.lat)) / 2)
    prev_lng = math.radians(prev.lng)

    for point in polygon:
        tan_lat = math.tan((math.pi / 2 - math.radians(point.lat)) / 2)
        lng = math.radians(point.lng)
        total += _polar_triangle_area(tan_lat, lng, prev_tan, prev_lng)
        prev_tan = tan_lat
        prev_lng = lng

    return total * EARTH_RADIUS_M ** 2


def compute_area_square_meters(polygon: Sequence[GeoPoint]) -> float:
    """Unsigned spherical area in square meters."""
    return abs(compute_signed_area_square_meters(polygon))


def compute_area_acres(polygon: Sequence[GeoPoint]) -> float:
    """
    Calculate the area enclosed by a field boundary.

    Args:
        polygon: Boundary vertices in any winding order

    Returns:
        Area in acres, 0 when fewer than 3 points are given
    """
    return compute_area_square_meters(polygon) / SQUARE_METERS_PER_ACRE


def compute_distance_meters(p1: GeoPoint, p2: GeoPoint) -> float:
    """Great-circle distance between two points in meters."""
    lat1 = math.radians(p1.lat)
    lat2 = math.radians(p2.lat)
    d_lat = lat2 - lat1
    d_lng = math.radians(p2.lng - p1.lng)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    # Rounding can push h fractionally past 1 for antipodal points
    h = min(1.0, h)
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(h))


def compute_distance_ft(p1: GeoPoint, p2: GeoPoint) -> float:
    """
    Calculate the haversine distance between two points.

    Args:
        p1: First point
        p2: Second point

    Returns:
        Distance in feet
    """
    return compute_distance_meters(p1, p2) * FEET_PER_METER


def edge_lengths_ft(polygon: Sequence[GeoPoint]) -> list[float]:
    """
    Calculate the length of every edge, including the closing edge.

    Args:
        polygon: Boundary vertices

    Returns:
        Edge lengths in feet, in traversal order (empty for fewer than 2 points)
    """
    n = len(polygon)
    if n < 2:
        return []
    return [compute_distance_ft(polygon[i], polygon[(i + 1) % n]) for i in range(n)]


def compute_perimeter_ft(polygon: Sequence[GeoPoint]) -> float:
    """Sum of all edge lengths in feet."""
    return sum(edge_lengths_ft(polygon))
