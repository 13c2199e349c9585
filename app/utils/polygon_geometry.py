"""
Planar polygon helper functions.

Provides utilities for:
- Point-in-polygon membership
- Line segment intersection
- Clipping row lines to a field boundary
- GeoJSON conversion

Coordinates are treated as a plane with x = longitude and y = latitude,
which is accurate enough over a single vineyard.
"""
import math
from typing import Any, Optional, Sequence
import logging

from app.domain.models import GeoPoint, RowSegment

logger = logging.getLogger(__name__)


DETERMINANT_EPSILON = 1e-12
"""Determinants below this magnitude are treated as parallel lines"""

COINCIDENT_EPSILON = 1e-12
"""Points closer than this (in degrees) are treated as the same point"""


def point_in_polygon(point: GeoPoint, polygon: Sequence[GeoPoint]) -> bool:
    """
    Check if a point is inside a polygon using the even-odd rule.

    A horizontal ray is cast from the point and crossings with every edge
    (including the closing edge) are counted. Points lying exactly on the
    boundary get whatever the half-open crossing test yields.

    Args:
        point: Point to test
        polygon: Boundary vertices, implicitly closed

    Returns:
        True if point is inside polygon, False otherwise
    """
    inside = False
    n = len(polygon)
    j = n - 1

    for i in range(n):
        xi, yi = polygon[i].lng, polygon[i].lat
        xj, yj = polygon[j].lng, polygon[j].lat

        # Only edges straddling the ray can cross it, so yj != yi below
        if (yi > point.lat) != (yj > point.lat):
            x_cross = (xj - xi) * (point.lat - yi) / (yj - yi) + xi
            if point.lng < x_cross:
                inside = not inside
        j = i

    return inside


def segment_intersection(
    a1: GeoPoint,
    a2: GeoPoint,
    b1: GeoPoint,
    b2: GeoPoint,
) -> Optional[GeoPoint]:
    """
    Find the intersection point of segments a1-a2 and b1-b2.

    Parallel and collinear segments (near-zero determinant) report no
    intersection; overlapping collinear runs are not resolved.

    Args:
        a1: Start of the first segment
        a2: End of the first segment
        b1: Start of the second segment
        b2: End of the second segment

    Returns:
        Intersection point, or None if the segments do not cross
    """
    dx_a = a2.lng - a1.lng
    dy_a = a2.lat - a1.lat
    dx_b = b2.lng - b1.lng
    dy_b = b2.lat - b1.lat

    det = dx_a * dy_b - dy_a * dx_b
    if abs(det) < DETERMINANT_EPSILON:
        return None

    dx_ab = b1.lng - a1.lng
    dy_ab = b1.lat - a1.lat

    t = (dx_ab * dy_b - dy_ab * dx_b) / det
    u = (dx_ab * dy_a - dy_ab * dx_a) / det

    if 0 <= t <= 1 and 0 <= u <= 1:
        return GeoPoint(lat=a1.lat + t * dy_a, lng=a1.lng + t * dx_a)

    return None


def calculate_midpoint(point1: GeoPoint, point2: GeoPoint) -> GeoPoint:
    """
    Calculate the planar midpoint between two points.

    Args:
        point1: First point
        point2: Second point

    Returns:
        Midpoint
    """
    return GeoPoint(
        lat=(point1.lat + point2.lat) / 2,
        lng=(point1.lng + point2.lng) / 2,
    )


def _planar_distance(point1: GeoPoint, point2: GeoPoint) -> float:
    return math.hypot(point2.lng - point1.lng, point2.lat - point1.lat)


def clip_line_to_polygon(
    line_start: GeoPoint,
    line_end: GeoPoint,
    polygon: Sequence[GeoPoint],
) -> list[RowSegment]:
    """
    Clip a candidate row line to a polygon boundary.

    The line is split at every boundary crossing, and each piece whose
    midpoint lies inside the polygon becomes a segment. Non-convex fields
    can therefore yield several disjoint segments from one line.

    Args:
        line_start: First endpoint of the candidate line
        line_end: Second endpoint of the candidate line
        polygon: Boundary vertices, implicitly closed

    Returns:
        Segments of the line lying inside the polygon, ordered from line_start
    """
    n = len(polygon)
    if n < 3:
        return []

    intersections = []
    for i in range(n):
        hit = segment_intersection(line_start, line_end, polygon[i], polygon[(i + 1) % n])
        if hit is not None:
            intersections.append(hit)

    if not intersections:
        if point_in_polygon(line_start, polygon) or point_in_polygon(line_end, polygon):
            return [RowSegment(path=[line_start, line_end])]
        return []

    intersections.sort(key=lambda p: _planar_distance(line_start, p))
    points = [line_start, *intersections, line_end]

    segments = []
    for start, end in zip(points, points[1:]):
        # A line through a vertex hits both adjacent edges at the same point
        if _planar_distance(start, end) < COINCIDENT_EPSILON:
            continue
        if point_in_polygon(calculate_midpoint(start, end), polygon):
            segments.append(RowSegment(path=[start, end]))

    return segments


def bounding_box(polygon: Sequence[GeoPoint]) -> tuple[float, float, float, float]:
    """
    Calculate the bounding box of a polygon.

    Args:
        polygon: Boundary vertices (must not be empty)

    Returns:
        Tuple of (min_lat, min_lng, max_lat, max_lng) in degrees
    """
    if not polygon:
        raise ValueError("Polygon cannot be empty")

    lats = [p.lat for p in polygon]
    lngs = [p.lng for p in polygon]
    return (min(lats), min(lngs), max(lats), max(lngs))


def polygon_centroid(polygon: Sequence[GeoPoint]) -> Optional[GeoPoint]:
    """
    Calculate the vertex mean of a polygon, used for centering map views.

    Args:
        polygon: Boundary vertices

    Returns:
        Mean of the vertices, or None for an empty polygon
    """
    if not polygon:
        return None
    return GeoPoint(
        lat=sum(p.lat for p in polygon) / len(polygon),
        lng=sum(p.lng for p in polygon) / len(polygon),
    )


def _is_position(position: Any) -> bool:
    # Extra members (altitude) are allowed; bools are not numbers here
    return (
        isinstance(position, (list, tuple))
        and len(position) >= 2
        and all(
            isinstance(value, (int, float)) and not isinstance(value, bool)
            for value in position[:2]
        )
    )


def polygon_from_geojson(geometry: dict[str, Any]) -> list[GeoPoint]:
    """
    Convert a GeoJSON Polygon geometry to boundary vertices.

    Only the exterior ring is used. The closing vertex is dropped because
    boundaries are implicitly closed.

    Args:
        geometry: GeoJSON Polygon with [lng, lat] coordinates

    Returns:
        Boundary vertices (empty if the geometry has no exterior ring)

    Raises:
        ValueError: If the geometry is not a Polygon or its coordinates are
            not a list of rings of [lng, lat] positions
    """
    if geometry.get("type") != "Polygon":
        raise ValueError(f"Expected a GeoJSON Polygon, got {geometry.get('type')!r}")

    rings = geometry.get("coordinates") or []
    if not isinstance(rings, list) or not all(isinstance(ring, list) for ring in rings):
        raise ValueError("GeoJSON Polygon coordinates must be a list of rings")
    if not rings or not rings[0]:
        return []

    for position in rings[0]:
        if not _is_position(position):
            raise ValueError(f"Invalid GeoJSON position {position!r}, expected [lng, lat]")

    path = [GeoPoint(lat=coord[1], lng=coord[0]) for coord in rings[0]]
    if len(path) > 1 and path[0] == path[-1]:
        path = path[:-1]

    if len(rings) > 1:
        logger.debug(f"Ignoring {len(rings) - 1} interior ring(s) in GeoJSON polygon")

    return path


def polygon_to_geojson(polygon: Sequence[GeoPoint]) -> dict[str, Any]:
    """
    Convert boundary vertices to a closed GeoJSON Polygon geometry.

    Args:
        polygon: Boundary vertices

    Returns:
        GeoJSON Polygon with [lng, lat] coordinates
    """
    coordinates = [[p.lng, p.lat] for p in polygon]
    if coordinates and coordinates[0] != coordinates[-1]:
        coordinates.append(list(coordinates[0]))

    return {"type": "Polygon", "coordinates": [coordinates]}
