"""
Unit tests for geodesy and polygon geometry helpers.

Tests cover:
- Spherical area and its invariance to start vertex and winding
- Haversine distance and perimeter
- Point-in-polygon membership (checked against shapely)
- Segment intersection
- Clipping lines to convex and non-convex boundaries
- GeoJSON conversion
"""
import pytest
import numpy as np
from shapely.geometry import LineString, Point, Polygon

from app.domain.models import GeoPoint
from app.utils.geodesy import (
    compute_area_acres,
    compute_distance_ft,
    compute_perimeter_ft,
    compute_signed_area_square_meters,
    edge_lengths_ft,
)
from app.utils.polygon_geometry import (
    bounding_box,
    clip_line_to_polygon,
    point_in_polygon,
    polygon_centroid,
    polygon_from_geojson,
    polygon_to_geojson,
    segment_intersection,
)


def _to_shapely(polygon: list[GeoPoint]) -> Polygon:
    return Polygon([(p.lng, p.lat) for p in polygon])


# ============================================================
# Area Tests
# ============================================================

class TestArea:
    """Tests for spherical polygon area."""

    def test_one_acre_square(self, one_acre_square):
        """A square of side 208.71 ft should be one acre within 2%."""
        assert compute_area_acres(one_acre_square) == pytest.approx(1.0, rel=0.02)

    def test_two_acre_rectangle(self, two_acre_rectangle):
        """Doubling one side should double the area."""
        assert compute_area_acres(two_acre_rectangle) == pytest.approx(2.0, rel=0.02)

    def test_invariant_to_start_vertex(self, u_shaped_polygon):
        """Rotating the starting vertex should not change the area."""
        expected = compute_area_acres(u_shaped_polygon)

        for shift in range(1, len(u_shaped_polygon)):
            rotated = u_shaped_polygon[shift:] + u_shaped_polygon[:shift]
            assert compute_area_acres(rotated) == pytest.approx(expected, rel=1e-9)

    def test_invariant_to_winding(self, triangle, u_shaped_polygon):
        """Reversing the winding order should not change the area."""
        for polygon in (triangle, u_shaped_polygon):
            assert compute_area_acres(polygon[::-1]) == pytest.approx(
                compute_area_acres(polygon), rel=1e-9
            )

    def test_signed_area_flips_with_winding(self, triangle):
        """Signed area should change sign when the winding is reversed."""
        forward = compute_signed_area_square_meters(triangle)
        backward = compute_signed_area_square_meters(triangle[::-1])

        assert forward == pytest.approx(-backward)
        assert forward != 0

    def test_non_convex_area(self, u_shaped_polygon):
        """U-shape should be 7/9 of its bounding square."""
        min_lat, min_lng, max_lat, max_lng = bounding_box(u_shaped_polygon)
        square = [
            GeoPoint(lat=min_lat, lng=min_lng),
            GeoPoint(lat=min_lat, lng=max_lng),
            GeoPoint(lat=max_lat, lng=max_lng),
            GeoPoint(lat=max_lat, lng=min_lng),
        ]

        ratio = compute_area_acres(u_shaped_polygon) / compute_area_acres(square)
        assert ratio == pytest.approx(7 / 9, rel=1e-3)

    @pytest.mark.parametrize("count", [0, 1, 2])
    def test_incomplete_polygon_has_zero_area(self, one_acre_square, count):
        """Fewer than 3 points should give 0 rather than an error."""
        assert compute_area_acres(one_acre_square[:count]) == 0


# ============================================================
# Distance Tests
# ============================================================

class TestDistance:
    """Tests for haversine distance and edge lengths."""

    def test_one_degree_of_latitude(self):
        """One degree along a meridian is about 69.2 miles on this sphere."""
        distance = compute_distance_ft(GeoPoint(lat=38.0, lng=-122.0), GeoPoint(lat=39.0, lng=-122.0))
        assert distance == pytest.approx(365221.4, rel=1e-5)

    def test_zero_distance(self):
        """Identical points should be zero feet apart."""
        point = GeoPoint(lat=38.5, lng=-122.4)
        assert compute_distance_ft(point, point) == 0

    def test_symmetric(self, triangle):
        """Distance should not depend on argument order."""
        a, b, _ = triangle
        assert compute_distance_ft(a, b) == pytest.approx(compute_distance_ft(b, a))

    def test_square_edges(self, one_acre_square):
        """All four edges of the square should be about 208.71 ft."""
        edges = edge_lengths_ft(one_acre_square)

        assert len(edges) == 4
        assert edges == pytest.approx([208.71] * 4, rel=1e-3)

    def test_perimeter_includes_closing_edge(self, one_acre_square):
        """Perimeter should include the edge from the last vertex back to the first."""
        assert compute_perimeter_ft(one_acre_square) == pytest.approx(4 * 208.71, rel=1e-3)

    def test_duplicate_vertex_gives_zero_length_edge(self, triangle):
        """Repeated vertices should produce a zero-length edge, not an error."""
        edges = edge_lengths_ft([triangle[0], triangle[0], triangle[1], triangle[2]])

        assert edges[0] == 0
        assert len(edges) == 4


# ============================================================
# Point In Polygon Tests
# ============================================================

class TestPointInPolygon:
    """Tests for even-odd point membership."""

    def test_centroid_inside(self, one_acre_square, triangle):
        """Vertex mean of a convex polygon should be inside."""
        for polygon in (one_acre_square, triangle):
            assert point_in_polygon(polygon_centroid(polygon), polygon)

    def test_far_point_outside(self, one_acre_square, u_shaped_polygon):
        """A point well outside the bounding box should be outside."""
        far = GeoPoint(lat=0.0, lng=0.0)
        assert not point_in_polygon(far, one_acre_square)
        assert not point_in_polygon(far, u_shaped_polygon)

    def test_notch_is_outside(self, u_shaped_polygon):
        """A point in the U's notch should be outside."""
        notch = GeoPoint(lat=38.5 + 2e-4, lng=-122.4 + 1.5e-4)
        assert not point_in_polygon(notch, u_shaped_polygon)

    def test_arms_are_inside(self, u_shaped_polygon):
        """Points in both arms of the U should be inside."""
        left = GeoPoint(lat=38.5 + 2e-4, lng=-122.4 + 0.5e-4)
        right = GeoPoint(lat=38.5 + 2e-4, lng=-122.4 + 2.5e-4)
        assert point_in_polygon(left, u_shaped_polygon)
        assert point_in_polygon(right, u_shaped_polygon)

    def test_matches_shapely(self, u_shaped_polygon, triangle):
        """Membership should agree with shapely for random interior/exterior points."""
        rng = np.random.default_rng(42)

        for polygon in (u_shaped_polygon, triangle, u_shaped_polygon[::-1]):
            reference = _to_shapely(polygon)
            min_lat, min_lng, max_lat, max_lng = bounding_box(polygon)
            lats = rng.uniform(min_lat - 1e-4, max_lat + 1e-4, 200)
            lngs = rng.uniform(min_lng - 1e-4, max_lng + 1e-4, 200)

            for lat, lng in zip(lats, lngs):
                expected = reference.contains(Point(lng, lat))
                assert point_in_polygon(GeoPoint(lat=lat, lng=lng), polygon) == expected

    def test_empty_polygon(self):
        """Nothing is inside an empty polygon."""
        assert not point_in_polygon(GeoPoint(lat=0, lng=0), [])


# ============================================================
# Segment Intersection Tests
# ============================================================

class TestSegmentIntersection:
    """Tests for parametric segment intersection."""

    def test_crossing_segments(self):
        """Diagonals of a square should cross at its centre."""
        hit = segment_intersection(
            GeoPoint(lat=0, lng=0), GeoPoint(lat=2, lng=2),
            GeoPoint(lat=0, lng=2), GeoPoint(lat=2, lng=0),
        )
        assert hit is not None
        assert hit.lat == pytest.approx(1)
        assert hit.lng == pytest.approx(1)

    def test_non_overlapping_segments(self):
        """Lines that would cross beyond the segments should not intersect."""
        hit = segment_intersection(
            GeoPoint(lat=0, lng=0), GeoPoint(lat=1, lng=1),
            GeoPoint(lat=0, lng=4), GeoPoint(lat=4, lng=3),
        )
        assert hit is None

    def test_parallel_segments(self):
        """Parallel segments should report no intersection."""
        hit = segment_intersection(
            GeoPoint(lat=0, lng=0), GeoPoint(lat=0, lng=1),
            GeoPoint(lat=1, lng=0), GeoPoint(lat=1, lng=1),
        )
        assert hit is None

    def test_collinear_overlap_not_resolved(self):
        """Overlapping collinear segments are treated as not intersecting."""
        hit = segment_intersection(
            GeoPoint(lat=0, lng=0), GeoPoint(lat=0, lng=2),
            GeoPoint(lat=0, lng=1), GeoPoint(lat=0, lng=3),
        )
        assert hit is None

    def test_touching_endpoint(self):
        """Segments sharing an endpoint should intersect at that point."""
        hit = segment_intersection(
            GeoPoint(lat=0, lng=0), GeoPoint(lat=1, lng=1),
            GeoPoint(lat=1, lng=1), GeoPoint(lat=2, lng=0),
        )
        assert hit is not None
        assert (hit.lat, hit.lng) == pytest.approx((1, 1))

    def test_zero_length_segment(self):
        """A degenerate segment should not raise."""
        point = GeoPoint(lat=1, lng=1)
        assert segment_intersection(point, point, GeoPoint(lat=0, lng=0), GeoPoint(lat=2, lng=2)) is None


# ============================================================
# Clipping Tests
# ============================================================

class TestClipLineToPolygon:
    """Tests for clipping candidate row lines to a boundary."""

    def test_line_outside(self, one_acre_square):
        """A line entirely outside should produce no segments."""
        segments = clip_line_to_polygon(
            GeoPoint(lat=10.0, lng=10.0), GeoPoint(lat=10.0, lng=11.0), one_acre_square
        )
        assert segments == []

    def test_line_inside(self, one_acre_square):
        """A line entirely inside should come back unchanged as one segment."""
        centre = polygon_centroid(one_acre_square)
        start = GeoPoint(lat=centre.lat, lng=centre.lng - 1e-5)
        end = GeoPoint(lat=centre.lat, lng=centre.lng + 1e-5)

        segments = clip_line_to_polygon(start, end, one_acre_square)

        assert len(segments) == 1
        assert segments[0].path == [start, end]

    def test_line_across_convex_polygon(self, one_acre_square):
        """A line through a square should be cut at both sides."""
        min_lat, min_lng, max_lat, max_lng = bounding_box(one_acre_square)
        mid_lat = (min_lat + max_lat) / 2
        start = GeoPoint(lat=mid_lat, lng=min_lng - 0.001)
        end = GeoPoint(lat=mid_lat, lng=max_lng + 0.001)

        segments = clip_line_to_polygon(start, end, one_acre_square)

        assert len(segments) == 1
        path = segments[0].path
        assert path[0].lng == pytest.approx(min_lng)
        assert path[1].lng == pytest.approx(max_lng)

    def test_line_across_non_convex_polygon(self, u_shaped_polygon):
        """A line through both arms of a U should give two disjoint segments."""
        lat = 38.5 + 2e-4
        start = GeoPoint(lat=lat, lng=-122.4 - 1e-4)
        end = GeoPoint(lat=lat, lng=-122.4 + 4e-4)

        segments = clip_line_to_polygon(start, end, u_shaped_polygon)

        assert len(segments) == 2
        assert segments[0].path[0].lng == pytest.approx(-122.4)
        assert segments[0].path[1].lng == pytest.approx(-122.4 + 1e-4)
        assert segments[1].path[0].lng == pytest.approx(-122.4 + 2e-4)
        assert segments[1].path[1].lng == pytest.approx(-122.4 + 3e-4)

    def test_matches_shapely_length(self, u_shaped_polygon, triangle):
        """Total clipped length should agree with shapely's intersection."""
        rng = np.random.default_rng(7)

        for polygon in (u_shaped_polygon, triangle):
            reference = _to_shapely(polygon)
            min_lat, min_lng, max_lat, max_lng = bounding_box(polygon)

            for _ in range(25):
                lat_a, lat_b = rng.uniform(min_lat - 5e-4, max_lat + 5e-4, 2)
                start = GeoPoint(lat=lat_a, lng=min_lng - 5e-4)
                end = GeoPoint(lat=lat_b, lng=max_lng + 5e-4)

                segments = clip_line_to_polygon(start, end, polygon)
                clipped = sum(
                    LineString([(p.lng, p.lat) for p in s.path]).length for s in segments
                )
                expected = reference.intersection(
                    LineString([(start.lng, start.lat), (end.lng, end.lat)])
                ).length

                assert clipped == pytest.approx(expected, abs=1e-12)

    def test_segments_ordered_from_start(self, u_shaped_polygon):
        """Reversing the line should reverse the order of the segments."""
        lat = 38.5 + 2e-4
        west = GeoPoint(lat=lat, lng=-122.4 - 1e-4)
        east = GeoPoint(lat=lat, lng=-122.4 + 4e-4)

        forward = clip_line_to_polygon(west, east, u_shaped_polygon)
        backward = clip_line_to_polygon(east, west, u_shaped_polygon)

        assert forward[0].path[0].lng < forward[1].path[0].lng
        assert backward[0].path[0].lng > backward[1].path[0].lng

    def test_line_through_vertex(self, triangle):
        """A line through a vertex should not produce a zero-length segment."""
        apex = triangle[2]
        start = GeoPoint(lat=apex.lat, lng=apex.lng - 0.01)
        end = GeoPoint(lat=apex.lat, lng=apex.lng + 0.01)

        segments = clip_line_to_polygon(start, end, triangle)

        for segment in segments:
            assert segment.path[0] != segment.path[1]

    def test_incomplete_polygon(self, one_acre_square):
        """Clipping against fewer than 3 points should return nothing."""
        segments = clip_line_to_polygon(
            one_acre_square[0], one_acre_square[2], one_acre_square[:2]
        )
        assert segments == []


# ============================================================
# GeoJSON Tests
# ============================================================

class TestGeoJSON:
    """Tests for GeoJSON boundary conversion."""

    def test_round_trip_closes_ring(self, triangle):
        """Exported rings should be closed and import should drop the closing vertex."""
        geometry = polygon_to_geojson(triangle)
        ring = geometry["coordinates"][0]

        assert geometry["type"] == "Polygon"
        assert ring[0] == ring[-1]
        assert len(ring) == 4
        assert polygon_from_geojson(geometry) == triangle

    def test_coordinates_are_lng_lat(self):
        """GeoJSON positions are [lng, lat]."""
        geometry = {"type": "Polygon", "coordinates": [[[18.8, -32.3], [18.9, -32.3], [18.9, -32.2]]]}
        path = polygon_from_geojson(geometry)

        assert path[0] == GeoPoint(lat=-32.3, lng=18.8)
        assert len(path) == 3

    def test_rejects_other_geometry_types(self):
        """Only Polygon geometries are accepted."""
        with pytest.raises(ValueError, match="Polygon"):
            polygon_from_geojson({"type": "Point", "coordinates": [0, 0]})

    def test_empty_geometry(self):
        """A polygon without rings converts to an empty boundary."""
        assert polygon_from_geojson({"type": "Polygon", "coordinates": []}) == []

    @pytest.mark.parametrize("coordinates", [
        "abc",
        [[-122.4, 38.5]],
        [[[-122.4, 38.5], [-122.39], [-122.39, 38.51]]],
        [[[-122.4, 38.5], ["a", "b"], [-122.39, 38.51]]],
        [[[-122.4, 38.5], 7, [-122.39, 38.51]]],
    ])
    def test_rejects_malformed_coordinates(self, coordinates):
        """Coordinates that are not rings of [lng, lat] positions raise ValueError."""
        with pytest.raises(ValueError):
            polygon_from_geojson({"type": "Polygon", "coordinates": coordinates})

    def test_altitude_is_ignored(self):
        """Positions may carry a third (altitude) member."""
        geometry = {"type": "Polygon", "coordinates": [[[18.8, -32.3, 120.0], [18.9, -32.3, 121.0], [18.9, -32.2, 119.5]]]}

        assert polygon_from_geojson(geometry)[1] == GeoPoint(lat=-32.3, lng=18.9)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
