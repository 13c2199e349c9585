"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Field boundaries of known area (1-acre square, 2-acre rectangle)
- A non-convex (U-shaped) boundary
- Sample fields for aggregation
- FastAPI test client
"""
import math
import pytest
from typing import Callable
from fastapi.testclient import TestClient

from app.main import app
from app.domain.models import FieldBoundary, GeoPoint
from app.utils.geodesy import EARTH_RADIUS_M, FEET_PER_METER


# Side of a 1-acre square in feet (sqrt(43560))
ONE_ACRE_SIDE_FT = 208.71

# Napa Valley, California
BASE_LAT = 38.5
BASE_LNG = -122.4


def _feet_to_lat_degrees(feet: float) -> float:
    return math.degrees(feet / FEET_PER_METER / EARTH_RADIUS_M)


def _feet_to_lng_degrees(feet: float, lat: float) -> float:
    return _feet_to_lat_degrees(feet) / math.cos(math.radians(lat))


# ============================================================
# Boundary Fixtures
# ============================================================

@pytest.fixture
def make_rectangle() -> Callable[..., list[GeoPoint]]:
    """Factory for a north-aligned rectangle given its east-west and north-south sides in feet."""
    def _make(
        east_west_ft: float,
        north_south_ft: float,
        lat: float = BASE_LAT,
        lng: float = BASE_LNG,
    ) -> list[GeoPoint]:
        d_lat = _feet_to_lat_degrees(north_south_ft)
        d_lng = _feet_to_lng_degrees(east_west_ft, lat + d_lat / 2)
        return [
            GeoPoint(lat=lat, lng=lng),
            GeoPoint(lat=lat, lng=lng + d_lng),
            GeoPoint(lat=lat + d_lat, lng=lng + d_lng),
            GeoPoint(lat=lat + d_lat, lng=lng),
        ]
    return _make


@pytest.fixture
def one_acre_square(make_rectangle) -> list[GeoPoint]:
    """Square boundary enclosing about one acre."""
    return make_rectangle(ONE_ACRE_SIDE_FT, ONE_ACRE_SIDE_FT)


@pytest.fixture
def two_acre_rectangle(make_rectangle) -> list[GeoPoint]:
    """Rectangle boundary enclosing about two acres, long side north-south."""
    return make_rectangle(ONE_ACRE_SIDE_FT, 2 * ONE_ACRE_SIDE_FT, lat=BASE_LAT + 0.01)


@pytest.fixture
def u_shaped_polygon() -> list[GeoPoint]:
    """
    Non-convex U-shaped boundary (notch open to the north).

    In units of 1e-4 degrees from the base point (x = lng, y = lat):
    (0,0) (3,0) (3,3) (2,3) (2,1) (1,1) (1,3) (0,3)
    """
    unit = 1e-4
    outline = [(0, 0), (3, 0), (3, 3), (2, 3), (2, 1), (1, 1), (1, 3), (0, 3)]
    return [GeoPoint(lat=BASE_LAT + y * unit, lng=BASE_LNG + x * unit) for x, y in outline]


@pytest.fixture
def triangle() -> list[GeoPoint]:
    """Small triangular boundary."""
    return [
        GeoPoint(lat=BASE_LAT, lng=BASE_LNG),
        GeoPoint(lat=BASE_LAT, lng=BASE_LNG + 0.002),
        GeoPoint(lat=BASE_LAT + 0.0015, lng=BASE_LNG + 0.0007),
    ]


# ============================================================
# Field Fixtures
# ============================================================

@pytest.fixture
def sample_fields(one_acre_square, two_acre_rectangle) -> list[FieldBoundary]:
    """A 1-acre and a 2-acre field sharing an east-west orientation."""
    return [
        FieldBoundary(id="block-a", name="Block A", polygon=one_acre_square, orientation=90),
        FieldBoundary(id="block-b", name="Block B", polygon=two_acre_rectangle, orientation=90),
    ]


@pytest.fixture
def incomplete_field() -> FieldBoundary:
    """Field still being drawn (two points only)."""
    return FieldBoundary(
        id="block-draft",
        name="Draft",
        polygon=[
            GeoPoint(lat=BASE_LAT, lng=BASE_LNG),
            GeoPoint(lat=BASE_LAT + 0.001, lng=BASE_LNG),
        ],
    )


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> TestClient:
    """Create a synchronous test client for FastAPI."""
    return TestClient(app)


def points_payload(polygon: list[GeoPoint]) -> list[dict]:
    """Serialize boundary points for a request body."""
    return [p.model_dump() for p in polygon]


@pytest.fixture
def as_payload() -> Callable[[list[GeoPoint]], list[dict]]:
    """Serializer for boundary points in request bodies."""
    return points_payload
