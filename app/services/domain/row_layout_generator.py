"""
Domain service: Trellis row layout for a field boundary.

Rows are generated as evenly spaced parallel lines across the field's
bounding box at a given bearing, then clipped to the boundary so that
non-convex fields produce one segment per contiguous chord.
"""
from typing import Optional, Sequence
from dataclasses import dataclass
import math
import numpy as np
import logging

from app.domain.exceptions import require_positive_spacing
from app.domain.models import GeoPoint, Orientation, RowSegment
from app.utils.polygon_geometry import bounding_box, clip_line_to_polygon
from app.config import settings

logger = logging.getLogger(__name__)


LEGACY_ORIENTATION_DEGREES = {
    "vertical": 0.0,
    "horizontal": 90.0,
}


def orientation_to_degrees(orientation: Orientation) -> float:
    """
    Convert an orientation to a bearing in degrees.

    Args:
        orientation: Bearing in degrees, or 'vertical' (north-south) /
            'horizontal' (east-west)

    Returns:
        Bearing in degrees, 0 = north, increasing clockwise

    Raises:
        ValueError: If a string orientation is not a known axis name
    """
    if isinstance(orientation, str):
        try:
            return LEGACY_ORIENTATION_DEGREES[orientation]
        except KeyError:
            raise ValueError(f"Unknown orientation: {orientation!r}") from None
    return float(orientation)


@dataclass
class RowLayoutConfig:
    """Configuration for row placement."""

    lat_feet_per_degree: float = 364000.0
    """Approximate feet per degree of latitude"""

    lng_feet_per_degree: float = 300000.0
    """Approximate feet per degree of longitude (coarser, latitude dependent)"""


class RowLayoutGenerator:
    """
    Domain service for generating trellis rows inside a field.

    Uses a planar feet-per-degree approximation, so consecutive rows are
    spaced row_spacing_ft apart up to the error of that approximation.
    """

    def __init__(self, config: Optional[RowLayoutConfig] = None):
        """
        Initialize the generator.

        Args:
            config: Feet-per-degree factors (defaults from settings)
        """
        self.config = config or RowLayoutConfig(
            lat_feet_per_degree=settings.row_layout_lat_feet_per_degree,
            lng_feet_per_degree=settings.row_layout_lng_feet_per_degree,
        )

    def candidate_row_count(self, polygon: Sequence[GeoPoint], row_spacing_ft: float) -> int:
        """
        Count the candidate lines generate_rows would clip for a field.

        Raises:
            InvalidSpacingError: If row_spacing_ft is not positive
        """
        require_positive_spacing("row_spacing_ft", row_spacing_ft)

        if len(polygon) < 3:
            return 0
        return math.ceil(self._diagonal_ft(polygon) / row_spacing_ft) + 2

    def _diagonal_ft(self, polygon: Sequence[GeoPoint]) -> float:
        min_lat, min_lng, max_lat, max_lng = bounding_box(polygon)
        height_ft = (max_lat - min_lat) * self.config.lat_feet_per_degree
        width_ft = (max_lng - min_lng) * self.config.lng_feet_per_degree
        return math.hypot(height_ft, width_ft)

    def generate_rows(
        self,
        polygon: Sequence[GeoPoint],
        row_spacing_ft: float,
        orientation: Orientation,
    ) -> list[RowSegment]:
        """
        Generate row segments covering a field.

        Args:
            polygon: Field boundary, implicitly closed
            row_spacing_ft: Perpendicular distance between rows in feet
            orientation: Row bearing (0 = north, clockwise) or legacy axis name

        Returns:
            Row segments in order across the field; empty for an incomplete
            boundary

        Raises:
            InvalidSpacingError: If row_spacing_ft is not positive
        """
        require_positive_spacing("row_spacing_ft", row_spacing_ft)

        if len(polygon) < 3:
            return []

        lat_scale = self.config.lat_feet_per_degree
        lng_scale = self.config.lng_feet_per_degree

        # Step 1: Bounding box and its center
        min_lat, min_lng, max_lat, max_lng = bounding_box(polygon)
        center_lat = (min_lat + max_lat) / 2
        center_lng = (min_lng + max_lng) / 2

        # Step 2: Enough rows to span the diagonal at any bearing
        diagonal_ft = self._diagonal_ft(polygon)
        row_count = math.ceil(diagonal_ft / row_spacing_ft) + 2

        # Step 3: Unit vectors as (north, east) components in feet
        theta = math.radians(orientation_to_degrees(orientation))
        along = np.array([math.cos(theta), math.sin(theta)])
        across = np.array([-math.sin(theta), math.cos(theta)])
        to_degrees = np.array([1 / lat_scale, 1 / lng_scale])

        center = np.array([center_lat, center_lng])
        half_line = along * diagonal_ft * to_degrees

        logger.debug(
            f"Row layout: diagonal={diagonal_ft:.1f}ft, spacing={row_spacing_ft}ft, "
            f"candidates={row_count}"
        )

        # Step 4: Clip one centre line per offset
        rows: list[RowSegment] = []
        for i in np.arange(-row_count / 2, row_count / 2):
            row_center = center + across * (i * row_spacing_ft) * to_degrees
            start = row_center - half_line
            end = row_center + half_line

            segments = clip_line_to_polygon(
                GeoPoint(lat=float(start[0]), lng=float(start[1])),
                GeoPoint(lat=float(end[0]), lng=float(end[1])),
                polygon,
            )
            # Step 5: Rows that miss the field contribute nothing
            rows.extend(segments)

        logger.debug(f"Generated {len(rows)} row segments from {row_count} candidate lines")
        return rows
