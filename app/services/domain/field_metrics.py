"""
Domain service: Field dimensions, vine counts and density.

Width and length are deliberately coarse: length is the longest boundary
edge and width is the mean edge length. Counts only distinguish vertical
rows from everything else, independently of the continuous bearing used
for row rendering.
"""
import math
from typing import Optional, Sequence
import logging

from app.domain.exceptions import require_positive_spacing
from app.domain.models import (
    FieldDimensions,
    FieldLayoutResult,
    GeoPoint,
    Orientation,
    Spacing,
    VineLayout,
)
from app.services.domain.materials_estimator import compute_materials
from app.utils.geodesy import compute_area_acres, compute_perimeter_ft, edge_lengths_ft

logger = logging.getLogger(__name__)


SQUARE_FEET_PER_ACRE = 43560


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return int(math.floor(value + 0.5))


def theoretical_vines_per_acre(vine_spacing_ft: float, row_spacing_ft: float) -> int:
    """
    Calculate planting density from spacing alone.

    Args:
        vine_spacing_ft: Distance between vines along a row
        row_spacing_ft: Distance between rows

    Returns:
        Vines per acre, rounded to the nearest vine

    Raises:
        InvalidSpacingError: If either spacing is not positive
    """
    require_positive_spacing("vine_spacing_ft", vine_spacing_ft)
    require_positive_spacing("row_spacing_ft", row_spacing_ft)
    return round_half_up(SQUARE_FEET_PER_ACRE / (vine_spacing_ft * row_spacing_ft))


def compute_field_layout(
    polygon: Sequence[GeoPoint],
    vine_spacing_ft: float,
    row_spacing_ft: float,
    orientation: Orientation,
) -> Optional[FieldLayoutResult]:
    """
    Derive dimensions, vine layout and materials for a field.

    Args:
        polygon: Field boundary, implicitly closed
        vine_spacing_ft: Distance between vines along a row
        row_spacing_ft: Distance between rows
        orientation: 'vertical' selects the width-wise row count; any other
            value (numeric or 'horizontal') selects the length-wise one

    Returns:
        FieldLayoutResult, or None while the boundary has fewer than 3 points

    Raises:
        InvalidSpacingError: If either spacing is not positive
    """
    vines_per_acre = theoretical_vines_per_acre(vine_spacing_ft, row_spacing_ft)

    if len(polygon) < 3:
        return None

    acres = compute_area_acres(polygon)
    edges = edge_lengths_ft(polygon)
    length = max(edges)
    width = sum(edges) / len(edges)
    perimeter = compute_perimeter_ft(polygon)

    if orientation == "vertical":
        number_of_rows = math.floor(width / row_spacing_ft)
        vines_per_row = math.floor(length / vine_spacing_ft)
        row_length_ft = length
    else:
        number_of_rows = math.floor(length / row_spacing_ft)
        vines_per_row = math.floor(width / vine_spacing_ft)
        row_length_ft = width

    total_vines = number_of_rows * vines_per_row

    logger.debug(
        f"Field layout: {acres:.2f} acres, {number_of_rows} rows x {vines_per_row} vines "
        f"(orientation={orientation})"
    )

    return FieldLayoutResult(
        dimensions=FieldDimensions(
            width_ft=width,
            length_ft=length,
            acres=acres,
            perimeter_ft=perimeter,
        ),
        vine_layout=VineLayout(
            number_of_rows=number_of_rows,
            vines_per_row=vines_per_row,
            total_vines=total_vines,
            vines_per_acre=vines_per_acre,
            row_length_ft=row_length_ft,
        ),
        materials=compute_materials(number_of_rows, vines_per_row, row_length_ft, row_spacing_ft),
        spacing=Spacing(vine_spacing_ft=vine_spacing_ft, row_spacing_ft=row_spacing_ft),
        orientation=orientation,
    )
