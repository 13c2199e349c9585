"""
Domain service: Multi-field rollup.
"""
from typing import Optional, Sequence, Union
import logging

from app.domain.models import (
    MIXED_ORIENTATION,
    AggregateLayoutResult,
    FieldBoundary,
    FieldDimensions,
    FieldLayoutResult,
    Spacing,
    VineLayout,
)
from app.services.domain.field_metrics import compute_field_layout, theoretical_vines_per_acre
from app.services.domain.materials_estimator import sum_materials

logger = logging.getLogger(__name__)


def _combined_orientation(results: Sequence[FieldLayoutResult]) -> Optional[Union[float, str]]:
    if not results:
        return None
    first = results[0].orientation
    if all(r.orientation == first for r in results):
        return first
    return MIXED_ORIENTATION


def aggregate_fields(
    fields: Sequence[FieldBoundary],
    vine_spacing_ft: float,
    row_spacing_ft: float,
) -> AggregateLayoutResult:
    """
    Combine the layouts of several fields into one summary.

    Fields whose boundary has fewer than 3 points are skipped. Every
    quantity is summed (row_length_ft becomes the combined length of all
    rows); vines_per_row is the mean over all rows and vines_per_acre is
    the theoretical density of the shared spacing.

    Args:
        fields: Fields to combine
        vine_spacing_ft: Distance between vines along a row
        row_spacing_ft: Distance between rows

    Returns:
        AggregateLayoutResult over the contributing fields

    Raises:
        InvalidSpacingError: If either spacing is not positive
    """
    vines_per_acre = theoretical_vines_per_acre(vine_spacing_ft, row_spacing_ft)

    results = []
    for field in fields:
        result = compute_field_layout(field.polygon, vine_spacing_ft, row_spacing_ft, field.orientation)
        if result is None:
            logger.debug(f"Skipping field {field.id!r}: boundary has {len(field.polygon)} point(s)")
            continue
        results.append(result)

    number_of_rows = sum(r.vine_layout.number_of_rows for r in results)
    total_vines = sum(r.vine_layout.total_vines for r in results)

    return AggregateLayoutResult(
        field_count=len(results),
        dimensions=FieldDimensions(
            width_ft=sum(r.dimensions.width_ft for r in results),
            length_ft=sum(r.dimensions.length_ft for r in results),
            acres=sum(r.dimensions.acres for r in results),
            perimeter_ft=sum(r.dimensions.perimeter_ft for r in results),
        ),
        vine_layout=VineLayout(
            number_of_rows=number_of_rows,
            vines_per_row=total_vines // number_of_rows if number_of_rows else 0,
            total_vines=total_vines,
            vines_per_acre=vines_per_acre,
            row_length_ft=sum(
                r.vine_layout.row_length_ft * r.vine_layout.number_of_rows for r in results
            ),
        ),
        materials=sum_materials([r.materials for r in results]),
        spacing=Spacing(vine_spacing_ft=vine_spacing_ft, row_spacing_ft=row_spacing_ft),
        orientation=_combined_orientation(results),
    )
