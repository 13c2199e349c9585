"""
API router for field layout endpoints.
"""
import logging
from fastapi import APIRouter, HTTPException, Request

from app.api.dependencies import LayoutServiceDep
from app.api.rate_limit import DEFAULT_LIMIT, limiter
from app.api.v1.models.requests import (
    AggregateLayoutRequest,
    FieldLayoutRequest,
    RowLayoutRequest,
)
from app.api.v1.models.responses import (
    AggregateLayoutResponse,
    FieldLayoutResponse,
    RowLayoutResponse,
    SpacingOption,
    SpacingOptionsResponse,
)
from app.domain.exceptions import InvalidSpacingError

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/layout",
    tags=["layout"],
)


ERROR_RESPONSES = {
    400: {
        "description": "Invalid spacing, unknown preset, oversized boundary or too many rows",
    },
    422: {
        "description": "Malformed request body",
    },
    429: {
        "description": "Rate limit exceeded",
    },
}


def _bad_request(error: ValueError) -> HTTPException:
    if isinstance(error, InvalidSpacingError):
        logger.warning(f"Rejected spacing {error.parameter}={error.value}")
    return HTTPException(status_code=400, detail=str(error))


@router.post(
    "/field",
    response_model=FieldLayoutResponse,
    summary="Compute the layout of one field",
    description="""
    Compute area, dimensions, vine counts, bill of materials and material
    costs for a single field boundary, plus the trellis rows clipped to it.

    Boundaries with fewer than 3 points (still being drawn) return a null
    layout and no rows instead of an error.
    """,
    responses=ERROR_RESPONSES,
)
@limiter.limit(DEFAULT_LIMIT)
def compute_field_layout(
    request: Request,
    payload: FieldLayoutRequest,
    layout_service: LayoutServiceDep,
) -> FieldLayoutResponse:
    """
    Compute the layout of one field.

    Args:
        request: Incoming request (used for rate limiting)
        payload: Boundary, spacing, orientation and price overrides
        layout_service: Layout service (injected dependency)

    Returns:
        FieldLayoutResponse with layout, costs and rows

    Raises:
        HTTPException: If spacing or boundary is rejected
    """
    try:
        spacing = layout_service.resolve_spacing(
            payload.vine_spacing_ft, payload.row_spacing_ft, payload.spacing_preset
        )
        plan = layout_service.plan_field(
            polygon=payload.polygon,
            spacing=spacing,
            orientation=payload.orientation,
            prices=payload.prices,
            include_rows=payload.include_rows,
        )
    except ValueError as e:
        raise _bad_request(e) from e

    return FieldLayoutResponse(
        layout=plan.layout,
        costs=plan.costs,
        rows=plan.rows,
        center=plan.center,
        geom=plan.geom,
    )


@router.post(
    "/rows",
    response_model=RowLayoutResponse,
    summary="Generate trellis rows for a field",
    description="""
    Generate evenly spaced rows at any bearing (0 = north, clockwise) and
    clip them to the field boundary. Non-convex fields can produce several
    segments for the same row line.
    """,
    responses=ERROR_RESPONSES,
)
@limiter.limit(DEFAULT_LIMIT)
def generate_rows(
    request: Request,
    payload: RowLayoutRequest,
    layout_service: LayoutServiceDep,
) -> RowLayoutResponse:
    """
    Generate row segments for rendering.

    Args:
        request: Incoming request (used for rate limiting)
        payload: Boundary, row spacing and orientation
        layout_service: Layout service (injected dependency)

    Returns:
        RowLayoutResponse with the row segments
    """
    try:
        rows = layout_service.generate_rows(
            payload.polygon, payload.row_spacing_ft, payload.orientation
        )
    except ValueError as e:
        raise _bad_request(e) from e

    return RowLayoutResponse(row_count=len(rows), rows=rows)


@router.post(
    "/aggregate",
    response_model=AggregateLayoutResponse,
    summary="Summarize several fields",
    description="""
    Sum area, rows, vines and every material quantity across all fields
    with a complete boundary. The orientation is the shared value when all
    contributing fields agree, otherwise "mixed".
    """,
    responses=ERROR_RESPONSES,
)
@limiter.limit(DEFAULT_LIMIT)
def aggregate_layout(
    request: Request,
    payload: AggregateLayoutRequest,
    layout_service: LayoutServiceDep,
) -> AggregateLayoutResponse:
    """
    Summarize several fields.

    Args:
        request: Incoming request (used for rate limiting)
        payload: Fields, shared spacing and price overrides
        layout_service: Layout service (injected dependency)

    Returns:
        AggregateLayoutResponse with the summary and its costs
    """
    try:
        spacing = layout_service.resolve_spacing(
            payload.vine_spacing_ft, payload.row_spacing_ft, payload.spacing_preset
        )
        plan = layout_service.plan_fields(payload.fields, spacing, payload.prices)
    except ValueError as e:
        raise _bad_request(e) from e

    return AggregateLayoutResponse(summary=plan.summary, costs=plan.costs)


@router.get(
    "/spacing-options",
    response_model=SpacingOptionsResponse,
    summary="List standard spacing patterns",
)
async def get_spacing_options(layout_service: LayoutServiceDep) -> SpacingOptionsResponse:
    """
    List the standard vine x row spacing patterns.

    Returns:
        SpacingOptionsResponse with each pattern's theoretical density
    """
    return SpacingOptionsResponse(
        options=[
            SpacingOption(
                key=preset.key,
                label=preset.label,
                vine_spacing_ft=preset.vine_spacing_ft,
                row_spacing_ft=preset.row_spacing_ft,
                vines_per_acre=vines_per_acre,
            )
            for preset, vines_per_acre in layout_service.spacing_options()
        ]
    )
