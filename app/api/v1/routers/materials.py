"""
API router for material pricing endpoints.
"""
from fastapi import APIRouter, Request

from app.api.dependencies import LayoutServiceDep
from app.api.rate_limit import DEFAULT_LIMIT, limiter
from app.api.v1.models.requests import MaterialCostRequest
from app.domain.models import MaterialCosts, PriceTable


router = APIRouter(
    prefix="/materials",
    tags=["materials"],
)


@router.post(
    "/cost",
    response_model=MaterialCosts,
    summary="Price a bill of materials",
    responses={
        422: {"description": "Malformed request body"},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(DEFAULT_LIMIT)
async def price_materials(
    request: Request,
    payload: MaterialCostRequest,
    layout_service: LayoutServiceDep,
) -> MaterialCosts:
    """
    Price a bill of materials with default or overridden unit prices.

    Args:
        request: Incoming request (used for rate limiting)
        payload: Materials and optional price overrides
        layout_service: Layout service (injected dependency)

    Returns:
        MaterialCosts per category
    """
    return layout_service.price_materials(payload.materials, payload.prices)


@router.get(
    "/prices",
    response_model=PriceTable,
    summary="Default unit prices",
)
async def get_default_prices() -> PriceTable:
    """
    Return the default unit prices used when a request does not override them.
    """
    return PriceTable()
