"""
API response models using Pydantic.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from app.domain.models import (
    AggregateLayoutResult,
    FieldLayoutResult,
    GeoPoint,
    MaterialCosts,
    RowSegment,
)


class FieldLayoutResponse(BaseModel):
    """Response model for the single field layout endpoint."""
    layout: Optional[FieldLayoutResult] = Field(
        description="Field metrics and materials; null while the boundary is incomplete"
    )
    costs: Optional[MaterialCosts] = Field(
        description="Material costs for the field; null while the boundary is incomplete"
    )
    rows: List[RowSegment] = Field(
        default_factory=list,
        description="Row segments clipped to the boundary"
    )
    center: Optional[GeoPoint] = Field(
        default=None,
        description="Vertex mean of the boundary, for centering map views"
    )
    geom: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Boundary as a closed GeoJSON Polygon"
    )


class RowLayoutResponse(BaseModel):
    """Response model for the row generation endpoint."""
    row_count: int = Field(description="Number of row segments")
    rows: List[RowSegment]


class AggregateLayoutResponse(BaseModel):
    """Response model for the multi-field summary endpoint."""
    summary: AggregateLayoutResult
    costs: MaterialCosts

    class Config:
        json_schema_extra = {
            "example": {
                "summary": {
                    "field_count": 2,
                    "orientation": "mixed",
                },
                "costs": {"total": 41873.5},
            }
        }


class SpacingOption(BaseModel):
    """Single standard spacing pattern."""
    key: str = Field(examples=["6x10"])
    label: str
    vine_spacing_ft: float
    row_spacing_ft: float
    vines_per_acre: int = Field(description="Theoretical planting density")


class SpacingOptionsResponse(BaseModel):
    """Response model for the spacing options endpoint."""
    options: List[SpacingOption]
