"""
API request models using Pydantic.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from app.domain.models import (
    FieldBoundary,
    GeoPoint,
    MaterialsBreakdown,
    Orientation,
    PriceTable,
    validate_orientation,
)
from app.utils.polygon_geometry import polygon_from_geojson


class SpacingRequest(BaseModel):
    """Spacing fields shared by layout requests; unset values fall back to defaults."""
    vine_spacing_ft: Optional[float] = Field(
        default=None,
        description="Distance between vines along a row in feet",
        examples=[6.0]
    )
    row_spacing_ft: Optional[float] = Field(
        default=None,
        description="Distance between rows in feet",
        examples=[10.0]
    )
    spacing_preset: Optional[str] = Field(
        default=None,
        description="Key of a standard spacing pattern, e.g. '6x10'"
    )


class BoundaryRequest(BaseModel):
    """A field boundary given as points or as a GeoJSON Polygon."""
    polygon: List[GeoPoint] = Field(
        default_factory=list,
        description="Boundary vertices; fewer than 3 yields an empty result"
    )
    geom: Optional[Dict[str, Any]] = Field(
        default=None,
        description="GeoJSON Polygon with [lng, lat] coordinates, used when polygon is empty"
    )

    @model_validator(mode="after")
    def boundary_from_geojson(self):
        if not self.polygon and self.geom is not None:
            self.polygon = polygon_from_geojson(self.geom)
        return self


class FieldLayoutRequest(BoundaryRequest, SpacingRequest):
    """Request body for a single field layout."""
    orientation: Orientation = Field(
        default=90.0,
        description="Row bearing in degrees [0, 360) or 'horizontal'/'vertical'"
    )
    prices: Optional[PriceTable] = Field(
        default=None,
        description="Unit price overrides; unspecified prices keep their defaults"
    )
    include_rows: bool = Field(
        default=True,
        description="Whether to return row segments for rendering"
    )

    check_orientation = field_validator("orientation")(validate_orientation)

    class Config:
        json_schema_extra = {
            "example": {
                "polygon": [
                    {"lat": 30.2672, "lng": -98.8792},
                    {"lat": 30.2672, "lng": -98.8785},
                    {"lat": 30.2678, "lng": -98.8785},
                    {"lat": 30.2678, "lng": -98.8792},
                ],
                "vine_spacing_ft": 6,
                "row_spacing_ft": 10,
                "orientation": 90,
            }
        }


class RowLayoutRequest(BoundaryRequest):
    """Request body for row generation only."""
    row_spacing_ft: float = Field(description="Distance between rows in feet")
    orientation: Orientation = Field(
        default=90.0,
        description="Row bearing in degrees [0, 360) or 'horizontal'/'vertical'"
    )

    check_orientation = field_validator("orientation")(validate_orientation)


class AggregateLayoutRequest(SpacingRequest):
    """Request body for a multi-field summary."""
    fields: List[FieldBoundary] = Field(description="Fields to summarize")
    prices: Optional[PriceTable] = None


class MaterialCostRequest(BaseModel):
    """Request body for pricing a bill of materials."""
    materials: MaterialsBreakdown
    prices: Optional[PriceTable] = None
