"""
Domain models for vineyard fields, row layouts and materials.

These models represent the core domain entities and should be independent
of any infrastructure concerns (HTTP, rendering, persistence). Every model
is a plain value: produced fresh for each computation and never stored.
"""
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator


# Numeric bearing in degrees (0 = north, clockwise) or a legacy axis name
Orientation = Union[float, Literal["horizontal", "vertical"]]

MIXED_ORIENTATION = "mixed"


def validate_orientation(value: "Orientation") -> "Orientation":
    """Reject numeric bearings outside [0, 360)."""
    if not isinstance(value, str) and not 0 <= value < 360:
        raise ValueError(f"orientation must be in [0, 360) degrees, got {value}")
    return value


class GeoPoint(BaseModel):
    """Geographic coordinate in degrees."""
    lat: float
    lng: float


class FieldBoundary(BaseModel):
    """A vineyard field as supplied by the drawing surface."""
    id: str
    name: str = ""
    polygon: List[GeoPoint] = Field(
        default_factory=list,
        description="Boundary vertices, implicitly closed; may be incomplete while drawing"
    )
    visible: bool = True
    orientation: Orientation = Field(
        default=90.0,
        description="Row bearing in degrees [0, 360) or 'horizontal'/'vertical'"
    )

    check_orientation = field_validator("orientation")(validate_orientation)


class Spacing(BaseModel):
    """Vine and row spacing in feet."""
    vine_spacing_ft: float
    row_spacing_ft: float


class RowSegment(BaseModel):
    """One contiguous chord of a row line lying inside a field."""
    path: List[GeoPoint] = Field(min_length=2)


class PostCounts(BaseModel):
    end_posts: int
    line_posts: int
    total: int


class EarthAnchorCount(BaseModel):
    count: int


class WireRequirement(BaseModel):
    total_feet: float
    gauge_recommended: str = "12.5 gauge high-tensile"


class IrrigationRequirement(BaseModel):
    drip_tubing_feet: float
    emitters: int


class HardwareCounts(BaseModel):
    wire_clips: int
    eye_bolts: int
    staples: int
    tensioners: int
    anchor_rings: int


class MaterialsBreakdown(BaseModel):
    """Bill of materials for a VSP trellis and drip irrigation system."""
    posts: PostCounts
    earth_anchors: EarthAnchorCount
    wire: WireRequirement
    irrigation: IrrigationRequirement
    hardware: HardwareCounts


class PriceTable(BaseModel):
    """Unit prices in USD. Any subset may be overridden by the caller."""
    end_post: float = Field(default=25.00, description="Per treated-wood end post")
    line_post: float = Field(default=15.00, description="Per line post")
    earth_anchor: float = Field(default=45.00, description="Per earth anchor")
    wire_per_foot: float = Field(default=0.75, description="Per foot of trellis wire")
    drip_tubing_per_foot: float = Field(default=0.35, description="Per foot of drip tubing")
    emitter: float = Field(default=1.20, description="Per drip emitter")
    wire_clip: float = Field(default=0.15, description="Per wire clip")
    eye_bolt: float = Field(default=2.50, description="Per eye bolt")
    staple: float = Field(default=0.05, description="Per staple")
    tensioner: float = Field(default=8.00, description="Per wire tensioner")
    anchor_ring: float = Field(default=3.50, description="Per anchor ring")


class MaterialCosts(BaseModel):
    """Material cost per category in USD."""
    posts: float
    earth_anchors: float
    wire: float
    irrigation: float
    hardware: float
    total: float


class FieldDimensions(BaseModel):
    width_ft: float
    length_ft: float
    acres: float
    perimeter_ft: float


class VineLayout(BaseModel):
    number_of_rows: int
    vines_per_row: int
    total_vines: int
    vines_per_acre: int = Field(description="Theoretical density from spacing alone")
    row_length_ft: float = Field(description="Row length used for the materials estimate")


class FieldLayoutResult(BaseModel):
    """Metrics and bill of materials for a single field."""
    dimensions: FieldDimensions
    vine_layout: VineLayout
    materials: MaterialsBreakdown
    spacing: Spacing
    orientation: Orientation


class AggregateLayoutResult(BaseModel):
    """Field results summed across every complete field."""
    field_count: int
    dimensions: FieldDimensions
    vine_layout: VineLayout
    materials: MaterialsBreakdown
    spacing: Spacing
    orientation: Optional[Union[float, str]] = Field(
        default=None,
        description="Shared orientation, 'mixed', or null when no field contributed"
    )
