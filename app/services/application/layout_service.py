"""
Application service: Orchestration layer for field layout operations.
"""
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence
import logging

from app.config import settings
from app.domain.models import (
    AggregateLayoutResult,
    FieldBoundary,
    FieldLayoutResult,
    GeoPoint,
    MaterialCosts,
    MaterialsBreakdown,
    Orientation,
    PriceTable,
    RowSegment,
    Spacing,
)
from app.domain.spacing_presets import SPACING_PRESETS, SpacingPreset, get_spacing_preset
from app.services.domain.aggregation import aggregate_fields
from app.services.domain.field_metrics import compute_field_layout, theoretical_vines_per_acre
from app.services.domain.materials_estimator import compute_material_cost
from app.services.domain.row_layout_generator import RowLayoutGenerator
from app.utils.polygon_geometry import polygon_centroid, polygon_to_geojson

logger = logging.getLogger(__name__)


@dataclass
class FieldPlan:
    """Everything computed for one field boundary."""
    layout: Optional[FieldLayoutResult]
    costs: Optional[MaterialCosts]
    rows: list[RowSegment] = field(default_factory=list)
    center: Optional[GeoPoint] = None
    geom: Optional[dict[str, Any]] = None


@dataclass
class AggregatePlan:
    """Rollup across fields together with its material costs."""
    summary: AggregateLayoutResult
    costs: MaterialCosts


class LayoutService:
    """
    Application service for vineyard layout operations.

    Coordinates the geometry, metrics and materials domain services.
    Holds no state between calls, so one instance can serve every request.
    """

    def __init__(self, row_generator: RowLayoutGenerator):
        """
        Initialize the service with dependencies.

        Args:
            row_generator: Generator used for the rendering path
        """
        self.row_generator = row_generator

    def resolve_spacing(
        self,
        vine_spacing_ft: Optional[float] = None,
        row_spacing_ft: Optional[float] = None,
        preset: Optional[str] = None,
    ) -> Spacing:
        """
        Work out the spacing for a request.

        Explicit values win over a preset, and a preset wins over the
        configured defaults.

        Args:
            vine_spacing_ft: Explicit vine spacing
            row_spacing_ft: Explicit row spacing
            preset: Key of a standard spacing pattern

        Returns:
            Spacing to use (not yet validated)

        Raises:
            ValueError: If the preset key is unknown
        """
        vine = settings.default_vine_spacing_ft
        row = settings.default_row_spacing_ft

        if preset is not None:
            try:
                chosen = get_spacing_preset(preset)
            except KeyError:
                raise ValueError(f"Unknown spacing preset: {preset!r}") from None
            vine, row = chosen.vine_spacing_ft, chosen.row_spacing_ft

        if vine_spacing_ft is not None:
            vine = vine_spacing_ft
        if row_spacing_ft is not None:
            row = row_spacing_ft

        return Spacing(vine_spacing_ft=vine, row_spacing_ft=row)

    def plan_field(
        self,
        polygon: Sequence[GeoPoint],
        spacing: Spacing,
        orientation: Orientation,
        prices: Optional[PriceTable] = None,
        include_rows: bool = True,
    ) -> FieldPlan:
        """
        Compute metrics, costs and optionally rows for one field.

        Args:
            polygon: Field boundary (may be incomplete)
            spacing: Vine and row spacing
            orientation: Row bearing or legacy axis name
            prices: Unit price overrides
            include_rows: Whether to generate row segments for rendering

        Returns:
            FieldPlan; layout and costs are None for an incomplete boundary

        Raises:
            InvalidSpacingError: If either spacing is not positive
            ValueError: If the boundary has too many vertices, or rows are
                requested at a spacing that needs too many candidate lines
        """
        self._check_vertex_count(polygon)

        layout = compute_field_layout(
            polygon, spacing.vine_spacing_ft, spacing.row_spacing_ft, orientation
        )
        if layout is None:
            logger.info(f"Field boundary incomplete ({len(polygon)} point(s)), returning empty plan")
            return FieldPlan(layout=None, costs=None)

        costs = compute_material_cost(layout.materials, prices)
        rows = []
        if include_rows:
            self._check_row_candidates(polygon, spacing.row_spacing_ft)
            rows = self.row_generator.generate_rows(polygon, spacing.row_spacing_ft, orientation)

        logger.info(
            f"Planned field: {layout.dimensions.acres:.2f} acres, "
            f"{layout.vine_layout.total_vines} vines, {len(rows)} row segments, "
            f"materials ${costs.total:,.2f}"
        )
        return FieldPlan(
            layout=layout,
            costs=costs,
            rows=rows,
            center=polygon_centroid(polygon),
            geom=polygon_to_geojson(polygon),
        )

    def generate_rows(
        self,
        polygon: Sequence[GeoPoint],
        row_spacing_ft: float,
        orientation: Orientation,
    ) -> list[RowSegment]:
        """
        Generate row segments for rendering.

        Raises:
            InvalidSpacingError: If row_spacing_ft is not positive
            ValueError: If the boundary has too many vertices or the spacing
                needs too many candidate lines
        """
        self._check_vertex_count(polygon)
        self._check_row_candidates(polygon, row_spacing_ft)
        return self.row_generator.generate_rows(polygon, row_spacing_ft, orientation)

    def plan_fields(
        self,
        fields: Sequence[FieldBoundary],
        spacing: Spacing,
        prices: Optional[PriceTable] = None,
    ) -> AggregatePlan:
        """
        Summarize several fields and price their combined materials.

        Args:
            fields: Fields from the drawing surface
            spacing: Spacing shared by every field
            prices: Unit price overrides

        Returns:
            AggregatePlan

        Raises:
            InvalidSpacingError: If either spacing is not positive
        """
        for f in fields:
            self._check_vertex_count(f.polygon)

        summary = aggregate_fields(fields, spacing.vine_spacing_ft, spacing.row_spacing_ft)
        costs = compute_material_cost(summary.materials, prices)

        logger.info(
            f"Aggregated {summary.field_count}/{len(fields)} fields: "
            f"{summary.dimensions.acres:.2f} acres, orientation={summary.orientation}"
        )
        return AggregatePlan(summary=summary, costs=costs)

    def price_materials(
        self,
        materials: MaterialsBreakdown,
        prices: Optional[PriceTable] = None,
    ) -> MaterialCosts:
        """Price an externally supplied bill of materials."""
        return compute_material_cost(materials, prices)

    def spacing_options(self) -> list[tuple[SpacingPreset, int]]:
        """
        List the standard spacing patterns.

        Returns:
            List of (preset, theoretical vines per acre) tuples
        """
        return [
            (preset, theoretical_vines_per_acre(preset.vine_spacing_ft, preset.row_spacing_ft))
            for preset in SPACING_PRESETS
        ]

    def _check_vertex_count(self, polygon: Sequence[GeoPoint]) -> None:
        if len(polygon) > settings.max_polygon_vertices:
            raise ValueError(
                f"Field boundary has {len(polygon)} vertices, "
                f"maximum is {settings.max_polygon_vertices}"
            )

    def _check_row_candidates(self, polygon: Sequence[GeoPoint], row_spacing_ft: float) -> None:
        candidates = self.row_generator.candidate_row_count(polygon, row_spacing_ft)
        if candidates > settings.max_row_candidates:
            raise ValueError(
                f"Row spacing of {row_spacing_ft} ft needs {candidates} candidate rows, "
                f"maximum is {settings.max_row_candidates}"
            )
