"""
Domain service: Bill of materials and material costs.

Quantities assume a 3-wire VSP (Vertical Shoot Positioning) trellis with
line posts every 20 feet, an earth anchor at each row end, and one drip
line with one emitter per vine.
"""
import math
from typing import Optional

from app.domain.models import (
    EarthAnchorCount,
    HardwareCounts,
    IrrigationRequirement,
    MaterialCosts,
    MaterialsBreakdown,
    PostCounts,
    PriceTable,
    WireRequirement,
)


LINE_POST_SPACING_FT = 20
WIRES_PER_ROW = 3
CLIPS_PER_WIRE_PER_POST = 2
STAPLES_PER_WIRE_PER_POST = 2

DEFAULT_PRICES = PriceTable()


def compute_materials(
    number_of_rows: int,
    vines_per_row: int,
    row_length_ft: float,
    row_spacing_ft: float,
) -> MaterialsBreakdown:
    """
    Convert a row layout into a bill of materials.

    Args:
        number_of_rows: Number of trellis rows
        vines_per_row: Vines planted in each row
        row_length_ft: Length of each row in feet
        row_spacing_ft: Distance between rows (not used by the current rules)

    Returns:
        MaterialsBreakdown with posts, anchors, wire, irrigation and hardware
    """
    end_posts = number_of_rows * 2
    line_posts_per_row = max(0, math.floor(row_length_ft / LINE_POST_SPACING_FT) - 1)
    line_posts = number_of_rows * line_posts_per_row
    total_posts = end_posts + line_posts

    earth_anchors = number_of_rows * 2

    wire_feet = number_of_rows * row_length_ft * WIRES_PER_ROW

    drip_tubing_feet = number_of_rows * row_length_ft
    emitters = vines_per_row * number_of_rows

    return MaterialsBreakdown(
        posts=PostCounts(end_posts=end_posts, line_posts=line_posts, total=total_posts),
        earth_anchors=EarthAnchorCount(count=earth_anchors),
        wire=WireRequirement(total_feet=wire_feet),
        irrigation=IrrigationRequirement(drip_tubing_feet=drip_tubing_feet, emitters=emitters),
        hardware=HardwareCounts(
            wire_clips=total_posts * WIRES_PER_ROW * CLIPS_PER_WIRE_PER_POST,
            eye_bolts=end_posts * WIRES_PER_ROW,
            staples=line_posts * WIRES_PER_ROW * STAPLES_PER_WIRE_PER_POST,
            tensioners=number_of_rows * WIRES_PER_ROW,
            anchor_rings=earth_anchors,
        ),
    )


def compute_material_cost(
    materials: MaterialsBreakdown,
    prices: Optional[PriceTable] = None,
) -> MaterialCosts:
    """
    Price a bill of materials.

    Args:
        materials: Quantities to price
        prices: Unit prices (defaults to DEFAULT_PRICES)

    Returns:
        MaterialCosts per category plus the overall total
    """
    p = prices or DEFAULT_PRICES

    posts = materials.posts.end_posts * p.end_post + materials.posts.line_posts * p.line_post
    earth_anchors = materials.earth_anchors.count * p.earth_anchor
    wire = materials.wire.total_feet * p.wire_per_foot
    irrigation = (
        materials.irrigation.drip_tubing_feet * p.drip_tubing_per_foot
        + materials.irrigation.emitters * p.emitter
    )
    hw = materials.hardware
    hardware = (
        hw.wire_clips * p.wire_clip
        + hw.eye_bolts * p.eye_bolt
        + hw.staples * p.staple
        + hw.tensioners * p.tensioner
        + hw.anchor_rings * p.anchor_ring
    )

    return MaterialCosts(
        posts=posts,
        earth_anchors=earth_anchors,
        wire=wire,
        irrigation=irrigation,
        hardware=hardware,
        total=posts + earth_anchors + wire + irrigation + hardware,
    )


def sum_materials(breakdowns: list[MaterialsBreakdown]) -> MaterialsBreakdown:
    """
    Add up several bills of materials field by field.

    Args:
        breakdowns: Breakdowns to combine (may be empty)

    Returns:
        MaterialsBreakdown whose every quantity is the sum of the inputs
    """
    return MaterialsBreakdown(
        posts=PostCounts(
            end_posts=sum(m.posts.end_posts for m in breakdowns),
            line_posts=sum(m.posts.line_posts for m in breakdowns),
            total=sum(m.posts.total for m in breakdowns),
        ),
        earth_anchors=EarthAnchorCount(count=sum(m.earth_anchors.count for m in breakdowns)),
        wire=WireRequirement(total_feet=sum(m.wire.total_feet for m in breakdowns)),
        irrigation=IrrigationRequirement(
            drip_tubing_feet=sum(m.irrigation.drip_tubing_feet for m in breakdowns),
            emitters=sum(m.irrigation.emitters for m in breakdowns),
        ),
        hardware=HardwareCounts(
            wire_clips=sum(m.hardware.wire_clips for m in breakdowns),
            eye_bolts=sum(m.hardware.eye_bolts for m in breakdowns),
            staples=sum(m.hardware.staples for m in breakdowns),
            tensioners=sum(m.hardware.tensioners for m in breakdowns),
            anchor_rings=sum(m.hardware.anchor_rings for m in breakdowns),
        ),
    )
