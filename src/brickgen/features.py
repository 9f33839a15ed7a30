"""
Feature builders for brick geometry.

Each builder takes DerivedDimensions and BrickParameters and returns a
FeatureSet of freshly built solids, or None when the feature does not apply
to the brick's shape (posts on a 1xN brick, studs on a tile, ...). Whether a
feature is switched on at all is decided by the pipeline's descriptor table;
builders only check geometric applicability.

All solids are in the brick's local frame: shell corner at the origin, length
along X, width along Y, bottom at z=0.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np
import trimesh
from shapely.geometry import Point
from shapely.ops import unary_union

from brick_specs import CUT_CLEARANCE_MM
from brickgen import kernel
from brickgen.contracts import (
    BrickParameters,
    BrickType,
    DerivedDimensions,
    FeaturePart,
    FeatureRole,
    FeatureSet,
    StudType,
)

logger = logging.getLogger(__name__)

# Fillet radius stays this far below half the stud radius
ROUNDNESS_MARGIN_MM = 0.01
# Fillets smaller than this are built as flat-top studs
MIN_FILLET_MM = 0.01
# Reinforcement keeps this much clearance inside the post radius
REINFORCEMENT_POST_CLEARANCE_MM = 0.1


# ─── Shell ───────────────────────────────────────────────────────────────────

def build_shell(dims: DerivedDimensions, params: BrickParameters) -> FeatureSet:
    """Outer body; open bottoms get an inset cavity under the roof."""
    c = dims.constants
    outer = kernel.box_from_corner(
        (dims.overall_length, dims.overall_width, dims.overall_height),
        (0.0, 0.0, 0.0),
        feature="shell",
    )
    solid = outer
    if params.has_open_bottom:
        inner_length = dims.overall_length - 2 * c.wall_thickness
        inner_width = dims.overall_width - 2 * c.wall_thickness
        inner_height = dims.overall_height - c.roof_thickness
        if min(inner_length, inner_width, inner_height) > 0:
            cavity = kernel.box_from_corner(
                (inner_length, inner_width, inner_height + CUT_CLEARANCE_MM),
                (c.wall_thickness, c.wall_thickness, -CUT_CLEARANCE_MM),
                feature="shell",
            )
            solid = kernel.difference(outer, [cavity], feature="shell")
        else:
            logger.debug(
                "Walls fill the %dx%d footprint; using a solid shell",
                dims.width, dims.length,
            )
    return FeatureSet("shell", [FeaturePart("shell", solid)])


# ─── Studs ───────────────────────────────────────────────────────────────────

def stud_fillet_radius(dims: DerivedDimensions, params: BrickParameters) -> float:
    """Radius of the rounded stud-top fillet, 0.0 for a flat top.

    Roundness is clamped to 0..1 and scaled so the fillet radius never
    reaches half the stud radius; a larger fillet would self-intersect
    when revolved.
    """
    radius = dims.stud_diameter / 2
    max_curve = radius / 2 - ROUNDNESS_MARGIN_MM
    roundness = min(max(0.0, float(params.stud_top_roundness)), 1.0)
    curve = roundness * max_curve
    return curve if curve > MIN_FILLET_MM else 0.0


def _rounded_stud_profile(radius: float, height: float, curve: float, arc_steps: int) -> List[Tuple[float, float]]:
    """(r, z) outline of a stud whose top rim is a quarter-circle fillet."""
    base_height = height - curve
    angles = np.linspace(0.0, np.pi / 2, arc_steps + 1)[1:]
    arc = [
        (radius - curve + curve * np.cos(a), base_height + curve * np.sin(a))
        for a in angles
    ]
    return [(0.0, 0.0), (radius, 0.0), (radius, base_height)] + arc + [(0.0, height)]


def make_stud(dims: DerivedDimensions, params: BrickParameters) -> trimesh.Trimesh:
    """One stud with its base at z=0, centred on the Z axis."""
    c = dims.constants
    radius = dims.stud_diameter / 2
    curve = stud_fillet_radius(dims, params)
    segments = params.segments

    if curve > 0:
        kernel.require_positive("stud", base_height=c.stud_height - curve)
        profile = _rounded_stud_profile(radius, c.stud_height, curve, max(2, segments // 4))
        stud = kernel.revolve(profile, segments, feature="stud")
    else:
        stud = kernel.cylinder(radius, c.stud_height, (0.0, 0.0, c.stud_height / 2), segments, feature="stud")

    if params.stud_type is StudType.HOLLOW:
        hole_radius = c.hollow_stud_inner_diameter * params.stud_rescale / 2
        kernel.require_positive("stud", wall=radius - hole_radius)
        hole = kernel.cylinder(
            hole_radius,
            c.stud_height + CUT_CLEARANCE_MM,
            (0.0, 0.0, c.stud_height / 2),
            segments,
            feature="stud",
        )
        stud = kernel.difference(stud, [hole], feature="stud")
    return stud


def build_studs(dims: DerivedDimensions, params: BrickParameters) -> Optional[FeatureSet]:
    if params.type is BrickType.TILE:
        return None
    stud = make_stud(dims, params)
    parts = [
        FeaturePart(f"stud_{i}", kernel.translated(stud, (x, y, dims.overall_height)))
        for i, (x, y) in enumerate(dims.stud_centers())
    ]
    return FeatureSet("studs", parts)


# ─── Splines ─────────────────────────────────────────────────────────────────

def build_splines(dims: DerivedDimensions, params: BrickParameters) -> Optional[FeatureSet]:
    """Friction ridges on the inner wall faces, one pair per column and per row."""
    c = dims.constants
    height = dims.overall_height
    # Ridges reach CUT_CLEARANCE_MM into the wall so they fuse with it
    depth = c.spline_length + CUT_CLEARANCE_MM
    near = c.wall_thickness + c.spline_length / 2 - CUT_CLEARANCE_MM / 2
    half_cell = c.grid_spacing / 2 - c.wall_play

    parts = []
    for x in range(dims.length):
        pos_x = half_cell + x * c.grid_spacing
        for side, pos_y in (("front", near), ("back", dims.overall_width - near)):
            parts.append(FeaturePart(
                f"spline_{side}_{x}",
                kernel.box((c.spline_thickness, depth, height), (pos_x, pos_y, height / 2), feature="splines"),
            ))
    for y in range(dims.width):
        pos_y = half_cell + y * c.grid_spacing
        for side, pos_x in (("left", near), ("right", dims.overall_length - near)):
            parts.append(FeaturePart(
                f"spline_{side}_{y}",
                kernel.box((depth, c.spline_thickness, height), (pos_x, pos_y, height / 2), feature="splines"),
            ))
    return FeatureSet("splines", parts) if parts else None


# ─── Posts ───────────────────────────────────────────────────────────────────

def _axle_cutter(dims: DerivedDimensions, center: Tuple[float, float], feature: str):
    """Cross-shaped axle cutter running the full height plus one block of head-room."""
    c = dims.constants
    profile = kernel.cross_profile(center, c.axle_diameter, c.axle_spline_width, feature=feature)
    return kernel.extrude(
        profile,
        z_min=-c.block_height / 2,
        height=(dims.real_height + 1) * c.block_height,
        feature=feature,
    )


def make_post(dims: DerivedDimensions, params: BrickParameters) -> trimesh.Trimesh:
    """One interior post centred on the Z axis: round hollow, or axle-slotted."""
    c = dims.constants
    height = dims.overall_height
    outer = kernel.cylinder(c.post_diameter / 2, height, (0.0, 0.0, height / 2), params.segments, feature="posts")
    if params.vertical_axle_holes:
        cutter = _axle_cutter(dims, (0.0, 0.0), feature="posts")
    else:
        cutter = kernel.cylinder(
            c.post_inner_diameter / 2,
            height + CUT_CLEARANCE_MM,
            (0.0, 0.0, height / 2),
            params.segments,
            feature="posts",
        )
    return kernel.difference(outer, [cutter], feature="posts")


def build_posts(dims: DerivedDimensions, params: BrickParameters) -> Optional[FeatureSet]:
    if not dims.has_interior:
        return None
    post = make_post(dims, params)
    parts = [
        FeaturePart(f"post_{i}", kernel.translated(post, (x, y, 0.0)))
        for i, (x, y) in enumerate(dims.interior_centers(dims.post_origin))
    ]
    return FeatureSet("posts", parts)


# ─── Pins ────────────────────────────────────────────────────────────────────

def build_pins(dims: DerivedDimensions, params: BrickParameters) -> Optional[FeatureSet]:
    """Solid pins between the studs of a 1xN brick."""
    if not dims.is_single_row:
        return None
    c = dims.constants
    height = dims.overall_height
    pin = kernel.cylinder(c.pin_diameter / 2, height, (0.0, 0.0, height / 2), params.segments, feature="pins")
    origin_x, center_y = dims.pin_origin
    parts = [
        FeaturePart(f"pin_{i}", kernel.translated(pin, (origin_x + i * c.grid_spacing, center_y, 0.0)))
        for i in range(dims.length - 1)
    ]
    return FeatureSet("pins", parts)


# ─── Reinforcement ───────────────────────────────────────────────────────────

def build_reinforcement(dims: DerivedDimensions, params: BrickParameters) -> Optional[FeatureSet]:
    """Cross bracing through each interior intersection, cut back around the posts.

    Neighbouring crosses overlap, so they are merged in 2D and extruded as one
    body of disjoint bars.
    """
    if params.type is BrickType.TILE or not dims.has_interior:
        return None
    c = dims.constants
    arm_length = 2 * (c.grid_spacing - 2 * c.wall_play)
    post_clearance = c.post_diameter / 2 - REINFORCEMENT_POST_CLEARANCE_MM
    quad_segs = max(1, params.segments // 4)
    centers = dims.interior_centers(dims.post_origin)
    # Arms reach past neighbouring posts too, so clear every post
    post_areas = unary_union([Point(center).buffer(post_clearance, quad_segs=quad_segs) for center in centers])

    crosses = unary_union([
        kernel.cross_profile(center, arm_length, c.reinforcing_width, feature="reinforcement")
        for center in centers
    ])
    solid = kernel.extrude(crosses.difference(post_areas), z_min=0.0, height=dims.overall_height, feature="reinforcement")
    return FeatureSet("reinforcement", [FeaturePart("reinforcement", solid)])


# ─── Technic holes ───────────────────────────────────────────────────────────

def _technic_centers(dims: DerivedDimensions) -> List[Tuple[float, float]]:
    """(x, z) centres of every horizontal hole, stacked once per block level."""
    c = dims.constants
    return [
        (dims.technic_origin_x + i * c.grid_spacing, level * c.block_height + c.technic_hole_z_offset)
        for level in range(dims.technic_levels)
        for i in range(dims.technic_hole_count)
    ]


def build_technic_supports(dims: DerivedDimensions, params: BrickParameters) -> Optional[FeatureSet]:
    """Solid collars around each planned hole, merged before any subtraction."""
    centers = _technic_centers(dims)
    if not centers:
        return None
    c = dims.constants
    radius = c.technic_hole_diameter / 2 + c.technic_wall_thickness
    parts = [
        FeaturePart(
            f"technic_support_{i}",
            kernel.cylinder(radius, dims.overall_width, (x, dims.overall_width / 2, z),
                            params.segments, feature="technic_supports", axis="y"),
        )
        for i, (x, z) in enumerate(centers)
    ]
    return FeatureSet("technic_supports", parts)


def build_technic_holes(dims: DerivedDimensions, params: BrickParameters) -> Optional[FeatureSet]:
    """Through-holes with an entry bevel on both faces."""
    centers = _technic_centers(dims)
    if not centers:
        return None
    c = dims.constants
    width = dims.overall_width
    # Bevels start CUT_CLEARANCE_MM outside the face so the cut is clean
    bevel_length = c.technic_bevel_depth + 2 * CUT_CLEARANCE_MM
    bevel_offset = c.technic_bevel_depth / 2

    parts = []
    for i, (x, z) in enumerate(centers):
        through = kernel.cylinder(
            c.technic_hole_diameter / 2, width + 2 * CUT_CLEARANCE_MM, (x, width / 2, z),
            params.segments, feature="technic_holes", axis="y",
        )
        bevels = [
            kernel.cylinder(
                c.technic_bevel_diameter / 2, bevel_length, (x, y, z),
                params.segments, feature="technic_holes", axis="y",
            )
            for y in (bevel_offset, width - bevel_offset)
        ]
        hole = kernel.union([through] + bevels, feature="technic_holes")
        parts.append(FeaturePart(f"technic_hole_{i}", hole, FeatureRole.SUBTRACTIVE))
    return FeatureSet("technic_holes", parts)


# ─── Vertical axle holes ─────────────────────────────────────────────────────

def build_axle_cutouts(dims: DerivedDimensions, params: BrickParameters) -> Optional[FeatureSet]:
    """Axle crosses through the roof at every interior intersection."""
    if not dims.has_interior:
        return None
    parts = [
        FeaturePart(f"axle_cutout_{i}", _axle_cutter(dims, center, feature="axle_cutouts"), FeatureRole.SUBTRACTIVE)
        for i, center in enumerate(dims.interior_centers(dims.axle_origin))
    ]
    return FeatureSet("axle_cutouts", parts)
