"""
Thin adapter over the trimesh geometry kernel.

Primitives (boxes, cylinders, revolved and extruded profiles) are built with
trimesh.creation, 2D cross-sections with Shapely, and boolean operations go
through trimesh.boolean with the manifold3d engine. Kernel exceptions and
non-volume results surface as KernelFailure.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import trimesh
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry import box as shapely_box
from shapely.ops import unary_union

from brickgen.errors import DegenerateGeometry, KernelFailure

logger = logging.getLogger(__name__)

Vec3 = Tuple[float, float, float]

BOOLEAN_ENGINE = "manifold"


def require_positive(feature: str, **extents: float) -> None:
    """Raise DegenerateGeometry if any named extent is <= 0."""
    for name, value in extents.items():
        if not value > 0:
            raise DegenerateGeometry(feature, f"{name} must be positive, got {value:.4f}")


# ─── Primitives ──────────────────────────────────────────────────────────────

def box(size: Vec3, center: Vec3, feature: str) -> trimesh.Trimesh:
    """Axis-aligned box of ``size`` centred at ``center``."""
    require_positive(feature, size_x=size[0], size_y=size[1], size_z=size[2])
    mesh = trimesh.creation.box(extents=[float(s) for s in size])
    mesh.apply_translation([float(c) for c in center])
    return mesh


def box_from_corner(size: Vec3, corner: Vec3, feature: str) -> trimesh.Trimesh:
    center = tuple(c + s / 2 for c, s in zip(corner, size))
    return box(size, center, feature)


def cylinder(
    radius: float,
    height: float,
    center: Vec3,
    segments: int,
    feature: str,
    axis: str = "z",
) -> trimesh.Trimesh:
    """Cylinder centred at ``center`` with its axis along Z (or Y)."""
    require_positive(feature, radius=radius, height=height)
    mesh = trimesh.creation.cylinder(radius=float(radius), height=float(height), sections=int(segments))
    if axis == "y":
        # quarter turn about X maps the cylinder axis onto Y
        mesh = rotated(mesh, np.pi / 2, (1.0, 0.0, 0.0))
    elif axis != "z":
        raise ValueError(f"Unsupported cylinder axis: {axis}")
    mesh.apply_translation([float(c) for c in center])
    return mesh


def revolve(profile: Sequence[Tuple[float, float]], segments: int, feature: str) -> trimesh.Trimesh:
    """Revolve an (r, z) profile about the Z axis.

    The profile must start and end on the axis (r == 0), like the profile
    trimesh uses for its own cylinders, so the result is closed.
    """
    points = np.asarray(profile, dtype=np.float64)
    if len(points) < 3 or np.any(points[:, 0] < 0):
        raise DegenerateGeometry(feature, "revolve profile needs >= 3 points with r >= 0")
    if not (np.isclose(points[0, 0], 0.0) and np.isclose(points[-1, 0], 0.0)):
        raise DegenerateGeometry(feature, "revolve profile must start and end on the axis")
    try:
        return trimesh.creation.revolve(linestring=points, sections=int(segments))
    except Exception as exc:
        raise KernelFailure("revolve", str(exc), feature=feature) from exc


def cross_profile(
    center: Tuple[float, float],
    arm_length: float,
    arm_width: float,
    feature: str,
) -> Polygon:
    """Plus-shaped 2D profile: two perpendicular bars of ``arm_length`` x ``arm_width``."""
    require_positive(feature, arm_length=arm_length, arm_width=arm_width)
    cx, cy = center
    half_l = arm_length / 2
    half_w = arm_width / 2
    bar_x = shapely_box(cx - half_l, cy - half_w, cx + half_l, cy + half_w)
    bar_y = shapely_box(cx - half_w, cy - half_l, cx + half_w, cy + half_l)
    return unary_union([bar_x, bar_y])


def extrude(
    profile: Union[Polygon, MultiPolygon],
    z_min: float,
    height: float,
    feature: str,
) -> trimesh.Trimesh:
    """Extrude a 2D profile from ``z_min`` upward by ``height``.

    Multi-part profiles become one mesh of disjoint bodies.
    """
    require_positive(feature, height=height)
    if profile.is_empty or profile.area <= 0:
        raise DegenerateGeometry(feature, "extrusion profile is empty")
    polygons = list(profile.geoms) if isinstance(profile, MultiPolygon) else [profile]
    try:
        bodies = [
            trimesh.creation.extrude_polygon(polygon, float(height))
            for polygon in polygons
            if polygon.area > 0
        ]
    except Exception as exc:
        raise KernelFailure("extrude", str(exc), feature=feature) from exc
    mesh = bodies[0] if len(bodies) == 1 else trimesh.util.concatenate(bodies)
    mesh.apply_translation([0.0, 0.0, float(z_min)])
    return mesh


# ─── Transforms ──────────────────────────────────────────────────────────────

def translated(solid: trimesh.Trimesh, offset: Iterable[float]) -> trimesh.Trimesh:
    """Translated copy; the input mesh is left untouched."""
    moved = solid.copy()
    moved.apply_translation([float(v) for v in offset])
    return moved


def rotated(solid: trimesh.Trimesh, angle_rad: float, axis: Vec3, point: Optional[Vec3] = None) -> trimesh.Trimesh:
    """Rotated copy about ``axis`` through ``point`` (origin by default)."""
    matrix = trimesh.transformations.rotation_matrix(angle_rad, axis, point)
    moved = solid.copy()
    moved.apply_transform(matrix)
    return moved


# ─── Booleans ────────────────────────────────────────────────────────────────

def check_solid(solid: Optional[trimesh.Trimesh], operation: str, feature: Optional[str] = None) -> trimesh.Trimesh:
    """Reject empty or non-volume kernel output."""
    if solid is None or len(solid.faces) == 0:
        raise KernelFailure(operation, "kernel returned an empty mesh", feature=feature)
    if not solid.is_volume:
        raise KernelFailure(
            operation,
            f"result is not a closed volume (watertight={solid.is_watertight})",
            feature=feature,
        )
    return solid


def union(
    solids: List[trimesh.Trimesh],
    check_volume: bool = True,
    feature: Optional[str] = None,
) -> trimesh.Trimesh:
    """Batch union of ``solids``."""
    if not solids:
        raise KernelFailure("union", "nothing to union", feature=feature)
    if len(solids) == 1:
        result = solids[0].copy()
    else:
        try:
            result = trimesh.boolean.union(solids, engine=BOOLEAN_ENGINE, check_volume=check_volume)
        except Exception as exc:
            raise KernelFailure("union", str(exc), feature=feature) from exc
    if check_volume:
        check_solid(result, "union", feature)
    return result


def difference(
    base: trimesh.Trimesh,
    cutters: List[trimesh.Trimesh],
    check_volume: bool = True,
    feature: Optional[str] = None,
) -> trimesh.Trimesh:
    """Subtract every cutter from ``base``."""
    if not cutters:
        return base.copy()
    # manifold only defines difference over two meshes
    cutter = union(cutters, check_volume=check_volume, feature=feature)
    try:
        result = trimesh.boolean.difference([base, cutter], engine=BOOLEAN_ENGINE, check_volume=check_volume)
    except Exception as exc:
        raise KernelFailure("difference", str(exc), feature=feature) from exc
    if check_volume:
        check_solid(result, "difference", feature)
    return result
