"""Dimension calculator: brick parameters -> millimetre dimensions and grid offsets."""

from __future__ import annotations

import logging
import math
from numbers import Integral, Real

from brick_specs import DEFAULT_CONSTANTS, MIN_HEIGHT_RATIO, BrickConstants
from brickgen.contracts import BrickParameters, DerivedDimensions
from brickgen.errors import InvalidParameter

logger = logging.getLogger(__name__)


def feature_extent(count: int, diameter: float, spacing: float) -> float:
    """Total extent of ``count`` equally spaced circles of ``diameter``.

    Adjacent circles are ``spacing`` apart center-to-center, so the gap between
    them is ``spacing - diameter``.
    """
    if count <= 0:
        return 0.0
    return diameter * count + (count - 1) * (spacing - diameter)


def interior_extent(grid_count: int, diameter: float, spacing: float) -> float:
    """Extent of the features sitting between ``grid_count`` grid cells."""
    return feature_extent(grid_count - 1, diameter, spacing)


def grid_origin(overall: float, count: int, diameter: float, spacing: float) -> float:
    """Center of the first of ``count`` features, centered within ``overall``."""
    return diameter / 2 + (overall - feature_extent(count, diameter, spacing)) / 2


def compute_real_height(height: float) -> float:
    return max(MIN_HEIGHT_RATIO, float(height))


def block_height(height_ratio: float = 1.0, constants: BrickConstants = DEFAULT_CONSTANTS) -> float:
    """Body height in mm for a height ratio (studs excluded)."""
    return compute_real_height(height_ratio) * constants.block_height


def minimum_block_count(length_mm: float, constants: BrickConstants = DEFAULT_CONSTANTS) -> int:
    """Smallest stud count whose brick spans ``length_mm``."""
    return math.ceil((length_mm / constants.grid_spacing) - constants.wall_play)


def validate_parameters(params: BrickParameters) -> None:
    """Reject malformed input before any geometry is built."""
    for name in ("width", "length"):
        value = getattr(params, name)
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise InvalidParameter(name, value, "must be an integer stud count")
        if value <= 0:
            raise InvalidParameter(name, value, "must be positive")

    height = params.height
    if isinstance(height, bool) or not isinstance(height, Real) or not math.isfinite(height):
        raise InvalidParameter("height", height, "must be a finite number")
    if height <= 0:
        raise InvalidParameter("height", height, "must be positive")

    segments = params.segments
    if isinstance(segments, bool) or not isinstance(segments, Integral) or segments < 3:
        raise InvalidParameter("segments", segments, "must be an integer >= 3")

    rescale = params.stud_rescale
    if not isinstance(rescale, Real) or not math.isfinite(rescale) or rescale <= 0:
        raise InvalidParameter("stud_rescale", rescale, "must be a positive number")

    if not isinstance(params.stud_top_roundness, Real) or not math.isfinite(params.stud_top_roundness):
        raise InvalidParameter("stud_top_roundness", params.stud_top_roundness, "must be a finite number")


def derive_dimensions(
    params: BrickParameters,
    constants: BrickConstants = DEFAULT_CONSTANTS,
) -> DerivedDimensions:
    """Compute every dimension and offset the feature builders need.

    Width and length are normalized so that width <= length; brick
    orientation does not matter for grid compatibility.

    Raises:
        InvalidParameter: malformed width/length/height/segments/rescale.
    """
    validate_parameters(params)

    width = int(min(params.width, params.length))
    length = int(max(params.width, params.length))
    real_height = compute_real_height(params.height)

    spacing = constants.grid_spacing
    overall_length = length * spacing - 2 * constants.wall_play
    overall_width = width * spacing - 2 * constants.wall_play
    overall_height = real_height * constants.block_height

    stud_diameter = constants.stud_diameter * params.stud_rescale
    stud_origin = (
        grid_origin(overall_length, length, stud_diameter, spacing),
        grid_origin(overall_width, width, stud_diameter, spacing),
    )
    post_origin = (
        grid_origin(overall_length, length - 1, constants.post_diameter, spacing),
        grid_origin(overall_width, width - 1, constants.post_diameter, spacing),
    )
    pin_origin = (
        grid_origin(overall_length, length - 1, constants.pin_diameter, spacing),
        overall_width / 2,
    )
    axle_origin = (
        grid_origin(overall_length, length - 1, constants.axle_diameter, spacing),
        grid_origin(overall_width, width - 1, constants.axle_diameter, spacing),
    )

    # 1-long bricks carry the hole under the stud, longer ones between studs.
    # Holes are centred on the grid exactly; no 0.025 mm skew from mixing in the stud diameter.
    technic_hole_count = 1 if length == 1 else length - 1
    technic_origin_x = grid_origin(
        overall_length, technic_hole_count, constants.technic_hole_diameter, spacing
    )
    technic_levels = int(math.floor(real_height)) if real_height >= 1 else 0

    dims = DerivedDimensions(
        width=width,
        length=length,
        real_height=real_height,
        overall_length=overall_length,
        overall_width=overall_width,
        overall_height=overall_height,
        stud_diameter=stud_diameter,
        stud_origin=stud_origin,
        post_origin=post_origin,
        pin_origin=pin_origin,
        axle_origin=axle_origin,
        technic_origin_x=technic_origin_x,
        technic_hole_count=technic_hole_count,
        technic_levels=technic_levels,
        constants=constants,
    )
    logger.debug(
        "Derived %dx%d h=%.3f -> %.2f x %.2f x %.2f mm",
        width, length, real_height, overall_length, overall_width, overall_height,
    )
    return dims
