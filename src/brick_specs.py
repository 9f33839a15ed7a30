"""
Connector-grid dimension table.

Fixed millimetre measurements for grid-compatible bricks. Values are read-only
process-wide configuration; builders receive them through DerivedDimensions
rather than reading module globals.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class BrickConstants:
    """Brick measurements in mm."""

    grid_spacing: float = 8.0  # center-to-center stud distance
    stud_diameter: float = 4.85
    stud_height: float = 1.8
    wall_thickness: float = 1.45
    wall_play: float = 0.1  # per-side gap so mating bricks don't bind
    block_height: float = 9.6  # one standard brick, studs excluded
    roof_thickness: float = 1.0

    post_diameter: float = 6.5
    post_wall_thickness: float = 0.85
    pin_diameter: float = 3.0
    hollow_stud_inner_diameter: float = 3.1

    spline_length: float = 0.25
    spline_thickness: float = 0.7
    reinforcing_width: float = 0.7

    # Technic (horizontal) holes
    technic_hole_diameter: float = 4.8
    technic_hole_z_offset: float = 5.8  # from bottom of each block unit
    technic_bevel_diameter: float = 6.2
    technic_bevel_depth: float = 0.9
    technic_wall_thickness: float = 1.0

    # Vertical cross-shaped axle holes
    axle_diameter: float = 5.0
    axle_spline_width: float = 2.0

    @property
    def plate_height(self) -> float:
        return self.block_height / 3.0

    @property
    def post_inner_diameter(self) -> float:
        return self.post_diameter - 2.0 * self.post_wall_thickness


DEFAULT_CONSTANTS = BrickConstants()

# Smallest standard height ratio (one plate)
MIN_HEIGHT_RATIO = 1.0 / 3.0

# Extra length added to cutters so they clear the faces they cut through
CUT_CLEARANCE_MM = 0.1
