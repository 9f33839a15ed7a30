"""Grid-to-world placement helpers for composing several bricks.

All helpers return new meshes; their inputs are never modified.
"""

from __future__ import annotations

import trimesh

from brick_specs import DEFAULT_CONSTANTS, BrickConstants
from brickgen import kernel


def place(
    x: float,
    y: float,
    z: float,
    solid: trimesh.Trimesh,
    constants: BrickConstants = DEFAULT_CONSTANTS,
) -> trimesh.Trimesh:
    """Move ``solid`` by grid units (x, y) and block-height units z.

    Grid x runs along world Y and grid y along world X, matching a brick's
    length lying on the X axis.
    """
    return kernel.translated(
        solid,
        (constants.grid_spacing * y, constants.grid_spacing * x, (z or 0) * constants.block_height),
    )


def stack(
    x: float,
    y: float,
    z: float,
    *solids: trimesh.Trimesh,
    constants: BrickConstants = DEFAULT_CONSTANTS,
) -> trimesh.Trimesh:
    """Union already-placed solids and move the group to one grid offset."""
    return place(x, y, z, kernel.union(list(solids), feature="stack"), constants)


def uncenter(
    width: float,
    length: float,
    height: float,
    solid: trimesh.Trimesh,
    constants: BrickConstants = DEFAULT_CONSTANTS,
) -> trimesh.Trimesh:
    """Undo the pipeline's XY centering so the brick's corner sits at the origin."""
    spacing = constants.grid_spacing
    play = constants.wall_play
    dz = (spacing * height) / 2 - play if height else 0.0
    return kernel.translated(
        solid,
        ((spacing * length) / 2 - play, (spacing * width) / 2 - play, dz),
    )
