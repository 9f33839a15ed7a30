"""Public API for the parametric brick geometry pipeline."""

from brickgen.assembly import assemble, block, build_brick, plan_brick
from brickgen.contracts import (
    AssemblyPlan,
    BottomType,
    BrickBuild,
    BrickParameters,
    BrickType,
    BuildConfig,
    DerivedDimensions,
    StudType,
)
from brickgen.dimensions import derive_dimensions
from brickgen.errors import BrickGeometryError, DegenerateGeometry, InvalidParameter, KernelFailure
from brickgen.export import export_solid
from brickgen.parameters import PARAMETER_DEFINITIONS, default_parameters, parameters_from_mapping
from brickgen.positioning import place, stack, uncenter

__all__ = [
    "AssemblyPlan",
    "BottomType",
    "BrickBuild",
    "BrickGeometryError",
    "BrickParameters",
    "BrickType",
    "BuildConfig",
    "DegenerateGeometry",
    "DerivedDimensions",
    "InvalidParameter",
    "KernelFailure",
    "PARAMETER_DEFINITIONS",
    "StudType",
    "assemble",
    "block",
    "build_brick",
    "default_parameters",
    "derive_dimensions",
    "export_solid",
    "parameters_from_mapping",
    "place",
    "plan_brick",
    "stack",
    "uncenter",
]
