"""
Assembly pipeline: parameters -> feature sets -> one watertight brick solid.

Features are declared once in FEATURE_DESCRIPTORS. A run evaluates the table,
collects the applicable FeatureSets into an AssemblyPlan, unions every
additive solid, then subtracts the technic holes and axle cutouts. The result
is centred on the XY origin.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence

import trimesh

from brickgen import kernel
from brickgen.contracts import (
    AssemblyPlan,
    BrickBuild,
    BrickParameters,
    BrickType,
    BuildConfig,
    DerivedDimensions,
    FeatureRole,
    FeatureSet,
)
from brickgen.dimensions import derive_dimensions
from brickgen.errors import KernelFailure
from brickgen.features import (
    build_axle_cutouts,
    build_pins,
    build_posts,
    build_reinforcement,
    build_shell,
    build_splines,
    build_studs,
    build_technic_holes,
    build_technic_supports,
)

logger = logging.getLogger(__name__)

Builder = Callable[[DerivedDimensions, BrickParameters], Optional[FeatureSet]]


@dataclass(frozen=True)
class FeatureDescriptor:
    """A feature builder, the toggle that enables it, and its boolean role."""

    name: str
    builder: Builder
    enabled: Callable[[BrickParameters], bool]
    role: FeatureRole = FeatureRole.ADDITIVE


def _interior_supports(p: BrickParameters) -> bool:
    return p.has_open_bottom and p.with_posts


# Subtractive entries are applied in table order: technic holes, then axle cutouts
FEATURE_DESCRIPTORS = (
    FeatureDescriptor("shell", build_shell, lambda p: True),
    FeatureDescriptor("studs", build_studs, lambda p: p.type is not BrickType.TILE),
    FeatureDescriptor("splines", build_splines, lambda p: p.has_open_bottom and p.include_splines),
    FeatureDescriptor("posts", build_posts, _interior_supports),
    FeatureDescriptor("pins", build_pins, _interior_supports),
    FeatureDescriptor(
        "reinforcement",
        build_reinforcement,
        lambda p: _interior_supports(p) and p.use_reinforcement and p.type is not BrickType.TILE,
    ),
    FeatureDescriptor("technic_supports", build_technic_supports, lambda p: p.has_open_bottom and p.horizontal_holes),
    FeatureDescriptor("technic_holes", build_technic_holes, lambda p: p.horizontal_holes, FeatureRole.SUBTRACTIVE),
    FeatureDescriptor("axle_cutouts", build_axle_cutouts, lambda p: p.vertical_axle_holes, FeatureRole.SUBTRACTIVE),
)


def _run_builders(
    descriptors: Sequence[FeatureDescriptor],
    dims: DerivedDimensions,
    params: BrickParameters,
    max_workers: int,
) -> List[Optional[FeatureSet]]:
    """Evaluate builders, optionally fanned out; results keep descriptor order."""
    if max_workers <= 1 or len(descriptors) <= 1:
        return [d.builder(dims, params) for d in descriptors]
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [pool.submit(d.builder, dims, params) for d in descriptors]
        return [future.result() for future in futures]


def plan_brick(
    params: Optional[BrickParameters] = None,
    config: Optional[BuildConfig] = None,
    descriptors: Sequence[FeatureDescriptor] = FEATURE_DESCRIPTORS,
) -> AssemblyPlan:
    """Derive dimensions and build every enabled, applicable feature.

    Raises:
        InvalidParameter: malformed parameters.
        DegenerateGeometry: a feature would have non-positive extents.
        KernelFailure: a builder's own boolean failed.
    """
    if params is None:
        params = BrickParameters()
    if config is None:
        config = BuildConfig()

    dims = derive_dimensions(params, config.constants)
    active = [d for d in descriptors if d.enabled(params)]
    results = _run_builders(active, dims, params, config.max_workers)

    plan = AssemblyPlan(dimensions=dims)
    for descriptor, feature_set in zip(active, results):
        if feature_set is None:
            logger.debug("Feature %s not applicable to %dx%d", descriptor.name, dims.width, dims.length)
            continue
        plan.add(feature_set, descriptor.role)

    logger.info(
        "Planned %dx%d brick: %d additive, %d subtractive feature sets (%s)",
        dims.width, dims.length, len(plan.additive), len(plan.subtractive),
        ", ".join(f"{name}={count}" for name, count in plan.feature_counts().items()),
    )
    return plan


def assemble(plan: AssemblyPlan, config: Optional[BuildConfig] = None) -> trimesh.Trimesh:
    """Union every additive solid, subtract the cutters, centre on XY."""
    if config is None:
        config = BuildConfig()

    additive = [solid for feature_set in plan.additive for solid in feature_set.solids()]
    if not additive:
        raise KernelFailure("union", "plan has no additive features")
    body = kernel.union(additive, check_volume=config.check_volume, feature="additive phase")

    for feature_set in plan.subtractive:
        body = kernel.difference(
            body, feature_set.solids(), check_volume=config.check_volume, feature=feature_set.name
        )

    dims = plan.dimensions
    return kernel.translated(body, (-dims.overall_length / 2, -dims.overall_width / 2, 0.0))


def build_brick(
    params: Optional[BrickParameters] = None,
    config: Optional[BuildConfig] = None,
) -> BrickBuild:
    """Full pipeline run, keeping the dimensions and feature counts."""
    if params is None:
        params = BrickParameters()
    plan = plan_brick(params, config)
    solid = assemble(plan, config)
    logger.info(
        "Built brick: %d faces, volume %.1f mm3, watertight=%s",
        len(solid.faces), solid.volume, solid.is_watertight,
    )
    return BrickBuild(
        parameters=params,
        dimensions=plan.dimensions,
        solid=solid,
        feature_counts=plan.feature_counts(),
    )


def block(
    params: Optional[BrickParameters] = None,
    config: Optional[BuildConfig] = None,
    **overrides,
) -> trimesh.Trimesh:
    """Build one brick solid, e.g. ``block(width=2, length=4, height=1)``."""
    base = params if params is not None else BrickParameters()
    if overrides:
        base = replace(base, **overrides)
    return build_brick(base, config).solid
