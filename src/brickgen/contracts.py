"""Contracts for the brick geometry pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

import trimesh

from brick_specs import DEFAULT_CONSTANTS, BrickConstants

Vec2 = Tuple[float, float]


class BrickType(Enum):
    BRICK = "brick"
    TILE = "tile"  # smooth top, no studs
    BASEPLATE = "baseplate"  # studs on a solid body


class StudType(Enum):
    SOLID = "solid"
    HOLLOW = "hollow"


class BottomType(Enum):
    OPEN = "open"
    CLOSED = "closed"


class FeatureRole(Enum):
    """How a feature combines with the brick body."""
    ADDITIVE = "additive"
    SUBTRACTIVE = "subtractive"


@dataclass(frozen=True)
class BrickParameters:
    """Input record for one brick.

    ``width`` and ``length`` are in studs and may be given in either order.
    ``height`` is a ratio of the standard block height (1/3 = plate).
    """

    width: int = 2
    length: int = 4
    height: float = 1.0
    type: BrickType = BrickType.BRICK
    stud_type: StudType = StudType.SOLID
    bottom_type: BottomType = BottomType.OPEN
    horizontal_holes: bool = False
    vertical_axle_holes: bool = False
    include_splines: bool = True
    with_posts: bool = True
    use_reinforcement: bool = False
    stud_rescale: float = 1.0
    stud_top_roundness: float = 0.0
    segments: int = 64

    @property
    def has_open_bottom(self) -> bool:
        # Baseplates are always solid underneath
        return self.bottom_type is BottomType.OPEN and self.type is not BrickType.BASEPLATE

    def normalized(self) -> "BrickParameters":
        """Copy with width <= length."""
        if self.width <= self.length:
            return self
        return replace(self, width=self.length, length=self.width)


@dataclass(frozen=True)
class DerivedDimensions:
    """Millimetre dimensions and grid offsets computed from BrickParameters.

    All offsets are in the brick's local frame, with the shell's corner at the
    origin and the length running along X.
    """

    width: int  # studs, width <= length
    length: int
    real_height: float
    overall_length: float
    overall_width: float
    overall_height: float
    stud_diameter: float  # after stud_rescale
    stud_origin: Vec2
    post_origin: Vec2
    pin_origin: Vec2
    axle_origin: Vec2
    technic_origin_x: float
    technic_hole_count: int
    technic_levels: int
    constants: BrickConstants = DEFAULT_CONSTANTS

    @property
    def interior_count(self) -> int:
        """Number of interior grid intersections."""
        return max(0, self.width - 1) * max(0, self.length - 1)

    @property
    def has_interior(self) -> bool:
        return self.width > 1 and self.length > 1

    @property
    def is_single_row(self) -> bool:
        """1xN with N > 1."""
        return self.width == 1 and self.length > 1

    def stud_centers(self) -> List[Vec2]:
        spacing = self.constants.grid_spacing
        ox, oy = self.stud_origin
        return [
            (ox + x * spacing, oy + y * spacing)
            for y in range(self.width)
            for x in range(self.length)
        ]

    def interior_centers(self, origin: Optional[Vec2] = None) -> List[Vec2]:
        """Centers of interior intersections, row-major."""
        spacing = self.constants.grid_spacing
        ox, oy = origin if origin is not None else self.post_origin
        return [
            (ox + (x - 1) * spacing, oy + (y - 1) * spacing)
            for y in range(1, self.width)
            for x in range(1, self.length)
        ]


@dataclass
class FeaturePart:
    """One solid contributed by a feature builder."""

    label: str
    solid: trimesh.Trimesh
    role: FeatureRole = FeatureRole.ADDITIVE


@dataclass
class FeatureSet:
    """All solids produced by one builder; every part shares one role."""

    name: str
    parts: List[FeaturePart] = field(default_factory=list)

    def __post_init__(self) -> None:
        roles = {part.role for part in self.parts}
        if len(roles) > 1:
            raise ValueError(f"Feature set {self.name} mixes roles: {sorted(r.value for r in roles)}")

    @property
    def role(self) -> FeatureRole:
        if not self.parts:
            return FeatureRole.ADDITIVE
        return self.parts[0].role

    @property
    def count(self) -> int:
        return len(self.parts)

    def solids(self) -> List[trimesh.Trimesh]:
        return [part.solid for part in self.parts]


@dataclass
class AssemblyPlan:
    """Two ordered slots: everything additive is unioned before any subtraction."""

    dimensions: DerivedDimensions
    additive: List[FeatureSet] = field(default_factory=list)
    subtractive: List[FeatureSet] = field(default_factory=list)

    def add(self, feature_set: FeatureSet, role: FeatureRole) -> None:
        if feature_set.role is not role:
            raise ValueError(
                f"Feature set {feature_set.name} is {feature_set.role.value}, "
                f"cannot go in the {role.value} slot"
            )
        if role is FeatureRole.ADDITIVE:
            self.additive.append(feature_set)
        else:
            self.subtractive.append(feature_set)

    def feature_sets(self) -> List[FeatureSet]:
        return self.additive + self.subtractive

    def feature_names(self) -> List[str]:
        return [fs.name for fs in self.feature_sets()]

    def feature_counts(self) -> Dict[str, int]:
        return {fs.name: fs.count for fs in self.feature_sets()}

    def has_feature(self, name: str) -> bool:
        return name in self.feature_names()

    def count(self, name: str) -> int:
        return self.feature_counts().get(name, 0)


@dataclass(frozen=True)
class BuildConfig:
    """Pipeline configuration."""

    constants: BrickConstants = DEFAULT_CONSTANTS
    max_workers: int = 1  # >1 computes builders on a thread pool
    check_volume: bool = True


@dataclass
class BrickBuild:
    """Result of a full pipeline run."""

    parameters: BrickParameters
    dimensions: DerivedDimensions
    solid: trimesh.Trimesh
    feature_counts: Dict[str, int] = field(default_factory=dict)
