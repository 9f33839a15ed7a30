"""
Shared test fixtures for the brick geometry pipeline tests.
"""
import sys
import warnings
from pathlib import Path

# Suppress trimesh internal RuntimeWarning for degenerate triangles
# (divide-by-zero when computing normals of zero-area faces).
warnings.filterwarnings(
    "ignore",
    message="invalid value encountered in divide",
    category=RuntimeWarning,
    module=r"trimesh\.triangles",
)

import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from brickgen.contracts import BrickParameters
from brickgen.dimensions import derive_dimensions

# Coarse tessellation keeps boolean-heavy tests fast
FAST_SEGMENTS = 16


@pytest.fixture
def classic_params():
    """The standard 2x4 brick."""
    return BrickParameters(width=2, length=4, height=1, segments=FAST_SEGMENTS)


@pytest.fixture
def classic_dims(classic_params):
    return derive_dimensions(classic_params)


@pytest.fixture
def single_row_params():
    """A 1x4 brick: pins instead of posts."""
    return BrickParameters(width=1, length=4, height=1, segments=FAST_SEGMENTS)


@pytest.fixture
def single_row_dims(single_row_params):
    return derive_dimensions(single_row_params)
