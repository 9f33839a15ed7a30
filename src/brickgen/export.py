"""
Mesh export for finished bricks.

Writes STL (binary), OBJ, PLY or GLB through trimesh's exporters.
Units: millimeters.
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

import trimesh

from brickgen.errors import KernelFailure

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("stl", "obj", "ply", "glb")


@dataclass
class MeshExportConfig:
    """Configuration for mesh export."""
    file_type: Optional[str] = None  # inferred from the extension when None
    require_watertight: bool = True


def resolve_file_type(filepath: str, file_type: Optional[str] = None) -> str:
    """Pick the export format from ``file_type`` or the path's extension."""
    kind = (file_type or os.path.splitext(filepath)[1].lstrip(".")).lower()
    if kind not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported mesh format {kind!r}; expected one of {', '.join(SUPPORTED_FORMATS)}"
        )
    return kind


def export_solid(
    solid: trimesh.Trimesh,
    filepath: str,
    config: Optional[MeshExportConfig] = None,
) -> str:
    """Export a brick solid to a mesh file.

    Args:
        solid: The finished brick.
        filepath: Output path; parent directories are created.
        config: Export settings.

    Returns:
        The path written.

    Raises:
        KernelFailure: the mesh is not watertight.
    """
    config = config or MeshExportConfig()
    kind = resolve_file_type(filepath, config.file_type)
    if config.require_watertight and not solid.is_watertight:
        raise KernelFailure("export", f"refusing to write non-watertight mesh to {filepath}")

    parent = os.path.dirname(filepath)
    if parent:
        os.makedirs(parent, exist_ok=True)
    solid.export(filepath, file_type=kind)
    logger.info(
        "Exported %s (%d faces, %.1f mm^3) to %s",
        kind.upper(), len(solid.faces), float(solid.volume), filepath,
    )
    return filepath
