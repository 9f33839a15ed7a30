"""Hashing and build-report utilities for brick runs."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Dict

from brickgen.contracts import BrickBuild, BrickParameters
from brickgen.parameters import parameters_to_dict

REPORT_SCHEMA = "brickgen.report.v1"


def canonical_json(payload: Dict[str, object]) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def sha256_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def parameters_digest(params: BrickParameters) -> str:
    """Stable hash of a parameter set; equal inputs give equal digests."""
    return sha256_text(canonical_json(parameters_to_dict(params)))


def build_report(build: BrickBuild) -> Dict[str, object]:
    """Summarize a finished build for metrics/manifest files."""
    solid = build.solid
    dims = build.dimensions
    bounds = solid.bounds
    return {
        "schema_version": REPORT_SCHEMA,
        "parameters": parameters_to_dict(build.parameters),
        "parameters_sha256": parameters_digest(build.parameters),
        "dimensions_mm": {
            "overall_length": round(dims.overall_length, 4),
            "overall_width": round(dims.overall_width, 4),
            "overall_height": round(dims.overall_height, 4),
            "real_height": round(dims.real_height, 4),
        },
        "feature_counts": dict(build.feature_counts),
        "mesh": {
            "bounds_mm": [[round(float(v), 4) for v in corner] for corner in bounds],
            "extents_mm": [round(float(v), 4) for v in solid.extents],
            "volume_mm3": round(float(solid.volume), 3),
            "faces": int(len(solid.faces)),
            "vertices": int(len(solid.vertices)),
            "watertight": bool(solid.is_watertight),
        },
    }
