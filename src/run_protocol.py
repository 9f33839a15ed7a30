"""Run-folder layout for brick generation runs.

Each run gets ``<runs_root>/<run_id>/`` holding the input parameters, the
exported mesh under ``artifacts/``, and metrics/manifest/summary files.
``<runs_root>/LATEST`` names the most recent run.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

LATEST_FILE = "LATEST"

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    return _NON_SLUG.sub("-", value.lower()).strip("-") or "brick"


@dataclass(frozen=True)
class RunPaths:
    run_id: str
    run_dir: Path

    @property
    def input_dir(self) -> Path:
        return self.run_dir / "input"

    @property
    def artifacts_dir(self) -> Path:
        return self.run_dir / "artifacts"

    @property
    def parameters_path(self) -> Path:
        return self.input_dir / "parameters.json"

    @property
    def manifest_path(self) -> Path:
        return self.run_dir / "manifest.json"

    @property
    def metrics_path(self) -> Path:
        return self.run_dir / "metrics.json"

    @property
    def summary_path(self) -> Path:
        return self.run_dir / "summary.md"

    def mesh_path(self, stem: str, file_type: str) -> Path:
        return self.artifacts_dir / f"{slugify(stem)}.{file_type.lower()}"


def prepare_run_dir(runs_root: str, run_name: str, run_id: Optional[str] = None) -> RunPaths:
    """Create the run folder; without ``run_id`` the id is a UTC timestamp plus the name."""
    if run_id is None:
        run_id = f"{datetime.now(timezone.utc):%Y%m%d_%H%M%S}_{slugify(run_name)}"
    paths = RunPaths(run_id=run_id, run_dir=Path(runs_root) / run_id)
    paths.input_dir.mkdir(parents=True, exist_ok=True)
    paths.artifacts_dir.mkdir(parents=True, exist_ok=True)
    return paths


def write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def write_json(path: Path, payload: Dict[str, Any]) -> None:
    write_text(path, json.dumps(payload, indent=2, sort_keys=True) + "\n")


def update_latest_pointer(runs_root: str, run_dir: Path) -> Path:
    """Record ``run_dir``'s id in ``<runs_root>/LATEST``."""
    pointer = Path(runs_root) / LATEST_FILE
    write_text(pointer, run_dir.name + "\n")
    return pointer
