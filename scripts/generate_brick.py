#!/usr/bin/env python3
"""Generate one parametric brick and write it into a run folder."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from brickgen import BuildConfig, build_brick, export_solid, parameters_from_mapping
from brickgen.audit import build_report, sha256_file
from brickgen.errors import BrickGeometryError
from brickgen.export import SUPPORTED_FORMATS
from brickgen.parameters import parameters_to_dict
from run_protocol import prepare_run_dir, update_latest_pointer, write_json, write_text

logger = logging.getLogger("generate_brick")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate an interlocking brick (studs, posts, technic holes) as a mesh"
    )
    parser.add_argument("--params-json", default=None, help="JSON file of parameter values")
    parser.add_argument("--width", default=None, help="Width in studs")
    parser.add_argument("--length", default=None, help="Length in studs")
    parser.add_argument(
        "--height", default=None, help="Height in blocks: 1/3 (plate), 1/2 or a whole number"
    )
    parser.add_argument("--type", default=None, choices=["brick", "tile", "baseplate"])
    parser.add_argument("--stud-type", default=None, choices=["solid", "hollow"])
    parser.add_argument("--bottom-type", default=None, choices=["open", "closed"])
    parser.add_argument(
        "--horizontal-holes", action="store_true", default=None, help="Add technic holes"
    )
    parser.add_argument(
        "--vertical-axle-holes", action="store_true", default=None, help="Add vertical axle holes"
    )
    parser.add_argument(
        "--no-splines", dest="include_splines", action="store_false", default=None,
        help="Omit the wall splines",
    )
    parser.add_argument(
        "--no-posts", dest="with_posts", action="store_false", default=None,
        help="Omit interior posts and pins",
    )
    parser.add_argument(
        "--reinforcement", dest="use_reinforcement", action="store_true", default=None,
        help="Add cross reinforcement around the posts",
    )
    parser.add_argument("--stud-rescale", type=float, default=None, help="Stud diameter scale (0.9-1.1)")
    parser.add_argument("--stud-roundness", type=float, default=None, help="Stud top fillet (0-1)")
    parser.add_argument("--segments", type=int, default=None, help="Curve segments (16-128)")
    parser.add_argument(
        "--format", default="stl", choices=list(SUPPORTED_FORMATS), help="Mesh file format"
    )
    parser.add_argument("--workers", type=int, default=1, help="Threads for feature builders")
    parser.add_argument("--name", default=None, help="Run name (defaults to the brick size)")
    parser.add_argument("--runs-dir", default="runs", help="Runs output root")
    parser.add_argument("--run-id", default=None, help="Fixed run id instead of a timestamped one")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logs")
    return parser


def _collect_values(args: argparse.Namespace) -> dict:
    values = {}
    if args.params_json:
        values.update(json.loads(Path(args.params_json).read_text(encoding="utf-8")))
    overrides = {
        "width": args.width,
        "length": args.length,
        "height": args.height,
        "type": args.type,
        "stud_type": args.stud_type,
        "bottom_type": args.bottom_type,
        "horizontal_holes": args.horizontal_holes,
        "vertical_axle_holes": args.vertical_axle_holes,
        "include_splines": args.include_splines,
        "with_posts": args.with_posts,
        "use_reinforcement": args.use_reinforcement,
        "stud_rescale": args.stud_rescale,
        "stud_top_roundness": args.stud_roundness,
        "segments": args.segments,
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    return values


def _build_summary(*, run_id: str, elapsed_s: float, report: dict, mesh_path: Path) -> str:
    dims = report["dimensions_mm"]
    mesh = report["mesh"]
    lines = [
        f"# Run {run_id}",
        "",
        f"- Size: {dims['overall_length']} x {dims['overall_width']} x {dims['overall_height']} mm",
        f"- Duration: {elapsed_s:.2f}s",
        f"- Volume: {mesh['volume_mm3']} mm^3",
        f"- Watertight: {mesh['watertight']}",
        f"- Mesh: `{mesh_path.name}`",
        "",
        "## Features",
    ]
    lines.extend(f"- {name}: {count}" for name, count in report["feature_counts"].items())
    lines.append("")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    started = time.perf_counter()
    try:
        params = parameters_from_mapping(_collect_values(args))
        build = build_brick(params, BuildConfig(max_workers=max(1, args.workers)))
    except BrickGeometryError as exc:
        logger.error("Brick generation failed: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    elapsed = time.perf_counter() - started

    dims = build.dimensions
    height_label = f"{params.height:g}".replace(".", "p")
    name = args.name or f"{dims.width}x{dims.length}x{height_label}_{params.type.value}"
    run_paths = prepare_run_dir(args.runs_dir, name, run_id=args.run_id)

    write_json(run_paths.parameters_path, parameters_to_dict(params))
    mesh_path = run_paths.mesh_path(name, args.format)
    try:
        export_solid(build.solid, str(mesh_path))
    except BrickGeometryError as exc:
        logger.error("Mesh export failed: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    report = build_report(build)
    metrics_payload = dict(report, run_id=run_paths.run_id, elapsed_s=round(elapsed, 3))
    write_json(run_paths.metrics_path, metrics_payload)
    write_text(
        run_paths.summary_path,
        _build_summary(run_id=run_paths.run_id, elapsed_s=elapsed, report=report, mesh_path=mesh_path),
    )

    manifest = {
        "run_id": run_paths.run_id,
        "name": name,
        "created_utc": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "parameters_sha256": report["parameters_sha256"],
        "artifacts": {
            "parameters": str(run_paths.parameters_path),
            "mesh": str(mesh_path),
            "mesh_sha256": sha256_file(mesh_path),
            "metrics": str(run_paths.metrics_path),
            "summary": str(run_paths.summary_path),
        },
    }
    write_json(run_paths.manifest_path, manifest)
    update_latest_pointer(args.runs_dir, run_paths.run_dir)

    print(f"Run ID: {run_paths.run_id}")
    print(f"Run dir: {run_paths.run_dir}")
    print(f"Size: {dims.overall_length:.2f} x {dims.overall_width:.2f} x {dims.overall_height:.2f} mm")
    print(f"Features: {', '.join(f'{k}={v}' for k, v in build.feature_counts.items())}")
    print(f"Mesh: {mesh_path}")
    print(f"Metrics: {run_paths.metrics_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
