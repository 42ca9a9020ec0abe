from __future__ import annotations

import argparse
import random

from overdraw.app import run_app
from overdraw.config import (
    APP_VERSION,
    DEFAULT_CACHE_SIZE,
    DEFAULT_THRESHOLD,
    DEFAULT_SEED,
    DEFAULT_MESH,
    DEFAULT_GRID_RES,
    DEFAULT_PATCH_SIZE,
    DEFAULT_PATCH_AMPLITUDE,
    DEFAULT_SPHERE_SEGMENTS,
    DEFAULT_SPHERE_RINGS,
    DEFAULT_SPHERE_RADIUS,
)

def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="overdraw", description=f"Reorder mesh triangles to reduce overdraw v{APP_VERSION}")
    p.add_argument("--input", default=None, help=".npz mesh with 'vertices', 'indices' and optional 'stride' (bytes)")
    p.add_argument("--output", default=None, help="write the reordered mesh to this .npz file")
    p.add_argument("--mesh", choices=["box", "sphere", "mixed"], default=DEFAULT_MESH, help="demo mesh when no --input is given")
    p.add_argument("--seed", default=str(DEFAULT_SEED), help="int seed or 'random' (default: 12345)")
    p.add_argument("--cache-size", type=int, default=DEFAULT_CACHE_SIZE, help="simulated FIFO vertex cache size (>= 3)")
    p.add_argument("--threshold", type=float, default=DEFAULT_THRESHOLD, help="soft cluster ACMR multiplier; higher = more clusters")
    p.add_argument("--in-place", action="store_true", help="reorder the index buffer in place")
    p.add_argument("--grid-res", type=int, default=DEFAULT_GRID_RES, help="vertices per box face side")
    p.add_argument("--patch-size", type=float, default=DEFAULT_PATCH_SIZE, help="box edge length")
    p.add_argument("--amplitude", type=float, default=DEFAULT_PATCH_AMPLITUDE, help="noise displacement of box faces")
    p.add_argument("--sphere-segments", type=int, default=DEFAULT_SPHERE_SEGMENTS, help="sphere segments around the axis")
    p.add_argument("--sphere-rings", type=int, default=DEFAULT_SPHERE_RINGS, help="sphere rings from pole to pole")
    p.add_argument("--sphere-radius", type=float, default=DEFAULT_SPHERE_RADIUS, help="sphere radius")
    p.add_argument("--debug", action="store_true", help="print per-stage details")
    return p.parse_args(argv)

def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    if isinstance(args.seed, str) and args.seed.lower() == "random":
        seed = random.randint(0, 2**31 - 1)
    else:
        seed = int(args.seed)

    run_app(
        mesh_kind=str(args.mesh),
        seed=seed,
        input_path=args.input,
        output_path=args.output,
        cache_size=int(args.cache_size),
        threshold=float(args.threshold),
        in_place=bool(args.in_place),
        debug=bool(args.debug),
        grid_res=int(args.grid_res),
        patch_size=float(args.patch_size),
        amplitude=float(args.amplitude),
        sphere_segments=int(args.sphere_segments),
        sphere_rings=int(args.sphere_rings),
        sphere_radius=float(args.sphere_radius),
    )
