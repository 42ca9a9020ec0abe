from __future__ import annotations

import time
from dataclasses import dataclass

import numpy as np

from overdraw.cluster.boundaries import generate_hard_boundaries
from overdraw.cluster.cache import analyze_vertex_cache
from overdraw.config import (
    APP_VERSION,
    DEFAULT_GRID_RES, DEFAULT_PATCH_SIZE, DEFAULT_PATCH_AMPLITUDE,
    DEFAULT_SPHERE_SEGMENTS, DEFAULT_SPHERE_RINGS, DEFAULT_SPHERE_RADIUS,
)
from overdraw.mesh.builder import MeshData, build_demo_mesh
from overdraw.mesh.io import load_mesh, save_mesh
from overdraw.optimizer import build_clusters, optimize_overdraw


@dataclass
class OptimizeReport:
    triangles: int
    vertices: int
    hard_clusters: int
    soft_clusters: int
    acmr_before: float
    acmr_after: float
    elapsed_s: float


def run_app(
    *,
    mesh_kind: str,
    seed: int,
    input_path: str | None,
    output_path: str | None,
    cache_size: int,
    threshold: float,
    in_place: bool,
    debug: bool,
    grid_res: int = DEFAULT_GRID_RES,
    patch_size: float = DEFAULT_PATCH_SIZE,
    amplitude: float = DEFAULT_PATCH_AMPLITUDE,
    sphere_segments: int = DEFAULT_SPHERE_SEGMENTS,
    sphere_rings: int = DEFAULT_SPHERE_RINGS,
    sphere_radius: float = DEFAULT_SPHERE_RADIUS,
) -> OptimizeReport:
    if input_path:
        mesh = load_mesh(input_path)
        source = input_path
    else:
        mesh = build_demo_mesh(
            mesh_kind,
            seed=seed,
            grid_res=int(grid_res),
            patch_size=float(patch_size),
            amplitude=float(amplitude),
            sphere_segments=int(sphere_segments),
            sphere_rings=int(sphere_rings),
            sphere_radius=float(sphere_radius),
        )
        source = f"{mesh_kind} (seed={seed})"

    if debug:
        print(f"[overdraw] v{APP_VERSION} mesh={source} triangles={mesh.triangle_count} vertices={mesh.vertex_count} stride={mesh.stride}")

    original = mesh.indices.copy()

    t0 = time.perf_counter()
    if in_place:
        result = optimize_overdraw(mesh.indices, mesh.indices, mesh.vertices, mesh.vertex_count, mesh.stride, cache_size, threshold)
    else:
        result = optimize_overdraw(np.zeros_like(mesh.indices), mesh.indices, mesh.vertices, mesh.vertex_count, mesh.stride, cache_size, threshold)
    elapsed = time.perf_counter() - t0

    before = analyze_vertex_cache(original, mesh.vertex_count, cache_size)
    hard_count = len(generate_hard_boundaries(original, mesh.vertex_count, cache_size))
    soft_count = len(build_clusters(original, mesh.vertex_count, cache_size, threshold))
    if debug:
        print(f"[overdraw] clusters hard={hard_count} soft={soft_count} cache_size={cache_size} threshold={threshold:.3f}")

    after = analyze_vertex_cache(result, mesh.vertex_count, cache_size)

    report = OptimizeReport(
        triangles=mesh.triangle_count,
        vertices=mesh.vertex_count,
        hard_clusters=hard_count,
        soft_clusters=soft_count,
        acmr_before=before.acmr,
        acmr_after=after.acmr,
        elapsed_s=elapsed,
    )

    print(f"[overdraw] triangles={report.triangles} acmr {report.acmr_before:.3f} -> {report.acmr_after:.3f} ({report.elapsed_s * 1000.0:.1f} ms)")

    if output_path:
        save_mesh(output_path, MeshData(vertices=mesh.vertices, indices=result))
        if debug:
            print(f"[overdraw] wrote {output_path}")

    return report
