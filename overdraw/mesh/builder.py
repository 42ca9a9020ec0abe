from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from overdraw.mesh.noise import NoiseConfig, fbm
from overdraw.util.math import normalize, normalize_rows


@dataclass
class MeshData:
    vertices: np.ndarray  # interleaved float32 (N,k), pos first; builders emit pos(3) + norm(3)
    indices: np.ndarray  # uint32, 3 per triangle, CCW seen from outside

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def stride(self) -> int:
        """Bytes between consecutive vertices."""
        return int(self.vertices.shape[1]) * self.vertices.itemsize

    @property
    def triangle_count(self) -> int:
        return int(self.indices.shape[0]) // 3


def build_grid_indices(res: int) -> np.ndarray:
    """Indices for a (res x res) row-major vertex grid.

    Winding is chosen so that cross(p1 - p0, p2 - p0) points along cross(row, column)
    of the grid, i.e. out of a patch built by `build_patch`.
    """
    idx: list[int] = []
    for j in range(res - 1):
        for i in range(res - 1):
            a = j * res + i
            b = a + 1
            c = a + res
            d = c + 1
            idx.extend([a, c, b, b, c, d])
    return np.array(idx, dtype=np.uint32)


def build_patch(
    res: int,
    size: float,
    *,
    center: Sequence[float],
    normal: Sequence[float],
    tangent: Sequence[float],
    seed: int,
    amplitude: float = 0.0,
) -> MeshData:
    """Square noise-displaced patch facing `normal`.

    The grid runs along `tangent` (i) and cross(tangent, normal) (j); heights are
    pushed along `normal`. Vertex normals come from height-field gradients.
    """
    n = normalize(np.asarray(normal, dtype=np.float64))
    t = normalize(np.asarray(tangent, dtype=np.float64))
    s = np.cross(t, n)
    step = size / (res - 1)

    coords = (np.arange(res, dtype=np.float64) * step) - size * 0.5
    grid_u, grid_v = np.meshgrid(coords, coords, indexing="xy")  # [j, i]
    if amplitude != 0.0:
        h = fbm(seed, grid_u, grid_v, NoiseConfig(amplitude=float(amplitude)))
    else:
        h = np.zeros_like(grid_u)

    dhdv, dhdu = np.gradient(h, step)

    pos = (
        np.asarray(center, dtype=np.float64)
        + grid_u[..., None] * t
        + grid_v[..., None] * s
        + h[..., None] * n
    )
    nrm = normalize_rows(n - dhdu[..., None] * t - dhdv[..., None] * s)

    vertices = np.concatenate([pos.reshape(-1, 3), nrm.reshape(-1, 3)], axis=1).astype(np.float32)
    return MeshData(vertices=vertices, indices=build_grid_indices(res))


# (normal, tangent) for the six faces of an axis-aligned box
_BOX_FACES = (
    ((1.0, 0.0, 0.0), (0.0, 0.0, -1.0)),
    ((-1.0, 0.0, 0.0), (0.0, 0.0, 1.0)),
    ((0.0, 1.0, 0.0), (1.0, 0.0, 0.0)),
    ((0.0, -1.0, 0.0), (1.0, 0.0, 0.0)),
    ((0.0, 0.0, 1.0), (1.0, 0.0, 0.0)),
    ((0.0, 0.0, -1.0), (-1.0, 0.0, 0.0)),
)


def build_box(res: int, size: float, *, seed: int, amplitude: float = 0.0) -> MeshData:
    """Closed box made of six disjoint noisy patches, one per face."""
    half = size * 0.5
    patches = []
    for k, (normal, tangent) in enumerate(_BOX_FACES):
        center = np.asarray(normal) * half
        patches.append(build_patch(res, size, center=center, normal=normal, tangent=tangent, seed=seed + k, amplitude=amplitude))
    return merge_meshes(patches)


def build_sphere(segments: int, rings: int, radius: float, *, center: Sequence[float] = (0.0, 0.0, 0.0)) -> MeshData:
    """UV sphere. Pole rows produce zero-area triangles, as real exporters often do."""
    theta = np.linspace(0.0, np.pi, rings + 1)
    phi = np.linspace(0.0, 2.0 * np.pi, segments + 1)
    th, ph = np.meshgrid(theta, phi, indexing="ij")  # [ring, segment]

    nrm = np.stack([np.sin(th) * np.cos(ph), np.cos(th), np.sin(th) * np.sin(ph)], axis=-1).reshape(-1, 3)
    pos = np.asarray(center, dtype=np.float64) + nrm * radius

    cols = segments + 1
    idx: list[int] = []
    for r in range(rings):
        for k in range(segments):
            a = r * cols + k
            b = a + 1
            c = a + cols
            d = c + 1
            idx.extend([a, b, c, b, d, c])

    vertices = np.concatenate([pos, nrm], axis=1).astype(np.float32)
    return MeshData(vertices=vertices, indices=np.array(idx, dtype=np.uint32))


def merge_meshes(meshes: Sequence[MeshData]) -> MeshData:
    """Concatenate meshes, rebasing indices; draw order follows the input order."""
    verts = []
    idx = []
    base = 0
    for m in meshes:
        verts.append(m.vertices)
        idx.append(m.indices.astype(np.uint32) + np.uint32(base))
        base += m.vertex_count
    if not verts:
        return MeshData(vertices=np.zeros((0, 6), dtype=np.float32), indices=np.zeros(0, dtype=np.uint32))
    return MeshData(vertices=np.concatenate(verts, axis=0), indices=np.concatenate(idx, axis=0))


def build_demo_mesh(
    kind: str,
    *,
    seed: int,
    grid_res: int,
    patch_size: float,
    amplitude: float,
    sphere_segments: int,
    sphere_rings: int,
    sphere_radius: float,
) -> MeshData:
    """box | sphere | mixed (sphere drawn first, then the box enclosing it)."""
    if kind == "box":
        return build_box(grid_res, patch_size, seed=seed, amplitude=amplitude)
    if kind == "sphere":
        return build_sphere(sphere_segments, sphere_rings, sphere_radius)
    if kind == "mixed":
        sphere = build_sphere(sphere_segments, sphere_rings, sphere_radius)
        box = build_box(grid_res, patch_size, seed=seed, amplitude=amplitude)
        return merge_meshes([sphere, box])
    raise ValueError(f"unknown mesh kind: {kind!r}")
