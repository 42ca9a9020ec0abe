from __future__ import annotations

import numpy as np
import pytest

from overdraw.mesh.builder import (
    MeshData,
    build_box,
    build_demo_mesh,
    build_grid_indices,
    build_patch,
    build_sphere,
    merge_meshes,
)
from overdraw.mesh.io import load_mesh, save_mesh
from overdraw.util.math import triangle_normals


def _face_normals(mesh: MeshData) -> np.ndarray:
    pos = mesh.vertices[:, :3].astype(np.float64)
    f = mesh.indices.reshape(-1, 3)
    return triangle_normals(pos[f[:, 0]], pos[f[:, 1]], pos[f[:, 2]])


def test_grid_indices_quad():
    assert build_grid_indices(2).tolist() == [0, 2, 1, 1, 2, 3]
    assert build_grid_indices(5).shape == (2 * 4 * 4 * 3,)


def test_patch_faces_its_normal():
    patch = build_patch(6, 2.0, center=(0, 0, 1), normal=(0, 0, 1), tangent=(1, 0, 0), seed=1, amplitude=0.1)
    assert patch.stride == 24
    assert patch.vertex_count == 36
    assert (_face_normals(patch)[:, 2] > 0).all()
    assert (patch.vertices[:, 5] > 0).all()
    assert np.linalg.norm(patch.vertices[:, 3:6], axis=1) == pytest.approx(np.ones(36), abs=1e-5)


def test_box_faces_point_outward():
    res = 5
    box = build_box(res, 4.0, seed=2)
    assert box.vertex_count == 6 * res * res
    assert box.triangle_count == 6 * 2 * (res - 1) ** 2

    pos = box.vertices[:, :3].astype(np.float64)
    f = box.indices.reshape(-1, 3)
    centers = (pos[f[:, 0]] + pos[f[:, 1]] + pos[f[:, 2]]) / 3.0
    assert (np.einsum("ij,ij->i", _face_normals(box), centers) > 0).all()


def test_sphere_faces_point_outward():
    sphere = build_sphere(12, 6, 2.0, center=(1.0, 0.0, 0.0))
    normals = _face_normals(sphere)
    pos = sphere.vertices[:, :3].astype(np.float64)
    f = sphere.indices.reshape(-1, 3)
    centers = (pos[f[:, 0]] + pos[f[:, 1]] + pos[f[:, 2]]) / 3.0 - np.array([1.0, 0.0, 0.0])
    area = np.linalg.norm(normals, axis=1)
    solid = area > 1e-6
    # the pole rows collapse to zero-area triangles
    assert (~solid).sum() == 2 * 12
    assert (np.einsum("ij,ij->i", normals[solid], centers[solid]) > 0).all()


def test_merge_rebases_indices():
    a = build_sphere(4, 2, 1.0)
    b = build_grid_indices(2)
    quad = MeshData(vertices=np.zeros((4, 6), dtype=np.float32), indices=b)
    merged = merge_meshes([a, quad])
    assert merged.vertex_count == a.vertex_count + 4
    assert merged.indices[-6:].tolist() == (b + a.vertex_count).tolist()
    assert merge_meshes([]).triangle_count == 0


def test_demo_mesh_kinds():
    kw = dict(seed=1, grid_res=4, patch_size=2.0, amplitude=0.2, sphere_segments=6, sphere_rings=3, sphere_radius=0.5)
    box = build_demo_mesh("box", **kw)
    sphere = build_demo_mesh("sphere", **kw)
    mixed = build_demo_mesh("mixed", **kw)
    assert mixed.triangle_count == box.triangle_count + sphere.triangle_count
    with pytest.raises(ValueError):
        build_demo_mesh("teapot", **kw)


def test_demo_mesh_is_seeded():
    kw = dict(grid_res=6, patch_size=2.0, amplitude=0.3, sphere_segments=6, sphere_rings=3, sphere_radius=0.5)
    a = build_demo_mesh("box", seed=5, **kw)
    b = build_demo_mesh("box", seed=5, **kw)
    c = build_demo_mesh("box", seed=6, **kw)
    assert np.array_equal(a.vertices, b.vertices)
    assert not np.array_equal(a.vertices, c.vertices)


def test_save_and_load(tmp_path):
    mesh = build_box(3, 1.0, seed=1)
    path = tmp_path / "box.npz"
    save_mesh(path, mesh)
    loaded = load_mesh(path)
    assert loaded.stride == mesh.stride
    assert np.array_equal(loaded.vertices, mesh.vertices)
    assert np.array_equal(loaded.indices, mesh.indices)


def test_load_flat_positions(tmp_path):
    path = tmp_path / "flat.npz"
    np.savez(path, vertices=np.arange(9, dtype=np.float32), indices=np.array([0, 1, 2]))
    mesh = load_mesh(path)
    assert mesh.vertex_count == 3
    assert mesh.stride == 12
    assert mesh.indices.dtype == np.uint32


def test_load_missing_key(tmp_path):
    path = tmp_path / "bad.npz"
    np.savez(path, indices=np.array([0, 1, 2]))
    with pytest.raises(RuntimeError):
        load_mesh(path)
