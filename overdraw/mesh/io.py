from __future__ import annotations

from pathlib import Path

import numpy as np

from overdraw.mesh.builder import MeshData


def save_mesh(path: str | Path, mesh: MeshData) -> None:
    """Write vertices, indices and stride (bytes) to an .npz archive."""
    np.savez(
        Path(path),
        vertices=np.ascontiguousarray(mesh.vertices, dtype=np.float32),
        indices=np.ascontiguousarray(mesh.indices, dtype=np.uint32),
        stride=np.int64(mesh.stride),
    )


def load_mesh(path: str | Path) -> MeshData:
    """Read a mesh written by `save_mesh`.

    `vertices` may be flat; it is reshaped by `stride` (bytes), which defaults
    to the row size of a 2D array or 12 bytes (positions only) for a flat one.
    """
    path = Path(path)
    try:
        with np.load(path) as data:
            vertices = np.asarray(data["vertices"], dtype=np.float32)
            indices = np.asarray(data["indices"]).astype(np.uint32).reshape(-1)
            if "stride" in data.files:
                stride = int(data["stride"])
            elif vertices.ndim == 2:
                stride = int(vertices.shape[1]) * vertices.itemsize
            else:
                stride = 3 * vertices.itemsize
    except (OSError, KeyError, ValueError) as e:
        raise RuntimeError(f"Failed to load mesh from {path}") from e

    return MeshData(vertices=vertices.reshape(-1, stride // vertices.itemsize), indices=indices)
