from __future__ import annotations

import numpy as np

from overdraw.cluster.boundaries import cluster_ranges, generate_hard_boundaries, generate_soft_boundaries
from overdraw.cluster.sort_data import calculate_sort_data, sort_clusters
from overdraw.config import DEFAULT_CACHE_SIZE, DEFAULT_THRESHOLD, MAX_VERTEX_STRIDE, MIN_CACHE_SIZE

# Based on: Pedro Sander, Diego Nehab and Joshua Barczak.
# Fast Triangle Reordering for Vertex Locality and Reduced Overdraw. 2007


def read_positions(vertex_positions, vertex_count: int, vertex_positions_stride: int) -> np.ndarray:
    """Gather (vertex_count,3) positions from a flat, possibly interleaved buffer.

    The stride is in bytes; only the first three scalars of each vertex are read.
    """
    flat = np.asarray(vertex_positions).reshape(-1)
    stride = int(vertex_positions_stride) // flat.itemsize
    base = np.arange(int(vertex_count), dtype=np.intp) * stride
    return np.stack([flat[base], flat[base + 1], flat[base + 2]], axis=1)


def build_clusters(indices, vertex_count: int, cache_size: int = DEFAULT_CACHE_SIZE, threshold: float = DEFAULT_THRESHOLD) -> np.ndarray:
    """Final cluster start triangles: hard boundaries refined into soft ones."""
    hard = generate_hard_boundaries(indices, vertex_count, cache_size)
    return generate_soft_boundaries(indices, vertex_count, hard, cache_size, threshold)


def _check_args(destination, src: np.ndarray, vertex_positions, vertex_count: int, stride: int, cache_size: int) -> None:
    index_count = int(src.shape[0])
    if index_count % 3 != 0:
        raise ValueError(f"index count must be a multiple of 3 (got {index_count})")

    scalar_size = np.asarray(vertex_positions).itemsize
    if stride <= 0 or stride > MAX_VERTEX_STRIDE or stride % scalar_size != 0:
        raise ValueError(
            f"vertex_positions_stride must be a positive multiple of {scalar_size} bytes, at most {MAX_VERTEX_STRIDE} (got {stride})"
        )

    if cache_size < MIN_CACHE_SIZE:
        raise ValueError(f"cache_size must be >= {MIN_CACHE_SIZE} (got {cache_size})")

    if destination is not None:
        if not isinstance(destination, np.ndarray) or not destination.flags.writeable or not destination.flags.c_contiguous:
            raise ValueError("destination must be a writeable, contiguous numpy array")
        if destination.size != index_count:
            raise ValueError(f"destination holds {destination.size} indices, expected {index_count}")

    if index_count == 0 or vertex_count == 0:
        return

    if int(src.min()) < 0 or int(src.max()) >= vertex_count:
        raise ValueError(f"indices must be in [0, {vertex_count})")

    needed = (vertex_count - 1) * (stride // scalar_size) + 3
    if np.asarray(vertex_positions).size < needed:
        raise ValueError(f"vertex_positions holds fewer than {vertex_count} vertices at stride {stride}")


def optimize_overdraw(
    destination,
    indices,
    vertex_positions,
    vertex_count: int,
    vertex_positions_stride: int,
    cache_size: int = DEFAULT_CACHE_SIZE,
    threshold: float = DEFAULT_THRESHOLD,
):
    """Reorder triangles so that probable occluders are drawn first.

    Run this after vertex cache optimization. Triangles are grouped into clusters
    that keep most of the existing cache locality (see `build_clusters`), and the
    clusters are emitted by decreasing dot(centroid - mesh centroid, normal).
    `threshold` trades cache efficiency (low) for overdraw (high); 1.05 is a
    reasonable start.

    destination: array of the same size as `indices`, may be `indices` itself.
        If None, a copy of `indices` is reordered and returned.
    Returns the destination array. Empty meshes leave it untouched.
    """
    src = np.asarray(indices).reshape(-1)
    vertex_count = int(vertex_count)
    stride = int(vertex_positions_stride)
    cache_size = int(cache_size)

    _check_args(destination, src, vertex_positions, vertex_count, stride, cache_size)

    if destination is None:
        destination = src.copy()

    index_count = int(src.shape[0])
    if index_count == 0 or vertex_count == 0:
        return destination

    # in-place: snapshot the source before the first write
    if destination is indices or np.may_share_memory(destination, src):
        src = src.copy()

    face_count = index_count // 3

    clusters = build_clusters(src, vertex_count, cache_size, threshold)
    positions = read_positions(vertex_positions, vertex_count, stride)
    sort_data = calculate_sort_data(src, positions, clusters)
    order = sort_clusters(sort_data)

    ranges = list(cluster_ranges(clusters, face_count))
    faces = src.reshape(-1, 3)
    out = destination.reshape(-1)
    offset = 0

    for cluster in order:
        start, end = ranges[int(cluster)]
        assert start < end

        count = (end - start) * 3
        out[offset:offset + count] = faces[start:end].reshape(-1)
        offset += count

    assert offset == index_count
    return destination
