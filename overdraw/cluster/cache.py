from __future__ import annotations

from dataclasses import dataclass

import numpy as np


def update_cache(a: int, b: int, c: int, cache_size: int, cache_timestamps: list[int], timestamp: int) -> tuple[int, int]:
    """Feed one triangle through a FIFO vertex cache of `cache_size` entries.

    A vertex is cached while `timestamp - cache_timestamps[v] <= cache_size`.
    Every miss stamps the vertex with the current time and advances the clock,
    so a triangle that repeats a vertex only pays for it once.

    Returns (misses, timestamp); the caller owns the clock.
    """
    misses = 0
    for v in (a, b, c):
        if timestamp - cache_timestamps[v] > cache_size:
            cache_timestamps[v] = timestamp
            timestamp += 1
            misses += 1
    return misses, timestamp


def as_index_list(indices) -> list[int]:
    """Flatten an index buffer into python ints (fast to subscript in loops)."""
    return np.asarray(indices).reshape(-1).tolist()


@dataclass(frozen=True)
class VertexCacheStats:
    vertices_transformed: int
    acmr: float  # transformed vertices per triangle (0.5 .. 3.0)
    atvr: float  # transformed vertices per vertex (1.0 is optimal)


def analyze_vertex_cache(indices, vertex_count: int, cache_size: int) -> VertexCacheStats:
    """Replay the whole index stream through a cold cache and measure it."""
    idx = as_index_list(indices)
    face_count = len(idx) // 3
    if face_count == 0 or vertex_count == 0:
        return VertexCacheStats(vertices_transformed=0, acmr=0.0, atvr=0.0)

    cache_timestamps = [0] * int(vertex_count)
    timestamp = cache_size + 1
    transformed = 0

    for i in range(0, face_count * 3, 3):
        m, timestamp = update_cache(idx[i], idx[i + 1], idx[i + 2], cache_size, cache_timestamps, timestamp)
        transformed += m

    return VertexCacheStats(
        vertices_transformed=transformed,
        acmr=transformed / face_count,
        atvr=transformed / int(vertex_count),
    )
