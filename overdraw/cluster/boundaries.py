from __future__ import annotations

from typing import Iterator, Tuple

import numpy as np

from overdraw.cluster.cache import as_index_list, update_cache


def cluster_ranges(clusters, face_count: int) -> Iterator[Tuple[int, int]]:
    """Yield (start, end) triangle ranges; a cluster ends where the next begins."""
    starts = [int(c) for c in clusters]
    for k, start in enumerate(starts):
        end = starts[k + 1] if k + 1 < len(starts) else face_count
        yield start, end


def generate_hard_boundaries(indices, vertex_count: int, cache_size: int) -> np.ndarray:
    """Split the stream wherever a triangle misses the cache on all three vertices.

    Returns ascending triangle indices; the first one is always 0.
    """
    idx = as_index_list(indices)
    face_count = len(idx) // 3

    cache_timestamps = [0] * int(vertex_count)
    timestamp = cache_size + 1

    result: list[int] = []
    for i in range(face_count):
        m, timestamp = update_cache(idx[i * 3], idx[i * 3 + 1], idx[i * 3 + 2], cache_size, cache_timestamps, timestamp)

        # Three fresh vertices usually mean a new patch, disjoint from what came before.
        # The stream may come back to old vertices later; that is a weakness of the
        # upstream cache ordering, not something to correct for here.
        # A degenerate first triangle can have fewer misses, so 0 is forced.
        if i == 0 or m == 3:
            result.append(i)

    assert len(result) <= face_count
    return np.array(result, dtype=np.uint32)


def generate_soft_boundaries(indices, vertex_count: int, clusters, cache_size: int, threshold: float) -> np.ndarray:
    """Subdivide hard clusters until each piece reaches a target ACMR.

    The target for a hard cluster is `threshold` times its own ACMR. A piece is
    closed on the first triangle that brings its running ACMR to the target;
    whatever is left at the end of the hard cluster is folded into the last
    closed piece.
    """
    idx = as_index_list(indices)
    face_count = len(idx) // 3

    cache_timestamps = [0] * int(vertex_count)
    timestamp = 0

    result: list[int] = []
    for start, end in cluster_ranges(clusters, face_count):
        assert start < end

        # flush
        timestamp += cache_size + 1

        cluster_misses = 0
        for i in range(start, end):
            m, timestamp = update_cache(idx[i * 3], idx[i * 3 + 1], idx[i * 3 + 2], cache_size, cache_timestamps, timestamp)
            cluster_misses += m

        cluster_threshold = float(threshold) * (cluster_misses / (end - start))

        result.append(start)

        # flush
        timestamp += cache_size + 1

        running_misses = 0
        running_faces = 0

        for i in range(start, end):
            m, timestamp = update_cache(idx[i * 3], idx[i * 3 + 1], idx[i * 3 + 2], cache_size, cache_timestamps, timestamp)
            running_misses += m
            running_faces += 1

            if running_misses / running_faces <= cluster_threshold:
                # Target reached on this triangle: the next piece starts after it.
                # On the last triangle this pushes `end` itself, removed below.
                result.append(i + 1)

                timestamp += cache_size + 1
                running_misses = 0
                running_faces = 0

        # The tail after the last closed piece has, by construction, not reached the
        # target and is often just a few triangles with a terrible ACMR. Merge it into
        # the previous piece by dropping the last boundary (this also drops a pushed `end`).
        if result[-1] != start:
            result.pop()

    assert len(result) >= len(clusters)
    assert len(result) <= face_count
    return np.array(result, dtype=np.uint32)
