from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from overdraw.util.math import dot_rows, normalize_rows, triangle_normals


@dataclass
class ClusterSortData:
    cluster: np.ndarray  # (K,) uint32 cluster index
    dot_product: np.ndarray  # (K,) float64 rank; high = probable occluder
    centroid: np.ndarray  # (K,3) area-weighted cluster centroid
    normal: np.ndarray  # (K,3) unit average normal (zero when degenerate)


def calculate_sort_data(indices, positions: np.ndarray, clusters) -> ClusterSortData:
    """Rank clusters by how much they face away from the mesh centroid.

    positions: (V,3) vertex positions.
    clusters: ascending start triangle of each cluster, first one 0.

    Rank is dot(cluster_centroid - mesh_centroid, cluster_normal). Centroids are
    weighted by face area; a cluster with no area gets a zero centroid and a zero
    normal, so its rank is 0.
    """
    idx = np.asarray(indices).reshape(-1).astype(np.intp)
    pos = np.asarray(positions, dtype=np.float64)
    starts = np.asarray(clusters).astype(np.intp)

    # Every index occurrence counts, not unique vertices.
    mesh_centroid = pos[idx].mean(axis=0)

    faces = idx.reshape(-1, 3)
    p0 = pos[faces[:, 0]]
    p1 = pos[faces[:, 1]]
    p2 = pos[faces[:, 2]]

    normal = triangle_normals(p0, p1, p2)
    area = np.linalg.norm(normal, axis=1)
    weighted = (p0 + p1 + p2) * (area / 3.0)[:, None]

    cluster_area = np.add.reduceat(area, starts)
    cluster_centroid = np.add.reduceat(weighted, starts, axis=0)
    cluster_normal = np.add.reduceat(normal, starts, axis=0)

    inv_area = np.divide(1.0, cluster_area, out=np.zeros_like(cluster_area), where=cluster_area != 0)
    cluster_centroid = cluster_centroid * inv_area[:, None]
    cluster_normal = normalize_rows(cluster_normal)

    return ClusterSortData(
        cluster=np.arange(starts.shape[0], dtype=np.uint32),
        dot_product=dot_rows(cluster_centroid - mesh_centroid, cluster_normal),
        centroid=cluster_centroid,
        normal=cluster_normal,
    )


def sort_clusters(sort_data: ClusterSortData) -> np.ndarray:
    """Cluster indices in render order: highest rank first, ties by cluster index."""
    order = np.argsort(-sort_data.dot_product, kind="stable")
    return sort_data.cluster[order]
