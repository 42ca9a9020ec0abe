from __future__ import annotations
import numpy as np

def normalize(v: np.ndarray) -> np.ndarray:
    n = np.linalg.norm(v)
    if n == 0:
        return v
    return v / n

def normalize_rows(v: np.ndarray) -> np.ndarray:
    """Normalize each row of an (N,3) array; zero-length rows stay zero."""
    n = np.linalg.norm(v, axis=-1, keepdims=True)
    inv = np.divide(1.0, n, out=np.zeros_like(n), where=n != 0)
    return v * inv

def triangle_normals(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray) -> np.ndarray:
    """Unnormalized face normals; the length of each is twice the triangle area."""
    return np.cross(p1 - p0, p2 - p0)

def dot_rows(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.einsum("ij,ij->i", a, b)
