from __future__ import annotations

# App
APP_VERSION = "0.3.1"

# Vertex cache model
DEFAULT_CACHE_SIZE = 16  # FIFO entries; must be >= 3
MIN_CACHE_SIZE = 3

# Soft clusters: ACMR multiplier relative to the enclosing hard cluster.
# < 1.0 -> fewer, larger clusters kept near cache-optimal order
# > 1.0 -> more, smaller clusters (better overdraw, worse ACMR)
DEFAULT_THRESHOLD = 1.05

# Vertex buffers
MAX_VERTEX_STRIDE = 256  # bytes

# Demo meshes
DEFAULT_SEED = 12345
DEFAULT_MESH = "mixed"  # "box" | "sphere" | "mixed"
DEFAULT_GRID_RES = 24  # vertices per patch side
DEFAULT_PATCH_SIZE = 10.0
DEFAULT_PATCH_AMPLITUDE = 0.6
DEFAULT_SPHERE_SEGMENTS = 48
DEFAULT_SPHERE_RINGS = 24
DEFAULT_SPHERE_RADIUS = 3.0
