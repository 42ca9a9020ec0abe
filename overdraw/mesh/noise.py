from __future__ import annotations

from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class NoiseConfig:
    octaves: int = 4
    lacunarity: float = 2.0
    gain: float = 0.5
    base_freq: float = 0.35
    amplitude: float = 1.0


def _hash01(seed: int, xi: np.ndarray, zi: np.ndarray) -> np.ndarray:
    """Integer lattice hash -> [0,1), vectorized."""
    x = (xi.astype(np.uint32) * np.uint32(374761393)) ^ (zi.astype(np.uint32) * np.uint32(668265263)) ^ np.uint32(seed & 0xFFFFFFFF)
    x ^= (x >> np.uint32(13))
    x *= np.uint32(1274126177)
    x ^= (x >> np.uint32(16))
    return x.astype(np.float64) / float(2**32)


def value_noise(seed: int, x: np.ndarray, z: np.ndarray) -> np.ndarray:
    """Smoothly interpolated lattice noise in [0,1)."""
    xi = np.floor(x).astype(np.int64)
    zi = np.floor(z).astype(np.int64)
    tx = x - xi
    tz = z - zi
    # smootherstep
    u = tx * tx * tx * (tx * (tx * 6 - 15) + 10)
    v = tz * tz * tz * (tz * (tz * 6 - 15) + 10)

    a = _hash01(seed, xi, zi)
    b = _hash01(seed, xi + 1, zi)
    c = _hash01(seed, xi, zi + 1)
    d = _hash01(seed, xi + 1, zi + 1)

    ab = a + (b - a) * u
    cd = c + (d - c) * u
    return ab + (cd - ab) * v


def fbm(seed: int, x: np.ndarray, z: np.ndarray, cfg: NoiseConfig | None = None) -> np.ndarray:
    """Fractal sum of value noise octaves, scaled to [-amplitude, amplitude)."""
    cfg = cfg or NoiseConfig()
    freq = cfg.base_freq
    amp = 1.0
    total = np.zeros(np.broadcast(x, z).shape, dtype=np.float64)
    norm = 0.0
    for octave in range(cfg.octaves):
        n = value_noise(seed + octave * 7919, x * freq, z * freq)
        total += (n * 2.0 - 1.0) * amp
        norm += amp
        freq *= cfg.lacunarity
        amp *= cfg.gain
    return total / max(norm, 1e-9) * cfg.amplitude
