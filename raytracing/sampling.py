"""
Random sources for Monte-Carlo sampling.

Every random draw in the renderer (pixel jitter, lens samples, scatter
directions, the dielectric reflect/refract choice) goes through the
generator returned by `rng()`. Each thread gets its own numpy Generator,
seeded from OS entropy on first use, so render workers never contend on
(or correlate through) a shared generator.
"""

from __future__ import annotations
import threading
import numpy as np

_local = threading.local()


def rng() -> np.random.Generator:
    """Return the calling thread's random generator."""
    generator = getattr(_local, 'generator', None)
    if generator is None:
        generator = np.random.default_rng()
        _local.generator = generator
    return generator


def random_double(min_val: float = 0.0, max_val: float = 1.0) -> float:
    """Uniform random float in [min_val, max_val)."""
    return float(rng().uniform(min_val, max_val))
