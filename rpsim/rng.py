"""
Injectable Random Source.

Every nondeterministic decision in the simulator goes through an object
exposing ``random()`` so runs can be seeded or scripted.
"""

import numpy as np


def check_seed(seed):
    """
    Validate a seed before it reaches numpy.

    None means unseeded. Anything else must be a non-negative int.
    """
    if seed is None:
        return None
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise ValueError(f"seed must be a non-negative integer, got {seed!r}")
    if seed < 0:
        raise ValueError(f"seed must be a non-negative integer, got {seed}")
    return int(seed)


class RandomSource:
    """Seedable uniform source backed by a numpy Generator."""

    def __init__(self, seed: int = None):
        self.seed = check_seed(seed)
        self.rng = np.random.default_rng(self.seed)

    def random(self) -> float:
        """Uniform value in [0, 1)."""
        return float(self.rng.random())


def pick_index(source, n: int) -> int:
    """
    Uniform index in [0, n) drawn from any object with ``random()``.

    Raises ValueError for an empty range.
    """
    if n <= 0:
        raise ValueError("cannot pick from an empty range")
    return min(int(source.random() * n), n - 1)
