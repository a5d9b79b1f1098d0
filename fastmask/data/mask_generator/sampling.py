"""Uniform sampling of distinct integers from an implicit range."""
from typing import Optional

import numpy as np

__all__ = ["sample_without_replacement"]


def sample_without_replacement(population: int, k: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Draw ``k`` distinct integers uniformly from ``[0, population)``.

    A partial Fisher-Yates shuffle is run over the range without building it:
    only the positions displaced by a swap are kept in a dict, so time and
    memory are ``O(k)`` whatever ``population`` is. Every subset of size ``k``
    is equally likely; the order of the returned indices carries no meaning.

    Args:
        population: Size of the range to sample from.
        k: Number of indices to draw, ``0 <= k <= population``.
        rng: Generator used for the draw. A fresh one is created if None.

    Returns:
        np.ndarray: int64 array of length ``k``.
    """
    population = int(population)
    k = int(k)
    if population < 0:
        raise ValueError(f"population must be non-negative, but got {population}.")
    if k < 0 or k > population:
        raise ValueError(f"k must be in [0, {population}], but got {k}.")
    if rng is None:
        rng = np.random.default_rng()

    if k == 0:
        return np.empty(0, dtype=np.int64)

    # step i swaps slot i with a slot drawn from [i, population)
    offsets = rng.integers(np.arange(k), population)
    displaced = {}
    picked = np.empty(k, dtype=np.int64)
    for i, j in enumerate(offsets.tolist()):
        picked[i] = displaced.get(j, j)
        displaced[j] = displaced.get(i, i)
    return picked
