"""random generators"""
from typing import List, Optional

import numpy as np

__all__ = ["spawn_generators"]


def spawn_generators(seed: Optional[int], n: int) -> List[np.random.Generator]:
    """Create ``n`` statistically independent generators, one per task.

    With ``seed=None`` the generators are seeded from OS entropy.
    """
    children = np.random.SeedSequence(seed).spawn(n)
    return [np.random.default_rng(s) for s in children]
