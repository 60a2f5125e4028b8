"""Per-trial seed derivation from a single master seed."""

import numpy as np


def derive_seeds(master_seed: int, n: int) -> list[int]:
    """Draw n independent field seeds from a master Generator.

    The same master seed always yields the same list, and the list for n
    is a prefix of the list for any larger n.

    Args:
        master_seed: Seed of the master numpy Generator.
        n: Number of seeds to draw.

    Returns:
        n Python ints in [0, 2**63).
    """
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    master_rng = np.random.default_rng(master_seed)
    return [int(master_rng.integers(0, 2**63)) for _ in range(n)]
