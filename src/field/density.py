"""Density helper for calibrating fields against a known neighbourhood."""

import math


def sphere_density(radius: float, count: float) -> float:
    """Points per cubic unit when `count` points fill a sphere of `radius`.

    Example: 50 points within 20 units gives about 0.00149.
    """
    if radius <= 0:
        raise ValueError(f"radius must be > 0, got {radius}")
    volume = 4.0 / 3.0 * math.pi * radius**3
    return count / volume
