"""Sorted-by-x point field with sphere range queries.

Points live in a single (n, 3) float64 array ordered ascending by x, with
a parallel boolean array of visited flags. A point is addressed by its
index into that array, which is what RouteSearch stores in its nodes.

Range queries binary-search the x column for the window
[x - radius, x + radius), then apply the visited flag, the directional
half-radius bound and the exact spherical test over that window only.
"""

import logging
import math
from collections.abc import Iterable

import numpy as np

from src.field.types import Point3

log = logging.getLogger(__name__)


class PointField:
    """Uniform random stopover points with per-run visited state.

    A field (and therefore its visited flags) belongs to exactly one search
    run. Use reset() to reuse it for another run, or copy() to hand an
    independent clone to another worker.
    """

    def __init__(
        self,
        positions: np.ndarray,
        visited: np.ndarray | None = None,
    ) -> None:
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        if visited is None:
            visited = np.zeros(len(positions), dtype=bool)
        else:
            visited = np.asarray(visited, dtype=bool)
            if visited.shape != (len(positions),):
                raise ValueError(
                    f"visited shape {visited.shape} does not match "
                    f"{len(positions)} points"
                )

        order = np.argsort(positions[:, 0], kind="stable")
        self._positions = np.ascontiguousarray(positions[order])
        self._visited = visited[order].copy()
        self._xs = np.ascontiguousarray(self._positions[:, 0])

    @classmethod
    def generate(
        cls,
        side_length: float,
        density: float,
        rng: np.random.Generator | None = None,
    ) -> "PointField":
        """Draw floor(side^3 * density) points uniformly in a centred cube.

        Each coordinate is independent and uniform in
        [-side_length/2, +side_length/2). A zero count yields an empty field.

        Args:
            side_length: Edge length of the cube.
            density: Expected points per cubic unit.
            rng: numpy random Generator; a fresh unseeded one if omitted.

        Returns:
            PointField sorted ascending by x.
        """
        if side_length < 0:
            raise ValueError(f"side_length must be >= 0, got {side_length}")
        if density < 0:
            raise ValueError(f"density must be >= 0, got {density}")
        if rng is None:
            rng = np.random.default_rng()

        count = math.floor(side_length**3 * density)
        positions = side_length * rng.random((count, 3)) - side_length / 2
        log.debug(
            "Generated %d points (side=%.1f, density=%.6f)",
            count, side_length, density,
        )
        return cls(positions)

    def __len__(self) -> int:
        return len(self._positions)

    @property
    def positions(self) -> np.ndarray:
        """Read-only (n, 3) view of point coordinates, sorted by x."""
        view = self._positions.view()
        view.flags.writeable = False
        return view

    @property
    def visited_count(self) -> int:
        return int(self._visited.sum())

    def point(self, index: int) -> Point3:
        x, y, z = self._positions[index]
        return Point3(float(x), float(y), float(z))

    def is_visited(self, index: int) -> bool:
        return bool(self._visited[index])

    def mark_visited(self, index: int) -> None:
        self._visited[index] = True

    def reset(self) -> None:
        """Clear every visited flag so the field can serve a new run."""
        self._visited[:] = False

    def copy(self) -> "PointField":
        """Independent clone, visited flags included."""
        return PointField(self._positions.copy(), self._visited.copy())

    def extend(self, points: Iterable[Point3]) -> None:
        """Add unvisited points and restore the x ordering."""
        extra = np.array([(p.x, p.y, p.z) for p in points], dtype=np.float64)
        if len(extra) == 0:
            return
        positions = np.concatenate([self._positions, extra.reshape(-1, 3)])
        visited = np.concatenate(
            [self._visited, np.zeros(len(extra), dtype=bool)]
        )
        order = np.argsort(positions[:, 0], kind="stable")
        self._positions = np.ascontiguousarray(positions[order])
        self._visited = visited[order]
        self._xs = np.ascontiguousarray(self._positions[:, 0])

    def x_window(self, center: Point3, radius: float) -> tuple[int, int]:
        """Index range [lo, hi) of points with center.x - r <= x < center.x + r."""
        lo = int(np.searchsorted(self._xs, center.x - radius, side="left"))
        hi = int(np.searchsorted(self._xs, center.x + radius, side="left"))
        return lo, hi

    def within(self, center: Point3, radius: float) -> np.ndarray:
        """Indices of unvisited points strictly inside the sphere around center.

        Only points with x >= center.x - radius/2 are returned: candidates
        more than half a radius behind the center are pruned so the search
        keeps making net progress along +x.

        Args:
            center: Query position (need not be a field point).
            radius: Sphere radius.

        Returns:
            int64 index array in descending x order.
        """
        lo, hi = self.x_window(center, radius)
        if lo >= hi:
            return np.empty(0, dtype=np.int64)

        window = self._positions[lo:hi]
        dx = window[:, 0] - center.x
        dy = window[:, 1] - center.y
        dz = window[:, 2] - center.z
        dist_sq = dx * dx + dy * dy + dz * dz

        mask = ~self._visited[lo:hi]
        mask &= window[:, 0] >= center.x - radius / 2
        mask &= dist_sq < radius * radius

        return (np.flatnonzero(mask) + lo)[::-1].astype(np.int64)
