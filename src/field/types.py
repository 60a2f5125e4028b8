"""Point data structure for the 3-D stopover field."""

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Point3:
    """Immutable position in the field.

    The per-search visited flag is not stored here; it belongs to the
    PointField that owns the point, so independent runs never share it.
    """

    x: float
    y: float
    z: float

    def dist2(self, other: "Point3") -> float:
        """Squared Euclidean distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return dx * dx + dy * dy + dz * dz

    def dist(self, other: "Point3") -> float:
        return math.sqrt(self.dist2(other))

    def within(self, other: "Point3", radius_sq: float) -> bool:
        """True when other lies strictly inside the sphere of squared radius."""
        return self.dist2(other) < radius_sq

    def __str__(self) -> str:
        return f"[{self.x:.3f}, {self.y:.3f}, {self.z:.3f}]"
