"""Point field module: positions, random field generation, range queries."""

from src.field.density import sphere_density
from src.field.points import PointField
from src.field.types import Point3

__all__ = [
    "Point3",
    "PointField",
    "sphere_density",
]
