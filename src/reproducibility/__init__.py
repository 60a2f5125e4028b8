"""Reproducibility infrastructure: trial seeding and code provenance tracking."""

from src.reproducibility.git_hash import get_git_hash
from src.reproducibility.seeds import derive_seeds

__all__ = [
    "derive_seeds",
    "get_git_hash",
]
