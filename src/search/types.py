"""Search data structures: failure reasons, arena nodes, and outcomes."""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from src.field.points import PointField
from src.field.types import Point3


class FailureReason(str, Enum):
    """Why a route search terminated without reaching the goal.

    NO_ROUTE: Backtracking exhausted every candidate reachable from start.
    EXCEED_MAX_HOP: The hop counter passed the configured budget.
    CANCELLED: The caller's stop signal was observed mid-search.
    """

    NO_ROUTE = "no_route"
    EXCEED_MAX_HOP = "exceed_max_hop"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class SearchNode:
    """One step of the search path, stored in a per-run arena.

    `point` is the field index of this step's position, or None for the
    start node. `parent` is the arena index of the previous step. Candidates
    are consumed by advancing `cursor` rather than slicing the array.
    """

    point: int | None
    parent: int | None
    candidates: np.ndarray
    cursor: int = 0

    def pop_unvisited(self, field: PointField) -> int | None:
        """Next candidate not yet visited anywhere in the run, or None.

        Visited candidates are skipped and discarded: a point can sit in
        several nodes' lists before one of them consumes it.
        """
        while self.cursor < len(self.candidates):
            candidate = int(self.candidates[self.cursor])
            self.cursor += 1
            if not field.is_visited(candidate):
                return candidate
        return None

    def release(self) -> None:
        """Drop the candidate list once the node is exhausted."""
        self.candidates = self.candidates[:0]
        self.cursor = 0


@dataclass(frozen=True)
class SearchOutcome:
    """Terminal state of one route search.

    On success `path` runs from start to goal inclusive, so
    hop_count == len(path) - 1 and total_distance is the sum of the
    Euclidean lengths of consecutive path points.
    """

    succeeded: bool
    because: FailureReason | None
    hop_count: int | None
    total_distance: float | None
    path: tuple[Point3, ...]
    iterations: int  # hop counter value at termination
    expanded: int  # field points marked visited during the run
