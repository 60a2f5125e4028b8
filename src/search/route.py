"""Greedy depth-first route search with backtracking over a PointField.

From the current node the search always tries the unexplored candidate
closest to the goal first. A node whose candidates run out is exhausted
and the search backtracks to its parent. Visited marking is global to the
run: a point consumed on an abandoned branch stays excluded everywhere,
which trades completeness for speed. A field can therefore report no_route
even though some hop sequence to the goal exists.

Every loop iteration, expansion or backtrack, advances the hop counter
that is checked against the hop budget.
"""

import logging
from collections.abc import Callable

import numpy as np

from src.field.points import PointField
from src.field.types import Point3
from src.search.types import FailureReason, SearchNode, SearchOutcome

log = logging.getLogger(__name__)


def sort_toward_goal(
    field: PointField, candidates: np.ndarray, goal: Point3
) -> np.ndarray:
    """Order candidate indices by ascending squared distance to goal."""
    if len(candidates) < 2:
        return candidates
    pts = field.positions[candidates]
    dx = pts[:, 0] - goal.x
    dy = pts[:, 1] - goal.y
    dz = pts[:, 2] - goal.z
    order = np.argsort(dx * dx + dy * dy + dz * dz, kind="stable")
    return candidates[order]


def trace_path(
    nodes: list[SearchNode], tip: int, field: PointField, start: Point3
) -> list[Point3]:
    """Follow parent links from `tip` back to the root, returned start-first."""
    path: list[Point3] = []
    index: int | None = tip
    while index is not None:
        node = nodes[index]
        path.append(start if node.point is None else field.point(node.point))
        index = node.parent
    path.reverse()
    return path


def path_length(path: list[Point3] | tuple[Point3, ...]) -> float:
    """Sum of Euclidean distances between consecutive path points."""
    total = 0.0
    for a, b in zip(path, path[1:]):
        total += a.dist(b)
    return total


def find_route(
    field: PointField,
    start: Point3,
    goal: Point3,
    jump_range: float,
    max_hop: int,
    should_stop: Callable[[], bool] | None = None,
) -> SearchOutcome:
    """Search for a hop sequence from start to goal.

    The field's visited flags are consumed by the run; reset() the field
    before searching it again.

    Args:
        field: Candidate stopover points. Start and goal are not members.
        start: Departure position.
        goal: Destination position.
        jump_range: Maximum length of a single hop.
        max_hop: Hop budget; exceeding it fails with EXCEED_MAX_HOP.
        should_stop: Optional cancellation check, called at every hop.

    Returns:
        SearchOutcome describing success (with path) or the failure reason.
    """
    if jump_range <= 0:
        raise ValueError(f"jump_range must be > 0, got {jump_range}")
    if max_hop <= 0:
        raise ValueError(f"max_hop must be > 0, got {max_hop}")

    radius_sq = jump_range * jump_range
    visited_before = field.visited_count

    def finish(
        because: FailureReason | None,
        hops: int,
        path: list[Point3] | None = None,
    ) -> SearchOutcome:
        expanded = field.visited_count - visited_before
        if because is not None:
            log.debug(
                "Search failed (%s) after %d hops, %d expanded",
                because, hops, expanded,
            )
            return SearchOutcome(
                succeeded=False,
                because=because,
                hop_count=None,
                total_distance=None,
                path=(),
                iterations=hops,
                expanded=expanded,
            )
        assert path is not None
        return SearchOutcome(
            succeeded=True,
            because=None,
            hop_count=len(path) - 1,
            total_distance=path_length(path),
            path=tuple(path),
            iterations=hops,
            expanded=expanded,
        )

    # Goal in direct reach of the start: one hop, no field points needed
    if start.within(goal, radius_sq):
        return finish(None, 0, [start, goal])

    # The root keeps the field's own order; only expanded nodes are sorted
    nodes = [SearchNode(point=None, parent=None, candidates=field.within(start, jump_range))]
    current = 0
    hops = 0

    while True:
        hops += 1
        if hops > max_hop:
            return finish(FailureReason.EXCEED_MAX_HOP, hops)
        if should_stop is not None and should_stop():
            return finish(FailureReason.CANCELLED, hops)

        node = nodes[current]
        nxt = node.pop_unvisited(field)
        if nxt is None:
            if node.parent is None:
                return finish(FailureReason.NO_ROUTE, hops)
            node.release()
            current = node.parent
            continue

        field.mark_visited(nxt)
        pos = field.point(nxt)
        candidates = sort_toward_goal(field, field.within(pos, jump_range), goal)
        nodes.append(SearchNode(point=nxt, parent=current, candidates=candidates))
        current = len(nodes) - 1

        if pos.within(goal, radius_sq):
            path = trace_path(nodes, current, field, start)
            path.append(goal)
            return finish(None, hops, path)
