"""Tests for greedy depth-first route search.

Uses hand-placed fields with known answers for hop counts, distances,
backtracking, and failure reasons, plus seeded random fields for the
path invariants (hop lengths, no revisits, distance sums).
"""

import math

import numpy as np
import pytest

from src.field import Point3, PointField
from src.search import (
    FailureReason,
    SearchNode,
    find_route,
    path_length,
    sort_toward_goal,
)

START = Point3(-500.0, 0.0, 0.0)
GOAL = Point3(500.0, 0.0, 0.0)


def _line_field(xs: list[float]) -> PointField:
    return PointField(np.array([[x, 0.0, 0.0] for x in xs], dtype=np.float64))


def _detour_field() -> PointField:
    """Small field whose greedy first choice is a dead end.

    Start (0,0,0), goal (10,0,0), jump 3. The root tries A first
    (largest x) but A is isolated, so the search backtracks and goes
    B -> C -> E -> F -> goal.
    """
    return PointField(np.array([
        [2.0, -2.0, 0.0],  # A: dead end
        [0.5, 2.2, 0.0],  # B
        [3.0, 2.2, 0.0],  # C
        [5.5, 2.2, 0.0],  # E
        [8.0, 1.0, 0.0],  # F: within 3 of goal
    ]))


class TestStraightLine:
    """Search along evenly spaced collinear points."""

    def test_hop_count_and_distance(self) -> None:
        field = _line_field([float(x) for x in range(-450, 451, 50)])
        outcome = find_route(field, START, GOAL, 60.0, 1000)

        assert outcome.succeeded
        assert outcome.because is None
        # 19 field points plus the final hop into the goal
        assert outcome.hop_count == 20
        assert outcome.total_distance == pytest.approx(1000.0)
        assert outcome.iterations == 19
        assert outcome.expanded == 19
        assert outcome.path[0] == START
        assert outcome.path[-1] == GOAL

    def test_hop_budget_exceeded(self) -> None:
        field = _line_field([float(x) for x in range(-450, 451, 50)])
        outcome = find_route(field, START, GOAL, 60.0, 5)

        assert not outcome.succeeded
        assert outcome.because is FailureReason.EXCEED_MAX_HOP
        assert outcome.hop_count is None
        assert outcome.total_distance is None
        assert outcome.path == ()
        assert outcome.iterations == 6

    def test_gap_reports_no_route(self) -> None:
        field = _line_field([-450.0, 200.0])
        outcome = find_route(field, START, GOAL, 60.0, 1000)

        assert not outcome.succeeded
        assert outcome.because is FailureReason.NO_ROUTE
        # expand -450, backtrack from it, exhaust the root
        assert outcome.iterations == 3


class TestBacktracking:
    """Search that must abandon a branch."""

    def test_backtracks_past_dead_end(self) -> None:
        field = _detour_field()
        start = Point3(0.0, 0.0, 0.0)
        goal = Point3(10.0, 0.0, 0.0)
        outcome = find_route(field, start, goal, 3.0, 100)

        assert outcome.succeeded
        expected = [
            start,
            Point3(0.5, 2.2, 0.0),
            Point3(3.0, 2.2, 0.0),
            Point3(5.5, 2.2, 0.0),
            Point3(8.0, 1.0, 0.0),
            goal,
        ]
        assert list(outcome.path) == expected
        assert outcome.hop_count == 5
        assert outcome.total_distance == pytest.approx(path_length(expected))
        # A, backtrack, B, C, E, F
        assert outcome.iterations == 6
        assert outcome.expanded == 5

    def test_abandoned_point_stays_visited(self) -> None:
        field = _detour_field()
        find_route(field, Point3(0.0, 0.0, 0.0), Point3(10.0, 0.0, 0.0), 3.0, 100)
        dead_end = next(
            i for i in range(len(field)) if field.point(i) == Point3(2.0, -2.0, 0.0)
        )
        assert field.is_visited(dead_end)

    def test_budget_counts_backtracks(self) -> None:
        field = _detour_field()
        outcome = find_route(
            field, Point3(0.0, 0.0, 0.0), Point3(10.0, 0.0, 0.0), 3.0, 5
        )
        assert outcome.because is FailureReason.EXCEED_MAX_HOP


class TestTerminalCases:
    """Direct reach, empty fields, cancellation and argument checks."""

    def test_goal_in_direct_reach(self) -> None:
        field = _line_field([0.0])
        outcome = find_route(field, START, GOAL, 2000.0, 10)

        assert outcome.succeeded
        assert outcome.hop_count == 1
        assert outcome.total_distance == pytest.approx(1000.0)
        assert outcome.path == (START, GOAL)
        assert field.visited_count == 0

    def test_empty_field_no_route(self) -> None:
        field = PointField(np.empty((0, 3)))
        outcome = find_route(field, START, GOAL, 70.0, 100)
        assert outcome.because is FailureReason.NO_ROUTE
        assert outcome.iterations == 1

    def test_single_hop_budget(self) -> None:
        field = _line_field([-450.0, -400.0])
        outcome = find_route(field, START, GOAL, 60.0, 1)
        assert outcome.because is FailureReason.EXCEED_MAX_HOP

    def test_cancellation(self) -> None:
        field = _line_field([float(x) for x in range(-450, 451, 50)])
        outcome = find_route(field, START, GOAL, 60.0, 1000, should_stop=lambda: True)
        assert outcome.because is FailureReason.CANCELLED
        assert outcome.iterations == 1
        assert field.visited_count == 0

    def test_invalid_arguments(self) -> None:
        field = _line_field([0.0])
        with pytest.raises(ValueError, match="jump_range"):
            find_route(field, START, GOAL, 0.0, 10)
        with pytest.raises(ValueError, match="max_hop"):
            find_route(field, START, GOAL, 10.0, 0)


class TestRandomFieldInvariants:
    """Path invariants over seeded random fields."""

    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
    def test_path_invariants(self, seed: int) -> None:
        rng = np.random.default_rng(seed)
        # 100-unit corridor in a 120-unit cube
        field = PointField.generate(120.0, 0.02, rng)
        start = Point3(-50.0, 0.0, 0.0)
        goal = Point3(50.0, 0.0, 0.0)
        jump = 9.0
        outcome = find_route(field, start, goal, jump, 10_000)

        assert outcome.expanded == field.visited_count
        if not outcome.succeeded:
            assert outcome.because in (
                FailureReason.NO_ROUTE, FailureReason.EXCEED_MAX_HOP,
            )
            return

        path = outcome.path
        assert path[0] == start and path[-1] == goal
        assert outcome.hop_count == len(path) - 1
        hops = [a.dist(b) for a, b in zip(path, path[1:])]
        assert all(h < jump for h in hops)
        assert outcome.total_distance == pytest.approx(math.fsum(hops))
        interior = path[1:-1]
        assert len(set(interior)) == len(interior)

    def test_dense_field_succeeds(self) -> None:
        field = PointField.generate(120.0, 0.05, np.random.default_rng(42))
        outcome = find_route(
            field, Point3(-50.0, 0.0, 0.0), Point3(50.0, 0.0, 0.0), 12.0, 10_000
        )
        assert outcome.succeeded
        assert outcome.total_distance >= 100.0


class TestHelpers:
    """Tests for candidate ordering and node bookkeeping."""

    def test_sort_toward_goal(self) -> None:
        field = _line_field([1.0, 5.0, 3.0])
        # field order is by x: indices 0->1.0, 1->3.0, 2->5.0; 3.0 and 5.0 tie
        ordered = sort_toward_goal(field, np.array([0, 1, 2]), Point3(4.0, 0.0, 0.0))
        assert [field.point(int(i)).x for i in ordered] == [3.0, 5.0, 1.0]

    def test_sort_toward_goal_strict(self) -> None:
        field = _line_field([1.0, 2.0, 6.0])
        ordered = sort_toward_goal(field, np.array([2, 0, 1]), Point3(2.5, 0.0, 0.0))
        assert [field.point(int(i)).x for i in ordered] == [2.0, 1.0, 6.0]

    def test_pop_unvisited_skips_consumed(self) -> None:
        field = _line_field([0.0, 1.0, 2.0])
        node = SearchNode(point=None, parent=None, candidates=np.array([2, 1, 0]))
        field.mark_visited(2)
        assert node.pop_unvisited(field) == 1
        field.mark_visited(0)
        assert node.pop_unvisited(field) is None
        node.release()
        assert len(node.candidates) == 0
