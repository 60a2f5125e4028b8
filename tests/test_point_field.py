"""Tests for point field generation and sphere range queries.

Covers generation counts and bounds, x ordering, the exact sphere test,
the x-window pre-filter, the half-radius directional bound, visited
exclusion, and the reset/copy/extend ownership helpers.
"""

import numpy as np
import pytest

from src.field import Point3, PointField, sphere_density


def _random_field(n_side: float = 40.0, density: float = 0.05, seed: int = 7) -> PointField:
    return PointField.generate(n_side, density, np.random.default_rng(seed))


def _brute_force_within(field: PointField, center: Point3, radius: float) -> set[int]:
    """Reference answer computed over every point without the x window."""
    pos = field.positions
    d2 = ((pos - np.array([center.x, center.y, center.z])) ** 2).sum(axis=1)
    visited = np.array([field.is_visited(i) for i in range(len(field))], dtype=bool)
    mask = (d2 < radius * radius) & (pos[:, 0] >= center.x - radius / 2) & ~visited
    return set(np.flatnonzero(mask).tolist())


class TestGenerate:
    """Tests for random field generation."""

    def test_count_is_floor_of_volume_times_density(self) -> None:
        field = PointField.generate(10.0, 0.5, np.random.default_rng(0))
        assert len(field) == 500

        field = PointField.generate(10.0, 0.0123, np.random.default_rng(0))
        assert len(field) == 12  # floor(12.3)

    def test_coordinates_within_cube(self) -> None:
        field = PointField.generate(20.0, 0.2, np.random.default_rng(1))
        pos = field.positions
        assert pos.shape == (1600, 3)
        assert (pos >= -10.0).all()
        assert (pos <= 10.0).all()

    def test_sorted_by_x(self) -> None:
        field = _random_field()
        xs = field.positions[:, 0]
        assert (np.diff(xs) >= 0).all()

    def test_zero_density_is_empty(self) -> None:
        field = PointField.generate(1160.0, 0.0, np.random.default_rng(0))
        assert len(field) == 0
        assert len(field.within(Point3(0.0, 0.0, 0.0), 100.0)) == 0

    def test_reproducible_with_seed(self) -> None:
        a = _random_field(seed=3)
        b = _random_field(seed=3)
        np.testing.assert_array_equal(a.positions, b.positions)

    def test_rejects_negative_inputs(self) -> None:
        with pytest.raises(ValueError, match="side_length"):
            PointField.generate(-1.0, 0.1)
        with pytest.raises(ValueError, match="density"):
            PointField.generate(10.0, -0.1)

    def test_positions_view_is_read_only(self) -> None:
        field = _random_field()
        with pytest.raises(ValueError):
            field.positions[0, 0] = 99.0


class TestWithin:
    """Tests for sphere range queries."""

    def test_matches_brute_force(self) -> None:
        field = _random_field()
        rng = np.random.default_rng(11)
        for _ in range(50):
            c = Point3(*rng.uniform(-20.0, 20.0, size=3).tolist())
            r = float(rng.uniform(1.0, 10.0))
            got = field.within(c, r)
            assert set(got.tolist()) == _brute_force_within(field, c, r)
            assert len(set(got.tolist())) == len(got)

    def test_results_strictly_inside_sphere(self) -> None:
        field = _random_field()
        c = Point3(1.0, -2.0, 0.5)
        r = 6.0
        for i in field.within(c, r):
            assert field.point(int(i)).dist2(c) < r * r

    def test_x_window_and_directional_bound(self) -> None:
        field = _random_field()
        rng = np.random.default_rng(5)
        for _ in range(30):
            c = Point3(*rng.uniform(-15.0, 15.0, size=3).tolist())
            r = float(rng.uniform(2.0, 8.0))
            for i in field.within(c, r):
                x = field.point(int(i)).x
                assert c.x - r <= x <= c.x + r
                assert x >= c.x - r / 2

    def test_boundary_distance_is_excluded(self) -> None:
        field = PointField(np.array([[1.0, 0.0, 0.0], [0.999, 0.0, 0.0]]))
        got = field.within(Point3(0.0, 0.0, 0.0), 1.0)
        assert [field.point(int(i)).x for i in got] == [0.999]

    def test_points_behind_half_radius_are_pruned(self) -> None:
        field = PointField(np.array([
            [-0.6, 0.0, 0.0],  # inside the sphere but behind -r/2
            [-0.5, 0.0, 0.0],  # exactly on the directional bound: kept
            [0.4, 0.0, 0.0],
        ]))
        got = field.within(Point3(0.0, 0.0, 0.0), 1.0)
        assert sorted(field.point(int(i)).x for i in got) == [-0.5, 0.4]

    def test_descending_x_order(self) -> None:
        field = _random_field()
        got = field.within(Point3(0.0, 0.0, 0.0), 9.0)
        xs = [field.point(int(i)).x for i in got]
        assert len(xs) > 2
        assert xs == sorted(xs, reverse=True)

    def test_visited_points_excluded(self) -> None:
        field = _random_field()
        c = Point3(0.0, 0.0, 0.0)
        before = field.within(c, 8.0)
        assert len(before) > 3
        for i in before[:3]:
            field.mark_visited(int(i))
        after = field.within(c, 8.0)
        assert set(after.tolist()) == set(before[3:].tolist())

    def test_center_point_returned_until_visited(self) -> None:
        field = PointField(np.array([[0.0, 0.0, 0.0], [0.5, 0.0, 0.0]]))
        center = field.point(0)
        assert 0 in field.within(center, 1.0).tolist()
        field.mark_visited(0)
        assert field.within(center, 1.0).tolist() == [1]

    def test_x_window_bounds(self) -> None:
        field = PointField(np.array([[x, 0.0, 0.0] for x in range(10)], dtype=float))
        lo, hi = field.x_window(Point3(5.0, 0.0, 0.0), 2.0)
        # [3, 7): x == 7 is outside the half-open window
        assert (lo, hi) == (3, 7)


class TestOwnership:
    """Tests for reset, copy, and extend."""

    def test_reset_clears_visited(self) -> None:
        field = _random_field()
        for i in range(10):
            field.mark_visited(i)
        assert field.visited_count == 10
        field.reset()
        assert field.visited_count == 0

    def test_copy_is_independent(self) -> None:
        field = _random_field()
        field.mark_visited(0)
        clone = field.copy()
        assert clone.is_visited(0)
        clone.mark_visited(1)
        assert not field.is_visited(1)
        np.testing.assert_array_equal(field.positions, clone.positions)

    def test_extend_restores_order(self) -> None:
        field = PointField(np.array([[0.0, 0.0, 0.0], [2.0, 0.0, 0.0]]))
        field.mark_visited(1)
        field.extend([Point3(1.0, 0.0, 0.0), Point3(-1.0, 0.0, 0.0)])
        xs = field.positions[:, 0].tolist()
        assert xs == [-1.0, 0.0, 1.0, 2.0]
        # visited flag travels with its point
        assert field.is_visited(3)
        assert not field.is_visited(2)
        got = field.within(Point3(0.1, 0.0, 0.0), 0.95)
        assert sorted(field.point(int(i)).x for i in got) == [0.0, 1.0]

    def test_constructor_sorts_unsorted_input(self) -> None:
        field = PointField(np.array([[3.0, 0, 0], [1.0, 0, 0], [2.0, 0, 0]]))
        assert field.positions[:, 0].tolist() == [1.0, 2.0, 3.0]


class TestPoint3:
    """Tests for point distance helpers."""

    def test_distances(self) -> None:
        a = Point3(0.0, 0.0, 0.0)
        b = Point3(1.0, 2.0, 2.0)
        assert a.dist2(b) == 9.0
        assert a.dist(b) == 3.0
        assert a.within(b, 9.01)
        assert not a.within(b, 9.0)


class TestSphereDensity:
    """Tests for the sphere density helper."""

    def test_known_value(self) -> None:
        assert sphere_density(20.0, 50.0) == pytest.approx(0.0014921, rel=1e-4)

    def test_rejects_nonpositive_radius(self) -> None:
        with pytest.raises(ValueError, match="radius"):
            sphere_density(0.0, 10.0)
