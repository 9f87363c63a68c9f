"""
Tests for hypersphere geometry.
"""

import numpy as np
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from online_balltree.ball import (
    Ball,
    MAX_DIMENSION,
    bounding_ball,
    hypervolume,
    squared_distance
)


class TestHypervolume:
    """Test log-space volume computation."""

    def test_low_dimensions(self):
        """Known closed forms in 1, 2 and 3 dimensions."""
        assert hypervolume(2.0, 1) == pytest.approx(4.0)
        assert hypervolume(1.0, 2) == pytest.approx(np.pi)
        assert hypervolume(3.0, 2) == pytest.approx(9 * np.pi)
        assert hypervolume(1.0, 3) == pytest.approx(4.0 / 3.0 * np.pi)

    @pytest.mark.parametrize("dim", [1, 2, 10, MAX_DIMENSION])
    def test_zero_radius_is_exactly_zero(self, dim):
        volume = hypervolume(0.0, dim)
        assert volume == 0.0
        assert not np.isnan(volume)

    def test_unit_ball_positive_at_max_dimension(self):
        """The largest supported dimension still has a non-zero unit volume."""
        assert hypervolume(1.0, MAX_DIMENSION) > 0.0

    def test_overflow_gives_inf(self):
        assert hypervolume(1e6, 300) == float('inf')

    def test_ball_caches_volume(self):
        ball = Ball([0.0, 0.0], 2.0)
        assert ball.volume == pytest.approx(4 * np.pi)


class TestBall:
    """Test Ball value semantics and predicates."""

    def test_squared_distance(self):
        a = np.array([1.0, 2.0, 3.0])
        b = np.array([4.0, 6.0, 3.0])
        assert squared_distance(a, b) == pytest.approx(25.0)

    def test_immutable(self):
        ball = Ball([0.0, 0.0], 1.0)
        with pytest.raises(AttributeError):
            ball.radius = 2.0
        with pytest.raises(ValueError):
            ball.centre[0] = 5.0

    def test_centre_is_copied(self):
        centre = np.array([1.0, 1.0])
        ball = Ball(centre, 1.0)
        centre[0] = 100.0
        assert ball.centre[0] == 1.0

    def test_encloses(self):
        outer = Ball([0.0, 0.0], 5.0)
        inner = Ball([1.0, 1.0], 1.0)
        assert outer.encloses(inner)
        assert not inner.encloses(outer)

    def test_identical_balls_do_not_enclose(self):
        a = Ball([1.0, 2.0], 3.0)
        b = Ball([1.0, 2.0], 3.0)
        assert not a.encloses(b)
        assert not b.encloses(a)

        point = Ball([1.0, 2.0], 0.0)
        assert not point.encloses(Ball([1.0, 2.0], 0.0))

    def test_internally_touching_ball_is_not_enclosed(self):
        outer = Ball([0.0, 0.0], 2.0)
        inner = Ball([1.0, 0.0], 1.0)
        assert not outer.encloses(inner)

    def test_nearest_distance_to_centre(self):
        ball = Ball([0.0, 0.0], 1.0)
        assert ball.nearest_distance_to_centre(np.array([3.0, 4.0])) == pytest.approx(4.0)
        # Inside the ball the bound is negative
        assert ball.nearest_distance_to_centre(np.array([0.0, 0.5])) < 0.0

    def test_contains(self):
        ball = Ball([0.0, 0.0], 1.0)
        assert ball.contains(np.array([1.0, 0.0]))
        assert ball.contains(np.array([0.5, 0.5]))
        assert not ball.contains(np.array([1.0, 0.1]))


class TestBoundingBall:
    """Test the smallest enclosing ball of two balls."""

    def test_two_points(self):
        ball = bounding_ball(Ball([0.0, 0.0], 0.0), Ball([2.0, 0.0], 0.0))
        np.testing.assert_allclose(ball.centre, [1.0, 0.0])
        assert ball.radius == pytest.approx(1.0)

    def test_enclosing_ball_returned_unchanged(self):
        outer = Ball([0.0, 0.0], 5.0)
        inner = Ball([1.0, 0.0], 1.0)
        for ball in (bounding_ball(outer, inner), bounding_ball(inner, outer)):
            np.testing.assert_array_equal(ball.centre, outer.centre)
            assert ball.radius == outer.radius
            assert ball.volume == outer.volume

    def test_unequal_radii_shift_towards_larger(self):
        a = Ball([0.0], 1.0)
        b = Ball([4.0], 3.0)
        ball = bounding_ball(a, b)
        assert ball.radius == pytest.approx(4.0)
        np.testing.assert_allclose(ball.centre, [3.0])
        assert bounding_ball(b, a).radius == pytest.approx(4.0)

    def test_coincident_points_have_zero_volume(self):
        ball = bounding_ball(Ball([1.0, 1.0], 0.0), Ball([1.0, 1.0], 0.0))
        assert ball.radius == 0.0
        assert ball.volume == 0.0
        assert np.all(np.isfinite(ball.centre))

    def test_identical_balls(self):
        ball = bounding_ball(Ball([1.0, 1.0], 2.0), Ball([1.0, 1.0], 2.0))
        np.testing.assert_array_equal(ball.centre, [1.0, 1.0])
        assert ball.radius == 2.0

    def test_result_encloses_inputs(self):
        np.random.seed(42)
        for _ in range(50):
            a = Ball(np.random.randn(5), abs(np.random.randn()))
            b = Ball(np.random.randn(5), abs(np.random.randn()))
            ball = bounding_ball(a, b)
            for child in (a, b):
                reach = np.sqrt(squared_distance(ball.centre, child.centre)) + child.radius
                assert reach <= ball.radius + 1e-9


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
