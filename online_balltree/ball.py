"""
Hypersphere geometry for the online ball tree.

A Ball is an immutable (centre, radius) pair with its hypervolume cached
at construction. Volumes are computed in log space,

    V = exp(d/2 * ln(pi) + d * ln(r) - lnGamma(1 + d/2))

with the dimension dependent terms precomputed once for every supported
dimension. Above 452 dimensions the volume of the unit ball underflows to
0.0, which breaks the volume minimisation used during insertion, so that
is the largest dimension supported.
"""

import numpy as np
from typing import Optional
from scipy.special import gammaln

MAX_DIMENSION = 452

_DIMS = np.arange(MAX_DIMENSION + 1, dtype=np.float64)
_PI_TERM = (_DIMS / 2.0) * np.log(np.pi)
_LOG_GAMMA_TERM = gammaln(1.0 + _DIMS / 2.0)
_PI_TERM.setflags(write=False)
_LOG_GAMMA_TERM.setflags(write=False)
del _DIMS


def hypervolume(radius: float, dim: int) -> float:
    """
    Volume of a dim-dimensional ball of the given radius.

    Parameters
    ----------
    radius : float
        Non-negative radius.
    dim : int
        Dimension, between 1 and MAX_DIMENSION.

    Returns
    -------
    volume : float
        Exactly 0.0 when radius is 0, inf if the volume overflows.
    """
    if radius == 0.0:
        return 0.0
    with np.errstate(over='ignore'):
        return float(np.exp(_PI_TERM[dim] + dim * np.log(radius) - _LOG_GAMMA_TERM[dim]))


def squared_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Sum of squared per-axis differences."""
    diff = a - b
    return float(np.dot(diff, diff))


class Ball:
    """
    Immutable hypersphere.

    Nodes never change a Ball; they replace it with a new one.

    Parameters
    ----------
    centre : array-like of shape (d,)
        Centre of the ball. Stored as a read-only float64 array.
    radius : float
        Radius, >= 0.
    volume : float, optional
        Precomputed volume (used when copying a ball).
    """

    __slots__ = ('centre', 'radius', 'volume')

    def __init__(self, centre, radius: float, volume: Optional[float] = None):
        centre = np.array(centre, dtype=np.float64)
        centre.setflags(write=False)
        radius = float(radius)
        object.__setattr__(self, 'centre', centre)
        object.__setattr__(self, 'radius', radius)
        if volume is None:
            volume = hypervolume(radius, len(centre))
        object.__setattr__(self, 'volume', volume)

    def __setattr__(self, name, value):
        raise AttributeError("Ball is immutable")

    def __delattr__(self, name):
        raise AttributeError("Ball is immutable")

    @property
    def dimension(self) -> int:
        return len(self.centre)

    def copy(self) -> 'Ball':
        """Return an equal ball (shares the read-only centre)."""
        return Ball(self.centre, self.radius, self.volume)

    def nearest_distance_to_centre(self, point: np.ndarray) -> float:
        """
        Smallest possible distance from point to anything inside this ball.

        Negative when the point lies inside the ball. Used as the lower
        bound when pruning searches.
        """
        return float(np.sqrt(squared_distance(self.centre, point))) - self.radius

    def encloses(self, other: 'Ball') -> bool:
        """
        True if other lies strictly inside this ball.

        Two identical balls do not enclose each other. Duplicate detection
        on insert and the early exit of parent repair both depend on this.
        """
        radius_diff = self.radius - other.radius
        if radius_diff < 0.0:
            return False
        return radius_diff * radius_diff > squared_distance(self.centre, other.centre)

    def contains(self, point: np.ndarray) -> bool:
        """True if point lies in the closed ball."""
        return squared_distance(self.centre, point) <= self.radius * self.radius

    def __repr__(self) -> str:
        return f"Ball(centre={self.centre.tolist()}, radius={self.radius!r})"


def bounding_ball(a: Ball, b: Ball) -> Ball:
    """
    Smallest ball enclosing both a and b.

    If one ball already encloses the other, a copy of the enclosing ball
    is returned. Otherwise the centre lies on the line through both
    centres, shifted from the midpoint towards the larger ball by half the
    radius difference.
    """
    if a.encloses(b):
        return a.copy()
    if b.encloses(a):
        return b.copy()

    centre_diff = a.centre - b.centre
    centre_distance = float(np.sqrt(np.dot(centre_diff, centre_diff)))
    if centre_distance == 0.0:
        # Identical balls (or coincident points): no direction to shift in.
        larger = a if a.radius >= b.radius else b
        return larger.copy()

    radius_diff = a.radius - b.radius
    centre = ((a.centre + b.centre) + (centre_diff / centre_distance) * radius_diff) / 2.0
    return Ball(centre, (centre_distance + a.radius + b.radius) / 2.0)
