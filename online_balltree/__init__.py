"""
Online Ball Tree: a dynamically maintained ball tree for nearest neighbour search.

Supports online insertion and removal of payloads at points in a fixed
dimensional Euclidean space, with nearest and k-nearest neighbour queries.
"""

import logging

from .ball import Ball, MAX_DIMENSION, bounding_ball, hypervolume, squared_distance
from .exceptions import (
    BallTreeError,
    DimensionMismatch,
    InvalidArgument,
    InvalidConfiguration
)
from .tree import OnlineBallTree

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = '0.1.0'

__all__ = [
    'OnlineBallTree',
    'Ball',
    'MAX_DIMENSION',
    'bounding_ball',
    'hypervolume',
    'squared_distance',
    'BallTreeError',
    'DimensionMismatch',
    'InvalidArgument',
    'InvalidConfiguration',
]
