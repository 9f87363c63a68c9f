"""
Brute Force Exact Index

The simplest baseline - keeps every location in a list and computes the
distance to all of them on each query. Always exact but O(nd) per query.
Shares the mutation and query surface of OnlineBallTree so it can be
used as an oracle.
"""

import numpy as np
from typing import Any, List, Optional

from ..ball import MAX_DIMENSION
from ..exceptions import DimensionMismatch, InvalidArgument, InvalidConfiguration


class BruteForceIndex:
    """
    Exact nearest neighbour index using brute force distance computation.

    Parameters
    ----------
    dimension : int
        Length of every location vector, between 1 and 452.
    """

    def __init__(self, dimension: int):
        if dimension < 1 or dimension > MAX_DIMENSION:
            raise InvalidConfiguration(
                f"dimension must be between 1 and {MAX_DIMENSION}, got {dimension}"
            )
        self.dimension = dimension
        self._locations: List[np.ndarray] = []
        self._payloads: List[Any] = []

    def size(self) -> int:
        return len(self._locations)

    def __len__(self) -> int:
        return len(self._locations)

    def _check_location(self, location) -> np.ndarray:
        location = np.asarray(location, dtype=np.float64)
        if location.ndim != 1 or location.shape[0] != self.dimension:
            raise DimensionMismatch(self.dimension, location.shape)
        return location

    def _distances(self, location: np.ndarray) -> np.ndarray:
        """Distances from location to every stored location (vectorized)."""
        diff = np.asarray(self._locations) - location
        return np.sqrt(np.sum(diff * diff, axis=1))

    def _index_of(self, location: np.ndarray) -> Optional[int]:
        if not self._locations:
            return None
        matches = np.flatnonzero(self._distances(location) == 0.0)
        return int(matches[0]) if len(matches) else None

    def insert(self, location, payload: Any) -> bool:
        """Store payload; False if the location is already stored."""
        if payload is None:
            raise InvalidArgument("None values for the payload are not permitted")
        location = self._check_location(location)
        if self._index_of(location) is not None:
            return False
        self._locations.append(location.copy())
        self._payloads.append(payload)
        return True

    def remove(self, location) -> Optional[Any]:
        """Remove and return the payload at location, None if absent."""
        location = self._check_location(location)
        index = self._index_of(location)
        if index is None:
            return None
        self._locations.pop(index)
        return self._payloads.pop(index)

    def nearest_neighbour_query(self, location) -> Optional[Any]:
        location = self._check_location(location)
        if not self._locations:
            return None
        return self._payloads[int(np.argmin(self._distances(location)))]

    def k_nearest_neighbour_query(self, location, k: int) -> Optional[List[Any]]:
        """Payloads of the k nearest items, sorted by ascending distance."""
        location = self._check_location(location)
        if k < 1:
            raise InvalidArgument(f"k must be at least 1, got {k}")
        if not self._locations:
            return None

        distances = self._distances(location)
        n = len(distances)
        if k >= n:
            indices = np.argsort(distances, kind='stable')
        else:
            # Use argpartition for efficiency (O(n) instead of O(n log n))
            indices = np.argpartition(distances, k)[:k]
            indices = indices[np.argsort(distances[indices], kind='stable')]
        return [self._payloads[i] for i in indices]

    def k_nearest_distances(self, location, k: int) -> np.ndarray:
        """Sorted distances of the k nearest items."""
        location = self._check_location(location)
        if not self._locations:
            return np.array([])
        return np.sort(self._distances(location))[:k]
