"""
Online Ball Tree

A dynamically maintained ball tree following the first online
construction algorithm in

    Omohundro, S. M. Five balltree construction algorithms.
    International Computer Science Institute, 1989.

Properties of the maintained tree:
- Every interior node has two children and a ball enclosing both.
- Every leaf stores one location (a ball of radius 0) and a payload.
- A tree holding M items has M leaves and M - 1 interior nodes.
- New locations are placed to minimise the growth in total ball volume.
- Distances are Euclidean.
"""

import logging
import numpy as np
from typing import Any, Iterator, List, Optional, Tuple

from .ball import MAX_DIMENSION, bounding_ball, squared_distance
from .exceptions import DimensionMismatch, InvalidArgument, InvalidConfiguration
from .nodes import InteriorNode, LeafNode, Node
from .utils.heap import MaxHeap, MinHeap
from .utils.profiling import Profiler

logger = logging.getLogger(__name__)

_INF = float('inf')


class OnlineBallTree:
    """
    Ball tree supporting online insertion, removal and (k-)nearest
    neighbour queries over payloads stored at distinct locations.

    Not safe for concurrent use; callers sharing a tree between threads
    must serialise access themselves.

    Parameters
    ----------
    dimension : int
        Length of every location vector, between 1 and 452.
    profiler : Profiler or None, default=None
        Collects timings and counters. If None, one is created from the
        BALLTREE_PROFILE environment variable.

    Raises
    ------
    InvalidConfiguration
        If dimension is outside [1, 452].
    """

    def __init__(self, dimension: int, profiler: Optional[Profiler] = None):
        if isinstance(dimension, bool) or not isinstance(dimension, (int, np.integer)):
            raise InvalidConfiguration(
                f"The dimension must be an integer, got {type(dimension).__name__}"
            )
        if dimension < 1:
            raise InvalidConfiguration(
                "The OnlineBallTree should be constructed for a minimum of "
                "1-dimensional inputs"
            )
        if dimension > MAX_DIMENSION:
            raise InvalidConfiguration(
                f"The OnlineBallTree should be constructed for a maximum of "
                f"{MAX_DIMENSION}-dimensional inputs, as above this the volume "
                f"of the unit ball is calculated as 0.0"
            )
        self._dimension = int(dimension)
        self._root: Optional[Node] = None
        self._num_items = 0
        self.profiler = profiler if profiler is not None else Profiler.from_env()
        logger.debug(f"Created OnlineBallTree for {self._dimension} dimensions")

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def root(self) -> Optional[Node]:
        return self._root

    def size(self) -> int:
        """Number of stored items (equal to the number of leaves)."""
        return self._num_items

    def __len__(self) -> int:
        return self._num_items

    def height(self) -> int:
        """
        Height of the tree, not counting the leaf level.

        -1 for an empty tree, 0 when the root is a single leaf.
        """
        if self._root is None:
            return -1
        return self._root.height(0)

    def __contains__(self, location) -> bool:
        location = self._check_location(location)
        return self._stored_leaf(location) is not None

    def items(self) -> Iterator[Tuple[np.ndarray, Any]]:
        """Yield (location, payload) pairs, leaves from left to right."""
        if self._root is None:
            return
        for leaf in self._root.iter_leaves():
            yield leaf.location, leaf.payload

    def _check_location(self, location, what: str = 'location') -> np.ndarray:
        location = np.asarray(location, dtype=np.float64)
        if location.ndim != 1:
            raise DimensionMismatch(self._dimension, location.shape, what)
        if location.shape[0] != self._dimension:
            raise DimensionMismatch(self._dimension, location.shape[0], what)
        return location

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, location, payload: Any) -> bool:
        """
        Store payload at location.

        Parameters
        ----------
        location : array-like of shape (dimension,)
            Where to store the payload.
        payload : object
            Value associated with the location. Must not be None.

        Returns
        -------
        inserted : bool
            False if the location is already stored (the tree is unchanged).
        """
        if payload is None:
            raise InvalidArgument("None values for the payload are not permitted")
        location = self._check_location(location)

        with self.profiler.time("insert"):
            new_leaf = LeafNode(location, payload)
            if self._root is None:
                self._root = new_leaf
            else:
                # At high dimension rounding in the volumes can steer the
                # sibling search away from a coincident leaf, so duplicates
                # are found by an exact lookup rather than by the search.
                if self._stored_leaf(location) is not None:
                    self.profiler.count("duplicates")
                    logger.debug(f"Location {location.tolist()} already stored, not inserted")
                    return False

                sibling = self._best_sibling(new_leaf)
                parent_ball = bounding_ball(sibling.ball, new_leaf.ball)

                grandparent = sibling.parent
                new_parent = InteriorNode(parent_ball, sibling, new_leaf)
                if grandparent is None:
                    self._root = new_parent
                else:
                    grandparent.replace_child(sibling, new_parent)
                self._repair_parents(new_parent)

            self._num_items += 1
        return True

    def remove(self, location) -> Optional[Any]:
        """
        Remove the item stored at location.

        Returns
        -------
        payload : object or None
            The removed payload, or None if the location is not stored.
        """
        location = self._check_location(location)

        with self.profiler.time("remove"):
            leaf = self._stored_leaf(location)
            if leaf is None:
                logger.debug(f"Location {location.tolist()} not stored, nothing removed")
                return None

            old_parent = leaf.parent
            if old_parent is None:
                self._root = None
            else:
                # Splice the sibling into the old parent's slot, dropping
                # both the leaf and its parent from the tree.
                sibling = old_parent.other_child(leaf)
                grandparent = old_parent.parent
                if grandparent is None:
                    self._root = sibling
                    sibling.parent = None
                else:
                    grandparent.replace_child(old_parent, sibling)
                    self._shrink_balls(grandparent)
                leaf.parent = None

            self._num_items -= 1
        return leaf.payload

    def _best_sibling(self, new_leaf: LeafNode) -> Node:
        """
        Branch and bound search for the node to pair new_leaf with.

        The cost of pairing with a node is the volume of the new parent
        ball plus the volume growth forced on all of that node's ancestors.
        Fringe entries are keyed by (ancestor expansion, node volume); the
        ancestor expansion only grows when descending, so once the
        smallest one reaches the best cost nothing deeper can win.
        """
        root = self._root
        best = root
        best_cost = bounding_ball(root.ball, new_leaf.ball).volume
        fringe = MinHeap()
        if not root.is_leaf:
            fringe.push((0.0, best_cost), root)

        while fringe:
            (ancestor_expansion, node_volume), node = fringe.pop()
            self.profiler.count("fringe_pops")
            if ancestor_expansion >= best_cost:
                break

            expansion = ancestor_expansion + node_volume - node.ball.volume
            for child in (node.left, node.right):
                volume = bounding_ball(child.ball, new_leaf.ball).volume
                if volume + expansion < best_cost:
                    best_cost = volume + expansion
                    best = child
                if not child.is_leaf:
                    fringe.push((expansion, volume), child)

        return best

    def _repair_parents(self, node: Node):
        """Grow ancestor balls until one already encloses the changed subtree."""
        parent = node.parent
        while parent is not None:
            if parent.ball.encloses(node.ball):
                # Every further ancestor encloses this parent already.
                return
            parent.ball = bounding_ball(parent.ball, node.ball)
            node = parent
            parent = node.parent

    def _shrink_balls(self, node: Optional[InteriorNode]):
        """Recompute every ball from node up to the root after a removal."""
        while node is not None:
            node.ball = bounding_ball(node.left.ball, node.right.ball)
            node = node.parent

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def nearest_neighbour_query(self, location) -> Optional[Any]:
        """
        Payload stored closest to location, or None if the tree is empty.
        """
        location = self._check_location(location, 'query')
        with self.profiler.time("nearest"):
            leaf = self._nearest_leaf(location)
        return None if leaf is None else leaf.payload

    def k_nearest_neighbour_query(self, location, k: int) -> Optional[List[Any]]:
        """
        Payloads of the k items closest to location.

        Parameters
        ----------
        location : array-like of shape (dimension,)
            Query point.
        k : int
            Number of neighbours, >= 1.

        Returns
        -------
        payloads : list or None
            min(k, size()) payloads in no particular order, or None if the
            tree is empty. Sort by distance explicitly if order matters.
        """
        location = self._check_location(location, 'query')
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
            raise InvalidArgument(f"k must be an integer, got {type(k).__name__}")
        if k < 1:
            raise InvalidArgument(f"k must be at least 1, got {k}")
        if self._root is None:
            return None

        with self.profiler.time("k_nearest"):
            heap = self._k_nearest_leaves(location, int(k))
        return [leaf.payload for leaf in heap.items()]

    def _stored_leaf(self, location: np.ndarray) -> Optional[LeafNode]:
        """The leaf at exactly location, or None."""
        leaf = self._nearest_leaf(location)
        if leaf is None or squared_distance(leaf.location, location) > 0.0:
            return None
        return leaf

    def _nearest_leaf(self, location: np.ndarray) -> Optional[LeafNode]:
        """
        Best-first branch and bound search for the closest leaf.

        The query radius starts unbounded and shrinks to the distance of
        every improving leaf. The nearer child of each interior node is
        searched first; the other only if its lower bound is still below
        the radius once the nearer subtree is done.
        """
        if self._root is None:
            return None

        radius = _INF
        best = None
        stack = [(self._root, -_INF)]
        while stack:
            node, lower_bound = stack.pop()
            if lower_bound >= radius:
                continue
            if node.is_leaf:
                distance = float(np.sqrt(squared_distance(node.location, location)))
                self.profiler.count("leaf_distance")
                if distance <= radius:
                    radius = distance
                    best = node
            else:
                self._push_children(stack, node, location, radius)
        return best

    def _k_nearest_leaves(self, location: np.ndarray, k: int) -> MaxHeap:
        """
        Same descent as _nearest_leaf, keeping the k best leaves.

        The radius stays unbounded until k leaves have been seen, then
        tracks the worst distance held.
        """
        heap = MaxHeap(k)
        radius = _INF
        stack = [(self._root, -_INF)]
        while stack:
            node, lower_bound = stack.pop()
            if lower_bound >= radius:
                continue
            if node.is_leaf:
                distance = float(np.sqrt(squared_distance(node.location, location)))
                self.profiler.count("leaf_distance")
                if not heap.is_full():
                    heap.push(distance, node)
                    if heap.is_full():
                        radius = heap.peek_max()[0]
                elif distance <= radius:
                    # Evicts the current worst leaf.
                    heap.push(distance, node)
                    radius = heap.peek_max()[0]
            else:
                self._push_children(stack, node, location, radius)
        return heap

    @staticmethod
    def _push_children(stack: list, node: InteriorNode, location: np.ndarray, radius: float):
        """
        Queue the children of node for a search with the given radius.

        The nearer child goes on top with no bound so it is always
        searched; the farther child carries its lower bound and is skipped
        if the radius has shrunk to it by the time it is popped.
        """
        dist_left = node.left.ball.nearest_distance_to_centre(location)
        dist_right = node.right.ball.nearest_distance_to_centre(location)
        if dist_left > radius and dist_right > radius:
            return
        if dist_left < dist_right:
            stack.append((node.right, dist_right))
            stack.append((node.left, -_INF))
        else:
            stack.append((node.left, dist_left))
            stack.append((node.right, -_INF))

    def __repr__(self) -> str:
        return f"OnlineBallTree(dimension={self._dimension}, size={self._num_items})"
