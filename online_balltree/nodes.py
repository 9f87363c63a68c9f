"""
Node model for the online ball tree.

Interior nodes own their two children. A child refers back to its parent
through a weak reference, which is only used to walk upwards during
repair and removal.
"""

import weakref
import numpy as np
from typing import Any, Iterator, Optional

from .ball import Ball


class Node:
    """Common part of interior nodes and leaves: a ball and a parent link."""

    __slots__ = ['ball', '_parent', '__weakref__']

    is_leaf = False

    def __init__(self, ball: Ball):
        self.ball = ball
        self._parent = None

    @property
    def parent(self) -> Optional['InteriorNode']:
        return self._parent() if self._parent is not None else None

    @parent.setter
    def parent(self, node: Optional['InteriorNode']):
        self._parent = weakref.ref(node) if node is not None else None

    def height(self, depth: int = 0) -> int:
        """Depth of the deepest leaf in this subtree, counting this node as depth."""
        best = depth
        stack = [(self, depth)]
        while stack:
            node, level = stack.pop()
            if node.is_leaf:
                best = max(best, level)
            else:
                stack.append((node.left, level + 1))
                stack.append((node.right, level + 1))
        return best

    def iter_leaves(self) -> Iterator['LeafNode']:
        """Yield the leaves of this subtree from left to right."""
        stack = [self]
        while stack:
            node = stack.pop()
            if node.is_leaf:
                yield node
            else:
                stack.append(node.right)
                stack.append(node.left)


class InteriorNode(Node):
    """Node with exactly two children and a ball enclosing both."""

    __slots__ = ['left', 'right']

    def __init__(self, ball: Ball, left: Node, right: Node):
        super().__init__(ball)
        self.left = left
        self.right = right
        left.parent = self
        right.parent = self

    def other_child(self, child: Node) -> Node:
        """Return the sibling of child."""
        return self.right if self.left is child else self.left

    def replace_child(self, old: Node, new: Node):
        """Put new in the slot currently held by old."""
        if self.left is old:
            self.left = new
        else:
            self.right = new
        new.parent = self

    def __repr__(self) -> str:
        return f"InteriorNode({self.ball!r})"


class LeafNode(Node):
    """Leaf holding one stored location and its payload."""

    __slots__ = ['payload']

    is_leaf = True

    def __init__(self, location: np.ndarray, payload: Any):
        super().__init__(Ball(location, 0.0))
        self.payload = payload

    @property
    def location(self) -> np.ndarray:
        return self.ball.centre

    def __repr__(self) -> str:
        return f"LeafNode(location={self.location.tolist()}, payload={self.payload!r})"
