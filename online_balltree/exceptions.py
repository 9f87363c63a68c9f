"""
Exceptions raised by the online ball tree.

All of them are caller errors: the operation that raised has not
modified the tree.
"""


class BallTreeError(ValueError):
    """Base class for ball tree argument errors."""


class InvalidConfiguration(BallTreeError):
    """Raised when a tree is constructed with an unsupported dimension."""


class DimensionMismatch(BallTreeError):
    """Raised when a location does not have the tree's dimension."""

    def __init__(self, expected: int, actual, what: str = 'location'):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"This OnlineBallTree is for {expected} dimensions, "
            f"but the {what} argument has {actual}"
        )


class InvalidArgument(BallTreeError):
    """Raised for a missing payload or an invalid neighbour count."""
