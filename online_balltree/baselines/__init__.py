"""
Baseline indexes for checking the ball tree.
"""

from .exact_brute_force import BruteForceIndex

__all__ = [
    'BruteForceIndex',
]
