"""
Utility modules for the online ball tree.
"""

from .heap import MaxHeap, MinHeap
from .profiling import Profiler

__all__ = [
    'MaxHeap',
    'MinHeap',
    'Profiler',
]
