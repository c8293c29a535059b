"""
Test utilities for storewatch.

This package contains shared testing utilities to help write
better, more maintainable tests.
"""

from .store import ReducerStore, keep_state

__all__ = [
    "ReducerStore",
    "keep_state",
]
