"""
Equality rules for change detection.

`strict_equal` is the default: state is assumed immutable, so a changed
sub-tree is a new object and identity is enough. Scalar values (numbers
including numpy scalars and Decimal, strings, dates and times) are compared
by value because equal scalars are not guaranteed to be the same object.

The other rules are meant to be passed as ``check_equal`` to ``watch()``.
"""

import datetime
import numbers
from typing import Any, Callable

import numpy as np

from .paths import ABSENT, get_path, parse_path

_SCALARS = (
    type(None),
    bool,
    numbers.Number,
    np.generic,
    str,
    bytes,
    datetime.date,
    datetime.time,
    datetime.timedelta,
)


def strict_equal(a: Any, b: Any) -> bool:
    """Identity for objects, value equality for scalars."""
    if a is b:
        return True
    if type(a) is not type(b) or not isinstance(a, _SCALARS):
        return False
    try:
        return bool(a == b)
    except (ValueError, TypeError):
        return False


def values_equal(a: Any, b: Any) -> bool:
    """
    Structural equality that also handles numpy arrays.

    Arrays are compared with np.array_equal. Comparisons that raise (or return
    something that is not a plain truth value) count as unequal.
    """
    if a is b:
        return True
    try:
        if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
            if type(a) != type(b):
                return False
            return bool(np.array_equal(a, b))
        return bool(a == b)
    except (ValueError, TypeError):
        return False


def by_key(key: str) -> Callable[[Any, Any], bool]:
    """
    Build a rule that only compares one key or attribute of the values.

    ``key`` may be a path (``"owner.id"``). Values missing the key are equal
    only when both are missing.
    """
    segments = parse_path(key)

    def check_equal(a: Any, b: Any) -> bool:
        left = get_path(a, segments)
        right = get_path(b, segments)
        if left is ABSENT or right is ABSENT:
            return left is right
        return values_equal(left, right)

    check_equal.__name__ = f"by_key_{key.replace('.', '_')}"
    return check_equal
