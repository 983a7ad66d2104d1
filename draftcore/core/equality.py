"""
Equality Primitive

Same-value test used to decide whether a field actually changed.

RULES:
- Identical objects are always the same (including a NaN with itself)
- Primitives of the same type compare by value
- 0.0 and -0.0 are NOT the same
- NaN is the same as NaN
- True is not the same as 1 (types must match)
- Containers are only ever the same by identity
"""

from __future__ import annotations
import math
from typing import Any


_VALUE_TYPES = frozenset({bool, int, float, complex, str, bytes, type(None)})


def _same_float(x: float, y: float) -> bool:
    if x != x:
        return y != y
    if x == 0.0 and y == 0.0:
        return math.copysign(1.0, x) == math.copysign(1.0, y)
    return x == y


def is_same(x: Any, y: Any) -> bool:
    """Return True if x and y are the same value."""
    if x is y:
        return True
    kind = type(x)
    if kind is not type(y) or kind not in _VALUE_TYPES:
        return False
    if kind is float:
        return _same_float(x, y)
    if kind is complex:
        return _same_float(x.real, y.real) and _same_float(x.imag, y.imag)
    return x == y
