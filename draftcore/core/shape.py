"""
Aggregate Shapes

Type classification, shallow copy and uniform iteration over the two
draftable shapes: ordered sequences (list) and plain records (dict).

WHAT IS DRAFTABLE:
==================
- list, dict and their sealed counterparts FrozenList, FrozenDict
- NOTHING else: subclasses (OrderedDict, defaultdict, user classes),
  tuples, sets, functions and primitives are opaque leaves
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Callable

from ..contracts.base import NotDraftableError
from .freeze import FrozenDict, FrozenList


_DRAFTABLE_TYPES = frozenset({dict, list, FrozenDict, FrozenList})
_SEQUENCE_TYPES = frozenset({list, FrozenList})


def is_draftable(value: Any) -> bool:
    """True for plain dicts and lists (sealed or not)."""
    return type(value) in _DRAFTABLE_TYPES


is_proxyable = is_draftable


def is_sequence(value: Any) -> bool:
    return type(value) in _SEQUENCE_TYPES


def shallow_copy(value: Any) -> Any:
    """One-level copy. Nested values are shared, never copied."""
    if type(value) in _SEQUENCE_TYPES:
        return list(value)
    if type(value) in _DRAFTABLE_TYPES:
        return dict(value)
    raise NotDraftableError(
        f"Cannot shallow-copy a non-draftable value of type {type(value).__name__}",
        context=(('type', type(value).__name__),)
    )


def each(value: Any, visit: Callable[[Any, Any], None]) -> None:
    """
    Call visit(key, item) for every own key of a record, or
    visit(index, item) for every index of a sequence.

    Keys are snapshotted first, so visit may reassign existing keys.
    """
    if isinstance(value, Mapping):
        for key in list(value):
            visit(key, value[key])
    else:
        for index, item in enumerate(list(value)):
            visit(index, item)


def has(value: Any, key: Any) -> bool:
    """Own-key membership for records, index range for sequences."""
    if isinstance(value, Mapping):
        return key in value
    return isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(value)
