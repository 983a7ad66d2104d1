"""
Freeze Policy

Sealed counterparts of the two draftable aggregate shapes.

GUARANTEES:
===========
- FrozenDict / FrozenList reject every in-place write
- Reads, iteration, equality, copy, deepcopy and pickle keep working
- Sealing never mutates its input: it returns the sealed aggregate

Python containers cannot be frozen in place, so callers always use the
value returned by freeze() / seal(). Deep immutability comes from the
finalizer applying the policy bottom-up, not from a separate pass.
"""

from __future__ import annotations
from typing import Any, Optional

from ..config import DraftConfig, default_config
from ..contracts.base import FrozenAggregateError


def _blocked(name: str):
    def method(self, *args, **kwargs):
        raise FrozenAggregateError(
            f"Cannot {name.strip('_')} a frozen {type(self).__name__}",
            context=(('operation', name),)
        )
    method.__name__ = name
    return method


class FrozenDict(dict):
    """A dict that rejects writes after construction."""
    __slots__ = ()

    __setitem__ = _blocked('__setitem__')
    __delitem__ = _blocked('__delitem__')
    __ior__ = _blocked('__ior__')
    clear = _blocked('clear')
    pop = _blocked('pop')
    popitem = _blocked('popitem')
    setdefault = _blocked('setdefault')
    update = _blocked('update')

    def __reduce__(self):
        return (FrozenDict, (dict(self),))

    def __repr__(self) -> str:
        return f"FrozenDict({dict.__repr__(self)})"


class FrozenList(list):
    """A list that rejects writes after construction."""
    __slots__ = ()

    __setitem__ = _blocked('__setitem__')
    __delitem__ = _blocked('__delitem__')
    __iadd__ = _blocked('__iadd__')
    __imul__ = _blocked('__imul__')
    append = _blocked('append')
    extend = _blocked('extend')
    insert = _blocked('insert')
    pop = _blocked('pop')
    remove = _blocked('remove')
    clear = _blocked('clear')
    sort = _blocked('sort')
    reverse = _blocked('reverse')

    def __reduce__(self):
        return (FrozenList, (list(self),))

    def __repr__(self) -> str:
        return f"FrozenList({list.__repr__(self)})"


def is_frozen(value: Any) -> bool:
    return isinstance(value, (FrozenDict, FrozenList))


def seal(value: Any) -> Any:
    """Seal a plain dict or list unconditionally; other values pass through."""
    kind = type(value)
    if kind is dict:
        return FrozenDict(value)
    if kind is list:
        return FrozenList(value)
    return value


def freeze(value: Any, config: Optional[DraftConfig] = None) -> Any:
    """Seal value when auto-freeze is enabled, otherwise return it unchanged."""
    config = config or default_config()
    if config.auto_freeze:
        return seal(value)
    return value
