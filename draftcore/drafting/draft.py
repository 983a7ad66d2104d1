"""
Draft Wrappers

A draft pairs a drafted value with its DraftState. User data never carries
hidden attributes: the state lives on the wrapper only.

- DictDraft behaves like a MutableMapping
- ListDraft behaves like a MutableSequence

Every operation is delegated to the backend of the owning scope, which
decides when the working copy is materialized.
"""

from __future__ import annotations
from collections.abc import MutableMapping, MutableSequence
from typing import Any, Iterator, Optional, Tuple

from ..contracts.base import RevokedDraftError
from ..contracts.state import DraftState
from ..core.shape import shallow_copy


class Draft:
    """Base wrapper. Never instantiated directly."""
    __slots__ = ('_state',)

    def __init__(self, state: DraftState):
        self._state = state

    def _live(self) -> DraftState:
        state = self._state
        if state.revoked:
            raise RevokedDraftError(
                "Cannot use a draft after the produce() call that created it "
                "has finished",
                context=(('draft_type', type(self).__name__),)
            )
        return state

    def _backend(self):
        return self._live().scope.backend

    def __len__(self) -> int:
        return len(self._live().source)

    def __eq__(self, other: Any) -> bool:
        if is_draft(other):
            other = current(other)
        return current(self) == other

    __hash__ = None

    def __repr__(self) -> str:
        if self._state.revoked:
            return f"<{type(self).__name__} (revoked)>"
        return f"<{type(self).__name__} {current(self)!r}>"


class DictDraft(Draft, MutableMapping):
    """Draft of a plain record."""
    __slots__ = ()

    def __getitem__(self, key: Any) -> Any:
        return self._backend().read(self._state, key)

    def __setitem__(self, key: Any, value: Any) -> None:
        self._backend().write(self._state, key, value)

    def __delitem__(self, key: Any) -> None:
        self._backend().delete(self._state, key)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._live().source))

    def __contains__(self, key: Any) -> bool:
        return key in self._live().source

    def popitem(self) -> Tuple[Any, Any]:
        """Remove and return the most recently inserted (key, value) pair."""
        keys = list(self)
        if not keys:
            raise KeyError("popitem(): dictionary is empty")
        key = keys[-1]
        value = self[key]
        del self[key]
        return key, value


class ListDraft(Draft, MutableSequence):
    """Draft of an ordered sequence."""
    __slots__ = ()

    def _index(self, index: int) -> int:
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError(
                f"list indices must be integers or slices, not {type(index).__name__}"
            )
        size = len(self)
        if index < 0:
            index += size
        if not 0 <= index < size:
            raise IndexError("list index out of range")
        return index

    def __getitem__(self, index: Any) -> Any:
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        return self._backend().read(self._state, self._index(index))

    def __setitem__(self, index: Any, value: Any) -> None:
        backend = self._backend()
        if not isinstance(index, slice):
            backend.write(self._state, self._index(index), value)
            return
        items = list(value)
        start, stop, step = index.indices(len(self))
        if step == 1:
            backend.splice(self._state, start, max(start, stop), items)
            return
        targets = range(start, stop, step)
        if len(targets) != len(items):
            raise ValueError(
                f"attempt to assign sequence of size {len(items)} "
                f"to extended slice of size {len(targets)}"
            )
        for i, item in zip(targets, items):
            backend.write(self._state, i, item)

    def __delitem__(self, index: Any) -> None:
        backend = self._backend()
        if not isinstance(index, slice):
            i = self._index(index)
            backend.splice(self._state, i, i + 1, [])
            return
        start, stop, step = index.indices(len(self))
        if step == 1:
            backend.splice(self._state, start, max(start, stop), [])
            return
        for i in sorted(range(start, stop, step), reverse=True):
            backend.splice(self._state, i, i + 1, [])

    def insert(self, index: int, value: Any) -> None:
        size = len(self)
        if index < 0:
            index = max(0, index + size)
        index = min(index, size)
        self._backend().splice(self._state, index, index, [value])

    def sort(self, *, key=None, reverse: bool = False) -> None:
        items = list(self)
        items.sort(key=key, reverse=reverse)
        self[:] = items


# =============================================================================
# INSPECTION HELPERS
# =============================================================================

def is_draft(value: Any) -> bool:
    return isinstance(value, Draft)


def state_of(draft: Draft) -> DraftState:
    """Return the DraftState behind a draft."""
    if not is_draft(draft):
        raise TypeError(f"Expected a draft, got {type(draft).__name__}")
    return draft._state


def original(value: Any) -> Optional[Any]:
    """The base a draft was created from; None for anything else."""
    if is_draft(value):
        return value._state.base
    return None


def current(value: Any) -> Any:
    """
    Plain snapshot of a draft's current contents.

    Unmodified drafts return their base. The snapshot is not sealed and
    shares every unmodified subtree with the base.
    """
    if not is_draft(value):
        return value
    state = value._live()
    if not state.modified:
        return state.base
    snapshot = shallow_copy(state.source)
    if isinstance(snapshot, list):
        keys = range(len(snapshot))
    else:
        keys = list(snapshot)
    for key in keys:
        if is_draft(snapshot[key]):
            snapshot[key] = current(snapshot[key])
    return snapshot
