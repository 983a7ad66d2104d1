"""
Drafting Backends

Two interchangeable strategies for maintaining DraftState while a recipe
runs. The finalizer depends only on the resulting state fields, never on
which backend produced them.

LAZY (copy on first write):
===========================
- No copy until the first effective write
- Reads before that hand out child drafts cached in state.children
- The first write materializes copy = shallow_copy(base) + cached children,
  on this node and on every ancestor

EAGER (copy at creation):
=========================
- working = shallow_copy(base) as soon as the draft is created
- state.copy stays None; the finalizer derives it from working

SHARED RULES:
=============
- Writing a value that is_same() as the current one is a no-op
- A same-length slice assignment of unchanged items is a no-op too, so
  sorting an already sorted list keeps the base
- Effective writes set assigned[key] = True, deletes set it to False
- Inserting or removing list items marks every shifted index assigned
- Marking a node modified marks every ancestor modified
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, List

from ..config import DraftingStrategy
from ..contracts.state import DraftState
from ..core.equality import is_same
from ..core.shape import has, is_draftable, shallow_copy


_MISSING = object()


def _base_value(base: Any, key: Any) -> Any:
    return base[key] if has(base, key) else _MISSING


def _owned_by_base(state: DraftState, key: Any, value: Any) -> bool:
    """
    True if value is a draftable aggregate held directly by base.

    Such values must be wrapped before they are handed out, even when an
    insert or delete moved them to a different index, or writes through
    them would reach the base.
    """
    if not is_draftable(value):
        return False
    if value is _base_value(state.base, key):
        return True
    return state.holds_base_value(value)


class DraftingBackend(ABC):
    """Capability interface implemented by each drafting strategy."""

    strategy: DraftingStrategy

    @abstractmethod
    def prepare(self, state: DraftState) -> None:
        """Initialize a freshly created state."""

    @abstractmethod
    def writable(self, state: DraftState) -> Any:
        """Mark state modified and return the aggregate that takes writes."""

    @abstractmethod
    def read(self, state: DraftState, key: Any) -> Any:
        """Read one key, wrapping draftable base values in child drafts."""

    @abstractmethod
    def is_noop_write(self, state: DraftState, key: Any, value: Any) -> bool:
        """True if writing value at key would not change anything."""

    def write(self, state: DraftState, key: Any, value: Any) -> None:
        if not state.modified and self.is_noop_write(state, key, value):
            return
        target = self.writable(state)
        state.assigned[key] = True
        target[key] = value

    def delete(self, state: DraftState, key: Any) -> None:
        if key not in state.source:
            raise KeyError(key)
        target = self.writable(state)
        state.assigned[key] = False
        del target[key]

    def splice(
        self,
        state: DraftState,
        start: int,
        stop: int,
        items: List[Any]
    ) -> None:
        """Replace source[start:stop] with items on a sequence draft."""
        if start == stop and not items:
            return
        if not state.modified and stop - start == len(items) and all(
            self.is_noop_write(state, start + offset, item)
            for offset, item in enumerate(items)
        ):
            return
        target = self.writable(state)
        old_length = len(target)
        target[start:stop] = items
        if stop - start == len(items):
            touched = range(start, stop)
        else:
            touched = range(start, max(old_length, len(target)))
        for index in touched:
            state.assigned[index] = True

    def _child(self, state: DraftState, value: Any) -> Any:
        return state.scope.create_draft(value, parent=state)


class LazyCopyBackend(DraftingBackend):
    """Intercept every access; copy on the first effective write."""

    strategy = DraftingStrategy.LAZY

    def prepare(self, state: DraftState) -> None:
        pass

    def _materialize(self, state: DraftState) -> None:
        if state.copy is None:
            state.copy = shallow_copy(state.base)
            for key, child in state.children.items():
                state.copy[key] = child

    def writable(self, state: DraftState) -> Any:
        state.mark_modified(self._materialize)
        return state.copy

    def read(self, state: DraftState, key: Any) -> Any:
        if state.modified:
            value = state.copy[key]
            if _owned_by_base(state, key, value):
                child = self._child(state, value)
                state.copy[key] = child
                return child
            return value

        value = state.base[key]
        if not is_draftable(value):
            return value
        child = state.children.get(key)
        if child is None:
            child = self._child(state, value)
            state.children[key] = child
        return child

    def is_noop_write(self, state: DraftState, key: Any, value: Any) -> bool:
        if has(state.base, key) and is_same(state.base[key], value):
            return True
        return key in state.children and state.children[key] is value


class EagerCopyBackend(DraftingBackend):
    """Shallow copy at creation; writes go straight to the working copy."""

    strategy = DraftingStrategy.EAGER

    def prepare(self, state: DraftState) -> None:
        state.working = shallow_copy(state.base)

    def writable(self, state: DraftState) -> Any:
        state.mark_modified()
        return state.working

    def read(self, state: DraftState, key: Any) -> Any:
        value = state.working[key]
        if _owned_by_base(state, key, value):
            child = self._child(state, value)
            state.working[key] = child
            return child
        return value

    def is_noop_write(self, state: DraftState, key: Any, value: Any) -> bool:
        if has(state.working, key) and is_same(state.working[key], value):
            return True
        return has(state.base, key) and is_same(state.base[key], value)


_BACKENDS = {
    DraftingStrategy.LAZY: LazyCopyBackend(),
    DraftingStrategy.EAGER: EagerCopyBackend(),
}


def backend_for(strategy: DraftingStrategy) -> DraftingBackend:
    return _BACKENDS[strategy]
