"""
Draft Scope

One scope per produce() call. It owns every DraftState created while the
recipe runs and revokes them all once the operation finishes, whether it
succeeded or failed.

ISOLATION:
==========
- States are never shared between scopes
- Each scope snapshots its DraftConfig at creation
- The base trees of its root drafts are indexed by id on first need, so a
  base aggregate is recognized wherever the recipe moves it
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, List, Optional, Set

from ..config import DraftConfig
from ..contracts.base import NotDraftableError
from ..contracts.state import DraftState
from ..core.shape import is_draftable
from .backends import DraftingBackend, backend_for
from .draft import Draft, DictDraft, ListDraft


class DraftScope:
    """Owner of all drafts created during one drafting operation."""

    def __init__(self, config: DraftConfig):
        self.config = config
        self.backend: DraftingBackend = backend_for(config.strategy)
        self._states: List[DraftState] = []
        self._roots: List[Any] = []
        self._base_index: Optional[Set[int]] = None

    def create_draft(self, base: Any, parent: Optional[DraftState] = None) -> Draft:
        if not is_draftable(base):
            raise NotDraftableError(
                f"Only plain dicts and lists can be drafted, got {type(base).__name__}",
                context=(('type', type(base).__name__),)
            )
        if parent is None:
            self._roots.append(base)
            self._base_index = None
        state = DraftState(base=base, parent=parent, scope=self)
        self.backend.prepare(state)
        draft = DictDraft(state) if isinstance(base, Mapping) else ListDraft(state)
        state.draft = draft
        self._states.append(state)
        return draft

    def holds_base_value(self, value: Any) -> bool:
        """True if value is an aggregate reachable from the base of a root draft."""
        if self._base_index is None:
            self._base_index = _index_aggregates(self._roots)
        return id(value) in self._base_index

    @property
    def state_count(self) -> int:
        return len(self._states)

    def revoke(self) -> None:
        """Make every draft of this scope unusable."""
        for state in self._states:
            state.revoked = True


def _index_aggregates(roots: List[Any]) -> Set[int]:
    seen: Set[int] = set()
    stack = list(roots)
    while stack:
        node = stack.pop()
        if not is_draftable(node) or id(node) in seen:
            continue
        seen.add(id(node))
        stack.extend(node.values() if isinstance(node, Mapping) else node)
    return seen
