"""
Draft State Model

Per-node bookkeeping record for a value that is being drafted.

INVARIANTS:
- modified == False  =>  copy is None, or shallowly identical to base
- modified propagates upward: a modified node has only modified ancestors
- modified is monotonic: never reset once set
- finalized == True  =>  copy holds the memoized immutable result
- base is never written to

OWNERSHIP:
==========
- base is shared and read-only (owned by the caller's input tree)
- copy and working are exclusively owned by this state until finalized
- One state belongs to exactly one DraftScope (one produce() call)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional


@dataclass(eq=False)
class DraftState:
    """
    Mutable bookkeeping for one drafted node.

    WHY MUTABLE:
    The drafting layer flips modified/finalized/assigned while the recipe
    runs. Identity comparison only: two states are never "equal".
    """
    base: Any
    parent: Optional[DraftState] = None
    scope: Any = None

    # Lazily created working copy (LAZY strategy) or memoized result
    copy: Any = None
    # Eagerly created working aggregate (EAGER strategy)
    working: Any = None

    modified: bool = False
    finalized: bool = False
    revoked: bool = False

    # key -> True for direct assignment, False for deletion
    assigned: Dict[Any, bool] = field(default_factory=dict)
    # child drafts handed out before the copy existed
    children: Dict[Any, Any] = field(default_factory=dict)

    # back-reference to the Draft wrapper exposing this state
    draft: Any = None

    @property
    def source(self) -> Any:
        """The aggregate readers currently see."""
        if self.working is not None:
            return self.working
        if self.copy is not None:
            return self.copy
        return self.base

    def holds_base_value(self, value: Any) -> bool:
        """True if value is an aggregate anywhere in the base tree of this scope."""
        return self.scope is not None and self.scope.holds_base_value(value)

    def mark_modified(
        self,
        materialize: Optional[Callable[[DraftState], None]] = None
    ) -> None:
        """
        Mark this node and every unmodified ancestor as modified.

        materialize runs on each node right before its flag flips, so a
        strategy can create the working copy on first write.
        """
        node = self
        while node is not None and not node.modified:
            if materialize is not None:
                materialize(node)
            node.modified = True
            node = node.parent
