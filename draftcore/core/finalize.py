"""
Finalizer
=========

Converts a drafted (or partially drafted) tree into its immutable result.

CASE A - value is a draft:
1. Already finalized        -> memoized result (same object every time)
2. Not modified             -> base, untouched: no copy, no allocation
3. Modified                 -> mark finalized, take the working copy,
                               finalize every child that differs from base,
                               record patches, apply the freeze policy
                               and point direct self-references at the
                               sealed result

CASE B - value is plain data (possibly fresh, possibly holding drafts):
1. Not draftable or sealed  -> returned unchanged
2. Part of the base tree    -> returned unchanged, wherever it was moved
3. Otherwise                -> children resolved recursively (drafts through
                               Case A, plain aggregates through Case B) and
                               the rebuilt aggregate is sealed unconditionally

INVARIANTS:
- Unmodified subtrees are never touched, copied or reallocated
- Base values are never written to; Case B never mutates its input
- Patch emission below a directly assigned key is suppressed: the
  assignment is recorded once, at the parent
- Errors raised during traversal propagate unchanged

CYCLES:
=======
A node that holds its own draft finalizes to a sealed node holding
itself. A longer cycle (a child holding an ancestor draft) is closed
before the ancestor is sealed, so the child keeps the ancestor's
working copy rather than its sealed result.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import DraftConfig, default_config
from ..contracts.base import Path
from ..contracts.patches import Patch
from ..contracts.state import DraftState
from ..drafting.draft import is_draft, state_of
from ..patches.generator import generate_patches
from .equality import is_same
from .freeze import freeze, is_frozen, seal
from .shape import each, has, is_draftable, shallow_copy

logger = logging.getLogger(__name__)

PatchGenerator = Callable[
    [DraftState, Path, Optional[List[Patch]], Optional[List[Patch]], Any, Any],
    None
]


class Finalizer:
    """
    Single-pass finalizer for one drafting operation.

    Holds the memo of sealed fresh aggregates, so fresh data referenced
    from two places stays one object in the result. Use one instance per
    operation; never share it between concurrent operations.
    """

    def __init__(
        self,
        config: Optional[DraftConfig] = None,
        patch_generator: PatchGenerator = generate_patches,
        scope: Any = None
    ):
        self._config = config or default_config()
        self._generate_patches = patch_generator
        # DraftScope whose base aggregates are kept by reference
        self._scope = scope
        self._sealed: Dict[int, Tuple[Any, Any]] = {}

    @property
    def config(self) -> DraftConfig:
        return self._config

    def finalize(
        self,
        value: Any,
        path: Path = (),
        patches: Optional[List[Patch]] = None,
        inverse_patches: Optional[List[Patch]] = None
    ) -> Any:
        if is_draft(value):
            return self._finalize_draft(
                state_of(value), tuple(path), patches, inverse_patches
            )
        return self._finalize_plain(value)

    # =========================================================================
    # CASE A: DRAFTED NODES
    # =========================================================================

    def _finalize_draft(
        self,
        state: DraftState,
        path: Path,
        patches: Optional[List[Patch]],
        inverse_patches: Optional[List[Patch]]
    ) -> Any:
        if state.finalized:
            return state.copy
        if not state.modified:
            return state.base
        if self._scope is None:
            self._scope = state.scope

        # Set before recursing: the copy may reference this very draft
        state.finalized = True
        if state.copy is None:
            state.copy = shallow_copy(state.source)

        copy = state.copy
        base = state.base

        def resolve(key: Any, child: Any) -> None:
            if has(base, key) and is_same(child, base[key]):
                return
            if not is_draft(child) and is_draftable(child) and state.holds_base_value(child):
                # base value moved elsewhere; base is never re-sealed
                return
            if patches is not None and key not in state.assigned:
                copy[key] = self.finalize(
                    child, path + (key,), patches, inverse_patches
                )
            else:
                copy[key] = self.finalize(child)

        each(copy, resolve)

        self._generate_patches(state, path, patches, inverse_patches, base, copy)
        result = freeze(copy, self._config)
        if result is not copy:
            _rebind_self_references(result, copy)
        state.copy = result
        logger.debug("Finalized modified node at %r (%d keys)", path, len(result))
        return result

    # =========================================================================
    # CASE B: PLAIN (POSSIBLY FRESH) DATA
    # =========================================================================

    def _finalize_plain(self, value: Any) -> Any:
        if not is_draftable(value) or is_frozen(value):
            return value
        if self._scope is not None and self._scope.holds_base_value(value):
            return value

        memo = self._sealed.get(id(value))
        if memo is not None and memo[0] is value:
            return memo[1]

        rebuilt = shallow_copy(value)

        def resolve(key: Any, child: Any) -> None:
            rebuilt[key] = self.finalize(child)

        each(value, resolve)

        # Fresh data is sealed regardless of the auto-freeze setting
        result = seal(rebuilt)
        self._sealed[id(value)] = (value, result)
        return result


def _rebind_self_references(sealed: Any, stale: Any) -> None:
    setter = list.__setitem__ if isinstance(sealed, list) else dict.__setitem__
    keys = range(len(sealed)) if isinstance(sealed, list) else list(sealed)
    for key in keys:
        if sealed[key] is stale:
            setter(sealed, key, sealed)


def finalize(
    value: Any,
    path: Path = (),
    patches: Optional[List[Patch]] = None,
    inverse_patches: Optional[List[Patch]] = None,
    config: Optional[DraftConfig] = None
) -> Any:
    """
    Finalize value with a fresh single-use Finalizer.

    Drafts default to the config of the scope that created them;
    anything else defaults to the process-wide config.
    """
    if config is None:
        config = state_of(value).scope.config if is_draft(value) else default_config()
    return Finalizer(config).finalize(value, path, patches, inverse_patches)
