"""
Patch Generator

Records the difference between a node's base and its finalized result.

CONTRACT:
=========
- Called at most once per finalized node
- Called after the node's children are finalized, so changes recorded
  more granularly by a child are not captured again here
- Only keys present in state.assigned are considered for records; list
  growth and shrinkage are always recorded

LIST ORDERING:
==============
- Growth: "add" for each new index ascending, inverse "remove" descending
- Shrink: "remove" for each dropped index descending, inverse "add" ascending
  (removes always target the last index, so they apply in order)
"""

from __future__ import annotations
from typing import Any, List, Optional

from ..contracts.base import Path
from ..contracts.patches import Patch
from ..contracts.state import DraftState
from ..core.equality import is_same
from ..core.shape import is_sequence


def generate_patches(
    state: DraftState,
    base_path: Path,
    patches: Optional[List[Patch]],
    inverse_patches: Optional[List[Patch]],
    base: Any,
    result: Any
) -> None:
    """Append forward and inverse records for one node to the sinks."""
    if patches is None:
        return
    if inverse_patches is None:
        inverse_patches = []
    if is_sequence(base):
        _generate_list_patches(state, tuple(base_path), patches, inverse_patches, base, result)
    else:
        _generate_dict_patches(state, tuple(base_path), patches, inverse_patches, base, result)


def _generate_list_patches(
    state: DraftState,
    base_path: Path,
    patches: List[Patch],
    inverse_patches: List[Patch],
    base: Any,
    result: Any
) -> None:
    shared = min(len(base), len(result))
    for index in range(shared):
        if state.assigned.get(index) and not is_same(base[index], result[index]):
            path = base_path + (index,)
            patches.append(Patch.replace(path, result[index]))
            inverse_patches.append(Patch.replace(path, base[index]))

    if shared < len(result):
        added = range(shared, len(result))
        for index in added:
            patches.append(Patch.add(base_path + (index,), result[index]))
        for index in reversed(added):
            inverse_patches.append(Patch.remove(base_path + (index,)))
    elif shared < len(base):
        removed = range(shared, len(base))
        for index in reversed(removed):
            patches.append(Patch.remove(base_path + (index,)))
        for index in removed:
            inverse_patches.append(Patch.add(base_path + (index,), base[index]))


def _generate_dict_patches(
    state: DraftState,
    base_path: Path,
    patches: List[Patch],
    inverse_patches: List[Patch],
    base: Any,
    result: Any
) -> None:
    for key, assigned in state.assigned.items():
        path = base_path + (key,)
        in_base = key in base

        if not assigned:
            # Added and deleted within the same recipe: nothing to record
            if not in_base:
                continue
            patches.append(Patch.remove(path))
            inverse_patches.append(Patch.add(path, base[key]))
        elif in_base:
            if is_same(base[key], result[key]):
                continue
            patches.append(Patch.replace(path, result[key]))
            inverse_patches.append(Patch.replace(path, base[key]))
        else:
            patches.append(Patch.add(path, result[key]))
            inverse_patches.append(Patch.remove(path))
