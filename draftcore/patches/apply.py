"""
Patch Application

Replays patch records against a draft. Used by apply_patches(), which
wraps this in a regular produce() call so the result is finalized,
structurally shared and sealed like any other. After a root replace the
remaining records run against a thawed copy of its value instead.

EXPLICIT FAILURE STATES:
- PATCH_PATH_UNRESOLVED: an intermediate path segment does not exist
- UNSUPPORTED_PATCH_OP: op is not add / replace / remove
- INVALID_PATCH_REMOVE: a list remove that does not target the last index
"""

from __future__ import annotations
from collections.abc import Mapping, MutableSequence, Sequence
from typing import Any, Iterable

from ..contracts.base import ErrorCode, PatchError
from ..contracts.patches import Patch, PatchLike, PatchOp, coerce_patch
from ..core.shape import is_draftable, is_sequence


def thaw(value: Any) -> Any:
    """
    Plain, unsealed deep copy of a patch value.

    Later patches in the same batch may write inside a value inserted by
    an earlier one; thawing keeps those writes off the patch record.
    """
    if not is_draftable(value):
        return value
    if is_sequence(value):
        return [thaw(item) for item in value]
    return {key: thaw(item) for key, item in value.items()}


def _is_list_like(target: Any) -> bool:
    return isinstance(target, MutableSequence)


def _is_container(target: Any) -> bool:
    if isinstance(target, (str, bytes)):
        return False
    return isinstance(target, (Mapping, Sequence))


def _unresolved(patch: Patch) -> PatchError:
    rendered = "/".join(str(part) for part in patch.path)
    return PatchError(
        f"Cannot apply patch, path doesn't resolve: {rendered}",
        code=ErrorCode.PATCH_PATH_UNRESOLVED,
        context=(('path', patch.path),)
    )


def _resolve_parent(draft: Any, patch: Patch) -> Any:
    target = draft
    for part in patch.path[:-1]:
        if not _is_container(target):
            raise _unresolved(patch)
        try:
            target = target[part]
        except (KeyError, IndexError, TypeError):
            raise _unresolved(patch) from None
    if not _is_container(target):
        raise _unresolved(patch)
    return target


def _apply_one(target: Any, key: Any, patch: Patch) -> None:
    if patch.op is PatchOp.REMOVE:
        if _is_list_like(target):
            if key != len(target) - 1:
                raise PatchError(
                    f"Remove can only remove the last key of a list, "
                    f"index: {key}, length: {len(target)}",
                    code=ErrorCode.INVALID_PATCH_REMOVE,
                    context=(('path', patch.path),)
                )
            del target[key]
            return
        if key not in target:
            raise _unresolved(patch)
        del target[key]
        return

    value = thaw(patch.value)
    if _is_list_like(target):
        if patch.op is PatchOp.ADD and key == len(target):
            target.append(value)
        elif patch.op is PatchOp.ADD and isinstance(key, int) and 0 <= key < len(target):
            target.insert(key, value)
        else:
            try:
                target[key] = value
            except (IndexError, TypeError):
                raise _unresolved(patch) from None
        return
    target[key] = value


def apply_patches_to_draft(draft: Any, patches: Iterable[PatchLike]) -> Any:
    """
    Apply patches in order and return the (possibly replaced) root.

    A replace at the empty path swaps the whole value; the caller returns
    that value from its recipe.
    """
    for raw in patches:
        patch = coerce_patch(raw)
        if not patch.path:
            if patch.op is not PatchOp.REPLACE:
                raise PatchError(
                    f"Only 'replace' is supported at the root, got {patch.op.value!r}",
                    code=ErrorCode.UNSUPPORTED_PATCH_OP,
                    context=(('path', patch.path),)
                )
            draft = thaw(patch.value)
            continue
        target = _resolve_parent(draft, patch)
        _apply_one(target, patch.path[-1], patch)
    return draft
