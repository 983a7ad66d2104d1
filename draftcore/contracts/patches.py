"""
Patch Contracts

Immutable change records emitted while finalizing a draft.

INVARIANTS:
- A patch is never modified after creation
- Paths are tuples of keys from the drafting root (empty at the root)
- REMOVE patches carry no value
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence, Union

from .base import Path, PatchError, ErrorCode


class PatchOp(Enum):
    """Supported patch operations."""
    ADD = "add"
    REPLACE = "replace"
    REMOVE = "remove"


@dataclass(frozen=True)
class Patch:
    """
    One field-level change at a path.

    The wire form produced by to_dict() matches the JSON-patch subset:
    {"op": "replace", "path": ["a", "b"], "value": 2}
    """
    op: PatchOp
    path: Path
    value: Any = None

    def __post_init__(self):
        if not isinstance(self.op, PatchOp):
            raise PatchError(
                f"Unsupported patch operation: {self.op!r}",
                code=ErrorCode.UNSUPPORTED_PATCH_OP
            )
        if not isinstance(self.path, tuple):
            object.__setattr__(self, 'path', tuple(self.path))

    @staticmethod
    def add(path: Sequence, value: Any) -> Patch:
        return Patch(op=PatchOp.ADD, path=tuple(path), value=value)

    @staticmethod
    def replace(path: Sequence, value: Any) -> Patch:
        return Patch(op=PatchOp.REPLACE, path=tuple(path), value=value)

    @staticmethod
    def remove(path: Sequence) -> Patch:
        return Patch(op=PatchOp.REMOVE, path=tuple(path))

    def to_dict(self) -> dict:
        data = {'op': self.op.value, 'path': list(self.path)}
        if self.op is not PatchOp.REMOVE:
            data['value'] = self.value
        return data

    @staticmethod
    def from_dict(data: Mapping) -> Patch:
        """Parse the wire form. Unknown ops are rejected explicitly."""
        try:
            op = PatchOp(data['op'])
        except (KeyError, ValueError):
            raise PatchError(
                f"Unsupported patch operation: {data.get('op')!r}",
                code=ErrorCode.UNSUPPORTED_PATCH_OP
            ) from None
        path = tuple(data.get('path', ()))
        if op is PatchOp.REMOVE:
            return Patch.remove(path)
        return Patch(op=op, path=path, value=data.get('value'))


PatchLike = Union[Patch, Mapping]


def coerce_patch(patch: PatchLike) -> Patch:
    """Accept either a Patch or its dict form."""
    if isinstance(patch, Patch):
        return patch
    return Patch.from_dict(patch)
