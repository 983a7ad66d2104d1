"""
Contracts Module

Explicit types shared between the drafting, finalization and patch
layers. This package imports nothing from the rest of draftcore.

DESIGN PRINCIPLES:
==================
1. Records that cross layer boundaries are immutable (frozen dataclasses)
2. DraftState is the single mutable record, owned by one drafting scope
3. Every failure state has an ErrorCode
4. "No value" (None) and "produce nothing" (NOTHING) are distinct types
"""

from .base import (
    NOTHING,
    Nothing,
    Path,
    PathKey,
    ErrorCode,
    DraftError,
    ConflictingProducerResult,
    InvalidProducerError,
    NotDraftableError,
    FrozenAggregateError,
    RevokedDraftError,
    PatchError,
    RETURNED_AND_MODIFIED_ERROR,
)
from .patches import Patch, PatchOp, PatchLike, coerce_patch
from .state import DraftState

__all__ = [
    'NOTHING', 'Nothing', 'Path', 'PathKey',
    'ErrorCode', 'DraftError', 'ConflictingProducerResult',
    'InvalidProducerError', 'NotDraftableError', 'FrozenAggregateError',
    'RevokedDraftError', 'PatchError', 'RETURNED_AND_MODIFIED_ERROR',
    'Patch', 'PatchOp', 'PatchLike', 'coerce_patch',
    'DraftState',
]
