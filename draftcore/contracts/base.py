"""
Base Contracts and Shared Types

These are the foundational types used across all layers.
No behavior beyond construction, no side effects, no dependencies.

BOUNDARY ENFORCEMENT:
=====================
- This module is READ-ONLY from all layers
- Layers may import types but MUST NOT modify this module
- Every failure state is enumerated in ErrorCode
"""

from __future__ import annotations
from enum import Enum, auto
from typing import Any, Hashable, Tuple, Union


# =============================================================================
# SENTINEL (Explicit "produce nothing")
# =============================================================================

class Nothing(Enum):
    """
    Tagged unit type with a single member.

    A recipe returning None means "no replacement value".
    A recipe returning NOTHING means "the result is None".
    The two are never confused because NOTHING is its own type.
    """
    NOTHING = "nothing"

    def __repr__(self) -> str:
        return "NOTHING"


NOTHING = Nothing.NOTHING


# =============================================================================
# PATH TYPES
# =============================================================================

PathKey = Union[str, int, Hashable]
Path = Tuple[PathKey, ...]


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for deterministic error handling.
    No silent fallbacks - every error state is enumerated.
    """
    # Producer contract errors
    CONFLICTING_PRODUCER_RESULT = auto()
    INVALID_PRODUCER = auto()

    # Drafting errors
    NOT_DRAFTABLE = auto()
    FROZEN_AGGREGATE = auto()
    REVOKED_DRAFT = auto()

    # Patch errors
    PATCH_PATH_UNRESOLVED = auto()
    UNSUPPORTED_PATCH_OP = auto()
    INVALID_PATCH_REMOVE = auto()


class DraftError(Exception):
    """
    Base error with full context.

    Errors are raised, never swallowed. The code identifies the failure
    state; context carries the key/value pairs needed to diagnose it.
    """
    default_code: ErrorCode = ErrorCode.INVALID_PRODUCER

    def __init__(
        self,
        message: str,
        code: ErrorCode = None,
        context: Tuple[Tuple[str, Any], ...] = ()
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.context = tuple(context)

    def with_context(self, key: str, value: Any) -> DraftError:
        """Return new error of the same type with additional context."""
        return type(self)(
            self.message,
            code=self.code,
            context=self.context + ((key, value),)
        )

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v!r}" for k, v in self.context)
        return f"{self.message} [{details}]"


class ConflictingProducerResult(DraftError):
    """Raised when a recipe both modifies its draft and returns a new value."""
    default_code = ErrorCode.CONFLICTING_PRODUCER_RESULT


class InvalidProducerError(DraftError, TypeError):
    """Raised when produce() is called with an unusable recipe or listener."""
    default_code = ErrorCode.INVALID_PRODUCER


class NotDraftableError(DraftError, TypeError):
    """Raised when a value that is not a plain dict or list is drafted."""
    default_code = ErrorCode.NOT_DRAFTABLE


class FrozenAggregateError(DraftError, TypeError):
    """Raised on any attempt to write to a sealed aggregate."""
    default_code = ErrorCode.FROZEN_AGGREGATE


class RevokedDraftError(DraftError):
    """Raised when a draft is used after its produce() call has finished."""
    default_code = ErrorCode.REVOKED_DRAFT


class PatchError(DraftError, ValueError):
    """Raised when a patch cannot be parsed or applied."""
    default_code = ErrorCode.UNSUPPORTED_PATCH_OP


RETURNED_AND_MODIFIED_ERROR = (
    "A producer returned a new value *and* modified its draft. "
    "Either return a new value *or* modify the draft."
)
