"""
Producer Contract Validator

A recipe may EITHER mutate its draft (returning None or the draft itself)
OR return a replacement value. Never both.

Violations are programming errors: always raised, never resolved silently.
"""

from __future__ import annotations
from typing import Any

from ..contracts.base import (
    ConflictingProducerResult, RETURNED_AND_MODIFIED_ERROR
)


def verify_return_value(
    returned_value: Any,
    draft_root: Any,
    root_modified: bool
) -> None:
    """Raise ConflictingProducerResult if the recipe both mutated and replaced."""
    if returned_value is None or returned_value is draft_root:
        return
    if root_modified:
        raise ConflictingProducerResult(
            RETURNED_AND_MODIFIED_ERROR,
            context=(('returned_type', type(returned_value).__name__),)
        )
