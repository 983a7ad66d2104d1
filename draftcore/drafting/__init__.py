"""
Drafting Layer

RESPONSIBILITY: Present mutable drafts over immutable bases
ALLOWED INPUTS: Plain dicts and lists (sealed or not)
OUTPUTS: Draft wrappers and their DraftState records

WHAT THIS LAYER MUST NOT DO:
============================
- Write to a base value
- Decide what the final result looks like (that is the finalizer's job)
- Share DraftState between scopes
"""

from .backends import (
    DraftingBackend, LazyCopyBackend, EagerCopyBackend, backend_for
)
from .draft import (
    Draft, DictDraft, ListDraft, is_draft, state_of, original, current
)
from .scope import DraftScope

__all__ = [
    'DraftingBackend', 'LazyCopyBackend', 'EagerCopyBackend', 'backend_for',
    'Draft', 'DictDraft', 'ListDraft',
    'is_draft', 'state_of', 'original', 'current',
    'DraftScope',
]
