"""
Core Finalization Layer

RESPONSIBILITY: Turn drafted trees back into immutable values
ALLOWED INPUTS: Drafts, plain data, DraftConfig
OUTPUTS: Structurally shared, optionally sealed results

WHAT THIS LAYER MUST NOT DO:
============================
- Copy an unmodified subtree
- Write to a base value
- Swallow errors raised while traversing
"""

from .equality import is_same
from .shape import is_draftable, is_proxyable, is_sequence, shallow_copy, each, has
from .freeze import FrozenDict, FrozenList, freeze, seal, is_frozen
from .validation import verify_return_value
from .finalize import Finalizer, finalize

__all__ = [
    'is_same',
    'is_draftable', 'is_proxyable', 'is_sequence', 'shallow_copy', 'each', 'has',
    'FrozenDict', 'FrozenList', 'freeze', 'seal', 'is_frozen',
    'verify_return_value',
    'Finalizer', 'finalize',
]
