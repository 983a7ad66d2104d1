"""
draftcore

Produce new immutable values by mutating a temporary draft. Every subtree
the recipe did not touch is shared, by reference, with the original.

    from draftcore import produce

    base = {"a": {"b": 1}, "c": [1, 2]}
    result = produce(base, lambda draft: draft["a"].__setitem__("b", 2))

    result == {"a": {"b": 2}, "c": [1, 2]}
    result["c"] is base["c"]

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Sentinel, error taxonomy, patch records, DraftState
   - MUST NOT: Depend on any other layer

2. DRAFTING (drafting/)
   - Draft wrappers, LAZY and EAGER backends, per-operation scopes
   - MUST NOT: Write to a base value

3. CORE (core/)
   - Equality, shape classification, freeze policy, contract validation,
     the finalizer
   - MUST NOT: Copy unmodified subtrees

4. PATCHES (patches/)
   - Patch generation during finalization, patch replay against drafts

5. PRODUCE (produce.py)
   - Orchestrates one drafting operation end to end

6. OBSERVABILITY (observability.py)
   - Append-only audit trail of produce() outcomes

CONSTRAINTS ENFORCED:
=====================
- Base values are never mutated
- Unmodified subtrees keep their identity
- Produced aggregates are sealed when auto-freeze is enabled;
  fresh data returned by a recipe is always sealed
- A recipe may mutate its draft or return a value, never both
- Every failure aborts the whole operation
"""

from .config import (
    DraftConfig,
    DraftingStrategy,
    default_config,
    set_auto_freeze,
    get_auto_freeze,
    set_drafting_strategy,
    get_drafting_strategy,
    set_use_proxies,
    get_use_proxies,
    set_audit_collector,
)
from .contracts import (
    NOTHING,
    Nothing,
    ErrorCode,
    DraftError,
    ConflictingProducerResult,
    InvalidProducerError,
    NotDraftableError,
    FrozenAggregateError,
    RevokedDraftError,
    PatchError,
    Patch,
    PatchOp,
    DraftState,
)
from .core import (
    is_same,
    is_draftable,
    is_proxyable,
    shallow_copy,
    each,
    has,
    FrozenDict,
    FrozenList,
    freeze,
    seal,
    is_frozen,
    verify_return_value,
    Finalizer,
    finalize,
)
from .drafting import (
    Draft,
    DictDraft,
    ListDraft,
    DraftScope,
    is_draft,
    state_of,
    original,
    current,
)
from .observability import AuditCollector, ProduceAuditEntry, ProduceOutcome
from .patches import generate_patches
from .produce import DraftEngine, produce, apply_patches

nothing = NOTHING

__version__ = "1.0.0"

__all__ = [
    'DraftConfig', 'DraftingStrategy', 'default_config',
    'set_auto_freeze', 'get_auto_freeze',
    'set_drafting_strategy', 'get_drafting_strategy',
    'set_use_proxies', 'get_use_proxies', 'set_audit_collector',
    'NOTHING', 'Nothing', 'nothing',
    'ErrorCode', 'DraftError', 'ConflictingProducerResult',
    'InvalidProducerError', 'NotDraftableError', 'FrozenAggregateError',
    'RevokedDraftError', 'PatchError',
    'Patch', 'PatchOp', 'DraftState',
    'is_same', 'is_draftable', 'is_proxyable', 'shallow_copy', 'each', 'has',
    'FrozenDict', 'FrozenList', 'freeze', 'seal', 'is_frozen',
    'verify_return_value', 'Finalizer', 'finalize',
    'Draft', 'DictDraft', 'ListDraft', 'DraftScope',
    'is_draft', 'state_of', 'original', 'current',
    'AuditCollector', 'ProduceAuditEntry', 'ProduceOutcome',
    'generate_patches',
    'DraftEngine', 'produce', 'apply_patches',
]
