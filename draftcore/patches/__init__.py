"""
Patch Layer

RESPONSIBILITY: Emit and replay fine-grained change records
ALLOWED INPUTS: Finalized nodes (generation), drafts (application)
OUTPUTS: Patch records appended to caller-provided sinks

WHAT THIS LAYER MUST NOT DO:
============================
- Decide whether a node changed (the finalizer does that)
- Modify base values or patch records
"""

from .generator import generate_patches
from .apply import apply_patches_to_draft, thaw

__all__ = ['generate_patches', 'apply_patches_to_draft', 'thaw']
