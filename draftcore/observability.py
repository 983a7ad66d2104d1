"""
Observability & Audit Layer

RESPONSIBILITY: Record the outcome of every produce() call
ALLOWED INPUTS: Audit entries emitted by the produce layer
OUTPUTS: Read-only, append-only audit trail

WHAT THIS LAYER MUST NOT DO:
============================
- Modify drafting behavior
- Filter or interpret entries (only record them)
- Hold references to drafts or working copies

Module-level loggers (logging.getLogger(__name__)) carry debug traces.
This layer carries the structured record of what happened.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional


class ProduceOutcome(Enum):
    """Explicit outcome of one produce() call."""
    UNCHANGED = "unchanged"      # No writes, base returned as-is
    MODIFIED = "modified"        # Draft mutated, new value finalized
    REPLACED = "replaced"        # Recipe returned a replacement value
    FAILED = "failed"            # Operation aborted, base untouched


@dataclass(frozen=True)
class ProduceAuditEntry:
    """Immutable audit record of a single produce() call."""
    operation_id: str
    strategy: str
    outcome: ProduceOutcome
    timestamp: datetime
    patch_count: int = 0
    error_code: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'operation_id': self.operation_id,
            'strategy': self.strategy,
            'outcome': self.outcome.value,
            'timestamp': self.timestamp.isoformat(),
            'patch_count': self.patch_count,
            'error_code': self.error_code
        }


class AuditCollector:
    """
    Append-only collector for produce() audit entries.

    Attach one to DraftConfig.audit to start collecting.
    Collectors never influence the operation they observe.
    """

    def __init__(self, name: str = "draftcore"):
        self._name = name
        self._entries: List[ProduceAuditEntry] = []
        self._sequence: int = 0

    def next_operation_id(self) -> str:
        self._sequence += 1
        return f"{self._name}_{self._sequence:06d}"

    def record(
        self,
        operation_id: str,
        strategy: str,
        outcome: ProduceOutcome,
        patch_count: int = 0,
        error_code: Optional[str] = None
    ) -> ProduceAuditEntry:
        """Create and collect an entry (append-only)."""
        entry = ProduceAuditEntry(
            operation_id=operation_id,
            strategy=strategy,
            outcome=outcome,
            timestamp=datetime.now(timezone.utc),
            patch_count=patch_count,
            error_code=error_code
        )
        self._entries.append(entry)
        return entry

    def get_entries(
        self,
        outcome: Optional[ProduceOutcome] = None
    ) -> List[ProduceAuditEntry]:
        """Get entries, optionally filtered by outcome."""
        if outcome is None:
            return list(self._entries)
        return [e for e in self._entries if e.outcome == outcome]

    @property
    def name(self) -> str:
        return self._name

    @property
    def entry_count(self) -> int:
        return len(self._entries)
