"""
Drafting Configuration

Explicit configuration passed into each drafting operation.

Process-wide defaults exist only for the outermost entry points
(produce(), apply_patches()). Every operation snapshots its config
at entry, so changing a default never affects an in-flight draft.

ENVIRONMENT:
============
- DRAFTCORE_AUTO_FREEZE: "0", "false", "no" or "off" disables auto-freeze
- DRAFTCORE_STRATEGY: "lazy" or "eager"
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional
import os

from .observability import AuditCollector


class DraftingStrategy(Enum):
    """
    How a draft materializes its working copy.

    LAZY:  intercept every access, copy on first effective write
    EAGER: shallow copy at draft creation, copy again at finalization
    """
    LAZY = "lazy"
    EAGER = "eager"


@dataclass(frozen=True)
class DraftConfig:
    """Configuration for one drafting operation."""
    auto_freeze: bool = True
    strategy: DraftingStrategy = DraftingStrategy.LAZY
    audit: Optional[AuditCollector] = None

    def with_overrides(self, **changes) -> DraftConfig:
        """Return new config with the given fields replaced (immutable)."""
        return replace(self, **changes)


_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _config_from_env() -> DraftConfig:
    auto_freeze = os.environ.get("DRAFTCORE_AUTO_FREEZE", "1").strip().lower()
    strategy = os.environ.get("DRAFTCORE_STRATEGY", DraftingStrategy.LAZY.value)
    try:
        parsed_strategy = DraftingStrategy(strategy.strip().lower())
    except ValueError:
        raise ValueError(
            f"DRAFTCORE_STRATEGY must be 'lazy' or 'eager', got {strategy!r}"
        ) from None
    return DraftConfig(
        auto_freeze=auto_freeze not in _FALSE_VALUES,
        strategy=parsed_strategy
    )


_defaults = _config_from_env()


# =============================================================================
# PROCESS-WIDE DEFAULTS (outermost entry points only)
# =============================================================================

def default_config() -> DraftConfig:
    """Snapshot of the current process-wide defaults."""
    return _defaults


def set_auto_freeze(enabled: bool) -> None:
    """
    Automatically freeze every tree produced from now on.

    Protects against accidental writes outside a recipe, at the cost of
    one extra container allocation per modified node. Enabled by default.
    """
    global _defaults
    _defaults = replace(_defaults, auto_freeze=bool(enabled))


def get_auto_freeze() -> bool:
    return _defaults.auto_freeze


def set_drafting_strategy(strategy: DraftingStrategy) -> None:
    global _defaults
    if not isinstance(strategy, DraftingStrategy):
        strategy = DraftingStrategy(strategy)
    _defaults = replace(_defaults, strategy=strategy)


def get_drafting_strategy() -> DraftingStrategy:
    return _defaults.strategy


def set_use_proxies(value: bool) -> None:
    """Compatibility spelling: True selects LAZY, False selects EAGER."""
    set_drafting_strategy(
        DraftingStrategy.LAZY if value else DraftingStrategy.EAGER
    )


def get_use_proxies() -> bool:
    return _defaults.strategy is DraftingStrategy.LAZY


def set_audit_collector(collector: Optional[AuditCollector]) -> None:
    """Attach (or detach with None) a process-wide audit collector."""
    global _defaults
    _defaults = replace(_defaults, audit=collector)
