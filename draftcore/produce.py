"""
Produce Orchestration

Unified entry points for drafting operations:

    result = produce(base, recipe)

FLOW:
=====
1. Snapshot the DraftConfig (process-wide defaults unless one is given)
2. Open a DraftScope and draft the base
3. Run the recipe against the draft
4. Validate the recipe's return value against the producer contract
5. Finalize the replacement value or the root draft
6. Revoke every draft of the scope
7. Hand patches to the listener, record the audit entry

ATOMICITY:
==========
Any exception aborts the whole operation. The scope is revoked, the base
is left untouched and the error is re-raised unchanged.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Iterable, List, Optional

from .config import DraftConfig, default_config
from .contracts.base import (
    NOTHING, DraftError, InvalidProducerError, NotDraftableError
)
from .contracts.patches import Patch, PatchLike, PatchOp, coerce_patch
from .core.finalize import Finalizer
from .core.shape import is_draftable
from .core.validation import verify_return_value
from .drafting.draft import is_draft, state_of
from .drafting.scope import DraftScope
from .observability import ProduceOutcome
from .patches.apply import apply_patches_to_draft, thaw

logger = logging.getLogger(__name__)

Recipe = Callable[..., Any]
PatchListener = Callable[[List[Patch], List[Patch]], None]

_PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes)


def _normalize_result(result: Any) -> Any:
    return None if result is NOTHING else result


class DraftEngine:
    """
    Drafting engine bound to one configuration.

    Every call opens its own scope, so one engine may serve many
    independent operations; they never share DraftState.
    """

    def __init__(self, config: Optional[DraftConfig] = None):
        self._config = config or default_config()

    @property
    def config(self) -> DraftConfig:
        return self._config

    # =========================================================================
    # PRODUCE
    # =========================================================================

    def produce(
        self,
        base: Any,
        recipe: Recipe,
        patch_listener: Optional[PatchListener] = None
    ) -> Any:
        """
        Run recipe against a draft of base and return the immutable result.

        The recipe either mutates its draft (returning None or the draft)
        or returns a replacement value. Returning NOTHING yields None.
        """
        if not callable(recipe):
            raise InvalidProducerError(
                "The recipe passed to produce() must be callable",
                context=(('recipe_type', type(recipe).__name__),)
            )
        if patch_listener is not None and not callable(patch_listener):
            raise InvalidProducerError(
                "The patch listener passed to produce() must be None or callable",
                context=(('listener_type', type(patch_listener).__name__),)
            )

        # Nested produce on a draft: no new scope, the outer one finalizes
        if is_draft(base):
            returned = recipe(base)
            return base if returned is None else returned

        if not is_draftable(base):
            if not isinstance(base, _PRIMITIVE_TYPES) and not callable(base):
                raise NotDraftableError(
                    "The base passed to produce() must be a primitive, a plain "
                    f"dict, a list or a callable, got {type(base).__name__}",
                    context=(('type', type(base).__name__),)
                )
            returned = recipe(base)
            if returned is None:
                return base
            return _normalize_result(Finalizer(self._config).finalize(returned))

        return self._produce_draft(base, recipe, patch_listener)

    def _produce_draft(
        self,
        base: Any,
        recipe: Recipe,
        patch_listener: Optional[PatchListener]
    ) -> Any:
        config = self._config
        audit = config.audit
        operation_id = audit.next_operation_id() if audit else None
        scope = DraftScope(config)
        patches: Optional[List[Patch]] = [] if patch_listener is not None else None
        inverse_patches: Optional[List[Patch]] = [] if patch_listener is not None else None

        try:
            root = scope.create_draft(base)
            root_state = state_of(root)
            returned = recipe(root)
            verify_return_value(returned, root, root_state.modified)

            finalizer = Finalizer(config, scope=scope)
            if returned is not None and returned is not root:
                outcome = ProduceOutcome.REPLACED
                result = finalizer.finalize(returned)
                if patches is not None:
                    patches.append(Patch.replace((), _normalize_result(result)))
                    inverse_patches.append(Patch.replace((), base))
            else:
                outcome = (
                    ProduceOutcome.MODIFIED if root_state.modified
                    else ProduceOutcome.UNCHANGED
                )
                result = finalizer.finalize(root, (), patches, inverse_patches)
        except Exception as exc:
            scope.revoke()
            if audit:
                code = exc.code.name if isinstance(exc, DraftError) else type(exc).__name__
                audit.record(
                    operation_id, config.strategy.value,
                    ProduceOutcome.FAILED, error_code=code
                )
            raise

        scope.revoke()
        logger.debug(
            "produce finished: outcome=%s strategy=%s drafts=%d",
            outcome.value, config.strategy.value, scope.state_count
        )
        if audit:
            audit.record(
                operation_id, config.strategy.value, outcome,
                patch_count=len(patches) if patches is not None else 0
            )
        if patch_listener is not None:
            patch_listener(patches, inverse_patches)
        return _normalize_result(result)

    # =========================================================================
    # CURRYING AND PATCH REPLAY
    # =========================================================================

    def curry(self, recipe: Recipe, initial_state: Any = None) -> Callable[..., Any]:
        """
        Bind recipe into a reusable producer.

        producer(state=initial_state, *args) calls recipe(draft, *args).
        """
        if not callable(recipe):
            raise InvalidProducerError(
                "The recipe passed to curry() must be callable",
                context=(('recipe_type', type(recipe).__name__),)
            )

        def producer(state: Any = None, *args: Any) -> Any:
            if state is None:
                state = initial_state
            return self.produce(state, lambda draft: recipe(draft, *args))

        return producer

    def apply_patches(self, base: Any, patches: Iterable[PatchLike]) -> Any:
        """
        Apply patch records to base, producing a new immutable value.

        A replace at the root discards everything before it: replay starts
        from a private copy of its value with the patches that follow it,
        and the outcome is sealed like any other fresh data.
        """
        patches = [coerce_patch(patch) for patch in patches]
        for index in range(len(patches) - 1, -1, -1):
            patch = patches[index]
            if not patch.path and patch.op is PatchOp.REPLACE:
                replayed = apply_patches_to_draft(thaw(patch.value), patches[index + 1:])
                return _normalize_result(Finalizer(self._config).finalize(replayed))
        return self.produce(base, lambda draft: apply_patches_to_draft(draft, patches))


# =============================================================================
# MODULE-LEVEL ENTRY POINTS (process-wide defaults)
# =============================================================================

def produce(
    base: Any,
    recipe: Optional[Recipe] = None,
    patch_listener: Optional[PatchListener] = None,
    *,
    config: Optional[DraftConfig] = None
) -> Any:
    """
    produce(base, recipe)        -> new immutable value
    produce(recipe)              -> curried producer
    produce(recipe, initial)     -> curried producer with a default state
    """
    engine = DraftEngine(config)
    if callable(base) and not callable(recipe):
        return engine.curry(base, initial_state=recipe)
    return engine.produce(base, recipe, patch_listener)


def apply_patches(
    base: Any,
    patches: Iterable[PatchLike],
    *,
    config: Optional[DraftConfig] = None
) -> Any:
    return DraftEngine(config).apply_patches(base, patches)
