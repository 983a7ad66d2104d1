"""
Finalizer Tests
===============

Drives the finalizer directly against drafts created through a scope,
without going through produce().

INVARIANTS TESTED:
1. Unmodified drafts finalize to their base (same identity)
2. Finalizing twice returns the memoized result
3. Only the path from the root to a write is rebuilt
4. Fresh data is sealed regardless of auto-freeze; base values it holds
   are shared, not copied
5. Patch emission below a directly assigned key is suppressed
6. Errors raised during traversal propagate unchanged
"""

import pytest

from draftcore.config import DraftConfig, DraftingStrategy
from draftcore.contracts.patches import Patch, PatchOp
from draftcore.core.finalize import Finalizer, finalize
from draftcore.core.freeze import FrozenDict, FrozenList, is_frozen
from draftcore.drafting.draft import state_of
from draftcore.drafting.scope import DraftScope


@pytest.fixture(params=list(DraftingStrategy), ids=lambda s: s.value)
def strategy(request):
    return request.param


@pytest.fixture
def config(strategy):
    return DraftConfig(auto_freeze=True, strategy=strategy)


def draft_of(base, config):
    return DraftScope(config).create_draft(base)


class TestCaseADraftedNodes:

    def test_unmodified_draft_returns_base(self, config):
        base = {"a": {"b": 1}, "c": [1, 2]}
        draft = draft_of(base, config)
        _ = draft["a"]["b"], draft["c"][0]  # reads only
        assert finalize(draft) is base, "VIOLATION: no-op finalize copied the base"

    def test_unmodified_draft_makes_no_copy(self):
        base = {"a": {"b": 1}}
        draft = draft_of(base, DraftConfig(strategy=DraftingStrategy.LAZY))
        _ = draft["a"]
        finalize(draft)
        assert state_of(draft).copy is None
        assert state_of(draft).finalized is False

    def test_modified_draft_is_rebuilt_along_the_path(self, config):
        base = {"a": {"b": {"c": 1}}, "x": {"y": 1}, "l": [1]}
        draft = draft_of(base, config)
        draft["a"]["b"]["c"] = 2
        result = finalize(draft)

        assert result == {"a": {"b": {"c": 2}}, "x": {"y": 1}, "l": [1]}
        assert result is not base
        assert result["a"] is not base["a"]
        assert result["a"]["b"] is not base["a"]["b"]
        assert result["x"] is base["x"], "VIOLATION: untouched subtree copied"
        assert result["l"] is base["l"], "VIOLATION: untouched subtree copied"
        assert base == {"a": {"b": {"c": 1}}, "x": {"y": 1}, "l": [1]}

    def test_finalize_is_idempotent(self, config):
        draft = draft_of({"a": 1}, config)
        draft["a"] = 2
        finalizer = Finalizer(config)
        first = finalizer.finalize(draft)
        second = finalizer.finalize(draft)
        assert first is second
        assert state_of(draft).finalized is True
        assert state_of(draft).copy is first

    def test_result_is_sealed_with_auto_freeze(self, config):
        draft = draft_of({"a": {"b": 1}, "l": [1]}, config)
        draft["a"]["b"] = 2
        draft["l"].append(2)
        result = finalize(draft)
        assert type(result) is FrozenDict
        assert type(result["a"]) is FrozenDict
        assert type(result["l"]) is FrozenList

    def test_result_stays_plain_without_auto_freeze(self, strategy):
        config = DraftConfig(auto_freeze=False, strategy=strategy)
        draft = draft_of({"a": {"b": 1}}, config)
        draft["a"]["b"] = 2
        result = finalize(draft)
        assert type(result) is dict and type(result["a"]) is dict
        result["a"]["b"] = 3  # writable plain data

    def test_self_reference_points_at_sealed_result(self, config):
        draft = draft_of({"a": 1}, config)
        draft["self"] = draft
        result = finalize(draft)
        assert result["a"] == 1
        assert result["self"] is result, "VIOLATION: self-reference kept the working copy"
        assert is_frozen(result)

    def test_self_reference_in_list(self, config):
        draft = draft_of([1], config)
        draft.append(draft)
        result = finalize(draft)
        assert result[1] is result and is_frozen(result)

    def test_base_value_moved_deeper_is_shared(self, config):
        base = {"a": {"x": 1}, "b": {"c": {}}}
        draft = draft_of(base, config)
        draft["b"]["c"]["y"] = base["a"]
        result = finalize(draft)
        assert result["b"]["c"]["y"] is base["a"], "VIOLATION: moved base value re-sealed"

    def test_draft_config_is_used_by_default(self, strategy):
        draft = draft_of({"a": 1}, DraftConfig(auto_freeze=False, strategy=strategy))
        draft["a"] = 2
        assert type(finalize(draft)) is dict


class TestCaseBPlainData:

    def test_leaves_pass_through(self):
        marker = object()
        assert finalize(marker) is marker
        assert finalize(5) == 5

    def test_sealed_values_pass_through(self):
        sealed = FrozenDict(a=FrozenList([1]))
        assert finalize(sealed) is sealed

    def test_fresh_data_sealed_even_without_auto_freeze(self):
        fresh = {"a": {"b": [1, {"c": 2}]}}
        result = finalize(fresh, config=DraftConfig(auto_freeze=False))
        assert is_frozen(result)
        assert is_frozen(result["a"])
        assert is_frozen(result["a"]["b"])
        assert is_frozen(result["a"]["b"][1])
        assert result == fresh

    def test_fresh_data_is_not_mutated(self):
        fresh = {"a": [1]}
        finalize(fresh)
        assert type(fresh) is dict and type(fresh["a"]) is list

    def test_drafts_inside_fresh_data_are_finalized(self, config):
        base = {"a": {"b": 1}, "c": {"d": 1}}
        draft = draft_of(base, config)
        changed = draft["a"]
        changed["b"] = 2
        untouched = draft["c"]
        fresh = {"wrapper": [changed, {"deep": untouched}]}

        result = Finalizer(config).finalize(fresh)

        assert result == {"wrapper": [{"b": 2}, {"deep": {"d": 1}}]}
        assert result["wrapper"][1]["deep"] is base["c"]
        assert is_frozen(result["wrapper"])

    def test_base_values_inside_fresh_data_are_shared(self, config):
        base = {"a": {"x": [1]}}
        draft = draft_of(base, config)
        draft["fresh"] = {"wrap": base["a"], "deep": [base["a"]["x"]]}
        result = finalize(draft)
        assert is_frozen(result["fresh"])
        assert result["fresh"]["wrap"] is base["a"]
        assert result["fresh"]["deep"][0] is base["a"]["x"]

    def test_shared_fresh_substructure_stays_shared(self):
        shared = {"x": 1}
        result = finalize({"a": shared, "b": [shared]})
        assert result["a"] is result["b"][0]


class TestPatchSinks:

    def test_patches_recorded_at_modified_nodes(self, config):
        draft = draft_of({"a": {"b": 1}, "c": 2}, config)
        draft["a"]["b"] = 2
        patches, inverse = [], []
        Finalizer(config).finalize(draft, (), patches, inverse)
        assert patches == [Patch.replace(("a", "b"), 2)]
        assert inverse == [Patch.replace(("a", "b"), 1)]

    def test_no_sinks_no_patches(self, config):
        calls = []
        finalizer = Finalizer(config, patch_generator=lambda *args: calls.append(args))
        draft = draft_of({"a": 1}, config)
        draft["a"] = 2
        finalizer.finalize(draft)
        assert len(calls) == 1
        assert calls[0][2] is None

    def test_assigned_key_suppresses_nested_patches(self, config):
        base = {"a": {"b": 1, "c": 1}}
        draft = draft_of(base, config)
        child = draft["a"]
        draft["x"] = 0
        draft["a"] = child  # direct assignment of the same child
        child["b"] = 2
        patches, inverse = [], []
        result = Finalizer(config).finalize(draft, (), patches, inverse)

        assert result["a"] == {"b": 2, "c": 1}
        paths = [p.path for p in patches]
        assert ("a", "b") not in paths, "VIOLATION: nested patch under assigned key"
        assert ("a",) in paths
        replaced = next(p for p in patches if p.path == ("a",))
        assert replaced.op is PatchOp.REPLACE
        assert replaced.value is result["a"]

    def test_patch_generator_sees_finalized_children(self, config):
        seen = {}

        def record(state, path, patches, inverse, base, result):
            seen[path] = result

        draft = draft_of({"a": {"b": 1}}, config)
        draft["a"]["b"] = 2
        Finalizer(config, patch_generator=record).finalize(draft, (), [], [])
        assert set(seen) == {(), ("a",)}
        assert is_frozen(seen[()]["a"])


class TestErrorPropagation:

    def test_generator_error_propagates(self, config):
        class Boom(Exception):
            pass

        def explode(*args):
            raise Boom("generator failed")

        draft = draft_of({"a": 1}, config)
        draft["a"] = 2
        with pytest.raises(Boom):
            Finalizer(config, patch_generator=explode).finalize(draft, (), [], [])
