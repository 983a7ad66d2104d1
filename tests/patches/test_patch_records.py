"""
Patch Generation Tests
======================

Forward and inverse records emitted by produce() through a listener.

INVARIANTS TESTED:
1. Only changed leaves under unassigned parents produce records
2. List growth is recorded as ascending adds, inverse removes descending
3. List shrinkage is recorded as descending removes, inverse adds ascending
4. Keys added and deleted within one recipe leave no record
5. Patch records serialize to the JSON-patch subset and back
"""

import pytest

from draftcore import DraftConfig, DraftingStrategy, NOTHING, Patch, PatchOp, produce
from draftcore.contracts.base import ErrorCode, PatchError
from draftcore.contracts.patches import coerce_patch


@pytest.fixture(params=list(DraftingStrategy), ids=lambda s: s.value)
def config(request):
    return DraftConfig(strategy=request.param)


def produce_with_patches(base, recipe, config):
    recorded = {}

    def listener(patches, inverse_patches):
        recorded['patches'] = patches
        recorded['inverse'] = inverse_patches

    result = produce(base, recipe, listener, config=config)
    return result, recorded['patches'], recorded['inverse']


class TestDictRecords:

    def test_nested_replace(self, config):
        def recipe(draft):
            draft["a"]["b"] = 2

        _, patches, inverse = produce_with_patches({"a": {"b": 1}, "c": 2}, recipe, config)
        assert patches == [Patch.replace(("a", "b"), 2)]
        assert inverse == [Patch.replace(("a", "b"), 1)]

    def test_add_and_remove(self, config):
        def recipe(draft):
            draft["new"] = 1
            del draft["old"]

        _, patches, inverse = produce_with_patches({"old": 0}, recipe, config)
        assert Patch.add(("new",), 1) in patches
        assert Patch.remove(("old",)) in patches
        assert Patch.remove(("new",)) in inverse
        assert Patch.add(("old",), 0) in inverse
        assert len(patches) == len(inverse) == 2

    def test_added_then_deleted_leaves_no_record(self, config):
        def recipe(draft):
            draft["tmp"] = 1
            del draft["tmp"]

        _, patches, inverse = produce_with_patches({"a": 1}, recipe, config)
        assert patches == [] and inverse == []

    def test_write_back_of_original_value_leaves_no_record(self, config):
        def recipe(draft):
            draft["a"] = 2
            draft["a"] = 1

        result, patches, _ = produce_with_patches({"a": 1, "b": 1}, recipe, config)
        assert patches == []
        assert result == {"a": 1, "b": 1}

    def test_replacing_a_subtree_records_once(self, config):
        def recipe(draft):
            draft["a"] = {"fresh": True}

        result, patches, inverse = produce_with_patches({"a": {"b": 1}}, recipe, config)
        assert patches == [Patch.replace(("a",), {"fresh": True})]
        assert patches[0].value is result["a"]
        assert inverse == [Patch.replace(("a",), {"b": 1})]

    def test_no_listener_means_no_records(self, config):
        # produce without a listener still works and records nothing
        assert produce({"a": 1}, lambda d: d.__setitem__("a", 2), config=config) == {"a": 2}


class TestListRecords:

    def test_growth(self, config):
        def recipe(draft):
            draft.extend([3, 4])

        _, patches, inverse = produce_with_patches([1, 2], recipe, config)
        assert patches == [Patch.add((2,), 3), Patch.add((3,), 4)]
        assert inverse == [Patch.remove((3,)), Patch.remove((2,))]

    def test_shrink(self, config):
        def recipe(draft):
            del draft[1:]

        _, patches, inverse = produce_with_patches([1, 2, 3], recipe, config)
        assert patches == [Patch.remove((2,)), Patch.remove((1,))]
        assert inverse == [Patch.add((1,), 2), Patch.add((2,), 3)]

    def test_insert_at_front_shifts_into_replaces(self, config):
        def recipe(draft):
            draft.insert(0, 0)

        _, patches, inverse = produce_with_patches([1, 2], recipe, config)
        assert patches == [
            Patch.replace((0,), 0),
            Patch.replace((1,), 1),
            Patch.add((2,), 2),
        ]
        assert inverse == [
            Patch.replace((0,), 1),
            Patch.replace((1,), 2),
            Patch.remove((2,)),
        ]

    def test_nested_list_in_dict(self, config):
        def recipe(draft):
            draft["items"].append({"id": 2})

        base = {"items": [{"id": 1}]}
        result, patches, _ = produce_with_patches(base, recipe, config)
        assert patches == [Patch.add(("items", 1), {"id": 2})]
        assert result["items"][0] is base["items"][0]

    def test_element_change_under_list(self, config):
        def recipe(draft):
            draft[1]["done"] = True

        base = [{"done": False}, {"done": False}]
        _, patches, inverse = produce_with_patches(base, recipe, config)
        assert patches == [Patch.replace((1, "done"), True)]
        assert inverse == [Patch.replace((1, "done"), False)]


class TestRootRecords:

    def test_replacement_is_a_root_replace(self, config):
        base = {"a": 1}
        result, patches, inverse = produce_with_patches(base, lambda d: {"b": 2}, config)
        assert patches == [Patch.replace((), {"b": 2})]
        assert patches[0].value is result
        assert inverse == [Patch.replace((), base)]
        assert inverse[0].value is base

    def test_nothing_replaces_root_with_none(self, config):
        result, patches, _ = produce_with_patches({"a": 1}, lambda d: NOTHING, config)
        assert result is None
        assert patches == [Patch.replace((), None)]


class TestPatchRecord:

    def test_patch_is_immutable(self):
        patch = Patch.add(("a",), 1)
        with pytest.raises(AttributeError):
            patch.value = 2

    def test_path_is_coerced_to_tuple(self):
        assert Patch(PatchOp.ADD, ["a", 0], 1).path == ("a", 0)

    def test_wire_form(self):
        assert Patch.replace(("a", 0), 2).to_dict() == {
            "op": "replace", "path": ["a", 0], "value": 2
        }
        assert Patch.remove(("a",)).to_dict() == {"op": "remove", "path": ["a"]}

    def test_from_dict(self):
        patch = Patch.from_dict({"op": "add", "path": ["x"], "value": [1]})
        assert patch == Patch.add(("x",), [1])
        assert Patch.from_dict({"op": "remove", "path": ["x"], "value": 5}).value is None

    @pytest.mark.parametrize("data", [
        {"op": "move", "path": ["a"]},
        {"op": "copy", "path": ["a"], "value": 1},
        {"path": ["a"]},
    ])
    def test_unknown_ops_rejected(self, data):
        with pytest.raises(PatchError) as info:
            Patch.from_dict(data)
        assert info.value.code == ErrorCode.UNSUPPORTED_PATCH_OP

    def test_constructor_rejects_raw_op(self):
        with pytest.raises(PatchError):
            Patch("add", ("a",), 1)

    def test_coerce_patch(self):
        patch = Patch.remove(("a",))
        assert coerce_patch(patch) is patch
        assert coerce_patch({"op": "remove", "path": ["a"]}) == patch
