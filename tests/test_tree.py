"""Tests for the ApterTree container.

Covers insertion, the structural queries and the error conditions for
invalid indices and parent references.
"""

import pytest

from aptertree import (
    ApterTree,
    ApterTreeError,
    EmptyTreeError,
    InvalidParentError,
    NO_PARENT,
    OutOfBoundsError,
    TreeItem,
    TreeStructureError,
)


class TestInsertion:
    """Insertion and the parent-reference checks."""

    def test_new_tree_is_empty(self, empty_tree):
        assert len(empty_tree) == 0
        assert empty_tree.is_empty()
        assert list(empty_tree.keys()) == []
        assert empty_tree.parent_indices() == ()

    def test_insert_returns_sequential_indices(self):
        tree = ApterTree()
        assert tree.insert("root", NO_PARENT) == 0
        assert tree.insert("a", 0) == 1
        assert tree.insert("b", 0) == 2
        assert tree.insert("c", 1) == 3
        assert len(tree) == 4
        assert not tree.is_empty()

    def test_root_is_default_parent(self):
        tree = ApterTree()
        tree.insert("root")
        assert tree.parent(0) is NO_PARENT

    def test_invalid_parent_on_three_node_tree(self, three_node_tree):
        with pytest.raises(InvalidParentError):
            three_node_tree.insert("x", 99)
        assert len(three_node_tree) == 3

    def test_second_root_rejected(self, three_node_tree):
        with pytest.raises(InvalidParentError):
            three_node_tree.insert("another root", NO_PARENT)
        assert len(three_node_tree) == 3

    def test_first_insert_must_be_root(self, empty_tree):
        with pytest.raises(InvalidParentError):
            empty_tree.insert("orphan", 0)
        assert empty_tree.is_empty()

    @pytest.mark.parametrize("bad_parent", [-1, 3, 1.0, "0", True])
    def test_non_index_parents_rejected(self, three_node_tree, bad_parent):
        with pytest.raises(InvalidParentError):
            three_node_tree.insert("x", bad_parent)

    def test_self_parent_impossible(self, three_node_tree):
        # The next index is 3, which does not exist yet
        with pytest.raises(InvalidParentError):
            three_node_tree.insert("x", len(three_node_tree))

    def test_invalid_parent_is_value_error(self, three_node_tree):
        with pytest.raises(ValueError):
            three_node_tree.insert("x", 42)
        with pytest.raises(ApterTreeError):
            three_node_tree.insert("x", 42)

    def test_error_carries_parent(self, three_node_tree):
        with pytest.raises(InvalidParentError) as exc_info:
            three_node_tree.insert("x", 99)
        assert exc_info.value.parent == 99


class TestBasicScenario:
    """The root + two children scenario."""

    def test_scenario(self, three_node_tree):
        tree = three_node_tree
        assert len(tree) == 3
        assert list(tree.children(0)) == [1, 2]
        assert tree.depth(1) == 1
        assert tree.subtree(0) == [0, 1, 2]

    def test_parent_out_of_bounds(self, three_node_tree):
        with pytest.raises(OutOfBoundsError) as exc_info:
            three_node_tree.parent(99)
        assert exc_info.value.index == 99
        assert exc_info.value.size == 3

    def test_out_of_bounds_is_index_error(self, three_node_tree):
        with pytest.raises(IndexError):
            three_node_tree.parent(99)

    def test_negative_index_not_allowed(self, three_node_tree):
        with pytest.raises(OutOfBoundsError):
            three_node_tree.parent(-1)
        with pytest.raises(OutOfBoundsError):
            three_node_tree[-1]


class TestValueAccess:

    def test_getitem_and_setitem(self, three_node_tree):
        assert three_node_tree[1] == "a"
        three_node_tree[1] = "A"
        assert three_node_tree[1] == "A"

    def test_setitem_out_of_bounds(self, three_node_tree):
        with pytest.raises(OutOfBoundsError):
            three_node_tree[5] = "x"

    def test_get_with_default(self, three_node_tree):
        assert three_node_tree.get(2) == "b"
        assert three_node_tree.get(9) is None
        assert three_node_tree.get(9, "missing") == "missing"

    def test_values_and_items(self, three_node_tree):
        assert list(three_node_tree.values()) == ["root", "a", "b"]
        assert list(three_node_tree.items()) == [(0, "root"), (1, "a"), (2, "b")]
        assert list(three_node_tree) == [0, 1, 2]

    def test_find(self, sample_tree):
        assert sample_tree.find("a2") == 4
        assert sample_tree.find("missing") is None

    def test_find_returns_first_match(self):
        tree = ApterTree.from_arrays(["x", "y", "x"], [None, 0, 0])
        assert tree.find("x") == 0

    def test_item_snapshot(self, sample_tree):
        item = sample_tree.item(6)
        assert item == TreeItem(index=6, value="a2x", parent=4, depth=3)
        assert not item.is_root
        assert sample_tree.item(0).is_root

    def test_values_need_no_capabilities(self):
        class Opaque:
            __eq__ = None

        tree = ApterTree()
        tree.insert(Opaque())
        tree.insert(Opaque(), 0)
        assert list(tree.children(0)) == [1]
        assert tree.subtree(0) == [0, 1]


class TestStructureQueries:

    def test_root(self, sample_tree):
        assert sample_tree.root() == 0
        assert sample_tree.is_root(0)
        assert not sample_tree.is_root(3)

    def test_root_of_empty_tree(self, empty_tree):
        with pytest.raises(EmptyTreeError):
            empty_tree.root()
        # Callers catching the general out-of-bounds error also see it
        with pytest.raises(OutOfBoundsError):
            empty_tree.root()

    def test_children(self, sample_tree):
        assert list(sample_tree.children(0)) == [1, 2]
        assert list(sample_tree.children(1)) == [3, 4]
        assert list(sample_tree.children(4)) == [6]
        assert list(sample_tree.children(6)) == []

    def test_children_is_restartable(self, sample_tree):
        assert list(sample_tree.children(1)) == list(sample_tree.children(1))

    def test_children_is_lazy(self, sample_tree):
        children = sample_tree.children(0)
        assert next(children) == 1

    def test_children_validates_eagerly(self, sample_tree):
        # The error surfaces at the call, not on first iteration
        with pytest.raises(OutOfBoundsError):
            sample_tree.children(7)

    def test_leaves(self, sample_tree):
        assert list(sample_tree.leaves()) == [3, 5, 6]
        assert sample_tree.is_leaf(3)
        assert not sample_tree.is_leaf(4)

    def test_single_node_tree_is_leaf(self):
        tree = ApterTree()
        tree.insert("only")
        assert tree.is_leaf(0)
        assert list(tree.leaves()) == [0]

    def test_siblings(self, sample_tree):
        assert list(sample_tree.siblings(1)) == [2]
        assert list(sample_tree.siblings(3)) == [4]
        assert list(sample_tree.siblings(5)) == []
        assert list(sample_tree.siblings(0)) == []

    def test_ancestors_exclude_self_include_root(self, sample_tree):
        assert list(sample_tree.ancestors(6)) == [4, 1, 0]
        assert list(sample_tree.ancestors(2)) == [0]
        assert list(sample_tree.ancestors(0)) == []

    def test_ancestors_out_of_bounds(self, sample_tree):
        with pytest.raises(OutOfBoundsError):
            sample_tree.ancestors(100)

    def test_depth(self, sample_tree):
        expected = {0: 0, 1: 1, 2: 1, 3: 2, 4: 2, 5: 2, 6: 3}
        for index, depth in expected.items():
            assert sample_tree.depth(index) == depth

    def test_path(self, sample_tree):
        assert sample_tree.path(6) == [0, 1, 4, 6]
        assert sample_tree.path(0) == [0]

    def test_subtree(self, sample_tree):
        assert sample_tree.subtree(0) == list(range(7))
        assert sample_tree.subtree(1) == [1, 3, 4, 6]
        assert sample_tree.subtree(2) == [2, 5]
        assert sample_tree.subtree(6) == [6]

    def test_descendants(self, sample_tree):
        assert sample_tree.descendants(1) == [3, 4, 6]
        assert sample_tree.descendants(5) == []

    def test_child_lists(self, sample_tree):
        assert sample_tree.child_lists(1) == {1: [3, 4], 3: [], 4: [6], 6: []}

    def test_common_ancestor(self, sample_tree):
        assert sample_tree.common_ancestor(3, 6) == 1
        assert sample_tree.common_ancestor(6, 5) == 0
        assert sample_tree.common_ancestor(4, 6) == 4
        assert sample_tree.common_ancestor(2, 2) == 2

    def test_common_ancestor_out_of_bounds(self, sample_tree):
        with pytest.raises(OutOfBoundsError):
            sample_tree.common_ancestor(1, 70)

    def test_root_with_n_children(self):
        tree = ApterTree()
        root = tree.insert("root")
        for i in range(25):
            tree.insert(f"child{i}", root)

        assert len(list(tree.children(root))) == 25
        for child in tree.children(root):
            assert tree.depth(child) == 1


class TestFromArrays:

    def test_round_trip(self, sample_tree):
        rebuilt = ApterTree.from_arrays(sample_tree.values(), sample_tree.parent_indices())
        assert rebuilt == sample_tree

    def test_length_mismatch(self):
        with pytest.raises(TreeStructureError):
            ApterTree.from_arrays(["a", "b"], [None])

    def test_bad_parent_order(self):
        with pytest.raises(InvalidParentError):
            ApterTree.from_arrays(["a", "b", "c"], [None, 2, 0])

    def test_two_roots(self):
        with pytest.raises(InvalidParentError):
            ApterTree.from_arrays(["a", "b"], [None, None])

    def test_empty(self):
        assert ApterTree.from_arrays([], []).is_empty()


class TestCopyAndEquality:

    def test_copy_is_independent(self, sample_tree):
        copy = sample_tree.copy()
        assert copy == sample_tree
        copy.insert("new", 0)
        assert copy != sample_tree
        assert len(sample_tree) == 7

    def test_equality_compares_values_and_parents(self):
        a = ApterTree.from_arrays("xyz", [None, 0, 0])
        b = ApterTree.from_arrays("xyz", [None, 0, 1])
        c = ApterTree.from_arrays("xyw", [None, 0, 0])
        assert a == ApterTree.from_arrays("xyz", [None, 0, 0])
        assert a != b
        assert a != c
        assert a != "xyz"

    def test_unhashable(self, sample_tree):
        with pytest.raises(TypeError):
            hash(sample_tree)

    def test_clear(self, sample_tree):
        sample_tree.clear()
        assert sample_tree.is_empty()
        assert sample_tree.insert("fresh root") == 0

    def test_repr(self, three_node_tree):
        assert repr(three_node_tree) == (
            "ApterTree(values=['root', 'a', 'b'], parents=[None, 0, 0])"
        )


class TestValidate:

    def test_valid_tree(self, sample_tree):
        sample_tree.validate()

    def test_detects_corruption(self, sample_tree):
        # Only reachable by poking at internals
        sample_tree._parents[3] = 5
        with pytest.raises(InvalidParentError):
            sample_tree.validate()

    def test_detects_length_mismatch(self, sample_tree):
        sample_tree._values.append("stray")
        with pytest.raises(TreeStructureError):
            sample_tree.validate()
