import pytest

from grove import (
    Branch,
    Grove,
    GroveBuf,
    InvalidBoundaryError,
    Node,
    ReadOnlyViewError,
    StaleViewError,
    Tree,
    grove_buf,
)


def _sample_forest() -> GroveBuf:
    return grove_buf(Branch([1, 2], 3), 4, Branch([5, 6], 7))


def test_grove_view_length():
    empty = GroveBuf()
    assert empty.as_view().is_empty()
    assert empty.as_view().len() == 0

    view = _sample_forest().as_view()
    assert isinstance(view, Grove)
    assert not view.is_empty()
    assert view.len() == 7
    assert len(view) == 7


def test_grove_view_indexing_uses_widths():
    view = _sample_forest().as_view()
    assert view[2] == grove_buf(Branch([1, 2], 3))
    assert view[3] == grove_buf(4)
    assert view[6].root() == 7
    assert (view[6].start, view[6].stop) == (4, 7)


def test_roots_lists_top_level_trees():
    roots = _sample_forest().roots()
    assert [tree.root() for tree in roots] == [3, 4, 7]
    assert [len(tree) for tree in roots] == [3, 1, 3]


def test_children_rev_peels_children_right_to_left():
    store = grove_buf(Branch([Branch([1, 2, 3], 4), 5, Branch([6], 7), 8], 9))
    tree = store[8]
    children = list(tree.children_rev())
    assert children == [
        grove_buf(8)[0],
        grove_buf(Branch([6], 7))[1],
        grove_buf(5)[0],
        grove_buf(Branch([1, 2, 3], 4))[3],
    ]
    assert sum(len(child) for child in children) == tree.width - 1


def test_children_rev_is_restartable():
    tree = _sample_forest()[2]
    first = [child.root() for child in tree.children_rev()]
    second = [child.root() for child in tree.children_rev()]
    assert first == second == [2, 1]


def test_leaf_has_no_children():
    tree = _sample_forest()[3]
    assert tree.is_leaf()
    assert list(tree.children_rev()) == []


def test_tree_relative_indexing():
    store = grove_buf(
        Branch(
            [
                Branch([Branch([1, 2], 3), Branch([4, 5], 6)], 7),
                8,
                Branch([Branch([9, 10], 11), Branch([12, 13], 14)], 15),
            ],
            16,
        )
    )
    right = store[14]
    assert (right.start, right.stop) == (8, 15)
    assert right[2] == grove_buf(Branch([9, 10], 11))
    assert right[6] == right
    with pytest.raises(IndexError):
        right[7]


def test_root_node_snapshot():
    tree = _sample_forest()[2]
    assert tree.root_node() == Node(3, 3)
    assert tree.node(0) == Node(1, 1)
    assert repr(tree.root_node()) == "3"


def test_read_only_views_reject_writes():
    store = _sample_forest()
    with pytest.raises(ReadOnlyViewError):
        store[2].set_root(30)
    with pytest.raises(ReadOnlyViewError):
        store.as_view()[2].children_rev_mut()
    with pytest.raises(ReadOnlyViewError):
        store.as_view().nodes_mut()
    assert store[2].root() == 3


def test_mutable_views_change_values_only():
    store = _sample_forest()
    tree = store.as_mut()[2]
    assert tree.is_mutable
    tree.set_root(30)
    for child in tree.children_rev_mut():
        child.set_root(child.root() * 10)

    assert list(store.nodes()) == [10, 20, 30, 4, 5, 6, 7]
    assert store.widths().tolist() == [1, 1, 3, 1, 1, 1, 3]


def test_views_go_stale_after_append():
    store = _sample_forest()
    view = store.as_view()
    tree = store[2]
    nodes = view.nodes()

    store.push(8)

    with pytest.raises(StaleViewError):
        view[0]
    with pytest.raises(StaleViewError):
        tree.root()
    with pytest.raises(StaleViewError):
        next(nodes)
    assert repr(tree) == "Tree(<stale>)"
    assert store.as_view()[2] == grove_buf(Branch([1, 2], 3))


def test_stale_child_iterator():
    store = _sample_forest()
    children = store[6].children_rev()
    first = next(children)
    assert first.root() == 6
    store.push(8)
    with pytest.raises(StaleViewError):
        next(children)


def test_cross_type_equality():
    store = grove_buf(Branch([1, 2], 3))
    other = grove_buf(Branch([1, 2], 3))
    assert store.as_view() == other
    assert other == store.as_view()
    assert store[2] == other.as_view()
    assert store[2] == other[2]
    assert store[1] != other[2]
    assert store.as_view() != "not a view"


def test_repr_of_views():
    store = _sample_forest()
    assert repr(store.as_view()) == "Grove([1, 2] => 3, 4, [5, 6] => 7)"
    assert repr(store[6]) == "Tree([5, 6] => 7)"


def test_to_literal_of_subtree():
    store = _sample_forest()
    assert store[6].to_literal() == [Branch([5, 6], 7)]
    assert store.as_view().to_literal() == [Branch([1, 2], 3), 4, Branch([5, 6], 7)]


def test_grove_validate():
    store = _sample_forest()
    store.as_view().validate()


def test_tree_requires_at_least_one_node():
    store = _sample_forest()
    with pytest.raises(InvalidBoundaryError):
        Tree(store, 2, 2)
    with pytest.raises(IndexError):
        Grove(store, 0, 8)
