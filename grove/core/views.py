"""Non-owning windows over a :class:`~grove.core.grove_buf.GroveBuf`.

A view is a ``(store, start, stop)`` triple. :class:`Grove` reads its range as
a run of complete trees, :class:`Tree` as exactly one tree whose root is the
last record. Neither copies data; both refuse to be used once the store has
been appended to or handed to a builder session.
"""

from __future__ import annotations

import operator
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Tuple

import numpy as np

from grove.core.node import Node
from grove.core.ranges import subtree_bounds, validate_widths, walk_roots_rev
from grove.core.traversal import (
    NodeSlot,
    TraversalOrder,
    iter_nodes,
    iter_slots,
    iter_trees,
    iter_trees_mut,
)
from grove.errors import InvalidBoundaryError, ReadOnlyViewError, StaleViewError
from grove.literal import Branch, render_literal

if TYPE_CHECKING:  # pragma: no cover
    from grove.core.grove_buf import GroveBuf


class RangeView:
    __slots__ = ("_store", "_start", "_stop", "_mutable", "_generation")

    def __init__(
        self,
        store: "GroveBuf",
        start: int,
        stop: int,
        *,
        mutable: bool = False,
        generation: Optional[int] = None,
    ) -> None:
        if not 0 <= start <= stop <= len(store):
            raise IndexError(f"Range [{start}, {stop}) out of bounds for {len(store)} nodes")
        self._store = store
        self._start = start
        self._stop = stop
        self._mutable = mutable
        self._generation = store._generation if generation is None else generation

    @property
    def start(self) -> int:
        return self._start

    @property
    def stop(self) -> int:
        return self._stop

    @property
    def is_mutable(self) -> bool:
        return self._mutable

    def _check_fresh(self) -> None:
        if self._store._generation != self._generation:
            raise StaleViewError(
                f"{type(self).__name__} view used after its store changed."
            )

    def _check_writable(self) -> None:
        self._check_fresh()
        if not self._mutable:
            raise ReadOnlyViewError(f"{type(self).__name__} view is read-only.")

    def _tree_at(self, position: int) -> "Tree":
        start, stop = subtree_bounds(self._store._widths, position, floor=self._start)
        return Tree(
            self._store, start, stop, mutable=self._mutable, generation=self._generation
        )

    def _absolute(self, index: int) -> int:
        index = operator.index(index)
        if not 0 <= index < self._stop - self._start:
            raise IndexError(
                f"Index {index} out of range for {type(self).__name__} of {len(self)} nodes"
            )
        return self._start + index

    def is_empty(self) -> bool:
        return self._stop == self._start

    def len(self) -> int:
        """Number of nodes in the view."""
        return self._stop - self._start

    def __len__(self) -> int:
        return self._stop - self._start

    def __getitem__(self, index: int) -> "Tree":
        """The tree whose root is the ``index``-th node of this view."""
        self._check_fresh()
        return self._tree_at(self._absolute(index))

    def node(self, index: int) -> Node:
        self._check_fresh()
        position = self._absolute(index)
        return Node(self._store._values[position], int(self._store._widths[position]))

    def widths(self) -> np.ndarray:
        """Read-only array of the widths of every node in the view."""
        self._check_fresh()
        window = self._store._widths[self._start : self._stop]
        window.flags.writeable = False
        return window

    def nodes(self, order: Optional[TraversalOrder] = None) -> Iterator[Any]:
        """Values of the view's nodes in ``order`` (pre-order by default).

        >>> from grove import Branch, PREORDER, REVERSE_POSTORDER, grove_buf
        >>> g = grove_buf(Branch([1, 4, 9], 16), 25)
        >>> list(g.as_view().nodes(PREORDER))
        [1, 4, 9, 16, 25]
        >>> list(g.as_view().nodes(REVERSE_POSTORDER))
        [25, 16, 9, 4, 1]
        """
        return iter_nodes(self, order)

    def nodes_mut(self, order: Optional[TraversalOrder] = None) -> Iterator[NodeSlot]:
        """Like :meth:`nodes` but yields writable :class:`NodeSlot` handles."""
        return iter_slots(self, order)

    def trees(self, order: Optional[TraversalOrder] = None) -> Iterator["Tree"]:
        """One :class:`Tree` per node in ``order``, each rooted at that node."""
        return iter_trees(self, order)

    def trees_mut(self, order: Optional[TraversalOrder] = None) -> Iterator["Tree"]:
        return iter_trees_mut(self, order)

    def to_literal(self) -> List[Any]:
        """Leaves and :class:`Branch` items that rebuild this view's trees."""

        self._check_fresh()
        values = self._store._values
        widths = self._store._widths
        stack: List[Tuple[Any, int]] = []
        for position in range(self._start, self._stop):
            width = int(widths[position])
            if width == 1:
                stack.append((values[position], 1))
                continue
            children: List[Any] = []
            covered = 0
            while covered < width - 1:
                item, item_width = stack.pop()
                children.append(item)
                covered += item_width
            children.reverse()
            stack.append((Branch(children, values[position]), width))
        return [item for item, _ in stack]

    def __eq__(self, other: object) -> bool:
        from grove.core.grove_buf import GroveBuf

        if isinstance(other, GroveBuf):
            other = other.as_view()
        if not isinstance(other, RangeView):
            return NotImplemented
        return equal_ranges(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._store._generation != self._generation:
            return f"{type(self).__name__}(<stale>)"
        return f"{type(self).__name__}({render_literal(self.to_literal())})"


class Grove(RangeView):
    """A run of consecutive complete trees inside a store."""

    __slots__ = ()

    def __iter__(self) -> Iterator["Tree"]:
        return self.trees()

    def roots(self) -> List["Tree"]:
        """The top-level trees of the view, left to right."""
        self._check_fresh()
        bounds = walk_roots_rev(self._store._widths, self._start, self._stop)
        return [
            Tree(self._store, start, stop, mutable=self._mutable, generation=self._generation)
            for start, stop in reversed(bounds)
        ]

    def validate(self) -> None:
        """Check the width invariant over the whole view."""
        self._check_fresh()
        validate_widths(self._store._widths, self._start, self._stop)


class Tree(RangeView):
    """Exactly one tree inside a store; the root is the last node of the range."""

    __slots__ = ()

    def __init__(
        self,
        store: "GroveBuf",
        start: int,
        stop: int,
        *,
        mutable: bool = False,
        generation: Optional[int] = None,
    ) -> None:
        super().__init__(store, start, stop, mutable=mutable, generation=generation)
        if stop == start:
            raise InvalidBoundaryError("A tree view needs at least one node.", position=start)

    def root(self) -> Any:
        """The value held at the root of the tree."""
        self._check_fresh()
        return self._store._values[self._stop - 1]

    def set_root(self, value: Any) -> None:
        """Replace the value held at the root of the tree."""
        self._check_writable()
        self._store._values[self._stop - 1] = value

    def root_node(self) -> Node:
        return self.node(self._stop - self._start - 1)

    @property
    def width(self) -> int:
        return self._stop - self._start

    def is_leaf(self) -> bool:
        return self._stop - self._start == 1

    def children_rev(self) -> Iterator["Tree"]:
        """The maximal proper subtrees, right to left.

        >>> from grove import Branch, grove_buf
        >>> g = grove_buf(Branch([Branch([1, 2, 3], 4), 5, Branch([6], 7), 8], 9))
        >>> [child.root() for child in g[8].children_rev()]
        [8, 7, 5, 4]
        """
        self._check_fresh()
        return self._children(mutable=False)

    def children_rev_mut(self) -> Iterator["Tree"]:
        """Like :meth:`children_rev` but yields mutable trees."""
        self._check_writable()
        return self._children(mutable=True)

    def _children(self, *, mutable: bool) -> Iterator["Tree"]:
        widths = self._store._widths
        stop = self._stop - 1
        while stop > self._start:
            self._check_fresh()
            start = stop - int(widths[stop - 1])
            yield Tree(self._store, start, stop, mutable=mutable, generation=self._generation)
            stop = start


def equal_ranges(left: RangeView, right: RangeView) -> bool:
    """Same length, and pairwise equal values and widths in storage order."""

    left._check_fresh()
    right._check_fresh()
    if len(left) != len(right):
        return False
    if not np.array_equal(left.widths(), right.widths()):
        return False
    left_values = left._store._values[left._start : left._stop]
    right_values = right._store._values[right._start : right._stop]
    return all(a == b for a, b in zip(left_values, right_values))


__all__ = ["RangeView", "Grove", "Tree", "equal_ranges"]
