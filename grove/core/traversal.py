from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Optional, Union

if TYPE_CHECKING:  # pragma: no cover
    from grove.core.views import RangeView, Tree


class TraversalOrder(ABC):
    """Order in which the records of a range are visited."""

    name: str = ""

    @abstractmethod
    def positions(self, start: int, stop: int) -> Iterable[int]:
        """Absolute record positions of ``[start, stop)`` in this order."""

    def __repr__(self) -> str:
        return type(self).__name__


class Preorder(TraversalOrder):
    """Visits records in storage order:

    * each node's children are visited left to right, and
    * each node's children are visited before the node itself.
    """

    name = "preorder"

    def positions(self, start: int, stop: int) -> Iterable[int]:
        return range(start, stop)


class ReversePostorder(TraversalOrder):
    """Visits records in reverse storage order:

    * each node's children are visited right to left, and
    * each node is visited before its children.
    """

    name = "reverse-postorder"

    def positions(self, start: int, stop: int) -> Iterable[int]:
        return range(stop - 1, start - 1, -1)


PREORDER = Preorder()
REVERSE_POSTORDER = ReversePostorder()

_ORDERS = {order.name: order for order in (PREORDER, REVERSE_POSTORDER)}


def resolve_order(order: Union[TraversalOrder, str, None]) -> TraversalOrder:
    if order is None:
        return PREORDER
    if isinstance(order, TraversalOrder):
        return order
    if isinstance(order, type) and issubclass(order, TraversalOrder):
        return order()
    key = str(order).strip().lower().replace("_", "-")
    try:
        return _ORDERS[key]
    except KeyError as exc:
        raise ValueError(
            f"Unknown traversal order '{order}'. Expected one of {sorted(_ORDERS)}."
        ) from exc


class NodeSlot:
    """Writable handle on one record's value, yielded by ``nodes_mut``.

    Assigning ``slot.value`` replaces the stored value; the width is read-only.
    """

    __slots__ = ("_view", "_position")

    def __init__(self, view: "RangeView", position: int) -> None:
        self._view = view
        self._position = position

    @property
    def position(self) -> int:
        return self._position

    @property
    def value(self) -> Any:
        self._view._check_fresh()
        return self._view._store._values[self._position]

    @value.setter
    def value(self, value: Any) -> None:
        self._view._check_writable()
        self._view._store._values[self._position] = value

    @property
    def width(self) -> int:
        self._view._check_fresh()
        return int(self._view._store._widths[self._position])

    def __repr__(self) -> str:
        return f"NodeSlot({self._position}: {self.value!r})"


def _positions(view: "RangeView", order: Optional[TraversalOrder]) -> Iterator[int]:
    for position in resolve_order(order).positions(view._start, view._stop):
        view._check_fresh()
        yield position


def iter_nodes(view: "RangeView", order: Optional[TraversalOrder] = None) -> Iterator[Any]:
    view._check_fresh()
    values = view._store._values
    for position in _positions(view, order):
        yield values[position]


def iter_slots(view: "RangeView", order: Optional[TraversalOrder] = None) -> Iterator[NodeSlot]:
    view._check_writable()
    return (NodeSlot(view, position) for position in _positions(view, order))


def iter_trees(view: "RangeView", order: Optional[TraversalOrder] = None) -> Iterator["Tree"]:
    view._check_fresh()
    for position in _positions(view, order):
        yield view._tree_at(position)


def iter_trees_mut(
    view: "RangeView", order: Optional[TraversalOrder] = None
) -> Iterator["Tree"]:
    view._check_writable()
    return iter_trees(view, order)


__all__ = [
    "TraversalOrder",
    "Preorder",
    "ReversePostorder",
    "PREORDER",
    "REVERSE_POSTORDER",
    "resolve_order",
    "NodeSlot",
    "iter_nodes",
    "iter_slots",
    "iter_trees",
    "iter_trees_mut",
]
