from __future__ import annotations

import weakref
from typing import Any, Iterable, Iterator, List, Optional

import numpy as np

from grove import config as gx_config
from grove.core.builder import GroveBufBuilder
from grove.core.node import Node
from grove.core.ranges import is_tree_boundary, validate_widths
from grove.core.traversal import NodeSlot, TraversalOrder
from grove.core.views import Grove, Tree, equal_ranges
from grove.errors import InvalidBoundaryError, StoreBusyError
from grove.literal import render_literal
from grove.logging import get_logger

LOGGER = get_logger("core.grove_buf")


class GroveBuf:
    """A sequence of trees stored so that nodes can be visited in pre-order or
    reverse post-order, and any node's children can be enumerated, without
    child or parent pointers.

    All nodes share one allocation: values in a list and subtree widths in a
    contiguous integer buffer. The structure is append-only, so every child
    must be appended before the root of its (sub)tree and a closed subtree can
    no longer change shape. Values stay mutable through ``as_mut()``.
    """

    def __init__(
        self,
        *,
        capacity: Optional[int] = None,
        debug_checks: Optional[bool] = None,
    ) -> None:
        runtime = gx_config.runtime_config()
        if capacity is None:
            capacity = runtime.initial_capacity
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._values: List[Any] = []
        self._widths = np.empty((capacity,), dtype=runtime.numpy_width_dtype)
        self._len = 0
        self._generation = 0
        self._session_ref: Optional[weakref.ReferenceType] = None
        self.debug_checks = runtime.debug_checks if debug_checks is None else debug_checks

    @classmethod
    def from_literal(cls, items: Iterable[Any], **kwargs: Any) -> "GroveBuf":
        """Build a store from leaves and :class:`~grove.literal.Branch` items."""

        from grove.literal import extend_from_literal

        store = cls(**kwargs)
        extend_from_literal(store, items)
        return store

    # ------------------------------------------------------------------
    # inspection

    def is_empty(self) -> bool:
        """Returns ``True`` if and only if the store contains no trees."""
        return self._len == 0

    def len(self) -> int:
        """Number of nodes (not trees) in the store."""
        return self._len

    def __len__(self) -> int:
        return self._len

    @property
    def capacity(self) -> int:
        return int(self._widths.shape[0])

    def node(self, position: int) -> Node:
        self._ensure_idle()
        position = self._check_position(position)
        return Node(self._values[position], int(self._widths[position]))

    def widths(self) -> np.ndarray:
        self._ensure_idle()
        return self.as_view().widths()

    def validate(self) -> None:
        """Check the full width invariant, raising ``InvalidBoundaryError``."""

        self._ensure_idle()
        validate_widths(self._widths, 0, self._len)

    # ------------------------------------------------------------------
    # views

    def as_view(self) -> Grove:
        """Read-only :class:`Grove` over the whole store."""
        self._ensure_idle()
        return Grove(self, 0, self._len, mutable=False)

    def as_mut(self) -> Grove:
        """Mutable :class:`Grove` over the whole store."""
        self._ensure_idle()
        return Grove(self, 0, self._len, mutable=True)

    def __getitem__(self, position: int) -> Tree:
        """The tree whose root is the node at ``position``."""
        return self.as_view()[position]

    def nodes(self, order: Optional[TraversalOrder] = None) -> Iterator[Any]:
        return self.as_view().nodes(order)

    def nodes_mut(self, order: Optional[TraversalOrder] = None) -> Iterator[NodeSlot]:
        return self.as_mut().nodes_mut(order)

    def trees(self, order: Optional[TraversalOrder] = None) -> Iterator[Tree]:
        """All trees of the store, subtrees included, in the given order.

        For ``[[[1, 2] => 3, [4, 5] => 6] => 7, 8]`` pre-order yields the trees
        rooted at 1, 2, 3, 4, 5, 6, 7 and 8, where the tree rooted at 3 is
        ``[1, 2] => 3`` and the one rooted at 7 spans the first seven nodes.
        """
        return self.as_view().trees(order)

    def trees_mut(self, order: Optional[TraversalOrder] = None) -> Iterator[Tree]:
        return self.as_mut().trees_mut(order)

    def __iter__(self) -> Iterator[Tree]:
        return self.trees()

    def roots(self) -> List[Tree]:
        return self.as_view().roots()

    def to_literal(self) -> List[Any]:
        return self.as_view().to_literal()

    # ------------------------------------------------------------------
    # construction

    def push(self, value: Any) -> None:
        """Appends a leaf with value ``value``."""
        self._ensure_idle()
        self._append(value, 1)

    def push_root(self, value: Any, children: int) -> None:
        """Appends a node whose children are the last ``children`` trees.

        The trees are found by walking back from the end of the store one
        top-level root at a time, so the caller must make sure the trailing
        ``children`` trees are the intended ones.
        """
        self._ensure_idle()
        if children < 0:
            raise ValueError(f"children must be >= 0, got {children}")
        element = self._len
        for count in range(children):
            if element == 0:
                raise IndexError(
                    f"push_root asked for {children} children but only {count} trees precede it"
                )
            element -= int(self._widths[element - 1])
        self.push_unchecked(value, element)

    def push_unchecked(self, value: Any, position: int) -> None:
        """Appends a node with value ``value`` whose subtree holds every node
        at ``position`` and beyond.

        It is the caller's responsibility that no node before ``position``
        already belongs to a subtree rooted at or after ``position``. The
        boundary is only verified when ``debug_checks`` is enabled.
        """
        self._ensure_idle()
        if self.debug_checks:
            self._check_boundary(position)
        self._append(value, self._len - position + 1)

    def builder(self) -> GroveBufBuilder:
        """Starts a :class:`GroveBufBuilder` session holding the store exclusively.

        Views taken before the session are stale from this point on.
        """
        self._ensure_idle()
        self._generation += 1
        session = GroveBufBuilder(self)
        self._session_ref = weakref.ref(session)
        LOGGER.debug("Builder session started at %d nodes.", self._len)
        return session

    # ------------------------------------------------------------------
    # internals shared with the builder and the views

    def _active_session(self) -> Optional[GroveBufBuilder]:
        if self._session_ref is None:
            return None
        session = self._session_ref()
        if session is None or session.finished:
            self._session_ref = None
            return None
        return session

    def _ensure_idle(self) -> None:
        if self._active_session() is not None:
            raise StoreBusyError("The store is held by a live builder session.")

    def _check_position(self, position: int) -> int:
        position = int(position)
        if not 0 <= position < self._len:
            raise IndexError(f"Node position {position} out of range for {self._len} nodes")
        return position

    def _check_boundary(self, position: int) -> None:
        if not 0 <= position <= self._len:
            raise InvalidBoundaryError(
                f"Subtree start {position} lies outside [0, {self._len}].",
                position=position,
            )
        if not is_tree_boundary(self._widths, 0, self._len, position):
            raise InvalidBoundaryError(
                f"Subtree start {position} splits an existing tree.",
                position=position,
            )

    def _append(self, value: Any, width: int) -> None:
        if self._len == self._widths.shape[0]:
            self._grow()
        self._widths[self._len] = width
        self._values.append(value)
        self._len += 1
        self._generation += 1

    def _append_at(self, value: Any, position: int) -> None:
        self._append(value, self._len - position + 1)

    def _grow(self) -> None:
        capacity = max(1, self._widths.shape[0] * 2)
        grown = np.empty((capacity,), dtype=self._widths.dtype)
        grown[: self._len] = self._widths[: self._len]
        self._widths = grown
        LOGGER.debug("Width buffer grown to %d slots.", capacity)

    # ------------------------------------------------------------------
    # equality and formatting

    def __eq__(self, other: object) -> bool:
        if isinstance(other, GroveBuf):
            return equal_ranges(self.as_view(), other.as_view())
        if isinstance(other, (Grove, Tree)):
            return equal_ranges(self.as_view(), other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._active_session() is not None:
            return f"GroveBuf(<building, {self._len} nodes>)"
        return f"GroveBuf({render_literal(self.to_literal())})"


__all__ = ["GroveBuf"]
