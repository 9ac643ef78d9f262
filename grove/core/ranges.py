"""Width arithmetic shared by the store and its views.

A record at absolute position ``i`` with width ``w`` owns the half-open range
``[i - w + 1, i + 1)``. Every helper here works on half-open ``[start, stop)``
bounds over a 1-D integer width buffer.
"""

from __future__ import annotations

from typing import Any, List, Tuple

import numpy as np

from grove.errors import InvalidBoundaryError


def subtree_bounds(widths: Any, position: int, *, floor: int = 0) -> Tuple[int, int]:
    """Return ``(start, stop)`` of the subtree rooted at ``position``."""

    width = int(widths[position])
    start = position - width + 1
    if width < 1 or start < floor:
        raise InvalidBoundaryError(
            f"Record {position} has width {width}, which reaches past position {floor}.",
            position=position,
        )
    return start, position + 1


def walk_roots_rev(widths: Any, start: int, stop: int) -> List[Tuple[int, int]]:
    """Bounds of the consecutive trees tiling ``[start, stop)``, right to left."""

    bounds: List[Tuple[int, int]] = []
    cursor = stop
    while cursor > start:
        tree_start, tree_stop = subtree_bounds(widths, cursor - 1, floor=start)
        bounds.append((tree_start, tree_stop))
        cursor = tree_start
    return bounds


def is_tree_boundary(widths: Any, start: int, stop: int, position: int) -> bool:
    """Whether ``position`` separates two top-level trees of ``[start, stop)``."""

    if position == stop:
        return True
    cursor = stop
    while cursor > position:
        width = int(widths[cursor - 1])
        if width < 1:
            return False
        cursor -= width
        if cursor < start:
            return False
    return cursor == position


def validate_widths(widths: np.ndarray, start: int, stop: int) -> None:
    """Check the full width invariant over ``[start, stop)``.

    Every record's range must stay inside the window and be tiled exactly by
    its direct children; the window itself must be tiled exactly by trees.
    Each record is visited once as a root and once as a child, so the walk is
    linear in the window length.
    """

    window = np.asarray(widths[start:stop])
    if window.size == 0:
        return

    bad = np.flatnonzero(window < 1)
    if bad.size:
        position = start + int(bad[0])
        raise InvalidBoundaryError(
            f"Record {position} has non-positive width {int(window[bad[0]])}.",
            position=position,
        )
    reach = np.arange(start, stop) - window + 1
    bad = np.flatnonzero(reach < start)
    if bad.size:
        position = start + int(bad[0])
        raise InvalidBoundaryError(
            f"Record {position} has width {int(window[bad[0]])}, which reaches before {start}.",
            position=position,
        )

    for position in range(start, stop):
        node_start = position - int(widths[position]) + 1
        cursor = position
        while cursor > node_start:
            cursor -= int(widths[cursor - 1])
        if cursor != node_start:
            raise InvalidBoundaryError(
                f"Children of record {position} do not tile [{node_start}, {position}).",
                position=position,
            )

    if not is_tree_boundary(widths, start, stop, start):
        raise InvalidBoundaryError(
            f"Records [{start}, {stop}) do not form a sequence of complete trees.",
            position=stop - 1,
        )


__all__ = ["subtree_bounds", "walk_roots_rev", "is_tree_boundary", "validate_widths"]
