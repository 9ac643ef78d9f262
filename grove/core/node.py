from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, eq=False)
class Node:
    """Snapshot of one record: the stored value and the width of its subtree."""

    value: Any
    width: int

    @property
    def is_leaf(self) -> bool:
        return self.width == 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.value == other.value and self.width == other.width

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return repr(self.value)

    def __str__(self) -> str:
        return str(self.value)
