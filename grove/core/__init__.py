"""Core storage, construction protocol, views and traversal orders."""

from .builder import GroveBufBuilder
from .grove_buf import GroveBuf
from .node import Node
from .traversal import (
    PREORDER,
    REVERSE_POSTORDER,
    NodeSlot,
    Preorder,
    ReversePostorder,
    TraversalOrder,
    resolve_order,
)
from .views import Grove, Tree

__all__ = [
    "GroveBuf",
    "GroveBufBuilder",
    "Grove",
    "Tree",
    "Node",
    "NodeSlot",
    "TraversalOrder",
    "Preorder",
    "ReversePostorder",
    "PREORDER",
    "REVERSE_POSTORDER",
    "resolve_order",
]
