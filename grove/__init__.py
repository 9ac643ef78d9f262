"""Grove: append-only forests with O(1) subtree ranges.

Every node stores a value and the width of its subtree. Children always
precede their parent in one contiguous buffer, so the subtree of the node at
position ``i`` with width ``w`` is exactly ``[i - w + 1, i]``.

Quick Start
-----------
>>> from grove import GroveBuf, PREORDER, REVERSE_POSTORDER
>>>
>>> g = GroveBuf()
>>> g.builder().open().push(1).push(2).close(3).push(4).build()
GroveBuf([1, 2] => 3, 4)
>>> list(g.nodes(PREORDER))
[1, 2, 3, 4]
>>> list(g.nodes(REVERSE_POSTORDER))
[4, 3, 2, 1]
>>> [child.root() for child in g[2].children_rev()]
[2, 1]

Classes
-------
GroveBuf : Owning, append-only store of one or more trees.
GroveBufBuilder : Session that appends balanced trees to a store.
Grove : View over a run of complete trees.
Tree : View over exactly one tree.
"""

from importlib.metadata import version as _pkg_version

try:
    __version__ = _pkg_version("grove-forest")
except Exception:  # pragma: no cover - best effort during local development
    __version__ = "0.1.0"

from .core import (
    PREORDER,
    REVERSE_POSTORDER,
    Grove,
    GroveBuf,
    GroveBufBuilder,
    Node,
    NodeSlot,
    Preorder,
    ReversePostorder,
    TraversalOrder,
    Tree,
    resolve_order,
)
from .errors import (
    GroveError,
    InvalidBoundaryError,
    LiteralSyntaxError,
    ProtocolViolationError,
    ReadOnlyViewError,
    StaleViewError,
    StoreBusyError,
)
from .literal import Branch, grove_buf, parse_literal

__all__ = [
    "__version__",
    # Storage and construction
    "GroveBuf",
    "GroveBufBuilder",
    "Node",
    # Views
    "Grove",
    "Tree",
    "NodeSlot",
    # Traversal
    "TraversalOrder",
    "Preorder",
    "ReversePostorder",
    "PREORDER",
    "REVERSE_POSTORDER",
    "resolve_order",
    # Literals
    "Branch",
    "grove_buf",
    "parse_literal",
    # Errors
    "GroveError",
    "ProtocolViolationError",
    "StoreBusyError",
    "StaleViewError",
    "ReadOnlyViewError",
    "InvalidBoundaryError",
    "LiteralSyntaxError",
]
