from __future__ import annotations

from typing import TYPE_CHECKING, Any, List

from grove.errors import ProtocolViolationError
from grove.logging import get_logger

if TYPE_CHECKING:  # pragma: no cover
    from grove.core.grove_buf import GroveBuf

LOGGER = get_logger("core.builder")


class GroveBufBuilder:
    """Session for appending balanced trees to a :class:`GroveBuf`.

    Only obtainable from :meth:`GroveBuf.builder`. Each :meth:`open` moves
    later :meth:`push` calls one level deeper; each :meth:`close` takes the
    value of the parent of everything appended since the matching
    :meth:`open`. The session rejects, at the offending call,

    * a :meth:`close` with no pending :meth:`open`, and
    * a :meth:`build` while any :meth:`open` is still pending.

    Levels still pending when the session is dropped without :meth:`build`
    (garbage collected, left through ``with``, or :meth:`discard`) behave as
    if their :meth:`open` had never been called. Nodes already appended stay
    in the store.

    While the session is live the store refuses direct appends and new views,
    and views taken before the session was started are stale.
    """

    def __init__(self, store: "GroveBuf") -> None:
        self._store = store
        self._pending: List[int] = []
        self._finished = False

    @property
    def depth(self) -> int:
        """Number of :meth:`open` calls not yet matched by :meth:`close`."""
        return len(self._pending)

    @property
    def finished(self) -> bool:
        return self._finished

    def push(self, value: Any) -> "GroveBufBuilder":
        """Adds a new leaf at the current depth."""
        self._ensure_live("push")
        self._store._append(value, 1)
        return self

    def open(self) -> "GroveBufBuilder":
        """Starts a new level of depth; must be matched by :meth:`close`."""
        self._ensure_live("open")
        self._pending.append(len(self._store))
        return self

    def close(self, value: Any) -> "GroveBufBuilder":
        """Adds a node with value ``value`` whose children are the nodes and
        subtrees appended since the matching :meth:`open`."""
        self._ensure_live("close")
        if not self._pending:
            raise ProtocolViolationError("close() called without a matching open().")
        position = self._pending.pop()
        self._store._append_at(value, position)
        return self

    def build(self) -> "GroveBuf":
        """Ends the session and returns the underlying store."""
        self._ensure_live("build")
        if self._pending:
            raise ProtocolViolationError(
                f"build() called with {len(self._pending)} unclosed open() level(s)."
            )
        self._finished = True
        LOGGER.debug("Builder session finished at %d nodes.", len(self._store))
        return self._store

    def discard(self) -> "GroveBuf":
        """Ends the session, dropping any levels still pending."""
        self._ensure_live("discard")
        self._release()
        return self._store

    def _release(self) -> None:
        if self._pending:
            LOGGER.debug("Discarding %d unclosed open() level(s).", len(self._pending))
        self._pending.clear()
        self._finished = True

    def _ensure_live(self, operation: str) -> None:
        if self._finished:
            raise ProtocolViolationError(f"{operation}() called on a finished builder session.")

    def __enter__(self) -> "GroveBufBuilder":
        self._ensure_live("__enter__")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._finished:
            self._release()

    def __repr__(self) -> str:
        state = "finished" if self._finished else f"depth={self.depth}"
        return f"GroveBufBuilder({state}, nodes={len(self._store)})"


__all__ = ["GroveBufBuilder"]
