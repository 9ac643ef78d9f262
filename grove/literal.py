"""Literal construction for stores.

A literal is a sequence of items where each item is either a leaf value or a
:class:`Branch` holding the items of its children and the value of its root.
The same shape has a text form used by the command line::

    [[1, 2] => 3, [4] => 5] => 6, 7

Atoms in the text form are JSON scalars; bare words are read as strings.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any, Iterable, List, NamedTuple, Sequence, Tuple

from grove.errors import LiteralSyntaxError

if TYPE_CHECKING:  # pragma: no cover
    from grove.core.grove_buf import GroveBuf


class Branch(NamedTuple):
    """An interior node: ``children`` items followed by the ``root`` value."""

    children: Sequence[Any]
    root: Any


_PUSH, _OPEN, _CLOSE = "push", "open", "close"


def _flatten(items: Iterable[Any]) -> List[Tuple[str, Any]]:
    steps: List[Tuple[str, Any]] = []
    work: List[Tuple[bool, Any]] = [(False, item) for item in reversed(list(items))]
    while work:
        closing, item = work.pop()
        if closing:
            steps.append((_CLOSE, item))
        elif isinstance(item, Branch):
            try:
                children = list(item.children)
            except TypeError as exc:
                raise TypeError(
                    f"Branch children must be iterable, got {type(item.children).__name__}"
                ) from exc
            steps.append((_OPEN, None))
            work.append((True, item.root))
            work.extend((False, child) for child in reversed(children))
        else:
            steps.append((_PUSH, item))
    return steps


def extend_from_literal(store: "GroveBuf", items: Iterable[Any]) -> "GroveBuf":
    """Append ``items`` to ``store`` through one builder session.

    Children are pushed left to right before their root, so the resulting
    layout matches the order the items are written in. The whole literal is
    checked before the session starts; a malformed item leaves the store
    untouched.
    """

    steps = _flatten(items)
    with store.builder() as builder:
        for step, value in steps:
            if step is _PUSH:
                builder.push(value)
            elif step is _OPEN:
                builder.open()
            else:
                builder.close(value)
        builder.build()
    return store


def grove_buf(*items: Any) -> "GroveBuf":
    """Construct a store from leaves and :class:`Branch` items.

    >>> from grove import Branch, grove_buf
    >>> grove_buf(Branch([1, 2], 3), 4)
    GroveBuf([1, 2] => 3, 4)
    """

    from grove.core.grove_buf import GroveBuf

    return GroveBuf.from_literal(items)


_DONE = object()
_TOP = object()


def render_literal(items: Iterable[Any]) -> str:
    """Text form of ``items``; nesting depth is bounded only by memory."""

    parts: List[str] = []
    # each frame: remaining children, value of the enclosing root, first child pending
    frames: List[List[Any]] = [[iter(items), _TOP, True]]
    while frames:
        frame = frames[-1]
        item = next(frame[0], _DONE)
        if item is _DONE:
            frames.pop()
            if frame[1] is not _TOP:
                parts.append(f"] => {frame[1]!r}")
            continue
        if not frame[2]:
            parts.append(", ")
        frame[2] = False
        if isinstance(item, Branch):
            parts.append("[")
            frames.append([iter(item.children), item.root, True])
        else:
            parts.append(repr(item))
    return "".join(parts)


_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
  | (?P<arrow>=>)
  | (?P<punct>[\[\],])
  | (?P<string>"(?:[^"\\]|\\.)*")
  | (?P<number>-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?(?![\w.]))
  | (?P<word>[A-Za-z_][\w.\-]*)
    """,
    re.VERBOSE,
)

_KEYWORDS = {"true": True, "false": False, "null": None}


class _Token(NamedTuple):
    kind: str
    text: str
    offset: int


def _tokenize(text: str) -> List[_Token]:
    tokens: List[_Token] = []
    position = 0
    while position < len(text):
        match = _TOKEN_RE.match(text, position)
        if match is None:
            raise LiteralSyntaxError(f"Unexpected character {text[position]!r}", offset=position)
        kind = match.lastgroup or ""
        if kind != "space":
            tokens.append(_Token(kind, match.group(), position))
        position = match.end()
    tokens.append(_Token("end", "", len(text)))
    return tokens


class _Parser:
    def __init__(self, text: str) -> None:
        self._tokens = _tokenize(text)
        self._index = 0

    def _peek(self) -> _Token:
        return self._tokens[self._index]

    def _take(self, text: str) -> _Token:
        token = self._peek()
        if token.text != text:
            found = token.text or "end of input"
            raise LiteralSyntaxError(f"Expected {text!r}, found {found!r}", offset=token.offset)
        self._index += 1
        return token

    def _atom(self) -> Any:
        token = self._peek()
        self._index += 1
        if token.kind in {"string", "number"}:
            return json.loads(token.text)
        if token.kind == "word":
            return _KEYWORDS.get(token.text, token.text)
        found = token.text or "end of input"
        raise LiteralSyntaxError(f"Expected a value, found {found!r}", offset=token.offset)

    def parse(self) -> List[Any]:
        if self._peek().kind == "end":
            return []
        # item lists of the brackets still open, outermost first
        enclosing: List[List[Any]] = []
        items: List[Any] = []
        while True:
            if self._peek().text == "[":
                self._index += 1
                enclosing.append(items)
                items = []
                if self._peek().text != "]":
                    continue
            else:
                items.append(self._atom())
            while True:
                if self._peek().text == ",":
                    self._index += 1
                    break
                if not enclosing:
                    token = self._peek()
                    if token.kind != "end":
                        raise LiteralSyntaxError(f"Unexpected {token.text!r}", offset=token.offset)
                    return items
                self._take("]")
                self._take("=>")
                children, items = items, enclosing.pop()
                items.append(Branch(children, self._atom()))


def parse_literal(text: str) -> List[Any]:
    """Parse the bracket/arrow text form into leaves and :class:`Branch` items.

    >>> parse_literal("[1, 2] => 3, x")
    [Branch(children=[1, 2], root=3), 'x']
    """

    return _Parser(text).parse()


__all__ = ["Branch", "extend_from_literal", "grove_buf", "parse_literal", "render_literal"]
