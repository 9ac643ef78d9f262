from __future__ import annotations

from enum import Enum

import typer

from grove import GroveBuf, LiteralSyntaxError, parse_literal, resolve_order
from grove.logging import get_logger

LOGGER = get_logger("cli")

_HELP = """Inspect forests written in the bracket/arrow literal form.

Example literal: '[[1, 2] => 3, 4] => 5, 6'"""

app = typer.Typer(
    add_completion=False,
    pretty_exceptions_enable=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    help=_HELP,
)


class OrderChoice(str, Enum):
    preorder = "preorder"
    reverse_postorder = "reverse-postorder"


def _load(literal: str) -> GroveBuf:
    try:
        items = parse_literal(literal)
    except LiteralSyntaxError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    store = GroveBuf.from_literal(items)
    LOGGER.debug("Parsed literal into %d nodes.", len(store))
    return store


@app.command("show")
def show(
    literal: str = typer.Argument(..., help="Forest literal."),
    order: OrderChoice = typer.Option(OrderChoice.preorder, "--order", "-o", help="Traversal order."),
) -> None:
    """Print one line per node: position, value and width."""

    store = _load(literal)
    traversal = resolve_order(order.value)
    positions = traversal.positions(0, len(store))
    for position, tree in zip(positions, store.trees(traversal)):
        typer.echo(f"{position}\t{tree.root()!r}\t{tree.width}")


@app.command("children")
def children(
    literal: str = typer.Argument(..., help="Forest literal."),
    position: int = typer.Argument(..., help="Position of the subtree root."),
) -> None:
    """Print the direct children of a node, right to left."""

    store = _load(literal)
    if not 0 <= position < len(store):
        typer.echo(f"error: position {position} out of range for {len(store)} nodes", err=True)
        raise typer.Exit(code=2)
    for child in store[position].children_rev():
        typer.echo(f"{child.root()!r}\t{len(child)}")


@app.command("validate")
def validate(literal: str = typer.Argument(..., help="Forest literal.")) -> None:
    """Check the width invariant and report node and tree counts."""

    store = _load(literal)
    store.validate()
    typer.echo(f"ok: {len(store)} nodes, {len(store.roots())} trees")


def main() -> None:
    app()


__all__ = ["app", "main"]
