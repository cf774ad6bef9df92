"""Typed block nodes for Ladrillos.

A parsed document is a flat sequence of top-level Block nodes. Each Block
owns its inner blocks and the literal HTML fragments around them:

    inner_content[0], inner_blocks[0], inner_content[1], ..., inner_content[-1]

so ``len(inner_content) == len(inner_blocks) + 1`` always holds. Rendering
splices each inner block's output into the gap it came from.

A Block whose name is None is a freeform node: literal HTML found outside
any delimiter. Its only fragment is the literal text.

Thread Safety:
Blocks are frozen dataclasses. The attrs dict is shared by reference and
must be treated as read-only.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Block:
    """A block node.

    Attributes:
        name: Fully-qualified block name ("core/paragraph"), or None for
            freeform literal content
        attrs: Decoded delimiter attributes
        inner_blocks: Nested blocks in document order
        inner_content: Literal fragments surrounding the nested blocks

    """

    name: str | None
    attrs: dict[str, Any] = field(default_factory=dict)
    inner_blocks: tuple[Block, ...] = ()
    inner_content: tuple[str, ...] = ("",)

    def __post_init__(self) -> None:
        if len(self.inner_content) != len(self.inner_blocks) + 1:
            msg = (
                f"Block {self.name!r} has {len(self.inner_blocks)} inner blocks but "
                f"{len(self.inner_content)} content fragments (expected "
                f"{len(self.inner_blocks) + 1})"
            )
            raise ValueError(msg)

    @classmethod
    def freeform(cls, text: str) -> Block:
        """Create a freeform node holding literal text."""
        return cls(name=None, inner_content=(text,))

    @property
    def is_freeform(self) -> bool:
        return self.name is None

    @property
    def inner_html(self) -> str:
        """Literal HTML of this block with nested blocks left out."""
        return "".join(self.inner_content)

    def iter_blocks(self) -> Iterator[Block]:
        """Yield this block and all descendants, depth-first in document order.

        Iterative, so arbitrarily deep trees (from unclosed delimiters) do not
        hit the interpreter recursion limit.
        """
        stack: list[Block] = [self]
        while stack:
            block = stack.pop()
            yield block
            stack.extend(reversed(block.inner_blocks))


def walk(blocks: Iterable[Block]) -> Iterator[Block]:
    """Yield every block of a forest depth-first, in document order."""
    for block in blocks:
        yield from block.iter_blocks()


def find_blocks(blocks: Iterable[Block], name: str) -> list[Block]:
    """Return every block named name, at any depth."""
    return [block for block in walk(blocks) if block.name == name]
