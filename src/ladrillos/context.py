"""Ambient render state: the current post and per-render context.

Render callbacks get their context explicitly through the BlockInstance
passed as their third argument. Legacy callbacks that read the process-wide
"current post" slot instead are supported by a ContextVar: the renderer
snapshots it before each callback and restores it afterwards, so a callback
that points the slot at another post (for example while looping over a
query) cannot leak that change to the blocks rendered after it.

Thread Safety:
The current post slot is a ContextVar, so each thread and each asyncio task
sees its own value. RenderContext and BlockInstance are frozen.

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ladrillos.block_type import BlockType
    from ladrillos.nodes import Block
    from ladrillos.shortcodes import ShortcodeRegistry


_current_post: ContextVar[Any] = ContextVar("current_post", default=None)


def get_current_post() -> Any:
    """Return the post the ambient slot currently points at (or None)."""
    return _current_post.get()


def set_current_post(post: Any) -> None:
    """Point the ambient slot at post."""
    _current_post.set(post)


@contextmanager
def preserve_current_post() -> Iterator[Any]:
    """Restore the current post slot on exit.

    Yields:
        The post that was current on entry.

    Example:
        >>> set_current_post("a")
        >>> with preserve_current_post():
        ...     set_current_post("b")
        >>> get_current_post()
        'a'

    """
    snapshot = _current_post.get()
    try:
        yield snapshot
    finally:
        _current_post.set(snapshot)


@contextmanager
def current_post_context(post: Any) -> Iterator[None]:
    """Point the slot at post for the duration of the block."""
    with preserve_current_post():
        _current_post.set(post)
        yield


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Context threaded through one document render.

    Attributes:
        post: The post being rendered, if any
        shortcodes: Shortcode handlers available to the core/shortcode block

    """

    post: Any = None
    shortcodes: ShortcodeRegistry | None = None

    @classmethod
    def from_ambient(cls, **overrides: Any) -> RenderContext:
        """Build a context seeded from the current post slot."""
        overrides.setdefault("post", get_current_post())
        return cls(**overrides)


@dataclass(frozen=True, slots=True)
class BlockInstance:
    """Handle passed to render callbacks for the block being rendered."""

    block: Block
    block_type: BlockType
    context: RenderContext

    @property
    def name(self) -> str:
        return self.block_type.name

    @property
    def attrs(self) -> dict[str, Any]:
        """Attributes as written in the document, before preparation."""
        return self.block.attrs

    @property
    def inner_blocks(self) -> tuple[Block, ...]:
        return self.block.inner_blocks
