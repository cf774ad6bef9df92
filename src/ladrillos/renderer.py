"""Block renderer.

Walks a block forest and produces the final HTML:

- freeform nodes render as their literal text;
- inner blocks render first and are spliced into the gaps of their
  parent's inner_content;
- static block types output that assembled inner content;
- dynamic block types hand it to their render callback, whose output
  replaces it;
- unregistered block types render as "" (or as their inner content under
  RenderConfig(unknown_blocks="passthrough")).

Every render callback runs inside preserve_current_post(), so whatever a
callback does to the current post slot is undone before the next sibling
renders. Siblings render strictly in document order.

Thread Safety:
Renderer state is read-only after construction. Multiple threads can share
an instance as long as the registry is not mutated concurrently.

"""

from __future__ import annotations

from collections.abc import Iterable

from ladrillos.config import RenderConfig, get_render_config
from ladrillos.context import BlockInstance, RenderContext, preserve_current_post
from ladrillos.nodes import Block
from ladrillos.registry import BlockTypeRegistry
from ladrillos.utils.logger import get_logger

logger = get_logger(__name__)


class BlockRenderer:
    """Render blocks against a block type registry.

    Usage:
        >>> renderer = BlockRenderer()
        >>> renderer.render_blocks(parse_blocks("<!-- wp:paragraph --><p>Hi</p><!-- /wp:paragraph -->"))
        '<p>Hi</p>'

    """

    __slots__ = ("_registry", "_context", "_config")

    def __init__(
        self,
        registry: BlockTypeRegistry | None = None,
        *,
        context: RenderContext | None = None,
        config: RenderConfig | None = None,
    ) -> None:
        """Initialize renderer.

        Args:
            registry: Block types to resolve against (process-wide by default)
            context: Context handed to render callbacks (seeded from the
                current post slot by default)
            config: Render configuration (the active ContextVar config by default)
        """
        self._registry = registry if registry is not None else BlockTypeRegistry.get_instance()
        self._context = context if context is not None else RenderContext.from_ambient()
        self._config = config if config is not None else get_render_config()

    @property
    def registry(self) -> BlockTypeRegistry:
        return self._registry

    @property
    def context(self) -> RenderContext:
        return self._context

    def render(self, block: Block) -> str:
        """Render a single block and its descendants."""
        return self._render(block, 0)

    def render_blocks(self, blocks: Iterable[Block]) -> str:
        """Render blocks in order and concatenate the results."""
        return "".join([self._render(block, 0) for block in blocks])

    def render_inner(self, block: Block) -> str:
        """Render a block's inner blocks into its inner content.

        The block's own type is not consulted.
        """
        return self._render_inner(block, 0)

    def _render(self, block: Block, depth: int) -> str:
        if block.name is None:
            return block.inner_html

        if depth >= self._config.max_depth:
            logger.warning(
                "Block %s is nested deeper than %d levels; not rendered",
                block.name,
                self._config.max_depth,
            )
            return ""

        content = self._render_inner(block, depth)

        block_type = self._registry.get_registered(block.name)
        if block_type is None:
            logger.debug("Unregistered block type %s", block.name)
            if self._config.unknown_blocks == "passthrough":
                return content
            return ""

        if not block_type.is_dynamic():
            return content

        instance = BlockInstance(block=block, block_type=block_type, context=self._context)
        with preserve_current_post():
            return block_type.render(block.attrs, content, instance)

    def _render_inner(self, block: Block, depth: int) -> str:
        if not block.inner_blocks:
            return block.inner_content[0]
        parts = [block.inner_content[0]]
        for child, fragment in zip(block.inner_blocks, block.inner_content[1:]):
            parts.append(self._render(child, depth + 1))
            parts.append(fragment)
        return "".join(parts)
