"""
Ladrillos — comment-delimited content blocks for Python

Parses HTML documents annotated with block delimiter comments into a typed
block tree and renders them against a registry of static and dynamic block
types. Zero runtime dependencies.

Quick Start:
    >>> from ladrillos import do_blocks
    >>> do_blocks("<!-- wp:paragraph --><p>Hello</p><!-- /wp:paragraph -->")
    '<p>Hello</p>'

Dynamic Blocks:
    >>> from ladrillos import register_block_type
    >>>
    >>> def render_year(attributes, content, block):
    ...     return 2026
    >>> register_block_type("my-plugin/year", render_callback=render_year)
    >>> do_blocks("&copy; <!-- wp:my-plugin/year /-->")
    '&copy; 2026'

Isolated Registries:
    >>> from ladrillos import Blocks, create_registry_with_defaults
    >>> registry = create_registry_with_defaults()
    >>> registry.register("my-plugin/notice", render_callback=render_notice)
    >>> blocks = Blocks(registry=registry)
    >>> html = blocks(post_content)

"""

from collections.abc import Iterable

from ladrillos.block_type import BlockType, coerce_output
from ladrillos.config import (
    RenderConfig,
    get_render_config,
    render_config_context,
    reset_render_config,
    set_render_config,
)
from ladrillos.context import (
    BlockInstance,
    RenderContext,
    current_post_context,
    get_current_post,
    preserve_current_post,
    set_current_post,
)
from ladrillos.errors import (
    BlockTypeNotFoundError,
    DuplicateBlockTypeError,
    FixtureMissingError,
    InvalidBlockNameError,
    LadrillosError,
    RegistryError,
    RenderError,
)
from ladrillos.excerpt import excerpt_remove_blocks, strip_dynamic_blocks
from ladrillos.legacy import classic_to_blocks, render_content
from ladrillos.lexer import Lexer
from ladrillos.location import SourceLocation
from ladrillos.nodes import Block, find_blocks, walk
from ladrillos.parser import BlockParser, IssueKind, ParseIssue, has_block, has_blocks, parse_blocks
from ladrillos.registry import (
    BlockTypeRegistry,
    create_registry_with_defaults,
    get_dynamic_block_names,
    register_block_type,
    unregister_block_type,
)
from ladrillos.renderer import BlockRenderer
from ladrillos.serialization import (
    from_dict,
    from_json,
    get_comment_delimited_block_content,
    serialize_block,
    serialize_block_attributes,
    serialize_blocks,
    strip_core_namespace,
    to_dict,
    to_json,
)
from ladrillos.shortcodes import ShortcodeRegistry, do_shortcodes, parse_shortcode_attrs
from ladrillos.tokens import Token, TokenType

__version__ = "0.1.0"


def render_block(
    block: Block,
    *,
    registry: BlockTypeRegistry | None = None,
    context: RenderContext | None = None,
) -> str:
    """Render a single parsed block.

    Args:
        block: Block to render (with its descendants)
        registry: Block types to resolve against (process-wide by default)
        context: Context handed to render callbacks

    Returns:
        Rendered HTML
    """
    return BlockRenderer(registry, context=context).render(block)


def do_blocks(
    content: str,
    *,
    registry: BlockTypeRegistry | None = None,
    context: RenderContext | None = None,
) -> str:
    """Parse and render a block document in one call.

    Malformed delimiters and attributes never raise: the parser recovers
    and unknown block types render as nothing. Exceptions raised by render
    callbacks propagate; the current post slot is restored first.

    Args:
        content: Document text
        registry: Block types to resolve against (process-wide by default)
        context: Context handed to render callbacks (seeded from the
            current post slot by default)

    Returns:
        Rendered HTML

    Example:
        >>> do_blocks("before<!-- wp:unknown/thing -->gone<!-- /wp:unknown/thing -->after")
        'beforeafter'
    """
    return BlockRenderer(registry, context=context).render_blocks(parse_blocks(content))


render_document = do_blocks


class Blocks:
    """High-level block processor combining parser, registry and renderer.

    Usage:
        >>> blocks = Blocks(config=RenderConfig(unknown_blocks="passthrough"))
        >>> blocks("<!-- wp:x/y --><b>kept</b><!-- /wp:x/y -->")
        '<b>kept</b>'

        >>> # Access the block tree
        >>> tree = blocks.parse("<!-- wp:separator /-->")
        >>> tree[0].name
        'core/separator'

    Thread Safety:
        Sets config via ContextVar (thread-local) for the duration of each
        call. Safe to use from several threads as long as the registry is
        not mutated concurrently.

    """

    __slots__ = ("_registry", "_config", "_shortcodes")

    def __init__(
        self,
        *,
        registry: BlockTypeRegistry | None = None,
        config: RenderConfig | None = None,
        shortcodes: ShortcodeRegistry | None = None,
    ) -> None:
        """Initialize block processor.

        Args:
            registry: Block types (process-wide registry if None)
            config: Render configuration (defaults if None)
            shortcodes: Shortcode handlers for core/shortcode blocks
        """
        self._registry = registry
        self._config = config or RenderConfig()
        self._shortcodes = shortcodes

    @property
    def registry(self) -> BlockTypeRegistry:
        if self._registry is None:
            return BlockTypeRegistry.get_instance()
        return self._registry

    def __call__(self, content: str) -> str:
        """Parse and render a document."""
        return self.render(self.parse(content))

    def parse(self, content: str) -> list[Block]:
        """Parse a document into top-level blocks."""
        return parse_blocks(content)

    def render(self, blocks: Iterable[Block]) -> str:
        """Render parsed blocks with this processor's registry and config."""
        with render_config_context(self._config):
            context = RenderContext.from_ambient(shortcodes=self._shortcodes)
            renderer = BlockRenderer(self._registry, context=context)
            return renderer.render_blocks(blocks)


__all__ = [  # noqa: RUF022 — grouped by category for maintainability
    # Version
    "__version__",
    # Core API
    "parse_blocks",
    "render_block",
    "do_blocks",
    "render_document",
    "has_blocks",
    "has_block",
    "Blocks",
    # Tokens and lexer
    "Lexer",
    "Token",
    "TokenType",
    # Tree
    "Block",
    "BlockParser",
    "IssueKind",
    "ParseIssue",
    "SourceLocation",
    "find_blocks",
    "walk",
    # Block types and registry
    "BlockType",
    "BlockTypeRegistry",
    "coerce_output",
    "create_registry_with_defaults",
    "get_dynamic_block_names",
    "register_block_type",
    "unregister_block_type",
    # Rendering
    "BlockInstance",
    "BlockRenderer",
    "RenderContext",
    "current_post_context",
    "get_current_post",
    "preserve_current_post",
    "set_current_post",
    # Configuration (ContextVar-based)
    "RenderConfig",
    "get_render_config",
    "set_render_config",
    "reset_render_config",
    "render_config_context",
    # Serialization
    "serialize_block",
    "serialize_blocks",
    "serialize_block_attributes",
    "get_comment_delimited_block_content",
    "strip_core_namespace",
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Excerpts
    "excerpt_remove_blocks",
    "strip_dynamic_blocks",
    # Legacy content
    "ShortcodeRegistry",
    "classic_to_blocks",
    "do_shortcodes",
    "parse_shortcode_attrs",
    "render_content",
    # Errors
    "LadrillosError",
    "RegistryError",
    "DuplicateBlockTypeError",
    "BlockTypeNotFoundError",
    "InvalidBlockNameError",
    "RenderError",
    "FixtureMissingError",
]
