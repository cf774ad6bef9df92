"""Core block types.

Static core blocks store their final markup in the document, so rendering
them is just stripping the delimiters. core/shortcode is the one dynamic
core block: its content is legacy shortcode text expanded at render time.
"""

from __future__ import annotations

import copy
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from ladrillos.block_type import BlockType
from ladrillos.shortcodes import do_shortcodes

if TYPE_CHECKING:
    from ladrillos.context import BlockInstance
    from ladrillos.registry import BlockTypeRegistry


def render_shortcode_block(
    attributes: dict[str, Any], content: str, block: BlockInstance | None
) -> str:
    """Expand shortcodes in a core/shortcode block.

    Without shortcode handlers in the render context the raw text is
    returned unchanged.
    """
    if block is None:
        return content
    return do_shortcodes(content, block.context.shortcodes)


_ALIGN = {"type": "string", "enum": ["left", "center", "right", "wide", "full"]}

CORE_BLOCK_TYPES: tuple[BlockType, ...] = (
    BlockType(
        "core/paragraph",
        title="Paragraph",
        category="common",
        attributes={
            "align": {"type": "string"},
            "dropCap": {"type": "boolean", "default": False},
        },
    ),
    BlockType(
        "core/heading",
        title="Heading",
        category="common",
        attributes={"level": {"type": "integer", "default": 2}, "align": {"type": "string"}},
    ),
    BlockType(
        "core/list",
        title="List",
        category="common",
        attributes={"ordered": {"type": "boolean", "default": False}},
    ),
    BlockType("core/quote", title="Quote", category="common"),
    BlockType(
        "core/image",
        title="Image",
        category="common",
        attributes={"id": {"type": "integer"}, "align": _ALIGN},
    ),
    BlockType("core/freeform", title="Classic", category="formatting"),
    BlockType("core/html", title="Custom HTML", category="formatting"),
    BlockType("core/code", title="Code", category="formatting"),
    BlockType("core/preformatted", title="Preformatted", category="formatting"),
    BlockType("core/pullquote", title="Pullquote", category="formatting"),
    BlockType("core/verse", title="Verse", category="formatting"),
    BlockType("core/separator", title="Separator", category="layout"),
    BlockType(
        "core/spacer",
        title="Spacer",
        category="layout",
        attributes={"height": {"type": "integer", "default": 100}},
    ),
    BlockType("core/group", title="Group", category="layout"),
    BlockType(
        "core/columns",
        title="Columns",
        category="layout",
        attributes={"columns": {"type": "number", "default": 2}},
    ),
    BlockType("core/column", title="Column", category="layout", parent=("core/columns",)),
    BlockType("core/button", title="Button", category="layout"),
    BlockType(
        "core/shortcode",
        title="Shortcode",
        category="widgets",
        render_callback=render_shortcode_block,
    ),
)


def register_core_block_types(registry: BlockTypeRegistry) -> None:
    """Register every core block type on registry.

    Each registry gets its own copies, schema dicts included, so changes
    made through one registry never show up in another.
    """
    for block_type in CORE_BLOCK_TYPES:
        registry.register(
            replace(
                block_type,
                attributes=copy.deepcopy(block_type.attributes),
                supports=copy.deepcopy(block_type.supports),
            )
        )
