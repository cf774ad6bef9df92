"""Block-aware content trimming.

Helpers for producing excerpts and feeds from block documents:

- excerpt_remove_blocks() keeps only blocks that read well out of context
  (paragraphs, headings, lists, ...), rendered, and drops everything else.
- strip_dynamic_blocks() removes dynamic blocks from a document while
  keeping it in serialized block form, for contexts where callbacks must
  not run.

Example:
    >>> excerpt_remove_blocks(
    ...     "<!-- wp:paragraph --><p>Keep</p><!-- /wp:paragraph -->"
    ...     "<!-- wp:image --><img src=x><!-- /wp:image -->"
    ... )
    '<p>Keep</p>'
"""

from __future__ import annotations

from collections.abc import Iterable

from ladrillos.nodes import Block
from ladrillos.parser import has_blocks, parse_blocks
from ladrillos.registry import BlockTypeRegistry, get_dynamic_block_names
from ladrillos.renderer import BlockRenderer
from ladrillos.serialization import serialize_blocks

EXCERPT_ALLOWED_BLOCKS: frozenset[str] = frozenset(
    {
        "core/freeform",
        "core/heading",
        "core/html",
        "core/list",
        "core/media-text",
        "core/paragraph",
        "core/preformatted",
        "core/pullquote",
        "core/quote",
        "core/table",
        "core/verse",
    }
)

# Wrappers whose allowed inner blocks are kept even though they are not
_EXCERPT_WRAPPERS: frozenset[str] = frozenset({"core/columns", "core/column", "core/group"})


def excerpt_remove_blocks(
    content: str,
    allowed: Iterable[str] | None = None,
    *,
    registry: BlockTypeRegistry | None = None,
) -> str:
    """Render only the blocks suitable for an excerpt.

    Args:
        content: Document text; text without blocks is returned unchanged
        allowed: Block names to keep (EXCERPT_ALLOWED_BLOCKS by default)
        registry: Registry used to render kept blocks

    Returns:
        Rendered HTML of the kept blocks. Freeform text is always kept.
    """
    if not has_blocks(content):
        return content

    allowed_names = EXCERPT_ALLOWED_BLOCKS if allowed is None else frozenset(allowed)
    renderer = BlockRenderer(registry)
    parts: list[str] = []
    pending = parse_blocks(content)
    pending.reverse()
    while pending:
        block = pending.pop()
        if block.name is None or block.name in allowed_names:
            parts.append(renderer.render(block))
        elif block.name in _EXCERPT_WRAPPERS:
            pending.extend(reversed(block.inner_blocks))
    return "".join(parts)


def strip_dynamic_blocks(content: str, registry: BlockTypeRegistry | None = None) -> str:
    """Remove every dynamic block, at any depth, keeping block markup.

    Args:
        content: Document text
        registry: Registry deciding which block types are dynamic

    Returns:
        Serialized document without dynamic blocks
    """
    dynamic = frozenset(get_dynamic_block_names(registry))
    if not dynamic or not has_blocks(content):
        return content
    kept = [
        _without_dynamic(block, dynamic)
        for block in parse_blocks(content)
        if block.name not in dynamic
    ]
    return serialize_blocks(kept)


def _without_dynamic(root: Block, dynamic: frozenset[str]) -> Block:
    # Post-order over an explicit stack: children are rebuilt before parents
    rebuilt: dict[int, Block] = {}
    stack: list[tuple[Block, bool]] = [(root, False)]
    while stack:
        block, children_done = stack.pop()
        if not block.inner_blocks:
            rebuilt[id(block)] = block
            continue
        if not children_done:
            stack.append((block, True))
            stack.extend((child, False) for child in block.inner_blocks if child.name not in dynamic)
            continue

        inner_blocks: list[Block] = []
        fragments = [block.inner_content[0]]
        for child, fragment in zip(block.inner_blocks, block.inner_content[1:]):
            if child.name in dynamic:
                # Join the fragments on either side of the removed block
                fragments[-1] += fragment
                continue
            inner_blocks.append(rebuilt[id(child)])
            fragments.append(fragment)
        rebuilt[id(block)] = Block(
            name=block.name,
            attrs=block.attrs,
            inner_blocks=tuple(inner_blocks),
            inner_content=tuple(fragments),
        )
    return rebuilt[id(root)]
