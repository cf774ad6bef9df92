"""Bridge from classic (pre-block) content to block documents.

Classic posts are plain HTML with blank-line paragraph breaks and embedded
shortcodes. classic_to_blocks() rewrites such content as a block document
so it goes through the same renderer as native block content:

- every shortcode standing on its own line(s) becomes a core/shortcode block holding the raw
  shortcode text (expanded at render time);
- every other blank-line separated chunk becomes a core/paragraph block.

Example:
    >>> print(classic_to_blocks("Hello\\n\\n[gallery]"))
    <!-- wp:core/paragraph -->
    <p>Hello</p>
    <!-- /wp:core/paragraph -->
    <BLANKLINE>
    <!-- wp:core/shortcode -->[gallery]<!-- /wp:core/shortcode -->
"""

from __future__ import annotations

import re

from ladrillos.context import RenderContext
from ladrillos.parser import has_blocks, parse_blocks
from ladrillos.registry import BlockTypeRegistry
from ladrillos.renderer import BlockRenderer
from ladrillos.shortcodes import ShortcodeRegistry

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

# Any [tag ...] with an optional matching [/tag]; used when no registry is given
_ANY_SHORTCODE = re.compile(r"\[([A-Za-z][\w-]*)(?![\w-])[^\]]*\](?:.*?\[/\1\])?", re.DOTALL)


def _paragraph_block(text: str) -> str:
    body = "<br />\n".join(line.strip() for line in text.strip().split("\n"))
    return f"<!-- wp:core/paragraph -->\n<p>{body}</p>\n<!-- /wp:core/paragraph -->"


def _shortcode_block(text: str) -> str:
    return f"<!-- wp:core/shortcode -->{text}<!-- /wp:core/shortcode -->"


def classic_to_blocks(content: str, shortcodes: ShortcodeRegistry | None = None) -> str:
    """Convert classic content to a block document.

    Args:
        content: Classic HTML with blank-line paragraphs
        shortcodes: When given, only its tags are treated as shortcodes;
            otherwise any bracketed tag is

    Returns:
        Block document, one block per paragraph or shortcode, separated by
        blank lines
    """
    if shortcodes is not None:
        pattern = shortcodes.pattern
    else:
        pattern = _ANY_SHORTCODE

    blocks: list[str] = []
    pos = 0
    if pattern is not None:
        for match in pattern.finditer(content):
            if not _is_standalone(content, match.start(), match.end()):
                continue
            if match.group(0).startswith("[[") and match.group(0).endswith("]]"):
                continue
            blocks.extend(_paragraphs(content[pos : match.start()]))
            blocks.append(_shortcode_block(match.group(0)))
            pos = match.end()
    blocks.extend(_paragraphs(content[pos:]))
    return "\n\n".join(blocks)


def _is_standalone(content: str, start: int, end: int) -> bool:
    head = content[:start].rstrip(" \t")
    tail = content[end:].lstrip(" \t")
    return (not head or head.endswith("\n")) and (not tail or tail.startswith("\n"))


def _paragraphs(text: str) -> list[str]:
    return [_paragraph_block(chunk) for chunk in _PARAGRAPH_BREAK.split(text) if chunk.strip()]


def render_content(
    content: str,
    *,
    shortcodes: ShortcodeRegistry | None = None,
    registry: BlockTypeRegistry | None = None,
) -> str:
    """Render post content, classic or block.

    Classic content is converted with classic_to_blocks() first, so both
    kinds go through the block renderer.
    """
    if not has_blocks(content):
        content = classic_to_blocks(content, shortcodes)
    context = RenderContext.from_ambient(shortcodes=shortcodes)
    renderer = BlockRenderer(registry, context=context)
    return renderer.render_blocks(parse_blocks(content))


__all__ = ["classic_to_blocks", "render_content"]
