"""Block serialization.

Two directions:

- Back to document text: serialize_block() / serialize_blocks() write the
  delimiter comments again, so parse -> serialize is lossless for
  well-formed documents.
- To the JSON "parsed structure" (blockName, attrs, innerBlocks, innerHTML,
  innerContent) used by parser fixtures and API consumers.

Attribute JSON is escaped so it can never terminate the surrounding HTML
comment or be read as markup: "--", "<", ">", "&" and escaped quotes are
written as JSON unicode escapes.

Thread Safety:
    All functions are pure. Safe to call from any thread.

"""

import json
import re
from collections.abc import Iterable
from typing import Any

from ladrillos.lexer import DEFAULT_NAMESPACE
from ladrillos.nodes import Block


def _unicode_escape(char: str) -> str:
    return "\\u%04x" % ord(char)


# A quote preceded by an odd run of backslashes is an escaped quote
_ESCAPED_QUOTE = re.compile(r'(?<!\\)((?:\\\\)*)\\"')

_CHAR_ESCAPES: tuple[tuple[str, str], ...] = (
    ("--", _unicode_escape("-") * 2),
    ("<", _unicode_escape("<")),
    (">", _unicode_escape(">")),
    ("&", _unicode_escape("&")),
)


def serialize_block_attributes(attrs: dict[str, Any]) -> str:
    """Encode block attributes for a delimiter comment.

    Example:
        >>> serialize_block_attributes({"align": "wide", "level": 3})
        '{"align":"wide","level":3}'

    """
    encoded = json.dumps(attrs, ensure_ascii=False, separators=(",", ":"))
    encoded = _ESCAPED_QUOTE.sub(lambda m: m.group(1) + _unicode_escape('"'), encoded)
    for char, escaped in _CHAR_ESCAPES:
        encoded = encoded.replace(char, escaped)
    return encoded


def strip_core_namespace(name: str | None) -> str | None:
    """Drop the default "core/" prefix from a block name."""
    prefix = f"{DEFAULT_NAMESPACE}/"
    if name is not None and name.startswith(prefix):
        return name[len(prefix) :]
    return name


def _delimiters(name: str, attrs: dict[str, Any], is_void: bool) -> tuple[str, str]:
    """Opening and closing delimiter text for a named block."""
    serialized_name = strip_core_namespace(name)
    serialized_attrs = f"{serialize_block_attributes(attrs)} " if attrs else ""
    if is_void:
        return f"<!-- wp:{serialized_name} {serialized_attrs}/-->", ""
    return f"<!-- wp:{serialized_name} {serialized_attrs}-->", f"<!-- /wp:{serialized_name} -->"


def get_comment_delimited_block_content(
    name: str | None, attrs: dict[str, Any], content: str
) -> str:
    """Wrap content in the delimiter comments for a block.

    Empty content produces a void delimiter. A None name returns content
    unchanged (freeform).
    """
    if name is None:
        return content
    opener, closer = _delimiters(name, attrs, not content)
    return f"{opener}{content}{closer}"


def serialize_block(block: Block) -> str:
    """Serialize a block and its descendants back to document text."""
    return serialize_blocks((block,))


def serialize_blocks(blocks: Iterable[Block]) -> str:
    """Serialize a block forest back to document text.

    Works from an explicit stack of pending blocks and text pieces, so
    nesting depth is not limited by the interpreter recursion limit.
    """
    parts: list[str] = []
    pending: list[Block | str] = list(blocks)
    pending.reverse()
    while pending:
        item = pending.pop()
        if isinstance(item, str):
            parts.append(item)
            continue
        if item.name is not None:
            # A block's content is empty only without children and text
            is_void = not item.inner_blocks and not item.inner_content[0]
            opener, closer = _delimiters(item.name, item.attrs, is_void)
            parts.append(opener)
            pending.append(closer)
        for child, fragment in reversed(list(zip(item.inner_blocks, item.inner_content[1:]))):
            pending.append(fragment)
            pending.append(child)
        pending.append(item.inner_content[0])
    return "".join(parts)


# =============================================================================
# Parsed-structure dicts
# =============================================================================


def _shallow_dict(block: Block) -> dict[str, Any]:
    inner_content: list[str | None] = []
    for index, fragment in enumerate(block.inner_content):
        if index:
            inner_content.append(None)
        if fragment:
            inner_content.append(fragment)
    return {
        "blockName": block.name,
        "attrs": dict(block.attrs),
        "innerBlocks": [],
        "innerHTML": block.inner_html,
        "innerContent": inner_content,
    }


def to_dict(block: Block) -> dict[str, Any]:
    """Convert a block to its parsed-structure dict.

    innerContent lists the non-empty literal fragments with a None
    placeholder where each inner block goes.
    """
    root = _shallow_dict(block)
    stack = [(block, root)]
    while stack:
        current, data = stack.pop()
        for child in current.inner_blocks:
            child_data = _shallow_dict(child)
            data["innerBlocks"].append(child_data)
            stack.append((child, child_data))
    return root


def from_dict(data: dict[str, Any]) -> Block:
    """Rebuild a block from its parsed-structure dict.

    Raises:
        ValueError: If innerContent placeholders do not match innerBlocks
    """
    rebuilt: dict[int, Block] = {}
    stack: list[tuple[dict[str, Any], bool]] = [(data, False)]
    while stack:
        item, children_done = stack.pop()
        children = item.get("innerBlocks") or ()
        if children and not children_done:
            stack.append((item, True))
            stack.extend((child, False) for child in children)
            continue
        rebuilt[id(item)] = _block_from_dict(
            item, tuple(rebuilt[id(child)] for child in children)
        )
    return rebuilt[id(data)]


def _block_from_dict(data: dict[str, Any], inner_blocks: tuple[Block, ...]) -> Block:
    raw_content = data.get("innerContent")
    if raw_content is None:
        if inner_blocks:
            msg = f"Block {data.get('blockName')!r} has innerBlocks but no innerContent"
            raise ValueError(msg)
        fragments = [data.get("innerHTML", "")]
    else:
        fragments = [""]
        for item in raw_content:
            if item is None:
                fragments.append("")
            else:
                fragments[-1] += item
    return Block(
        name=data.get("blockName"),
        attrs=dict(data.get("attrs") or {}),
        inner_blocks=inner_blocks,
        inner_content=tuple(fragments),
    )


def to_json(blocks: Iterable[Block], *, indent: int | None = None) -> str:
    """Serialize a block forest to parsed-structure JSON (sorted keys)."""
    return json.dumps([to_dict(block) for block in blocks], sort_keys=True, indent=indent)


def from_json(text: str) -> list[Block]:
    """Rebuild a block forest from parsed-structure JSON."""
    return [from_dict(item) for item in json.loads(text)]


__all__ = [
    "from_dict",
    "from_json",
    "get_comment_delimited_block_content",
    "serialize_block",
    "serialize_block_attributes",
    "serialize_blocks",
    "strip_core_namespace",
    "to_dict",
    "to_json",
]
