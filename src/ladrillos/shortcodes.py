"""Minimal shortcode expansion for legacy content.

Classic posts embed macros such as ``[gallery ids="1,2"]`` or
``[caption]...[/caption]``. Ladrillos only needs enough of that system to
render the core/shortcode block and to convert classic content to blocks:
a registry of handlers and an expander.

Handlers are called as ``handler(attrs, content, tag)``; content is None for
self-closing or unclosed tags. Unknown tags are left verbatim, and a doubled
bracket (``[[tag]]``) escapes a tag to its literal text.

Example:
    >>> shortcodes = ShortcodeRegistry()
    >>> shortcodes.add("upper", lambda attrs, content, tag: (content or "").upper())
    >>> do_shortcodes("a [upper]b[/upper] c", shortcodes)
    'a B c'
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import Any

from ladrillos.utils.logger import get_logger

logger = get_logger(__name__)

ShortcodeHandler = Callable[[dict[str, str], "str | None", str], Any]

TAG_NAME_PATTERN = re.compile(r"^[^<>&/\[\]\x00-\x20=]+$")

_ATTR_PATTERN = re.compile(
    r"""([\w-]+)\s*=\s*"([^"]*)"(?:\s|$)"""
    r"""|([\w-]+)\s*=\s*'([^']*)'(?:\s|$)"""
    r"""|([\w-]+)\s*=\s*([^\s'"]+)(?:\s|$)"""
    r"""|"([^"]*)"(?:\s|$)"""
    r"""|'([^']*)'(?:\s|$)"""
    r"""|(\S+)(?:\s|$)"""
)


class ShortcodeRegistry:
    """Mutable mapping of shortcode tags to handlers."""

    __slots__ = ("_handlers", "_pattern")

    def __init__(self) -> None:
        self._handlers: dict[str, ShortcodeHandler] = {}
        self._pattern: re.Pattern[str] | None = None

    def add(self, tag: str, handler: ShortcodeHandler) -> None:
        """Register handler for tag, replacing any previous handler.

        Raises:
            ValueError: If tag contains whitespace, brackets, slashes or
                other characters that cannot appear in a tag name
        """
        if not TAG_NAME_PATTERN.match(tag):
            msg = f"Invalid shortcode name: {tag!r}"
            raise ValueError(msg)
        self._handlers[tag] = handler
        self._pattern = None

    def remove(self, tag: str) -> None:
        """Remove tag if present."""
        if self._handlers.pop(tag, None) is not None:
            self._pattern = None

    def has(self, tag: str) -> bool:
        return tag in self._handlers

    def get(self, tag: str) -> ShortcodeHandler | None:
        return self._handlers.get(tag)

    @property
    def tags(self) -> frozenset[str]:
        return frozenset(self._handlers)

    @property
    def pattern(self) -> re.Pattern[str] | None:
        """Compiled matcher for the registered tags (None when empty)."""
        if self._pattern is None and self._handlers:
            self._pattern = get_shortcode_regex(self._handlers)
        return self._pattern

    def __contains__(self, tag: object) -> bool:
        return tag in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


def get_shortcode_regex(tags: Iterable[str]) -> re.Pattern[str]:
    """Build the matcher for the given tags.

    Groups: 1 escape "[", 2 tag, 3 attribute text, 4 self-closing "/",
    5 enclosed content, 6 escape "]".
    """
    alternatives = "|".join(re.escape(tag) for tag in sorted(tags, key=len, reverse=True))
    return re.compile(
        r"\[(\[?)"
        rf"({alternatives})"
        r"(?![\w-])"
        r"([^\]/]*(?:/(?!\])[^\]/]*)*?)"
        r"(?:(/)\]|\](?:([^\[]*(?:\[(?!/\2\])[^\[]*)*)\[/\2\])?)"
        r"(\]?)"
    )


def parse_shortcode_attrs(text: str) -> dict[str, str]:
    """Parse shortcode attribute text.

    Named attributes map to their values (names lower-cased); positional
    values are keyed "0", "1", ... in order.

    Example:
        >>> parse_shortcode_attrs('id="4" Size=large "quoted" bare')
        {'id': '4', 'size': 'large', '0': 'quoted', '1': 'bare'}

    """
    attrs: dict[str, str] = {}
    position = 0
    for match in _ATTR_PATTERN.finditer(text.strip()):
        groups = match.groups()
        for name_idx in (0, 2, 4):
            if groups[name_idx] is not None:
                attrs[groups[name_idx].lower()] = groups[name_idx + 1]
                break
        else:
            value = next(g for g in groups[6:] if g is not None)
            attrs[str(position)] = value
            position += 1
    return attrs


def do_shortcodes(text: str, registry: ShortcodeRegistry | None) -> str:
    """Expand registered shortcodes in text.

    Args:
        text: Content that may contain shortcodes
        registry: Handlers to use; None or empty leaves text unchanged

    Returns:
        Text with every registered shortcode replaced by its handler output
    """
    if registry is None or "[" not in text:
        return text
    pattern = registry.pattern
    if pattern is None:
        return text

    def replace(match: re.Match[str]) -> str:
        if match.group(1) == "[" and match.group(6) == "]":
            return match.group(0)[1:-1]
        tag = match.group(2)
        handler = registry.get(tag)
        if handler is None:
            return match.group(0)
        attrs = parse_shortcode_attrs(match.group(3))
        output = handler(attrs, match.group(5), tag)
        logger.debug("Expanded shortcode [%s]", tag)
        return match.group(1) + ("" if output is None else str(output)) + match.group(6)

    return pattern.sub(replace, text)
