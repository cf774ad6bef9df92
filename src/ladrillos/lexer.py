"""Single-pass lexer for comment-delimited block documents.

Scans a document for block delimiters of the form::

    <!-- wp:namespace/name {"json":"attrs"} -->   opener
    <!-- /wp:namespace/name -->                   closer
    <!-- wp:namespace/name {"json":"attrs"} /-->  void block

Everything else, including ordinary HTML comments, is literal text.

The scanner uses str.find windowing: locate the next "<!--", try to match a
delimiter at that position, and either emit it or keep scanning. Position
only moves forward. No regex in the hot path.

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

from ladrillos.tokens import Token, TokenType
from ladrillos.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_NAMESPACE = "core"

_COMMENT_OPEN = "<!--"
_COMMENT_CLOSE = "-->"
_PREFIX = "wp:"
_NAME_START = frozenset("abcdefghijklmnopqrstuvwxyz")
_NAME_CHARS = frozenset("abcdefghijklmnopqrstuvwxyz0123456789_-")
_WHITESPACE = frozenset(" \t\n\r\f\v")


def decode_attrs(raw: str) -> tuple[dict[str, Any], bool]:
    """Decode a delimiter's attribute JSON.

    Args:
        raw: JSON text starting with "{"

    Returns:
        (attrs, failed). Malformed or too deeply nested JSON, or JSON that
        is not an object, yields ({}, True).
    """
    try:
        value = json.loads(raw)
    except (ValueError, RecursionError):
        # RecursionError: nesting deeper than the decoder can handle
        return {}, True
    if not isinstance(value, dict):
        return {}, True
    return value, False


class Lexer:
    """Delimiter scanner, linear in the length of the input.

    Usage:
            >>> lexer = Lexer('<p>a</p><!-- wp:separator /-->')
            >>> list(lexer.tokenize())
        [Token(TEXT, '<p>a</p>', 0), Token(VOID_BLOCK, 'core/separator', 8), Token(EOF, '', 30)]

    Thread Safety:
        Lexer instances are single-use. Create one per source string.

    """

    __slots__ = ("_source", "_source_len", "_attrs_search_from", "_attrs_end")

    def __init__(self, source: str) -> None:
        """Initialize lexer with source text.

        Args:
            source: Document text
        """
        self._source = source
        self._source_len = len(source)
        # Memo for _find_attrs_end: last search start and its result
        self._attrs_search_from = -1
        self._attrs_end = -1

    def tokenize(self) -> Iterator[Token]:
        """Tokenize source into a token stream.

        Yields:
            TEXT and delimiter tokens in document order, then one EOF token.
            Adjacent literal text is always merged into a single TEXT token.
        """
        source = self._source
        pos = 0
        text_start = 0
        while True:
            idx = source.find(_COMMENT_OPEN, pos)
            if idx == -1:
                break
            token = self._match_delimiter(idx)
            if token is None:
                pos = idx + len(_COMMENT_OPEN)
                continue
            if idx > text_start:
                yield Token(TokenType.TEXT, source[text_start:idx], text_start, idx)
            yield token
            pos = text_start = token.end

        if text_start < self._source_len:
            yield Token(
                TokenType.TEXT, source[text_start:], text_start, self._source_len
            )
        yield Token(TokenType.EOF, "", self._source_len, self._source_len)

    # =========================================================================
    # Delimiter matching
    # =========================================================================

    def _match_delimiter(self, start: int) -> Token | None:
        """Try to match a block delimiter at start (which holds "<!--").

        Returns:
            The delimiter token, or None when the comment is not a delimiter.
        """
        source = self._source
        pos = self._skip_whitespace(start + len(_COMMENT_OPEN))
        if pos == start + len(_COMMENT_OPEN):
            return None

        is_closer = source.startswith("/", pos)
        if is_closer:
            pos += 1
        if not source.startswith(_PREFIX, pos):
            return None
        pos += len(_PREFIX)

        first, pos = self._scan_name(pos)
        if first is None:
            return None
        if source.startswith("/", pos):
            second, pos = self._scan_name(pos + 1)
            if second is None:
                return None
            name = f"{first}/{second}"
        else:
            name = f"{DEFAULT_NAMESPACE}/{first}"

        after_name = self._skip_whitespace(pos)
        if after_name == pos:
            return None
        pos = after_name

        raw_attrs: str | None = None
        if source.startswith("{", pos):
            attrs_end = self._find_attrs_end(pos)
            if attrs_end == -1:
                return None
            raw_attrs = source[pos : attrs_end + 1]
            pos = self._skip_whitespace(attrs_end + 1)

        is_void = source.startswith("/", pos)
        if is_void:
            pos += 1
        if not source.startswith(_COMMENT_CLOSE, pos):
            return None
        end = pos + len(_COMMENT_CLOSE)
        value = source[start:end]

        # Closers carry no attributes; a stray void slash is ignored too
        if is_closer:
            return Token(TokenType.BLOCK_CLOSER, value, start, end, name=name)

        attrs: dict[str, Any] = {}
        attrs_error = False
        if raw_attrs is not None:
            attrs, attrs_error = decode_attrs(raw_attrs)
            if attrs_error:
                logger.debug("Malformed attributes on %s at offset %d", name, start)

        return Token(
            TokenType.VOID_BLOCK if is_void else TokenType.BLOCK_OPENER,
            value,
            start,
            end,
            name=name,
            raw_attrs=raw_attrs,
            attrs=attrs,
            attrs_error=attrs_error,
        )

    def _scan_name(self, pos: int) -> tuple[str | None, int]:
        """Scan one name segment: [a-z][a-z0-9_-]*.

        Returns:
            (segment, end) or (None, pos) when no name starts at pos.
        """
        source = self._source
        source_len = self._source_len
        if pos >= source_len or source[pos] not in _NAME_START:
            return None, pos
        end = pos + 1
        while end < source_len and source[end] in _NAME_CHARS:
            end += 1
        return source[pos:end], end

    def _skip_whitespace(self, pos: int) -> int:
        source = self._source
        source_len = self._source_len
        while pos < source_len and source[pos] in _WHITESPACE:
            pos += 1
        return pos

    def _find_attrs_end(self, pos: int) -> int:
        """Find the "}" closing an attribute object that starts at pos.

        The object ends at the first "}" followed by whitespace, an optional
        "/", and "-->". Braces inside the JSON are not balanced here; the
        JSON decoder judges the payload afterwards.

        The last search is remembered: its answer holds for every later
        start up to the brace it found (or to the end of input when it found
        none). Starts only move forward, so each brace is inspected once.

        Returns:
            Offset of the closing brace, or -1.
        """
        if (
            self._attrs_search_from != -1
            and pos >= self._attrs_search_from
            and (self._attrs_end == -1 or pos <= self._attrs_end)
        ):
            return self._attrs_end

        source = self._source
        result = -1
        brace = source.find("}", pos)
        while brace != -1:
            after = self._skip_whitespace(brace + 1)
            if after > brace + 1:
                if source.startswith("/", after):
                    after += 1
                if source.startswith(_COMMENT_CLOSE, after):
                    result = brace
                    break
            brace = source.find("}", brace + 1)

        self._attrs_search_from = pos
        self._attrs_end = result
        return result
