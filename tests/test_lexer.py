"""Tests for the delimiter lexer."""

import pytest

from ladrillos.lexer import Lexer, decode_attrs
from ladrillos.tokens import TokenType


def tokens(source: str):
    return list(Lexer(source).tokenize())


def kinds(source: str) -> list[TokenType]:
    return [t.type for t in tokens(source)]


class TestDelimiters:
    """Recognition of opener, closer and void delimiters."""

    def test_opener_and_closer(self) -> None:
        """Opener and closer delimiters surround the literal text."""
        toks = tokens("<!-- wp:paragraph --><p>x</p><!-- /wp:paragraph -->")
        assert [t.type for t in toks] == [
            TokenType.BLOCK_OPENER,
            TokenType.TEXT,
            TokenType.BLOCK_CLOSER,
            TokenType.EOF,
        ]
        assert toks[0].name == "core/paragraph"
        assert toks[1].value == "<p>x</p>"
        assert toks[2].name == "core/paragraph"

    def test_void_block(self) -> None:
        """A self-closing delimiter is a single void token."""
        (void, eof) = tokens("<!-- wp:separator /-->")
        assert void.type is TokenType.VOID_BLOCK
        assert void.name == "core/separator"
        assert void.attrs == {}
        assert eof.type is TokenType.EOF

    def test_namespaced_name(self) -> None:
        """Namespaced names are kept as written."""
        (opener, _eof) = tokens("<!-- wp:my-plugin/fancy_block -->")
        assert opener.name == "my-plugin/fancy_block"

    def test_attributes_decoded(self) -> None:
        """Attribute JSON is decoded and the raw text kept."""
        (opener, _eof) = tokens('<!-- wp:heading {"level":3,"nested":{"a":[1,2]}} -->')
        assert opener.attrs == {"level": 3, "nested": {"a": [1, 2]}}
        assert opener.raw_attrs == '{"level":3,"nested":{"a":[1,2]}}'
        assert opener.attrs_error is False

    def test_void_with_attributes(self) -> None:
        """Void delimiters carry attributes too."""
        (void, _eof) = tokens('<!-- wp:core/test {"value":"b2"} /-->')
        assert void.type is TokenType.VOID_BLOCK
        assert void.attrs == {"value": "b2"}

    def test_whitespace_is_flexible(self) -> None:
        """Any whitespace run separates the delimiter parts."""
        (opener, _eof) = tokens('<!--\n\twp:image  {"id":1}\n-->')
        assert opener.type is TokenType.BLOCK_OPENER
        assert opener.attrs == {"id": 1}

    def test_closer_ignores_attributes_and_void_slash(self) -> None:
        """Closers never carry attributes."""
        (closer, _eof) = tokens('<!-- /wp:group {"a":1} /-->')
        assert closer.type is TokenType.BLOCK_CLOSER
        assert closer.attrs == {}
        assert closer.raw_attrs is None

    def test_offsets_cover_source(self) -> None:
        """Token offsets tile the whole source."""
        source = "a<!-- wp:separator /-->b"
        toks = tokens(source)
        assert [(t.start, t.end) for t in toks] == [(0, 1), (1, 23), (23, 24), (24, 24)]
        assert "".join(t.value for t in toks) == source


class TestLiteralText:
    """Anything outside the delimiter grammar is literal."""

    @pytest.mark.parametrize(
        "source",
        [
            "<!-- more -->",
            "<!--wp:paragraph -->",
            "<!-- wp:Paragraph -->",
            "<!-- wp:1column -->",
            "<!-- wp:paragraph-->",
            "<!-- wp: -->",
            "<!-- wp:paragraph {\"a\":1}-->",
            "<!-- wp:paragraph {\"a\":1} --",
            "<!-- wp:ns/ -->",
        ],
    )
    def test_non_delimiters(self, source: str) -> None:
        """Comments outside the grammar stay literal."""
        toks = tokens(source)
        assert [t.type for t in toks] == [TokenType.TEXT, TokenType.EOF]
        assert toks[0].value == source

    def test_adjacent_text_merges_around_plain_comment(self) -> None:
        """Text on both sides of a plain comment is one token."""
        toks = tokens("a<!-- note -->b<!-- wp:separator /-->")
        assert toks[0].type is TokenType.TEXT
        assert toks[0].value == "a<!-- note -->b"

    def test_empty_source(self) -> None:
        """An empty document yields only EOF."""
        assert kinds("") == [TokenType.EOF]

    def test_no_empty_text_tokens(self) -> None:
        """Adjacent delimiters produce no empty text between them."""
        assert kinds("<!-- wp:a /--><!-- wp:b /-->") == [
            TokenType.VOID_BLOCK,
            TokenType.VOID_BLOCK,
            TokenType.EOF,
        ]


class TestMalformedAttributes:
    """Bad JSON never stops the lexer."""

    def test_invalid_json_falls_back_to_empty(self) -> None:
        """Malformed attribute JSON decodes to an empty mapping."""
        (opener, text, _eof) = tokens("<!-- wp:paragraph {not json} -->after")
        assert opener.type is TokenType.BLOCK_OPENER
        assert opener.attrs == {}
        assert opener.attrs_error is True
        assert text.value == "after"

    def test_attrs_end_at_first_brace_before_comment_close(self) -> None:
        """A brace inside a JSON string does not end the attributes."""
        (opener, _eof) = tokens('<!-- wp:x {"a":"} not end"} -->')
        assert opener.attrs == {"a": "} not end"}

    def test_decode_attrs_rejects_non_objects(self) -> None:
        """Only JSON objects are accepted as attributes."""
        assert decode_attrs("[1, 2]") == ({}, True)
        assert decode_attrs('{"ok": true}') == ({"ok": True}, False)
