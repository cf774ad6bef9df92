"""Tests for block serialization.

Covers delimiter output, attribute escaping and the parsed-structure
dict/JSON form.
"""

import json

import pytest

from ladrillos import (
    Block,
    from_dict,
    from_json,
    get_comment_delimited_block_content,
    parse_blocks,
    serialize_block,
    serialize_block_attributes,
    serialize_blocks,
    strip_core_namespace,
    to_dict,
    to_json,
)

BACKSLASH = "\\"


class TestAttributeEscaping:
    """Test attribute JSON escaping."""

    def test_plain_attributes(self) -> None:
        """Attributes are written as compact JSON."""
        assert serialize_block_attributes({"align": "wide", "level": 3}) == '{"align":"wide","level":3}'

    def test_unicode_kept_literal(self) -> None:
        """Non-ASCII text is not escaped."""
        assert serialize_block_attributes({"t": "ñandú"}) == '{"t":"ñandú"}'

    @pytest.mark.parametrize(
        ("char", "escape"),
        [("<", "u003c"), (">", "u003e"), ("&", "u0026")],
    )
    def test_markup_characters_escaped(self, char: str, escape: str) -> None:
        """Markup characters are written as unicode escapes."""
        encoded = serialize_block_attributes({"html": f"a{char}b"})
        assert char not in encoded
        assert BACKSLASH + escape in encoded
        assert json.loads(encoded) == {"html": f"a{char}b"}

    def test_comment_terminator_cannot_appear(self) -> None:
        """Double dashes never appear in the payload."""
        encoded = serialize_block_attributes({"x": "a-->b", "y": "--"})
        assert "--" not in encoded
        assert json.loads(encoded) == {"x": "a-->b", "y": "--"}

    def test_escaped_quotes(self) -> None:
        """Escaped quotes become unicode escapes."""
        encoded = serialize_block_attributes({"q": 'say "hi"'})
        # Only the structural quotes remain literal
        assert encoded.count('"') == 4
        assert BACKSLASH + "u0022" in encoded
        assert json.loads(encoded) == {"q": 'say "hi"'}

    def test_escaped_backslash_before_quote(self) -> None:
        """A trailing backslash is not taken for an escaped quote."""
        attrs = {"path": "C:" + BACKSLASH}
        assert json.loads(serialize_block_attributes(attrs)) == attrs

    def test_escaped_attributes_survive_reparse(self) -> None:
        """Escaped attributes decode back to the original values."""
        attrs = {"html": '<a href="x">--&</a>'}
        doc = get_comment_delimited_block_content("my/widget", attrs, "")
        (block,) = parse_blocks(doc)
        assert block.attrs == attrs


class TestDelimiters:
    """Test delimiter generation."""

    def test_core_namespace_stripped(self) -> None:
        """The core namespace is dropped when serializing."""
        assert strip_core_namespace("core/paragraph") == "paragraph"
        assert strip_core_namespace("my/widget") == "my/widget"
        assert strip_core_namespace(None) is None

    def test_wrapped_content(self) -> None:
        """Content is wrapped in opener and closer."""
        out = get_comment_delimited_block_content("core/paragraph", {}, "<p>x</p>")
        assert out == "<!-- wp:paragraph --><p>x</p><!-- /wp:paragraph -->"

    def test_empty_content_is_void(self) -> None:
        """Empty content gives a void delimiter."""
        out = get_comment_delimited_block_content("my/widget", {"a": 1}, "")
        assert out == '<!-- wp:my/widget {"a":1} /-->'

    def test_freeform_unchanged(self) -> None:
        """Freeform content is written as is."""
        assert get_comment_delimited_block_content(None, {}, "text") == "text"


class TestSerializeBlocks:
    """Test block serialization."""

    @pytest.mark.parametrize(
        "doc",
        [
            "<!-- wp:paragraph --><p>x</p><!-- /wp:paragraph -->",
            "<!-- wp:separator /-->",
            '<!-- wp:my/widget {"a":1,"b":[true,null]} /-->',
            "intro<!-- wp:paragraph -->\n<p>x</p>\n<!-- /wp:paragraph -->outro",
            (
                '<!-- wp:columns {"n":2} --><div>'
                "<!-- wp:column --><p>a</p><!-- /wp:column -->"
                "<!-- wp:column --><p>b</p><!-- /wp:column -->"
                "</div><!-- /wp:columns -->"
            ),
        ],
    )
    def test_well_formed_documents_are_lossless(self, doc: str) -> None:
        """Well-formed documents survive parse and serialize."""
        assert serialize_blocks(parse_blocks(doc)) == doc

    def test_core_prefix_normalized(self) -> None:
        """An explicit core prefix is written in short form."""
        doc = "<!-- wp:core/paragraph --><p>x</p><!-- /wp:core/paragraph -->"
        assert serialize_blocks(parse_blocks(doc)) == (
            "<!-- wp:paragraph --><p>x</p><!-- /wp:paragraph -->"
        )

    def test_empty_block_becomes_void(self) -> None:
        """An empty paired block is written as void."""
        assert serialize_blocks(parse_blocks("<!-- wp:spacer --><!-- /wp:spacer -->")) == (
            "<!-- wp:spacer /-->"
        )

    def test_built_block(self) -> None:
        """Blocks built in code serialize like parsed ones."""
        child = Block("core/paragraph", inner_content=("<p>a</p>",))
        parent = Block("core/group", inner_blocks=(child,), inner_content=("<div>", "</div>"))
        assert serialize_block(parent) == (
            "<!-- wp:group --><div><!-- wp:paragraph --><p>a</p><!-- /wp:paragraph -->"
            "</div><!-- /wp:group -->"
        )


class TestParsedStructure:
    """Test dict and JSON conversion."""

    DOC = (
        '<!-- wp:group {"tag":"section"} --><div>'
        "<!-- wp:paragraph --><p>a</p><!-- /wp:paragraph -->"
        "<!-- wp:separator /-->"
        "</div><!-- /wp:group -->"
    )

    def test_to_dict(self) -> None:
        """to_dict produces the parsed-structure fields."""
        (block,) = parse_blocks(self.DOC)
        data = to_dict(block)
        assert data["blockName"] == "core/group"
        assert data["attrs"] == {"tag": "section"}
        assert data["innerHTML"] == "<div></div>"
        assert data["innerContent"] == ["<div>", None, None, "</div>"]
        assert [child["blockName"] for child in data["innerBlocks"]] == [
            "core/paragraph",
            "core/separator",
        ]
        assert data["innerBlocks"][1]["innerContent"] == []

    def test_freeform_dict(self) -> None:
        """Freeform nodes have a null block name."""
        assert to_dict(Block.freeform("hi")) == {
            "blockName": None,
            "attrs": {},
            "innerBlocks": [],
            "innerHTML": "hi",
            "innerContent": ["hi"],
        }

    def test_from_dict_rebuilds_block(self) -> None:
        """from_dict inverts to_dict."""
        (block,) = parse_blocks(self.DOC)
        assert from_dict(to_dict(block)) == block

    def test_from_dict_without_inner_content(self) -> None:
        """innerHTML is used when innerContent is absent."""
        block = from_dict({"blockName": "core/paragraph", "innerHTML": "<p>x</p>"})
        assert block.inner_content == ("<p>x</p>",)
        assert block.attrs == {}

    def test_from_dict_rejects_missing_placeholders(self) -> None:
        """Inner blocks without placeholders are rejected."""
        data = {"blockName": "core/group", "innerBlocks": [{"blockName": "core/separator"}]}
        with pytest.raises(ValueError):
            from_dict(data)

    def test_json_round_trip(self) -> None:
        """JSON output has sorted keys and loads back."""
        blocks = parse_blocks("a" + self.DOC + "b")
        text = to_json(blocks)
        assert text.index('"attrs"') < text.index('"blockName"')
        assert from_json(text) == blocks

    def test_json_indent(self) -> None:
        """to_json honours indent."""
        assert "\n  " in to_json(parse_blocks(self.DOC), indent=2)
