"""Tests for block type descriptors and output coercion."""

import pytest

from ladrillos import BlockType, RenderError, coerce_output
from ladrillos.block_type import validate_value


class TestCoerceOutput:
    """Test conversion of callback results to strings."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("text", "text"),
            (10, "10"),
            (-3, "-3"),
            (2.0, "2"),
            (2.5, "2.5"),
            (None, ""),
            (True, "1"),
            (False, ""),
        ],
    )
    def test_coercion(self, value, expected: str) -> None:
        """Callback return values become strings."""
        result = coerce_output(value)
        assert result == expected
        assert isinstance(result, str)


class TestRender:
    """Test BlockType.render dispatch."""

    def test_numeric_return_is_string(self) -> None:
        """A numeric return value renders as its decimal string."""
        block_type = BlockType("core/test", render_callback=lambda a, c, b: 10)
        rendered = block_type.render()
        assert rendered == "10"
        assert isinstance(rendered, str)

    def test_static_type_renders_empty(self) -> None:
        """A type without a callback renders nothing on its own."""
        assert BlockType("core/test").render({"a": 1}, "content") == ""

    def test_callback_receives_arguments(self) -> None:
        """The callback gets attributes, content and the block handle."""
        seen = []

        def callback(attributes, content, block):
            seen.append((attributes, content, block))
            return "ok"

        BlockType("core/test", render_callback=callback).render({"v": 1}, "inner")
        assert seen == [({"v": 1}, "inner", None)]

    def test_non_callable_callback_rejected(self) -> None:
        """A callback that cannot be called is refused at construction."""
        with pytest.raises(RenderError):
            BlockType("core/test", render_callback="not callable")

    def test_is_dynamic(self) -> None:
        """Only types with a callback are dynamic."""
        assert BlockType("a/b", render_callback=lambda a, c, b: "").is_dynamic()
        assert not BlockType("a/b").is_dynamic()


class TestAttributePreparation:
    """Test schema defaults and validation of attributes."""

    SCHEMA = {
        "count": {"type": "integer", "default": 5},
        "align": {"type": "string", "enum": ["left", "right"]},
        "ids": {"type": "array", "items": {"type": "integer"}},
        "label": {"type": ["string", "null"]},
    }

    def prepare(self, attributes: dict) -> dict:
        return BlockType("a/b", attributes=self.SCHEMA).prepare_attributes_for_render(attributes)

    def test_defaults_filled(self) -> None:
        """Missing attributes take their schema default."""
        assert self.prepare({}) == {"count": 5}

    def test_invalid_values_dropped(self) -> None:
        """Values that fail the schema are dropped."""
        prepared = self.prepare({"count": "five", "align": "middle", "ids": [1, "2"]})
        assert prepared == {"count": 5}

    def test_valid_values_kept(self) -> None:
        """Values matching the schema pass unchanged."""
        attributes = {"count": 3, "align": "left", "ids": [1, 2], "label": None}
        assert self.prepare(attributes) == attributes

    def test_undeclared_attributes_pass_through(self) -> None:
        """Attributes without a schema entry are kept."""
        assert self.prepare({"extra": {"x": 1}}) == {"extra": {"x": 1}, "count": 5}

    def test_no_schema_copies_attributes(self) -> None:
        """Without a schema the attributes are copied, not shared."""
        attributes = {"a": 1}
        prepared = BlockType("a/b").prepare_attributes_for_render(attributes)
        assert prepared == attributes
        assert prepared is not attributes

    def test_prepared_attributes_reach_callback(self) -> None:
        """The callback sees prepared attributes, not raw ones."""
        block_type = BlockType(
            "a/b",
            render_callback=lambda attributes, content, block: f"{attributes['count']}",
            attributes=self.SCHEMA,
        )
        assert block_type.render({"count": True}) == "5"


class TestValidateValue:
    """Test single-value schema checks."""

    def test_boolean_is_not_a_number(self) -> None:
        """Booleans do not satisfy number or integer types."""
        assert not validate_value(True, {"type": "number"})
        assert validate_value(1.5, {"type": "number"})

    def test_unknown_type_not_enforced(self) -> None:
        """Unrecognized schema types accept any value."""
        assert validate_value("x", {"type": "rich-text"})


class TestFromSettings:
    """Test building block types from settings mappings."""

    def test_lists_become_tuples(self) -> None:
        """List settings are stored as tuples."""
        block_type = BlockType.from_settings("a/b", {"parent": ["core/columns"]})
        assert block_type.parent == ("core/columns",)
