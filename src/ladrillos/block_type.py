"""Block type descriptors.

A BlockType describes one registered kind of block: its name, an optional
render callback that makes it dynamic, and an optional attribute schema.

Static block types (no callback) render their own inner markup. Dynamic
block types replace it with whatever the callback returns:

    >>> def render_latest(attributes, content, block):
    ...     return f"<ul>{attributes['count']} posts</ul>"
    >>> latest = BlockType("core/latest-posts", render_callback=render_latest,
    ...                    attributes={"count": {"type": "integer", "default": 5}})
    >>> latest.render()
    '<ul>5 posts</ul>'

Attribute schemas use a JSON-schema subset: "type" (a name or list of
names among string, integer, number, boolean, array, object, null),
"enum", "items" (for arrays) and "default".

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ladrillos.errors import RenderError

if TYPE_CHECKING:
    from ladrillos.context import BlockInstance

RenderCallback = Callable[[dict[str, Any], str, "BlockInstance | None"], object]
"""(attributes, content, block) -> str | int | float | None"""


def coerce_output(value: object) -> str:
    """Coerce a render callback's return value to a string.

    None renders as nothing, booleans as "1" / "", numbers as their decimal
    form (integral floats lose the fraction), strings unchanged.

    Example:
        >>> coerce_output(10)
        '10'
        >>> coerce_output(2.0)
        '2'
        >>> coerce_output(None)
        ''

    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


_TYPE_CHECKS: dict[str, Callable[[Any], bool]] = {
    "string": lambda v: isinstance(v, str),
    "integer": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "array": lambda v: isinstance(v, list),
    "object": lambda v: isinstance(v, dict),
    "null": lambda v: v is None,
}


def validate_value(value: Any, schema: Mapping[str, Any]) -> bool:
    """Check value against an attribute schema.

    Unknown type names are not enforced.
    """
    expected = schema.get("type")
    if expected is not None:
        names = [expected] if isinstance(expected, str) else list(expected)
        checks = [_TYPE_CHECKS[n] for n in names if n in _TYPE_CHECKS]
        if checks and not any(check(value) for check in checks):
            return False

    if "enum" in schema and value not in schema["enum"]:
        return False

    items = schema.get("items")
    if items is not None and isinstance(value, list):
        return all(validate_value(item, items) for item in value)
    return True


@dataclass(frozen=True, slots=True)
class BlockType:
    """A registered block type.

    Immutable; use dataclasses.replace() to derive a variant.

    Attributes:
        name: Namespaced name, e.g. "core/paragraph"
        render_callback: Makes the block dynamic when set
        attributes: Attribute schema, name -> {"type", "default", "enum", ...}
        title: Human-readable title
        category: Inserter category
        description: Short description
        keywords: Search keywords
        supports: Feature flags
        parent: Block names this block may be nested in

    """

    name: str
    render_callback: RenderCallback | None = None
    attributes: dict[str, dict[str, Any]] | None = None
    title: str = ""
    category: str | None = None
    description: str = ""
    keywords: tuple[str, ...] = ()
    supports: dict[str, Any] = field(default_factory=dict)
    parent: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if self.render_callback is not None and not callable(self.render_callback):
            msg = f"render_callback of block type '{self.name}' is not callable"
            raise RenderError(msg)

    @classmethod
    def from_settings(cls, name: str, settings: Mapping[str, Any]) -> BlockType:
        """Create a BlockType from a settings mapping.

        Unknown keys are ignored so settings written for richer hosts
        (editor scripts, styles) can be passed through unchanged.
        """
        valid_fields = {f for f in cls.__dataclass_fields__ if f != "name"}
        filtered = {k: v for k, v in settings.items() if k in valid_fields}
        for key in ("keywords", "parent"):
            if isinstance(filtered.get(key), list):
                filtered[key] = tuple(filtered[key])
        return cls(name, **filtered)

    def is_dynamic(self) -> bool:
        """True when a render callback is set."""
        return self.render_callback is not None

    def get_attributes(self) -> dict[str, dict[str, Any]]:
        """Attribute schema (empty when none was declared)."""
        return self.attributes or {}

    def prepare_attributes_for_render(self, attributes: Mapping[str, Any]) -> dict[str, Any]:
        """Validate attributes against the schema and fill in defaults.

        Declared attributes with invalid values are dropped, missing ones
        take their default when the schema has one, and undeclared
        attributes pass through unchanged.
        """
        if not self.attributes:
            return dict(attributes)

        prepared: dict[str, Any] = {}
        for attr_name, value in attributes.items():
            schema = self.attributes.get(attr_name)
            if schema is not None and not validate_value(value, schema):
                continue
            prepared[attr_name] = value

        for attr_name, schema in self.attributes.items():
            if attr_name not in prepared and "default" in schema:
                prepared[attr_name] = schema["default"]
        return prepared

    def render(
        self,
        attributes: Mapping[str, Any] | None = None,
        content: str = "",
        block: BlockInstance | None = None,
    ) -> str:
        """Render a dynamic block.

        Args:
            attributes: Block attributes as parsed from the document
            content: Rendered inner content of the block
            block: Handle for the block being rendered

        Returns:
            The callback's output coerced to str; "" for static types.
        """
        if self.render_callback is None:
            return ""
        prepared = self.prepare_attributes_for_render(attributes or {})
        return coerce_output(self.render_callback(prepared, content, block))
