"""Token and TokenType definitions for the block lexer.

The lexer splits a document into literal text runs and block delimiter
comments. Each Token keeps the raw source slice it was scanned from, so the
parser can fall back to literal text when a delimiter turns out to be
misplaced.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class TokenType(Enum):
    """Token types produced by the lexer."""

    TEXT = auto()  # Literal HTML between delimiters
    BLOCK_OPENER = auto()  # <!-- wp:name {...} -->
    BLOCK_CLOSER = auto()  # <!-- /wp:name -->
    VOID_BLOCK = auto()  # <!-- wp:name {...} /-->
    EOF = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the lexer.

    Attributes:
        type: The token type
        value: Raw source slice covered by the token
        start: Absolute start offset in source
        end: Absolute end offset in source (exclusive)
        name: Fully-qualified block name ("core/paragraph"); None for TEXT/EOF
        raw_attrs: Attribute JSON exactly as written, or None
        attrs: Decoded attributes ({} when absent or malformed)
        attrs_error: True when raw_attrs was present but did not decode
            to a JSON object

    """

    type: TokenType
    value: str
    start: int
    end: int
    name: str | None = None
    raw_attrs: str | None = None
    attrs: dict[str, Any] = field(default_factory=dict)
    attrs_error: bool = False

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        if self.name is not None:
            return f"Token({self.type.name}, {self.name!r}, {self.start})"
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, {self.start})"

    @property
    def is_delimiter(self) -> bool:
        """True for opener, closer and void tokens."""
        return self.name is not None
