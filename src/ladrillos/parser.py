"""Stack-based tree builder producing block nodes.

Consumes the token stream from Lexer and assembles a sequence of top-level
Block nodes. The builder is deliberately lenient: hand-edited or partially
corrupted documents still produce output. Every anomaly is recorded as a
ParseIssue instead of being raised.

Recovery rules:
- A closer pops the innermost open block, whatever name it carries.
- A closer with no open block is kept as literal text.
- Blocks still open at end of input are closed innermost first, each one
  landing inside its parent.
- Malformed attribute JSON decodes to an empty mapping.

Thread Safety:
BlockParser instances are single-use and not thread-safe. Create one per
parse operation. The resulting Blocks are immutable.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ladrillos.lexer import Lexer
from ladrillos.location import LineIndex, SourceLocation
from ladrillos.nodes import Block, walk
from ladrillos.tokens import Token, TokenType
from ladrillos.utils.logger import get_logger

logger = get_logger(__name__)


class IssueKind(Enum):
    """Kinds of recoverable parse anomalies."""

    MALFORMED_ATTRS = "malformed_attrs"
    MISMATCHED_CLOSER = "mismatched_closer"
    STRAY_CLOSER = "stray_closer"
    UNCLOSED_BLOCK = "unclosed_block"


@dataclass(frozen=True, slots=True)
class ParseIssue:
    """A recoverable anomaly met while building the block tree.

    Attributes:
        kind: What went wrong
        name: Block name of the offending delimiter
        location: Where the offending delimiter starts
        expected: For MISMATCHED_CLOSER, the name of the block it closed

    """

    kind: IssueKind
    name: str
    location: SourceLocation
    expected: str | None = None

    @property
    def message(self) -> str:
        if self.kind is IssueKind.MALFORMED_ATTRS:
            return f"attributes of '{self.name}' are not a JSON object; using {{}}"
        if self.kind is IssueKind.MISMATCHED_CLOSER:
            return f"closer '{self.name}' closed open block '{self.expected}'"
        if self.kind is IssueKind.STRAY_CLOSER:
            return f"closer '{self.name}' has no open block; kept as text"
        return f"block '{self.name}' was never closed"

    def __str__(self) -> str:
        return f"{self.location} {self.message}"


@dataclass(slots=True)
class _Frame:
    """An open block waiting for its closer."""

    token: Token
    inner_blocks: list[Block] = field(default_factory=list)
    inner_content: list[str] = field(default_factory=lambda: [""])

    def append_text(self, text: str) -> None:
        self.inner_content[-1] += text

    def append_block(self, block: Block) -> None:
        self.inner_blocks.append(block)
        self.inner_content.append("")

    def close(self) -> Block:
        return Block(
            name=self.token.name,
            attrs=self.token.attrs,
            inner_blocks=tuple(self.inner_blocks),
            inner_content=tuple(self.inner_content),
        )


class BlockParser:
    """Tree builder for block documents.

    Usage:
            >>> parser = BlockParser("<!-- wp:quote --><p>x</p><!-- /wp:quote -->")
            >>> parser.parse()
        [Block(name='core/quote', attrs={}, inner_blocks=(), inner_content=('<p>x</p>',))]
            >>> parser.issues
        ()

    """

    __slots__ = ("_source", "_source_file", "_stack", "_output", "_issues", "_lines", "_text")

    def __init__(self, source: str, source_file: str | None = None) -> None:
        """Initialize parser with source text.

        Args:
            source: Document text
            source_file: Optional source file path for diagnostics
        """
        self._source = source
        self._source_file = source_file
        self._stack: list[_Frame] = []
        self._output: list[Block] = []
        self._issues: list[ParseIssue] = []
        self._lines: LineIndex | None = None
        self._text: list[str] = []

    @property
    def issues(self) -> tuple[ParseIssue, ...]:
        """Recoverable anomalies recorded by the last parse()."""
        return tuple(self._issues)

    def parse(self) -> list[Block]:
        """Parse the source into top-level blocks.

        Returns:
            Top-level Block nodes in document order. Never raises for
            malformed content.
        """
        self._stack = []
        self._output = []
        self._issues = []
        self._text = []

        for token in Lexer(self._source).tokenize():
            token_type = token.type
            if token_type is TokenType.TEXT:
                self._add_text(token.value)
            elif token_type is TokenType.VOID_BLOCK:
                self._check_attrs(token)
                self._add_block(
                    Block(name=token.name, attrs=token.attrs)
                )
            elif token_type is TokenType.BLOCK_OPENER:
                self._check_attrs(token)
                self._stack.append(_Frame(token))
            elif token_type is TokenType.BLOCK_CLOSER:
                self._close(token)
            else:
                self._finish()

        self._flush_text()
        return self._output

    # =========================================================================
    # Token handlers
    # =========================================================================

    def _add_text(self, text: str) -> None:
        if self._stack:
            self._stack[-1].append_text(text)
            return
        # Stray closers are re-emitted as text; top-level literals are buffered
        # so they merge into one freeform node
        self._text.append(text)

    def _flush_text(self) -> None:
        if self._text:
            self._output.append(Block.freeform("".join(self._text)))
            self._text.clear()

    def _add_block(self, block: Block) -> None:
        if self._stack:
            self._stack[-1].append_block(block)
        else:
            self._flush_text()
            self._output.append(block)

    def _close(self, token: Token) -> None:
        name = token.name or ""
        if not self._stack:
            self._record(IssueKind.STRAY_CLOSER, token)
            self._add_text(token.value)
            return

        frame = self._stack.pop()
        if frame.token.name != name:
            self._record(IssueKind.MISMATCHED_CLOSER, token, expected=frame.token.name)
        self._add_block(frame.close())

    def _finish(self) -> None:
        while self._stack:
            frame = self._stack.pop()
            self._record(IssueKind.UNCLOSED_BLOCK, frame.token)
            self._add_block(frame.close())

    def _check_attrs(self, token: Token) -> None:
        if token.attrs_error:
            self._record(IssueKind.MALFORMED_ATTRS, token)

    def _record(self, kind: IssueKind, token: Token, expected: str | None = None) -> None:
        issue = ParseIssue(
            kind=kind,
            name=token.name or "",
            location=self._line_index().location(token.start, token.end),
            expected=expected,
        )
        logger.debug("Recovered from parse issue: %s", issue)
        self._issues.append(issue)

    def _line_index(self) -> LineIndex:
        # Built on the first issue; clean documents never pay for it
        if self._lines is None:
            self._lines = LineIndex(self._source, self._source_file)
        return self._lines


def parse_blocks(source: str, source_file: str | None = None) -> list[Block]:
    """Parse a document into top-level blocks.

    Args:
        source: Document text
        source_file: Optional source file path for diagnostics

    Returns:
        Top-level Block nodes in document order
    """
    return BlockParser(source, source_file=source_file).parse()


def has_blocks(source: str) -> bool:
    """Cheap check for block delimiters in a document.

    True when the text contains "<!-- wp:"; the delimiters are not validated.
    """
    return "<!-- wp:" in source


def has_block(name: str, source: str) -> bool:
    """Check whether a document contains a block named name at any depth.

    Args:
        name: Block name; "paragraph" is shorthand for "core/paragraph"
        source: Document text
    """
    if not has_blocks(source):
        return False
    if "/" not in name:
        name = f"core/{name}"
    return any(block.name == name for block in walk(parse_blocks(source)))
