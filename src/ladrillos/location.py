"""Source location tracking for parse diagnostics.

Block documents are scanned by offset; line and column numbers are only
needed when a diagnostic is reported, so they are computed on demand from
the source text.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Position of a segment in a block document.

    All line and column numbers are 1-indexed; offsets are 0-indexed
    positions in the source string.

    Attributes:
        lineno: Line number of the segment start
        col_offset: Column of the segment start
        offset: Absolute start offset
        end_offset: Absolute end offset (exclusive)
        source_file: Source file path (optional)

    Examples:
            >>> SourceLocation.from_offset("a\\nbc", 3)
        SourceLocation(lineno=2, col_offset=2, offset=3, end_offset=3, source_file=None)

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_offset: int = 0
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for log and error messages.

        Returns:
            Formatted string like "post.html:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @classmethod
    def from_offset(
        cls,
        source: str,
        offset: int,
        end_offset: int | None = None,
        source_file: str | None = None,
    ) -> SourceLocation:
        """Build a location by counting lines up to offset.

        Args:
            source: The full document text
            offset: Start offset of the segment
            end_offset: End offset (defaults to offset)
            source_file: Optional path for messages

        Returns:
            SourceLocation with line and column resolved
        """
        lineno = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(
            lineno=lineno,
            col_offset=offset - line_start + 1,
            offset=offset,
            end_offset=offset if end_offset is None else end_offset,
            source_file=source_file,
        )


class LineIndex:
    """Line start offsets of a document, for repeated location lookups.

    Built once per document, so resolving many locations costs a binary
    search each instead of a scan from the start of the text.

    Example:
        >>> LineIndex("a\\nbc").location(3).lineno
        2

    """

    __slots__ = ("_line_starts", "_source_file")

    def __init__(self, source: str, source_file: str | None = None) -> None:
        starts = [0]
        newline = source.find("\n")
        while newline != -1:
            starts.append(newline + 1)
            newline = source.find("\n", newline + 1)
        self._line_starts = starts
        self._source_file = source_file

    def location(self, offset: int, end_offset: int | None = None) -> SourceLocation:
        """Resolve offset to a SourceLocation."""
        line = bisect_right(self._line_starts, offset)
        return SourceLocation(
            lineno=line,
            col_offset=offset - self._line_starts[line - 1] + 1,
            offset=offset,
            end_offset=offset if end_offset is None else end_offset,
            source_file=self._source_file,
        )
