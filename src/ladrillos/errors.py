"""Exception classes for Ladrillos.

Content problems (bad JSON attributes, unbalanced delimiters, unknown block
types) never raise: the parser records them as ParseIssue values and the
renderer degrades gracefully. The exceptions here are for programming
mistakes against the registry and for broken test setups.
"""

from __future__ import annotations

from pathlib import Path


class LadrillosError(Exception):
    """Base exception for all Ladrillos errors."""

    pass


class RegistryError(LadrillosError):
    """Invalid use of a block type registry.

    Raised for registry usage errors, never for document content.
    """

    def __init__(self, name: object, message: str) -> None:
        """Initialize registry error.

        Args:
            name: The block type name involved (may be a non-string)
            message: Description of the violation
        """
        self.name = name
        super().__init__(message)


class DuplicateBlockTypeError(RegistryError):
    """A block type with the same name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f'Block type "{name}" is already registered.')


class BlockTypeNotFoundError(RegistryError):
    """The block type name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f'Block type "{name}" is not registered.')


class InvalidBlockNameError(RegistryError):
    """The block type name is malformed."""

    pass


class RenderError(LadrillosError):
    """Error in a block type's render setup.

    Raised when a block type is declared with a render callback that
    cannot be called.
    """

    pass


class FixtureMissingError(LadrillosError):
    """A golden fixture file does not exist.

    Indicates a broken test setup rather than a rendering problem.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize with the offending path.

        Args:
            path: Path of the missing fixture file
        """
        self.path = Path(path)
        super().__init__(f"Missing fixture file: '{self.path}'")
