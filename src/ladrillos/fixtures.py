"""Golden-file fixtures for block rendering.

A fixture directory holds, for each fixture name:

- ``<name>.html``: the input document
- ``<name>.server.html``: the expected rendered output
- optionally ``<name>.parsed.json``: the expected parsed structure

Line endings are normalized by stripping carriage returns from both sides,
so fixtures checked out on Windows still compare equal.

Example:
    >>> for fixture in discover_fixtures(Path("tests/fixtures/blocks")):
    ...     assert do_blocks(fixture.read_input()) == fixture.read_expected()
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ladrillos.errors import FixtureMissingError


def strip_r(text: str) -> str:
    """Remove carriage returns."""
    return text.replace("\r", "")


def clean_fixture_name(filename: str | Path) -> str:
    """Reduce a fixture filename to its fixture name.

    Example:
        >>> clean_fixture_name("fixtures/core__quote.server.html")
        'core__quote'

    """
    return Path(filename).name.split(".", 1)[0]


def read_fixture(path: str | Path) -> str:
    """Read a fixture file as UTF-8 with carriage returns stripped.

    Raises:
        FixtureMissingError: If the file does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise FixtureMissingError(path)
    return strip_r(path.read_text(encoding="utf-8"))


@dataclass(frozen=True, slots=True)
class FixturePair:
    """Input and expected-output paths for one fixture."""

    name: str
    input_path: Path
    expected_path: Path

    @property
    def parsed_path(self) -> Path:
        return self.input_path.with_name(f"{self.name}.parsed.json")

    def read_input(self) -> str:
        return read_fixture(self.input_path)

    def read_expected(self) -> str:
        return read_fixture(self.expected_path)

    def read_parsed(self) -> str | None:
        """Expected parsed-structure JSON, or None when the fixture has none."""
        if not self.parsed_path.is_file():
            return None
        return read_fixture(self.parsed_path)


def discover_fixtures(directory: str | Path) -> list[FixturePair]:
    """Find the fixtures in a directory.

    Every ``*.html`` and ``*.json`` file contributes its fixture name; names
    are de-duplicated and sorted. Files are not checked here: a fixture with
    a missing input or expected file fails when it is read.

    Raises:
        FixtureMissingError: If directory does not exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FixtureMissingError(directory)

    names = {
        clean_fixture_name(path)
        for pattern in ("*.json", "*.html")
        for path in directory.glob(pattern)
    }
    return [
        FixturePair(
            name=name,
            input_path=directory / f"{name}.html",
            expected_path=directory / f"{name}.server.html",
        )
        for name in sorted(names)
    ]
