"""Coverage parser protocol."""

from pathlib import Path
from typing import Protocol

from prcoverage.coverage.models import CoverageReport


class CoverageParser(Protocol):
    """Protocol for coverage format parsers.

    Each parser handles one coverage format and converts it to the
    unified CoverageReport model.
    """

    @property
    def format_id(self) -> str:
        """Format identifier as configured (e.g., 'lcov', 'clover', 'go')."""
        ...

    def can_parse(self, path: Path) -> bool:
        """Check if the file looks like this format (extension or content sniff)."""
        ...

    def parse(self, path: Path, *, base_path: Path | None = None) -> CoverageReport:
        """Parse coverage file into unified model.

        Args:
            path: Path to coverage file.
            base_path: Workspace root for relativizing absolute paths.
                      If None, paths in coverage data are used as-is.

        Raises:
            CoverageParseError: If parsing fails.
        """
        ...


def relativize(file_path: str, base_path: Path | None) -> str:
    """Make file_path relative to base_path when it lies under it."""
    normalized = file_path.replace("\\", "/")
    if base_path is None:
        return normalized
    try:
        return Path(normalized).relative_to(base_path).as_posix()
    except ValueError:
        # Path not under base_path -> use as-is
        return normalized
