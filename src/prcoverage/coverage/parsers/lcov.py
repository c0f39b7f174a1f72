"""LCOV format parser.

Only line records matter here:
- SF:<source file path>
- DA:<line>,<hit count>[,<checksum>]
- end_of_record

Used by: pytest-cov, c8/nyc, cargo-llvm-cov, gcov, dart test
"""

from pathlib import Path

from prcoverage.coverage.models import CoverageParseError, CoverageReport, FileCoverage
from prcoverage.coverage.parsers.base import relativize


class LcovParser:
    """Parser for LCOV tracefiles."""

    @property
    def format_id(self) -> str:
        return "lcov"

    def can_parse(self, path: Path) -> bool:
        """Check if file looks like LCOV format."""
        if not path.is_file():
            return False
        if path.suffix in (".info", ".lcov"):
            return True
        # Content sniff: first non-comment line is SF:/TN:
        try:
            with path.open() as f:
                for line in f:
                    stripped = line.strip()
                    if stripped and not stripped.startswith("#"):
                        return stripped.startswith(("SF:", "TN:"))
        except (OSError, UnicodeDecodeError):
            pass
        return False

    def parse(self, path: Path, *, base_path: Path | None = None) -> CoverageReport:
        """Parse LCOV file into CoverageReport."""
        if not path.is_file():
            raise CoverageParseError(f"LCOV file not found: {path}")

        try:
            content = path.read_text()
        except (OSError, UnicodeDecodeError) as e:
            raise CoverageParseError(f"Failed to read LCOV file: {e}") from e

        files: dict[str, FileCoverage] = {}
        current: FileCoverage | None = None

        for line in content.splitlines():
            line = line.strip()
            if line.startswith("SF:"):
                file_path = relativize(line[3:], base_path)
                # Tracefiles may list a file in several records (one per test)
                current = files.setdefault(file_path, FileCoverage(path=file_path))
            elif line.startswith("DA:"):
                if current is None:
                    continue
                parts = line[3:].split(",")
                if len(parts) < 2:
                    continue
                try:
                    line_num = int(parts[0])
                    # Some tools write '-' for unexecuted
                    hits = 0 if parts[1] == "-" else int(parts[1])
                except ValueError:
                    continue
                if line_num > 0:
                    current.lines[line_num] = max(current.lines.get(line_num, 0), hits)
            elif line == "end_of_record":
                current = None

        return CoverageReport(source_format="lcov", files=files)
