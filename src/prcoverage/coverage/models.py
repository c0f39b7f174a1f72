"""Coverage data model.

File-centric: every on-disk format is reduced to per-file line hit counts,
then to the canonical CoverageFile shape the annotation builder consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, field


class CoverageParseError(Exception):
    """Error parsing coverage data."""

    pass


@dataclass(slots=True)
class FileCoverage:
    """Line coverage for a single file.

    Lines map 1-based line number -> hit count.
    """

    path: str  # workspace-relative path
    lines: dict[int, int] = field(default_factory=dict)

    @property
    def lines_found(self) -> int:
        return len(self.lines)

    @property
    def lines_hit(self) -> int:
        return sum(1 for hits in self.lines.values() if hits > 0)

    @property
    def uncovered_lines(self) -> list[int]:
        """Sorted list of line numbers with zero hits."""
        return sorted(line for line, hits in self.lines.items() if hits == 0)


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    files: int
    lines_found: int
    lines_hit: int


@dataclass(slots=True)
class CoverageReport:
    """Parsed coverage report, files keyed by workspace-relative path."""

    source_format: str
    files: dict[str, FileCoverage] = field(default_factory=dict)

    @property
    def summary(self) -> CoverageSummary:
        return CoverageSummary(
            files=len(self.files),
            lines_found=sum(f.lines_found for f in self.files.values()),
            lines_hit=sum(f.lines_hit for f in self.files.values()),
        )


@dataclass(frozen=True, slots=True)
class CoverageFile:
    """A file and the lines the report marks as never executed."""

    file_name: str
    missing_line_numbers: tuple[int, ...]

    def to_dict(self) -> dict[str, object]:
        return {"fileName": self.file_name, "missingLineNumbers": list(self.missing_line_numbers)}


def to_coverage_files(report: CoverageReport) -> list[CoverageFile]:
    """Reduce a report to files with at least one uncovered line, in report order."""
    return [
        CoverageFile(file_name=fc.path, missing_line_numbers=tuple(missing))
        for fc in report.files.values()
        if (missing := fc.uncovered_lines)
    ]
