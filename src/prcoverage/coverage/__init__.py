"""Coverage report adapters.

Reads LCOV, Clover and Go profiles and reduces them to CoverageFile records
(file name + never-executed lines).

Usage:
    from prcoverage.coverage import parse_coverage, to_coverage_files

    report = parse_coverage(Path("coverage/lcov.info"), "lcov", base_path=workspace)
    coverage_files = to_coverage_files(report)
"""

from prcoverage.coverage.models import (
    CoverageFile,
    CoverageParseError,
    CoverageReport,
    CoverageSummary,
    FileCoverage,
    to_coverage_files,
)
from prcoverage.coverage.parsers import get_parser, parse_coverage

__all__ = [
    "CoverageFile",
    "CoverageParseError",
    "CoverageReport",
    "CoverageSummary",
    "FileCoverage",
    "get_parser",
    "parse_coverage",
    "to_coverage_files",
]
