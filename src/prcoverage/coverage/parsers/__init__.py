"""Coverage parser lookup by configured format name."""

from pathlib import Path

import structlog

from prcoverage.coverage.models import CoverageParseError, CoverageReport

from .base import CoverageParser
from .clover import CloverParser
from .gocov import GocovParser
from .lcov import LcovParser

__all__ = [
    "CoverageParser",
    "CloverParser",
    "GocovParser",
    "LcovParser",
    "get_parser",
    "parse_coverage",
]

log = structlog.get_logger(__name__)


def get_parser(format_id: str, *, go_mod: Path | None = None) -> CoverageParser:
    """Return the parser for a configured format name.

    Raises:
        CoverageParseError: If the format is unknown.
    """
    if format_id == "lcov":
        return LcovParser()
    if format_id == "clover":
        return CloverParser()
    if format_id == "go":
        return GocovParser(go_mod=go_mod)
    raise CoverageParseError(
        f"Unknown coverage format: {format_id!r}. Valid formats: clover, go, lcov"
    )


def parse_coverage(
    path: Path,
    format_id: str = "lcov",
    *,
    base_path: Path | None = None,
    go_mod: Path | None = None,
) -> CoverageReport:
    """Parse a coverage report in the given format.

    A file that does not look like the configured format is logged and
    parsed anyway.
    """
    parser = get_parser(format_id, go_mod=go_mod)
    if path.is_file() and not parser.can_parse(path):
        log.warning("coverage_format_mismatch", path=str(path), format=format_id)
    return parser.parse(path, base_path=base_path)
