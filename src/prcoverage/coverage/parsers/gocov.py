"""Go coverage profile parser.

`go test -coverprofile` writes:
mode: set|count|atomic
<module>/<pkg>/<file>:<startline>.<startcol>,<endline>.<endcol> <numstmt> <count>

Example:
mode: set
github.com/user/repo/pkg/main.go:10.2,12.16 3 1
github.com/user/repo/pkg/main.go:15.2,20.16 5 0

Profile paths are import paths. When go.mod is available its module path is
stripped so that files line up with repository-relative diff paths.
"""

import re
from pathlib import Path

import structlog

from prcoverage.coverage.models import CoverageParseError, CoverageReport, FileCoverage
from prcoverage.coverage.parsers.base import relativize

log = structlog.get_logger(__name__)

_MODULE_DIRECTIVE = re.compile(r"^\s*module\s+(\S+)", re.MULTILINE)


def read_module_path(go_mod: Path) -> str | None:
    """Return the module path declared in go.mod, or None if unavailable."""
    try:
        content = go_mod.read_text()
    except (OSError, UnicodeDecodeError):
        return None
    match = _MODULE_DIRECTIVE.search(content)
    if match is None:
        return None
    return match.group(1).strip('"')


class GocovParser:
    """Parser for Go coverage profiles."""

    def __init__(self, go_mod: Path | None = None) -> None:
        self.go_mod = go_mod

    @property
    def format_id(self) -> str:
        return "go"

    def can_parse(self, path: Path) -> bool:
        """Check if file looks like a Go coverage profile."""
        if not path.is_file():
            return False
        if path.suffix == ".out":
            return True
        try:
            with path.open() as f:
                return f.readline().strip().startswith("mode:")
        except (OSError, UnicodeDecodeError):
            return False

    def _strip_module(self, file_path: str, module: str | None) -> str:
        if module and file_path.startswith(module + "/"):
            return file_path[len(module) + 1 :]
        return file_path

    def parse(self, path: Path, *, base_path: Path | None = None) -> CoverageReport:
        """Parse Go coverage profile into CoverageReport."""
        if not path.is_file():
            raise CoverageParseError(f"Go coverage file not found: {path}")

        try:
            content = path.read_text()
        except (OSError, UnicodeDecodeError) as e:
            raise CoverageParseError(f"Failed to read Go coverage: {e}") from e

        lines = content.strip().splitlines()
        if not lines:
            return CoverageReport(source_format="go", files={})

        if not lines[0].strip().startswith("mode:"):
            raise CoverageParseError("Invalid Go coverage: missing mode line")

        module = read_module_path(self.go_mod) if self.go_mod else None
        if self.go_mod and module is None:
            log.warning("go_mod_unreadable", go_mod=str(self.go_mod))

        files: dict[str, FileCoverage] = {}
        for line in lines[1:]:
            # path:start.col,end.col numstmt count
            parts = line.split()
            if len(parts) != 3:
                continue
            path_range, _numstmt, count_str = parts
            colon_idx = path_range.rfind(":")
            if colon_idx == -1:
                continue

            try:
                count = int(count_str)
                start_part, end_part = path_range[colon_idx + 1 :].split(",")
                start_line = int(start_part.split(".")[0])
                end_line = int(end_part.split(".")[0])
            except ValueError:
                continue
            # Line numbers are 1-based; drop degenerate blocks
            start_line = max(start_line, 1)
            if end_line < start_line:
                continue

            file_path = relativize(
                self._strip_module(path_range[:colon_idx], module), base_path
            )
            file_cov = files.setdefault(file_path, FileCoverage(path=file_path))

            for line_num in range(start_line, end_line + 1):
                # Overlapping blocks: a line counts as covered if any block ran
                file_cov.lines[line_num] = max(file_cov.lines.get(line_num, 0), count)

        return CoverageReport(source_format="go", files=files)
