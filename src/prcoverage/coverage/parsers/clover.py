"""Clover XML format parser.

Clover is written by PHPUnit, kover, OpenClover and istanbul's clover reporter.

Structure:
<coverage generated="..." clover="...">
  <project timestamp="...">
    <package name="com.example">
      <file name="Foo.php" path="/path/to/Foo.php">
        <line num="1" type="stmt" count="1"/>
        <line num="5" type="cond" count="0" truecount="1" falsecount="0"/>
        <line num="10" type="method" name="bar" count="2"/>
      </file>
    </package>
  </project>
</coverage>

Every line type carries a count; all of them are treated as executable lines.
"""

import xml.etree.ElementTree as ET
from pathlib import Path

from prcoverage.coverage.models import CoverageParseError, CoverageReport, FileCoverage
from prcoverage.coverage.parsers.base import relativize


class CloverParser:
    """Parser for Clover XML."""

    @property
    def format_id(self) -> str:
        return "clover"

    def can_parse(self, path: Path) -> bool:
        """Check if file looks like Clover XML."""
        if not path.is_file():
            return False
        if "clover" in path.name.lower():
            return True
        try:
            with path.open("rb") as f:
                header = f.read(2048).decode("utf-8", errors="ignore")
        except OSError:
            return False
        return 'clover="' in header or ('<project' in header and '<line num="' in header)

    def parse(self, path: Path, *, base_path: Path | None = None) -> CoverageReport:
        """Parse Clover XML into CoverageReport."""
        if not path.is_file():
            raise CoverageParseError(f"Clover file not found: {path}")

        try:
            root = ET.parse(path).getroot()
        except ET.ParseError as e:
            raise CoverageParseError(f"Invalid Clover XML: {e}") from e

        files: dict[str, FileCoverage] = {}
        for file_elem in root.iter("file"):
            file_path = file_elem.get("path") or file_elem.get("name", "")
            if not file_path:
                continue

            normalized_path = relativize(file_path, base_path)
            file_cov = files.setdefault(normalized_path, FileCoverage(path=normalized_path))

            for line in file_elem.findall("line"):
                try:
                    num = int(line.get("num", 0))
                    count = int(line.get("count", 0))
                except ValueError:
                    continue
                if num > 0:
                    file_cov.lines[num] = max(file_cov.lines.get(num, 0), count)

        return CoverageReport(source_format="clover", files=files)
