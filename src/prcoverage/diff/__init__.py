"""Diff/coverage correlation primitives.

- ranges: coalesce line numbers into canonical ranges, intersect range lists
- parser: extract added new-file lines per file from unified diff text
"""

from prcoverage.diff.parser import (
    DiffFileLines,
    PullRequestFiles,
    build_pull_request_files,
    parse_diff,
)
from prcoverage.diff.ranges import LineRange, coalesce, flatten, intersect, is_canonical

__all__ = [
    "DiffFileLines",
    "LineRange",
    "PullRequestFiles",
    "build_pull_request_files",
    "coalesce",
    "flatten",
    "intersect",
    "is_canonical",
    "parse_diff",
]
