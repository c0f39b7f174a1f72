"""Line-range algebra over sorted integer sets.

A list of LineRange is canonical when it is sorted by start_line and no two
ranges overlap or touch (next.start_line > prev.end_line + 1).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LineRange:
    """Inclusive, 1-based span of source lines."""

    start_line: int
    end_line: int

    def __post_init__(self) -> None:
        if self.start_line < 1:
            raise ValueError(f"Line numbers are 1-based, got start_line={self.start_line}")
        if self.end_line < self.start_line:
            raise ValueError(f"end_line {self.end_line} precedes start_line {self.start_line}")

    def __len__(self) -> int:
        return self.end_line - self.start_line + 1

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start_line, self.end_line + 1))

    def to_dict(self) -> dict[str, int]:
        return {"start_line": self.start_line, "end_line": self.end_line}


def coalesce(numbers: Iterable[int]) -> list[LineRange]:
    """Compress line numbers into the minimal list of maximal contiguous ranges.

    Input may be unsorted and contain duplicates.

    coalesce([5, 1, 2, 3, 9, 2]) -> [1-3, 5-5, 9-9]
    """
    ranges: list[LineRange] = []
    start: int | None = None
    end = 0
    for n in sorted(set(numbers)):
        if start is None:
            start = end = n
        elif n == end + 1:
            end = n
        else:
            ranges.append(LineRange(start, end))
            start = end = n
    if start is not None:
        ranges.append(LineRange(start, end))
    return ranges


def intersect(a: list[LineRange], b: list[LineRange]) -> list[LineRange]:
    """Clip every range of ``a`` against every range of ``b``.

    Output follows ``a``'s order, then ``b``'s. Overlaps from different
    source pairs are kept distinct even when adjacent; the result is not
    re-coalesced.
    """
    overlaps: list[LineRange] = []
    for ra in a:
        for rb in b:
            lo = max(ra.start_line, rb.start_line)
            hi = min(ra.end_line, rb.end_line)
            if lo <= hi:
                overlaps.append(LineRange(lo, hi))
    return overlaps


def flatten(ranges: Iterable[LineRange]) -> list[int]:
    """Expand ranges back into the line numbers they cover."""
    return [n for r in ranges for n in r]


def is_canonical(ranges: list[LineRange]) -> bool:
    """True when ranges are sorted, disjoint and non-adjacent."""
    return all(nxt.start_line > prev.end_line + 1 for prev, nxt in zip(ranges, ranges[1:]))
