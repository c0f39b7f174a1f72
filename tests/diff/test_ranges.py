"""Tests for line-range coalescing and intersection."""

import random

import pytest

from prcoverage.diff.ranges import LineRange, coalesce, flatten, intersect, is_canonical


def _pairs(ranges: list[LineRange]) -> list[tuple[int, int]]:
    return [(r.start_line, r.end_line) for r in ranges]


class TestLineRange:
    """LineRange value tests."""

    def test_rejects_zero_line(self) -> None:
        with pytest.raises(ValueError, match="1-based"):
            LineRange(0, 3)

    def test_rejects_inverted_bounds(self) -> None:
        with pytest.raises(ValueError, match="precedes"):
            LineRange(5, 4)

    def test_len_and_iter(self) -> None:
        r = LineRange(3, 6)
        assert len(r) == 4
        assert list(r) == [3, 4, 5, 6]

    def test_to_dict(self) -> None:
        assert LineRange(7, 9).to_dict() == {"start_line": 7, "end_line": 9}


class TestCoalesce:
    """Tests for coalesce."""

    def test_empty(self) -> None:
        assert coalesce([]) == []

    def test_single_line(self) -> None:
        assert _pairs(coalesce([5])) == [(5, 5)]

    def test_consecutive_run(self) -> None:
        assert _pairs(coalesce([10, 11, 12, 13])) == [(10, 13)]

    def test_mixed_ranges_and_singles(self) -> None:
        assert _pairs(coalesce([1, 2, 3, 5, 7, 8, 9])) == [(1, 3), (5, 5), (7, 9)]

    def test_gap_of_two_is_not_merged(self) -> None:
        assert _pairs(coalesce([1, 3])) == [(1, 1), (3, 3)]

    def test_unsorted_with_duplicates(self) -> None:
        assert _pairs(coalesce([9, 2, 1, 2, 3, 9, 5])) == [(1, 3), (5, 5), (9, 9)]

    def test_accepts_any_iterable(self) -> None:
        assert _pairs(coalesce(n for n in (4, 6, 5))) == [(4, 6)]

    def test_output_is_canonical(self) -> None:
        rng = random.Random(1234)
        numbers = [rng.randint(1, 200) for _ in range(150)]
        assert is_canonical(coalesce(numbers))

    def test_idempotent(self) -> None:
        rng = random.Random(99)
        numbers = {rng.randint(1, 500) for _ in range(300)}
        once = coalesce(numbers)
        assert coalesce(flatten(once)) == once

    def test_covers_exactly_the_input(self) -> None:
        numbers = {4, 5, 6, 20, 22, 23}
        assert set(flatten(coalesce(numbers))) == numbers


class TestIntersect:
    """Tests for intersect."""

    def test_empty_left(self) -> None:
        assert intersect([], [LineRange(1, 10)]) == []

    def test_empty_right(self) -> None:
        assert intersect([LineRange(1, 10)], []) == []

    def test_disjoint(self) -> None:
        assert intersect([LineRange(1, 3)], [LineRange(5, 9)]) == []

    def test_clips_to_overlap(self) -> None:
        assert _pairs(intersect([LineRange(1008, 1010)], [LineRange(1000, 1008)])) == [
            (1008, 1008)
        ]

    def test_one_range_hits_several(self) -> None:
        a = [LineRange(1, 100)]
        b = [LineRange(5, 6), LineRange(50, 60), LineRange(99, 120)]
        assert _pairs(intersect(a, b)) == [(5, 6), (50, 60), (99, 100)]

    def test_ordered_by_first_argument(self) -> None:
        a = [LineRange(1, 2), LineRange(10, 12)]
        b = [LineRange(11, 11), LineRange(2, 2)]
        assert _pairs(intersect(a, b)) == [(2, 2), (11, 11)]

    def test_adjacent_overlaps_stay_distinct(self) -> None:
        # Two provenance-distinct overlaps that touch are not merged
        a = [LineRange(1, 10)]
        b = [LineRange(3, 4), LineRange(5, 6)]
        assert _pairs(intersect(a, b)) == [(3, 4), (5, 6)]

    def test_commutative_as_sets(self) -> None:
        rng = random.Random(7)
        a = coalesce(rng.randint(1, 300) for _ in range(80))
        b = coalesce(rng.randint(1, 300) for _ in range(80))
        assert set(_pairs(intersect(a, b))) == set(_pairs(intersect(b, a)))

    def test_results_contained_in_both_inputs(self) -> None:
        rng = random.Random(21)
        a = coalesce(rng.randint(1, 300) for _ in range(60))
        b = coalesce(rng.randint(1, 300) for _ in range(60))
        for r in intersect(a, b):
            assert any(x.start_line <= r.start_line and r.end_line <= x.end_line for x in a)
            assert any(x.start_line <= r.start_line and r.end_line <= x.end_line for x in b)


class TestIsCanonical:
    def test_adjacent_ranges_are_not_canonical(self) -> None:
        assert not is_canonical([LineRange(1, 2), LineRange(3, 4)])

    def test_gapped_ranges_are_canonical(self) -> None:
        assert is_canonical([LineRange(1, 2), LineRange(4, 4)])
