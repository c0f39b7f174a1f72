"""Tests for annotation building."""

from prcoverage.checks.builder import build_annotations
from prcoverage.checks.models import (
    MULTI_LINE_MESSAGE,
    SINGLE_LINE_MESSAGE,
    Annotation,
    AnnotationLevel,
)
from prcoverage.coverage.models import CoverageFile
from prcoverage.diff.ranges import LineRange


def _warning(path: str, start: int, end: int, message: str) -> Annotation:
    return Annotation(
        path=path,
        start_line=start,
        end_line=end,
        annotation_level=AnnotationLevel.WARNING,
        message=message,
    )


class TestBuildAnnotations:
    """Tests for build_annotations."""

    def test_only_changed_lines_of_changed_files(self) -> None:
        pr_files = {
            "file1.txt": [LineRange(132, 139), LineRange(1000, 1007)],
            "test/dir/file1.txt": [LineRange(22, 45)],
        }
        coverage_files = [
            CoverageFile(file_name="unchanged.txt", missing_line_numbers=(1, 2, 3)),
            CoverageFile(
                file_name="file1.txt",
                missing_line_numbers=(1, 2, 3, 132, 134, 135, 136, 1007, 1008),
            ),
            CoverageFile(file_name="test/dir/file1.txt", missing_line_numbers=(20, 21, 22)),
        ]

        annotations = build_annotations(coverage_files, pr_files)

        assert annotations == [
            _warning("file1.txt", 132, 132, SINGLE_LINE_MESSAGE),
            _warning("file1.txt", 134, 136, MULTI_LINE_MESSAGE),
            _warning("file1.txt", 1007, 1007, SINGLE_LINE_MESSAGE),
            _warning("test/dir/file1.txt", 22, 22, SINGLE_LINE_MESSAGE),
        ]

    def test_messages(self) -> None:
        assert SINGLE_LINE_MESSAGE == "This line is not covered by a test"
        assert MULTI_LINE_MESSAGE == "These lines are not covered by a test"

    def test_no_pull_request_files(self) -> None:
        coverage_files = [CoverageFile(file_name="a.py", missing_line_numbers=(1,))]
        assert build_annotations(coverage_files, {}) == []

    def test_file_in_pull_request_without_overlap(self) -> None:
        coverage_files = [CoverageFile(file_name="a.py", missing_line_numbers=(1, 2))]
        assert build_annotations(coverage_files, {"a.py": [LineRange(10, 20)]}) == []

    def test_file_with_no_added_lines(self) -> None:
        coverage_files = [CoverageFile(file_name="a.py", missing_line_numbers=(1, 2))]
        assert build_annotations(coverage_files, {"a.py": []}) == []

    def test_unsorted_missing_lines(self) -> None:
        coverage_files = [CoverageFile(file_name="a.py", missing_line_numbers=(7, 5, 6, 6))]
        annotations = build_annotations(coverage_files, {"a.py": [LineRange(1, 10)]})
        assert annotations == [_warning("a.py", 5, 7, MULTI_LINE_MESSAGE)]

    def test_follows_coverage_order(self) -> None:
        pr_files = {"a.py": [LineRange(1, 1)], "b.py": [LineRange(1, 1)]}
        coverage_files = [
            CoverageFile(file_name="b.py", missing_line_numbers=(1,)),
            CoverageFile(file_name="a.py", missing_line_numbers=(1,)),
        ]
        assert [a.path for a in build_annotations(coverage_files, pr_files)] == ["b.py", "a.py"]


class TestAnnotationToDict:
    def test_omits_unset_columns(self) -> None:
        data = _warning("a.py", 3, 4, MULTI_LINE_MESSAGE).to_dict()
        assert data == {
            "path": "a.py",
            "start_line": 3,
            "end_line": 4,
            "annotation_level": "warning",
            "message": MULTI_LINE_MESSAGE,
        }

    def test_includes_columns_when_set(self) -> None:
        annotation = Annotation(
            path="a.py",
            start_line=3,
            end_line=3,
            annotation_level=AnnotationLevel.NOTICE,
            message="m",
            start_column=1,
            end_column=8,
        )
        data = annotation.to_dict()
        assert data["start_column"] == 1
        assert data["end_column"] == 8
        assert data["annotation_level"] == "notice"
