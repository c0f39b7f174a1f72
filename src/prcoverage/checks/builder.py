"""Turn coverage gaps on changed lines into check-run annotations."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from prcoverage.checks.models import (
    MULTI_LINE_MESSAGE,
    SINGLE_LINE_MESSAGE,
    Annotation,
    AnnotationLevel,
)
from prcoverage.coverage.models import CoverageFile
from prcoverage.diff.parser import PullRequestFiles
from prcoverage.diff.ranges import coalesce, intersect

log = structlog.get_logger(__name__)


def build_annotations(
    coverage_files: Iterable[CoverageFile],
    pull_request_files: PullRequestFiles,
) -> list[Annotation]:
    """Annotate uncovered lines that the pull request added.

    Files the pull request did not touch are skipped. Output follows
    coverage_files order, then intersection order within each file.
    """
    annotations: list[Annotation] = []
    for current in coverage_files:
        pr_ranges = pull_request_files.get(current.file_name)
        if pr_ranges is None:
            continue

        missing_ranges = coalesce(current.missing_line_numbers)
        for overlap in intersect(missing_ranges, pr_ranges):
            message = (
                MULTI_LINE_MESSAGE if overlap.end_line > overlap.start_line else SINGLE_LINE_MESSAGE
            )
            annotations.append(
                Annotation(
                    path=current.file_name,
                    start_line=overlap.start_line,
                    end_line=overlap.end_line,
                    annotation_level=AnnotationLevel.WARNING,
                    message=message,
                )
            )

    log.info("annotations_built", count=len(annotations))
    return annotations
