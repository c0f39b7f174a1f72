"""End-to-end annotate run: coverage report + pull request diff -> check run."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import structlog

from prcoverage.checks.builder import build_annotations
from prcoverage.checks.models import Annotation
from prcoverage.checks.publisher import CheckRunApi, CheckRunPublisher
from prcoverage.config.models import PrCoverageConfig
from prcoverage.core.errors import ConfigError
from prcoverage.coverage.models import to_coverage_files
from prcoverage.coverage.parsers import parse_coverage
from prcoverage.diff.parser import build_pull_request_files, parse_diff
from prcoverage.github.context import EventContext

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AnnotateResult:
    files_parsed: int
    annotations: tuple[Annotation, ...]
    status_code: int


class PullRequestSource(CheckRunApi, Protocol):
    """What the run needs from GitHub: the diff and the check-run calls."""

    async def get_pull_request_diff(self) -> str: ...


async def annotate_pull_request(
    config: PrCoverageConfig,
    context: EventContext,
    github: PullRequestSource,
) -> AnnotateResult:
    """Annotate the pull request's added lines that the coverage report misses.

    Raises:
        ConfigError: When no coverage path is configured.
        CoverageParseError: When the report cannot be read.
        PreconditionError: When the event is not a pull request.
        GitHubApiError: When a GitHub call fails (remaining batches are skipped).
    """
    if not config.coverage.path:
        raise ConfigError.missing_required("coverage.path")
    # Fail before parsing anything when there is no pull request to annotate
    context.require_pull_request()

    workspace = Path(config.coverage.workspace) if config.coverage.workspace else None
    log.info("workspace", path=str(workspace) if workspace else None)

    report = parse_coverage(
        Path(config.coverage.path),
        config.coverage.format,
        base_path=workspace,
        go_mod=Path(config.coverage.go_mod),
    )
    summary = report.summary
    log.info(
        "coverage_parsed",
        format=report.source_format,
        files=summary.files,
        total_lines=summary.lines_found,
        covered_lines=summary.lines_hit,
    )

    coverage_files = to_coverage_files(report)
    if config.debug.coverage:
        for item in coverage_files:
            log.info("coverage_file", data=json.dumps(item.to_dict()))

    diff_text = await github.get_pull_request_diff()
    pull_request_files = build_pull_request_files(parse_diff(diff_text))
    log.info("pull_request_diff_parsed", files=len(pull_request_files))
    if config.debug.pr_lines_added:
        log.info(
            "pr_lines_added",
            data=json.dumps(
                {name: [r.to_dict() for r in ranges] for name, ranges in pull_request_files.items()}
            ),
        )

    annotations = build_annotations(coverage_files, pull_request_files)

    publisher = CheckRunPublisher(
        github,
        name=config.github.check_name,
        title=config.github.check_title,
        summary=config.github.check_summary,
    )
    status_code = await publisher.publish(context.reference_commit(), annotations)
    log.info("annotation_done", annotations=len(annotations), status_code=status_code)

    return AnnotateResult(
        files_parsed=summary.files,
        annotations=tuple(annotations),
        status_code=status_code,
    )
