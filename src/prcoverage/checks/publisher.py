"""Publish annotations as a single check run, in batches.

A check run is one mutable resource: the first batch creates it, later
batches update it by id. Batches go out strictly in order since every
update depends on the id returned by the create call. The run is marked
completed/success with the last batch; coverage gaps never fail the check.

Lifecycle:
    NotStarted --create--> Created(id) --update*--> Completed(id)
    (a single batch goes straight from NotStarted to Completed)
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

import structlog

from prcoverage.checks.models import (
    MAX_ANNOTATIONS_PER_REQUEST,
    NO_OP_STATUS,
    Annotation,
    CheckRunResponse,
    CheckRunStatus,
    Completed,
    Created,
    NotStarted,
    PublishPhase,
)
from prcoverage.core.errors import InternalError

log = structlog.get_logger(__name__)

CONCLUSION = "success"


class CheckRunApi(Protocol):
    """The two check-run calls the publisher drives."""

    async def create_check_run(self, params: dict[str, Any]) -> CheckRunResponse: ...

    async def update_check_run(
        self, check_run_id: int, params: dict[str, Any]
    ) -> CheckRunResponse: ...


def chunk_annotations(
    annotations: Sequence[Annotation], size: int = MAX_ANNOTATIONS_PER_REQUEST
) -> list[list[Annotation]]:
    """Split annotations into consecutive, order-preserving batches of at most size."""
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return [list(annotations[i : i + size]) for i in range(0, len(annotations), size)]


class CheckRunPublisher:
    """Drives the create/update/complete lifecycle of one check run."""

    def __init__(
        self,
        api: CheckRunApi,
        *,
        name: str = "Annotate",
        title: str = "Coverage Tool",
        summary: str = "Missing Coverage",
        chunk_size: int = MAX_ANNOTATIONS_PER_REQUEST,
    ) -> None:
        self.api = api
        self.name = name
        self.title = title
        self.summary = summary
        self.chunk_size = chunk_size
        self.phase: PublishPhase = NotStarted()

    def _params(self, head_sha: str, batch: list[Annotation], last: bool) -> dict[str, Any]:
        params: dict[str, Any] = {
            "name": self.name,
            "head_sha": head_sha,
            "status": str(CheckRunStatus.COMPLETED if last else CheckRunStatus.IN_PROGRESS),
            "output": {
                "title": self.title,
                "summary": self.summary,
                "annotations": [a.to_dict() for a in batch],
            },
        }
        if last:
            params["conclusion"] = CONCLUSION
        return params

    async def publish(self, reference_commit_hash: str, annotations: Sequence[Annotation]) -> int:
        """Publish all annotations; return the HTTP status of the last call.

        Returns NO_OP_STATUS without any network call when there is nothing
        to annotate. Any failing call aborts the remaining batches; what was
        already published stays on the check run.
        """
        if not annotations:
            log.info("check_run_skipped", reason="no annotations")
            return NO_OP_STATUS

        batches = chunk_annotations(annotations, self.chunk_size)
        self.phase = NotStarted()
        last_status = NO_OP_STATUS

        for index, batch in enumerate(batches):
            last = index == len(batches) - 1
            params = self._params(reference_commit_hash, batch, last)
            phase = self.phase

            if isinstance(phase, NotStarted):
                response = await self.api.create_check_run(params)
                check_run_id = response.check_run_id
                action = "create"
            elif isinstance(phase, Created):
                response = await self.api.update_check_run(phase.check_run_id, params)
                check_run_id = phase.check_run_id
                action = "update"
            else:
                raise InternalError.unexpected(
                    "check run already completed", batch=index, batches=len(batches)
                )

            self.phase = Completed(check_run_id) if last else Created(check_run_id)
            last_status = response.status_code
            log.info(
                "check_run_batch_published",
                action=action,
                batch=index + 1,
                batches=len(batches),
                annotations=len(batch),
                status_code=response.status_code,
                annotations_url=response.annotations_url,
            )

        return last_status
