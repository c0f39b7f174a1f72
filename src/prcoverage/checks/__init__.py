"""Check-run annotations: build them from coverage gaps, publish them in batches."""

from prcoverage.checks.builder import build_annotations
from prcoverage.checks.models import (
    MAX_ANNOTATIONS_PER_REQUEST,
    NO_OP_STATUS,
    Annotation,
    AnnotationLevel,
    CheckRunResponse,
    CheckRunStatus,
    Completed,
    Created,
    NotStarted,
)
from prcoverage.checks.publisher import CheckRunApi, CheckRunPublisher, chunk_annotations

__all__ = [
    "MAX_ANNOTATIONS_PER_REQUEST",
    "NO_OP_STATUS",
    "Annotation",
    "AnnotationLevel",
    "CheckRunApi",
    "CheckRunPublisher",
    "CheckRunResponse",
    "CheckRunStatus",
    "Completed",
    "Created",
    "NotStarted",
    "build_annotations",
    "chunk_annotations",
]
