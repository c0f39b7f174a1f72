"""Check-run annotation records and publish lifecycle phases."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

# Platform limit on output.annotations per create/update request
MAX_ANNOTATIONS_PER_REQUEST = 50

# Reported by publish() when there is nothing to annotate
NO_OP_STATUS = 0

SINGLE_LINE_MESSAGE = "This line is not covered by a test"
MULTI_LINE_MESSAGE = "These lines are not covered by a test"


class AnnotationLevel(StrEnum):
    NOTICE = "notice"
    WARNING = "warning"
    FAILURE = "failure"


class CheckRunStatus(StrEnum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class Annotation:
    """One inline annotation, shaped like a check-run output annotation."""

    path: str
    start_line: int
    end_line: int
    annotation_level: AnnotationLevel
    message: str
    start_column: int | None = None
    end_column: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "path": self.path,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "annotation_level": str(self.annotation_level),
            "message": self.message,
        }
        # Columns are only valid on single-line annotations; omit when unset
        if self.start_column is not None:
            data["start_column"] = self.start_column
        if self.end_column is not None:
            data["end_column"] = self.end_column
        return data


@dataclass(frozen=True, slots=True)
class CheckRunResponse:
    """What the publisher needs back from a create/update call."""

    check_run_id: int
    status_code: int
    annotations_url: str | None = None


# Publish lifecycle phases. The publish loop checks the phase before each call.


@dataclass(frozen=True, slots=True)
class NotStarted:
    pass


@dataclass(frozen=True, slots=True)
class Created:
    check_run_id: int


@dataclass(frozen=True, slots=True)
class Completed:
    check_run_id: int


PublishPhase = NotStarted | Created | Completed
