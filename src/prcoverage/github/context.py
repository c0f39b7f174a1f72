"""Explicit description of the triggering GitHub event.

Built once from the Actions environment and passed to whatever needs the
repository, ref or pull request, instead of reading process state ad hoc.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from prcoverage.core.errors import ConfigError, PreconditionError

log = structlog.get_logger(__name__)

BRANCH_REF_PREFIX = "refs/heads/"


@dataclass(frozen=True, slots=True)
class PullRequestRef:
    number: int
    head_ref: str


@dataclass(frozen=True, slots=True)
class EventContext:
    """Repository, ref and (optional) pull request of the current run."""

    repo_owner: str
    repo_name: str
    event_ref: str = ""
    pull_request: PullRequestRef | None = None
    installation_id: int | None = None

    @property
    def repository(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"

    def reference_commit(self) -> str:
        """Ref to attach the check run to.

        The pull request head branch when there is one, otherwise the event
        ref without its 'refs/heads/' prefix.
        """
        if self.pull_request is not None:
            return self.pull_request.head_ref
        return self.event_ref.removeprefix(BRANCH_REF_PREFIX)

    def require_pull_request(self) -> PullRequestRef:
        if self.pull_request is None:
            raise PreconditionError.pull_request_missing()
        return self.pull_request

    @classmethod
    def from_payload(
        cls, repository: str, event_ref: str, payload: Mapping[str, Any]
    ) -> EventContext:
        """Build from 'owner/name' and a decoded webhook event payload."""
        owner, sep, name = repository.partition("/")
        if not sep or not owner or not name:
            raise PreconditionError.repository_missing()

        pull_request = None
        pr = payload.get("pull_request")
        if isinstance(pr, Mapping) and pr.get("number"):
            head = pr.get("head") or {}
            pull_request = PullRequestRef(
                number=int(pr["number"]), head_ref=str(head.get("ref", ""))
            )

        installation = payload.get("installation")
        installation_id = None
        if isinstance(installation, Mapping) and installation.get("id"):
            installation_id = int(installation["id"])

        return cls(
            repo_owner=owner,
            repo_name=name,
            event_ref=event_ref,
            pull_request=pull_request,
            installation_id=installation_id,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EventContext:
        """Build from GITHUB_REPOSITORY, GITHUB_REF and the GITHUB_EVENT_PATH payload."""
        env = os.environ if environ is None else environ
        payload: dict[str, Any] = {}
        event_path = env.get("GITHUB_EVENT_PATH")
        if event_path:
            path = Path(event_path)
            try:
                payload = json.loads(path.read_text())
            except FileNotFoundError as e:
                raise ConfigError.file_not_found(event_path) from e
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigError.parse_error(event_path, str(e)) from e
        else:
            log.debug("event_payload_missing", reason="GITHUB_EVENT_PATH unset")

        return cls.from_payload(
            env.get("GITHUB_REPOSITORY", ""), env.get("GITHUB_REF", ""), payload
        )
