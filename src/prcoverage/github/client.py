"""Async GitHub REST client for the calls this tool makes.

- GET  /repos/{owner}/{repo}/pulls/{number}   (diff media type)
- POST /repos/{owner}/{repo}/check-runs
- PATCH /repos/{owner}/{repo}/check-runs/{id}

No retries: any failure surfaces as GitHubApiError.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx
import structlog

from prcoverage import __version__
from prcoverage.checks.models import CheckRunResponse
from prcoverage.core.errors import GitHubApiError
from prcoverage.github.auth import resolve_auth
from prcoverage.github.context import EventContext

log = structlog.get_logger(__name__)

API_VERSION = "2022-11-28"
DEFAULT_BASE_URL = "https://api.github.com"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"


class GitHubClient:
    """GitHub REST calls bound to one repository's event context.

    Credentials are validated on construction, before any network access.
    """

    def __init__(
        self,
        context: EventContext,
        *,
        token: str | None = None,
        app_id: str | None = None,
        private_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.context = context
        self.base_url = base_url
        auth = resolve_auth(
            token,
            app_id,
            private_key,
            base_url=base_url,
            repository=context.repository,
            installation_id=context.installation_id,
        )
        self._client = httpx.AsyncClient(
            base_url=base_url,
            auth=auth,
            transport=transport,
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": f"prcoverage/{__version__}",
            },
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.context.repo_owner}/{self.context.repo_name}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise GitHubApiError.transport(method, path, str(e) or type(e).__name__) from e
        if response.is_error:
            raise GitHubApiError.request_failed(method, path, response.status_code, response.text)
        return response

    async def get_pull_request_diff(self) -> str:
        """Fetch the unified diff of the event's pull request.

        Raises:
            PreconditionError: When the event is not a pull request.
        """
        pr = self.context.require_pull_request()
        log.info("pull_request_diff_fetch", repository=self.context.repository, number=pr.number)
        response = await self._request(
            "GET",
            f"{self._repo_path}/pulls/{pr.number}",
            headers={"Accept": DIFF_MEDIA_TYPE},
        )
        return response.text

    @staticmethod
    def _check_run_response(response: httpx.Response) -> CheckRunResponse:
        request = response.request
        try:
            data = response.json()
            output = data.get("output") or {}
            return CheckRunResponse(
                check_run_id=int(data["id"]),
                status_code=response.status_code,
                annotations_url=output.get("annotations_url"),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise GitHubApiError.unexpected_response(
                request.method, request.url.path, response.status_code, repr(e)
            ) from e

    async def create_check_run(self, params: dict[str, Any]) -> CheckRunResponse:
        response = await self._request("POST", f"{self._repo_path}/check-runs", json=params)
        return self._check_run_response(response)

    async def update_check_run(self, check_run_id: int, params: dict[str, Any]) -> CheckRunResponse:
        response = await self._request(
            "PATCH", f"{self._repo_path}/check-runs/{check_run_id}", json=params
        )
        return self._check_run_response(response)
