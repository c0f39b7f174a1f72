"""GitHub credentials as httpx auth flows.

Two strategies:
- TokenAuth: a personal access token or the workflow GITHUB_TOKEN
- AppInstallationAuth: a GitHub App id + private key, exchanged for an
  installation access token on first use

resolve_auth() validates the inputs before anything touches the network.
"""

from __future__ import annotations

import time
from collections.abc import Generator

import httpx
import jwt
import structlog

from prcoverage.core.errors import AuthError

log = structlog.get_logger(__name__)

# Backdate iat to tolerate clock drift; GitHub caps exp at 10 minutes
_JWT_BACKDATE_SEC = 60
_JWT_LIFETIME_SEC = 600


class TokenAuth(httpx.Auth):
    def __init__(self, token: str) -> None:
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request


class AppInstallationAuth(httpx.Auth):
    """Authenticate as a GitHub App installation.

    On the first request the flow signs an app JWT, resolves the installation
    (from the event payload, or by asking GitHub for the repository's
    installation) and exchanges the JWT for an installation token. The token
    is reused for the rest of the run.
    """

    requires_response_body = True

    def __init__(
        self,
        app_id: str,
        private_key: str,
        *,
        base_url: str,
        repository: str,
        installation_id: int | None = None,
    ) -> None:
        self.app_id = app_id
        self._private_key = private_key
        self.base_url = base_url.rstrip("/")
        self.repository = repository
        self.installation_id = installation_id
        self._token: str | None = None

    def app_jwt(self, now: float | None = None) -> str:
        issued = int(now if now is not None else time.time()) - _JWT_BACKDATE_SEC
        payload = {"iat": issued, "exp": issued + _JWT_LIFETIME_SEC, "iss": self.app_id}
        return jwt.encode(payload, self._private_key, algorithm="RS256")

    def _app_request(self, method: str, path: str, app_jwt: str) -> httpx.Request:
        return httpx.Request(
            method,
            f"{self.base_url}{path}",
            headers={
                "Authorization": f"Bearer {app_jwt}",
                "Accept": "application/vnd.github+json",
            },
        )

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self._token is None:
            app_jwt = self.app_jwt()

            if self.installation_id is None:
                response = yield self._app_request(
                    "GET", f"/repos/{self.repository}/installation", app_jwt
                )
                if response.status_code != 200:
                    raise AuthError.installation_not_found(self.repository)
                try:
                    self.installation_id = int(response.json()["id"])
                except (KeyError, TypeError, ValueError) as e:
                    raise AuthError.installation_not_found(self.repository) from e

            response = yield self._app_request(
                "POST", f"/app/installations/{self.installation_id}/access_tokens", app_jwt
            )
            if response.status_code != 201:
                raise AuthError.token_exchange_failed(response.status_code, response.text)
            try:
                self._token = str(response.json()["token"])
            except (KeyError, TypeError, ValueError) as e:
                raise AuthError.token_exchange_failed(response.status_code, response.text) from e
            log.debug("installation_token_acquired", installation_id=self.installation_id)

        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request


def resolve_auth(
    token: str | None,
    app_id: str | None,
    private_key: str | None,
    *,
    base_url: str,
    repository: str,
    installation_id: int | None = None,
) -> httpx.Auth:
    """Pick the auth strategy; app credentials win when both pairs are given.

    Raises:
        AuthError: When there is neither a token nor an app_id/private_key pair.
    """
    if app_id and private_key:
        log.info("auth_strategy", strategy="github_app")
        return AppInstallationAuth(
            app_id,
            private_key,
            base_url=base_url,
            repository=repository,
            installation_id=installation_id,
        )
    if token:
        log.info("auth_strategy", strategy="token")
        return TokenAuth(token)
    raise AuthError.missing_credentials()
