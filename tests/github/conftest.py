"""Fixtures for GitHub client tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from prcoverage.github.context import EventContext, PullRequestRef


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replays routes."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def route(self, method: str, path: str, status_code: int = 200, **kwargs: Any) -> None:
        self.routes[(method, path)] = lambda _request: httpx.Response(status_code, **kwargs)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(404, json={"message": "Not Found"})
        return responder(request)

    def json_bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.content]


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def transport(handler: RecordingHandler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


@pytest.fixture
def pr_context() -> EventContext:
    return EventContext(
        repo_owner="octo",
        repo_name="repo",
        event_ref="refs/pull/9/merge",
        pull_request=PullRequestRef(number=9, head_ref="topic"),
    )


@pytest.fixture(scope="session")
def private_key_pem() -> str:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
