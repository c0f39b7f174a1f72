"""GitHub integration: event context, authentication, REST client."""

from prcoverage.github.auth import AppInstallationAuth, TokenAuth, resolve_auth
from prcoverage.github.client import GitHubClient
from prcoverage.github.context import EventContext, PullRequestRef

__all__ = [
    "AppInstallationAuth",
    "EventContext",
    "GitHubClient",
    "PullRequestRef",
    "TokenAuth",
    "resolve_auth",
]
