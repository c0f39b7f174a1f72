"""prcoverage error types with typed error codes.

Error code ranges:
- 1xxx: Auth
- 2xxx: Config
- 3xxx: Protocol precondition
- 4xxx: GitHub API / transport
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Auth (1xxx)
    AUTH_MISSING_CREDENTIALS = 1001
    AUTH_INSTALLATION_NOT_FOUND = 1002
    AUTH_TOKEN_EXCHANGE_FAILED = 1003

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004

    # Precondition (3xxx)
    PULL_REQUEST_MISSING = 3001
    REPOSITORY_MISSING = 3002

    # GitHub API (4xxx)
    API_REQUEST_FAILED = 4001
    API_TRANSPORT_ERROR = 4002
    API_UNEXPECTED_RESPONSE = 4003

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class PrCoverageError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class AuthError(PrCoverageError):
    """Credential and authentication errors."""

    @classmethod
    def missing_credentials(cls) -> "AuthError":
        return cls(
            code=ErrorCode.AUTH_MISSING_CREDENTIALS,
            message="Either a token or both app_id and private_key are required",
        )

    @classmethod
    def installation_not_found(cls, repository: str) -> "AuthError":
        return cls(
            code=ErrorCode.AUTH_INSTALLATION_NOT_FOUND,
            message=f"No GitHub App installation found for {repository}",
            details={"repository": repository},
        )

    @classmethod
    def token_exchange_failed(cls, status_code: int, body: str) -> "AuthError":
        return cls(
            code=ErrorCode.AUTH_TOKEN_EXCHANGE_FAILED,
            message=f"Installation token exchange failed with HTTP {status_code}",
            details={"status_code": status_code, "body": body[:500]},
        )


class ConfigError(PrCoverageError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class PreconditionError(PrCoverageError):
    """The run context cannot satisfy a required precondition."""

    @classmethod
    def pull_request_missing(cls) -> "PreconditionError":
        return cls(
            code=ErrorCode.PULL_REQUEST_MISSING,
            message="Pull request number is missing; not running in a pull request context",
        )

    @classmethod
    def repository_missing(cls) -> "PreconditionError":
        return cls(
            code=ErrorCode.REPOSITORY_MISSING,
            message="Repository is missing; expected GITHUB_REPOSITORY as owner/name",
        )


class GitHubApiError(PrCoverageError):
    """Failed GitHub API calls. Never retried."""

    @classmethod
    def request_failed(
        cls, method: str, url: str, status_code: int, body: str
    ) -> "GitHubApiError":
        return cls(
            code=ErrorCode.API_REQUEST_FAILED,
            message=f"{method} {url} failed with HTTP {status_code}",
            details={"method": method, "url": url, "status_code": status_code, "body": body[:500]},
        )

    @classmethod
    def transport(cls, method: str, url: str, reason: str) -> "GitHubApiError":
        return cls(
            code=ErrorCode.API_TRANSPORT_ERROR,
            message=f"{method} {url} failed: {reason}",
            details={"method": method, "url": url, "reason": reason},
        )

    @classmethod
    def unexpected_response(
        cls, method: str, url: str, status_code: int, reason: str
    ) -> "GitHubApiError":
        return cls(
            code=ErrorCode.API_UNEXPECTED_RESPONSE,
            message=f"{method} {url} returned an unusable body (HTTP {status_code}): {reason}",
            details={"method": method, "url": url, "status_code": status_code, "reason": reason},
        )


class InternalError(PrCoverageError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
