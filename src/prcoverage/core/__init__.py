"""Core module exports."""

from prcoverage.core.errors import (
    AuthError,
    ConfigError,
    ErrorCode,
    GitHubApiError,
    InternalError,
    PrCoverageError,
    PreconditionError,
)
from prcoverage.core.logging import (
    clear_run_id,
    configure_logging,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "AuthError",
    "ConfigError",
    "ErrorCode",
    "GitHubApiError",
    "InternalError",
    "PrCoverageError",
    "PreconditionError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_run_id",
    "set_run_id",
]
