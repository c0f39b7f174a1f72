"""Config module exports."""

from prcoverage.config.loader import load_config
from prcoverage.config.models import (
    SUPPORTED_FORMATS,
    CoverageConfig,
    DebugConfig,
    GitHubConfig,
    LoggingConfig,
    LogOutputConfig,
    PrCoverageConfig,
)

__all__ = [
    "load_config",
    "SUPPORTED_FORMATS",
    "CoverageConfig",
    "DebugConfig",
    "GitHubConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "PrCoverageConfig",
]
