"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (PRCOVERAGE__SECTION__KEY)
3. Repo YAML (.prcoverage.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    PRCOVERAGE__<SECTION>__<KEY>=<VALUE>

Examples:
    PRCOVERAGE__LOGGING__LEVEL=DEBUG
    PRCOVERAGE__COVERAGE__FORMAT=clover
    PRCOVERAGE__GITHUB__API_BASE_URL=https://ghe.example.com/api/v3
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

SUPPORTED_FORMATS: tuple[str, ...] = ("lcov", "clover", "go")

DEBUG_FLAGS: tuple[str, ...] = ("coverage", "pr_lines_added")


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        PRCOVERAGE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class GitHubConfig(BaseModel):
    """GitHub API and check-run configuration.

    Env vars:
        PRCOVERAGE__GITHUB__TOKEN: Token for token-based auth
        PRCOVERAGE__GITHUB__APP_ID: GitHub App id (with PRIVATE_KEY)
        PRCOVERAGE__GITHUB__PRIVATE_KEY: GitHub App PEM private key
        PRCOVERAGE__GITHUB__API_BASE_URL: REST API root (GHES support)
    """

    token: SecretStr | None = None
    app_id: str | None = None
    private_key: SecretStr | None = None
    api_base_url: str = Field(
        default="https://api.github.com",
        description="REST API root. GitHub Enterprise uses https://<host>/api/v3.",
    )
    check_name: str = Field(default="Annotate", description="Check run display name.")
    check_title: str = "Coverage Tool"
    check_summary: str = "Missing Coverage"

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        if not v:
            return "https://api.github.com"
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"API base URL must be http(s): {v}")
        return v.rstrip("/")

    @field_validator("token", "private_key", mode="before")
    @classmethod
    def empty_as_none(cls, v: object) -> object:
        # Actions passes unset inputs as empty strings
        return v or None

    @field_validator("app_id", mode="before")
    @classmethod
    def empty_app_id_as_none(cls, v: object) -> object:
        if v in ("", None):
            return None
        return str(v)


class CoverageConfig(BaseModel):
    """Coverage report input.

    Env vars:
        PRCOVERAGE__COVERAGE__PATH: Coverage report location
        PRCOVERAGE__COVERAGE__FORMAT: lcov | clover | go
        PRCOVERAGE__COVERAGE__WORKSPACE: Base path for relativizing report paths
    """

    path: str | None = Field(default=None, description="Coverage report file. Required to run.")
    format: str = Field(default="lcov", description="Report format: lcov, clover or go.")
    workspace: str | None = Field(
        default=None,
        description="Base path stripped from absolute paths in the report. "
        "Defaults to GITHUB_WORKSPACE when unset.",
    )
    go_mod: str = Field(
        default="go.mod",
        description="go.mod used to strip the module prefix from Go profile paths.",
    )

    @field_validator("format", mode="before")
    @classmethod
    def validate_format(cls, v: object) -> object:
        if v in ("", None):
            return "lcov"
        if v not in SUPPORTED_FORMATS:
            raise ValueError(f"format must be one of {','.join(SUPPORTED_FORMATS)}")
        return v


class DebugConfig(BaseModel):
    """Debug switches that log intermediate pipeline data.

    Env vars:
        PRCOVERAGE__DEBUG__COVERAGE: Log each reduced coverage record
        PRCOVERAGE__DEBUG__PR_LINES_ADDED: Log the added-line ranges per file
    """

    coverage: bool = False
    pr_lines_added: bool = False

    @classmethod
    def from_flags(cls, flags: str | None) -> "DebugConfig":
        """Build from a comma separated flag list (e.g. 'coverage,pr_lines_added').

        Unknown flags are ignored.
        """
        if not flags:
            return cls()
        parts = {part.strip() for part in flags.split(",") if part.strip()}
        return cls(**{name: True for name in DEBUG_FLAGS if name in parts})


class PrCoverageConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    debug: DebugConfig = Field(default_factory=DebugConfig)
