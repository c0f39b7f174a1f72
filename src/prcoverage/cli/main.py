"""prcoverage CLI - prcov command."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import click
import structlog
from rich.console import Console
from rich.table import Table

from prcoverage import __version__
from prcoverage.config.loader import load_config
from prcoverage.config.models import SUPPORTED_FORMATS, DebugConfig, PrCoverageConfig
from prcoverage.core.errors import PrCoverageError
from prcoverage.core.logging import clear_run_id, configure_logging, set_run_id
from prcoverage.coverage.models import CoverageParseError
from prcoverage.github.client import GitHubClient
from prcoverage.github.context import EventContext
from prcoverage.ops import AnnotateResult, annotate_pull_request

log = structlog.get_logger(__name__)

console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__, prog_name="prcov")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """prcoverage - annotate pull requests with uncovered added lines."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


def _overrides(**sections: dict[str, Any]) -> dict[str, Any]:
    """Drop unset options so env vars and YAML still apply underneath."""
    result: dict[str, Any] = {}
    for section, values in sections.items():
        present = {k: v for k, v in values.items() if v not in (None, "")}
        if present:
            result[section] = present
    return result


async def _run(config: PrCoverageConfig, context: EventContext) -> AnnotateResult:
    github = config.github
    async with GitHubClient(
        context,
        token=github.token.get_secret_value() if github.token else None,
        app_id=github.app_id,
        private_key=github.private_key.get_secret_value() if github.private_key else None,
        base_url=github.api_base_url,
    ) as client:
        return await annotate_pull_request(config, context, client)


def _print_result(result: AnnotateResult) -> None:
    if not result.annotations:
        console.print("[green]No uncovered lines in this pull request's changes[/green]")
        return
    table = Table(title=f"Uncovered added lines ({len(result.annotations)})")
    table.add_column("File")
    table.add_column("Lines", justify="right")
    for annotation in result.annotations:
        lines = (
            str(annotation.start_line)
            if annotation.start_line == annotation.end_line
            else f"{annotation.start_line}-{annotation.end_line}"
        )
        table.add_row(annotation.path, lines)
    console.print(table)
    console.print(f"Check run published (HTTP {result.status_code})")


@cli.command("annotate")
@click.option(
    "--coverage-file",
    envvar="INPUT_COVERAGE_FILE_PATH",
    type=click.Path(path_type=Path),
    help="Coverage report to read",
)
@click.option(
    "--coverage-format",
    envvar="INPUT_COVERAGE_FORMAT",
    type=click.Choice(SUPPORTED_FORMATS),
    default=None,
    help="Coverage report format (default: lcov)",
)
@click.option("--token", envvar="INPUT_TOKEN", help="GitHub token")
@click.option("--app-id", envvar="INPUT_APP_ID", help="GitHub App id")
@click.option("--private-key", envvar="INPUT_PRIVATE_KEY", help="GitHub App private key (PEM)")
@click.option("--api-base-url", envvar="INPUT_API_BASE_URL", help="GitHub REST API root")
@click.option(
    "--workspace",
    envvar="GITHUB_WORKSPACE",
    type=click.Path(path_type=Path),
    help="Base path stripped from report paths",
)
@click.option(
    "--debug",
    "debug_flags",
    envvar="INPUT_DEBUG",
    help="Comma separated debug switches: coverage,pr_lines_added",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file (default: ./.prcoverage.yaml)",
)
def annotate_command(
    coverage_file: Path | None,
    coverage_format: str | None,
    token: str | None,
    app_id: str | None,
    private_key: str | None,
    api_base_url: str | None,
    workspace: Path | None,
    debug_flags: str | None,
    config_path: Path | None,
) -> None:
    """Annotate the current pull request with coverage gaps on added lines.

    Reads the event from GITHUB_REPOSITORY, GITHUB_REF and GITHUB_EVENT_PATH.
    """
    run_id = set_run_id()
    try:
        kwargs = _overrides(
            github={
                "token": token,
                "app_id": app_id,
                "private_key": private_key,
                "api_base_url": api_base_url,
            },
            coverage={
                "path": str(coverage_file) if coverage_file else None,
                "format": coverage_format,
                "workspace": str(workspace) if workspace else None,
            },
        )
        if debug_flags:
            kwargs["debug"] = DebugConfig.from_flags(debug_flags).model_dump(exclude_defaults=True)

        config = load_config(config_path=config_path, **kwargs)
        # -v keeps the debug console setup from the group callback
        if not click.get_current_context().find_root().obj.get("verbose"):
            configure_logging(config=config.logging)
        context = EventContext.from_env()
        log.info("annotate_start", repository=context.repository, run_id=run_id)
        result = asyncio.run(_run(config, context))
    except (PrCoverageError, CoverageParseError) as e:
        log.error("annotate_failed", error=str(e))
        raise click.ClickException(str(e)) from e
    finally:
        clear_run_id()

    _print_result(result)


if __name__ == "__main__":
    cli()
