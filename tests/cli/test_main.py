"""Tests for the prcov CLI."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from prcoverage import __version__
from prcoverage.cli.main import cli
from prcoverage.ops import AnnotateResult

runner = CliRunner()


@pytest.fixture
def action_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Minimal GitHub Actions environment for a pull_request event."""
    event = tmp_path / "event.json"
    event.write_text(json.dumps({"pull_request": {"number": 5, "head": {"ref": "topic"}}}))
    report = tmp_path / "lcov.info"
    report.write_text("SF:a.py\nDA:1,0\nend_of_record\n")
    for key in ("INPUT_TOKEN", "INPUT_APP_ID", "INPUT_PRIVATE_KEY", "GITHUB_WORKSPACE"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return {
        "GITHUB_REPOSITORY": "octo/repo",
        "GITHUB_REF": "refs/pull/5/merge",
        "GITHUB_EVENT_PATH": str(event),
        "INPUT_COVERAGE_FILE_PATH": str(report),
    }


class TestCli:
    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_annotate(self) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "annotate" in result.output


class TestAnnotateCommand:
    def test_missing_credentials_fails(self, action_env: dict[str, str]) -> None:
        result = runner.invoke(cli, ["annotate"], env=action_env)
        assert result.exit_code == 1
        assert "Either a token or both app_id and private_key are required" in result.output

    def test_unsupported_format_rejected(self, action_env: dict[str, str]) -> None:
        result = runner.invoke(cli, ["annotate", "--coverage-format", "jacoco"], env=action_env)
        assert result.exit_code == 2

    def test_runs_pipeline_with_inputs(self, action_env: dict[str, str]) -> None:
        env = {**action_env, "INPUT_TOKEN": "t0k", "INPUT_DEBUG": "coverage"}

        async def fake_annotate(config, context, github):  # type: ignore[no-untyped-def]
            assert config.github.token.get_secret_value() == "t0k"
            assert config.coverage.path == env["INPUT_COVERAGE_FILE_PATH"]
            assert config.debug.coverage is True
            assert context.reference_commit() == "topic"
            return AnnotateResult(files_parsed=1, annotations=(), status_code=0)

        with patch("prcoverage.cli.main.annotate_pull_request", fake_annotate):
            result = runner.invoke(cli, ["annotate"], env=env)

        assert result.exit_code == 0, result.output

    def test_precondition_failure_outside_pull_request(
        self, action_env: dict[str, str], tmp_path: Path
    ) -> None:
        push_event = tmp_path / "push.json"
        push_event.write_text("{}")
        env = {**action_env, "INPUT_TOKEN": "t0k", "GITHUB_EVENT_PATH": str(push_event)}

        result = runner.invoke(cli, ["annotate"], env=env)

        assert result.exit_code == 1
        assert "Pull request number is missing" in result.output
