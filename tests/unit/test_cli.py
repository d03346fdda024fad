"""Tests for CLI module."""

import json
import logging
import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import pytest

from a3_analysis_action.cli import (
    build_tool_settings,
    format_output,
    log_outcome_summary,
    main,
    parse_args,
    run,
)
from a3_analysis_action.providers.loading import ProviderNotFoundError
from a3_analysis_action.testing.factories import (
    AnalysisItemResultFactory,
    RunOutcomeFactory,
)


def test_log_outcome_summary_success(caplog: pytest.LogCaptureFixture) -> None:
    """Logs success with checkmark symbol."""
    outcome = RunOutcomeFactory.build(status="success", exit_code=0)

    with caplog.at_level(logging.INFO):
        log_outcome_summary(logging.getLogger(), outcome)

    assert "Analysis Run Summary:" in caplog.text
    assert "✅ success (exit code 0)" in caplog.text
    assert "Failed items" not in caplog.text


def test_log_outcome_summary_failure(caplog: pytest.LogCaptureFixture) -> None:
    """Logs failed items, the rerun command and artifacts."""
    outcome = RunOutcomeFactory.build(
        status="failure",
        exit_code=1,
        failed_items=["A1", "B2"],
        rerun_command="alauncher p.apx -B -i A1 -i B2",
        artifacts=[Path("/ws/report.txt")],
    )

    with caplog.at_level(logging.INFO):
        log_outcome_summary(logging.getLogger(), outcome)

    assert "❌ failure (exit code 1)" in caplog.text
    assert "Failed items: A1, B2" in caplog.text
    assert "Rerun command: alauncher p.apx -B -i A1 -i B2" in caplog.text
    assert "Artifact: /ws/report.txt" in caplog.text


def test_log_outcome_summary_without_exit_code(
    caplog: pytest.LogCaptureFixture,
) -> None:
    outcome = RunOutcomeFactory.build(status="error", exit_code=None)

    with caplog.at_level(logging.INFO):
        log_outcome_summary(logging.getLogger(), outcome)

    assert "❗ error (exit code -)" in caplog.text


def test_format_output() -> None:
    """Formats items and totals for JSON output."""
    passed = AnalysisItemResultFactory.build(analysis_id="A1")
    failed = AnalysisItemResultFactory.build(analysis_id="B2", status="error")
    outcome = RunOutcomeFactory.build(
        status="failure",
        message="Analysis run failed.",
        exit_code=1,
        installed_build=7686572,
        items=[passed, failed],
        failed_items=["B2"],
        rerun_command="alauncher p.apx",
        artifacts=[Path("/ws/a.txt")],
    )

    output = format_output(outcome)

    assert output["status"] == "failure"
    assert output["total"] == 2
    assert output["failed"] == 1
    assert output["failed_items"] == ["B2"]
    assert output["installed_build"] == 7686572
    assert output["artifacts"] == ["/ws/a.txt"]
    assert [r["id"] for r in output["results"]] == ["A1", "B2"]
    assert output["results"][0]["failed"] is False
    assert output["results"][1]["failed"] is True
    assert output["results"][0]["type"] == "Stack"
    json.dumps(output)


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        args = parse_args(["--project-file", "p.apx"])

        assert args.provider == "local"
        assert args.pedantic_level == "apx"
        assert args.concurrency is None
        assert args.copy_html_reports is True
        assert args.disabled is False
        assert args.target_os is None

    def test_options(self) -> None:
        args = parse_args(
            [
                "--provider",
                "gitlab-ci",
                "--project-file",
                "p.apx",
                "--analysis-ids",
                "A1,B2",
                "--pedantic-level",
                "warning",
                "-j",
                "4",
                "--export-workspace",
                "--no-copy-html-reports",
                "--target-os",
                "windows",
            ]
        )

        assert args.provider == "gitlab-ci"
        assert args.analysis_ids == "A1,B2"
        assert args.pedantic_level == "warning"
        assert args.concurrency == 4
        assert args.export_workspace is True
        assert args.copy_html_reports is False
        assert args.target_os == "windows"

    def test_project_file_is_required(self) -> None:
        with pytest.raises(SystemExit):
            parse_args([])


class TestBuildToolSettings:
    """Tests for merging tool settings."""

    def test_flags_override_json(self) -> None:
        args = parse_args(
            [
                "--project-file",
                "p.apx",
                "--tool-config",
                '{"tool_path": "/a", "required_build": "Build: 1"}',
                "--tool-path",
                "/b",
            ]
        )

        settings = build_tool_settings(args)

        assert settings.tool_path == "/b"
        assert settings.required_build == "Build: 1"
        assert settings.package_dir is None

    def test_defaults_to_required_build(self) -> None:
        settings = build_tool_settings(parse_args(["--project-file", "p.apx"]))

        assert settings.required_build == "Build: 7686572"


class TestRun:
    """Tests for run function."""

    @pytest.fixture
    def environ(self, tmp_path: Path) -> dict[str, str]:
        """Environment of a local run in *tmp_path*."""
        return {"A3_WORKSPACE": str(tmp_path), "A3_RUN_ID": "r1", "A3_HOME": "/opt"}

    async def test_returns_zero_on_success(
        self,
        tmp_path: Path,
        environ: dict[str, str],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Builds the run configuration from provider and flags."""
        args = parse_args(
            ["--project-file", "p.apx", "--tool-path", "/opt/a3", "--target-os", "unix"]
        )

        with patch("a3_analysis_action.cli.AnalysisOrchestrator") as orchestrator_cls:
            orchestrator = Mock()
            orchestrator.run_analysis = AsyncMock(
                return_value=RunOutcomeFactory.build(status="success")
            )
            orchestrator_cls.return_value = orchestrator

            exit_code = await run("local", args, environ)

        assert exit_code == 0
        config = orchestrator.run_analysis.call_args.args[0]
        assert config.workspace == tmp_path
        assert config.run_id == "r1"
        assert config.tool.tool_path == "/opt/a3"
        assert config.target_os == "unix"
        assert config.environment["A3_HOME"] == "/opt"
        assert json.loads(capsys.readouterr().out)["status"] == "success"

    @pytest.mark.parametrize(
        ("status", "expected"),
        [("failure", 1), ("error", 1), ("skipped", 0)],
    )
    async def test_exit_code_follows_outcome(
        self, environ: dict[str, str], status: str, expected: int
    ) -> None:
        args = parse_args(["--project-file", "p.apx"])

        with patch("a3_analysis_action.cli.AnalysisOrchestrator") as orchestrator_cls:
            orchestrator = Mock()
            orchestrator.run_analysis = AsyncMock(
                return_value=RunOutcomeFactory.build(status=status)
            )
            orchestrator_cls.return_value = orchestrator

            exit_code = await run("local", args, environ)

        assert exit_code == expected

    async def test_unknown_provider_raises(self, environ: dict[str, str]) -> None:
        args = parse_args(["--project-file", "p.apx"])

        with pytest.raises(ProviderNotFoundError):
            await run("jenkins", args, environ)


def test_main_exits_with_two_on_configuration_errors(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(
        sys, "argv", ["a3-analysis-action", "--project-file", "p.apx"]
    )

    with (
        patch(
            "a3_analysis_action.cli.run",
            new_callable=AsyncMock,
            side_effect=ProviderNotFoundError("Provider 'x' not found"),
        ),
        pytest.raises(SystemExit) as exc_info,
    ):
        main()

    assert exc_info.value.code == 2


def test_main_exits_with_run_exit_code(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        sys, "argv", ["a3-analysis-action", "--project-file", "p.apx"]
    )

    with (
        patch("a3_analysis_action.cli.run", new_callable=AsyncMock, return_value=1),
        pytest.raises(SystemExit) as exc_info,
    ):
        main()

    assert exc_info.value.code == 1
