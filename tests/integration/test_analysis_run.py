"""End-to-end analysis runs against a fake launcher."""

import io
import json
import os
import tarfile
from pathlib import Path

import pytest

from a3_analysis_action.cli import parse_args, run
from a3_analysis_action.compatibility import REQUIRED_BUILD
from a3_analysis_action.models.config import AnalysisConfig, ToolSettings
from a3_analysis_action.orchestrator import AnalysisOrchestrator
from a3_analysis_action.paths import TargetOS
from a3_analysis_action.process import SubprocessRunner
from a3_analysis_action.testing.documents import (
    result_document,
    result_node,
    stack_body,
    timing_body,
)
from a3_analysis_action.testing.launcher import launcher_script, write_launcher

RESULTS = result_document(
    result_node(analysis_id="stack_main", body=stack_body([("stack0", "120")])),
    result_node(analysis_id="wcet_main", analysis_type="aiT", body=timing_body()),
)
FAILED_RESULTS = result_document(
    result_node(analysis_id="stack_main", status="error", error_count="2"),
    result_node(analysis_id="wcet_main", analysis_type="aiT", body=timing_body()),
)


def make_config(
    workspace: Path, tool: ToolSettings, **overrides: object
) -> AnalysisConfig:
    return AnalysisConfig.model_validate(
        {
            "project_file": "project.apx",
            "workspace": workspace,
            "run_id": "1",
            "tool": tool,
            "target_os": TargetOS.UNIX,
            "environment": dict(os.environ),
            **overrides,
        }
    )


async def test_successful_run(workspace: Path, tmp_path: Path) -> None:
    launcher = write_launcher(tmp_path / "a3" / "bin", results=RESULTS)
    orchestrator = AnalysisOrchestrator(runner=SubprocessRunner())

    outcome = await orchestrator.run_analysis(
        make_config(workspace, ToolSettings(tool_path=str(launcher.parent)))
    )

    assert outcome.status == "success", outcome.message
    assert outcome.installed_build == 7686572
    assert [item.payload for item in outcome.items] == [
        "stack0=120 bytes",
        "1234 cycles = 12.34 µs",
    ]
    assert (workspace / "absint-a3-1" / "a3-xml-result-1.xml").is_file()


async def test_failed_item(workspace: Path, tmp_path: Path) -> None:
    launcher = write_launcher(tmp_path / "a3", results=FAILED_RESULTS, exit_code=1)
    orchestrator = AnalysisOrchestrator(runner=SubprocessRunner())

    outcome = await orchestrator.run_analysis(
        make_config(
            workspace,
            ToolSettings(tool_path=str(launcher)),
            copy_result_file=True,
        )
    )

    assert outcome.status == "failure"
    assert list(outcome.failed_items) == ["stack_main"]
    assert outcome.rerun_command is not None
    assert outcome.rerun_command.endswith("-B -i stack_main")
    assert list(outcome.artifacts) == [
        workspace / "absint-a3-1" / "a3-xml-result-1.xml"
    ]


async def test_outdated_launcher_is_rejected(workspace: Path, tmp_path: Path) -> None:
    launcher = write_launcher(tmp_path / "a3", results=RESULTS, build="Build: 1")
    orchestrator = AnalysisOrchestrator(runner=SubprocessRunner())

    outcome = await orchestrator.run_analysis(
        make_config(workspace, ToolSettings(tool_path=str(launcher)))
    )

    assert outcome.status == "error"
    assert outcome.installed_build == 1
    assert not (workspace / "absint-a3-1").exists()


async def test_installer_package_is_unpacked(workspace: Path, tmp_path: Path) -> None:
    """Runs the launcher unpacked from the highest-build package."""
    canned = tmp_path / "canned.xml"
    canned.write_text(RESULTS, encoding="utf-8")
    script = launcher_script(canned, build="Build: 0").encode()
    packages = tmp_path / "packages"
    packages.mkdir()
    for build in ("7686572", "7700000"):
        with tarfile.open(
            packages / f"a3_arm_linux64_b{build}_full.tgz", mode="w:gz"
        ) as archive:
            info = tarfile.TarInfo("bin/alauncher")
            info.size = len(script)
            info.mode = 0o755
            archive.addfile(info, io.BytesIO(script))
    orchestrator = AnalysisOrchestrator(runner=SubprocessRunner())

    outcome = await orchestrator.run_analysis(
        make_config(workspace, ToolSettings(package_dir=str(packages)))
    )

    assert outcome.status == "success", outcome.message
    assert outcome.installed_build == 7700000
    assert (workspace / "a3_arm_linux64_b7700000_full" / "bin" / "alauncher").is_file()


async def test_cli_run_with_local_provider(
    workspace: Path,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    launcher = write_launcher(tmp_path / "a3", results=RESULTS)
    args = parse_args(
        [
            "--project-file",
            "${A3_WORKSPACE}/project.apx",
            "--tool-config",
            json.dumps({"tool_path": str(launcher), "required_build": REQUIRED_BUILD}),
            "--analysis-ids",
            "stack_main,wcet_main",
            "--target-os",
            "unix",
        ]
    )
    environ = {**os.environ, "A3_WORKSPACE": str(workspace), "A3_RUN_ID": "cli"}

    exit_code = await run("local", args, environ)

    assert exit_code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["status"] == "success"
    assert output["total"] == 2
