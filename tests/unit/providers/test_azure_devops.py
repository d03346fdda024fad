"""Tests for Azure DevOps provider."""

import io
from pathlib import Path

from a3_analysis_action.providers.azure_devops import (
    AzureDevOpsConfig,
    AzureDevOpsProvider,
    azure_devops_manifest,
)
from a3_analysis_action.testing.factories import RunOutcomeFactory


def make_provider(stream: io.StringIO, workspace: Path) -> AzureDevOpsProvider:
    config = AzureDevOpsConfig.model_validate(
        {"BUILD_SOURCESDIRECTORY": str(workspace), "BUILD_BUILDID": "77"}
    )
    return AzureDevOpsProvider(config=config, stream=stream)


def test_manifest_builds_provider(tmp_path: Path) -> None:
    provider = azure_devops_manifest.from_environment(
        {
            "BUILD_SOURCESDIRECTORY": str(tmp_path),
            "BUILD_BUILDID": "77",
            "SYSTEM_JOBATTEMPT": "3",
        }
    )

    assert provider.workspace == tmp_path
    assert provider.run_id == "77-3"


def test_links_show_target(tmp_path: Path) -> None:
    provider = make_provider(io.StringIO(), tmp_path)

    assert provider.format_link("scratch/a1.html", "A1") == "A1 (scratch/a1.html)"


def test_annotate_error_escapes_message(tmp_path: Path) -> None:
    stream = io.StringIO()

    make_provider(stream, tmp_path).annotate_error("a; b]\nc")

    assert stream.getvalue() == "##vso[task.logissue type=error]a%3B b%5D%0Ac\n"


def test_group(tmp_path: Path) -> None:
    stream = io.StringIO()
    provider = make_provider(stream, tmp_path)

    with provider.group("Analysis Results"):
        pass

    assert stream.getvalue() == "##[group]Analysis Results\n##[endgroup]\n"


def test_publish_outcome_uploads_and_completes(tmp_path: Path) -> None:
    stream = io.StringIO()
    provider = make_provider(stream, tmp_path)
    artifact = tmp_path / "report.txt"
    outcome = RunOutcomeFactory.build(
        status="failure", message="Analysis run failed.", artifacts=[artifact]
    )

    provider.publish_outcome(outcome)

    assert stream.getvalue().splitlines() == [
        f"##vso[artifact.upload artifactname=a3-analysis]{artifact}",
        "##vso[task.complete result=Failed;]Analysis run failed.",
    ]


def test_skipped_run_is_reported_as_skipped(tmp_path: Path) -> None:
    stream = io.StringIO()

    make_provider(stream, tmp_path).publish_outcome(
        RunOutcomeFactory.build(status="skipped", message="skipped")
    )

    assert stream.getvalue() == "##vso[task.complete result=Skipped;]skipped\n"
