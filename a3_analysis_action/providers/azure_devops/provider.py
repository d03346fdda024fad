"""Azure DevOps provider implementation."""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from a3_analysis_action.models.result import RunOutcome, RunStatus
from a3_analysis_action.providers.azure_devops.config import AzureDevOpsConfig
from a3_analysis_action.providers.base import CIProvider, text_link

STATUS_TO_TASK_RESULT: Mapping[RunStatus, str] = {
    "success": "Succeeded",
    "skipped": "Skipped",
    "failure": "Failed",
    "error": "Failed",
}


def escape_logging_command(value: str) -> str:
    """Escape a logging command message."""
    return (
        value.replace("%", "%AZP25")
        .replace("\r", "%0D")
        .replace("\n", "%0A")
        .replace(";", "%3B")
        .replace("]", "%5D")
    )


@dataclass(frozen=True, kw_only=True)
class AzureDevOpsProvider(CIProvider):
    """Azure DevOps host, using ``##vso`` logging commands."""

    config: AzureDevOpsConfig

    @classmethod
    def from_config(cls, config: AzureDevOpsConfig) -> "AzureDevOpsProvider":
        """Create provider from its configuration."""
        return cls(config=config)

    @property
    def workspace(self) -> Path:
        """Sources directory of the build."""
        return self.config.sources_directory

    @property
    def run_id(self) -> str:
        """Build id, qualified by the job attempt."""
        return f"{self.config.build_id}-{self.config.job_attempt}"

    def format_link(self, target: str, text: str) -> str:
        """Azure DevOps logs have no hyperlinks; show the target."""
        return text_link(target, text)

    def annotate_error(self, message: str) -> None:
        """Log an error issue for the task."""
        self.emit(f"##vso[task.logissue type=error]{escape_logging_command(message)}")

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        """Fold output into a ``##[group]`` section."""
        self.emit(f"##[group]{title}")
        try:
            yield
        finally:
            self.emit("##[endgroup]")

    def publish_outcome(self, outcome: RunOutcome) -> None:
        """Upload copied artifacts and set the task result."""
        for artifact in outcome.artifacts:
            self.emit(
                f"##vso[artifact.upload artifactname={self.config.artifact_name}]"
                f"{artifact}"
            )
        self.emit(
            f"##vso[task.complete result={STATUS_TO_TASK_RESULT[outcome.status]};]"
            f"{escape_logging_command(outcome.message)}"
        )
