"""GitHub Actions provider implementation."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from a3_analysis_action.models.result import RunOutcome
from a3_analysis_action.providers.base import CIProvider, text_link
from a3_analysis_action.providers.github_actions.config import GitHubActionsConfig

log = logging.getLogger(__name__)

STATUS_TITLES = {
    "success": "✅ a³ analysis run succeeded",
    "failure": "❌ a³ analysis run failed",
    "error": "❗ a³ analysis run aborted",
    "skipped": "⏭️ a³ analysis run skipped",
}


def escape_command_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


@dataclass(frozen=True, kw_only=True)
class GitHubActionsProvider(CIProvider):
    """GitHub Actions host, using workflow commands and the step summary."""

    config: GitHubActionsConfig

    @classmethod
    def from_config(cls, config: GitHubActionsConfig) -> "GitHubActionsProvider":
        """Create provider from its configuration."""
        return cls(config=config)

    @property
    def workspace(self) -> Path:
        """Checked-out workspace of the job."""
        return self.config.workspace

    @property
    def run_id(self) -> str:
        """Workflow run id, qualified by the attempt number."""
        return f"{self.config.run_id}-{self.config.run_attempt}"

    def format_link(self, target: str, text: str) -> str:
        """GitHub log output has no hyperlinks; show the target."""
        return text_link(target, text)

    def annotate_error(self, message: str) -> None:
        """Emit an ``::error::`` workflow command."""
        self.emit(f"::error title=a³ analysis::{escape_command_data(message)}")

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        """Fold output into a ``::group::`` section."""
        self.emit(f"::group::{title}")
        try:
            yield
        finally:
            self.emit("::endgroup::")

    def publish_outcome(self, outcome: RunOutcome) -> None:
        """Append a Markdown summary of the outcome to the step summary."""
        if self.config.step_summary is None:
            log.debug("GITHUB_STEP_SUMMARY not set, skipping job summary")
            return

        lines = [f"### {STATUS_TITLES[outcome.status]}", "", outcome.message, ""]
        if outcome.items:
            lines += [
                "| ID | Type | Result | Expectation | #Warn | #Err | Failed |",
                "| --- | --- | --- | --- | --- | --- | --- |",
            ]
            lines += [
                f"| {item.analysis_id} | {item.analysis_type} | {item.payload} "
                f"| {item.expectation} | {item.warning_count} | {item.error_count} "
                f"| {'❌' if item.failed else ''} |"
                for item in outcome.items
            ]
            lines.append("")
        if outcome.rerun_command:
            lines += ["Rerun interactively with:", "", "```", outcome.rerun_command, "```", ""]

        try:
            with self.config.step_summary.open("a", encoding="utf-8") as summary:
                summary.write("\n".join(lines) + "\n")
        except OSError as e:
            log.warning("Cannot write job summary %s: %s", self.config.step_summary, e)
