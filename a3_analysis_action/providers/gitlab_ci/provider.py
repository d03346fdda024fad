"""GitLab CI provider implementation."""

import re
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from a3_analysis_action.models.result import RunOutcome
from a3_analysis_action.providers.base import CIProvider, text_link
from a3_analysis_action.providers.gitlab_ci.config import GitLabCIConfig

RED = "\x1b[31;1m"
RESET = "\x1b[0m"
ERASE_LINE = "\x1b[0K"


def section_name(title: str) -> str:
    """Turn a title into a valid collapsible section name."""
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", title).strip("_").lower() or "section"


@dataclass(frozen=True, kw_only=True)
class GitLabCIProvider(CIProvider):
    """GitLab CI host, using collapsible sections and artifact browse URLs."""

    config: GitLabCIConfig

    @classmethod
    def from_config(cls, config: GitLabCIConfig) -> "GitLabCIProvider":
        """Create provider from its configuration."""
        return cls(config=config)

    @property
    def workspace(self) -> Path:
        """Project checkout directory of the job."""
        return self.config.project_dir

    @property
    def run_id(self) -> str:
        """Job id."""
        return self.config.job_id

    def format_link(self, target: str, text: str) -> str:
        """GitLab job logs have no hyperlinks; show the target."""
        return text_link(target, text)

    def annotate_error(self, message: str) -> None:
        """Print *message* highlighted in red."""
        self.emit(f"{RED}ERROR: {message}{RESET}")

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        """Fold output into a collapsible job log section."""
        name = section_name(title)
        self.emit(
            f"{ERASE_LINE}section_start:{int(time.time())}:{name}\r{ERASE_LINE}{title}"
        )
        try:
            yield
        finally:
            self.emit(f"{ERASE_LINE}section_end:{int(time.time())}:{name}\r{ERASE_LINE}")

    def publish_outcome(self, outcome: RunOutcome) -> None:
        """List copied artifacts with their job artifact browse URLs."""
        if not self.config.job_url:
            return
        for artifact in outcome.artifacts:
            try:
                relative = artifact.resolve().relative_to(self.workspace.resolve())
            except ValueError:
                continue
            self.emit(
                f"{artifact.name}: {self.config.job_url}/artifacts/file/"
                f"{relative.as_posix()}"
            )
