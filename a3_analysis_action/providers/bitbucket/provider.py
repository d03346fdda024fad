"""Bitbucket Pipelines provider implementation."""

from dataclasses import dataclass
from pathlib import Path

from a3_analysis_action.models.result import RunOutcome
from a3_analysis_action.providers.base import CIProvider, text_link
from a3_analysis_action.providers.bitbucket.config import BitbucketConfig


@dataclass(frozen=True, kw_only=True)
class BitbucketProvider(CIProvider):
    """Bitbucket Pipelines host.

    Bitbucket logs support neither groups nor annotations, so only plain
    output is produced.
    """

    config: BitbucketConfig

    @classmethod
    def from_config(cls, config: BitbucketConfig) -> "BitbucketProvider":
        """Create provider from its configuration."""
        return cls(config=config)

    @property
    def workspace(self) -> Path:
        """Clone directory of the pipeline."""
        return self.config.clone_dir

    @property
    def run_id(self) -> str:
        """Build number, with the step uuid when several steps run the analysis."""
        if self.config.step_uuid:
            return f"{self.config.build_number}-{self.config.step_uuid.strip('{}')}"
        return self.config.build_number

    def format_link(self, target: str, text: str) -> str:
        """Bitbucket logs have no hyperlinks; show the target."""
        return text_link(target, text)

    def publish_outcome(self, outcome: RunOutcome) -> None:
        """List the artifacts to declare in ``bitbucket-pipelines.yml``."""
        for artifact in outcome.artifacts:
            self.emit(f"Artifact: {artifact}")
