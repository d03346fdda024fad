"""Configuration for GitHub Actions provider."""

from pathlib import Path

from pydantic import BaseModel, Field


class GitHubActionsConfig(BaseModel):
    """Configuration for GitHub Actions provider, read from the job environment."""

    workspace: Path = Field(validation_alias="GITHUB_WORKSPACE")
    run_id: str = Field(validation_alias="GITHUB_RUN_ID")
    run_attempt: str = Field(default="1", validation_alias="GITHUB_RUN_ATTEMPT")
    job: str | None = Field(default=None, validation_alias="GITHUB_JOB")
    step_summary: Path | None = Field(
        default=None, validation_alias="GITHUB_STEP_SUMMARY"
    )
