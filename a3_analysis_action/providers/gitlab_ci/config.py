"""Configuration for GitLab CI provider."""

from pathlib import Path

from pydantic import BaseModel, Field


class GitLabCIConfig(BaseModel):
    """Configuration for GitLab CI provider, read from predefined CI variables.

    The job URL is optional; when present, copied artifacts are listed with
    their browse URLs.
    """

    project_dir: Path = Field(validation_alias="CI_PROJECT_DIR")
    job_id: str = Field(validation_alias="CI_JOB_ID")
    job_url: str | None = Field(default=None, validation_alias="CI_JOB_URL")
