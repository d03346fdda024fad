"""Configuration for Azure DevOps provider."""

from pathlib import Path

from pydantic import BaseModel, Field


class AzureDevOpsConfig(BaseModel):
    """Configuration for Azure DevOps provider, read from pipeline variables."""

    sources_directory: Path = Field(validation_alias="BUILD_SOURCESDIRECTORY")
    build_id: str = Field(validation_alias="BUILD_BUILDID")
    job_attempt: str = Field(default="1", validation_alias="SYSTEM_JOBATTEMPT")
    artifact_name: str = "a3-analysis"
