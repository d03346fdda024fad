"""Configuration for Bitbucket Pipelines provider."""

from pathlib import Path

from pydantic import BaseModel, Field


class BitbucketConfig(BaseModel):
    """Configuration for Bitbucket Pipelines provider, read from default variables."""

    clone_dir: Path = Field(validation_alias="BITBUCKET_CLONE_DIR")
    build_number: str = Field(validation_alias="BITBUCKET_BUILD_NUMBER")
    step_uuid: str | None = Field(default=None, validation_alias="BITBUCKET_STEP_UUID")
