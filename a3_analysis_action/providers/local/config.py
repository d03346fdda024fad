"""Configuration for running outside of a CI system."""

import uuid
from pathlib import Path

from pydantic import BaseModel, Field


class LocalConfig(BaseModel):
    """Configuration for local runs; both values may be overridden by variables."""

    workspace: Path = Field(default_factory=Path.cwd, validation_alias="A3_WORKSPACE")
    run_id: str = Field(
        default_factory=lambda: uuid.uuid4().hex[:12], validation_alias="A3_RUN_ID"
    )
