"""Immutable configuration of one analysis run."""

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import Field

from a3_analysis_action.command_builder import PEDANTIC_FROM_PROJECT, PedanticLevel
from a3_analysis_action.compatibility import REQUIRED_BUILD
from a3_analysis_action.models.base import Model
from a3_analysis_action.paths import TargetOS


class ToolSettings(Model):
    """Where the a³ launcher comes from and which build it must have."""

    tool_path: str | None = Field(
        default=None, description="Pre-installed launcher or its directory"
    )
    package_dir: str | None = Field(
        default=None, description="Directory of versioned a³ installer packages"
    )
    required_build: str = Field(
        default=REQUIRED_BUILD, description="Minimum build, as 'Build: <N>'"
    )


class AnalysisConfig(Model):
    """Everything one analysis run needs, passed in at call time."""

    project_file: str = Field(..., description="a³ project configuration (.apx)")
    workspace: Path = Field(..., description="CI workspace directory")
    run_id: str = Field(..., pattern=r"^[A-Za-z0-9_.-]+$")
    tool: ToolSettings = Field(default_factory=ToolSettings)
    analysis_ids: str = Field(
        default="", description="Comma-separated analysis ids, empty runs all"
    )
    pedantic_level: PedanticLevel = PEDANTIC_FROM_PROJECT
    concurrency: int | None = Field(default=None, ge=1)
    export_workspace: bool = False
    copy_report_file: bool = False
    copy_result_file: bool = False
    copy_html_reports: bool = True
    enabled: bool = True
    target_os: TargetOS = Field(default_factory=TargetOS.current)
    environment: Mapping[str, str] = Field(
        default_factory=lambda: dict(os.environ),
        description="Environment for variable expansion and the launcher",
    )

    @property
    def scratch_dir(self) -> Path:
        """Per-run directory for synthesized and copied files."""
        return self.workspace / f"absint-a3-{self.run_id}"
