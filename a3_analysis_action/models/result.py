"""Models for analysis run outcomes."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from a3_analysis_action.results import AnalysisItemResult

type RunStatus = Literal["success", "failure", "error", "skipped"]


@dataclass(frozen=True, kw_only=True)
class RunOutcome:
    """Result of a single analysis run.

    ``failure`` means the analysis itself reported problems, ``error`` that
    the run could not be completed (configuration, version, schema or launch
    problems).
    """

    status: RunStatus
    message: str
    exit_code: int | None = None
    installed_build: int | None = None
    items: Sequence[AnalysisItemResult] = ()
    failed_items: Sequence[str] = ()
    rerun_command: str | None = None
    artifacts: Sequence[Path] = ()

    @property
    def succeeded(self) -> bool:
        """Whether the CI step should pass."""
        return self.status in {"success", "skipped"}
