"""Synthesis of a³ launcher command lines."""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from a3_analysis_action.errors import InvalidAnalysisIdError
from a3_analysis_action.paths import TargetOS, quote_argument

if TYPE_CHECKING:
    from a3_analysis_action.tool_locator import ToolInstallation

type PedanticLevel = Literal["apx", "fatal", "error", "warning"]

# Sentinel: keep the pedantic level stored in the project configuration.
PEDANTIC_FROM_PROJECT: PedanticLevel = "apx"

PROJECT_PEDANTIC_LEVELS: Sequence[PedanticLevel] = ("fatal", "error", "warning")

ANALYSIS_ID_PATTERN = re.compile(r"[A-Za-z0-9_]+")


@dataclass(frozen=True)
class CommandLine:
    """Ordered tokens of one launcher invocation."""

    tokens: tuple[str, ...]

    @property
    def executable(self) -> str:
        """First token, the program to launch."""
        return self.tokens[0]

    def render(self, target_os: TargetOS) -> str:
        """Render the command as a single string users can paste into a shell.

        On Windows every non-option token is quoted.
        """
        return " ".join(
            token if token.startswith("-") else quote_argument(token, target_os)
            for token in self.tokens
        )


def parse_analysis_ids(analysis_ids: str) -> Sequence[str]:
    """Split a comma-separated id list, dropping empty entries."""
    if not analysis_ids.strip():
        return ()
    return tuple(i.strip() for i in analysis_ids.split(",") if i.strip())


def validate_analysis_ids(analysis_ids: Iterable[str]) -> None:
    """Check ids against the a³ naming rules (letters, digits, underscores).

    Raises:
        InvalidAnalysisIdError: For the first id that does not comply

    """
    for analysis_id in analysis_ids:
        if not ANALYSIS_ID_PATTERN.fullmatch(analysis_id):
            raise InvalidAnalysisIdError(
                f"Analysis ID '{analysis_id}' must adhere to the a³ analysis ID "
                "conventions: only letters, numbers or underscores allowed!"
            )


def project_pedantic_name(level: int) -> PedanticLevel:
    """Map a project configuration pedantic level (0-2) to its option name."""
    if 0 <= level < len(PROJECT_PEDANTIC_LEVELS):
        return PROJECT_PEDANTIC_LEVELS[level]
    return PROJECT_PEDANTIC_LEVELS[0]


def build_batch_command(
    installation: "ToolInstallation",
    project_file: str | Path,
    *,
    report_file: str | Path | None = None,
    result_file: str | Path | None = None,
    pedantic_level: PedanticLevel = PEDANTIC_FROM_PROJECT,
    export_workspace: str | Path | None = None,
    concurrency: int | None = None,
    analysis_ids: Sequence[str] = (),
) -> CommandLine:
    """Build the batch analysis command.

    ``<tool> <project> -b [--report-file R] [--xml-result-file X]
    [--pedantic-level L] [--export-workspace W] [-j N] [-i ID]*``

    Args:
        installation: Resolved launcher
        project_file: Project configuration document
        report_file: Report path to force, None to use the configured one
        result_file: Result path to force, None to use the configured one
        pedantic_level: Level to force, or the project sentinel ``apx``
        export_workspace: Workspace export target, None disables the export
        concurrency: Opaque ``-j`` value passed to the tool
        analysis_ids: Ids to restrict the run to, empty entries are dropped

    Returns:
        The command line

    """
    tokens = [str(installation.executable), str(project_file), "-b"]
    if report_file is not None:
        tokens += ["--report-file", str(report_file)]
    if result_file is not None:
        tokens += ["--xml-result-file", str(result_file)]
    if pedantic_level != PEDANTIC_FROM_PROJECT:
        tokens += ["--pedantic-level", pedantic_level]
    if export_workspace is not None:
        tokens += ["--export-workspace", str(export_workspace)]
    if concurrency is not None:
        tokens += ["-j", str(concurrency)]
    for analysis_id in analysis_ids:
        if analysis_id.strip():
            tokens += ["-i", analysis_id.strip()]
    return CommandLine(tuple(tokens))


def build_interactive_command(
    installation: "ToolInstallation",
    project_file: str | Path,
    failed_items: Iterable[str] = (),
) -> CommandLine:
    """Build the command that reopens the project, limited to failed items.

    Without failed items the plain project is opened for manual inspection.
    """
    tokens = [str(installation.executable), str(project_file)]
    failed = list(failed_items)
    if failed:
        tokens += ["--pedantic-level", "warning", "-B"]
        for analysis_id in failed:
            tokens += ["-i", analysis_id]
    return CommandLine(tuple(tokens))


def build_workspace_command(
    installation: "ToolInstallation", workspace_file: str | Path
) -> CommandLine:
    """Build the command that opens an exported workspace."""
    return CommandLine((str(installation.executable), str(workspace_file)))


def build_version_command(
    installation: "ToolInstallation", target: str, version_file: str | Path
) -> CommandLine:
    """Build the command that writes version information to *version_file*."""
    return CommandLine(
        (
            str(installation.executable),
            "-b",
            target,
            "--version-file",
            str(version_file),
        )
    )
