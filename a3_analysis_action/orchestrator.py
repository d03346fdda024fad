"""Analysis orchestrator sequencing one a³ run from install to report."""

import logging
import time
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass, field, replace
from pathlib import Path

from a3_analysis_action.artifacts import (
    copy_artifact,
    html_copy_name,
    remove_if_empty,
    report_copy_name,
    result_copy_name,
)
from a3_analysis_action.command_builder import (
    PEDANTIC_FROM_PROJECT,
    CommandLine,
    build_batch_command,
    build_interactive_command,
    build_workspace_command,
    parse_analysis_ids,
    project_pedantic_name,
    validate_analysis_ids,
)
from a3_analysis_action.compatibility import check_compatibility, query_installed_build
from a3_analysis_action.env_expander import expand_env
from a3_analysis_action.errors import (
    InvalidAnalysisIdError,
    ProcessLaunchError,
    ProjectConfigError,
    ResultSchemaError,
    ToolInstallationError,
)
from a3_analysis_action.models.config import AnalysisConfig
from a3_analysis_action.models.result import RunOutcome
from a3_analysis_action.paths import resolve_path
from a3_analysis_action.process import ProcessRunner
from a3_analysis_action.project_config import ProjectConfig, read_project_config
from a3_analysis_action.providers.base import CIProvider
from a3_analysis_action.results import (
    ResultSummary,
    interpret_results,
    plain_link,
    result_file_is_fresh,
)
from a3_analysis_action.tool_locator import (
    ToolInstallation,
    locate_direct,
    locate_package,
)

log = logging.getLogger(__name__)

SUCCESS_EXIT_CODE = 0


@dataclass(frozen=True, kw_only=True)
class RunFiles:
    """Report, result and workspace export locations of one run.

    ``*_forced`` tells whether the path was synthesized and therefore has to
    be passed on the command line.
    """

    report_file: Path
    result_file: Path
    export_workspace: Path | None
    report_forced: bool
    result_forced: bool


@dataclass(frozen=True, kw_only=True)
class AnalysisOrchestrator:
    """Runs a single a³ analysis: resolve, verify, run, interpret, report."""

    runner: ProcessRunner
    provider: CIProvider | None = None
    clock: Callable[[], float] = field(default=time.time, repr=False)

    async def run_analysis(self, config: AnalysisConfig) -> RunOutcome:
        """Run the analysis described by *config*.

        Every error is turned into a failed outcome; nothing is retried.

        Args:
            config: Immutable configuration of this run

        Returns:
            The outcome of the run

        """
        if not config.enabled:
            log.info("a³ analysis is disabled, skipping")
            return RunOutcome(status="skipped", message="Analysis run skipped.")

        try:
            outcome = await self._run(config)
        except (ProjectConfigError, InvalidAnalysisIdError, ToolInstallationError) as e:
            outcome = self._error(f"Configuration error: {e}")
        except (ProcessLaunchError, OSError) as e:
            log.exception("Analysis run could not be executed")
            outcome = self._error(f"Execution error: {e}")
        finally:
            remove_if_empty(config.scratch_dir, config.workspace)

        log.info("%s", outcome.message)
        return outcome

    async def _run(self, config: AnalysisConfig) -> RunOutcome:
        env = config.environment
        project_file = resolve_path(
            expand_env(config.project_file, env, config.target_os),
            config.workspace,
            config.target_os,
        )
        log.info("a³ project file: %s", project_file)
        project = read_project_config(project_file, config.target_os)
        for issue in project.issues:
            self._annotate(f"Project structure error: {issue}")

        analysis_ids = parse_analysis_ids(config.analysis_ids)
        validate_analysis_ids(analysis_ids)

        installation = self._resolve_tool(config, project.target)
        log.info("a³ launcher: %s", installation.executable)

        config.scratch_dir.mkdir(parents=True, exist_ok=True)

        log.info("Performing a³ compatibility check...")
        version_file = config.scratch_dir / (
            f"a3-{project.target}-version-{config.run_id}.info"
        )
        found_build = await query_installed_build(
            self.runner,
            installation,
            project.target,
            version_file,
            env=env,
            cwd=config.workspace,
        )
        compatibility = check_compatibility(found_build, config.tool.required_build)
        if not compatibility.compatible:
            return self._error(
                f"a³ compatibility check failed for target {project.target}: "
                f"{compatibility.message}. Please contact support@absint.com to "
                "request an updated a³ version.",
                installed_build=found_build,
            )
        log.info("Compatibility check [OK]: %s", compatibility.message)

        files = self._run_files(config, project)
        log.info("Textual report file: %s", files.report_file)
        log.info("XML result file    : %s", files.result_file)
        log.info("Pedantic level     : %s", self._pedantic_name(config, project))

        command = build_batch_command(
            installation,
            project_file,
            report_file=files.report_file if files.report_forced else None,
            result_file=files.result_file if files.result_forced else None,
            pedantic_level=config.pedantic_level,
            export_workspace=files.export_workspace,
            concurrency=config.concurrency,
            analysis_ids=analysis_ids,
        )

        started_at = self.clock()
        with self._group("a³ analysis run"):
            exit_code = await self.runner.run(command, env=env, cwd=config.workspace)
        log.info("a³ exited with code %d", exit_code)

        try:
            summary = self._interpret(config, project, files, started_at)
        except ResultSchemaError as e:
            outcome = self._result_error(
                config, installation, project_file, exit_code, found_build, e
            )
        else:
            outcome = self._classify(
                config,
                installation,
                project_file,
                files,
                exit_code,
                summary,
                started_at,
                found_build,
            )

        artifacts = self._copy_artifacts(config, project, files)
        if artifacts:
            outcome = replace(outcome, artifacts=artifacts)
        return outcome

    def _resolve_tool(self, config: AnalysisConfig, target: str) -> ToolInstallation:
        """Resolve the launcher from a package directory or a direct path."""
        env = config.environment
        tool_path = (
            expand_env(config.tool.tool_path, env, config.target_os)
            if config.tool.tool_path
            else None
        )

        installation: ToolInstallation | None = None
        if config.tool.package_dir:
            package_dir = expand_env(config.tool.package_dir, env, config.target_os)
            installation = locate_package(
                package_dir,
                target,
                config.target_os,
                config.workspace,
                fallback_tool_path=tool_path,
            )
        elif tool_path:
            installation = locate_direct(tool_path, config.target_os)

        if installation is None:
            raise ToolInstallationError(
                "No a³ launcher could be resolved. Configure a pre-installed "
                "launcher path or an accessible installer package directory."
            )
        return installation

    def _run_files(self, config: AnalysisConfig, project: ProjectConfig) -> RunFiles:
        """Use configured report/result files, or synthesize scratch ones."""
        scratch = config.scratch_dir
        export = (
            scratch / f"a3-workspace-{config.run_id}.apx"
            if config.export_workspace
            else None
        )
        return RunFiles(
            report_file=project.report_file
            or scratch / f"a3-report-{config.run_id}.txt",
            result_file=project.result_file
            or scratch / f"a3-xml-result-{config.run_id}.xml",
            export_workspace=export,
            report_forced=project.report_file is None,
            result_forced=project.result_file is None,
        )

    def _interpret(
        self,
        config: AnalysisConfig,
        project: ProjectConfig,
        files: RunFiles,
        started_at: float,
    ) -> ResultSummary | None:
        """Interpret the result file, unless it predates the run."""
        if not result_file_is_fresh(files.result_file, started_at):
            log.warning(
                "The XML result file %s has not been updated by the a³ analysis run",
                files.result_file,
            )
            return None

        links = {
            analysis_id: f"{config.scratch_dir.name}/"
            f"{html_copy_name(analysis_id, config.run_id)}"
            for analysis_id in project.html_reports
        }
        summary = interpret_results(
            files.result_file,
            html_links=links,
            format_link=self.provider.format_link if self.provider else plain_link,
        )
        with self._group("Analysis Results"):
            for line in summary.lines:
                log.info("%s", line)
        return summary

    def _classify(
        self,
        config: AnalysisConfig,
        installation: ToolInstallation,
        project_file: str,
        files: RunFiles,
        exit_code: int,
        summary: ResultSummary | None,
        started_at: float,
        found_build: int,
    ) -> RunOutcome:
        """Decide the verdict from the exit code and the interpreted items."""
        items = summary.items if summary else ()
        failed_items: Sequence[str] = summary.failed_items if summary else ()

        if exit_code == SUCCESS_EXIT_CODE and summary is not None and not summary.failed:
            return RunOutcome(
                status="success",
                message="Analysis run succeeded.",
                exit_code=exit_code,
                installed_build=found_build,
                items=items,
            )

        export = files.export_workspace
        rerun: CommandLine
        if failed_items and export is not None and result_file_is_fresh(
            export, started_at
        ):
            rerun = build_workspace_command(installation, export)
        else:
            rerun = build_interactive_command(installation, project_file, failed_items)
        rerun_command = rerun.render(config.target_os)

        if failed_items:
            message = "Analysis run failed. The following analysis items failed: " + (
                ", ".join(failed_items)
            )
            log.info("The following analysis items failed:")
            for analysis_id in failed_items:
                log.info(" - %s", analysis_id)
            log.info(
                "You might want to rerun the analyses of failed items "
                "interactively. Use the command:"
            )
        elif summary is None and exit_code == SUCCESS_EXIT_CODE:
            message = (
                "Analysis run failed. a³ reported success but did not write the "
                f"XML result file {files.result_file}. Check the project manually."
            )
            self._annotate(message)
        else:
            message = (
                f"Analysis run failed. a³ returned failure code {exit_code} but no "
                "failed analysis was found. Probably something in your project "
                "configuration is wrong. To check, use a³ interactively."
            )
            self._annotate(message)
        log.info("%s", rerun_command)

        return RunOutcome(
            status="failure",
            message=message,
            exit_code=exit_code,
            installed_build=found_build,
            items=items,
            failed_items=failed_items,
            rerun_command=rerun_command,
        )

    def _result_error(
        self,
        config: AnalysisConfig,
        installation: ToolInstallation,
        project_file: str,
        exit_code: int,
        found_build: int,
        error: ResultSchemaError,
    ) -> RunOutcome:
        """Report an unreadable result document with a rerun command."""
        failed_items = (error.analysis_id,) if error.analysis_id else ()
        rerun_command = build_interactive_command(
            installation, project_file, failed_items
        ).render(config.target_os)
        outcome = self._error(
            f"Result file error: {error}",
            exit_code=exit_code,
            installed_build=found_build,
            failed_items=failed_items,
            rerun_command=rerun_command,
        )
        log.info("Check the project interactively. Use the command:")
        log.info("%s", rerun_command)
        return outcome

    def _copy_artifacts(
        self, config: AnalysisConfig, project: ProjectConfig, files: RunFiles
    ) -> Sequence[Path]:
        """Copy the requested output files into the scratch directory."""
        scratch = config.scratch_dir
        copies: list[tuple[Path, Path]] = []
        if config.copy_report_file:
            copies.append((files.report_file, scratch / report_copy_name(config.run_id)))
        if config.copy_result_file:
            copies.append((files.result_file, scratch / result_copy_name(config.run_id)))
        if config.copy_html_reports:
            copies += [
                (source, scratch / html_copy_name(analysis_id, config.run_id))
                for analysis_id, source in project.html_reports.items()
            ]

        artifacts: list[Path] = []
        for source, destination in copies:
            if (copied := copy_artifact(source, destination)) is not None:
                artifacts.append(copied)
        return artifacts

    def _pedantic_name(self, config: AnalysisConfig, project: ProjectConfig) -> str:
        if config.pedantic_level == PEDANTIC_FROM_PROJECT:
            return f"{project_pedantic_name(project.pedantic_level)} (from project)"
        return config.pedantic_level

    def _error(
        self,
        message: str,
        *,
        exit_code: int | None = None,
        installed_build: int | None = None,
        failed_items: Sequence[str] = (),
        rerun_command: str | None = None,
    ) -> RunOutcome:
        self._annotate(message)
        return RunOutcome(
            status="error",
            message=message,
            exit_code=exit_code,
            installed_build=installed_build,
            failed_items=failed_items,
            rerun_command=rerun_command,
        )

    def _annotate(self, message: str) -> None:
        if self.provider is not None:
            self.provider.annotate_error(message)
        else:
            log.error("%s", message)

    def _group(self, title: str) -> AbstractContextManager[None]:
        if self.provider is not None:
            return self.provider.group(title)
        return nullcontext()
