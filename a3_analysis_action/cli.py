"""CLI entry point for the a³ analysis action."""

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from a3_analysis_action.command_builder import PROJECT_PEDANTIC_LEVELS
from a3_analysis_action.models.config import AnalysisConfig, ToolSettings
from a3_analysis_action.models.result import RunOutcome
from a3_analysis_action.orchestrator import AnalysisOrchestrator
from a3_analysis_action.paths import TargetOS
from a3_analysis_action.process import SubprocessRunner
from a3_analysis_action.providers.loading import (
    ProviderNotFoundError,
    available_providers,
    load_provider_manifest,
)

PLUGIN_NAME = "AbsInt a³ analysis action"

STATUS_SYMBOLS = {
    "success": "✅",
    "failure": "❌",
    "error": "❗",
    "skipped": "⏭️",
}


def log_outcome_summary(log: logging.Logger, outcome: RunOutcome) -> None:
    """Log a formatted summary of the run outcome."""
    log.info("=" * 80)
    log.info("Analysis Run Summary:")
    log.info("=" * 80)
    log.info(
        "%s %s (exit code %s)",
        STATUS_SYMBOLS.get(outcome.status, "?"),
        outcome.status,
        outcome.exit_code if outcome.exit_code is not None else "-",
    )
    if outcome.failed_items:
        log.info("  Failed items: %s", ", ".join(outcome.failed_items))
    if outcome.rerun_command:
        log.info("  Rerun command: %s", outcome.rerun_command)
    for artifact in outcome.artifacts:
        log.info("  Artifact: %s", artifact)


def format_output(outcome: RunOutcome) -> dict[str, Any]:
    """Format the run outcome for JSON output."""
    return {
        "status": outcome.status,
        "message": outcome.message,
        "exit_code": outcome.exit_code,
        "installed_build": outcome.installed_build,
        "total": len(outcome.items),
        "failed": len(outcome.failed_items),
        "failed_items": list(outcome.failed_items),
        "rerun_command": outcome.rerun_command,
        "artifacts": [str(a) for a in outcome.artifacts],
        "results": [
            {
                "id": item.analysis_id,
                "type": item.analysis_type,
                "time": item.analysis_time,
                "result": item.payload,
                "expectation": item.expectation,
                "warnings": item.warning_count,
                "errors": item.error_count,
                "failed": item.failed,
            }
            for item in outcome.items
        ],
    }


def build_tool_settings(args: argparse.Namespace) -> ToolSettings:
    """Merge ``--tool-config`` JSON with the individual tool flags."""
    settings: dict[str, Any] = json.loads(args.tool_config) if args.tool_config else {}
    for key in ("tool_path", "package_dir", "required_build"):
        if (value := getattr(args, key)) is not None:
            settings[key] = value
    return ToolSettings(**settings)


async def run(
    provider_key: str,
    args: argparse.Namespace,
    environ: Mapping[str, str],
) -> int:
    """Run the analysis and return exit code."""
    log = logging.getLogger("a3_analysis_action")
    log.info("This is %s", PLUGIN_NAME)

    log.info("Loading provider: %s", provider_key)
    manifest = load_provider_manifest(provider_key)
    provider = manifest.from_environment(environ)

    config = AnalysisConfig(
        project_file=args.project_file,
        workspace=provider.workspace,
        run_id=provider.run_id,
        tool=build_tool_settings(args),
        analysis_ids=args.analysis_ids,
        pedantic_level=args.pedantic_level,
        concurrency=args.concurrency,
        export_workspace=args.export_workspace,
        copy_report_file=args.copy_report_file,
        copy_result_file=args.copy_result_file,
        copy_html_reports=args.copy_html_reports,
        enabled=not args.disabled,
        target_os=TargetOS(args.target_os) if args.target_os else TargetOS.current(),
        environment=dict(environ),
    )

    orchestrator = AnalysisOrchestrator(runner=SubprocessRunner(), provider=provider)
    outcome = await orchestrator.run_analysis(config)

    log_outcome_summary(log, outcome)
    provider.publish_outcome(outcome)
    print(json.dumps(format_output(outcome), indent=2))

    return 0 if outcome.succeeded else 1


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Run an AbsInt a³ analysis in CI")
    parser.add_argument(
        "--provider",
        default="local",
        help=f"CI provider key ({', '.join(available_providers())})",
    )
    parser.add_argument(
        "--project-file",
        required=True,
        help="a³ project file (.apx), relative to the workspace; ${VAR} allowed",
    )
    parser.add_argument(
        "--tool-config",
        default="",
        help="JSON tool settings (tool_path, package_dir, required_build)",
    )
    parser.add_argument("--tool-path", help="Pre-installed alauncher or its directory")
    parser.add_argument("--package-dir", help="Directory of a³ installer packages")
    parser.add_argument("--required-build", help="Minimum a³ build, 'Build: <N>'")
    parser.add_argument(
        "--analysis-ids",
        default="",
        help="Comma-separated analysis ids to run (default: all)",
    )
    parser.add_argument(
        "--pedantic-level",
        default="apx",
        choices=["apx", *PROJECT_PEDANTIC_LEVELS],
        help="Pedantic level, 'apx' keeps the level of the project file",
    )
    parser.add_argument(
        "-j",
        "--concurrency",
        type=int,
        default=None,
        help="Number of parallel analyses a³ may run",
    )
    parser.add_argument(
        "--export-workspace",
        action="store_true",
        help="Export an a³ workspace for interactive inspection",
    )
    parser.add_argument(
        "--copy-report-file",
        action="store_true",
        help="Copy the text report into the workspace",
    )
    parser.add_argument(
        "--copy-result-file",
        action="store_true",
        help="Copy the XML result file into the workspace",
    )
    parser.add_argument(
        "--no-copy-html-reports",
        dest="copy_html_reports",
        action="store_false",
        help="Do not copy per-analysis HTML reports into the workspace",
    )
    parser.add_argument(
        "--disabled",
        action="store_true",
        help="Skip the analysis without failing the job",
    )
    parser.add_argument(
        "--target-os",
        choices=[t.value for t in TargetOS],
        default=None,
        help="OS family of the analysis host (default: detected)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main() -> None:
    """CLI entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        exit_code = asyncio.run(run(args.provider, args, os.environ))
    except (ProviderNotFoundError, ValidationError, json.JSONDecodeError) as e:
        logging.getLogger("a3_analysis_action").error("Invalid configuration: %s", e)
        exit_code = 2
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
