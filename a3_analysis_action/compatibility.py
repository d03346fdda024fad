"""Version gating of the installed a³ against the minimum supported build."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from a3_analysis_action.command_builder import build_version_command
from a3_analysis_action.process import ProcessRunner
from a3_analysis_action.tool_locator import ToolInstallation

log = logging.getLogger(__name__)

REQUIRED_BUILD = "Build: 7686572"
REQUIRED_VERSION = "Version: 20.10"


@dataclass(frozen=True, kw_only=True)
class CompatibilityResult:
    """Outcome of comparing the installed build with the required one."""

    compatible: bool
    found_build: int
    required_build: int

    @property
    def message(self) -> str:
        """Human readable summary naming both builds."""
        found = str(self.found_build) if self.found_build >= 0 else "unknown"
        if self.compatible:
            return f"a³ build {found} satisfies required build {self.required_build}"
        return (
            f"a³ build {found} is incompatible, build {self.required_build} "
            f"({REQUIRED_VERSION}) or newer is required"
        )


def extract_build_number(line: str | None) -> int:
    """Parse the last whitespace-separated token of *line* as a build number.

    Returns:
        The build number, or -1 when the line is empty or not numeric.

    """
    if not line:
        return -1
    tokens = line.split()
    if not tokens:
        return -1
    try:
        return int(tokens[-1])
    except ValueError:
        return -1


def read_build_from_version_file(path: Path) -> int:
    """Read the build number from a ``--version-file`` output file.

    The first line with a token starting with ``build`` (any case) is used.
    """
    try:
        lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as e:
        log.error("Cannot read version file %s: %s", path, e)
        return -1

    for line in lines:
        if any(token.lower().startswith("build") for token in line.split()):
            return extract_build_number(line)

    log.error("No build line found in version file %s", path)
    return -1


def check_compatibility(
    found_build: int, required: str = REQUIRED_BUILD
) -> CompatibilityResult:
    """Compare *found_build* against the *required* ``Build: <N>`` string.

    Unknown builds on either side are treated as incompatible.
    """
    required_build = extract_build_number(required)
    compatible = found_build >= 0 and required_build >= 0
    compatible = compatible and found_build >= required_build
    return CompatibilityResult(
        compatible=compatible,
        found_build=found_build,
        required_build=required_build,
    )


async def query_installed_build(
    runner: ProcessRunner,
    installation: ToolInstallation,
    target: str,
    version_file: Path,
    *,
    env: Mapping[str, str],
    cwd: Path,
) -> int:
    """Determine the build number of *installation*.

    Package installations carry their build in the archive name. Otherwise
    the launcher is asked to write its version information to
    *version_file*, which is removed again afterwards.
    """
    if installation.from_package and installation.build >= 0:
        log.info("Build %d taken from installer package name", installation.build)
        return installation.build

    command = build_version_command(installation, target, version_file)
    exit_code = await runner.run(command, env=env, cwd=cwd)
    if exit_code != 0:
        log.warning("Version query exited with code %d", exit_code)

    build = read_build_from_version_file(version_file)
    try:
        version_file.unlink(missing_ok=True)
    except OSError as e:
        log.warning("Cannot remove version file %s: %s", version_file, e)
    return build
