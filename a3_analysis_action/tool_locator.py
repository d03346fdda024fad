"""Resolution of the a³ launcher executable, pre-installed or from a package."""

import logging
import re
import tarfile
import zipfile
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from a3_analysis_action.errors import ToolInstallationError
from a3_analysis_action.paths import TargetOS

log = logging.getLogger(__name__)

LAUNCHER_NAME = "alauncher"

PACKAGE_OS_NAMES: Mapping[TargetOS, str] = {
    TargetOS.UNIX: "linux64",
    TargetOS.WINDOWS: "win64",
    TargetOS.MACOS: "macos",
}

PACKAGE_SUFFIXES: Mapping[TargetOS, Sequence[str]] = {
    TargetOS.UNIX: (".tgz", ".tar.gz"),
    TargetOS.WINDOWS: (".zip",),
    TargetOS.MACOS: (".tgz", ".tar.gz"),
}

# Location of the launcher inside an unpacked package, relative to its root.
INSTALL_TREE: Mapping[TargetOS, Sequence[str]] = {
    TargetOS.UNIX: ("bin", LAUNCHER_NAME),
    TargetOS.WINDOWS: (f"{LAUNCHER_NAME}.exe",),
    TargetOS.MACOS: ("a3.app", "Contents", "MacOS", LAUNCHER_NAME),
}


@dataclass(frozen=True, kw_only=True)
class ToolInstallation:
    """Resolved launcher of one analysis run."""

    executable: Path
    target_os: TargetOS
    build: int = -1
    package: Path | None = None

    @property
    def from_package(self) -> bool:
        """Whether the launcher was unpacked from an installer package."""
        return self.package is not None


@dataclass(frozen=True, kw_only=True)
class InstallerPackage:
    """Installer archive matching the naming scheme."""

    path: Path
    target: str
    build: int

    @property
    def stem(self) -> str:
        """Archive file name without its archive suffix."""
        name = self.path.name
        for suffix in (".tar.gz", ".tgz", ".zip"):
            if name.endswith(suffix):
                return name[: -len(suffix)]
        return name


def launcher_filename(target_os: TargetOS) -> str:
    """Return the platform-specific launcher file name."""
    return f"{LAUNCHER_NAME}.exe" if target_os.is_windows else LAUNCHER_NAME


def locate_direct(tool_path: str | Path, target_os: TargetOS) -> ToolInstallation:
    """Resolve a user-supplied launcher location.

    A directory gets the launcher file name appended. Any file is replaced by
    the launcher next to it, so pointing at another binary of the installation
    still works. A missing launcher is only detected when it is launched.
    """
    path = Path(tool_path)
    if path.is_dir():
        directory = path
    elif path.is_file() or path.name.lower().startswith(LAUNCHER_NAME):
        directory = path.parent
    else:
        directory = path
    return ToolInstallation(
        executable=directory / launcher_filename(target_os),
        target_os=target_os,
    )


def parse_package_name(
    filename: str, target: str, target_os: TargetOS
) -> int | None:
    """Return the build number of a matching installer archive name.

    The expected scheme is ``a3_<target>_<osname>_b<build>_<suffix>``, where
    the OS name and archive suffix must match *target_os*.

    Returns:
        The build number, or None when the name does not match.

    """
    if not filename.endswith(tuple(PACKAGE_SUFFIXES[target_os])):
        return None

    pattern = re.compile(
        rf"a3_{re.escape(target)}_{re.escape(PACKAGE_OS_NAMES[target_os])}"
        r"_b(?P<build>\d+)_.+"
    )
    if (match := pattern.fullmatch(filename)) is None:
        return None
    return int(match.group("build"))


def find_packages(
    package_dir: Path, target: str, target_os: TargetOS
) -> Sequence[InstallerPackage]:
    """List matching installer archives directly inside *package_dir*.

    Raises:
        OSError: If the directory cannot be listed

    """
    packages: list[InstallerPackage] = []
    for entry in package_dir.iterdir():
        if not entry.is_file():
            continue
        build = parse_package_name(entry.name, target, target_os)
        if build is not None:
            packages.append(InstallerPackage(path=entry, target=target, build=build))
    return packages


def select_package(packages: Sequence[InstallerPackage]) -> InstallerPackage | None:
    """Pick the package with the highest build number."""
    if not packages:
        return None
    return max(packages, key=lambda package: package.build)


def unpack_package(
    package: InstallerPackage, workspace: Path, target_os: TargetOS
) -> Path:
    """Unpack *package* into the workspace and return the installation root.

    Raises:
        ToolInstallationError: If the archive is corrupt or tries to write
            outside the installation root

    """
    destination = workspace / package.stem
    destination.mkdir(parents=True, exist_ok=True)
    log.info("Unpacking %s into %s", package.path, destination)

    try:
        if target_os.is_windows:
            with zipfile.ZipFile(package.path) as archive:
                root = destination.resolve()
                for member in archive.namelist():
                    if not (destination / member).resolve().is_relative_to(root):
                        raise ToolInstallationError(
                            f"Archive member {member!r} escapes {destination}"
                        )
                archive.extractall(destination)
        else:
            with tarfile.open(package.path, mode="r:gz") as archive:
                archive.extractall(destination, filter="data")
    except (OSError, zipfile.BadZipFile, tarfile.TarError) as e:
        raise ToolInstallationError(
            f"Installer package {package.path} could not be unpacked: {e}"
        ) from e

    return destination


def locate_package(
    package_dir: str | Path,
    target: str,
    target_os: TargetOS,
    workspace: Path,
    fallback_tool_path: str | Path | None = None,
) -> ToolInstallation | None:
    """Resolve the launcher from a directory of versioned installer packages.

    The highest-build package for *target* and *target_os* is unpacked into
    *workspace*. Without a matching package, resolution falls back to
    :func:`locate_direct` on *fallback_tool_path*.

    Args:
        package_dir: Directory holding ``a3_*`` installer archives
        target: Analysis target identifier (e.g. CPU architecture tag)
        target_os: OS family of the machine running the analysis
        workspace: Directory to unpack the package into
        fallback_tool_path: Pre-installed launcher location

    Returns:
        The resolved installation, or None when the package directory cannot
        be listed or nothing matched and no fallback was given.

    Raises:
        ToolInstallationError: If the selected package cannot be unpacked

    """
    try:
        packages = find_packages(Path(package_dir), target, target_os)
    except OSError as e:
        log.error("Cannot list installer package directory %s: %s", package_dir, e)
        return None

    package = select_package(packages)
    if package is None:
        log.info(
            "No installer package for target=%s os=%s in %s",
            target,
            target_os,
            package_dir,
        )
        if fallback_tool_path is None:
            return None
        return locate_direct(fallback_tool_path, target_os)

    log.info("Selected installer package %s (build %d)", package.path.name, package.build)
    root = unpack_package(package, workspace, target_os)
    return ToolInstallation(
        executable=root.joinpath(*INSTALL_TREE[target_os]),
        target_os=target_os,
        build=package.build,
        package=package.path,
    )
