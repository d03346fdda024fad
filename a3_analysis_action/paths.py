"""Path resolution, separator normalization and argument quoting per target OS."""

import sys
from enum import StrEnum
from pathlib import PurePath, PurePosixPath, PureWindowsPath


class TargetOS(StrEnum):
    """Operating system family of the machine that runs the analysis tool."""

    UNIX = "unix"
    WINDOWS = "windows"
    MACOS = "macos"

    @classmethod
    def current(cls) -> "TargetOS":
        """Detect the OS family of the running interpreter."""
        if sys.platform.startswith("win"):
            return cls.WINDOWS
        if sys.platform == "darwin":
            return cls.MACOS
        return cls.UNIX

    @property
    def is_windows(self) -> bool:
        """Whether paths use backslashes and drive letters."""
        return self is TargetOS.WINDOWS

    @property
    def separator(self) -> str:
        """Path separator used on this OS."""
        return "\\" if self.is_windows else "/"

    def pure_path(self, value: str) -> PurePath:
        """Wrap *value* in the pure path flavour of this OS."""
        if self.is_windows:
            return PureWindowsPath(value)
        return PurePosixPath(value)


def normalize_separators(value: str, target_os: TargetOS) -> str:
    """Rewrite all path separators in *value* to the target OS convention."""
    if target_os.is_windows:
        return value.replace("/", "\\")
    return value.replace("\\", "/")


def is_absolute(value: str, target_os: TargetOS) -> bool:
    """Check whether *value* is an absolute path on the target OS."""
    return target_os.pure_path(normalize_separators(value, target_os)).is_absolute()


def resolve_path(
    reference: str | PurePath,
    base_dir: str | PurePath | None,
    target_os: TargetOS,
) -> str:
    """Resolve *reference* against *base_dir* for the target OS.

    Absolute references are returned unchanged apart from separator
    normalization. Relative references are joined onto *base_dir*; without a
    base directory they stay relative. No existence check is performed.
    """
    normalized = normalize_separators(str(reference), target_os)
    if base_dir is None or is_absolute(normalized, target_os):
        return normalized

    base = normalize_separators(str(base_dir), target_os)
    return str(target_os.pure_path(base) / target_os.pure_path(normalized))


def quote_argument(value: str, target_os: TargetOS) -> str:
    """Quote a single command line argument for display on the target OS.

    Windows arguments are wrapped in double quotes. Unix-like targets get no
    quoting, the caller keeps arguments separated.
    """
    if target_os.is_windows and not (
        len(value) >= 2 and value.startswith('"') and value.endswith('"')
    ):
        return f'"{value}"'
    return value
