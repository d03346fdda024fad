"""Tests for path resolution and quoting."""

import pytest

from a3_analysis_action.paths import (
    TargetOS,
    is_absolute,
    normalize_separators,
    quote_argument,
    resolve_path,
)


@pytest.mark.parametrize(
    ("value", "target_os", "expected"),
    [
        ("a/b\\c", TargetOS.UNIX, "a/b/c"),
        ("a/b\\c", TargetOS.MACOS, "a/b/c"),
        ("a/b\\c", TargetOS.WINDOWS, "a\\b\\c"),
    ],
)
def test_normalize_separators(value: str, target_os: TargetOS, expected: str) -> None:
    """Rewrites separators to the target OS convention."""
    assert normalize_separators(value, target_os) == expected


def test_absolute_unix_reference_is_kept() -> None:
    """Returns absolute references unchanged."""
    assert resolve_path("/opt/a3/report.txt", "/work", TargetOS.UNIX) == (
        "/opt/a3/report.txt"
    )


def test_relative_unix_reference_is_joined() -> None:
    """Joins relative references onto the base directory."""
    assert resolve_path("out/report.txt", "/work/project", TargetOS.UNIX) == (
        "/work/project/out/report.txt"
    )


def test_relative_windows_reference_is_joined() -> None:
    """Joins with backslashes on Windows targets."""
    assert resolve_path("out/report.txt", "C:/work", TargetOS.WINDOWS) == (
        "C:\\work\\out\\report.txt"
    )


def test_absolute_windows_reference_is_normalized() -> None:
    """Drive-absolute references only get their separators normalized."""
    assert resolve_path("D:/a3/report.txt", "C:\\work", TargetOS.WINDOWS) == (
        "D:\\a3\\report.txt"
    )


def test_without_base_dir_reference_stays_relative() -> None:
    """Keeps relative references relative without a base directory."""
    assert resolve_path("a\\b", None, TargetOS.UNIX) == "a/b"


def test_is_absolute_depends_on_target_os() -> None:
    """Drive letters are only absolute on Windows targets."""
    assert is_absolute("C:\\a3", TargetOS.WINDOWS)
    assert not is_absolute("C:\\a3", TargetOS.UNIX)
    assert is_absolute("/opt", TargetOS.UNIX)


def test_quote_argument_on_windows() -> None:
    """Quotes arguments on Windows, once."""
    assert quote_argument("C:\\Program Files\\a3", TargetOS.WINDOWS) == (
        '"C:\\Program Files\\a3"'
    )
    assert quote_argument('"C:\\a3"', TargetOS.WINDOWS) == '"C:\\a3"'


def test_quote_argument_on_unix_is_noop() -> None:
    """Leaves arguments untouched on Unix-like targets."""
    assert quote_argument("/opt/my a3", TargetOS.UNIX) == "/opt/my a3"


def test_target_os_is_windows() -> None:
    """Only the Windows member reports Windows path conventions."""
    assert TargetOS.WINDOWS.is_windows
    assert not TargetOS.MACOS.is_windows
    assert TargetOS("unix") is TargetOS.UNIX
