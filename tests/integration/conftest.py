"""Fixtures for integration tests."""

import sys
from pathlib import Path

import pytest

from a3_analysis_action.testing.documents import project_document


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Skip launcher tests on hosts without a POSIX shell."""
    if sys.platform != "win32":
        return
    skip = pytest.mark.skip(reason="fake launcher is a POSIX shell script")
    for item in items:
        if "integration" in item.path.parts:
            item.add_marker(skip)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a workspace holding a minimal project file."""
    workspace = tmp_path / "ws"
    workspace.mkdir()
    (workspace / "project.apx").write_text(project_document(), encoding="utf-8")
    return workspace
