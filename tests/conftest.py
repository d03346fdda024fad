"""Shared fixtures."""

import pytest

from a3_analysis_action.testing.runners import FakeRunner


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Create a runner that succeeds without doing anything."""
    return FakeRunner()
