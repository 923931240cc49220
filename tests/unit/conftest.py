"""Fixtures for unit tests."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from xcodebuild_mini.config import XcodebuildConfig
from xcodebuild_mini.executor import ProcessExecutor


@pytest.fixture
def config(tmp_path: Path) -> XcodebuildConfig:
    """Config with a per-test scratch directory."""
    return XcodebuildConfig(scratch_dir=tmp_path / "scratch")


@pytest.fixture
def executor_mock() -> Mock:
    """Create mock executor; `run` is an AsyncMock."""
    return Mock(spec=ProcessExecutor)
