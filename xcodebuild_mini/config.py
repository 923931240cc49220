"""Configuration for xcodebuild invocations."""

import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DESTINATION = "platform=macOS,arch=arm64"


def default_scratch_dir() -> Path:
    """Scratch area for result bundles and enumeration output."""
    return Path(tempfile.gettempdir()) / "xcodebuild-mini"


class XcodebuildConfig(BaseModel):
    """Environment settings passed explicitly to every orchestrator.

    The destination is fixed per config rather than per call; a
    destination_timeout of 0 makes xcodebuild wait for the device forever.
    """

    model_config = ConfigDict(frozen=True)

    xcodebuild: str = "xcodebuild"
    xcrun: str = "xcrun"
    destination: str = DEFAULT_DESTINATION
    destination_timeout: int = Field(default=0, ge=0)
    scratch_dir: Path = Field(default_factory=default_scratch_dir)
    keep_artifacts: bool = False
    output_tail_lines: int = Field(default=20, gt=0)
