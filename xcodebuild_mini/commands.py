"""Command lines for xcodebuild and the xcrun result tools."""

from collections.abc import Sequence
from pathlib import Path

from xcodebuild_mini.config import XcodebuildConfig
from xcodebuild_mini.models.invocation import Invocation

# Checks unrelated to test content that fail depending on the environment.
VALIDATION_SKIP_FLAGS: Sequence[str] = (
    "-skipPackageUpdates",
    "-skipPackagePluginValidation",
    "-skipMacroValidation",
    "-skipPackageSignatureValidation",
)


def destination_args(config: XcodebuildConfig) -> list[str]:
    """Destination selector and device wait shared by every xcodebuild call."""
    return [
        "-destination",
        config.destination,
        "-destination-timeout",
        str(config.destination_timeout),
    ]


def build_invocation(
    config: XcodebuildConfig,
    scheme: str,
    *,
    for_testing: bool = False,
    working_directory: Path | None = None,
) -> Invocation:
    """Invocation for `build` or `build-for-testing`."""
    return Invocation(
        command=config.xcodebuild,
        args=[
            "build-for-testing" if for_testing else "build",
            "-scheme",
            scheme,
            "-quiet",
            *destination_args(config),
        ],
        working_directory=working_directory,
    )


def enumerate_tests_invocation(
    config: XcodebuildConfig,
    scheme: str,
    output_path: Path,
    *,
    working_directory: Path | None = None,
) -> Invocation:
    """Invocation listing tests as flat JSON written to `output_path`."""
    return Invocation(
        command=config.xcodebuild,
        args=[
            *destination_args(config),
            "-scheme",
            scheme,
            "test",
            "-enumerate-tests",
            "-test-enumeration-style",
            "flat",
            "-test-enumeration-format",
            "json",
            "-test-enumeration-output-path",
            str(output_path),
        ],
        working_directory=working_directory,
    )


def run_tests_invocation(
    config: XcodebuildConfig,
    scheme: str,
    result_bundle_path: Path,
    *,
    only_testing: Sequence[str] = (),
    coverage: bool = False,
    working_directory: Path | None = None,
) -> Invocation:
    """Invocation running the tests of `scheme` into a result bundle.

    One `-only-testing:` flag is added per selected identifier; an empty
    selection runs everything.
    """
    return Invocation(
        command=config.xcodebuild,
        args=[
            *destination_args(config),
            "-scheme",
            scheme,
            "test",
            "-resultBundlePath",
            str(result_bundle_path),
            "-enableCodeCoverage",
            "YES" if coverage else "NO",
            *VALIDATION_SKIP_FLAGS,
            *(f"-only-testing:{identifier}" for identifier in only_testing),
        ],
        working_directory=working_directory,
    )


def summary_invocation(
    config: XcodebuildConfig,
    result_bundle_path: Path,
    *,
    working_directory: Path | None = None,
) -> Invocation:
    """Invocation printing the JSON test summary of a result bundle."""
    return Invocation(
        command=config.xcrun,
        args=[
            "xcresulttool",
            "get",
            "test-results",
            "summary",
            "--path",
            str(result_bundle_path),
        ],
        working_directory=working_directory,
    )


def coverage_invocation(
    config: XcodebuildConfig,
    result_bundle_path: Path,
    *,
    working_directory: Path | None = None,
) -> Invocation:
    """Invocation printing the JSON coverage report of a result bundle."""
    return Invocation(
        command=config.xcrun,
        args=[
            "xccov",
            "view",
            "--report",
            "--json",
            str(result_bundle_path),
        ],
        working_directory=working_directory,
    )
