"""Fixtures for integration tests running fake xcodebuild and xcrun scripts."""

import json
import stat
import sys
from pathlib import Path
from typing import Any, Protocol

import pytest

from xcodebuild_mini.config import XcodebuildConfig

FAKE_XCODEBUILD = """\
import json
import pathlib
import sys

scenario_path = pathlib.Path(__file__).with_name("scenario.json")
scenario = json.loads(scenario_path.read_text())
args = sys.argv[1:]

with scenario_path.with_name("calls.jsonl").open("a") as calls:
    calls.write(json.dumps(args) + "\\n")

if args[0] in ("build", "build-for-testing"):
    print("Command line invocation:")
    print(scenario.get("build_output", ""), file=sys.stderr)
    sys.exit(scenario.get("build_exit", 0))

if "-enumerate-tests" in args:
    out = args[args.index("-test-enumeration-output-path") + 1]
    pathlib.Path(out).write_text(json.dumps(scenario["enumeration"]))
    sys.exit(0)

bundle = pathlib.Path(args[args.index("-resultBundlePath") + 1])
bundle.mkdir()
(bundle / "summary.json").write_text(json.dumps(scenario["summary"]))
(bundle / "coverage.json").write_text(json.dumps(scenario.get("coverage", {})))
print("Test session results, code coverage, and logs:")
print("\\t" + str(bundle))
sys.exit(scenario.get("test_exit", 0))
"""

FAKE_XCRUN = """\
import pathlib
import sys

args = sys.argv[1:]
if args[0] == "xcresulttool":
    bundle = pathlib.Path(args[args.index("--path") + 1])
    print((bundle / "summary.json").read_text())
elif args[0] == "xccov":
    print((pathlib.Path(args[-1]) / "coverage.json").read_text())
else:
    print("unknown tool", file=sys.stderr)
    sys.exit(1)
"""


class ScenarioFn(Protocol):
    """Protocol for scenario writing function."""

    def __call__(self, **scenario: Any) -> None:
        """Write the behaviour of the fake tools."""


class CallsFn(Protocol):
    """Protocol for reading recorded fake xcodebuild calls."""

    def __call__(self) -> list[list[str]]:
        """Return the argument lists of every xcodebuild call so far."""


def write_script(path: Path, body: str) -> Path:
    """Write an executable Python script using the current interpreter."""
    path.write_text(f"#!{sys.executable}\n{body}")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def tools_dir(tmp_path: Path) -> Path:
    """Directory holding the fake tools and their scenario."""
    directory = tmp_path / "tools"
    directory.mkdir()
    write_script(directory / "xcodebuild", FAKE_XCODEBUILD)
    write_script(directory / "xcrun", FAKE_XCRUN)
    return directory


@pytest.fixture
def scenario(tools_dir: Path) -> ScenarioFn:
    """Return a function to set what the fake tools print and return."""

    def _scenario(**values: Any) -> None:
        (tools_dir / "scenario.json").write_text(json.dumps(values))

    return _scenario


@pytest.fixture
def xcodebuild_calls(tools_dir: Path) -> CallsFn:
    """Return a function listing the recorded xcodebuild calls."""

    def _calls() -> list[list[str]]:
        calls_file = tools_dir / "calls.jsonl"
        if not calls_file.exists():
            return []
        return [json.loads(line) for line in calls_file.read_text().splitlines()]

    return _calls


@pytest.fixture
def fake_config(tools_dir: Path, tmp_path: Path) -> XcodebuildConfig:
    """Config pointing at the fake tools with a private scratch directory."""
    return XcodebuildConfig(
        xcodebuild=str(tools_dir / "xcodebuild"),
        xcrun=str(tools_dir / "xcrun"),
        scratch_dir=tmp_path / "scratch",
    )


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """An empty project directory used as working directory."""
    directory = tmp_path / "project"
    directory.mkdir()
    return directory
