"""End-to-end tests against fake xcodebuild and xcrun executables."""

from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeAlias

from xcodebuild_mini.build import BuildOrchestrator
from xcodebuild_mini.config import XcodebuildConfig
from xcodebuild_mini.orchestrator import TestOrchestrator
from xcodebuild_mini.report import (
    NO_TESTS_RAN,
    format_build_outcome,
    format_test_listing,
    format_test_run,
)
from xcodebuild_mini.testing.payloads import (
    coverage_report,
    enumeration,
    failure_entry,
    results_summary,
)

ERROR_LINE = "/src/App/Model.swift:12:5: error: cannot find 'foo' in scope"
WARNING_LINE = "/src/App/View.swift:3:9: warning: variable 'x' was never used"

Scenario: TypeAlias = Callable[..., None]
Calls: TypeAlias = Callable[[], list[list[str]]]


class TestBuild:
    """Tests for building through the fake xcodebuild."""

    async def test_success(
        self, fake_config: XcodebuildConfig, scenario: Scenario, project_dir: Path
    ) -> None:
        """A clean build reports plain success."""
        scenario(build_output="** BUILD SUCCEEDED **")

        outcome = await BuildOrchestrator(config=fake_config).build(
            "App", working_directory=project_dir
        )

        assert format_build_outcome(outcome) == "BUILD SUCCEEDED!"

    async def test_failure_from_stderr_diagnostics(
        self, fake_config: XcodebuildConfig, scenario: Scenario, project_dir: Path
    ) -> None:
        """Diagnostics printed on stderr are classified errors-first."""
        scenario(build_output=f"{WARNING_LINE}\n{ERROR_LINE}", build_exit=65)

        outcome = await BuildOrchestrator(config=fake_config).build(
            "App", working_directory=project_dir, warn=True
        )

        assert format_build_outcome(outcome) == (
            f"BUILD FAILED!\n{ERROR_LINE}\n{WARNING_LINE}"
        )

    async def test_missing_xcodebuild(
        self, fake_config: XcodebuildConfig, tmp_path: Path
    ) -> None:
        """A missing tool is reported as a failed build."""
        config = fake_config.model_copy(
            update={"xcodebuild": str(tmp_path / "missing")}
        )

        outcome = await BuildOrchestrator(config=config).build("App")

        assert outcome.status == "failure"
        assert "Could not start" in format_build_outcome(outcome)


class TestRunTests:
    """Tests for the full test pipeline through the fake tools."""

    async def test_failed_run_with_selection_and_coverage(
        self,
        fake_config: XcodebuildConfig,
        scenario: Scenario,
        xcodebuild_calls: Calls,
        project_dir: Path,
    ) -> None:
        """Selects, runs, reports every failure and appends coverage."""
        scenario(
            enumeration=enumeration(["A/S/t1()", "A/S/t2()", "B/S/other()"]),
            summary=results_summary(
                total_test_count=2,
                failures=[
                    failure_entry(
                        test_name="t1",
                        test_identifier_string="A/S/t1()",
                        failure_text="assert false",
                    )
                ],
            ),
            coverage=coverage_report(("AppCore", 3, 4)),
            test_exit=65,
        )
        orchestrator = TestOrchestrator.from_config(fake_config)

        outcome = await orchestrator.run_tests(
            "App", only="A/S", coverage=True, working_directory=project_dir
        )

        assert outcome.status == "failed"
        text = format_test_run(outcome)
        assert text.startswith("Selected 2 of 3 tests matching 'A/S'.")
        assert "1. t1\n   Identifier: A/S/t1()\n   Failure: assert false" in text
        assert text.endswith("  - AppCore: 75.00% (3/4 lines)")

        calls = xcodebuild_calls()
        assert [call[0] for call in calls[:1]] == ["build-for-testing"]
        test_call = calls[-1]
        assert "-only-testing:A/S/t1()" in test_call
        assert "-only-testing:A/S/t2()" in test_call
        assert "-only-testing:B/S/other()" not in test_call
        assert list(fake_config.scratch_dir.iterdir()) == []

    async def test_no_tests_ran(
        self, fake_config: XcodebuildConfig, scenario: Scenario
    ) -> None:
        """A zero count in the summary is reported as no tests run."""
        scenario(summary=results_summary(total_test_count=0))

        outcome = await TestOrchestrator.from_config(fake_config).run_tests("App")

        assert format_test_run(outcome) == NO_TESTS_RAN

    async def test_build_failure_skips_run(
        self,
        fake_config: XcodebuildConfig,
        scenario: Scenario,
        xcodebuild_calls: Calls,
    ) -> None:
        """Only the build is attempted when it fails."""
        scenario(build_output=ERROR_LINE, build_exit=65)

        outcome = await TestOrchestrator.from_config(fake_config).run_tests("App")

        assert outcome.status == "build_failed"
        assert len(xcodebuild_calls()) == 1

    async def test_no_match(
        self,
        fake_config: XcodebuildConfig,
        scenario: Scenario,
        xcodebuild_calls: Calls,
    ) -> None:
        """A filter matching nothing lists the available tests."""
        scenario(enumeration=enumeration(["A/S/t1()", "A/S/t2()"]))

        outcome = await TestOrchestrator.from_config(fake_config).run_tests(
            "App", only="zzz"
        )

        assert format_test_run(outcome) == (
            "No tests match 'zzz'. Available tests:\n1. A/S/t1()\n2. A/S/t2()"
        )
        assert not any("-resultBundlePath" in call for call in xcodebuild_calls())


async def test_list_tests(fake_config: XcodebuildConfig, scenario: Scenario) -> None:
    """Lists enumerated tests in declaration order."""
    payload: dict[str, Any] = enumeration(["A/S/t2()", "A/S/t1()"])
    scenario(enumeration=payload)

    listing = await TestOrchestrator.from_config(fake_config).list_tests("App")

    assert format_test_listing(listing) == "Found 2 tests:\n1. A/S/t2()\n2. A/S/t1()"
