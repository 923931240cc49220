"""Test orchestration: build, select, run and interpret results."""

import logging
from dataclasses import dataclass
from pathlib import Path

from xcodebuild_mini.artifacts import ArtifactCorrelator
from xcodebuild_mini.build import BuildOrchestrator
from xcodebuild_mini.commands import run_tests_invocation
from xcodebuild_mini.config import XcodebuildConfig
from xcodebuild_mini.diagnostics import fallback_diagnostic
from xcodebuild_mini.enumerator import TestEnumerator
from xcodebuild_mini.errors import ArtifactError, EnumerationError, ProcessStartError
from xcodebuild_mini.executor import ProcessExecutor
from xcodebuild_mini.models.outcome import (
    BuildOutcome,
    TestListing,
    TestRunOutcome,
    TestRunStatus,
    TestSelection,
)
from xcodebuild_mini.models.results import CoverageReport, TestResultsSummary
from xcodebuild_mini.selector import select_tests

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class TestOrchestrator:
    """Runs the tests of a scheme as a short-circuiting pipeline.

    build-for-testing -> allocate bundle -> [enumerate -> select] -> test ->
    read summary -> [coverage]. Each step either yields its value or a
    terminal `TestRunOutcome`; nothing is raised to the caller.
    """

    __test__ = False

    config: XcodebuildConfig
    executor: ProcessExecutor
    builder: BuildOrchestrator
    artifacts: ArtifactCorrelator
    enumerator: TestEnumerator

    @classmethod
    def from_config(
        cls,
        config: XcodebuildConfig,
        executor: ProcessExecutor | None = None,
    ) -> "TestOrchestrator":
        """Wire up all collaborators around a single executor."""
        executor = executor or ProcessExecutor()
        artifacts = ArtifactCorrelator(config=config, executor=executor)
        return cls(
            config=config,
            executor=executor,
            builder=BuildOrchestrator(config=config, executor=executor),
            artifacts=artifacts,
            enumerator=TestEnumerator(
                config=config, executor=executor, artifacts=artifacts
            ),
        )

    async def list_tests(
        self, scheme: str, *, working_directory: Path | None = None
    ) -> TestListing:
        """Enumerate the tests of a scheme without building or running them."""
        try:
            tests = await self.enumerator.enumerate(
                scheme, working_directory=working_directory
            )
        except EnumerationError as exc:
            log.error("Listing tests for %s failed: %s", scheme, exc)
            return TestListing(status="failed", message=str(exc))

        if not tests:
            return TestListing(status="empty")

        return TestListing(status="found", tests=tests)

    async def run_tests(
        self,
        scheme: str,
        *,
        only: str | None = None,
        coverage: bool = False,
        working_directory: Path | None = None,
    ) -> TestRunOutcome:
        """Build for testing, then run all tests or those containing `only`.

        Args:
            scheme: Scheme to test
            only: Substring selecting test identifiers; None runs everything
            coverage: Enable code coverage and attach the coverage report
            working_directory: Project directory (defaults to the current one)

        Returns:
            Outcome describing the first step that ended the run, or the
            test results when the run completed

        """
        build = await self.builder.build(
            scheme, for_testing=True, working_directory=working_directory
        )
        if not build.succeeded:
            log.info("Not running tests for %s: build failed", scheme)
            return TestRunOutcome(status="build_failed", build=build)

        try:
            bundle_path = self.artifacts.allocate()
        except ArtifactError as exc:
            log.error("Could not allocate a result bundle for %s: %s", scheme, exc)
            return TestRunOutcome(status="error", build=build, message=str(exc))

        try:
            selection: TestSelection | None = None
            if only:
                selected = await self._select(
                    scheme, only, build=build, working_directory=working_directory
                )
                if isinstance(selected, TestRunOutcome):
                    return selected
                selection = selected

            return await self._execute(
                scheme,
                bundle_path,
                build=build,
                selection=selection,
                coverage=coverage,
                working_directory=working_directory,
            )
        finally:
            self.artifacts.discard(bundle_path)

    async def _select(
        self,
        scheme: str,
        only: str,
        *,
        build: BuildOutcome,
        working_directory: Path | None,
    ) -> TestSelection | TestRunOutcome:
        try:
            identifiers = await self.enumerator.enumerate(
                scheme, working_directory=working_directory
            )
        except EnumerationError as exc:
            log.error("Enumerating tests for %s failed: %s", scheme, exc)
            return TestRunOutcome(
                status="enumeration_failed", build=build, message=str(exc)
            )

        if not identifiers:
            return TestRunOutcome(status="no_tests_found", build=build)

        selection = select_tests(identifiers, only)
        if selection.is_empty:
            log.info("No tests of %s match %r", scheme, only)
            return TestRunOutcome(status="no_match", build=build, selection=selection)

        log.info(
            "Selected %d of %d test(s) matching %r",
            len(selection.selected),
            len(selection.available),
            only,
        )
        return selection

    async def _execute(
        self,
        scheme: str,
        bundle_path: Path,
        *,
        build: BuildOutcome,
        selection: TestSelection | None,
        coverage: bool,
        working_directory: Path | None,
    ) -> TestRunOutcome:
        invocation = run_tests_invocation(
            self.config,
            scheme,
            bundle_path,
            only_testing=selection.selected if selection else (),
            coverage=coverage,
            working_directory=working_directory,
        )

        try:
            result = await self.executor.run(invocation)
        except ProcessStartError as exc:
            return TestRunOutcome(
                status="error", build=build, selection=selection, message=str(exc)
            )

        # A failing suite exits non-zero too; the summary is authoritative.
        try:
            summary = await self.artifacts.load(
                bundle_path, working_directory=working_directory
            )
        except ArtifactError as exc:
            log.error("Could not read results of %s: %s", scheme, exc)
            message = str(exc)
            if not result.succeeded:
                tail = fallback_diagnostic(result, self.config.output_tail_lines)
                message = f"{message}\n{tail.text}"
            return TestRunOutcome(
                status="results_unreadable",
                build=build,
                selection=selection,
                message=message,
            )

        report: CoverageReport | None = None
        coverage_error: str | None = None
        if coverage:
            try:
                report = await self.artifacts.load_coverage(
                    bundle_path, working_directory=working_directory
                )
            except ArtifactError as exc:
                log.warning("Coverage for %s unavailable: %s", scheme, exc)
                coverage_error = str(exc)

        return TestRunOutcome(
            status=classify_summary(summary),
            total_test_count=summary.total_test_count,
            skipped_test_count=summary.skipped_tests,
            failures=list(summary.test_failures),
            coverage=report,
            coverage_error=coverage_error,
            build=build,
            selection=selection,
        )


def classify_summary(summary: TestResultsSummary) -> TestRunStatus:
    """Map a result summary to passed, failed or the ambiguous zero-test case."""
    if summary.total_test_count == 0:
        return "no_tests_ran"
    if summary.test_failures:
        return "failed"
    return "passed"
