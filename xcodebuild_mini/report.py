"""Human-readable text for build, listing and test outcomes."""

from collections.abc import Sequence

from xcodebuild_mini.models.outcome import BuildOutcome, TestListing, TestRunOutcome
from xcodebuild_mini.models.results import CoverageReport, TestFailure

NO_TESTS_RAN = "No tests were run. Are you sure the specified test(s) exist?"
NO_TESTS_FOUND = "No tests found for this scheme."


def format_build_outcome(outcome: BuildOutcome) -> str:
    """Render a build outcome; diagnostics are listed errors-first."""
    if outcome.status == "success":
        return "BUILD SUCCEEDED!"

    lines = [d.text for d in outcome.diagnostics]
    if outcome.status == "success_with_warnings":
        return "BUILD SUCCEEDED WITH WARNINGS!\nWarnings:\n" + "\n".join(lines)

    return "BUILD FAILED!\n" + "\n".join(lines)


def numbered(items: Sequence[str]) -> str:
    """Number items starting at 1, one per line."""
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))


def format_test_listing(listing: TestListing) -> str:
    """Render the result of a test enumeration."""
    if listing.status == "failed":
        return f"Failed to list tests: {listing.message}"
    if listing.status == "empty":
        return NO_TESTS_FOUND
    return f"Found {len(listing.tests)} tests:\n{numbered(listing.tests)}"


def format_failure(index: int, failure: TestFailure) -> str:
    """Render one failure with its identifier and full failure text."""
    return (
        f"{index}. {failure.test_name}\n"
        f"   Identifier: {failure.test_identifier_string}\n"
        f"   Failure: {failure.failure_text}"
    )


def format_coverage(report: CoverageReport) -> str:
    """Render overall and per-target line coverage."""
    lines = [
        f"Code Coverage: {report.line_coverage:.2%} "
        f"({report.covered_lines}/{report.executable_lines} lines)"
    ]
    lines.extend(
        f"  - {target.name}: {target.line_coverage:.2%} "
        f"({target.covered_lines}/{target.executable_lines} lines)"
        for target in report.targets
    )
    return "\n".join(lines)


def format_test_run(outcome: TestRunOutcome) -> str:
    """Render a test run outcome as a single report."""
    if outcome.status == "build_failed" and outcome.build is not None:
        return format_build_outcome(outcome.build)
    if outcome.status == "enumeration_failed":
        return f"Failed to list tests: {outcome.message}"
    if outcome.status == "no_tests_found":
        return NO_TESTS_FOUND
    if outcome.status == "no_match" and outcome.selection is not None:
        return (
            f"No tests match '{outcome.selection.only}'. "
            f"Available tests:\n{numbered(outcome.selection.available)}"
        )
    if outcome.status == "results_unreadable":
        return f"Could not interpret test results: {outcome.message}"
    if outcome.status == "error":
        return f"TEST FAILED!\n{outcome.message}"

    sections: list[str] = []
    if outcome.selection is not None:
        sections.append(
            f"Selected {len(outcome.selection.selected)} of "
            f"{len(outcome.selection.available)} tests matching "
            f"'{outcome.selection.only}'."
        )

    totals = f"Total tests: {outcome.total_test_count}"
    if outcome.skipped_test_count:
        totals += f", skipped: {outcome.skipped_test_count}"

    if outcome.status == "no_tests_ran":
        sections.append(NO_TESTS_RAN)
    elif outcome.status == "passed":
        sections.append(f"TEST SUCCEEDED\n\n{totals}")
    else:
        failures = "\n\n".join(
            format_failure(i, failure)
            for i, failure in enumerate(outcome.failures, start=1)
        )
        sections.append(
            f"TEST FAILED\n\n"
            f"{totals}, failures: {len(outcome.failures)}\n\n"
            f"Test Failures:\n\n{failures}"
        )

    if outcome.coverage is not None:
        sections.append(format_coverage(outcome.coverage))
    elif outcome.coverage_error is not None:
        sections.append(f"Code Coverage unavailable: {outcome.coverage_error}")

    return "\n\n".join(sections)
