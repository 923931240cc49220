"""Models for the outcomes of build, enumeration and test operations."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, TypeAlias

from xcodebuild_mini.models.results import CoverageReport, TestFailure

Severity: TypeAlias = Literal["error", "warning"]

BuildStatus: TypeAlias = Literal["success", "success_with_warnings", "failure"]

ListingStatus: TypeAlias = Literal["found", "empty", "failed"]

TestRunStatus: TypeAlias = Literal[
    "passed",
    "failed",
    "no_tests_ran",
    "no_tests_found",
    "no_match",
    "build_failed",
    "enumeration_failed",
    "results_unreadable",
    "error",
]


@dataclass(frozen=True, kw_only=True)
class DiagnosticLine:
    """A single output line tagged with its severity."""

    severity: Severity
    text: str


@dataclass(frozen=True, kw_only=True)
class TestSelection:
    """Identifiers matching a filter, along with everything that was available."""

    __test__ = False

    only: str
    available: Sequence[str]
    selected: Sequence[str]

    @property
    def is_empty(self) -> bool:
        """Whether the filter matched nothing."""
        return not self.selected


@dataclass(frozen=True, kw_only=True)
class BuildOutcome:
    """Terminal result of one build or build-for-testing invocation."""

    status: BuildStatus
    for_testing: bool = False
    diagnostics: Sequence[DiagnosticLine] = ()
    output: str = ""

    @property
    def succeeded(self) -> bool:
        """Whether dependent steps may proceed.

        Warnings gate exactly like a clean build.
        """
        return self.status != "failure"

    @property
    def errors(self) -> Sequence[DiagnosticLine]:
        """Error diagnostics only."""
        return [d for d in self.diagnostics if d.severity == "error"]

    @property
    def warnings(self) -> Sequence[DiagnosticLine]:
        """Warning diagnostics only."""
        return [d for d in self.diagnostics if d.severity == "warning"]


@dataclass(frozen=True, kw_only=True)
class TestListing:
    """Result of enumerating the tests of a scheme."""

    __test__ = False

    status: ListingStatus
    tests: Sequence[str] = ()
    message: str | None = None


@dataclass(frozen=True, kw_only=True)
class TestRunOutcome:
    """Result of a full test run, including every early exit.

    Only `passed` and `failed` carry a meaningful test count and failure list.
    `build` is set whenever the build step ran, `selection` whenever a
    filter was applied.
    """

    __test__ = False

    status: TestRunStatus
    total_test_count: int = 0
    skipped_test_count: int = 0
    failures: Sequence[TestFailure] = ()
    coverage: CoverageReport | None = None
    coverage_error: str | None = None
    build: BuildOutcome | None = None
    selection: TestSelection | None = None
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        """Whether tests ran and none failed."""
        return self.status == "passed"
