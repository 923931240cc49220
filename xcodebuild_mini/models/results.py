"""Models for the JSON documents produced by xcodebuild and xcrun."""

from collections.abc import Sequence
from typing import Any

from pydantic import Field, field_validator, model_validator

from xcodebuild_mini.models.base import Model

UNKNOWN = "UNKNOWN"


class TestFailure(Model):
    """A failed test as reported in the result bundle summary."""

    __test__ = False

    test_name: str = UNKNOWN
    test_identifier_string: str = UNKNOWN
    failure_text: str = UNKNOWN

    @field_validator(
        "test_name", "test_identifier_string", "failure_text", mode="before"
    )
    @classmethod
    def _unknown_when_null(cls, value: Any) -> Any:
        return UNKNOWN if value is None else value


class TestResultsSummary(Model):
    """Output of `xcresulttool get test-results summary`."""

    __test__ = False

    total_test_count: int = Field(default=0, ge=0)
    skipped_tests: int = 0
    test_failures: Sequence[TestFailure] = Field(default_factory=list)

    @field_validator("total_test_count", "skipped_tests", mode="before")
    @classmethod
    def _zero_when_null(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("test_failures", mode="before")
    @classmethod
    def _empty_when_null(cls, value: Any) -> Any:
        return [] if value is None else value


class EnumeratedTest(Model):
    """A single test entry of an enumeration value group."""

    __test__ = False

    identifier: str


class EnumerationGroup(Model):
    """Enabled tests of one test plan / configuration."""

    enabled_tests: Sequence[EnumeratedTest] = Field(default_factory=list)


class EnumerationDocument(Model):
    """Output of `xcodebuild test -enumerate-tests` in flat JSON style.

    Accepts the bare list of value groups as well as the wrapping object.
    """

    values: Sequence[EnumerationGroup] = Field(default_factory=list)
    errors: Sequence[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_list(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"values": data}
        return data

    def identifiers(self) -> Sequence[str]:
        """Enabled test identifiers of all groups, in tool order."""
        return [
            test.identifier for group in self.values for test in group.enabled_tests
        ]


class TargetCoverage(Model):
    """Line coverage of a single build target."""

    name: str = UNKNOWN
    line_coverage: float = 0.0
    covered_lines: int = 0
    executable_lines: int = 0


class CoverageReport(Model):
    """Output of `xccov view --report --json`."""

    line_coverage: float = 0.0
    covered_lines: int = 0
    executable_lines: int = 0
    targets: Sequence[TargetCoverage] = Field(default_factory=list)
