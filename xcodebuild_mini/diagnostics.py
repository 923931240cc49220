"""Classify compiler diagnostics found in xcodebuild output."""

import re
from collections.abc import Sequence

from xcodebuild_mini.models.invocation import ExecutionResult
from xcodebuild_mini.models.outcome import DiagnosticLine

# file.swift:12:5: error: message
DIAGNOSTIC_PATTERN = re.compile(r"\d+: (?P<severity>error|warning): ")


def classify_diagnostics(
    output: str, *, include_warnings: bool = False
) -> Sequence[DiagnosticLine]:
    """Extract diagnostic lines from raw tool output.

    Every matching line is kept, duplicates included. Errors come first,
    then warnings, each class in original output order.

    Args:
        output: Combined stdout/stderr of the tool
        include_warnings: Whether to collect warning lines

    Returns:
        Diagnostics ordered errors-first

    """
    errors: list[DiagnosticLine] = []
    warnings: list[DiagnosticLine] = []

    for line in output.splitlines():
        match = DIAGNOSTIC_PATTERN.search(line)
        if match is None:
            continue
        if match["severity"] == "error":
            errors.append(DiagnosticLine(severity="error", text=line))
        elif include_warnings:
            warnings.append(DiagnosticLine(severity="warning", text=line))

    return [*errors, *warnings]


def fallback_diagnostic(result: ExecutionResult, tail_lines: int) -> DiagnosticLine:
    """Describe a failure that produced no recognizable error line."""
    lines = [line for line in result.output.splitlines() if line.strip()]
    tail = "\n".join(lines[-tail_lines:]) if lines else "(no output)"
    return DiagnosticLine(
        severity="error",
        text=(
            f"Unknown error (exit status {result.exit_code}). "
            f"Last {min(len(lines), tail_lines)} line(s) of output:\n{tail}"
        ),
    )
