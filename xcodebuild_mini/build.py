"""Build orchestration on top of xcodebuild."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from xcodebuild_mini.commands import build_invocation
from xcodebuild_mini.config import XcodebuildConfig
from xcodebuild_mini.diagnostics import classify_diagnostics, fallback_diagnostic
from xcodebuild_mini.errors import ProcessStartError
from xcodebuild_mini.executor import ProcessExecutor
from xcodebuild_mini.models.outcome import BuildOutcome, DiagnosticLine

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class BuildOrchestrator:
    """Runs `build` / `build-for-testing` and classifies the outcome."""

    config: XcodebuildConfig
    executor: ProcessExecutor = field(default_factory=ProcessExecutor)

    async def build(
        self,
        scheme: str,
        *,
        for_testing: bool = False,
        working_directory: Path | None = None,
        warn: bool = False,
    ) -> BuildOutcome:
        """Build the scheme and return a success, warning or failure outcome.

        Args:
            scheme: Scheme to build
            for_testing: Run `build-for-testing` instead of `build`
            working_directory: Project directory (defaults to the current one)
            warn: Collect warning diagnostics as well as errors

        Returns:
            Build outcome with diagnostics ordered errors-first

        """
        invocation = build_invocation(
            self.config,
            scheme,
            for_testing=for_testing,
            working_directory=working_directory,
        )

        try:
            result = await self.executor.run(invocation)
        except ProcessStartError as exc:
            return BuildOutcome(
                status="failure",
                for_testing=for_testing,
                diagnostics=[DiagnosticLine(severity="error", text=str(exc))],
            )

        diagnostics = classify_diagnostics(result.output, include_warnings=warn)
        has_errors = any(d.severity == "error" for d in diagnostics)

        if not result.succeeded or has_errors:
            if not has_errors:
                fallback = fallback_diagnostic(result, self.config.output_tail_lines)
                diagnostics = [fallback, *diagnostics]
            log.info(
                "Build of %s failed (exit status %d, %d diagnostic(s))",
                scheme,
                result.exit_code,
                len(diagnostics),
            )
            return BuildOutcome(
                status="failure",
                for_testing=for_testing,
                diagnostics=diagnostics,
                output=result.output,
            )

        if diagnostics:
            log.info(
                "Build of %s succeeded with %d warning(s)", scheme, len(diagnostics)
            )
            return BuildOutcome(
                status="success_with_warnings",
                for_testing=for_testing,
                diagnostics=diagnostics,
                output=result.output,
            )

        log.info("Build of %s succeeded", scheme)
        return BuildOutcome(
            status="success", for_testing=for_testing, output=result.output
        )
