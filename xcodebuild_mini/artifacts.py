"""Allocation and interpretation of test result bundles."""

import logging
import shutil
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from pydantic import ValidationError

from xcodebuild_mini.commands import coverage_invocation, summary_invocation
from xcodebuild_mini.config import XcodebuildConfig
from xcodebuild_mini.errors import ArtifactError, ProcessStartError
from xcodebuild_mini.executor import ProcessExecutor
from xcodebuild_mini.models.base import Model
from xcodebuild_mini.models.invocation import Invocation
from xcodebuild_mini.models.results import CoverageReport, TestResultsSummary

log = logging.getLogger(__name__)

M = TypeVar("M", bound=Model)


@dataclass(frozen=True, kw_only=True)
class ArtifactCorrelator:
    """Ties a test run to the result bundle it writes.

    A path is allocated before the run so the run can target it, and the
    bundle is queried through xcrun after the run completes. Paths carry a
    random token so concurrent runs never share one.
    """

    config: XcodebuildConfig
    executor: ProcessExecutor = field(default_factory=ProcessExecutor)

    def allocate(self, suffix: str = ".xcresult") -> Path:
        """Return a fresh path in the scratch directory.

        The directory is created; the path itself is not, since xcodebuild
        refuses to overwrite an existing result bundle.

        Raises:
            ArtifactError: If the scratch directory cannot be created

        """
        try:
            self.config.scratch_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ArtifactError(
                f"Could not create scratch directory {self.config.scratch_dir}: {exc}"
            ) from exc
        path = self.config.scratch_dir / f"{uuid.uuid4().hex}{suffix}"
        log.debug("Allocated artifact path %s", path)
        return path

    async def load(
        self, path: Path, *, working_directory: Path | None = None
    ) -> TestResultsSummary:
        """Read the test summary of a result bundle.

        Raises:
            ArtifactError: If the bundle is missing, the query fails, or the
                summary is not valid JSON

        """
        if not path.exists():
            raise ArtifactError(f"Result bundle not found at {path}")

        invocation = summary_invocation(
            self.config, path, working_directory=working_directory
        )
        return await self._query(invocation, TestResultsSummary, "test summary")

    async def load_coverage(
        self, path: Path, *, working_directory: Path | None = None
    ) -> CoverageReport:
        """Read the coverage report stored in the same result bundle.

        Raises:
            ArtifactError: If the report cannot be produced or parsed

        """
        invocation = coverage_invocation(
            self.config, path, working_directory=working_directory
        )
        return await self._query(invocation, CoverageReport, "coverage report")

    def discard(self, path: Path) -> None:
        """Remove a scratch artifact unless artifacts are being kept.

        Failures are logged only; cleanup never changes an outcome.
        """
        if self.config.keep_artifacts:
            log.info("Keeping artifact %s", path)
            return
        try:
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink(missing_ok=True)
        except OSError as exc:
            log.warning("Could not remove artifact %s: %s", path, exc)

    async def _query(
        self, invocation: Invocation, model: type[M], what: str
    ) -> M:
        try:
            result = await self.executor.run(invocation, combine_output=False)
        except ProcessStartError as exc:
            raise ArtifactError(f"Could not read {what}: {exc}") from exc

        if not result.succeeded:
            detail = (result.errors or result.output).strip()
            raise ArtifactError(
                f"Could not read {what}: {invocation.command} exited with "
                f"status {result.exit_code}: {detail}"
            )

        try:
            return model.model_validate_json(result.output)
        except ValidationError as exc:
            raise ArtifactError(f"Could not parse {what}: {exc}") from exc
