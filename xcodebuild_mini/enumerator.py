"""Enumerate the tests of a scheme without running them."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from xcodebuild_mini.artifacts import ArtifactCorrelator
from xcodebuild_mini.commands import enumerate_tests_invocation
from xcodebuild_mini.config import XcodebuildConfig
from xcodebuild_mini.errors import ArtifactError, EnumerationError, ProcessStartError
from xcodebuild_mini.executor import ProcessExecutor
from xcodebuild_mini.models.results import EnumerationDocument

log = logging.getLogger(__name__)


def parse_enumeration(document: str) -> Sequence[str]:
    """Flatten an enumeration document into test identifiers.

    Raises:
        EnumerationError: If the document is not valid enumeration JSON

    """
    try:
        parsed = EnumerationDocument.model_validate_json(document)
    except ValidationError as exc:
        raise EnumerationError(f"Could not parse test enumeration: {exc}") from exc

    for error in parsed.errors:
        log.warning("Test enumeration reported: %s", error)

    return parsed.identifiers()


@dataclass(frozen=True, kw_only=True)
class TestEnumerator:
    """Lists test identifiers of a scheme in declaration order."""

    __test__ = False

    config: XcodebuildConfig
    executor: ProcessExecutor = field(default_factory=ProcessExecutor)
    artifacts: ArtifactCorrelator

    async def enumerate(
        self, scheme: str, *, working_directory: Path | None = None
    ) -> Sequence[str]:
        """Return every enabled test identifier of the scheme.

        An empty list means the tool ran fine and found no tests.

        Raises:
            EnumerationError: If xcodebuild cannot be run, exits non-zero, has no usable
                scratch directory, or produces an unreadable document

        """
        try:
            output_path = self.artifacts.allocate(suffix=".json")
        except ArtifactError as exc:
            raise EnumerationError(str(exc)) from exc

        invocation = enumerate_tests_invocation(
            self.config, scheme, output_path, working_directory=working_directory
        )

        try:
            try:
                result = await self.executor.run(invocation, combine_output=False)
            except ProcessStartError as exc:
                raise EnumerationError(str(exc)) from exc

            if not result.succeeded:
                detail = (result.errors or result.output).strip()
                raise EnumerationError(
                    f"xcodebuild exited with status {result.exit_code}: {detail}"
                )

            if output_path.exists():
                try:
                    document = output_path.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as exc:
                    raise EnumerationError(
                        f"Could not read test enumeration from {output_path}: {exc}"
                    ) from exc
            else:
                log.info("No enumeration file written, reading standard output")
                document = result.output

            identifiers = parse_enumeration(document)
        finally:
            self.artifacts.discard(output_path)

        log.info("Enumerated %d test(s) for scheme %s", len(identifiers), scheme)
        return identifiers
