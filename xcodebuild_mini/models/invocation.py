"""Models for external command invocations and their results."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, kw_only=True)
class Invocation:
    """A single command line to run, built fresh for every call."""

    command: str
    args: Sequence[str]
    working_directory: Path | None = None

    def argv(self) -> list[str]:
        """Return the full argument vector including the command."""
        return [self.command, *self.args]


@dataclass(frozen=True, kw_only=True)
class ExecutionResult:
    """Exit status and captured output of a finished command.

    `output` holds stdout and stderr interleaved unless the command was run
    with separate streams, in which case stderr lands in `errors`.
    """

    exit_code: int
    output: str
    errors: str = ""

    @property
    def succeeded(self) -> bool:
        """Whether the command exited with status 0."""
        return self.exit_code == 0
