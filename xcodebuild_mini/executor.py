"""Run external commands and capture their output."""

import asyncio
import logging
import shlex
from dataclasses import dataclass

from xcodebuild_mini.errors import ProcessStartError
from xcodebuild_mini.models.invocation import ExecutionResult, Invocation

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ProcessExecutor:
    """Runs commands to completion without imposing a deadline.

    A non-zero exit status is returned as data. Only a failure to start the
    process raises.
    """

    encoding: str = "utf-8"

    async def run(
        self,
        invocation: Invocation,
        *,
        combine_output: bool = True,
    ) -> ExecutionResult:
        """Run the invocation and wait for it to exit.

        Args:
            invocation: Command, arguments and working directory
            combine_output: Interleave stderr into stdout. When False, stderr
                is captured separately into `ExecutionResult.errors`.

        Returns:
            Exit status and captured output

        Raises:
            ProcessStartError: If the command could not be started

        """
        log.info("Running: %s", shlex.join(invocation.argv()))

        try:
            process = await asyncio.create_subprocess_exec(
                invocation.command,
                *invocation.args,
                cwd=invocation.working_directory,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=(
                    asyncio.subprocess.STDOUT
                    if combine_output
                    else asyncio.subprocess.PIPE
                ),
            )
        except OSError as exc:
            log.error("Could not start %s: %s", invocation.command, exc)
            raise ProcessStartError(
                f"Could not start '{invocation.command}': {exc}"
            ) from exc

        stdout, stderr = await process.communicate()
        exit_code = process.returncode if process.returncode is not None else -1

        log.info("%s exited with status %d", invocation.command, exit_code)

        return ExecutionResult(
            exit_code=exit_code,
            output=stdout.decode(self.encoding, errors="replace"),
            errors=(stderr or b"").decode(self.encoding, errors="replace"),
        )
