"""Launching the external tool and streaming its output."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

from a3_analysis_action.command_builder import CommandLine
from a3_analysis_action.errors import ProcessLaunchError

log = logging.getLogger(__name__)

READ_CHUNK_SIZE = 8192


class ProcessRunner(ABC):
    """Launches a command line and blocks until its exit code is known."""

    @abstractmethod
    async def run(
        self,
        command: CommandLine,
        *,
        env: Mapping[str, str],
        cwd: Path,
    ) -> int:
        """Run *command* to completion.

        Args:
            command: Command line to execute verbatim
            env: Complete environment of the child process
            cwd: Working directory of the child process

        Returns:
            Exit code of the process

        Raises:
            ProcessLaunchError: If the process could not be started

        """


@dataclass(frozen=True, kw_only=True)
class SubprocessRunner(ProcessRunner):
    """Runs commands as local subprocesses, logging their merged output.

    Output is read in fixed-size chunks and split on ``\\n``, ``\\r\\n`` and
    bare ``\\r``, so progress output without newlines never overruns the
    stream buffer. A line longer than ``max_line_length`` is logged in parts.
    """

    output_logger: logging.Logger = log
    max_line_length: int = 64 * 1024

    async def run(
        self,
        command: CommandLine,
        *,
        env: Mapping[str, str],
        cwd: Path,
    ) -> int:
        """Run *command* and stream each output line to the logger."""
        log.debug("Launching %s in %s", command.tokens, cwd)
        try:
            process = await asyncio.create_subprocess_exec(
                *command.tokens,
                cwd=cwd,
                env=dict(env),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            raise ProcessLaunchError(
                f"Cannot launch {command.executable}: {e}"
            ) from e

        if process.stdout is not None:
            try:
                await self._stream_output(process.stdout)
            except (OSError, ValueError) as e:
                with suppress(ProcessLookupError):
                    process.kill()
                await process.wait()
                raise ProcessLaunchError(
                    f"Lost the output of {command.executable}: {e}"
                ) from e

        return await process.wait()

    async def _stream_output(self, stream: asyncio.StreamReader) -> None:
        pending = b""
        while chunk := await stream.read(READ_CHUNK_SIZE):
            lines = (pending + chunk).splitlines(keepends=True)
            # A trailing "\r" may be the first half of a "\r\n" split across reads
            pending = b"" if lines[-1].endswith(b"\n") else lines.pop()
            for line in lines:
                self._emit(line)
            while len(pending) > self.max_line_length:
                self._emit(pending[: self.max_line_length])
                pending = pending[self.max_line_length :]
        if pending:
            self._emit(pending)

    def _emit(self, line: bytes) -> None:
        self.output_logger.info("%s", line.decode(errors="replace").rstrip("\r\n"))
