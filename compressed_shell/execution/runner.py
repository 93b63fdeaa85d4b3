"""
CommandRunner - runs a command through a shell interpreter.

The command goes to ``<shell> -c`` so composition operators behave as
written. Permission checks happen before this point; nothing here
sandboxes the command and no timeout is applied.
"""

import asyncio
import os
import time
from dataclasses import dataclass

from compressed_shell.utils.logging import get_logger

logger = get_logger(__name__)

_READ_CHUNK = 65536


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one command run."""

    exit_code: int
    stdout: str
    stderr: str
    duration: float  # seconds

    @property
    def duration_text(self) -> str:
        return f"{self.duration:.2f}"

    @property
    def combined_output(self) -> str:
        """stdout followed by stderr on a new line, when there is any."""
        if self.stderr:
            return f"{self.stdout}\n{self.stderr}"
        return self.stdout

    @property
    def is_success(self) -> bool:
        return self.exit_code == 0

    @classmethod
    def spawn_failure(cls, error: BaseException, start_time: float) -> "ExecutionResult":
        """Synthetic result for a process that never started."""
        return cls(
            exit_code=1,
            stdout="",
            stderr=str(error),
            duration=round(time.monotonic() - start_time, 2),
        )


async def _drain(stream: asyncio.StreamReader | None) -> str:
    if stream is None:
        return ""
    chunks: list[bytes] = []
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks).decode("utf-8", errors="replace")


class CommandRunner:
    def __init__(self, shell: str = "bash", env: dict[str, str] | None = None) -> None:
        """
        Args:
            shell: Interpreter invoked as ``<shell> -c <command>``
            env: Environment for the child; the caller's environment when None
        """
        self.shell = shell
        self.env = env

    async def run(
        self, command: str, cwd: str | os.PathLike | None = None
    ) -> ExecutionResult:
        """
        Run ``command`` to completion.

        Never raises for spawn problems: a missing interpreter or working
        directory produces exit code 1 with the error text as stderr.
        """
        start_time = time.monotonic()
        logger.debug("command_starting", command=command, cwd=str(cwd) if cwd else None)

        try:
            proc = await asyncio.create_subprocess_exec(
                self.shell,
                "-c",
                command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd or None,
                env=self.env if self.env is not None else os.environ.copy(),
            )
        except (OSError, ValueError) as e:
            logger.warning("command_spawn_failed", command=command, error=str(e))
            return ExecutionResult.spawn_failure(e, start_time)

        stdout, stderr = await asyncio.gather(_drain(proc.stdout), _drain(proc.stderr))
        returncode = await proc.wait()

        # Killed by a signal: report the shell convention 128 + signo.
        exit_code = returncode if returncode >= 0 else 128 - returncode
        duration = round(time.monotonic() - start_time, 2)

        logger.info(
            "command_finished",
            command=command,
            exit_code=exit_code,
            duration=duration,
            stdout_bytes=len(stdout),
            stderr_bytes=len(stderr),
        )
        return ExecutionResult(
            exit_code=exit_code, stdout=stdout, stderr=stderr, duration=duration
        )


__all__ = ["CommandRunner", "ExecutionResult"]
