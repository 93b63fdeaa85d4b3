"""
CompressionOrchestrator - decides on, and performs, output compression.

The raw output is always written to disk before the oracle is called, and
any oracle failure returns the complete original output under a banner.
Compression never hides output.
"""

import asyncio
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from compressed_shell.compression.oracle import SummarizationOracle
from compressed_shell.compression.prompt import CompressionRequest, count_lines
from compressed_shell.errors import OracleError, OracleTimeoutError
from compressed_shell.execution.runner import ExecutionResult
from compressed_shell.permission.catalog import VERBOSE_COMMANDS, is_verbose_command
from compressed_shell.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompressionRecord:
    """Final text for one request plus what happened to get there."""

    text: str
    line_count: int
    compressed: bool = False
    artifact_path: str | None = None
    failure_reason: str | None = None


class CompressionOrchestrator:
    def __init__(
        self,
        oracle: SummarizationOracle,
        log_dir: str | os.PathLike,
        min_lines: int = 30,
        timeout_seconds: float = 30.0,
        min_compressed_length: int = 10,
        verbose_commands: tuple[str, ...] = VERBOSE_COMMANDS,
    ) -> None:
        """
        Args:
            oracle: Summarization backend
            log_dir: Directory receiving raw-output artifacts
            min_lines: Line count at which verbose output is compressed
            timeout_seconds: Budget for one oracle call
            min_compressed_length: Oracle text this short or shorter is rejected
            verbose_commands: Catalog of high-output tools
        """
        self.oracle = oracle
        self.log_dir = Path(log_dir)
        self.min_lines = min_lines
        self.timeout_seconds = timeout_seconds
        self.min_compressed_length = min_compressed_length
        self.verbose_commands = verbose_commands

    def should_compress(
        self, command: str, line_count: int, force: bool | None = None
    ) -> bool:
        """
        True when forced, or when not suppressed and a verbose command
        produced at least ``min_lines`` lines.
        """
        if force is True:
            return True
        if force is False:
            return False
        return (
            is_verbose_command(command, self.verbose_commands)
            and line_count >= self.min_lines
        )

    async def process(
        self,
        command: str,
        result: ExecutionResult,
        force: bool | None = None,
    ) -> CompressionRecord:
        """
        Produce the final text for an executed command.

        Args:
            command: The command that ran
            result: Its execution result
            force: True forces compression, False suppresses it,
                None auto-detects

        Returns:
            CompressionRecord: final text and compression details
        """
        output = result.combined_output
        line_count = count_lines(output)

        if not self.should_compress(command, line_count, force):
            return CompressionRecord(text=output, line_count=line_count)

        try:
            artifact = self.write_artifact(output)
        except OSError as e:
            # Without a saved copy a summary would lose data, so skip the oracle.
            reason = f"could not save full output: {e}"
            logger.error("compression_artifact_failed", command=command, error=str(e))
            return CompressionRecord(
                text=f"[Compression failed: {reason}]\n\n{output}",
                line_count=line_count,
                failure_reason=reason,
            )

        request = CompressionRequest(
            output=output, command=command, exit_code=result.exit_code
        )
        try:
            summary = await self._call_oracle(request)
        except OracleError as e:
            logger.warning(
                "compression_failed",
                command=command,
                error=str(e),
                artifact=str(artifact),
            )
            return self._fallback(output, line_count, artifact, str(e))

        if len(summary) <= self.min_compressed_length:
            logger.warning(
                "compression_degenerate",
                command=command,
                summary_length=len(summary),
                artifact=str(artifact),
            )
            return self._fallback(
                output, line_count, artifact, "summary was empty or too short"
            )

        banner = (
            f"[Compressed from {line_count} lines | Exit: {result.exit_code} "
            f"| Duration: {result.duration_text}s]\n"
            f"[Full output: {artifact}]"
        )
        logger.info(
            "output_compressed",
            command=command,
            original_lines=line_count,
            compressed_lines=count_lines(summary),
            artifact=str(artifact),
        )
        return CompressionRecord(
            text=f"{banner}\n\n{summary}",
            line_count=line_count,
            compressed=True,
            artifact_path=str(artifact),
        )

    async def _call_oracle(self, request: CompressionRequest) -> str:
        try:
            return await asyncio.wait_for(
                self.oracle.summarize(request), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise OracleTimeoutError(self.timeout_seconds) from e
        except OracleError:
            raise
        except Exception as e:
            # Third-party oracles may raise anything; treat it as a failure.
            raise OracleError(f"{type(e).__name__}: {e}") from e

    def write_artifact(self, output: str) -> Path:
        """Persist the raw output under a timestamped name and return its path."""
        self.log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = (
            datetime.now(timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
            .replace(":", "-")
            .replace(".", "-")
        )
        path = self.log_dir / f"{timestamp}-{uuid.uuid4().hex[:6]}.log"
        path.write_text(output, encoding="utf-8")
        logger.debug("compression_artifact_written", path=str(path), bytes=len(output))
        return path

    def _fallback(
        self, output: str, line_count: int, artifact: Path, reason: str
    ) -> CompressionRecord:
        return CompressionRecord(
            text=f"[Compression failed: {reason}]\n[Full output: {artifact}]\n\n{output}",
            line_count=line_count,
            artifact_path=str(artifact),
            failure_reason=reason,
        )


__all__ = ["CompressionOrchestrator", "CompressionRecord"]
