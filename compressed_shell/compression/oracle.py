"""
Summarization oracles.

An oracle turns a CompressionRequest into summary text or raises
OracleError. Time budgets are enforced by the caller; adapters only have
to release their resources when cancelled.
"""

import asyncio
import os
import shutil
from abc import ABC, abstractmethod
from pathlib import Path

from compressed_shell.compression.prompt import CompressionRequest
from compressed_shell.config.settings import CompressedShellSettings
from compressed_shell.errors import OracleError
from compressed_shell.llm.anthropic import AnthropicModel
from compressed_shell.llm.base import Model
from compressed_shell.utils.logging import get_logger

logger = get_logger(__name__)


class SummarizationOracle(ABC):
    """Common interface for compression backends."""

    @abstractmethod
    async def summarize(self, request: CompressionRequest) -> str:
        """
        Return the compressed text for ``request``.

        Raises:
            OracleError: the backend failed
        """


def find_claude_cli(home: str | None = None) -> str:
    """
    Locate the claude CLI.

    Hosts that spawn the tool often do not inherit the user's shell PATH,
    so common install locations are checked before falling back to PATH.
    """
    home_dir = Path(home or os.environ.get("HOME") or Path.home())
    candidates = [
        home_dir / ".local" / "bin" / "claude",
        home_dir / ".claude" / "local" / "claude",
        Path("/usr/local/bin/claude"),
        Path("/opt/homebrew/bin/claude"),
    ]
    for candidate in candidates:
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return str(candidate)
    return shutil.which("claude") or "claude"


class ClaudeCliOracle(SummarizationOracle):
    """Pipes the payload to ``claude -p`` and returns its stdout."""

    def __init__(
        self,
        cli_path: str | None = None,
        model: str = "haiku",
        extra_args: list[str] | None = None,
    ) -> None:
        self.cli_path = cli_path or find_claude_cli()
        self.model = model
        self.extra_args = extra_args

    def build_argv(self) -> list[str]:
        if self.extra_args is not None:
            return [self.cli_path, *self.extra_args]
        return [
            self.cli_path,
            "-p",
            "--model",
            self.model,
            "--output-format",
            "text",
        ]

    async def summarize(self, request: CompressionRequest) -> str:
        argv = self.build_argv()
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise OracleError(f"could not start {self.cli_path}: {e}") from e

        try:
            stdout, stderr = await proc.communicate(
                request.render_prompt().encode("utf-8")
            )
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            raise

        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise OracleError(
                f"{Path(self.cli_path).name} exited with code {proc.returncode}"
                + (f": {detail}" if detail else "")
            )
        return stdout.decode("utf-8", errors="replace").strip()


class ModelOracle(SummarizationOracle):
    """Sends the payload as a single user message to an LLM model."""

    def __init__(self, model: Model) -> None:
        self.model = model

    async def summarize(self, request: CompressionRequest) -> str:
        messages = [{"role": "user", "content": request.render_prompt()}]
        try:
            text = await self.model.acomplete(messages)
        except Exception as e:
            raise OracleError(f"{type(e).__name__}: {e}") from e
        return text.strip()


def create_oracle(config: CompressedShellSettings) -> SummarizationOracle:
    """Build the oracle selected by ``oracle_backend``."""
    if config.oracle_backend == "anthropic":
        model = AnthropicModel(
            id=config.anthropic_model_name,
            name=config.anthropic_model_name,
            api_key=(
                config.anthropic_api_key.get_secret_value()
                if config.anthropic_api_key
                else None
            ),
            base_url=config.anthropic_base_url,
        )
        logger.info("oracle_created", backend="anthropic", model=model.name)
        return ModelOracle(model)

    oracle = ClaudeCliOracle(cli_path=config.claude_cli, model=config.oracle_model)
    logger.info("oracle_created", backend="cli", cli_path=oracle.cli_path)
    return oracle


__all__ = [
    "SummarizationOracle",
    "ClaudeCliOracle",
    "ModelOracle",
    "create_oracle",
    "find_claude_cli",
]
