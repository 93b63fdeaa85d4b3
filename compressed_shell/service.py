"""
ShellService - the three inbound operations.

``execute`` resolves permission, runs the command and compresses its
output. ``grant_once`` and ``grant_durable`` record permissions. Every
operation returns a ToolResult (text plus error flag) and never raises for
expected failures.
"""

import os
import uuid

from compressed_shell.compression.oracle import SummarizationOracle, create_oracle
from compressed_shell.compression.orchestrator import CompressionOrchestrator
from compressed_shell.config.settings import CompressedShellSettings, settings
from compressed_shell.errors import ValidationError
from compressed_shell.execution.runner import CommandRunner
from compressed_shell.permission.grants import PermissionGrants
from compressed_shell.permission.models import PermissionDecision
from compressed_shell.permission.resolver import PermissionResolver
from compressed_shell.permission.rules import RuleEngine
from compressed_shell.permission.store import PermissionStore
from compressed_shell.storage.kv import JsonFileStore, KeyValueStore
from compressed_shell.tool.base import ToolResult
from compressed_shell.utils.logging import (
    clear_request_context,
    configure_logging,
    get_logger,
    set_request_context,
)

logger = get_logger(__name__)

SHELL_TOOL = "shell"
ALLOW_ONCE_TOOL = "allow_once"
ALLOW_COMMAND_TOOL = "allow_command"


def denial_message(decision: PermissionDecision) -> str:
    """Remediation text for a denied command."""
    return (
        f'Command not allowed: "{decision.command}"\n'
        "\n"
        "Ask the user if they want to allow this command. "
        'DEFAULT to "once" unless user explicitly says "always".\n'
        "\n"
        "To allow ONCE (recommended):\n"
        f'  {ALLOW_ONCE_TOOL}(command: "{decision.command}")\n'
        "\n"
        f'To allow ALWAYS (will permanently allow ALL "{decision.prefix}" '
        "commands in this project):\n"
        f'  {ALLOW_COMMAND_TOOL}(command_prefix: "{decision.prefix}")\n'
        "\n"
        "Then retry the original command."
    )


class ShellService:
    def __init__(
        self,
        resolver: PermissionResolver,
        grants: PermissionGrants,
        runner: CommandRunner,
        orchestrator: CompressionOrchestrator,
    ) -> None:
        self.resolver = resolver
        self.grants = grants
        self.runner = runner
        self.orchestrator = orchestrator

    @classmethod
    def from_settings(
        cls,
        config: CompressedShellSettings | None = None,
        *,
        kv: KeyValueStore | None = None,
        oracle: SummarizationOracle | None = None,
        configure_logs: bool = False,
    ) -> "ShellService":
        """
        Wire a service from settings.

        Args:
            config: Settings (the global ``settings`` when None)
            kv: Store behind both permission lists (JSON files when None)
            oracle: Summarization backend (from ``oracle_backend`` when None)
            configure_logs: Apply the logging settings before wiring
        """
        config = config or settings
        if configure_logs:
            configure_logging(
                log_level=config.log_level,
                json_logs=config.log_json,
                log_file=str(config.debug_log_file) if config.debug_log_file else None,
            )

        store = PermissionStore(
            kv=kv or JsonFileStore(),
            allow_once_key=config.allow_once_file,
            settings_dir_name=config.settings_dir_name,
            settings_file_name=config.settings_file_name,
        )
        rule_engine = RuleEngine(tool_name=config.tool_name)
        orchestrator = CompressionOrchestrator(
            oracle=oracle or create_oracle(config),
            log_dir=config.log_dir,
            min_lines=config.min_lines,
            timeout_seconds=config.compression_timeout_seconds,
            min_compressed_length=config.min_compressed_length,
        )
        return cls(
            resolver=PermissionResolver(store, rule_engine),
            grants=PermissionGrants(store, rule_engine),
            runner=CommandRunner(shell=config.shell),
            orchestrator=orchestrator,
        )

    async def execute(
        self,
        command: str | None,
        cwd: str | os.PathLike | None = None,
        compress: bool | None = None,
    ) -> ToolResult:
        """
        Run a command if permitted.

        Args:
            command: Shell command text
            cwd: Working directory; also selects the project's durable rules
            compress: True forces compression, False disables it,
                None auto-detects

        Returns:
            ToolResult: denial guidance, or the (possibly compressed) output
            flagged as an error when the exit code is non-zero
        """
        set_request_context(request_id=uuid.uuid4().hex[:12], tool_name=SHELL_TOOL)
        try:
            command = (command or "").strip()
            if not command:
                return ToolResult.error(SHELL_TOOL, "command is required")

            decision = await self.resolver.resolve(command, cwd)
            if not decision.allowed:
                return ToolResult(
                    tool_name=SHELL_TOOL,
                    content=denial_message(decision),
                    is_error=True,
                    output=decision,
                )

            result = await self.runner.run(command, cwd)
            record = await self.orchestrator.process(command, result, force=compress)
            return ToolResult(
                tool_name=SHELL_TOOL,
                content=record.text,
                is_error=not result.is_success,
                output=result,
            )
        finally:
            clear_request_context()

    async def grant_once(self, command: str | None) -> ToolResult:
        set_request_context(request_id=uuid.uuid4().hex[:12], tool_name=ALLOW_ONCE_TOOL)
        try:
            try:
                await self.grants.grant_once(command)
            except ValidationError as e:
                return ToolResult.error(ALLOW_ONCE_TOOL, str(e))
            except OSError as e:
                logger.error("allow_once_save_failed", error=str(e))
                return ToolResult.error(ALLOW_ONCE_TOOL, f"could not save permission: {e}")

            command = command.strip()
            return ToolResult(
                tool_name=ALLOW_ONCE_TOOL,
                content=(
                    f'Allowed once: "{command}"\n\n'
                    "You can now retry the command. "
                    "This permission will be consumed after execution."
                ),
            )
        finally:
            clear_request_context()

    async def grant_durable(
        self,
        prefix: str | None,
        cwd: str | os.PathLike | None = None,
    ) -> ToolResult:
        set_request_context(
            request_id=uuid.uuid4().hex[:12], tool_name=ALLOW_COMMAND_TOOL
        )
        try:
            try:
                grant = await self.grants.grant_durable(prefix, cwd)
            except ValidationError as e:
                return ToolResult.error(ALLOW_COMMAND_TOOL, str(e))
            except OSError as e:
                logger.error("durable_rule_save_failed", error=str(e))
                return ToolResult.error(
                    ALLOW_COMMAND_TOOL, f"could not save permission: {e}"
                )

            if grant.already_exists:
                return ToolResult(
                    tool_name=ALLOW_COMMAND_TOOL,
                    content=f"Permission already exists: {grant.rule}",
                    output=grant,
                )
            return ToolResult(
                tool_name=ALLOW_COMMAND_TOOL,
                content=(
                    f"PERMANENTLY ALLOWED: {grant.rule}\n\n"
                    f'All "{prefix.strip()}" commands are now allowed in this project.\n'
                    "You can now retry the command."
                ),
                output=grant,
            )
        finally:
            clear_request_context()


__all__ = [
    "ShellService",
    "denial_message",
    "SHELL_TOOL",
    "ALLOW_ONCE_TOOL",
    "ALLOW_COMMAND_TOOL",
]
