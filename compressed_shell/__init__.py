"""
compressed-shell - permissioned shell execution with output compression

Usage:
    from compressed_shell import ShellService

    service = ShellService.from_settings()

    result = await service.execute("npm install", cwd="/path/to/project")
    if result.is_error:
        print(result.content)  # denial guidance or failing command output

    await service.grant_durable("npm install", cwd="/path/to/project")
"""

from compressed_shell.compression import (
    CompressionOrchestrator,
    CompressionRecord,
    SummarizationOracle,
)
from compressed_shell.config.settings import CompressedShellSettings, settings
from compressed_shell.execution import CommandRunner, ExecutionResult
from compressed_shell.permission import (
    PermissionDecision,
    PermissionGrants,
    PermissionResolver,
    PermissionStore,
)
from compressed_shell.service import ShellService
from compressed_shell.tool.base import ToolResult
from compressed_shell.tool.shell_tools import (
    AllowCommandTool,
    AllowOnceTool,
    ShellTool,
    build_tools,
)

__version__ = "0.1.0"

__all__ = [
    "AllowCommandTool",
    "AllowOnceTool",
    "CommandRunner",
    "CompressedShellSettings",
    "CompressionOrchestrator",
    "CompressionRecord",
    "ExecutionResult",
    "PermissionDecision",
    "PermissionGrants",
    "PermissionResolver",
    "PermissionStore",
    "ShellService",
    "ShellTool",
    "SummarizationOracle",
    "ToolResult",
    "build_tools",
    "settings",
]
