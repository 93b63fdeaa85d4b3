"""
Shell tools: ShellTool, AllowOnceTool, AllowCommandTool.

Each tool publishes its name, description and parameter schema and
delegates to a ShellService.
"""

from typing import Any

from compressed_shell.service import (
    ALLOW_COMMAND_TOOL,
    ALLOW_ONCE_TOOL,
    SHELL_TOOL,
    ShellService,
)
from compressed_shell.tool.base import BaseTool, ToolResult


class ShellTool(BaseTool):
    """Run a shell command, compressing verbose output."""

    def __init__(self, service: ShellService) -> None:
        self._service = service
        super().__init__()

    def get_name(self) -> str:
        return SHELL_TOOL

    def get_description(self) -> str:
        min_lines = self._service.orchestrator.min_lines
        return (
            "Execute shell commands with automatic output compression.\n\n"
            "Safe commands (ls, pwd, cat, git status, etc.) are auto-allowed.\n"
            "Other commands must be allowed via the allow_once or allow_command "
            "tool first.\n\n"
            "Commands like npm, docker, apt, etc. will have output compressed "
            f"if it reaches {min_lines} lines."
        )

    def get_parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "command": {
                    "type": "string",
                    "description": "The shell command to execute",
                },
                "cwd": {
                    "type": "string",
                    "description": "Working directory (optional)",
                },
                "compress": {
                    "type": "boolean",
                    "description": "Force compression (default: auto-detect)",
                },
            },
            "required": ["command"],
        }

    async def execute(self, parameters: dict[str, Any]) -> ToolResult:
        compress = parameters.get("compress")
        return await self._service.execute(
            parameters.get("command"),
            cwd=parameters.get("cwd") or None,
            compress=compress if isinstance(compress, bool) else None,
        )


class AllowOnceTool(BaseTool):
    """Allow one exact command to run a single time."""

    def __init__(self, service: ShellService) -> None:
        self._service = service
        super().__init__()

    def get_name(self) -> str:
        return ALLOW_ONCE_TOOL

    def get_description(self) -> str:
        return (
            "Allow a specific command to run ONCE. The permission is consumed "
            "after execution.\n"
            "Use when user wants to run a command just this one time without "
            "permanent permission.\n\n"
            'Example: allow_once(command: "npm install lodash") allows that '
            "exact command once."
        )

    def get_parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "command": {
                    "type": "string",
                    "description": "The exact command to allow once",
                },
            },
            "required": ["command"],
        }

    async def execute(self, parameters: dict[str, Any]) -> ToolResult:
        return await self._service.grant_once(parameters.get("command"))


class AllowCommandTool(BaseTool):
    """Permanently allow a command prefix within a project."""

    def __init__(self, service: ShellService) -> None:
        self._service = service
        super().__init__()

    def get_name(self) -> str:
        return ALLOW_COMMAND_TOOL

    def get_description(self) -> str:
        return (
            "Add a command PREFIX to the project's allowed list "
            "(.claude/settings.local.json).\n"
            "Use when user wants to ALWAYS allow a type of command.\n\n"
            'Example: allow_command(command_prefix: "npm install") allows ALL '
            '"npm install" commands permanently.\n'
            'Example: allow_command(command_prefix: "npm run") allows ALL '
            '"npm run" commands permanently.'
        )

    def get_parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "command_prefix": {
                    "type": "string",
                    "description": (
                        "The command prefix to allow (e.g., 'npm install', "
                        "'docker build')"
                    ),
                },
                "cwd": {
                    "type": "string",
                    "description": "Project directory (optional, defaults to current)",
                },
            },
            "required": ["command_prefix"],
        }

    async def execute(self, parameters: dict[str, Any]) -> ToolResult:
        return await self._service.grant_durable(
            parameters.get("command_prefix"),
            cwd=parameters.get("cwd") or None,
        )


def build_tools(service: ShellService) -> list[BaseTool]:
    """All shell tools bound to ``service``."""
    return [ShellTool(service), AllowOnceTool(service), AllowCommandTool(service)]


__all__ = ["ShellTool", "AllowOnceTool", "AllowCommandTool", "build_tools"]
