from compressed_shell.tool.base import BaseTool, ToolDefinition, ToolResult

__all__ = [
    "BaseTool",
    "ToolDefinition",
    "ToolResult",
]
