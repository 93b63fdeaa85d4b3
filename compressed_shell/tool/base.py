from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ToolDefinition:
    """Tool definition for protocol-facing registration."""

    name: str
    description: str
    parameters: dict[str, Any]


@dataclass
class ToolResult:
    """Result of a tool operation: text for the agent plus an error flag."""

    tool_name: str
    content: str
    is_error: bool = False
    output: Any = field(default=None, repr=False)  # Raw result behind the text

    @classmethod
    def error(cls, tool_name: str, error: str) -> "ToolResult":
        """Create a ToolResult representing an error."""
        return cls(tool_name=tool_name, content=f"Error: {error}", is_error=True)

    def to_content(self) -> dict[str, Any]:
        """Convert to the ``{"content": [...], "isError": ...}`` response shape."""
        return {
            "content": [{"type": "text", "text": self.content}],
            "isError": self.is_error,
        }


class BaseTool(ABC):
    """Common interface that every concrete tool must implement."""

    def __init__(self) -> None:
        self.name = self.get_name()
        self.description = self.get_description()

    @abstractmethod
    def get_name(self) -> str:
        """Return the tool name."""

    @abstractmethod
    def get_description(self) -> str:
        """Return the tool description used for prompting."""

    @abstractmethod
    def get_parameters(self) -> dict[str, Any]:
        """Return the JSON schema describing `execute` parameters."""

    @abstractmethod
    async def execute(self, parameters: dict[str, Any]) -> ToolResult:
        """
        Execute the tool and return ToolResult directly.

        Args:
            parameters: Tool arguments as received from the caller

        Returns:
            ToolResult: Tool execution result
        """

    def get_definition(self) -> ToolDefinition:
        """Construct a `ToolDefinition` for registration."""
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=self.get_parameters(),
        )
