from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class Model(ABC):
    """
    Abstract base for LLM models used as summarization backends.

    Subclasses must implement acomplete() to return the full response text.
    """

    id: str
    name: str
    temperature: float = 0.0
    max_tokens: int = 1024
    api_key: str | None = None
    base_url: str | None = None
    provider: str = ""

    def __post_init__(self) -> None:
        if not (0.0 <= self.temperature <= 2.0):
            raise ValueError("temperature must be between 0.0 and 2.0")
        if self.max_tokens is not None and self.max_tokens < 1:
            raise ValueError("max_tokens must be at least 1")

    @abstractmethod
    async def acomplete(self, messages: list[dict]) -> str:
        """Send OpenAI-format messages and return the response text."""

    async def close(self) -> None:
        """Close the model's underlying client connection."""
        if getattr(self, "client", None) is not None:
            await self.client.close()


__all__ = ["Model"]
