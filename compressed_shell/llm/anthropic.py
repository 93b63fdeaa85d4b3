import os
from dataclasses import dataclass, field
from typing import Any

try:
    from anthropic import (
        APIConnectionError,
        APITimeoutError,
        AsyncAnthropic,
        InternalServerError,
        RateLimitError,
    )
except ImportError:
    raise ImportError("Please install anthropic package: pip install anthropic")

from compressed_shell.config.settings import settings
from compressed_shell.llm.base import Model
from compressed_shell.utils.logging import get_logger
from compressed_shell.utils.retry import retry_async

logger = get_logger(__name__)


# Retryable exceptions for Anthropic
ANTHROPIC_RETRYABLE = (
    APIConnectionError,
    RateLimitError,
    APITimeoutError,
    InternalServerError,
)


@dataclass
class AnthropicModel(Model):
    provider: str = "anthropic"
    client: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()

        resolved_api_key = None
        if self.api_key:
            if hasattr(self.api_key, "get_secret_value"):
                resolved_api_key = self.api_key.get_secret_value()
            else:
                resolved_api_key = self.api_key
        elif settings.anthropic_api_key:
            resolved_api_key = settings.anthropic_api_key.get_secret_value()
        else:
            resolved_api_key = os.getenv("ANTHROPIC_API_KEY")

        resolved_base_url = (
            self.base_url
            or settings.anthropic_base_url
            or os.getenv("ANTHROPIC_BASE_URL")
        )

        if self.client is None:
            client_kwargs: dict[str, Any] = {"api_key": resolved_api_key}
            if resolved_base_url:
                client_kwargs["base_url"] = resolved_base_url
            self.client = AsyncAnthropic(**client_kwargs)

        logger.info("anthropic_model_initialized", model_name=self.name)

    def _convert_messages(self, messages: list[dict]) -> tuple[str | None, list[dict]]:
        """Split OpenAI format messages into Anthropic system + messages."""
        system_prompt = None
        anthropic_messages = []

        for msg in messages:
            role = msg.get("role")
            content = msg.get("content")
            if role == "system":
                system_prompt = content
            elif role in ("user", "assistant"):
                anthropic_messages.append({"role": role, "content": content})

        return system_prompt, anthropic_messages

    @retry_async(exceptions=ANTHROPIC_RETRYABLE)
    async def _create(self, params: dict[str, Any]) -> Any:
        return await self.client.messages.create(**params)

    async def acomplete(self, messages: list[dict]) -> str:
        """
        Call the Anthropic Messages API and return the concatenated text blocks.

        Args:
            messages: OpenAI format message list

        Returns:
            Response text (empty when the model returned no text blocks)
        """
        system_prompt, anthropic_messages = self._convert_messages(messages)

        params: dict[str, Any] = {
            "model": self.name,
            "messages": anthropic_messages,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        if system_prompt:
            params["system"] = system_prompt

        logger.info(
            "llm_request",
            model=self.name,
            messages_count=len(anthropic_messages),
            max_tokens=self.max_tokens,
        )

        try:
            response = await self._create(params)
        except Exception as e:
            logger.error(
                "llm_request_failed",
                model=self.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        parts = [
            block.text
            for block in (response.content or [])
            if getattr(block, "type", None) == "text"
        ]
        return "".join(parts)


__all__ = ["AnthropicModel"]
