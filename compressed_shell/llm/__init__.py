from compressed_shell.llm.base import Model
from compressed_shell.llm.anthropic import AnthropicModel

__all__ = [
    "Model",
    "AnthropicModel",
]
