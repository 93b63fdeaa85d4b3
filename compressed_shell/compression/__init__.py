"""
Output compression.

Decides when command output is worth summarizing, saves the raw output,
asks an external oracle for a summary and falls back to the full output
when it fails.
"""

from compressed_shell.compression.oracle import (
    ClaudeCliOracle,
    ModelOracle,
    SummarizationOracle,
    create_oracle,
)
from compressed_shell.compression.orchestrator import (
    CompressionOrchestrator,
    CompressionRecord,
)
from compressed_shell.compression.prompt import CompressionRequest

__all__ = [
    "ClaudeCliOracle",
    "ModelOracle",
    "SummarizationOracle",
    "create_oracle",
    "CompressionOrchestrator",
    "CompressionRecord",
    "CompressionRequest",
]
