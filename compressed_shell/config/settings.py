"""
Global settings from environment variables.
"""

import os
import tempfile
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


def _tmp_path(name: str) -> Path:
    return Path(tempfile.gettempdir()) / name


class CompressedShellSettings(BaseSettings):
    """
    Global configuration loaded from environment variables.

    Environment variables are prefixed with COMPRESSED_SHELL_
    Example: COMPRESSED_SHELL_MIN_LINES=50, COMPRESSED_SHELL_ORACLE_BACKEND=anthropic
    """

    model_config = SettingsConfigDict(
        env_prefix="COMPRESSED_SHELL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        protected_namespaces=(),
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = False
    debug_log_file: Path | None = Field(
        default_factory=lambda: _tmp_path("compressed-shell-debug.log")
    )

    # Persisted state
    log_dir: Path = Field(default_factory=lambda: _tmp_path("compressed-shell-logs"))
    allow_once_file: Path = Field(
        default_factory=lambda: _tmp_path("compressed-shell-allow-once.json")
    )
    settings_dir_name: str = ".claude"
    settings_file_name: str = "settings.local.json"
    tool_name: str = "mcp__compressed-shell__shell"

    # Execution
    shell: str = "bash"

    # Compression
    min_lines: int = Field(default=30, ge=1)
    compression_timeout_seconds: float = Field(default=30.0, gt=0)
    min_compressed_length: int = Field(default=10, ge=0)

    # Oracle
    oracle_backend: Literal["cli", "anthropic"] = "cli"
    claude_cli: str | None = None
    oracle_model: str = "haiku"

    anthropic_api_key: SecretStr | None = (
        SecretStr(os.environ["ANTHROPIC_API_KEY"])
        if os.getenv("ANTHROPIC_API_KEY")
        else None
    )
    anthropic_base_url: str | None = "https://api.anthropic.com"
    anthropic_model_name: str = "claude-3-5-haiku-latest"


settings = CompressedShellSettings()


__all__ = ["CompressedShellSettings", "settings"]
