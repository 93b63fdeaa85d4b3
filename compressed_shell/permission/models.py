"""
Persisted permission schemas and decision models.

Stored documents are validated on read. Anything that does not fit the
schema is logged and replaced by an empty default.
"""

from typing import Any, Literal

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from compressed_shell.utils.logging import get_logger

logger = get_logger(__name__)


def _string_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    return value


class _StoredDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    @classmethod
    def load(cls, data: Any, source: str = ""):
        """Validate a stored document, falling back to an empty one."""
        if data is None:
            return cls()
        try:
            return cls.model_validate(data)
        except pydantic.ValidationError as e:
            logger.warning(
                "stored_document_invalid",
                schema=cls.__name__,
                source=source,
                error_count=e.error_count(),
            )
            return cls()

    def dump(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class AllowOnceList(_StoredDocument):
    """One-time store: ``{"commands": [...]}``."""

    commands: list[str] = Field(default_factory=list)

    @field_validator("commands", mode="before")
    @classmethod
    def coerce_commands(cls, v: Any) -> Any:
        return _string_list(v)


class PermissionRules(BaseModel):
    """The ``permissions`` block of a project settings file."""

    model_config = ConfigDict(extra="allow")

    allow: list[str] = Field(default_factory=list)

    @field_validator("allow", mode="before")
    @classmethod
    def coerce_allow(cls, v: Any) -> Any:
        if v is not None and not isinstance(v, list):
            logger.warning("permissions_allow_reset", found=type(v).__name__)
            return []
        return _string_list(v)


class ProjectSettings(_StoredDocument):
    """
    Project-scoped durable store: ``{"permissions": {"allow": [...]}}``.

    Unknown keys are kept so rewriting the file never drops settings
    authored by other tools.
    """

    permissions: PermissionRules = Field(default_factory=PermissionRules)

    @field_validator("permissions", mode="before")
    @classmethod
    def default_permissions(cls, v: Any) -> Any:
        # Only this block is reset; sibling keys of the document survive.
        if v is None:
            return {}
        if not isinstance(v, dict):
            logger.warning("permissions_block_reset", found=type(v).__name__)
            return {}
        return v


class PermissionDecision(BaseModel):
    """Outcome of resolving one command."""

    outcome: Literal["auto_allowed", "allowed_once", "allowed_durable", "denied"]
    reason: str
    command: str
    prefix: str
    matched_rule: str | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome != "denied"


class DurableGrant(BaseModel):
    """Result of granting a durable rule."""

    rule: str
    added: bool
    settings_file: str

    @property
    def already_exists(self) -> bool:
        return not self.added


__all__ = [
    "AllowOnceList",
    "PermissionRules",
    "ProjectSettings",
    "PermissionDecision",
    "DurableGrant",
]
