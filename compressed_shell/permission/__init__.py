"""
Permission system for shell commands.

Decides whether a command may run (safe catalog, one-time grants, durable
project rules) and records new grants.
"""

from compressed_shell.permission.catalog import (
    SAFE_COMMANDS,
    VERBOSE_COMMANDS,
    command_prefix,
    is_safe_command,
    is_verbose_command,
)
from compressed_shell.permission.grants import PermissionGrants
from compressed_shell.permission.models import (
    AllowOnceList,
    DurableGrant,
    PermissionDecision,
    ProjectSettings,
)
from compressed_shell.permission.resolver import PermissionResolver
from compressed_shell.permission.rules import RuleEngine, build_rule
from compressed_shell.permission.store import PermissionStore

__all__ = [
    "SAFE_COMMANDS",
    "VERBOSE_COMMANDS",
    "command_prefix",
    "is_safe_command",
    "is_verbose_command",
    "AllowOnceList",
    "DurableGrant",
    "PermissionDecision",
    "ProjectSettings",
    "PermissionGrants",
    "PermissionResolver",
    "PermissionStore",
    "RuleEngine",
    "build_rule",
]
