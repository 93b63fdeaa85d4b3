"""
PermissionResolver - decides whether a command may run.

Decision order, first match wins:
1. Safe catalog (no store access)
2. One-time grant (consumed on hit)
3. Durable project rule
4. Deny

Only step 2 writes. Unreadable stores count as empty.
"""

import os

from compressed_shell.permission.catalog import (
    SAFE_COMMANDS,
    command_prefix,
    is_safe_command,
)
from compressed_shell.permission.models import PermissionDecision
from compressed_shell.permission.rules import RuleEngine
from compressed_shell.permission.store import PermissionStore
from compressed_shell.utils.logging import get_logger

logger = get_logger(__name__)


class PermissionResolver:
    def __init__(
        self,
        store: PermissionStore,
        rule_engine: RuleEngine,
        safe_commands: tuple[str, ...] = SAFE_COMMANDS,
    ) -> None:
        self.store = store
        self.rule_engine = rule_engine
        self.safe_commands = safe_commands

    async def resolve(
        self, command: str, cwd: str | os.PathLike | None = None
    ) -> PermissionDecision:
        """
        Resolve a command against the catalog and the persisted grants.

        Args:
            command: Command text exactly as it will be executed
            cwd: Project directory whose durable rules apply
                (defaults to the process working directory)

        Returns:
            PermissionDecision: allow outcome, or ``denied`` with the prefix
            a durable grant would use
        """
        prefix = command_prefix(command)

        if is_safe_command(command, self.safe_commands):
            logger.debug("permission_auto_allowed", command=command)
            return PermissionDecision(
                outcome="auto_allowed",
                reason="Command is in the safe catalog",
                command=command,
                prefix=prefix,
            )

        if await self.store.consume_once(command):
            logger.info("allow_once_consumed", command=command)
            return PermissionDecision(
                outcome="allowed_once",
                reason="One-time permission consumed",
                command=command,
                prefix=prefix,
            )

        rules = await self.store.load_project_rules(cwd)
        logger.debug(
            "checking_durable_rules",
            command=command,
            rule_count=len(rules),
            settings_file=str(self.store.settings_path(cwd)),
        )
        matched = self.rule_engine.find_match(command, rules)
        if matched is not None:
            logger.info("permission_durable_allowed", command=command, rule=matched)
            return PermissionDecision(
                outcome="allowed_durable",
                reason="Matched project rule",
                command=command,
                prefix=prefix,
                matched_rule=matched,
            )

        logger.info("permission_denied", command=command, prefix=prefix)
        return PermissionDecision(
            outcome="denied",
            reason="No matching permission",
            command=command,
            prefix=prefix,
        )


__all__ = ["PermissionResolver"]
