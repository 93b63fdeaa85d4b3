"""
PermissionGrants - the only writer of permission records.
"""

import os

from compressed_shell.errors import ValidationError
from compressed_shell.permission.models import DurableGrant
from compressed_shell.permission.rules import RuleEngine
from compressed_shell.permission.store import PermissionStore
from compressed_shell.utils.logging import get_logger

logger = get_logger(__name__)


class PermissionGrants:
    def __init__(self, store: PermissionStore, rule_engine: RuleEngine) -> None:
        self.store = store
        self.rule_engine = rule_engine

    async def grant_once(self, command: str | None) -> bool:
        """
        Allow ``command`` to run exactly once.

        Returns:
            True if a new record was written, False if one was already pending

        Raises:
            ValidationError: command is missing or blank
        """
        command = (command or "").strip()
        if not command:
            raise ValidationError("command")

        added = await self.store.add_once(command)
        logger.info("allow_once_granted", command=command, added=added)
        return added

    async def grant_durable(
        self,
        prefix: str | None,
        project_dir: str | os.PathLike | None = None,
    ) -> DurableGrant:
        """
        Permanently allow every command starting with ``prefix`` in a project.

        The rule written here is the one the resolver's prefix matcher looks
        for, so the next resolution of any command with this prefix succeeds.

        Raises:
            ValidationError: prefix is missing or blank
        """
        prefix = (prefix or "").strip()
        if not prefix:
            raise ValidationError("command_prefix")

        rule = self.rule_engine.build_rule(prefix)
        added = await self.store.add_project_rule(rule, project_dir)
        settings_file = str(self.store.settings_path(project_dir))
        logger.info(
            "durable_rule_granted",
            rule=rule,
            added=added,
            settings_file=settings_file,
        )
        return DurableGrant(rule=rule, added=added, settings_file=settings_file)


__all__ = ["PermissionGrants"]
