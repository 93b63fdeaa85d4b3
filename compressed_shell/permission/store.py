"""
PermissionStore - persisted one-time and durable allow lists.

Wraps a KeyValueStore with the two document schemas. The one-time list
lives under a single fixed key; durable rules live in one settings file
per project directory.
"""

import os
from pathlib import Path

from compressed_shell.permission.models import AllowOnceList, ProjectSettings
from compressed_shell.storage.kv import KeyValueStore
from compressed_shell.utils.logging import get_logger

logger = get_logger(__name__)


class PermissionStore:
    def __init__(
        self,
        kv: KeyValueStore,
        allow_once_key: str | os.PathLike,
        settings_dir_name: str = ".claude",
        settings_file_name: str = "settings.local.json",
    ) -> None:
        self.kv = kv
        self.allow_once_key = str(allow_once_key)
        self.settings_dir_name = settings_dir_name
        self.settings_file_name = settings_file_name

    def settings_path(self, project_dir: str | os.PathLike | None = None) -> Path:
        base = Path(project_dir) if project_dir else Path(os.getcwd())
        return base / self.settings_dir_name / self.settings_file_name

    # One-time list

    async def list_once(self) -> list[str]:
        data = await self.kv.get(self.allow_once_key)
        return AllowOnceList.load(data, source=self.allow_once_key).commands

    async def add_once(self, command: str) -> bool:
        """Append ``command`` unless already present. Returns True if written."""

        def _add(data):
            doc = AllowOnceList.load(data, source=self.allow_once_key)
            if command in doc.commands:
                return None, False
            doc.commands.append(command)
            return doc.dump(), True

        return await self.kv.update(self.allow_once_key, _add)

    async def consume_once(self, command: str) -> bool:
        """
        Remove one exact occurrence of ``command``. Returns True on hit.

        A store that cannot be locked or written counts as a miss.
        """

        def _consume(data):
            doc = AllowOnceList.load(data, source=self.allow_once_key)
            if command not in doc.commands:
                return None, False
            doc.commands.remove(command)
            return doc.dump(), True

        if command not in await self.list_once():
            return False
        try:
            return await self.kv.update(self.allow_once_key, _consume)
        except OSError as e:
            logger.warning(
                "allow_once_consume_failed",
                path=self.allow_once_key,
                command=command,
                error=str(e),
            )
            return False

    # Durable rules

    async def load_project_rules(
        self, project_dir: str | os.PathLike | None = None
    ) -> list[str]:
        path = self.settings_path(project_dir)
        data = await self.kv.get(str(path))
        return ProjectSettings.load(data, source=str(path)).permissions.allow

    async def add_project_rule(
        self, rule: str, project_dir: str | os.PathLike | None = None
    ) -> bool:
        """Append ``rule`` to the project's allow list. Returns True if written."""
        path = self.settings_path(project_dir)

        def _add(data):
            doc = ProjectSettings.load(data, source=str(path))
            if rule in doc.permissions.allow:
                return None, False
            doc.permissions.allow.append(rule)
            return doc.dump(), True

        return await self.kv.update(str(path), _add)


__all__ = ["PermissionStore"]
