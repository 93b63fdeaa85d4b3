"""Tests for PermissionResolver decision order."""

import pytest

from compressed_shell.permission.catalog import SAFE_COMMANDS
from compressed_shell.permission.grants import PermissionGrants
from compressed_shell.permission.resolver import PermissionResolver
from compressed_shell.permission.rules import RuleEngine
from compressed_shell.permission.store import PermissionStore
from compressed_shell.storage.kv import (
    InMemoryKeyValueStore,
    JsonFileStore,
    KeyValueStore,
)

TOOL = "mcp__compressed-shell__shell"


@pytest.fixture
def store(tmp_path):
    return PermissionStore(
        kv=InMemoryKeyValueStore(), allow_once_key=str(tmp_path / "once.json")
    )


@pytest.fixture
def engine():
    return RuleEngine(tool_name=TOOL)


@pytest.fixture
def resolver(store, engine):
    return PermissionResolver(store, engine)


@pytest.fixture
def grants(store, engine):
    return PermissionGrants(store, engine)


class TestResolve:
    @pytest.mark.asyncio
    async def test_safe_command_auto_allowed(self, resolver):
        decision = await resolver.resolve("git status")
        assert decision.allowed
        assert decision.outcome == "auto_allowed"

    @pytest.mark.asyncio
    async def test_unknown_command_denied(self, resolver, tmp_path):
        decision = await resolver.resolve("echo hello", tmp_path)
        assert not decision.allowed
        assert decision.outcome == "denied"
        assert decision.command == "echo hello"
        assert decision.prefix == "echo hello"

    @pytest.mark.asyncio
    async def test_once_grant_consumed(self, resolver, grants, store, tmp_path):
        await grants.grant_once("echo hi")

        first = await resolver.resolve("echo hi", tmp_path)
        second = await resolver.resolve("echo hi", tmp_path)

        assert first.outcome == "allowed_once"
        assert second.outcome == "denied"
        assert await store.list_once() == []

    @pytest.mark.asyncio
    async def test_safe_command_does_not_consume_once_grant(
        self, resolver, grants, store
    ):
        await grants.grant_once("ls")
        decision = await resolver.resolve("ls")
        assert decision.outcome == "auto_allowed"
        assert await store.list_once() == ["ls"]

    @pytest.mark.asyncio
    async def test_durable_prefix(self, resolver, grants, tmp_path):
        await grants.grant_durable("npm install", tmp_path)

        allowed = await resolver.resolve("npm install lodash", tmp_path)
        denied = await resolver.resolve("npm remove lodash", tmp_path)

        assert allowed.outcome == "allowed_durable"
        assert allowed.matched_rule == f"{TOOL}(command:npm install *)"
        assert denied.outcome == "denied"
        assert denied.prefix == "npm remove"

    @pytest.mark.asyncio
    async def test_durable_rules_scoped_to_project(self, resolver, grants, tmp_path):
        await grants.grant_durable("npm install", tmp_path / "a")
        decision = await resolver.resolve("npm install", tmp_path / "b")
        assert decision.outcome == "denied"

    @pytest.mark.asyncio
    async def test_once_checked_before_durable(self, resolver, grants, store, tmp_path):
        await grants.grant_durable("npm install", tmp_path)
        await grants.grant_once("npm install lodash")

        decision = await resolver.resolve("npm install lodash", tmp_path)

        assert decision.outcome == "allowed_once"
        assert await store.list_once() == []

    @pytest.mark.asyncio
    async def test_bash_rule_authored_elsewhere(self, resolver, store, tmp_path):
        await store.add_project_rule("Bash(make:*)", tmp_path)
        decision = await resolver.resolve("make test", tmp_path)
        assert decision.outcome == "allowed_durable"
        assert decision.matched_rule == "Bash(make:*)"


class ExplodingStore(KeyValueStore):
    """Fails the test on any access."""

    async def get(self, key):
        raise AssertionError(f"store read: {key}")

    async def put(self, key, value):
        raise AssertionError(f"store write: {key}")

    async def update(self, key, mutator):
        raise AssertionError(f"store update: {key}")


@pytest.fixture
def storeless_resolver(tmp_path, engine):
    store = PermissionStore(kv=ExplodingStore(), allow_once_key=str(tmp_path / "once.json"))
    return PermissionResolver(store, engine)


class TestSafeCatalogWithoutStores:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("command", SAFE_COMMANDS)
    async def test_exact(self, storeless_resolver, command):
        decision = await storeless_resolver.resolve(command)
        assert decision.outcome == "auto_allowed"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("command", SAFE_COMMANDS)
    async def test_with_argument(self, storeless_resolver, command):
        decision = await storeless_resolver.resolve(f"{command} some-arg")
        assert decision.outcome == "auto_allowed"


@pytest.mark.asyncio
async def test_unwritable_once_store_falls_through_to_rules(tmp_path, engine):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    store = PermissionStore(
        kv=JsonFileStore(lock_dir=tmp_path / "locks"),
        allow_once_key=str(blocker / "once.json"),
    )
    await store.add_project_rule(engine.build_rule("npm install"), tmp_path)
    resolver = PermissionResolver(store, engine)

    allowed = await resolver.resolve("npm install lodash", tmp_path)
    denied = await resolver.resolve("echo hello", tmp_path)

    assert allowed.outcome == "allowed_durable"
    assert denied.outcome == "denied"
