"""Tests for KeyValueStore implementations."""

import asyncio
import json

import pytest

from compressed_shell.storage.kv import InMemoryKeyValueStore, JsonFileStore


def _append(item):
    def mutator(data):
        data = data or {"items": []}
        data["items"].append(item)
        return data, len(data["items"])

    return mutator


class TestInMemory:
    @pytest.mark.asyncio
    async def test_get_missing(self):
        assert await InMemoryKeyValueStore().get("nope") is None

    @pytest.mark.asyncio
    async def test_put_and_get_are_copies(self):
        store = InMemoryKeyValueStore()
        value = {"items": [1]}
        await store.put("k", value)
        value["items"].append(2)

        got = await store.get("k")
        got["items"].append(3)

        assert await store.get("k") == {"items": [1]}

    @pytest.mark.asyncio
    async def test_update_returns_result(self):
        store = InMemoryKeyValueStore()
        assert await store.update("k", _append("a")) == 1
        assert await store.update("k", _append("b")) == 2
        assert await store.get("k") == {"items": ["a", "b"]}
        assert store.keys() == ["k"]

    @pytest.mark.asyncio
    async def test_update_none_skips_write(self):
        store = InMemoryKeyValueStore({"k": {"x": 1}})
        assert await store.update("k", lambda data: (None, "unchanged")) == "unchanged"
        assert await store.get("k") == {"x": 1}


class TestJsonFileStore:
    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        assert await JsonFileStore().get(str(tmp_path / "missing.json")) is None

    @pytest.mark.asyncio
    async def test_put_creates_parents(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "doc.json"
        await JsonFileStore().put(str(path), {"a": 1})
        assert json.loads(path.read_text()) == {"a": 1}

    @pytest.mark.asyncio
    async def test_invalid_json_reads_as_none(self, tmp_path):
        path = tmp_path / "doc.json"
        path.write_text("[1, 2")
        assert await JsonFileStore().get(str(path)) is None

    @pytest.mark.asyncio
    async def test_only_document_left_beside_it(self, tmp_path):
        data_dir = tmp_path / "data"
        lock_dir = tmp_path / "locks"
        path = data_dir / "doc.json"
        store = JsonFileStore(lock_dir=lock_dir)

        await store.put(str(path), {"a": 1})
        await store.update(str(path), _append("x"))

        assert [p.name for p in data_dir.iterdir()] == ["doc.json"]
        assert list(lock_dir.iterdir()) == [store.lock_path(str(path))]

    def test_lock_path_keyed_by_resolved_path(self, tmp_path):
        store = JsonFileStore(lock_dir=tmp_path / "locks")
        a = store.lock_path(str(tmp_path / "x" / ".." / "doc.json"))
        b = store.lock_path(str(tmp_path / "doc.json"))
        c = store.lock_path(str(tmp_path / "other.json"))
        assert a == b
        assert a != c
        assert a.parent == tmp_path / "locks"

    @pytest.mark.asyncio
    async def test_concurrent_updates_not_lost(self, tmp_path):
        path = str(tmp_path / "doc.json")
        store = JsonFileStore()

        await asyncio.gather(*(store.update(path, _append(i)) for i in range(20)))

        data = await store.get(path)
        assert sorted(data["items"]) == list(range(20))

    @pytest.mark.asyncio
    async def test_separate_instances_share_file(self, tmp_path):
        path = str(tmp_path / "doc.json")
        await JsonFileStore().update(path, _append("a"))
        await JsonFileStore().update(path, _append("b"))
        assert await JsonFileStore().get(path) == {"items": ["a", "b"]}
