from compressed_shell.storage.kv import (
    InMemoryKeyValueStore,
    JsonFileStore,
    KeyValueStore,
)

__all__ = ["KeyValueStore", "InMemoryKeyValueStore", "JsonFileStore"]
