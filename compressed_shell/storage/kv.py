"""
Key-value storage: ABC and implementations.

Persists the JSON documents behind the permission stores. Keys are opaque
strings; the file-backed store uses them as file paths.
"""

import asyncio
import fcntl
import hashlib
import json
import os
import tempfile
from abc import ABC, abstractmethod
from contextlib import contextmanager
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Iterator, TypeVar

from compressed_shell.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Receives the current value (None when absent or unreadable) and returns
# (new_value, result). A new_value of None leaves the stored value untouched.
Mutator = Callable[[Any | None], tuple[Any | None, T]]


class KeyValueStore(ABC):
    """Abstract base for JSON document persistence."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the stored value, or None when absent or unreadable."""
        ...

    @abstractmethod
    async def put(self, key: str, value: Any) -> None:
        """Replace the stored value."""
        ...

    @abstractmethod
    async def update(self, key: str, mutator: Mutator[T]) -> T:
        """Atomically read, transform and write back a value."""
        ...

    async def close(self) -> None:
        """Close storage and release resources."""
        pass


# ═══════════════════════════════════════════════════════════════════════════
# In-Memory Implementation (for testing)
# ═══════════════════════════════════════════════════════════════════════════


class InMemoryKeyValueStore(KeyValueStore):
    """In-memory implementation for testing."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = deepcopy(initial) if initial else {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        return deepcopy(self._data.get(key))

    async def put(self, key: str, value: Any) -> None:
        async with self._lock:
            self._data[key] = deepcopy(value)

    async def update(self, key: str, mutator: Mutator[T]) -> T:
        async with self._lock:
            new_value, result = mutator(deepcopy(self._data.get(key)))
            if new_value is not None:
                self._data[key] = deepcopy(new_value)
            return result

    def keys(self) -> list[str]:
        return list(self._data.keys())


# ═══════════════════════════════════════════════════════════════════════════
# JSON File Implementation
# ═══════════════════════════════════════════════════════════════════════════


def default_lock_dir() -> Path:
    """Per-user directory holding the store's lock files."""
    return Path(tempfile.gettempdir()) / f"compressed-shell-locks-{os.getuid()}"


class JsonFileStore(KeyValueStore):
    """
    File-backed store: one JSON document per key, the key being its path.

    Writes go to a temp file in the target directory followed by os.replace,
    so readers never observe a half-written document. update() holds a
    per-path asyncio.Lock and an exclusive flock for the whole
    read-modify-write. Lock files live in ``lock_dir``, named by a hash of
    the resolved document path, so nothing extra appears next to the
    document. Blocking file work runs in a worker thread.
    """

    def __init__(
        self, indent: int | None = 2, lock_dir: str | os.PathLike | None = None
    ) -> None:
        self._indent = indent
        self._lock_dir = Path(lock_dir) if lock_dir else default_lock_dir()
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, key: str) -> asyncio.Lock:
        path = str(Path(key).resolve())
        lock = self._locks.get(path)
        if lock is None:
            lock = self._locks[path] = asyncio.Lock()
        return lock

    def lock_path(self, key: str) -> Path:
        digest = hashlib.sha256(str(Path(key).resolve()).encode("utf-8")).hexdigest()
        return self._lock_dir / f"{digest[:32]}.lock"

    async def get(self, key: str) -> Any | None:
        return await asyncio.to_thread(self._read, Path(key))

    async def put(self, key: str, value: Any) -> None:
        async with self._lock_for(key):
            await asyncio.to_thread(self._locked_put, key, value)

    async def update(self, key: str, mutator: Mutator[T]) -> T:
        async with self._lock_for(key):
            return await asyncio.to_thread(self._locked_update, key, mutator)

    def _locked_put(self, key: str, value: Any) -> None:
        with self._file_lock(key):
            self._write(Path(key), value)

    def _locked_update(self, key: str, mutator: Mutator[T]) -> T:
        path = Path(key)
        with self._file_lock(key):
            new_value, result = mutator(self._read(path))
            if new_value is not None:
                self._write(path, new_value)
            return result

    def _read(self, path: Path) -> Any | None:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("store_read_failed", path=str(path), error=str(e))
            return None

    def _write(self, path: Path, value: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(value, fh, indent=self._indent)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
        logger.debug("store_written", path=str(path))

    @contextmanager
    def _file_lock(self, key: str) -> Iterator[None]:
        """Process-level lock to avoid lost updates between writers."""
        lock_file = self.lock_path(key)
        lock_file.parent.mkdir(parents=True, exist_ok=True)
        with lock_file.open("a") as fh:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(fh.fileno(), fcntl.LOCK_UN)


__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileStore",
    "Mutator",
    "default_lock_dir",
]
