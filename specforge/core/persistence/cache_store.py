"""
Cache store — opaque per-configuration key/value persistence.

The cache engine only needs read-after-write consistency: ``read(key)``
returns the bytes last written under ``key``, or None. Entries are
stored as files under ``.state/codegen/<configuration>/``; writes are
atomic (write to temp file, then rename) so an interrupted build never
leaves a partial entry behind.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from specforge.core.models.build import check_configuration_name

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = ".state/codegen"


@runtime_checkable
class CacheStore(Protocol):
    """Key/value storage for the cache engine."""

    def read(self, key: str) -> bytes | None:
        """Bytes stored under ``key``, or None if absent/unreadable."""
        ...

    def write(self, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Forget ``key``. Missing keys are ignored."""
        ...


class FileCacheStore:
    """One file per key inside a private directory."""

    def __init__(self, directory: Path):
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory

    def _entry_path(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def read(self, key: str) -> bytes | None:
        path = self._entry_path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cannot read cache entry %s: %s — treating as absent", path, e)
            return None

    def write(self, key: str, data: bytes) -> None:
        path = self._entry_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{key}_", suffix=".tmp")
        tmp = Path(tmp_path)
        try:
            with open(fd, "wb") as f:
                f.write(data)
            tmp.replace(path)
            logger.debug("Cache entry written: %s", path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._entry_path(key).unlink(missing_ok=True)

    def clear(self) -> None:
        """Remove the whole store directory."""
        if self._directory.is_dir():
            shutil.rmtree(self._directory)
            logger.info("Cache store cleared: %s", self._directory)


class MemoryCacheStore:
    """In-process store, for embedding the engine without touching disk."""

    def __init__(self) -> None:
        self._entries: dict[str, bytes] = {}

    def read(self, key: str) -> bytes | None:
        return self._entries.get(key)

    def write(self, key: str, data: bytes) -> None:
        self._entries[key] = data

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._entries)


def default_cache_dir(project_root: Path, configuration: str) -> Path:
    """Per-configuration store directory under the project's state dir.

    Raises:
        ValueError: If ``configuration`` would resolve outside its own
            directory directly below the cache base.
    """
    check_configuration_name(configuration)
    base = project_root / DEFAULT_CACHE_DIR
    directory = base / configuration
    if directory.resolve().parent != base.resolve():
        raise ValueError(f"Invalid configuration name '{configuration}'")
    return directory


def cache_store_for(project_root: Path, configuration: str) -> FileCacheStore:
    """The store owned by ``configuration``. Never shared across configurations."""
    return FileCacheStore(default_cache_dir(project_root, configuration))
