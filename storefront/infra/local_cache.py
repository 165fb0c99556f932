"""Local Cache Store - synchronous JSON key-value store on the local filesystem.

One file per logical key (`products`, `categories`, `cart`, ...) under
`settings.local_storage_root`. Entries survive process restarts.
"""

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any

from storefront.config import settings
from storefront.infra.logging import get_logger

logger = get_logger(__name__)

_KEY_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


class LocalCacheError(Exception):
    """Raised when a cache entry cannot be written or removed."""


class LocalCacheStore:
    """Persistent key-value cache holding JSON documents."""

    def __init__(self, root: Path | str | None = None) -> None:
        """Initialize the cache.

        Args:
            root: Directory for cache entries. Defaults to settings.local_storage_root.
        """
        self._root = Path(root) if root is not None else settings.local_storage_path

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid cache key: {key!r}")
        return self._root / f"{key}.json"

    def has(self, key: str) -> bool:
        """Whether an entry was ever written for `key`."""
        return self._path(key).is_file()

    def get(self, key: str, default: Any = None) -> Any:
        """Read an entry.

        Missing or unreadable entries return `default`; a corrupt entry is
        logged and treated as missing.
        """
        path = self._path(key)
        if not path.is_file():
            return default

        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Unreadable cache entry", key=key, error=str(e))
            return default

    def set(self, key: str, value: Any) -> None:
        """Write an entry atomically.

        Raises:
            LocalCacheError: If the entry cannot be written
        """
        path = self._path(key)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(value, ensure_ascii=False, default=str)
            fd, tmp_name = tempfile.mkstemp(dir=self._root, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(payload)
            os.replace(tmp_name, path)
        except (OSError, TypeError) as e:
            logger.error("Failed to write cache entry", key=key, error=str(e))
            raise LocalCacheError(f"Cannot write cache entry '{key}': {e}") from e

        logger.debug("Cache entry written", key=key, size=len(payload))

    def remove(self, key: str) -> bool:
        """Delete an entry. Returns False when it did not exist."""
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise LocalCacheError(f"Cannot remove cache entry '{key}': {e}") from e
        return True

    def size(self, key: str) -> int:
        """Size of an entry in bytes (0 when missing)."""
        path = self._path(key)
        try:
            return path.stat().st_size
        except FileNotFoundError:
            return 0
