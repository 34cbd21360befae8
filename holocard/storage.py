"""
Key-value storage backends for the persisted document.

The store writes one key holding the full JSON document. Backends are
injected into ``SchemeStore``:

- ``MemoryStorage``: process-local dict, for tests and embedding
- ``FileStorage``: one UTF-8 JSON file per key inside a directory
"""

import logging
import re
from pathlib import Path
from typing import Optional, Protocol, Union

from holocard.config import settings
from holocard.exceptions import StorageError

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r'[^A-Za-z0-9._-]')


class StorageBackend(Protocol):
    """Minimal key-value interface used by the store."""

    def read(self, key: str) -> Optional[str]:
        """Return the stored text, or None if the key is absent."""
        ...

    def write(self, key: str, value: str) -> None:
        """Replace the stored text for ``key``."""
        ...

    def delete(self, key: str) -> None:
        """Remove ``key``; absent keys are ignored."""
        ...


class MemoryStorage:
    """In-memory storage."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage:
    """
    File-backed storage: ``<directory>/<key>.json``.

    The directory defaults to ``settings.STORAGE_DIR`` and is created on the
    first write.
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        self.directory = Path(directory) if directory is not None else settings.STORAGE_DIR

    def path_for(self, key: str) -> Path:
        """
        Get the file path for a key.

        Characters outside ``[A-Za-z0-9._-]`` are replaced with ``_``.
        """
        return self.directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Cannot read '{path}': {exc}") from exc

    def write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_path = path.with_suffix('.json.tmp')
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Atomic replace
            tmp_path.write_text(value, encoding='utf-8')
            tmp_path.replace(path)
        except OSError as exc:
            raise StorageError(f"Cannot write '{path}': {exc}") from exc
        logger.debug("Wrote %d chars to %s", len(value), path)

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot delete key '{key}': {exc}") from exc
