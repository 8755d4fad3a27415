"""Persistent key-value stores for the selected environment.

The registry talks to storage only through :class:`KeyValueStore`:
``get`` returns the stored string or ``None``, ``set`` and ``remove`` report
success as a boolean. Implementations may also raise :class:`StorageError`;
callers treat that the same as a failed operation.
"""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

from .errors import StorageError
from .logging import LogEvent, log_debug, log_warning


class KeyValueStore(ABC):
    """Application-wide string key-value store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under ``key``, or ``None``."""

    @abstractmethod
    def set(self, key: str, value: str) -> bool:
        """Store ``value`` under ``key``. Returns True on success."""

    @abstractmethod
    def remove(self, key: str) -> bool:
        """Delete ``key``. Returns True on success, including when it was absent."""


class MemoryStore(KeyValueStore):
    """In-memory store; contents last as long as the object."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        self._data[key] = value
        return True

    def remove(self, key: str) -> bool:
        self._data.pop(key, None)
        return True

    def __contains__(self, key: object) -> bool:
        return key in self._data


class YamlFileStore(KeyValueStore):
    """Store backed by a YAML mapping on disk.

    The whole mapping is re-read on every ``get`` so that a value written by a
    previous process is always seen. Writes go to a temporary file in the same
    directory which then replaces the target, so a crash never leaves a
    half-written file behind.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StorageError(f"Invalid storage format in {self.path}: expected mapping, got {type(data).__name__}")
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                    yaml.safe_dump(data, tmp_file, default_flow_style=False, sort_keys=True)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        try:
            return self._read().get(key)
        except StorageError as e:
            raise StorageError(e.message, key=key) from e

    def set(self, key: str, value: str) -> bool:
        try:
            data = self._read()
        except StorageError as e:
            # A corrupt file is replaced rather than blocking every later write
            log_warning(LogEvent.STORAGE, "Discarding unreadable storage file", path=str(self.path), error=str(e))
            data = {}
        data[key] = value
        try:
            self._write(data)
        except StorageError as e:
            log_warning(LogEvent.STORAGE, "Failed to persist value", key=key, error=str(e))
            return False
        log_debug(LogEvent.STORAGE, "Persisted value", key=key, path=str(self.path))
        return True

    def remove(self, key: str) -> bool:
        try:
            data = self._read()
        except StorageError as e:
            log_warning(LogEvent.STORAGE, "Failed to read storage before remove", key=key, error=str(e))
            return False
        if key not in data:
            return True
        del data[key]
        try:
            self._write(data)
        except StorageError as e:
            log_warning(LogEvent.STORAGE, "Failed to remove value", key=key, error=str(e))
            return False
        log_debug(LogEvent.STORAGE, "Removed value", key=key, path=str(self.path))
        return True

    def __repr__(self) -> str:
        return f"YamlFileStore({str(self.path)!r})"
