"""
Local durable key-value storage used to persist the favorites list.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from vetmap.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def close(self) -> None: ...


class MemoryStorage:
    """In-process storage; contents vanish with the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def close(self) -> None:
        pass


class JsonFileStorage:
    """
    Stores all keys in a single JSON object on disk.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a crash mid-write leaves the previous contents intact.
    Disk access runs in the default executor to keep the event loop free.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[str]:
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(None, self._read_all)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        loop = asyncio.get_running_loop()
        async with self._lock:
            data = await loop.run_in_executor(None, self._read_all)
            data[key] = value
            await loop.run_in_executor(None, self._write_all, data)

    async def close(self) -> None:
        pass

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(
                f"Could not read storage file {self.path}",
                details={"path": str(self.path), "error": str(e)},
            ) from e
        if not isinstance(data, dict):
            raise PersistenceError(
                f"Storage file {self.path} does not hold a JSON object",
                details={"path": str(self.path)},
            )
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_name, self.path)
            logger.debug(f"Wrote {len(data)} keys to {self.path}")
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(
                f"Could not write storage file {self.path}",
                details={"path": str(self.path), "error": str(e)},
            ) from e
