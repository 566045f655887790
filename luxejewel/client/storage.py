# luxejewel/client/storage.py
"""
Key-value backends the storefront stores persist to.

Values are JSON documents stored under string keys, the way the browser
storefront kept its cart and wishlist in localStorage.
"""
import json
import os
from typing import Any, Dict

import redis

from luxejewel.utils.retry import redis_retry
from luxejewel.utils.settings import REDIS_URL, STOREFRONT_STORAGE
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)


class MemoryStorage:
    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage:
    """All keys in one JSON object on disk, rewritten on every change."""

    def __init__(self, path: str):
        self.path = os.path.expanduser(path)

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}

    def _dump(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def _load_for_write(self) -> Dict[str, str]:
        # a corrupt file is overwritten by the next write
        try:
            return self._load()
        except ValueError as e:
            logger.error(f"Replacing unreadable storage file {self.path}: {e}")
            return {}

    def set(self, key: str, value: str) -> None:
        data = self._load_for_write()
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> None:
        data = self._load_for_write()
        if data.pop(key, None) is not None:
            self._dump(data)


class RedisStorage:
    def __init__(self, url: str, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(url, decode_responses=True)

    @redis_retry()
    def get(self, key: str) -> str | None:
        return self.redis.get(key)

    @redis_retry()
    def set(self, key: str, value: str) -> None:
        self.redis.set(key, value)

    @redis_retry()
    def delete(self, key: str) -> None:
        self.redis.delete(key)


def open_storage(url: str | None = None):
    """
    memory://            -> MemoryStorage
    redis://host:port/db -> RedisStorage
    redis                -> RedisStorage at REDIS_URL
    anything else        -> FileStorage at that path
    """
    url = url or STOREFRONT_STORAGE
    if url == "redis":
        url = REDIS_URL
    if url == "memory://":
        return MemoryStorage()
    if url.startswith(("redis://", "rediss://", "unix://")):
        logger.info(f"Using redis storage at {url}")
        return RedisStorage(url)
    return FileStorage(url)


def load_json(storage, key: str, default: Any) -> Any:
    """Read a JSON value; unreadable state is logged and replaced by `default`."""
    try:
        raw = storage.get(key)
    except (OSError, ValueError, redis.RedisError) as e:
        logger.error(f"Failed to read {key} from storage: {e}")
        return default

    if raw is None:
        return default
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.error(f"Failed to parse {key} from storage: {e}")
        return default


def save_json(storage, key: str, value: Any) -> None:
    try:
        storage.set(key, json.dumps(value, default=str))
    except (OSError, ValueError, TypeError, redis.RedisError) as e:
        logger.error(f"Failed to save {key} to storage: {e}")
