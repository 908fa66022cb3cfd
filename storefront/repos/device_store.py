# storefront/repos/device_store.py
import threading
from abc import ABC, abstractmethod
from typing import Dict

import redis
from redis.exceptions import RedisError

from storefront.domain.errors import PersistenceError
from storefront.utils.retry import redis_retry
from storefront.utils.settings import DEVICE_BLOB_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class DeviceStore(ABC):
    """
    String key/value storage for guest carts and wishlists.
    Keys are already scoped to a device by the caller.
    """

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def delete(self, key: str) -> None: ...


class RedisDeviceStore(DeviceStore):
    def __init__(self, url: str, ttl: int = DEVICE_BLOB_TTL_SECONDS):
        self.redis = redis.Redis.from_url(url, decode_responses=True)
        self.ttl = ttl

    @redis_retry()
    def _get(self, key: str) -> str | None:
        return self.redis.get(key)

    @redis_retry()
    def _set(self, key: str, value: str) -> None:
        #sliding expiry, every write extends the guest blob
        self.redis.set(name=key, value=value, ex=self.ttl)

    @redis_retry()
    def _delete(self, key: str) -> None:
        self.redis.delete(key)

    def get(self, key: str) -> str | None:
        try:
            return self._get(key)
        except RedisError as e:
            logger.error(f"Redis GET {key} failed: {e}")
            raise PersistenceError(f"Device storage unavailable: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self._set(key, value)
        except RedisError as e:
            logger.error(f"Redis SET {key} failed: {e}")
            raise PersistenceError(f"Device storage unavailable: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._delete(key)
        except RedisError as e:
            logger.error(f"Redis DEL {key} failed: {e}")
            raise PersistenceError(f"Device storage unavailable: {e}") from e


class MemoryDeviceStore(DeviceStore):
    """In-process store, used for local development and tests."""

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


def build_device_store(url: str) -> DeviceStore:
    if url.startswith("memory://"):
        logger.warning("Using in-process device store, guest carts are lost on restart")
        return MemoryDeviceStore()
    return RedisDeviceStore(url)
