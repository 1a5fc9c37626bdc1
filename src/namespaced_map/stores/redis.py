"""RedisStore — shared storage backed by a Redis server through redis-py."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import redis
from redis.exceptions import RedisError

from namespaced_map.exceptions import StoreUnavailableError
from namespaced_map.stores.base import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_PORT = 6379


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except RedisError as exc:
        raise StoreUnavailableError(operation, str(exc)) from exc


class RedisStore(KeyValueStore):
    """Store backed by a ``redis.Redis`` client.

    The client must be created with ``decode_responses=True`` so keys and
    values come back as ``str``; the :meth:`connect` and :meth:`from_url`
    constructors take care of that.

    Parameters:
        client:     A ready ``redis.Redis`` (or compatible) client.
        scan_count: ``COUNT`` hint passed to each ``SCAN`` round trip.
    """

    def __init__(self, client: redis.Redis, *, scan_count: int = 500) -> None:
        self._client = client
        self._scan_count = scan_count

    @classmethod
    def connect(
        cls, host: str = "localhost", port: int = DEFAULT_PORT, **options: Any
    ) -> RedisStore:
        """Open a store on ``host:port``.  Extra ``options`` go to ``redis.Redis``."""
        scan_count = options.pop("scan_count", 500)
        client = redis.Redis(host=host, port=port, decode_responses=True, **options)
        logger.debug("Opened Redis store at %s:%d", host, port)
        return cls(client, scan_count=scan_count)

    @classmethod
    def from_url(cls, url: str, **options: Any) -> RedisStore:
        """Open a store from a ``redis://`` URL."""
        scan_count = options.pop("scan_count", 500)
        client = redis.Redis.from_url(url, decode_responses=True, **options)
        return cls(client, scan_count=scan_count)

    @classmethod
    def connector(cls, **options: Any) -> Callable[[str, int], RedisStore]:
        """Return a ``(host, port)`` connector that forwards ``options``."""

        def _connect(host: str, port: int) -> RedisStore:
            return cls.connect(host, port, **options)

        return _connect

    @property
    def client(self) -> redis.Redis:
        return self._client

    # ── Store protocol ───────────────────────────────────────

    def get(self, key: str) -> str | None:
        with _translate_errors("get"):
            return self._client.get(key)

    def set(self, key: str, value: str) -> str | None:
        with _translate_errors("set"):
            return self._client.set(key, value, get=True)

    def delete(self, key: str) -> None:
        with _translate_errors("delete"):
            self._client.delete(key)

    def scan_keys_matching(self, pattern: str) -> set[str]:
        with _translate_errors("scan"):
            return set(self._client.scan_iter(match=pattern, count=self._scan_count))

    def close(self) -> None:
        with _translate_errors("close"):
            self._client.close()
