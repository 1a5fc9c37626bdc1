"""NamespacedStoreMap — a map view scoped to one token inside a shared store."""

from __future__ import annotations

import logging
import threading
import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from namespaced_map._internal.tokens import RandomTokenGenerator, TokenGenerator
from namespaced_map.base import StoreMap
from namespaced_map.exceptions import InvalidArgumentError, StoreUnavailableError
from namespaced_map.stores.redis import DEFAULT_PORT, RedisStore

if TYPE_CHECKING:
    from types import TracebackType

    from namespaced_map.config import MapConfig
    from namespaced_map.stores.base import KeyValueStore, StoreConnector

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def _require_text(argument: str, value: Any) -> str:
    if value is None:
        raise InvalidArgumentError(argument)
    if not isinstance(value, str):
        raise InvalidArgumentError(argument, f"must be str, got {type(value).__name__}")
    return value


def _require_token(token: Any) -> str:
    _require_text("token", token)
    if not token:
        raise InvalidArgumentError("token", "must not be empty")
    return token


@dataclass(frozen=True)
class MapInstance:
    """Snapshot of what identifies a map: its endpoint, token and persist flag."""

    host: str
    port: int
    token: str
    persist: bool


class _NamespaceState:
    """Everything the cleanup finalizer needs, without referencing the map.

    The finalizer keeps this object alive, so it must never hold the map
    itself or the map would never become unreachable.
    """

    def __init__(
        self, host: str, port: int, token: str, persist: bool, connector: StoreConnector
    ) -> None:
        self.host = host
        self.port = port
        self.token = token
        self.persist = persist
        self.connector = connector
        self._store: KeyValueStore | None = None
        self._lock = threading.Lock()

    def store(self) -> KeyValueStore:
        with self._lock:
            if self._store is None:
                self._store = self.connector(self.host, self.port)
            return self._store

    def release(self) -> None:
        with self._lock:
            store, self._store = self._store, None
        if store is not None:
            store.close()

    def rebind(self, host: str, port: int) -> None:
        with self._lock:
            store, self._store = self._store, None
            self.host = host
            self.port = port
        if store is not None:
            store.close()

    def physical_key(self, key: str) -> str:
        return key + self.token

    def logical_key(self, physical_key: str) -> str:
        return physical_key[: -len(self.token)]

    def physical_keys(self) -> set[str]:
        store = self.store()
        pattern = "*" + store.escape_glob(self.token)
        # The glob only promises the suffix; re-check it exactly.
        return {key for key in store.scan_keys_matching(pattern) if key.endswith(self.token)}

    def purge(self) -> int:
        store = self.store()
        keys = self.physical_keys()
        for key in keys:
            store.delete(key)
        logger.debug("Purged %d key(s) for token %s", len(keys), self.token)
        return len(keys)


def _purge_on_collect(state: _NamespaceState) -> None:
    if state.persist:
        state.release()
        return
    try:
        state.purge()
    except StoreUnavailableError:
        logger.warning(
            "Could not purge namespace %s on %s:%d after the map was collected",
            state.token,
            state.host,
            state.port,
            exc_info=True,
        )
    finally:
        state.release()


class NamespacedStoreMap(StoreMap):
    """String map stored in a shared key-value store under a namespace token.

    Every logical key ``k`` is stored as ``k + token``, so any number of
    maps with different tokens can share one store.  Two maps with the
    same token see the same entries; that is how a map is reopened from
    another instance or process.

    Nothing is cached locally: every call goes to the store, and errors
    from the store propagate unchanged.

    One map may be shared between threads; its connection is opened once.
    Bulk reads are still assembled from several store calls and may be torn
    by concurrent writers.

    Unless :meth:`mark_persist` was called, the namespace is deleted from
    the store when the map is closed.  Use the map as a context manager
    or call :meth:`close` yourself.  If neither happens, a best-effort
    purge runs when the map is garbage collected, at no guaranteed time.

    Parameters:
        host:            Store host.
        port:            Store port.
        token:           Namespace token.  A fresh one is generated if omitted.
        persist:         Keep the namespace when the map is closed.
        connector:       ``(host, port) -> KeyValueStore``.  Defaults to
                         :meth:`RedisStore.connect`.
        token_generator: Injectable token source for testing.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = DEFAULT_PORT,
        token: str | None = None,
        *,
        persist: bool = False,
        connector: StoreConnector | None = None,
        token_generator: TokenGenerator | None = None,
    ) -> None:
        _require_text("host", host)
        if token is None:
            token = (token_generator or RandomTokenGenerator()).generate()
        _require_token(token)

        self._state = _NamespaceState(
            host=host,
            port=port,
            token=token,
            persist=persist,
            connector=connector or RedisStore.connect,
        )
        self._finalizer = weakref.finalize(self, _purge_on_collect, self._state)
        logger.debug("Opened namespaced map %r", self)

    # ── construction helpers ─────────────────────────────────

    @classmethod
    def from_config(
        cls,
        config: MapConfig,
        *,
        connector: StoreConnector | None = None,
        token_generator: TokenGenerator | None = None,
    ) -> NamespacedStoreMap:
        """Build a map from a validated :class:`MapConfig`."""
        if connector is None:
            connector = RedisStore.connector(**config.redis_options())
        return cls(
            host=config.host,
            port=config.port,
            token=config.token,
            persist=config.persist,
            connector=connector,
            token_generator=token_generator,
        )

    @classmethod
    def from_instance(
        cls, other: NamespacedStoreMap, *, persist: bool = False
    ) -> NamespacedStoreMap:
        """Open another map on ``other``'s endpoint and token."""
        return cls(
            host=other.host,
            port=other.port,
            token=other.token,
            persist=persist,
            connector=other._state.connector,
        )

    # ── collection contract ──────────────────────────────────

    def size(self) -> int:
        return len(self._state.physical_keys())

    def contains_key(self, key: str) -> bool:
        _require_text("key", key)
        return self._state.store().get(self._state.physical_key(key)) is not None

    def contains_value(self, value: str) -> bool:
        _require_text("value", value)
        store = self._state.store()
        return any(store.get(key) == value for key in self._state.physical_keys())

    def get(self, key: str, default: _T | None = None) -> str | _T | None:
        _require_text("key", key)
        value = self._state.store().get(self._state.physical_key(key))
        return default if value is None else value

    def put(self, key: str, value: str) -> str | None:
        _require_text("key", key)
        _require_text("value", value)
        return self._state.store().set(self._state.physical_key(key), value)

    def remove(self, key: str) -> str | None:
        _require_text("key", key)
        store = self._state.store()
        physical = self._state.physical_key(key)
        previous = store.get(physical)
        store.delete(physical)
        return previous

    def clear(self) -> None:
        self._state.purge()

    def key_set(self) -> set[str]:
        return {self._state.logical_key(key) for key in self._state.physical_keys()}

    def values(self) -> list[str]:
        store = self._state.store()
        fetched = (store.get(key) for key in self._state.physical_keys())
        # Keys deleted between the scan and the read are skipped.
        return [value for value in fetched if value is not None]

    def entry_set(self) -> set[tuple[str, str]]:
        store = self._state.store()
        entries: set[tuple[str, str]] = set()
        for key in self._state.physical_keys():
            value = store.get(key)
            if value is not None:
                entries.add((self._state.logical_key(key), value))
        return entries

    # ── namespace and endpoint ───────────────────────────────

    @property
    def token(self) -> str:
        return self._state.token

    def set_token(self, token: str) -> None:
        """Rebind this map to another namespace.  The old one is left as is."""
        self._state.token = _require_token(token)
        logger.debug("Rebound namespaced map to token %s", token)

    @property
    def host(self) -> str:
        return self._state.host

    @property
    def port(self) -> int:
        return self._state.port

    def set_host_and_port(self, host: str, port: int) -> None:
        """Point this map at another store.  Reachability is checked on first use."""
        _require_text("host", host)
        self._state.rebind(host, port)
        logger.debug("Rebound namespaced map to %s:%d", host, port)

    @property
    def instance(self) -> MapInstance:
        return MapInstance(
            host=self._state.host,
            port=self._state.port,
            token=self._state.token,
            persist=self._state.persist,
        )

    # ── lifecycle ────────────────────────────────────────────

    def mark_persist(self) -> None:
        """Keep this namespace in the store when the map is closed."""
        self._state.persist = True

    def mark_ephemeral(self) -> None:
        """Delete this namespace from the store when the map is closed."""
        self._state.persist = False

    def is_persisted(self) -> bool:
        return self._state.persist

    def close(self) -> None:
        """Purge the namespace unless persisted, then drop the connection.

        Safe to call more than once; only the first successful purge
        touches the store.  A failed purge leaves cleanup armed so the
        call can be retried.
        """
        if not self._state.persist and self._finalizer.alive:
            self._state.purge()
            self._finalizer.detach()
        self._state.release()

    def __enter__(self) -> NamespacedStoreMap:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        state = self._state
        return (
            f"{type(self).__name__}(host={state.host!r}, port={state.port}, "
            f"token={state.token!r}, persist={state.persist})"
        )
