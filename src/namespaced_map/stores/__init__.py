"""Storage backends a namespaced map can delegate to."""

from namespaced_map.stores.base import KeyValueStore, StoreConnector
from namespaced_map.stores.memory import InMemoryStore
from namespaced_map.stores.redis import RedisStore

__all__ = ["InMemoryStore", "KeyValueStore", "RedisStore", "StoreConnector"]
