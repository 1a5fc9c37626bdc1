"""namespaced_map — map views over a shared key-value store.

Each map tags its keys with a random namespace token, so many maps can
live side by side in one store.  Maps that share a token share entries.
A map's namespace is purged when it is closed, unless marked to persist.
"""

from namespaced_map._internal.tokens import RandomTokenGenerator, TokenGenerator
from namespaced_map.base import StoreMap
from namespaced_map.config import MapConfig
from namespaced_map.exceptions import (
    InvalidArgumentError,
    NamespacedMapError,
    StoreUnavailableError,
)
from namespaced_map.map import MapInstance, NamespacedStoreMap

__all__ = [
    "InvalidArgumentError",
    "MapConfig",
    "MapInstance",
    "NamespacedMapError",
    "NamespacedStoreMap",
    "RandomTokenGenerator",
    "StoreMap",
    "StoreUnavailableError",
    "TokenGenerator",
]
