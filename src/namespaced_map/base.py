"""StoreMap ABC — the associative-collection contract every map implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Collection, Iterator, Mapping
from typing import TypeVar

_T = TypeVar("_T")

_MISSING = object()


class StoreMap(ABC):
    """String-to-string map whose entries live outside the process.

    Subclasses implement the collection operations against some backing
    store.  The Python protocol methods (``len()``, ``in``, ``m[k]``,
    ``m[k] = v``, ``del m[k]``, iteration) are derived from them here, so
    a subclass only deals with the store.

    Bulk reads (``size``, ``key_set``, ``values``, ``entry_set``,
    ``contains_value``) are snapshots assembled from several store calls
    and may be torn under concurrent writers.
    """

    @abstractmethod
    def size(self) -> int:
        """Number of entries currently stored."""
        ...

    def is_empty(self) -> bool:
        return self.size() == 0

    @abstractmethod
    def contains_key(self, key: str) -> bool: ...

    @abstractmethod
    def contains_value(self, value: str) -> bool: ...

    @abstractmethod
    def get(self, key: str, default: _T | None = None) -> str | _T | None:
        """Return the value stored under ``key``, or ``default``."""
        ...

    @abstractmethod
    def put(self, key: str, value: str) -> str | None:
        """Store ``value`` under ``key`` and return the previous value."""
        ...

    def replace(self, key: str, value: str) -> str | None:
        """Same as :meth:`put`."""
        return self.put(key, value)

    @abstractmethod
    def remove(self, key: str) -> str | None:
        """Delete ``key`` and return the value it held, if any."""
        ...

    def put_all(self, entries: Mapping[str, str]) -> None:
        """Write every pair of ``entries`` in iteration order.  Not atomic."""
        for key, value in entries.items():
            self.put(key, value)

    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def key_set(self) -> set[str]: ...

    @abstractmethod
    def values(self) -> Collection[str]: ...

    @abstractmethod
    def entry_set(self) -> set[tuple[str, str]]: ...

    # ── Python protocol ──────────────────────────────────────

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains_key(key)

    def __getitem__(self, key: str) -> str:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value  # type: ignore[return-value]

    def __setitem__(self, key: str, value: str) -> None:
        self.put(key, value)

    def __delitem__(self, key: str) -> None:
        if self.remove(key) is None:
            raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.key_set())

    def keys(self) -> set[str]:
        return self.key_set()

    def items(self) -> set[tuple[str, str]]:
        return self.entry_set()
