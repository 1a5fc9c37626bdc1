"""KeyValueStore protocol — the external shared store a map delegates to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

_GLOB_SPECIAL = frozenset("*?[]\\")


class KeyValueStore(ABC):
    """Abstract base for all storage backends.

    The store knows nothing about namespaces.  It keeps plain text values
    under plain text keys and can list the keys matching a glob pattern
    (``*`` any run of characters, ``?`` one character, ``[...]`` a class,
    ``\\`` escapes the next character).

    Every call is individually atomic as far as the backend allows; a scan
    followed by per-key reads is not.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or ``None`` if not found."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> str | None:
        """Create or overwrite a value.  Return the previous value, if any."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a value.  No-op if the key does not exist."""
        ...

    @abstractmethod
    def scan_keys_matching(self, pattern: str) -> set[str]:
        """Return every key matching the glob ``pattern``."""
        ...

    def close(self) -> None:
        """Release any connection held by the backend."""

    @staticmethod
    def escape_glob(text: str) -> str:
        """Escape ``text`` so it matches only itself inside a glob pattern."""
        return "".join(f"\\{ch}" if ch in _GLOB_SPECIAL else ch for ch in text)


StoreConnector = Callable[[str, int], KeyValueStore]
"""Anything that opens a store for a ``(host, port)`` endpoint."""
