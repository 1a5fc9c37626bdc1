"""InMemoryStore — zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

import re
import threading
from functools import lru_cache

from namespaced_map.stores.base import KeyValueStore


def _parse_class(pattern: str, start: int) -> tuple[int, str]:
    """Parse a ``[...]`` class opening before ``start``.

    Returns the index of the closing ``]`` and the regex class, or
    ``(-1, "")`` when the class is never closed.  A backslash makes the
    next character literal, ``]`` included.
    """
    n = len(pattern)
    j = start
    negate = j < n and pattern[j] == "^"
    if negate:
        j += 1
    parts: list[str] = []
    while j < n and pattern[j] != "]":
        if pattern[j] == "\\" and j + 1 < n:
            j += 1
            parts.append(re.escape(pattern[j]))
        elif j + 2 < n and pattern[j + 1] == "-" and pattern[j + 2] != "]":
            low, high = sorted((pattern[j], pattern[j + 2]))
            parts.append(f"{re.escape(low)}-{re.escape(high)}")
            j += 2
        else:
            parts.append(re.escape(pattern[j]))
        j += 1
    if j >= n:
        return -1, ""
    if not parts:
        # Empty class matches nothing.
        return j, "(?!)"
    return j, f"[{'^' if negate else ''}{''.join(parts)}]"


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    """Translate a Redis-style glob into an anchored regular expression."""
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            out.append(".*")
        elif ch == "?":
            out.append(".")
        elif ch == "\\" and i + 1 < n:
            i += 1
            out.append(re.escape(pattern[i]))
        elif ch == "[":
            end, body = _parse_class(pattern, i + 1)
            if end == -1:
                out.append(re.escape(ch))
            else:
                out.append(body)
                i = end
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("".join(out), re.DOTALL)


class InMemoryStore(KeyValueStore):
    """In-memory store using a single dict.  Data is lost on process exit."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> str | None:
        with self._lock:
            previous = self._data.get(key)
            self._data[key] = value
            return previous

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def scan_keys_matching(self, pattern: str) -> set[str]:
        regex = _compile_glob(pattern)
        with self._lock:
            return {key for key in self._data if regex.fullmatch(key)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
