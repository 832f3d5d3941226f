# src/localconfig/core/cache.py
"""Process-wide cache of previously computed configuration.

Readers (``get_localconfig``) memoize the loaded configuration here. Every
successful update invalidates the ``localconfig`` entry through the
CacheInvalidator protocol so later reads observe the freshly written file.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

LOCALCONFIG_CACHE_KEY = "localconfig"

_MISSING = object()


class ProcessCache:
    """Small keyed cache living for the lifetime of the process.

    Not thread-safe: localconfig is single-threaded by design.
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def get_or_compute(self, key: str, compute: Callable[[], Any]) -> Any:
        """Return the cached value for key, computing and storing it if absent."""
        value = self._values.get(key, _MISSING)
        if value is _MISSING:
            value = compute()
            self._values[key] = value
        return value

    def invalidate(self, key: str) -> None:
        """Forget the cached value for key (no-op when absent)."""
        self._values.pop(key, None)

    def clear(self) -> None:
        """Forget every cached value."""
        self._values.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._values


# Module-level singleton shared by readers and the reconciler
process_cache = ProcessCache()
