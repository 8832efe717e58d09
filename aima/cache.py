"""
Per-session lesson content cache.

Entries are created on the first successful fetch for a category and live
until the owning lesson session ends. The backing mapping is injectable so
tests can observe every read and write.
"""

from typing import MutableMapping, Optional, Sequence, Tuple

from .logger import logger


class CategoryCache:
    """Mapping of category key -> lesson lines, never evicted."""

    def __init__(self, store: Optional[MutableMapping[str, Tuple[str, ...]]] = None):
        self._store: MutableMapping[str, Tuple[str, ...]] = store if store is not None else {}

    def get(self, key: str) -> Optional[Tuple[str, ...]]:
        return self._store.get(key)

    def put(self, key: str, lines: Sequence[str]) -> None:
        # Stored as a tuple so displayed lists can't alias cached content
        self._store[key] = tuple(lines)
        logger.debug(f"Cached {len(lines)} lines for category '{key}'")

    def clear(self) -> None:
        self._store.clear()

    def keys(self):
        return list(self._store.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)
