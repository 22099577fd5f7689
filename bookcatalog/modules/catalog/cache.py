"""In-memory query cache for fetched collections."""

from typing import Any, Dict, Hashable, Optional

BOOKS_QUERY_KEY = ("books",)


class QueryCache:
    """Explicitly invalidated cache of fetched snapshots.

    Each key also has a generation counter that ``invalidate`` bumps. A
    caller that records the generation before fetching can tell whether the
    snapshot it receives is still current when the fetch resolves.
    """

    def __init__(self) -> None:
        self._entries: Dict[Hashable, Any] = {}
        self._generations: Dict[Hashable, int] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, or None when the key is absent or invalidated."""
        return self._entries.get(key)

    def set(self, key: Hashable, value: Any) -> None:
        self._entries[key] = value

    def invalidate(self, key: Hashable) -> None:
        """Drop the cached value so the next read refetches."""
        self._entries.pop(key, None)
        self._generations[key] = self.generation(key) + 1

    def generation(self, key: Hashable) -> int:
        return self._generations.get(key, 0)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries
