"""Read-through cache for remote collections."""
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional


logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    value: Any = None
    stale: bool = True
    fetch_count: int = 0


class QueryCache:
    """
    Collections keyed by query name.

    Writers only invalidate; the next ``read`` fetches again. Nothing patches
    cached values in place.
    """

    def __init__(self):
        self._entries: Dict[str, _Entry] = {}

    async def read(self, key: str, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return the cached value, fetching it first if missing or stale.

        Args:
            key: Query key, e.g. "programmes"
            fetcher: Coroutine function producing a fresh value

        Returns:
            Cached or freshly fetched value

        Raises:
            Whatever ``fetcher`` raises; the entry stays stale
        """
        entry = self._entries.setdefault(key, _Entry())
        if not entry.stale:
            return entry.value

        logger.debug("Fetching %s", key)
        value = await fetcher()
        entry.value = value
        entry.stale = False
        entry.fetch_count += 1
        return value

    def peek(self, key: str) -> Optional[Any]:
        """Return the last fetched value without fetching, or None."""
        entry = self._entries.get(key)
        return entry.value if entry else None

    def is_stale(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def fetch_count(self, key: str) -> int:
        entry = self._entries.get(key)
        return entry.fetch_count if entry else 0

    def invalidate(self, key: str) -> None:
        """Mark a collection stale so the next read re-fetches it."""
        entry = self._entries.get(key)
        if entry is not None:
            entry.stale = True
        logger.debug("Invalidated %s", key)

    def clear(self) -> None:
        self._entries.clear()
