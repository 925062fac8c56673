"""Unit tests for QueryCache."""
import asyncio

import pytest

from festival_admin.services.query_cache import QueryCache
from festival_admin.utils.exceptions import ServerError


class CountingFetcher:
    """Fetcher returning a new list on every call."""

    def __init__(self):
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return [f"item-{self.calls}"]


class TestQueryCache:
    """Test read-through caching and invalidation."""

    def test_first_read_fetches(self):
        cache = QueryCache()
        fetcher = CountingFetcher()

        assert asyncio.run(cache.read("programmes", fetcher)) == ["item-1"]
        assert cache.fetch_count("programmes") == 1
        assert not cache.is_stale("programmes")

    def test_fresh_entry_is_not_refetched(self):
        cache = QueryCache()
        fetcher = CountingFetcher()

        asyncio.run(cache.read("programmes", fetcher))
        value = asyncio.run(cache.read("programmes", fetcher))

        assert value == ["item-1"]
        assert fetcher.calls == 1

    def test_invalidate_forces_refetch(self):
        cache = QueryCache()
        fetcher = CountingFetcher()
        asyncio.run(cache.read("speakers", fetcher))

        cache.invalidate("speakers")

        assert cache.is_stale("speakers")
        assert asyncio.run(cache.read("speakers", fetcher)) == ["item-2"]
        assert cache.fetch_count("speakers") == 2

    def test_invalidate_leaves_other_keys_fresh(self):
        cache = QueryCache()
        asyncio.run(cache.read("programmes", CountingFetcher()))
        asyncio.run(cache.read("speakers", CountingFetcher()))

        cache.invalidate("speakers")

        assert not cache.is_stale("programmes")

    def test_failed_fetch_keeps_entry_stale(self):
        cache = QueryCache()
        asyncio.run(cache.read("speakers", CountingFetcher()))
        cache.invalidate("speakers")

        async def failing():
            raise ServerError("down")

        with pytest.raises(ServerError):
            asyncio.run(cache.read("speakers", failing))

        assert cache.is_stale("speakers")
        assert cache.peek("speakers") == ["item-1"]

    def test_unknown_key(self):
        cache = QueryCache()

        assert cache.peek("nothing") is None
        assert cache.is_stale("nothing")
        assert cache.fetch_count("nothing") == 0
        cache.invalidate("nothing")

    def test_clear(self):
        cache = QueryCache()
        asyncio.run(cache.read("programmes", CountingFetcher()))

        cache.clear()

        assert cache.peek("programmes") is None
