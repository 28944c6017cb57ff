"""Tests for services/persistence/cache.py."""

import time

from services.persistence.cache import QueryCache, query_key


class TestQueryKey:
    def test_param_order_irrelevant(self):
        assert query_key("services", order="name", limit=5) == query_key("services", limit=5, order="name")

    def test_table_is_first_element(self):
        assert query_key("applications", eq={"id": "1"})[0] == "applications"


class TestQueryCache:
    def test_miss_then_hit(self):
        cache = QueryCache()
        key = query_key("services")
        assert cache.get(key) == (False, None)
        cache.set(key, [1])
        assert cache.get(key) == (True, [1])

    def test_none_is_cached(self):
        cache = QueryCache()
        key = query_key("profiles", eq={"id": "x"})
        calls = []
        for _ in range(2):
            cache.get_or_load(key, lambda: calls.append(1))
        assert len(calls) == 1

    def test_ttl_expiry(self):
        cache = QueryCache(ttl_seconds=0.05)
        key = query_key("services")
        cache.set(key, "v")
        time.sleep(0.1)
        assert cache.get(key) == (False, None)

    def test_loader_failure_not_cached(self):
        cache = QueryCache()
        key = query_key("services")

        def boom():
            raise RuntimeError("down")

        try:
            cache.get_or_load(key, boom)
        except RuntimeError:
            pass
        assert cache.get_or_load(key, lambda: "ok") == "ok"

    def test_invalidate_only_named_table(self):
        cache = QueryCache()
        cache.set(query_key("services"), 1)
        cache.set(query_key("services", order="name"), 2)
        cache.set(query_key("profiles"), 3)
        assert cache.invalidate("services") == 2
        assert cache.get(query_key("profiles")) == (True, 3)
        assert cache.stats()["size"] == 1

    def test_maxsize_eviction(self):
        cache = QueryCache(maxsize=2)
        for i in range(3):
            cache.set(query_key("t", i=i), i)
        assert cache.stats()["size"] == 2

    def test_stats(self):
        cache = QueryCache()
        key = query_key("t")
        cache.set(key, 1)
        cache.get(key)
        cache.get(query_key("other"))
        assert cache.stats() == {"hits": 1, "misses": 1, "size": 1}

    def test_clear(self):
        cache = QueryCache()
        cache.set(query_key("t"), 1)
        cache.clear()
        assert cache.stats()["size"] == 0
