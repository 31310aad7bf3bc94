import pytest

from bilemo.core.cache import (
    CUSTOMERS_CACHE_TAG,
    PHONES_CACHE_TAG,
    USERS_CACHE_TAG,
    InMemoryTagAwareCache,
    build_cache_key,
)


class _Counter:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.value


def test_cache_key_concatenates_name_page_and_limit():
    assert build_cache_key("getAllPhone", 2, 5) == "getAllPhone2-5"
    assert build_cache_key("getAllUser7_", 1, 10) == "getAllUser7_1-10"


def test_get_computes_once_until_invalidated():
    cache = InMemoryTagAwareCache()
    compute = _Counter([{"id": 1}])

    first = cache.get("getAllPhone1-10", compute, tags=[PHONES_CACHE_TAG])
    second = cache.get("getAllPhone1-10", compute, tags=[PHONES_CACHE_TAG])

    assert first == second == [{"id": 1}]
    assert compute.calls == 1

    removed = cache.invalidate_tags([PHONES_CACHE_TAG])
    cache.get("getAllPhone1-10", compute, tags=[PHONES_CACHE_TAG])

    assert removed == 1
    assert compute.calls == 2


def test_invalidation_only_touches_matching_tags():
    cache = InMemoryTagAwareCache()
    cache.get("getAllPhone1-10", lambda: [], tags=[PHONES_CACHE_TAG])
    cache.get("getAllCustomer1-10", lambda: [], tags=[CUSTOMERS_CACHE_TAG])
    cache.get("getAllUser2_1-10", lambda: [], tags=[USERS_CACHE_TAG])

    cache.invalidate_tags([CUSTOMERS_CACHE_TAG, USERS_CACHE_TAG])

    assert "getAllPhone1-10" in cache
    assert "getAllCustomer1-10" not in cache
    assert "getAllUser2_1-10" not in cache


def test_invalidate_accepts_single_tag_string():
    cache = InMemoryTagAwareCache()
    cache.get("getAllPhone1-10", lambda: [], tags=[PHONES_CACHE_TAG])

    assert cache.invalidate_tags(PHONES_CACHE_TAG) == 1
    assert "getAllPhone1-10" not in cache


def test_cached_value_is_isolated_from_caller_mutation():
    cache = InMemoryTagAwareCache()
    value = cache.get("k", lambda: [{"id": 1}], tags=["t"])
    value[0]["_links"] = {"self": "/x"}

    again = cache.get("k", lambda: pytest.fail("should hit the cache"), tags=["t"])

    assert again == [{"id": 1}]


def test_expired_entries_are_recomputed(monkeypatch):
    clock = {"now": 1000.0}
    monkeypatch.setattr("bilemo.core.cache.time.monotonic", lambda: clock["now"])
    cache = InMemoryTagAwareCache(default_lifetime_seconds=30)
    compute = _Counter("payload")

    cache.get("k", compute)
    clock["now"] += 10
    cache.get("k", compute)
    clock["now"] += 30
    cache.get("k", compute)

    assert compute.calls == 2


def test_delete_and_clear():
    cache = InMemoryTagAwareCache()
    cache.get("a", lambda: 1, tags=["t"])
    cache.get("b", lambda: 2, tags=["t"])

    assert cache.delete("a") is True
    assert cache.delete("a") is False
    cache.clear()
    assert "b" not in cache
    assert cache.invalidate_tags(["t"]) == 0
