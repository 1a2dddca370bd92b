from __future__ import annotations

import threading

from roster_browser.core.cache import QueryCache
from roster_browser.core.exceptions import FetchError


class _Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def _make_cache():
    clock = _Clock()
    return QueryCache(clock=clock), clock


def test_fresh_entry_is_not_refetched():
    cache, clock = _make_cache()
    calls = []

    def loader():
        calls.append(1)
        return [len(calls)]

    first = cache.fetch("students", loader, stale_after=60)
    clock.now = 30
    second = cache.fetch("students", loader, stale_after=60)

    assert first.data == [1]
    assert second.data == [1]
    assert len(calls) == 1

    clock.now = 61
    third = cache.fetch("students", loader, stale_after=60)
    assert third.data == [2]


def test_invalidate_forces_refetch():
    cache, _ = _make_cache()
    values = iter([["old"], ["new"]])

    cache.fetch("students", lambda: next(values), stale_after=60)
    cache.invalidate("students")

    assert cache.state("students").is_invalidated
    assert cache.fetch("students", lambda: next(values), stale_after=60).data == ["new"]


def test_failed_fetch_keeps_last_snapshot():
    cache, _ = _make_cache()
    cache.fetch("students", lambda: ["a", "b"])

    def broken():
        raise FetchError("network down")

    state = cache.fetch("students", broken)

    assert state.data == ["a", "b"]
    assert state.error == "network down"

    recovered = cache.fetch("students", lambda: ["c"])
    assert recovered.data == ["c"]
    assert recovered.error is None


def test_invalidation_during_load_marks_result_for_reload():
    cache, _ = _make_cache()
    values = iter([["older"], ["newer"]])

    def loader():
        value = next(values)
        if value == ["older"]:
            # a mutation lands while this load is running
            cache.invalidate("students")
        return value

    first = cache.fetch("students", loader, stale_after=60)

    assert first.data == ["older"]
    assert first.is_invalidated
    assert cache.fetch("students", loader, stale_after=60).data == ["newer"]


def test_concurrent_fetches_share_one_load():
    cache = QueryCache()
    started = threading.Event()
    release = threading.Event()
    calls = []
    results = {}

    def slow_loader():
        calls.append(1)
        started.set()
        assert release.wait(timeout=5)
        return ["a", "b"]

    def first():
        results["first"] = cache.fetch("students", slow_loader, stale_after=60)

    def second():
        results["second"] = cache.fetch("students", slow_loader, stale_after=60)

    t1 = threading.Thread(target=first)
    t1.start()
    assert started.wait(timeout=5)
    t2 = threading.Thread(target=second)
    t2.start()
    release.set()
    t1.join(timeout=5)
    t2.join(timeout=5)

    assert results["first"].data == ["a", "b"]
    assert results["second"].data == ["a", "b"]
    assert len(calls) == 1


def test_waiters_get_the_error_of_a_failed_load():
    cache = QueryCache()
    started = threading.Event()
    release = threading.Event()
    results = {}

    def failing_loader():
        started.set()
        assert release.wait(timeout=5)
        raise FetchError("backend down")

    def run(name):
        results[name] = cache.fetch("students", failing_loader)

    t1 = threading.Thread(target=run, args=("first",))
    t1.start()
    assert started.wait(timeout=5)
    t2 = threading.Thread(target=run, args=("second",))
    t2.start()
    release.set()
    t1.join(timeout=5)
    t2.join(timeout=5)

    assert results["first"].error == "backend down"
    assert results["second"].error == "backend down"


def test_invalidate_all_marks_every_key():
    cache, _ = _make_cache()
    cache.fetch("students", lambda: [1], stale_after=60)
    cache.fetch("branches", lambda: [2], stale_after=60)

    cache.invalidate_all()

    assert cache.state("students").is_invalidated
    assert cache.state("branches").is_invalidated
    assert cache.get("missing") is None
