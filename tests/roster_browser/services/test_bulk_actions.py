from __future__ import annotations

import pytest

from roster_browser.core.cache import QueryCache
from roster_browser.core.exceptions import BulkActionInFlightError, EmptySelectionError
from roster_browser.core.selection import SelectionTracker
from roster_browser.services.bulk_actions import (
    MARK_PAID,
    MARK_UNPAID,
    BulkActionDispatcher,
)
from roster_browser.services.rpc_client import RpcClient, RpcResponse


class _RecordingClient(RpcClient):
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def call(self, function, params=None):
        self.calls.append((function, params))
        return RpcResponse(error=self.error)


def _make_dispatcher(error=None):
    client = _RecordingClient(error=error)
    cache = QueryCache()
    cache.fetch("students", lambda: [{"id": 1}], stale_after=60)
    return BulkActionDispatcher(client, cache), client, cache


def test_mark_paid_sends_resolved_ids_once():
    dispatcher, client, cache = _make_dispatcher()
    tracker = SelectionTracker()
    tracker.toggle("2")
    tracker.toggle("9")  # filtered out, must not be sent

    result = dispatcher.apply(MARK_PAID, tracker, ["1", "2", "3"])

    assert result.ok
    assert result.affected == 1
    assert client.calls == [
        ("update_payment_status_bulk", {"student_ids": ["2"], "new_status": "Paid"}),
    ]
    assert tracker.is_empty
    assert cache.state("students").is_invalidated


def test_all_sentinel_sends_current_filtered_ids():
    dispatcher, client, _ = _make_dispatcher()
    tracker = SelectionTracker()
    tracker.select_all_visible()

    dispatcher.apply(MARK_UNPAID, tracker, ["4", "5"])

    assert client.calls[0][1] == {"student_ids": ["4", "5"], "new_status": "Unpaid"}


def test_failure_leaves_selection_and_cache_untouched():
    dispatcher, _, cache = _make_dispatcher(error="constraint violated")
    tracker = SelectionTracker()
    tracker.toggle("1")

    result = dispatcher.apply(MARK_PAID, tracker, ["1"])

    assert not result.ok
    assert result.affected == 0
    assert result.error == "constraint violated"
    assert tracker.selected_ids(["1"]) == ["1"]
    assert not cache.state("students").is_invalidated
    assert not dispatcher.is_in_flight(MARK_PAID)


def test_empty_selection_is_rejected_without_calling_backend():
    dispatcher, client, _ = _make_dispatcher()
    tracker = SelectionTracker()
    tracker.toggle("9")

    with pytest.raises(EmptySelectionError):
        dispatcher.apply(MARK_PAID, tracker, ["1", "2"])
    assert client.calls == []


def test_same_action_cannot_run_twice_concurrently():
    cache = QueryCache()
    nested = {}

    class _ReentrantClient(RpcClient):
        def call(self, function, params=None):
            tracker = SelectionTracker()
            tracker.toggle("1")
            with pytest.raises(BulkActionInFlightError):
                dispatcher.apply(MARK_PAID, tracker, ["1"])
            # a different action is allowed meanwhile
            nested["other"] = dispatcher.is_in_flight(MARK_UNPAID)
            return RpcResponse()

    dispatcher = BulkActionDispatcher(_ReentrantClient(), cache)
    tracker = SelectionTracker()
    tracker.toggle("1")

    assert dispatcher.apply(MARK_PAID, tracker, ["1"]).ok
    assert nested["other"] is False
