from __future__ import annotations

from roster_browser.core.cache import QueryCache
from roster_browser.core.filter_state import ALL, FilterCriteria
from roster_browser.core.selection import SelectionTracker
from roster_browser.core.table_view import TableViewState
from roster_browser.services.bulk_actions import MARK_PAID
from roster_browser.services.data_source import STUDENTS_RPC, DataSourceAdapter
from roster_browser.services.rpc_client import RpcClient, RpcResponse
from roster_browser.services.table_service import StudentTableService


class _FakeBackend(RpcClient):
    def __init__(self):
        self.students = [
            {"id": 1, "first_name": "Ana", "status": "active", "branch_id": "b1", "payment_status": "Unpaid"},
            {"id": 2, "first_name": "Ben", "status": "inactive", "branch_id": "b1", "payment_status": "Unpaid"},
        ]
        self.fail = set()
        self.calls = []

    def call(self, function, params=None):
        self.calls.append(function)
        if function in self.fail:
            return RpcResponse(error=f"{function} failed")
        if function == STUDENTS_RPC:
            return RpcResponse(data=[dict(s) for s in self.students][params["p_offset"]:])
        if function == "get_all_branches":
            return RpcResponse(data=[{"id": "b1", "name": "North"}])
        if function == "get_all_programs":
            return RpcResponse(data=[{"id": "p1", "name": "Piano"}])
        if function == "update_payment_status_bulk":
            for s in self.students:
                if str(s["id"]) in params["student_ids"]:
                    s["payment_status"] = params["new_status"]
            return RpcResponse()
        return RpcResponse()


def _make_service():
    backend = _FakeBackend()
    service = StudentTableService(DataSourceAdapter(backend), cache=QueryCache())
    return service, backend


def test_load_uses_cache_until_stale_or_invalidated():
    service, backend = _make_service()

    first = service.load()
    service.load()

    assert first.error is None
    assert len(first.records) == 2
    assert first.references.branches.label("b1") == "North"
    assert backend.calls.count(STUDENTS_RPC) == 1

    service.refresh()
    service.load()
    assert backend.calls.count(STUDENTS_RPC) == 2


def test_load_error_keeps_previous_records():
    service, backend = _make_service()
    service.load()
    service.refresh()
    backend.fail.add(STUDENTS_RPC)

    loaded = service.load()

    assert len(loaded.records) == 2
    assert loaded.error == f"{STUDENTS_RPC} failed"


def test_view_applies_state():
    service, _ = _make_service()

    view, loaded = service.view(TableViewState())

    assert loaded.error is None
    assert view.filtered_ids == ["1"]


def test_view_reports_effective_criteria_and_snapshot():
    service, _ = _make_service()
    state = TableViewState(criteria=FilterCriteria(status=ALL, branch="b1", program="Piano"))

    view, loaded = service.view(state)

    # nobody in b1 takes Piano, so the program filter is not applied
    assert view.criteria.program == ALL
    assert state.criteria.program == "Piano"
    assert view.filtered_ids == ["1", "2"]
    assert len(loaded.records) == 2


def test_bulk_success_refreshes_records():
    service, _ = _make_service()
    view, _ = service.view(TableViewState(criteria=FilterCriteria(status=ALL)))
    tracker = SelectionTracker()
    tracker.select_all_visible()

    result = service.bulk(MARK_PAID, tracker, view.filtered_ids)
    reloaded = service.load()

    assert result.ok and result.affected == 2
    assert {r["payment_status"] for r in reloaded.records} == {"Paid"}


def test_bulk_errors_are_returned_not_raised():
    service, backend = _make_service()
    backend.fail.add("update_payment_status_bulk")
    tracker = SelectionTracker()
    tracker.toggle("1")

    failed = service.bulk(MARK_PAID, tracker, ["1", "2"])
    empty = service.bulk(MARK_PAID, SelectionTracker(), ["1", "2"])

    assert not failed.ok and "failed" in failed.error
    assert tracker.selected_ids(["1", "2"]) == ["1"]
    assert not empty.ok and empty.error.startswith("Nothing selected")


def test_delete_and_update_invalidate_on_success_only():
    service, backend = _make_service()
    service.load()

    assert service.find(1)["first_name"] == "Ana"
    assert service.delete(1).ok
    assert service.cache.state("students").is_invalidated

    service.load()
    backend.fail.add("update_student")
    result = service.update(service.find(2), {"phone": "1"})
    assert not result.ok
    assert not service.cache.state("students").is_invalidated
    assert service.find(99) is None
