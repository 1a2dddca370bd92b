from __future__ import annotations

from datetime import datetime

from roster_browser.core.filter_state import ALL, FilterCriteria
from roster_browser.core.records import ReferenceCollection, References, normalise_student
from roster_browser.core.sorting import DESCENDING, SortDescriptor
from roster_browser.core.table_view import TableViewState, derive_view

NOW = datetime(2024, 6, 30)


def _make_records(n: int = 45):
    rows = []
    for i in range(n):
        rows.append({
            "id": i,
            "first_name": f"Student{i:02d}",
            "last_name": "Test",
            "status": "active" if i % 3 else "inactive",
            "branch_id": "b1" if i % 2 else "b2",
            "program_names": ["Piano"] if i % 2 else ["Chess"],
            "payment_status": "Paid" if i % 5 == 0 else "Unpaid",
        })
    return [normalise_student(r) for r in rows]


def _make_references():
    return References(
        branches=ReferenceCollection.from_rows("branches", [{"id": "b1", "name": "North"}, {"id": "b2", "name": "South"}]),
        programs=ReferenceCollection.from_rows("programs", [{"id": "p1", "name": "Piano"}, {"id": "p2", "name": "Chess"}]),
    )


def test_pages_cover_filtered_sorted_items():
    records = _make_records()
    state = TableViewState(criteria=FilterCriteria(status=ALL), page_size=20)

    view = derive_view(records, _make_references(), state, NOW)
    seen = []
    for page in range(1, view.total_pages + 1):
        seen.extend(derive_view(records, _make_references(), TableViewState(
            criteria=FilterCriteria(status=ALL), page=page, page_size=20), NOW).visible_ids)

    assert view.total_pages == 3
    assert seen == view.filtered_ids
    assert len(seen) == 45


def test_default_view_shows_active_students_by_name():
    view = derive_view(_make_records(), _make_references(), TableViewState(), NOW)

    assert all(r["status"] == "active" for r in view.filtered_items)
    names = [r["full_name"] for r in view.filtered_items]
    assert names == sorted(names)
    assert len(view.visible_items) == 20


def test_descending_sort_reverses_order():
    state = TableViewState(
        criteria=FilterCriteria(status=ALL),
        sort=SortDescriptor(column="name", direction=DESCENDING),
        page_size=5,
    )

    view = derive_view(_make_records(10), _make_references(), state, NOW)

    assert view.visible_ids == ["9", "8", "7", "6", "5"]


def test_stale_program_choice_behaves_as_all():
    # "Chess" is only taken in branch b2
    state = TableViewState(criteria=FilterCriteria(status=ALL, branch="b1", program="Chess"))

    view = derive_view(_make_records(), _make_references(), state, NOW)

    assert view.criteria.program == ALL
    assert view.program_options == ["Piano"]
    assert all(r["branch_id"] == "b1" for r in view.filtered_items)
    assert len(view.filtered_items) == 22


def test_search_narrows_view_and_facets_are_reported():
    state = TableViewState(criteria=FilterCriteria(status=ALL), search="student07")

    view = derive_view(_make_records(), _make_references(), state, NOW)

    assert view.filtered_ids == ["7"]
    assert view.facet_counts["status"][ALL] == 45
    assert view.facet_counts["status"]["inactive"] == 15
    assert view.facet_counts["branch"]["b1"] == 22
    assert view.branch_options[0] == {"id": ALL, "name": "All"}


def test_two_record_example_sorted_and_paged():
    records = [
        {"id": 1, "branch_id": "A", "status": "active"},
        {"id": 2, "branch_id": "B", "status": "inactive"},
    ]
    state = TableViewState(
        criteria=FilterCriteria(status=ALL),
        sort=SortDescriptor(column="id", direction=DESCENDING),
        page_size=1,
    )

    view = derive_view(records, References(), state, NOW)

    assert [r["id"] for r in view.visible_items] == [2]
    assert view.total_pages == 2
