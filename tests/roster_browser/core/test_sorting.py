from __future__ import annotations

import locale
import logging

import pytest

from roster_browser.core.records import normalise_student
from roster_browser.core.sorting import (
    ASCENDING,
    DESCENDING,
    SortDescriptor,
    locale_compare,
    sort_records,
    use_system_collation,
)


def _ids(records):
    return [r["id"] for r in records]


def test_descending_numeric_sort():
    records = [{"id": "a", "x": 1}, {"id": "b", "x": 2}]

    out = sort_records(records, SortDescriptor(column="x", direction=DESCENDING))

    assert [r["x"] for r in out] == [2, 1]


def test_gender_sorts_on_display_label():
    records = [
        normalise_student({"id": 1, "gender": "other"}),
        normalise_student({"id": 2, "gender": "female"}),
        normalise_student({"id": 3, "gender": "male"}),
    ]

    out = sort_records(records, SortDescriptor(column="gender"))

    # Female < Male < Other by label, not by raw code
    assert _ids(out) == [2, 3, 1]


def test_name_sorts_case_insensitively_on_full_name():
    records = [
        normalise_student({"id": 1, "first_name": "bob", "last_name": "A"}),
        normalise_student({"id": 2, "first_name": "Alice", "last_name": "Z"}),
        normalise_student({"id": 3, "first_name": "alice", "last_name": "B"}),
    ]

    out = sort_records(records, SortDescriptor(column="name"))

    assert _ids(out) == [3, 2, 1]


def test_list_values_sort_on_joined_text():
    records = [
        {"id": 1, "program_names": ["Piano", "Art"]},
        {"id": 2, "program_names": ["Chess"]},
        {"id": 3, "program_names": []},
    ]

    out = sort_records(records, SortDescriptor(column="program"))

    assert _ids(out) == [3, 2, 1]


def test_missing_values_sort_as_empty_text():
    records = [{"id": 1, "phone": "5"}, {"id": 2}, {"id": 3, "phone": None}]

    out = sort_records(records, SortDescriptor(column="phone"))

    assert _ids(out) == [2, 3, 1]


def test_equal_keys_keep_input_order_and_reversal_mirrors():
    records = [
        {"id": 1, "status": "active"},
        {"id": 2, "status": "hold"},
        {"id": 3, "status": "active"},
        {"id": 4, "status": "inactive"},
    ]

    asc = sort_records(records, SortDescriptor(column="status", direction=ASCENDING))
    desc = sort_records(records, SortDescriptor(column="status", direction=DESCENDING))

    assert _ids(asc) == [1, 3, 2, 4]
    assert _ids(desc) == [4, 2, 1, 3]


def test_sort_does_not_mutate_input():
    records = [{"id": 2, "x": 2}, {"id": 1, "x": 1}]

    sort_records(records, SortDescriptor(column="x"))

    assert _ids(records) == [2, 1]


def test_sort_descriptor_roundtrip_and_validation():
    desc = SortDescriptor(column="gender", direction=DESCENDING)

    assert SortDescriptor.from_dict(desc.to_dict()) == desc
    assert desc.field == "gender_display"
    assert desc.toggled().direction == ASCENDING
    assert SortDescriptor.from_dict(None) == SortDescriptor()
    with pytest.raises(ValueError):
        SortDescriptor(direction="sideways")


def test_use_system_collation_adopts_host_locale(monkeypatch):
    calls = []

    def fake_setlocale(category, value=None):
        calls.append((category, value))
        return "km_KH.UTF-8"

    monkeypatch.setattr(locale, "setlocale", fake_setlocale)

    assert use_system_collation() == "km_KH.UTF-8"
    assert calls == [(locale.LC_COLLATE, "")]


def test_use_system_collation_keeps_c_order_when_host_locale_is_missing(monkeypatch, caplog):
    def fake_setlocale(category, value=None):
        if value == "":
            raise locale.Error("unsupported locale setting")
        return "C"

    monkeypatch.setattr(locale, "setlocale", fake_setlocale)

    with caplog.at_level(logging.WARNING, logger="roster_browser.core.sorting"):
        assert use_system_collation() == "C"

    assert "collation locale unavailable" in caplog.text


def test_locale_compare_goes_through_strxfrm(monkeypatch):
    # a collation that orders by reversed text
    monkeypatch.setattr(locale, "strxfrm", lambda s: s[::-1])

    assert locale_compare("ab", "ba") > 0
    assert locale_compare("Ab", "ab") < 0
    assert locale_compare("ab", "ab") == 0
