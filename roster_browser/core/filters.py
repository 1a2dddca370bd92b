"""
Filter evaluator for the student table.

Everything here is pure: functions take a snapshot of records plus the
criteria and return a new list/bool/int. Input order is preserved.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from roster_browser.core.filter_state import ALL, FilterCriteria, window_days
from roster_browser.core.records import Record, References, parse_datetime, utc_now

SEARCH_FIELDS = ("first_name", "last_name", "full_name", "email", "phone")


def _lower(value: Any) -> str:
    return str(value if value is not None else "").lower()


def payment_bucket(value: Any) -> str:
    """Anything that is not explicitly "paid" is counted as unpaid."""
    return "paid" if _lower(value).strip() == "paid" else "unpaid"


# ---------------------------------------------------------------------------
# Axis predicates
# ---------------------------------------------------------------------------
def status_matches(record: Mapping[str, Any], status: str) -> bool:
    if status == ALL:
        return True
    value = record.get("status")
    return value is not None and _lower(value) == status.lower()


def branch_matches(record: Mapping[str, Any], branch: str) -> bool:
    if branch == ALL:
        return True
    value = record.get("branch_id")
    return value is not None and str(value) == str(branch)


def program_matches(record: Mapping[str, Any], program: str) -> bool:
    if program == ALL:
        return True
    names = record.get("program_names")
    if not isinstance(names, (list, tuple)):
        return False
    wanted = program.lower()
    return any(_lower(n) == wanted for n in names)


def payment_matches(record: Mapping[str, Any], payment_status: str) -> bool:
    if payment_status == ALL:
        return True
    return payment_bucket(record.get("payment_status")) == payment_status.lower()


def admission_matches(
        record: Mapping[str, Any],
        window: str,
        now: Optional[datetime] = None,
) -> bool:
    days = window_days(window)
    if days is None:
        return True
    admitted = parse_datetime(record.get("admission_date"))
    if admitted is None:
        return False
    cutoff = (now or utc_now()) - timedelta(days=days)
    return admitted >= cutoff


def matches(
        record: Mapping[str, Any],
        criteria: FilterCriteria,
        references: Optional[References] = None,
        now: Optional[datetime] = None,
) -> bool:
    """
    True when the record passes every axis of `criteria`.

    `references` is accepted for symmetry with the search predicate;
    the current axes only read fields already resolved on the record.
    """
    return (
        status_matches(record, criteria.status)
        and branch_matches(record, criteria.branch)
        and program_matches(record, criteria.program)
        and payment_matches(record, criteria.payment_status)
        and admission_matches(record, criteria.admission_window, now)
    )


# ---------------------------------------------------------------------------
# Free-text search
# ---------------------------------------------------------------------------
def _search_haystack(record: Mapping[str, Any], references: Optional[References]) -> List[str]:
    values = [_lower(record.get(f)) for f in SEARCH_FIELDS]
    values.extend(_lower(n) for n in record.get("program_names") or [])
    if references is not None:
        for program_id in record.get("programs") or []:
            values.append(_lower(references.programs.label(program_id)))
    return values


def matches_search(
        record: Mapping[str, Any],
        text: Optional[str],
        references: Optional[References] = None,
) -> bool:
    if not text:
        return True
    needle = text.lower()
    return any(needle in value for value in _search_haystack(record, references))


def filter_records(
        records: Iterable[Record],
        criteria: FilterCriteria,
        search: Optional[str] = "",
        references: Optional[References] = None,
        now: Optional[datetime] = None,
) -> List[Record]:
    now = now or utc_now()
    return [
        r for r in records
        if matches_search(r, search, references) and matches(r, criteria, references, now)
    ]


# ---------------------------------------------------------------------------
# Option lists and counts shown next to each filter choice
# ---------------------------------------------------------------------------
def branch_options(
        records: Sequence[Record],
        criteria: FilterCriteria,
        references: References,
) -> List[Dict[str, str]]:
    """
    Branch choices for the branch filter. With a concrete status only
    branches holding at least one student of that status are offered.
    """
    options = [{"id": ALL, "name": "All"}]
    if criteria.status == ALL:
        present = None
    else:
        present = {
            str(r["branch_id"]) for r in records
            if r.get("branch_id") and status_matches(r, criteria.status)
        }

    for branch_id in references.branches:
        if present is None or branch_id in present:
            options.append({"id": branch_id, "name": references.branches.label(branch_id)})
    return options


def program_options(
        records: Sequence[Record],
        criteria: FilterCriteria,
        references: References,
) -> List[str]:
    """
    Program names for the program filter. With status and branch both ALL
    this is the full program catalogue; otherwise only programs that
    students passing status + branch are enrolled in.
    """
    if criteria.status == ALL and criteria.branch == ALL:
        return references.programs.names()

    names: Dict[str, None] = {}
    for r in records:
        if not (status_matches(r, criteria.status) and branch_matches(r, criteria.branch)):
            continue
        for name in r.get("program_names") or []:
            name = str(name).strip()
            if name:
                names[name] = None
    return list(names)


def effective_criteria(criteria: FilterCriteria, programs: Sequence[str]) -> FilterCriteria:
    """A program no longer offered by the program filter behaves as ALL."""
    if criteria.program != ALL and criteria.program not in programs:
        return criteria.relaxed("program")
    return criteria


_FACET_SCOPE: Dict[str, Callable[[Mapping[str, Any], FilterCriteria], bool]] = {
    "status": lambda r, c: True,
    "admission_window": lambda r, c: True,
    "branch": lambda r, c: status_matches(r, c.status),
    "payment_status": lambda r, c: status_matches(r, c.status) and branch_matches(r, c.branch),
    "program": lambda r, c: status_matches(r, c.status) and branch_matches(r, c.branch),
}


def facet_count(
        records: Iterable[Record],
        criteria: FilterCriteria,
        axis: str,
        value: str,
        now: Optional[datetime] = None,
) -> int:
    """
    Number of students a single filter choice would show, respecting the
    axis hierarchy (status > branch > program/payment). Status and date
    counts ignore the other filters.
    """
    try:
        scope = _FACET_SCOPE[axis]
    except KeyError:
        raise KeyError(f"Unknown filter axis '{axis}'") from None

    predicates: Dict[str, Callable[[Mapping[str, Any]], bool]] = {
        "status": lambda r: status_matches(r, value),
        "branch": lambda r: branch_matches(r, value),
        "program": lambda r: program_matches(r, value),
        "payment_status": lambda r: payment_matches(r, value),
        "admission_window": lambda r: admission_matches(r, value, now),
    }
    predicate = predicates[axis]
    return sum(1 for r in records if scope(r, criteria) and predicate(r))
