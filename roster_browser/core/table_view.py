from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from roster_browser.core.filter_state import (
    ADMISSION_WINDOWS,
    ALL,
    PAYMENT_CHOICES,
    STATUS_CHOICES,
    FilterCriteria,
)
from roster_browser.core.filters import (
    branch_options,
    effective_criteria,
    facet_count,
    filter_records,
    program_options,
)
from roster_browser.core.pagination import paginate
from roster_browser.core.records import Record, References, record_ids, utc_now
from roster_browser.core.sorting import SortDescriptor, sort_records

COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("name", "Name"),
    ("gender", "Gender"),
    ("nationality", "Nationality"),
    ("date_of_birth", "Date of Birth"),
    ("phone", "Phone"),
    ("branch", "Branch"),
    ("program", "Program"),
    ("status", "Status"),
    ("payment_status", "Payment"),
    ("admission_date", "Admission Date"),
    ("insurance_number", "Insurance ID"),
    ("insurance_expiry", "Insurance Expiry"),
    ("created_at", "Created at"),
    ("updated_at", "Updated at"),
)

INITIAL_VISIBLE_COLUMNS: Tuple[str, ...] = (
    "name",
    "gender",
    "phone",
    "nationality",
    "date_of_birth",
    "status",
    "branch",
)


@dataclass(frozen=True)
class TableViewState:
    """Everything the user controls on the student table."""
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    search: str = ""
    sort: SortDescriptor = field(default_factory=SortDescriptor)
    page: int = 1
    page_size: int = 20
    visible_columns: Tuple[str, ...] = INITIAL_VISIBLE_COLUMNS


@dataclass(frozen=True)
class TableView:
    """Derived, read-only view of a records snapshot for one state."""
    filtered_items: List[Record]
    visible_items: List[Record]
    total_pages: int
    page: int
    criteria: FilterCriteria
    branch_options: List[Dict[str, str]]
    program_options: List[str]
    facet_counts: Dict[str, Dict[str, int]]

    @property
    def filtered_ids(self) -> List[str]:
        return record_ids(self.filtered_items)

    @property
    def visible_ids(self) -> List[str]:
        return record_ids(self.visible_items)


def facet_counts(
        records: Sequence[Record],
        criteria: FilterCriteria,
        branches: Sequence[Dict[str, str]],
        programs: Sequence[str],
        now: Optional[datetime] = None,
) -> Dict[str, Dict[str, int]]:
    choices = {
        "status": (ALL,) + STATUS_CHOICES,
        "branch": tuple(b["id"] for b in branches),
        "program": (ALL,) + tuple(programs),
        "payment_status": (ALL,) + PAYMENT_CHOICES,
        "admission_window": (ALL,) + ADMISSION_WINDOWS,
    }
    return {
        axis: {value: facet_count(records, criteria, axis, value, now) for value in values}
        for axis, values in choices.items()
    }


def derive_view(
        records: Sequence[Record],
        references: References,
        state: TableViewState,
        now: Optional[datetime] = None,
) -> TableView:
    """
    records -> filter (+search) -> sort -> paginate.

    Recomputed from scratch on every call; nothing here is cached.
    """
    now = now or utc_now()

    branches = branch_options(records, state.criteria, references)
    programs = program_options(records, state.criteria, references)
    criteria = effective_criteria(state.criteria, programs)

    filtered = filter_records(records, criteria, state.search, references, now)
    ordered = sort_records(filtered, state.sort)
    page = paginate(ordered, state.page, state.page_size)

    return TableView(
        filtered_items=ordered,
        visible_items=page.items,
        total_pages=page.total_pages,
        page=state.page,
        criteria=criteria,
        branch_options=branches,
        program_options=programs,
        facet_counts=facet_counts(records, state.criteria, branches, programs, now),
    )
