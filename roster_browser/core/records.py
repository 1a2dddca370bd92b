from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

import pandas as pd

Record = Dict[str, Any]

ID_FIELD = "id"

GENDER_LABELS = {
    "male": "Male",
    "female": "Female",
    "other": "Other",
}


def record_id(record: Mapping[str, Any]) -> str:
    """Stable string identifier used by selection and row ids."""
    return str(record[ID_FIELD])


def record_ids(records: Iterable[Mapping[str, Any]]) -> List[str]:
    return [record_id(r) for r in records]


def gender_label(code: Any) -> str:
    return GENDER_LABELS.get(str(code or "").lower(), "Unknown")


def normalise_student(row: Mapping[str, Any]) -> Record:
    """
    Return a copy of a raw student row with the display fields the table
    sorts and searches on:

    - full_name: "first last"
    - gender_display: human label for the gender code
    - program_names: always a list of strings
    """
    record: Record = dict(row)

    first = str(record.get("first_name") or "").strip()
    last = str(record.get("last_name") or "").strip()
    record["full_name"] = f"{first} {last}".strip()
    record["gender_display"] = gender_label(record.get("gender"))

    names = record.get("program_names")
    if names is None:
        record["program_names"] = []
    elif isinstance(names, str):
        record["program_names"] = [names]
    else:
        record["program_names"] = [str(n) for n in names if n is not None]

    return record


def utc_now() -> datetime:
    """Current time as naive UTC, the frame parse_datetime returns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse a record date field into a naive UTC datetime.

    Returns None for missing or unparsable values. Timezone-aware values
    are converted to UTC before the tz is dropped.
    """
    if value is None or value == "":
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts.to_pydatetime()


@dataclass(frozen=True)
class ReferenceCollection:
    """
    Small lookup table (branches, programs) keyed by opaque string id.

    Rows are kept as given by the backend; `label` resolves the display
    name used by filters and search.
    """
    kind: str
    rows: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_rows(cls, kind: str, rows: Iterable[Mapping[str, Any]]) -> ReferenceCollection:
        by_id: Dict[str, Mapping[str, Any]] = {}
        for row in rows or []:
            if row.get(ID_FIELD) is None:
                continue
            by_id[str(row[ID_FIELD])] = dict(row)
        return cls(kind=kind, rows=by_id)

    def label(self, ref_id: Any) -> str:
        row = self.rows.get(str(ref_id)) if ref_id is not None else None
        if row is None:
            return ""
        return str(row.get("name") or "")

    def ids(self) -> List[str]:
        return list(self.rows)

    def names(self) -> List[str]:
        """Distinct, stripped, non-empty names in backend order."""
        seen = dict.fromkeys(
            str(row.get("name") or "").strip() for row in self.rows.values()
        )
        return [n for n in seen if n]

    def __contains__(self, ref_id: object) -> bool:
        return str(ref_id) in self.rows

    def __iter__(self) -> Iterator[str]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class References:
    """The reference collections a student table resolves against."""
    branches: ReferenceCollection = field(
        default_factory=lambda: ReferenceCollection(kind="branches")
    )
    programs: ReferenceCollection = field(
        default_factory=lambda: ReferenceCollection(kind="programs")
    )
