from __future__ import annotations

import locale
import logging
from dataclasses import dataclass, asdict
from functools import cmp_to_key
from numbers import Number
from typing import Any, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

ASCENDING = "ascending"
DESCENDING = "descending"

# Table columns that sort on a derived display field instead of the raw one
SORT_ALIASES: Dict[str, str] = {
    "gender": "gender_display",
    "name": "full_name",
    "branch": "branch_name",
    "program": "program_names",
}


@dataclass(frozen=True)
class SortDescriptor:
    column: str = "name"
    direction: str = ASCENDING

    def __post_init__(self) -> None:
        if self.direction not in (ASCENDING, DESCENDING):
            raise ValueError(f"Invalid sort direction '{self.direction}'")

    @property
    def field(self) -> str:
        return SORT_ALIASES.get(self.column, self.column)

    def toggled(self) -> SortDescriptor:
        other = DESCENDING if self.direction == ASCENDING else ASCENDING
        return SortDescriptor(column=self.column, direction=other)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> SortDescriptor:
        data = data or {}
        return cls(
            column=str(data.get("column") or "name"),
            direction=str(data.get("direction") or ASCENDING),
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def use_system_collation() -> str:
    """
    Adopt the host LC_COLLATE so names sort the way users expect.

    Python starts in the C locale, where strxfrm is plain code-point order.
    If the host locale cannot be set that order is kept. Returns the active
    collation locale name.
    """
    try:
        name = locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("Host collation locale unavailable, using C ordering", extra={"error": str(e)})
        return locale.setlocale(locale.LC_COLLATE)
    logger.info("Using collation locale", extra={"locale": name})
    return name


def locale_compare(a: str, b: str) -> int:
    """
    Collate case-insensitively first, then on the raw text for ties.

    Uses the process LC_COLLATE; see use_system_collation.
    """
    primary = _cmp(locale.strxfrm(a.casefold()), locale.strxfrm(b.casefold()))
    if primary:
        return primary
    return _cmp(locale.strxfrm(a), locale.strxfrm(b))


def sort_value(record: Mapping[str, Any], descriptor: SortDescriptor) -> Any:
    value = record.get(descriptor.field)
    if isinstance(value, (list, tuple)):
        value = ", ".join(_as_text(v) for v in value)
    return value


def compare(a: Mapping[str, Any], b: Mapping[str, Any], descriptor: SortDescriptor) -> int:
    a_value = sort_value(a, descriptor)
    b_value = sort_value(b, descriptor)

    if _is_number(a_value) and _is_number(b_value):
        result = _cmp(a_value, b_value)
    elif isinstance(a_value, str) and isinstance(b_value, str):
        result = locale_compare(a_value, b_value)
    else:
        result = locale_compare(_as_text(a_value), _as_text(b_value))

    return -result if descriptor.direction == DESCENDING else result


def sort_records(records: Iterable[Mapping[str, Any]], descriptor: SortDescriptor) -> List[Any]:
    """Stable sort; records comparing equal keep their incoming order."""
    return sorted(records, key=cmp_to_key(lambda a, b: compare(a, b, descriptor)))
